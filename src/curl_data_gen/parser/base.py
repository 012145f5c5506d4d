"""Unified data models for parsed requests and generated data.

The command parser, schema extractor, generators and replay layer all
exchange these models instead of raw dicts.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    """Semantic category used to pick a random-value generator."""

    AUTO = "auto"
    ID = "id"
    GUID = "guid"
    EMAIL = "email"
    NAME = "name"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    PHONE = "phone"
    ADDRESS = "address"
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"
    ZIP = "zip"
    DATE = "date"
    AGE = "age"
    GENDER = "gender"
    URL = "url"
    TEXT = "text"
    PRICE = "price"
    IMAGE = "image"
    COLOR = "color"
    BOOLEAN = "boolean"
    NUMBER = "number"
    COMPANY_NAME = "companyName"
    JOB_TITLE = "jobTitle"
    USERNAME = "username"
    PASSWORD = "password"
    CREDIT_CARD_NUMBER = "creditCardNumber"
    CREDIT_CARD_TYPE = "creditCardType"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


COARSE_TYPES = ("string", "number", "boolean", "null", "array", "object")


class Request(BaseModel):
    """One parsed transfer-tool invocation.

    When ``parse_error`` is set, ``url`` and ``body`` are not authoritative.
    """

    method: str = "GET"
    url: str = ""
    headers: dict[str, str] = {}
    body: Any = None
    parse_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.parse_error is None and bool(self.url)


class FieldMetadata(BaseModel):
    """A single leaf (or whole array) found in the request body."""

    path: str  # dot-separated, numeric segments are array indices
    coarse_type: str  # string / number / boolean / null / array / object
    original_value: Any = None

    @property
    def name(self) -> str:
        return self.path.rsplit(".", 1)[-1]


class FieldConfig(BaseModel):
    """Caller-supplied generation settings for one field path."""

    coarse_type: str = "string"
    is_static: bool = False
    static_value: str | None = None
    semantic_category: Category | None = None
    field_name: str = ""


class ReplayOutcome(BaseModel):
    """Result of replaying one generated entry against the endpoint."""

    model_config = ConfigDict(frozen=True)

    http_status: int
    matched_expected: bool
    response_body: Any = None
    error: str | None = None


class ReplayOptions(BaseModel):
    enabled: bool = False
    expected_status: int = 200


class BatchResult(BaseModel):
    entries: list[dict[str, Any]]
    outcomes: list[ReplayOutcome] | None = None
