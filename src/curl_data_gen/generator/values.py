"""Value generator: produces one static or random value for a field."""

import json
from typing import Any, Callable

from curl_data_gen.generator.random_source import PASSWORD_POOL, RandomSource
from curl_data_gen.parser.base import Category, FieldConfig
from curl_data_gen.parser.heuristics import (
    CONTACT_LIST_NAME_RE,
    is_array_name,
    is_boolean_name,
    is_object_name,
    is_quantity_name,
    leaf_name,
    to_bool,
    to_number,
)
from curl_data_gen.parser.repair import relation_placeholder, record_id

NUMERIC_CATEGORIES = {Category.NUMBER, Category.PRICE, Category.AGE, Category.ID}
# Coarse types whose literal JSON kind outranks name-based guesses.
SHAPED_TYPES = ("number", "array", "object")


def coerce_static(value: str, category: Category | str, config: FieldConfig | None = None, name: str = "") -> Any:
    """Coerce a static string to the JSON type its field expects.

    Checks run in a fixed order: validateEmail, boolean, numeric, contact
    list, array, object, then the raw string. Fields whose original value was
    a number, array or object keep that JSON kind whatever their name or
    category suggests.
    """
    name = leaf_name(name or (config.field_name if config else ""))
    coarse = config.coarse_type if config else ""
    if coarse in SHAPED_TYPES:
        return _coerce_shaped(value, coarse, name)

    kinds = {_as_category(category)}
    if config and config.semantic_category is not None:
        kinds.add(config.semantic_category)

    if coarse == "null" and value == "null":
        return None
    if name == "validateEmail":
        return to_bool(value)
    if Category.BOOLEAN in kinds or coarse == "boolean" or is_boolean_name(name):
        return value.strip().lower() == "true"
    if kinds & NUMERIC_CATEGORIES or is_quantity_name(name):
        number = to_number(value)
        return value if number is None else number
    if name in ("additionalEmails", "additionalPhones") or CONTACT_LIST_NAME_RE.search(name):
        return _static_contact_list(value, name)
    if Category.ARRAY in kinds or is_array_name(name):
        return _static_array(value)
    if Category.OBJECT in kinds or is_object_name(name):
        return _static_object(value)
    return value


def _coerce_shaped(value: str, coarse: str, name: str) -> Any:
    if coarse == "number":
        number = to_number(value)
        return value if number is None else number
    if coarse == "array":
        if name in ("additionalEmails", "additionalPhones") or CONTACT_LIST_NAME_RE.search(name):
            return _static_contact_list(value, name)
        return _static_array(value)
    return _static_object(value)


def _as_category(category: Category | str) -> Category | None:
    try:
        return Category(category)
    except ValueError:
        return None


def _static_contact_list(value: str, name: str) -> list[Any]:
    text = value.strip()
    if not text or text == "[]":
        return []
    if text.startswith("[") and text.endswith("]"):
        try:
            items = json.loads(text)
        except json.JSONDecodeError:
            return [{}]
        if not isinstance(items, list):
            items = [items]
        if len(items) == 1 and items[0] in ("", None):
            return [{}]
    else:
        items = [item.strip() for item in value.split(",")]
    return [_contact_item(item, name) for item in items]


def _contact_item(item: Any, name: str) -> Any:
    if not isinstance(item, str):
        return item
    if not item.strip():
        return {}
    if item.startswith(("{", "[")):
        try:
            return json.loads(item)
        except json.JSONDecodeError:
            pass
    if name == "additionalEmails":
        return {"email": item, "isPrimary": False}
    if name == "additionalPhones":
        return {"number": item, "type": "mobile"}
    return {"value": item}


def _static_array(value: str) -> list[Any]:
    text = value.strip()
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            return [value]
        return parsed if isinstance(parsed, list) else [parsed]
    return [item.strip() for item in value.split(",")]


def _static_object(value: str) -> Any:
    text = value.strip()
    if text.startswith("{") and text.endswith("}"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return value
    return value


class ValueGenerator:
    """Generates field values from a semantic category and optional config."""

    def __init__(self, source: RandomSource | None = None):
        self.source = source or RandomSource()
        s = self.source
        self._builders: dict[Category, Callable[[], Any]] = {
            Category.ID: lambda: s.next_int(1000, 100000),
            Category.GUID: s.uuid,
            Category.NAME: s.full_name,
            Category.FIRST_NAME: s.first_name,
            Category.LAST_NAME: s.last_name,
            Category.EMAIL: s.email,
            Category.PHONE: s.phone,
            Category.ADDRESS: s.street,
            Category.CITY: s.city,
            Category.STATE: s.state,
            Category.COUNTRY: s.country,
            Category.ZIP: s.postcode,
            Category.DATE: s.timestamp,
            Category.AGE: lambda: s.next_int(18, 66),
            Category.GENDER: lambda: s.pick(["Male", "Female"]),
            Category.URL: s.url,
            Category.TEXT: s.paragraph,
            Category.PRICE: lambda: s.next_float(0, 10000, 2),
            Category.IMAGE: lambda: f"https://picsum.photos/id/{s.next_int(1, 1001)}/200/200",
            Category.COLOR: s.color,
            Category.BOOLEAN: s.boolean,
            Category.NUMBER: lambda: s.next_float(0, 1000, 2),
            Category.COMPANY_NAME: s.company,
            Category.JOB_TITLE: s.job,
            Category.USERNAME: s.username,
            Category.PASSWORD: lambda: s.string(12, pool=PASSWORD_POOL),
            Category.CREDIT_CARD_NUMBER: s.credit_card_number,
            Category.CREDIT_CARD_TYPE: s.credit_card_type,
            Category.STRING: lambda: s.string(10),
        }

    def generate(self, category: Category | str, config: FieldConfig | None = None, field_name: str = "") -> Any:
        """Return a static value (coerced) or a random one for ``category``."""
        name = leaf_name(field_name or (config.field_name if config else ""))

        if config and config.is_static and config.static_value is not None:
            return coerce_static(config.static_value, category, config, name)

        if name == "validateEmail":
            return self.source.boolean()

        if config and config.semantic_category not in (None, Category.AUTO):
            category = config.semantic_category
        return self.random_value(category, name)

    def random_value(self, category: Category | str, name: str = "") -> Any:
        category = _as_category(category)
        if category == Category.ARRAY:
            return self._random_array(name)
        if category == Category.OBJECT:
            return self._random_object(name)
        builder = self._builders.get(category)
        if builder is None:
            return self.source.word()
        return builder()

    def _random_array(self, name: str) -> list[Any]:
        s = self.source
        lower = name.lower()

        def some(make: Callable[[], Any], most: int = 3) -> list[Any]:
            return [make() for _ in range(s.next_int(1, most + 1))]

        if "additionalemail" in lower:
            return some(lambda: {"email": s.email(), "isPrimary": False})
        if "additionalphone" in lower:
            return some(lambda: {"number": s.phone(), "type": s.pick(["mobile", "home", "work"])})
        if lower == "relations":
            return some(lambda: relation_placeholder(s), most=2)
        if "email" in lower:
            return some(s.email)
        if "phone" in lower:
            return some(s.phone)
        if "address" in lower:
            return some(s.street)
        if "name" in lower:
            return some(s.full_name)
        if "id" in lower:
            return some(lambda: s.next_int(1000, 100000), most=5)
        return some(s.word)

    def _random_object(self, name: str) -> dict[str, Any]:
        s = self.source
        lower = name.lower()

        if "address" in lower:
            return {
                "street": s.street(),
                "city": s.city(),
                "state": s.state(),
                "zip": s.postcode(),
                "country": s.country(),
            }
        if "contact" in lower:
            return {"email": s.email(), "phone": s.phone()}
        if "user" in lower or "person" in lower:
            return {"id": s.next_int(1000, 10000), "name": s.full_name(), "email": s.email()}
        if lower == "properties":
            return {
                "title": s.sentence(3),
                "description": s.paragraph(1),
                "dueDate": s.timestamp(days_ahead=s.next_int(1, 15)),
                "completed": s.boolean(),
            }
        if lower == "config":
            return {"recurringTask": self._random_object("recurringTask")}
        if lower == "recurringtask":
            return {
                "title": s.sentence(3),
                "description": s.paragraph(1),
                "owners": [],
                "contactIds": [record_id(s)],
                "ignoreTaskCreation": s.boolean(),
                "rruleOptions": self._random_object("rruleOptions"),
            }
        if lower == "rruleoptions":
            return {
                "interval": s.next_int(1, 6),
                "intervalType": s.pick(["daily", "weekly", "monthly"]),
                "startDate": s.timestamp(days_ahead=0),
                "dueAfterSeconds": 3600 * s.next_int(1, 25),
                "count": None,
                "endDate": None,
            }
        return {"key": s.word(), "value": s.word()}
