"""Type classifier: maps a field path to a semantic category by name.

The rules are an ordered table; the first pattern that matches the last
path segment wins, so specific names sit above the generic ones they
overlap with (``first_name`` before ``name``).
"""

import re

from curl_data_gen.parser.base import Category
from curl_data_gen.parser.heuristics import QUANTITY_NAME_RE, leaf_name

NAME_RULES: list[tuple[re.Pattern, Category]] = [
    (re.compile(r"uuid|guid", re.I), Category.GUID),
    (re.compile(r"(?i:^id$|[_-]id$)|[a-z0-9]I[dD]$"), Category.ID),
    (re.compile(r"email|e-mail", re.I), Category.EMAIL),
    (re.compile(r"first[_-]?name", re.I), Category.FIRST_NAME),
    (re.compile(r"last[_-]?name|surname", re.I), Category.LAST_NAME),
    (re.compile(r"user[_-]?name|login", re.I), Category.USERNAME),
    (re.compile(r"company|business|organi[sz]ation", re.I), Category.COMPANY_NAME),
    (re.compile(r"name$", re.I), Category.NAME),
    (re.compile(r"phone|mobile|^cell|cell$", re.I), Category.PHONE),
    (re.compile(r"address", re.I), Category.ADDRESS),
    (re.compile(r"city", re.I), Category.CITY),
    (re.compile(r"state|province", re.I), Category.STATE),
    (re.compile(r"country", re.I), Category.COUNTRY),
    (re.compile(r"zip|postal", re.I), Category.ZIP),
    (re.compile(r"date|time", re.I), Category.DATE),
    (re.compile(r"^age$|^age[_A-Z]|[_-]age$|[a-z]Age$"), Category.AGE),
    (re.compile(r"gender|^sex$", re.I), Category.GENDER),
    (re.compile(r"image|picture|avatar|photo", re.I), Category.IMAGE),
    (re.compile(r"url|website|site", re.I), Category.URL),
    (re.compile(r"description|desc|summary|text|content", re.I), Category.TEXT),
    (re.compile(r"price|cost|amount", re.I), Category.PRICE),
    (re.compile(r"colou?r", re.I), Category.COLOR),
    (re.compile(r"(?i:bool|flag)|^is[A-Z_]"), Category.BOOLEAN),
    (re.compile(r"job|position|title", re.I), Category.JOB_TITLE),
    (re.compile(r"password|pwd|passwd|^pass$", re.I), Category.PASSWORD),
    (re.compile(r"credit|card", re.I), Category.CREDIT_CARD_NUMBER),
    (QUANTITY_NAME_RE, Category.NUMBER),
]

COARSE_FALLBACK = {
    "number": Category.NUMBER,
    "boolean": Category.BOOLEAN,
    "array": Category.ARRAY,
    "object": Category.OBJECT,
}


def classify(field_path: str, coarse_type: str) -> Category:
    """Return the semantic category for a field. Never raises."""
    name = leaf_name(field_path or "")
    for pattern, category in NAME_RULES:
        if pattern.search(name):
            return category
    return COARSE_FALLBACK.get(coarse_type, Category.STRING)
