"""curl command parser.

Parses a single curl invocation into a Request model. Parsing is
best-effort: unknown flags are skipped, and only a missing URL is
reported (through ``Request.parse_error``).
"""

import base64
import json
import re

from curl_data_gen.generator.random_source import RandomSource
from curl_data_gen.parser.base import Request
from curl_data_gen.parser.repair import repair_body

METHOD_FLAGS = ("-X", "--request")
HEADER_FLAGS = ("-H", "--header")
BEARER_FLAGS = ("-B", "--oauth2-bearer")
USER_FLAGS = ("-u", "--user")
DATA_FLAGS = ("-d", "--data", "--data-raw", "--data-binary")
REDIRECT_FLAGS = ("-L", "--location")
METHOD_OVERRIDE_HEADERS = ("X-HTTP-Method-Override", "X-Method-Override")

MISSING_URL = "URL not found in CURL command"

_CONTINUATION_RE = re.compile(r"\\\r?\n\s*")
_LEADING_CURL_RE = re.compile(r"^\s*curl\s+")


def parse_curl(text: str, source: RandomSource | None = None) -> Request:
    """Parse a curl command string into a Request."""
    tokens = tokenize(_strip_invocation(text))

    url = ""
    headers: dict[str, str] = {}
    explicit_method: str | None = None
    override_method: str | None = None
    data_parts: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        has_arg = i + 1 < len(tokens)

        if token.startswith("http") and not token.startswith("-"):
            url = token
        elif token in REDIRECT_FLAGS:
            pass
        elif token in METHOD_FLAGS and has_arg:
            i += 1
            explicit_method = tokens[i].upper()
        elif token in HEADER_FLAGS and has_arg:
            i += 1
            name, sep, value = tokens[i].partition(":")
            if sep and name.strip():
                headers[name.strip()] = value.strip()
                if name.strip() in METHOD_OVERRIDE_HEADERS and override_method is None:
                    override_method = value.strip().upper()
        elif token in BEARER_FLAGS and has_arg:
            i += 1
            headers["Authorization"] = f"Bearer {tokens[i]}"
        elif token in USER_FLAGS and has_arg:
            i += 1
            credentials = base64.b64encode(tokens[i].encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {credentials}"
        elif token in DATA_FLAGS and has_arg:
            i += 1
            data_parts.append(_strip_quotes(tokens[i]))
        i += 1

    method = explicit_method or ("POST" if data_parts else None) or override_method or "GET"
    body = _parse_body("&".join(data_parts), source) if data_parts else None

    if not url:
        return Request(method=method, url=url, headers=headers, body=body, parse_error=MISSING_URL)
    return Request(method=method, url=url, headers=headers, body=body)


def tokenize(command: str) -> list[str]:
    """Split on whitespace, honouring quotes and backslash escapes."""
    tokens: list[str] = []
    current = ""
    quote = ""
    quoted = False
    escape_next = False

    for char in command:
        if escape_next:
            if char != "\n":
                current += char
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char in "\"'" and (not quote or char == quote):
            quote = "" if quote else char
            quoted = True
            continue
        if char.isspace() and not quote:
            if current or quoted:
                tokens.append(current)
                current = ""
                quoted = False
            continue
        current += char

    if current or quoted:
        tokens.append(current)
    return tokens


def _strip_invocation(text: str) -> str:
    text = _CONTINUATION_RE.sub("", text.strip())
    return _LEADING_CURL_RE.sub("", text)


def _strip_quotes(data: str) -> str:
    if len(data) >= 2 and data[0] == data[-1] and data[0] in "\"'":
        return data[1:-1]
    return data


def _parse_body(data: str, source: RandomSource | None):
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError:
        return data
    return repair_body(parsed, source)
