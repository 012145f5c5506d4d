"""Replay client: sends generated entries to the original endpoint via httpx.

Transport and request-building failures never raise out of
``replay``/``areplay``; they become a ReplayOutcome with status 0 and the
error message.
"""

import asyncio
import json
from typing import Any
from urllib.parse import urlencode

import httpx

from curl_data_gen.parser.base import ReplayOutcome, Request

QUERY_METHODS = ("GET", "HEAD")
# Errors turned into failed outcomes. ValueError and TypeError cover requests
# httpx or json refuse to build (non-ASCII header values, unencodable bodies).
REPLAY_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError)


def build_replay_request(request: Request, entry: dict[str, Any]) -> tuple[str, str, dict[str, str], str | None]:
    """Return (method, url, headers, body) for replaying ``entry``.

    GET/HEAD carry the entry's top-level fields as query parameters;
    other methods send it as a JSON body.
    """
    method = request.method.upper()
    url = request.url
    headers = dict(request.headers)

    if method in QUERY_METHODS:
        query = urlencode([(key, _query_value(value)) for key, value in entry.items() if value is not None])
        if query:
            url = f"{url}{'&' if '?' in url else '?'}{query}"
        return method, url, headers, None

    if not any(name.lower() == "content-type" for name in headers):
        headers["Content-Type"] = "application/json"
    return method, url, headers, json.dumps(entry)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _outcome(response: httpx.Response, expected_status: int) -> ReplayOutcome:
    return ReplayOutcome(
        http_status=response.status_code,
        matched_expected=response.status_code == expected_status,
        response_body=_response_body(response),
    )


def _failure(exc: Exception) -> ReplayOutcome:
    return ReplayOutcome(http_status=0, matched_expected=False, error=str(exc) or type(exc).__name__)


class ReplayClient:
    """Wrapper for replaying requests through httpx."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.Client | None = None

    def send(self, method: str, url: str, headers: dict[str, str], body: str | None = None) -> httpx.Response:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, transport=self.transport)
        return self._client.request(method, url, headers=headers, content=body)

    def replay(self, request: Request, entry: dict[str, Any], expected_status: int = 200) -> ReplayOutcome:
        try:
            response = self.send(*build_replay_request(request, entry))
        except REPLAY_ERRORS as exc:
            return _failure(exc)
        return _outcome(response, expected_status)

    async def areplay(
        self,
        client: httpx.AsyncClient,
        request: Request,
        entry: dict[str, Any],
        expected_status: int = 200,
    ) -> ReplayOutcome:
        try:
            method, url, headers, body = build_replay_request(request, entry)
            response = await client.request(method, url, headers=headers, content=body)
        except REPLAY_ERRORS as exc:
            return _failure(exc)
        return _outcome(response, expected_status)

    async def replay_many(
        self,
        request: Request,
        entries: list[dict[str, Any]],
        expected_status: int = 200,
        max_concurrency: int = 10,
    ) -> list[ReplayOutcome]:
        """Replay all entries concurrently, returning outcomes in entry order."""
        semaphore = asyncio.Semaphore(max(1, max_concurrency))

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:

            async def bounded(entry: dict[str, Any]) -> ReplayOutcome:
                async with semaphore:
                    return await self.areplay(client, request, entry, expected_status)

            return list(await asyncio.gather(*(bounded(entry) for entry in entries)))

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
