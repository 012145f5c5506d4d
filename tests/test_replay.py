import asyncio
import json

import httpx

from curl_data_gen.parser.base import Request
from curl_data_gen.replay import ReplayClient, build_replay_request


class TestBuildReplayRequest:
    def test_get_uses_query_string(self):
        req = Request(method="GET", url="https://api.test/users")
        method, url, headers, body = build_replay_request(req, {"id": 7, "name": "x"})
        assert method == "GET"
        assert url == "https://api.test/users?id=7&name=x"
        assert body is None

    def test_get_appends_to_existing_query(self):
        req = Request(method="GET", url="https://api.test/users?page=2")
        _, url, _, _ = build_replay_request(req, {"q": "a b"})
        assert url == "https://api.test/users?page=2&q=a+b"

    def test_query_value_encoding(self):
        req = Request(method="HEAD", url="https://api.test")
        _, url, _, _ = build_replay_request(req, {"a": True, "b": None, "c": [1]})
        assert url == "https://api.test?a=true&c=%5B1%5D"

    def test_post_sends_json(self):
        req = Request(method="POST", url="https://api.test/users", headers={"X-Token": "t"})
        method, url, headers, body = build_replay_request(req, {"id": 7})
        assert method == "POST"
        assert url == "https://api.test/users"
        assert headers == {"X-Token": "t", "Content-Type": "application/json"}
        assert json.loads(body) == {"id": 7}

    def test_existing_content_type_kept(self):
        req = Request(method="PUT", url="https://api.test", headers={"content-type": "application/vnd+json"})
        _, _, headers, _ = build_replay_request(req, {})
        assert headers == {"content-type": "application/vnd+json"}

    def test_request_headers_not_mutated(self):
        req = Request(method="POST", url="https://api.test")
        build_replay_request(req, {"a": 1})
        assert req.headers == {}


class TestReplayClient:
    def test_get_replay_has_no_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = ReplayClient(transport=httpx.MockTransport(handler))
        outcome = client.replay(Request(method="GET", url="https://api.test/users"), {"id": 7, "name": "x"})
        client.close()

        assert outcome.http_status == 200
        assert outcome.matched_expected is True
        assert outcome.response_body == {"ok": True}
        assert seen[0].url.params["id"] == "7"
        assert seen[0].url.params["name"] == "x"
        assert seen[0].content == b""

    def test_unexpected_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(422, text="invalid"))
        client = ReplayClient(transport=transport)
        outcome = client.replay(Request(method="POST", url="https://api.test"), {"a": 1}, expected_status=201)
        assert outcome.http_status == 422
        assert outcome.matched_expected is False
        assert outcome.response_body == "invalid"
        assert outcome.error is None

    def test_transport_error_becomes_outcome(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ReplayClient(transport=httpx.MockTransport(handler))
        outcome = client.replay(Request(method="POST", url="https://api.test"), {"a": 1})
        assert outcome.http_status == 0
        assert outcome.matched_expected is False
        assert outcome.error == "connection refused"

    def test_replay_many_keeps_entry_order(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            entry = json.loads(request.content)
            await asyncio.sleep(0.01 * (5 - entry["n"]))
            return httpx.Response(200 if entry["n"] % 2 == 0 else 500, json=entry)

        client = ReplayClient(transport=httpx.MockTransport(handler))
        entries = [{"n": n} for n in range(5)]
        outcomes = asyncio.run(client.replay_many(Request(method="POST", url="https://api.test"), entries, 200, 2))

        assert [o.response_body["n"] for o in outcomes] == [0, 1, 2, 3, 4]
        assert [o.matched_expected for o in outcomes] == [True, False, True, False, True]

    def test_replay_many_isolates_failures(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if json.loads(request.content)["n"] == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200)

        client = ReplayClient(transport=httpx.MockTransport(handler))
        entries = [{"n": n} for n in range(3)]
        outcomes = asyncio.run(client.replay_many(Request(method="POST", url="https://api.test"), entries))

        assert [o.http_status for o in outcomes] == [200, 0, 200]
        assert outcomes[1].error == "timed out"

    def test_non_ascii_header_becomes_outcome(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        client = ReplayClient(transport=transport)
        request = Request(method="POST", url="https://api.test", headers={"X-Name": "café"})

        outcome = client.replay(request, {"a": 1})
        assert outcome.http_status == 0
        assert outcome.matched_expected is False
        assert outcome.error

        outcomes = asyncio.run(client.replay_many(request, [{"a": 1}, {"a": 2}]))
        assert [o.http_status for o in outcomes] == [0, 0]
        assert all(o.error for o in outcomes)

    def test_unserializable_entry_becomes_outcome(self):
        client = ReplayClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        outcome = client.replay(Request(method="POST", url="https://api.test"), {"a": object()})
        assert outcome.http_status == 0
        assert outcome.error
