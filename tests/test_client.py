"""Tests for the extraction client.

WHY: The client is where network reality meets the pipeline: bad URLs,
unreachable hosts, error statuses, empty replies, and fenced JSON. Each
of those must map to exactly one ExtractionError subclass, because the
scheduler only records and retries.

HOW: Every test runs the real ExtractionClient against an
httpx.MockTransport, so the request actually built by the client can
be inspected and the response fully controlled. Async code is driven by
asyncio.run() from plain test functions.

RULES:
- No test touches the network
- Request assertions read the body the client actually sent
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from listy.api.client import SYSTEM_PROMPT, ExtractionClient
from listy.config import ANTHROPIC_VERSION, PLACEHOLDER_API_KEY, load_api_key
from listy.core.ir import Category
from listy.errors import (
    HTTPStatusError,
    InvalidEndpointError,
    MalformedPayloadError,
    NoContentError,
    TransportFailureError,
)

ENDPOINT = "https://extraction.test/v1/messages"


def _extract(transport: httpx.MockTransport, text: str, **kwargs):
    """Run one extract() call through a client wired to transport."""

    async def _run():
        kwargs.setdefault("endpoint", ENDPOINT)
        async with ExtractionClient(api_key="test-key", transport=transport, **kwargs) as client:
            return await client.extract(text)

    return asyncio.run(_run())


# ---------------------------------------------------------------------------
# TestRequest
# ---------------------------------------------------------------------------


class TestRequest:
    """The client sends one well-formed Messages API request."""

    def test_request_body_and_headers(self, make_transport, make_body):
        requests = []
        transport = make_transport(
            lambda r: httpx.Response(200, json=make_body('{"categories": []}')),
            requests,
        )

        _extract(transport, "we should buy milk and eggs", model="test-model", max_tokens=256)

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["anthropic-version"] == ANTHROPIC_VERSION
        assert request.headers["content-type"] == "application/json"

        body = json.loads(request.content)
        assert body == {
            "model": "test-model",
            "max_tokens": 256,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": "we should buy milk and eggs"}],
        }

    def test_empty_text_makes_no_request(self, make_transport):
        requests = []
        transport = make_transport(lambda r: httpx.Response(500), requests)
        assert _extract(transport, "") == []
        assert requests == []

    def test_system_prompt_describes_task(self):
        assert '"categories"' in SYSTEM_PROMPT
        assert "5-10 words" in SYSTEM_PROMPT
        assert "empty categories array" in SYSTEM_PROMPT

    def test_requires_context_manager(self):
        client = ExtractionClient(api_key="k", endpoint=ENDPOINT)
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.extract("hello"))


# ---------------------------------------------------------------------------
# TestSuccess
# ---------------------------------------------------------------------------


class TestSuccess:
    """2xx replies are handed to the parser."""

    def test_bare_json_reply(self, make_transport, make_body, pros_cons_reply, pros_cons_categories):
        transport = make_transport(lambda r: httpx.Response(200, json=make_body(pros_cons_reply)))
        assert _extract(transport, "Pros: fast, cheap. Cons: slow.") == pros_cons_categories

    def test_fenced_reply(self, make_transport, make_body):
        reply = 'Here you go:\n```json\n{"categories":[{"name":"Ideas","items":["a"]}]}\n```'
        transport = make_transport(lambda r: httpx.Response(200, json=make_body(reply)))
        assert _extract(transport, "idea a") == [Category("Ideas", ("a",))]

    def test_any_2xx_is_success(self, make_transport, make_body):
        transport = make_transport(lambda r: httpx.Response(201, json=make_body('{"categories": []}')))
        assert _extract(transport, "text") == []

    def test_truncated_reply_still_parsed(self, make_transport, make_body):
        transport = make_transport(lambda r: httpx.Response(
            200, json=make_body('{"categories": []}', stop_reason="max_tokens"),
        ))
        assert _extract(transport, "text") == []


# ---------------------------------------------------------------------------
# TestFailures
# ---------------------------------------------------------------------------


class TestFailures:
    """Each failure class maps to its own exception."""

    def test_http_500(self, make_transport):
        transport = make_transport(lambda r: httpx.Response(500, text="server error"))
        with pytest.raises(HTTPStatusError) as excinfo:
            _extract(transport, "text")
        assert excinfo.value.status_code == 500
        assert excinfo.value.body == "server error"
        assert str(excinfo.value) == "HTTP 500: server error"

    def test_http_401_carries_raw_body(self, make_transport):
        body = '{"type":"error","error":{"type":"authentication_error"}}'
        transport = make_transport(lambda r: httpx.Response(401, text=body))
        with pytest.raises(HTTPStatusError) as excinfo:
            _extract(transport, "text")
        assert excinfo.value.status_code == 401
        assert excinfo.value.body == body

    def test_connect_error(self, make_transport):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportFailureError, match="connection refused"):
            _extract(make_transport(refuse), "text")

    def test_timeout_is_transport_failure(self, make_transport):
        def hang(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportFailureError):
            _extract(make_transport(hang), "text")

    def test_empty_content_array(self, make_transport):
        transport = make_transport(lambda r: httpx.Response(200, json={"content": []}))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_missing_content_field(self, make_transport):
        transport = make_transport(lambda r: httpx.Response(200, json={"stop_reason": "end_turn"}))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_first_block_without_text(self, make_transport, make_body):
        transport = make_transport(lambda r: httpx.Response(200, json=make_body(None)))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_blank_text(self, make_transport, make_body):
        transport = make_transport(lambda r: httpx.Response(200, json=make_body("  \n")))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_non_json_success_body(self, make_transport):
        transport = make_transport(lambda r: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_deeply_nested_success_body(self, make_transport):
        body = "[" * 100000 + "]" * 100000
        transport = make_transport(lambda r: httpx.Response(
            200, content=body.encode(), headers={"content-type": "application/json"},
        ))
        with pytest.raises(NoContentError):
            _extract(transport, "text")

    def test_deeply_nested_reply_text_is_malformed(self, make_transport, make_body):
        reply = "[" * 100000 + "]" * 100000
        transport = make_transport(lambda r: httpx.Response(200, json=make_body(reply)))
        with pytest.raises(MalformedPayloadError):
            _extract(transport, "text")

    def test_malformed_reply_propagates(self, make_transport, make_body):
        transport = make_transport(lambda r: httpx.Response(200, json=make_body("not json")))
        with pytest.raises(MalformedPayloadError):
            _extract(transport, "text")

    @pytest.mark.parametrize("endpoint", ["not a url", "ftp://extraction.test/v1", "https://", ""])
    def test_invalid_endpoint(self, make_transport, endpoint):
        requests = []
        transport = make_transport(lambda r: httpx.Response(200), requests)
        with pytest.raises(InvalidEndpointError):
            _extract(transport, "text", endpoint=endpoint)
        assert requests == []


# ---------------------------------------------------------------------------
# TestCredentials
# ---------------------------------------------------------------------------


class TestCredentials:
    """load_api_key() falls back to the placeholder when unset."""

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "  sk-test  ")
        assert load_api_key() == "sk-test"

    def test_missing_key_uses_placeholder(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert load_api_key() == PLACEHOLDER_API_KEY

    def test_missing_key_uses_caller_default(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        assert load_api_key(default="fallback") == "fallback"

    def test_client_sends_placeholder_when_unset(self, monkeypatch, make_transport):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        requests = []
        transport = make_transport(lambda r: httpx.Response(401, text="invalid x-api-key"), requests)

        async def _run():
            async with ExtractionClient(endpoint=ENDPOINT, transport=transport) as client:
                await client.extract("text")

        with pytest.raises(HTTPStatusError):
            asyncio.run(_run())
        assert requests[0].headers["x-api-key"] == PLACEHOLDER_API_KEY
