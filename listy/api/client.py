"""Async HTTP client for the list-extraction call.

WHY: The scheduler needs one operation: "here is the transcript so far,
give me the lists in it". Everything about HTTP, authentication, the
system instruction, and classifying what went wrong lives here so the
scheduler only ever sees categories or a typed ExtractionError.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. ExtractionClient is
an async context manager; enter it to get an authenticated connection
pool, exit to close it. extract() builds one Messages API request,
sends it once, classifies the outcome, and hands the reply text to the
sanitizer/parser.

RULES:
- Always use the async context manager (async with ExtractionClient() as client:)
- Empty text returns [] without any network call
- Exactly one request per extract() call; retry cadence belongs to the scheduler
- Endpoint is validated before any I/O (InvalidEndpointError)
- httpx transport errors (including timeouts) → TransportFailureError
- Non-2xx → HTTPStatusError(status_code, raw body)
- 2xx without a usable first text block → NoContentError
- Parser failures propagate unchanged (MalformedPayloadError)
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from listy.api.models import Message, MessageRequest, MessageResponse
from listy.config import (
    ANTHROPIC_API_URL,
    ANTHROPIC_VERSION,
    LISTY_MAX_TOKENS,
    LISTY_MODEL,
    REQUEST_TIMEOUT_S,
    load_api_key,
)
from listy.core.ir import Category
from listy.core.parser import parse_categories
from listy.errors import (
    HTTPStatusError,
    InvalidEndpointError,
    NoContentError,
    TransportFailureError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a list extraction assistant. Analyze the following conversation segment and extract ONLY items that are part of lists (pros, cons, features, suggestions, action items, ideas, etc.).

Return a JSON object with this structure:
{
  "categories": [
    {
      "name": "Pros",
      "items": ["item 1", "item 2"]
    },
    {
      "name": "Suggestions",
      "items": ["item 1", "item 2"]
    }
  ]
}

Rules:
- Only extract clear list items (things enumerated, compared, or presented as options)
- Ignore small talk, narrative, and non-list content
- Auto-detect category names based on context
- If no lists found, return empty categories array
- Be concise - capture the essence of each item in 5-10 words max
"""


class Extractor(Protocol):
    """Anything the scheduler can ask for categories."""

    async def extract(self, text: str) -> list[Category]: ...


def _validate_endpoint(endpoint: str) -> httpx.URL:
    """Parse the endpoint, raising InvalidEndpointError if it is unusable."""
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpointError("Invalid API URL: {!r}".format(endpoint)) from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidEndpointError("Invalid API URL: {!r}".format(endpoint))
    return url


class ExtractionClient:
    """Async client for one-shot list extraction over the Messages API.

    WHY: An explicit client instance (instead of a process-wide singleton)
    is constructed once per session owner and passed to the scheduler, so
    tests can swap in a fake Extractor or an httpx.MockTransport.

    HOW: Wraps httpx.AsyncClient with the x-api-key / anthropic-version
    headers. The endpoint is a full URL and is validated on every call so
    a bad configuration fails that call only.

    RULES:
    - Use as: async with ExtractionClient() as client: ...
    - api_key defaults to load_api_key() (placeholder when unset)
    - endpoint, model, max_tokens, timeout default to config values
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = REQUEST_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._endpoint = endpoint if endpoint is not None else ANTHROPIC_API_URL
        self._model = model or LISTY_MODEL
        self._max_tokens = max_tokens or LISTY_MAX_TOKENS
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ExtractionClient:
        self._client = httpx.AsyncClient(
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "ExtractionClient must be used as an async context manager: "
                "async with ExtractionClient() as client: ..."
            )
        return self._client

    def build_request(self, text: str) -> MessageRequest:
        """Build the Messages API request for one transcript snapshot."""
        return MessageRequest(
            model=self._model,
            max_tokens=self._max_tokens,
            system=SYSTEM_PROMPT,
            messages=[Message(role="user", content=text)],
        )

    async def extract(self, text: str) -> list[Category]:
        """Extract list categories from a transcript snapshot.

        Args:
            text: The cumulative transcript to analyze.

        Returns:
            Categories in the order the service reported them.

        Raises:
            InvalidEndpointError: The configured endpoint is malformed.
            TransportFailureError: The service could not be reached.
            HTTPStatusError: The service answered with a non-2xx status.
            NoContentError: A 2xx answer had no usable text.
            MalformedPayloadError: The text could not be parsed.
        """
        if not text:
            return []

        client = self._ensure_client()
        url = _validate_endpoint(self._endpoint)
        body = self.build_request(text).to_dict()

        try:
            resp = await client.post(url, json=body)
        except httpx.TransportError as exc:
            raise TransportFailureError(
                "Could not reach extraction service: {}".format(str(exc) or type(exc).__name__)
            ) from exc

        if not resp.is_success:
            logger.warning("Extraction service returned HTTP %s", resp.status_code)
            raise HTTPStatusError(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except (ValueError, RecursionError) as exc:
            raise NoContentError("Response body is not valid JSON") from exc

        message = MessageResponse.from_dict(payload)
        reply = message.first_text
        if reply is None or not reply.strip():
            raise NoContentError("No content in API response")

        if message.stop_reason == "max_tokens":
            logger.info("Extraction reply was truncated at %d tokens", self._max_tokens)

        return parse_categories(reply)
