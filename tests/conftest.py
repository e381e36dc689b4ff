"""Shared test fixtures for the listy test suite.

WHY: The parser, client, scheduler, controller, and API tests all need
the same sample replies and a controllable stand-in for the extraction
service. Centralizing them here keeps every module on the same data.

HOW: Plain constants hold the sample transcript and replies. FakeExtractor
implements the Extractor protocol with scripted results and optional
gating (calls block until the test releases them). Helper factories
build Messages API response bodies and httpx.MockTransport instances.

RULES:
- The Pros/Cons sample matches the documented end-to-end scenario exactly
- FakeExtractor never touches the network
- Gated calls must be released before the test's event loop ends
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from listy.core.ir import Category


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

PROS_CONS_TRANSCRIPT = "Pros: fast, cheap. Cons: slow."

PROS_CONS_REPLY = json.dumps({
    "categories": [
        {"name": "Pros", "items": ["fast", "cheap"]},
        {"name": "Cons", "items": ["slow"]},
    ]
})

PROS_CONS_CATEGORIES = [
    Category("Pros", ("fast", "cheap")),
    Category("Cons", ("slow",)),
]


def message_body(text: Optional[str], stop_reason: str = "end_turn") -> Dict[str, Any]:
    """Build a Messages API response body whose first block carries text."""
    block: Dict[str, Any] = {"type": "text"}
    if text is not None:
        block["text"] = text
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [block],
        "stop_reason": stop_reason,
    }


def mock_transport(
    responder: Callable[[httpx.Request], httpx.Response],
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Wrap responder in a MockTransport, recording requests if a list is given."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return responder(request)

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Fake extractor
# ---------------------------------------------------------------------------

Result = Union[List[Category], Exception]


class FakeExtractor:
    """Scripted Extractor for scheduler/controller tests.

    Each call pops the next scripted result (an empty list when the script
    is exhausted). Exceptions in the script are raised. When gated, each
    call waits until release() is called.
    """

    def __init__(self, results: Optional[List[Result]] = None, gated: bool = False) -> None:
        self.calls: List[str] = []
        self.results: List[Result] = list(results or [])
        self.gated = gated
        self._gates: List[asyncio.Event] = []

    async def extract(self, text: str) -> List[Category]:
        self.calls.append(text)
        if self.gated:
            gate = asyncio.Event()
            self._gates.append(gate)
            await gate.wait()
        result = self.results.pop(0) if self.results else []
        if isinstance(result, Exception):
            raise result
        return list(result)

    @property
    def waiting(self) -> int:
        return sum(1 for g in self._gates if not g.is_set())

    def release(self) -> None:
        for gate in self._gates:
            gate.set()
        self._gates.clear()


@pytest.fixture
def pros_cons_transcript():
    """Transcript of the Pros/Cons scenario."""
    return PROS_CONS_TRANSCRIPT


@pytest.fixture
def pros_cons_reply():
    """The raw model reply for the Pros/Cons scenario."""
    return PROS_CONS_REPLY


@pytest.fixture
def pros_cons_categories():
    """Categories the Pros/Cons reply decodes to."""
    return list(PROS_CONS_CATEGORIES)


@pytest.fixture
def make_extractor():
    """Factory for FakeExtractor: make_extractor(results=[...], gated=True)."""
    return FakeExtractor


@pytest.fixture
def make_body():
    """Factory for Messages API response bodies."""
    return message_body


@pytest.fixture
def make_transport():
    """Factory for recording httpx.MockTransport instances."""
    return mock_transport
