"""Messages API request and response dataclasses.

WHY: The extraction call speaks the Anthropic Messages wire format.
Typed dataclasses make the request body and the parts of the response
the pipeline relies on explicit, instead of passing raw dicts around.

HOW: MessageRequest knows how to serialize itself (to_dict). The
response side (ContentBlock, MessageResponse) parses leniently with
from_dict: unknown fields are ignored and missing optional fields
become None, so the client can decide what "no content" means.

RULES:
- Field names follow the wire format (max_tokens, stop_reason)
- Only the first content block's text is used by the pipeline
- from_dict never raises on missing optional fields
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Message:
    """One conversation turn in a request."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class MessageRequest:
    """Body of POST /v1/messages.

    RULES:
    - system carries the fixed extraction instruction
    - messages holds exactly one user turn with the transcript text
    """

    model: str
    max_tokens: int
    system: str
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": self.system,
            "messages": [m.to_dict() for m in self.messages],
        }


@dataclass
class ContentBlock:
    """A single block of the response ``content`` array."""

    type: str
    text: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentBlock:
        text = data.get("text")
        return cls(
            type=str(data.get("type", "")),
            text=text if isinstance(text, str) else None,
        )


@dataclass
class MessageResponse:
    """Successful response of POST /v1/messages.

    WHY: The client only needs the text of the first content block,
    but keeping stop_reason around makes truncated replies (max_tokens)
    diagnosable in logs.

    RULES:
    - content is empty when the field is absent or not a list
    - Non-dict entries in content are skipped
    """

    content: list[ContentBlock] = field(default_factory=list)
    stop_reason: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> MessageResponse:
        if not isinstance(data, dict):
            return cls()
        raw_content = data.get("content")
        blocks = []
        if isinstance(raw_content, list):
            blocks = [ContentBlock.from_dict(b) for b in raw_content if isinstance(b, dict)]
        stop_reason = data.get("stop_reason")
        return cls(
            content=blocks,
            stop_reason=stop_reason if isinstance(stop_reason, str) else None,
        )

    @property
    def first_text(self) -> str | None:
        """Text of the first content block, or None."""
        if not self.content:
            return None
        return self.content[0].text
