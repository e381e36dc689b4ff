"""Chat-friendly plain text export with emoji headers.

WHY: When a session is shared to a messaging app, markdown syntax shows
up as noise. This format uses emoji and bullets that read well as-is.

HOW: A dated header line, then one "<emoji> <name>:" block per
category with "• item" lines, then a short footer. The emoji is picked
from keywords in the category name.

RULES:
- Header: "📋 List-y Session - <timestamp>" then a blank line
- Category block: "<emoji> <name>:" then "• <item>" lines, blank line
- Footer: "---" then "Captured with List-y"
- Emoji lookup is case-insensitive, by whole word, first match over
  _EMOJI_RULES; unmatched names get 📝
- Timestamp format: "%b %d, %Y at %H:%M"; the clock is injectable
- Output suffix: "-share.txt"; media type: "text/plain"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from datetime import datetime

from listy.core.ir import Category
from listy.formatters.base import BaseFormatter, FormatterOutput

# Checked in order; the first rule sharing a word with the name wins.
_EMOJI_RULES: list[tuple[frozenset[str], str]] = [
    (frozenset({"pro", "pros", "advantage", "advantages", "benefit", "benefits", "upsides"}), "✅"),
    (frozenset({"con", "cons", "disadvantage", "disadvantages", "drawbacks", "downsides", "risks"}), "❌"),
    (frozenset({"action", "todo", "todos", "task", "tasks"}), "\U0001f4cc"),
    (frozenset({"idea", "ideas", "suggestion", "suggestions"}), "\U0001f4a1"),
    (frozenset({"feature", "features"}), "⭐"),
    (frozenset({"question", "questions"}), "❓"),
]
_DEFAULT_EMOJI = "\U0001f4dd"


def category_emoji(name: str) -> str:
    """Pick an emoji for a category name, e.g. "Action Items" → 📌."""
    words = set(re.findall(r"[a-z]+", name.lower()))
    for keywords, emoji in _EMOJI_RULES:
        if words & keywords:
            return emoji
    return _DEFAULT_EMOJI


class ShareTextFormatter(BaseFormatter):
    """Formatter for pasting a session into chat or email."""

    def __init__(self, now: Callable[[], datetime] = datetime.now) -> None:
        self._now = now

    @property
    def name(self) -> str:
        return "Share Text"

    def format(self, categories: Sequence[Category]) -> list[FormatterOutput]:
        timestamp = self._now().strftime("%b %d, %Y at %H:%M")
        lines = ["\U0001f4cb List-y Session - {}".format(timestamp), ""]

        for category in categories:
            lines.append("{} {}:".format(category_emoji(category.name), category.name))
            lines.extend("• {}".format(item) for item in category.items)
            lines.append("")

        lines.append("---")
        lines.append("Captured with List-y")

        return [
            FormatterOutput(
                suffix="-share.txt",
                content="\n".join(lines),
                media_type="text/plain",
            )
        ]
