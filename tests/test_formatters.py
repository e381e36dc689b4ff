"""Unit tests for all formatter modules.

WHY: Exports are the only thing that leaves a session. A formatting
slip shows up as a broken markdown list in someone's notes, a chat
message with the wrong icons, or a JSON file that no longer parses back.

HOW: Each formatter renders the Pros/Cons categories (plus a few edge
cases) and the output is compared against the literal expected text:
  - Markdown: headings and bullets, exact whitespace
  - Share text: fixed clock, emoji per category keyword
  - JSON: schema-valid and accepted again by parse_categories

RULES:
- Expected outputs are written out literally
- ShareTextFormatter always gets an injected clock
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from listy.core.ir import Category
from listy.core.parser import parse_categories
from listy.formatters import FORMATTERS
from listy.formatters.base import BaseFormatter
from listy.formatters.json_lists import JSONFormatter
from listy.formatters.markdown import MarkdownFormatter
from listy.formatters.share_text import ShareTextFormatter, category_emoji


def _fixed_clock():
    return datetime(2025, 3, 7, 14, 5)


# ---------------------------------------------------------------------------
# TestMarkdownFormatter
# ---------------------------------------------------------------------------


class TestMarkdownFormatter:
    """Markdown export."""

    def test_pros_cons(self, pros_cons_categories):
        outputs = MarkdownFormatter().format(pros_cons_categories)
        assert len(outputs) == 1
        assert outputs[0].suffix == "-lists.md"
        assert outputs[0].media_type == "text/markdown"
        assert outputs[0].content == (
            "# Extracted Lists\n"
            "\n"
            "## Pros\n"
            "\n"
            "- fast\n"
            "- cheap\n"
            "\n"
            "## Cons\n"
            "\n"
            "- slow\n"
            "\n"
        )

    def test_no_categories(self):
        assert MarkdownFormatter().format([])[0].content == "# Extracted Lists\n\n"

    def test_empty_category_keeps_heading(self):
        content = MarkdownFormatter().format([Category("Questions", ())])[0].content
        assert content == "# Extracted Lists\n\n## Questions\n\n\n"


# ---------------------------------------------------------------------------
# TestShareTextFormatter
# ---------------------------------------------------------------------------


class TestShareTextFormatter:
    """Share text export."""

    def test_pros_cons(self, pros_cons_categories):
        outputs = ShareTextFormatter(now=_fixed_clock).format(pros_cons_categories)
        assert outputs[0].suffix == "-share.txt"
        assert outputs[0].media_type == "text/plain"
        assert outputs[0].content == (
            "\U0001f4cb List-y Session - Mar 07, 2025 at 14:05\n"
            "\n"
            "✅ Pros:\n"
            "• fast\n"
            "• cheap\n"
            "\n"
            "❌ Cons:\n"
            "• slow\n"
            "\n"
            "---\n"
            "Captured with List-y"
        )

    def test_no_categories(self):
        content = ShareTextFormatter(now=_fixed_clock).format([])[0].content
        assert content == (
            "\U0001f4cb List-y Session - Mar 07, 2025 at 14:05\n"
            "\n"
            "---\n"
            "Captured with List-y"
        )

    @pytest.mark.parametrize("name,emoji", [
        ("Pros", "✅"),
        ("Benefits of option A", "✅"),
        ("cons", "❌"),
        ("Risks", "❌"),
        ("Action Items", "\U0001f4cc"),
        ("TODOs", "\U0001f4cc"),
        ("Ideas", "\U0001f4a1"),
        ("Feature requests", "⭐"),
        ("Open questions", "❓"),
        ("Shopping List", "\U0001f4dd"),
        ("Process steps", "\U0001f4dd"),
    ])
    def test_category_emoji(self, name, emoji):
        assert category_emoji(name) == emoji

    def test_emoji_matches_whole_words_only(self):
        # "Contacts" must not be read as "cons", nor "Products" as "pro"
        assert category_emoji("Contacts") == "\U0001f4dd"
        assert category_emoji("Products") == "\U0001f4dd"


# ---------------------------------------------------------------------------
# TestJSONFormatter
# ---------------------------------------------------------------------------


class TestJSONFormatter:
    """JSON export."""

    def test_document_shape(self, pros_cons_categories):
        output = JSONFormatter().format(pros_cons_categories)[0]
        assert output.suffix == "-lists.json"
        assert output.media_type == "application/json"
        assert output.content.endswith("\n")
        assert json.loads(output.content) == {
            "categories": [
                {"name": "Pros", "items": ["fast", "cheap"]},
                {"name": "Cons", "items": ["slow"]},
            ]
        }

    def test_output_parses_back(self, pros_cons_categories):
        content = JSONFormatter().format(pros_cons_categories)[0].content
        assert parse_categories(content) == pros_cons_categories

    def test_non_ascii_kept_readable(self):
        content = JSONFormatter().format([Category("Idéer", ("köpa mjölk",))])[0].content
        assert "köpa mjölk" in content


# ---------------------------------------------------------------------------
# TestRegistry
# ---------------------------------------------------------------------------


class TestRegistry:
    """FORMATTERS exposes every export format."""

    def test_keys(self):
        assert set(FORMATTERS) == {"markdown", "share_text", "json"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_constructible_without_arguments(self, key, pros_cons_categories):
        formatter = FORMATTERS[key]()
        assert isinstance(formatter, BaseFormatter)
        assert formatter.name
        outputs = formatter.format(pros_cons_categories)
        assert outputs and outputs[0].suffix.startswith("-")
