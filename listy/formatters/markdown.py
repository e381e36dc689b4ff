"""Markdown export of extracted lists.

WHY: Notes apps, issue trackers, and chat tools all render markdown,
so it is the default way to take a session's lists elsewhere.

HOW: One ``## Name`` heading per category followed by ``- item``
bullets, under a single ``# Extracted Lists`` title.

RULES:
- Title line: "# Extracted Lists", then a blank line
- Each category: "## <name>", blank line, one "- <item>" per item,
  blank line
- Categories and items keep session order
- Output suffix: "-lists.md"; media type: "text/markdown"
"""

from __future__ import annotations

from collections.abc import Sequence

from listy.core.ir import Category
from listy.formatters.base import BaseFormatter, FormatterOutput


class MarkdownFormatter(BaseFormatter):
    """Formatter that produces a markdown document of all categories."""

    @property
    def name(self) -> str:
        return "Markdown"

    def format(self, categories: Sequence[Category]) -> list[FormatterOutput]:
        lines = ["# Extracted Lists", ""]
        for category in categories:
            lines.append("## {}".format(category.name))
            lines.append("")
            lines.extend("- {}".format(item) for item in category.items)
            lines.append("")

        return [
            FormatterOutput(
                suffix="-lists.md",
                content="\n".join(lines) + "\n",
                media_type="text/markdown",
            )
        ]
