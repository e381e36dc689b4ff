"""Export formatters for accumulated session categories.

WHY: A finished session is only useful once its lists reach somewhere
else (notes, a chat thread, another script). The CLI flag and the
export URL both name a format by key, so they share this one table.

HOW: FORMATTERS maps keys to formatter classes. Callers build an
instance per export: ``FORMATTERS["share_text"]().format(categories)``.

RULES:
- Keys appear verbatim in --format and /session/export/{format_key}
- Every class must be constructible with no arguments
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from listy.formatters.json_lists import JSONFormatter
from listy.formatters.markdown import MarkdownFormatter
from listy.formatters.share_text import ShareTextFormatter

if TYPE_CHECKING:
    from listy.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "markdown": MarkdownFormatter,
    "share_text": ShareTextFormatter,
    "json": JSONFormatter,
}
