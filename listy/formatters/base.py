"""Formatter interface and the rendered-output record.

WHY: Markdown, share text, and JSON exports all start from the same
ordered categories. A common interface lets the CLI and the export
endpoint treat them interchangeably.

HOW: BaseFormatter declares a ``name`` property and ``format()``.
FormatterOutput carries the rendered text plus the suffix and MIME type
the caller needs to save or serve it.

RULES:
- ``format()`` never mutates the categories it is given
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-lists.md"``; the caller
  picks the filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from listy.core.ir import Category


@dataclass
class FormatterOutput:
    """Rendered export.

    Attributes:
        suffix: Appended to a filename stem, e.g. ``"session" + "-lists.md"``.
        content: The rendered text.
        media_type: MIME type served for the content.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Base class for export formats; register subclasses in FORMATTERS."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name, e.g. 'Markdown'."""

    @abstractmethod
    def format(self, categories: Sequence[Category]) -> list[FormatterOutput]:
        """Render categories in session order.

        Returns:
            List of FormatterOutput objects.
        """
