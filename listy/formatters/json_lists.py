"""JSON export in the same shape the extraction service returns.

WHY: Tools that post-process a session (scripts, other pipelines) want
machine-readable output. Reusing the ``{"categories": [...]}`` shape
means the export can be fed straight back into parse_categories.

HOW: Serializes each Category via to_dict, validates the document
against CATEGORIES_SCHEMA with jsonschema, and pretty-prints it.

RULES:
- Output validated before returning (jsonschema.ValidationError on failure)
- Indent 2, ensure_ascii=False, trailing newline
- Output suffix: "-lists.json"; media type: "application/json"
"""

from __future__ import annotations

import json
from collections.abc import Sequence

import jsonschema

from listy.core.ir import Category
from listy.core.parser import CATEGORIES_SCHEMA
from listy.formatters.base import BaseFormatter, FormatterOutput


class JSONFormatter(BaseFormatter):
    """Formatter that emits the categories document as JSON."""

    @property
    def name(self) -> str:
        return "JSON"

    def format(self, categories: Sequence[Category]) -> list[FormatterOutput]:
        document = {"categories": [c.to_dict() for c in categories]}
        jsonschema.validate(instance=document, schema=CATEGORIES_SCHEMA)

        return [
            FormatterOutput(
                suffix="-lists.json",
                content=json.dumps(document, indent=2, ensure_ascii=False) + "\n",
                media_type="application/json",
            )
        ]
