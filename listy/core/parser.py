"""Recover structured categories from a loosely formatted model reply.

WHY: The extraction model is asked for bare JSON but frequently wraps
its answer in a markdown code fence (```json ... ```), sometimes with
prose around it. The pipeline needs the structured payload regardless,
and a clear failure when there is none.

HOW: Two steps:
  extract_payload:  find the first fenced block (json-tagged or plain)
                      and return its inner text; otherwise return the
                      whole reply trimmed of surrounding whitespace
  parse_categories: json-decode the payload, validate its shape with
                      jsonschema, and convert each entry to a Category

RULES:
- The first fence in document order wins; the capture is non-greedy
- A fenced block is always preferred over the raw-trim fallback
- Any decode or shape failure raises MalformedPayloadError
- Categories come back 1:1 in array order; items are NOT de-duplicated
  here (merge_categories owns that)
- Unknown extra keys in the payload are ignored
"""

from __future__ import annotations

import json
import re

import jsonschema

from listy.core.ir import Category
from listy.errors import MalformedPayloadError

# Group 1: ```json fenced content. Group 2: generic fence content.
_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)```|```([\s\S]*?)```")

CATEGORIES_SCHEMA: dict = {
    "type": "object",
    "required": ["categories"],
    "properties": {
        "categories": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "items"],
                "properties": {
                    "name": {"type": "string"},
                    "items": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}
"""JSON Schema of the ``{"categories": [{"name", "items"}]}`` payload."""


def extract_payload(raw_text: str) -> str:
    """Return the candidate JSON payload contained in a model reply.

    An empty ```json fence falls through to the generic group only when
    that group took part in the match; otherwise the trimmed reply is used.
    """
    match = _FENCE_RE.search(raw_text)
    if match:
        tagged = match.group(1)
        if tagged:
            return tagged
        generic = match.group(2)
        if generic is not None:
            return generic

    return raw_text.strip()


def parse_categories(raw_text: str) -> list[Category]:
    """Decode a (possibly fenced) reply into an ordered list of categories.

    Args:
        raw_text: The text block returned by the extraction service.

    Returns:
        Categories in the order the payload lists them.

    Raises:
        MalformedPayloadError: The payload is not JSON or does not match
            CATEGORIES_SCHEMA.
    """
    payload = extract_payload(raw_text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(
            "Could not parse JSON response: {}".format(exc.msg)
        ) from exc
    except RecursionError as exc:
        raise MalformedPayloadError("Could not parse JSON response: nested too deeply") from exc

    try:
        jsonschema.validate(instance=data, schema=CATEGORIES_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise MalformedPayloadError(
            "Unexpected response structure: {}".format(exc.message)
        ) from exc

    return [Category.from_dict(entry) for entry in data["categories"]]
