"""The Category record shared by the parser, merge engine, and formatters.

WHY: Every stage of the pipeline talks about the same thing: a named
list of short extracted items. A single frozen dataclass keeps that
contract explicit and lets accumulated state be shared with consumers
without anyone being able to mutate it in place.

HOW: Category is a frozen dataclass. Items are stored as a tuple so a
Category handed out in a snapshot can never be edited by the reader.
from_dict/to_dict convert to and from the wire shape
``{"name": str, "items": [str, ...]}``.

RULES:
- name is the identity of a category (exact, case-sensitive match)
- items keep first-observed order; uniqueness is the merge engine's job
- Instances are immutable; "changing" a category means building a new one
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Category:
    """A named, ordered list of extracted items, e.g. "Pros" → ("fast", "cheap")."""

    name: str
    items: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence (lists from JSON) but always store a tuple
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        """Build a Category from a decoded ``{"name", "items"}`` object."""
        return cls(name=data["name"], items=tuple(data["items"]))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "items": list(self.items)}
