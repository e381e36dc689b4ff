"""Fold newly extracted categories into the accumulated session state.

WHY: Every extraction re-reads the whole transcript so far, which means
the model reports the same lists again and again, usually with a few
new items. The session must grow monotonically: no duplicates, no lost
items, no reordering.

HOW: merge_categories is a pure function. It copies the accumulated
categories into an insertion-ordered dict of name → item list, then
walks the incoming categories in order, appending only unseen items.
New names are appended at the end.

RULES:
- Category names match exactly (case-sensitive)
- Existing items never move and are never removed
- Newly appended items keep their incoming relative order
- Duplicates inside a single incoming category are collapsed too
- merge(merge(A, I), I) == merge(A, I)
- Neither input is mutated; a new list of new Category objects is returned
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from listy.core.ir import Category


def _append_unique(items: list[str], new_items: Iterable[str]) -> None:
    """Append each item of new_items not already in items, in order."""
    seen = set(items)
    for item in new_items:
        if item not in seen:
            seen.add(item)
            items.append(item)


def merge_categories(
    accumulated: Sequence[Category],
    incoming: Iterable[Category],
) -> list[Category]:
    """Return accumulated with incoming folded in.

    Args:
        accumulated: The session's current categories (unique by name).
        incoming: Categories from one extraction, in reply order.

    Returns:
        A new list; categories present in accumulated keep their position.
    """
    merged: dict[str, list[str]] = {}
    for category in accumulated:
        _append_unique(merged.setdefault(category.name, []), category.items)

    for category in incoming:
        _append_unique(merged.setdefault(category.name, []), category.items)

    return [Category(name=name, items=tuple(items)) for name, items in merged.items()]
