from __future__ import annotations

import json
from collections import Counter
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


def canonical_key(item: Any) -> str:
    """Return a structural key for an array element.

    Mappings compare on their populated fields only (``None`` values are
    dropped) and key order never matters, so two metric entries that differ
    only in field order or in explicit nulls collapse to the same key.
    """
    return json.dumps(_populated(item), sort_keys=True, default=str)


def _populated(item: Any) -> Any:
    if isinstance(item, dict):
        return {str(k): _populated(v) for k, v in item.items() if v is not None}
    if isinstance(item, (list, tuple)):
        return [_populated(v) for v in item]
    return item


def duplicated_items(items: Sequence[Any]) -> list[Any]:
    """Return the items that occur more than once, in first-seen order."""
    counts = Counter(canonical_key(item) for item in items)
    seen: set[str] = set()
    duplicates: list[Any] = []
    for item in items:
        key = canonical_key(item)
        if counts[key] > 1 and key not in seen:
            seen.add(key)
            duplicates.append(item)
    return duplicates


def contains_duplicates(items: Sequence[Any]) -> bool:
    return len(duplicated_items(items)) > 0

