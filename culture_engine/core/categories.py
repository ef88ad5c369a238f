"""
Canonical Category List

The eight organizational-culture styles every aggregate reports on.
Order here is the tie-break order for sorted averages.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Category:
    key: str
    label: str
    description: str


CANONICAL_CATEGORIES: Tuple[Category, ...] = (
    Category("caring", "Caring", "relationships and mutual trust"),
    Category("purpose", "Purpose", "idealism and altruism"),
    Category("learning", "Learning", "exploration, expansiveness and creativity"),
    Category("enjoyment", "Enjoyment", "fun and excitement"),
    Category("results", "Results", "achievement and winning"),
    Category("authority", "Authority", "strength, decisiveness and boldness"),
    Category("safety", "Safety", "planning, caution and preparedness"),
    Category("order", "Order", "respect, structure and shared norms"),
)

CATEGORY_KEYS: Tuple[str, ...] = tuple(c.key for c in CANONICAL_CATEGORIES)

_BY_KEY: Dict[str, Category] = {c.key: c for c in CANONICAL_CATEGORIES}
_BY_LABEL: Dict[str, Category] = {c.label.lower(): c for c in CANONICAL_CATEGORIES}


def get_category(key: str) -> Optional[Category]:
    return _BY_KEY.get(key)


def resolve_key(name: str) -> Optional[str]:
    """Map a key or display label (any case) to its canonical key."""
    text = name.strip().lower()
    if text in _BY_KEY:
        return text
    category = _BY_LABEL.get(text)
    return category.key if category else None


def canonical_index(key: str) -> int:
    """Position in the canonical order; unknown keys sort last."""
    try:
        return CATEGORY_KEYS.index(key)
    except ValueError:
        return len(CATEGORY_KEYS)
