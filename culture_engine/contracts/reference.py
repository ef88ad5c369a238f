"""
Reference Matrix Contracts

Static lookup of descriptive guidance per culture category.
Used to ground generated narrative in a fixed framework.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ReferenceEntry:
    """Strengths, risks and leader behaviors for one category."""
    key: str
    strengths: Tuple[str, ...] = field(default_factory=tuple)
    risks: Tuple[str, ...] = field(default_factory=tuple)
    behaviors: Tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "risks": list(self.risks),
            "behaviors": list(self.behaviors),
        }


@dataclass(frozen=True)
class ReferenceMatrix:
    """
    Category key -> ReferenceEntry.

    Entries are held in canonical category order.
    """
    entries: Tuple[ReferenceEntry, ...]

    def get(self, key: str) -> Optional[ReferenceEntry]:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(entry.key for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def as_dict(self) -> Dict[str, Any]:
        return {entry.key: entry.as_dict() for entry in self.entries}
