"""
Snapshot Contracts

Immutable data types for culture assessments.

BOUNDARY ENFORCEMENT:
=====================
- All types are frozen dataclasses
- Sequences are tuples, never lists
- Raw storage rows enter ONLY through AssessmentRecord.from_row
- Raw payloads become Snapshots ONLY through core.normalization.normalize
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple


# =============================================================================
# SCORES
# =============================================================================

@dataclass(frozen=True)
class ScoreEntry:
    """
    One measured value for one category.

    The value is any finite number. No fixed range is assumed.
    """
    key: str
    label: str
    value: float

    def as_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "label": self.label, "value": self.value}


@dataclass(frozen=True)
class Snapshot:
    """
    One respondent's structured assessment.

    INVARIANT: scores are unique by key (last write wins at normalization).
    """
    scores: Tuple[ScoreEntry, ...]
    top_observed: Tuple[str, ...] = field(default_factory=tuple)
    top_personal: Tuple[str, ...] = field(default_factory=tuple)

    def score_for(self, key: str) -> Optional[ScoreEntry]:
        for entry in self.scores:
            if entry.key == key:
                return entry
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "scores": [entry.as_dict() for entry in self.scores],
            "top3": {
                "observed": list(self.top_observed),
                "personal": list(self.top_personal),
            },
        }


# =============================================================================
# PERSISTED RECORDS (read contract, not an owned schema)
# =============================================================================

@dataclass(frozen=True)
class AssessmentRecord:
    """
    A persisted raw submission.

    Created by an external intake process. The engine only reads it.
    `payload` is kept raw; normalization decides what is usable.
    """
    payload: Mapping[str, Any]
    submitted_at: Optional[datetime] = None
    email: Optional[str] = None
    team: Optional[str] = None
    role: Optional[str] = None
    org_domain: Optional[str] = None

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> AssessmentRecord:
        """
        Map a storage row to a record.

        Accepts rows whose snapshot fields live at the top level or under
        a `snapshot` / `payload` column.
        """
        payload: Mapping[str, Any] = row
        for column in ("snapshot", "payload"):
            nested = row.get(column)
            if isinstance(nested, Mapping):
                payload = nested
                break

        return AssessmentRecord(
            payload=payload,
            submitted_at=_parse_timestamp(row.get("submitted_at") or row.get("created_at")),
            email=_optional_str(row.get("email")),
            team=_optional_str(row.get("team")),
            role=_optional_str(row.get("role")),
            org_domain=_optional_str(row.get("org_domain")),
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


# =============================================================================
# AGGREGATES
# =============================================================================

@dataclass(frozen=True)
class CategoryAverage:
    """Mean value for one canonical category. Always finite (0 when no data)."""
    key: str
    label: str
    average: float

    def as_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "label": self.label, "average": self.average}


@dataclass(frozen=True)
class AggregateSummary:
    """
    Derived summary over many snapshots. Recomputed per request, never persisted.

    INVARIANTS:
    - category_averages covers every canonical category exactly once
    - category_averages sorted by average descending, ties in canonical order
    - frequency lists hold at most 3 labels
    """
    sample_size: int
    category_averages: Tuple[CategoryAverage, ...]
    top_observed_by_frequency: Tuple[str, ...] = field(default_factory=tuple)
    top_personal_by_frequency: Tuple[str, ...] = field(default_factory=tuple)

    def average_for(self, key: str) -> Optional[float]:
        for entry in self.category_averages:
            if entry.key == key:
                return entry.average
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sampleSize": self.sample_size,
            "categoryAverages": [entry.as_dict() for entry in self.category_averages],
            "topObservedByFrequency": list(self.top_observed_by_frequency),
            "topPersonalByFrequency": list(self.top_personal_by_frequency),
        }


# =============================================================================
# PROMPT OUTPUT
# =============================================================================

@dataclass(frozen=True)
class PromptPayload:
    """
    Request payload for a text-generation collaborator.

    Owned by the caller that built it. Never cached across requests.
    """
    system: str
    user: str
    mode: str  # "single" | "aggregate"
    output_format: str = "text"  # "text" | "json"

    def messages(self) -> Tuple[Dict[str, str], ...]:
        """Chat-style message list."""
        return (
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "system": self.system,
            "user": self.user,
            "mode": self.mode,
            "format": self.output_format,
        }
