"""
Assessment Store Interface

Read-only access to persisted AssessmentRecords.

BOUNDARY ENFORCEMENT:
=====================
- Stores return records; they never normalize or aggregate
- Stores never mutate or delete records
- An empty result is a valid return value, not an error
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..contracts.snapshot import AssessmentRecord


@dataclass(frozen=True)
class RecordFilter:
    """Which records to fold into an aggregate."""
    org_domain: Optional[str] = None
    team: Optional[str] = None
    role: Optional[str] = None
    since_days: Optional[int] = None
    limit: int = 500

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError("limit must be positive")
        if self.since_days is not None and self.since_days < 0:
            raise ValueError("since_days must not be negative")

    def cutoff(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Earliest submitted_at to include, or None for no recency bound."""
        if self.since_days is None:
            return None
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=self.since_days)


class AssessmentStore(ABC):
    """Source of persisted assessment records."""

    @abstractmethod
    def fetch_records(self, record_filter: RecordFilter) -> List[AssessmentRecord]:
        """
        Return matching records, newest first, at most record_filter.limit.

        Raises StoreUnavailable when the backing store cannot be read.
        """
        pass


class InMemoryAssessmentStore(AssessmentStore):
    """List-backed store for tests and local runs."""

    def __init__(self, records: Iterable[AssessmentRecord] = ()):
        self._records: List[AssessmentRecord] = list(records)

    def add(self, record: AssessmentRecord):
        self._records.append(record)

    def fetch_records(self, record_filter: RecordFilter) -> List[AssessmentRecord]:
        cutoff = record_filter.cutoff()
        matched = [
            r for r in self._records
            if _matches(r.org_domain, record_filter.org_domain)
            and _matches(r.team, record_filter.team)
            and _matches(r.role, record_filter.role)
            and (cutoff is None or (r.submitted_at is not None and _aware(r.submitted_at) >= cutoff))
        ]
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        matched.sort(
            key=lambda r: _aware(r.submitted_at) if r.submitted_at else oldest,
            reverse=True,
        )
        return matched[:record_filter.limit]


def _matches(value: Optional[str], wanted: Optional[str]) -> bool:
    if wanted is None:
        return True
    return value is not None and value.lower() == wanted.lower()


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
