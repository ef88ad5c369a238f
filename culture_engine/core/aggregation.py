"""
Snapshot Aggregation
====================

Pure fold of many Snapshots into one AggregateSummary.

INVARIANTS:
===========
- Every canonical category appears exactly once
- A category with no finite values averages to 0.0
- Averages stay finite for any finite inputs
- Averages use an exactly rounded sum, so input order does not change them
- Frequency ties keep first-seen order
"""

from __future__ import annotations
import math
from typing import Dict, Iterable, List, Sequence, Tuple

from ..contracts.snapshot import AggregateSummary, CategoryAverage, Snapshot
from .categories import CANONICAL_CATEGORIES


TOP_LABEL_COUNT = 3


def aggregate(snapshots: Sequence[Snapshot]) -> AggregateSummary:
    """
    Reduce snapshots to per-category averages and most frequent labels.

    Never raises for an empty sequence: sample_size is 0 and every
    average is 0.0. Keys outside the canonical list are ignored.
    """
    values: Dict[str, List[float]] = {c.key: [] for c in CANONICAL_CATEGORIES}

    for snapshot in snapshots:
        for entry in snapshot.scores:
            bucket = values.get(entry.key)
            if bucket is not None and math.isfinite(entry.value):
                bucket.append(entry.value)

    averages = [
        CategoryAverage(
            key=category.key,
            label=category.label,
            average=_mean(values[category.key]),
        )
        for category in CANONICAL_CATEGORIES
    ]
    # sorted() is stable: equal averages keep canonical order
    averages.sort(key=lambda entry: -entry.average)

    return AggregateSummary(
        sample_size=len(snapshots),
        category_averages=tuple(averages),
        top_observed_by_frequency=most_frequent(s.top_observed for s in snapshots),
        top_personal_by_frequency=most_frequent(s.top_personal for s in snapshots),
    )


def most_frequent(
    label_groups: Iterable[Sequence[str]],
    limit: int = TOP_LABEL_COUNT,
) -> Tuple[str, ...]:
    """Top `limit` labels by count; ties broken by first appearance."""
    counts: Dict[str, int] = {}
    for labels in label_groups:
        for label in labels:
            label = label.strip()
            if label:
                counts[label] = counts.get(label, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return tuple(label for label, _ in ranked[:limit])


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    # scale before summing: the total of finite values can exceed the float range
    count = len(values)
    return math.fsum(value / count for value in values)
