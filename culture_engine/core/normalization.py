"""
Snapshot Normalization
======================

The single coercion boundary between duck-typed JSON and typed Snapshots.

GUARANTEES:
===========
1. normalize() never raises, for any input shape
2. Malformed fields contribute nothing; good fields still contribute
3. Duplicate score keys: last write wins
4. Returns None only when there is no list-valued `scores` field
5. Values outside the float range are absent, like non-finite ones
6. top3 entries are stringified and trimmed; null and blank entries are dropped
"""

from __future__ import annotations
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..contracts.snapshot import ScoreEntry, Snapshot


LABEL_FIELDS = ("style", "title", "label")
VALUE_FIELDS = ("current", "value")


def normalize(raw: Any) -> Optional[Snapshot]:
    """
    Extract a Snapshot from an arbitrary record.

    Rows without `scores` but with a nested `snapshot` mapping are
    normalized from the nested mapping.
    """
    if not isinstance(raw, Mapping):
        return None

    if "scores" not in raw and isinstance(raw.get("snapshot"), Mapping):
        raw = raw["snapshot"]

    raw_scores = raw.get("scores")
    if not isinstance(raw_scores, list):
        return None

    top3 = raw.get("top3")
    if not isinstance(top3, Mapping):
        top3 = {}

    return Snapshot(
        scores=_normalize_scores(raw_scores),
        top_observed=_normalize_labels(top3.get("observed", raw.get("topObserved"))),
        top_personal=_normalize_labels(top3.get("personal", raw.get("topPersonal"))),
    )


def normalize_many(raws: Iterable[Any]) -> Tuple[Snapshot, ...]:
    """Normalize a collection, dropping records with no usable scores field."""
    snapshots = []
    for raw in raws:
        snapshot = normalize(raw)
        if snapshot is not None:
            snapshots.append(snapshot)
    return tuple(snapshots)


def _normalize_scores(raw_scores: List[Any]) -> Tuple[ScoreEntry, ...]:
    # dict keeps first-insertion position while later writes replace the value
    entries: Dict[str, ScoreEntry] = {}
    for item in raw_scores:
        if not isinstance(item, Mapping):
            continue

        key = item.get("key")
        if not isinstance(key, str) or not key.strip():
            continue
        key = key.strip()

        value = _finite_value(item)
        if value is None:
            continue

        entries[key] = ScoreEntry(key=key, label=_label(item, key), value=value)
    return tuple(entries.values())


def _finite_value(item: Mapping[str, Any]) -> Optional[float]:
    for name in VALUE_FIELDS:
        if name not in item:
            continue
        value = item[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            value = float(value)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None
    return None


def _label(item: Mapping[str, Any], key: str) -> str:
    for name in LABEL_FIELDS:
        value = item.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return key


def _normalize_labels(raw: Any) -> Tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    labels = []
    for item in raw:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            labels.append(text)
    return tuple(labels)
