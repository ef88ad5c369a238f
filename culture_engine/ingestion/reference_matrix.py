"""
Reference Matrix Ingestion

Builds a ReferenceMatrix from a CSV export or a JSON mapping.

PRINCIPLES:
===========
1. Parse with maximum tolerance: unknown or blank category rows are skipped
2. A missing key column is the only hard failure
3. Output is in canonical category order regardless of row order
"""

from __future__ import annotations
import csv
import io
import re
from typing import Any, Dict, List, Mapping

from ..contracts.base import InvalidInput
from ..contracts.reference import ReferenceEntry, ReferenceMatrix
from ..core.categories import CATEGORY_KEYS, resolve_key


KEY_COLUMNS = ("key", "style", "category")
LIST_COLUMNS = ("strengths", "risks", "behaviors")

_CELL_SPLIT = re.compile(r"[;\n]")


def parse_reference_csv(text: str) -> ReferenceMatrix:
    """
    Parse CSV text with a header row.

    The key column may be named key, style or category; its values may be
    canonical keys or display labels. List cells split on ';' or newlines.
    Repeated rows for one category extend its lists.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if reader.fieldnames is None:
        raise InvalidInput("Reference CSV is empty")

    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    key_column = next((columns[c] for c in KEY_COLUMNS if c in columns), None)
    if key_column is None:
        raise InvalidInput(
            "Reference CSV has no key column",
            detail=f"expected one of: {', '.join(KEY_COLUMNS)}",
        )

    collected: Dict[str, Dict[str, List[str]]] = {}
    for row in reader:
        key = resolve_key(row.get(key_column) or "")
        if key is None:
            continue
        lists = collected.setdefault(key, {name: [] for name in LIST_COLUMNS})
        for name in LIST_COLUMNS:
            source = columns.get(name)
            if source is not None:
                lists[name].extend(_split_cell(row.get(source)))

    return _to_matrix(collected)


def matrix_from_mapping(mapping: Mapping[str, Any]) -> ReferenceMatrix:
    """
    Build a matrix from {key: {strengths: [...], risks: [...], behaviors: [...]}}.

    String values are split like CSV cells. Non-mapping entries are skipped.
    """
    if not isinstance(mapping, Mapping):
        raise InvalidInput("referenceMatrix must be an object")

    collected: Dict[str, Dict[str, List[str]]] = {}
    for raw_key, raw_entry in mapping.items():
        key = resolve_key(str(raw_key))
        if key is None or not isinstance(raw_entry, Mapping):
            continue
        lists = collected.setdefault(key, {name: [] for name in LIST_COLUMNS})
        for name in LIST_COLUMNS:
            value = raw_entry.get(name)
            if isinstance(value, str):
                lists[name].extend(_split_cell(value))
            elif isinstance(value, (list, tuple)):
                lists[name].extend(str(v).strip() for v in value if v is not None and str(v).strip())

    return _to_matrix(collected)


def _split_cell(cell: Any) -> List[str]:
    if not cell:
        return []
    return [part.strip() for part in _CELL_SPLIT.split(str(cell)) if part.strip()]


def _to_matrix(collected: Dict[str, Dict[str, List[str]]]) -> ReferenceMatrix:
    entries: List[ReferenceEntry] = []
    for key in CATEGORY_KEYS:
        lists = collected.get(key)
        if lists is None:
            continue
        entries.append(ReferenceEntry(
            key=key,
            strengths=tuple(lists["strengths"]),
            risks=tuple(lists["risks"]),
            behaviors=tuple(lists["behaviors"]),
        ))
    return ReferenceMatrix(entries=tuple(entries))
