"""
API Mapper
==========

Transforms request bodies into engine contracts, and engine results into
response bodies.
"""

from typing import Any, Dict, Optional

from ..contracts.base import InvalidInput
from ..contracts.reference import ReferenceMatrix
from ..contracts.snapshot import AggregateSummary, Snapshot
from ..core.normalization import normalize
from ..core.prompts import PromptConfig
from ..ingestion.reference_matrix import matrix_from_mapping, parse_reference_csv
from ..storage.store import RecordFilter
from .schemas import PresentationOptions, RecordFilterBody

from adapter.generator import GenerationResult


def snapshot_from_body(raw: Optional[Dict[str, Any]]) -> Snapshot:
    """Body `snapshot` -> Snapshot. Requires a list-valued `scores` field."""
    snapshot = normalize(raw) if raw is not None else None
    if snapshot is None:
        raise InvalidInput("Missing snapshot.scores (array required)")
    return snapshot


def prompt_config_from_body(body: PresentationOptions, default_brand: str) -> PromptConfig:
    brand = body.brand.strip() if body.brand and body.brand.strip() else default_brand
    return PromptConfig(
        brand_name=brand,
        reference_notes=tuple(body.referenceNotes),
        reference_matrix=_reference_matrix(body),
        output_format=body.format,
    )


def record_filter_from_body(body: RecordFilterBody, max_limit: int) -> RecordFilter:
    """Limit defaults to, and is capped at, the configured maximum."""
    limit = min(body.limit, max_limit) if body.limit else max_limit
    return RecordFilter(
        org_domain=body.orgDomain,
        team=body.team,
        role=body.role,
        since_days=body.sinceDays,
        limit=limit,
    )


def _reference_matrix(body: PresentationOptions) -> Optional[ReferenceMatrix]:
    # An explicit mapping wins over CSV text
    if body.referenceMatrix is not None:
        matrix = matrix_from_mapping(body.referenceMatrix)
    elif body.referenceCsv:
        matrix = parse_reference_csv(body.referenceCsv)
    else:
        return None
    return matrix if len(matrix) else None


def analysis_body(result: GenerationResult, summary: Optional[AggregateSummary] = None) -> Dict[str, Any]:
    """Successful generation -> response body."""
    body: Dict[str, Any] = {"text": result.text}
    if result.sections:
        body["sections"] = result.sections_dict()
    if summary is not None:
        body["summary"] = summary.as_dict()
    return body
