"""
API Request Schemas
===================

Pydantic models for request bodies.

`snapshot` is an untyped mapping; core.normalization coerces its contents.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PresentationOptions(BaseModel):
    referenceNotes: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    referenceMatrix: Optional[Dict[str, Any]] = None
    referenceCsv: Optional[str] = None
    format: str = "text"


class AnalyzeRequest(PresentationOptions):
    snapshot: Optional[Dict[str, Any]] = None


class RecordFilterBody(BaseModel):
    orgDomain: Optional[str] = None
    team: Optional[str] = None
    role: Optional[str] = None
    sinceDays: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, gt=0)


class AggregateRequest(PresentationOptions):
    filter: RecordFilterBody = Field(default_factory=RecordFilterBody)
