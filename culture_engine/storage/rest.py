"""
Hosted REST Assessment Store

Reads assessment rows from a hosted PostgREST-style table.

GUARANTEES:
===========
1. One GET per fetch, no retries
2. HTTP and network failures raise StoreUnavailable with detail
3. Rows that are not objects are skipped
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import httpx

from ..contracts.base import StoreUnavailable
from ..contracts.snapshot import AssessmentRecord
from .store import AssessmentStore, RecordFilter


class RestAssessmentStore(AssessmentStore):
    """
    Store backed by `{base_url}/rest/v1/{table}`.

    Filters map to `eq.` / `gte.` operators; results are ordered by
    submitted_at descending and capped by the filter limit.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "assessments",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = table
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/rest/v1/{self._table}"

    def build_params(self, record_filter: RecordFilter) -> Dict[str, str]:
        params = {
            "select": "*",
            "order": "submitted_at.desc",
            "limit": str(record_filter.limit),
        }
        if record_filter.org_domain:
            params["org_domain"] = f"eq.{record_filter.org_domain}"
        if record_filter.team:
            params["team"] = f"eq.{record_filter.team}"
        if record_filter.role:
            params["role"] = f"eq.{record_filter.role}"
        cutoff = record_filter.cutoff()
        if cutoff is not None:
            params["submitted_at"] = f"gte.{cutoff.isoformat()}"
        return params

    def fetch_records(self, record_filter: RecordFilter) -> List[AssessmentRecord]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(
                    self.endpoint,
                    params=self.build_params(record_filter),
                    headers=headers,
                )
        except httpx.TimeoutException:
            raise StoreUnavailable("Assessment store timeout")
        except httpx.HTTPError as e:
            raise StoreUnavailable("Assessment store unreachable", detail=str(e))

        if response.status_code != 200:
            raise StoreUnavailable(
                "Assessment store error",
                detail=f"HTTP {response.status_code}: {response.text[:500]}",
            )

        try:
            rows: Any = response.json()
        except ValueError as e:
            raise StoreUnavailable("Assessment store returned invalid JSON", detail=str(e))

        if not isinstance(rows, list):
            raise StoreUnavailable("Assessment store returned a non-list body")

        return [AssessmentRecord.from_row(row) for row in rows if isinstance(row, dict)]
