"""
Mock LLM Provider
=================

Deterministic mock provider for testing and offline runs.

GUARANTEES:
- Same payload → identical response
- Explicit failure modes can be triggered
- No network access
"""

from __future__ import annotations
import hashlib
import json
from datetime import datetime, timezone
from typing import List, Optional

from culture_engine.contracts.snapshot import PromptPayload
from culture_engine.core.prompts import SECTION_OUTLINES

from .base import (
    LLMProvider,
    ProviderVersion,
    ProviderResponse,
    ProviderErrorCode,
    InvocationParams,
)


class MockProvider(LLMProvider):
    """
    Response is derived from hash(system + user) for reproducibility.
    Every call is recorded in `calls`.
    """

    def __init__(
        self,
        failure_mode: Optional[ProviderErrorCode] = None,
        content: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        """
        Args:
            failure_mode: If set, all invocations fail with this error
            content: If set, returned verbatim instead of generated text
            status_code: Upstream status reported with failures
        """
        self._failure_mode = failure_mode
        self._content = content
        self._status_code = status_code
        self.calls: List[PromptPayload] = []
        self._version = ProviderVersion(
            provider_id="mock",
            model_id="mock-deterministic-v1",
            api_version="1.0.0",
        )

    @property
    def provider_id(self) -> str:
        return "mock"

    def get_version(self) -> ProviderVersion:
        return self._version

    def complete(
        self,
        payload: PromptPayload,
        params: InvocationParams
    ) -> ProviderResponse:
        self.calls.append(payload)
        invoked_at = datetime.now(timezone.utc)

        if self._failure_mode is not None:
            return ProviderResponse(
                success=False,
                error_code=self._failure_mode,
                error_message=f"Mock provider configured to fail: {self._failure_mode.value}",
                status_code=self._status_code,
                provider_version=self._version,
                invoked_at=invoked_at,
            )

        content = self._content
        if content is None:
            content = self._generate_deterministic_response(payload)

        return ProviderResponse(
            success=True,
            content=content,
            provider_version=self._version,
            invoked_at=invoked_at,
        )

    def _generate_deterministic_response(self, payload: PromptPayload) -> str:
        digest = hashlib.sha256(
            f"{payload.system}|{payload.user}".encode()
        ).hexdigest()[:16]
        sections = SECTION_OUTLINES.get(payload.mode, ())

        if payload.output_format == "json":
            return json.dumps(
                {s.key: f"{s.title} ({digest})" for s in sections},
                sort_keys=True,
            )
        return "\n\n".join(f"## {s.title}\nmock-{digest}" for s in sections)
