"""
Report Generator
================

Bridges a finished PromptPayload to an LLMProvider and shapes the result.

BOUNDARY ENFORCEMENT:
- Read-only input (frozen PromptPayload)
- Provider failures stay data (GenerationResult with error_code)
- JSON-mode output is parsed against the fixed section outline
"""

from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

from culture_engine.contracts.snapshot import PromptPayload
from culture_engine.core.prompts import SECTION_OUTLINES, section_keys

from .providers.base import (
    LLMProvider,
    ProviderErrorCode,
    ProviderResponse,
    InvocationParams,
)


logger = logging.getLogger(__name__)

HEALTH_CHECK_PAYLOAD = PromptPayload(
    system="Reply with OK.",
    user="Health check",
    mode="health",
)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one generation.

    INVARIANT: success=True implies error_code is None
    """
    success: bool
    text: str = ""
    sections: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    model: Optional[str] = None
    latency_ms: float = 0.0

    error_code: Optional[ProviderErrorCode] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None

    def sections_dict(self) -> Dict[str, str]:
        return dict(self.sections)


class ReportGenerator:
    """
    Provider-backed narrative generator.

    No retries, no fallbacks: one provider call per generate().
    """

    def __init__(self, provider: LLMProvider, timeout_seconds: float = 8.0):
        self._provider = provider
        self._params = InvocationParams(timeout_seconds=timeout_seconds)

    @property
    def model(self) -> str:
        return self._provider.get_version().model_id

    def generate(self, payload: PromptPayload) -> GenerationResult:
        response = self._provider.complete(payload, self._params)
        if not response.success:
            return self._failure(response)

        text = response.content or ""
        if payload.output_format != "json" or payload.mode not in SECTION_OUTLINES:
            return GenerationResult(
                success=True,
                text=text,
                model=self.model,
                latency_ms=response.latency_ms,
            )

        try:
            sections = parse_sections(text, section_keys(payload.mode))
        except ValueError as e:
            logger.warning("unparseable JSON report from %s: %s", self._provider.provider_id, e)
            return GenerationResult(
                success=False,
                text=text,
                model=self.model,
                latency_ms=response.latency_ms,
                error_code=ProviderErrorCode.INVALID_RESPONSE,
                error_message="Model returned invalid JSON",
                detail=str(e),
            )

        return GenerationResult(
            success=True,
            text=text,
            sections=sections,
            model=self.model,
            latency_ms=response.latency_ms,
        )

    def health_check(self) -> GenerationResult:
        """Minimal round trip: "Reply with OK."."""
        return self.generate(HEALTH_CHECK_PAYLOAD)

    def _failure(self, response: ProviderResponse) -> GenerationResult:
        return GenerationResult(
            success=False,
            model=self.model,
            latency_ms=response.latency_ms,
            error_code=response.error_code,
            error_message=response.error_message,
            status_code=response.status_code,
            detail=response.detail,
        )


def parse_sections(text: str, keys: Tuple[str, ...]) -> Tuple[Tuple[str, str], ...]:
    """
    Parse a JSON object into (key, text) pairs in outline order.

    Missing keys become empty strings; unknown keys are dropped.
    Raises ValueError when the text is not a JSON object.
    """
    stripped = text.strip()
    fenced = _FENCE.match(stripped)
    if fenced:
        stripped = fenced.group(1)

    try:
        data: Any = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ValueError("Response is not a JSON object")

    return tuple((key, _as_text(data.get(key))) for key in keys)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False)
