"""
OpenAI Chat Completions Provider
================================

Sends a PromptPayload to `{base_url}/chat/completions` over httpx.

GUARANTEES:
- Only `model` and `messages` are sent (plus response_format in JSON mode)
- Hard timeout per call, no retries
- Every failure maps to a ProviderErrorCode
"""

from __future__ import annotations
from datetime import datetime, timezone
import logging
import time
from typing import Any, Dict, Optional

import httpx

from culture_engine.contracts.snapshot import PromptPayload

from .base import (
    LLMProvider,
    ProviderVersion,
    ProviderResponse,
    ProviderErrorCode,
    InvocationParams,
)


logger = logging.getLogger(__name__)

DETAIL_LIMIT = 2000


class OpenAIChatProvider(LLMProvider):
    """Chat-completions client for OpenAI-compatible APIs."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-5",
        base_url: str = "https://api.openai.com/v1",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            api_key: Bearer token for the API
            model: Model identifier sent with every request
            base_url: API root, without the trailing endpoint
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._version = ProviderVersion(
            provider_id="openai",
            model_id=model,
            api_version="v1",
        )

    @property
    def provider_id(self) -> str:
        return "openai"

    def get_version(self) -> ProviderVersion:
        return self._version

    def request_body(self, payload: PromptPayload) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self._model,
            "messages": list(payload.messages()),
        }
        if payload.output_format == "json":
            body["response_format"] = {"type": "json_object"}
        return body

    def complete(
        self,
        payload: PromptPayload,
        params: InvocationParams
    ) -> ProviderResponse:
        invoked_at = datetime.now(timezone.utc)
        start_time = time.time()

        if not self._api_key:
            return self._failure(
                ProviderErrorCode.NOT_CONFIGURED, "Missing OPENAI_API_KEY",
                invoked_at, start_time,
            )

        try:
            with httpx.Client(timeout=params.timeout_seconds, transport=self._transport) as client:
                response = client.post(
                    f"{self._base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=self.request_body(payload),
                )
        except httpx.TimeoutException:
            return self._failure(
                ProviderErrorCode.TIMEOUT, "Upstream timeout", invoked_at, start_time,
            )
        except httpx.HTTPError as e:
            return self._failure(
                ProviderErrorCode.NETWORK_ERROR, f"Upstream fetch failed: {e}",
                invoked_at, start_time,
            )

        latency_ms = (time.time() - start_time) * 1000
        logger.info(
            "chat completion model=%s status=%s latency_ms=%.0f",
            self._model, response.status_code, latency_ms,
        )

        if response.status_code == 429:
            return self._failure(
                ProviderErrorCode.RATE_LIMITED, "OpenAI rate limit", invoked_at, start_time,
                status_code=429, detail=response.text[:DETAIL_LIMIT],
            )
        if response.status_code >= 400:
            return self._failure(
                ProviderErrorCode.API_ERROR, "OpenAI error", invoked_at, start_time,
                status_code=response.status_code, detail=response.text[:DETAIL_LIMIT],
            )

        try:
            data = response.json()
        except ValueError:
            return self._failure(
                ProviderErrorCode.INVALID_RESPONSE, "OpenAI returned invalid JSON",
                invoked_at, start_time, detail=response.text[:DETAIL_LIMIT],
            )

        return ProviderResponse(
            success=True,
            content=extract_text(data),
            provider_version=self._version,
            invoked_at=invoked_at,
            latency_ms=latency_ms,
        )

    def _failure(
        self,
        code: ProviderErrorCode,
        message: str,
        invoked_at: datetime,
        start_time: float,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> ProviderResponse:
        logger.warning("chat completion failed: %s (%s)", message, code.value)
        return ProviderResponse(
            success=False,
            error_code=code,
            error_message=message,
            status_code=status_code,
            detail=detail,
            provider_version=self._version,
            invoked_at=invoked_at,
            latency_ms=(time.time() - start_time) * 1000,
        )


def extract_text(data: Any) -> str:
    """choices[0].message.content, or "" when absent."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""
