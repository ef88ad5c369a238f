"""
LLM Provider Abstraction Layer
==============================

Abstract interface for chat-completion providers (OpenAI-compatible, mock).

BOUNDARY ENFORCEMENT:
- Providers are stateless invocation handlers
- Providers receive a finished PromptPayload, never raw snapshots
- Failures are explicit, never silent
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from enum import Enum

from culture_engine.contracts.snapshot import PromptPayload


class ProviderErrorCode(Enum):
    """Explicit failure codes for completion calls."""
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    INVALID_RESPONSE = "invalid_response"
    API_ERROR = "api_error"
    NETWORK_ERROR = "network_error"
    NOT_CONFIGURED = "not_configured"


@dataclass(frozen=True)
class ProviderVersion:
    """Immutable provider identity."""
    provider_id: str       # "openai" | "mock"
    model_id: str          # "gpt-5"
    api_version: str


@dataclass(frozen=True)
class ProviderResponse:
    """
    Immutable response from a provider.

    INVARIANT: Either (success=True, content set) or (success=False, error_code set)
    """
    success: bool
    content: Optional[str] = None

    # Failure info (only set if success=False)
    error_code: Optional[ProviderErrorCode] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None

    # Invocation metadata (always set)
    provider_version: Optional[ProviderVersion] = None
    invoked_at: Optional[datetime] = None
    latency_ms: float = 0.0

    def __post_init__(self):
        if self.success and self.content is None:
            raise ValueError("Successful response must have content")
        if not self.success and self.error_code is None:
            raise ValueError("Failed response must have error_code")


@dataclass(frozen=True)
class InvocationParams:
    """
    Frozen invocation parameters.

    No sampling parameters: requests use the model's defaults.
    """
    timeout_seconds: float = 8.0


class LLMProvider(ABC):
    """
    Abstract completion provider.

    GUARANTEES:
    - Invocations are stateless
    - Failures are explicit ProviderResponse with error_code
    """

    @abstractmethod
    def complete(
        self,
        payload: PromptPayload,
        params: InvocationParams
    ) -> ProviderResponse:
        """
        Send the payload and return the generated text.

        MUST return ProviderResponse, never raise exceptions.
        """
        pass

    @abstractmethod
    def get_version(self) -> ProviderVersion:
        pass

    @property
    @abstractmethod
    def provider_id(self) -> str:
        pass
