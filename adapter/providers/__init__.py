"""
LLM Providers Package
=====================

Provider implementations for completion calls.

Available providers:
- OpenAIChatProvider: OpenAI-compatible chat completions over httpx
- MockProvider: Deterministic mock for testing
"""

from .base import (
    LLMProvider,
    ProviderVersion,
    ProviderResponse,
    ProviderErrorCode,
    InvocationParams,
)
from .mock import MockProvider
from .openai import OpenAIChatProvider

__all__ = [
    'LLMProvider',
    'ProviderVersion',
    'ProviderResponse',
    'ProviderErrorCode',
    'InvocationParams',
    'MockProvider',
    'OpenAIChatProvider',
]
