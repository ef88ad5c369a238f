"""
Completion Adapter Package

ARCHITECTURAL BOUNDARY:
=======================
This package is the ONLY interface between the service and the external
text-generation collaborator.

DIRECTION OF DEPENDENCY:
========================
culture_engine.api → adapter → provider (HTTP)

The core engine (culture_engine.core) never imports from this package.
"""

from .generator import ReportGenerator, GenerationResult, parse_sections
from .providers import (
    LLMProvider,
    ProviderVersion,
    ProviderResponse,
    ProviderErrorCode,
    InvocationParams,
    MockProvider,
    OpenAIChatProvider,
)

__all__ = [
    # Generator
    'ReportGenerator', 'GenerationResult', 'parse_sections',
    # Providers
    'LLMProvider', 'ProviderVersion', 'ProviderResponse', 'ProviderErrorCode',
    'InvocationParams', 'MockProvider', 'OpenAIChatProvider',
]
