"""
Service Configuration

Built once at process start and passed by reference into the API layer.
The core engine takes no configuration beyond PromptConfig.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os
from typing import Mapping, Optional, Tuple

from .core.prompts import DEFAULT_BRAND


DEFAULT_MODEL = "gpt-5"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 8.0


@dataclass(frozen=True)
class ServiceConfig:
    """Process-wide settings for the HTTP service."""
    openai_api_key: str = ""
    openai_model: str = DEFAULT_MODEL
    openai_base_url: str = DEFAULT_BASE_URL
    openai_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    default_brand: str = DEFAULT_BRAND
    allowed_origins: Tuple[str, ...] = ("*",)
    allowed_roles: Tuple[str, ...] = field(default_factory=tuple)

    # Hosted store / auth provider
    store_url: str = ""
    store_key: str = ""
    records_table: str = "assessments"
    record_limit: int = 500

    def __post_init__(self):
        if self.openai_timeout_seconds <= 0:
            raise ValueError("openai_timeout_seconds must be positive")
        if self.record_limit <= 0:
            raise ValueError("record_limit must be positive")

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_store(self) -> bool:
        return bool(self.store_url and self.store_key)

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> ServiceConfig:
        """Read configuration from the process environment (or a given mapping)."""
        env = os.environ if environ is None else environ
        return ServiceConfig(
            openai_api_key=env.get("OPENAI_API_KEY", ""),
            openai_model=env.get("OPENAI_MODEL") or DEFAULT_MODEL,
            openai_base_url=env.get("OPENAI_BASE_URL") or DEFAULT_BASE_URL,
            openai_timeout_seconds=float(
                env.get("OPENAI_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS
            ),
            default_brand=env.get("CULTURE_BRAND_NAME") or DEFAULT_BRAND,
            allowed_origins=_split_list(env.get("CULTURE_ALLOWED_ORIGINS")) or ("*",),
            allowed_roles=_split_list(env.get("CULTURE_ALLOWED_ROLES")),
            store_url=env.get("SUPABASE_URL", ""),
            store_key=env.get("SUPABASE_SERVICE_KEY", ""),
            records_table=env.get("CULTURE_RECORDS_TABLE") or "assessments",
            record_limit=int(env.get("CULTURE_RECORD_LIMIT") or 500),
        )


def _split_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())
