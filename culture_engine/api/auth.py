"""
Authorization

Bearer-token verification against a hosted auth provider, plus role gating.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from ..contracts.base import Forbidden, StoreUnavailable, Unauthorized


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None


class AuthVerifier(ABC):
    """Resolves a bearer token to a Principal."""

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """Raise Unauthorized when the token is not accepted."""
        pass


class StaticAuthVerifier(AuthVerifier):
    """Fixed token table. For tests and local runs."""

    def __init__(self, principals: Mapping[str, Principal]):
        self._principals: Dict[str, Principal] = dict(principals)

    def verify(self, token: str) -> Principal:
        principal = self._principals.get(token)
        if principal is None:
            raise Unauthorized("Invalid token")
        return principal


class HostedAuthVerifier(AuthVerifier):
    """
    Verifies tokens with `GET {base_url}/auth/v1/user`.

    Role is read from app_metadata.role, then user_metadata.role.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def verify(self, token: str) -> Principal:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(
                    f"{self._base_url}/auth/v1/user",
                    headers={"apikey": self._api_key, "Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            raise StoreUnavailable("Auth provider unreachable", detail=str(e))

        if response.status_code in (401, 403):
            raise Unauthorized("Invalid token")
        if response.status_code != 200:
            raise StoreUnavailable("Auth provider error", detail=f"HTTP {response.status_code}")

        try:
            user: Any = response.json()
        except ValueError:
            raise Unauthorized("Invalid token")
        if not isinstance(user, dict) or not user.get("id"):
            raise Unauthorized("Invalid token")

        return Principal(
            user_id=str(user["id"]),
            email=user.get("email"),
            role=_role_of(user),
        )


def _role_of(user: Mapping[str, Any]) -> Optional[str]:
    for section in ("app_metadata", "user_metadata"):
        metadata = user.get(section)
        if isinstance(metadata, dict) and isinstance(metadata.get("role"), str):
            return metadata["role"]
    return None


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an Authorization header value."""
    if not authorization:
        raise Unauthorized("Missing bearer token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing bearer token")
    return token.strip()


def require_role(principal: Principal, allowed_roles: Sequence[str]) -> Principal:
    """An empty allow-list admits any authenticated principal."""
    if not allowed_roles:
        return principal
    allowed = {role.lower() for role in allowed_roles}
    if principal.role is None or principal.role.lower() not in allowed:
        raise Forbidden("Role not allowed", detail=f"role={principal.role}")
    return principal
