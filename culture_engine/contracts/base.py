"""
Base Contracts and Error Taxonomy

Exceptions shared by every layer of the culture snapshot engine.

ERROR POLICY:
=============
- Malformed individual records are NEVER errors (they are dropped field by field)
- InvalidInput: the caller supplied nothing renderable
- EmptyResult: a record filter matched no usable data
- Transport failures to hosted collaborators are explicit exception types
- Upstream completion failures are data (see adapter.providers.base)
"""

from __future__ import annotations
from typing import Optional


# =============================================================================
# CORE ERRORS
# =============================================================================

class SnapshotError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        """Error envelope used by the HTTP layer."""
        body = {"error": self.message}
        if self.detail:
            body["detail"] = self.detail
        return body


class InvalidInput(SnapshotError, ValueError):
    """Caller supplied no usable score data (or an unusable request shape)."""


class EmptyResult(SnapshotError):
    """A record filter produced zero contributing records."""


class StoreUnavailable(SnapshotError):
    """The hosted assessment store could not be read."""


# =============================================================================
# AUTHORIZATION ERRORS
# =============================================================================

class AuthError(SnapshotError):
    """Base class for authorization failures."""


class Unauthorized(AuthError):
    """Missing, malformed or rejected bearer token."""


class Forbidden(AuthError):
    """Authenticated principal lacks an allowed role."""
