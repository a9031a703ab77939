"""Bearer-token sessions for the REST API.

Tokens are opaque random strings stored in `ApiSession` with an expiry
instant. There is no rotation or revocation list beyond deleting the row on
logout.
"""

from __future__ import annotations

import re
import secrets
from datetime import timedelta

from django.conf import settings
from django.http import HttpRequest
from django.utils import timezone

from accounts.models import ApiSession

_BEARER_RE = re.compile(r"^Bearer\s+(?P<token>\S+)\s*$", re.IGNORECASE)


class ApiAuthError(Exception):
    """Raised when a request cannot be authenticated by bearer token."""

    def __init__(self, message: str, *, status: int = 401) -> None:
        """Initialize the error.

        Args:
            message: User-facing error message.
            status: HTTP status to respond with.
        """

        super().__init__(message)
        self.message = message
        self.status = status


def bearer_token(request: HttpRequest) -> str | None:
    """Return the token from an `Authorization: Bearer <token>` header."""

    header = request.META.get("HTTP_AUTHORIZATION", "")
    match = _BEARER_RE.match(header.strip())
    if match is None:
        return None
    return match.group("token")


def issue_token(user, *, ttl_seconds: int | None = None) -> ApiSession:
    """Create a new API session for `user`.

    Args:
        user: Authenticated user.
        ttl_seconds: Optional lifetime override; defaults to
            `BANK_API_TOKEN_TTL_SECONDS`.

    Returns:
        The persisted ApiSession.
    """

    lifetime = ttl_seconds if ttl_seconds is not None else settings.BANK_API_TOKEN_TTL_SECONDS
    return ApiSession.objects.create(
        token=secrets.token_hex(32),
        user=user,
        expires_at=timezone.now() + timedelta(seconds=lifetime),
    )


def resolve_token(token: str | None) -> ApiSession:
    """Return the active session for `token`.

    Raises:
        ApiAuthError: When the token is missing, unknown, or expired.
    """

    if not token:
        raise ApiAuthError("Authentication required")
    session = ApiSession.objects.active().select_related("user").filter(token=token).first()
    if session is None or not session.user.is_active:
        raise ApiAuthError("Invalid or expired token")
    return session


def revoke_token(token: str | None) -> None:
    """Delete the session for `token`.

    Raises:
        ApiAuthError: When no token is given or it matches no session.
    """

    if not token:
        raise ApiAuthError("No authentication token provided")
    deleted, _ = ApiSession.objects.filter(token=token).delete()
    if not deleted:
        raise ApiAuthError("Invalid or expired token")


def purge_expired_tokens() -> int:
    """Delete expired sessions and return how many were removed."""

    deleted, _ = ApiSession.objects.expired().delete()
    return deleted
