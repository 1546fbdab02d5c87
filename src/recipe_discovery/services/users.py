"""Session verification for authenticated endpoints."""

from dataclasses import dataclass
from typing import Protocol

from recipe_discovery.domain.errors import AuthError
from recipe_discovery.domain.models import AuthenticatedUser

_BEARER_PREFIX = "bearer "


class SessionVerifier(Protocol):
    """Interface for the external authentication provider."""

    def verify(self, access_token: str) -> AuthenticatedUser:
        """Return the user behind a token or raise AuthError."""


@dataclass
class UserService:
    """Application service for resolving the calling user."""

    verifier: SessionVerifier

    def authenticate(self, authorization: str | None) -> AuthenticatedUser:
        """Resolve an ``Authorization: Bearer`` header to a user."""
        token = _parse_bearer(authorization)
        if token is None:
            raise AuthError()
        return self.verifier.verify(token)

    def optional_user(self, authorization: str | None) -> AuthenticatedUser | None:
        """Return the user for a valid header, or None."""
        try:
            return self.authenticate(authorization)
        except AuthError:
            return None


def _parse_bearer(raw: str | None) -> str | None:
    """Extract the token from a bearer authorization header."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned.lower().startswith(_BEARER_PREFIX):
        return None
    token = cleaned[len(_BEARER_PREFIX) :].strip()
    return token or None
