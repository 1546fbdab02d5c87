"""Session verification against Supabase Auth."""

import logging
from dataclasses import dataclass

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import AuthRetryableError, Client

from recipe_discovery.domain.errors import AuthError, BackingStoreError
from recipe_discovery.domain.models import AuthenticatedUser
from recipe_discovery.services.users import SessionVerifier

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseSessionVerifier(SessionVerifier):
    """Resolves access tokens through the Supabase Auth API."""

    client: Client

    def verify(self, access_token: str) -> AuthenticatedUser:
        """Return the user behind an access token.

        Rejected tokens raise ``AuthError``; an unreachable auth service raises
        ``BackingStoreError``.
        """
        try:
            response = self.client.auth.get_user(access_token)
        except (AuthRetryableError, httpx.HTTPError) as exc:
            raise BackingStoreError("verify session", str(exc)) from exc
        except SupabaseAuthError as exc:
            _logger.info("Rejected session token: %s", type(exc).__name__)
            raise AuthError() from exc
        user = getattr(response, "user", None)
        if user is None:
            raise AuthError()
        metadata = getattr(user, "user_metadata", None) or {}
        name = metadata.get("name") or metadata.get("full_name")
        return AuthenticatedUser(
            id=str(user.id),
            email=getattr(user, "email", None),
            name=str(name) if name else None,
        )
