"""Bearer-token session dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from recipe_discovery.api.errors import to_http_exception
from recipe_discovery.domain.errors import AuthError, BackingStoreError
from recipe_discovery.domain.models import AuthenticatedUser  # noqa: TC001
from recipe_discovery.services.users import UserService  # noqa: TC001

if TYPE_CHECKING:
    from recipe_discovery.containers import AppContainer

_logger = logging.getLogger(__name__)


def _get_user_service(request: Request) -> UserService:
    container: AppContainer = request.app.state.container
    return container.user_service


async def require_user(
    authorization: str | None = Header(default=None),
    user_service: UserService = Depends(_get_user_service),
) -> AuthenticatedUser:
    """Ensure requests carry a valid session token."""
    try:
        return user_service.authenticate(authorization)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        ) from exc
    except BackingStoreError as exc:
        _logger.exception("Session verification unavailable")
        raise to_http_exception(exc, "Internal server error") from exc


async def optional_user(
    authorization: str | None = Header(default=None),
    user_service: UserService = Depends(_get_user_service),
) -> AuthenticatedUser | None:
    """Return the session user when present, leaving rejection to the service."""
    try:
        return user_service.optional_user(authorization)
    except BackingStoreError as exc:
        _logger.exception("Session verification unavailable")
        raise to_http_exception(exc, "Internal server error") from exc
