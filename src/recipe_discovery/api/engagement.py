"""Favorites and push subscription endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from recipe_discovery.api.auth import require_user
from recipe_discovery.api.errors import to_http_exception
from recipe_discovery.api.models import (  # noqa: TC001
    FavoriteRequest,
    PushSubscriptionRequest,
)
from recipe_discovery.domain.errors import RecipeServiceError
from recipe_discovery.domain.models import AuthenticatedUser  # noqa: TC001

if TYPE_CHECKING:
    from recipe_discovery.containers import AppContainer

router = APIRouter(tags=["engagement"])

_logger = logging.getLogger(__name__)


@router.post("/favorites", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    payload: FavoriteRequest,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, str]:
    """Favorite a recipe for the calling user."""
    container: AppContainer = request.app.state.container
    try:
        container.favorite_service.add(user.id, payload.recipe_id)
    except RecipeServiceError as exc:
        _logger.warning("Favorite rejected", extra={"user_id": user.id})
        raise to_http_exception(exc, "Internal server error") from exc
    return {"message": "Recipe added to favorites"}


@router.get("/favorites/{recipe_id}")
async def favorite_status(
    recipe_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, bool]:
    """Report whether the calling user has favorited a recipe."""
    container: AppContainer = request.app.state.container
    try:
        favorited = container.favorite_service.is_favorited(user.id, recipe_id)
    except RecipeServiceError as exc:
        _logger.exception("Error checking favorite status")
        raise to_http_exception(exc, "Internal server error") from exc
    return {"isFavorited": favorited}


@router.post("/push-subscriptions", status_code=status.HTTP_201_CREATED)
async def register_push_subscription(
    payload: PushSubscriptionRequest,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, str]:
    """Store the calling device's push subscription."""
    container: AppContainer = request.app.state.container
    try:
        container.push_subscription_service.register(
            user.id, payload.to_subscription_info()
        )
    except RecipeServiceError as exc:
        _logger.warning("Push subscription rejected", extra={"user_id": user.id})
        raise to_http_exception(exc, "Internal server error") from exc
    return {"message": "Subscription saved"}


@router.get("/push-subscriptions/public-key")
async def push_public_key(request: Request) -> dict[str, str]:
    """Return the VAPID public key browsers subscribe with."""
    container: AppContainer = request.app.state.container
    public_key = container.push_subscription_service.public_key
    if not public_key:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Push notifications are not configured",
        )
    return {"publicKey": public_key}
