"""Services for favorites and push subscription registration."""

from dataclasses import dataclass
from datetime import UTC, datetime

from recipe_discovery.domain.errors import NotFoundError, ValidationError
from recipe_discovery.domain.notifications import PushEndpoint
from recipe_discovery.services.parties import (
    FavoriteRepository,
    PushSubscriptionRepository,
)
from recipe_discovery.services.recipes import RecipeRepository


@dataclass
class FavoriteService:
    """Application service for the favorites relation."""

    repository: FavoriteRepository
    recipe_repository: RecipeRepository

    def add(self, user_id: str, recipe_id: str | None) -> None:
        """Favorite a recipe; repeated calls are no-ops."""
        if not recipe_id or not recipe_id.strip():
            raise ValidationError("Recipe ID is required")
        if self.recipe_repository.get_recipe(recipe_id) is None:
            raise NotFoundError(recipe_id)
        self.repository.add_favorite(user_id, recipe_id, datetime.now(tz=UTC))

    def is_favorited(self, user_id: str, recipe_id: str) -> bool:
        """Return true when the user has favorited the recipe."""
        return self.repository.is_favorited(user_id, recipe_id)


@dataclass
class PushSubscriptionService:
    """Registers device push endpoints for users."""

    repository: PushSubscriptionRepository
    public_key: str | None = None

    def register(self, user_id: str, subscription: dict[str, object]) -> PushEndpoint:
        """Store a browser push subscription for a user."""
        endpoint = subscription.get("endpoint")
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise ValidationError("Subscription endpoint is required")
        return self.repository.save(user_id, subscription, datetime.now(tz=UTC))
