"""Resolution of who must hear about a recipe change."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from recipe_discovery.domain.notifications import InterestedParties, PushEndpoint


class FavoriteRepository(Protocol):
    """Persistence interface for the favorites relation."""

    def list_user_ids(self, recipe_id: str) -> set[str]:
        """Return ids of users who favorited a recipe."""

    def add_favorite(self, user_id: str, recipe_id: str, created_at: datetime) -> None:
        """Create the favorite relation if it does not exist."""

    def is_favorited(self, user_id: str, recipe_id: str) -> bool:
        """Return true when the user has favorited the recipe."""


class PushSubscriptionRepository(Protocol):
    """Persistence interface for registered push endpoints."""

    def list_for_users(self, user_ids: set[str]) -> list[PushEndpoint]:
        """Return every endpoint registered by the given users."""

    def save(
        self, user_id: str, subscription: dict[str, object], registered_at: datetime
    ) -> PushEndpoint:
        """Insert or refresh an endpoint for a user."""

    def delete(self, endpoint_id: UUID) -> None:
        """Remove an endpoint record."""


@dataclass
class InterestedPartyResolver:
    """Finds favoriting users of a recipe and their delivery endpoints."""

    favorite_repository: FavoriteRepository
    subscription_repository: PushSubscriptionRepository

    def resolve(self, recipe_id: str) -> InterestedParties:
        """Return favoriters and endpoints; skips the endpoint lookup when nobody cares."""
        user_ids = self.favorite_repository.list_user_ids(recipe_id)
        if not user_ids:
            return InterestedParties()
        endpoints = self.subscription_repository.list_for_users(user_ids)
        return InterestedParties(
            favoriter_ids=frozenset(user_ids),
            endpoints=tuple(endpoints),
        )
