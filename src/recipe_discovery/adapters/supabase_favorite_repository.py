"""Supabase repository for the favorites relation."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from recipe_discovery.adapters.supabase_errors import store_errors
from recipe_discovery.services.parties import FavoriteRepository


@dataclass
class SupabaseFavoriteRepository(FavoriteRepository):
    """Supabase-backed favorites repository."""

    client: Client

    def list_user_ids(self, recipe_id: str) -> set[str]:
        """Return ids of users who favorited a recipe."""
        with store_errors("list favoriters"):
            response = (
                self.client.table("favorites")
                .select("user_id")
                .eq("recipe_id", recipe_id)
                .execute()
            )
        return {str(row["user_id"]) for row in response.data or []}

    def add_favorite(self, user_id: str, recipe_id: str, created_at: datetime) -> None:
        """Insert the favorite, ignoring an existing one."""
        with store_errors("add favorite"):
            self.client.table("favorites").upsert(
                {
                    "user_id": user_id,
                    "recipe_id": recipe_id,
                    "created_at": created_at.isoformat(),
                },
                on_conflict="user_id,recipe_id",
                ignore_duplicates=True,
            ).execute()

    def is_favorited(self, user_id: str, recipe_id: str) -> bool:
        """Return true when the favorite row exists."""
        with store_errors("check favorite"):
            response = (
                self.client.table("favorites")
                .select("recipe_id")
                .eq("user_id", user_id)
                .eq("recipe_id", recipe_id)
                .limit(1)
                .execute()
            )
        return bool(response.data)
