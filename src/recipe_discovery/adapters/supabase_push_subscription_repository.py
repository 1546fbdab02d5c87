"""Supabase repository for registered push endpoints."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_discovery.adapters.supabase_errors import store_errors
from recipe_discovery.domain.notifications import PushEndpoint
from recipe_discovery.services.parties import PushSubscriptionRepository


@dataclass
class SupabasePushSubscriptionRepository(PushSubscriptionRepository):
    """Supabase-backed push subscription registry."""

    client: Client

    def list_for_users(self, user_ids: set[str]) -> list[PushEndpoint]:
        """Return every endpoint registered by the given users."""
        if not user_ids:
            return []
        with store_errors("list push subscriptions"):
            response = (
                self.client.table("push_subscriptions")
                .select("*")
                .in_("user_id", sorted(user_ids))
                .execute()
            )
        return [_parse_endpoint(row) for row in response.data or []]

    def save(
        self, user_id: str, subscription: dict[str, object], registered_at: datetime
    ) -> PushEndpoint:
        """Insert or refresh the endpoint keyed by user and delivery URL."""
        with store_errors("save push subscription"):
            response = (
                self.client.table("push_subscriptions")
                .upsert(
                    {
                        "user_id": user_id,
                        "endpoint": subscription["endpoint"],
                        "subscription": subscription,
                        "registered_at": registered_at.isoformat(),
                    },
                    on_conflict="user_id,endpoint",
                )
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to save push subscription")
        return _parse_endpoint(response.data[0])

    def delete(self, endpoint_id: UUID) -> None:
        """Remove an endpoint record."""
        with store_errors("delete push subscription"):
            self.client.table("push_subscriptions").delete().eq(
                "id", str(endpoint_id)
            ).execute()


def _parse_endpoint(row: dict[str, object]) -> PushEndpoint:
    """Parse a push subscription row into a domain model."""
    subscription = row.get("subscription")
    return PushEndpoint(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        subscription=subscription if isinstance(subscription, dict) else {},
        registered_at=datetime.fromisoformat(str(row["registered_at"])),
    )
