"""Domain models for push endpoints and update notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from recipe_discovery.domain.errors import DeliveryError


@dataclass(frozen=True)
class PushEndpoint:
    """A registered device push subscription."""

    id: UUID
    user_id: str
    subscription: dict[str, object]
    registered_at: datetime

    @property
    def address(self) -> str:
        """Return the delivery URL for logging."""
        return str(self.subscription.get("endpoint", self.id))


@dataclass(frozen=True)
class InterestedParties:
    """Favoriting users of a recipe and their delivery endpoints."""

    favoriter_ids: frozenset[str] = frozenset()
    endpoints: tuple[PushEndpoint, ...] = ()

    @property
    def notified_user_ids(self) -> frozenset[str]:
        """Users that hold at least one endpoint."""
        return frozenset(endpoint.user_id for endpoint in self.endpoints)


@dataclass(frozen=True)
class NotificationPayload:
    """Structured message delivered to client devices."""

    title: str
    type: str
    recipe_id: str
    recipe_title: str
    user_name: str
    message: str
    url: str

    def to_json(self) -> dict[str, str]:
        """Return the wire representation expected by the client worker."""
        return {
            "title": self.title,
            "type": self.type,
            "recipeId": self.recipe_id,
            "recipeTitle": self.recipe_title,
            "userName": self.user_name,
            "message": self.message,
            "url": self.url,
        }


class DeliveryStatus(str, Enum):
    """Outcome tag for one delivery attempt."""

    DELIVERED = "delivered"
    TRANSIENT_FAILURE = "transient_failure"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of a single delivery attempt."""

    endpoint: PushEndpoint
    status: DeliveryStatus
    error: DeliveryError | None = None


@dataclass(frozen=True)
class DispatchReport:
    """Collected outcomes of one fan-out."""

    outcomes: tuple[DeliveryOutcome, ...] = field(default_factory=tuple)

    def count(self, status: DeliveryStatus) -> int:
        """Return how many attempts ended with the given status."""
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def pruned_endpoint_ids(self) -> list[UUID]:
        """Endpoints removed because they are permanently gone."""
        return [
            outcome.endpoint.id
            for outcome in self.outcomes
            if outcome.status is DeliveryStatus.PERMANENT_FAILURE
        ]
