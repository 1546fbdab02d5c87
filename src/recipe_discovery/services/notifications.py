"""Fan-out of recipe update notifications to push endpoints."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from recipe_discovery.domain.errors import (
    DeliveryError,
    PermanentDeliveryError,
    PushSendError,
    TransientDeliveryError,
)
from recipe_discovery.domain.notifications import (
    DeliveryOutcome,
    DeliveryStatus,
    DispatchReport,
    NotificationPayload,
    PushEndpoint,
)
from recipe_discovery.services.parties import PushSubscriptionRepository

PERMANENT_STATUS_CODES = frozenset({404, 410})
EXCERPT_LENGTH = 30

_logger = logging.getLogger(__name__)


class PushClient(Protocol):
    """Interface for a push delivery transport."""

    async def send(
        self, subscription: dict[str, object], payload: dict[str, str]
    ) -> None:
        """Deliver one payload; raise PushSendError on failure."""


def build_update_payload(
    recipe_id: str, editor_name: str, excerpt: str
) -> NotificationPayload:
    """Build the structured recipe-update message."""
    return NotificationPayload(
        title="Recipe Update",
        type="recipe-update",
        recipe_id=recipe_id,
        recipe_title=excerpt,
        user_name=editor_name,
        message=f'Recipe "{excerpt}..." has been updated by {editor_name}',
        url=f"/recipes/{recipe_id}",
    )


def classify_failure(endpoint: PushEndpoint, exc: Exception) -> DeliveryError:
    """Map a transport failure to a permanent or transient delivery error."""
    status_code = _status_code_from_exception(exc)
    if status_code in PERMANENT_STATUS_CODES:
        return PermanentDeliveryError(endpoint.address, status_code, str(exc))
    return TransientDeliveryError(endpoint.address, status_code, str(exc))


@dataclass
class NotificationDispatcher:
    """Delivers one notification per endpoint and prunes dead endpoints."""

    push_client: PushClient | None
    subscription_repository: PushSubscriptionRepository

    async def dispatch(
        self,
        recipe_id: str,
        editor_name: str,
        description_excerpt: str,
        targets: Sequence[PushEndpoint],
    ) -> DispatchReport:
        """Attempt every delivery concurrently and wait for all to settle."""
        if not targets:
            return DispatchReport()
        if self.push_client is None:
            _logger.warning(
                "Push delivery disabled; skipping %s endpoints for recipe %s",
                len(targets),
                recipe_id,
            )
            return DispatchReport()

        payload = build_update_payload(
            recipe_id, editor_name, description_excerpt
        ).to_json()
        outcomes = await asyncio.gather(
            *(
                self._deliver(self.push_client, endpoint, payload)
                for endpoint in targets
            )
        )
        report = DispatchReport(outcomes=tuple(outcomes))
        _logger.info(
            "Recipe %s notifications: delivered=%s transient=%s pruned=%s",
            recipe_id,
            report.count(DeliveryStatus.DELIVERED),
            report.count(DeliveryStatus.TRANSIENT_FAILURE),
            report.count(DeliveryStatus.PERMANENT_FAILURE),
        )
        return report

    async def _deliver(
        self,
        push_client: PushClient,
        endpoint: PushEndpoint,
        payload: dict[str, str],
    ) -> DeliveryOutcome:
        try:
            await push_client.send(endpoint.subscription, payload)
        except Exception as exc:
            error = classify_failure(endpoint, exc)
        else:
            return DeliveryOutcome(endpoint=endpoint, status=DeliveryStatus.DELIVERED)

        if isinstance(error, PermanentDeliveryError):
            self._prune(endpoint)
            return DeliveryOutcome(
                endpoint=endpoint,
                status=DeliveryStatus.PERMANENT_FAILURE,
                error=error,
            )
        _logger.warning(
            "Failed to send notification to %s: %s", endpoint.user_id, error
        )
        return DeliveryOutcome(
            endpoint=endpoint,
            status=DeliveryStatus.TRANSIENT_FAILURE,
            error=error,
        )

    def _prune(self, endpoint: PushEndpoint) -> None:
        try:
            self.subscription_repository.delete(endpoint.id)
        except Exception:
            _logger.exception(
                "Failed to remove dead push endpoint",
                extra={"endpoint_id": str(endpoint.id)},
            )
            return
        _logger.info(
            "Removed dead push endpoint %s for user %s", endpoint.id, endpoint.user_id
        )


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract a transport status code from an exception, if available."""
    if isinstance(exc, PushSendError):
        return exc.status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None
