"""Web Push client adapter."""

import asyncio
import json
from dataclasses import dataclass

from pywebpush import WebPushException, webpush

from recipe_discovery.domain.errors import PushSendError
from recipe_discovery.services.notifications import PushClient


@dataclass
class WebPushClient(PushClient):
    """Push client implemented with pywebpush and VAPID credentials."""

    vapid_private_key: str
    vapid_subject: str
    timeout_seconds: float = 10

    async def send(
        self, subscription: dict[str, object], payload: dict[str, str]
    ) -> None:
        """Deliver one encrypted payload to a browser push service."""
        await asyncio.to_thread(self._send_blocking, subscription, payload)

    def _send_blocking(
        self, subscription: dict[str, object], payload: dict[str, str]
    ) -> None:
        try:
            webpush(
                subscription_info=subscription,
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout_seconds,
            )
        except WebPushException as exc:
            response = getattr(exc, "response", None)
            status_code = getattr(response, "status_code", None)
            raise PushSendError(
                str(exc), status_code if isinstance(status_code, int) else None
            ) from exc
