"""HTTP functions notified after a ticket is issued.

Both receivers deduplicate on ``ticketId``, so they are called on every
issuance request, including replays.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from spotix_api.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class AuxiliaryFunctions:
    def __init__(self, atomic_url: Optional[str], analytics_url: Optional[str], timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.atomic_url = atomic_url
        self.analytics_url = analytics_url
        self.timeout = timeout
        self._transport = transport

    async def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(url, json=payload)
        if not resp.is_success:
            raise UpstreamError(f"{url} returned {resp.status_code}")
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    async def update_inventory(self, payload: Dict[str, Any]) -> str:
        """Ticket counts, revenue and discount usage for the event."""
        if not self.atomic_url:
            logger.warning("ATOMIC_FUNCTION_URL not configured - skipping atomic operations")
            return "skipped"
        result = await self._post(self.atomic_url, payload)
        if result.get("alreadyProcessed"):
            logger.info("Atomic operations already processed for ticket %s", payload.get("ticketId"))
            return "already processed"
        return "processed"

    async def record_analytics(self, payload: Dict[str, Any]) -> str:
        if not self.analytics_url:
            logger.warning("ANALYTICS_FUNCTION_URL not configured - skipping analytics update")
            return "skipped"
        result = await self._post(self.analytics_url, payload)
        if result.get("alreadyProcessed"):
            logger.info("Analytics already processed for ticket %s", payload.get("ticketId"))
            return "already processed"
        return "processed"
