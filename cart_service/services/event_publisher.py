"""
Order hand-off publishers.

Supports two operating modes:
- SIMULATION: Intents are logged only (no network calls, nothing retained)
- HTTP: Intents are POSTed to the order service's event intake

A publish either returns normally or raises ``EventPublishError``; there is
no partial success and no retry.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import requests

from cart_service.core.exceptions import EventPublishError
from cart_service.models.order_intent import OrderIntent

logger = logging.getLogger(__name__)

# Customer ids ending in this pattern fail to publish in SIMULATION mode
AUTO_FAILURE_PATTERN = "9999"


class EventPublisher(ABC):
    """Fire-and-confirm transport to the order subsystem."""

    @abstractmethod
    async def publish(self, topic: str, intent: OrderIntent) -> None:
        ...


class HttpEventPublisher(EventPublisher):
    """Publishes order intents to the order service over HTTP."""

    def __init__(self, base_url: str, exchange: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.exchange = exchange
        self.timeout = timeout

    def _envelope(self, topic: str, intent: OrderIntent) -> Dict[str, Any]:
        return {
            "exchange": self.exchange,
            "routing_key": topic,
            "event_id": intent.event_id,
            "payload": intent.model_dump(mode="json")
        }

    def _post(self, topic: str, intent: OrderIntent):
        url = f"{self.base_url}/events/{topic}"
        response = requests.post(url, json=self._envelope(topic, intent), timeout=self.timeout)
        response.raise_for_status()

    async def publish(self, topic: str, intent: OrderIntent) -> None:
        logger.info(f"Publishing event {intent.event_id} to {self.exchange}/{topic}")
        try:
            await asyncio.to_thread(self._post, topic, intent)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to publish event {intent.event_id}: {str(e)}")
            raise EventPublishError(f"Order service rejected event {intent.event_id}: {str(e)}") from e


class SimulationEventPublisher(EventPublisher):
    """Event publisher for local development. Logs each intent and keeps nothing."""

    def __init__(self, exchange: str = "cart.events"):
        self.exchange = exchange

    async def publish(self, topic: str, intent: OrderIntent) -> None:
        if intent.customer_id.endswith(AUTO_FAILURE_PATTERN):
            logger.warning(f"[SIMULATION] Auto-failing publish of event {intent.event_id}")
            raise EventPublishError(f"Simulated publish failure for event {intent.event_id}")

        logger.info(
            f"[SIMULATION] Published event {intent.event_id} to {self.exchange}/{topic} "
            f"for cart {intent.cart_id}, total {intent.total_price}"
        )


def build_event_publisher(mode: str, base_url: str, exchange: str, timeout: float = 5.0) -> EventPublisher:
    """Pick the publisher implementation for the configured mode."""
    if mode.upper() == "HTTP":
        return HttpEventPublisher(base_url=base_url, exchange=exchange, timeout=timeout)
    if mode.upper() != "SIMULATION":
        logger.warning(f"Unknown event publisher mode {mode}, falling back to SIMULATION")
    return SimulationEventPublisher(exchange=exchange)
