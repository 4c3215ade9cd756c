"""Webhook pipeline events and a small in-process dispatcher."""

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from webhook_client.services.id_generator import generate_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvalidWebhookSignatureEvent:
    config_name: str
    headers: dict[str, str]
    url: str = ""
    event_id: str = field(default_factory=lambda: generate_id("evt_"))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class WebhookEventDispatcher:
    """Fan events out to subscribed listeners (sync or async callables)."""

    def __init__(self) -> None:
        self._listeners: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, listener: Callable) -> None:
        self._listeners[event_type].append(listener)

    async def dispatch(self, event: object) -> int:
        """Deliver an event to its listeners. Returns the number that succeeded."""
        delivered = 0
        for listener in self._listeners.get(type(event), []):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as exc:
                logger.warning("Event listener %r failed for %s: %s", listener, type(event).__name__, exc)
        return delivered


def log_invalid_signature(event: InvalidWebhookSignatureEvent) -> None:
    logger.warning(
        "webhook_invalid_signature config=%s url=%s event_id=%s",
        event.config_name,
        event.url,
        event.event_id,
    )


def create_event_dispatcher() -> WebhookEventDispatcher:
    dispatcher = WebhookEventDispatcher()
    dispatcher.subscribe(InvalidWebhookSignatureEvent, log_invalid_signature)
    return dispatcher
