"""
Subscriber registry - keyed callbacks notified when the world state changes.

Delivery is synchronous and best-effort: a callback that raises is logged
and skipped, and the remaining callbacks still run.
"""

import logging
from datetime import datetime
from typing import Callable

from pydantic import BaseModel, ConfigDict

from chronicle.domain import WorldState
from chronicle.logging_config import log_subscriber

logger = logging.getLogger(__name__)


class ChangeSummary(BaseModel):
    """What a mutation did to the state."""

    model_config = ConfigDict(frozen=True)

    time_changed: bool = False
    location_changed: bool = False
    days_delta: int = 0
    minutes_advanced: int = 0
    updates: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.time_changed or self.location_changed or bool(self.updates)


class StateChangeNotification(BaseModel):
    """Payload delivered to every subscriber."""

    model_config = ConfigDict(frozen=True)

    old_state: WorldState
    new_state: WorldState
    changes: ChangeSummary
    days_delta: int = 0
    timestamp: datetime


Subscriber = Callable[[StateChangeNotification], None]


class SubscriberRegistry:
    """
    Registry of state-change subscribers.

    Registering an id that already exists replaces its callback.
    """

    def __init__(self):
        self._subscribers: dict[str, Subscriber] = {}

    def subscribe(self, subscriber_id: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            A closure that removes this registration when called
        """
        self._subscribers[subscriber_id] = callback
        log_subscriber(logger, subscriber_id, "subscribed", details=f"total={self.count()}")

        def unsubscribe() -> None:
            # Only remove our own registration, not a later replacement
            if self._subscribers.get(subscriber_id) is callback:
                self.unsubscribe(subscriber_id)

        return unsubscribe

    def unsubscribe(self, subscriber_id: str) -> bool:
        """Remove a subscriber. Returns True if it was registered."""
        removed = self._subscribers.pop(subscriber_id, None) is not None
        if removed:
            log_subscriber(logger, subscriber_id, "unsubscribed", details=f"total={self.count()}")
        return removed

    def ids(self) -> list[str]:
        return list(self._subscribers.keys())

    def count(self) -> int:
        return len(self._subscribers)

    def clear(self) -> None:
        self._subscribers.clear()

    def notify(self, notification: StateChangeNotification) -> int:
        """
        Deliver a notification to every subscriber.

        Returns:
            Number of callbacks that completed without raising
        """
        delivered = 0
        for subscriber_id, callback in list(self._subscribers.items()):
            try:
                callback(notification)
            except Exception:
                logger.error(f"Subscriber '{subscriber_id}' raised during notification", exc_info=True)
                log_subscriber(logger, subscriber_id, "failed")
                continue
            delivered += 1
            log_subscriber(logger, subscriber_id, "notified")
        return delivered
