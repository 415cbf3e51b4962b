"""Services: the temporal manager and its subscriber registry."""

from .subscribers import ChangeSummary, StateChangeNotification, Subscriber, SubscriberRegistry
from .temporal_manager import TemporalManager

__all__ = [
    "ChangeSummary",
    "StateChangeNotification",
    "Subscriber",
    "SubscriberRegistry",
    "TemporalManager",
]
