"""Shared pytest fixtures for chronicle tests."""

import pytest

from chronicle.config import TrackerConfig
from chronicle.domain import WorldState, create_default
from chronicle.observer import WorldStateAPI
from chronicle.parsing import NarrativeParser
from chronicle.services import StateChangeNotification, SubscriberRegistry, TemporalManager


# =============================================================================
# Narrative Samples
# =============================================================================

SCENARIO_A = (
    "[Location: The Spiral - Main Hall | 15th of Bloomtide, 2847 AC | Evening, 7th hour | Weather: rain]\n"
    "The lamps flickered as the council took their seats."
)


@pytest.fixture
def decorated_narrative() -> str:
    """A message opening with a fully decorated header."""
    return SCENARIO_A


@pytest.fixture
def full_header_narrative() -> str:
    """A message opening with a plain date/location header."""
    return "[Ironhold Market, 15th of Harvestgold, 2847 AV, Afternoon]\nStalls sagged under the harvest."


# =============================================================================
# Config / State
# =============================================================================

@pytest.fixture
def config() -> TrackerConfig:
    """Default tracker settings."""
    return TrackerConfig()


@pytest.fixture
def default_state() -> WorldState:
    """A freshly created world state."""
    return create_default()


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def parser() -> NarrativeParser:
    """A parser over the default matcher registry."""
    return NarrativeParser()


@pytest.fixture
def manager(config: TrackerConfig) -> TemporalManager:
    """An initialized manager at the default date."""
    return TemporalManager(config).initialize()


@pytest.fixture
def api(manager: TemporalManager) -> WorldStateAPI:
    """Facade over the shared manager."""
    return WorldStateAPI(manager)


@pytest.fixture
def subscriber_registry() -> SubscriberRegistry:
    """An empty subscriber registry."""
    return SubscriberRegistry()


@pytest.fixture
def received(manager: TemporalManager) -> list[StateChangeNotification]:
    """Notifications delivered to a subscriber registered on the manager."""
    notifications: list[StateChangeNotification] = []
    manager.subscribe("recorder", notifications.append)
    return notifications
