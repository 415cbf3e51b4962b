"""
WorldStateAPI - the interface downstream readers use to follow the world.

All methods are either:
- Queries (get_*): Read-only, safe to call any number of times
- Commands (do_*): Mutate the state, may raise ObserverError on bad input

ingest_message() is the hook for a chat host: it is handed every new
message and runs the narrative parser when the tracker settings allow it.
"""

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from chronicle.domain import MonthInfo, WorldState, calendar, clock
from chronicle.logging_config import log_observer_cmd
from chronicle.services import ChangeSummary, Subscriber, TemporalManager

from .snapshots import LocationDisplaySnapshot, TimeDisplaySnapshot

logger = logging.getLogger(__name__)

# Keys a chat host may carry the message text under
MESSAGE_TEXT_KEYS = ("message", "mes", "text", "content")


# =============================================================================
# Exceptions
# =============================================================================


class ObserverError(Exception):
    """Base exception for WorldStateAPI errors."""

    pass


class InvalidTimeUnitError(ObserverError):
    """Raised when a time unit is not one the clock understands."""

    pass


class NothingToUndoError(ObserverError):
    """Raised when undo is requested with an empty history."""

    pass


class InvalidLocationError(ObserverError):
    """Raised when location fields do not fit the location model."""

    pass


# =============================================================================
# World State API
# =============================================================================


class WorldStateAPI:
    """
    Facade over one TemporalManager.

    All methods are either:
    - Queries (get_*): Read-only
    - Commands (do_*): Go through the manager, raise ObserverError on failure
    """

    def __init__(self, manager: TemporalManager):
        self._manager = manager

    @property
    def manager(self) -> TemporalManager:
        return self._manager

    # =========================================================================
    # QUERIES (Read-Only)
    # =========================================================================

    # --- Current Moment ---

    def get_current_date(self, style: str = "full") -> str:
        """Current date, e.g. "15th of Bloomtide, 2847 AV"."""
        return self._manager.get_formatted_date(style)

    def get_current_location(self) -> str | None:
        """Most specific name for where the story is."""
        return self._manager.current_location

    def get_state(self) -> WorldState:
        """Independent copy of the full state document."""
        return self._manager.get_state()

    def get_time_summary(self) -> TimeDisplaySnapshot:
        return TimeDisplaySnapshot.from_state(self._manager.state)

    def get_location_summary(self) -> LocationDisplaySnapshot:
        return LocationDisplaySnapshot.from_state(self._manager.state)

    def get_validation_errors(self) -> list[str]:
        return self._manager.validate()

    # --- Calendar ---

    def get_month(self, index: int) -> MonthInfo | None:
        """Month record for 1-10, the Vexdays record for 0."""
        return calendar.get_month(index)

    def get_holidays(self, month: int | None = None) -> tuple[str, ...]:
        """Festivals of a month; the current month when none is given."""
        if month is None:
            month = self._manager.state.time.month
        return calendar.month_festivals(month)

    def format_date(self, day: int, month: int, year: int, style: str = "full") -> str:
        return calendar.format_date(day, month, year, style)

    # --- Subscriptions ---

    def subscribe(self, subscriber_id: str, callback: Subscriber):
        """Register for state changes. Returns an unsubscribe closure."""
        return self._manager.subscribe(subscriber_id, callback)

    # =========================================================================
    # COMMANDS (State-Mutating)
    # =========================================================================

    def do_set_time(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
    ) -> ChangeSummary:
        """
        Overwrite clock fields. Values are not clamped.

        Returns:
            What changed
        """
        log_observer_cmd(logger, "set_time", f"y={year} m={month} d={day} h={hour} min={minute}")
        return self._manager.set_time(year=year, month=month, day=day, hour=hour, minute=minute)

    def do_set_location(self, partial: Mapping | None = None, **fields) -> ChangeSummary:
        """
        Merge fields into the location.

        Raises:
            InvalidLocationError: If a value does not fit its field
        """
        log_observer_cmd(logger, "set_location", str({**(partial or {}), **fields}))
        try:
            return self._manager.set_location(partial, **fields)
        except ValidationError as e:
            raise InvalidLocationError(str(e)) from e

    def do_advance_time(self, amount: int, unit: str) -> ChangeSummary:
        """
        Move the clock forward.

        Args:
            amount: How many units; non-positive amounts change nothing
            unit: minute, hour, day, week, octave, month or year (plurals ok)

        Raises:
            InvalidTimeUnitError: If the unit is unknown
        """
        log_observer_cmd(logger, "advance_time", f"{amount} {unit}")
        try:
            clock.normalize_unit(unit)
        except ValueError as e:
            raise InvalidTimeUnitError(str(e)) from e
        return self._manager.apply_time_skip(amount, unit)

    def do_undo(self) -> WorldState:
        """
        Step back one mutation.

        Returns:
            The restored state

        Raises:
            NothingToUndoError: If the history is empty
        """
        log_observer_cmd(logger, "undo", f"depth={self._manager.history_depth}")
        if not self._manager.undo():
            raise NothingToUndoError("No history to undo")
        return self._manager.get_state()

    # =========================================================================
    # Message Ingestion
    # =========================================================================

    def ingest_message(self, data: str | Mapping | None) -> ChangeSummary | None:
        """
        Feed a new chat message to the tracker.

        Accepts the text itself or a mapping carrying it under one of
        MESSAGE_TEXT_KEYS. Returns None without parsing when the tracker is
        disabled, auto-parsing is off, or no text can be found.
        """
        config = self._manager.config
        if not config.enabled or not config.auto_parse_messages:
            return None

        text = self._extract_text(data)
        if not text:
            logger.debug(f"No message text in {type(data).__name__}")
            return None
        return self._manager.process_narrative(text)

    def _extract_text(self, data: str | Mapping | None) -> str | None:
        if isinstance(data, str):
            return data
        if isinstance(data, Mapping):
            for key in MESSAGE_TEXT_KEYS:
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value
        return None
