"""
TemporalManager - owns one WorldState and every mutation of it.

Each mutating call follows the same path:
1. Build a candidate state from the current one (models are frozen)
2. Recompute derived fields
3. Push the prior state onto the undo history, trimmed to capacity
4. Notify subscribers if the clock or the location changed

Narrative text is parsed once per call; at most one time-advancing action
is applied, in order of precedence: header date/clock, else an explicit
time skip, else the estimated scene length.
"""

import logging
from collections.abc import Mapping
from datetime import datetime

from pydantic import ValidationError

from chronicle.config import TrackerConfig
from chronicle.domain import (
    ContextState,
    DungeonState,
    EnvironmentEffect,
    EnvironmentState,
    HistoryEntry,
    LocationState,
    TimeState,
    TravelRecord,
    WorldState,
    calendar,
    clock,
    create_default,
    recompute,
    validate,
)
from chronicle.logging_config import (
    log_history,
    log_narrative,
    log_storage,
    log_time_advance,
)
from chronicle.parsing import NarrativeParser, ParsedLocation, ParsedTime, parse_location

from .subscribers import ChangeSummary, StateChangeNotification, Subscriber, SubscriberRegistry

logger = logging.getLogger(__name__)


class TemporalManager:
    """
    Keeps the world state in step with the narrative.

    Not thread-safe; one manager per session. Use get_state() for reads,
    the set_*/apply_*/process_* methods for writes.
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        parser: NarrativeParser | None = None,
    ):
        self.config = config or TrackerConfig()
        self.parser = parser or NarrativeParser()
        self.subscribers = SubscriberRegistry()
        self._state: WorldState = create_default(self.config.history_capacity)
        self.initialized = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self, config: TrackerConfig | Mapping | None = None) -> "TemporalManager":
        """
        Seed the state from settings.

        A starting date (any format parse_date accepts) replaces the default
        date; a starting location becomes the specific location. Records the
        session start date. Does not touch history or notify.
        """
        if config is not None:
            self.config = config if isinstance(config, TrackerConfig) else TrackerConfig.model_validate(dict(config))

        state = self._state
        time = state.time
        location = state.location

        if self.config.starting_date:
            start = calendar.parse_date(self.config.starting_date)
            if start is None:
                logger.warning(f"Ignoring unparseable starting date: {self.config.starting_date!r}")
            else:
                time = time.model_copy(update={"year": start.year, "month": start.month, "day": start.day})

        if self.config.starting_location:
            parsed = parse_location(self.config.starting_location)
            if parsed is not None:
                location = location.model_copy(update={"specific_location": parsed.display_name})

        time = time.model_copy(
            update={"session_start_date": calendar.format_date(time.day, time.month, time.year, "numeric")}
        )
        meta = state.meta.model_copy(
            update={
                "last_updated": datetime.now(),
                "max_history_entries": self.config.history_capacity,
                "subscriber_count": self.subscribers.count(),
            }
        )

        self._state = recompute(state.model_copy(update={"time": time, "location": location, "meta": meta}))
        self.initialized = True
        logger.info(
            f"Manager initialized at {self._state.time.formatted_date}, "
            f"{self._state.time.formatted_time} in {self.current_location}"
        )
        return self

    def reset(self) -> ChangeSummary:
        """Return to the default state. The prior state stays undoable."""
        self.initialized = False
        return self._commit(create_default(self.config.history_capacity), source="manual", label="reset")

    # =========================================================================
    # Narrative
    # =========================================================================

    def process_narrative(self, text: str | None) -> ChangeSummary:
        """
        Parse narrative text and apply what it says to the state.

        Text with no header, no time skip and no location change leaves the
        state untouched and returns an empty summary.
        """
        parsed = self.parser.parse(text)
        if not parsed.found and parsed.time_skip is None and parsed.location_change is None:
            log_narrative(logger, "no actionable cues", confidence=parsed.confidence)
            return ChangeSummary()

        old = self._state
        time = old.time
        location = old.location
        environment = old.environment
        updates: list[str] = []
        minutes_advanced = 0

        # At most one time-advancing action
        if parsed.time is not None:
            time = self._apply_parsed_time(time, parsed.time)
            updates.append("time")
        elif parsed.time_skip is not None:
            if parsed.time_skip.amount > 0:
                time = clock.advance_by(time, parsed.time_skip.amount, parsed.time_skip.unit)
                updates.append("time_skip")
        elif parsed.estimated_minutes > 0:
            time = clock.advance_minutes(time, parsed.estimated_minutes)
            minutes_advanced = parsed.estimated_minutes
            updates.append("narrative_time")

        if parsed.location is not None:
            location = self._apply_parsed_location(location, parsed.location)
            updates.append("location")
        elif parsed.location_change is not None:
            location = self._apply_parsed_location(location, parsed.location_change)
            updates.append("location_change")
        location_changed = location != old.location

        if parsed.weather:
            environment = environment.model_copy(update={"weather": parsed.weather})
            updates.append("weather")

        if parsed.dungeon_info is not None:
            dungeon = (location.dungeon or DungeonState()).model_copy(update={"floor": parsed.dungeon_info.floor})
            location = location.model_copy(update={"dungeon": dungeon, "is_dungeon": True})
            updates.append("dungeon")

        candidate = old.model_copy(update={"time": time, "location": location, "environment": environment})
        return self._commit(
            candidate,
            source="parsed",
            confidence=parsed.confidence,
            updates=tuple(updates),
            minutes_advanced=minutes_advanced,
            location_changed=location_changed,
            label="narrative",
        )

    def _apply_parsed_time(self, time: TimeState, parsed: ParsedTime) -> TimeState:
        update = {"year": parsed.year, "month": parsed.month, "day": parsed.day}
        if parsed.hour is not None:
            update["hour"] = parsed.hour
        if parsed.minute is not None:
            update["minute"] = parsed.minute
        return time.model_copy(update=update)

    def _apply_parsed_location(self, location: LocationState, parsed: ParsedLocation) -> LocationState:
        return location.model_copy(update={"specific_location": parsed.display_name})

    # =========================================================================
    # Time
    # =========================================================================

    def apply_time_skip(self, amount: int, unit: str) -> ChangeSummary:
        """
        Advance the clock by amount units.

        Units: minute, hour, day, week (7 days), octave (8 days), month, year.
        Non-positive amounts are ignored. Raises ValueError for unknown units.
        """
        unit = clock.normalize_unit(unit)
        if amount <= 0:
            logger.debug(f"Ignoring non-positive time skip: {amount} {unit}")
            return ChangeSummary()

        old = self._state
        candidate = old.model_copy(update={"time": clock.advance_by(old.time, amount, unit)})
        return self._commit(candidate, source="manual", updates=("time_skip",), label=f"skip {amount} {unit}")

    def advance_minutes(self, minutes: int) -> ChangeSummary:
        return self.apply_time_skip(minutes, "minute")

    def advance_hours(self, hours: int) -> ChangeSummary:
        return self.apply_time_skip(hours, "hour")

    def advance_days(self, days: int) -> ChangeSummary:
        return self.apply_time_skip(days, "day")

    def advance_months(self, months: int) -> ChangeSummary:
        return self.apply_time_skip(months, "month")

    def set_time(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
    ) -> ChangeSummary:
        """
        Overwrite any of the clock fields.

        Values are not clamped; use validate() to find out-of-range fields.
        """
        fields = {"year": year, "month": month, "day": day, "hour": hour, "minute": minute}
        update = {k: v for k, v in fields.items() if v is not None}
        old = self._state
        candidate = old.model_copy(update={"time": old.time.model_copy(update=update)})
        return self._commit(candidate, source="manual", updates=("time",), label="set_time")

    # =========================================================================
    # Location
    # =========================================================================

    def set_location(self, partial: Mapping | None = None, **fields) -> ChangeSummary:
        """
        Merge fields into the location.

        Unknown keys are ignored. Raises pydantic.ValidationError when a
        value does not fit its field.
        """
        old = self._state
        location = self._merge(LocationState, old.location, {**(partial or {}), **fields})
        candidate = old.model_copy(update={"location": location})
        return self._commit(candidate, source="manual", updates=("location",), label="set_location")

    def start_travel(
        self,
        destination: str,
        mode: str = "walking",
        estimated_days: int | None = None,
    ) -> ChangeSummary:
        """Mark the party as in transit towards destination."""
        old = self._state
        t = old.time
        travel = TravelRecord(
            origin=old.location.specific_location or old.location.settlement,
            destination=destination,
            mode=mode,
            start_date=calendar.format_date(t.day, t.month, t.year, "numeric"),
            estimated_days=estimated_days,
        )
        candidate = old.model_copy(
            update={
                "location": old.location.model_copy(update={"is_in_transit": True, "travel": travel}),
                "context": old.context.model_copy(update={"current_activity": "travel"}),
            }
        )
        return self._commit(
            candidate, source="travel", updates=("travel",), notify=False, label=f"travel to {destination}"
        )

    def end_travel(self, arrival: str | Mapping | None = None) -> ChangeSummary:
        """
        Clear the journey. An arrival (a place name or location fields) is
        then applied with set_location.
        """
        old = self._state
        candidate = old.model_copy(
            update={
                "location": old.location.model_copy(update={"is_in_transit": False, "travel": None}),
                "context": old.context.model_copy(update={"current_activity": "idle"}),
            }
        )
        summary = self._commit(candidate, source="travel", updates=("travel",), notify=False, label="end travel")

        if not arrival:
            return summary
        if isinstance(arrival, str):
            parsed = parse_location(arrival)
            arrival = {"specific_location": parsed.display_name if parsed else arrival}
        return self.set_location(arrival)

    @property
    def current_location(self) -> str | None:
        return self._state.location.display_name

    # =========================================================================
    # Environment
    # =========================================================================

    def set_environment(self, partial: Mapping | None = None, **fields) -> ChangeSummary:
        old = self._state
        environment = self._merge(EnvironmentState, old.environment, {**(partial or {}), **fields})
        candidate = old.model_copy(update={"environment": environment})
        return self._commit(candidate, source="manual", updates=("environment",), notify=False, label="set_environment")

    def add_environment_effect(self, effect: EnvironmentEffect | Mapping | str) -> ChangeSummary:
        """Add an active effect. A bare string is taken as the effect name."""
        if isinstance(effect, str):
            effect = EnvironmentEffect(name=effect)
        elif not isinstance(effect, EnvironmentEffect):
            effect = EnvironmentEffect.model_validate(dict(effect))

        old = self._state
        effects = old.environment.active_effects + (effect,)
        candidate = old.model_copy(
            update={"environment": old.environment.model_copy(update={"active_effects": effects})}
        )
        return self._commit(
            candidate, source="manual", updates=("environment",), notify=False, label=f"add effect {effect.name}"
        )

    def remove_environment_effect(self, name: str) -> bool:
        """Remove every active effect with this name. Returns False if none matched."""
        old = self._state
        effects = tuple(e for e in old.environment.active_effects if e.name != name)
        if len(effects) == len(old.environment.active_effects):
            return False
        candidate = old.model_copy(
            update={"environment": old.environment.model_copy(update={"active_effects": effects})}
        )
        self._commit(candidate, source="manual", updates=("environment",), notify=False, label=f"remove effect {name}")
        return True

    # =========================================================================
    # Context
    # =========================================================================

    def set_context(self, partial: Mapping | None = None, **fields) -> ChangeSummary:
        old = self._state
        context = self._merge(ContextState, old.context, {**(partial or {}), **fields})
        candidate = old.model_copy(update={"context": context})
        return self._commit(candidate, source="manual", updates=("context",), notify=False, label="set_context")

    def enter_combat(
        self,
        enemies: list[str] | tuple[str, ...] = (),
        allies: list[str] | tuple[str, ...] = (),
        terrain: str | None = None,
    ) -> ChangeSummary:
        """Start combat at round 1."""
        return self.set_context(
            in_combat=True,
            combat_round=1,
            combat_enemies=tuple(enemies),
            combat_allies=tuple(allies),
            combat_terrain=terrain,
            current_activity="combat",
        )

    def exit_combat(self) -> ChangeSummary:
        return self.set_context(
            in_combat=False,
            combat_round=0,
            combat_enemies=(),
            combat_allies=(),
            combat_terrain=None,
            current_activity="idle",
        )

    def advance_combat_round(self) -> int:
        """Next combat round. Outside combat this does nothing and returns 0."""
        context = self._state.context
        if not context.in_combat:
            return 0
        self.set_context(combat_round=context.combat_round + 1)
        return self._state.context.combat_round

    # =========================================================================
    # Subscribers
    # =========================================================================

    def subscribe(self, subscriber_id: str, callback: Subscriber):
        """
        Register a callback for state changes.

        Returns:
            A closure that unsubscribes this callback
        """
        remove = self.subscribers.subscribe(subscriber_id, callback)
        self._sync_subscriber_count()

        def unsubscribe() -> None:
            remove()
            self._sync_subscriber_count()

        return unsubscribe

    def unsubscribe(self, subscriber_id: str) -> bool:
        removed = self.subscribers.unsubscribe(subscriber_id)
        self._sync_subscriber_count()
        return removed

    def _sync_subscriber_count(self) -> None:
        meta = self._state.meta.model_copy(update={"subscriber_count": self.subscribers.count()})
        self._state = self._state.model_copy(update={"meta": meta})

    # =========================================================================
    # History
    # =========================================================================

    @property
    def history_depth(self) -> int:
        return len(self._state.meta.history)

    def undo(self) -> bool:
        """
        Restore the most recent prior state.

        Returns False when there is nothing to undo. Subscribers are not
        notified.
        """
        history = self._state.meta.history
        if not history:
            return False

        previous, remaining = history[0], history[1:]
        meta = previous.state.meta.model_copy(
            update={"history": remaining, "subscriber_count": self.subscribers.count()}
        )
        self._state = recompute(previous.state.model_copy(update={"meta": meta}))
        log_history(logger, "undo", len(remaining), details=self._state.time.last_known_date)
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def state(self) -> WorldState:
        return self._state

    def get_state(self) -> WorldState:
        """Independent copy of the current state."""
        return self._state.model_copy(deep=True)

    def validate(self) -> list[str]:
        return validate(self._state)

    def get_formatted_date(self, style: str = "full") -> str:
        t = self._state.time
        return calendar.format_date(t.day, t.month, t.year, style)

    def get_formatted_time(self) -> str:
        return self._state.time.formatted_time

    def total_days(self) -> int:
        """Days since the epoch for the current date."""
        t = self._state.time
        return calendar.total_days_since_epoch(t.day, t.month, t.year)

    # =========================================================================
    # Export / Import
    # =========================================================================

    def export_state(self) -> str:
        """The full state, history included, as JSON."""
        payload = self._state.model_dump_json(indent=2)
        log_storage(logger, "export", details=f"{len(payload)} bytes")
        return payload

    def import_state(self, payload: str | bytes) -> bool:
        """
        Replace the state with an exported document.

        Returns False, keeping the current state, if the document is not
        valid JSON or does not fit the state model.
        """
        try:
            imported = WorldState.model_validate_json(payload)
        except (ValidationError, TypeError) as e:
            logger.warning(f"State import failed: {e}")
            log_storage(logger, "import", success=False, details=type(e).__name__)
            return False

        meta = imported.meta.model_copy(update={"subscriber_count": self.subscribers.count()})
        self._state = recompute(imported.model_copy(update={"meta": meta}))
        log_storage(logger, "import", details=self._state.time.last_known_date)
        return True

    # =========================================================================
    # Commit
    # =========================================================================

    def _merge(self, model: type, current, updates: Mapping):
        known = {k: v for k, v in updates.items() if k in model.model_fields}
        ignored = set(updates) - set(known)
        if ignored:
            logger.debug(f"Ignoring unknown {model.__name__} fields: {sorted(ignored)}")
        return model.model_validate({**current.model_dump(), **known})

    def _commit(
        self,
        candidate: WorldState,
        source: str,
        confidence: str = "high",
        updates: tuple[str, ...] = (),
        minutes_advanced: int = 0,
        location_changed: bool | None = None,
        notify: bool = True,
        label: str = "update",
    ) -> ChangeSummary:
        old = self._state
        candidate = recompute(candidate)
        now = datetime.now()

        time_changed = old.time.clock != candidate.time.clock
        if location_changed is None:
            location_changed = old.location != candidate.location
        days_delta = calendar.days_between(old.time.date, candidate.time.date) if time_changed else 0
        should_notify = notify and (time_changed or location_changed)

        time = candidate.time.model_copy(
            update={"total_days_passed": candidate.time.total_days_passed + max(0, days_delta)}
        )
        meta = candidate.meta.model_copy(
            update={
                "last_updated": now,
                "update_source": source,
                "update_confidence": confidence,
                "history": self._pushed_history(old, candidate.meta.history_enabled, candidate.meta.max_history_entries, now),
                "subscriber_count": self.subscribers.count(),
                "last_broadcast": now if should_notify else candidate.meta.last_broadcast,
            }
        )
        self._state = candidate.model_copy(update={"time": time, "meta": meta})

        changes = ChangeSummary(
            time_changed=time_changed,
            location_changed=location_changed,
            days_delta=days_delta,
            minutes_advanced=minutes_advanced,
            updates=updates,
        )

        if time_changed:
            log_time_advance(
                logger,
                source,
                f"{old.time.last_known_date} {old.time.hour:02d}:{old.time.minute:02d}",
                f"{time.last_known_date} {time.hour:02d}:{time.minute:02d}",
                days_delta=days_delta,
            )
        logger.debug(f"Committed {label} | source={source} | updates={list(updates)}")

        if should_notify:
            self.subscribers.notify(
                StateChangeNotification(
                    old_state=old,
                    new_state=self._state,
                    changes=changes,
                    days_delta=days_delta,
                    timestamp=now,
                )
            )
        return changes

    def _pushed_history(
        self,
        old: WorldState,
        enabled: bool,
        capacity: int,
        now: datetime,
    ) -> tuple[HistoryEntry, ...]:
        if not enabled:
            return old.meta.history
        history = (HistoryEntry(state=old.without_history(), timestamp=now),) + old.meta.history
        trimmed = history[:capacity]
        log_history(logger, "push", len(trimmed), details=f"dropped={len(history) - len(trimmed)}")
        return trimmed
