"""
World state document - the canonical shape of everything the tracker knows.

A WorldState has five parts:
- time: authoritative date/clock fields plus derived calendar data
- location: where the story is, travel and dungeon status
- environment: weather and ambient conditions
- context: who is present and what they are doing
- meta: update bookkeeping and the undo history

Every model is frozen. Derived fields are only ever written by recompute(),
which is a pure function of the authoritative fields.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from . import calendar
from .calendar import MoonPhase, WeekDay


DEFAULT_YEAR = 2847
DEFAULT_HISTORY_CAPACITY = 50

URBAN_SETTLEMENT_TYPES = ("capital", "city", "town")


# =============================================================================
# Time
# =============================================================================


class TimeState(BaseModel):
    """Date and clock. year/month/day/hour/minute are authoritative."""

    model_config = ConfigDict(frozen=True)

    year: int = DEFAULT_YEAR
    month: int = 1  # 1-10, 0 = Vexdays
    day: int = 1
    hour: int = 12
    minute: int = 0
    era: str = calendar.ERA

    # Derived
    season: str = "winter"
    time_of_day: str = "midday"
    week_day: WeekDay | None = None
    week_day_index: int = 0
    moon_solara: MoonPhase | None = None
    moon_nyxara: MoonPhase | None = None
    moon_alignment: tuple[str, ...] | None = None
    is_holiday: bool = False
    holiday_name: str | None = None
    formatted_date: str = ""
    formatted_time: str = ""
    last_known_date: str | None = None

    # Session tracking
    session_start_date: str | None = None
    total_days_passed: int = 0

    @property
    def date(self) -> calendar.CalendarDate:
        return calendar.CalendarDate(day=self.day, month=self.month, year=self.year)

    @property
    def clock(self) -> tuple[int, int, int, int, int]:
        """Authoritative fields, for change detection."""
        return (self.year, self.month, self.day, self.hour, self.minute)


# =============================================================================
# Location
# =============================================================================


class DungeonState(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    type: str | None = None  # natural/arcane/divine/corrupted/ancient
    floor: int | None = None
    zone: str | None = None
    danger_level: str | None = None  # trivial/easy/moderate/hard/deadly/legendary
    is_cleared: bool = False


class TravelRecord(BaseModel):
    """A journey in progress."""

    model_config = ConfigDict(frozen=True)

    origin: str | None = None
    destination: str | None = None
    mode: str | None = None  # walking/riding/carriage/sailing/flying/teleport
    start_date: str | None = None  # numeric date
    estimated_days: int | None = None


class LocationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Macro scale
    continent: str | None = "Aethermain"
    nation: str | None = None
    region: str | None = None

    # Settlement scale
    settlement: str | None = None
    settlement_type: str | None = None  # capital/city/town/village/outpost/camp
    district: str | None = None

    # Micro scale
    specific_location: str | None = None
    location_type: str = "outdoor"  # indoor/outdoor/underground/underwater/aerial/planar

    # Status (is_urban and is_wilderness are derived)
    is_wilderness: bool = True
    is_urban: bool = False
    is_safe_zone: bool = False
    is_dungeon: bool = False
    controlling_faction: str | None = None
    dungeon: DungeonState | None = None

    # Travel
    is_in_transit: bool = False
    travel: TravelRecord | None = None

    @property
    def display_name(self) -> str | None:
        """Most specific name available for the current location."""
        return self.specific_location or self.settlement or self.region or self.nation or self.continent


# =============================================================================
# Environment
# =============================================================================


class EnvironmentEffect(BaseModel):
    """A timed environmental effect, e.g. a mana storm or a blood moon."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str = "magical"
    severity: str = "moderate"
    duration: str | None = None


class EnvironmentState(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Weather: clear/cloudy/overcast/rain/storm/snow/blizzard/fog/mist/windy/hail/magical
    weather: str = "clear"
    weather_severity: str = "normal"
    temperature: str = "mild"
    wind: str = "calm"

    visibility: str = "good"
    light_level: str = "bright"
    light_source: str = "natural"

    magic_density: str = "normal"  # void/low/normal/high/saturated/wild
    magic_type: str | None = None
    ambient_danger: str = "none"
    ambient_mood: str = "neutral"

    active_effects: tuple[EnvironmentEffect, ...] = Field(default_factory=tuple)


# =============================================================================
# Social Context
# =============================================================================


class ContextState(BaseModel):
    model_config = ConfigDict(frozen=True)

    party_members: tuple[str, ...] = Field(default_factory=tuple)
    companions_present: tuple[str, ...] = Field(default_factory=tuple)
    npcs_present: tuple[str, ...] = Field(default_factory=tuple)
    npcs_nearby: tuple[str, ...] = Field(default_factory=tuple)

    social_context: str = "neutral"
    crowd_density: str = "empty"
    social_tension: str = "relaxed"  # relaxed/normal/tense/hostile/dangerous

    current_activity: str = "idle"
    activity_details: str | None = None

    # Combat
    in_combat: bool = False
    combat_round: int = 0
    combat_enemies: tuple[str, ...] = Field(default_factory=tuple)
    combat_allies: tuple[str, ...] = Field(default_factory=tuple)
    combat_terrain: str | None = None

    # Dialogue
    in_dialogue: bool = False
    dialogue_partner: str | None = None
    dialogue_tone: str | None = None


# =============================================================================
# Meta
# =============================================================================


class MetaState(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_updated: datetime | None = None
    update_source: str = "manual"  # manual/parsed/travel/import
    update_confidence: str = "high"

    history_enabled: bool = True
    max_history_entries: int = DEFAULT_HISTORY_CAPACITY
    # Newest first. Entries never carry their own history.
    history: tuple["HistoryEntry", ...] = Field(default_factory=tuple)

    last_broadcast: datetime | None = None
    subscriber_count: int = 0


class WorldState(BaseModel):
    """The complete world state document."""

    model_config = ConfigDict(frozen=True)

    time: TimeState = Field(default_factory=TimeState)
    location: LocationState = Field(default_factory=LocationState)
    environment: EnvironmentState = Field(default_factory=EnvironmentState)
    context: ContextState = Field(default_factory=ContextState)
    meta: MetaState = Field(default_factory=MetaState)

    def without_history(self) -> "WorldState":
        """Copy of this state with an empty history stack."""
        return self.model_copy(update={"meta": self.meta.model_copy(update={"history": ()})})


class HistoryEntry(BaseModel):
    """A prior state kept for undo."""

    model_config = ConfigDict(frozen=True)

    state: WorldState
    timestamp: datetime


MetaState.model_rebuild()
WorldState.model_rebuild()
HistoryEntry.model_rebuild()


# =============================================================================
# Clock Labels
# =============================================================================


def time_of_day_for_hour(hour: int) -> str:
    """Label for an hour of the day."""
    if 4 <= hour < 6:
        return "dawn"
    if 6 <= hour < 9:
        return "early morning"
    if 9 <= hour < 12:
        return "morning"
    if hour == 12:
        return "midday"
    if 12 < hour < 15:
        return "early afternoon"
    if 15 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 20:
        return "evening"
    if 20 <= hour < 22:
        return "night"
    if hour >= 22 or hour < 2:
        return "late night"
    return "midnight"  # 2-3


def format_time(hour: int, minute: int = 0) -> str:
    """Render a clock time, e.g. "7:05 PM (evening)"."""
    display_hour = hour % 12 or 12
    period = "AM" if hour < 12 else "PM"
    return f"{display_hour}:{minute:02d} {period} ({time_of_day_for_hour(hour)})"


# =============================================================================
# Factory / Derivation / Validation
# =============================================================================


def create_default(history_capacity: int = DEFAULT_HISTORY_CAPACITY) -> WorldState:
    """A fresh state: 1st of Vexrise 2847 AV at midday, in the wilderness of Aethermain."""
    state = WorldState(meta=MetaState(max_history_entries=history_capacity))
    return recompute(state)


def recompute(state: WorldState) -> WorldState:
    """
    Fill every derived field from the authoritative ones.

    Pure and idempotent: recompute(recompute(s)) == recompute(s).
    """
    t = state.time
    day, month, year = t.day, t.month, t.year

    time = t.model_copy(
        update={
            "season": calendar.get_season(month),
            "time_of_day": time_of_day_for_hour(t.hour),
            "week_day": calendar.week_day(day, month, year),
            "week_day_index": calendar.week_index(day, month, year),
            "moon_solara": calendar.solara_phase(day, month, year),
            "moon_nyxara": calendar.nyxara_phase(day, month, year),
            "moon_alignment": calendar.moon_alignment(day, month, year),
            "is_holiday": calendar.is_holiday(day, month),
            "holiday_name": calendar.holiday_name(day, month) if calendar.is_holiday(day, month) else None,
            "formatted_date": calendar.format_date(day, month, year, "full"),
            "formatted_time": format_time(t.hour, t.minute),
            "last_known_date": calendar.format_date(day, month, year, "numeric"),
        }
    )

    loc = state.location
    location = loc.model_copy(
        update={
            "is_urban": loc.settlement_type in URBAN_SETTLEMENT_TYPES,
            "is_wilderness": not loc.settlement and not loc.is_dungeon,
        }
    )

    return state.model_copy(update={"time": time, "location": location})


def validate(state: WorldState) -> list[str]:
    """
    Check the authoritative time fields against calendar bounds.

    Returns a list of violation messages; empty when the state is well formed.
    Never raises.
    """
    errors: list[str] = []
    t = state.time

    if t.year < 1:
        errors.append(f"Invalid year: {t.year}")

    if t.month < 0 or t.month > calendar.MONTHS_PER_YEAR:
        errors.append(f"Invalid month: {t.month}")
        if t.day < 1 or t.day > calendar.DAYS_PER_MONTH:
            errors.append(f"Invalid day: {t.day}")
    else:
        limit = calendar.days_in_month(t.month, t.year)
        if t.day < 1 or t.day > limit:
            errors.append(f"Invalid day: {t.day} (month {t.month} has {limit} days)")

    if t.hour < 0 or t.hour > 23:
        errors.append(f"Invalid hour: {t.hour}")
    if t.minute < 0 or t.minute > 59:
        errors.append(f"Invalid minute: {t.minute}")

    return errors
