"""Domain layer: the calendar, the world state document, and clock arithmetic."""

from . import calendar, clock
from .calendar import CalendarDate, MonthInfo, MoonPhase, WeekDay
from .state import (
    ContextState,
    DungeonState,
    EnvironmentEffect,
    EnvironmentState,
    HistoryEntry,
    LocationState,
    MetaState,
    TimeState,
    TravelRecord,
    WorldState,
    create_default,
    format_time,
    recompute,
    time_of_day_for_hour,
    validate,
)

__all__ = [
    "calendar",
    "clock",
    "CalendarDate",
    "MonthInfo",
    "MoonPhase",
    "WeekDay",
    "ContextState",
    "DungeonState",
    "EnvironmentEffect",
    "EnvironmentState",
    "HistoryEntry",
    "LocationState",
    "MetaState",
    "TimeState",
    "TravelRecord",
    "WorldState",
    "create_default",
    "format_time",
    "recompute",
    "time_of_day_for_hour",
    "validate",
]
