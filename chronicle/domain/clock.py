"""
Clock arithmetic on TimeState.

The primitives chain upward: minutes carry into hours, hours into days,
and days walk one month (or Vexday block) at a time via advance_months.
All functions return a new TimeState; derived fields are left for
state.recompute to refresh.
"""

from . import calendar
from .state import TimeState


MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24

# Units accepted by advance_by, with their length in days where fixed
TIME_UNITS = ("minute", "hour", "day", "week", "octave", "month", "year")
DAYS_PER_UNIT = {"day": 1, "week": 7, "octave": calendar.DAYS_PER_OCTAVE}


def _require_forward(amount: int, unit: str) -> None:
    if amount < 0:
        raise ValueError(f"Cannot rewind time: {amount} {unit}(s)")


def advance_minutes(time: TimeState, minutes: int) -> TimeState:
    _require_forward(minutes, "minute")
    hours, minute = divmod(time.minute + minutes, MINUTES_PER_HOUR)
    time = time.model_copy(update={"minute": minute})
    return advance_hours(time, hours) if hours else time


def advance_hours(time: TimeState, hours: int) -> TimeState:
    _require_forward(hours, "hour")
    days, hour = divmod(time.hour + hours, HOURS_PER_DAY)
    time = time.model_copy(update={"hour": hour})
    return advance_days(time, days) if days else time


def advance_days(time: TimeState, days: int) -> TimeState:
    """Walk forward day by day, one month or Vexday block per step."""
    _require_forward(days, "day")
    remaining = days
    while remaining > 0:
        left_in_month = calendar.days_in_month(time.month, time.year) - time.day
        if remaining <= left_in_month:
            time = time.model_copy(update={"day": time.day + remaining})
            remaining = 0
        else:
            remaining -= left_in_month + 1
            time = advance_months(time.model_copy(update={"day": 1}), 1)
    return time


def advance_months(time: TimeState, months: int) -> TimeState:
    """
    Step month by month: Longnight wraps to the Vexday block (month 0),
    which wraps to Vexrise of the next year.

    The day of month is kept, except that it is pulled back to the last
    day of a shorter destination block (a Vexday block has 5 or 6 days).
    """
    _require_forward(months, "month")
    month, year = time.month, time.year
    for _ in range(months):
        month, year = calendar.next_month(month, year)

    day = min(time.day, calendar.days_in_month(month, year)) if months else time.day
    return time.model_copy(update={"month": month, "year": year, "day": day})


def advance_years(time: TimeState, years: int) -> TimeState:
    _require_forward(years, "year")
    year = time.year + years
    day = time.day
    if time.month == 0:
        day = min(day, calendar.vexday_count(year))
    return time.model_copy(update={"year": year, "day": day})


def advance_by(time: TimeState, amount: int, unit: str) -> TimeState:
    """
    Advance by an amount of a named unit.

    Units: minute, hour, day, week (7 days), octave (8 days), month, year.
    Plural forms are accepted. Raises ValueError for unknown units.
    """
    unit = normalize_unit(unit)
    if unit == "minute":
        return advance_minutes(time, amount)
    if unit == "hour":
        return advance_hours(time, amount)
    if unit in DAYS_PER_UNIT:
        return advance_days(time, amount * DAYS_PER_UNIT[unit])
    if unit == "month":
        return advance_months(time, amount)
    return advance_years(time, amount)


def normalize_unit(unit: str) -> str:
    """Lowercase and singularize a unit name; raise ValueError if unknown."""
    normalized = unit.strip().lower()
    if normalized.endswith("s") and normalized[:-1] in TIME_UNITS:
        normalized = normalized[:-1]
    if normalized not in TIME_UNITS:
        raise ValueError(f"Unknown time unit: {unit!r}")
    return normalized
