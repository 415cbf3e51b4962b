"""
Calendar engine - pure date arithmetic for the world calendar.

Structure:
- 10 months of 36 days each (360 days)
- 5 intercalary "Vexdays" after Longnight, 6 in special years (year % 8 == 0)
- 8-day weeks ("octaves")
- Two moons: Solara (36-day cycle, keyed off day of year) and
  Nyxara (24-day cycle, keyed off days since epoch)

Month 0 is the Vexday block. It closes the year it belongs to:
36th of Longnight 2847 is followed by Vexday 1 of 2847, then 1st of Vexrise 2848.

Every function here is stateless. Nothing in this module raises for
out-of-range months; callers that need well-formed dates run
chronicle.domain.state.validate first.
"""

import re
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


ERA = "AV"
ERA_LONG = "After Vex"

DAYS_PER_MONTH = 36
MONTHS_PER_YEAR = 10
VEXDAY_COUNT = 5
SPECIAL_YEAR_CYCLE = 8
DAYS_PER_OCTAVE = 8

SOLARA_CYCLE = 36
NYXARA_CYCLE = 24

ALIGNMENT_FULL_THRESHOLD = 90
ALIGNMENT_NEW_THRESHOLD = 10


# =============================================================================
# Static Tables
# =============================================================================


class MonthInfo(BaseModel):
    """One month of the calendar (or the Vexday pseudo-month at index 0)."""

    model_config = ConfigDict(frozen=True)

    index: int
    name: str
    short_name: str
    days: int
    season: str
    description: str = ""
    dominant_force: str = "neutral"
    festivals: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def festival_days(self) -> dict[int, str]:
        """Map of day number to festival name, for festivals with a fixed day."""
        result: dict[int, str] = {}
        for festival in self.festivals:
            match = _FESTIVAL_DAY.search(festival)
            if match:
                result[int(match.group(1))] = festival.split(" (")[0]
        return result


class WeekDay(BaseModel):
    """One day of the 8-day octave."""

    model_config = ConfigDict(frozen=True)

    index: int
    name: str
    short_name: str
    alt_name: str | None = None
    description: str = ""
    holy_to: str | None = None


class MoonPhase(BaseModel):
    """Phase of one moon on a given date."""

    model_config = ConfigDict(frozen=True)

    moon: str
    phase: str
    day_in_cycle: int
    percent_full: int


class CalendarDate(NamedTuple):
    """A (day, month, year) triple. Month 0 is the Vexday block."""

    day: int
    month: int
    year: int


_FESTIVAL_DAY = re.compile(r"\((\d+)(?:st|nd|rd|th)?\)")

MONTHS: tuple[MonthInfo, ...] = (
    MonthInfo(
        index=1, name="Vexrise", short_name="Vex", days=36, season="winter",
        description="The first month. Celebrates Vex's awakening and the new year. Cold but hopeful.",
        dominant_force="Vex",
        festivals=("Year's Turn (1st)", "Awakening Festival (15th)"),
    ),
    MonthInfo(
        index=2, name="Frosthold", short_name="Fro", days=36, season="winter",
        description="Deep winter. The world sleeps under ice. Nyx's influence lingers.",
        dominant_force="Nyx",
        festivals=("Night of Ancestors (18th)",),
    ),
    MonthInfo(
        index=3, name="Thawbreak", short_name="Thw", days=36, season="spring",
        description="Winter's grip loosens. Rivers crack. Life stirs beneath snow.",
        festivals=("Thaw Festival (20th)",),
    ),
    MonthInfo(
        index=4, name="Seedsow", short_name="See", days=36, season="spring",
        description="Planting season. Farmers pray to nature spirits. Growth magic peaks.",
        dominant_force="nature",
        festivals=("Planting Day (1st)", "Green Moon (varies)"),
    ),
    MonthInfo(
        index=5, name="Bloomtide", short_name="Blo", days=36, season="spring",
        description="Peak spring. Flowers blanket the world. Fey are most active.",
        dominant_force="fey",
        festivals=("Bloom Festival (15th)", "Lover's Night (30th)"),
    ),
    MonthInfo(
        index=6, name="Solpeak", short_name="Sol", days=36, season="summer",
        description="Solarus's triumph. Longest days. Light magic at maximum. Undead weakest.",
        dominant_force="Solarus",
        festivals=("Solstice (18th) - Solarus's Holy Day", "Day of Burning (36th)"),
    ),
    MonthInfo(
        index=7, name="Highfire", short_name="Hig", days=36, season="summer",
        description="Scorching heat. Deserts expand. Fire elementals roam freely.",
        dominant_force="elemental",
        festivals=("Fire Walking (10th)",),
    ),
    MonthInfo(
        index=8, name="Harvestgold", short_name="Har", days=36, season="autumn",
        description="Gathering time. Golden fields. Gratitude to land and System alike.",
        festivals=("Harvest Festival (20th-25th)", "Vex's Gratitude (36th)"),
    ),
    MonthInfo(
        index=9, name="Shadowrise", short_name="Sha", days=36, season="autumn",
        description="Darkness grows. Nyx's power swells. Spirits grow restless.",
        dominant_force="Nyx",
        festivals=("Night of Veils (18th) - spirits walk", "Shadow's Eve (36th)"),
    ),
    MonthInfo(
        index=10, name="Longnight", short_name="Lon", days=36, season="winter",
        description="Nyx's reign. Shortest days. Shadow magic peaks. Solarus's faithful endure.",
        dominant_force="Nyx",
        festivals=("Longest Night (18th) - Nyx's Holy Day", "Eve of Turning (36th)"),
    ),
)

VEXDAY_NAMES: tuple[str, ...] = ("Remembrance", "Chaos", "Binding", "Revelation", "Renewal")
VEXDAY_EXTRA_NAME = "Vex's Whim"
VEXDAY_DESCRIPTION = (
    "Days outside the normal calendar, between Longnight and Vexrise. "
    "Time itself feels thin. Magic behaves strangely."
)

OCTAVE: tuple[WeekDay, ...] = (
    WeekDay(index=0, name="Firstday", short_name="Fir", alt_name="Vexday",
            description="Week begins. Guild meetings and weekly quest resets.", holy_to="Vex"),
    WeekDay(index=1, name="Solday", short_name="Sol",
            description="Solarus's holy day. Churches of light hold services.", holy_to="Solarus"),
    WeekDay(index=2, name="Forgeday", short_name="For",
            description="Day of creation. Smiths and artificers at peak productivity."),
    WeekDay(index=3, name="Wardday", short_name="War",
            description="Military day. Training grounds active. Arena matches scheduled.",
            holy_to="war deities"),
    WeekDay(index=4, name="Tradeday", short_name="Tra", alt_name="Marketday",
            description="Commerce peaks. Markets busiest.", holy_to="commerce deities"),
    WeekDay(index=5, name="Courtday", short_name="Cou",
            description="Law and politics. Courts in session.", holy_to="justice deities"),
    WeekDay(index=6, name="Nyxday", short_name="Nyx",
            description="Nyx's holy day. Shadow temples active.", holy_to="Nyx"),
    WeekDay(index=7, name="Restday", short_name="Res",
            description="Rest and family. Most businesses closed. Taverns busy."),
)

MOON_PHASES: tuple[str, ...] = (
    "new",
    "waxing crescent",
    "first quarter",
    "waxing gibbous",
    "full",
    "waning gibbous",
    "last quarter",
    "waning crescent",
)


# =============================================================================
# Year / Month Structure
# =============================================================================


def is_special_year(year: int) -> bool:
    """Every 8th year the Vexday block gains an extra day."""
    return year % SPECIAL_YEAR_CYCLE == 0


def vexday_count(year: int) -> int:
    """Length of the Vexday block that closes the given year."""
    return VEXDAY_COUNT + 1 if is_special_year(year) else VEXDAY_COUNT


def days_in_year(year: int) -> int:
    return MONTHS_PER_YEAR * DAYS_PER_MONTH + vexday_count(year)


def days_in_month(month: int, year: int) -> int:
    """Length of a month, or of the Vexday block when month is 0."""
    if month == 0:
        return vexday_count(year)
    info = get_month(month)
    return info.days if info else DAYS_PER_MONTH


def get_month(index: int) -> MonthInfo | None:
    """Get a month by index (1-10). Index 0 yields the Vexday pseudo-month."""
    if index == 0:
        return MonthInfo(
            index=0,
            name="Vexdays",
            short_name="VEX",
            days=VEXDAY_COUNT,
            season="vexdays",
            description=VEXDAY_DESCRIPTION,
            dominant_force="Vex",
            festivals=VEXDAY_NAMES,
        )
    if 1 <= index <= MONTHS_PER_YEAR:
        return MONTHS[index - 1]
    return None


def get_season(month: int) -> str:
    info = get_month(month)
    return info.season if info else "unknown"


def next_month(month: int, year: int) -> tuple[int, int]:
    """The (month, year) that follows. Longnight -> Vexdays -> Vexrise of next year."""
    if month == 0:
        return 1, year + 1
    if month >= MONTHS_PER_YEAR:
        return 0, year
    return month + 1, year


# =============================================================================
# Day Counting
# =============================================================================


def day_of_year(day: int, month: int, year: int) -> int:
    """Day of the year, 1-365 (366 in special years). Vexdays follow day 360."""
    if month == 0:
        return MONTHS_PER_YEAR * DAYS_PER_MONTH + day
    return sum(m.days for m in MONTHS[: max(month - 1, 0)]) + day


def total_days_since_epoch(day: int, month: int, year: int) -> int:
    """Days elapsed since the calendar epoch; 1st of Vexrise, 1 AV is day 1."""
    whole_years = max(year - 1, 0)
    # Every whole year contributes its months plus its own Vexday block.
    total = whole_years * (MONTHS_PER_YEAR * DAYS_PER_MONTH + VEXDAY_COUNT)
    total += whole_years // SPECIAL_YEAR_CYCLE
    return total + day_of_year(day, month, year)


def days_between(start: CalendarDate, end: CalendarDate) -> int:
    """Signed number of days from start to end."""
    return total_days_since_epoch(*end) - total_days_since_epoch(*start)


def add_days(day: int, month: int, year: int, days: int) -> CalendarDate:
    """
    Move a date forward by a number of days.

    Walks one month (or Vexday block) at a time so that block lengths and
    special years are honoured exactly; the result always satisfies
    total_days_since_epoch(result) == total_days_since_epoch(start) + days.
    """
    if days < 0:
        raise ValueError(f"Cannot add a negative number of days: {days}")

    remaining = days
    while remaining > 0:
        left_in_month = days_in_month(month, year) - day
        if remaining <= left_in_month:
            day += remaining
            remaining = 0
        else:
            remaining -= left_in_month + 1
            day = 1
            month, year = next_month(month, year)

    return CalendarDate(day=day, month=month, year=year)


# =============================================================================
# Octave
# =============================================================================


def week_index(day: int, month: int, year: int) -> int:
    """Index (0-7) of the octave day."""
    return total_days_since_epoch(day, month, year) % DAYS_PER_OCTAVE


def week_day(day: int, month: int, year: int) -> WeekDay:
    return OCTAVE[week_index(day, month, year)]


# =============================================================================
# Moons
# =============================================================================


def moon_fullness(day_in_cycle: int, cycle_length: int) -> int:
    """How full a moon appears (0-100): a triangular wave peaking mid-cycle."""
    half = cycle_length / 2
    if day_in_cycle <= half:
        return round(day_in_cycle / half * 100)
    return round((cycle_length - day_in_cycle) / half * 100)


def _phase_for(moon: str, day_in_cycle: int, cycle_length: int) -> MoonPhase:
    phase_index = min(int(day_in_cycle / (cycle_length / len(MOON_PHASES))), len(MOON_PHASES) - 1)
    return MoonPhase(
        moon=moon,
        phase=MOON_PHASES[phase_index],
        day_in_cycle=day_in_cycle,
        percent_full=moon_fullness(day_in_cycle, cycle_length),
    )


def solara_phase(day: int, month: int, year: int) -> MoonPhase:
    """Solara, the golden moon: 36-day cycle keyed off the day of the year."""
    day_in_cycle = day_of_year(day, month, year) % SOLARA_CYCLE
    return _phase_for("Solara", day_in_cycle, SOLARA_CYCLE)


def nyxara_phase(day: int, month: int, year: int) -> MoonPhase:
    """Nyxara, the silver moon: 24-day cycle keyed off days since epoch."""
    day_in_cycle = total_days_since_epoch(day, month, year) % NYXARA_CYCLE
    return _phase_for("Nyxara", day_in_cycle, NYXARA_CYCLE)


def moon_alignment(day: int, month: int, year: int) -> tuple[str, ...] | None:
    """
    Special alignments for a date.

    "dual_full" when both moons are at least 90% full, "dual_new" when both
    are at most 10%. Returns None when neither holds.
    """
    solara = solara_phase(day, month, year)
    nyxara = nyxara_phase(day, month, year)

    alignments: list[str] = []
    if solara.percent_full >= ALIGNMENT_FULL_THRESHOLD and nyxara.percent_full >= ALIGNMENT_FULL_THRESHOLD:
        alignments.append("dual_full")
    if solara.percent_full <= ALIGNMENT_NEW_THRESHOLD and nyxara.percent_full <= ALIGNMENT_NEW_THRESHOLD:
        alignments.append("dual_new")

    return tuple(alignments) if alignments else None


# =============================================================================
# Holidays
# =============================================================================


def month_festivals(month: int) -> tuple[str, ...]:
    if month == 0:
        return tuple(f"Vexday of {name}" for name in VEXDAY_NAMES)
    info = get_month(month)
    return info.festivals if info else ()


def is_holiday(day: int, month: int) -> bool:
    """Every Vexday is a holiday; otherwise only fixed-day festivals count."""
    if month == 0:
        return True
    info = get_month(month)
    if info is None:
        return False
    return day in info.festival_days


def holiday_name(day: int, month: int) -> str | None:
    if month == 0:
        return f"Vexday of {vexday_name(day)}"
    info = get_month(month)
    if info is None:
        return None
    return info.festival_days.get(day)


# =============================================================================
# Formatting
# =============================================================================


def ordinal_suffix(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def vexday_name(day: int) -> str:
    """Name of a Vexday; the 6th (special-year) day is Vex's Whim."""
    if 1 <= day <= len(VEXDAY_NAMES):
        return VEXDAY_NAMES[day - 1]
    return VEXDAY_EXTRA_NAME


def format_date(day: int, month: int, year: int, style: str = "full") -> str:
    """
    Render a date.

    Styles: full ("15th of Bloomtide, 2847 AV"), long ("15th Bloomtide 2847 AV"),
    short ("15 Blo 2847"), numeric ("2847-05-15"), narrative
    ("the 15th day of Bloomtide in the year 2847 After Vex").
    Vexdays render as "Vexday of Chaos, 2847 AV", "Vexday 2, 2847 AV" (short)
    or "2847-00-02" (numeric). Unknown styles fall back to full.
    """
    if month == 0:
        if style == "short":
            return f"Vexday {day}, {year} {ERA}"
        if style == "numeric":
            return f"{year}-00-{day:02d}"
        return f"Vexday of {vexday_name(day)}, {year} {ERA}"

    suffix = ordinal_suffix(day)
    info = get_month(month)
    name = info.name if info else f"Month {month}"
    short_name = info.short_name if info else str(month)

    if style == "long":
        return f"{day}{suffix} {name} {year} {ERA}"
    if style == "short":
        return f"{day} {short_name} {year}"
    if style == "numeric":
        return f"{year}-{month:02d}-{day:02d}"
    if style == "narrative":
        return f"the {day}{suffix} day of {name} in the year {year} {ERA_LONG}"
    return f"{day}{suffix} of {name}, {year} {ERA}"


# =============================================================================
# Parsing
# =============================================================================

_NUMERIC_DATE = re.compile(r"\b(\d+)-(\d{2})-(\d{2})\b")
_PROSE_DATE = re.compile(
    r"(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(\w+),?\s*(\d{4})\s*(?:AV|AC)",
    re.IGNORECASE,
)
_VEXDAY_DATE = re.compile(
    r"Vexday\s+(?:of\s+)?([\w']+(?:\s[\w']+)?)?,?\s*(\d{4})\s*(?:AV|AC)",
    re.IGNORECASE,
)


def resolve_month_name(name: str | None) -> int | None:
    """Resolve a month name or short name (case-insensitive). "Vexday(s)" is 0."""
    if not name:
        return None
    normalized = name.strip().lower()
    if normalized in ("vexday", "vexdays"):
        return 0
    for month in MONTHS:
        if normalized in (month.name.lower(), month.short_name.lower()):
            return month.index
    return None


def resolve_vexday_name(name: str | None) -> int | None:
    """Resolve a Vexday name to its day number (1-6)."""
    if not name:
        return None
    normalized = name.strip().lower()
    for i, vexday in enumerate(VEXDAY_NAMES):
        if vexday.lower() == normalized:
            return i + 1
    if normalized == VEXDAY_EXTRA_NAME.lower():
        return len(VEXDAY_NAMES) + 1
    return None


def parse_date(text: str) -> CalendarDate | None:
    """
    Parse a date string produced by format_date (or written by hand).

    Tries, in order: numeric "2847-05-15", prose "15th of Bloomtide, 2847 AV",
    and Vexday "Vexday of Chaos, 2847 AV". Returns None if nothing matches.
    """
    if not text:
        return None

    numeric = _NUMERIC_DATE.search(text)
    if numeric:
        return CalendarDate(
            day=int(numeric.group(3)),
            month=int(numeric.group(2)),
            year=int(numeric.group(1)),
        )

    prose = _PROSE_DATE.search(text)
    if prose:
        month = resolve_month_name(prose.group(2))
        if month is not None:
            return CalendarDate(day=int(prose.group(1)), month=month, year=int(prose.group(3)))

    vexday = _VEXDAY_DATE.search(text)
    if vexday:
        marker = vexday.group(1) or ""
        if marker.isdigit():
            day = int(marker)
        else:
            day = resolve_vexday_name(marker) or 1
        return CalendarDate(day=day, month=0, year=int(vexday.group(2)))

    return None
