"""
Matcher Registry - declarative registration of narrative pattern matchers.

Two kinds of matcher:
- Header matchers recognise a bracketed date/location header. They are tried
  in registration order and the first one that builds a HeaderMatch wins.
- Phrase matchers recognise one independent category each (time skip,
  location change, weather, ...). Every category is scanned on its own and
  keeps either its first or its last match.

The patterns are the contract with whoever writes the narrative, so they
change only when the text producers change.
"""

import re
from dataclasses import dataclass
from typing import Callable, Literal

from chronicle.domain import calendar

from .fragments import (
    DungeonFloor,
    HeaderMatch,
    LocationChange,
    MoonReference,
    ParsedTime,
    TimeOfDayMention,
    TimeSkip,
    WeatherMention,
)
from .vocabulary import (
    collapse,
    estimate_hour_from_time_of_day,
    normalize_weather,
    parse_location,
    parse_month,
    parse_number,
)


@dataclass
class HeaderMatcher:
    """Definition of a header format."""

    name: str
    pattern: re.Pattern
    builder: Callable[[re.Match], HeaderMatch | None]


@dataclass
class PhraseMatcher:
    """Definition of an independent phrase category."""

    name: str
    pattern: re.Pattern
    builder: Callable[[re.Match], object | None]
    keep: Literal["first", "last"] = "last"


# Ordered: earlier headers take precedence
HEADER_MATCHERS: list[HeaderMatcher] = []

PHRASE_MATCHERS: dict[str, PhraseMatcher] = {}


def register_header_matcher(
    name: str,
    pattern: str,
    builder: Callable[[re.Match], HeaderMatch | None],
) -> None:
    """
    Register a header format at the end of the precedence list.

    Args:
        name: Header format name (e.g., "decorated")
        pattern: Regex source, compiled case-insensitively
        builder: Turns a match into a HeaderMatch, or None to let the next
            format try
    """
    HEADER_MATCHERS.append(
        HeaderMatcher(name=name, pattern=re.compile(pattern, re.IGNORECASE), builder=builder)
    )


def register_phrase_matcher(
    name: str,
    pattern: str,
    builder: Callable[[re.Match], object | None],
    keep: Literal["first", "last"] = "last",
    flags: int = re.IGNORECASE,
) -> None:
    """
    Register a phrase category.

    Args:
        name: Category name (e.g., "time_skip")
        pattern: Regex source
        builder: Turns a match into a fragment, or None to discard it
        keep: Which match wins when the category fires more than once
        flags: Regex flags; pass 0 when the pattern scopes its own
    """
    PHRASE_MATCHERS[name] = PhraseMatcher(
        name=name,
        pattern=re.compile(pattern, flags),
        builder=builder,
        keep=keep,
    )


def get_matcher_names() -> list[str]:
    """Header formats in precedence order, then phrase categories."""
    return [m.name for m in HEADER_MATCHERS] + list(PHRASE_MATCHERS.keys())


# =============================================================================
# Header Builders
# =============================================================================


def _int(value: str | None) -> int | None:
    return int(value) if value else None


def build_decorated_header(match: re.Match) -> HeaderMatch | None:
    """[Location: X | 15th of Month, 2847 AC | Evening, 7th hour, 30 min | Weather: rain]"""
    month = parse_month(match.group(3))
    if month is None:
        return None

    time_of_day = collapse(match.group(5))
    explicit_hour = _int(match.group(6))
    hour = explicit_hour if explicit_hour is not None else estimate_hour_from_time_of_day(time_of_day)

    return HeaderMatch(
        format="decorated",
        raw=match.group(0),
        time=ParsedTime(
            day=int(match.group(2)),
            month=month,
            year=int(match.group(4)),
            hour=hour,
            minute=_int(match.group(7)) or 0,
            time_of_day=time_of_day,
        ),
        location=parse_location(match.group(1)),
        weather=normalize_weather(match.group(8)),
    )


def build_full_header(match: re.Match) -> HeaderMatch | None:
    """[X, 15th of Month, 2847 AV, Afternoon]"""
    month = parse_month(match.group(3))
    if month is None:
        return None

    time_of_day = collapse(match.group(5)) if match.group(5) else None
    return HeaderMatch(
        format="full",
        raw=match.group(0),
        time=ParsedTime(
            day=int(match.group(2)),
            month=month,
            year=int(match.group(4)),
            hour=estimate_hour_from_time_of_day(time_of_day),
            minute=0,
            time_of_day=time_of_day,
        ),
        location=parse_location(match.group(1)),
    )


def build_alternate_header(match: re.Match) -> HeaderMatch | None:
    """[X, Month 15, 2847 AV]"""
    month = parse_month(match.group(2))
    if month is None:
        return None

    return HeaderMatch(
        format="alternate",
        raw=match.group(0),
        time=ParsedTime(day=int(match.group(3)), month=month, year=int(match.group(4))),
        location=parse_location(match.group(1)),
    )


def build_vexday_header(match: re.Match) -> HeaderMatch | None:
    """[X, Vexday of Chaos, 2847 AV] - unknown names land on the first Vexday."""
    name = match.group(2).strip()
    return HeaderMatch(
        format="vexday",
        raw=match.group(0),
        time=ParsedTime(
            day=calendar.resolve_vexday_name(name) or 1,
            month=0,
            year=int(match.group(3)),
            vexday_name=name,
        ),
        location=parse_location(match.group(1)),
    )


register_header_matcher(
    name="decorated",
    pattern=(
        r"\[Location:\s*([^|]+)\s*\|"
        r"\s*(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(\w+),?\s*(\d{4})\s*A[CV]?\s*\|"
        r"\s*(\w+)(?:,\s*(\d{1,2})(?:st|nd|rd|th)?\s*hour)?(?:,?\s*(\d{1,2})\s*(?:min(?:ute)?s?)?)?\s*"
        r"(?:\|\s*Weather:\s*([^|\]]+))?\]"
    ),
    builder=build_decorated_header,
)

register_header_matcher(
    name="full",
    pattern=(
        r"\[([^,\]]+),\s*(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(\w+),?\s*(\d{4})\s*(?:AV|AC)"
        r"(?:,\s*([^\]]+))?\]"
    ),
    builder=build_full_header,
)

register_header_matcher(
    name="alternate",
    pattern=r"\[([^,\]]+),\s*(\w+)\s+(\d{1,2}),?\s*(\d{4})\s*(?:AV|AC)",
    builder=build_alternate_header,
)

register_header_matcher(
    name="vexday",
    pattern=r"\[([^,\]]+),\s*Vexday\s+(?:of\s+)?([\w']+(?:\s[\w']+)?),?\s*(\d{4})\s*(?:AV|AC)",
    builder=build_vexday_header,
)


# =============================================================================
# Phrase Builders
# =============================================================================

_NUMBER = (
    r"\d+|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve"
    r"|fifteen|twenty|thirty|forty-five|forty|several|a\s+few|many"
)


def build_time_skip(match: re.Match) -> TimeSkip | None:
    amount = parse_number(match.group(1))
    if amount is None:
        return None
    return TimeSkip(raw=match.group(0), amount=amount, unit=match.group(2).lower())


def build_location_change(match: re.Match) -> LocationChange | None:
    location = parse_location(match.group(1))
    if location is None:
        return None
    return LocationChange(raw=match.group(0), location=location)


def build_time_of_day(match: re.Match) -> TimeOfDayMention:
    return TimeOfDayMention(raw=match.group(0), label=collapse(match.group(1)))


def build_weather(match: re.Match) -> WeatherMention | None:
    weather = normalize_weather(match.group(1))
    if weather is None:
        return None
    return WeatherMention(raw=match.group(0), weather=weather)


def build_dungeon_floor(match: re.Match) -> DungeonFloor | None:
    floor = parse_number(match.group(1))
    if floor is None:
        return None
    return DungeonFloor(raw=match.group(0), floor=floor)


def build_moon_reference(match: re.Match) -> MoonReference:
    phase = match.group(2).lower() if match.group(2) else None
    return MoonReference(raw=match.group(0).strip(), moon=collapse(match.group(1)), phase=phase)


register_phrase_matcher(
    name="time_skip",
    pattern=(
        rf"\b({_NUMBER})\s+(minute|hour|day|week|month|year|octave)s?\s+"
        r"(later|pass(?:ed)?|elapsed|went\s+by|since)\b"
    ),
    builder=build_time_skip,
)

# Verbs match in any case; the destination must start with a capital
register_phrase_matcher(
    name="location_change",
    pattern=(
        r"\b(?i:arriv(?:ed?|ing)\s+(?:at|in)|enter(?:ed|ing)?|reach(?:ed|ing)?|travel(?:ed|ing)?\s+to"
        r"|journeyed?\s+to|came?\s+to|left\s+for|departed\s+(?:for|to))"
        r"\s+(?i:the\s+)?([A-Z][^.,!?]+?)(?:[.,!?]|$)"
    ),
    builder=build_location_change,
    flags=0,
)

register_phrase_matcher(
    name="time_of_day",
    pattern=(
        r"\b(dawn|daybreak|sunrise|early\s+morning|morning|mid-?morning|midday|noon|high\s+noon"
        r"|afternoon|late\s+afternoon|evening|dusk|sunset|twilight|night|nightfall|late\s+night"
        r"|midnight|witching\s+hour|small\s+hours|pre-?dawn)\b"
    ),
    builder=build_time_of_day,
)

register_phrase_matcher(
    name="weather",
    pattern=(
        r"\b(rain(?:ing|ed|y)?|snow(?:ing|ed|y)?|storm(?:ing|y)?|clear\s+(?:sky|skies|day)?"
        r"|fog(?:gy)?|mist(?:y)?|overcast|cloud(?:y|ed)?|sunny|wind(?:y)?|blizzard"
        r"|thunder(?:storm)?|hail(?:ing)?)\b"
    ),
    builder=build_weather,
)

register_phrase_matcher(
    name="dungeon_floor",
    pattern=r"\b(?:floor|level|depth)\s+(\d+|one|two|three|four|five|six|seven|eight|nine|ten)\b",
    builder=build_dungeon_floor,
)

register_phrase_matcher(
    name="moon",
    pattern=(
        r"\b(Solara|Nyxara|golden\s+moon|silver\s+moon|both\s+moons|dual\s+moons|the\s+moons?)"
        r"\s+(?:was|were|hung|shone|rose|set|is|are)?\s*"
        r"(full|new|waxing|waning|crescent|gibbous|dark|bright)?\b"
    ),
    builder=build_moon_reference,
    keep="first",
)


# =============================================================================
# World Vocabulary (mentions only, no state changes)
# =============================================================================

MONTH_NAME_PATTERN = re.compile(
    r"\b(Vexrise|Frosthold|Thawbreak|Seedsow|Bloomtide|Solpeak|Highfire|Harvestgold|Shadowrise"
    r"|Longnight|Vexday|Frostmere|Iceveil|Bloomrise|Sunsheight|Highflame|Goldfall|Harvestend"
    r"|Misthollow|Darkember)\b",
    re.IGNORECASE,
)

DAY_NAME_PATTERN = re.compile(
    r"\b(Firstday|Solday|Forgeday|Wardday|Tradeday|Courtday|Nyxday|Restday|Primus|Secundus"
    r"|Tertius|Quartus|Quintus|Sextus|Septimus|Octavus)\b",
    re.IGNORECASE,
)

RELATIVE_TIME_PATTERN = re.compile(
    r"\b(?:the\s+)?(next|following|previous|last|that|this)\s+"
    r"(dawn|morning|afternoon|evening|night|day|week|month|octave)\b",
    re.IGNORECASE,
)

LOCATION_DESCRIPTOR_PATTERN = re.compile(
    r"\b(?i:in(?:side)?|at|within|outside|near|beneath|above|through)\s+(?i:the\s+)?"
    r"([A-Z][A-Za-z\s'-]+?)(?:[.,!?]|'s|$)"
)
