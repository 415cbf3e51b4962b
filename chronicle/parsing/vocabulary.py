"""
Word tables and small normalizers shared by the narrative matchers.
"""

import re

from chronicle.domain import calendar

from .fragments import ParsedLocation


NUMBER_WORDS: dict[str, int] = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "fifteen": 15, "twenty": 20,
    "thirty": 30, "forty": 40, "forty-five": 45,
    # Approximations
    "several": 3, "a few": 3, "many": 5,
}

DEFAULT_HOUR = 12

HOUR_BY_TIME_OF_DAY: dict[str, int] = {
    "pre-dawn": 4,
    "predawn": 4,
    "dawn": 5,
    "daybreak": 5,
    "sunrise": 6,
    "early morning": 7,
    "morning": 9,
    "mid-morning": 10,
    "midmorning": 10,
    "late morning": 11,
    "midday": 12,
    "noon": 12,
    "high noon": 12,
    "early afternoon": 13,
    "afternoon": 15,
    "late afternoon": 17,
    "early evening": 18,
    "evening": 19,
    "dusk": 19,
    "sunset": 19,
    "twilight": 20,
    "nightfall": 20,
    "night": 21,
    "late night": 23,
    "midnight": 0,
    "small hours": 2,
    "witching hour": 3,
}

WEATHER_SYNONYMS: dict[str, str] = {
    "raining": "rain",
    "rained": "rain",
    "rainy": "rain",
    "snowing": "snow",
    "snowed": "snow",
    "snowy": "snow",
    "storming": "storm",
    "stormy": "storm",
    "thunderstorm": "storm",
    "thunder": "storm",
    "foggy": "fog",
    "misty": "mist",
    "cloud": "cloudy",
    "clouded": "cloudy",
    "wind": "windy",
    "hailing": "hail",
    "sunny": "clear",
    "clear sky": "clear",
    "clear skies": "clear",
    "clear day": "clear",
}

_WHITESPACE = re.compile(r"\s+")
_COMPOUND_LOCATION = re.compile(r"^([^-–]+?)\s*[-–]\s*(.+)$")
_POSSESSIVE_LOCATION = re.compile(r"^([A-Z][a-z]+)'s\s+(.+)$")


def collapse(text: str) -> str:
    """Lowercase and collapse runs of whitespace."""
    return _WHITESPACE.sub(" ", text.strip().lower())


def parse_number(word: str | None) -> int | None:
    """Digits or a number word ("three", "a few") to an int."""
    if not word:
        return None
    normalized = collapse(word)
    if normalized in NUMBER_WORDS:
        return NUMBER_WORDS[normalized]
    if normalized.isdigit():
        return int(normalized)
    return None


def parse_month(name: str | None) -> int | None:
    """Month name to index (1-10, 0 for Vexdays)."""
    return calendar.resolve_month_name(name)


def estimate_hour_from_time_of_day(label: str | None) -> int:
    """Typical hour for a time-of-day phrase; midday when unknown."""
    if not label:
        return DEFAULT_HOUR
    return HOUR_BY_TIME_OF_DAY.get(collapse(label), DEFAULT_HOUR)


def normalize_weather(weather: str | None) -> str | None:
    if not weather:
        return None
    normalized = collapse(weather)
    return WEATHER_SYNONYMS.get(normalized, normalized)


def parse_location(text: str | None) -> ParsedLocation | None:
    """
    Break a location string into parts.

    "The Spiral - Main Hall" -> compound (primary, specific)
    "Kira's Shop"            -> possessive (owner, place)
    anything else            -> simple (primary)
    """
    if not text or not text.strip():
        return None
    raw = text.strip()

    compound = _COMPOUND_LOCATION.match(raw)
    if compound:
        return ParsedLocation(
            kind="compound",
            raw=raw,
            primary=compound.group(1).strip(),
            specific=compound.group(2).strip(),
        )

    possessive = _POSSESSIVE_LOCATION.match(raw)
    if possessive:
        return ParsedLocation(
            kind="possessive",
            raw=raw,
            owner=possessive.group(1),
            place=possessive.group(2).strip(),
        )

    return ParsedLocation(kind="simple", raw=raw, primary=raw)
