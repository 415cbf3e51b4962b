"""Narrative parsing: header and phrase matchers merged into one parse event."""

from .fragments import (
    DungeonFloor,
    Fragment,
    HeaderMatch,
    LocationChange,
    MoonReference,
    ParsedLocation,
    ParsedNarrativeEvent,
    ParsedTime,
    RawMatch,
    TimeOfDayMention,
    TimeSkip,
    WeatherMention,
)
from .parser import NarrativeParser
from .registry import get_matcher_names, register_header_matcher, register_phrase_matcher
from .vocabulary import (
    estimate_hour_from_time_of_day,
    normalize_weather,
    parse_location,
    parse_month,
    parse_number,
)

__all__ = [
    "DungeonFloor",
    "Fragment",
    "HeaderMatch",
    "LocationChange",
    "MoonReference",
    "ParsedLocation",
    "ParsedNarrativeEvent",
    "ParsedTime",
    "RawMatch",
    "TimeOfDayMention",
    "TimeSkip",
    "WeatherMention",
    "NarrativeParser",
    "get_matcher_names",
    "register_header_matcher",
    "register_phrase_matcher",
    "estimate_hour_from_time_of_day",
    "normalize_weather",
    "parse_location",
    "parse_month",
    "parse_number",
]
