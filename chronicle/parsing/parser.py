"""
Narrative Parser - turns a block of prose into a ParsedNarrativeEvent.

Headers are tried in precedence order; the first that matches supplies the
date, clock and location. A decorated header ends the parse there. Every
phrase category is then scanned independently and merged into the result.

Parsing never raises: text without any recognisable cue produces an event
with found=False and only the estimated scene length.
"""

import logging
import re

from chronicle.domain import calendar
from chronicle.logging_config import log_narrative

from .fragments import (
    DungeonFloor,
    HeaderMatch,
    LocationChange,
    MoonReference,
    MutableParseEvent,
    ParsedNarrativeEvent,
    TimeOfDayMention,
    TimeSkip,
    WeatherMention,
)
from .registry import (
    DAY_NAME_PATTERN,
    HEADER_MATCHERS,
    LOCATION_DESCRIPTOR_PATTERN,
    MONTH_NAME_PATTERN,
    PHRASE_MATCHERS,
    RELATIVE_TIME_PATTERN,
    HeaderMatcher,
    PhraseMatcher,
)
from .vocabulary import estimate_hour_from_time_of_day

logger = logging.getLogger(__name__)


# Scene length estimate (minutes)
BASE_SCENE_MINUTES = 5
MINUTES_PER_DIALOGUE_LINE = 2
COMBAT_MINUTES = 15
SHORT_TRAVEL_MINUTES = 20
LONG_TRAVEL_MINUTES = 60
MEAL_OR_REST_MINUTES = 30
QUICK_SCENE_DISCOUNT = 10
QUICK_SCENE_FLOOR = 2
LONG_SCENE_MINUTES = 45
MAX_SCENE_MINUTES = 120

_DIALOGUE = re.compile(r"[\"“”][^\"“”]+[\"“”]")
_COMBAT = re.compile(r"\b(attack|strike|fight|battle|combat|slash|parry|dodge)\b", re.IGNORECASE)
_TRAVEL = re.compile(r"\b(travel|journey|walk|ride|march|trek)\b", re.IGNORECASE)
_DISTANCE = re.compile(r"\b(hours?|long|far|distant)\b", re.IGNORECASE)
_MEAL_OR_REST = re.compile(r"\b(eat|meal|breakfast|lunch|dinner|rest|sleep)\b", re.IGNORECASE)
_QUICK = re.compile(r"\b(quick|moment|instant|brief|sudden)\b", re.IGNORECASE)
_LONG_SCENE = re.compile(r"\b(hours? pass|time pass|long while|lengthy)\b", re.IGNORECASE)


class NarrativeParser:
    """
    Extracts temporal and spatial cues from narrative text.

    The matcher lists default to the module registry; pass your own to
    parse a different header dialect.
    """

    def __init__(
        self,
        header_matchers: list[HeaderMatcher] | None = None,
        phrase_matchers: dict[str, PhraseMatcher] | None = None,
    ):
        self._headers = header_matchers if header_matchers is not None else HEADER_MATCHERS
        self._phrases = phrase_matchers if phrase_matchers is not None else PHRASE_MATCHERS

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse(self, text: str | None) -> ParsedNarrativeEvent:
        """Parse a block of narrative. Never raises."""
        text = text or ""
        event = MutableParseEvent(estimated_minutes=self.estimate_narrative_minutes(text))

        header = self._match_header(text)
        if header is not None:
            event.apply_header(header)
            if header.authoritative:
                log_narrative(logger, "decorated header", confidence="high", details=header.raw)
                return event.to_event()

        for matcher in self._phrases.values():
            fragment = self._match_phrase(matcher, text)
            if fragment is not None:
                self._merge(event, fragment)

        result = event.to_event()
        log_narrative(
            logger,
            f"{result.header.format} header" if result.header else "no header",
            confidence=result.confidence,
            details=f"{len(result.fragments)} fragments, ~{result.estimated_minutes}min",
        )
        return result

    def _match_header(self, text: str) -> HeaderMatch | None:
        for matcher in self._headers:
            match = matcher.pattern.search(text)
            if not match:
                continue
            header = matcher.builder(match)
            if header is not None:
                return header
            logger.debug(f"Header '{matcher.name}' matched but did not resolve: {match.group(0)!r}")
        return None

    def _match_phrase(self, matcher: PhraseMatcher, text: str):
        fragments = [
            fragment
            for fragment in (matcher.builder(m) for m in matcher.pattern.finditer(text))
            if fragment is not None
        ]
        if not fragments:
            return None
        return fragments[0] if matcher.keep == "first" else fragments[-1]

    def _merge(self, event: MutableParseEvent, fragment) -> None:
        if isinstance(fragment, TimeSkip):
            event.time_skip = fragment
        elif isinstance(fragment, LocationChange):
            event.location_change = fragment.location
        elif isinstance(fragment, TimeOfDayMention):
            if event.time is None:
                event.time_of_day_only = fragment.label
            elif event.time.time_of_day is None:
                event.time = event.time.model_copy(
                    update={
                        "time_of_day": fragment.label,
                        "hour": estimate_hour_from_time_of_day(fragment.label),
                    }
                )
            else:
                # Header already named the time of day
                return
        elif isinstance(fragment, WeatherMention):
            event.weather = fragment.weather
        elif isinstance(fragment, DungeonFloor):
            event.dungeon_info = fragment
        elif isinstance(fragment, MoonReference):
            event.moon_phase = fragment
        event.fragments.append(fragment)

    # =========================================================================
    # Scene Length
    # =========================================================================

    def estimate_narrative_minutes(self, text: str | None) -> int:
        """
        Rough in-world duration of a scene, from its vocabulary.

        Starts at 5 minutes and adds for dialogue, combat, travel, meals and
        explicit passage of time. Quick scenes are discounted. Capped at 2 hours.
        """
        if not text:
            return BASE_SCENE_MINUTES

        minutes = BASE_SCENE_MINUTES
        minutes += len(_DIALOGUE.findall(text)) * MINUTES_PER_DIALOGUE_LINE

        if _COMBAT.search(text):
            minutes += COMBAT_MINUTES

        if _TRAVEL.search(text):
            minutes += LONG_TRAVEL_MINUTES if _DISTANCE.search(text) else SHORT_TRAVEL_MINUTES

        if _MEAL_OR_REST.search(text):
            minutes += MEAL_OR_REST_MINUTES

        if _QUICK.search(text):
            minutes = max(QUICK_SCENE_FLOOR, minutes - QUICK_SCENE_DISCOUNT)

        if _LONG_SCENE.search(text):
            minutes += LONG_SCENE_MINUTES

        return min(minutes, MAX_SCENE_MINUTES)

    # =========================================================================
    # Vocabulary Checks
    # =========================================================================

    def extract_world_terms(self, text: str | None) -> dict[str, list[str]]:
        """
        Month and week-day names mentioned in the text, in order of first
        mention. Month names are canonical where they resolve.
        """
        months: list[str] = []
        week_days: list[str] = []
        for match in MONTH_NAME_PATTERN.finditer(text or ""):
            index = calendar.resolve_month_name(match.group(1))
            info = calendar.get_month(index) if index is not None else None
            name = info.name if info else match.group(1).capitalize()
            if name not in months:
                months.append(name)
        for match in DAY_NAME_PATTERN.finditer(text or ""):
            name = match.group(1).capitalize()
            if name not in week_days:
                week_days.append(name)
        return {"months": months, "week_days": week_days}

    def has_temporal_markers(self, text: str | None) -> bool:
        """True if the text mentions a date, a time of day, or a passage of time."""
        if not text:
            return False
        if any(m.pattern.search(text) for m in self._headers):
            return True
        for name in ("time_skip", "time_of_day"):
            matcher = self._phrases.get(name)
            if matcher and matcher.pattern.search(text):
                return True
        return bool(RELATIVE_TIME_PATTERN.search(text) or MONTH_NAME_PATTERN.search(text))

    def has_location_markers(self, text: str | None) -> bool:
        """True if the text names a destination or a place the scene is in."""
        if not text:
            return False
        if any(m.pattern.search(text) for m in self._headers):
            return True
        matcher = self._phrases.get("location_change")
        if matcher and matcher.pattern.search(text):
            return True
        return bool(LOCATION_DESCRIPTOR_PATTERN.search(text))
