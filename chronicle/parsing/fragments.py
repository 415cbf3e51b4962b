"""
Parse results - what the matchers found in a block of narrative.

Each matcher produces one typed fragment (a header, a time skip, a location
change, ...). The parser merges the winning fragment of every category into
a single frozen ParsedNarrativeEvent.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field


class ParsedLocation(BaseModel):
    """A location string broken into its parts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["simple", "compound", "possessive"]
    raw: str
    primary: str | None = None
    specific: str | None = None
    owner: str | None = None
    place: str | None = None

    @property
    def display_name(self) -> str:
        if self.kind == "compound":
            return f"{self.primary} - {self.specific}"
        if self.kind == "simple" and self.primary:
            return self.primary
        return self.raw


class ParsedTime(BaseModel):
    """Date and clock fields read from a header. Missing clock fields are None."""

    model_config = ConfigDict(frozen=True)

    day: int
    month: int
    year: int
    hour: int | None = None
    minute: int | None = None
    time_of_day: str | None = None
    vexday_name: str | None = None


# --- Fragments ---


class HeaderMatch(BaseModel):
    """A bracketed date/location header."""

    model_config = ConfigDict(frozen=True)
    type: Literal["header"] = "header"

    format: Literal["decorated", "full", "alternate", "vexday"]
    raw: str
    time: ParsedTime
    location: ParsedLocation | None = None
    weather: str | None = None

    @property
    def authoritative(self) -> bool:
        """A decorated header settles the whole message on its own."""
        return self.format == "decorated"


class TimeSkip(BaseModel):
    """ "three days later", "an hour passed" ..."""

    model_config = ConfigDict(frozen=True)
    type: Literal["time_skip"] = "time_skip"

    raw: str
    amount: int
    unit: str
    direction: Literal["forward"] = "forward"


class LocationChange(BaseModel):
    """ "arrived at Ironhold", "entered the Sunken Vault" ..."""

    model_config = ConfigDict(frozen=True)
    type: Literal["location_change"] = "location_change"

    raw: str
    location: ParsedLocation


class TimeOfDayMention(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["time_of_day"] = "time_of_day"

    raw: str
    label: str


class WeatherMention(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["weather"] = "weather"

    raw: str
    weather: str


class DungeonFloor(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["dungeon_floor"] = "dungeon_floor"

    raw: str
    floor: int


class MoonReference(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["moon"] = "moon"

    raw: str
    moon: str
    phase: str | None = None


Fragment = Annotated[
    Union[
        HeaderMatch,
        TimeSkip,
        LocationChange,
        TimeOfDayMention,
        WeatherMention,
        DungeonFloor,
        MoonReference,
    ],
    Discriminator("type"),
]


class RawMatch(BaseModel):
    """The literal text a matcher consumed, for debugging."""

    model_config = ConfigDict(frozen=True)

    type: str
    match: str


# --- Merged result ---


class ParsedNarrativeEvent(BaseModel):
    """
    Everything extracted from one block of narrative.

    found is True only when a header matched; phrase-level cues (time skips,
    location changes, weather, ...) are reported alongside without setting it.
    """

    model_config = ConfigDict(frozen=True)

    found: bool = False
    header: HeaderMatch | None = None
    time: ParsedTime | None = None
    location: ParsedLocation | None = None
    location_change: ParsedLocation | None = None
    time_skip: TimeSkip | None = None
    time_of_day_only: str | None = None
    weather: str | None = None
    moon_phase: MoonReference | None = None
    dungeon_info: DungeonFloor | None = None
    estimated_minutes: int = 0
    confidence: Literal["low", "high"] = "low"
    fragments: tuple[Fragment, ...] = Field(default_factory=tuple)

    @property
    def raw_matches(self) -> list[RawMatch]:
        matches = []
        for fragment in self.fragments:
            kind = f"{fragment.format}_header" if isinstance(fragment, HeaderMatch) else fragment.type
            matches.append(RawMatch(type=kind, match=fragment.raw))
        return matches

    @property
    def has_time_advance(self) -> bool:
        return self.time is not None or self.time_skip is not None


class MutableParseEvent:
    """
    Mutable version of ParsedNarrativeEvent for building during a parse.

    The parser fills this category by category, then freezes it.
    """

    def __init__(self, estimated_minutes: int):
        self.estimated_minutes = estimated_minutes
        self.header: HeaderMatch | None = None
        self.time: ParsedTime | None = None
        self.location: ParsedLocation | None = None
        self.location_change: ParsedLocation | None = None
        self.time_skip: TimeSkip | None = None
        self.time_of_day_only: str | None = None
        self.weather: str | None = None
        self.moon_phase: MoonReference | None = None
        self.dungeon_info: DungeonFloor | None = None
        self.fragments: list = []

    def apply_header(self, header: HeaderMatch) -> None:
        self.header = header
        self.time = header.time
        self.location = header.location
        if header.weather:
            self.weather = header.weather
        self.fragments.append(header)

    def to_event(self) -> ParsedNarrativeEvent:
        """Convert to frozen ParsedNarrativeEvent."""
        return ParsedNarrativeEvent(
            found=self.header is not None,
            header=self.header,
            time=self.time,
            location=self.location,
            location_change=self.location_change,
            time_skip=self.time_skip,
            time_of_day_only=self.time_of_day_only,
            weather=self.weather,
            moon_phase=self.moon_phase,
            dungeon_info=self.dungeon_info,
            estimated_minutes=self.estimated_minutes,
            confidence="high" if self.header is not None else "low",
            fragments=tuple(self.fragments),
        )
