"""
Display snapshots - flat, read-only views of the world state for the CLI
and downstream readers.
"""

from dataclasses import dataclass

from chronicle.domain import WorldState


@dataclass(frozen=True)
class TimeDisplaySnapshot:
    """Everything about the current moment, flattened for display."""

    formatted_date: str
    formatted_time: str
    numeric_date: str
    season: str
    time_of_day: str
    week_day: str
    solara: str
    nyxara: str
    moon_alignment: tuple[str, ...]
    holiday: str | None
    total_days_passed: int

    @classmethod
    def from_state(cls, state: WorldState) -> "TimeDisplaySnapshot":
        t = state.time
        return cls(
            formatted_date=t.formatted_date,
            formatted_time=t.formatted_time,
            numeric_date=t.last_known_date or "",
            season=t.season,
            time_of_day=t.time_of_day,
            week_day=t.week_day.name if t.week_day else "",
            solara=f"{t.moon_solara.phase} ({t.moon_solara.percent_full}%)" if t.moon_solara else "",
            nyxara=f"{t.moon_nyxara.phase} ({t.moon_nyxara.percent_full}%)" if t.moon_nyxara else "",
            moon_alignment=t.moon_alignment or (),
            holiday=t.holiday_name,
            total_days_passed=t.total_days_passed,
        )

    def lines(self) -> list[str]:
        """Human-readable status lines."""
        lines = [
            f"{self.formatted_date} - {self.week_day}",
            f"{self.formatted_time}, {self.season}",
            f"Solara: {self.solara} | Nyxara: {self.nyxara}",
        ]
        if self.moon_alignment:
            lines.append(f"Alignment: {', '.join(self.moon_alignment)}")
        if self.holiday:
            lines.append(f"Holiday: {self.holiday}")
        lines.append(f"Days passed this session: {self.total_days_passed}")
        return lines


@dataclass(frozen=True)
class LocationDisplaySnapshot:
    """Where the story is, flattened for display."""

    name: str | None
    settlement: str | None
    region: str | None
    is_urban: bool
    is_wilderness: bool
    is_dungeon: bool
    dungeon_floor: int | None
    in_transit_to: str | None
    weather: str

    @classmethod
    def from_state(cls, state: WorldState) -> "LocationDisplaySnapshot":
        loc = state.location
        return cls(
            name=loc.display_name,
            settlement=loc.settlement,
            region=loc.region,
            is_urban=loc.is_urban,
            is_wilderness=loc.is_wilderness,
            is_dungeon=loc.is_dungeon,
            dungeon_floor=loc.dungeon.floor if loc.dungeon else None,
            in_transit_to=loc.travel.destination if loc.is_in_transit and loc.travel else None,
            weather=state.environment.weather,
        )
