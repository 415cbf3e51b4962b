"""Tests for chronicle.observer.api module."""

import pytest

from chronicle.config import TrackerConfig
from chronicle.domain import WorldState, calendar
from chronicle.observer import (
    InvalidLocationError,
    InvalidTimeUnitError,
    NothingToUndoError,
    ObserverError,
    WorldStateAPI,
)
from chronicle.services import ChangeSummary, TemporalManager


class TestQueries:
    """Tests for read-only queries."""

    def test_current_date(self, api: WorldStateAPI):
        assert api.get_current_date() == "1st of Vexrise, 2847 AV"
        assert api.get_current_date("short") == "1 Vex 2847"

    def test_current_location(self, api: WorldStateAPI):
        assert api.get_current_location() == "Aethermain"

    def test_get_state_is_independent(self, api: WorldStateAPI):
        """Test the returned state is a copy of the manager's."""
        state = api.get_state()

        assert isinstance(state, WorldState)
        assert state == api.manager.state
        assert state is not api.manager.state

    def test_time_summary(self, api: WorldStateAPI):
        summary = api.get_time_summary()

        assert summary.formatted_date == "1st of Vexrise, 2847 AV"
        assert summary.numeric_date == "2847-01-01"
        assert summary.holiday == "Year's Turn"

    def test_location_summary(self, api: WorldStateAPI):
        summary = api.get_location_summary()

        assert summary.name == "Aethermain"
        assert summary.is_wilderness is True
        assert summary.weather == "clear"

    def test_validation_errors(self, api: WorldStateAPI):
        assert api.get_validation_errors() == []

        api.do_set_time(day=40)

        assert len(api.get_validation_errors()) == 1

    def test_calendar_lookups(self, api: WorldStateAPI):
        """Test month records, festivals and date formatting."""
        assert api.get_month(5).name == "Bloomtide"
        assert api.get_month(0).name == "Vexdays"
        assert api.get_month(11) is None
        assert api.get_holidays() == calendar.month_festivals(1)
        assert len(api.get_holidays(0)) == 5
        assert api.format_date(2, 0, 2847) == "Vexday of Chaos, 2847 AV"

    def test_subscribe(self, api: WorldStateAPI):
        """Test subscriptions through the facade."""
        calls: list = []
        unsubscribe = api.subscribe("ui", calls.append)

        api.do_advance_time(1, "day")
        unsubscribe()
        api.do_advance_time(1, "day")

        assert len(calls) == 1


class TestCommands:
    """Tests for state-mutating commands."""

    def test_set_time(self, api: WorldStateAPI):
        summary = api.do_set_time(month=5, day=15)

        assert isinstance(summary, ChangeSummary)
        assert summary.time_changed is True
        assert api.get_current_date() == "15th of Bloomtide, 2847 AV"

    def test_set_location(self, api: WorldStateAPI):
        api.do_set_location({"settlement": "Ironhold"}, settlement_type="capital")

        assert api.get_location_summary().is_urban is True
        assert api.get_current_location() == "Ironhold"

    def test_set_location_invalid(self, api: WorldStateAPI):
        """Test bad location values surface as an ObserverError."""
        with pytest.raises(InvalidLocationError) as exc_info:
            api.do_set_location(is_dungeon="sometimes")

        assert isinstance(exc_info.value, ObserverError)

    def test_advance_time(self, api: WorldStateAPI):
        summary = api.do_advance_time(3, "days")

        assert summary.days_delta == 3
        assert api.get_current_date() == "4th of Vexrise, 2847 AV"

    def test_advance_time_invalid_unit(self, api: WorldStateAPI):
        with pytest.raises(InvalidTimeUnitError):
            api.do_advance_time(1, "fortnight")

    def test_undo(self, api: WorldStateAPI):
        api.do_advance_time(2, "octaves")

        state = api.do_undo()

        assert state.time.date == (1, 1, 2847)

    def test_undo_empty(self, api: WorldStateAPI):
        with pytest.raises(NothingToUndoError):
            api.do_undo()


class TestIngestMessage:
    """Tests for chat message ingestion."""

    def test_plain_text(self, api: WorldStateAPI, decorated_narrative: str):
        summary = api.ingest_message(decorated_narrative)

        assert summary.time_changed is True
        assert api.get_current_location() == "The Spiral - Main Hall"

    @pytest.mark.parametrize("key", ["message", "mes", "text", "content"])
    def test_mapping(self, api: WorldStateAPI, key: str):
        """Test the text is found under any of the known keys."""
        api.ingest_message({key: "Three days later, they woke.", "is_user": False})

        assert api.get_current_date() == "4th of Vexrise, 2847 AV"

    @pytest.mark.parametrize("data", [None, "", {}, {"mes": ""}, {"name": "Kira"}, 42])
    def test_no_text(self, api: WorldStateAPI, data):
        assert api.ingest_message(data) is None

    def test_message_without_cues(self, api: WorldStateAPI):
        assert api.ingest_message("She smiled.") == ChangeSummary()

    @pytest.mark.parametrize("config", [
        TrackerConfig(enabled=False),
        TrackerConfig(auto_parse_messages=False),
    ])
    def test_disabled(self, config: TrackerConfig, decorated_narrative: str):
        """Test nothing is parsed when the tracker or auto-parse is off."""
        api = WorldStateAPI(TemporalManager(config).initialize())

        assert api.ingest_message(decorated_narrative) is None
        assert api.get_current_date() == "1st of Vexrise, 2847 AV"
