"""Tests for chronicle.parsing.vocabulary module."""

import pytest

from chronicle.parsing.vocabulary import (
    collapse,
    estimate_hour_from_time_of_day,
    normalize_weather,
    parse_location,
    parse_month,
    parse_number,
)


class TestNumbers:
    """Tests for number words."""

    @pytest.mark.parametrize("word,value", [
        ("three", 3),
        ("Twelve", 12),
        ("12", 12),
        ("forty-five", 45),
        ("A  few", 3),
        ("several", 3),
        ("many", 5),
    ])
    def test_known(self, word: str, value: int):
        """Test digits and number words."""
        assert parse_number(word) == value

    @pytest.mark.parametrize("word", [None, "", "lots", "3.5"])
    def test_unknown(self, word):
        """Test anything else is None."""
        assert parse_number(word) is None


class TestMonthsAndHours:
    """Tests for month names and time-of-day hours."""

    @pytest.mark.parametrize("name,index", [
        ("bloomtide", 5),
        ("LONGNIGHT", 10),
        ("Vex", 1),
        ("Vexdays", 0),
        ("Frostmonth", None),
    ])
    def test_parse_month(self, name: str, index):
        """Test month names and short names resolve."""
        assert parse_month(name) == index

    @pytest.mark.parametrize("label,hour", [
        ("Dusk", 19),
        ("late   night", 23),
        ("midnight", 0),
        ("dawn", 5),
        ("afternoon", 15),
        ("teatime", 12),
        (None, 12),
    ])
    def test_estimate_hour(self, label, hour: int):
        """Test typical hours, with midday for unknown labels."""
        assert estimate_hour_from_time_of_day(label) == hour

    def test_collapse(self):
        """Test lowercasing and whitespace collapsing."""
        assert collapse("  Early   Morning ") == "early morning"


class TestWeather:
    """Tests for weather normalization."""

    @pytest.mark.parametrize("raw,weather", [
        ("Raining", "rain"),
        ("Clear Skies", "clear"),
        ("thunderstorm", "storm"),
        ("foggy", "fog"),
        ("drizzle", "drizzle"),
    ])
    def test_normalize(self, raw: str, weather: str):
        """Test synonyms map to one word and unknown words pass through."""
        assert normalize_weather(raw) == weather

    def test_empty(self):
        """Test empty weather is None."""
        assert normalize_weather("") is None
        assert normalize_weather(None) is None


class TestLocations:
    """Tests for location string decomposition."""

    def test_compound(self):
        """Test "Primary - Specific"."""
        loc = parse_location("The Spiral - Main Hall")

        assert loc.kind == "compound"
        assert loc.primary == "The Spiral"
        assert loc.specific == "Main Hall"
        assert loc.display_name == "The Spiral - Main Hall"

    def test_compound_en_dash(self):
        """Test an en dash also separates the parts."""
        loc = parse_location("Ironhold – The Forge")

        assert (loc.primary, loc.specific) == ("Ironhold", "The Forge")

    def test_possessive(self):
        """Test "Owner's Place"."""
        loc = parse_location("Kira's Shop")

        assert loc.kind == "possessive"
        assert loc.owner == "Kira"
        assert loc.place == "Shop"
        assert loc.display_name == "Kira's Shop"

    def test_simple(self):
        """Test a plain name, trimmed."""
        loc = parse_location("  Ironhold Keep ")

        assert loc.kind == "simple"
        assert loc.primary == "Ironhold Keep"
        assert loc.display_name == "Ironhold Keep"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text):
        """Test empty input gives None."""
        assert parse_location(text) is None
