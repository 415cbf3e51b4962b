"""Tests for chronicle.domain.calendar module."""

import pytest

from chronicle.domain import calendar
from chronicle.domain.calendar import CalendarDate


class TestYearStructure:
    """Tests for year, month and Vexday block lengths."""

    @pytest.mark.parametrize("year,special", [
        (2840, True),
        (2847, False),
        (2848, True),
        (2849, False),
        (8, True),
        (1, False),
    ])
    def test_special_year_every_eighth(self, year: int, special: bool):
        """Test special years are exactly the multiples of 8."""
        assert calendar.is_special_year(year) is special

    def test_vexday_block_length(self):
        """Test the Vexday block has 6 days only in special years."""
        assert calendar.vexday_count(2847) == 5
        assert calendar.vexday_count(2848) == 6
        assert calendar.days_in_month(0, 2847) == 5
        assert calendar.days_in_month(0, 2848) == 6

    def test_days_in_year(self):
        """Test year lengths."""
        assert calendar.days_in_year(2847) == 365
        assert calendar.days_in_year(2848) == 366

    def test_every_month_has_36_days(self):
        """Test all ten months are 36 days long."""
        assert len(calendar.MONTHS) == 10
        assert all(calendar.days_in_month(m, 2847) == 36 for m in range(1, 11))

    def test_get_month(self):
        """Test month lookup, including the Vexday pseudo-month."""
        assert calendar.get_month(5).name == "Bloomtide"
        assert calendar.get_month(10).name == "Longnight"
        assert calendar.get_month(0).name == "Vexdays"
        assert calendar.get_month(11) is None
        assert calendar.get_month(-1) is None

    @pytest.mark.parametrize("month,season", [
        (0, "vexdays"),
        (1, "winter"),
        (3, "spring"),
        (6, "summer"),
        (8, "autumn"),
        (10, "winter"),
        (42, "unknown"),
    ])
    def test_get_season(self, month: int, season: str):
        """Test season lookup."""
        assert calendar.get_season(month) == season

    def test_next_month_wraps_through_vexdays(self):
        """Test Longnight is followed by Vexdays, then Vexrise of the next year."""
        assert calendar.next_month(9, 2847) == (10, 2847)
        assert calendar.next_month(10, 2847) == (0, 2847)
        assert calendar.next_month(0, 2847) == (1, 2848)

    def test_festival_days(self):
        """Test only festivals with a fixed day marker get a day."""
        assert calendar.get_month(5).festival_days == {15: "Bloom Festival", 30: "Lover's Night"}
        # "(20th-25th)" is a range, not a single day
        assert calendar.get_month(8).festival_days == {36: "Vex's Gratitude"}


class TestDayCounting:
    """Tests for day-of-year, epoch counting and add_days."""

    def test_day_of_year(self):
        """Test day-of-year for months and Vexdays."""
        assert calendar.day_of_year(1, 1, 2847) == 1
        assert calendar.day_of_year(15, 5, 2847) == 4 * 36 + 15
        assert calendar.day_of_year(36, 10, 2847) == 360
        assert calendar.day_of_year(1, 0, 2847) == 361
        assert calendar.day_of_year(6, 0, 2848) == 366

    def test_epoch_start(self):
        """Test the epoch counts from the 1st of Vexrise, 1 AV."""
        assert calendar.total_days_since_epoch(1, 1, 1) == 1
        assert calendar.total_days_since_epoch(1, 1, 2) == 366
        # Year 8 is special, so year 9 starts one day later
        assert calendar.total_days_since_epoch(1, 1, 9) == 7 * 365 + 366 + 1

    def test_scenario_b(self):
        """Test 30th of Longnight + 40 days lands on the 29th of Vexrise next year."""
        assert calendar.add_days(30, 10, 2847, 40) == CalendarDate(day=29, month=1, year=2848)

    @pytest.mark.parametrize("start", [
        (1, 1, 2847),
        (30, 10, 2847),
        (36, 10, 2848),
        (3, 0, 2847),
        (6, 0, 2848),
        (20, 7, 2855),
    ])
    @pytest.mark.parametrize("days", [0, 1, 5, 6, 36, 40, 365, 366, 1000])
    def test_add_days_agrees_with_epoch_count(self, start: tuple[int, int, int], days: int):
        """Test add_days moves exactly n days on the epoch count."""
        result = calendar.add_days(*start, days)

        assert calendar.total_days_since_epoch(*result) == calendar.total_days_since_epoch(*start) + days

    def test_add_days_through_special_vexdays(self):
        """Test the 6th Vexday exists only in special years."""
        assert calendar.add_days(36, 10, 2848, 1) == CalendarDate(1, 0, 2848)
        assert calendar.add_days(1, 0, 2848, 5) == CalendarDate(6, 0, 2848)
        assert calendar.add_days(6, 0, 2848, 1) == CalendarDate(1, 1, 2849)
        assert calendar.add_days(5, 0, 2847, 1) == CalendarDate(1, 1, 2848)

    def test_add_negative_days_raises(self):
        """Test add_days refuses to move backwards."""
        with pytest.raises(ValueError):
            calendar.add_days(1, 1, 2847, -1)

    def test_days_between(self):
        """Test signed day differences."""
        start = CalendarDate(30, 10, 2847)
        end = CalendarDate(29, 1, 2848)

        assert calendar.days_between(start, end) == 40
        assert calendar.days_between(end, start) == -40
        assert calendar.days_between(start, start) == 0


class TestOctave:
    """Tests for the 8-day week."""

    def test_consecutive_days_step_through_octave(self):
        """Test each day advances the week index by one, wrapping at 8."""
        date = CalendarDate(34, 10, 2847)
        previous = calendar.week_index(*date)
        for _ in range(12):
            date = calendar.add_days(*date, 1)
            current = calendar.week_index(*date)
            assert current == (previous + 1) % 8
            previous = current

    def test_week_day_record(self):
        """Test week_day returns the table entry for the index."""
        index = calendar.week_index(15, 5, 2847)
        day = calendar.week_day(15, 5, 2847)

        assert day == calendar.OCTAVE[index]
        assert day.index == index

    def test_octave_names(self):
        """Test the eight day names in order."""
        assert [d.name for d in calendar.OCTAVE] == [
            "Firstday", "Solday", "Forgeday", "Wardday",
            "Tradeday", "Courtday", "Nyxday", "Restday",
        ]


class TestMoons:
    """Tests for moon phases and alignments."""

    @pytest.mark.parametrize("day_in_cycle,cycle,expected", [
        (0, 36, 0),
        (9, 36, 50),
        (18, 36, 100),
        (27, 36, 50),
        (36, 36, 0),
        (0, 24, 0),
        (6, 24, 50),
        (12, 24, 100),
        (18, 24, 50),
        (24, 24, 0),
    ])
    def test_fullness_is_triangular(self, day_in_cycle: int, cycle: int, expected: int):
        """Test fullness peaks at mid-cycle for both cycle lengths."""
        assert calendar.moon_fullness(day_in_cycle, cycle) == expected

    def test_solara_follows_day_of_year(self):
        """Test Solara is full on day 18 of the year and new on day 1."""
        full = calendar.solara_phase(18, 1, 2847)
        new = calendar.solara_phase(1, 1, 2847)

        assert full.moon == "Solara"
        assert full.phase == "full"
        assert full.percent_full == 100
        assert new.phase == "new"
        assert new.day_in_cycle == 1

    def test_nyxara_follows_epoch(self):
        """Test Nyxara repeats every 24 days."""
        a = calendar.nyxara_phase(1, 1, 2847)
        b = calendar.nyxara_phase(*calendar.add_days(1, 1, 2847, 24))

        assert a.day_in_cycle == b.day_in_cycle
        assert a.phase == b.phase

    def test_dual_full_alignment(self):
        """Test both moons near full on the 18th of Vexrise 2847."""
        assert calendar.moon_alignment(18, 1, 2847) == ("dual_full",)

    def test_dual_new_alignment(self):
        """Test both moons near dark on the 1st of Vexrise 2848."""
        assert calendar.moon_alignment(1, 1, 2848) == ("dual_new",)

    def test_no_alignment(self):
        """Test an ordinary date has no alignment."""
        assert calendar.moon_alignment(1, 1, 2847) is None


class TestHolidays:
    """Tests for holiday lookup."""

    def test_fixed_day_festival(self):
        """Test a festival with a day marker is a holiday on that day."""
        assert calendar.is_holiday(15, 5) is True
        assert calendar.holiday_name(15, 5) == "Bloom Festival"
        assert calendar.is_holiday(16, 5) is False
        assert calendar.holiday_name(16, 5) is None

    def test_festival_with_suffix_text(self):
        """Test trailing text after the day marker is dropped from the name."""
        assert calendar.holiday_name(18, 6) == "Solstice"

    def test_every_vexday_is_a_holiday(self):
        """Test all Vexdays are holidays named after the day."""
        assert all(calendar.is_holiday(d, 0) for d in range(1, 7))
        assert calendar.holiday_name(2, 0) == "Vexday of Chaos"
        assert calendar.holiday_name(6, 0) == "Vexday of Vex's Whim"

    def test_month_festivals(self):
        """Test festival listings."""
        assert calendar.month_festivals(2) == ("Night of Ancestors (18th)",)
        assert len(calendar.month_festivals(0)) == 5
        assert calendar.month_festivals(99) == ()


class TestFormatting:
    """Tests for format_date and ordinal suffixes."""

    @pytest.mark.parametrize("n,suffix", [
        (1, "st"), (2, "nd"), (3, "rd"), (4, "th"),
        (11, "th"), (12, "th"), (13, "th"),
        (21, "st"), (22, "nd"), (23, "rd"), (36, "th"),
    ])
    def test_ordinal_suffix(self, n: int, suffix: str):
        """Test English ordinal suffixes."""
        assert calendar.ordinal_suffix(n) == suffix

    @pytest.mark.parametrize("style,expected", [
        ("full", "15th of Bloomtide, 2847 AV"),
        ("long", "15th Bloomtide 2847 AV"),
        ("short", "15 Blo 2847"),
        ("numeric", "2847-05-15"),
        ("narrative", "the 15th day of Bloomtide in the year 2847 After Vex"),
        ("fancy", "15th of Bloomtide, 2847 AV"),
    ])
    def test_month_styles(self, style: str, expected: str):
        """Test each style for a regular date."""
        assert calendar.format_date(15, 5, 2847, style) == expected

    @pytest.mark.parametrize("style,expected", [
        ("full", "Vexday of Chaos, 2847 AV"),
        ("short", "Vexday 2, 2847 AV"),
        ("numeric", "2847-00-02"),
        ("narrative", "Vexday of Chaos, 2847 AV"),
    ])
    def test_vexday_styles(self, style: str, expected: str):
        """Test each style for a Vexday."""
        assert calendar.format_date(2, 0, 2847, style) == expected

    def test_vexs_whim(self):
        """Test the 6th Vexday of a special year."""
        assert calendar.format_date(6, 0, 2848) == "Vexday of Vex's Whim, 2848 AV"

    def test_unknown_month(self):
        """Test an out-of-range month still renders."""
        assert calendar.format_date(3, 12, 2847) == "3rd of Month 12, 2847 AV"


class TestParsing:
    """Tests for parse_date and name resolution."""

    @pytest.mark.parametrize("date", [
        (1, 1, 2847),
        (15, 5, 2847),
        (36, 10, 2848),
        (1, 0, 2847),
        (6, 0, 2848),
        (9, 3, 12),
    ])
    def test_numeric_round_trip(self, date: tuple[int, int, int]):
        """Test parse_date inverts the numeric format."""
        text = calendar.format_date(*date, "numeric")

        assert calendar.parse_date(text) == CalendarDate(*date)

    @pytest.mark.parametrize("text,expected", [
        ("15th of Bloomtide, 2847 AV", CalendarDate(15, 5, 2847)),
        ("3rd Thawbreak 2850 AC", CalendarDate(3, 3, 2850)),
        ("22nd of blo, 2847 AV", CalendarDate(22, 5, 2847)),
        ("Vexday of Chaos, 2847 AV", CalendarDate(2, 0, 2847)),
        ("Vexday of Vex's Whim, 2848 AV", CalendarDate(6, 0, 2848)),
        ("Vexday 4, 2847 AV", CalendarDate(4, 0, 2847)),
    ])
    def test_prose_and_vexday_dates(self, text: str, expected: CalendarDate):
        """Test prose and Vexday date strings."""
        assert calendar.parse_date(text) == expected

    @pytest.mark.parametrize("text", ["", "tomorrow", "15th of Smarch, 2847 AV"])
    def test_unparseable(self, text: str):
        """Test text without a date yields None."""
        assert calendar.parse_date(text) is None

    @pytest.mark.parametrize("name,index", [
        ("Vexrise", 1),
        ("longnight", 10),
        ("Lon", 10),
        ("Vexday", 0),
        ("vexdays", 0),
        ("Frostmere", None),
        (None, None),
    ])
    def test_resolve_month_name(self, name: str | None, index: int | None):
        """Test month names and short names resolve case-insensitively."""
        assert calendar.resolve_month_name(name) == index

    def test_resolve_vexday_name(self):
        """Test Vexday names resolve to their day."""
        assert calendar.resolve_vexday_name("remembrance") == 1
        assert calendar.resolve_vexday_name("Renewal") == 5
        assert calendar.resolve_vexday_name("Vex's Whim") == 6
        assert calendar.resolve_vexday_name("Tuesday") is None
