"""
Tests for roster layout detection and dispatch
"""

from datetime import date

from parsers.calendar_grid_parser import CALENDAR_GRID_FORMAT_EXAMPLE
from parsers.format_detection import (
    CALENDAR_GRID,
    LINE_STRUCTURED,
    detect_roster_format,
    is_calendar_grid,
    matched_signatures,
    parse_roster,
)
from parsers.roster_parser import ROSTER_FORMAT_EXAMPLE


class TestDetection:

    def test_line_structured_example(self):
        assert matched_signatures(ROSTER_FORMAT_EXAMPLE) == []
        assert detect_roster_format(ROSTER_FORMAT_EXAMPLE) == LINE_STRUCTURED

    def test_calendar_grid_example(self):
        assert len(matched_signatures(CALENDAR_GRID_FORMAT_EXAMPLE)) >= 2
        assert detect_roster_format(CALENDAR_GRID_FORMAT_EXAMPLE) == CALENDAR_GRID

    def test_single_signature_is_not_enough(self):
        assert not is_calendar_grid("06:00-14:00 standby SBYHOME")

    def test_two_signatures(self):
        assert is_calendar_grid("09:15-10:25 (Rep 0915Z)\n20:15 Check Out - DEB")

    def test_empty_text(self):
        assert matched_signatures('') == []
        assert detect_roster_format('') == LINE_STRUCTURED


class TestParseRoster:

    def test_dispatches_line_structured(self):
        result = parse_roster(ROSTER_FORMAT_EXAMPLE, today=date(2025, 6, 1))
        assert result.success
        assert result.parser_used == LINE_STRUCTURED
        assert len(result.duty_periods) == 2

    def test_dispatches_calendar_grid(self):
        result = parse_roster(CALENDAR_GRID_FORMAT_EXAMPLE)
        assert result.parser_used == CALENDAR_GRID
        assert result.duty_periods
        assert all(d.date.month == 6 and d.date.year == 2025 for d in result.duty_periods)

    def test_calendar_grid_always_utc(self):
        text = (
            "June 2025\n9\n09:15-10:25 (Rep 0915Z)\n"
            "10:25-12:10 AMS - VIE\n20:15 Check Out - AMS"
        )
        result = parse_roster(text, is_utc=False)
        assert result.parser_used == CALENDAR_GRID
        assert result.duty_periods[0].report_time == '11:15'

    def test_invalid_text(self):
        result = parse_roster(None)
        assert not result.success
        assert result.parser_used == LINE_STRUCTURED
