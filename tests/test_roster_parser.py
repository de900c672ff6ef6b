"""
Tests for the line-structured roster parser
"""

from datetime import date

import pytest

from core.compliance import FTLComplianceChecker, calculate_flight_time
from core.time_utils import duration_minutes
from models.data_models import DutyType
from parsers.roster_parser import (
    ROSTER_FORMAT_EXAMPLE,
    LineRosterParser,
    build_flight_segment,
    parse_roster_text,
    resolve_roster_date,
)

TODAY = date(2025, 6, 1)

SINGLE_DUTY = "Sat07 C/I VIE 1200\nOS 655 VIE 1314 1454 RMO A220\nC/O 2039 AMS [FT 05:13]"


def parse(text, **kwargs):
    return LineRosterParser(today=TODAY, **kwargs).parse(text)


class TestResolveRosterDate:

    @pytest.mark.parametrize("today,day,expected", [
        (date(2025, 6, 15), 20, date(2025, 6, 20)),
        (date(2025, 6, 15), 15, date(2025, 6, 15)),
        (date(2025, 6, 15), 10, date(2025, 7, 10)),
        (date(2025, 12, 20), 5, date(2026, 1, 5)),
        (date(2025, 2, 15), 31, date(2025, 3, 31)),
        (date(2025, 1, 31), 30, date(2025, 1, 30)),
    ])
    def test_resolution(self, today, day, expected):
        assert resolve_roster_date(day, today) == expected

    def test_impossible_day(self):
        with pytest.raises(ValueError):
            resolve_roster_date(32, date(2025, 6, 15))


class TestLineRosterParser:

    def test_single_duty(self):
        result = parse(SINGLE_DUTY)

        assert result.success
        assert result.parser_used == 'line_structured'
        assert len(result.duty_periods) == 1

        duty = result.duty_periods[0]
        assert duty.type == DutyType.FLIGHT
        assert duty.date == date(2025, 6, 7)
        assert duty.report_time == '12:00'
        assert duty.off_duty_time == '20:39'
        assert len(duty.flights) == 1

        flight = duty.flights[0]
        assert flight.flight_number == 'OS655'
        assert (flight.departure, flight.arrival) == ('VIE', 'RMO')
        assert (flight.departure_time, flight.arrival_time) == ('13:14', '14:54')
        assert flight.aircraft_type == 'A220'

    def test_notes_keep_provenance(self):
        duty = parse(SINGLE_DUTY + "\n[DP 08:39]\n[FDP 08:19]").duty_periods[0]
        assert duty.notes == 'Base: VIE | End: AMS | FT: 05:13 | DP: 08:39 | FDP: 08:19'

    def test_format_example_parses(self):
        result = parse(ROSTER_FORMAT_EXAMPLE)

        assert result.success
        assert [d.date for d in result.duty_periods] == [date(2025, 6, 7), date(2025, 6, 8)]
        assert [len(d.flights) for d in result.duty_periods] == [3, 4]
        assert result.duty_periods[1].report_time == '09:15'
        assert result.summary['total_flights'] == 7
        assert result.summary['flight_days'] == 2

    def test_utc_roster_converted_to_local(self):
        text = "Sat07 C/I VIE 1000\nOS 655 VIE 1114 1254 RMO A220\nC/O 1839 AMS [FT 05:13]"
        duty = parse(text, is_utc=True).duty_periods[0]

        assert duty.report_time == '12:00'
        assert duty.flights[0].departure_time == '13:14'
        assert duty.flights[0].arrival_time == '14:54'
        assert duty.off_duty_time == '20:39'
        assert duty.notes.startswith('Base: VIE (UTC→Local)')

    def test_standalone_check_in_line(self):
        text = "Mon09\nC/I VIE 0600\nOS 377 VIE 0700 0900 AMS A220\nC/O 0930 AMS [FT 02:00]"
        duty = parse(text).duty_periods[0]
        assert duty.report_time == '06:00'
        assert duty.date == date(2025, 6, 9)

    def test_overnight_segment_kept(self):
        text = "Mon09 C/I VIE 2200\nOS 101 VIE 2300 0130 AMS A220\nC/O 0200 AMS [FT 02:30]"
        duty = parse(text).duty_periods[0]

        assert len(duty.flights) == 1
        assert duty.flights[0].arrival_time == '01:30'

    def test_implausible_segment_dropped(self):
        text = "Mon09 C/I VIE 0900\nOS 999 VIE 1000 1010 AMS A220\nC/O 1100 AMS [FT 00:10]"
        result = parse(text)

        assert not result.success
        assert result.duty_periods[0].flights == []
        assert 'Duty 1: No flights found' in result.errors

    def test_missing_checkout_reported(self):
        result = parse("Mon09 C/I VIE 0900\nOS 377 VIE 1000 1200 AMS A220")
        assert not result.success
        assert 'Duty 1: Missing off-duty time' in result.errors
        assert len(result.duty_periods) == 1

    def test_invalid_day_header(self):
        result = parse("Mon45 C/I VIE 0900\n" + SINGLE_DUTY)
        assert not result.success
        assert any(e.startswith("Invalid day header 'Mon45'") for e in result.errors)
        assert len(result.duty_periods) == 1

    def test_lines_before_first_header_are_ignored(self):
        result = parse("Roster export\n" + SINGLE_DUTY)
        assert result.success
        assert len(result.duty_periods) == 1

    @pytest.mark.parametrize("text", ['', None, 42])
    def test_invalid_input(self, text):
        result = parse_roster_text(text)
        assert not result.success
        assert result.errors == ['Invalid roster text provided']


class TestBuildFlightSegment:

    def test_same_airport_short_hop_dropped(self):
        assert build_flight_segment('OS1', 'VIE', 'VIE', '1000', '1015', date(2025, 6, 9)) is None

    def test_too_long_dropped(self):
        assert build_flight_segment('OS1', 'VIE', 'AMS', '0100', '1800', date(2025, 6, 9)) is None

    def test_westbound_arrival_before_departure_dropped(self):
        # 08:00 Helsinki to 07:55 Stockholm reads as 23:55 on the wall clock
        assert build_flight_segment('AY801', 'HEL', 'ARN', '0800', '0755', date(2025, 6, 9)) is None

    def test_bounds_use_local_clocks(self):
        segment = build_flight_segment('OS451', 'VIE', 'LHR', '1000', '1030', date(2025, 6, 9))
        assert segment is not None
        assert duration_minutes(segment.departure_time, segment.arrival_time) == 30


class TestParserAndEngineAgree:

    def test_westbound_short_sector_never_reaches_engine(self):
        text = "Sat07 C/I HEL 0700\nAY 801 HEL 0800 0755 ARN A320\nC/O 0830 ARN [FT 00:55]"
        result = parse(text)

        assert result.duty_periods[0].flights == []
        assert 'Duty 1: No flights found' in result.errors

        day = FTLComplianceChecker().check(result.duty_periods)[0]
        assert 'FLIGHT_TIME_EXCEEDED' not in day.issue_types
        assert day.calculations['flight_time'] == '00:00'

    @pytest.mark.parametrize("is_utc", [False, True])
    def test_every_parsed_segment_within_bounds(self, is_utc):
        duties = parse(ROSTER_FORMAT_EXAMPLE, is_utc=is_utc).duty_periods
        for duty in duties:
            for flight in duty.flights:
                assert 30 <= calculate_flight_time([flight]) <= 16 * 60
