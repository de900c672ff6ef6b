"""
Tests for the operations flight-board parser and standby availability
"""

from datetime import datetime

import pytest
import pytz

from models.data_models import StandbyType
from parsers.flight_board_parser import (
    FLIGHT_BOARD_FORMAT_EXAMPLE,
    calculate_standby_duration,
    calculate_standby_stats,
    get_available_flights,
    parse_flight_board,
    parse_flight_line,
)

VIENNA = pytz.timezone('Europe/Vienna')
NOW = VIENNA.localize(datetime(2025, 6, 9, 6, 0))


def board_row(clock, flight_number='OS111', route='VIE - ARN', tail='ARR  LDM'):
    return f"{clock}  +0   {clock}  +0   {flight_number}  {route}  YL-CSE  {tail}"


def parse_rows(*rows, now=NOW):
    return parse_flight_board('\n'.join(rows), now=now).flights


class TestParseFlightLine:

    def test_full_row(self):
        flight = parse_flight_line(
            "06:19  -6   08:08  -17  BT271   RIX - VIE  YL-AAU  ARR  144  LDM  CLOSED", now=NOW
        )

        assert flight.flight_number == 'BT271'
        assert flight.route == 'RIX - VIE'
        assert (flight.departure, flight.arrival) == ('RIX', 'VIE')
        assert flight.type == 'ARR'
        assert flight.scheduled_time == '06:19'
        assert flight.actual_time == '08:08'
        assert flight.delay == '-17'
        assert flight.registration == 'YL-AAU'
        assert flight.gate == '144'
        assert flight.status == 'CLOSED'
        assert not flight.can_be_assigned

    def test_load_message_row(self):
        flight = parse_flight_line("06:49  -1   08:54  +19  SN2901  BRU - VIE  YL-ABL  ARR  LDM", now=NOW)
        assert flight.status == 'LDM'
        assert flight.delay_minutes == 19
        assert flight.gate is None

    def test_missing_status_is_scheduled(self):
        flight = parse_flight_line("10:00  +0   10:05  +5   OS111  VIE - ARN  YL-CSE  SKD", now=NOW)
        assert flight.status == 'SKD'

    def test_type_inferred_from_base(self):
        departure = parse_flight_line("10:00  +0   10:05  +5   OS111  VIE - ARN  YL-CSE  SKD", now=NOW)
        arrival = parse_flight_line("10:00  +0   10:05  +5   OS112  ARN - VIE  YL-CSE  SKD", now=NOW)
        assert departure.type == 'DEP'
        assert arrival.type == 'ARR'

    def test_scheduled_today_when_still_ahead(self):
        flight = parse_flight_line(board_row('07:15'), now=NOW)
        assert flight.scheduled_datetime == VIENNA.localize(datetime(2025, 6, 9, 7, 15))

    def test_past_time_rolls_to_tomorrow(self):
        flight = parse_flight_line(board_row('05:30'), now=NOW)
        assert flight.scheduled_datetime == VIENNA.localize(datetime(2025, 6, 10, 5, 30))

    def test_short_row(self):
        assert parse_flight_line("06:19 BT271 RIX - VIE", now=NOW) is None


class TestParseFlightBoard:

    def test_example_board(self):
        result = parse_flight_board(FLIGHT_BOARD_FORMAT_EXAMPLE, now=NOW)

        assert result.success
        assert [f.flight_number for f in result.flights] == ['BT271', 'SN2901', 'OS311']
        assert result.summary == {
            'total_flights': 3,
            'arrivals': 3,
            'departures': 0,
            'scheduled': 0,
            'landed': 2,
            'closed': 1,
        }

    def test_unreadable_rows_skipped(self):
        flights = parse_rows("06:19 BT271 RIX - VIE  x", board_row('07:15'))
        assert len(flights) == 1

    @pytest.mark.parametrize("text", ['', None])
    def test_invalid_input(self, text):
        result = parse_flight_board(text)
        assert not result.success
        assert result.errors == ['Invalid flight data text provided']


class TestStandbyAvailability:

    def test_home_standby_buffer(self):
        flights = parse_rows(
            board_row('09:00', 'OS101'),
            board_row('10:00', 'OS102'),
            board_row('15:30', 'OS103'),
            board_row('15:31', 'OS104'),
        )
        available = get_available_flights(flights, '08:00', '14:00', now=NOW)
        assert [f.flight_number for f in available] == ['OS102', 'OS103']

    def test_airport_standby_buffer(self):
        flights = parse_rows(board_row('09:00', 'OS101'), board_row('14:31', 'OS102'))
        available = get_available_flights(flights, '08:00', '14:00',
                                          standby_type=StandbyType.AIRPORT, now=NOW)
        assert [f.flight_number for f in available] == ['OS101']

    def test_standby_type_accepts_value(self):
        flights = parse_rows(board_row('09:00', 'OS101'))
        assert get_available_flights(flights, '08:00', '14:00', standby_type='airport', now=NOW)

    def test_closed_flights_excluded(self):
        flights = parse_rows(board_row('10:00', 'OS101', tail='ARR  LDM  CLOSED'))
        assert get_available_flights(flights, '08:00', '14:00', now=NOW) == []

    def test_overnight_window(self):
        now = VIENNA.localize(datetime(2025, 6, 9, 3, 0))
        flights = parse_rows(
            board_row('23:30', 'OS101'),
            board_row('07:00', 'OS102'),
            board_row('02:00', 'OS103'),
            now=now,
        )
        available = get_available_flights(flights, '22:00', '06:00', now=now)
        assert [f.flight_number for f in available] == ['OS101', 'OS103']

    def test_accepts_serialized_flights(self):
        flights = [f.to_dict() for f in parse_rows(board_row('10:00', 'OS101'))]
        available = get_available_flights(flights, '08:00', '14:00', now=NOW)
        assert [f.flight_number for f in available] == ['OS101']

    def test_missing_or_bad_window(self):
        flights = parse_rows(board_row('10:00'))
        assert get_available_flights(flights, '', '14:00', now=NOW) == []
        assert get_available_flights(flights, '8am', '14:00', now=NOW) == []
        assert get_available_flights([], '08:00', '14:00', now=NOW) == []


class TestStandbyStats:

    def test_duration(self):
        assert calculate_standby_duration('08:00', '14:30') == 6.5
        assert calculate_standby_duration('22:00', '06:00') == 8.0

    def test_stats(self):
        flights = parse_rows(
            "09:00  +0   09:25  +25  OS101  VIE - ARN  YL-CSE  DEP",
            "09:40  +0   09:30  -10  OS102  ARN - VIE  YL-CSE  ARR",
            "11:00  +0   11:00  +0   OS103  VIE - AMS  YL-CSE  DEP",
        )
        stats = calculate_standby_stats(flights, '08:00', '14:00')

        assert stats['total_flights'] == 3
        assert stats['arrivals'] == 1
        assert stats['departures'] == 2
        assert stats['delayed_flights'] == 2
        assert stats['average_delay'] == 18
        assert stats['standby_duration'] == 6.0
        assert stats['flights_by_hour'] == {'09': 2, '11': 1}
