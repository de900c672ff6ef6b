"""
Tests for duty data validation
"""

from datetime import date

from core.validation import validate_flight_data, validate_parsed_duties
from models.data_models import DutyPeriod, DutyType, FlightSegment


def make_duty_dict(**overrides):
    duty = {
        'date': '2025-06-09',
        'type': 'FLIGHT',
        'report_time': '06:00',
        'off_duty_time': '14:00',
        'flights': [{
            'flight_number': 'OS377',
            'departure': 'VIE',
            'arrival': 'AMS',
            'departure_time': '07:00',
            'arrival_time': '09:00',
        }],
    }
    duty.update(overrides)
    return duty


class TestValidateFlightData:

    def test_valid(self):
        result = validate_flight_data([make_duty_dict()])
        assert result.is_valid
        assert result.errors == []

    def test_not_a_list(self):
        assert validate_flight_data({'date': '2025-06-09'}).errors == ['Flight data must be an array']

    def test_empty_list(self):
        assert validate_flight_data([]).errors == ['At least one flight duty period is required']

    def test_bad_date_and_type(self):
        result = validate_flight_data([make_duty_dict(date='09/06/2025', type='SIM')])
        assert not result.is_valid
        assert 'Duty 1: Invalid date format. Use YYYY-MM-DD' in result.errors
        assert any(e.startswith('Duty 1: Invalid duty type') for e in result.errors)

    def test_flight_duty_requires_times_and_flights(self):
        result = validate_flight_data([make_duty_dict(report_time=None, off_duty_time='', flights=[])])
        assert result.errors == [
            'Duty 1: Report time is required for flight duties',
            'Duty 1: Off-duty time is required for flight duties',
            'Duty 1: At least one flight is required for flight duties',
        ]

    def test_standby_needs_no_flights(self):
        duty = make_duty_dict(type='standby', flights=None, call_time='08:30')
        assert validate_flight_data([duty]).is_valid

    def test_bad_call_time(self):
        duty = make_duty_dict(type='STANDBY', call_time='8.30')
        assert validate_flight_data([duty]).errors == ['Duty 1: Invalid call time format. Use HH:MM']

    def test_day_off_skips_time_checks(self):
        assert validate_flight_data([{'date': '2025-06-09', 'type': 'DAYOFF'}]).is_valid

    def test_implausible_fdp(self):
        result = validate_flight_data([make_duty_dict(report_time='05:00', off_duty_time='20:00')])
        assert result.errors == ['Duty 1: FDP exceeds 14 hours (15.0h). Please verify times.']

    def test_flight_errors_are_itemized(self):
        flight = {'flight_number': '', 'departure': 'VIENNA', 'arrival': 'AMS',
                  'departure_time': '07:00', 'arrival_time': '07:10'}
        result = validate_flight_data([make_duty_dict(), make_duty_dict(flights=[flight])])
        assert result.errors == [
            'Duty 2, Flight 1: Flight number is required',
            'Duty 2, Flight 1: Departure airport must be 3-letter IATA code',
            'Duty 2, Flight 1: Flight time is less than 30 minutes (0.2h). Please verify times.',
        ]

    def test_non_object_entries(self):
        result = validate_flight_data(['2025-06-09'])
        assert result.errors == ['Duty 1: Duty period must be an object']


class TestValidateParsedDuties:

    def test_day_off_ignored(self):
        assert validate_parsed_duties([DutyPeriod(date(2025, 6, 9), DutyType.DAYOFF)]) == []

    def test_missing_fields(self):
        duty = DutyPeriod(date(2025, 6, 9), DutyType.FLIGHT, report_time='06:00')
        assert validate_parsed_duties([duty]) == [
            'Duty 1: Missing off-duty time',
            'Duty 1: No flights found',
        ]

    def test_standby_without_flights_is_fine(self):
        duty = DutyPeriod(date(2025, 6, 9), DutyType.STANDBY, report_time='06:00',
                          off_duty_time='14:00')
        assert validate_parsed_duties([duty]) == []

    def test_bad_airport(self):
        flight = FlightSegment('OS1', 'VI', 'AMS', '07:00', '09:00')
        duty = DutyPeriod(date(2025, 6, 9), DutyType.FLIGHT, report_time='06:00',
                          off_duty_time='10:00', flights=[flight])
        assert validate_parsed_duties([duty]) == ['Duty 1, Flight 1: Invalid departure airport']
