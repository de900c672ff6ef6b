"""
Tests for airport timezone lookup, time normalisation and clock arithmetic
"""

from datetime import date

import pytest
import pytz

from core.time_utils import (
    add_minutes,
    clock_minutes,
    duration_minutes,
    format_clock,
    format_duration,
    minutes_between,
)
from parsers.airport_timezones import (
    AIRPORT_TIMEZONES,
    get_airport_timezone,
    get_supported_airports,
    is_airport_supported,
)
from parsers.time_normalizer import convert_time, utc_offset_hours


class TestAirportTimezones:

    def test_static_table(self):
        assert get_airport_timezone('VIE') == 'Europe/Vienna'
        assert get_airport_timezone('RMO') == 'Europe/Rome'
        assert get_airport_timezone('ZUR') == 'Europe/Zurich'

    def test_lookup_is_case_insensitive(self):
        assert get_airport_timezone(' vie ') == 'Europe/Vienna'

    def test_airportsdata_fallback(self):
        assert not is_airport_supported('KUO')
        assert get_airport_timezone('KUO') == 'Europe/Helsinki'

    def test_unknown_code_uses_default(self):
        assert get_airport_timezone('Q1Q') == 'UTC'
        assert get_airport_timezone('Q1Q', default='Europe/Vienna') == 'Europe/Vienna'
        assert get_airport_timezone(None, default='Europe/Vienna') == 'Europe/Vienna'

    def test_supported_airports(self):
        supported = get_supported_airports()
        assert 'VIE' in supported
        assert 'RIX' in supported
        assert is_airport_supported('ams')
        assert not is_airport_supported('')

    def test_static_table_is_read_only(self):
        with pytest.raises(TypeError):
            AIRPORT_TIMEZONES['VIE'] = 'Europe/Berlin'
        assert get_airport_timezone('VIE') == 'Europe/Vienna'


class TestConvertTime:

    def test_local_value_is_only_reformatted(self):
        result = convert_time('1314', date(2025, 6, 7), 'VIE')

        assert result.time == '13:14'
        assert result.date == date(2025, 6, 7)
        assert result.moment.tzinfo is not None
        assert result.moment.utcoffset().total_seconds() == 2 * 3600

    def test_utc_to_local(self):
        result = convert_time('1000', date(2025, 6, 7), 'VIE', is_utc=True)
        assert result.time == '12:00'
        assert result.date == date(2025, 6, 7)

    def test_utc_conversion_can_move_the_day(self):
        result = convert_time('2330', date(2025, 6, 7), 'VIE', is_utc=True)
        assert result.time == '01:30'
        assert result.date == date(2025, 6, 8)

    def test_winter_offset(self):
        assert convert_time('1000', date(2025, 1, 15), 'VIE', is_utc=True).time == '11:00'

    def test_unknown_airport_uses_default_timezone(self):
        result = convert_time('0000', date(2025, 6, 7), 'Q1Q', is_utc=True,
                              default_timezone='Asia/Tokyo')
        assert result.time == '09:00'

    def test_bad_zone_falls_back_to_unconverted_value(self):
        result = convert_time('1000', date(2025, 6, 7), 'Q1Q', is_utc=True,
                              default_timezone='Not/AZone')
        assert result.time == '10:00'
        assert result.date == date(2025, 6, 7)
        assert result.moment.tzinfo == pytz.utc

    def test_unparseable_clock(self):
        result = convert_time('ab', date(2025, 6, 7), 'VIE')
        assert result.time == 'ab'
        assert result.moment is None

    @pytest.mark.parametrize("day", [date(2025, 1, 15), date(2025, 7, 15)])
    def test_conversion_matches_offset(self, day):
        offset = utc_offset_hours('VIE', day)
        converted = convert_time('0830', day, 'VIE', is_utc=True).time
        assert converted == add_minutes('08:30', int(offset * 60))


class TestClockArithmetic:

    @pytest.mark.parametrize("raw,expected", [
        ('1314', '13:14'), ('13:14', '13:14'), ('9:05', '09:05'), ('0915', '09:15'), ('n/a', 'n/a'),
    ])
    def test_format_clock(self, raw, expected):
        assert format_clock(raw) == expected

    def test_clock_minutes_rejects_out_of_range(self):
        assert clock_minutes('23:59') == 23 * 60 + 59
        assert clock_minutes('24:00') is None
        assert clock_minutes(None) is None

    def test_duration_overnight_rule(self):
        assert duration_minutes('22:00', '06:00') == 8 * 60
        assert duration_minutes('06:00', '06:00') == 0
        assert duration_minutes('06:00', None) is None

    def test_minutes_between_dates(self):
        assert minutes_between(date(2025, 6, 9), '22:00', date(2025, 6, 10), '06:00') == 8 * 60
        assert minutes_between(date(2025, 6, 9), '22:00', date(2025, 6, 9), '06:00') == 8 * 60

    def test_format_duration_never_shows_sixty_minutes(self):
        assert format_duration(12 * 60 + 59.7) == '13:00'
        assert format_duration(None) == 'N/A'
        assert format_duration(63 * 60) == '63:00'
