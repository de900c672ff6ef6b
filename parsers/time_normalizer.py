"""
Time Normalizer
===============

Turns a roster clock token into a local wall-clock time at an airport.

Rosters print times either as local airport time or as UTC ("Z"). For UTC
sources the value is placed on the reference date, converted into the
airport's zone, and the local date is returned too because the conversion
can move the calendar day.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from core.time_utils import format_clock, clock_minutes
from parsers.airport_timezones import get_airport_timezone

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'Europe/Vienna'


@dataclass(frozen=True)
class NormalizedTime:
    """Local clock value plus the local date it falls on"""
    time: str
    date: date
    moment: Optional[datetime] = None   # timezone-aware, None if unparseable


def convert_time(value: str, reference_date: date, airport: Optional[str] = None,
                 is_utc: bool = False,
                 default_timezone: str = DEFAULT_TIMEZONE) -> NormalizedTime:
    """
    Normalise ``value`` ("1314" or "13:14") to local time at ``airport``.

    Unknown airports use ``default_timezone``. Conversion failures return the
    unconverted value on the reference date instead of raising.
    """
    formatted = format_clock(value) or ''
    minutes = clock_minutes(formatted)
    if minutes is None:
        logger.warning(f"Unrecognised clock value '{value}', keeping it unconverted")
        return NormalizedTime(formatted, reference_date, None)

    naive = datetime.combine(reference_date, datetime.min.time()) + timedelta(minutes=minutes)
    tz_name = get_airport_timezone(airport, default=default_timezone)

    try:
        tz = pytz.timezone(tz_name)
        if not is_utc:
            return NormalizedTime(formatted, reference_date, tz.localize(naive))

        local = pytz.utc.localize(naive).astimezone(tz)
        return NormalizedTime(local.strftime('%H:%M'), local.date(), local)
    except (pytz.UnknownTimeZoneError, ValueError, OverflowError) as e:
        logger.warning(f"Time conversion failed for {value} at {airport} ({tz_name}): {e}")
        return NormalizedTime(formatted, reference_date, pytz.utc.localize(naive))


def utc_offset_hours(airport: Optional[str], on: date,
                     default_timezone: str = DEFAULT_TIMEZONE) -> float:
    """UTC offset of the airport's zone at noon on ``on`` (DST-aware)"""
    tz = pytz.timezone(get_airport_timezone(airport, default=default_timezone))
    noon = tz.localize(datetime.combine(on, datetime.min.time()) + timedelta(hours=12))
    return noon.utcoffset().total_seconds() / 3600
