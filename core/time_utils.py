"""
Clock Arithmetic
================

Wall-clock helpers shared by the parsers and the compliance engine.

Every duration in this project follows the same overnight rule: when the
end clock reads earlier than the start clock, the interval is assumed to
cross midnight and one day is added.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r'^(\d{1,2}):?(\d{2})$')


def format_clock(value: Optional[str]) -> Optional[str]:
    """
    Normalise "1314", "13:14" or "9:05" to "HH:MM".

    Returns the input unchanged when it is not a recognisable clock value.
    """
    if value is None:
        return None
    text = str(value).strip()
    match = _CLOCK_RE.match(text)
    if not match:
        return text
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def is_valid_clock(value: Optional[str]) -> bool:
    """True for a well-formed HH:MM value between 00:00 and 23:59"""
    if not value or not re.match(r'^\d{2}:\d{2}$', value):
        return False
    hours, minutes = int(value[:2]), int(value[3:])
    return hours < 24 and minutes < 60


def clock_minutes(value: Optional[str]) -> Optional[int]:
    """Minutes since midnight, or None for a missing/malformed clock"""
    normalized = format_clock(value)
    if not is_valid_clock(normalized):
        return None
    return int(normalized[:2]) * 60 + int(normalized[3:])


def clock_hour(value: Optional[str]) -> Optional[int]:
    minutes = clock_minutes(value)
    return None if minutes is None else minutes // 60


def duration_minutes(start: Optional[str], end: Optional[str]) -> Optional[int]:
    """
    Minutes from ``start`` to ``end`` on the same duty.

    An end earlier than the start crosses midnight. Equal clocks give zero.
    """
    start_min = clock_minutes(start)
    end_min = clock_minutes(end)
    if start_min is None or end_min is None:
        return None
    delta = end_min - start_min
    if delta < 0:
        delta += MINUTES_PER_DAY
    return delta


def minutes_between(start_date: date, start: Optional[str],
                    end_date: date, end: Optional[str]) -> Optional[int]:
    """
    Minutes between two dated clock readings.

    A negative result gains one day, mirroring the overnight rule for
    entries recorded against the same calendar date.
    """
    start_min = clock_minutes(start)
    end_min = clock_minutes(end)
    if start_min is None or end_min is None:
        return None
    start_dt = datetime.combine(start_date, datetime.min.time()) + timedelta(minutes=start_min)
    end_dt = datetime.combine(end_date, datetime.min.time()) + timedelta(minutes=end_min)
    delta = int((end_dt - start_dt).total_seconds() // 60)
    if delta < 0:
        delta += MINUTES_PER_DAY
    return delta


def add_minutes(clock: Optional[str], minutes: int) -> Optional[str]:
    """Clock value ``minutes`` later, wrapped to the 24h dial"""
    base = clock_minutes(clock)
    if base is None:
        return None
    total = (base + minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def format_duration(minutes: Optional[float]) -> str:
    """Render minutes as "HH:MM", or 'N/A' when unknown"""
    if minutes is None:
        return 'N/A'
    total = int(round(minutes))
    sign = '-' if total < 0 else ''
    total = abs(total)
    return f"{sign}{total // 60:02d}:{total % 60:02d}"


def hours_to_minutes(hours: float) -> int:
    return int(round(hours * 60))
