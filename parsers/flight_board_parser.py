"""
Flight Board Parser
===================

Reads an operations flight-status board (OCCGROUND export) and works out
which flights a standby crew member could realistically be called for.

Row layout, whitespace separated:

    SCHED [DELAY] [ACTUAL] [DELAY] FLIGHT ORIG - DEST [REG] [ARR|DEP] [GATE] [STATUS...]

Times are local to the board's airport.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

import pytz

from core.time_utils import clock_minutes, duration_minutes
from models.data_models import BoardFlight, FlightBoardResult, StandbyType
from parsers.time_normalizer import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

MIN_ROW_TOKENS = 8

# Minutes from call-out to being available at the aircraft
CALLOUT_BUFFER_MINUTES = {
    StandbyType.AIRPORT: 30,
    StandbyType.HOME: 90,
}

_TIME_RE = re.compile(r'^\d{2}:\d{2}$')
_DELAY_RE = re.compile(r'^[+-]\d+$')
_FLIGHT_NUMBER_RE = re.compile(r'^[A-Z]{2}\d{3,4}$')
_REGISTRATION_RE = re.compile(r'^YL-[A-Z]{3}$')
_GATE_RE = re.compile(r'^\d{3}$')
_ROW_START_RE = re.compile(r'^\d{2}:\d{2}')

FLIGHT_BOARD_FORMAT_EXAMPLE = """
Expected Flight Data Format:

OCCGROUND
PROD
Flights

Day of origin
Airport
VIE

06:19  -6   08:08  -17  BT271   RIX - VIE  YL-AAU  ARR  144  LDM  CLOSED
06:49  -1   08:54  +19  SN2901  BRU - VIE  YL-ABL  ARR       LDM
07:15  +5   09:22  +2   OS311   VIE - ARN  YL-CSE  ARR       LDM
...

Format explanation:
- Scheduled time, delay, actual time, delay, flight number, route, aircraft, type, gate, status
- Times in HH:MM format
- Delays as +/- minutes
- Routes as XXX - XXX format
- Aircraft as YL-XXX format
- Status: LDM (Load message), SKD (Scheduled), CLOSED
"""


def _now(timezone: str, now: Optional[datetime]) -> datetime:
    tz = pytz.timezone(timezone)
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return tz.localize(now)
    return now.astimezone(tz)


def _at_clock(timezone: str, day: date, clock: str) -> datetime:
    """``clock`` on ``day`` in ``timezone``"""
    naive = datetime.combine(day, datetime.min.time()) + timedelta(minutes=clock_minutes(clock))
    return pytz.timezone(timezone).localize(naive)


def parse_flight_line(line: str, base_airport: str = 'VIE', timezone: str = DEFAULT_TIMEZONE,
                      now: Optional[datetime] = None) -> Optional[BoardFlight]:
    """One board row, or None when the row is too short or unreadable"""
    parts = line.split()
    if len(parts) < MIN_ROW_TOKENS:
        return None

    index = 0

    def take(pattern) -> str:
        nonlocal index
        if index < len(parts) and pattern.match(parts[index]):
            index += 1
            return parts[index - 1]
        return ''

    scheduled_time = take(_TIME_RE)
    scheduled_delay = take(_DELAY_RE)
    actual_time = take(_TIME_RE)
    actual_delay = take(_DELAY_RE)
    flight_number = take(_FLIGHT_NUMBER_RE)

    route = ''
    if index + 2 < len(parts) and parts[index + 1] == '-':
        route = f"{parts[index]} - {parts[index + 2]}"
        index += 3

    registration = take(_REGISTRATION_RE)
    flight_type = parts[index] if index < len(parts) and parts[index] in ('ARR', 'DEP') else ''
    if flight_type:
        index += 1
    gate = take(_GATE_RE)

    remaining = parts[index:]
    if 'CLOSED' in remaining:
        status = 'CLOSED'
    elif 'LDM' in remaining:
        status = 'LDM'
    else:
        status = 'SKD'

    if not flight_type and base_airport and base_airport in route:
        if route.endswith(base_airport):
            flight_type = 'ARR'
        elif route.startswith(base_airport):
            flight_type = 'DEP'

    if not scheduled_time:
        return None

    # Board rows carry no date: a time already gone today means tomorrow
    current = _now(timezone, now)
    scheduled = _at_clock(timezone, current.date(), scheduled_time)
    if scheduled < current:
        scheduled = _at_clock(timezone, current.date() + timedelta(days=1), scheduled_time)

    return BoardFlight(
        flight_number=flight_number,
        route=route,
        type=flight_type,
        scheduled_time=scheduled_time,
        actual_time=actual_time or None,
        delay=actual_delay or scheduled_delay or '0',
        registration=registration or None,
        gate=gate or None,
        status=status,
        scheduled_datetime=scheduled,
    )


def summarize_board(flights: Sequence[BoardFlight]) -> Dict[str, int]:
    return {
        'total_flights': len(flights),
        'arrivals': sum(1 for f in flights if f.type == 'ARR'),
        'departures': sum(1 for f in flights if f.type == 'DEP'),
        'scheduled': sum(1 for f in flights if f.status == 'SKD'),
        'landed': sum(1 for f in flights if f.status == 'LDM'),
        'closed': sum(1 for f in flights if f.status == 'CLOSED'),
    }


def parse_flight_board(flight_text: str, base_airport: str = 'VIE',
                       timezone: str = DEFAULT_TIMEZONE,
                       now: Optional[datetime] = None) -> FlightBoardResult:
    """Parse every data row of a flight board; header lines are skipped"""
    if not flight_text or not isinstance(flight_text, str):
        return FlightBoardResult(success=False, errors=['Invalid flight data text provided'])

    try:
        flights = []
        for raw in flight_text.strip().splitlines():
            line = raw.strip()
            if len(line) < 10 or not _ROW_START_RE.match(line):
                continue
            flight = parse_flight_line(line, base_airport, timezone, now)
            if flight is None:
                logger.warning(f"Skipping unreadable flight row: {line}")
                continue
            flights.append(flight)

        return FlightBoardResult(success=True, flights=flights, summary=summarize_board(flights))
    except Exception as e:
        logger.exception("Flight board parsing failed")
        return FlightBoardResult(success=False, errors=[f"Parsing error: {e}"])


# ============================================================================
# STANDBY AVAILABILITY
# ============================================================================

def _coerce_flight(flight: Union[BoardFlight, Dict[str, Any]]) -> BoardFlight:
    return flight if isinstance(flight, BoardFlight) else BoardFlight.from_dict(flight)


def get_available_flights(flights: Sequence[Union[BoardFlight, Dict[str, Any]]],
                          standby_start: str, standby_end: str,
                          timezone: str = DEFAULT_TIMEZONE,
                          standby_type: Union[StandbyType, str] = StandbyType.HOME,
                          now: Optional[datetime] = None) -> List[BoardFlight]:
    """
    Flights whose earliest call-out falls inside the standby window.

    The earliest call-out is the scheduled time minus the call-out buffer
    for the standby type. Window bounds are inclusive; an end clock before
    the start clock runs past midnight.
    """
    if not flights or not standby_start or not standby_end:
        return []
    if clock_minutes(standby_start) is None or clock_minutes(standby_end) is None:
        return []

    standby_type = StandbyType(standby_type)
    buffer = timedelta(minutes=CALLOUT_BUFFER_MINUTES[standby_type])

    current = _now(timezone, now)
    window_day = current.date()
    if current.strftime('%H:%M') > standby_end:
        window_day += timedelta(days=1)

    window_start = _at_clock(timezone, window_day, standby_start)
    window_end = _at_clock(timezone, window_day, standby_end)
    if window_end < window_start:
        window_end = _at_clock(timezone, window_day + timedelta(days=1), standby_end)

    available = []
    for raw in flights:
        flight = _coerce_flight(raw)
        if not flight.can_be_assigned or flight.scheduled_datetime is None:
            continue
        earliest_call = flight.scheduled_datetime - buffer
        if window_start <= earliest_call <= window_end:
            available.append(flight)
    return available


def calculate_standby_duration(start_time: str, end_time: str) -> float:
    """Standby length in hours, overnight-aware"""
    minutes = duration_minutes(start_time, end_time)
    return 0.0 if minutes is None else minutes / 60


def calculate_standby_stats(available_flights: Sequence[BoardFlight],
                            standby_start: str, standby_end: str) -> Dict[str, Any]:
    delayed = [f for f in available_flights if f.is_delayed]
    by_hour: Dict[str, int] = {}
    for flight in available_flights:
        hour = flight.scheduled_time.split(':')[0]
        by_hour[hour] = by_hour.get(hour, 0) + 1

    return {
        'total_flights': len(available_flights),
        'arrivals': sum(1 for f in available_flights if f.type == 'ARR'),
        'departures': sum(1 for f in available_flights if f.type == 'DEP'),
        'delayed_flights': len(delayed),
        'average_delay': (
            round(sum(abs(f.delay_minutes) for f in delayed) / len(delayed)) if delayed else 0
        ),
        'standby_duration': calculate_standby_duration(standby_start, standby_end),
        'flights_by_hour': by_hour,
    }
