# roster_parser.py - Line-structured roster parser

"""
Roster Parser - Extract duty periods from line-structured roster text

Handles the explicitly tagged export where each duty reads:

    Sat07 C/I VIE 1200
    OS 655 VIE 1314 1454 RMO A220
    C/O 2039 AMS [FT 05:13]
    [DP 08:39]
    [FDP 08:19]

Lines are folded one at a time into a small state object holding the
currently open duty. A new day header flushes the open duty; end of input
flushes the last one.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from functools import reduce
from typing import Any, Dict, List, Optional, Sequence

from core.time_utils import duration_minutes
from core.validation import validate_parsed_duties
from models.data_models import DutyPeriod, DutyType, FlightSegment, ParseResult
from parsers.time_normalizer import DEFAULT_TIMEZONE, convert_time

logger = logging.getLogger(__name__)


# Plausible sector length once day rollover is applied
MIN_SEGMENT_HOURS = 0.5
MAX_SEGMENT_HOURS = 16.0

DATE_HEADER_RE = re.compile(r'^([A-Za-z]{3})(\d{2})(?:\s|$)')
CHECK_IN_RE = re.compile(r'C/I\s+([A-Z]{3})\s+(\d{4})')
STANDALONE_CHECK_IN_RE = re.compile(r'^C/I\s+([A-Z]{3})\s+(\d{4})$')
FLIGHT_ROW_RE = re.compile(
    r'^([A-Z]{2})\s+(\d{3,4})\s+([A-Z]{3})\s+(\d{4})\s+(\d{4})\s+([A-Z]{3})\s+([A-Z0-9]+)$'
)
CHECK_OUT_RE = re.compile(r'^C/O\s+(\d{4})\s+([A-Z]{3})\s+\[FT\s+(\d{2}:\d{2})\]')
DP_ANNOTATION_RE = re.compile(r'\[DP\s+(\d{2}:\d{2})\]')
FDP_ANNOTATION_RE = re.compile(r'\[FDP\s+(\d{2}:\d{2})\]')

UTC_NOTE = ' (UTC→Local)'

ROSTER_FORMAT_EXAMPLE = """Sat07 C/I VIE 1200
OS 655 VIE 1314 1454 RMO A220
OS 656 RMO 1539 1715 VIE A220
OS 377 VIE 1822 2019 AMS A220
C/O 2039 AMS [FT 05:13]
[DP 08:39]
[FDP 08:19]
Sun08 C/I AMS 0915
OS 380 AMS 1100 1240 VIE A220
OS 213 VIE 1332 1502 FRA A220
OS 214 FRA 1601 1720 VIE A220
OS 377 VIE 1816 2012 AMS A220
C/O 2032 AMS [FT 06:25]
[DP 11:17]
[FDP 10:57]"""


# ============================================================================
# SHARED HELPERS
# ============================================================================

def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def resolve_roster_date(day_number: int, today: Optional[date] = None) -> date:
    """
    Resolve a bare day-of-month against today's date.

    Today or later in the current month wins; otherwise the same day next
    month; otherwise the current month even though it is in the past.
    Raises ValueError when the day exists in neither month.
    """
    today = today or date.today()
    current = _safe_date(today.year, today.month, day_number)
    if current is not None and current >= today:
        return current

    if today.month == 12:
        next_year, next_month = today.year + 1, 1
    else:
        next_year, next_month = today.year, today.month + 1
    following = _safe_date(next_year, next_month, day_number)
    if following is not None:
        return following
    if current is not None:
        return current
    raise ValueError(f"Day {day_number} does not exist in the current or next month")


def build_flight_segment(flight_number: str, departure: str, arrival: str,
                         departure_raw: str, arrival_raw: str, reference_date: date,
                         aircraft_type: str = 'Unknown', is_utc: bool = False,
                         default_timezone: str = DEFAULT_TIMEZONE) -> Optional[FlightSegment]:
    """
    Normalise both clock values and build a segment.

    Returns None for implausible sectors: a same-airport hop under 30
    minutes, or a duration outside [0.5h, 16h]. Duration is taken from the
    emitted local clocks with the overnight rule, the same reading the
    compliance engine uses for flight time.
    """
    dep = convert_time(departure_raw, reference_date, departure, is_utc, default_timezone)
    arr = convert_time(arrival_raw, reference_date, arrival, is_utc, default_timezone)

    minutes = duration_minutes(dep.time, arr.time)
    if minutes is not None:
        hours = minutes / 60

        if departure == arrival and hours < MIN_SEGMENT_HOURS:
            logger.warning(
                f"Skipping {flight_number} {departure}-{arrival}: same-airport hop of {hours:.2f}h"
            )
            return None

        if hours < MIN_SEGMENT_HOURS or hours > MAX_SEGMENT_HOURS:
            logger.warning(
                f"Skipping {flight_number} {departure}-{arrival} "
                f"{dep.time}-{arr.time}: implausible duration {hours:.2f}h"
            )
            return None

    return FlightSegment(
        flight_number=flight_number,
        departure=departure,
        arrival=arrival,
        departure_time=dep.time,
        arrival_time=arr.time,
        aircraft_type=aircraft_type,
    )


def summarize_duties(duties: Sequence[DutyPeriod], is_utc: bool) -> Dict[str, Any]:
    """Counts by duty type and total segments"""
    return {
        'total_days': len(duties),
        'total_flights': sum(len(d.flights) for d in duties),
        'flight_days': sum(1 for d in duties if d.type == DutyType.FLIGHT),
        'standby_days': sum(1 for d in duties if d.type == DutyType.STANDBY),
        'day_offs': sum(1 for d in duties if d.type == DutyType.DAYOFF),
        'timezone_info': (
            'Times converted from UTC to local' if is_utc else 'Times assumed to be local'
        ),
    }


# ============================================================================
# FOLD STATE
# ============================================================================

@dataclass
class DutyAccumulator:
    """The duty currently being assembled"""
    date: date
    report_time: Optional[str] = None
    off_duty_time: Optional[str] = None
    flights: List[FlightSegment] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def check_in(self, airport: str, report_time: str, is_utc: bool):
        self.report_time = report_time
        self.notes.insert(0, f"Base: {airport}{UTC_NOTE if is_utc else ''}")

    def to_duty(self) -> DutyPeriod:
        return DutyPeriod(
            date=self.date,
            type=DutyType.FLIGHT,
            report_time=self.report_time,
            off_duty_time=self.off_duty_time,
            flights=list(self.flights),
            notes=' | '.join(self.notes),
        )


@dataclass
class LineParserState:
    """Everything the fold carries between lines"""
    duties: List[DutyPeriod] = field(default_factory=list)
    current: Optional[DutyAccumulator] = None
    errors: List[str] = field(default_factory=list)

    def flush(self) -> 'LineParserState':
        if self.current is not None:
            self.duties.append(self.current.to_duty())
            self.current = None
        return self


# ============================================================================
# LINE PARSER
# ============================================================================

class LineRosterParser:
    """
    Parse check-in / flight-row / check-out rosters.

    Args:
        is_utc: roster times are UTC and get converted to airport local time
        default_timezone: zone used for airports missing from the lookup
        today: reference date for resolving day-of-month headers
    """

    def __init__(self, is_utc: bool = False, default_timezone: str = DEFAULT_TIMEZONE,
                 today: Optional[date] = None):
        self.is_utc = is_utc
        self.default_timezone = default_timezone
        self.today = today

    def parse(self, roster_text: str) -> ParseResult:
        if not roster_text or not isinstance(roster_text, str):
            return ParseResult(success=False, errors=['Invalid roster text provided'])

        try:
            lines = [line.strip() for line in roster_text.strip().splitlines()]
            lines = [line for line in lines if line]

            state = reduce(self._step, lines, LineParserState()).flush()

            errors = state.errors + validate_parsed_duties(state.duties)
            return ParseResult(
                success=not errors,
                errors=errors,
                duty_periods=state.duties,
                summary=summarize_duties(state.duties, self.is_utc),
                parser_used='line_structured',
            )
        except Exception as e:
            logger.exception("Line roster parsing failed")
            return ParseResult(success=False, errors=[f"Parsing error: {e}"])

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _step(self, state: LineParserState, line: str) -> LineParserState:
        header = DATE_HEADER_RE.match(line)
        if header:
            return self._open_duty(state.flush(), line, int(header.group(2)))

        current = state.current
        if current is None:
            return state

        check_in = STANDALONE_CHECK_IN_RE.match(line)
        if check_in:
            if not current.report_time:
                airport = check_in.group(1)
                report = self._convert(check_in.group(2), current.date, airport)
                current.check_in(airport, report, self.is_utc)
            return state

        flight = FLIGHT_ROW_RE.match(line)
        if flight:
            airline, number, dep, dep_time, arr_time, arr, aircraft = flight.groups()
            segment = build_flight_segment(
                f"{airline}{number}", dep, arr, dep_time, arr_time, current.date,
                aircraft_type=aircraft, is_utc=self.is_utc,
                default_timezone=self.default_timezone,
            )
            if segment is not None:
                current.flights.append(segment)
            return state

        check_out = CHECK_OUT_RE.match(line)
        if check_out:
            off_raw, airport, flight_time = check_out.groups()
            current.off_duty_time = self._convert(off_raw, current.date, airport)
            current.notes.append(f"End: {airport}")
            current.notes.append(f"FT: {flight_time}")
            return state

        # Duty-period annotations are provenance only
        dp = DP_ANNOTATION_RE.search(line)
        if dp:
            current.notes.append(f"DP: {dp.group(1)}")
        fdp = FDP_ANNOTATION_RE.search(line)
        if fdp:
            current.notes.append(f"FDP: {fdp.group(1)}")
        return state

    def _open_duty(self, state: LineParserState, line: str, day_number: int) -> LineParserState:
        try:
            duty_date = resolve_roster_date(day_number, self.today)
        except ValueError as e:
            state.errors.append(f"Invalid day header '{line.split()[0]}': {e}")
            return state

        state.current = DutyAccumulator(date=duty_date)
        check_in = CHECK_IN_RE.search(line)
        if check_in:
            airport = check_in.group(1)
            report = self._convert(check_in.group(2), duty_date, airport)
            state.current.check_in(airport, report, self.is_utc)
        return state

    def _convert(self, raw: str, reference_date: date, airport: str) -> str:
        return convert_time(raw, reference_date, airport, self.is_utc, self.default_timezone).time


def parse_roster_text(roster_text: str, is_utc: bool = False,
                      default_timezone: str = DEFAULT_TIMEZONE,
                      today: Optional[date] = None) -> ParseResult:
    """Parse a line-structured roster"""
    return LineRosterParser(is_utc, default_timezone, today).parse(roster_text)
