"""
Calendar Grid Roster Parser
===========================

Parses text copied out of a monthly calendar view (Roster Buster style).

The copy flattens the grid: day numbers, report markers, flight ranges and
check-out lines end up scattered across lines with no cell boundaries. The
parser collects report tokens and bare day numbers with their line
positions, pairs them with a greedy nearest-neighbour matcher, and parses
the lines around each pairing as one duty.

Matching is one-shot and deterministic: tokens are consumed on first match,
ties go to the first day number encountered, and nothing backtracks.
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from core.validation import validate_parsed_duties
from models.data_models import DutyPeriod, DutyType, FlightSegment, ParseResult
from parsers.roster_parser import UTC_NOTE, build_flight_segment, summarize_duties
from parsers.time_normalizer import DEFAULT_TIMEZONE, convert_time

logger = logging.getLogger(__name__)


REPORT_TOKEN_RE = re.compile(r'(\d{2}:\d{2})-\d{2}:\d{2}\s+\(Rep\s+(\d{4})Z?\)')
REPORT_CODE_RE = re.compile(r'\(Rep\s+(\d{4})Z?\)')
DAY_NUMBER_RE = re.compile(r'\b(\d{1,2})\b')
MONTH_YEAR_RE = re.compile(r'([A-Za-z]+)\s+(\d{4})')
HEADER_LINE_RE = re.compile(r'^[A-Za-z]+\s+\d{4}$')
FLIGHT_RANGE_RE = re.compile(r'(\d{2}:\d{2})-(\d{2}:\d{2})\s+([A-Z]{3})\s*-\s*([A-Z]{3})')
LAYOVER_RE = re.compile(r'\d{2}:\d{2}\s+Layover\s*\([^)]+\)')
STANDBY_RE = re.compile(r'(\d{2}:\d{2})-(\d{2}:\d{2})\s+Unknown\s*-\s*SBYHOME')
CHECK_OUT_RE = re.compile(r'(\d{2}:\d{2})\s+Check\s+Out\s*[-:]\s*([A-Z]{3})')

STANDBY_MARKER = 'SBYHOME'

_MONTHS = {name.lower(): number for number, name in enumerate(calendar.month_name) if name}
_MONTHS.update({name.lower(): number for number, name in enumerate(calendar.month_abbr) if name})

CALENDAR_GRID_FORMAT_EXAMPLE = """June 2025
Monday Tuesday 2 3 Unknown - DAYOFF Unknown - DAYOFF 9 10 09:15 Layover (12:39 hours)
09:15-10:25 (Rep 0915Z)
10:25-12:10 AMS - VIE
15:20-17:15 VIE - AMS
18:05-19:55 AMS - VIE
20:15 Check Out - DEB
Day off - DAYOFF 16 17 Day off - DAYOFF Day off - DAYOFF 23 24 03:30-05:10 (Rep 0330Z)
05:10-07:20 VIE - ARN
08:05-10:15 ARN - VIE
13:00-14:10 (DH) Vienna (VIE) -
Berlin (BER)
14:30 Check Out - DEB
14:31 Layover (13:19 hours)"""


# ============================================================================
# TOKENS
# ============================================================================

@dataclass
class ReportToken:
    """`HH:MM-HH:MM (Rep HHMMZ)` occurrence"""
    line_index: int
    report_time: str
    rep_code: str
    used: bool = False


@dataclass
class DayToken:
    """Bare 1-31 integer that is not part of a clock value"""
    day: int
    line_index: int
    position: int
    used: bool = False


@dataclass
class DutyBlock:
    """Lines attributed to one calendar day"""
    day: int
    kind: str                       # 'duty', 'standby' or 'dayoff'
    content: str = ''
    rep_code: Optional[str] = None


def find_report_tokens(lines: List[str]) -> List[ReportToken]:
    tokens = []
    for index, line in enumerate(lines):
        for match in REPORT_TOKEN_RE.finditer(line):
            tokens.append(ReportToken(index, match.group(1), match.group(2)))
    return tokens


def find_day_tokens(lines: List[str]) -> List[DayToken]:
    tokens = []
    for index, line in enumerate(lines):
        if HEADER_LINE_RE.match(line):
            continue
        for match in DAY_NUMBER_RE.finditer(line):
            number = int(match.group(1))
            before = line[match.start() - 1] if match.start() > 0 else ' '
            after = line[match.end()] if match.end() < len(line) else ' '
            if 1 <= number <= 31 and before != ':' and after != ':':
                tokens.append(DayToken(number, index, match.start()))
    return tokens


def extract_month_year(text: str, today: Optional[date] = None) -> Tuple[int, int]:
    """First "<Month> <YYYY>" in the text, else the current month"""
    for match in MONTH_YEAR_RE.finditer(text):
        month = _MONTHS.get(match.group(1).lower())
        if month:
            return int(match.group(2)), month
    today = today or date.today()
    return today.year, today.month


# ============================================================================
# GREEDY MATCHER
# ============================================================================

class GreedyDayMatcher:
    """
    Pair report/standby tokens with day numbers by line distance.

    A day number below its report token pays a fixed penalty, since day
    headers sit at or above the duty content they label.
    """

    REPORT_PENALTY = 5
    REPORT_THRESHOLD = 10
    STANDBY_THRESHOLD = 5

    def __init__(self, days: List[DayToken]):
        self.days = days

    def match_report(self, report: ReportToken) -> Optional[Tuple[DayToken, int]]:
        best, best_distance = None, None
        for day in self.days:
            if day.used:
                continue
            distance = abs(report.line_index - day.line_index)
            if day.line_index > report.line_index:
                distance += self.REPORT_PENALTY
            if best_distance is None or distance < best_distance:
                best, best_distance = day, distance

        if best is None or best_distance > self.REPORT_THRESHOLD:
            return None
        report.used = True
        best.used = True
        return best, best_distance

    def match_standby(self, line_index: int) -> Optional[DayToken]:
        best, best_distance = None, None
        for day in self.days:
            if day.used:
                continue
            distance = abs(line_index - day.line_index)
            if distance <= self.STANDBY_THRESHOLD and (best_distance is None or distance < best_distance):
                best, best_distance = day, distance

        if best is not None:
            best.used = True
        return best


# ============================================================================
# PARSER
# ============================================================================

class CalendarGridParser:
    """
    Parse a flattened monthly calendar into one duty per day number.

    Args:
        is_utc: calendar times are UTC (the usual export setting)
        default_timezone: zone for airports missing from the lookup
        home_base: airport used for standby and flightless report times
        today: reference date when the text has no month header
    """

    CONTENT_LOOKAHEAD = 20

    def __init__(self, is_utc: bool = True, default_timezone: str = DEFAULT_TIMEZONE,
                 home_base: str = 'VIE', today: Optional[date] = None):
        self.is_utc = is_utc
        self.default_timezone = default_timezone
        self.home_base = home_base
        self.today = today

    def parse(self, roster_text: str) -> ParseResult:
        if not roster_text or not isinstance(roster_text, str):
            return ParseResult(success=False, errors=['Invalid roster text provided'])

        try:
            year, month = extract_month_year(roster_text, self.today)
            lines = [line.strip() for line in roster_text.splitlines()]
            lines = [line for line in lines if line]

            errors: List[str] = []
            duties: List[DutyPeriod] = []
            for block in self.extract_blocks(lines):
                try:
                    block_date = date(year, month, block.day)
                except ValueError:
                    errors.append(f"Day {block.day}: not a valid date in {year}-{month:02d}")
                    logger.warning(f"Skipping day {block.day}: invalid for {year}-{month:02d}")
                    continue
                duties.append(self.parse_block(block, block_date))

            errors.extend(validate_parsed_duties(duties))
            return ParseResult(
                success=not errors,
                errors=errors,
                duty_periods=duties,
                summary=summarize_duties(duties, self.is_utc),
                parser_used='calendar_grid',
            )
        except Exception as e:
            logger.exception("Calendar grid parsing failed")
            return ParseResult(success=False, errors=[f"Parsing error: {e}"])

    def extract_blocks(self, lines: List[str]) -> List[DutyBlock]:
        """One block per day number, sorted, first occurrence wins"""
        reports = find_report_tokens(lines)
        days = find_day_tokens(lines)
        matcher = GreedyDayMatcher(days)
        blocks: List[DutyBlock] = []

        for report in reports:
            if report.used:
                continue
            matched = matcher.match_report(report)
            if matched is None:
                logger.warning(f"Rep {report.rep_code} on line {report.line_index + 1} has no nearby day")
                continue
            day, distance = matched
            logger.debug(f"Day {day.day} -> Rep {report.rep_code} (distance {distance})")
            blocks.append(DutyBlock(
                day=day.day,
                kind='duty',
                content=self._harvest_content(lines, report, day),
                rep_code=report.rep_code,
            ))

        for index, line in enumerate(lines):
            if STANDBY_MARKER not in line:
                continue
            day = matcher.match_standby(index)
            if day is not None:
                blocks.append(DutyBlock(day=day.day, kind='standby', content=line))

        assigned = {block.day for block in blocks}
        for day_number in sorted({d.day for d in days}):
            if day_number not in assigned:
                blocks.append(DutyBlock(day=day_number, kind='dayoff', content='Day off - DAYOFF'))

        unique: List[DutyBlock] = []
        seen = set()
        for block in sorted(blocks, key=lambda b: b.day):
            if block.day not in seen:
                unique.append(block)
                seen.add(block.day)
        return unique

    def _harvest_content(self, lines: List[str], report: ReportToken, day: DayToken) -> str:
        """Duty lines from the day number on, up to the next duty's report marker"""
        start = min(report.line_index, day.line_index)
        end = min(len(lines), start + self.CONTENT_LOOKAHEAD)
        kept = []
        for index in range(start, end):
            line = lines[index]
            if index > report.line_index and 'Rep ' in line and report.rep_code not in line:
                break
            if ('Rep ' in line or 'Check Out' in line or FLIGHT_RANGE_RE.search(line)
                    or STANDBY_MARKER in line):
                kept.append(line)
        return '\n'.join(kept)

    # ------------------------------------------------------------------
    # Block parsing
    # ------------------------------------------------------------------

    def parse_block(self, block: DutyBlock, block_date: date) -> DutyPeriod:
        if block.kind == 'dayoff':
            return DutyPeriod(date=block_date, type=DutyType.DAYOFF, notes='Day off')
        if block.kind == 'standby':
            return self._parse_standby(block, block_date)
        return self._parse_flight_duty(block, block_date)

    def _parse_standby(self, block: DutyBlock, block_date: date) -> DutyPeriod:
        match = STANDBY_RE.search(block.content)
        if not match:
            logger.warning(f"Day {block.day}: standby marker without a time range")
            return DutyPeriod(date=block_date, type=DutyType.STANDBY,
                              notes=f"Standby duty ({STANDBY_MARKER}), times not found")

        start = self._convert(match.group(1), block_date, self.home_base)
        end = self._convert(match.group(2), block_date, self.home_base)
        return DutyPeriod(
            date=block_date,
            type=DutyType.STANDBY,
            report_time=start,
            off_duty_time=end,
            standby_start_time=start,
            notes=f"Standby duty ({STANDBY_MARKER})",
        )

    def _parse_flight_duty(self, block: DutyBlock, block_date: date) -> DutyPeriod:
        content = LAYOVER_RE.sub('', block.content)

        flights: List[FlightSegment] = []
        for match in FLIGHT_RANGE_RE.finditer(content):
            dep_time, arr_time, departure, arrival = match.groups()
            segment = build_flight_segment(
                f"FL{len(flights) + 1}", departure, arrival, dep_time, arr_time, block_date,
                is_utc=self.is_utc, default_timezone=self.default_timezone,
            )
            if segment is not None:
                flights.append(segment)

        off_duty_time = None
        check_out = CHECK_OUT_RE.search(content)
        if check_out:
            off_duty_time = self._convert(check_out.group(1), block_date, check_out.group(2))

        rep_code = block.rep_code
        if rep_code is None:
            code_match = REPORT_CODE_RE.search(content)
            rep_code = code_match.group(1) if code_match else None

        report_time = None
        if rep_code:
            report_airport = flights[0].departure if flights else self.home_base
            report_time = self._convert(rep_code, block_date, report_airport)

        return DutyPeriod(
            date=block_date,
            type=DutyType.FLIGHT,
            report_time=report_time,
            off_duty_time=off_duty_time,
            flights=flights,
            notes=f"Parsed from Roster Buster{UTC_NOTE if self.is_utc else ''}",
        )

    def _convert(self, raw: str, reference_date: date, airport: str) -> str:
        return convert_time(raw, reference_date, airport, self.is_utc, self.default_timezone).time


def parse_calendar_grid(roster_text: str, is_utc: bool = True,
                        default_timezone: str = DEFAULT_TIMEZONE,
                        home_base: str = 'VIE', today: Optional[date] = None) -> ParseResult:
    """Parse a flattened monthly calendar roster"""
    return CalendarGridParser(is_utc, default_timezone, home_base, today).parse(roster_text)
