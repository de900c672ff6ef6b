"""
Roster Format Detection
=======================

Chooses between the calendar-grid and line-structured parsers by counting
calendar-grid signatures in the raw text. Two or more distinct signatures
mean calendar grid; anything else goes to the line parser.
"""

import logging
import re
from datetime import date
from typing import List, Optional

from models.data_models import ParseResult
from parsers.calendar_grid_parser import CALENDAR_GRID_FORMAT_EXAMPLE, CalendarGridParser
from parsers.roster_parser import ROSTER_FORMAT_EXAMPLE, LineRosterParser
from parsers.time_normalizer import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

CALENDAR_GRID = 'calendar_grid'
LINE_STRUCTURED = 'line_structured'

CALENDAR_GRID_SIGNATURES = (
    re.compile(r'Monday\s+Tuesday\s+Wednesday\s+Thursday\s+Friday\s+Saturday\s+Sunday', re.I),
    re.compile(r'\d{1,2}\s+\d{1,2}\s+\d{1,2}\s+\d{1,2}\s+\d{1,2}\s+\d{1,2}\s+\d{1,2}'),
    re.compile(r'Unknown - DAYOFF', re.I),
    re.compile(r'Rep \d{4}Z?', re.I),
    re.compile(r'Check Out.*DEB', re.I),
    re.compile(r'Layover \(\d+:\d+ hours\)', re.I),
    re.compile(r'\d{2}:\d{2}-\d{2}:\d{2}\s+[A-Z]{3}\s*-\s*[A-Z]{3}', re.I),
    re.compile(r'SBYHOME', re.I),
)

MIN_SIGNATURE_MATCHES = 2

FORMAT_EXAMPLES = {
    CALENDAR_GRID: CALENDAR_GRID_FORMAT_EXAMPLE,
    LINE_STRUCTURED: ROSTER_FORMAT_EXAMPLE,
}


def matched_signatures(text: str) -> List[str]:
    """Patterns of the calendar-grid layout found in ``text``"""
    if not text:
        return []
    return [p.pattern for p in CALENDAR_GRID_SIGNATURES if p.search(text)]


def is_calendar_grid(text: str) -> bool:
    return len(matched_signatures(text)) >= MIN_SIGNATURE_MATCHES


def detect_roster_format(text: str) -> str:
    return CALENDAR_GRID if is_calendar_grid(text) else LINE_STRUCTURED


def parse_roster(roster_text: str, is_utc: bool = False,
                 default_timezone: str = DEFAULT_TIMEZONE,
                 today: Optional[date] = None) -> ParseResult:
    """
    Detect the layout and run the matching parser.

    Calendar-grid exports always carry UTC times, so ``is_utc`` only applies
    to line-structured rosters.
    """
    roster_format = detect_roster_format(roster_text if isinstance(roster_text, str) else '')
    logger.info(f"Detected roster format: {roster_format}")

    if roster_format == CALENDAR_GRID:
        result = CalendarGridParser(True, default_timezone, today=today).parse(roster_text)
    else:
        result = LineRosterParser(is_utc, default_timezone, today).parse(roster_text)
    result.parser_used = roster_format
    return result
