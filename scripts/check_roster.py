#!/usr/bin/env python3
"""
Check a roster file against EASA FTL limits

Reads a roster text file (line-structured or calendar-grid export) or a
roster PDF, parses it and prints one line per day:

    2025-06-09  FLIGHT    WARNING   FDP_CLOSE_TO_LIMIT, NIGHT_DUTY_FATIGUE_RISK
"""

import argparse
import logging
import sys
from pathlib import Path

from core import FTLComplianceChecker, SUPPORTED_LANGUAGES, summarize_results
from core.compliance import DATE_SCOPES
from parsers.format_detection import parse_roster
from parsers.pdf_roster_parser import parse_pdf_roster
from parsers.time_normalizer import DEFAULT_TIMEZONE


def main() -> int:
    parser = argparse.ArgumentParser(description="EASA FTL compliance check for a roster file")
    parser.add_argument("roster_file", type=Path, help="Roster text file or PDF")
    parser.add_argument("--utc", action="store_true",
                        help="Line-structured roster times are UTC (calendar grids always are)")
    parser.add_argument("--scope", choices=DATE_SCOPES, default="all",
                        help="Days to report (default: all)")
    parser.add_argument("--language", choices=SUPPORTED_LANGUAGES, default="en",
                        help="Message language (default: en)")
    parser.add_argument("--timezone", default=DEFAULT_TIMEZONE,
                        help=f"Fallback timezone for unknown airports (default: {DEFAULT_TIMEZONE})")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    path = args.roster_file
    if path.suffix.lower() == ".pdf":
        result = parse_pdf_roster(path, is_utc=args.utc, default_timezone=args.timezone)
    else:
        result = parse_roster(path.read_text(encoding="utf-8"), args.utc, args.timezone)

    for error in result.errors:
        print(f"! {error}", file=sys.stderr)
    if not result.success:
        return 1

    print(f"Parsed {len(result.duty_periods)} duty periods ({result.parser_used})")
    print()

    results = FTLComplianceChecker().check(result.duty_periods, args.scope, args.language)
    for day in results:
        issues = ", ".join(day.issue_types) or "-"
        print(f"{day.date.isoformat()}  {day.type.value:<9} {day.status_label:<15} {issues}")

    summary = summarize_results(results)
    print()
    print(
        f"Days: {summary['total_days']}  legal: {summary['legal_days']}  "
        f"warning: {summary['warning_days']}  illegal: {summary['illegal_days']}"
    )
    return 0 if summary["illegal_days"] == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
