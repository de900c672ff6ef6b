"""
Duty Data Validation
====================

Field-level checks run before the compliance engine sees any data, plus
the post-parse checks applied to roster parser output.

Messages are itemized ("Duty 2, Flight 1: ...") so callers can show
them next to the offending row. Nothing in here raises.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Sequence

from core.time_utils import duration_minutes, is_valid_clock
from models.data_models import DutyPeriod, DutyType

VALID_DUTY_TYPES = tuple(t.value for t in DutyType)

# Plausibility bounds for hand-entered data
MAX_PLAUSIBLE_FDP_HOURS = 14.0
MIN_FLIGHT_HOURS = 0.5
MAX_FLIGHT_HOURS = 16.0

_AIRPORT_RE = re.compile(r'^[A-Z]{3}$')


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def is_valid_date(value: Any) -> bool:
    try:
        datetime.strptime(str(value), '%Y-%m-%d')
        return True
    except ValueError:
        return False


def is_valid_airport_code(code: Any) -> bool:
    return isinstance(code, str) and bool(_AIRPORT_RE.match(code.strip().upper()))


def validate_flight_data(flight_data: Any) -> ValidationResult:
    """Validate raw duty dicts as received over the API"""
    if not isinstance(flight_data, list):
        return ValidationResult(False, ['Flight data must be an array'])
    if not flight_data:
        return ValidationResult(False, ['At least one flight duty period is required'])

    errors = []
    for index, duty in enumerate(flight_data):
        if not isinstance(duty, dict):
            errors.append(f"Duty {index + 1}: Duty period must be an object")
            continue
        errors.extend(validate_duty_period(duty, index))
    return ValidationResult(not errors, errors)


def validate_duty_period(duty: Dict[str, Any], index: int) -> List[str]:
    errors = []
    prefix = f"Duty {index + 1}:"

    if not duty.get('date'):
        errors.append(f"{prefix} Date is required")
    elif not is_valid_date(duty['date']):
        errors.append(f"{prefix} Invalid date format. Use YYYY-MM-DD")

    duty_type = str(duty.get('type') or '').upper()
    if not duty_type:
        errors.append(f"{prefix} Duty type is required")
    elif duty_type not in VALID_DUTY_TYPES:
        errors.append(
            f"{prefix} Invalid duty type. Must be FLIGHT, STANDBY, DAYOFF, TRAINING, or ADMIN"
        )

    for key, label in (('call_time', 'call time'), ('standby_start_time', 'standby start time')):
        if duty.get(key) and not is_valid_clock(duty[key]):
            errors.append(f"{prefix} Invalid {label} format. Use HH:MM")

    if duty_type == DutyType.DAYOFF.value:
        return errors

    report_time = duty.get('report_time')
    off_duty_time = duty.get('off_duty_time')
    required = duty_type == DutyType.FLIGHT.value

    if not report_time:
        if required:
            errors.append(f"{prefix} Report time is required for flight duties")
    elif not is_valid_clock(report_time):
        errors.append(f"{prefix} Invalid report time format. Use HH:MM")

    if not off_duty_time:
        if required:
            errors.append(f"{prefix} Off-duty time is required for flight duties")
    elif not is_valid_clock(off_duty_time):
        errors.append(f"{prefix} Invalid off-duty time format. Use HH:MM")

    flights = duty.get('flights')
    if required:
        if not isinstance(flights, list):
            errors.append(f"{prefix} Flights array is required for flight duties")
        elif not flights:
            errors.append(f"{prefix} At least one flight is required for flight duties")
    if isinstance(flights, list):
        for flight_index, flight in enumerate(flights):
            errors.extend(validate_flight(flight, index, flight_index))

    if is_valid_clock(report_time) and is_valid_clock(off_duty_time):
        fdp_hours = duration_minutes(report_time, off_duty_time) / 60
        if fdp_hours > MAX_PLAUSIBLE_FDP_HOURS:
            errors.append(
                f"{prefix} FDP exceeds {MAX_PLAUSIBLE_FDP_HOURS:.0f} hours "
                f"({fdp_hours:.1f}h). Please verify times."
            )

    return errors


def validate_flight(flight: Any, duty_index: int, flight_index: int) -> List[str]:
    prefix = f"Duty {duty_index + 1}, Flight {flight_index + 1}:"
    if not isinstance(flight, dict):
        return [f"{prefix} Flight must be an object"]

    errors = []
    if not flight.get('flight_number'):
        errors.append(f"{prefix} Flight number is required")

    for key, label in (('departure', 'Departure'), ('arrival', 'Arrival')):
        if not flight.get(key):
            errors.append(f"{prefix} {label} airport is required")
        elif not is_valid_airport_code(flight[key]):
            errors.append(f"{prefix} {label} airport must be 3-letter IATA code")

    dep, arr = flight.get('departure_time'), flight.get('arrival_time')
    for value, label in ((dep, 'departure'), (arr, 'arrival')):
        if not value:
            errors.append(f"{prefix} {label.capitalize()} time is required")
        elif not is_valid_clock(value):
            errors.append(f"{prefix} Invalid {label} time format. Use HH:MM")

    if is_valid_clock(dep) and is_valid_clock(arr):
        hours = duration_minutes(dep, arr) / 60
        if hours > MAX_FLIGHT_HOURS:
            errors.append(
                f"{prefix} Flight time exceeds {MAX_FLIGHT_HOURS:.0f} hours "
                f"({hours:.1f}h). Please verify times."
            )
        elif hours < MIN_FLIGHT_HOURS:
            errors.append(
                f"{prefix} Flight time is less than 30 minutes ({hours:.1f}h). Please verify times."
            )
    return errors


def validate_parsed_duties(duties: Sequence[DutyPeriod]) -> List[str]:
    """
    Post-parse checks on roster parser output.

    Day-off entries are skipped; flights are only required for FLIGHT duties.
    """
    errors = []
    for index, duty in enumerate(duties):
        if duty.is_day_off:
            continue
        prefix = f"Duty {index + 1}"
        if not duty.date:
            errors.append(f"{prefix}: Missing date")
        if not duty.report_time:
            errors.append(f"{prefix}: Missing report time")
        if not duty.off_duty_time:
            errors.append(f"{prefix}: Missing off-duty time")

        if duty.type == DutyType.FLIGHT and not duty.flights:
            errors.append(f"{prefix}: No flights found")

        for flight_index, flight in enumerate(duty.flights):
            flight_prefix = f"{prefix}, Flight {flight_index + 1}"
            if not flight.flight_number:
                errors.append(f"{flight_prefix}: Missing flight number")
            if not is_valid_airport_code(flight.departure):
                errors.append(f"{flight_prefix}: Invalid departure airport")
            if not is_valid_airport_code(flight.arrival):
                errors.append(f"{flight_prefix}: Invalid arrival airport")
            if not flight.departure_time:
                errors.append(f"{flight_prefix}: Missing departure time")
            if not flight.arrival_time:
                errors.append(f"{flight_prefix}: Missing arrival time")
    return errors
