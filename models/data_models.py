"""
data_models.py - Core Data Structures
======================================

Data models for roster extraction, duty periods, flight-board records and
FTL compliance results.

Duty periods carry local wall-clock times as ``HH:MM`` strings; the date is
the ordering key for every sequence handed to the compliance engine.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Dict, Any
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class DutyType(Enum):
    """Closed set of roster activities"""
    FLIGHT = "FLIGHT"
    STANDBY = "STANDBY"
    DAYOFF = "DAYOFF"
    TRAINING = "TRAINING"
    ADMIN = "ADMIN"


class ComplianceStatus(Enum):
    """
    Day classification, ordered by severity.

    LEGAL < WARNING < ILLEGAL. A day's status is the maximum over every
    issue raised for it.
    """
    LEGAL = "LEGAL"
    WARNING = "WARNING"
    ILLEGAL = "ILLEGAL"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def escalate(self, other: 'ComplianceStatus') -> 'ComplianceStatus':
        """Return the more severe of the two statuses"""
        return other if other.rank > self.rank else self


_STATUS_RANK = {
    ComplianceStatus.LEGAL: 0,
    ComplianceStatus.WARNING: 1,
    ComplianceStatus.ILLEGAL: 2,
}


class Severity(Enum):
    """Severity tag attached to individual issues"""
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class StandbyType(Enum):
    """Where the crew member waits while on standby"""
    AIRPORT = "airport"
    HOME = "home"


# ============================================================================
# ROSTER & DUTY STRUCTURES
# ============================================================================

@dataclass
class FlightSegment:
    """One flown sector within a duty"""
    flight_number: str
    departure: str           # IATA (e.g., "VIE")
    arrival: str             # IATA (e.g., "AMS")
    departure_time: str      # HH:MM local
    arrival_time: str        # HH:MM local
    aircraft_type: str = "Unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'flight_number': self.flight_number,
            'departure': self.departure,
            'arrival': self.arrival,
            'departure_time': self.departure_time,
            'arrival_time': self.arrival_time,
            'aircraft_type': self.aircraft_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlightSegment':
        return cls(
            flight_number=str(data.get('flight_number', '')).strip().upper(),
            departure=str(data.get('departure', '')).strip().upper(),
            arrival=str(data.get('arrival', '')).strip().upper(),
            departure_time=str(data.get('departure_time', '')).strip(),
            arrival_time=str(data.get('arrival_time', '')).strip(),
            aircraft_type=str(data.get('aircraft_type') or 'Unknown').strip(),
        )


@dataclass
class DutyPeriod:
    """
    One day's work assignment.

    ``report_time``/``off_duty_time`` are absent for DAYOFF. ``call_time`` and
    ``standby_start_time`` only matter for STANDBY: the moment the crew
    member was activated (if ever) and the start of the standby window.
    """
    date: date
    type: DutyType
    report_time: Optional[str] = None
    off_duty_time: Optional[str] = None
    call_time: Optional[str] = None
    standby_start_time: Optional[str] = None
    flights: List[FlightSegment] = field(default_factory=list)
    notes: str = ""

    @property
    def is_day_off(self) -> bool:
        return self.type == DutyType.DAYOFF

    @property
    def is_activated_standby(self) -> bool:
        """Standby duty that turned into a flight duty"""
        return self.type == DutyType.STANDBY and bool(self.call_time)

    @property
    def sectors(self) -> int:
        return len(self.flights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'type': self.type.value,
            'report_time': self.report_time,
            'off_duty_time': self.off_duty_time,
            'call_time': self.call_time,
            'standby_start_time': self.standby_start_time,
            'flights': [f.to_dict() for f in self.flights],
            'notes': self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DutyPeriod':
        """Build from a JSON-like dict (raises ValueError on bad date/type)"""
        raw_date = data.get('date')
        if isinstance(raw_date, datetime):
            duty_date = raw_date.date()
        elif isinstance(raw_date, date):
            duty_date = raw_date
        else:
            duty_date = datetime.strptime(str(raw_date), '%Y-%m-%d').date()

        return cls(
            date=duty_date,
            type=DutyType(str(data.get('type', '')).strip().upper()),
            report_time=data.get('report_time') or None,
            off_duty_time=data.get('off_duty_time') or None,
            call_time=data.get('call_time') or None,
            standby_start_time=data.get('standby_start_time') or None,
            flights=[FlightSegment.from_dict(f) for f in data.get('flights') or []],
            notes=str(data.get('notes') or ''),
        )


# ============================================================================
# COMPLIANCE RESULTS
# ============================================================================

@dataclass
class ComplianceIssue:
    """One explained rule trigger"""
    type: str                     # e.g. "FDP_EXCEEDED"
    message: str
    regulation: str               # e.g. "ORO.FTL.205(d)"
    severity: Severity
    fatigue_risk: str = ""
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'message': self.message,
            'regulation': self.regulation,
            'severity': self.severity.value,
            'fatigue_risk': self.fatigue_risk,
            'recommendation': self.recommendation,
        }


@dataclass
class ComplianceResult:
    """One evaluated day"""
    date: date
    type: DutyType
    status: ComplianceStatus = ComplianceStatus.LEGAL
    status_label: str = "LEGAL"
    issues: List[ComplianceIssue] = field(default_factory=list)
    calculations: Dict[str, Any] = field(default_factory=dict)
    regulations: List[Dict[str, str]] = field(default_factory=list)

    @property
    def issue_types(self) -> List[str]:
        return [issue.type for issue in self.issues]

    def add_issue(self, issue: ComplianceIssue, status: ComplianceStatus):
        """Attach an issue; status only ever moves towards ILLEGAL"""
        self.issues.append(issue)
        self.status = self.status.escalate(status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'type': self.type.value,
            'status': self.status.value,
            'status_label': self.status_label,
            'issues': [i.to_dict() for i in self.issues],
            'calculations': dict(self.calculations),
            'regulations': list(self.regulations),
        }


# ============================================================================
# PARSER ENVELOPES
# ============================================================================

@dataclass
class ParseResult:
    """Roster parser envelope"""
    success: bool
    errors: List[str] = field(default_factory=list)
    duty_periods: List[DutyPeriod] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    parser_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'errors': list(self.errors),
            'duty_periods': [d.to_dict() for d in self.duty_periods],
            'summary': dict(self.summary),
            'parser_used': self.parser_used,
        }


@dataclass
class BoardFlight:
    """One row of an operations flight-status board"""
    flight_number: str
    route: str                        # "RIX - VIE"
    type: str                         # "ARR" / "DEP" / "" when unknown
    scheduled_time: str               # HH:MM
    actual_time: Optional[str] = None
    delay: str = "0"                  # signed minutes, e.g. "+25"
    registration: Optional[str] = None
    gate: Optional[str] = None
    status: str = "SKD"               # SKD scheduled, LDM load message, CLOSED
    scheduled_datetime: Optional[datetime] = None

    @property
    def delay_minutes(self) -> int:
        try:
            return int(self.delay)
        except (TypeError, ValueError):
            return 0

    @property
    def is_delayed(self) -> bool:
        return self.delay_minutes != 0

    @property
    def can_be_assigned(self) -> bool:
        """Closed flights can no longer take a standby crew member"""
        return self.status != "CLOSED"

    @property
    def departure(self) -> str:
        return self.route.split(' - ')[0].strip()

    @property
    def arrival(self) -> str:
        return self.route.split(' - ')[-1].strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'flight_number': self.flight_number,
            'route': self.route,
            'type': self.type,
            'scheduled_time': self.scheduled_time,
            'actual_time': self.actual_time,
            'delay': self.delay,
            'delay_minutes': self.delay_minutes,
            'is_delayed': self.is_delayed,
            'registration': self.registration,
            'gate': self.gate,
            'status': self.status,
            'can_be_assigned': self.can_be_assigned,
            'scheduled_datetime': (
                self.scheduled_datetime.isoformat() if self.scheduled_datetime else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoardFlight':
        scheduled = data.get('scheduled_datetime')
        if isinstance(scheduled, str):
            scheduled = datetime.fromisoformat(scheduled)
        return cls(
            flight_number=data['flight_number'],
            route=data.get('route', ''),
            type=data.get('type') or '',
            scheduled_time=data['scheduled_time'],
            actual_time=data.get('actual_time'),
            delay=str(data.get('delay') or '0'),
            registration=data.get('registration'),
            gate=data.get('gate'),
            status=data.get('status', 'SKD'),
            scheduled_datetime=scheduled,
        )


@dataclass
class FlightBoardResult:
    """Flight-board parser envelope"""
    success: bool
    errors: List[str] = field(default_factory=list)
    flights: List[BoardFlight] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'errors': list(self.errors),
            'flights': [f.to_dict() for f in self.flights],
            'summary': dict(self.summary),
        }
