"""
EASA FTL Compliance Engine
==========================

Evaluates an ordered sequence of duty periods against EASA FTL limits
(EU Regulation 965/2012) and explains every trigger.

Per-day checks:
- FDP vs. maximum daily FDP (ORO.FTL.205), including the 1h extension
- Rest since the previous duty (ORO.FTL.235)
- Daily flight time (ORO.FTL.210)

Rolling windows, read across the full supplied history:
- Flight time over 7 days, month-to-date and year-to-date (ORO.FTL.210(a))
- Duty time over 7 and 14 days (ORO.FTL.190)
- Extensions used over 7 days (ORO.FTL.205(d))

Plus an additive fatigue score and a consecutive-duty count.

A day's status only moves towards ILLEGAL; no later check can downgrade it.
Duty periods passed in are never modified.

References: EASA ORO.FTL, AMC1 ORO.FTL.120
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from core.parameters import DEFAULT_LIMITS, FTLLimits
from core.time_utils import (
    add_minutes,
    clock_hour,
    clock_minutes,
    duration_minutes,
    format_duration,
    hours_to_minutes,
    minutes_between,
)
from core.translations import DEFAULT_LANGUAGE, TRANSLATIONS, get_translations
from models.data_models import (
    ComplianceIssue,
    ComplianceResult,
    ComplianceStatus,
    DutyPeriod,
    DutyType,
    FlightSegment,
    Severity,
)

logger = logging.getLogger(__name__)

DATE_SCOPES = ('today', '3days', 'week', 'all')

# Days either side of "today" covered by each scope
_SCOPE_RADIUS = {
    'today': 0,
    '3days': 1,
    'week': 3,
}


# ============================================================================
# ISSUE CATALOGUE
# ============================================================================

@dataclass(frozen=True)
class IssueDefinition:
    regulation: str
    severity: Severity
    status: ComplianceStatus
    fatigue_risk: str
    recommendation: str


ISSUE_CATALOGUE: Dict[str, IssueDefinition] = {
    'FDP_EXCEEDED': IssueDefinition(
        'ORO.FTL.205(d)', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'High risk of pilot fatigue due to excessive duty period beyond extension limits',
        'Reduce FDP or provide adequate in-flight rest',
    ),
    'FDP_EXTENSION_REQUIRED': IssueDefinition(
        'ORO.FTL.205(d)', Severity.MEDIUM, ComplianceStatus.WARNING,
        'Extension required - increased fatigue risk',
        'Ensure proper notification and crew agreement for extension',
    ),
    'FDP_CLOSE_TO_LIMIT': IssueDefinition(
        'ORO.FTL.205', Severity.MEDIUM, ComplianceStatus.WARNING,
        'Increased fatigue risk when approaching FDP limits',
        'Monitor crew alertness and consider fatigue mitigation',
    ),
    'MAX_EXTENSIONS_REACHED': IssueDefinition(
        'ORO.FTL.205(d)', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Repeated FDP extensions within a week compound fatigue',
        'Plan the duty within the basic maximum FDP',
    ),
    'REST_INSUFFICIENT': IssueDefinition(
        'ORO.FTL.235', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Insufficient rest increases fatigue accumulation',
        'Provide minimum required rest period',
    ),
    'FLIGHT_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.210', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Excessive flight time increases workload and fatigue',
        'Reduce flight time or split into multiple duty periods',
    ),
    'WEEKLY_FLIGHT_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.210(a)', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Excessive weekly flight time increases cumulative fatigue',
        'Reduce flight time or provide additional rest periods',
    ),
    'MONTHLY_FLIGHT_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.210(a)', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Excessive monthly flight time violates regulatory limits',
        'Redistribute flight time across the month',
    ),
    'YEARLY_FLIGHT_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.210(a)', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Annual flight time limit exceeded',
        'Immediate action required to comply with yearly limits',
    ),
    'WEEKLY_DUTY_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.190', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Excessive weekly duty time increases fatigue accumulation',
        'Reduce duty periods or provide additional days off',
    ),
    'FORTNIGHTLY_DUTY_TIME_EXCEEDED': IssueDefinition(
        'ORO.FTL.190', Severity.HIGH, ComplianceStatus.ILLEGAL,
        'Excessive fortnightly duty time violates regulatory limits',
        'Immediate schedule adjustment required',
    ),
    'HIGH_SECTOR_FATIGUE_RISK': IssueDefinition(
        'ORO.FTL.205', Severity.MEDIUM, ComplianceStatus.WARNING,
        'High sector count increases workload and fatigue',
        'Monitor crew alertness and consider additional rest',
    ),
    'NIGHT_DUTY_FATIGUE_RISK': IssueDefinition(
        'ORO.FTL.205', Severity.MEDIUM, ComplianceStatus.WARNING,
        'Night duties disrupt circadian rhythms and increase fatigue',
        'Ensure adequate rest before and after night duties',
    ),
    'HIGH_FATIGUE_RISK': IssueDefinition(
        'ORO.FTL.120', Severity.MEDIUM, ComplianceStatus.WARNING,
        'Multiple fatigue risk factors detected',
        'Consider fatigue risk management measures',
    ),
    'CONSECUTIVE_DUTIES_EXCEEDED': IssueDefinition(
        'ORO.FTL.190', Severity.MEDIUM, ComplianceStatus.WARNING,
        'Extended consecutive duty periods increase cumulative fatigue',
        'Provide adequate days off to prevent fatigue accumulation',
    ),
}

_FDP_REGULATION = {
    'reference': 'ORO.FTL.205',
    'title': 'Flight Duty Period (FDP)',
    'description': 'Maximum FDP limits based on start time and number of sectors',
}
_REST_REGULATION = {
    'reference': 'ORO.FTL.235',
    'title': 'Rest Period',
    'description': 'Minimum rest requirements between duty periods',
}
_FLIGHT_TIME_REGULATION = {
    'reference': 'ORO.FTL.210',
    'title': 'Flight Time Limitations',
    'description': 'Maximum flight time per day, week, month, and year',
}
_STANDBY_REGULATION = {
    'reference': 'ORO.FTL.225',
    'title': 'Standby',
    'description': 'Standby duty regulations and limitations',
}
_CALLED_STANDBY_REGULATION = {
    'reference': 'ORO.FTL.205',
    'title': 'Flight Duty Period (FDP)',
    'description': 'Maximum FDP limits when called from standby',
}

EXTENSION_CONDITIONS = (
    'Commander agreement required',
    'Crew notification required',
    'Maximum 2 extensions per 7 consecutive days',
    'Extended rest period required after extension',
)


# ============================================================================
# DUTY METRICS (limit independent, minutes)
# ============================================================================

def fdp_start_time(duty: DutyPeriod) -> Optional[str]:
    """FDP starts at the call for activated standby, otherwise at report"""
    if duty.is_activated_standby:
        return duty.call_time
    return duty.report_time


def calculate_fdp(duty: DutyPeriod) -> Optional[int]:
    """FDP in minutes, overnight-corrected; None without start or end"""
    return duration_minutes(fdp_start_time(duty), duty.off_duty_time)


def calculate_flight_time(flights: Sequence[FlightSegment]) -> int:
    """Sum of block times, each segment corrected for midnight on its own"""
    total = 0
    for flight in flights or []:
        minutes = duration_minutes(flight.departure_time, flight.arrival_time)
        if minutes is not None:
            total += minutes
    return total


def calculate_standby_period(duty: DutyPeriod) -> Optional[int]:
    """Standby from its start until the call, or until off duty when never called"""
    if not duty.standby_start_time:
        return None
    end = duty.call_time or duty.off_duty_time
    return duration_minutes(duty.standby_start_time, end)


def rest_start_time(duty: DutyPeriod) -> Optional[str]:
    if duty.type == DutyType.STANDBY and duty.standby_start_time:
        return duty.standby_start_time
    return duty.report_time


def off_duty_date(duty: DutyPeriod) -> date:
    """Calendar date of release; duties ending before they start finish next day"""
    start = clock_minutes(fdp_start_time(duty) or duty.standby_start_time)
    end = clock_minutes(duty.off_duty_time)
    if start is not None and end is not None and end < start:
        return duty.date + timedelta(days=1)
    return duty.date


def calculate_rest(previous: Optional[DutyPeriod], current: DutyPeriod) -> Optional[int]:
    """Minutes between the previous release and the start of ``current``"""
    if previous is None or not previous.off_duty_time:
        return None
    return minutes_between(
        off_duty_date(previous), previous.off_duty_time,
        current.date, rest_start_time(current),
    )


def calculate_duty_time(duty: DutyPeriod) -> int:
    """Minutes counted towards the ORO.FTL.190 duty-time windows"""
    if duty.type == DutyType.FLIGHT:
        return calculate_fdp(duty) or 0
    if duty.type == DutyType.STANDBY:
        waiting = calculate_standby_period(duty) or 0
        if duty.is_activated_standby:
            return waiting + (calculate_fdp(duty) or 0)
        return waiting
    if duty.type in (DutyType.TRAINING, DutyType.ADMIN):
        return duration_minutes(duty.report_time, duty.off_duty_time) or 0
    return 0


def counts_flight_time(duty: DutyPeriod) -> bool:
    return duty.type == DutyType.FLIGHT or (duty.is_activated_standby and bool(duty.flights))


def _hours_label(hours: float) -> str:
    return f"{hours:g}h"


# ============================================================================
# DATE SCOPE & SUMMARY
# ============================================================================

def filter_by_date_scope(duties: Sequence[DutyPeriod], date_scope: str = 'all',
                         today: Optional[date] = None) -> List[DutyPeriod]:
    """
    Duties inside the scope window around ``today`` (inclusive).

    Unknown scope tokens select everything.
    """
    radius = _SCOPE_RADIUS.get(date_scope)
    if radius is None:
        return list(duties)
    today = today or date.today()
    start, end = today - timedelta(days=radius), today + timedelta(days=radius)
    return [d for d in duties if start <= d.date <= end]


def summarize_results(results: Sequence[ComplianceResult]) -> Dict[str, int]:
    return {
        'total_days': len(results),
        'legal_days': sum(1 for r in results if r.status == ComplianceStatus.LEGAL),
        'warning_days': sum(1 for r in results if r.status == ComplianceStatus.WARNING),
        'illegal_days': sum(1 for r in results if r.status == ComplianceStatus.ILLEGAL),
    }


def _coerce_duty(duty: Union[DutyPeriod, Dict[str, Any]]) -> DutyPeriod:
    return duty if isinstance(duty, DutyPeriod) else DutyPeriod.from_dict(duty)


# ============================================================================
# ENGINE
# ============================================================================

@dataclass
class DayMetrics:
    """Per-duty figures reused by every rolling window"""
    duty: DutyPeriod
    fdp: Optional[int]
    max_fdp: Optional[int]
    flight_time: int
    duty_time: int

    @property
    def extended(self) -> bool:
        """FDP ran past the basic maximum"""
        return self.fdp is not None and self.max_fdp is not None and self.fdp > self.max_fdp


class FTLComplianceChecker:
    """
    Stateless EASA FTL evaluator.

    Limits and message tables are injected so alternate regimes can be
    checked without touching module state.
    """

    def __init__(self, limits: FTLLimits = None,
                 translations: Mapping[str, Mapping[str, str]] = None):
        self.limits = limits or DEFAULT_LIMITS
        self.translations = translations or TRANSLATIONS

    # ------------------------------------------------------------------
    # Limit lookups
    # ------------------------------------------------------------------

    def max_fdp(self, duty: DutyPeriod) -> Optional[int]:
        """Maximum daily FDP in minutes for the duty's start band and sectors"""
        hour = clock_hour(fdp_start_time(duty))
        if hour is None:
            return None
        return hours_to_minutes(self.limits.max_fdp_hours(duty.sectors, hour))

    def min_rest(self, previous: Optional[DutyPeriod]) -> Optional[int]:
        """
        Required rest after ``previous`` in minutes.

        Extended when the previous FDP came within the trigger margin of
        its own maximum.
        """
        if previous is None:
            return None
        limits = self.limits
        if previous.type == DutyType.FLIGHT or previous.is_activated_standby:
            fdp = calculate_fdp(previous)
            max_fdp = self.max_fdp(previous)
            if fdp is not None and max_fdp is not None:
                if fdp > max_fdp - hours_to_minutes(limits.extended_rest_trigger_hours):
                    return hours_to_minutes(limits.min_rest_extended_hours)
        return hours_to_minutes(limits.min_rest_standard_hours)

    def extension_allowance(self, fdp: int, max_fdp: int, t: Mapping[str, str]) -> Dict[str, Any]:
        """Three-way ORO.FTL.205(d) classification with its display details"""
        extension = hours_to_minutes(self.limits.max_extension_hours)
        ceiling = max_fdp + extension

        if fdp <= max_fdp:
            return {
                'status': t['extension_available'],
                'details': {
                    'allowed': True,
                    'needed': False,
                    'available_extension': format_duration(extension),
                    'max_with_extension': format_duration(ceiling),
                    'regulation': 'ORO.FTL.205(d)',
                    'conditions': list(EXTENSION_CONDITIONS),
                },
            }
        if fdp <= ceiling:
            return {
                'status': t['extension_allowed'],
                'details': {
                    'allowed': True,
                    'needed': True,
                    'extension_used': format_duration(fdp - max_fdp),
                    'available_extension': format_duration(extension),
                    'max_with_extension': format_duration(ceiling),
                    'regulation': 'ORO.FTL.205(d)',
                    'conditions': list(EXTENSION_CONDITIONS),
                },
            }
        return {
            'status': t['extension_not_allowed'],
            'details': {
                'allowed': False,
                'needed': True,
                'extension_exceeded': format_duration(fdp - ceiling),
                'max_with_extension': format_duration(ceiling),
                'regulation': 'ORO.FTL.205(d)',
                'reason': 'FDP exceeds maximum allowed even with extension',
            },
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def check(self, duties: Sequence[Union[DutyPeriod, Dict[str, Any]]],
              date_scope: str = 'all', language: str = DEFAULT_LANGUAGE,
              today: Optional[date] = None) -> List[ComplianceResult]:
        """
        Evaluate every in-scope day, in ascending date order.

        The scope selects which days are reported; rolling windows and
        rest always read the full history supplied.
        """
        t = get_translations(language, self.translations)
        history = sorted((_coerce_duty(d) for d in duties), key=lambda d: d.date)
        metrics = [self._metrics(d) for d in history]
        in_scope = {id(d) for d in filter_by_date_scope(history, date_scope, today)}

        results = []
        for index, duty in enumerate(history):
            if id(duty) not in in_scope:
                continue
            result = self._check_day(index, history, metrics, t)
            result.status_label = t.get(result.status.value, result.status.value)
            results.append(result)

        logger.info(
            f"Checked {len(results)} of {len(history)} duty days (scope={date_scope})"
        )
        return results

    def _metrics(self, duty: DutyPeriod) -> DayMetrics:
        has_fdp = duty.type == DutyType.FLIGHT or duty.is_activated_standby
        return DayMetrics(
            duty=duty,
            fdp=calculate_fdp(duty) if has_fdp else None,
            max_fdp=self.max_fdp(duty) if has_fdp else None,
            flight_time=calculate_flight_time(duty.flights) if counts_flight_time(duty) else 0,
            duty_time=calculate_duty_time(duty),
        )

    def _raise(self, result: ComplianceResult, issue_type: str, message: str):
        definition = ISSUE_CATALOGUE[issue_type]
        result.add_issue(
            ComplianceIssue(
                type=issue_type,
                message=message,
                regulation=definition.regulation,
                severity=definition.severity,
                fatigue_risk=definition.fatigue_risk,
                recommendation=definition.recommendation,
            ),
            definition.status,
        )

    def _check_day(self, index: int, history: List[DutyPeriod],
                   metrics: List[DayMetrics], t: Mapping[str, str]) -> ComplianceResult:
        duty = history[index]
        result = ComplianceResult(date=duty.date, type=duty.type)

        if duty.is_day_off:
            result.calculations = {
                'fdp': '00:00',
                'max_fdp': 'N/A',
                'rest': 'N/A',
                'min_rest': 'N/A',
                'flight_time': '00:00',
                'extension_allowed': 'N/A',
            }
            return result

        previous = self._previous_duty(index, history)
        self._check_day_limits(result, metrics[index], previous, metrics, t)
        self._check_flight_time_windows(result, metrics[index], metrics, t)
        self._check_duty_time_windows(result, duty, metrics, t)
        self._assess_fatigue(result, duty, t)
        self._check_consecutive_duties(result, index, history, t)
        return result

    @staticmethod
    def _previous_duty(index: int, history: List[DutyPeriod]) -> Optional[DutyPeriod]:
        """Nearest earlier working duty with a recorded release"""
        for candidate in reversed(history[:index]):
            if not candidate.is_day_off and candidate.off_duty_time:
                return candidate
        return None

    # ------------------------------------------------------------------
    # Per-day limits
    # ------------------------------------------------------------------

    def _check_day_limits(self, result: ComplianceResult, day: DayMetrics,
                          previous: Optional[DutyPeriod], metrics: List[DayMetrics],
                          t: Mapping[str, str]):
        duty = day.duty
        limits = self.limits
        rest = calculate_rest(previous, duty)
        min_rest = self.min_rest(previous) if rest is not None else None
        flight_time = calculate_flight_time(duty.flights)
        fdp, max_fdp = day.fdp, day.max_fdp
        evaluates_fdp = fdp is not None and max_fdp is not None

        calc = {
            'fdp': format_duration(fdp) if fdp is not None else (
                '00:00' if duty.type == DutyType.STANDBY else 'N/A'),
            'max_fdp': format_duration(max_fdp),
            'rest': format_duration(rest),
            'min_rest': format_duration(min_rest),
            'flight_time': format_duration(flight_time),
            'sectors': duty.sectors,
            'max_duty_end_time': 'N/A',
            'extension_allowed': 'N/A',
        }

        if evaluates_fdp:
            calc['max_duty_end_time'] = add_minutes(fdp_start_time(duty), max_fdp)
            extension = self.extension_allowance(fdp, max_fdp, t)
            calc['extension_allowed'] = extension['status']
            calc['extension_details'] = extension['details']
        if duty.type == DutyType.STANDBY:
            calc['standby_period'] = format_duration(calculate_standby_period(duty) or 0)
        result.calculations = calc

        if evaluates_fdp:
            ceiling = max_fdp + hours_to_minutes(limits.max_extension_hours)
            if fdp > ceiling:
                self._raise(result, 'FDP_EXCEEDED',
                            f"{t['extension_exceeded']}: {format_duration(fdp)} > "
                            f"{format_duration(ceiling)}")
            elif fdp > max_fdp:
                self._raise(result, 'FDP_EXTENSION_REQUIRED',
                            f"{t['extension_used']}: {format_duration(fdp)} > "
                            f"{format_duration(max_fdp)} ({t['extension_allowed'].lower()})")
            elif fdp > max_fdp - hours_to_minutes(limits.close_to_limit_margin_hours):
                self._raise(result, 'FDP_CLOSE_TO_LIMIT',
                            f"{t['close_to_limit']}: {format_duration(fdp)} "
                            f"(max: {format_duration(max_fdp)})")

            if day.extended:
                used = self._extensions_in_week(duty.date, metrics)
                if used > limits.max_extensions_per_week:
                    self._raise(result, 'MAX_EXTENSIONS_REACHED',
                                f"{t['max_extensions_reached']}: {used} > "
                                f"{limits.max_extensions_per_week}")

        if rest is not None and min_rest is not None and rest < min_rest:
            self._raise(result, 'REST_INSUFFICIENT',
                        f"{t['rest_insufficient']}: {format_duration(rest)} < "
                        f"{format_duration(min_rest)}")

        if flight_time > hours_to_minutes(limits.max_daily_flight_time):
            self._raise(result, 'FLIGHT_TIME_EXCEEDED',
                        f"{t['flight_time_exceeded']}: {format_duration(flight_time)} > "
                        f"{_hours_label(limits.max_daily_flight_time)}")

        result.regulations = self._regulations_for(duty)

    @staticmethod
    def _regulations_for(duty: DutyPeriod) -> List[Dict[str, str]]:
        if duty.type == DutyType.FLIGHT:
            regulations = [_FDP_REGULATION, _REST_REGULATION, _FLIGHT_TIME_REGULATION]
        elif duty.type == DutyType.STANDBY:
            regulations = [_STANDBY_REGULATION, _REST_REGULATION]
            if duty.is_activated_standby:
                regulations.append(_CALLED_STANDBY_REGULATION)
        else:
            regulations = [_FLIGHT_TIME_REGULATION, _REST_REGULATION]
        return [dict(r) for r in regulations]

    @staticmethod
    def _extensions_in_week(on: date, metrics: List[DayMetrics]) -> int:
        start = on - timedelta(days=6)
        return sum(1 for m in metrics if start <= m.duty.date <= on and m.extended)

    # ------------------------------------------------------------------
    # Rolling windows
    # ------------------------------------------------------------------

    def _check_flight_time_windows(self, result: ComplianceResult, day: DayMetrics,
                                   metrics: List[DayMetrics], t: Mapping[str, str]):
        if not counts_flight_time(day.duty):
            return
        limits = self.limits
        on = day.duty.date

        weekly = sum(m.flight_time for m in metrics
                     if on - timedelta(days=6) <= m.duty.date <= on)
        monthly = sum(m.flight_time for m in metrics
                      if m.duty.date <= on and (m.duty.date.year, m.duty.date.month) == (on.year, on.month))
        yearly = sum(m.flight_time for m in metrics
                     if m.duty.date <= on and m.duty.date.year == on.year)

        windows = (
            ('WEEKLY_FLIGHT_TIME_EXCEEDED', 'weekly_flight_time_exceeded', weekly,
             limits.max_weekly_flight_time),
            ('MONTHLY_FLIGHT_TIME_EXCEEDED', 'monthly_flight_time_exceeded', monthly,
             limits.max_monthly_flight_time),
            ('YEARLY_FLIGHT_TIME_EXCEEDED', 'yearly_flight_time_exceeded', yearly,
             limits.max_yearly_flight_time),
        )
        for issue_type, key, total, limit in windows:
            if total > hours_to_minutes(limit):
                self._raise(result, issue_type,
                            f"{t[key]}: {format_duration(total)} > {_hours_label(limit)}")

        result.calculations['weekly_flight_time'] = format_duration(weekly)
        result.calculations['monthly_flight_time'] = format_duration(monthly)
        result.calculations['yearly_flight_time'] = format_duration(yearly)

    def _check_duty_time_windows(self, result: ComplianceResult, duty: DutyPeriod,
                                 metrics: List[DayMetrics], t: Mapping[str, str]):
        limits = self.limits
        on = duty.date

        def window(days: int) -> int:
            start = on - timedelta(days=days - 1)
            return sum(m.duty_time for m in metrics if start <= m.duty.date <= on)

        weekly, fortnightly = window(7), window(14)
        if weekly > hours_to_minutes(limits.max_weekly_duty_time):
            self._raise(result, 'WEEKLY_DUTY_TIME_EXCEEDED',
                        f"{t['weekly_duty_time_exceeded']}: {format_duration(weekly)} > "
                        f"{_hours_label(limits.max_weekly_duty_time)}")
        if fortnightly > hours_to_minutes(limits.max_fortnightly_duty_time):
            self._raise(result, 'FORTNIGHTLY_DUTY_TIME_EXCEEDED',
                        f"{t['fortnightly_duty_time_exceeded']}: {format_duration(fortnightly)} > "
                        f"{_hours_label(limits.max_fortnightly_duty_time)}")

        result.calculations['weekly_duty_time'] = format_duration(weekly)
        result.calculations['fortnightly_duty_time'] = format_duration(fortnightly)

    # ------------------------------------------------------------------
    # Fatigue
    # ------------------------------------------------------------------

    def _assess_fatigue(self, result: ComplianceResult, duty: DutyPeriod, t: Mapping[str, str]):
        """Additive 0-5 score; sector and night flags also stand on their own"""
        params = self.limits.fatigue
        score = 0
        factors = []

        if duty.sectors >= params.high_sector_count:
            score += 2
            factors.append('High sector count')
            self._raise(result, 'HIGH_SECTOR_FATIGUE_RISK',
                        f"{t['high_sector_fatigue_risk']}: {duty.sectors} sectors")

        start = fdp_start_time(duty)
        start_hour = clock_hour(start)
        if start_hour is not None:
            if start_hour >= params.night_duty_start_hour or start_hour <= params.night_duty_end_hour:
                score += 1
                factors.append('Night duty')
                self._raise(result, 'NIGHT_DUTY_FATIGUE_RISK',
                            f"{t['night_duty_fatigue_risk']}: start time {start}")
            # Overlaps the night band below 06:00; both factors count
            if start_hour < params.early_start_hour:
                score += 1
                factors.append('Early start')

        off_hour = clock_hour(duty.off_duty_time)
        if off_hour is not None and 0 <= off_hour <= params.late_finish_hour:
            score += 1
            factors.append('Late finish')

        result.calculations['fatigue_score'] = score
        result.calculations['fatigue_factors'] = factors

        if score >= params.high_fatigue_score:
            self._raise(result, 'HIGH_FATIGUE_RISK', f"{t['high_fatigue_risk']}: Score {score}/5")

    def _check_consecutive_duties(self, result: ComplianceResult, index: int,
                                  history: List[DutyPeriod], t: Mapping[str, str]):
        count = self.count_consecutive_duties(index, history)
        result.calculations['consecutive_duties'] = count
        if count > self.limits.fatigue.max_consecutive_duties:
            self._raise(result, 'CONSECUTIVE_DUTIES_EXCEEDED',
                        f"{t['consecutive_duties_exceeded']}: {count} consecutive days")

    @staticmethod
    def count_consecutive_duties(index: int, history: List[DutyPeriod]) -> int:
        """Unbroken run of calendar-adjacent working days through ``history[index]``"""
        current = history[index].date
        count = 1

        for step, earlier in enumerate(reversed(history[:index]), start=1):
            if earlier.is_day_off or (current - earlier.date).days != step:
                break
            count += 1

        for step, later in enumerate(history[index + 1:], start=1):
            if later.is_day_off or (later.date - current).days != step:
                break
            count += 1

        return count


def check_easa_compliance(duties: Sequence[Union[DutyPeriod, Dict[str, Any]]],
                          date_scope: str = 'all', language: str = DEFAULT_LANGUAGE,
                          today: Optional[date] = None,
                          limits: FTLLimits = None) -> List[ComplianceResult]:
    """Evaluate with a one-off checker (default EASA limits)"""
    return FTLComplianceChecker(limits).check(duties, date_scope, language, today)
