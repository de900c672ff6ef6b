"""
Configuration & Parameters for FTL Compliance
==============================================

Regulatory rule tables used by the compliance engine:
- FTLLimits: FDP table, rest, flight/duty time, extension and fatigue limits
- FatigueRiskParameters: thresholds for the additive fatigue score

Instances are frozen and built once; alternate regimes are passed to the
engine through its constructor instead of patching module globals.

Regulatory Foundation:
    EU Regulation 965/2012 Annex III Subpart FTL (ORO.FTL.190, .205, .210,
    .225, .235), AMC1 ORO.FTL.120
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


# Start-time bands of the reference time, in table column order
FDP_BANDS: Tuple[str, ...] = (
    '06:00-17:59',
    '18:00-21:59',
    '22:00-04:59',
    '05:00-05:59',
)


def fdp_band_for_hour(hour: int) -> str:
    """Map the hour of the FDP start to its table band"""
    if 6 <= hour <= 17:
        return '06:00-17:59'
    if 18 <= hour <= 21:
        return '18:00-21:59'
    if hour >= 22 or hour <= 4:
        return '22:00-04:59'
    return '05:00-05:59'


def _default_fdp_table() -> Mapping[int, Mapping[str, float]]:
    # ORO.FTL.205(b), acclimatised crew, basic daily maximum FDP (hours)
    rows = {
        1: (13.0, 12.0, 11.0, 12.0),
        2: (12.5, 11.5, 10.5, 11.5),
        3: (12.0, 11.0, 10.0, 11.0),
        4: (11.5, 10.5, 9.5, 10.5),
        5: (11.0, 10.0, 9.0, 10.0),
        6: (10.5, 9.5, 8.5, 9.5),
    }
    return {sectors: dict(zip(FDP_BANDS, values)) for sectors, values in rows.items()}


@dataclass(frozen=True)
class FatigueRiskParameters:
    """Thresholds feeding the 0-5 fatigue score"""

    high_sector_count: int = 6
    # Night band is compared by hour only: start >= 22 or start <= 6
    night_duty_start_hour: int = 22
    night_duty_end_hour: int = 6
    early_start_hour: int = 6
    # Off-duty hour 0..late_finish_hour inclusive counts as a late finish
    late_finish_hour: int = 2
    max_consecutive_duties: int = 4
    high_fatigue_score: int = 3

    def __post_init__(self):
        assert 0 <= self.night_duty_start_hour <= 23, "night_duty_start_hour out of range"
        assert 0 <= self.night_duty_end_hour <= 23, "night_duty_end_hour out of range"
        assert self.max_consecutive_duties > 0, "max_consecutive_duties must be positive"


@dataclass(frozen=True)
class FTLLimits:
    """EASA FTL limits (EU Regulation 965/2012)"""

    # FDP limits - ORO.FTL.205
    max_fdp_table: Mapping[int, Mapping[str, float]] = field(default_factory=_default_fdp_table)
    max_sectors_in_table: int = 6
    close_to_limit_margin_hours: float = 0.5

    # Extensions - ORO.FTL.205(d)
    max_extension_hours: float = 1.0
    max_extensions_per_week: int = 2

    # Rest requirements - ORO.FTL.235
    min_rest_standard_hours: float = 10.0
    min_rest_extended_hours: float = 12.0
    extended_rest_trigger_hours: float = 1.0

    # Flight times - ORO.FTL.210
    max_daily_flight_time: float = 8.0
    max_weekly_flight_time: float = 60.0
    max_monthly_flight_time: float = 190.0
    max_yearly_flight_time: float = 1000.0

    # Duty times - ORO.FTL.190
    max_weekly_duty_time: float = 60.0
    max_fortnightly_duty_time: float = 110.0

    fatigue: FatigueRiskParameters = field(default_factory=FatigueRiskParameters)

    def __post_init__(self):
        # Rows are copied into read-only views
        object.__setattr__(self, 'max_fdp_table', MappingProxyType({
            sectors: MappingProxyType(dict(row)) for sectors, row in self.max_fdp_table.items()
        }))
        for sectors in range(1, self.max_sectors_in_table + 1):
            assert sectors in self.max_fdp_table, f"FDP table missing row for {sectors} sectors"
            row = self.max_fdp_table[sectors]
            for band in FDP_BANDS:
                assert band in row, f"FDP table row {sectors} missing band {band}"
            if sectors > 1:
                previous = self.max_fdp_table[sectors - 1]
                for band in FDP_BANDS:
                    assert row[band] <= previous[band], (
                        f"FDP table must not increase with sectors ({sectors}, {band})"
                    )
        assert self.min_rest_extended_hours >= self.min_rest_standard_hours, \
            "Extended rest must not be shorter than standard rest"
        assert self.max_extension_hours >= 0, "max_extension_hours must be non-negative"

    def max_fdp_hours(self, sectors: int, start_hour: int) -> float:
        """Table lookup; sector counts above the table are capped"""
        capped = min(max(sectors, 1), self.max_sectors_in_table)
        return self.max_fdp_table[capped][fdp_band_for_hour(start_hour)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_fdp': {
                str(sectors): dict(row) for sectors, row in sorted(self.max_fdp_table.items())
            },
            'min_rest': {
                'standard': self.min_rest_standard_hours,
                'extended': self.min_rest_extended_hours,
            },
            'max_flight_time': {
                'daily': self.max_daily_flight_time,
                'weekly': self.max_weekly_flight_time,
                'monthly': self.max_monthly_flight_time,
                'yearly': self.max_yearly_flight_time,
            },
            'max_duty_time': {
                'weekly': self.max_weekly_duty_time,
                'fortnightly': self.max_fortnightly_duty_time,
            },
            'extensions': {
                'max_per_week': self.max_extensions_per_week,
                'max_extension': self.max_extension_hours,
            },
            'fatigue_risk': {
                'high_sector_count': self.fatigue.high_sector_count,
                'night_duty_start': self.fatigue.night_duty_start_hour,
                'night_duty_end': self.fatigue.night_duty_end_hour,
                'early_start': self.fatigue.early_start_hour,
                'late_finish': self.fatigue.late_finish_hour,
                'max_consecutive_duties': self.fatigue.max_consecutive_duties,
            },
        }

    @classmethod
    def default_easa(cls) -> 'FTLLimits':
        """Basic EASA limits for acclimatised two-pilot crews"""
        return cls()

    @classmethod
    def conservative(cls) -> 'FTLLimits':
        """Operator scheme with tighter rest and no extensions"""
        return replace(
            cls(),
            max_extension_hours=0.0,
            max_extensions_per_week=0,
            min_rest_standard_hours=12.0,
            min_rest_extended_hours=14.0,
        )


DEFAULT_LIMITS = FTLLimits.default_easa()
