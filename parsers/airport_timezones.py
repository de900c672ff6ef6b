"""
Airport Timezone Lookup
=======================

Maps 3-letter airport codes to IANA time zones.

A static table of roster airports takes precedence (it also pins a few
company codes such as RMO and ZUR that the public IATA data resolves
differently or not at all); everything else falls back to the airportsdata
IATA database (~7,800 airports).
"""

from types import MappingProxyType
from typing import List, Mapping, Optional

import airportsdata

# Module-level load (cached)
_IATA_DB = airportsdata.load('IATA')

AIRPORT_TIMEZONES: Mapping[str, str] = MappingProxyType({
    # Europe
    'VIE': 'Europe/Vienna',
    'AMS': 'Europe/Amsterdam',
    'FRA': 'Europe/Berlin',
    'MUC': 'Europe/Berlin',
    'ZUR': 'Europe/Zurich',
    'ZRH': 'Europe/Zurich',
    'CDG': 'Europe/Paris',
    'ORY': 'Europe/Paris',
    'LHR': 'Europe/London',
    'LGW': 'Europe/London',
    'STN': 'Europe/London',
    'MAD': 'Europe/Madrid',
    'BCN': 'Europe/Madrid',
    'FCO': 'Europe/Rome',
    'MXP': 'Europe/Rome',
    'ARN': 'Europe/Stockholm',
    'CPH': 'Europe/Copenhagen',
    'OSL': 'Europe/Oslo',
    'HEL': 'Europe/Helsinki',
    'WAW': 'Europe/Warsaw',
    'PRG': 'Europe/Prague',
    'BUD': 'Europe/Budapest',
    'OTP': 'Europe/Bucharest',
    'ATH': 'Europe/Athens',
    'IST': 'Europe/Istanbul',
    'SVO': 'Europe/Moscow',
    'DME': 'Europe/Moscow',
    'RIX': 'Europe/Riga',
    'BER': 'Europe/Berlin',
    'RMO': 'Europe/Rome',
    'BRU': 'Europe/Brussels',
    'DUS': 'Europe/Berlin',
    'HAM': 'Europe/Berlin',
    'STR': 'Europe/Berlin',
    'CGN': 'Europe/Berlin',
    'NUE': 'Europe/Berlin',
    'LYS': 'Europe/Paris',
    'NCE': 'Europe/Paris',
    'TLS': 'Europe/Paris',
    'MRS': 'Europe/Paris',
    'GVA': 'Europe/Zurich',
    'BSL': 'Europe/Zurich',
    'VCE': 'Europe/Rome',
    'NAP': 'Europe/Rome',
    'PMI': 'Europe/Madrid',
    'AGP': 'Europe/Madrid',
    'SVQ': 'Europe/Madrid',
    'BIO': 'Europe/Madrid',

    # North America
    'JFK': 'America/New_York',
    'LGA': 'America/New_York',
    'EWR': 'America/New_York',
    'LAX': 'America/Los_Angeles',
    'SFO': 'America/Los_Angeles',
    'ORD': 'America/Chicago',
    'MDW': 'America/Chicago',
    'DFW': 'America/Chicago',
    'IAH': 'America/Chicago',
    'PHX': 'America/Phoenix',
    'DEN': 'America/Denver',
    'SEA': 'America/Los_Angeles',
    'LAS': 'America/Los_Angeles',
    'MIA': 'America/New_York',
    'YYZ': 'America/Toronto',
    'YVR': 'America/Vancouver',

    # Asia Pacific
    'NRT': 'Asia/Tokyo',
    'HND': 'Asia/Tokyo',
    'ICN': 'Asia/Seoul',
    'PEK': 'Asia/Shanghai',
    'PVG': 'Asia/Shanghai',
    'HKG': 'Asia/Hong_Kong',
    'SIN': 'Asia/Singapore',
    'BKK': 'Asia/Bangkok',
    'KUL': 'Asia/Kuala_Lumpur',
    'CGK': 'Asia/Jakarta',
    'MNL': 'Asia/Manila',
    'SYD': 'Australia/Sydney',
    'MEL': 'Australia/Melbourne',
    'BNE': 'Australia/Brisbane',
    'PER': 'Australia/Perth',
    'AKL': 'Pacific/Auckland',

    # Middle East & Africa
    'DXB': 'Asia/Dubai',
    'DOH': 'Asia/Qatar',
    'AUH': 'Asia/Dubai',
    'KWI': 'Asia/Kuwait',
    'RUH': 'Asia/Riyadh',
    'JED': 'Asia/Riyadh',
    'CAI': 'Africa/Cairo',
    'JNB': 'Africa/Johannesburg',
    'CPT': 'Africa/Johannesburg',
    'ADD': 'Africa/Addis_Ababa',
    'NBO': 'Africa/Nairobi',

    # South America
    'GRU': 'America/Sao_Paulo',
    'GIG': 'America/Sao_Paulo',
    'EZE': 'America/Argentina/Buenos_Aires',
    'SCL': 'America/Santiago',
    'LIM': 'America/Lima',
    'BOG': 'America/Bogota',
})


class AirportDatabase:
    """
    Airport code to IANA zone lookup.

    Order: static roster table, airportsdata. Both sources are read-only.
    """

    @classmethod
    def get_timezone(cls, code: Optional[str]) -> Optional[str]:
        """IANA zone for ``code`` or None when unknown"""
        if not code or not isinstance(code, str):
            return None
        key = code.strip().upper()

        if key in AIRPORT_TIMEZONES:
            return AIRPORT_TIMEZONES[key]

        entry = _IATA_DB.get(key)
        if entry:
            return entry['tz']
        return None


def get_airport_timezone(code: Optional[str], default: str = 'UTC') -> str:
    """Zone for ``code``; ``default`` for unknown or malformed codes"""
    return AirportDatabase.get_timezone(code) or default


def get_supported_airports() -> List[str]:
    """Codes covered by the static roster table"""
    return list(AIRPORT_TIMEZONES)


def is_airport_supported(code: Optional[str]) -> bool:
    if not code or not isinstance(code, str):
        return False
    return code.strip().upper() in AIRPORT_TIMEZONES
