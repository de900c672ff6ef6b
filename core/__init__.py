"""
Core FTL Compliance Components
==============================

Main exports for the EASA FTL compliance engine.
"""

from core.parameters import (
    FDP_BANDS,
    FatigueRiskParameters,
    FTLLimits,
    DEFAULT_LIMITS,
)

from core.translations import (
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    get_translations,
)

from core.validation import (
    ValidationResult,
    validate_flight_data,
    validate_parsed_duties,
)

from core.compliance import (
    FTLComplianceChecker,
    check_easa_compliance,
    filter_by_date_scope,
    summarize_results,
)

__all__ = [
    # Parameters
    'FDP_BANDS',
    'FatigueRiskParameters',
    'FTLLimits',
    'DEFAULT_LIMITS',
    # Messages
    'TRANSLATIONS',
    'SUPPORTED_LANGUAGES',
    'get_translations',
    # Validation
    'ValidationResult',
    'validate_flight_data',
    'validate_parsed_duties',
    # Compliance
    'FTLComplianceChecker',
    'check_easa_compliance',
    'filter_by_date_scope',
    'summarize_results',
]
