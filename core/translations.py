"""
Message Tables
==============

Display text for compliance results in English, Russian and Latvian.
Language selects wording only; status codes and issue types never change.
"""

from types import MappingProxyType
from typing import Mapping

DEFAULT_LANGUAGE = 'en'

_EN = {
    'LEGAL': 'LEGAL',
    'WARNING': 'WARNING',
    'ILLEGAL': 'ILLEGAL',
    'fdp_exceeded': 'FDP exceeds maximum allowed',
    'rest_insufficient': 'Rest period insufficient',
    'flight_time_exceeded': 'Flight time exceeds daily limit',
    'close_to_limit': 'Close to FDP limit',
    'extension_allowed': 'Extension Allowed',
    'extension_not_allowed': 'Extension Not Allowed',
    'extension_available': 'Up to 1h extension available',
    'extension_used': 'Extension would be required',
    'extension_exceeded': 'Extension limit exceeded',
    'max_extensions_reached': 'Max extensions per week reached',
    'weekly_flight_time_exceeded': 'Weekly flight time limit exceeded',
    'monthly_flight_time_exceeded': 'Monthly flight time limit exceeded',
    'yearly_flight_time_exceeded': 'Yearly flight time limit exceeded',
    'weekly_duty_time_exceeded': 'Weekly duty time limit exceeded',
    'fortnightly_duty_time_exceeded': 'Fortnightly duty time limit exceeded',
    'high_fatigue_risk': 'High fatigue risk detected',
    'consecutive_duties_exceeded': 'Too many consecutive duty days',
    'night_duty_fatigue_risk': 'Night duty fatigue risk',
    'high_sector_fatigue_risk': 'High sector count fatigue risk',
}

_RU = {
    'LEGAL': 'ЗАКОННО',
    'WARNING': 'ПРЕДУПРЕЖДЕНИЕ',
    'ILLEGAL': 'НЕЗАКОННО',
    'fdp_exceeded': 'FDP превышает максимально допустимое',
    'rest_insufficient': 'Период отдыха недостаточен',
    'flight_time_exceeded': 'Время полета превышает дневной лимит',
    'close_to_limit': 'Близко к лимиту FDP',
    'extension_allowed': 'Продление разрешено',
    'extension_not_allowed': 'Продление не разрешено',
    'extension_available': 'Доступно продление до 1ч',
    'extension_used': 'Потребуется продление',
    'extension_exceeded': 'Превышен лимит продления',
    'max_extensions_reached': 'Достигнут макс продлений в неделю',
    'weekly_flight_time_exceeded': 'Превышен недельный лимит налета',
    'monthly_flight_time_exceeded': 'Превышен месячный лимит налета',
    'yearly_flight_time_exceeded': 'Превышен годовой лимит налета',
    'weekly_duty_time_exceeded': 'Превышен недельный лимит смен',
    'fortnightly_duty_time_exceeded': 'Превышен двухнедельный лимит смен',
    'high_fatigue_risk': 'Обнаружен высокий риск усталости',
    'consecutive_duties_exceeded': 'Слишком много последовательных смен',
    'night_duty_fatigue_risk': 'Риск усталости при ночной смене',
    'high_sector_fatigue_risk': 'Риск усталости при большом количестве секторов',
}

_LV = {
    'LEGAL': 'LIKUMĪGI',
    'WARNING': 'BRĪDINĀJUMS',
    'ILLEGAL': 'NELIKUMĪGI',
    'fdp_exceeded': 'FDP pārsniedz maksimāli atļauto',
    'rest_insufficient': 'Atpūtas periods nepietiekams',
    'flight_time_exceeded': 'Lidojuma laiks pārsniedz dienas limitu',
    'close_to_limit': 'Tuvu FDP limitam',
    'extension_allowed': 'Pagarinājums atļauts',
    'extension_not_allowed': 'Pagarinājums nav atļauts',
    'extension_available': 'Pieejams līdz 1h pagarinājums',
    'extension_used': 'Būtu nepieciešams pagarinājums',
    'extension_exceeded': 'Pagarinājuma limits pārsniegts',
    'max_extensions_reached': 'Sasniegts maks pagarinājumu nedēļā',
    'weekly_flight_time_exceeded': 'Pārsniegts nedēļas lidojuma laika limits',
    'monthly_flight_time_exceeded': 'Pārsniegts mēneša lidojuma laika limits',
    'yearly_flight_time_exceeded': 'Pārsniegts gada lidojuma laika limits',
    'weekly_duty_time_exceeded': 'Pārsniegts nedēļas dienesta laika limits',
    'fortnightly_duty_time_exceeded': 'Pārsniegts divu nedēļu dienesta laika limits',
    'high_fatigue_risk': 'Konstatēts augsts noguruma risks',
    'consecutive_duties_exceeded': 'Pārāk daudz secīgu dienesta dienu',
    'night_duty_fatigue_risk': 'Nakts dienesta noguruma risks',
    'high_sector_fatigue_risk': 'Augsta sektoru skaita noguruma risks',
}

TRANSLATIONS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    'en': MappingProxyType(_EN),
    'ru': MappingProxyType(_RU),
    'lv': MappingProxyType(_LV),
})

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)


def get_translations(language: str = DEFAULT_LANGUAGE,
                     tables: Mapping[str, Mapping[str, str]] = TRANSLATIONS) -> Mapping[str, str]:
    """Message table for ``language``, English when unsupported"""
    key = (language or DEFAULT_LANGUAGE).lower()
    return tables.get(key, tables[DEFAULT_LANGUAGE])
