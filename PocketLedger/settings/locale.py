"""
Module for formatting decimal and currency values using Babel.

"""
import logging
from typing import List

from babel import Locale, UnknownLocaleError, numbers

DEFAULT_LOCALE = 'tr_TR'

CURRENCY_MAP: dict[str, str] = {
    'US': 'USD',
    'GB': 'GBP',
    'DE': 'EUR',
    'FR': 'EUR',
    'IT': 'EUR',
    'ES': 'EUR',
    'NL': 'EUR',
    'JP': 'JPY',
    'CA': 'CAD',
    'AU': 'AUD',
    'IN': 'INR',
    'BR': 'BRL',
    'HU': 'HUF',
    'SE': 'SEK',
    'TR': 'TRY',
}

LOCALE_MAP: List[str] = [
    'tr_TR',
    'en_GB',
    'en_US',
    'en_AU',
    'en_CA',
    'en_IN',
    'de_DE',
    'es_ES',
    'fr_FR',
    'hu_HU',
    'it_IT',
    'ja_JP',
    'nl_NL',
    'pt_BR',
    'sv_SE',
]


def get_currency_from_locale(locale: str) -> str:
    """
    Retrieve the default currency code based on the locale's territory.

    Args:
        locale (str): Locale string, e.g. 'tr_TR'.

    Returns:
        str: Currency code such as 'TRY'. Defaults to 'EUR' if the territory is unknown.
    """
    parts = locale.split('_')
    if len(parts) < 2:
        return 'EUR'
    return CURRENCY_MAP.get(parts[1], 'EUR')


def format_float(value: float, locale: str) -> str:
    """
    Format a float as a decimal string according to the locale conventions.

    Args:
        value (float): The numeric value to be formatted.
        locale (str): Locale string, e.g. 'en_US'.

    Returns:
        str: The formatted decimal string.
    """
    try:
        return numbers.format_decimal(value, locale=Locale.parse(locale))
    except (ValueError, TypeError, UnknownLocaleError) as e:
        logging.debug(f'Error formatting decimal: {e}')
        return str(value)


def format_currency_value(value: float, locale: str) -> str:
    """
    Format a float as a currency string based on the locale's default currency.

    The default currency is determined by the territory extracted from the locale.

    Args:
        value (float): The numeric value to be formatted.
        locale (str): Locale string, e.g. 'tr_TR'.

    Returns:
        str: The formatted currency string.
    """
    try:
        currency_code = get_currency_from_locale(locale)
        return numbers.format_currency(value, currency=currency_code, locale=Locale.parse(locale))
    except (ValueError, TypeError, UnknownLocaleError) as e:
        logging.debug(f'Error formatting currency: {e}')
        return str(value)
