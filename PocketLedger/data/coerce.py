"""Amount coercion shared by the monthly summary and the chart computations.

Amounts arrive either as numbers or as numeric-looking strings (values typed into a form
are stored verbatim). Every computation reads them through :func:`coerce_amount` so
parsing and fallback behave identically everywhere.
"""
import decimal
import logging
import math
import numbers
from collections.abc import Mapping
from typing import Any


def coerce_amount(value: Any) -> float:
    """Convert a stored amount to a float.

    Numbers pass through unchanged, strings are parsed as decimal numbers. Anything else,
    unparsable strings and non-finite results fall back to ``0.0``. Never raises.

    Args:
        value: Raw amount value.

    Returns:
        float: The coerced amount.
    """
    # bool is an int subclass but is never a valid amount
    if isinstance(value, bool):
        return 0.0

    if isinstance(value, (numbers.Real, decimal.Decimal)):
        try:
            v = float(value)
        except (OverflowError, ValueError):
            logging.debug(f'Amount "{value}" cannot be converted. Using 0.0.')
            return 0.0
    elif isinstance(value, str):
        try:
            v = float(value.strip())
        except ValueError:
            logging.debug(f'Failed to parse "{value}" as an amount. Using 0.0.')
            return 0.0
    else:
        if value is not None:
            logging.debug(f'Unsupported amount type {type(value).__name__}. Using 0.0.')
        return 0.0

    if not math.isfinite(v):
        logging.debug(f'Non-finite amount "{value}". Using 0.0.')
        return 0.0
    return v


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)
