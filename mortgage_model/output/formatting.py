"""Number and currency formatting helpers for output CSVs and stdout.

All functions return strings suitable for writing to CSV files or printing
to the terminal. None values are represented as an empty string.

Public API
----------
fmt_float    – Format a float with configurable decimal places.
fmt_currency – Format a monetary value with two decimals (CSV).
fmt_usd      – Format whole dollars for display, e.g. ``"$1,419"``.
fmt_pct      – Format a percentage value, e.g. ``"1.25%"``.
"""

from __future__ import annotations

from mortgage_model.config.defaults import CURRENCY_PRECISION, FLOAT_PRECISION


def fmt_float(
    value: float | None,
    precision: int = FLOAT_PRECISION,
) -> str:
    """Format a float to a fixed number of decimal places.

    Parameters
    ----------
    value:
        The value to format. None is returned as an empty string.
    precision:
        Number of decimal places.

    Returns
    -------
    str
        Formatted string, e.g. ``"3.1416"``.
    """
    if value is None:
        return ""
    return f"{value:.{precision}f}"


def fmt_currency(
    value: float | None,
    precision: int = CURRENCY_PRECISION,
) -> str:
    """Format a monetary value in dollars without separators.

    Parameters
    ----------
    value:
        Value in dollars. None is returned as an empty string.
    precision:
        Decimal places (default 2).

    Returns
    -------
    str
        Formatted string, e.g. ``"1418.59"``.
    """
    if value is None:
        return ""
    return f"{value:.{precision}f}"


def fmt_usd(value: float | None) -> str:
    """Format a dollar amount for display, rounded to whole dollars.

    Negative amounts carry the sign before the currency symbol.

    Returns
    -------
    str
        Formatted string, e.g. ``"$1,419"`` or ``"-$250"``.
    """
    if value is None:
        return ""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def fmt_pct(value: float | None, precision: int = 2) -> str:
    """Format a value already expressed in percent, e.g. ``1.25`` → ``"1.25%"``."""
    if value is None:
        return ""
    return f"{value:.{precision}f}%"
