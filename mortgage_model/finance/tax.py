"""Property tax: monthly estimate and comparison against the US average.

Two components:
1. Monthly property tax from home value and annual tax rate.
2. Rating of a tax rate relative to the national average (Low / Average / High).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from mortgage_model.config.defaults import (
    MONTHS_PER_YEAR,
    PERCENT,
    TAX_COMPARISON_CAP_PCT,
    TAX_RATING_HIGH_FACTOR,
    TAX_RATING_LOW_FACTOR,
    US_AVERAGE_TAX_RATE_PCT,
)

RATING_LOW = "Low"
RATING_AVERAGE = "Average"
RATING_HIGH = "High"


@dataclass(frozen=True)
class TaxRateRating:
    """Comparison of a property tax rate with the national average.

    Attributes:
        rate_pct: The rated annual tax rate in percent.
        rating: ``"Low"``, ``"Average"`` or ``"High"``.
        comparison_pct: ``rate / average × 100`` rounded, capped at 200.
    """

    rate_pct: float
    rating: str
    comparison_pct: int


def calculate_property_tax(home_value: float, tax_rate_pct: float) -> float:
    """Calculate the monthly property tax.

    Formula: ``home_value × tax_rate_pct / 100 / 12``

    Args:
        home_value: Assessed home value in dollars.
        tax_rate_pct: Annual property tax rate in percent (e.g. 1.2).

    Returns:
        Monthly property tax in dollars.
    """
    return home_value * tax_rate_pct / PERCENT / MONTHS_PER_YEAR


def rate_tax_rate(
    tax_rate_pct: float,
    average_pct: float = US_AVERAGE_TAX_RATE_PCT,
) -> TaxRateRating:
    """Rate an annual property tax rate against the national average.

    Args:
        tax_rate_pct: Annual tax rate in percent.
        average_pct: Reference average rate in percent.

    Returns:
        :class:`TaxRateRating` with the rating label and comparison percentage.
    """
    if tax_rate_pct < average_pct * TAX_RATING_LOW_FACTOR:
        rating = RATING_LOW
    elif tax_rate_pct > average_pct * TAX_RATING_HIGH_FACTOR:
        rating = RATING_HIGH
    else:
        rating = RATING_AVERAGE

    # round half up
    comparison = math.floor(tax_rate_pct / average_pct * PERCENT + 0.5)
    return TaxRateRating(
        rate_pct=tax_rate_pct,
        rating=rating,
        comparison_pct=min(comparison, TAX_COMPARISON_CAP_PCT),
    )
