"""Immutable purchase inputs: house price, down payment, rate, term, ZIP, tax rate.

Every change produces a new :class:`PurchaseInputs` value; the mortgage is
recomputed from scratch for each value. Down payment percent and amount are
kept in sync:

- changing the house price keeps the percentage and rescales the amount,
- changing the percentage recomputes the amount,
- changing the amount recomputes the percentage.

Out-of-range updates (rate outside 0.1–10 %, down payment above the house
price, negative tax rate) are ignored and the unchanged value is returned.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from mortgage_model.config.defaults import (
    DEFAULT_DOWN_PAYMENT_PCT,
    DEFAULT_HOUSE_PRICE,
    DEFAULT_INTEREST_RATE_PCT,
    DEFAULT_LOAN_TERM_YEARS,
    DEFAULT_PROPERTY_TAX_RATE_PCT,
    MAX_INTEREST_RATE_PCT,
    MIN_INTEREST_RATE_PCT,
    PERCENT,
    ZIP_CODE_LENGTH,
)
from mortgage_model.finance.debt import LoanInputs

logger = logging.getLogger(__name__)

_ZIP_PATTERN = re.compile(rf"^[0-9]{{{ZIP_CODE_LENGTH}}}$")


def is_valid_zip(zip_code: str) -> bool:
    """Return ``True`` if *zip_code* consists of exactly five ASCII digits."""
    return bool(_ZIP_PATTERN.match(zip_code))


@dataclass(frozen=True)
class PurchaseInputs:
    """User-facing purchase parameters.

    Attributes
    ----------
    house_price:
        Purchase price in dollars.
    down_payment_percent:
        Down payment as a percentage of the house price.
    down_payment_amount:
        Down payment in dollars.
    interest_rate_pct:
        Annual interest rate in percent.
    loan_term_years:
        Loan term in years.
    zip_code:
        ZIP code used for the property tax estimate (may be empty).
    property_tax_rate_pct:
        Annual property tax rate in percent.
    use_custom_tax_rate:
        When ``True`` the tax rate was entered manually and ZIP lookups must
        not overwrite it.
    """

    house_price: float = DEFAULT_HOUSE_PRICE
    down_payment_percent: float = DEFAULT_DOWN_PAYMENT_PCT
    down_payment_amount: float = DEFAULT_HOUSE_PRICE * DEFAULT_DOWN_PAYMENT_PCT / PERCENT
    interest_rate_pct: float = DEFAULT_INTEREST_RATE_PCT
    loan_term_years: int = DEFAULT_LOAN_TERM_YEARS
    zip_code: str = ""
    property_tax_rate_pct: float = DEFAULT_PROPERTY_TAX_RATE_PCT
    use_custom_tax_rate: bool = False

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def loan_amount(self) -> float:
        """Amount financed: house price minus down payment."""
        return self.house_price - self.down_payment_amount

    @property
    def has_valid_zip(self) -> bool:
        """``True`` when :attr:`zip_code` is a complete 5-digit ZIP code."""
        return is_valid_zip(self.zip_code)

    def to_loan_inputs(self) -> LoanInputs:
        """Return the :class:`LoanInputs` for the amount financed."""
        return LoanInputs(
            principal=self.loan_amount,
            annual_rate_pct=self.interest_rate_pct,
            term_years=self.loan_term_years,
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def with_house_price(self, price: float) -> PurchaseInputs:
        """Change the house price, keeping the down payment percentage."""
        return replace(
            self,
            house_price=price,
            down_payment_amount=price * self.down_payment_percent / PERCENT,
        )

    def with_down_payment_percent(self, percent: float) -> PurchaseInputs:
        """Change the down payment percentage and recompute the amount."""
        return replace(
            self,
            down_payment_percent=percent,
            down_payment_amount=self.house_price * percent / PERCENT,
        )

    def with_down_payment_amount(self, amount: float) -> PurchaseInputs:
        """Change the down payment amount (0 … house price) and recompute the percentage."""
        if amount < 0 or amount > self.house_price or self.house_price <= 0:
            logger.debug("Ignoring down payment %.2f outside 0..%.2f", amount, self.house_price)
            return self
        return replace(
            self,
            down_payment_amount=amount,
            down_payment_percent=amount / self.house_price * PERCENT,
        )

    def with_interest_rate(self, rate_pct: float) -> PurchaseInputs:
        """Change the interest rate if it lies within the accepted bounds."""
        if not MIN_INTEREST_RATE_PCT <= rate_pct <= MAX_INTEREST_RATE_PCT:
            logger.debug(
                "Ignoring interest rate %.3f %% outside %.1f..%.1f %%",
                rate_pct,
                MIN_INTEREST_RATE_PCT,
                MAX_INTEREST_RATE_PCT,
            )
            return self
        return replace(self, interest_rate_pct=rate_pct)

    def with_loan_term(self, years: int) -> PurchaseInputs:
        """Change the loan term."""
        return replace(self, loan_term_years=int(years))

    def with_zip_code(self, zip_code: str) -> PurchaseInputs:
        """Change the ZIP code (truncated to five characters)."""
        return replace(self, zip_code=zip_code[:ZIP_CODE_LENGTH])

    def with_property_tax_rate(self, rate_pct: float) -> PurchaseInputs:
        """Change the property tax rate if it is non-negative."""
        if rate_pct < 0:
            logger.debug("Ignoring negative property tax rate %.3f %%", rate_pct)
            return self
        return replace(self, property_tax_rate_pct=rate_pct)

    def with_custom_tax_rate(self, enabled: bool) -> PurchaseInputs:
        """Toggle whether the tax rate is user-supplied."""
        return replace(self, use_custom_tax_rate=bool(enabled))
