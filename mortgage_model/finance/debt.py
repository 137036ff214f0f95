"""Fixed-rate mortgage model: monthly payment and amortization schedule.

Implements a standard annuity loan where the monthly payment (principal and
interest) is constant over the loan term. Each monthly payment is split into
interest and principal repayment components; a constant monthly property tax
is carried alongside for the total housing payment.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy_financial as npf

from mortgage_model.config.defaults import (
    LINEAR_REPAYMENT_THRESHOLD,
    MONTHS_PER_YEAR,
    PERCENT,
)


@dataclass(frozen=True)
class LoanInputs:
    """Loan parameters for a single calculation.

    Attributes:
        principal: Loan amount in dollars.
        annual_rate_pct: Annual interest rate in percent (e.g. 4.5 for 4.5 %).
        term_years: Loan term in years.
    """

    principal: float
    annual_rate_pct: float
    term_years: int

    @property
    def n_periods(self) -> int:
        """Number of monthly payments over the loan term."""
        return self.term_years * MONTHS_PER_YEAR

    @property
    def monthly_rate(self) -> float:
        """Monthly interest rate as a decimal."""
        return monthly_rate(self.annual_rate_pct)


@dataclass(frozen=True)
class AmortizationEntry:
    """One month of the amortization schedule.

    Attributes:
        period: Payment number (1-indexed).
        payment: Principal-and-interest payment for the month.
        principal_portion: Part of the payment that reduces the balance.
        interest_portion: Part of the payment that covers interest.
        property_tax: Monthly property tax (constant over the term).
        remaining_balance: Outstanding balance after this payment (never < 0).
        cumulative_interest: Interest paid up to and including this month.
        cumulative_principal: Principal repaid up to and including this month.
        total_payment: ``payment + property_tax``.
    """

    period: int
    payment: float
    principal_portion: float
    interest_portion: float
    property_tax: float
    remaining_balance: float
    cumulative_interest: float
    cumulative_principal: float
    total_payment: float


def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_pct / PERCENT / MONTHS_PER_YEAR


def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    term_years: int,
) -> float:
    """Calculate the fixed monthly principal-and-interest payment.

    Uses the annuity formula ``P·r·(1+r)^n / ((1+r)^n − 1)`` via
    ``numpy_financial.pmt`` with ``r = rate / 100 / 12`` and
    ``n = years × 12``. Zero and vanishingly small rates (``r·n`` below
    :data:`LINEAR_REPAYMENT_THRESHOLD`) fall back to straight-line repayment
    ``P / n``, where ``(1+r)^n − 1`` would cancel to zero.

    Inputs are not validated; negative values are the caller's concern.

    Args:
        principal: Loan amount in dollars.
        annual_rate_pct: Annual interest rate in percent.
        term_years: Loan term in years.

    Returns:
        Monthly payment in dollars (0.0 for a non-positive term).
    """
    n_periods = term_years * MONTHS_PER_YEAR
    if n_periods <= 0:
        return 0.0

    r = monthly_rate(annual_rate_pct)
    if r * n_periods < LINEAR_REPAYMENT_THRESHOLD:
        return principal / n_periods

    return abs(float(npf.pmt(r, n_periods, principal)))


def build_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    term_years: int,
    property_tax: float = 0.0,
) -> list[AmortizationEntry]:
    """Build the full month-by-month amortization schedule.

    The balance is floored at zero after every payment and set to exactly
    zero after the final one. This absorbs floating-point drift, so the last
    ``principal_portion`` may not reconcile exactly to the pre-payment balance.

    Args:
        principal: Loan amount in dollars.
        annual_rate_pct: Annual interest rate in percent.
        term_years: Loan term in years.
        property_tax: Monthly property tax in dollars, identical for every period.

    Returns:
        List of :class:`AmortizationEntry`, one per month (length = years × 12).
    """
    r = monthly_rate(annual_rate_pct)
    n_periods = term_years * MONTHS_PER_YEAR
    payment = calculate_monthly_payment(principal, annual_rate_pct, term_years)

    schedule: list[AmortizationEntry] = []
    balance = principal
    cumulative_interest = 0.0
    cumulative_principal = 0.0

    for period in range(1, n_periods + 1):
        interest = balance * r
        principal_paid = payment - interest
        balance = max(0.0, balance - principal_paid)
        if period == n_periods:
            # residual drift after the last payment is written off
            balance = 0.0

        cumulative_interest += interest
        cumulative_principal += principal_paid

        schedule.append(
            AmortizationEntry(
                period=period,
                payment=payment,
                principal_portion=principal_paid,
                interest_portion=interest,
                property_tax=property_tax,
                remaining_balance=balance,
                cumulative_interest=cumulative_interest,
                cumulative_principal=cumulative_principal,
                total_payment=payment + property_tax,
            )
        )

    return schedule


def build_schedule_for(loan: LoanInputs, property_tax: float = 0.0) -> list[AmortizationEntry]:
    """Build the amortization schedule for a :class:`LoanInputs` value."""
    return build_amortization_schedule(
        loan.principal, loan.annual_rate_pct, loan.term_years, property_tax
    )
