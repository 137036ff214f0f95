"""Full mortgage calculation for one set of purchase inputs.

Pipeline (recomputed in full for every input change):

1. Loan amount = house price − down payment.
2. Monthly principal & interest from the annuity formula.
3. Monthly property tax from the *house price* and the annual tax rate.
4. Amortization schedule carrying the constant monthly property tax.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mortgage_model.finance.debt import (
    AmortizationEntry,
    build_schedule_for,
    calculate_monthly_payment,
)
from mortgage_model.finance.purchase import PurchaseInputs
from mortgage_model.finance.tax import calculate_property_tax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentSummary:
    """Monthly payment breakdown.

    Attributes:
        principal_and_interest: Monthly loan payment.
        property_tax: Monthly property tax.
        total_payment: Sum of both.
    """

    principal_and_interest: float
    property_tax: float
    total_payment: float


@dataclass(frozen=True)
class MortgageResult:
    """Everything derived from one :class:`PurchaseInputs` value.

    Attributes:
        inputs: The purchase inputs the result was computed from.
        loan_amount: Amount financed.
        summary: Monthly payment breakdown.
        schedule: Month-by-month amortization schedule.
    """

    inputs: PurchaseInputs
    loan_amount: float
    summary: PaymentSummary
    schedule: list[AmortizationEntry]


def summarize_payment(
    principal_and_interest: float,
    property_tax: float,
) -> PaymentSummary:
    """Combine P&I and property tax into a :class:`PaymentSummary`."""
    return PaymentSummary(
        principal_and_interest=principal_and_interest,
        property_tax=property_tax,
        total_payment=principal_and_interest + property_tax,
    )


def calculate_mortgage(inputs: PurchaseInputs) -> MortgageResult:
    """Compute the payment summary and amortization schedule.

    Args:
        inputs: Purchase inputs (house price, down payment, rate, term, tax rate).

    Returns:
        :class:`MortgageResult` for *inputs*.
    """
    loan = inputs.to_loan_inputs()
    monthly_pi = calculate_monthly_payment(loan.principal, loan.annual_rate_pct, loan.term_years)
    monthly_tax = calculate_property_tax(inputs.house_price, inputs.property_tax_rate_pct)
    schedule = build_schedule_for(loan, monthly_tax)

    logger.debug(
        "Mortgage: loan=%.2f rate=%.3f%% term=%dy -> P&I=%.2f tax=%.2f",
        loan.principal,
        loan.annual_rate_pct,
        loan.term_years,
        monthly_pi,
        monthly_tax,
    )
    return MortgageResult(
        inputs=inputs,
        loan_amount=loan.principal,
        summary=summarize_payment(monthly_pi, monthly_tax),
        schedule=schedule,
    )
