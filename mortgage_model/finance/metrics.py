"""Schedule metrics: totals, tabular views, yearly snapshots.

The amortization schedule is a list of frozen dataclasses; this module turns
it into ``numpy`` arrays / ``pandas`` frames for aggregation and display.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

import numpy as np
import pandas as pd

from mortgage_model.config.defaults import (
    MONTHS_PER_YEAR,
    PRINCIPAL_RECONCILIATION_TOLERANCE,
)
from mortgage_model.finance.debt import AmortizationEntry

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS: list[str] = [
    "period",
    "payment",
    "principal_portion",
    "interest_portion",
    "property_tax",
    "remaining_balance",
    "cumulative_interest",
    "cumulative_principal",
    "total_payment",
]

YEARLY_COLUMNS: list[str] = [
    "year",
    "remaining_balance",
    "cumulative_interest",
    "cumulative_principal",
]


def schedule_to_frame(schedule: list[AmortizationEntry]) -> pd.DataFrame:
    """Convert a schedule into a DataFrame with one row per month.

    Returns an empty frame with :data:`SCHEDULE_COLUMNS` for an empty schedule.
    """
    if not schedule:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame([asdict(e) for e in schedule], columns=SCHEDULE_COLUMNS)


def yearly_snapshots(schedule: list[AmortizationEntry]) -> pd.DataFrame:
    """Return the end-of-year rows of *schedule* (every 12th payment).

    This is the series plotted as "Remaining Balance" vs.
    "Cumulative Interest" per year.

    Returns
    -------
    pandas.DataFrame
        Columns :data:`YEARLY_COLUMNS`, one row per completed loan year.
    """
    frame = schedule_to_frame(schedule)
    year_end = frame[frame["period"] % MONTHS_PER_YEAR == 0]
    yearly = pd.DataFrame(
        {
            "year": (year_end["period"] // MONTHS_PER_YEAR).astype(int),
            "remaining_balance": year_end["remaining_balance"],
            "cumulative_interest": year_end["cumulative_interest"],
            "cumulative_principal": year_end["cumulative_principal"],
        },
        columns=YEARLY_COLUMNS,
    )
    return yearly.reset_index(drop=True)


def limit_schedule(
    schedule: list[AmortizationEntry],
    years: int,
    yearly: bool = False,
) -> list[AmortizationEntry]:
    """Return the first *years* of the schedule for display.

    Parameters
    ----------
    schedule:
        Full monthly schedule.
    years:
        Number of loan years to show.
    yearly:
        When ``True`` only year-end entries are kept (one per year).
    """
    if yearly:
        rows = [e for e in schedule if e.period % MONTHS_PER_YEAR == 0]
        return rows[:years]
    return schedule[: years * MONTHS_PER_YEAR]


def total_interest_paid(schedule: list[AmortizationEntry]) -> float:
    """Total interest over the life of the loan (0.0 for an empty schedule)."""
    if not schedule:
        return 0.0
    return schedule[-1].cumulative_interest


def total_amount_paid(schedule: list[AmortizationEntry]) -> float:
    """Sum of all total payments (P&I plus property tax)."""
    return float(np.sum([e.total_payment for e in schedule]))


def principal_reconciliation_gap(
    schedule: list[AmortizationEntry],
    principal: float,
) -> float:
    """Return ``sum(principal portions) − principal``.

    Non-zero only through floating-point drift absorbed by the final
    zero-balance clamp; a warning is logged when it exceeds
    :data:`PRINCIPAL_RECONCILIATION_TOLERANCE`.
    """
    repaid = np.array([e.principal_portion for e in schedule], dtype=float)
    gap = float(repaid.sum() - principal)
    if abs(gap) > PRINCIPAL_RECONCILIATION_TOLERANCE:
        logger.warning(
            "Principal repaid differs from loan amount by %.6f (tolerance %.2f)",
            gap,
            PRINCIPAL_RECONCILIATION_TOLERANCE,
        )
    return gap


def balance_is_non_increasing(schedule: list[AmortizationEntry]) -> bool:
    """``True`` if the remaining balance never increases month over month."""
    balances = np.array([e.remaining_balance for e in schedule], dtype=float)
    if balances.size < 2:
        return True
    return bool(np.all(np.diff(balances) <= 0.0))
