"""Write mortgage results to CSV files.

Three output files are produced per run:

1. ``mortgage_amortization.csv`` – One row per monthly payment.
2. ``mortgage_summary.csv``      – Single row: key inputs + monthly payment.
3. ``mortgage_yearly.csv``       – One row per loan year (optional).

All monetary values are in USD with exactly two decimals. None values are
written as empty strings.

Public API
----------
schedule_rows       – Build the amortization table rows (export format).
write_schedule_csv  – Write the amortization table.
write_summary_csv   – Write the single-row summary file.
write_yearly_csv    – Write the per-year balance table.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from mortgage_model.config.defaults import CSV_DELIMITER, CSV_LINE_TERMINATOR
from mortgage_model.finance.debt import AmortizationEntry
from mortgage_model.finance.metrics import total_interest_paid
from mortgage_model.finance.mortgage import MortgageResult
from mortgage_model.output.formatting import fmt_currency, fmt_float

logger = logging.getLogger(__name__)

SCHEDULE_HEADERS: list[str] = [
    "Payment #",
    "Payment Amount",
    "Principal",
    "Interest",
    "Property Tax",
    "Remaining Balance",
    "Total Payment",
]


# ---------------------------------------------------------------------------
# Amortization schedule CSV
# ---------------------------------------------------------------------------


def schedule_rows(schedule: list[AmortizationEntry]) -> list[dict[str, str]]:
    """Return one export row per schedule entry, keyed by :data:`SCHEDULE_HEADERS`."""
    rows = []
    for e in schedule:
        rows.append({
            "Payment #": str(e.period),
            "Payment Amount": fmt_currency(e.payment),
            "Principal": fmt_currency(e.principal_portion),
            "Interest": fmt_currency(e.interest_portion),
            "Property Tax": fmt_currency(e.property_tax),
            "Remaining Balance": fmt_currency(e.remaining_balance),
            "Total Payment": fmt_currency(e.total_payment),
        })
    return rows


def write_schedule_csv(
    path: Path | str,
    schedule: list[AmortizationEntry],
) -> None:
    """Write the amortization schedule in the export format.

    The header row is always written, even for an empty schedule.

    Parameters
    ----------
    path:
        Destination file path.
    schedule:
        Monthly amortization schedule.
    """
    _write_dicts(path, schedule_rows(schedule), fieldnames=SCHEDULE_HEADERS)
    logger.info("Wrote amortization CSV (%d rows): %s", len(schedule), path)


# ---------------------------------------------------------------------------
# Summary CSV
# ---------------------------------------------------------------------------


def write_summary_csv(
    path: Path | str,
    scenario_name: str,
    result: MortgageResult,
    tax_rate_source: str,
) -> None:
    """Write the single-row summary CSV.

    Parameters
    ----------
    path:
        Destination file path.
    scenario_name:
        Human-readable scenario name.
    result:
        Complete mortgage calculation result.
    tax_rate_source:
        Where the property tax rate came from (``"custom"``, ``"api"``,
        ``"cache"`` or ``"fallback"``).
    """
    inputs = result.inputs
    summary = result.summary
    row = {
        "scenario_name": scenario_name,
        "house_price_usd": fmt_currency(inputs.house_price),
        "down_payment_usd": fmt_currency(inputs.down_payment_amount),
        "down_payment_pct": fmt_float(inputs.down_payment_percent, precision=2),
        "loan_amount_usd": fmt_currency(result.loan_amount),
        "interest_rate_pct": fmt_float(inputs.interest_rate_pct),
        "loan_term_years": str(inputs.loan_term_years),
        "zip_code": inputs.zip_code,
        "property_tax_rate_pct": fmt_float(inputs.property_tax_rate_pct),
        "tax_rate_source": tax_rate_source,
        "principal_and_interest_usd": fmt_currency(summary.principal_and_interest),
        "property_tax_usd": fmt_currency(summary.property_tax),
        "total_payment_usd": fmt_currency(summary.total_payment),
        "total_interest_usd": fmt_currency(total_interest_paid(result.schedule)),
    }

    _write_dicts(path, [row])
    logger.info("Wrote summary CSV: %s", path)


# ---------------------------------------------------------------------------
# Yearly CSV
# ---------------------------------------------------------------------------


def write_yearly_csv(
    path: Path | str,
    yearly: pd.DataFrame,
) -> None:
    """Write the per-year balance / cumulative interest table.

    Parameters
    ----------
    path:
        Destination file path.
    yearly:
        Frame produced by :func:`mortgage_model.finance.metrics.yearly_snapshots`.
    """
    rows = []
    for rec in yearly.itertuples(index=False):
        rows.append({
            "year": str(int(rec.year)),
            "remaining_balance_usd": fmt_currency(rec.remaining_balance),
            "cumulative_interest_usd": fmt_currency(rec.cumulative_interest),
            "cumulative_principal_usd": fmt_currency(rec.cumulative_principal),
        })

    _write_dicts(path, rows)
    logger.info("Wrote yearly CSV (%d rows): %s", len(rows), path)


# ---------------------------------------------------------------------------
# Internal helper
# ---------------------------------------------------------------------------


def _write_dicts(
    path: Path | str,
    rows: list[dict],
    fieldnames: list[str] | None = None,
) -> None:
    """Write a list of dicts to a CSV file, creating parent directories.

    Parameters
    ----------
    path:
        Destination file path.
    rows:
        List of row dicts.  All dicts must have the same keys.
    fieldnames:
        Column order. Defaults to the keys of the first row; when given, the
        header is written even if *rows* is empty.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fieldnames is None:
        if not rows:
            path.write_text("", encoding="utf-8")
            return
        fieldnames = list(rows[0].keys())

    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh,
            fieldnames=fieldnames,
            delimiter=CSV_DELIMITER,
            lineterminator=CSV_LINE_TERMINATOR,
        )
        writer.writeheader()
        writer.writerows(rows)
