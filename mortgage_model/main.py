"""CLI entrypoint and orchestrator for the mortgage calculator.

Execution flow
--------------
1.  Build purchase inputs from a scenario JSON and/or CLI flags.
2.  Resolve the property tax rate (custom rate, or ZIP lookup with fallback).
3.  Compute payment summary and amortization schedule.
4.  Write output CSVs.
5.  Print summary to stdout.

Usage
-----
    python -m mortgage_model.main --house-price 350000 --rate 4.5 --zip 10001
    python -m mortgage_model.main --scenario scenarios/starter_home.json
    python -m mortgage_model.main --scenario my.json --tax-rate 1.4 --output out/
    python -m mortgage_model.main --zip 90210 --show-years 5 --yearly-view
    python -m mortgage_model.main --loan-type fha
    python -m mortgage_model.main --scenario my.json --dry-run
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path

from mortgage_model.config.defaults import (
    DEFAULT_HOUSE_PRICE,
    DEFAULT_OUTPUT_DIR,
    DISPLAY_YEAR_OPTIONS,
    LOAN_TERM_OPTIONS_YEARS,
    SCHEDULE_CSV_FILENAME,
    SUMMARY_CSV_FILENAME,
    TAX_API_BASE_URL,
    TAX_API_CACHE_DIR,
    TAX_API_REQUEST_TIMEOUT_S,
    TAX_API_RETRY_MAX,
    YEARLY_CSV_FILENAME,
)
from mortgage_model.config.loader import ScenarioConfig, load_scenario
from mortgage_model.finance.debt import AmortizationEntry
from mortgage_model.finance.metrics import (
    limit_schedule,
    principal_reconciliation_gap,
    total_interest_paid,
    yearly_snapshots,
)
from mortgage_model.finance.mortgage import MortgageResult, calculate_mortgage
from mortgage_model.finance.purchase import PurchaseInputs
from mortgage_model.finance.tax import rate_tax_rate
from mortgage_model.lookup.tax_rate_client import TaxRateClient
from mortgage_model.market.loan_types import LOAN_TYPES, get_loan_type
from mortgage_model.output.csv_writer import (
    write_schedule_csv,
    write_summary_csv,
    write_yearly_csv,
)
from mortgage_model.output.formatting import fmt_currency, fmt_pct, fmt_usd

logger = logging.getLogger(__name__)

TAX_SOURCE_CUSTOM = "custom"
TAX_SOURCE_DEFAULT = "default"


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def _non_negative_float(value: str) -> float:
    """argparse type: a finite float that must be >= 0."""
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if not math.isfinite(number) or number < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative number: {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    p = argparse.ArgumentParser(
        prog="python -m mortgage_model.main",
        description="Mortgage payment and amortization calculator",
    )
    p.add_argument("--scenario", metavar="PATH", default=None, help="Path to scenario JSON file.")
    p.add_argument(
        "--house-price",
        type=float,
        default=None,
        metavar="USD",
        help=f"House price (default {DEFAULT_HOUSE_PRICE:,.0f}).",
    )
    down = p.add_mutually_exclusive_group()
    down.add_argument(
        "--down-payment-pct",
        type=float,
        default=None,
        metavar="PCT",
        help="Down payment as percent of the house price.",
    )
    down.add_argument(
        "--down-payment",
        type=float,
        default=None,
        metavar="USD",
        help="Down payment amount.",
    )
    p.add_argument("--rate", type=float, default=None, metavar="PCT", help="Annual interest rate.")
    p.add_argument(
        "--term",
        type=int,
        default=None,
        choices=LOAN_TERM_OPTIONS_YEARS,
        help="Loan term in years.",
    )
    p.add_argument("--zip", default=None, metavar="ZIP", help="5-digit ZIP code for tax lookup.")
    p.add_argument(
        "--tax-rate",
        type=_non_negative_float,
        default=None,
        metavar="PCT",
        help="Custom annual property tax rate (skips ZIP lookup).",
    )
    p.add_argument(
        "--tax-api-url",
        default=None,
        metavar="URL",
        help="Base URL of the property tax rate service.",
    )
    p.add_argument(
        "--output",
        metavar="DIR",
        default=None,
        help="Output directory (overrides scenario JSON setting).",
    )
    p.add_argument(
        "--loan-type",
        choices=sorted(LOAN_TYPES),
        default=None,
        help="Print information about a loan programme and exit.",
    )
    p.add_argument(
        "--show-years",
        type=int,
        default=None,
        choices=sorted(set(DISPLAY_YEAR_OPTIONS) | set(LOAN_TERM_OPTIONS_YEARS)),
        metavar="YEARS",
        help="Print the first YEARS years of the amortization schedule.",
    )
    p.add_argument(
        "--yearly-view",
        action="store_true",
        default=False,
        help="With --show-years, print one row per year instead of per month.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable DEBUG logging.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Validate inputs, then exit without calculating.",
    )
    return p


# ---------------------------------------------------------------------------
# Input assembly
# ---------------------------------------------------------------------------


def build_purchase_inputs(
    args: argparse.Namespace,
    scenario: ScenarioConfig | None = None,
) -> PurchaseInputs:
    """Combine scenario values and CLI flags (flags win) into purchase inputs.

    Parameters
    ----------
    args:
        Parsed CLI arguments.
    scenario:
        Optional loaded scenario providing the base values.

    Returns
    -------
    PurchaseInputs
    """
    inputs = scenario.to_purchase_inputs() if scenario is not None else PurchaseInputs()

    if args.house_price is not None:
        inputs = inputs.with_house_price(args.house_price)
    if args.down_payment_pct is not None:
        inputs = inputs.with_down_payment_percent(args.down_payment_pct)
    if args.down_payment is not None:
        inputs = inputs.with_down_payment_amount(args.down_payment)
    if args.rate is not None:
        inputs = inputs.with_interest_rate(args.rate)
    if args.term is not None:
        inputs = inputs.with_loan_term(args.term)
    if args.zip is not None:
        inputs = inputs.with_zip_code(args.zip)
    if args.tax_rate is not None:
        inputs = inputs.with_custom_tax_rate(True).with_property_tax_rate(args.tax_rate)
    return inputs


def _build_tax_client(
    args: argparse.Namespace,
    scenario: ScenarioConfig | None,
) -> TaxRateClient:
    """Create the tax rate client from scenario settings and the CLI URL override."""
    if scenario is None:
        return TaxRateClient(
            base_url=args.tax_api_url or TAX_API_BASE_URL,
            cache_dir=TAX_API_CACHE_DIR,
            timeout=TAX_API_REQUEST_TIMEOUT_S,
            max_retries=TAX_API_RETRY_MAX,
        )
    return TaxRateClient(
        base_url=args.tax_api_url or scenario.tax_api_base_url,
        cache_dir=scenario.tax_api_cache_dir,
        timeout=scenario.tax_api_timeout_s,
        max_retries=scenario.tax_api_max_retries,
    )


def resolve_tax_rate(
    inputs: PurchaseInputs,
    client: TaxRateClient,
) -> tuple[PurchaseInputs, str]:
    """Fill in the property tax rate from the ZIP code unless it is custom.

    Returns
    -------
    tuple
        ``(inputs_with_rate, source)`` where *source* is ``"custom"``,
        ``"default"`` (no ZIP given) or the lookup source.
    """
    if inputs.use_custom_tax_rate:
        return inputs, TAX_SOURCE_CUSTOM
    if not inputs.zip_code:
        return inputs, TAX_SOURCE_DEFAULT

    result = client.lookup(inputs.zip_code)
    return inputs.with_property_tax_rate(result.rate_pct), result.source


# ---------------------------------------------------------------------------
# Main orchestration
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace) -> int:
    """Execute one calculation.

    Parameters
    ----------
    args:
        Parsed CLI arguments.

    Returns
    -------
    int
        Exit code (0 = success, 1 = error).
    """
    if args.loan_type is not None:
        _print_loan_type(args.loan_type)
        return 0

    # ------------------------------------------------------------------
    # Step 1: Inputs
    # ------------------------------------------------------------------
    scenario: ScenarioConfig | None = None
    if args.scenario is not None:
        logger.info("Loading scenario: %s", args.scenario)
        try:
            scenario = load_scenario(args.scenario)
        except Exception as exc:
            logger.error("Failed to load scenario: %s", exc)
            return 1

    inputs = build_purchase_inputs(args, scenario)
    scenario_name = scenario.name if scenario is not None else "mortgage"

    if args.dry_run:
        print(f"Dry run: scenario '{scenario_name}' validated successfully.")
        return 0

    # ------------------------------------------------------------------
    # Step 2: Property tax rate
    # ------------------------------------------------------------------
    with _build_tax_client(args, scenario) as client:
        inputs, tax_source = resolve_tax_rate(inputs, client)

    # ------------------------------------------------------------------
    # Step 3: Calculate
    # ------------------------------------------------------------------
    result = calculate_mortgage(inputs)
    principal_reconciliation_gap(result.schedule, result.loan_amount)

    # ------------------------------------------------------------------
    # Step 4: Write CSVs
    # ------------------------------------------------------------------
    if args.output:
        output_dir = Path(args.output)
    elif scenario is not None:
        output_dir = Path(scenario.output_dir) / scenario.name
    else:
        output_dir = Path(DEFAULT_OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Output directory: %s", output_dir)

    write_schedule_csv(output_dir / SCHEDULE_CSV_FILENAME, result.schedule)
    write_summary_csv(output_dir / SUMMARY_CSV_FILENAME, scenario_name, result, tax_source)
    if scenario is None or scenario.export_yearly:
        write_yearly_csv(output_dir / YEARLY_CSV_FILENAME, yearly_snapshots(result.schedule))

    # ------------------------------------------------------------------
    # Step 5: Summary
    # ------------------------------------------------------------------
    _print_summary(scenario_name, result, tax_source)
    if args.show_years is not None:
        _print_schedule(limit_schedule(result.schedule, args.show_years, yearly=args.yearly_view))
    return 0


# ---------------------------------------------------------------------------
# Stdout
# ---------------------------------------------------------------------------


def _print_summary(scenario_name: str, result: MortgageResult, tax_source: str) -> None:
    """Print a human-readable payment summary to stdout."""
    inputs = result.inputs
    summary = result.summary
    rating = rate_tax_rate(inputs.property_tax_rate_pct)

    print()
    print("=" * 60)
    print(f"  Scenario: {scenario_name}")
    print("=" * 60)
    print(f"  House price:           {fmt_usd(inputs.house_price)}")
    print(
        f"  Down payment:          {fmt_usd(inputs.down_payment_amount)} "
        f"({inputs.down_payment_percent:.0f} %)"
    )
    print(f"  Loan amount:           {fmt_usd(result.loan_amount)}")
    print(f"  Interest rate:         {fmt_pct(inputs.interest_rate_pct, precision=3)}")
    print(f"  Loan term:             {inputs.loan_term_years} years")
    print(
        f"  Property tax rate:     {fmt_pct(inputs.property_tax_rate_pct)} "
        f"({tax_source}, {rating.rating} vs. US avg)"
    )
    print()
    print(f"  Principal & interest:  {fmt_usd(summary.principal_and_interest)}")
    print(f"  Property tax:          {fmt_usd(summary.property_tax)}")
    print(f"  Monthly payment:       {fmt_usd(summary.total_payment)}")
    print(f"  Total interest:        {fmt_usd(total_interest_paid(result.schedule))}")
    print("=" * 60)
    print()


def _print_schedule(rows: list[AmortizationEntry]) -> None:
    """Print schedule rows as a fixed-width table."""
    print(f"  {'Payment #':>9}  {'Principal':>12}  {'Interest':>10}  {'Balance':>12}")
    for e in rows:
        print(
            f"  {e.period:>9}  {fmt_currency(e.principal_portion):>12}  "
            f"{fmt_currency(e.interest_portion):>10}  {fmt_currency(e.remaining_balance):>12}"
        )
    print()


def _print_loan_type(key: str) -> None:
    """Print benefits and eligibility of one loan programme."""
    loan = get_loan_type(key)
    print(loan.name)
    print("  Benefits:")
    for item in loan.benefits:
        print(f"    - {item}")
    print("  Eligibility:")
    for item in loan.eligibility:
        print(f"    - {item}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Parse CLI arguments and run the calculation."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
