"""Shared pytest fixtures for the mortgage_model test suite.

All fixtures provide synthetic, deterministic data so tests run without a
real tax rate service. Numerical reference fixtures document expected
results for key calculations to enable regression testing.

Reference loan (calculator defaults)
------------------------------------
House price 350 000 $, 20 % down (70 000 $)  →  loan 280 000 $
  r = 4.5 % / 12 = 0.375 % per month, n = 30 × 12 = 360 payments
  P&I ≈ 1 418.73 $/month  (computed via numpy_financial.pmt)

Reference property tax
----------------------
500 000 $ × 1.2 % / 12 = 500.00 $/month
"""

from __future__ import annotations

import numpy_financial as npf
import pytest

from mortgage_model.finance.purchase import PurchaseInputs

REFERENCE_PRINCIPAL = 280_000.0
REFERENCE_RATE_PCT = 4.5
REFERENCE_TERM_YEARS = 30


@pytest.fixture
def reference_loan() -> dict:
    """Principal / rate / term of the reference loan."""
    return {
        "principal": REFERENCE_PRINCIPAL,
        "annual_rate_pct": REFERENCE_RATE_PCT,
        "term_years": REFERENCE_TERM_YEARS,
    }


@pytest.fixture
def reference_payment() -> float:
    """Monthly P&I of the reference loan.

    ``numpy_financial.pmt`` returns a negative value (cash outflow);
    this fixture returns the absolute value.
    """
    return abs(
        float(
            npf.pmt(
                REFERENCE_RATE_PCT / 100.0 / 12.0,
                REFERENCE_TERM_YEARS * 12,
                REFERENCE_PRINCIPAL,
            )
        )
    )


@pytest.fixture
def default_purchase() -> PurchaseInputs:
    """Calculator default inputs (350 000 $, 20 % down, 4.5 %, 30 years)."""
    return PurchaseInputs()


@pytest.fixture
def sample_scenario_config() -> dict:
    """Complete, valid scenario dict with a ZIP-based tax rate."""
    return {
        "scenario": {
            "name": "Starter_Home_Test",
            "output": {
                "directory": "output/test/",
                "export_yearly": True,
            },
        },
        "purchase": {
            "house_price": 350_000.0,
            "down_payment_pct": 20.0,
            "interest_rate_pct": 4.5,
            "loan_term_years": 30,
            "zip_code": "10001",
            "use_custom_tax_rate": False,
        },
        "tax_lookup": {
            "base_url": None,
            "cache_dir": None,
            "timeout_s": 5,
            "max_retries": 2,
        },
    }


@pytest.fixture
def sample_scenario_config_custom_tax() -> dict:
    """Valid scenario dict with a down payment amount and a custom tax rate."""
    return {
        "scenario": {"name": "Custom_Tax_Test"},
        "purchase": {
            "house_price": 500_000.0,
            "down_payment_amount": 100_000.0,
            "interest_rate_pct": 6.5,
            "loan_term_years": 15,
            "property_tax_rate_pct": 1.2,
            "use_custom_tax_rate": True,
        },
    }
