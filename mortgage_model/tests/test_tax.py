"""Tests for finance/tax.py – monthly property tax and tax rate rating."""

from __future__ import annotations

import pytest

from mortgage_model.finance.tax import (
    RATING_AVERAGE,
    RATING_HIGH,
    RATING_LOW,
    calculate_property_tax,
    rate_tax_rate,
)


class TestCalculatePropertyTax:
    def test_reference_value(self) -> None:
        """500 000 × 1.2 % / 12 = 500 $."""
        assert calculate_property_tax(500_000.0, 1.2) == pytest.approx(500.0)

    def test_zero_rate(self) -> None:
        assert calculate_property_tax(500_000.0, 0.0) == 0.0

    def test_zero_value(self) -> None:
        assert calculate_property_tax(0.0, 2.0) == 0.0

    def test_linear_in_value(self) -> None:
        assert calculate_property_tax(700_000.0, 1.0) == pytest.approx(
            2 * calculate_property_tax(350_000.0, 1.0)
        )


class TestRateTaxRate:
    def test_average_rate(self) -> None:
        r = rate_tax_rate(1.07)
        assert r.rating == RATING_AVERAGE
        assert r.comparison_pct == 100

    def test_low_rate(self) -> None:
        """0.8 % < 0.75 × 1.07 % = 0.8025 % → Low."""
        assert rate_tax_rate(0.8).rating == RATING_LOW

    def test_high_rate(self) -> None:
        """1.4 % > 1.25 × 1.07 % = 1.3375 % → High."""
        assert rate_tax_rate(1.4).rating == RATING_HIGH

    @pytest.mark.parametrize("rate", [0.81, 1.0, 1.2, 1.33])
    def test_band_is_average(self, rate) -> None:
        assert rate_tax_rate(rate).rating == RATING_AVERAGE

    def test_comparison_capped_at_200(self) -> None:
        assert rate_tax_rate(3.0).comparison_pct == 200

    def test_comparison_rounded(self) -> None:
        """1.2 / 1.07 × 100 = 112.15… → 112."""
        assert rate_tax_rate(1.2).comparison_pct == 112

    def test_zero_rate(self) -> None:
        r = rate_tax_rate(0.0)
        assert r.rating == RATING_LOW
        assert r.comparison_pct == 0
        assert r.rate_pct == 0.0
