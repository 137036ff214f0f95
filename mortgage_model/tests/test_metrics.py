"""Tests for finance/metrics.py – schedule frames, yearly view and totals."""

from __future__ import annotations

import logging

import pandas as pd
import pytest

from mortgage_model.finance.debt import build_amortization_schedule
from mortgage_model.finance.metrics import (
    SCHEDULE_COLUMNS,
    YEARLY_COLUMNS,
    balance_is_non_increasing,
    limit_schedule,
    principal_reconciliation_gap,
    schedule_to_frame,
    total_amount_paid,
    total_interest_paid,
    yearly_snapshots,
)


@pytest.fixture
def schedule():
    return build_amortization_schedule(280_000.0, 4.5, 30, property_tax=350.0)


class TestScheduleToFrame:
    def test_shape_and_columns(self, schedule) -> None:
        frame = schedule_to_frame(schedule)
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == SCHEDULE_COLUMNS
        assert len(frame) == 360

    def test_values(self, schedule) -> None:
        frame = schedule_to_frame(schedule)
        assert frame["period"].iloc[0] == 1
        assert frame["remaining_balance"].iloc[-1] == 0.0

    def test_empty(self) -> None:
        frame = schedule_to_frame([])
        assert frame.empty
        assert list(frame.columns) == SCHEDULE_COLUMNS


class TestYearlySnapshots:
    def test_one_row_per_year(self, schedule) -> None:
        yearly = yearly_snapshots(schedule)
        assert list(yearly.columns) == YEARLY_COLUMNS
        assert len(yearly) == 30
        assert list(yearly["year"]) == list(range(1, 31))

    def test_rows_are_year_end(self, schedule) -> None:
        yearly = yearly_snapshots(schedule)
        assert yearly["remaining_balance"].iloc[0] == pytest.approx(schedule[11].remaining_balance)
        assert yearly["cumulative_interest"].iloc[9] == pytest.approx(
            schedule[119].cumulative_interest
        )

    def test_last_year_balance_zero(self, schedule) -> None:
        assert yearly_snapshots(schedule)["remaining_balance"].iloc[-1] == 0.0

    def test_balance_decreasing_interest_increasing(self, schedule) -> None:
        yearly = yearly_snapshots(schedule)
        assert yearly["remaining_balance"].is_monotonic_decreasing
        assert yearly["cumulative_interest"].is_monotonic_increasing


class TestLimitSchedule:
    def test_monthly(self, schedule) -> None:
        rows = limit_schedule(schedule, 5)
        assert len(rows) == 60
        assert rows[-1].period == 60

    def test_yearly(self, schedule) -> None:
        rows = limit_schedule(schedule, 10, yearly=True)
        assert [r.period for r in rows] == [12 * y for y in range(1, 11)]

    def test_more_years_than_term(self, schedule) -> None:
        assert len(limit_schedule(schedule, 40, yearly=True)) == 30


class TestTotals:
    def test_total_interest(self, schedule) -> None:
        assert total_interest_paid(schedule) == schedule[-1].cumulative_interest
        assert total_interest_paid(schedule) == pytest.approx(
            schedule[0].payment * 360 - 280_000.0, rel=1e-6
        )

    def test_total_interest_empty(self) -> None:
        assert total_interest_paid([]) == 0.0

    def test_total_amount_paid(self, schedule) -> None:
        assert total_amount_paid(schedule) == pytest.approx(
            (schedule[0].payment + 350.0) * 360
        )


class TestInvariants:
    def test_reconciliation_gap_small(self, schedule) -> None:
        assert abs(principal_reconciliation_gap(schedule, 280_000.0)) < 1e-2

    def test_reconciliation_gap_warns(self, schedule, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            gap = principal_reconciliation_gap(schedule, 279_000.0)
        assert gap == pytest.approx(1_000.0, abs=1e-2)
        assert "Principal repaid differs" in caplog.text

    def test_non_increasing(self, schedule) -> None:
        assert balance_is_non_increasing(schedule)

    def test_non_increasing_trivial(self) -> None:
        assert balance_is_non_increasing([])
