"""Integration tests for the CLI orchestrator in mortgage_model.main.

All runs are offline: either no tax service is configured (fallback) or
``requests.get`` is mocked. HOME is redirected so the default response
cache directory lands in ``tmp_path``.
"""

from __future__ import annotations

import copy
import csv
import json
from unittest.mock import MagicMock, patch

import pytest

from mortgage_model.config.loader import load_scenario_dict
from mortgage_model.finance.purchase import PurchaseInputs
from mortgage_model.lookup.tax_rate_client import TaxRateClient
from mortgage_model.main import _build_parser, build_purchase_inputs, resolve_tax_rate, run

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def _args(*argv: str):
    return _build_parser().parse_args(list(argv))


def _read_rows(path) -> list[dict]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


# ---------------------------------------------------------------------------
# build_purchase_inputs
# ---------------------------------------------------------------------------


class TestBuildPurchaseInputs:
    def test_defaults_without_flags(self):
        assert build_purchase_inputs(_args()) == PurchaseInputs()

    def test_flags_applied(self):
        inputs = build_purchase_inputs(
            _args("--house-price", "400000", "--down-payment", "40000", "--rate", "6.25",
                  "--term", "15", "--zip", "9021099")
        )
        assert inputs.house_price == 400_000.0
        assert inputs.down_payment_percent == pytest.approx(10.0)
        assert inputs.interest_rate_pct == 6.25
        assert inputs.loan_term_years == 15
        assert inputs.zip_code == "90210"

    def test_tax_rate_flag_marks_custom(self):
        inputs = build_purchase_inputs(_args("--tax-rate", "2.0"))
        assert inputs.use_custom_tax_rate is True
        assert inputs.property_tax_rate_pct == 2.0

    def test_flags_override_scenario(self, sample_scenario_config):
        scenario = load_scenario_dict(sample_scenario_config)
        inputs = build_purchase_inputs(_args("--rate", "5.0"), scenario)
        assert inputs.interest_rate_pct == 5.0
        assert inputs.zip_code == "10001"

    def test_out_of_range_rate_ignored(self):
        assert build_purchase_inputs(_args("--rate", "12")).interest_rate_pct == 4.5

    def test_down_payment_flags_exclusive(self):
        with pytest.raises(SystemExit):
            _args("--down-payment-pct", "10", "--down-payment", "1000")

    @pytest.mark.parametrize("value", ["-1", "-0.5", "nan", "inf", "abc"])
    def test_invalid_tax_rate_rejected(self, value, capsys):
        with pytest.raises(SystemExit):
            _args(f"--tax-rate={value}")
        assert "--tax-rate" in capsys.readouterr().err

    def test_zero_tax_rate_accepted(self):
        inputs = build_purchase_inputs(_args("--tax-rate", "0"))
        assert inputs.use_custom_tax_rate is True
        assert inputs.property_tax_rate_pct == 0.0

    def test_term_choices(self):
        with pytest.raises(SystemExit):
            _args("--term", "20")


# ---------------------------------------------------------------------------
# resolve_tax_rate
# ---------------------------------------------------------------------------


class TestResolveTaxRate:
    def test_custom_rate_skips_lookup(self):
        client = MagicMock(spec=TaxRateClient)
        inputs = PurchaseInputs().with_custom_tax_rate(True).with_property_tax_rate(1.9)
        resolved, source = resolve_tax_rate(inputs, client)
        assert source == "custom"
        assert resolved.property_tax_rate_pct == 1.9
        client.lookup.assert_not_called()

    def test_no_zip_keeps_default(self):
        client = MagicMock(spec=TaxRateClient)
        resolved, source = resolve_tax_rate(PurchaseInputs(), client)
        assert source == "default"
        assert resolved.property_tax_rate_pct == 1.2
        client.lookup.assert_not_called()

    def test_zip_uses_fallback_offline(self):
        client = TaxRateClient(base_url=None, cache_dir=None)
        resolved, source = resolve_tax_rate(PurchaseInputs().with_zip_code("30301"), client)
        assert source == "fallback"
        assert resolved.property_tax_rate_pct == pytest.approx(1.4)

    def test_zip_uses_api(self):
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = {"zip": "10001", "rate_pct": 0.88}
        client = TaxRateClient(base_url="https://tax.example.test/", cache_dir=None)
        with patch("requests.get", return_value=resp):
            resolved, source = resolve_tax_rate(PurchaseInputs().with_zip_code("10001"), client)
        assert source == "api"
        assert resolved.property_tax_rate_pct == 0.88


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_flags_only_run_writes_csvs(self, tmp_path, capsys):
        out = tmp_path / "out"
        code = run(_args("--zip", "10001", "--output", str(out)))
        assert code == 0

        schedule = _read_rows(out / "mortgage_amortization.csv")
        assert len(schedule) == 360
        summary = _read_rows(out / "mortgage_summary.csv")[0]
        assert summary["scenario_name"] == "mortgage"
        assert summary["tax_rate_source"] == "fallback"
        assert summary["property_tax_rate_pct"] == "1.0000"
        assert len(_read_rows(out / "mortgage_yearly.csv")) == 30

        printed = capsys.readouterr().out
        assert "Scenario: mortgage" in printed
        assert "Monthly payment:" in printed

    def test_scenario_run(self, tmp_path, sample_scenario_config_custom_tax):
        cfg = copy.deepcopy(sample_scenario_config_custom_tax)
        cfg["scenario"]["output"] = {"directory": str(tmp_path / "results"), "export_yearly": False}
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps(cfg), encoding="utf-8")

        assert run(_args("--scenario", str(path))) == 0

        out = tmp_path / "results" / "Custom_Tax_Test"
        summary = _read_rows(out / "mortgage_summary.csv")[0]
        assert summary["tax_rate_source"] == "custom"
        assert summary["property_tax_usd"] == "500.00"
        assert len(_read_rows(out / "mortgage_amortization.csv")) == 180
        assert not (out / "mortgage_yearly.csv").exists()

    def test_dry_run(self, tmp_path, sample_scenario_config, capsys):
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps(sample_scenario_config), encoding="utf-8")
        assert run(_args("--scenario", str(path), "--dry-run")) == 0
        assert "Starter_Home_Test" in capsys.readouterr().out
        assert not (tmp_path / "output").exists()

    def test_missing_scenario_returns_1(self, tmp_path):
        assert run(_args("--scenario", str(tmp_path / "missing.json"))) == 1

    def test_invalid_scenario_returns_1(self, tmp_path, sample_scenario_config):
        cfg = copy.deepcopy(sample_scenario_config)
        cfg["purchase"]["interest_rate_pct"] = 25.0
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(cfg), encoding="utf-8")
        assert run(_args("--scenario", str(path))) == 1

    def test_loan_type(self, capsys):
        assert run(_args("--loan-type", "va")) == 0
        printed = capsys.readouterr().out
        assert "VA Loans" in printed
        assert "No down payment required" in printed

    def test_show_years_yearly(self, tmp_path, capsys):
        code = run(_args("--output", str(tmp_path), "--show-years", "5", "--yearly-view"))
        assert code == 0
        printed = capsys.readouterr().out
        assert "Payment #" in printed
        table_rows = [
            line for line in printed.splitlines()
            if line.strip().split(" ")[0] in {"12", "24", "36", "48", "60", "72"}
        ]
        assert len(table_rows) == 5
