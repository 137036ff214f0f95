"""Load and validate mortgage scenario JSON files.

Public API
----------
load_scenario(path)      – Parse + validate a scenario JSON file.
load_scenario_dict(data) – Validate an already-parsed scenario dictionary.

All error messages name the specific field that caused the problem so the
user can fix the JSON without guessing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mortgage_model.config.defaults import (
    DEFAULT_OUTPUT_DIR,
    TAX_API_BASE_URL,
    TAX_API_CACHE_DIR,
    TAX_API_REQUEST_TIMEOUT_S,
    TAX_API_RETRY_MAX,
)
from mortgage_model.config.schema import validate_scenario
from mortgage_model.finance.purchase import PurchaseInputs

logger = logging.getLogger(__name__)


@dataclass
class ScenarioConfig:
    """Fully validated, parsed mortgage scenario.

    Attributes
    ----------
    raw:
        The original validated dictionary as loaded from JSON.
    name:
        Scenario name (``scenario.name``).
    path:
        Absolute path to the source JSON file (``None`` if loaded from a dict).
    """

    raw: dict[str, Any]
    name: str
    path: Path | None = field(default=None, repr=False)

    @property
    def purchase(self) -> dict:
        """Shortcut to ``raw["purchase"]``."""
        return self.raw["purchase"]

    @property
    def tax_lookup(self) -> dict:
        """Shortcut to ``raw["tax_lookup"]`` (empty dict if absent)."""
        return self.raw.get("tax_lookup", {})

    @property
    def output_dir(self) -> str:
        """Output directory for result CSVs."""
        return self.raw["scenario"].get("output", {}).get("directory", DEFAULT_OUTPUT_DIR)

    @property
    def export_yearly(self) -> bool:
        """``True`` unless the yearly CSV export is switched off."""
        return bool(self.raw["scenario"].get("output", {}).get("export_yearly", True))

    @property
    def tax_api_base_url(self) -> str | None:
        return self.tax_lookup.get("base_url", TAX_API_BASE_URL)

    @property
    def tax_api_cache_dir(self) -> str | None:
        return self.tax_lookup.get("cache_dir", TAX_API_CACHE_DIR)

    @property
    def tax_api_timeout_s(self) -> int:
        return int(self.tax_lookup.get("timeout_s", TAX_API_REQUEST_TIMEOUT_S))

    @property
    def tax_api_max_retries(self) -> int:
        return int(self.tax_lookup.get("max_retries", TAX_API_RETRY_MAX))

    def to_purchase_inputs(self) -> PurchaseInputs:
        """Build :class:`PurchaseInputs` from the ``purchase`` block.

        A down payment given as an amount takes precedence over the default
        percentage; otherwise the percentage (or its default) is applied.
        """
        p = self.purchase
        inputs = PurchaseInputs().with_house_price(float(p["house_price"]))

        if "down_payment_amount" in p:
            inputs = inputs.with_down_payment_amount(float(p["down_payment_amount"]))
        elif "down_payment_pct" in p:
            inputs = inputs.with_down_payment_percent(float(p["down_payment_pct"]))

        inputs = (
            inputs.with_interest_rate(float(p["interest_rate_pct"]))
            .with_loan_term(int(p["loan_term_years"]))
            .with_zip_code(str(p.get("zip_code", "")))
            .with_custom_tax_rate(bool(p.get("use_custom_tax_rate", False)))
        )
        if "property_tax_rate_pct" in p:
            inputs = inputs.with_property_tax_rate(float(p["property_tax_rate_pct"]))
        return inputs


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------


def load_scenario(path: str | Path) -> ScenarioConfig:
    """Load and validate a scenario JSON file.

    Parameters
    ----------
    path:
        Path to the scenario ``.json`` file.

    Returns
    -------
    ScenarioConfig
        Validated and parsed scenario configuration.

    Raises
    ------
    FileNotFoundError
        When *path* does not exist.
    json.JSONDecodeError
        When the file contains invalid JSON.
    jsonschema.ValidationError
        When the JSON does not conform to the scenario schema.
    ValueError
        When cross-field constraints are violated.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Scenario file not found: '{path}'. "
            "Check that the path is correct and the file exists."
        )

    logger.debug("Loading scenario from '%s'", path)

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise json.JSONDecodeError(
            f"Invalid JSON in scenario file '{path}': {exc.msg}",
            exc.doc,
            exc.pos,
        ) from exc

    validate_scenario(data)

    config = ScenarioConfig(
        raw=data,
        name=data["scenario"]["name"],
        path=path.resolve(),
    )
    logger.info("Loaded scenario '%s' from '%s'", config.name, path)
    return config


def load_scenario_dict(data: dict) -> ScenarioConfig:
    """Validate and wrap an already-parsed scenario dictionary.

    Raises
    ------
    jsonschema.ValidationError
        When *data* does not conform to the scenario schema.
    ValueError
        When cross-field constraints are violated.
    """
    validate_scenario(data)
    return ScenarioConfig(raw=data, name=data["scenario"]["name"], path=None)
