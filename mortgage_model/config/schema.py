"""JSON schema definition and validation for mortgage scenario files.

Validation uses the ``jsonschema`` library (Draft 7).

Usage::

    from mortgage_model.config.schema import validate_scenario
    validate_scenario(data)   # raises jsonschema.ValidationError on failure
"""

from __future__ import annotations

import jsonschema

from mortgage_model.config.defaults import (
    MAX_INTEREST_RATE_PCT,
    MIN_INTEREST_RATE_PCT,
)

# ---------------------------------------------------------------------------
# Re-usable sub-schemas
# ---------------------------------------------------------------------------

_NON_NEGATIVE_NUMBER = {"type": "number", "minimum": 0}

_OUTPUT = {
    "type": "object",
    "required": ["directory"],
    "properties": {
        "directory": {"type": "string", "minLength": 1},
        "export_yearly": {"type": "boolean"},
    },
    "additionalProperties": False,
}

_SCENARIO_BLOCK = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "output": _OUTPUT,
    },
    "additionalProperties": False,
}

# ---------------------------------------------------------------------------
# Purchase
# ---------------------------------------------------------------------------

_PURCHASE = {
    "type": "object",
    "required": ["house_price", "interest_rate_pct", "loan_term_years"],
    "properties": {
        "house_price": _NON_NEGATIVE_NUMBER,
        "down_payment_pct": {"type": "number", "minimum": 0, "maximum": 100},
        "down_payment_amount": _NON_NEGATIVE_NUMBER,
        "interest_rate_pct": {
            "type": "number",
            "minimum": MIN_INTEREST_RATE_PCT,
            "maximum": MAX_INTEREST_RATE_PCT,
        },
        "loan_term_years": {"type": "integer", "minimum": 1},
        "zip_code": {"type": "string", "maxLength": 5},
        "property_tax_rate_pct": _NON_NEGATIVE_NUMBER,
        "use_custom_tax_rate": {"type": "boolean"},
    },
    "additionalProperties": False,
}

# ---------------------------------------------------------------------------
# Tax rate lookup
# ---------------------------------------------------------------------------

_TAX_LOOKUP = {
    "type": "object",
    "properties": {
        "base_url": {"type": ["string", "null"]},
        "cache_dir": {"type": ["string", "null"]},
        "timeout_s": {"type": "integer", "minimum": 1},
        "max_retries": {"type": "integer", "minimum": 1},
    },
    "additionalProperties": False,
}

# ---------------------------------------------------------------------------
# Top-level schema
# ---------------------------------------------------------------------------

SCENARIO_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Mortgage Scenario Configuration",
    "type": "object",
    "required": ["scenario", "purchase"],
    "properties": {
        "scenario": _SCENARIO_BLOCK,
        "purchase": _PURCHASE,
        "tax_lookup": _TAX_LOOKUP,
    },
    "additionalProperties": False,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_scenario(data: dict) -> None:
    """Validate a scenario configuration dictionary against the JSON schema.

    Parameters
    ----------
    data:
        Parsed scenario dictionary (e.g. from ``json.load``).

    Raises
    ------
    jsonschema.ValidationError
        When *data* does not conform to the scenario schema.
    ValueError
        When cross-field semantic constraints are violated (e.g. a down
        payment larger than the house price).
    """
    validator = jsonschema.Draft7Validator(SCENARIO_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))

    if errors:
        first = errors[0]
        path_str = " → ".join(str(p) for p in first.absolute_path) or "(root)"
        raise jsonschema.ValidationError(
            f"Scenario validation failed at '{path_str}': {first.message}",
            path=first.absolute_path,
            schema_path=first.absolute_schema_path,
            validator=first.validator,
            validator_value=first.validator_value,
            instance=first.instance,
            schema=first.schema,
            cause=first.cause,
        )

    _validate_down_payment(data)
    _validate_custom_tax_rate(data)


def _validate_down_payment(data: dict) -> None:
    """Check that at most one down payment form is given and it fits the price."""
    purchase = data.get("purchase", {})
    if "down_payment_pct" in purchase and "down_payment_amount" in purchase:
        raise ValueError(
            "Specify either purchase.down_payment_pct or "
            "purchase.down_payment_amount, not both."
        )
    amount = purchase.get("down_payment_amount")
    price = purchase.get("house_price", 0.0)
    if amount is not None and amount > price:
        raise ValueError(
            f"purchase.down_payment_amount ({amount}) must not exceed "
            f"purchase.house_price ({price})."
        )


def _validate_custom_tax_rate(data: dict) -> None:
    """A custom tax rate flag requires an explicit property_tax_rate_pct."""
    purchase = data.get("purchase", {})
    if purchase.get("use_custom_tax_rate") and "property_tax_rate_pct" not in purchase:
        raise ValueError(
            "purchase.use_custom_tax_rate is true but no "
            "purchase.property_tax_rate_pct is given."
        )


def get_schema() -> dict:
    """Return a copy of the scenario JSON schema dictionary."""
    return SCENARIO_SCHEMA.copy()
