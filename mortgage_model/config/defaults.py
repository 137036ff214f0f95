"""Global default values and constants.

All numeric constants used throughout the mortgage_model package must be
defined here rather than as inline literals. Import from this module wherever
a constant is needed to ensure a single source of truth and full traceability.
"""

# ---------------------------------------------------------------------------
# Time constants
# ---------------------------------------------------------------------------

MONTHS_PER_YEAR: int = 12
"""Number of monthly payment periods per loan year."""

PERCENT: float = 100.0
"""Divisor converting a percentage (e.g. 4.5) to a fraction (0.045)."""

LINEAR_REPAYMENT_THRESHOLD: float = 1e-7
"""Below this total rate (monthly rate × periods) the payment is P / n."""

# ---------------------------------------------------------------------------
# Purchase input defaults
# ---------------------------------------------------------------------------

DEFAULT_HOUSE_PRICE: float = 350_000.0
"""Default house price in dollars."""

DEFAULT_DOWN_PAYMENT_PCT: float = 20.0
"""Default down payment as a percentage of the house price."""

DEFAULT_INTEREST_RATE_PCT: float = 4.5
"""Default annual interest rate in percent."""

DEFAULT_LOAN_TERM_YEARS: int = 30
"""Default loan term in years."""

LOAN_TERM_OPTIONS_YEARS: tuple[int, ...] = (15, 30)
"""Loan terms offered by the calculator."""

MIN_INTEREST_RATE_PCT: float = 0.1
"""Lowest interest rate accepted by the rate input."""

MAX_INTEREST_RATE_PCT: float = 10.0
"""Highest interest rate accepted by the rate input."""

# ---------------------------------------------------------------------------
# Property tax
# ---------------------------------------------------------------------------

DEFAULT_PROPERTY_TAX_RATE_PCT: float = 1.2
"""Annual property tax rate used before a ZIP code lookup has completed."""

ZIP_CODE_LENGTH: int = 5
"""Number of digits in a US ZIP code."""

FALLBACK_TAX_BASE_PCT: float = 0.8
"""Fallback tax rate for ZIP codes starting with ``0``."""

FALLBACK_TAX_STEP_PCT: float = 0.2
"""Fallback tax rate increment per leading ZIP digit (0.8 % … 2.6 %)."""

US_AVERAGE_TAX_RATE_PCT: float = 1.07
"""Approximate US national average effective property tax rate."""

TAX_RATING_LOW_FACTOR: float = 0.75
"""Rates below ``factor × US average`` are rated "Low"."""

TAX_RATING_HIGH_FACTOR: float = 1.25
"""Rates above ``factor × US average`` are rated "High"."""

TAX_COMPARISON_CAP_PCT: int = 200
"""Upper bound for the rate-vs-average comparison percentage."""

# ---------------------------------------------------------------------------
# Tax rate API
# ---------------------------------------------------------------------------

TAX_API_BASE_URL: str | None = None
"""Base URL of the property tax rate service (``None`` = offline, fallback only)."""

TAX_API_ENDPOINT: str = "property-tax"
"""Endpoint returning ``{"zip": ..., "rate_pct": ...}`` for a ZIP code."""

TAX_API_CACHE_DIR: str = "~/.mortgage_model_cache"
"""Local directory for caching raw tax rate JSON responses."""

TAX_API_RETRY_MAX: int = 3
"""Maximum number of HTTP retry attempts for tax rate API calls."""

TAX_API_RETRY_BACKOFF_FACTOR: float = 0.5
"""Exponential backoff factor (seconds) between tax rate API retries."""

TAX_API_REQUEST_TIMEOUT_S: int = 10
"""HTTP request timeout in seconds for tax rate API calls."""

TAX_API_MAX_WORKERS: int = 2
"""Worker threads used for asynchronous tax rate lookups."""

# ---------------------------------------------------------------------------
# Numerical tolerances
# ---------------------------------------------------------------------------

PRINCIPAL_RECONCILIATION_TOLERANCE: float = 1e-2
"""Absolute tolerance for sum(principal portions) versus loan principal."""

# ---------------------------------------------------------------------------
# Output defaults
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT_DIR: str = "output"
"""Default root directory for result files."""

SCHEDULE_CSV_FILENAME: str = "mortgage_amortization.csv"
"""File name of the exported amortization schedule."""

SUMMARY_CSV_FILENAME: str = "mortgage_summary.csv"
"""File name of the single-row payment summary."""

YEARLY_CSV_FILENAME: str = "mortgage_yearly.csv"
"""File name of the per-year balance / cumulative interest table."""

CSV_DELIMITER: str = ","
"""Delimiter used in all output CSV files."""

CSV_LINE_TERMINATOR: str = "\n"
"""Row terminator used in all output CSV files."""

CURRENCY_PRECISION: int = 2
"""Number of decimal places for monetary values in output CSVs."""

FLOAT_PRECISION: int = 4
"""Number of decimal places for non-monetary floats in output CSVs."""

DISPLAY_YEAR_OPTIONS: tuple[int, ...] = (5, 10, 15)
"""Year counts offered for truncated schedule display (plus the full term)."""
