"""Property tax rate client – look up the annual tax rate for a US ZIP code.

Queries a property tax rate service, ``property-tax`` endpoint, which answers
``GET {base_url}property-tax?zip=NNNNN`` with::

    {"zip": "10001", "rate_pct": 1.25}

Key behaviour
-------------
- **Never raises** from the public API. A malformed ZIP, an unconfigured
  service, transport errors and unusable responses all resolve to the
  deterministic fallback estimate :func:`fallback_tax_rate`
  (``0.8 + first_digit × 0.2`` percent).
- Caches the raw JSON response on disk (``~/.mortgage_model_cache/``) keyed
  by a SHA-256 hash of the query parameters.
- Retries up to :data:`~mortgage_model.config.defaults.TAX_API_RETRY_MAX`
  times with exponential backoff on HTTP 429, 5xx, timeouts and connection
  errors.
- :meth:`TaxRateClient.lookup_rate_async` runs the lookup on a worker thread
  and returns a :class:`concurrent.futures.Future`.

Typical usage::

    from mortgage_model.lookup.tax_rate_client import TaxRateClient
    client = TaxRateClient(base_url="https://taxes.example.org/api/")
    rate = client.lookup_rate("10001")        # e.g. 1.25
    future = client.lookup_rate_async("90210")
    rate = future.result()
"""

from __future__ import annotations

import concurrent.futures
import hashlib
import json
import logging
import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from mortgage_model.config.defaults import (
    DEFAULT_PROPERTY_TAX_RATE_PCT,
    FALLBACK_TAX_BASE_PCT,
    FALLBACK_TAX_STEP_PCT,
    TAX_API_BASE_URL,
    TAX_API_CACHE_DIR,
    TAX_API_ENDPOINT,
    TAX_API_MAX_WORKERS,
    TAX_API_REQUEST_TIMEOUT_S,
    TAX_API_RETRY_BACKOFF_FACTOR,
    TAX_API_RETRY_MAX,
)
from mortgage_model.finance.purchase import is_valid_zip

logger = logging.getLogger(__name__)

# HTTP status codes that warrant a retry (rate-limit and server errors)
_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

SOURCE_API = "api"
SOURCE_CACHE = "cache"
SOURCE_FALLBACK = "fallback"


class TaxRateError(RuntimeError):
    """Raised internally when the tax rate service cannot deliver a rate."""


@dataclass(frozen=True)
class TaxRateResult:
    """A looked-up tax rate together with where it came from.

    Attributes:
        zip_code: The queried ZIP code.
        rate_pct: Annual property tax rate in percent.
        source: ``"api"``, ``"cache"`` or ``"fallback"``.
    """

    zip_code: str
    rate_pct: float
    source: str


def fallback_tax_rate(zip_code: str) -> float:
    """Deterministic tax rate estimate from the leading ZIP digit.

    ``0.8 + first_digit × 0.2`` → ranges from 0.8 % (``0xxxx``) to
    2.6 % (``9xxxx``). When the ZIP does not start with a digit the default
    rate :data:`DEFAULT_PROPERTY_TAX_RATE_PCT` is returned.

    Parameters
    ----------
    zip_code:
        ZIP code string (need not be valid).

    Returns
    -------
    float
        Annual tax rate in percent.
    """
    if not zip_code or not zip_code[0].isascii() or not zip_code[0].isdigit():
        logger.warning(
            "Cannot estimate tax rate for ZIP %r – using default %.2f %%",
            zip_code,
            DEFAULT_PROPERTY_TAX_RATE_PCT,
        )
        return DEFAULT_PROPERTY_TAX_RATE_PCT
    first_digit = int(zip_code[0])
    return FALLBACK_TAX_BASE_PCT + first_digit * FALLBACK_TAX_STEP_PCT


class TaxRateClient:
    """Thin client for the property tax ``property-tax`` endpoint.

    Parameters
    ----------
    base_url:
        Service base URL. ``None`` disables network access entirely; every
        lookup then returns the fallback estimate.
    cache_dir:
        Directory for persistent JSON response cache.  Defaults to
        ``~/.mortgage_model_cache``.  Pass ``None`` to disable caching
        (useful in tests).
    timeout:
        HTTP request timeout in seconds.
    max_retries:
        Maximum number of attempts on transient errors.
    backoff_factor:
        Initial wait time (seconds) for exponential backoff.
        Actual wait on attempt *k* = ``backoff_factor × 2^(k-1)``.
    """

    def __init__(
        self,
        base_url: str | None = TAX_API_BASE_URL,
        cache_dir: str | Path | None = TAX_API_CACHE_DIR,
        timeout: int = TAX_API_REQUEST_TIMEOUT_S,
        max_retries: int = TAX_API_RETRY_MAX,
        backoff_factor: float = TAX_API_RETRY_BACKOFF_FACTOR,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/" if base_url else None
        self._timeout = timeout
        self._max_retries = max_retries
        self._backoff_factor = backoff_factor
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None

        if cache_dir is None:
            self._cache_dir: Path | None = None
        else:
            self._cache_dir = Path(cache_dir).expanduser()
            self._cache_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lookup(self, zip_code: str) -> TaxRateResult:
        """Look up the tax rate for *zip_code*, falling back on any failure.

        Parameters
        ----------
        zip_code:
            5-digit US ZIP code.

        Returns
        -------
        TaxRateResult
            The rate and its source. Never raises for lookup failures.
        """
        if not is_valid_zip(zip_code):
            logger.warning("Malformed ZIP code %r – using fallback estimate", zip_code)
            return TaxRateResult(zip_code, fallback_tax_rate(zip_code), SOURCE_FALLBACK)

        if self._base_url is None:
            logger.debug("No tax rate service configured – using fallback for %s", zip_code)
            return TaxRateResult(zip_code, fallback_tax_rate(zip_code), SOURCE_FALLBACK)

        params = self._build_params(zip_code)
        try:
            rate, source = self._get_with_cache(params)
        except (TaxRateError, requests.RequestException, OSError, ValueError) as exc:
            rate = fallback_tax_rate(zip_code)
            logger.warning(
                "Tax rate lookup for ZIP %s failed (%s) – using estimate %.2f %%",
                zip_code,
                exc,
                rate,
            )
            return TaxRateResult(zip_code, rate, SOURCE_FALLBACK)

        logger.info("Property tax rate for ZIP %s: %.2f %% (%s)", zip_code, rate, source)
        return TaxRateResult(zip_code, rate, source)

    def lookup_rate(self, zip_code: str) -> float:
        """Return the annual tax rate in percent for *zip_code*."""
        return self.lookup(zip_code).rate_pct

    def lookup_rate_async(self, zip_code: str) -> concurrent.futures.Future:
        """Start a lookup on a worker thread and return its future.

        The future resolves to the rate in percent; lookup failures resolve to
        the fallback estimate rather than an exception.
        """
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=TAX_API_MAX_WORKERS,
                thread_name_prefix="tax-rate",
            )
        return self._executor.submit(self.lookup_rate, zip_code)

    def close(self) -> None:
        """Shut down the worker pool used by :meth:`lookup_rate_async`."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> TaxRateClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Parameter construction
    # ------------------------------------------------------------------

    @staticmethod
    def _build_params(zip_code: str) -> dict[str, Any]:
        """Return the query-parameter dict for the property-tax endpoint."""
        return {"zip": zip_code}

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _cache_key(params: dict[str, Any]) -> str:
        """Return a 32-char SHA-256 hex digest for *params*."""
        canonical = json.dumps(params, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()[:32]

    def _cache_path(self, params: dict[str, Any]) -> Path | None:
        """Return the cache file ``Path``, or ``None`` if caching is disabled."""
        if self._cache_dir is None:
            return None
        return self._cache_dir / f"taxrate_{self._cache_key(params)}.json"

    def _get_with_cache(self, params: dict[str, Any]) -> tuple[float, str]:
        """Return ``(rate_pct, source)``, served from disk cache when available.

        Only responses that parse to a usable rate are cached. An unreadable
        or unusable cache file is removed and the rate is fetched again.
        """
        cache_file = self._cache_path(params)

        if cache_file is not None and cache_file.exists():
            try:
                with cache_file.open("r", encoding="utf-8") as fh:
                    rate = self._parse_response(json.load(fh))
            except (TaxRateError, ValueError) as exc:
                logger.warning("Discarding unusable tax rate cache %s: %s", cache_file, exc)
                cache_file.unlink(missing_ok=True)
            else:
                logger.debug("Tax rate cache hit: %s", cache_file)
                return rate, SOURCE_CACHE

        logger.debug("Tax rate cache miss – fetching from API")
        raw = self._fetch(params)
        rate = self._parse_response(raw)

        if cache_file is not None:
            logger.debug("Writing tax rate cache: %s", cache_file)
            with cache_file.open("w", encoding="utf-8") as fh:
                json.dump(raw, fh)

        return rate, SOURCE_API

    # ------------------------------------------------------------------
    # HTTP with retry/backoff
    # ------------------------------------------------------------------

    def _fetch(self, params: dict[str, Any]) -> dict:
        """Execute the HTTP GET with exponential backoff retry."""
        url = f"{self._base_url}{TAX_API_ENDPOINT}"
        last_exc: Exception | None = None

        for attempt in range(1, self._max_retries + 1):
            wait = self._backoff_factor * (2 ** (attempt - 1))
            try:
                logger.debug(
                    "Tax rate request attempt %d/%d: %s",
                    attempt,
                    self._max_retries,
                    url,
                )
                resp = requests.get(url, params=params, timeout=self._timeout)

                if resp.status_code == 200:
                    return resp.json()

                if resp.status_code in _RETRYABLE_STATUS_CODES:
                    logger.warning(
                        "Tax rate API HTTP %d on attempt %d/%d – retrying in %.1fs",
                        resp.status_code,
                        attempt,
                        self._max_retries,
                        wait,
                    )
                    time.sleep(wait)
                    last_exc = TaxRateError(
                        f"HTTP {resp.status_code} from tax rate API "
                        f"after {attempt} attempt(s)"
                    )
                    continue

                # Non-retryable client error (4xx except 429)
                raise TaxRateError(
                    f"Tax rate API error (HTTP {resp.status_code}): {resp.text[:300]}"
                )

            except requests.Timeout as exc:
                logger.warning(
                    "Tax rate API timeout on attempt %d/%d – retrying in %.1fs",
                    attempt,
                    self._max_retries,
                    wait,
                )
                time.sleep(wait)
                last_exc = exc

            except requests.ConnectionError as exc:
                logger.warning(
                    "Tax rate API connection error on attempt %d/%d – retrying in %.1fs: %s",
                    attempt,
                    self._max_retries,
                    wait,
                    exc,
                )
                time.sleep(wait)
                last_exc = exc

            except ValueError as exc:
                raise TaxRateError("Tax rate API returned invalid JSON.") from exc

        raise TaxRateError(
            f"Tax rate request failed after {self._max_retries} attempt(s)."
        ) from last_exc

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_response(raw: Any) -> float:
        """Extract ``rate_pct`` from the service response.

        Accepts a number or numeric string. Booleans, NaN and infinities are
        rejected.

        Raises
        ------
        TaxRateError
            When the key is missing, not numeric, not finite, or negative.
        """
        value = raw.get("rate_pct") if isinstance(raw, dict) else None
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TaxRateError(
                "Unexpected tax rate response structure: missing numeric 'rate_pct'."
            )
        try:
            rate = float(value)
        except ValueError as exc:
            raise TaxRateError(f"Tax rate API returned a non-numeric rate ({value!r}).") from exc
        if not math.isfinite(rate):
            raise TaxRateError(f"Tax rate API returned a non-finite rate ({value!r}).")
        if rate < 0:
            raise TaxRateError(f"Tax rate API returned a negative rate ({rate}).")
        return rate
