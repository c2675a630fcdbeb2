from __future__ import annotations

"""Concrete rate providers and factory.

'StaticRateProvider' serves a fixed EUR anchored table (cross rates are
derived for other bases) so the planner works offline. 'ExternalHTTPRateProvider'
queries exchangerate-api, accepting both its v4 (``rates``) and v6
(``conversion_rates``) response shapes.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from tripplanner.core.config import Settings
from tripplanner.core.errors import ConversionFailedError
from tripplanner.services.http_client import HttpError, get_json
from tripplanner.services.money import to_decimal

from .base import RateProvider

logger = logging.getLogger("tripplanner.rates")

# Units of currency per 1 EUR; placeholders, not market data.
_STATIC_EUR_RATES: Dict[str, str] = {
    "EUR": "1",
    "USD": "1.087",
    "GBP": "0.857",
    "JPY": "162.5",
    "AUD": "1.65",
    "CAD": "1.47",
    "CHF": "0.96",
    "CNY": "7.85",
    "INR": "90.4",
    "RON": "4.97",
    "HUF": "392.0",
    "MKD": "61.5",
    "ALL": "101.0",
}


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, eur_rates: Mapping[str, Any] | None = None):
        source = eur_rates or _STATIC_EUR_RATES
        self._eur_rates = {k.upper(): to_decimal(v) for k, v in source.items()}

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:  # type: ignore[override]
        base = base.upper()
        anchor = self._eur_rates.get(base)
        if anchor is None:
            raise ConversionFailedError(f"No static rates for base currency {base}.")
        return {code: rate / anchor for code, rate in self._eur_rates.items()}


def normalize_rate_payload(payload: Mapping[str, Any]) -> Dict[str, Decimal]:
    """Pick the rate mapping out of an upstream response and coerce it to Decimals."""
    if payload.get("result") == "error":
        raise ConversionFailedError(
            f"Rate provider error: {payload.get('error-type', 'unknown')}"
        )
    raw = payload.get("conversion_rates") or payload.get("rates")
    if not isinstance(raw, Mapping) or not raw:
        raise ConversionFailedError("Rate provider response has no rate table.")
    rates: Dict[str, Decimal] = {}
    for code, value in raw.items():
        try:
            rate = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise ConversionFailedError(f"Invalid rate for {code}: {value!r}") from exc
        # Infinity and NaN survive JSON decoding; only finite positive rates are usable.
        if rate.is_finite() and rate > 0:
            rates[str(code).upper()] = rate
    return rates


class ExternalHTTPRateProvider(RateProvider):
    name = "external-http"

    def __init__(self, base_url: str, *, timeout: float = 5.0, retries: int = 2):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:  # type: ignore[override]
        url = f"{self._base_url}/{base.upper()}"
        try:
            data = await get_json(url, timeout=self._timeout, retries=self._retries)
        except HttpError as exc:
            logger.warning("rate fetch failed for %s: %s", base, exc)
            raise ConversionFailedError(f"Exchange rates for {base} could not be fetched.") from exc
        return normalize_rate_payload(data)


def make_rate_provider(settings: Settings) -> RateProvider:
    kind = settings.exchange_rate_provider
    if kind == "static":
        return StaticRateProvider()
    if kind == "external-http":
        return ExternalHTTPRateProvider(
            str(settings.exchange_api_base_url),
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    raise ValueError(f"Unknown rate provider kind '{kind}'")
