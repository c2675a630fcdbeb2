from __future__ import annotations

"""Currency conversion cache.

Purpose:
    Keep one rate table per *base* currency for a fixed TTL (one hour by
    default) so repeated conversions do not hit the upstream provider.

Design:
    - Wraps an injected RateProvider; one fetch returns the whole table for
      a base and the entry is replaced wholesale.
    - Entries older than the TTL are refetched before use, never served.
    - A failed fetch leaves the previous entry for that base untouched.
    - A fresh table lacking the target is the provider's gap and raises
      RateNotAvailableError, distinct from a fetch failure.
    - Concurrent refreshes of the same base are not coalesced; the last
      successful fetch wins. The entry is only assigned after the fetch
      completes, so an abandoned await cannot leave a partial entry.
    - Process lifetime only; nothing is persisted.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, List

from tripplanner.core.errors import ConversionFailedError, RateNotAvailableError
from tripplanner.models.rates import RateTableOut
from tripplanner.services.money import Number, to_decimal

from .base import RateProvider

logger = logging.getLogger("tripplanner.rates")

DEFAULT_TTL = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _CacheEntry:
    rates: Dict[str, Decimal]
    fetched_at: datetime


class CurrencyConversionCache:
    def __init__(
        self,
        provider: RateProvider,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._provider = provider
        self._ttl = ttl
        self._clock = clock
        self._cache: Dict[str, _CacheEntry] = {}

    # Internal --------------------------------------------------
    def _is_entry_valid(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    async def _refresh(self, base: str) -> _CacheEntry:
        logger.debug("fetching rate table via %s", self._provider.name, extra={"base_currency": base})
        fetched = await self._provider.fetch_rates(base)
        rates = {k.upper(): to_decimal(v) for k, v in fetched.items()}
        entry = _CacheEntry(
            rates={k: v for k, v in rates.items() if v.is_finite() and v > 0},
            fetched_at=self._clock(),
        )
        self._cache[base] = entry
        return entry

    async def _get_table(self, base: str) -> _CacheEntry:
        entry = self._cache.get(base)
        if entry and self._is_entry_valid(entry):
            logger.debug("rate cache hit", extra={"base_currency": base})
            return entry
        try:
            return await self._refresh(base)
        except ConversionFailedError:
            raise
        except Exception as exc:
            logger.warning("rate provider %s failed for %s: %s", self._provider.name, base, exc)
            raise ConversionFailedError(f"Exchange rates for {base} could not be fetched.") from exc

    # Public API -----------------------------------------------
    async def get_rate(self, base: str, target: str) -> Decimal:
        base, target = base.upper(), target.upper()
        if base == target:
            return Decimal("1")
        entry = await self._get_table(base)
        rate = entry.rates.get(target)
        if rate is None:
            raise RateNotAvailableError(f"No exchange rate from {base} to {target}.")
        return rate

    async def convert(self, amount: Number, base: str, target: str) -> Decimal:
        """Convert at full precision; rounding is the caller's concern."""
        value = to_decimal(amount)
        if base.upper() == target.upper():
            return value
        rate = await self.get_rate(base, target)
        return value * rate

    def snapshot(self) -> List[RateTableOut]:
        return [
            RateTableOut(
                base_currency=base,
                rates=dict(entry.rates),
                fetched_at=entry.fetched_at,
                fresh=self._is_entry_valid(entry),
            )
            for base, entry in sorted(self._cache.items())
        ]

    def invalidate(self, base: str) -> bool:
        return self._cache.pop(base.upper(), None) is not None
