from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: the full rate table for a base currency,
as ``{target: units of target per 1 unit of base}``. Whatever shape the
upstream API returns is normalized to that mapping before it reaches the
conversion cache.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        """Return the rate table for ``base``; raise ConversionFailedError on failure."""
        raise NotImplementedError
