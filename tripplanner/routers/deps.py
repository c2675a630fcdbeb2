from __future__ import annotations

from fastapi import Request

from tripplanner.services.rates.cache_service import CurrencyConversionCache
from tripplanner.services.trip_store import TripStore


def get_trip_store(request: Request) -> TripStore:
    return request.app.state.trip_store


def get_rate_cache(request: Request) -> CurrencyConversionCache:
    return request.app.state.rate_cache
