from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from tripplanner.core.config import Settings
from tripplanner.core.errors import ConversionFailedError
from tripplanner.db.dal import Database
from tripplanner.db.schema import init_db
from tripplanner.main import create_app
from tripplanner.models import TripCreate
from tripplanner.services.rates.base import RateProvider
from tripplanner.services.rates.cache_service import CurrencyConversionCache
from tripplanner.services.trip_store import TripStore


class FakeRateProvider(RateProvider):
    """Serves fixed tables and records every upstream fetch."""

    name = "fake"

    def __init__(self, tables: Dict[str, Dict[str, str]]):
        self.tables = tables
        self.calls: List[str] = []
        self.fail = False

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        self.calls.append(base)
        if self.fail or base not in self.tables:
            raise ConversionFailedError(f"fake provider has no table for {base}")
        return {k: Decimal(v) for k, v in self.tables[base].items()}


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def provider() -> FakeRateProvider:
    return FakeRateProvider(
        {
            "USD": {"EUR": "0.92", "GBP": "0.79", "USD": "1"},
            "GBP": {"EUR": "1.17", "USD": "1.27", "GBP": "1"},
        }
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_cache(provider, clock) -> CurrencyConversionCache:
    return CurrencyConversionCache(provider, clock=clock)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(data_dir=tmp_path, db_filename="test.sqlite3")
    s.init_post_load()
    return s


@pytest.fixture
def db(settings) -> Database:
    init_db(settings.db_path)
    return Database(settings.db_path, namespace=settings.storage_namespace)


@pytest.fixture
def store(db) -> TripStore:
    trip_store = TripStore(db)
    trip_store.load()
    return trip_store


@pytest.fixture
def june_trip(store):
    return store.add_trip(
        TripCreate(name="Lisbon", start_date=date(2024, 6, 1), end_date=date(2024, 6, 3))
    )


@pytest.fixture
def client(settings, provider, clock) -> TestClient:
    app = create_app(settings, rate_provider=provider, clock=clock)
    return TestClient(app)
