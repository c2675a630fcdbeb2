from datetime import date, datetime
from decimal import Decimal

from tripplanner.db.schema import SCHEMA_VERSION, SCHEMA_VERSION_KEY, init_db
from tripplanner.models import Activity, ActivityCategory, Expense, ExpenseCategory, TripCreate
from tripplanner.services.trip_store import TripStore


def test_fresh_store_loads_empty(store):
    assert store.list_trips() == []


def test_round_trip_preserves_full_trip(db, store, june_trip):
    store.add_activity(
        june_trip.id,
        0,
        Activity(
            time=datetime(2024, 6, 1, 19, 30),
            title="Dinner",
            location="Alfama",
            notes="book ahead",
            category=ActivityCategory.dining,
        ),
    )
    budget = store.get_day(june_trip.id, 0).budget
    budget.total_budget = Decimal("120.50")
    budget.expenses.append(
        Expense(
            amount=Decimal("40"),
            currency="USD",
            converted_amount=Decimal("36.80"),
            category=ExpenseCategory.food,
            note="tapas",
        )
    )
    store.update_budget(june_trip.id, 0, budget)

    reloaded = TripStore(db)
    reloaded.load()

    assert reloaded.list_trips() == store.list_trips()


def test_corrupt_state_is_treated_as_empty(db):
    db.set_value(db.namespace, "{not json")
    store = TripStore(db)
    assert store.load() == []


def test_wrong_shape_is_treated_as_empty(db):
    db.set_value(db.namespace, '[{"name": "missing everything else"}]')
    assert db.load_trips() == []


def test_state_lives_under_one_namespace(db, store):
    store.add_trip(TripCreate(name="Rome", start_date=date(2025, 4, 1), end_date=date(2025, 4, 2)))
    raw = db.get_value(db.namespace)
    assert raw is not None and '"Rome"' in raw
    assert db.get_value(SCHEMA_VERSION_KEY) == str(SCHEMA_VERSION)


def test_init_db_is_idempotent(settings, db, store, june_trip):
    init_db(settings.db_path)
    assert len(db.load_trips()) == 1
