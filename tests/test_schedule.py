from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from tripplanner.core.errors import InvalidRangeError
from tripplanner.models import Activity, ChecklistItem, Expense
from tripplanner.services.schedule import derive_schedule, number_of_days

START = date(2024, 6, 1)


def _with_content(days, k):
    day = days[k]
    day.title = "Beach day"
    day.activities.append(Activity(time=datetime(2024, 6, 1, 9), title="Surf lesson"))
    day.transportation.mode = "Tram 28"
    day.budget.total_budget = Decimal("150")
    day.budget.expenses.append(Expense(amount=Decimal("12.5"), currency="EUR"))
    day.checklist.append(ChecklistItem(text="Sunscreen"))
    return day


@pytest.mark.parametrize("length", [1, 2, 3, 7, 31, 366])
def test_day_count_is_inclusive(length):
    end = START + timedelta(days=length - 1)
    days = derive_schedule(START, end, [])
    assert len(days) == number_of_days(START, end) == length


def test_single_day_trip():
    days = derive_schedule(START, START, [])
    assert [d.date for d in days] == [START]
    assert days[0].title == "Day 1"


def test_dates_are_consecutive_and_time_of_day_ignored():
    days = derive_schedule(datetime(2024, 6, 1, 23, 30), datetime(2024, 6, 3, 0, 5), [])
    assert [d.date for d in days] == [date(2024, 6, 1), date(2024, 6, 2), date(2024, 6, 3)]


def test_new_days_are_empty_and_seeded_in_trip_currency():
    days = derive_schedule(START, date(2024, 6, 2), [], currency="GBP")
    second = days[1]
    assert second.activities == [] and second.checklist == []
    assert second.transportation.mode == ""
    assert second.transportation.time == datetime(2024, 6, 2)
    assert second.budget.total_budget == 0
    assert second.budget.currency == "GBP"


def test_end_before_start_is_rejected():
    with pytest.raises(InvalidRangeError):
        derive_schedule(date(2024, 6, 3), START, [])


def test_extending_preserves_existing_content():
    original = derive_schedule(START, date(2024, 6, 3), [])
    _with_content(original, 1)
    extended = derive_schedule(START, date(2024, 6, 5), original)

    assert len(extended) == 5
    for i in range(3):
        assert extended[i].model_dump(exclude={"date"}) == original[i].model_dump(exclude={"date"})
    assert extended[3].activities == [] and extended[4].budget.expenses == []
    assert [d.date.day for d in extended] == [1, 2, 3, 4, 5]


def test_shift_keeps_content_by_index_and_rewrites_dates():
    original = derive_schedule(START, date(2024, 6, 3), [])
    _with_content(original, 0)
    shifted = derive_schedule(date(2024, 7, 10), date(2024, 7, 12), original)

    assert shifted[0].date == date(2024, 7, 10)
    assert shifted[0].title == "Beach day"
    assert shifted[0].activities == original[0].activities


def test_shrinking_drops_trailing_days():
    original = derive_schedule(START, date(2024, 6, 5), [])
    _with_content(original, 1)
    _with_content(original, 4)
    shrunk = derive_schedule(START, date(2024, 6, 2), original)

    assert len(shrunk) == 2
    assert [d.id for d in shrunk] == [original[0].id, original[1].id]
    assert shrunk[1].budget == original[1].budget


def test_existing_days_are_not_mutated():
    original = derive_schedule(START, date(2024, 6, 2), [])
    derive_schedule(date(2024, 8, 1), date(2024, 8, 2), original)
    assert original[0].date == START


def test_derivation_is_deterministic():
    original = derive_schedule(START, date(2024, 6, 3), [])
    first = derive_schedule(START, date(2024, 6, 4), original)
    second = derive_schedule(START, date(2024, 6, 4), original)
    assert [d.model_dump(exclude={"id"}) for d in first] == [
        d.model_dump(exclude={"id"}) for d in second
    ]
    assert [d.id for d in first[:3]] == [d.id for d in second[:3]]


@pytest.mark.parametrize(
    "raw", ["2024-06-01", "2024-06-01T10:00", "2024-06-01 10:00:00", "2024-06-01T23:30:00Z"]
)
def test_calendar_dates_accept_date_time_strings(raw):
    from tripplanner.models import TripDates

    assert TripDates(start_date=raw, end_date=raw).start_date == START
