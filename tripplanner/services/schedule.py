"""Day schedule derivation.

A trip's days are derived from its ``[start_date, end_date]`` range and
reconciled against the days it already has. Reconciliation is index
aligned: the day at position ``i`` keeps its activities, transportation,
budget and checklist and only receives the newly computed date. Days past
the new range are dropped together with their content.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Sequence, Union

from tripplanner.core.errors import InvalidRangeError
from tripplanner.models import Budget, Day, Transportation
from tripplanner.models.constants import DEFAULT_CURRENCY
from tripplanner.models.day import number_of_days, start_of_day

DateLike = Union[date, datetime]


def default_day_title(index: int) -> str:
    return f"Day {index + 1}"


def new_day(day_date: date, index: int, currency: str = DEFAULT_CURRENCY) -> Day:
    return Day(
        date=day_date,
        title=default_day_title(index),
        transportation=Transportation(mode="", time=datetime.combine(day_date, time.min)),
        budget=Budget(total_budget=Decimal("0"), currency=currency),
    )


def derive_schedule(
    start_date: DateLike,
    end_date: DateLike,
    existing_days: Sequence[Day] = (),
    currency: str = DEFAULT_CURRENCY,
) -> List[Day]:
    """Return exactly one Day per calendar date in the inclusive range.

    Existing days are copied, never mutated, so the caller's trip is left
    untouched until it swaps in the returned list.
    """
    start = start_of_day(start_date)
    end = start_of_day(end_date)
    if start > end:
        raise InvalidRangeError(
            f"End date {end.isoformat()} is before start date {start.isoformat()}."
        )
    total = number_of_days(start, end)
    days: List[Day] = []
    for i in range(total):
        day_date = date.fromordinal(start.toordinal() + i)
        if i < len(existing_days):
            days.append(existing_days[i].model_copy(update={"date": day_date}, deep=True))
        else:
            days.append(new_day(day_date, i, currency))
    return days
