"""Trip store: the aggregate root over all planner state.

Responsibilities
----------------
- Hold the authoritative in-memory trip list and expose every mutation.
- Delegate range reconciliation to ``schedule.derive_schedule`` and budget
  math to ``ledger``.
- Write through to the persistence boundary at the end of every mutation.

Each operation works on a deep copy of the affected trip, builds the
candidate trip list, persists it and only then swaps it in. A failing call
(unknown trip, bad day index, invalid range, unavailable conversion or a
failed save) leaves the store exactly as it was. A single writer is
assumed; no locking is done.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Protocol, Sequence, Tuple
from uuid import UUID

from tripplanner.core.errors import (
    ActivityNotFoundError,
    ChecklistItemNotFoundError,
    CurrencyMismatchError,
    DayIndexOutOfRangeError,
    TripNotFoundError,
)
from tripplanner.models import (
    Activity,
    Budget,
    ChecklistItem,
    Day,
    Expense,
    Transportation,
    Trip,
    TripCreate,
    TripUpdate,
)
from tripplanner.models.constants import DEFAULT_CURRENCY
from tripplanner.services import ledger
from tripplanner.services.ledger import SupportsRateLookup
from tripplanner.services.schedule import derive_schedule

logger = logging.getLogger("tripplanner.store")


class TripPersistence(Protocol):
    def save_trips(self, trips: Sequence[Trip]) -> None: ...

    def load_trips(self) -> List[Trip]: ...


class TripStore:
    def __init__(
        self, persistence: TripPersistence, default_currency: str = DEFAULT_CURRENCY
    ):
        self._persistence = persistence
        self._default_currency = default_currency
        self._trips: List[Trip] = []

    # ------------------------------------------------------------------
    # Persistence
    def load(self) -> List[Trip]:
        self._trips = list(self._persistence.load_trips())
        logger.info("loaded %d trips", len(self._trips))
        return self.trips

    def save(self) -> None:
        self._persist(self._trips)

    def _persist(self, trips: List[Trip]) -> None:
        try:
            self._persistence.save_trips(trips)
        except Exception:
            logger.exception("failed to persist trips")
            raise

    def _replace(self, trips: List[Trip]) -> None:
        self._persist(trips)
        self._trips = trips

    # ------------------------------------------------------------------
    # Lookup helpers
    @property
    def trips(self) -> List[Trip]:
        return [t.model_copy(deep=True) for t in self._trips]

    def _index_of(self, trip_id: UUID) -> int:
        for i, trip in enumerate(self._trips):
            if trip.id == trip_id:
                return i
        raise TripNotFoundError(f"Trip {trip_id} not found.")

    @staticmethod
    def _check_day_index(trip: Trip, day_index: int) -> None:
        if not 0 <= day_index < len(trip.days):
            raise DayIndexOutOfRangeError(
                f"Day {day_index} is outside trip {trip.id} ({len(trip.days)} days)."
            )

    def _commit(self, index: int, trip: Trip) -> None:
        trips = list(self._trips)
        trips[index] = trip
        self._replace(trips)

    def _edit_day(
        self, trip_id: UUID, day_index: int, change: Callable[[Day], None]
    ) -> Day:
        index = self._index_of(trip_id)
        trip = self._trips[index].model_copy(deep=True)
        self._check_day_index(trip, day_index)
        change(trip.days[day_index])
        self._commit(index, trip)
        return trip.days[day_index].model_copy(deep=True)

    def get_trip(self, trip_id: UUID) -> Trip:
        return self._trips[self._index_of(trip_id)].model_copy(deep=True)

    def list_trips(self) -> List[Trip]:
        return self.trips

    def get_day(self, trip_id: UUID, day_index: int) -> Day:
        trip = self._trips[self._index_of(trip_id)]
        self._check_day_index(trip, day_index)
        return trip.days[day_index].model_copy(deep=True)

    # ------------------------------------------------------------------
    # Trip lifecycle
    def add_trip(self, draft: TripCreate) -> Trip:
        currency = draft.local_currency or self._default_currency
        days = derive_schedule(draft.start_date, draft.end_date, [], currency)
        trip = Trip(
            name=draft.name,
            destination=draft.destination,
            destination_image_url=draft.destination_image_url,
            local_currency=currency,
            start_date=draft.start_date,
            end_date=draft.end_date,
            days=days,
        )
        self._replace([*self._trips, trip])
        logger.info("added trip with %d days", len(days), extra={"trip_id": trip.id})
        return trip.model_copy(deep=True)

    def update_trip_dates(self, trip_id: UUID, start_date: date, end_date: date) -> Trip:
        index = self._index_of(trip_id)
        current = self._trips[index]
        days = derive_schedule(start_date, end_date, current.days, current.local_currency)
        dropped = len(current.days) - len(days)
        if dropped > 0:
            logger.info("range shrink drops %d days", dropped, extra={"trip_id": trip_id})
        trip = current.model_copy(deep=True)
        trip.start_date = days[0].date
        trip.end_date = days[-1].date
        trip.days = days
        self._commit(index, trip)
        return trip.model_copy(deep=True)

    def update_trip(self, trip_id: UUID, update: TripUpdate) -> Trip:
        """Apply plain field updates; a date change goes through schedule derivation."""
        index = self._index_of(trip_id)
        current = self._trips[index]
        fields = update.model_fields_set
        currency = update.local_currency or current.local_currency
        trip = current.model_copy(deep=True)
        if update.start_date is not None or update.end_date is not None:
            start = update.start_date or current.start_date
            end = update.end_date or current.end_date
            trip.days = derive_schedule(start, end, current.days, currency)
            trip.start_date, trip.end_date = trip.days[0].date, trip.days[-1].date
        if update.name is not None:
            trip.name = update.name
        if "destination_image_url" in fields:
            trip.destination_image_url = update.destination_image_url
        if "destination" in fields:
            trip.destination = update.destination
        # Existing day budgets keep their currency; only new days use the new one.
        trip.local_currency = currency
        self._commit(index, trip)
        return trip.model_copy(deep=True)

    def delete_trip(self, trip_id: UUID) -> bool:
        try:
            index = self._index_of(trip_id)
        except TripNotFoundError:
            return False
        self._replace(self._trips[:index] + self._trips[index + 1 :])
        logger.info("deleted trip", extra={"trip_id": trip_id})
        return True

    # ------------------------------------------------------------------
    # Day mutations
    def add_activity(self, trip_id: UUID, day_index: int, activity: Activity) -> Day:
        return self._edit_day(
            trip_id, day_index, lambda day: day.activities.append(activity.model_copy())
        )

    def remove_activity(self, trip_id: UUID, day_index: int, activity_id: UUID) -> Day:
        def change(day: Day) -> None:
            kept = [a for a in day.activities if a.id != activity_id]
            if len(kept) == len(day.activities):
                raise ActivityNotFoundError(f"Activity {activity_id} not found.")
            day.activities = kept

        return self._edit_day(trip_id, day_index, change)

    def update_transportation(
        self, trip_id: UUID, day_index: int, transportation: Transportation
    ) -> Day:
        def change(day: Day) -> None:
            day.transportation = transportation.model_copy()

        return self._edit_day(trip_id, day_index, change)

    def update_budget(self, trip_id: UUID, day_index: int, budget: Budget) -> Day:
        def change(day: Day) -> None:
            day.budget = budget.model_copy(deep=True)

        return self._edit_day(trip_id, day_index, change)

    def update_day_title(self, trip_id: UUID, day_index: int, title: str) -> Day:
        def change(day: Day) -> None:
            day.title = title

        return self._edit_day(trip_id, day_index, change)

    def add_checklist_item(self, trip_id: UUID, day_index: int, text: str) -> Day:
        item = ChecklistItem(text=text)
        return self._edit_day(trip_id, day_index, lambda day: day.checklist.append(item))

    def toggle_checklist_item(self, trip_id: UUID, day_index: int, item_id: UUID) -> Day:
        def change(day: Day) -> None:
            for item in day.checklist:
                if item.id == item_id:
                    item.is_done = not item.is_done
                    return
            raise ChecklistItemNotFoundError(f"Checklist item {item_id} not found.")

        return self._edit_day(trip_id, day_index, change)

    # ------------------------------------------------------------------
    # Expenses
    def _locate_budget(self, trip_id: UUID, day_index: int) -> Tuple[int, Budget]:
        index = self._index_of(trip_id)
        trip = self._trips[index]
        self._check_day_index(trip, day_index)
        return index, trip.days[day_index].budget

    async def add_expense(
        self,
        trip_id: UUID,
        day_index: int,
        expense: Expense,
        rates: SupportsRateLookup,
    ) -> Budget:
        """Add an expense, converting it first when it is in a foreign currency.

        The budget only changes after the conversion completed; a trip deleted
        or reshaped while awaiting the rate is resolved again afterwards.
        """
        _, budget = self._locate_budget(trip_id, day_index)
        updated = await ledger.add_expense_with_conversion(budget, expense, rates)
        index, _ = self._locate_budget(trip_id, day_index)
        # Re-read so edits made while awaiting the rate are not overwritten.
        trip = self._trips[index].model_copy(deep=True)
        current = trip.days[day_index].budget
        if current.currency != budget.currency:
            raise CurrencyMismatchError(
                f"Budget currency changed to {current.currency} during conversion; add the expense again."
            )
        added = updated.expenses[-1]
        trip.days[day_index].budget = ledger.add_expense(current, added)
        self._commit(index, trip)
        return trip.days[day_index].budget.model_copy(deep=True)

    def remove_expense(self, trip_id: UUID, day_index: int, expense_id: UUID) -> Budget:
        index, budget = self._locate_budget(trip_id, day_index)
        updated = ledger.remove_expense(budget, expense_id)
        if updated is budget:
            return budget.model_copy(deep=True)
        trip = self._trips[index].model_copy(deep=True)
        trip.days[day_index].budget = updated
        self._commit(index, trip)
        return updated.model_copy(deep=True)
