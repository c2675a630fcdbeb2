from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from tripplanner.models import Budget, BudgetSummary, Expense, ExpenseIn
from tripplanner.services import ledger
from tripplanner.services.rates.cache_service import CurrencyConversionCache
from tripplanner.services.trip_store import TripStore

from .deps import get_rate_cache, get_trip_store

"""Per-day budget endpoints.

Adding an expense in a foreign currency awaits the rate lookup before the
expense is stored; a failed lookup answers 502 with a labeled error and
leaves the budget unchanged.
"""

router = APIRouter(prefix="/trips/{trip_id}/days/{day_index}/budget", tags=["budgets"])


@router.get("", response_model=BudgetSummary, summary="Budget totals for a day")
async def get_budget(
    trip_id: UUID, day_index: int, store: TripStore = Depends(get_trip_store)
):
    return ledger.budget_summary(store.get_day(trip_id, day_index).budget)


@router.get("/detail", response_model=Budget, summary="Budget with its expenses")
async def get_budget_detail(
    trip_id: UUID, day_index: int, store: TripStore = Depends(get_trip_store)
):
    return store.get_day(trip_id, day_index).budget


@router.put("", response_model=Budget, summary="Replace a day's budget")
async def put_budget(
    trip_id: UUID,
    day_index: int,
    payload: Budget,
    store: TripStore = Depends(get_trip_store),
):
    return store.update_budget(trip_id, day_index, payload).budget


@router.post(
    "/expenses",
    response_model=Budget,
    status_code=status.HTTP_201_CREATED,
    summary="Add an expense, converting foreign currencies",
)
async def add_expense(
    trip_id: UUID,
    day_index: int,
    payload: ExpenseIn,
    store: TripStore = Depends(get_trip_store),
    rates: CurrencyConversionCache = Depends(get_rate_cache),
):
    expense = Expense(**payload.model_dump())
    return await store.add_expense(trip_id, day_index, expense, rates)


@router.delete("/expenses/{expense_id}", response_model=Budget, summary="Remove an expense")
async def remove_expense(
    trip_id: UUID,
    day_index: int,
    expense_id: UUID,
    store: TripStore = Depends(get_trip_store),
):
    return store.remove_expense(trip_id, day_index, expense_id)
