from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from tripplanner.models import (
    Activity,
    ActivityIn,
    Day,
    Transportation,
    Trip,
    TripCreate,
    TripDates,
    TripUpdate,
)
from tripplanner.services.trip_store import TripStore

from .deps import get_trip_store

router = APIRouter(prefix="/trips", tags=["trips"])


class DayTitlePayload(BaseModel):
    title: str = Field(..., max_length=200)


class ChecklistPayload(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)


@router.get("", response_model=List[Trip], summary="List trips")
async def list_trips(store: TripStore = Depends(get_trip_store)):
    return store.list_trips()


@router.post(
    "",
    response_model=Trip,
    status_code=status.HTTP_201_CREATED,
    summary="Create trip and derive its days",
)
async def create_trip(payload: TripCreate, store: TripStore = Depends(get_trip_store)):
    return store.add_trip(payload)


@router.get("/{trip_id}", response_model=Trip, summary="Get trip details")
async def get_trip(trip_id: UUID, store: TripStore = Depends(get_trip_store)):
    return store.get_trip(trip_id)


@router.patch("/{trip_id}", response_model=Trip, summary="Update trip fields")
async def update_trip(
    trip_id: UUID, payload: TripUpdate, store: TripStore = Depends(get_trip_store)
):
    return store.update_trip(trip_id, payload)


@router.delete(
    "/{trip_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete trip"
)
async def delete_trip(trip_id: UUID, store: TripStore = Depends(get_trip_store)):
    store.delete_trip(trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{trip_id}/dates",
    response_model=Trip,
    summary="Change date range and reconcile days",
)
async def set_trip_dates(
    trip_id: UUID, payload: TripDates, store: TripStore = Depends(get_trip_store)
):
    return store.update_trip_dates(trip_id, payload.start_date, payload.end_date)


@router.get("/{trip_id}/days", response_model=List[Day], summary="List trip days")
async def list_days(trip_id: UUID, store: TripStore = Depends(get_trip_store)):
    return store.get_trip(trip_id).days


@router.get("/{trip_id}/days/{day_index}", response_model=Day, summary="Get one day")
async def get_day(
    trip_id: UUID, day_index: int, store: TripStore = Depends(get_trip_store)
):
    return store.get_day(trip_id, day_index)


@router.get(
    "/{trip_id}/days/{day_index}/activities",
    response_model=List[Activity],
    summary="Activities in display (time) order",
)
async def list_activities(
    trip_id: UUID, day_index: int, store: TripStore = Depends(get_trip_store)
):
    return store.get_day(trip_id, day_index).sorted_activities


@router.put("/{trip_id}/days/{day_index}/title", response_model=Day)
async def set_day_title(
    trip_id: UUID,
    day_index: int,
    payload: DayTitlePayload,
    store: TripStore = Depends(get_trip_store),
):
    return store.update_day_title(trip_id, day_index, payload.title)


@router.put("/{trip_id}/days/{day_index}/transportation", response_model=Day)
async def set_transportation(
    trip_id: UUID,
    day_index: int,
    payload: Transportation,
    store: TripStore = Depends(get_trip_store),
):
    return store.update_transportation(trip_id, day_index, payload)


@router.post(
    "/{trip_id}/days/{day_index}/activities",
    response_model=Day,
    status_code=status.HTTP_201_CREATED,
)
async def add_activity(
    trip_id: UUID,
    day_index: int,
    payload: ActivityIn,
    store: TripStore = Depends(get_trip_store),
):
    return store.add_activity(trip_id, day_index, Activity(**payload.model_dump()))


@router.delete("/{trip_id}/days/{day_index}/activities/{activity_id}", response_model=Day)
async def remove_activity(
    trip_id: UUID,
    day_index: int,
    activity_id: UUID,
    store: TripStore = Depends(get_trip_store),
):
    return store.remove_activity(trip_id, day_index, activity_id)


@router.post(
    "/{trip_id}/days/{day_index}/checklist",
    response_model=Day,
    status_code=status.HTTP_201_CREATED,
)
async def add_checklist_item(
    trip_id: UUID,
    day_index: int,
    payload: ChecklistPayload,
    store: TripStore = Depends(get_trip_store),
):
    return store.add_checklist_item(trip_id, day_index, payload.text)


@router.post("/{trip_id}/days/{day_index}/checklist/{item_id}/toggle", response_model=Day)
async def toggle_checklist_item(
    trip_id: UUID,
    day_index: int,
    item_id: UUID,
    store: TripStore = Depends(get_trip_store),
):
    return store.toggle_checklist_item(trip_id, day_index, item_id)
