"""Pydantic domain models for the trip itinerary planner."""

from .constants import (
    COMMON_CURRENCIES,
    DEFAULT_CURRENCY,
    ActivityCategory,
    ExpenseCategory,
)  # re-export
from .activity import Activity, ActivityIn
from .budget import Budget, BudgetSummary, Expense, ExpenseIn
from .day import ChecklistItem, Day, Transportation
from .trip import Destination, Trip, TripCreate, TripDates, TripUpdate

__all__ = [
    "COMMON_CURRENCIES",
    "DEFAULT_CURRENCY",
    "ActivityCategory",
    "ExpenseCategory",
    "Activity",
    "ActivityIn",
    "Budget",
    "BudgetSummary",
    "Expense",
    "ExpenseIn",
    "ChecklistItem",
    "Day",
    "Transportation",
    "Destination",
    "Trip",
    "TripCreate",
    "TripDates",
    "TripUpdate",
]
