"""Domain constants and enumerations for validation."""

from enum import Enum
from typing import List

DEFAULT_CURRENCY = "EUR"

# Offered by clients when picking an expense currency; any ISO 4217 code is accepted.
COMMON_CURRENCIES: List[str] = [
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "AUD",
    "CAD",
    "CHF",
    "CNY",
    "INR",
    "RON",
    "HUF",
    "MKD",
    "ALL",
]


class ActivityCategory(str, Enum):
    sightseeing = "sightseeing"
    dining = "dining"
    shopping = "shopping"
    entertainment = "entertainment"
    transportation = "transportation"
    accommodation = "accommodation"
    other = "other"


class ExpenseCategory(str, Enum):
    food = "food"
    transportation = "transportation"
    accommodation = "accommodation"
    activities = "activities"
    shopping = "shopping"
    other = "other"


def normalize_currency(code: str) -> str:
    """Upper-case and check an ISO 4217 style three letter code."""
    value = (code or "").strip().upper()
    if len(value) != 3 or not value.isalpha():
        raise ValueError(f"invalid currency code '{code}'")
    return value
