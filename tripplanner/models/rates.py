from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict

from pydantic import BaseModel


class RateTableOut(BaseModel):
    base_currency: str
    rates: Dict[str, Decimal]
    fetched_at: datetime
    fresh: bool


class RateOut(BaseModel):
    base_currency: str
    quote_currency: str
    rate: Decimal


class ConversionOut(BaseModel):
    amount: Decimal
    base_currency: str
    quote_currency: str
    converted: float
