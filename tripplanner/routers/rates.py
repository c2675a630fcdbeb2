from __future__ import annotations

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from tripplanner.models.constants import COMMON_CURRENCIES, normalize_currency
from tripplanner.models.rates import ConversionOut, RateOut, RateTableOut
from tripplanner.services.money import display
from tripplanner.services.rates.cache_service import CurrencyConversionCache

from .deps import get_rate_cache

"""Rates router exposing the conversion cache.

Endpoints:
    - GET /rates/currencies           -> commonly used currency codes
    - GET /rates/cache                -> cached tables with freshness flags
    - DELETE /rates/cache/{base}      -> drop a cached table
    - GET /rates/convert              -> convert an amount between currencies
    - GET /rates/{base}/{target}      -> single rate lookup (cached for 1h)
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def _currency(code: str) -> str:
    try:
        return normalize_currency(code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/currencies", response_model=List[str], summary="Currencies offered for expenses")
async def list_currencies():
    return COMMON_CURRENCIES


@router.get("/cache", response_model=List[RateTableOut], summary="List cached rate tables")
async def list_cache(svc: CurrencyConversionCache = Depends(get_rate_cache)):
    return svc.snapshot()


@router.delete("/cache/{base}", summary="Invalidate a cached rate table")
async def invalidate_cache(base: str, svc: CurrencyConversionCache = Depends(get_rate_cache)):
    base = _currency(base)
    if not svc.invalidate(base):
        raise HTTPException(status_code=404, detail="no cached rates for currency")
    return {"status": "deleted", "base_currency": base}


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert(
    amount: Decimal = Query(..., gt=0),
    base: str = Query(..., min_length=3, max_length=3),
    target: str = Query(..., min_length=3, max_length=3),
    svc: CurrencyConversionCache = Depends(get_rate_cache),
):
    base, target = _currency(base), _currency(target)
    converted = await svc.convert(amount, base, target)
    return ConversionOut(
        amount=amount,
        base_currency=base,
        quote_currency=target,
        converted=display(converted),
    )


@router.get("/{base}/{target}", response_model=RateOut, summary="Exchange rate lookup")
async def get_rate(
    base: str, target: str, svc: CurrencyConversionCache = Depends(get_rate_cache)
):
    base, target = _currency(base), _currency(target)
    rate = await svc.get_rate(base, target)
    return RateOut(base_currency=base, quote_currency=target, rate=rate)
