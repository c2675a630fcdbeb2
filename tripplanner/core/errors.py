"""Domain error taxonomy and the FastAPI handlers that surface it.

Every engine failure a caller can act on is a ``PlannerError`` carrying a
stable ``code`` so clients can show a labeled message instead of a generic
failure. Handlers below turn them into ``{"error": code, "detail": msg}``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("tripplanner.errors")


class PlannerError(Exception):
    code = "planner_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be completed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidRangeError(PlannerError):
    code = "invalid_range"
    default_message = "End date is before start date."


class TripNotFoundError(PlannerError):
    code = "trip_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Trip not found."


class DayIndexOutOfRangeError(PlannerError):
    code = "day_index_out_of_range"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Day index is outside the trip's schedule."


class ActivityNotFoundError(PlannerError):
    code = "activity_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Activity not found."


class ChecklistItemNotFoundError(PlannerError):
    code = "checklist_item_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Checklist item not found."


class CurrencyMismatchError(PlannerError):
    code = "currency_mismatch"
    default_message = "Expense currency differs from the budget currency and has no converted amount."


class ConversionError(PlannerError):
    code = "conversion_error"
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Currency conversion failed."


class ConversionFailedError(ConversionError):
    """Rate table could not be fetched or decoded."""

    code = "conversion_failed"
    default_message = "Exchange rates could not be fetched."


class RateNotAvailableError(ConversionError):
    """Rate table is valid but has no entry for the requested target."""

    code = "rate_not_available"
    default_message = "No exchange rate available for this currency pair."


class ConversionUnavailableError(ConversionError):
    code = "conversion_unavailable"
    default_message = "Expense could not be converted to the budget currency."


def planner_error_handler(request: Request, exc: PlannerError):  # type: ignore
    logger.info("planner error %s: %s", exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.message},
    )


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "not_found",
                "detail": f"No route for {request.method} {request.url.path}",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http_error", "detail": exc.detail},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
