import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import errors
from .core.config import Settings, get_settings
from .core.logging import init_logging, request_context_middleware
from .db.dal import Database
from .db.schema import init_db
from .routers import budgets, health, rates, trips
from .services.rates.base import RateProvider
from .services.rates.cache_service import CurrencyConversionCache
from .services.rates.providers import make_rate_provider
from .services.trip_store import TripStore


def create_app(
    settings_override: Settings | None = None,
    rate_provider: Optional[RateProvider] = None,
    clock=None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    rate_provider / clock: substitutes for the configured provider and the
    wall clock, so tests control upstream rates and cache freshness.
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug, json_output=settings.log_json)

    try:
        init_db(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logging.getLogger("tripplanner").exception("failed to initialize database")
        raise

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    db = Database(settings.db_path, namespace=settings.storage_namespace)  # type: ignore[arg-type]
    store = TripStore(db, default_currency=settings.default_currency)
    store.load()
    cache_kwargs = {"ttl": timedelta(seconds=settings.rates_cache_ttl_seconds)}
    if clock is not None:
        cache_kwargs["clock"] = clock
    app.state.trip_store = store
    app.state.rate_cache = CurrencyConversionCache(
        rate_provider or make_rate_provider(settings), **cache_kwargs
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(errors.PlannerError, errors.planner_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(trips.router)
    app.include_router(budgets.router)
    app.include_router(rates.router)

    @app.get("/")
    async def root():
        return {"message": "Trip Itinerary Planner API", "version": settings.version}

    return app


app = create_app()
