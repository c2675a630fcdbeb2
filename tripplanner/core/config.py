from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    DB_FILENAME, RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Trip Itinerary Planner"
    debug: bool = False
    log_json: bool = True
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "planner.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    storage_namespace: str = "savedTrips"

    # Trips
    default_currency: str = "EUR"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"  # base currency appended
    http_timeout_seconds: float = 5.0
    http_retries: int = 2

    # Allowed: 'static' (built-in EUR anchored table), 'external-http' (exchangerate-api)
    exchange_rate_provider: str = "static"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.data_dir.mkdir(parents=True, exist_ok=True)
        allowed = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        self.default_currency = self.default_currency.upper()


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
