from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGERATE_API_KEY, RATES_CACHE_TTL_SECONDS, USE_SQLITE).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Forex Bureau Dashboard"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence. Without use_sqlite (or an explicit db_path) the app
    # runs on the in-memory store seeded with development rows.
    use_sqlite: bool = False
    data_dir: Path = Path("data")
    db_filename: str = "bureau.sqlite3"
    db_path: Optional[Path] = None

    # Rate providers, in cascade order
    exchangerate_api_key: str = ""
    exchangerate_api_v6_url: str = "https://v6.exchangerate-api.com/v6"
    frankfurter_url: str = "https://api.frankfurter.app"
    exchangerate_api_free_url: str = "https://api.exchangerate-api.com/v4"
    http_timeout_seconds: float = 5.0
    http_retries: int = 0

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 300  # 5 minutes
    quote_spread: float = 0.02
    board_currencies: List[str] = [
        "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR",
        "ZAR", "NGN", "KES", "GHS", "EGP", "MAD",
    ]

    # Identity gate
    auth_required: bool = False
    auth_tokens: List[str] = []

    def init_post_load(self) -> None:
        """Finalize derived fields and validate ranges."""
        if self.use_sqlite and self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        if self.db_path is not None:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.rates_cache_ttl_seconds < 0:
            raise ValueError("rates_cache_ttl_seconds cannot be negative")
        if not 0 <= self.quote_spread < 1:
            raise ValueError(
                f"quote_spread must be within [0, 1), got {self.quote_spread}"
            )
        self.board_currencies = [c.upper() for c in self.board_currencies]


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
