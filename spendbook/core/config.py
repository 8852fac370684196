from functools import lru_cache
from pathlib import Path

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, STATE_KEY, EXCHANGE_RATE_PROVIDER, NBP_API_URL).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Spendbook"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    state_key: str = "expense-tracker-state"

    # Exchange rates
    # Allowed: 'nbp' (National Bank of Poland table A), 'static' (built-in fallback)
    exchange_rate_provider: str = "nbp"
    nbp_api_url: AnyHttpUrl = "https://api.nbp.pl/api/exchangerates/tables/A/?format=json"
    http_timeout_seconds: float = 5.0
    refresh_rates_on_startup: bool = True

    def init_post_load(self) -> None:
        """Ensure the data directory exists and the provider name is known."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        allowed = {"nbp", "static"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
