from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
ENV_FILE = BASE_DIR / ".env"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    nse_base_url: str = "https://www.nseindia.com"
    nse_option_chain_path: str = "/option-chain"
    nse_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices("NSE_USER_AGENT", "USER_AGENT"),
    )
    nse_request_timeout_seconds: float = 10.0
    nse_min_request_interval_seconds: float = 0.5
    nse_session_ttl_seconds: float = 300.0
    nse_fetch_deadline_seconds: float = 20.0
    nse_max_retries: int = 2
    nse_retry_backoff_seconds: float = 1.0
    nse_equity_index: str = "NIFTY 50"

    default_shares_outstanding: int = 1_000_000_000
    stocks_fallback_enabled: bool = True

    cors_allow_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @model_validator(mode="after")
    def _validate_upstream_timing(self) -> "Settings":
        positive = {
            "NSE_REQUEST_TIMEOUT_SECONDS": self.nse_request_timeout_seconds,
            "NSE_SESSION_TTL_SECONDS": self.nse_session_ttl_seconds,
            "NSE_FETCH_DEADLINE_SECONDS": self.nse_fetch_deadline_seconds,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be greater than 0")

        if self.nse_min_request_interval_seconds < 0:
            raise ValueError("NSE_MIN_REQUEST_INTERVAL_SECONDS must be >= 0")
        if self.nse_retry_backoff_seconds < 0:
            raise ValueError("NSE_RETRY_BACKOFF_SECONDS must be >= 0")
        if self.nse_max_retries < 0:
            raise ValueError("NSE_MAX_RETRIES must be >= 0")
        if self.default_shares_outstanding <= 0:
            raise ValueError("DEFAULT_SHARES_OUTSTANDING must be greater than 0")

        self.nse_base_url = self.nse_base_url.rstrip("/")
        self.log_level = self.log_level.strip().upper() or "INFO"
        return self


settings = Settings()
