from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    store_base_url: str = Field(default="https://be-patrimonymanagement.onrender.com", alias="STORE_BASE_URL")
    store_token: str | None = Field(default=None, alias="STORE_TOKEN")
    default_subject: str | None = Field(default=None, alias="DEFAULT_SUBJECT")
    http_timeout_seconds: float = Field(default=30.0, alias="HTTP_TIMEOUT_SECONDS")
    http_retry_attempts: int = Field(default=3, alias="HTTP_RETRY_ATTEMPTS")
    http_retry_backoff_seconds: float = Field(default=1.0, alias="HTTP_RETRY_BACKOFF_SECONDS")
    local_tz: str = Field(default="America/Sao_Paulo", alias="LOCAL_TZ")
    trailing_window_months: int = Field(default=12, alias="TRAILING_WINDOW_MONTHS")
    history_since: str = Field(default="2016-12-31", alias="HISTORY_SINCE")
    currency_symbol: str = Field(default="R$", alias="CURRENCY_SYMBOL")
    default_hidden_categories: str | None = Field(default=None, alias="DEFAULT_HIDDEN_CATEGORIES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_error_file: str | None = Field(default=None, alias="LOG_ERROR_FILE")

settings = Settings()


def default_hidden() -> set[str]:
    raw = settings.default_hidden_categories
    if not raw:
        return set()
    return {part.strip().upper() for part in raw.split(",") if part.strip()}
