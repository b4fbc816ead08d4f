from datetime import time
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://tracker:tracker@db:5432/tracker"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    ACCESS_TOKEN_TTL_SECONDS: int = 86400

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Single calendar context for every period boundary (IANA name).
    TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"

    # In-process daily trigger. Leave disabled when an OS cron runs `app.cli`.
    SCHEDULER_ENABLED: bool = False
    SCHEDULER_RUN_AT: str = "00:05"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)

    @property
    def scheduler_run_at(self) -> time:
        return time.fromisoformat(self.SCHEDULER_RUN_AT)


settings = Settings()
