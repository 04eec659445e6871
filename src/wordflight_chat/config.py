from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DATABASE_URL: str | None = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CHANGES_CHANNEL: str = "wordflight.changes"
    REDIS_RECONNECT_SECONDS: float = 5.0

    CORS_ORIGINS: list[str] = ["*"]

    MESSAGES_LIMIT: int = 25
    LOAD_MORE_LIMIT: int = 20
    ROOMS_LIMIT: int = 50

    TOAST_TTL_SECONDS: float = 5.0
    WS_HEARTBEAT_SECONDS: int = 30
    WS_SEND_TIMEOUT_SECONDS: float = 5.0

    APP_TITLE: str = "WordFlight"
    NOTIFICATION_ICON: str = "/WFLogo.png"

    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
