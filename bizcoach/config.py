"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (local-first store)
    DATABASE_URL: str = "sqlite+aiosqlite:///./bizcoach.db"

    # Application
    APP_ENV: str = "development"
    API_V1_PREFIX: str = "/api"

    # Frontend
    FRONTEND_URL: str = "http://localhost:8081"

    # Assistant business policy
    DUPLICATE_SALE_WINDOW_SECONDS: int = 60
    OVERDUE_REMINDER_DAYS: int = 7
    DELINQUENCY_DAYS: int = 30
    REMINDER_DUE_IN_DAYS: int = 3
    MONTHLY_SALES_TARGET: float = 500000

    # CORS
    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        if self.APP_ENV == "development":
            return ["*"]  # Allow all origins in development
        return [self.FRONTEND_URL]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )


settings = Settings()
