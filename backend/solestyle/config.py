from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./solestyle.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    RESET_DB: bool = False

    TAX_RATE: Decimal = Decimal("0.08")
    SHIPPING_COST: Decimal = Decimal("0")
    MAX_LINE_QUANTITY: int = 5

    TOAST_DISMISS_MS: int = 3000
    TOAST_FADE_MS: int = 500

    SESSION_TTL_SECONDS: int = 1800
    SESSION_PURGE_INTERVAL_SECONDS: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
