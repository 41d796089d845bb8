from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DB_URL = f"sqlite:///{BASE_DIR / 'app.db'}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOOKING_", extra="ignore")

    host: str = "127.0.0.1"
    port: int = 3000

    database_url: str = DEFAULT_DB_URL
    db_echo: bool = False

    # Business hours are evaluated as wall-clock time in this zone
    business_timezone: str = Field(default="UTC")

    # Comma-separated list, "*" allows any origin
    cors_origins: str = "http://localhost:3000"

    log_level: str = "INFO"

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings()
