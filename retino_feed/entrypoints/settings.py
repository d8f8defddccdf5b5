from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # "none" runs feeds unsynchronized, "redis" shares one lock across processes
    RETINO_LOCK_BACKEND: Literal["none", "redis"] = "none"
    RETINO_REDIS_URL: str | None = None
    RETINO_LOCK_POLL_INTERVAL: float = 0.1  # seconds

    RETINO_FLOAT_PRECISION: int = 2  # money amounts
    RETINO_QUANTITY_PRECISION: int = 4  # AMOUNT, WEIGHT, VAT_RATE

    LOG_LEVEL: str = "INFO"


config = Config()
