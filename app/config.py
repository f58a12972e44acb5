# app/config.py
"""
Service configuration read from the environment with pydantic-settings.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    port: int = 3000
    host: str = "0.0.0.0"
    log_level: str = "info"

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
