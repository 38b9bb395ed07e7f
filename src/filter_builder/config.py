"""Configuration settings for the filter builder."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.WARNING


settings = Settings()
