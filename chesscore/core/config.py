"""Application settings. Defaults can be overridden with CHESSCORE_* environment variables."""

import os
from functools import lru_cache
from typing import Mapping, Optional, Self

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CHESSCORE_"
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    database_url: str = "sqlite:///chesscore.db"
    database_echo: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
    clock_initial_seconds: float = Field(default=600, gt=0)
    clock_increment_seconds: float = Field(default=0, ge=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {sorted(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Pick up every field for which a CHESSCORE_<FIELD NAME> variable is set. Pydantic does the type conversion."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in environ
        }
        return cls.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
