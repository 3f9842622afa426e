"""
Runtime settings.

Settings are read once at startup and passed explicitly to whatever needs
them; nothing in the package reads the environment on its own.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from ovo.store.errors import ConfigError

DEFAULT_TREND_WINDOW = 14

ENV_VARS = {
    "backend": "OVO_BACKEND",
    "data_path": "OVO_DATA_PATH",
    "trend_window": "OVO_TREND_WINDOW",
    "locale": "OVO_LOCALE",
    "log_level": "OVO_LOG_LEVEL",
}


class Settings(BaseModel):
    """Configuration for the data store and the dashboard."""

    backend: Literal["memory", "json"] = Field(
        default="json",
        description="Data store backend",
    )
    data_path: Path = Field(
        default=Path("ovo-data.json"),
        description="Data file used by the json backend",
    )
    trend_window: int = Field(
        default=DEFAULT_TREND_WINDOW,
        gt=0,
        description="Number of most recent days shown in the trend chart",
    )
    locale: Literal["pt-BR", "en-US"] = Field(
        default="pt-BR",
        description="Locale for currency and number formatting",
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {value}")
        return value


def load_settings(env_file: Optional[Path] = None, **overrides) -> Settings:
    """Build Settings from the environment (and an optional .env file).

    Keyword overrides win over environment values. Raises ConfigError if a
    value is invalid.
    """
    load_dotenv(env_file)

    values = {}
    for name, var in ENV_VARS.items():
        raw = os.getenv(var)
        if raw:
            values[name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
