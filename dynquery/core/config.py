"""Settings and logging setup for dynquery."""

import os
import sys

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class FilterSettings(BaseModel):
    """Settings shared by filter steps and the logging sink."""

    log_level: str = Field(
        default="INFO",
        description="Minimum level for the loguru stderr sink",
    )

    log_stats: bool = Field(
        default=True,
        description="Log kept/dropped counts once a filter step is exhausted",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'. Valid levels: {list(LOG_LEVELS)}")
        return level


def load_settings(env_file: str | None = None) -> FilterSettings:
    """
    Build settings from the environment.

    Reads DYNQUERY_LOG_LEVEL and DYNQUERY_LOG_STATS, after loading a .env
    file if one is found (or the given env_file).

    Args:
        env_file: Optional path to a .env file.

    Returns:
        Validated FilterSettings.
    """
    load_dotenv(env_file)

    values: dict[str, str] = {}
    level = os.getenv("DYNQUERY_LOG_LEVEL")
    if level:
        values["log_level"] = level
    stats = os.getenv("DYNQUERY_LOG_STATS")
    if stats:
        values["log_stats"] = stats

    return FilterSettings(**values)


def configure_logging(settings: FilterSettings | None = None) -> None:
    """Replace loguru's default sink with one at the configured level."""
    settings = settings or FilterSettings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
