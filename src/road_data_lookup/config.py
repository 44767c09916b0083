"""Runtime settings and logging setup.

Settings are read from ``ROADDATA_*`` environment variables or a ``.env`` file.
The upstream API key has no default and must always be configured.
"""

from __future__ import annotations

from functools import lru_cache
from logging.config import dictConfig
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

NAME = "road-data-lookup"
VERSION = "0.1.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ROADDATA_", env_file=".env", extra="ignore")

    api_key: SecretStr
    api_url: str = "https://api.trafikinfo.trafikverket.se/v2/data.json"
    namespace: str = "vägdata.nvdb_dk_o"
    schema_version: str = "1.2"
    timeout_seconds: float = Field(12.0, gt=0)
    max_distance_meters: float = Field(500.0, gt=0)
    record_limit: int = Field(10, gt=0)
    include_raw: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    user_agent: str = f"{NAME}/{VERSION}"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str = "INFO") -> None:
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s | %(asctime)s | %(name)s %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "root": {"handlers": ["default"], "level": level},
            # upstream request chatter
            **{module: {"handlers": [], "level": "WARNING"} for module in ("httpx", "httpcore")},
        },
    })
