"""Settings shared by every csv2search command.

All values are sourced from environment variables (or a ``.env`` file loaded at
import time).  They describe *where* the search engine lives and how chatty the
process is; everything CSV-specific lives in :pyfile:`csv2search.indexing.settings`.
"""

from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(override=True)


class Settings(BaseSettings):
    """Connection configuration.

    Fields
    ------
    es_host
        Base URL of the search engine HTTP endpoint (single node assumed).
    request_timeout
        Seconds to wait for each HTTP request; ``None`` waits indefinitely.
    log_level
        Root logger level used by the command-line entry points.
    """

    es_host: str = "http://localhost:9200"
    request_timeout: Optional[float] = None
    log_level: str = "INFO"

    @field_validator("request_timeout", mode="before")
    @classmethod
    def _blank_timeout_is_none(cls, value):
        # `REQUEST_TIMEOUT=` in a .env template means "no timeout".
        if isinstance(value, str) and not value.strip():
            return None
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
