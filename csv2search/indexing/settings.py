from __future__ import annotations

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(override=True)


class Settings(BaseSettings):
    """CSV ingestion configuration.

    Fields
    ------
    csv_delimiter
        Single character separating fields.
    csv_encoding
        Text encoding of the input file (``utf-8-sig`` also strips a BOM).
    strict_rows
        If *true*, a data row whose width differs from the header row aborts
        the run instead of being truncated/padded by positional zipping.
    show_progress
        Display a tqdm progress bar while inserting documents.
    """

    csv_delimiter: str = ","
    csv_encoding: str = "utf-8-sig"
    strict_rows: bool = False
    show_progress: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
