"""entities.py
Shared type definitions used across the ingestion pipeline.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Dict, Optional

# One CSV row keyed by column header; every value stays a string.
Document = Dict[str, str]


@dataclass(frozen=True)
class IngestTarget:
    """Where documents go and how requests authenticate.

    Built once from the command line and shared by the index-creation call
    and every insertion call of a run.
    """

    index_name: str
    base_url: str
    credentials: str

    @classmethod
    def from_login(cls, index_name: str, base_url: str, username: str, password: str) -> "IngestTarget":
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return cls(index_name=index_name, base_url=base_url.rstrip("/"), credentials=token)

    @property
    def authorization(self) -> str:
        return f"Basic {self.credentials}"

    @property
    def index_url(self) -> str:
        return f"{self.base_url}/{self.index_name}"

    @property
    def doc_url(self) -> str:
        return f"{self.index_url}/_doc"


@dataclass(frozen=True)
class InsertOutcome:
    """Result of inserting a single row (``row_number`` is the 1-based data row)."""

    row_number: int
    ok: bool
    status_code: int
    detail: Optional[str] = None


@dataclass
class IngestReport:
    """Per-row outcomes of one ingestion run, in file order."""

    index_name: str
    outcomes: list[InsertOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> list[InsertOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

