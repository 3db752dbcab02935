from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import httpx
import pytest


class FakeSearchEngine:
    """Records every request and answers with configurable status codes."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.create_status = 200
        self.create_body = '{"acknowledged":true}'
        self.doc_status: Callable[[int], int] = lambda n: 201
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "PUT":
            return httpx.Response(self.create_status, text=self.create_body)

        inserts = len(self.inserts) - 1
        status = self.doc_status(inserts)
        if status >= 400:
            return httpx.Response(status, text=f'{{"error":"rejected doc {inserts}"}}')
        return httpx.Response(status, json={"result": "created"})

    @property
    def inserts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def inserted_documents(self) -> list[dict[str, str]]:
        return [json.loads(r.content) for r in self.inserts]


@pytest.fixture
def engine() -> FakeSearchEngine:
    return FakeSearchEngine()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str], Path]:
    def _write(content: str, name: str = "data.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
