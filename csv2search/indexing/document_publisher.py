"""Thin async HTTP client for the two requests an ingestion run makes.

* :py:meth:`DocumentPublisher.create_index` – ``PUT {base_url}/{index}``.
* :py:meth:`DocumentPublisher.insert_document` – ``POST {base_url}/{index}/_doc``.

Both requests carry the same ``Authorization: Basic …`` header, taken from the
:class:`IngestTarget` the publisher was built with.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from csv2search.indexing.entities import Document, IngestTarget, InsertOutcome

logger = logging.getLogger(__name__)


class PublishError(RuntimeError):
    """Base class for failures talking to the search engine."""


class TransportError(PublishError):
    """Raised when a request cannot be delivered (connection refused, DNS, timeout…)."""


class IndexCreationError(PublishError):
    """Raised when the index-creation call returns a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Failed to create index (HTTP {status_code}): {body}")


class DocumentInsertError(PublishError):
    """Raised on request when one or more document insertions were rejected."""

    def __init__(self, status_code: int, body: str, *, row_number: int, failed_count: int = 1) -> None:
        self.status_code = status_code
        self.body = body
        self.row_number = row_number
        self.failed_count = failed_count
        super().__init__(
            f"{failed_count} document(s) failed; first at row {row_number} (HTTP {status_code}): {body}"
        )


class DocumentPublisher:
    """Send index-creation and document requests for one :class:`IngestTarget`.

    Args:
        target: Index, endpoint and credentials shared by every request.
        timeout: Seconds per request; ``None`` disables the timeout.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        target: IngestTarget,
        *,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.target = target
        self._client = httpx.AsyncClient(
            headers={"Authorization": target.authorization},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "DocumentPublisher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    async def create_index(self) -> httpx.Response:
        """Create the target index (empty body, server-side defaults)."""
        response = await self._send("PUT", self.target.index_url)
        if not response.is_success:
            raise IndexCreationError(response.status_code, response.text)
        logger.info("Index created successfully.")
        return response

    async def insert_document(self, document: Document, row_number: int) -> InsertOutcome:
        """Index one document; a rejected document is reported, not raised."""
        response = await self._send("POST", self.target.doc_url, json=document)
        if response.is_success:
            return InsertOutcome(row_number=row_number, ok=True, status_code=response.status_code)

        logger.warning(
            "Failed to index document (row %d) into '%s': %s",
            row_number,
            self.target.index_name,
            response.text,
        )
        return InsertOutcome(
            row_number=row_number,
            ok=False,
            status_code=response.status_code,
            detail=response.text,
        )
