"""CSV → JSON documents → search index pipeline.

Workflow
---------
1. Open the CSV file and read its header row (file errors abort here, before
   any request is sent).
2. Create the target index with one ``PUT``.  A rejected creation aborts the
   run; no document is sent.
3. Insert every data row, in file order, with one ``POST`` each.  Requests are
   awaited one at a time; a rejected document is logged and recorded in the
   :class:`IngestReport`, and the loop moves on to the next row.

Parse errors and transport errors raised mid-loop end the run.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx
from tqdm import tqdm

from csv2search.indexing.csv_reader import CsvDocumentReader
from csv2search.indexing.document_publisher import DocumentInsertError, DocumentPublisher
from csv2search.indexing.entities import IngestReport, IngestTarget

logger = logging.getLogger(__name__)


async def ingest_csv_async(
    file_path: Path | str,
    target: IngestTarget,
    *,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
    strict_rows: bool = False,
    timeout: Optional[float] = None,
    show_progress: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IngestReport:
    """Create ``target.index_name`` and insert one document per CSV row.

    Args:
        file_path: CSV file with a header row.
        target: Endpoint, index and credentials reused for every request.
        delimiter: CSV field separator.
        encoding: Text encoding of *file_path*.
        strict_rows: Reject ragged rows instead of zipping positionally.
        timeout: Per-request timeout in seconds (``None`` = wait indefinitely).
        show_progress: Wrap the row loop in a tqdm progress bar.
        transport: Optional httpx transport, forwarded to the publisher.

    Returns:
        The per-row outcomes, in file order.

    Raises:
        OSError: The file cannot be opened or read.
        CsvParseError: Malformed CSV (or a ragged row with *strict_rows*).
        IndexCreationError: The index-creation call was rejected.
        TransportError: A request could not be delivered.
    """

    report = IngestReport(index_name=target.index_name)

    with CsvDocumentReader(
        file_path, delimiter=delimiter, encoding=encoding, strict_rows=strict_rows
    ) as reader:
        logger.debug("Read %d header column(s) from %s", len(reader.headers), file_path)

        async with DocumentPublisher(target, timeout=timeout, transport=transport) as publisher:
            await publisher.create_index()

            with tqdm(
                desc=f"Indexing into {target.index_name}",
                unit="doc",
                disable=not show_progress,
            ) as progress:
                for row_number, document in enumerate(reader, start=1):
                    outcome = await publisher.insert_document(document, row_number)
                    report.outcomes.append(outcome)
                    progress.update(1)

    logger.info(
        "Finished '%s': attempted=%d succeeded=%d failed=%d",
        target.index_name,
        report.attempted,
        report.succeeded,
        len(report.failed),
    )
    return report


def ingest_csv(file_path: Path | str, target: IngestTarget, **kwargs) -> IngestReport:
    """Blocking wrapper around :func:`ingest_csv_async`."""
    return asyncio.run(ingest_csv_async(file_path, target, **kwargs))


def raise_for_failures(report: IngestReport) -> None:
    """Raise :class:`DocumentInsertError` if any row of *report* was rejected."""
    failed = report.failed
    if not failed:
        return
    first = failed[0]
    raise DocumentInsertError(
        first.status_code,
        first.detail or "",
        row_number=first.row_number,
        failed_count=len(failed),
    )
