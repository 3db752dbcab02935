"""csv_reader.py
Stream a header-first CSV file as :class:`Document` mappings.

The header row is consumed once, when the reader is entered, so callers can
fail fast on an unreadable file before touching the network.  Data rows are
produced lazily, one per iteration step, and cannot be replayed.
"""

from __future__ import annotations

import csv
import logging
import sys
from pathlib import Path
from typing import IO, Iterator, Optional

from csv2search.indexing.entities import Document

logger = logging.getLogger(__name__)

# Largest value accepted by csv.field_size_limit on every platform (C long).
MAX_FIELD_SIZE = min(sys.maxsize, 2**31 - 1)


class CsvParseError(ValueError):
    """Raised when the input is not well-formed CSV."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class CsvDocumentReader:
    """Context manager yielding one document per CSV data row.

    Args:
        path: CSV file with a header row.
        delimiter: Single field separator character.
        encoding: Text encoding of *path*.
        strict_rows: Reject rows whose width differs from the header row
            instead of zipping positionally (missing trailing keys, dropped
            extra fields).
        field_size_limit: Longest field accepted, in characters.  The csv
            module default (131072) is too small for long text columns.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
        strict_rows: bool = False,
        field_size_limit: int = MAX_FIELD_SIZE,
    ) -> None:
        self.path = Path(path)
        self.delimiter = delimiter
        self.encoding = encoding
        self.strict_rows = strict_rows
        self.field_size_limit = field_size_limit
        self.headers: list[str] = []
        self._fh: IO[str] | None = None
        self._reader = None
        self._consumed = False

    def __enter__(self) -> "CsvDocumentReader":
        self._fh = self.path.open(newline="", encoding=self.encoding)
        try:
            csv.field_size_limit(self.field_size_limit)
            self._reader = csv.reader(self._fh, delimiter=self.delimiter, strict=True)
            self.headers = self._next_row() or []
        except BaseException:
            self.close()
            raise
        if not self.headers:
            logger.warning("No header row found in %s", self.path)
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def _next_row(self) -> list[str] | None:
        """Return the next non-blank row, or ``None`` at end of file."""
        while True:
            try:
                row = next(self._reader)
            except StopIteration:
                return None
            except (csv.Error, UnicodeDecodeError) as exc:
                raise CsvParseError(str(exc), self._reader.line_num) from exc
            if row:
                return row

    def __iter__(self) -> Iterator[Document]:
        if self._reader is None:
            raise RuntimeError("CsvDocumentReader must be entered before iterating")
        if self._consumed:
            raise RuntimeError(f"Rows of {self.path} have already been consumed")
        self._consumed = True
        return self._documents()

    def _documents(self) -> Iterator[Document]:
        width = len(self.headers)
        while True:
            row = self._next_row()
            if row is None:
                return
            if self.strict_rows and len(row) != width:
                raise CsvParseError(
                    f"expected {width} fields, found {len(row)}",
                    self._reader.line_num,
                )
            yield dict(zip(self.headers, row))

