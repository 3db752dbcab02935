"""index_cli.py
Command-line entry point for loading a CSV file into a search index.

This module only handles CLI parsing, logging setup and exit codes; the work
is delegated to :pyfunc:`indexing_pipeline.ingest_csv`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from csv2search.common.settings import settings as common_settings
from csv2search.indexing.csv_reader import CsvParseError
from csv2search.indexing.document_publisher import PublishError
from csv2search.indexing.entities import IngestTarget
from csv2search.indexing.indexing_pipeline import ingest_csv, raise_for_failures
from csv2search.indexing.settings import settings

logger = logging.getLogger(__name__)


def _single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError("delimiter must be a single character")
    return value


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a search index and load every row of a CSV file into it.",
    )
    parser.add_argument(
        "-i", "--index-name", type=str, required=True, help="Name of the index to create"
    )
    parser.add_argument(
        "-f", "--file-path", type=Path, required=True, help="Path to the CSV file"
    )
    parser.add_argument(
        "-u", "--username", type=str, required=True, help="Username for basic authentication"
    )
    parser.add_argument(
        "-p", "--password", type=str, required=True, help="Password for basic authentication"
    )
    parser.add_argument(
        "--es-host",
        default=common_settings.es_host,
        help="Search engine base URL",
    )
    parser.add_argument(
        "--delimiter",
        type=_single_char,
        default=settings.csv_delimiter,
        help="CSV field separator",
    )
    parser.add_argument(
        "--strict-rows",
        action="store_true",
        default=settings.strict_rows,
        help="Fail on rows whose field count differs from the header row",
    )
    parser.add_argument(
        "--fail-on-insert-error",
        action="store_true",
        help="Exit non-zero if any document was rejected",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        default=settings.show_progress,
        help="Show a progress bar",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:  # noqa: D401
    """Parse CLI options, run the ingestion and return the process exit code."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=common_settings.log_level.upper(),
        format="%(message)s",
        stream=sys.stdout,
    )

    target = IngestTarget.from_login(
        index_name=args.index_name,
        base_url=args.es_host,
        username=args.username,
        password=args.password,
    )

    try:
        report = ingest_csv(
            args.file_path,
            target,
            delimiter=args.delimiter,
            encoding=settings.csv_encoding,
            strict_rows=args.strict_rows,
            timeout=common_settings.request_timeout,
            show_progress=args.progress,
        )
        if args.fail_on_insert_error:
            raise_for_failures(report)
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.file_path, exc)
        return 1
    except CsvParseError as exc:
        logger.error("Invalid CSV in %s: %s", args.file_path, exc)
        return 1
    except PublishError as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
