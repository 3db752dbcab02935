import logging
from contextlib import contextmanager

import pytest

from csv2search.common.settings import Settings as CommonSettings
from csv2search.indexing import index_cli
from csv2search.indexing import indexing_pipeline
from csv2search.indexing.settings import Settings as IndexingSettings


@pytest.fixture
def cli(monkeypatch: pytest.MonkeyPatch, engine):
    calls: list[dict] = []

    def fake_ingest(file_path, target, **kwargs):
        calls.append(kwargs)
        return indexing_pipeline.ingest_csv(file_path, target, transport=engine.transport, **kwargs)

    monkeypatch.setattr("csv2search.indexing.index_cli.ingest_csv", fake_ingest)

    def _run(*extra: str) -> int:
        return index_cli.main(["-u", "elastic", "-p", "changeme", *extra])

    _run.calls = calls
    return _run


def test_successful_run_exits_zero(cli, engine, write_csv) -> None:
    path = write_csv("name,age\nAlice,30\nBob,25\n")

    assert cli("-i", "people", "-f", str(path)) == 0
    assert str(engine.requests[0].url) == "http://localhost:9200/people"
    assert len(engine.inserts) == 2


def test_rejected_document_still_exits_zero(cli, engine, write_csv) -> None:
    engine.doc_status = lambda n: 500 if n == 0 else 201
    path = write_csv("name\nAlice\nBob\n")

    assert cli("--index-name", "people", "--file-path", str(path)) == 0
    assert len(engine.inserts) == 2


def test_fail_on_insert_error_turns_rejections_into_exit_one(cli, engine, write_csv) -> None:
    engine.doc_status = lambda n: 500 if n == 0 else 201
    path = write_csv("name\nAlice\nBob\n")

    assert cli("-i", "people", "-f", str(path), "--fail-on-insert-error") == 1
    assert len(engine.inserts) == 2


def test_index_creation_failure_exits_non_zero(cli, engine, write_csv) -> None:
    engine.create_status = 400
    path = write_csv("name\nAlice\n")

    assert cli("-i", "people", "-f", str(path)) == 1
    assert engine.inserts == []


def test_missing_file_exits_non_zero(cli, engine, tmp_path) -> None:
    assert cli("-i", "people", "-f", str(tmp_path / "missing.csv")) == 1
    assert engine.requests == []


def test_parse_error_exits_non_zero(cli, engine, write_csv) -> None:
    path = write_csv('name\n"Al"ice\n')

    assert cli("-i", "people", "-f", str(path)) == 1


def test_es_host_and_delimiter_flags(cli, engine, write_csv) -> None:
    path = write_csv("a;b\n1;2\n")

    code = cli("-i", "t", "-f", str(path), "--es-host", "http://search:9201/", "--delimiter", ";")

    assert code == 0
    assert str(engine.inserts[0].url) == "http://search:9201/t/_doc"
    assert engine.inserted_documents() == [{"a": "1", "b": "2"}]


def test_missing_required_flag_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        index_cli.main(["-i", "people", "-u", "elastic", "-p", "changeme"])

    assert excinfo.value.code == 2


@contextmanager
def _bare_root_logger():
    """Let ``logging.basicConfig`` install its own handler for the duration."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        yield
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        root.handlers.extend(saved_handlers)
        root.setLevel(saved_level)


def test_outcome_lines_are_printed_to_stdout(cli, engine, write_csv, capsys) -> None:
    engine.doc_status = lambda n: 500 if n == 0 else 201
    path = write_csv("name\nAlice\nBob\n")

    with _bare_root_logger():
        code = cli("-i", "people", "-f", str(path))

    out = capsys.readouterr().out
    assert code == 0
    assert "Index created successfully." in out
    assert "Failed to index document (row 1) into 'people': " in out
    assert "rejected doc 0" in out
    assert "attempted=2 succeeded=1 failed=1" in out


def test_strict_rows_flag_rejects_ragged_row(cli, engine, write_csv) -> None:
    path = write_csv("a,b\n1,2\n3\n4,5\n")

    assert cli("-i", "t", "-f", str(path), "--strict-rows") == 1
    assert engine.inserted_documents() == [{"a": "1", "b": "2"}]


def test_progress_flag_draws_progress_bar(cli, engine, write_csv, capsys) -> None:
    path = write_csv("name\nAlice\nBob\n")

    assert cli("-i", "people", "-f", str(path), "--progress") == 0
    assert cli.calls[0]["show_progress"] is True
    assert "Indexing into people" in capsys.readouterr().err


def test_strict_rows_env_reaches_run(cli, engine, write_csv, monkeypatch) -> None:
    monkeypatch.setenv("STRICT_ROWS", "true")
    monkeypatch.setattr(index_cli, "settings", IndexingSettings())
    path = write_csv("a,b\n1,2\n3\n")

    assert cli("-i", "t", "-f", str(path)) == 1
    assert cli.calls[0]["strict_rows"] is True
    assert len(engine.inserts) == 1


def test_es_host_and_timeout_env_reach_run(cli, engine, write_csv, monkeypatch) -> None:
    monkeypatch.setenv("ES_HOST", "http://search:9201")
    monkeypatch.setenv("REQUEST_TIMEOUT", "4")
    monkeypatch.setattr(index_cli, "common_settings", CommonSettings())
    path = write_csv("name\nAlice\n")

    assert cli("-i", "people", "-f", str(path)) == 0
    assert cli.calls[0]["timeout"] == 4.0
    assert [str(r.url) for r in engine.requests] == [
        "http://search:9201/people",
        "http://search:9201/people/_doc",
    ]
