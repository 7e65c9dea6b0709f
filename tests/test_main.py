import json
import logging
from datetime import date

import pytest

import main
from archive_scraper.storage.result_store import ArticleRecord, AuthorRecord, ResultStore


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_invalid_options_are_printed_one_per_line(capsys):
    exit_code = main.main(["--concurrency", "0", "--wait", "-2", "--startDate", "yesterday"])

    assert exit_code == 2
    lines = capsys.readouterr().err.strip().splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("Concurrency value should be integer and >= 1.")


def test_missing_config_file(capsys, tmp_path):
    assert main.main(["--config", str(tmp_path / "nope.yaml")]) == 2
    assert "Configuration file not found" in capsys.readouterr().err


def test_results_are_written_as_json(monkeypatch, tmp_path):
    store = ResultStore()
    author_id = store.add_author(AuthorRecord(name="Jane Doe", bio="Bio"))
    store.append_article(author_id, ArticleRecord("Title", "http://archive.test/a.html", date(2017, 1, 2)))

    async def fake_scrape(config, metrics=None):
        assert config.concurrency == 2
        return store

    monkeypatch.setattr(main, "scrape", fake_scrape)
    output = tmp_path / "authors.json"

    assert main.main(["--concurrency", "2", "--output", str(output)]) == 0

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data[0]["authorName"] == "Jane Doe"
    assert data[0]["articles"][0]["articleDate"] == "2017-01-02"


def test_unknown_log_level_is_a_config_error(capsys):
    assert main.main(["--log-level", "verbose"]) == 2

    err = capsys.readouterr().err
    assert "Log level should be one of" in err
    assert "Input was: verbose" in err


def test_log_level_override_is_case_insensitive(monkeypatch):
    async def fake_scrape(config, metrics=None):
        return ResultStore()

    monkeypatch.setattr(main, "scrape", fake_scrape)

    assert main.main(["--log-level", "warning"]) == 0
    assert logging.getLogger().level == logging.WARNING
