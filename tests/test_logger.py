import io
import json
import logging

import pytest

from archive_scraper.utils.config import LoggingConfig
from archive_scraper.utils.logger import get_crawler_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_output_carries_crawl_context():
    stream = io.StringIO()
    setup_logging(LoggingConfig(level="INFO", json=True), stream=stream)

    log = get_crawler_logger("archive_scraper.test", run="r1").bind(author_id=3)
    log.info("Cap reached")

    entry = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert entry["message"] == "Cap reached"
    assert entry["level"] == "INFO"
    assert entry["run"] == "r1"
    assert entry["author_id"] == 3


def test_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "scraper.log"
    setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)), stream=io.StringIO())

    logging.getLogger("archive_scraper.test").warning("Dropping page")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "Dropping page" in log_file.read_text(encoding="utf-8")
