from datetime import date

import pytest

from archive_scraper.crawler.policies import DateWindow, ResultCap
from archive_scraper.storage.result_store import ArticleRecord, AuthorRecord, ResultStore
from archive_scraper.utils.monitoring import CrawlMetrics


def test_author_ids_are_positions():
    store = ResultStore()
    assert store.add_author(AuthorRecord(name="A", bio="")) == 0
    assert store.add_author(AuthorRecord(name="B", bio="")) == 1
    assert store.get(1).name == "B"
    assert len(store) == 2


def test_append_article_returns_new_count():
    store = ResultStore()
    author_id = store.add_author(AuthorRecord(name="A", bio=""))
    article = ArticleRecord(title="T", url="http://archive.test/t.html", date=date(2017, 1, 1))

    assert store.append_article(author_id, article) == 1
    assert store.append_article(author_id, article) == 2
    assert store.article_count(author_id) == 2
    assert store.total_articles() == 2


def test_unknown_author_id():
    with pytest.raises(KeyError):
        ResultStore().get(0)


def test_date_window_open_bounds():
    assert DateWindow().contains(date(1990, 1, 1))
    assert DateWindow(start=date(2015, 1, 1)).contains(date(2030, 1, 1))
    assert not DateWindow(end=date(2015, 1, 1)).contains(date(2015, 1, 2))


def test_result_cap():
    assert ResultCap().allows_articles
    assert not ResultCap().is_reached(10_000)
    assert not ResultCap(0).allows_articles
    assert ResultCap(2).is_reached(2)
    assert not ResultCap(2).is_reached(1)


def test_metrics_are_per_instance():
    first, second = CrawlMetrics(), CrawlMetrics()
    first.inc("pages_fetched", 3)

    assert first.value("pages_fetched") == 3
    assert second.value("pages_fetched") == 0
    assert first.summary()["pages_fetched"] == 3
