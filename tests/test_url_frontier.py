import pytest

from archive_scraper.crawler.policies import pending_articles_for
from archive_scraper.crawler.url_frontier import CrawlTask, PageKind, URLFrontier


def _tasks():
    return [
        CrawlTask.author_page("http://archive.test/a.html"),
        CrawlTask.articles_page("http://archive.test/a/1.html", 0),
        CrawlTask.articles_page("http://archive.test/b/1.html", 1),
        CrawlTask.articles_page("http://archive.test/a/2.html", 0),
        CrawlTask.author_page("http://archive.test/c.html"),
    ]


def test_dequeue_is_fifo_and_bounded():
    frontier = URLFrontier(_tasks())
    first = frontier.dequeue_up_to(2)
    assert [t.url for t in first] == ["http://archive.test/a.html", "http://archive.test/a/1.html"]
    assert len(frontier) == 3

    rest = frontier.dequeue_up_to(10)
    assert len(rest) == 3
    assert frontier.is_empty()
    assert frontier.dequeue_up_to(1) == []


def test_dequeue_rejects_non_positive_batch():
    with pytest.raises(ValueError):
        URLFrontier().dequeue_up_to(0)


def test_remove_where_prunes_only_matching_author_articles():
    frontier = URLFrontier(_tasks())
    removed = frontier.remove_where(pending_articles_for(0))

    assert removed == 2
    remaining = list(frontier)
    assert [t.url for t in remaining] == [
        "http://archive.test/a.html",
        "http://archive.test/b/1.html",
        "http://archive.test/c.html",
    ]
    assert frontier.get_stats()["pruned_total"] == 2


def test_no_deduplication():
    frontier = URLFrontier()
    task = CrawlTask.author_page("http://archive.test/a.html")
    frontier.enqueue(task)
    frontier.enqueue(task)
    assert len(frontier) == 2


def test_task_kind_and_author_id_must_agree():
    with pytest.raises(ValueError):
        CrawlTask(url="http://archive.test/a/1.html", kind=PageKind.ARTICLES_PAGE)
    with pytest.raises(ValueError):
        CrawlTask(url="http://archive.test/a.html", kind=PageKind.AUTHOR_PAGE, author_id=3)
