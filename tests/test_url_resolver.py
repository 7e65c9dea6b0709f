import pytest

from archive_scraper.crawler.url_resolver import make_absolute_url


BASE = "http://archive.test/authors/jane-doe.html"


def test_empty_url_returns_base():
    assert make_absolute_url("", BASE) == BASE


@pytest.mark.parametrize("url", [
    "https://other.test/a/../b",
    "http://archive.test/x.html",
    "mailto:someone@example.com",
])
def test_absolute_url_is_unchanged(url):
    assert make_absolute_url(url, BASE) == url


def test_query_and_fragment_are_appended_to_base():
    assert make_absolute_url("?page=2", BASE) == BASE + "?page=2"
    assert make_absolute_url("#top", BASE) == BASE + "#top"


def test_relative_url_replaces_last_segment():
    assert make_absolute_url("articles.html", BASE) == "http://archive.test/authors/articles.html"


def test_root_relative_url_discards_base_path():
    assert make_absolute_url("/index.html", BASE) == "http://archive.test/index.html"


def test_parent_segments_are_collapsed():
    assert make_absolute_url("/a/b/../c", BASE) == "http://archive.test/a/c"
    assert make_absolute_url("../articles/1.html", BASE) == "http://archive.test/articles/1.html"


def test_duplicate_slashes_and_dot_segments_are_collapsed():
    assert make_absolute_url("a//b/./c.html", BASE) == "http://archive.test/authors/a/b/c.html"


def test_base_without_path():
    assert make_absolute_url("authors.html", "http://archive.test") == "http://archive.test/authors.html"


def test_base_port_is_kept():
    assert make_absolute_url("x.html", "http://127.0.0.1:8080/dir/") == "http://127.0.0.1:8080/dir/x.html"


def test_page_number_prefix():
    url = "http://archive.test/author/12/articles.html"
    assert make_absolute_url("articles-page=", url) == "http://archive.test/author/12/articles-page="
