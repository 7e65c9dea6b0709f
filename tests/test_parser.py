from datetime import date

import pytest

from archive_scraper.crawler.parser import PageExtractor, PageStructureError, parse_article_date
from pages import articles_page, author_page, directory_page


@pytest.fixture
def extractor():
    return PageExtractor()


def test_directory_lists_featured_authors_first(extractor):
    body = directory_page(featured=["author/f1.html"], listed=["author/a1.html", "author/a2.html"])
    assert extractor.extract_directory_page(body) == [
        "author/f1.html", "author/a1.html", "author/a2.html"
    ]


def test_author_page_fields(extractor):
    body = author_page("Jane Doe", "articles.html", bio="Covers banking.",
                       twitter="https://twitter.com/janedoe")
    data = extractor.extract_author_page(body, "http://archive.test/author/jane.html")

    assert data.name == "Jane Doe"
    assert data.bio.startswith("Covers banking.")
    assert data.twitter == "https://twitter.com/janedoe"
    assert data.articles_link == "articles.html"


def test_author_page_without_twitter(extractor):
    data = extractor.extract_author_page(author_page("John Roe", "articles.html"))
    assert data.twitter is None


def test_twitter_link_outside_author_block_is_ignored(extractor):
    body = author_page("John Roe", "articles.html").replace(
        "</body>",
        '<div class="abstract"><a href="https://twitter.com/newsroom">Follow us</a></div></body>',
    )
    assert extractor.extract_author_page(body).twitter is None


def test_author_page_without_info_block_is_fatal(extractor):
    with pytest.raises(PageStructureError):
        extractor.extract_author_page("<html><body><p>Moved</p></body></html>", "http://archive.test/x")


def test_articles_page_records_and_pagination(extractor):
    body = articles_page(
        [("First", "/article/1.html", "January 5, 2017"),
         ("Second", "/article/2.html", "Dec 20, 2016")],
        current_page=1, last_page=4,
    )
    data = extractor.extract_articles_page(body)

    assert [r.title for r in data.records] == ["First", "Second"]
    assert data.records[0].link == "/article/1.html"
    assert data.records[1].date_text == "Dec 20, 2016"
    assert data.pagination.current_page == 1
    assert data.pagination.last_page == 4


def test_articles_page_without_pagination(extractor):
    data = extractor.extract_articles_page(articles_page([("Only", "/a.html", "2017-01-01")]))
    assert data.pagination is None


def test_record_without_date_is_fatal(extractor):
    body = ('<div class="records"><div class="record clearfix">'
            '<h2 class="headline"><a href="/a.html">No date</a></h2></div></div>')
    with pytest.raises(PageStructureError):
        extractor.extract_articles_page(body)


@pytest.mark.parametrize("text, expected", [
    ("2017-01-05", date(2017, 1, 5)),
    ("January 5, 2017", date(2017, 1, 5)),
    ("Jan 5, 2017", date(2017, 1, 5)),
    ("Thursday, January 5, 2017", date(2017, 1, 5)),
    ("01/05/2017", date(2017, 1, 5)),
    ("  Dec 5th,   2017 ", date(2017, 12, 5)),
])
def test_parse_article_date(text, expected):
    assert parse_article_date(text) == expected


def test_parse_article_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_article_date("last Tuesday")
