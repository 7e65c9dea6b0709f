"""
Page extractor for the archive's directory, author and articles pages.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from bs4 import BeautifulSoup, Tag


# Date formats seen in article listings, tried in order
DATE_FORMATS = (
    '%Y-%m-%d',
    '%B %d, %Y',
    '%b %d, %Y',
    '%b. %d, %Y',
    '%A, %B %d, %Y',
    '%a, %b %d, %Y',
    '%d %B %Y',
    '%m/%d/%Y',
    '%m/%d/%y',
)


class PageStructureError(Exception):
    """Raised when a page does not have the layout the extractor expects."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(f"{message} ({url})" if url else message)


@dataclass
class AuthorPageData:
    """Fields extracted from an author profile page."""
    name: str
    bio: str
    articles_link: str
    twitter: Optional[str] = None


@dataclass
class ArticleListing:
    """A single record on an articles page, before filtering."""
    title: str
    link: str
    date_text: str


@dataclass
class Pagination:
    """Pagination control state of an articles page."""
    current_page: int
    last_page: int


@dataclass
class ArticlesPageData:
    """Records and pagination extracted from an articles page."""
    records: List[ArticleListing] = field(default_factory=list)
    pagination: Optional[Pagination] = None


def parse_article_date(text: str) -> date:
    """
    Parse a listing date.

    Raises:
        ValueError: if the text matches none of DATE_FORMATS
    """
    cleaned = re.sub(r'\s+', ' ', text).strip()
    # 'Dec 5th, 2017' -> 'Dec 5, 2017'
    cleaned = re.sub(r'(\d)(st|nd|rd|th)\b', r'\1', cleaned)

    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, date_format).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognized date: {text!r}")


class PageExtractor:
    """
    Extracts structured data from archive pages.
    Missing required elements raise PageStructureError.
    """

    def __init__(self, features: str = 'lxml'):
        self.features = features
        self.logger = logging.getLogger(__name__)
        self.whitespace_pattern = re.compile(r'\s+')

    def _soup(self, body: str) -> BeautifulSoup:
        return BeautifulSoup(body, self.features)

    def extract_directory_page(self, body: str, url: Optional[str] = None) -> List[str]:
        """
        Extract author page links from the directory page.

        Featured authors come first, then the alphabetical listing,
        each in document order.
        """
        soup = self._soup(body)

        featured = soup.select(
            'div.featured div.records div.record div.author-info h1.headline a[href]'
        )
        listed = soup.select('div.authors div.records.author-letter a[href]')

        links = [a['href'] for a in featured + listed]
        self.logger.debug(f"Found {len(featured)} featured and {len(listed)} listed authors on {url}")
        return links

    def extract_author_page(self, body: str, url: Optional[str] = None) -> AuthorPageData:
        """Extract author name, bio, twitter link and articles link."""
        soup = self._soup(body)

        author_info = soup.select_one('div.author-info')
        if author_info is None:
            raise PageStructureError("Author info block not found", url)

        name_node = self._require(author_info, 'h1.headline a', url)
        bio_node = self._require(author_info, 'div.abstract', url)
        articles_node = self._require(author_info, 'div.link.articles a[href]', url)

        twitter_node = author_info.select_one('div.abstract a[href*="://twitter.com/"]')

        return AuthorPageData(
            name=self._clean_text(name_node.get_text()),
            bio=self._clean_text(bio_node.get_text()),
            twitter=twitter_node['href'] if twitter_node else None,
            articles_link=articles_node['href']
        )

    def extract_articles_page(self, body: str, url: Optional[str] = None) -> ArticlesPageData:
        """Extract article records in page order plus pagination info."""
        soup = self._soup(body)
        page_data = ArticlesPageData()

        for record in soup.select('div.records div.record.clearfix'):
            date_node = self._require(record, 'div.date', url)
            title_node = self._require(record, 'h2.headline a', url)

            page_data.records.append(ArticleListing(
                title=self._clean_text(title_node.get_text()),
                link=title_node.get('href', ''),
                date_text=self._clean_text(date_node.get_text())
            ))

        page_data.pagination = self._extract_pagination(soup)
        return page_data

    def _extract_pagination(self, soup: BeautifulSoup) -> Optional[Pagination]:
        """
        Read the pagination control. The current page is the <em> element;
        the last page is the second to last link, the last one being "next".
        """
        control = soup.select_one('div.pagination')
        if control is None:
            return None

        current_node = control.find('em', recursive=False)
        links = control.find_all('a', recursive=False)
        if current_node is None or len(links) < 2:
            return None

        try:
            current_page = int(current_node.get_text(strip=True))
            last_page = int(links[-2].get_text(strip=True))
        except ValueError:
            self.logger.debug("Non-numeric pagination control, ignoring")
            return None

        return Pagination(current_page=current_page, last_page=last_page)

    def _require(self, parent: Tag, selector: str, url: Optional[str]) -> Tag:
        node = parent.select_one(selector)
        if node is None:
            raise PageStructureError(f"Expected element '{selector}' not found", url)
        return node

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace."""
        if not text:
            return ""
        return self.whitespace_pattern.sub(' ', text.strip())
