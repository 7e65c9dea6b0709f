"""
In-memory result store for crawled authors and their articles.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class ArticleRecord:
    """A collected article."""
    title: str
    url: str
    date: date

    def to_dict(self) -> Dict[str, str]:
        return {
            'articleTitle': self.title,
            'articleUrl': self.url,
            'articleDate': self.date.isoformat()
        }


@dataclass
class AuthorRecord:
    """An author profile and the articles collected for it so far."""
    name: str
    bio: str
    twitter: Optional[str] = None
    articles: List[ArticleRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'authorName': self.name,
            'authorBio': self.bio,
            'authorTwitter': self.twitter,
            'articles': [article.to_dict() for article in self.articles]
        }


class ResultStore:
    """
    Ordered collection of author records.
    An author's id is its position, assigned when the record is added.
    """

    def __init__(self):
        self._authors: List[AuthorRecord] = []

    def add_author(self, author: AuthorRecord) -> int:
        """Append an author record and return its id."""
        self._authors.append(author)
        return len(self._authors) - 1

    def get(self, author_id: int) -> AuthorRecord:
        if author_id < 0 or author_id >= len(self._authors):
            raise KeyError(f"Unknown author id: {author_id}")
        return self._authors[author_id]

    def append_article(self, author_id: int, article: ArticleRecord) -> int:
        """Append an article to an author and return the new article count."""
        author = self.get(author_id)
        author.articles.append(article)
        return len(author.articles)

    def article_count(self, author_id: int) -> int:
        return len(self.get(author_id).articles)

    def total_articles(self) -> int:
        return sum(len(author.articles) for author in self._authors)

    def __len__(self) -> int:
        return len(self._authors)

    def __iter__(self) -> Iterator[AuthorRecord]:
        return iter(self._authors)

    def to_list(self) -> List[Dict[str, Any]]:
        """Plain data representation, dates as YYYY-MM-DD."""
        return [author.to_dict() for author in self._authors]
