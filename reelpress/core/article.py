"""
Article data model for reelpress.
"""
import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


def article_id_for(url: str) -> str:
    """Stable identifier for an article URL (same URL, same id)."""
    return hashlib.sha256(url.encode('utf-8')).hexdigest()[:16]


@dataclass(frozen=True)
class ArticleLink:
    """
    A candidate article supplied by an external link source.

    The optional fields are hints: ``category`` and ``published_at`` take
    precedence over what is found on the page, ``title`` is only used when
    the page has none.
    """
    url: str
    title: Optional[str] = None
    category: Optional[str] = None
    published_at: Optional[datetime] = None


@dataclass(frozen=True)
class ArticleContent:
    html: str
    text: str
    summary: str
    word_count: int


@dataclass(frozen=True)
class ArticleImages:
    featured: Optional[str] = None
    gallery: Tuple[str, ...] = ()
    # Parallel to (featured,) + gallery
    alt: Tuple[str, ...] = ()

    @property
    def all(self) -> Tuple[str, ...]:
        if self.featured:
            return (self.featured,) + self.gallery
        return self.gallery

    @property
    def has_images(self) -> bool:
        return bool(self.featured) or len(self.gallery) > 0


@dataclass(frozen=True)
class ArticleMetadata:
    read_time: int
    difficulty: str
    study_area: str
    semester: Optional[str] = None


@dataclass(frozen=True)
class SocialProfile:
    """How well an article lends itself to social media formats."""
    adaptable: bool = False
    suggested_formats: Tuple[str, ...] = ('post',)
    hashtags: Tuple[str, ...] = ()
    key_quotes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScrapeInfo:
    at: datetime
    source: str
    quality: str


@dataclass(frozen=True)
class Article:
    """
    Represents an extracted article with its content and derived metadata.
    """
    id: str
    title: str
    url: str
    author: str
    published_at: datetime
    category: str
    content: ArticleContent
    images: ArticleImages
    metadata: ArticleMetadata
    social: SocialProfile
    scraped: ScrapeInfo
    subtitle: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
