"""
Adapted social media content produced from an article.
"""
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from reelpress.config import get_config

CONTENT_FORMATS = ('post', 'story', 'reel', 'carousel')
TONES = ('casual', 'professional', 'motivational', 'educational')
AUDIENCES = ('students', 'professionals', 'general')

_id_lock = threading.Lock()
_last_stamp = 0


def unique_timestamp() -> int:
    """
    Microsecond timestamp that strictly increases across calls in this process.
    """
    global _last_stamp
    with _id_lock:
        stamp = max(time.time_ns() // 1000, _last_stamp + 1)
        _last_stamp = stamp
        return stamp


def content_id_for(article_id: str, target_format: str) -> str:
    return f"{article_id}_{target_format}_{unique_timestamp()}"


@dataclass(frozen=True)
class AdaptationOptions:
    """
    Options controlling how an article is adapted.

    ``tone`` and ``target_audience`` accept any string; unknown values fall
    back to the default hook and call to action.
    """
    target_format: str = 'post'
    max_length: int = field(default_factory=lambda: get_config('adaptation.max_length', 2200))
    include_hashtags: bool = True
    include_call_to_action: bool = True
    tone: str = field(default_factory=lambda: get_config('adaptation.tone', 'casual'))
    target_audience: str = field(default_factory=lambda: get_config('adaptation.target_audience', 'students'))

    def __post_init__(self):
        if self.target_format not in CONTENT_FORMATS:
            raise ValueError(
                f"Unsupported target format {self.target_format!r}, expected one of {CONTENT_FORMATS}"
            )
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")


@dataclass(frozen=True)
class ContentBody:
    text: str
    images: Tuple[str, ...] = ()
    # Only populated for carousels
    captions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentMetadata:
    created_at: datetime
    source_url: str
    generated: bool = True
    approved: bool = False


@dataclass(frozen=True)
class PerformanceCounters:
    likes: int = 0
    comments: int = 0
    shares: int = 0
    saves: int = 0


@dataclass(frozen=True)
class PublicationState:
    ready: bool = True
    scheduled_for: Optional[datetime] = None
    published_at: Optional[datetime] = None
    performance: Optional[PerformanceCounters] = None


@dataclass(frozen=True)
class ModifiedContent:
    """
    A format-specific rendering of an article's text and media.

    Every adaptation gets a fresh ``id`` even for identical inputs.
    """
    id: str
    original_article_id: str
    format: str
    content: ContentBody
    metadata: ContentMetadata
    publication: PublicationState = field(default_factory=PublicationState)
