"""
Article extraction for reelpress.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from urllib.parse import urljoin

import aiohttp
import async_timeout
import backoff
from bs4 import BeautifulSoup

from reelpress.config import get_config
from reelpress.core.article import (
    Article, ArticleContent, ArticleImages, ArticleLink, ArticleMetadata,
    ScrapeInfo, SocialProfile, article_id_for,
)
from reelpress.core.selectors import DEFAULT_SELECTORS, SelectorTable, first_match, normalize_whitespace
from reelpress.errors import FetchError
from reelpress.utils.http import DEFAULT_HEADERS, RateLimiter, domain_of
from reelpress.utils.nlp import TextAnalyzer

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


@dataclass(frozen=True)
class ParsingOptions:
    extract_images: bool = True
    extract_tags: bool = True
    generate_social_data: bool = True
    max_attempts: int = field(default_factory=lambda: get_config('extraction.max_attempts', 3))

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")


@dataclass(frozen=True)
class ExtractionOutcome:
    """
    Result of extracting one link.

    ``status`` is ``ok`` with an article, ``skipped`` when the page had no
    usable title or body, or ``failed`` when fetching gave up or the link
    could not be processed. ``waited`` is the backoff time between attempts;
    the one rate limit wait before the first attempt is not included.
    """
    link: ArticleLink
    status: str
    article: Optional[Article] = None
    error: Optional[Exception] = None
    attempts: int = 0
    waited: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == 'ok'


class ArticleExtractor:
    """
    Fetches article pages and parses them into ``Article`` objects.
    """
    def __init__(
        self,
        selectors: SelectorTable = DEFAULT_SELECTORS,
        analyzer: Optional[TextAnalyzer] = None,
        rate_limiter: Optional[RateLimiter] = None,
        backoff_base: Optional[float] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        self.selectors = selectors
        self.analyzer = analyzer or TextAnalyzer()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.backoff_base = backoff_base if backoff_base is not None else \
            get_config('extraction.backoff_base_seconds', 1.0)
        self.timeout = timeout or get_config('extraction.timeout_seconds', 15)
        self.headers = dict(DEFAULT_HEADERS)
        self.headers['User-Agent'] = user_agent or get_config('extraction.user_agent')
        self.default_author = get_config('extraction.default_author', 'Editorial Team')
        self.default_category = get_config('extraction.default_category', 'Study')
        self.min_image_size = get_config('extraction.min_image_size', 50)
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> 'ArticleExtractor':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # Fetching

    async def _fetch_once(self, url: str) -> str:
        """
        A single GET of ``url``; raises on network errors and HTTP error statuses.
        """
        domain = domain_of(url)

        try:
            async with async_timeout.timeout(self.timeout):
                async with self.session.get(url) as response:
                    response.raise_for_status()
                    content = await response.text()
        except RETRYABLE_ERRORS:
            self.rate_limiter.report_failure(domain)
            raise

        self.rate_limiter.report_success(domain)
        return content

    async def fetch(self, url: str, max_attempts: int) -> Tuple[str, int, float]:
        """
        Fetch URL content, retrying transient failures with exponential backoff.

        The domain rate limit is acquired once, before the first attempt, so
        retries follow the backoff schedule alone. Attempts run strictly one
        after another. After failed attempt ``n`` the wait is
        ``backoff_base * 2 ** n`` seconds.

        Args:
            url: The URL to fetch
            max_attempts: Upper bound on the number of attempts

        Returns:
            Tuple of (page content, attempts made, total seconds of backoff)

        Raises:
            FetchError: When every attempt failed or the body could not be decoded
        """
        waits: List[float] = []

        def on_backoff(details):
            waits.append(details['wait'])
            logger.warning(
                f"Retry {details['tries']}/{max_attempts} for {url} in {details['wait']:.2f}s: "
                f"{details['exception']!r}"
            )

        def on_giveup(details):
            logger.error(f"Giving up on {url} after {details['tries']} attempt(s)")

        retrying = backoff.on_exception(
            backoff.expo,
            RETRYABLE_ERRORS,
            max_tries=max_attempts,
            factor=self.backoff_base * 2,
            jitter=None,
            on_backoff=on_backoff,
            on_giveup=on_giveup,
        )(self._fetch_once)

        await self.rate_limiter.acquire(domain_of(url))

        try:
            content = await retrying(url)
        except RETRYABLE_ERRORS as e:
            raise FetchError(url, len(waits) + 1, reason=repr(e)) from e
        except UnicodeDecodeError as e:
            # Not transient, a retry would receive the same bytes
            logger.error(f"Undecodable response body from {url}: {e}")
            raise FetchError(url, len(waits) + 1, reason=f"undecodable body: {e}") from e

        return content, len(waits) + 1, sum(waits)

    # Public API

    async def extract(self, link: ArticleLink, options: Optional[ParsingOptions] = None) -> Optional[Article]:
        """
        Fetch and parse one article.

        Returns:
            The article, or None when the page lacks a title or body text

        Raises:
            FetchError: When the page could not be fetched
        """
        outcome = await self.extract_outcome(link, options)
        if outcome.status == 'failed':
            raise outcome.error
        return outcome.article

    async def extract_outcome(self, link: ArticleLink,
                              options: Optional[ParsingOptions] = None) -> ExtractionOutcome:
        """
        Like ``extract`` but reports fetch failures as an outcome instead of raising.
        """
        options = options or ParsingOptions()

        try:
            html, attempts, waited = await self.fetch(link.url, options.max_attempts)
        except FetchError as e:
            return ExtractionOutcome(link, 'failed', error=e, attempts=e.attempts)

        article = self.parse(html, link, options)
        status = 'ok' if article is not None else 'skipped'
        return ExtractionOutcome(link, status, article=article, attempts=attempts, waited=waited)

    # Parsing

    def parse(self, html: str, link: ArticleLink, options: Optional[ParsingOptions] = None,
              scraped_at: Optional[datetime] = None) -> Optional[Article]:
        """
        Parse a fetched page into an article. No network access.

        Args:
            html: Page content
            link: The link the page was fetched from, with its hints
            options: What to extract
            scraped_at: Extraction time, defaults to now

        Returns:
            The article or None if there is no title or no body text
        """
        options = options or ParsingOptions()
        scraped_at = scraped_at or datetime.now(timezone.utc)
        soup = BeautifulSoup(html, 'html.parser')
        table = self.selectors

        title = first_match(soup, table.title) or link.title
        body = first_match(soup, table.content)

        if not title or not body:
            logger.warning(f"Insufficient content for article: {link.url}")
            return None

        body_html, text = body
        category = link.category or first_match(soup, table.category) or self.default_category
        images = self.extract_images(soup, link.url) if options.extract_images else ArticleImages()
        tags = self.extract_tags(soup) if options.extract_tags else ()

        analyzer = self.analyzer
        if options.generate_social_data:
            social = SocialProfile(
                adaptable=analyzer.assess_adaptability(text, images.has_images),
                suggested_formats=analyzer.suggest_formats(text, len(images.gallery), images.has_images),
                hashtags=analyzer.generate_hashtags(title, text, category),
                key_quotes=analyzer.extract_key_quotes(text),
            )
        else:
            social = SocialProfile()

        article = Article(
            id=article_id_for(link.url),
            title=title,
            subtitle=first_match(soup, table.subtitle),
            author=first_match(soup, table.author) or self.default_author,
            published_at=link.published_at or first_match(soup, table.published) or scraped_at,
            category=category,
            tags=tags,
            url=link.url,
            content=ArticleContent(
                html=body_html,
                text=text,
                summary=analyzer.generate_summary(text),
                word_count=analyzer.word_count(text),
            ),
            images=images,
            metadata=ArticleMetadata(
                read_time=analyzer.read_time(text),
                difficulty=analyzer.assess_difficulty(text),
                study_area=analyzer.extract_study_area(title, text, category),
                semester=analyzer.extract_semester(text),
            ),
            social=social,
            scraped=ScrapeInfo(
                at=scraped_at,
                source=link.url,
                quality=analyzer.assess_quality(text, images.has_images),
            ),
        )

        logger.debug(f"Parsed article {article.id}: {article.title} ({article.content.word_count} words)")
        return article

    def _is_tiny(self, img) -> bool:
        try:
            width = int(img.get('width') or 0)
            height = int(img.get('height') or 0)
        except ValueError:
            return False
        return 0 < width < self.min_image_size and 0 < height < self.min_image_size

    def extract_images(self, soup: BeautifulSoup, base_url: str) -> ArticleImages:
        """
        Collect page images in document order, absolutized against ``base_url``.

        The first image becomes the featured image, the rest the gallery.
        """
        urls: List[str] = []
        alt: List[str] = []

        for img in soup.select(self.selectors.images):
            src = (img.get('src') or '').strip()
            if not src or src.startswith('data:') or self._is_tiny(img):
                continue

            full_url = urljoin(base_url, src)
            if full_url in urls:
                continue

            urls.append(full_url)
            alt.append(normalize_whitespace(img.get('alt') or ''))

        if not urls:
            return ArticleImages()

        return ArticleImages(featured=urls[0], gallery=tuple(urls[1:]), alt=tuple(alt))

    def extract_tags(self, soup: BeautifulSoup) -> Tuple[str, ...]:
        if not self.selectors.tags:
            return ()

        tags: List[str] = []
        for element in soup.select(self.selectors.tags):
            tag = normalize_whitespace(element.get_text())
            if tag and tag not in tags:
                tags.append(tag)
        return tuple(tags)
