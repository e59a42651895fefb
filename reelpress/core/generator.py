"""
Reel generation from articles and adapted content.
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from reelpress.config import get_config
from reelpress.core.article import Article
from reelpress.core.content import ModifiedContent
from reelpress.core.reel import GeneratedReel, ReelOptions, RenderRequest, RenderResult
from reelpress.core.templates import (
    ANIMATED_TEXT_TEMPLATE, QUOTE_TEMPLATE, SLIDESHOW_TEMPLATE, TEXT_OVERLAY_TEMPLATE,
    TemplateRegistry,
)
from reelpress.errors import ServiceNotInitializedError, UnknownTemplateError
from reelpress.providers.base import VideoRenderingProvider

logger = logging.getLogger(__name__)

RESOLUTION_HEIGHTS = {
    '1080p': 1920,
    '720p': 1280,
    '480p': 854,
}

ASPECT_RATIOS = {
    '9:16': 9 / 16,
    '16:9': 16 / 9,
    '1:1': 1.0,
    '4:5': 4 / 5,
}

_HASHTAG = re.compile(r'#\w+')


def resolve_dimensions(resolution: str, aspect_ratio: str) -> Tuple[int, int]:
    """
    Pixel (width, height) for a quality tier and aspect ratio.

    Height comes from the tier and width from ``height * ratio`` rounded half
    up. For 16:9 the two are returned swapped, so 1080p 16:9 is 1920 wide and
    3413 high; renderers downstream rely on exactly this.
    """
    height = RESOLUTION_HEIGHTS.get(resolution, RESOLUTION_HEIGHTS['1080p'])
    ratio = ASPECT_RATIOS.get(aspect_ratio, ASPECT_RATIOS['9:16'])
    width = int(math.floor(height * ratio + 0.5))

    if aspect_ratio == '16:9':
        return height, width
    return width, height


class ReelGenerator:
    """
    Picks a template, builds the render payload and asks the provider to render.

    Without a provider the generator can still build requests, which is what
    the command line dry run does.
    """
    def __init__(self, provider: Optional[VideoRenderingProvider] = None,
                 registry: Optional[TemplateRegistry] = None):
        self.provider = provider
        self.registry = registry if registry is not None else TemplateRegistry()
        self.logo_url = get_config('branding.logo_url')
        self.brand_name = get_config('branding.brand_name')
        self.brand_color = get_config('branding.brand_color')

    # Template selection

    @staticmethod
    def suggest_template_for_article(article: Article) -> str:
        if article.social.key_quotes:
            return QUOTE_TEMPLATE
        if len(article.images.gallery) > 2:
            return SLIDESHOW_TEMPLATE
        if len(article.content.text) > 1000:
            return TEXT_OVERLAY_TEMPLATE
        return ANIMATED_TEXT_TEMPLATE

    @staticmethod
    def suggest_template_for_content(content: ModifiedContent) -> str:
        if len(content.content.images) > 2:
            return SLIDESHOW_TEMPLATE
        if len(content.content.text) > 500:
            return TEXT_OVERLAY_TEMPLATE
        return ANIMATED_TEXT_TEMPLATE

    def _resolve_template(self, options: ReelOptions, suggested: str) -> str:
        if options.template_id is None:
            return suggested
        if options.template_id not in self.registry:
            raise UnknownTemplateError(options.template_id)
        return options.template_id

    # Payloads

    def _add_common(self, modifications: Dict[str, Any], options: ReelOptions) -> Dict[str, Any]:
        if options.include_audio and options.audio_track_url:
            modifications['audioTrack'] = options.audio_track_url
        if options.duration:
            modifications['duration'] = options.duration

        modifications['logo'] = self.logo_url
        modifications['brandName'] = self.brand_name
        modifications['brandColor'] = self.brand_color
        return modifications

    def article_modifications(self, article: Article, options: ReelOptions) -> Dict[str, Any]:
        modifications: Dict[str, Any] = {
            'title': article.title,
            'subtitle': article.subtitle or '',
            'author': article.author,
            'category': article.category,
        }

        if options.include_text:
            quotes = article.social.key_quotes
            if quotes:
                modifications['quotes'] = list(quotes[:3])
                modifications['mainQuote'] = quotes[0]
            else:
                modifications['summary'] = article.content.summary
            modifications['hashtags'] = ' '.join(article.social.hashtags)

        if options.include_images:
            modifications['images'] = list(article.images.all)
            if article.images.featured:
                modifications['featuredImage'] = article.images.featured

        return self._add_common(modifications, options)

    def content_modifications(self, content: ModifiedContent, options: ReelOptions) -> Dict[str, Any]:
        text = content.content.text
        lines = [line for line in text.split('\n') if line.strip()]
        modifications: Dict[str, Any] = {
            'title': lines[0] if lines else self.brand_name,
            'subtitle': '',
        }

        if options.include_text:
            if len(lines) > 1:
                modifications['subtitle'] = lines[1]
                if len(lines) > 2:
                    modifications['mainText'] = '\n'.join(lines[2:])
            else:
                modifications['mainText'] = text
            modifications['hashtags'] = ' '.join(_HASHTAG.findall(text))

        if options.include_images and content.content.images:
            modifications['images'] = list(content.content.images)
            modifications['featuredImage'] = content.content.images[0]

        if content.content.captions:
            modifications['captions'] = list(content.content.captions)

        return self._add_common(modifications, options)

    def _request(self, template_id: str, modifications: Dict[str, Any], options: ReelOptions) -> RenderRequest:
        width, height = resolve_dimensions(options.resolution, options.aspect_ratio)
        return RenderRequest(
            template_id=template_id,
            modifications=modifications,
            output_format=options.output_format,
            width=width,
            height=height,
            fps=options.fps,
            quality=options.quality,
        )

    def build_article_request(self, article: Article, options: Optional[ReelOptions] = None) -> RenderRequest:
        options = options or ReelOptions()
        template_id = self._resolve_template(options, self.suggest_template_for_article(article))
        return self._request(template_id, self.article_modifications(article, options), options)

    def build_content_request(self, content: ModifiedContent, options: Optional[ReelOptions] = None) -> RenderRequest:
        options = options or ReelOptions()
        template_id = self._resolve_template(options, self.suggest_template_for_content(content))
        return self._request(template_id, self.content_modifications(content, options), options)

    # Generation

    async def _render(self, request: RenderRequest, source: str) -> RenderResult:
        if self.provider is None:
            raise ServiceNotInitializedError("No video rendering provider configured")
        try:
            return await self.provider.render(request)
        except Exception as e:
            logger.error(f"Failed to render reel for {source} with {request.template_id}: {e!r}")
            raise

    async def generate_from_article(self, article: Article, options: Optional[ReelOptions] = None) -> GeneratedReel:
        """
        Render a reel for an article.

        Raises:
            UnknownTemplateError: If a pinned template is not registered
            Exception: Whatever the provider raised, unchanged
        """
        logger.info(f"Generating reel for article {article.id}: {article.title}")
        request = self.build_article_request(article, options)
        result = await self._render(request, f"article {article.id}")

        reel = self._reel(result, request.template_id, article_id=article.id)
        logger.info(f"Generated reel {reel.id} for article {article.id} using {reel.template_id}")
        return reel

    async def generate_from_content(self, content: ModifiedContent,
                                    options: Optional[ReelOptions] = None) -> GeneratedReel:
        """
        Render a reel for adapted content.

        Raises:
            UnknownTemplateError: If a pinned template is not registered
            Exception: Whatever the provider raised, unchanged
        """
        logger.info(f"Generating reel for content {content.id}")
        request = self.build_content_request(content, options)
        result = await self._render(request, f"content {content.id}")

        reel = self._reel(result, request.template_id, article_id=content.original_article_id,
                          content_id=content.id)
        logger.info(f"Generated reel {reel.id} for content {content.id} using {reel.template_id}")
        return reel

    @staticmethod
    def _reel(result: RenderResult, template_id: str, article_id: str,
              content_id: Optional[str] = None) -> GeneratedReel:
        return GeneratedReel(
            id=result.id,
            article_id=article_id,
            content_id=content_id,
            video_url=result.url,
            thumbnail_url=result.thumbnail_url,
            duration=result.duration,
            width=result.width,
            height=result.height,
            format=result.format,
            size=result.size,
            template_id=template_id,
            created_at=datetime.now(timezone.utc),
        )
