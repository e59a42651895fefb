"""
Adaptation of articles into social media formats.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from reelpress.config import get_config
from reelpress.core.article import Article
from reelpress.core.content import (
    AdaptationOptions, ContentBody, ContentMetadata, ModifiedContent,
    PublicationState, content_id_for,
)
from reelpress.utils.nlp import TextAnalyzer

logger = logging.getLogger(__name__)

HOOKS = {
    'casual': 'Hey! 👋 Have you heard about "{title}"? Here\'s what you need to know!',
    'professional': '📚 Expert insight: "{title}" - key takeaways for students',
    'motivational': '💪 Level up with "{title}" - these tips will move you forward!',
    'educational': '📝 Study notes: "{title}" - the essentials in a nutshell',
}
DEFAULT_HOOK = '📚 "{title}" - now on {brand}'

CALLS_TO_ACTION = {
    'students': '📚 Find more tips for your studies at {website}!',
    'professionals': '💼 Discover more expert articles at {website}!',
    'general': '🔍 More great articles are waiting at {website}!',
}
DEFAULT_CALL_TO_ACTION = '👉 Visit {website} for more!'

SWIPE_PROMPT = 'Swipe ➡️ to learn more!'

# Reserved for hook, call to action and hashtags in a post
POST_OVERHEAD = 200
STORY_TITLE_LIMIT = 50
REEL_FALLBACK_LENGTH = 100
CAROUSEL_INTRO_LENGTH = 150
CAROUSEL_POINTS = 5


def _compose(*parts: str) -> str:
    return '\n\n'.join(part for part in parts if part).strip()


class ContentAdapter:
    """
    Turns articles into post, story, reel and carousel content.

    Adaptation is deterministic apart from the generated id and timestamp
    and makes no network calls.
    """
    def __init__(self, analyzer: Optional[TextAnalyzer] = None, brand_name: Optional[str] = None,
                 website: Optional[str] = None, max_images: Optional[int] = None):
        self.analyzer = analyzer or TextAnalyzer()
        self.brand_name = brand_name or get_config('branding.brand_name', 'reelpress')
        self.website = website or get_config('branding.website', 'reelpress.example.com')
        self.max_images = max_images or get_config('adaptation.max_images', 10)

    def adapt(self, article: Article, options: AdaptationOptions) -> ModifiedContent:
        """
        Adapt an article for the format named in ``options``.

        Args:
            article: The source article
            options: Target format and style

        Returns:
            A new ModifiedContent; never cached or reused
        """
        logger.info(f"Adapting article {article.id} as {options.target_format}: {article.title}")

        captions: Tuple[str, ...] = ()
        if options.target_format == 'post':
            text = self.create_post(article, options)
        elif options.target_format == 'story':
            text = self.create_story(article, options)
        elif options.target_format == 'reel':
            text = self.create_reel(article, options)
        else:
            text, carousel_captions = self.create_carousel(article, options)
            captions = tuple(carousel_captions)

        content = ModifiedContent(
            id=content_id_for(article.id, options.target_format),
            original_article_id=article.id,
            format=options.target_format,
            content=ContentBody(
                text=text,
                images=article.images.all[:self.max_images],
                captions=captions,
            ),
            metadata=ContentMetadata(
                created_at=datetime.now(timezone.utc),
                source_url=article.url,
            ),
            publication=PublicationState(ready=True),
        )

        logger.debug(f"Created {content.format} content {content.id} ({len(text)} chars)")
        return content

    # Formats

    def create_post(self, article: Article, options: AdaptationOptions) -> str:
        hook = self.create_hook(article.title, options.tone)
        body = self.analyzer.summarize(article.content.text, options.max_length - POST_OVERHEAD)
        cta = self.call_to_action(options.target_audience) if options.include_call_to_action else ''
        hashtags = self._hashtags(article, 10) if options.include_hashtags else ''
        return _compose(hook, body, cta, hashtags)

    def create_story(self, article: Article, options: AdaptationOptions) -> str:
        title = article.title
        if len(title) > STORY_TITLE_LIMIT:
            title = title[:STORY_TITLE_LIMIT - 3] + '...'
        key_points = self.analyzer.extract_key_points(article.content.text, 3)
        hashtags = self._hashtags(article, 5) if options.include_hashtags else ''
        return _compose(f"📚 {title}", '\n\n'.join(key_points), hashtags)

    def create_reel(self, article: Article, options: AdaptationOptions) -> str:
        hook = self.create_hook(article.title, 'motivational')
        if article.social.key_quotes:
            quote = article.social.key_quotes[0]
        else:
            quote = self.analyzer.summarize(article.content.text, REEL_FALLBACK_LENGTH)
        cta = self.call_to_action(options.target_audience) if options.include_call_to_action else ''
        hashtags = self._hashtags(article, 8) if options.include_hashtags else ''
        return _compose(hook, f'"{quote}"' if quote else '', cta, hashtags)

    def create_carousel(self, article: Article, options: AdaptationOptions) -> Tuple[str, List[str]]:
        """
        Main caption plus one caption per slide.

        Slides are numbered ``i/N`` where the last slide carries the call to
        action, so ``N`` is the number of key points plus one.
        """
        hook = self.create_hook(article.title, options.tone)
        intro = self.analyzer.summarize(article.content.text, CAROUSEL_INTRO_LENGTH)
        cta = self.call_to_action(options.target_audience)
        hashtags = self._hashtags(article, 10) if options.include_hashtags else ''
        main_text = _compose(hook, intro, SWIPE_PROMPT, cta if options.include_call_to_action else '', hashtags)

        key_points = self.analyzer.extract_key_points(article.content.text, CAROUSEL_POINTS)
        total = len(key_points) + 1
        captions = [f"{index}/{total}: {point}" for index, point in enumerate(key_points, start=1)]
        captions.append(f"{total}/{total}: {cta}")

        return main_text, captions

    # Building blocks

    def create_hook(self, title: str, tone: str) -> str:
        template = HOOKS.get(tone, DEFAULT_HOOK)
        return template.format(title=title, brand=self.brand_name)

    def call_to_action(self, audience: str) -> str:
        template = CALLS_TO_ACTION.get(audience, DEFAULT_CALL_TO_ACTION)
        return template.format(website=self.website)

    @staticmethod
    def _hashtags(article: Article, limit: int) -> str:
        return ' '.join(article.social.hashtags[:limit])
