"""
Reel service coordinating a rendering provider and the generator.
"""
import logging
from typing import Optional, Tuple

from reelpress.core.article import Article
from reelpress.core.content import ModifiedContent
from reelpress.core.generator import ReelGenerator
from reelpress.core.reel import GeneratedReel, ReelOptions, ReelTemplate
from reelpress.core.templates import TemplateRegistry
from reelpress.errors import ServiceNotInitializedError
from reelpress.providers.base import VideoRenderingProvider

logger = logging.getLogger(__name__)


class ReelService:
    """
    Entry point for reel generation.

    ``initialize()`` must succeed before any reel is generated.
    """
    def __init__(self, provider: VideoRenderingProvider, registry: Optional[TemplateRegistry] = None):
        self.provider = provider
        self.registry = registry if registry is not None else TemplateRegistry()
        self.generator = ReelGenerator(provider, self.registry)
        self._initialized = False

    async def initialize(self) -> None:
        logger.info("Initializing reel service...")
        try:
            await self.provider.health_check()
        except Exception as e:
            logger.error(f"Failed to initialize reel service: {e!r}")
            raise
        self._initialized = True
        logger.info("Reel service initialized")

    def is_healthy(self) -> bool:
        return self._initialized

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise ServiceNotInitializedError("ReelService.initialize() must be called before generating reels")

    async def generate_from_article(self, article: Article, options: Optional[ReelOptions] = None) -> GeneratedReel:
        self._ensure_initialized()
        return await self.generator.generate_from_article(article, options)

    async def generate_from_content(self, content: ModifiedContent,
                                    options: Optional[ReelOptions] = None) -> GeneratedReel:
        self._ensure_initialized()
        return await self.generator.generate_from_content(content, options)

    def available_templates(self) -> Tuple[ReelTemplate, ...]:
        return self.registry.list()

    def add_custom_template(self, template: ReelTemplate) -> None:
        self.registry.register(template)
