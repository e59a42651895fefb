"""
Batch article processing for reelpress.
"""
import asyncio
import logging
from typing import Callable, Iterable, List, Optional

from reelpress.config import get_config
from reelpress.core.article import ArticleLink
from reelpress.core.extractor import ArticleExtractor, ExtractionOutcome, ParsingOptions

logger = logging.getLogger(__name__)


class ContentProcessor:
    """
    Handles concurrent extraction of many article links.
    """
    def __init__(self, extractor: Optional[ArticleExtractor] = None, max_concurrent: Optional[int] = None):
        self.extractor = extractor or ArticleExtractor()
        self.max_concurrent = max_concurrent or get_config('extraction.max_concurrent', 5)

    async def process_links(
        self,
        links: Iterable[ArticleLink],
        options: Optional[ParsingOptions] = None,
        on_progress: Optional[Callable[[ExtractionOutcome], None]] = None,
    ) -> List[ExtractionOutcome]:
        """
        Extract every link, at most ``max_concurrent`` at a time.

        A failing link never aborts the batch; its outcome says what happened.

        Args:
            links: Links to extract
            options: Parsing options applied to every link
            on_progress: Called with each outcome as it completes

        Returns:
            Outcomes in the same order as ``links``
        """
        links = list(links)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def process_with_semaphore(link: ArticleLink) -> ExtractionOutcome:
            async with semaphore:
                try:
                    outcome = await self.extractor.extract_outcome(link, options)
                except Exception as e:
                    logger.exception(f"Unexpected error extracting {link.url}")
                    outcome = ExtractionOutcome(link, 'failed', error=e, attempts=1)
            if on_progress is not None:
                on_progress(outcome)
            return outcome

        outcomes = await asyncio.gather(*(process_with_semaphore(link) for link in links))

        extracted = sum(1 for o in outcomes if o.status == 'ok')
        skipped = sum(1 for o in outcomes if o.status == 'skipped')
        failed = [o for o in outcomes if o.status == 'failed']
        logger.info(f"Processed {len(outcomes)} links: {extracted} extracted, {skipped} skipped, {len(failed)} failed")
        for outcome in failed:
            logger.warning(f"Failed to extract {outcome.link.url}: {outcome.error}")

        return list(outcomes)

    async def close(self) -> None:
        await self.extractor.close()
