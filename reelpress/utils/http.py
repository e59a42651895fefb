"""
HTTP utilities for reelpress.
"""
import asyncio
import time
import logging
from collections import defaultdict
from typing import Optional
from urllib.parse import urlparse

from reelpress.config import get_config

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}


def domain_of(url: str) -> str:
    return urlparse(url).netloc


class RateLimiter:
    """
    Per-domain politeness for article fetches.

    Requests to the same domain are spaced by at least ``1 / requests_per_second``
    seconds; domains that keep failing get a growing extra delay that decays
    again on success. Different domains never wait on each other.
    """
    def __init__(self, requests_per_second: Optional[float] = None,
                 failure_threshold: int = 3, max_backoff: float = 60.0):
        rate = requests_per_second if requests_per_second is not None else \
            get_config('extraction.requests_per_second', 1)
        self.min_interval = 1.0 / rate if rate and rate > 0 else 0.0
        self.failure_threshold = failure_threshold
        self.max_backoff = max_backoff
        self.last_requests = defaultdict(float)
        self.locks = defaultdict(asyncio.Lock)
        self.failure_counts = defaultdict(int)
        self.penalties = defaultdict(float)

    async def acquire(self, domain: str) -> None:
        """
        Wait until a request to ``domain`` is allowed.

        Args:
            domain: The domain to rate limit
        """
        async with self.locks[domain]:
            elapsed = time.monotonic() - self.last_requests[domain]
            wait_time = max(self.min_interval, self.penalties[domain]) - elapsed

            if wait_time > 0:
                logger.debug(f"Rate limiting {domain}, waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)

            self.last_requests[domain] = time.monotonic()

    def report_success(self, domain: str) -> None:
        self.failure_counts[domain] = 0
        if self.penalties[domain] > self.min_interval:
            self.penalties[domain] = max(self.min_interval, self.penalties[domain] * 0.8)

    def report_failure(self, domain: str) -> None:
        self.failure_counts[domain] += 1

        if self.failure_counts[domain] >= self.failure_threshold:
            current = self.penalties[domain] or max(self.min_interval, 1.0)
            self.penalties[domain] = min(self.max_backoff, current * 2.0)
            logger.warning(
                f"Increased delay for {domain} to {self.penalties[domain]:.2f}s "
                f"after {self.failure_counts[domain]} failures"
            )
