import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple, Union

from aiohttp import web
from aiohttp.test_utils import TestServer

from reelpress.core.article import ArticleLink
from reelpress.core.extractor import ArticleExtractor
from reelpress.core.reel import RenderRequest, RenderResult
from reelpress.providers.base import VideoRenderingProvider
from reelpress.utils.http import RateLimiter

ARTICLE_URL = "https://magazine.example.com/study/exam-preparation/"
SCRAPED_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

BODY_PARAGRAPHS = [
    "Preparing for your first exam at university can feel overwhelming.",
    "It is important to start your revision at least four weeks before the exam date.",
    "Many students underestimate how long it takes to work through their lecture notes.",
    "A realistic schedule with short breaks keeps your concentration high.",
    "Group sessions help you discover gaps in your understanding early.",
    "Sleep and regular exercise have a measurable effect on memory.",
]


def make_page(
    title: Optional[str] = "How to Prepare for Your First Exam",
    paragraphs: Sequence[str] = BODY_PARAGRAPHS,
    images: Sequence[str] = ("/uploads/cover.jpg", "/uploads/desk.jpg"),
    subtitle: Optional[str] = "A practical guide for first-year students",
    author: Optional[str] = "Jamie Rivera",
    published: Optional[str] = "2024-02-14T09:30:00+00:00",
    category: Optional[str] = "Study Tips",
    tags: Sequence[str] = ("exam", "revision"),
    content_class: str = "entry-content",
) -> str:
    """Build an article page with WordPress-style magazine markup."""
    parts = ["<html><head><title>Magazine</title></head><body>", "<article>"]
    if title is not None:
        parts.append(f'<header class="entry-header"><h1 class="entry-title">{title}</h1></header>')
    if subtitle:
        parts.append(f'<p class="subtitle">{subtitle}</p>')
    if author:
        parts.append(f'<span class="author">{author}</span>')
    if published:
        parts.append(f'<time datetime="{published}">February 14, 2024</time>')
    if category:
        parts.append(f'<span class="entry-category">{category}</span>')
    parts.append(f'<div class="{content_class}">')
    for index, src in enumerate(images):
        parts.append(f'<img src="{src}" alt="Image {index + 1}">')
    for paragraph in paragraphs:
        parts.append(f"<p>{paragraph}</p>")
    parts.append("</div>")
    if tags:
        parts.append('<div class="tags">' + "".join(f'<a href="#">{t}</a>' for t in tags) + "</div>")
    parts.append("</article></body></html>")
    return "\n".join(parts)


class ScriptedExtractor(ArticleExtractor):
    """
    Extractor whose single-attempt fetch replays a script instead of using the network.

    Each script entry is either page content to return or an exception to raise.
    """
    def __init__(self, script: List[Union[str, Exception]], **kwargs):
        kwargs.setdefault("backoff_base", 0.001)
        kwargs.setdefault("rate_limiter", RateLimiter(requests_per_second=0))
        super().__init__(**kwargs)
        self.script = list(script)
        self.calls: List[str] = []

    async def _fetch_once(self, url: str) -> str:
        self.calls.append(url)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, Exception):
            raise step
        return step


class FakeProvider(VideoRenderingProvider):
    """In-memory rendering provider recording every request."""
    def __init__(self, error: Optional[Exception] = None, healthy: bool = True):
        self.error = error
        self.healthy = healthy
        self.requests: List[RenderRequest] = []

    async def render(self, request: RenderRequest) -> RenderResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return RenderResult(
            id=f"render-{len(self.requests)}",
            url=f"https://cdn.example.com/renders/{len(self.requests)}.{request.output_format}",
            thumbnail_url=f"https://cdn.example.com/renders/{len(self.requests)}.jpg",
            width=request.width,
            height=request.height,
            duration=15.0,
            format=request.output_format,
            size=2_048_000,
        )

    async def health_check(self) -> None:
        if not self.healthy:
            raise ConnectionError("rendering provider unreachable")


class MappedExtractor(ScriptedExtractor):
    """Extractor serving a separate script per URL and tracking concurrency."""
    def __init__(self, scripts, delay: float = 0.0, **kwargs):
        super().__init__([""], **kwargs)
        self.scripts = {url: list(steps) for url, steps in scripts.items()}
        self.delay = delay
        self.active = 0
        self.max_active = 0

    async def _fetch_once(self, url: str) -> str:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            steps = self.scripts[url]
            step = steps.pop(0) if len(steps) > 1 else steps[0]
            if isinstance(step, Exception):
                raise step
            return step
        finally:
            self.active -= 1


def _replay(responses: List[Tuple[int, bytes]]):
    async def handler(request: web.Request) -> web.Response:
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        return web.Response(status=status, body=body, content_type="text/html", charset="utf-8")
    return handler


@asynccontextmanager
async def serve_pages(pages: Dict[str, List[Tuple[int, Union[str, bytes]]]]):
    """
    Local HTTP server for real fetches.

    ``pages`` maps a path to the (status, body) responses it replays in
    order, repeating the last one.
    """
    app = web.Application()
    for path, responses in pages.items():
        encoded = [(status, body.encode("utf-8") if isinstance(body, str) else body) for status, body in responses]
        app.router.add_get(path, _replay(encoded))

    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()
