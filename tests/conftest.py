import pytest

from reelpress.core.article import ArticleLink
from reelpress.core.extractor import ArticleExtractor
from reelpress.utils.http import RateLimiter
from reelpress.utils.nlp import TextAnalyzer

from tests.helpers import ARTICLE_URL, SCRAPED_AT, FakeProvider, make_page


@pytest.fixture
def analyzer():
    return TextAnalyzer()


@pytest.fixture
def link():
    return ArticleLink(url=ARTICLE_URL)


@pytest.fixture
def parser():
    return ArticleExtractor(rate_limiter=RateLimiter(requests_per_second=0))


@pytest.fixture
def build_article(parser):
    """Parse a generated page into an Article."""
    def _build(url: str = ARTICLE_URL, **page_kwargs):
        article = parser.parse(make_page(**page_kwargs), ArticleLink(url=url), scraped_at=SCRAPED_AT)
        assert article is not None
        return article
    return _build


@pytest.fixture
def article(build_article):
    return build_article()


@pytest.fixture
def provider():
    return FakeProvider()
