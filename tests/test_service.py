import pytest

from reelpress.core.adapter import ContentAdapter
from reelpress.core.content import AdaptationOptions
from reelpress.core.reel import ReelOptions, ReelTemplate
from reelpress.core.service import ReelService
from reelpress.errors import ServiceNotInitializedError

from tests.helpers import FakeProvider


@pytest.mark.asyncio
async def test_generation_requires_initialize(provider, article):
    service = ReelService(provider)
    assert not service.is_healthy()

    with pytest.raises(ServiceNotInitializedError):
        await service.generate_from_article(article)
    assert provider.requests == []

    await service.initialize()
    assert service.is_healthy()

    reel = await service.generate_from_article(article)
    assert reel.article_id == article.id


@pytest.mark.asyncio
async def test_failed_health_check(article):
    service = ReelService(FakeProvider(healthy=False))

    with pytest.raises(ConnectionError):
        await service.initialize()

    assert not service.is_healthy()
    with pytest.raises(ServiceNotInitializedError):
        await service.generate_from_article(article)


@pytest.mark.asyncio
async def test_custom_template_is_usable(provider, article):
    service = ReelService(provider)
    await service.initialize()

    service.add_custom_template(ReelTemplate(
        id="exam-countdown", name="Exam Countdown", description="Countdown to exam day", type="custom",
    ))
    assert "exam-countdown" in [t.id for t in service.available_templates()]

    reel = await service.generate_from_article(article, ReelOptions(template_id="exam-countdown"))
    assert reel.template_id == "exam-countdown"
    assert provider.requests[0].template_id == "exam-countdown"


@pytest.mark.asyncio
async def test_generate_from_content(provider, article):
    service = ReelService(provider)
    await service.initialize()

    content = ContentAdapter().adapt(article, AdaptationOptions(target_format="reel"))
    reel = await service.generate_from_content(content)

    assert reel.content_id == content.id
    assert reel.article_id == article.id


def test_available_templates(provider):
    assert len(ReelService(provider).available_templates()) == 4
