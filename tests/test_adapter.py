import re
from dataclasses import replace

import pytest

from reelpress.core.adapter import SWIPE_PROMPT, ContentAdapter
from reelpress.core.content import AdaptationOptions

from tests.helpers import ARTICLE_URL, BODY_PARAGRAPHS

CTA = "📚 Find more tips for your studies at study.example.com!"


@pytest.fixture
def adapter(analyzer):
    return ContentAdapter(analyzer, brand_name="Campus", website="study.example.com")


def test_post(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(target_format="post", tone="casual"))

    assert content.format == "post"
    assert content.original_article_id == article.id
    assert content.content.text == "\n\n".join([
        'Hey! 👋 Have you heard about "How to Prepare for Your First Exam"? Here\'s what you need to know!',
        " ".join(BODY_PARAGRAPHS),
        CTA,
        "#study #university #learning #uni #student #exam #lecture",
    ])
    assert content.content.captions == ()
    assert content.content.images == article.images.all


def test_post_body_fits_length_limit(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(max_length=300, include_hashtags=False))
    parts = content.content.text.split("\n\n")
    assert parts[1] == BODY_PARAGRAPHS[0]
    assert len(parts[1]) <= 100


def test_post_without_room_for_body(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(max_length=150, include_hashtags=False,
                                                       include_call_to_action=False))
    assert content.content.text == adapter.create_hook(article.title, "casual")


def test_toggles(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(include_hashtags=False, include_call_to_action=False))
    assert "#" not in content.content.text
    assert "study.example.com" not in content.content.text


def test_unknown_tone_and_audience_fall_back(adapter, article):
    options = AdaptationOptions(tone="sarcastic", target_audience="aliens")
    text = adapter.adapt(article, options).content.text
    assert text.startswith('📚 "How to Prepare for Your First Exam" - now on Campus')
    assert "👉 Visit study.example.com for more!" in text


@pytest.mark.parametrize("tone, prefix", [
    ("professional", "📚 Expert insight:"),
    ("motivational", "💪 Level up with"),
    ("educational", "📝 Study notes:"),
])
def test_tones(adapter, tone, prefix):
    assert adapter.create_hook("Title", tone).startswith(prefix)


@pytest.mark.parametrize("audience, expected", [
    ("students", CTA),
    ("professionals", "💼 Discover more expert articles at study.example.com!"),
    ("general", "🔍 More great articles are waiting at study.example.com!"),
])
def test_calls_to_action(adapter, audience, expected):
    assert adapter.call_to_action(audience) == expected


def test_story(adapter, article):
    text = adapter.adapt(article, AdaptationOptions(target_format="story")).content.text
    parts = text.split("\n\n")

    assert parts[0] == "📚 How to Prepare for Your First Exam"
    assert parts[1:3] == [BODY_PARAGRAPHS[1], BODY_PARAGRAPHS[2]]
    assert len(parts) == 5
    assert parts[4] == "#study #university #learning #uni #student"


def test_story_truncates_long_title(adapter, build_article):
    article = build_article(title="A" * 60)
    text = adapter.adapt(article, AdaptationOptions(target_format="story")).content.text
    assert text.split("\n\n")[0] == "📚 " + "A" * 47 + "..."


def test_reel_uses_first_key_quote(adapter, article):
    text = adapter.adapt(article, AdaptationOptions(target_format="reel", tone="casual")).content.text
    parts = text.split("\n\n")

    assert parts[0].startswith("💪 Level up with")
    assert parts[1] == f'"{article.social.key_quotes[0]}"'
    assert parts[2] == CTA
    assert parts[3].split() == list(article.social.hashtags[:8])


def test_reel_without_quotes_uses_summary(adapter, article):
    article = replace(article, social=replace(article.social, key_quotes=()))
    text = adapter.adapt(article, AdaptationOptions(target_format="reel")).content.text
    assert text.split("\n\n")[1] == f'"{BODY_PARAGRAPHS[0]}"'


def test_carousel(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(target_format="carousel"))
    captions = content.content.captions

    assert len(captions) == 6
    assert [c.split(":")[0] for c in captions] == [f"{i}/6" for i in range(1, 7)]
    assert captions[0] == f"1/6: {BODY_PARAGRAPHS[1]}"
    assert captions[1] == f"2/6: {BODY_PARAGRAPHS[2]}"
    assert captions[-1] == f"6/6: {CTA}"

    text = content.content.text
    assert text.startswith("Hey! 👋")
    assert SWIPE_PROMPT in text
    assert CTA in text


def test_carousel_keeps_final_slide_without_cta_in_caption(adapter, article):
    content = adapter.adapt(article, AdaptationOptions(target_format="carousel", include_call_to_action=False))
    assert CTA not in content.content.text
    assert content.content.captions[-1] == f"6/6: {CTA}"


def test_images_are_capped(analyzer, article):
    adapter = ContentAdapter(analyzer, max_images=1)
    content = adapter.adapt(article, AdaptationOptions())
    assert content.content.images == (article.images.featured,)


def test_every_adaptation_gets_a_fresh_id(adapter, article):
    options = AdaptationOptions()
    ids = [adapter.adapt(article, options).id for _ in range(20)]

    assert len(set(ids)) == 20
    assert all(re.fullmatch(rf"{article.id}_post_\d+", i) for i in ids)


def test_metadata(adapter, article):
    content = adapter.adapt(article, AdaptationOptions())
    assert content.metadata.source_url == ARTICLE_URL
    assert content.metadata.generated is True
    assert content.metadata.approved is False
    assert content.publication.ready is True
    assert content.publication.published_at is None


@pytest.mark.parametrize("kwargs", [
    {"target_format": "tweet"},
    {"max_length": 0},
    {"max_length": -10},
])
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        AdaptationOptions(**kwargs)
