"""Tests for Twitter/X extraction through the tiered fallback."""

from unittest.mock import AsyncMock, patch

import pytest

from url_ingest.errors import InvalidUrl, NoContentExtracted, UpstreamFetchFailed
from url_ingest.extraction.twitter import (
    OEMBED_ENDPOINT,
    SYNDICATION_ENDPOINT,
    TwitterExtractor,
    parse_nitter_page,
)
from url_ingest.models.content import PlatformTag

URL = "https://x.com/jack/status/20"

NITTER_SINGLE = """
<div class="tweet-header"><a class="username" href="/jack" title="@jack">@jack</a></div>
<span class="tweet-date"><a href="/jack/status/20" title="Mar 21, 2006 · 8:50 PM UTC">Mar 21</a></span>
<div class="tweet-content media-body" dir="auto">just setting up my twttr</div>
"""

NITTER_THREAD = """
<a class="username" href="/dev" title="@dev">@dev</a>
<div class="tweet-content media-body">Thread 1/2: see https://dev.example/post</div>
<div class="tweet-content media-body">2/2 &amp; done</div>
"""


@pytest.fixture
def extractor(settings):
    return TwitterExtractor(settings)


def test_parse_nitter_single():
    """A single Nitter post yields its text and author."""
    post = parse_nitter_page(NITTER_SINGLE, "fallback")
    assert post.author == "jack"
    assert post.text == "just setting up my twttr"
    assert post.date == "Mar 21, 2006 · 8:50 PM UTC"
    assert post.is_thread is False


def test_parse_nitter_thread():
    """A Nitter thread is joined with separators and kept per post."""
    post = parse_nitter_page(NITTER_THREAD, "fallback")
    assert post.is_thread is True
    assert post.text == "Thread 1/2: see https://dev.example/post\n\n---\n\n2/2 & done"
    assert post.thread_texts == ["Thread 1/2: see https://dev.example/post", "2/2 & done"]


def test_parse_nitter_no_body():
    """A page without a post body yields nothing."""
    assert parse_nitter_page("<html>rate limited</html>", "jack") is None


async def test_nitter_success_skips_other_tiers(extractor):
    """A Nitter hit means syndication and oEmbed are never called."""
    fetch_text = AsyncMock(return_value=NITTER_SINGLE)
    fetch_json = AsyncMock()

    with (
        patch("url_ingest.extraction.twitter.fetch_text", fetch_text),
        patch("url_ingest.extraction.twitter.fetch_json", fetch_json),
    ):
        result = await extractor.extract(URL)

    assert result.platform == PlatformTag.MICROPOST
    assert result.title == "Tweet by @jack"
    assert result.author_url == "https://twitter.com/jack"
    assert result.transcript == "just setting up my twttr"
    assert result.raw["source"] == "nitter"
    assert result.raw["tweet_id"] == "20"
    assert fetch_text.await_args.args[0] == "https://nitter.one/jack/status/20"
    fetch_json.assert_not_awaited()


async def test_nitter_instances_tried_in_order(extractor):
    """Nitter hosts are tried in configured order."""
    fetch_text = AsyncMock(side_effect=[UpstreamFetchFailed("503"), NITTER_THREAD])

    with patch("url_ingest.extraction.twitter.fetch_text", fetch_text):
        result = await extractor.extract("https://twitter.com/dev/status/77")

    assert fetch_text.await_count == 2
    assert fetch_text.await_args.args[0] == "https://nitter.two/dev/status/77"
    assert result.raw["is_thread"] is True
    assert result.links == ["https://dev.example/post"]


async def test_syndication_tier(extractor):
    """Syndication JSON is used when Nitter fails."""
    fetch_text = AsyncMock(side_effect=UpstreamFetchFailed("down"))
    syndication = {
        "text": "hello from syndication",
        "user": {"screen_name": "jack"},
        "created_at": "2006-03-21T20:50:14.000Z",
        "favorite_count": 100,
        "retweet_count": 5,
        "reply_count": 3,
    }
    fetch_json = AsyncMock(return_value=syndication)

    with (
        patch("url_ingest.extraction.twitter.fetch_text", fetch_text),
        patch("url_ingest.extraction.twitter.fetch_json", fetch_json),
    ):
        result = await extractor.extract(URL)

    assert result.transcript == "hello from syndication"
    assert result.raw["likes"] == 100
    assert result.raw["source"] == "syndication"
    fetch_json.assert_awaited_once()
    assert fetch_json.await_args.args[0] == SYNDICATION_ENDPOINT
    assert fetch_json.await_args.kwargs["params"]["id"] == "20"


async def test_oembed_tier(extractor):
    """oEmbed is the last resort."""
    fetch_text = AsyncMock(side_effect=UpstreamFetchFailed("down"))
    oembed = {
        "author_name": "jack",
        "html": '<blockquote><p lang="en">oEmbed &amp; text</p>&mdash; jack</blockquote>',
    }
    fetch_json = AsyncMock(side_effect=[{"errors": []}, oembed])

    with (
        patch("url_ingest.extraction.twitter.fetch_text", fetch_text),
        patch("url_ingest.extraction.twitter.fetch_json", fetch_json),
    ):
        result = await extractor.extract(URL)

    assert result.transcript == "oEmbed & text"
    assert result.raw["source"] == "oembed"
    assert fetch_json.await_args.args[0] == OEMBED_ENDPOINT


async def test_all_tiers_fail(extractor):
    """Every tier failing means no content."""
    fetch_text = AsyncMock(side_effect=UpstreamFetchFailed("down"))
    fetch_json = AsyncMock(side_effect=UpstreamFetchFailed("down"))

    with (
        patch("url_ingest.extraction.twitter.fetch_text", fetch_text),
        patch("url_ingest.extraction.twitter.fetch_json", fetch_json),
    ):
        with pytest.raises(NoContentExtracted):
            await extractor.extract(URL)

    assert fetch_text.await_count == 2
    assert fetch_json.await_count == 2


async def test_description_truncated(extractor):
    """The description is capped at 280 characters."""
    long_text = "word " * 100
    fetch_text = AsyncMock(
        return_value=f'<div class="tweet-content">{long_text}</div>'
    )
    with patch("url_ingest.extraction.twitter.fetch_text", fetch_text):
        result = await extractor.extract(URL)

    assert len(result.description) == 280
    assert result.author == "jack"


async def test_invalid_url(extractor):
    """A URL without a status id is rejected."""
    with pytest.raises(InvalidUrl):
        await extractor.extract("https://x.com/jack")
