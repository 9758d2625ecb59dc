"""Tests for URL platform routing."""

import pytest

from url_ingest.extraction.router import (
    describe,
    extract_status_id,
    extract_video_id,
    is_supported,
    platform_name,
    route,
)
from url_ingest.models.content import PlatformTag


def test_youtube_watch_url():
    result = route("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert result.platform == PlatformTag.VIDEO
    assert result.id == "dQw4w9WgXcQ"


def test_youtube_short_url():
    assert route("https://youtu.be/dQw4w9WgXcQ").id == "dQw4w9WgXcQ"


def test_youtube_shorts_url():
    result = route("https://www.youtube.com/shorts/dQw4w9WgXcQ")
    assert result.platform == PlatformTag.VIDEO
    assert result.id == "dQw4w9WgXcQ"


def test_youtube_with_extra_params():
    url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=120&list=PLxxx"
    assert route(url).id == "dQw4w9WgXcQ"


def test_twitter_status_url():
    result = route("https://twitter.com/jack/status/20")
    assert result.platform == PlatformTag.MICROPOST
    assert result.id == "20"


def test_x_status_url():
    result = route("https://x.com/someone/status/1234567890123")
    assert result.platform == PlatformTag.MICROPOST
    assert result.id == "1234567890123"


def test_twitter_profile_is_article():
    """A profile page has no status segment, so it falls through to article."""
    assert route("https://x.com/someone").platform == PlatformTag.ARTICLE


@pytest.mark.parametrize(
    "url",
    [
        "https://www.tiktok.com/@user.name/video/7234567890123456789",
        "https://www.tiktok.com/t/ZTRabc123/",
        "https://vm.tiktok.com/ZMabc123/",
    ],
)
def test_tiktok_urls(url):
    assert route(url).platform == PlatformTag.SHORTVIDEO


def test_tiktok_video_id_captured():
    assert route("https://www.tiktok.com/@user/video/7234567890").id == "7234567890"


@pytest.mark.parametrize("kind", ["p", "reel", "reels"])
def test_instagram_urls(kind):
    result = route(f"https://www.instagram.com/{kind}/Cx1_ab-9/")
    assert result.platform == PlatformTag.IMAGEVIDEO
    assert result.id == "Cx1_ab-9"


@pytest.mark.parametrize(
    "url",
    [
        "https://cdn.example.com/episodes/42.mp3",
        "https://cdn.example.com/episodes/42.MP3?token=abc",
        "https://cdn.example.com/episodes/42.m4a",
        "https://anchor.fm/show/episodes/ep-1",
        "https://podcasts.apple.com/us/podcast/show/id123?i=456",
        "https://open.spotify.com/episode/4rOoJ6Egrf8K2IrywzwOMk",
    ],
)
def test_podcast_urls(url):
    result = route(url)
    assert result.platform == PlatformTag.AUDIOEPISODE
    assert result.id is None


def test_mp3_in_path_middle_is_article():
    """.mp3 must end the path (or precede the query) to count as audio."""
    assert route("https://example.com/file.mp3.html").platform == PlatformTag.ARTICLE


def test_generic_url_is_article():
    result = route("https://example.com/blog/post")
    assert result.platform == PlatformTag.ARTICLE
    assert result.id is None


def test_bare_domain_is_article():
    assert route("https://nytimes.com").platform == PlatformTag.ARTICLE


def test_surrounding_whitespace_trimmed():
    result = route("  https://youtu.be/dQw4w9WgXcQ \n")
    assert result.url == "https://youtu.be/dQw4w9WgXcQ"
    assert result.platform == PlatformTag.VIDEO


@pytest.mark.parametrize(
    "url",
    ["", "not a url", "ftp://example.com/file", "example.com/page", "http://", "https://[::1"],
)
def test_malformed_is_unknown(url):
    """Unparseable or non-http input routes to unknown instead of raising."""
    assert route(url).platform == PlatformTag.UNKNOWN


def test_non_string_is_unknown():
    assert route(None).platform == PlatformTag.UNKNOWN


def test_earlier_platform_wins():
    """A status URL that also ends in .mp3 is still a micropost."""
    assert route("https://x.com/a/status/99?f=.mp3").platform == PlatformTag.MICROPOST


def test_extract_video_id_invalid():
    assert extract_video_id("https://example.com/page") is None


def test_extract_status_id():
    assert extract_status_id("https://twitter.com/a/status/555") == "555"
    assert extract_status_id("https://twitter.com/a") is None


def test_platform_names():
    assert platform_name(PlatformTag.VIDEO) == "YouTube"
    assert platform_name(PlatformTag.MICROPOST) == "Twitter/X"
    assert platform_name(PlatformTag.UNKNOWN) == "Unknown"


def test_is_supported():
    assert is_supported("https://example.com") is True
    assert is_supported("garbage") is False


def test_describe():
    assert describe("https://vm.tiktok.com/ZMabc/") == {
        "platform": "shortvideo",
        "platform_name": "TikTok",
        "supported": True,
    }
    assert describe("nope")["supported"] is False
