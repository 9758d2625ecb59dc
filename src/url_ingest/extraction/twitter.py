"""Twitter/X posts and threads through a three-tier fallback.

Tiers, strictly in order, first body text wins:
1. Nitter mirror front-ends (rendered HTML, detects threads)
2. The public syndication endpoint (structured JSON with counts)
3. The oEmbed endpoint (HTML snippet, text only)
"""

import logging
import re
from dataclasses import dataclass, field

from url_ingest.config import Settings
from url_ingest.errors import InvalidUrl, NoContentExtracted, UpstreamFetchFailed
from url_ingest.extraction.embeds import twitter_embed
from url_ingest.extraction.fallback import first_success
from url_ingest.extraction.text import extract_links, strip_html
from url_ingest.fetch import fetch_json, fetch_text
from url_ingest.models.content import ExtractedContent, PlatformTag

logger = logging.getLogger(__name__)

TWITTER_PATTERN = re.compile(r"(?:twitter\.com|x\.com)/(\w+)/status/(\d+)")

SYNDICATION_ENDPOINT = "https://cdn.syndication.twimg.com/tweet-result"
OEMBED_ENDPOINT = "https://publish.twitter.com/oembed"

THREAD_SEPARATOR = "\n\n---\n\n"
DESCRIPTION_CHARS = 280

_NITTER_BODY = re.compile(r'<div class="tweet-content[^"]*"[^>]*>(.*?)</div>', re.DOTALL)
_NITTER_AUTHOR = re.compile(r'<a class="username"[^>]*>@(\w+)</a>')
_NITTER_DATE = re.compile(r'<span class="tweet-date"[^>]*><a[^>]*title="([^"]+)"')
_OEMBED_PARAGRAPH = re.compile(r"<p[^>]*>(.*?)</p>", re.DOTALL)


@dataclass
class PostData:
    """Body and metadata recovered by one tier."""

    author: str
    text: str
    date: str | None = None
    likes: int | None = None
    retweets: int | None = None
    replies: int | None = None
    is_thread: bool = False
    thread_texts: list[str] = field(default_factory=list)
    tier: str = ""


def parse_nitter_page(html: str, fallback_author: str) -> PostData | None:
    """Author, body and date from a Nitter status page; None without a body.

    Several ``tweet-content`` blocks on the page mean a thread; their texts
    are joined with a visible separator.
    """
    blocks = [strip_html(m) for m in _NITTER_BODY.findall(html)]
    blocks = [b for b in blocks if b]
    if not blocks:
        return None

    author_match = _NITTER_AUTHOR.search(html)
    date_match = _NITTER_DATE.search(html)
    is_thread = len(blocks) > 1
    return PostData(
        author=author_match.group(1) if author_match else fallback_author,
        text=THREAD_SEPARATOR.join(blocks) if is_thread else blocks[0],
        date=date_match.group(1) if date_match else None,
        is_thread=is_thread,
        thread_texts=blocks if is_thread else [],
        tier="nitter",
    )


class TwitterExtractor:
    platform = PlatformTag.MICROPOST

    def __init__(self, settings: Settings):
        self.settings = settings

    def can_handle(self, url: str) -> bool:
        return TWITTER_PATTERN.search(url) is not None

    async def extract(self, url: str) -> ExtractedContent:
        """Extract a post (or thread) through the tiered fallback.

        Raises:
            InvalidUrl: not a status URL.
            NoContentExtracted: every tier failed or returned no text.
        """
        match = TWITTER_PATTERN.search(url)
        if match is None:
            raise InvalidUrl(f"Invalid Twitter URL: {url}")
        username, status_id = match.group(1), match.group(2)

        post = await first_success(
            [
                ("nitter", lambda: self._try_nitter(username, status_id)),
                ("syndication", lambda: self._try_syndication(status_id)),
                ("oembed", lambda: self._try_oembed(url)),
            ],
            url=url,
        )
        if post is None:
            raise NoContentExtracted(
                "Could not extract tweet. Twitter may be blocking access."
            )

        logger.info("Post extracted", extra={"url": url, "tier": post.tier})
        return ExtractedContent(
            platform=PlatformTag.MICROPOST,
            url=url,
            title=f"Tweet by @{post.author}",
            author=post.author,
            author_url=f"https://twitter.com/{post.author}",
            date=post.date,
            transcript=post.text,
            description=post.text[:DESCRIPTION_CHARS],
            links=extract_links(post.text),
            embed_markup=twitter_embed(url),
            raw={
                "tweet_id": status_id,
                "likes": post.likes,
                "retweets": post.retweets,
                "replies": post.replies,
                "is_thread": post.is_thread,
                "thread_texts": post.thread_texts or None,
                "source": post.tier,
            },
        )

    async def _try_nitter(self, username: str, status_id: str) -> PostData | None:
        for instance in self.settings.nitter_instances:
            try:
                html = await fetch_text(
                    f"https://{instance}/{username}/status/{status_id}",
                    timeout=self.settings.http_timeout,
                    user_agent=self.settings.user_agent,
                )
            except UpstreamFetchFailed as exc:
                logger.debug("Nitter instance %s failed: %s", instance, exc)
                continue
            post = parse_nitter_page(html, username)
            if post is not None:
                return post
        return None

    async def _try_syndication(self, status_id: str) -> PostData | None:
        data = await fetch_json(
            SYNDICATION_ENDPOINT,
            params={"id": status_id, "lang": "en"},
            timeout=self.settings.http_timeout,
            user_agent=self.settings.user_agent,
        )
        if not isinstance(data, dict) or not data.get("text"):
            return None
        return PostData(
            author=(data.get("user") or {}).get("screen_name") or "unknown",
            text=data["text"],
            date=data.get("created_at"),
            likes=data.get("favorite_count"),
            retweets=data.get("retweet_count"),
            replies=data.get("reply_count"),
            tier="syndication",
        )

    async def _try_oembed(self, url: str) -> PostData | None:
        data = await fetch_json(
            OEMBED_ENDPOINT,
            params={"url": url},
            timeout=self.settings.http_timeout,
        )
        snippet = data.get("html") if isinstance(data, dict) else None
        if not snippet:
            return None
        paragraph = _OEMBED_PARAGRAPH.search(snippet)
        text = strip_html(paragraph.group(1)) if paragraph else ""
        if not text:
            return None
        return PostData(
            author=data.get("author_name") or "unknown",
            text=text,
            tier="oembed",
        )
