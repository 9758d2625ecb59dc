"""Article extraction: page metadata via BeautifulSoup, main text via trafilatura."""

import asyncio
import logging
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from trafilatura import bare_extraction, extract

from url_ingest.config import Settings
from url_ingest.errors import InvalidUrl, NoContentExtracted
from url_ingest.extraction.embeds import article_card
from url_ingest.extraction.html import byline_author, first_meta, page_title, parse_html
from url_ingest.extraction.paywall import paywalled_domain
from url_ingest.extraction.router import is_http_url
from url_ingest.extraction.text import dedupe_links, format_iso_date
from url_ingest.fetch import fetch_text
from url_ingest.models.content import ExtractedContent, PlatformTag

logger = logging.getLogger(__name__)

_EXCERPT_CHARS = 200


@dataclass
class MainContent:
    """Readability-style result for the page's primary content."""

    text: str
    title: str | None = None
    excerpt: str | None = None
    date: str | None = None
    links: list[str] = field(default_factory=list)


def _content_links(html: str, url: str) -> list[str]:
    """Anchor targets inside the main content, http(s) only, first-seen order."""
    xml = extract(html, url=url, output_format="xml", include_links=True)
    if not xml:
        return []
    soup = BeautifulSoup(xml, "html.parser")
    targets = (ref.get("target", "") for ref in soup.find_all("ref"))
    return dedupe_links(t for t in targets if t.startswith(("http://", "https://")))


def extract_main_content(html: str, url: str) -> MainContent | None:
    """Run trafilatura over the page. None when no main text is found.

    Synchronous; callers run it in a worker thread.
    """
    doc = bare_extraction(html, url=url)
    if doc is None or not (doc.text or "").strip():
        return None
    text = doc.text.strip()
    return MainContent(
        text=text,
        title=doc.title or None,
        excerpt=doc.description or text[:_EXCERPT_CHARS],
        date=doc.date or None,
        links=_content_links(html, url),
    )


class ArticleExtractor:
    """Generic web article extractor, also the registry's default."""

    platform = PlatformTag.ARTICLE

    def __init__(self, settings: Settings):
        self.settings = settings

    def can_handle(self, url: str) -> bool:
        return is_http_url(url.strip())

    async def extract(self, url: str) -> ExtractedContent:
        """Fetch and extract an article.

        Raises:
            InvalidUrl: not an http(s) URL.
            UpstreamFetchFailed: the page could not be fetched.
            NoContentExtracted: no main content (paywall or client-side rendering).
        """
        if not self.can_handle(url):
            raise InvalidUrl(f"Not an http(s) URL: {url}")

        html = await fetch_text(
            url, timeout=self.settings.http_timeout, user_agent=self.settings.user_agent
        )

        # bs4 and trafilatura are synchronous -- keep them off the event loop
        soup = await asyncio.to_thread(parse_html, html)
        main = await asyncio.to_thread(extract_main_content, html, url)
        if main is None:
            raise NoContentExtracted(
                f"Could not extract article content from {url}. "
                "The page may be paywalled or rendered client-side."
            )

        parsed = urlparse(url)
        hostname = (parsed.hostname or "").removeprefix("www.")
        site_name = first_meta(soup, "og:site_name") or hostname

        title = (
            first_meta(soup, "og:title", "twitter:title")
            or main.title
            or page_title(soup)
            or "Untitled"
        )
        description = (
            first_meta(soup, "og:description", "twitter:description", "description")
            or main.excerpt
        )
        author = (
            first_meta(soup, "article:author", "twitter:creator", "author")
            or byline_author(soup)
            or site_name
        )
        date = first_meta(soup, "article:published_time", "date", "pubdate") or main.date
        image = first_meta(soup, "og:image", "twitter:image")
        paywall = paywalled_domain(url)

        logger.info(
            "Article extracted",
            extra={"url": url, "characters": len(main.text), "links": len(main.links)},
        )
        return ExtractedContent(
            platform=PlatformTag.ARTICLE,
            url=url,
            title=title,
            author=author,
            author_url=f"{parsed.scheme}://{parsed.netloc}",
            date=format_iso_date(date),
            transcript=main.text,
            description=description,
            links=main.links,
            thumbnail_url=image,
            embed_markup=article_card(
                url, title=title, description=description, image=image, site_name=site_name
            ),
            raw={
                "site_name": site_name,
                "length": len(main.text),
                "excerpt": main.excerpt,
                "paywalled": paywall is not None,
            },
        )
