"""HTML metadata helpers (Open Graph, Twitter card, meta tags, bylines)."""

import re

from bs4 import BeautifulSoup

BYLINE_SELECTORS = [
    ".author",
    ".byline",
    '[rel="author"]',
    ".post-author",
    ".article-author",
    '[itemprop="author"]',
]

_BY_PREFIX = re.compile(r"^by\s+", re.IGNORECASE)


def parse_html(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def meta_content(soup: BeautifulSoup, name: str) -> str | None:
    """Content of ``<meta property=name>`` (Open Graph) or ``<meta name=name>``."""
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: name})
        if tag is not None:
            content = (tag.get("content") or "").strip()
            return content or None
    return None


def first_meta(soup: BeautifulSoup, *names: str) -> str | None:
    """First non-empty meta value among ``names``, in the given precedence."""
    for name in names:
        value = meta_content(soup, name)
        if value:
            return value
    return None


def page_title(soup: BeautifulSoup) -> str | None:
    if soup.title and soup.title.string:
        return soup.title.string.strip() or None
    return None


def byline_author(soup: BeautifulSoup) -> str | None:
    """Author from common byline markup, with a leading "By " removed."""
    for selector in BYLINE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = element.get_text(" ", strip=True)
        if text:
            return _BY_PREFIX.sub("", text).strip() or None
    return None
