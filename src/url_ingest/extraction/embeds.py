"""Fixed embed snippets attached to extracted records.

Presentation layers may re-template these; the core only supplies a sane
default per platform.
"""

from html import escape
from urllib.parse import urlparse

from url_ingest.models.content import PlatformTag


def youtube_embed(video_id: str) -> str:
    return (
        f'<iframe width="560" height="315" src="https://www.youtube.com/embed/{escape(video_id)}" '
        'title="YouTube video player" frameborder="0" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; '
        'picture-in-picture; web-share" allowfullscreen></iframe>'
    )


def twitter_embed(url: str) -> str:
    return (
        f'<blockquote class="twitter-tweet"><a href="{escape(url)}"></a></blockquote>\n'
        '<script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>'
    )


def tiktok_embed(url: str) -> str:
    return (
        f'<blockquote class="tiktok-embed" cite="{escape(url)}" '
        'style="max-width: 605px; min-width: 325px;">'
        f'<section><a href="{escape(url)}"></a></section></blockquote>\n'
        '<script async src="https://www.tiktok.com/embed.js"></script>'
    )


def instagram_embed(url: str) -> str:
    return (
        f'<blockquote class="instagram-media" data-instgrm-permalink="{escape(url)}" '
        'data-instgrm-version="14" style="max-width:540px; min-width:326px; width:calc(100% - 2px);">'
        f'<a href="{escape(url)}"></a></blockquote>\n'
        '<script async src="//www.instagram.com/embed.js"></script>'
    )


def podcast_embed(url: str) -> str:
    """Spotify and Apple Podcasts players, else a plain audio element."""
    if "open.spotify.com/" in url:
        embed_url = url.replace("open.spotify.com/", "open.spotify.com/embed/", 1)
        return (
            f'<iframe style="border-radius:12px" src="{escape(embed_url)}" width="100%" '
            'height="152" frameBorder="0" allow="autoplay; clipboard-write; encrypted-media; '
            'fullscreen; picture-in-picture" loading="lazy"></iframe>'
        )
    if "podcasts.apple.com" in url:
        embed_url = url.replace("podcasts.apple.com", "embed.podcasts.apple.com", 1)
        return (
            '<iframe allow="autoplay *; encrypted-media *; fullscreen *; clipboard-write" '
            'frameborder="0" height="175" '
            'style="width:100%;max-width:660px;overflow:hidden;border-radius:10px;" '
            f'src="{escape(embed_url)}"></iframe>'
        )
    return (
        f'<audio controls style="width: 100%;"><source src="{escape(url)}" type="audio/mpeg"></audio>\n'
        f'<p><a href="{escape(url)}" target="_blank">Download audio</a></p>'
    )


def article_card(
    url: str,
    title: str | None = None,
    description: str | None = None,
    image: str | None = None,
    site_name: str | None = None,
) -> str:
    """Link-preview card for articles."""
    site = site_name or urlparse(url).hostname or url
    image_html = (
        f'<img src="{escape(image)}" alt="{escape(title or "Article thumbnail")}" '
        'style="width: 100%; max-height: 200px; object-fit: cover;">'
        if image
        else ""
    )
    desc_html = ""
    if description:
        snippet = description[:150] + ("..." if len(description) > 150 else "")
        desc_html = f'<p style="font-size: 14px; color: #666; margin: 0;">{escape(snippet)}</p>'
    return (
        '<div class="article-embed" style="border: 1px solid #e0e0e0; border-radius: 8px; '
        'overflow: hidden; max-width: 500px;">'
        f"{image_html}"
        '<div style="padding: 16px;">'
        f'<div style="font-size: 12px; color: #666;">{escape(site)}</div>'
        f'<a href="{escape(url)}" target="_blank">{escape(title or url)}</a>'
        f"{desc_html}</div></div>"
    )


def generic_link(url: str) -> str:
    return f'<a href="{escape(url)}" target="_blank">{escape(url)}</a>'


def embed_for(platform: PlatformTag, id_or_url: str) -> str:
    """Default embed for a platform; the video platform expects a video id."""
    if platform == PlatformTag.VIDEO:
        return youtube_embed(id_or_url)
    if platform == PlatformTag.MICROPOST:
        return twitter_embed(id_or_url)
    if platform == PlatformTag.SHORTVIDEO:
        return tiktok_embed(id_or_url)
    if platform == PlatformTag.IMAGEVIDEO:
        return instagram_embed(id_or_url)
    if platform == PlatformTag.AUDIOEPISODE:
        return podcast_embed(id_or_url)
    if platform == PlatformTag.ARTICLE:
        return article_card(id_or_url)
    return generic_link(id_or_url)
