"""Text parsing helpers: links, chapter timestamps, captions, dates."""

import html
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from url_ingest.models.content import Timestamp

LINK_PATTERN = re.compile(r"https?://[^\s<>\"]+")

# "0:00 Intro", "1:02:03 - Deep dive", "12:30 — Q&A"; one chapter per line
TIMESTAMP_PATTERN = re.compile(
    r"^[ \t]*(?:(\d{1,2}):)?(\d{1,2}):(\d{2})(?:[ \t]*[-–—][ \t]*|[ \t]+)(\S.*?)[ \t]*$",
    re.MULTILINE,
)

_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_VTT_HEADERS = ("WEBVTT", "Kind:", "Language:")
# a NOTE or STYLE line opens a block that runs to the next blank line
_VTT_BLOCKS = ("NOTE", "STYLE")


def dedupe_links(links: Iterable[str]) -> list[str]:
    """Drop repeated links, keeping first-seen order."""
    return list(dict.fromkeys(links))


def extract_links(text: str) -> list[str]:
    """Find absolute http(s) URLs in free text, de-duplicated in order."""
    return dedupe_links(LINK_PATTERN.findall(text or ""))


def extract_timestamps(text: str) -> list[Timestamp]:
    """Parse line-anchored ``[h:]mm:ss label`` chapter markers.

    Best effort: text without chapters yields an empty list.
    """
    timestamps = []
    for match in TIMESTAMP_PATTERN.finditer(text or ""):
        hours = int(match.group(1)) if match.group(1) else 0
        minutes = int(match.group(2))
        seconds = int(match.group(3))
        timestamps.append(
            Timestamp(
                time_seconds=hours * 3600 + minutes * 60 + seconds,
                label=match.group(4),
            )
        )
    return timestamps


def strip_html(fragment: str) -> str:
    """Remove tags and decode entities from an HTML snippet."""
    return html.unescape(_TAG_PATTERN.sub("", fragment)).strip()


def clean_vtt(vtt: str) -> str:
    """Flatten a WebVTT caption file into continuous prose.

    Drops header, cue-timing, cue-identifier and blank lines along with
    ``NOTE``/``STYLE`` blocks, strips inline cue markup, and collapses
    consecutive duplicate lines (auto-captions repeat each line as the next
    cue scrolls in).
    """
    lines: list[str] = []
    in_block = False
    for line in vtt.splitlines():
        stripped = line.strip()
        if not stripped:
            in_block = False
            continue
        if in_block:
            continue
        if stripped.split(maxsplit=1)[0] in _VTT_BLOCKS:
            in_block = True
            continue
        if line.startswith(_VTT_HEADERS) or "-->" in line or stripped.isdigit():
            continue
        cleaned = _TAG_PATTERN.sub("", line).strip()
        if not cleaned or (lines and cleaned == lines[-1]):
            continue
        lines.append(cleaned)
    return _WHITESPACE.sub(" ", " ".join(lines)).strip()


def format_upload_date(value: str | None) -> str | None:
    """``YYYYMMDD`` (yt-dlp upload_date) -> ``YYYY-MM-DD``; other values pass through."""
    if not value or len(value) != 8 or not value.isdigit():
        return value
    return f"{value[:4]}-{value[4:6]}-{value[6:]}"


def format_iso_date(value: str | None) -> str | None:
    """ISO-8601 timestamp -> UTC ``YYYY-MM-DD``; unparseable values pass through."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()
