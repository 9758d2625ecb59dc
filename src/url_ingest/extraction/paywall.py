"""Known-paywall lookup, used to flag article records that are likely teasers."""

import functools
from pathlib import Path
from urllib.parse import urlparse

import yaml

_CONFIG_PATH = Path(__file__).resolve().parent / "paywalled_domains.yaml"


@functools.lru_cache
def load_paywalled_domains() -> frozenset[str]:
    """Domains from paywalled_domains.yaml. Cached for the process lifetime."""
    with open(_CONFIG_PATH, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return frozenset(d.lower() for d in data.get("domains", []))


def paywalled_domain(url: str) -> str | None:
    """The listed domain ``url`` falls under, or None.

    Walks from the full hostname up through its parents, so
    ``www.nytimes.com`` and ``cooking.nytimes.com`` both resolve to
    ``nytimes.com``.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None

    domains = load_paywalled_domains()
    parts = hostname.lower().split(".")
    for i in range(len(parts) - 1):
        candidate = ".".join(parts[i:])
        if candidate in domains:
            return candidate
    return None


def is_paywalled_domain(url: str) -> bool:
    return paywalled_domain(url) is not None
