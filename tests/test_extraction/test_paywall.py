"""Tests for paywalled domain detection."""

from url_ingest.extraction.paywall import is_paywalled_domain, load_paywalled_domains, paywalled_domain


def test_is_paywalled_known_domain():
    """Listed domains are paywalled."""
    assert is_paywalled_domain("https://nytimes.com/article") is True
    assert is_paywalled_domain("https://wsj.com/news/story") is True


def test_is_paywalled_with_subdomain():
    """Subdomains resolve to the listed parent domain."""
    assert paywalled_domain("https://www.nytimes.com/2026/01/article") == "nytimes.com"
    assert paywalled_domain("https://cooking.nytimes.com/recipes/1") == "nytimes.com"


def test_lookalike_domain_not_matched():
    assert is_paywalled_domain("https://notnytimes.com/article") is False


def test_is_paywalled_unknown_domain():
    assert is_paywalled_domain("https://example.com/page") is False


def test_unparseable_url():
    """A URL without a host is not paywalled."""
    assert paywalled_domain("not a url") is None


def test_load_paywalled_domains():
    """YAML config loads and returns a frozenset."""
    domains = load_paywalled_domains()
    assert isinstance(domains, frozenset)
    assert "nytimes.com" in domains
    assert len(domains) >= 5
