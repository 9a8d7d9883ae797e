"""Domain gate — decides whether a page gets scanned at all.

The stored domain list is either an allow-list of protected sites (scan only
there) or a whitelist of trusted sites (scan everywhere else).  Entries match
the exact host and any subdomain:

    is_covered("https://api.chatgpt.com/x", ["chatgpt.com"])   # True
    is_covered("https://notchatgpt.com", ["chatgpt.com"])      # False

A URL we can't resolve to a web hostname is never scanned.
"""

from __future__ import annotations
import re
from enum import Enum
from typing import Iterable
from urllib.parse import urlsplit

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_WEB_SCHEMES = ("http", "https")

# Content script match patterns shipped with the extension
DEFAULT_MATCH_PATTERNS = [
    "https://chatgpt.com/*",
    "https://chat.openai.com/*",
    "https://claude.ai/*",
    "https://gemini.google.com/*",
    "https://copilot.microsoft.com/*",
    "https://chat.deepseek.com/*",
    "https://www.perplexity.ai/*",
]


class DomainPolicy(str, Enum):
    """How the stored domain list is interpreted."""
    PROTECTED = "protected"   # scan only on listed sites
    WHITELIST = "whitelist"   # scan everywhere except listed sites

    @classmethod
    def parse(cls, value: "str | DomainPolicy") -> "DomainPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown domain policy {value!r} (expected 'protected' or 'whitelist')"
            ) from None


def normalize_domain(entry: str) -> str:
    """Strip scheme and path from a stored entry and lowercase it."""
    value = _SCHEME.sub("", entry.strip())
    return value.split("/", 1)[0].lower()


def page_hostname(url: object) -> str | None:
    """Lowercased hostname of a page URL, or None if there's no web context."""
    if not isinstance(url, str) or not url:
        return None
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if parts.scheme.lower() not in _WEB_SCHEMES:
        return None
    return parts.hostname or None


def host_matches(hostname: str, target: str) -> bool:
    return hostname == target or hostname.endswith("." + target)


def is_covered(url: object, domains: Iterable[str]) -> bool:
    """True if the page's host equals, or is a subdomain of, any listed entry."""
    hostname = page_hostname(url)
    if hostname is None:
        return False
    for entry in domains:
        if not isinstance(entry, str):
            continue
        target = normalize_domain(entry)
        if target and host_matches(hostname, target):
            return True
    return False


def should_scan(
    url: object,
    domains: Iterable[str],
    policy: DomainPolicy = DomainPolicy.PROTECTED,
) -> bool:
    """Apply the domain policy.  Unresolvable URLs are never scanned."""
    if page_hostname(url) is None:
        return False
    covered = is_covered(url, domains)
    if policy is DomainPolicy.PROTECTED:
        return covered
    return not covered


# ----------------------------------------------------------------------
# List management
# ----------------------------------------------------------------------

def hosts_from_match_patterns(patterns: Iterable[str]) -> list[str]:
    """Extract hostnames from extension match patterns like ``https://x.com/*``.

    Wildcard subdomain hosts (``*.x.com``) collapse to ``x.com``, which
    covers the subdomains anyway.  Patterns without a usable host are ignored.
    """
    hosts: list[str] = []
    for pattern in patterns:
        try:
            host = urlsplit(pattern).hostname
        except ValueError:
            continue
        if not host:
            continue
        if host.startswith("*."):
            host = host[2:]
        if "*" in host or host in hosts:
            continue
        hosts.append(host)
    return hosts


def add_domain(domains: Iterable[str], entry: str) -> list[str]:
    """Return a new sorted list with ``entry`` added (normalized, no dupes)."""
    current = list(domains)
    target = normalize_domain(entry)
    if target and target not in current:
        current.append(target)
    return sorted(current)


def remove_domain(domains: Iterable[str], entry: str) -> list[str]:
    target = normalize_domain(entry)
    return [d for d in domains if normalize_domain(d) != target]


DEFAULT_PROTECTED_DOMAINS: tuple[str, ...] = tuple(
    hosts_from_match_patterns(DEFAULT_MATCH_PATTERNS)
)
