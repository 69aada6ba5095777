"""
Cache policy table
==================

Static assets are matched against an ordered list of path rules.  The
**first** rule whose pattern matches decides the ``Cache-Control`` value;
later rules are never consulted.  Some patterns overlap (a directory rule
and a generic extension rule can both match ``/assets/restaurant-guru/x.svg``),
so the more specific rule has to come first.

Patterns are anchored regular expressions and matching is case-sensitive.
A path no rule matches gets no caching headers at all and the platform
defaults apply.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from enum import Enum


class CachePolicy(str, Enum):
    """Named cache behaviours and their literal ``Cache-Control`` values."""

    IMMUTABLE = "public, max-age=31536000, immutable"  # 1 year
    LONG_TERM = "public, max-age=15768000"  # 6 months
    MEDIUM_TERM = "public, max-age=2592000"  # 30 days
    SHORT_TERM = "public, max-age=300"  # 5 minutes
    NO_CACHE = "private, no-cache, no-store, max-age=0, must-revalidate"


@dataclass(frozen=True)
class CachePolicyRule:
    pattern: re.Pattern[str]
    policy: CachePolicy
    description: str
    extra_headers: tuple[tuple[str, str], ...] = ()

    def matches(self, path: str) -> bool:
        return self.pattern.search(path) is not None


DEFAULT_RULES: tuple[CachePolicyRule, ...] = (
    CachePolicyRule(
        re.compile(r"^/_next/static/"),
        CachePolicy.IMMUTABLE,
        "Build assets with content hashes",
    ),
    CachePolicyRule(
        re.compile(r"^/assets/restaurant-guru/"),
        CachePolicy.IMMUTABLE,
        "Restaurant Guru badge assets",
        extra_headers=(
            ("X-Cache-Tag", "restaurant-guru-immutable"),
            ("X-Performance-Optimized", "true"),
        ),
    ),
    CachePolicyRule(re.compile(r"\.svg$"), CachePolicy.IMMUTABLE, "SVG vector graphics"),
    CachePolicyRule(
        re.compile(r"\.(woff|woff2|ttf|eot)$"), CachePolicy.IMMUTABLE, "Web font files"
    ),
    CachePolicyRule(
        re.compile(r"\.(jpg|jpeg|png|gif|webp|avif|mp4|webm)$"),
        CachePolicy.LONG_TERM,
        "Image and video files",
    ),
    CachePolicyRule(re.compile(r"\.pdf$"), CachePolicy.MEDIUM_TERM, "PDF documents"),
    CachePolicyRule(
        re.compile(r"^/assets/.*\.(css|js)$"),
        CachePolicy.LONG_TERM,
        "Static CSS and JavaScript files",
    ),
)


def make_etag(path: str) -> str:
    """Deterministic, reversible ETag for *path*."""
    return '"' + base64.b64encode(path.encode("utf-8")).decode("ascii") + '"'


def decode_etag(etag: str) -> str:
    """Inverse of :func:`make_etag`."""
    return base64.b64decode(etag.strip('"')).decode("utf-8")


class CachePolicyTable:
    """Read-only, ordered rule list. First match wins."""

    def __init__(self, rules: tuple[CachePolicyRule, ...] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[CachePolicyRule, ...]:
        return self._rules

    def match_rule(self, path: str) -> CachePolicyRule | None:
        for rule in self._rules:
            if rule.matches(path):
                return rule
        return None

    def resolve_policy(self, path: str) -> CachePolicy | None:
        rule = self.match_rule(path)
        return rule.policy if rule else None

    def should_cache(self, path: str) -> bool:
        return self.match_rule(path) is not None

    def generate_headers(self, path: str) -> dict[str, str]:
        """Return a fresh header dict for *path*, empty when no rule matches."""
        rule = self.match_rule(path)
        if rule is None:
            return {}

        headers = {
            "Cache-Control": rule.policy.value,
            "Vary": "Accept-Encoding",
        }
        if rule.policy is CachePolicy.IMMUTABLE:
            headers["ETag"] = make_etag(path)
        if path.endswith(".svg"):
            headers["Content-Type"] = "image/svg+xml"
        headers.update(rule.extra_headers)
        return headers


DEFAULT_POLICY_TABLE = CachePolicyTable()


def resolve_policy(path: str) -> CachePolicy | None:
    return DEFAULT_POLICY_TABLE.resolve_policy(path)


def generate_headers(path: str) -> dict[str, str]:
    return DEFAULT_POLICY_TABLE.generate_headers(path)
