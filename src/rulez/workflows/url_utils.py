"""Helpers for classifying rule tokens and deriving names from URLs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from .rules_config import SPECIAL_ORIGIN_HOST

_RULE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_URL_SCHEMES = {"http", "https"}

KIND_NAME = "name"
KIND_URL = "url"


def is_url(token: str) -> bool:
    """Return True when ``token`` is an absolute http(s) URL."""

    try:
        parsed = urlparse((token or "").strip())
    except ValueError:
        return False
    return parsed.scheme in _URL_SCHEMES and bool(parsed.netloc)


def is_valid_rule_name(token: str) -> bool:
    return bool(_RULE_NAME_RE.match(token or ""))


def _raw_host(netloc: str) -> str:
    # urlparse().hostname lower-cases; origin matching is case-sensitive.
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0]


def is_special_origin(url: str, origin: str = SPECIAL_ORIGIN_HOST) -> bool:
    """Exact, case-sensitive host match against the scrapeable origin."""

    try:
        parsed = urlparse(url or "")
    except ValueError:
        return False
    return _raw_host(parsed.netloc) == origin


def extract_name_from_url(url: str) -> str:
    """Return the last non-empty path segment of ``url`` ("" when there is none)."""

    if not is_url(url):
        return ""
    try:
        path = urlparse(url.strip()).path
    except ValueError:
        return ""
    parts = [part for part in path.split("/") if part]
    return parts[-1] if parts else ""


def split_name_tokens(name: str, stop_tokens) -> list[str]:
    """Split a dash-delimited rule name, dropping empty and stop tokens."""

    return [part for part in (name or "").split("-") if part and part not in stop_tokens]


@dataclass(frozen=True)
class RuleToken:
    """A user-supplied rule reference: either a bare name or a URL."""

    raw: str
    kind: str = KIND_NAME

    @classmethod
    def from_name(cls, raw: str) -> "RuleToken":
        return cls(raw=raw, kind=KIND_NAME)

    @classmethod
    def from_url(cls, raw: str) -> "RuleToken":
        return cls(raw=raw, kind=KIND_URL)

    @property
    def is_url(self) -> bool:
        return self.kind == KIND_URL

    @property
    def name(self) -> str:
        """Rule identifier: the URL's last path segment, or the token itself."""

        return extract_name_from_url(self.raw) if self.is_url else self.raw


def classify_token(raw: str) -> RuleToken:
    return RuleToken.from_url(raw) if is_url(raw) else RuleToken.from_name(raw)


__all__ = [
    "KIND_NAME",
    "KIND_URL",
    "RuleToken",
    "classify_token",
    "extract_name_from_url",
    "is_special_origin",
    "is_url",
    "is_valid_rule_name",
    "split_name_tokens",
]
