"""Rule-text extraction for pages served by the special origin.

Pages on the special origin embed the rule document inside markup that is
not guaranteed stable, so extraction runs an ordered list of heuristics and
keeps the first one that yields text. Every heuristic passes its text through
:func:`decode_entities` exactly once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from bs4 import BeautifulSoup

from .rules_config import SCRAPE_STOP_TOKENS
from .synthetic import synthesize
from .url_utils import extract_name_from_url, split_name_tokens
from .web_fetch import FetchFunc, RuleFetchError, fetch_content

logger = logging.getLogger(__name__)

__all__ = [
    "EXTRACTORS",
    "ExtractionError",
    "ScrapeResult",
    "decode_entities",
    "extract_rule_content",
    "scrape",
    "strip_tags",
]

_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"'}
_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|amp|lt|gt|quot);")
_TAG_RE = re.compile(r"<[^>]+>")

# The code block cursor.directory renders rule bodies into, verbatim.
_MARKER_RE = re.compile(r'<code class="text-sm block pr-3">(.*?)</code>', re.S)
_FENCED_MARKDOWN_RE = re.compile(r"```markdown[ \t]*\r?\n(.*?)```", re.S)
_CONTENT_CLASS_RE = re.compile(r"content|markdown|rule|prompt|code")
_CHROME_RE = re.compile(r"(^|[-_])(nav|navbar|header|footer|menu|sidebar|breadcrumbs?)($|[-_])", re.I)
_CHROME_TAGS = ["nav", "header", "footer", "aside", "script", "style", "noscript"]


class ExtractionError(RuleFetchError):
    """The page had no recognizable rule content."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Could not extract rule content from {url}")


@dataclass
class ScrapeResult:
    content: str
    name: str
    method: str
    synthetic: bool = False


def _entity(match: re.Match) -> str:
    body = match.group(1)
    if body in _NAMED_ENTITIES:
        return _NAMED_ENTITIES[body]
    try:
        codepoint = int(body[2:], 16) if body[1] in "xX" else int(body[1:])
    except ValueError:
        return match.group(0)
    # NUL, surrogates and out-of-range values cannot be written as UTF-8 text.
    if codepoint == 0 or 0xD800 <= codepoint <= 0xDFFF or codepoint > 0x10FFFF:
        return match.group(0)
    return chr(codepoint)


def decode_entities(text: str) -> str:
    """Decode numeric and basic named entities in a single pass.

    ``&amp;lt;`` becomes ``&lt;``; output is never re-scanned.
    """

    return _ENTITY_RE.sub(_entity, text or "")


def strip_tags(text: str) -> str:
    return _TAG_RE.sub("", text or "")


def _clean(fragment: str) -> Optional[str]:
    text = decode_entities(strip_tags(fragment)).strip()
    return text or None


def _inner(tag) -> Optional[str]:
    # decode_contents() re-escapes &, < and >, so decoding stays single-pass.
    if tag is None:
        return None
    return _clean(tag.decode_contents())


def _from_marker(html: str, soup: BeautifulSoup) -> Optional[str]:
    match = _MARKER_RE.search(html)
    return _clean(match.group(1)) if match else None


def _from_rule_wrapper(html: str, soup: BeautifulSoup) -> Optional[str]:
    return _inner(soup.select_one("[class*='rule-content'] pre"))


def _from_first_pre(html: str, soup: BeautifulSoup) -> Optional[str]:
    return _inner(soup.find("pre"))


def _from_fenced_markdown(html: str, soup: BeautifulSoup) -> Optional[str]:
    match = _FENCED_MARKDOWN_RE.search(html)
    return _clean(match.group(1)) if match else None


def _from_longest_code(html: str, soup: BeautifulSoup) -> Optional[str]:
    best: Optional[str] = None
    for node in soup.find_all("code"):
        text = _inner(node)
        if text and (best is None or len(text) > len(best)):
            best = text
    return best


def _from_content_class(html: str, soup: BeautifulSoup) -> Optional[str]:
    for node in soup.find_all(class_=_CONTENT_CLASS_RE):
        text = _inner(node)
        if text:
            return text
    return None


def _from_body_text(html: str, soup: BeautifulSoup) -> Optional[str]:
    page = BeautifulSoup(html, "lxml")
    root = page.body or page
    chrome = list(root(_CHROME_TAGS))
    # Chrome words match whole dash-separated segments of a class or id, below <body> only.
    for attr in ("class", "id"):
        chrome.extend(root.find_all(attrs={attr: _CHROME_RE}))
    for tag in chrome:
        if not tag.decomposed:
            tag.decompose()
    paras = [text for text in (_inner(p) for p in root.find_all("p")) if text]
    return "\n\n".join(paras) or None


Extractor = Callable[[str, BeautifulSoup], Optional[str]]

# Priority order; the first extractor returning text wins.
EXTRACTORS: Tuple[Tuple[str, Extractor], ...] = (
    ("marker", _from_marker),
    ("rule_wrapper_pre", _from_rule_wrapper),
    ("pre", _from_first_pre),
    ("fenced_markdown", _from_fenced_markdown),
    ("longest_code", _from_longest_code),
    ("content_class", _from_content_class),
    ("body_text", _from_body_text),
)


def extract_rule_content(html: str) -> Optional[Tuple[str, str]]:
    """Return ``(method, text)`` from the first matching heuristic, else None."""

    if not html or not html.strip():
        return None
    soup = BeautifulSoup(html, "lxml")
    for method, extractor in EXTRACTORS:
        text = extractor(html, soup)
        if text:
            logger.debug("extracted rule content via %s (%d chars)", method, len(text))
            return method, text
    return None


async def scrape(url: str, *, fetch: Optional[FetchFunc] = None) -> ScrapeResult:
    """Fetch a special-origin page and pull the rule text out of it.

    Dash-separated names that yield nothing fall back to synthetic content;
    anything else raises ExtractionError. Fetch failures propagate.
    """

    fetch = fetch or fetch_content
    html = await fetch(url)
    name = extract_name_from_url(url)
    extracted = extract_rule_content(html)
    if extracted is not None:
        method, text = extracted
        return ScrapeResult(content=text, name=name, method=method)
    if "-" in name:
        tokens = split_name_tokens(name, SCRAPE_STOP_TOKENS)
        return ScrapeResult(content=synthesize(tokens, name), name=name, method="synthetic", synthetic=True)
    raise ExtractionError(url)
