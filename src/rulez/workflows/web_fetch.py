"""Single-shot async retrieval of raw rule text."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import aiohttp
from charset_normalizer import from_bytes

from .rules_config import DEFAULT_POLICY, RulesPolicy

logger = logging.getLogger(__name__)

FetchFunc = Callable[[str], Awaitable[str]]


class RuleFetchError(Exception):
    """Base class for retrieval failures; callers branch on the message text."""


class FetchError(RuleFetchError):
    """The server answered with a non-success status."""

    def __init__(self, url: str, status: int, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        super().__init__(f"Failed to fetch content from {url}: {status} {reason}".rstrip())


class EmptyContentError(RuleFetchError):
    """The server answered successfully but the body was blank."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Failed to fetch content from {url}: empty body")


class NetworkError(RuleFetchError):
    """The request could not complete (DNS, refused connection, timeout...)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"Network error while fetching {url}: {detail}")


@dataclass
class FetchConfig:
    """Configuration for outbound GETs."""

    timeout: Optional[float] = DEFAULT_POLICY.timeout

    @classmethod
    def from_policy(cls, policy: RulesPolicy) -> "FetchConfig":
        return cls(timeout=policy.timeout)


def decode_bytes_auto(body: bytes, headers: Optional[Mapping[str, str]] = None) -> str:
    """Decode HTTP bytes using charset header hints with charset-normalizer fallback."""

    if not body:
        return ""
    enc = None
    if headers:
        ct = headers.get("content-type", "") or ""
        match = re.search(r"charset=([^\s;]+)", ct, re.I)
        if match:
            enc = match.group(1).strip(' "\'').lower()
    if enc:
        try:
            return body.decode(enc, errors="replace")
        except LookupError:
            pass
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        pass
    result = from_bytes(body).best()
    if result is None:
        return body.decode("utf-8", errors="replace")
    return str(result)


async def _get_text(session: Any, url: str, config: FetchConfig) -> str:
    request_kwargs: Dict[str, Any] = {}
    if config.timeout:
        request_kwargs["timeout"] = aiohttp.ClientTimeout(total=config.timeout)
    logger.debug("GET %s", url)
    try:
        async with session.get(url, **request_kwargs) as resp:
            status = resp.status
            reason = resp.reason or ""
            headers = resp.headers
            raw_bytes = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise NetworkError(url, exc) from exc

    if not 200 <= status < 300:
        raise FetchError(url, status, reason)
    text = decode_bytes_auto(raw_bytes, headers)
    if not text.strip():
        raise EmptyContentError(url)
    return text


async def fetch_content(
    url: str,
    *,
    config: Optional[FetchConfig] = None,
    session: Optional[Any] = None,
) -> str:
    """GET ``url`` once and return the body as text.

    Raises FetchError for error statuses, EmptyContentError for a blank
    body and NetworkError when the request cannot complete. A caller-supplied ``session`` is reused and left open.
    """

    cfg = config or FetchConfig()
    if session is not None:
        return await _get_text(session, url, cfg)
    async with aiohttp.ClientSession() as own_session:
        return await _get_text(own_session, url, cfg)


def make_fetcher(config: Optional[FetchConfig] = None, session: Optional[Any] = None) -> FetchFunc:
    """Bind ``fetch_content`` to a config/session for injection into the resolver."""

    async def _fetch(url: str) -> str:
        return await fetch_content(url, config=config, session=session)

    return _fetch


__all__ = [
    "EmptyContentError",
    "FetchConfig",
    "FetchError",
    "FetchFunc",
    "NetworkError",
    "RuleFetchError",
    "decode_bytes_auto",
    "fetch_content",
    "make_fetcher",
]
