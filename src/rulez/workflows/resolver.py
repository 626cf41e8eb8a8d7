"""Resolve a rule name or URL into rule content.

Branches, in evaluation order:

1. offline mode: simulated content, no network;
2. special-origin URL: scrape the page, then per-token remote rules, then
   synthetic content;
3. any other URL: fetch it verbatim;
4. bare name: fetch ``<name>.mdc`` from the remote rules repository.

Retrieval errors never escape :meth:`RuleResolver.resolve`; they settle into
a failed RuleResult with catalog suggestions. The catalog lookup itself is
not guarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from ..core.keys import (
    K_CONTENT,
    K_ERROR,
    K_NAME,
    K_SOURCE,
    K_SUCCESS,
    K_SUGGESTIONS,
    SOURCE_OFFLINE,
    SOURCE_SYNTHETIC,
)
from .catalog import DEFAULT_CATALOG, CatalogEntry, list_available_rules, suggest
from .html_extract import ScrapeResult, scrape
from .rules_config import DEFAULT_POLICY, FALLBACK_STOP_TOKENS, RulesPolicy
from .synthetic import simulated_content, synthesize
from .url_utils import RuleToken, classify_token, is_special_origin, split_name_tokens
from .web_fetch import EmptyContentError, FetchConfig, FetchFunc, RuleFetchError, make_fetcher

logger = logging.getLogger(__name__)

ScrapeFunc = Callable[[str], Awaitable[ScrapeResult]]


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    """``is_url`` is trusted when set; None means classify the token here."""

    offline_mode: bool = False
    is_url: Optional[bool] = None


@dataclass
class RuleResult:
    """Outcome of one resolution. Success and failure fields never mix."""

    success: bool
    name: str
    content: Optional[str] = None
    source: Optional[str] = None
    error: Optional[str] = None
    # None when there is nothing to suggest; never an empty list.
    suggestions: Optional[List[str]] = None

    @classmethod
    def ok(cls, content: str, name: str, source: str) -> "RuleResult":
        return cls(success=True, name=name, content=content, source=source)

    @classmethod
    def failed(cls, error: str, name: str, suggestions: Optional[List[str]] = None) -> "RuleResult":
        return cls(success=False, name=name, error=error, suggestions=suggestions or None)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {K_SUCCESS: self.success, K_NAME: self.name}
        if self.success:
            payload[K_CONTENT] = self.content
            payload[K_SOURCE] = self.source
            return payload
        payload[K_ERROR] = self.error
        if self.suggestions:
            payload[K_SUGGESTIONS] = list(self.suggestions)
        return payload


def resolve_offline(token: RuleToken) -> RuleResult:
    """Simulated result used both up front and after a failed network attempt."""

    name = token.name
    return RuleResult.ok(simulated_content(name), name, SOURCE_OFFLINE)


class RuleResolver:
    """Turns a rule token into a RuleResult; stateless between calls."""

    def __init__(
        self,
        *,
        policy: RulesPolicy = DEFAULT_POLICY,
        fetch: Optional[FetchFunc] = None,
        catalog: Sequence[CatalogEntry] = DEFAULT_CATALOG,
        scraper: Optional[ScrapeFunc] = None,
    ) -> None:
        self.policy = policy
        self.catalog = tuple(catalog)
        self._fetch: FetchFunc = fetch or make_fetcher(FetchConfig.from_policy(policy))
        self._scrape: ScrapeFunc = scraper or (lambda url: scrape(url, fetch=self._fetch))

    async def resolve(
        self,
        token: Union[str, RuleToken],
        options: Optional[ResolveOptions] = None,
    ) -> RuleResult:
        opts = options or ResolveOptions()
        rule = self._as_token(token, opts)
        if opts.offline_mode:
            return resolve_offline(rule)

        try:
            if rule.is_url and is_special_origin(rule.raw, self.policy.special_origin):
                return await self._resolve_special_origin(rule)
            if rule.is_url:
                content = await self._get(rule.raw)
                return RuleResult.ok(content, rule.name, rule.raw)
            url = self.policy.raw_url(rule.raw)
            content = await self._get(url)
            return RuleResult.ok(content, rule.raw, url)
        except RuleFetchError as exc:
            return await self._fail(rule, opts, exc)

    async def _get(self, url: str) -> str:
        content = await self._fetch(url)
        if not content or not content.strip():
            raise EmptyContentError(url)
        return content

    @staticmethod
    def _as_token(token: Union[str, RuleToken], opts: ResolveOptions) -> RuleToken:
        if isinstance(token, RuleToken):
            return token
        if opts.is_url is None:
            return classify_token(token)
        return RuleToken.from_url(token) if opts.is_url else RuleToken.from_name(token)

    async def _resolve_special_origin(self, rule: RuleToken) -> RuleResult:
        name = rule.name
        try:
            scraped = await self._scrape(rule.raw)
        except RuleFetchError as exc:
            logger.warning("Warning: could not scrape %s: %s", rule.raw, exc)
            if "-" not in name:
                raise
            logger.warning("Trying to find rules for the individual parts of '%s'...", name)
            return await self._resolve_by_parts(name)

        if not scraped.synthetic:
            return RuleResult.ok(scraped.content, name, rule.raw)
        logger.warning("Warning: no rule content found at %s", rule.raw)
        logger.warning("Trying to find rules for the individual parts of '%s'...", name)
        return await self._resolve_by_parts(name)

    async def _resolve_by_parts(self, name: str) -> RuleResult:
        tokens = split_name_tokens(name, FALLBACK_STOP_TOKENS)
        for part in tokens:
            url = self.policy.raw_url(part)
            try:
                content = await self._get(url)
            except RuleFetchError as exc:
                logger.info("no rule for '%s': %s", part, exc)
                continue
            logger.info("using '%s' rule for '%s'", part, name)
            return RuleResult.ok(content, name, url)
        logger.info("generating synthetic content for '%s'", name)
        return RuleResult.ok(synthesize(tokens, name), name, SOURCE_SYNTHETIC)

    async def _fail(self, rule: RuleToken, opts: ResolveOptions, exc: RuleFetchError) -> RuleResult:
        if opts.offline_mode:
            return resolve_offline(rule)
        name = rule.name
        entries = await list_available_rules(self.catalog)
        return RuleResult.failed(str(exc), name, suggest(name, entries))


async def fetch_rule(
    rule_name_or_url: str,
    options: Optional[ResolveOptions] = None,
    *,
    policy: RulesPolicy = DEFAULT_POLICY,
    fetch: Optional[FetchFunc] = None,
    catalog: Sequence[CatalogEntry] = DEFAULT_CATALOG,
) -> RuleResult:
    """Resolve one rule with a fresh resolver."""

    resolver = RuleResolver(policy=policy, fetch=fetch, catalog=catalog)
    return await resolver.resolve(rule_name_or_url, options)


__all__ = [
    "ResolveOptions",
    "RuleResolver",
    "RuleResult",
    "fetch_rule",
    "resolve_offline",
]
