"""High-level exports for the rulez workflows."""

from .catalog import DEFAULT_CATALOG, CatalogEntry, list_available_rules
from .html_extract import ExtractionError, ScrapeResult, extract_rule_content, scrape
from .resolver import ResolveOptions, RuleResolver, RuleResult, fetch_rule, resolve_offline
from .rules_config import DEFAULT_POLICY, RulesPolicy, policy_from_env
from .url_utils import RuleToken, classify_token, extract_name_from_url, is_special_origin, is_url
from .web_fetch import EmptyContentError, FetchConfig, FetchError, NetworkError, RuleFetchError, fetch_content

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_POLICY",
    "CatalogEntry",
    "EmptyContentError",
    "ExtractionError",
    "FetchConfig",
    "FetchError",
    "NetworkError",
    "ResolveOptions",
    "RuleFetchError",
    "RuleResolver",
    "RuleResult",
    "RuleToken",
    "RulesPolicy",
    "ScrapeResult",
    "classify_token",
    "extract_name_from_url",
    "extract_rule_content",
    "fetch_content",
    "fetch_rule",
    "is_special_origin",
    "is_url",
    "list_available_rules",
    "policy_from_env",
    "resolve_offline",
    "scrape",
]
