"""rulez: manage Cursor editor rules from the command line."""

from .workflows import (
    DEFAULT_CATALOG,
    DEFAULT_POLICY,
    CatalogEntry,
    ResolveOptions,
    RuleResolver,
    RuleResult,
    RuleToken,
    classify_token,
    fetch_rule,
)

__version__ = "0.1.2"

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_POLICY",
    "CatalogEntry",
    "ResolveOptions",
    "RuleResolver",
    "RuleResult",
    "RuleToken",
    "classify_token",
    "fetch_rule",
    "__version__",
]
