"""rulez defaults (remote source, special origin, directories, templates).

Centralizes static defaults so the resolver and file helpers carry no embedded
magic strings. ``DEFAULT_POLICY`` is the baseline; callers can build their own
RulesPolicy (or use :func:`policy_from_env`) to override any of it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

# Remote naming convention: <host>/<repo>/<branch>/<path>/<name>.mdc
GITHUB_RAW_URL = "https://raw.githubusercontent.com"
CURSOR_DIRECTORY_REPO = "ivangrynenko/cursorrules"
CURSOR_DIRECTORY_BRANCH = "main"
RULES_PATH = ".cursor/rules"
RULE_EXTENSION = ".mdc"

# The one host with a dedicated HTML scraping path
SPECIAL_ORIGIN_HOST = "cursor.directory"

DEFAULT_TIMEOUT = 20.0

# Project layout
CURSOR_DIR = ".cursor"
RULES_DIR = "rules"
LOCAL_DIR = "local"

GITIGNORE_PATTERNS: Tuple[str, ...] = (".cursor/local/", ".cursor-local.config")

# Name tokens that carry no technology meaning when decomposing a rule name
SCRAPE_STOP_TOKENS = frozenset({"cursor", "rules"})
FALLBACK_STOP_TOKENS = frozenset({"cursor", "rules", "rule"})

DEFAULT_RULE_TEMPLATES: Dict[str, str] = {
    "default.mdc": """# Cursor Default Rule

You are an expert AI coding assistant for this project. Follow these general guidelines:

1. Write clean, maintainable code that follows best practices for the language or framework being used.
2. Favor clarity over cleverness in your code suggestions.
3. When explaining code, be concise but informative.
4. Include helpful comments in code where appropriate.
5. Respect the existing code style and patterns in the project.
6. Consider performance implications of your suggestions.
7. When giving multiple options, explain the trade-offs.

# File patterns: **/*.*
""",
    "code-style.mdc": """# Code Style Guidelines

When working with code in this project, follow these style guidelines:

1. Use consistent indentation (2 spaces recommended).
2. Use meaningful variable and function names.
3. Add appropriate comments for complex logic.
4. Keep functions focused on a single responsibility.
5. Follow DRY (Don't Repeat Yourself) principles.
6. Write unit tests for new functionality when applicable.
7. Document public APIs and important functions.

# File patterns: **/*.js, **/*.ts, **/*.jsx, **/*.tsx
""",
    "readme-template.mdc": """# Documentation Template Rule

This rule provides guidance for creating and updating documentation files:

1. README.md should include:
   - Project title and description
   - Installation instructions
   - Usage examples
   - Configuration options
   - Contributing guidelines (if applicable)
   - License information

2. Documentation should be clear, concise, and helpful for both new and experienced users.
3. Use proper Markdown formatting for headings, code blocks, lists, etc.
4. Include screenshots or diagrams when they help explain concepts.

# File patterns: **/*.md
""",
}


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name, "")
    return raw.strip() or default


def _env_float(name: str, default: float) -> float:
    try:
        raw = os.getenv(name, "")
        return float(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default


def env_bool(name: str, default: str = "0") -> bool:
    raw = os.getenv(name, default)
    return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class RulesPolicy:
    raw_base_url: str = GITHUB_RAW_URL
    repo: str = CURSOR_DIRECTORY_REPO
    branch: str = CURSOR_DIRECTORY_BRANCH
    rules_path: str = RULES_PATH
    extension: str = RULE_EXTENSION
    special_origin: str = SPECIAL_ORIGIN_HOST
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def raw_url(self, rule_name: str) -> str:
        """Build the remote URL for ``rule_name``; reachability is checked at fetch time."""

        base = self.raw_base_url.rstrip("/")
        return f"{base}/{self.repo}/{self.branch}/{self.rules_path}/{rule_name}{self.extension}"


DEFAULT_POLICY = RulesPolicy()


def policy_from_env(base: RulesPolicy = DEFAULT_POLICY) -> RulesPolicy:
    """Overlay ``RULEZ_*`` environment variables onto ``base``."""

    timeout = _env_float("RULEZ_FETCH_TIMEOUT", base.timeout or DEFAULT_TIMEOUT)
    return replace(
        base,
        raw_base_url=_env_str("RULEZ_RAW_BASE_URL", base.raw_base_url),
        repo=_env_str("RULEZ_RULES_REPO", base.repo),
        branch=_env_str("RULEZ_RULES_BRANCH", base.branch),
        rules_path=_env_str("RULEZ_RULES_PATH", base.rules_path),
        special_origin=_env_str("RULEZ_SPECIAL_ORIGIN", base.special_origin),
        timeout=timeout if timeout > 0 else None,
    )


__all__ = [
    "CURSOR_DIR",
    "CURSOR_DIRECTORY_BRANCH",
    "CURSOR_DIRECTORY_REPO",
    "DEFAULT_POLICY",
    "DEFAULT_RULE_TEMPLATES",
    "FALLBACK_STOP_TOKENS",
    "GITHUB_RAW_URL",
    "GITIGNORE_PATTERNS",
    "LOCAL_DIR",
    "RULES_DIR",
    "RULES_PATH",
    "RULE_EXTENSION",
    "RulesPolicy",
    "SCRAPE_STOP_TOKENS",
    "SPECIAL_ORIGIN_HOST",
    "env_bool",
    "policy_from_env",
]
