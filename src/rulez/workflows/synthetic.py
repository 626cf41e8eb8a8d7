"""Placeholder rule documents for when no real content can be retrieved."""

from __future__ import annotations

from typing import Iterable

SYNTHETIC_FILE_PATTERNS = "**/*.js, **/*.jsx, **/*.ts, **/*.tsx, **/*.py, **/*.md"


def _capitalize(token: str) -> str:
    return token[:1].upper() + token[1:]


def synthesize(tokens: Iterable[str], full_name: str) -> str:
    """Render a generic best-practices rule naming the technologies in ``tokens``.

    Deterministic: identical inputs give byte-identical output.
    """

    technologies = ", ".join(_capitalize(token) for token in tokens)
    return f"""# {full_name}

You are an expert developer working with {technologies}.

## Guidelines

1. Follow the official conventions and idioms of {technologies}.
2. Write clean, readable and maintainable code with descriptive names.
3. Keep modules small and focused on a single responsibility.
4. Handle errors explicitly and validate inputs at boundaries.
5. Write tests for new functionality and keep them fast and deterministic.
6. Prefer well-maintained libraries over custom implementations.
7. Document public APIs and non-obvious decisions.

Note: this rule was generated because the original content could not be retrieved.

# File patterns: {SYNTHETIC_FILE_PATTERNS}
"""


def simulated_content(rule_name: str) -> str:
    """Offline-mode stand-in content for ``rule_name``."""

    return f"""# {rule_name} (Simulated Offline Mode)

When working with {rule_name}, follow these guidelines:

1. This is a simulated rule created in offline mode
2. The actual rule would contain specific guidance for {rule_name}
3. To get real rules, please connect to the internet

# File patterns: **/*.{rule_name.lower()}
"""


__all__ = ["SYNTHETIC_FILE_PATTERNS", "simulated_content", "synthesize"]
