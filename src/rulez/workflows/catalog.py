"""Static rule catalog used as a suggestion source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..core.keys import K_DESCRIPTION, K_DISPLAY_NAME, K_NAME


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    display_name: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {K_NAME: self.name, K_DISPLAY_NAME: self.display_name, K_DESCRIPTION: self.description}


# Not an index of what is actually fetchable.
DEFAULT_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry("default", "Default Cursor Rules", "Basic rules for any project"),
    CatalogEntry("react", "React Best Practices", "Rules for React projects"),
    CatalogEntry("nextjs", "Next.js Framework Rules", "Rules for Next.js projects"),
    CatalogEntry("python", "Python Coding Standards", "Rules for Python projects"),
    CatalogEntry("typescript", "TypeScript Best Practices", "Rules for TypeScript projects"),
)


async def list_available_rules(catalog: Sequence[CatalogEntry] = DEFAULT_CATALOG) -> List[CatalogEntry]:
    """Return the catalog entries. Async so a remote catalog can replace it."""

    return list(catalog)


def suggest(rule_name: str, entries: Sequence[CatalogEntry]) -> List[str]:
    """Names of entries that contain ``rule_name`` or are contained in it."""

    return [entry.name for entry in entries if entry.name in rule_name or rule_name in entry.name]


__all__ = ["CatalogEntry", "DEFAULT_CATALOG", "list_available_rules", "suggest"]
