"""Filesystem helpers for the .cursor rules layout.

None of these raise for expected I/O problems; they report through result
records so the CLI can print every message it collected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .rules_config import (
    CURSOR_DIR,
    DEFAULT_RULE_TEMPLATES,
    GITIGNORE_PATTERNS,
    LOCAL_DIR,
    RULE_EXTENSION,
    RULES_DIR,
)


@dataclass
class FileResult:
    success: bool
    message: str
    created: bool = False
    path: Optional[Path] = None
    exists: bool = False


@dataclass
class BatchResult:
    success: bool = True
    messages: List[str] = field(default_factory=list)
    created: List[Path] = field(default_factory=list)


@dataclass
class GitignoreResult:
    success: bool = True
    messages: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)


@dataclass
class RuleFilePath:
    path: Path
    exists: bool
    base_dir: Path


def _base(base_path: Optional[Path]) -> Path:
    return Path(base_path) if base_path is not None else Path.cwd()


def directory_exists(path: Path) -> bool:
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def file_exists(path: Path) -> bool:
    try:
        return Path(path).is_file()
    except OSError:
        return False


def create_directory(path: Path, force: bool = False) -> FileResult:
    """Create ``path`` recursively; with ``force`` a file in the way is removed."""

    path = Path(path)
    try:
        if path.exists() and not path.is_dir():
            if not force:
                return FileResult(
                    False,
                    f"Path exists but is not a directory: {path}. Use --force to overwrite.",
                    path=path,
                )
            path.unlink()
        if path.is_dir():
            return FileResult(True, f"Directory already exists: {path}", path=path)
        path.mkdir(parents=True, exist_ok=True)
        return FileResult(True, f"Created directory: {path}", created=True, path=path)
    except OSError as exc:
        return FileResult(False, f"Failed to create directory: {path}. Error: {exc}", path=path)


def write_file(path: Path, content: str, force: bool = False) -> FileResult:
    """Write ``content``; an existing file is left alone unless ``force``."""

    path = Path(path)
    if file_exists(path) and not force:
        return FileResult(True, f"File already exists: {path}", path=path, exists=True)
    parent = create_directory(path.parent)
    if not parent.success:
        return parent
    try:
        path.write_bytes(content.encode("utf-8"))
    except (OSError, UnicodeError) as exc:
        return FileResult(False, f"Failed to write file: {path}. Error: {exc}", path=path)
    return FileResult(True, f"Created file: {path}", created=True, path=path)


def is_pattern_in_file(path: Path, pattern: str) -> bool:
    """True when a line equals ``pattern``, optionally followed by a # comment."""

    if not file_exists(path):
        return False
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return False
    regex = re.compile(rf"^{re.escape(pattern)}(\s*#.*)?$")
    return any(regex.match(line.strip()) for line in lines)


def update_gitignore(
    patterns: Iterable[str],
    base_path: Optional[Path] = None,
    force: bool = False,
) -> GitignoreResult:
    patterns = list(patterns)
    results = GitignoreResult()
    gitignore = _base(base_path) / ".gitignore"

    if not file_exists(gitignore):
        written = write_file(gitignore, "\n".join(patterns) + "\n", force)
        results.messages.append(written.message)
        if not written.success:
            results.success = False
            return results
        results.added.extend(patterns)
        results.messages.append(f"Added {len(patterns)} pattern(s) to new .gitignore")
        return results

    try:
        content = gitignore.read_text(encoding="utf-8")
        modified = False
        if content and not content.endswith("\n"):
            content += "\n"
            modified = True
        for pattern in patterns:
            if not is_pattern_in_file(gitignore, pattern):
                content += pattern + "\n"
                results.added.append(pattern)
                modified = True
        if modified:
            gitignore.write_text(content, encoding="utf-8")
            results.messages.append(f"Updated .gitignore with {len(results.added)} new pattern(s)")
        else:
            results.messages.append("No changes needed to .gitignore")
    except (OSError, UnicodeDecodeError) as exc:
        results.success = False
        results.messages.append(f"Failed to update .gitignore: {exc}")
    return results


def update_gitignore_for_cursor(base_path: Optional[Path] = None, force: bool = False) -> GitignoreResult:
    return update_gitignore(GITIGNORE_PATTERNS, base_path, force)


def create_cursor_directory_structure(force: bool = False, base_path: Optional[Path] = None) -> BatchResult:
    results = BatchResult()
    cursor_dir = _base(base_path) / CURSOR_DIR
    for directory in (cursor_dir, cursor_dir / RULES_DIR, cursor_dir / LOCAL_DIR):
        outcome = create_directory(directory, force)
        results.messages.append(outcome.message)
        if not outcome.success:
            results.success = False
            return results
        if outcome.created:
            results.created.append(directory)
    return results


def create_default_rule_files(force: bool = False, base_path: Optional[Path] = None) -> BatchResult:
    results = BatchResult()
    rules_dir = _base(base_path) / CURSOR_DIR / RULES_DIR
    outcome = create_directory(rules_dir)
    if not outcome.success:
        results.success = False
        results.messages.append(outcome.message)
        return results
    for filename, content in DEFAULT_RULE_TEMPLATES.items():
        target = rules_dir / filename
        written = write_file(target, content, force)
        results.messages.append(written.message)
        if not written.success:
            results.success = False
            return results
        if written.created:
            results.created.append(target)
    return results


def get_rule_file_path(rule_name: str, base_path: Optional[Path] = None, local: bool = False) -> RuleFilePath:
    cursor_dir = _base(base_path) / CURSOR_DIR
    base_dir = cursor_dir / (LOCAL_DIR if local else RULES_DIR)
    filename = rule_name if rule_name.endswith(RULE_EXTENSION) else f"{rule_name}{RULE_EXTENSION}"
    target = base_dir / filename
    return RuleFilePath(path=target, exists=file_exists(target), base_dir=base_dir)


def save_rule_to_file(
    rule_name: str,
    content: str,
    *,
    force: bool = False,
    local: bool = False,
    base_path: Optional[Path] = None,
) -> FileResult:
    target = get_rule_file_path(rule_name, base_path, local)
    outcome = create_directory(target.base_dir)
    if not outcome.success:
        return outcome
    if target.exists and not force:
        return FileResult(
            False,
            f"Rule file already exists: {target.path}. Use --force to overwrite.",
            path=target.path,
            exists=True,
        )
    written = write_file(target.path, content, force)
    written.path = target.path
    return written


def check_cursor_rules_directory_exists(base_path: Optional[Path] = None) -> bool:
    cursor_dir = _base(base_path) / CURSOR_DIR
    return directory_exists(cursor_dir) and directory_exists(cursor_dir / RULES_DIR)


__all__ = [
    "BatchResult",
    "FileResult",
    "GitignoreResult",
    "RuleFilePath",
    "check_cursor_rules_directory_exists",
    "create_cursor_directory_structure",
    "create_default_rule_files",
    "create_directory",
    "directory_exists",
    "file_exists",
    "get_rule_file_path",
    "is_pattern_in_file",
    "save_rule_to_file",
    "update_gitignore",
    "update_gitignore_for_cursor",
    "write_file",
]
