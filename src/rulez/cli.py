from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Iterable

import typer
from dotenv import load_dotenv

from . import __version__
from .workflows.doctor import build_doctor_report, format_doctor_report
from .workflows.file_utils import (
    check_cursor_rules_directory_exists,
    create_cursor_directory_structure,
    create_default_rule_files,
    save_rule_to_file,
    update_gitignore_for_cursor,
)
from .workflows.resolver import ResolveOptions, fetch_rule
from .workflows.rules_config import env_bool, policy_from_env
from .workflows.url_utils import classify_token, is_special_origin, is_valid_rule_name

app = typer.Typer(add_help_option=False, no_args_is_help=False)

PREVIEW_LINES = 5


def _minimal_help() -> str:
    return """rulez - manage Cursor editor rules

Usage:
  rulez init [--force]
  rulez add <rule-name|url> [--force] [--local] [--offline]
  rulez doctor

Commands:
  init     Initialize a project with the Cursor rules structure.
  add      Add a Cursor rule from the community directory or a URL.
  doctor   Print project and environment diagnostics.

Examples:
  $ rulez init              Initialize a project with Cursor rules
  $ rulez add nextjs        Add the Next.js rule from Cursor Directory
  $ rulez add react --local Add the React rule to local overrides
"""


def _configure_logging() -> None:
    level_name = os.getenv("RULEZ_LOG_LEVEL", "WARNING").strip().upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)


def _say(message: str, color: str | None = None) -> None:
    typer.secho(message, fg=color)


def _say_all(messages: Iterable[str], color: str, prefix: str = "- ") -> None:
    for message in messages:
        _say(f"{prefix}{message}", color)


def _abort(message: str, hint: str | None = None) -> None:
    _say(message, typer.colors.RED)
    if hint:
        _say(hint, typer.colors.YELLOW)
    raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    help: bool = typer.Option(False, "--help", "-h", is_eager=True, help="Show help."),
    version: bool = typer.Option(False, "--version", "-V", is_eager=True, help="Show the version and exit."),
) -> None:
    load_dotenv()
    _configure_logging()
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if help or ctx.invoked_subcommand is None:
        typer.echo(_minimal_help())
        raise typer.Exit(code=0)


@app.command("init", add_help_option=True)
def init_cmd(
    force: bool = typer.Option(False, "--force", help="Overwrite existing files if they exist."),
) -> None:
    """Initialize a project with the Cursor rules structure."""
    base = Path.cwd()
    _say("Initializing Cursor rules structure...", typer.colors.BLUE)

    dirs = create_cursor_directory_structure(force, base)
    if not dirs.success:
        _say("Error initializing Cursor rules structure:", typer.colors.RED)
        _say_all(dirs.messages, typer.colors.RED)
        raise typer.Exit(code=1)
    if dirs.created:
        _say("Created the following directories:", typer.colors.GREEN)
        _say_all((str(p) for p in dirs.created), typer.colors.GREEN)
    else:
        _say("All required directories already exist.", typer.colors.YELLOW)

    _say("\nGenerating default rule files...", typer.colors.BLUE)
    files = create_default_rule_files(force, base)
    if not files.success:
        _say("Error creating default rule files:", typer.colors.RED)
        _say_all(files.messages, typer.colors.RED)
        raise typer.Exit(code=1)
    if files.created:
        _say("Created the following rule files:", typer.colors.GREEN)
        _say_all((str(p) for p in files.created), typer.colors.GREEN)
    else:
        _say("All default rule files already exist.", typer.colors.YELLOW)

    _say("\nUpdating .gitignore for local overrides...", typer.colors.BLUE)
    gitignore = update_gitignore_for_cursor(base, force)
    if not gitignore.success:
        _say("Error updating .gitignore:", typer.colors.RED)
        _say_all(gitignore.messages, typer.colors.RED)
        raise typer.Exit(code=1)
    if gitignore.added:
        _say("Added the following patterns to .gitignore:", typer.colors.GREEN)
        _say_all(gitignore.added, typer.colors.GREEN)
    else:
        _say("All required patterns already in .gitignore.", typer.colors.YELLOW)

    _say("\nCursor rules structure initialized successfully!", typer.colors.BLUE)
    _say("Next steps:", typer.colors.BRIGHT_BLACK)
    _say("- Add more rules using 'rulez add <rule-name>'", typer.colors.BRIGHT_BLACK)
    _say("- Commit the .cursor/rules directory to version control", typer.colors.BRIGHT_BLACK)


@app.command("add", add_help_option=True)
def add_cmd(
    rule: str = typer.Argument(..., metavar="<rule-name|url>", help="Rule name or URL to fetch."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing file if it exists."),
    local: bool = typer.Option(False, "--local", help="Add to local overrides instead of project rules."),
    offline: bool = typer.Option(False, "--offline", help="Use offline mode with simulated content."),
) -> None:
    """Add a Cursor rule from the community directory or a URL."""
    base = Path.cwd()
    policy = policy_from_env()
    token = classify_token(rule)
    rule_name = token.name

    if not token.is_url and not is_valid_rule_name(rule_name):
        _abort(
            f"Error: '{rule}' doesn't appear to be a valid rule name or URL",
            "Rule names must only contain letters, numbers, dashes, and underscores",
        )
    if token.is_url and not rule_name:
        _abort(f"Error: Could not extract a valid rule name from URL '{rule}'")
    if not check_cursor_rules_directory_exists(base):
        _abort(
            "Error: Cursor rules directory structure not found",
            "Run 'rulez init' to create the necessary directory structure first",
        )

    if token.is_url:
        _say(f"Fetching rule from URL: {rule}", typer.colors.BLUE)
        if is_special_origin(rule, policy.special_origin):
            _say(f"Detected {policy.special_origin} URL for rule: {rule_name}", typer.colors.BLUE)
    else:
        _say(f"Fetching rule '{rule_name}' from Cursor Directory...", typer.colors.BLUE)

    options = ResolveOptions(offline_mode=offline or env_bool("RULEZ_OFFLINE"), is_url=token.is_url)
    try:
        result = asyncio.run(fetch_rule(rule, options, policy=policy))
    except Exception as exc:
        _abort(f"Error fetching rule: {exc}")

    if not result.success:
        _say(f"Error: Could not find rule '{rule_name}'", typer.colors.RED)
        _say(f"Reason: {result.error}", typer.colors.RED)
        if result.suggestions:
            _say("\nDid you mean one of these?", typer.colors.YELLOW)
            _say_all(result.suggestions, typer.colors.YELLOW)
        raise typer.Exit(code=1)

    target = "local" if local else "project"
    _say(f"Successfully fetched rule '{rule_name}'", typer.colors.GREEN)
    _say(f"Adding to {target} rules...", typer.colors.BLUE)
    if local:
        _say("Note: Local override rules are not tracked by version control", typer.colors.YELLOW)
    if force:
        _say("Force flag set: Will overwrite existing files if they exist", typer.colors.YELLOW)

    content = result.content or ""
    lines = content.split("\n")
    _say("\nRule content preview:", typer.colors.BRIGHT_BLACK)
    _say_all(lines[:PREVIEW_LINES], typer.colors.BRIGHT_BLACK, prefix="> ")
    if len(lines) > PREVIEW_LINES:
        _say("> ...", typer.colors.BRIGHT_BLACK)

    saved = save_rule_to_file(result.name or rule_name, content, force=force, local=local, base_path=base)
    if not saved.success:
        if saved.exists:
            _abort(f"\nError: {saved.message}", "Use --force to overwrite the existing file.")
        _abort(f"\nError saving file: {saved.message}")

    _say(f"\nSuccessfully saved rule to: {saved.path}", typer.colors.GREEN)
    if result.source:
        _say(f"Source: {result.source}", typer.colors.BRIGHT_BLACK)


@app.command("doctor", add_help_option=True)
def doctor_cmd() -> None:
    """Print project and environment diagnostics."""
    report = build_doctor_report(Path.cwd())
    typer.echo(format_doctor_report(report))
    raise typer.Exit(code=0 if report.get("ok", True) else 2)


if __name__ == "__main__":
    app()
