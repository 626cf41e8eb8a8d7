from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .file_utils import directory_exists, is_pattern_in_file
from .rules_config import (
    CURSOR_DIR,
    GITIGNORE_PATTERNS,
    LOCAL_DIR,
    RULES_DIR,
    RulesPolicy,
    env_bool,
    policy_from_env,
)

INIT_REMEDY = "Run `rulez init` to create the .cursor directory structure and .gitignore entries."


def build_doctor_report(
    base_path: Optional[Path] = None,
    *,
    policy: Optional[RulesPolicy] = None,
) -> Dict[str, Any]:
    """Project layout checks plus the effective RULEZ_* settings."""

    base = Path(base_path) if base_path is not None else Path.cwd()
    policy = policy or policy_from_env()
    report: Dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "ok": True,
        "checks": [],
        "settings": [],
    }

    def add_check(name: str, status: bool, detail: str) -> None:
        report["checks"].append({"name": name, "status": "ok" if status else "missing", "detail": detail})
        if not status:
            report["ok"] = False

    def add_setting(name: str, value: str) -> None:
        report["settings"].append({"name": name, "value": value})

    rules_dir = base / CURSOR_DIR / RULES_DIR
    add_check("rules_dir", directory_exists(rules_dir), str(rules_dir))
    local_dir = base / CURSOR_DIR / LOCAL_DIR
    add_check("local_dir", directory_exists(local_dir), str(local_dir))

    gitignore = base / ".gitignore"
    missing = [p for p in GITIGNORE_PATTERNS if not is_pattern_in_file(gitignore, p)]
    add_check("gitignore", not missing, f"missing: {', '.join(missing)}" if missing else "local overrides ignored")

    add_setting("RULEZ_RAW_BASE_URL", policy.raw_url("<name>"))
    add_setting("RULEZ_SPECIAL_ORIGIN", policy.special_origin)
    add_setting("RULEZ_FETCH_TIMEOUT", f"{policy.timeout}s" if policy.timeout else "transport default")
    add_setting("RULEZ_OFFLINE", "simulated content" if env_bool("RULEZ_OFFLINE") else "network")
    return report


def format_doctor_report(report: Dict[str, Any]) -> str:
    lines: List[str] = ["rulez doctor", f"Generated: {report.get('generated_at')}", "", "Project:"]
    for check in report.get("checks", []):
        lines.append(f"- {check['name']}: {check['status']} ({check['detail']})")
    if not report.get("ok", True):
        lines.append(f"  remedy: {INIT_REMEDY}")
    lines.extend(["", "Settings:"])
    for setting in report.get("settings", []):
        lines.append(f"- {setting['name']}: {setting['value']}")
    return "\n".join(lines) + "\n"


__all__ = ["build_doctor_report", "format_doctor_report"]
