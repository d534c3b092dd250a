#!/usr/bin/env python3
"""Dry-run the tab organizer against a JSON tab export.

Input is either a list of browser tabs or an object with a "tabs" list and an
optional "preferences" object. A second argument may point at a rules file
(the same JSON accepted in the userRulesJSON preference). The plan is printed
to stdout as JSON; nothing is closed or grouped.
"""

import json
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tab_organizer.errors import ConfigurationError
from tab_organizer.grouping.rules import parse_user_rules_json
from tab_organizer.pipeline import build_organize_plan

PROG = "tab-organizer"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "y"}


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


VERBOSE = _env_flag("TAB_ORGANIZER_VERBOSE", default=False)


def log(msg: str) -> None:
    if not VERBOSE:
        return
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[tab_organizer] {ts} {msg}", file=sys.stderr)


def env_preferences() -> Dict:
    prefs: Dict = {}
    max_tabs = _env_int("TAB_ORGANIZER_MAX_TABS_PER_GROUP")
    if max_tabs is not None:
        prefs["maxTabsPerGroup"] = max_tabs
    max_groups = _env_int("TAB_ORGANIZER_MAX_GROUPS")
    if max_groups is not None:
        prefs["maxGroups"] = max_groups
    if "TAB_ORGANIZER_PRESERVE_PINNED" in os.environ:
        prefs["preservePinned"] = _env_flag("TAB_ORGANIZER_PRESERVE_PINNED", default=True)
    if "TAB_ORGANIZER_KEEP_ONE_PER_DOMAIN" in os.environ:
        prefs["keepAtLeastOnePerDomain"] = _env_flag("TAB_ORGANIZER_KEEP_ONE_PER_DOMAIN", default=True)
    return prefs


def load_tab_export(path: Path) -> Tuple[List, Dict]:
    """Return (tabs, preferences) from a tab export file."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, list):
        return payload, {}
    if isinstance(payload, dict):
        tabs = payload.get("tabs")
        prefs = payload.get("preferences")
        if not isinstance(tabs, list):
            raise ValueError('expected a list of tabs or an object with a "tabs" list')
        return tabs, prefs if isinstance(prefs, dict) else {}
    raise ValueError('expected a list of tabs or an object with a "tabs" list')


def main(argv: List[str]) -> int:
    if len(argv) < 2 or len(argv) > 3:
        exe = Path(argv[0]).name if argv else PROG
        print(f"usage: {exe} <tabs.json> [rules.json]", file=sys.stderr)
        return 2

    src = Path(argv[1]).expanduser()
    try:
        tabs, prefs = load_tab_export(src)
    except (OSError, ValueError) as exc:
        print(f"Unable to read tabs from {src}: {exc}", file=sys.stderr)
        return 4

    if not tabs:
        print("No tabs were found in the export; nothing to do.", file=sys.stderr)
        return 3

    user_rules = None
    if len(argv) == 3:
        rules_path = Path(argv[2]).expanduser()
        try:
            rules_text = rules_path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Unable to read rules from {rules_path}: {exc}", file=sys.stderr)
            return 4
        try:
            user_rules = parse_user_rules_json(rules_text, stderr=sys.stderr if VERBOSE else None, strict=True)
        except ConfigurationError as exc:
            print(str(exc), file=sys.stderr)
            return 4
        log(f"loaded {len(user_rules)} user rule(s) from {rules_path}")

    prefs = dict(prefs)
    prefs.update(env_preferences())
    plan = build_organize_plan(
        tabs,
        prefs,
        user_rules=user_rules,
        dry_run=True,
        stderr=sys.stderr if VERBOSE else None,
    )
    log(f"{len(tabs)} tab(s): {len(plan.dedupe.tabs_to_close)} to close, {len(plan.groups)} group(s)")

    output = plan.to_dict()
    if _env_flag("TAB_ORGANIZER_EXPLAIN", default=False):
        output["diagnostics"] = {str(tab_id): diag for tab_id, diag in plan.diagnostics.items()}
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def run() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
