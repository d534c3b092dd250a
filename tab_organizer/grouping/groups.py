"""Rule-based grouping: classify, limit, then chunk into named groups."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from tab_organizer.dedupe.models import TabSnapshot, ensure_snapshots
from tab_organizer.tab_policy.preferences import clamp_max_tabs_per_group
from tab_organizer.tab_policy.text import truncate_label

from .catalog import CATALOG_RULES
from .classify import Assignment, TabInfo, classify_tabs, diagnostic_for, prepare_tab
from .config import merge_cfg
from .limit import limit_categories, priority_resolver
from .models import Group, GroupingResult
from .naming import chunk_group, resolve_group_color
from .rules import Rule, UserRule, compile_user_rules, parse_user_rules

PINNED_DIAGNOSTIC = {"group": None, "reason": "pinned"}


def resolve_user_rules(user_rules: Optional[Iterable]) -> List[Rule]:
    """Accept compiled rules, UserRule records or raw rule dicts."""
    compiled: List[Rule] = []
    pending: List[UserRule] = []
    for rule in user_rules or ():
        if isinstance(rule, Rule):
            compiled.append(rule)
        elif isinstance(rule, UserRule):
            pending.append(rule)
        elif isinstance(rule, Mapping):
            pending.extend(parse_user_rules([dict(rule)]))
    if pending:
        compiled.extend(compile_user_rules(pending))
    return sorted(compiled, key=lambda rule: (-rule.priority, rule.index))


def _group_source(category: str, members: Sequence[Assignment]) -> str:
    for assignment in members:
        if assignment.initial_category == category:
            return assignment.method
    return "keyword"


def group_by_rules(
    tabs: Iterable,
    *,
    user_rules: Optional[Iterable] = (),
    max_tabs_per_group: object = None,
    preserve_pinned: bool = True,
    max_groups: object = None,
    catalog: Sequence[Rule] = CATALOG_RULES,
    cfg: Optional[Dict] = None,
    info_for: Optional[Callable[[TabSnapshot], TabInfo]] = None,
) -> GroupingResult:
    """Partition tabs into at most `max_groups` named groups.

    Groups are ordered by size, then category priority, then name. A group
    larger than `max_tabs_per_group` is split into "Name", "Name (2)", ...
    siblings that keep the base group's colour.
    """
    cfg = merge_cfg(cfg)
    limit = clamp_max_tabs_per_group(max_tabs_per_group, default=None)
    prepare = info_for or prepare_tab

    diagnostics: Dict[int, dict] = {}
    infos: List[TabInfo] = []
    for tab in sorted(ensure_snapshots(tabs), key=lambda item: item.index):
        if preserve_pinned and tab.pinned:
            diagnostics[tab.id] = dict(PINNED_DIAGNOSTIC)
            continue
        infos.append(prepare(tab))

    assignments = classify_tabs(infos, resolve_user_rules(user_rules), catalog, cfg)
    stats = limit_categories(assignments, max_groups, cfg)
    priority = priority_resolver(assignments)

    groups: List[Group] = []
    for category in sorted(stats, key=lambda name: (-len(stats[name]), -priority(name), name)):
        members = stats[category]
        by_id = {assignment.tab_id: assignment for assignment in members}
        color = resolve_group_color(category, members)
        source = _group_source(category, members)
        base_name = truncate_label(category, cfg["labelMaxLen"])
        for name, tab_ids in chunk_group(category, list(by_id), limit, cfg["labelMaxLen"]):
            groups.append(Group(name=name, tab_ids=tab_ids, color=color, source=source, base_name=base_name))
            for tab_id in tab_ids:
                diagnostics[tab_id] = diagnostic_for(by_id[tab_id], group=name)

    return GroupingResult(groups=groups, diagnostics=diagnostics)
