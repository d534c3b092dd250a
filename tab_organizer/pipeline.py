"""End-to-end plan assembly plus the helpers callers use before applying a plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, TextIO

from tab_organizer.dedupe.models import CloseCandidate, DedupePlan, TabSnapshot, ensure_snapshots
from tab_organizer.dedupe.plan import compute_dedupe_plan
from tab_organizer.grouping.models import Group
from tab_organizer.grouping.naming import assign_unique_group_colors
from tab_organizer.grouping.rules import parse_user_rules_json
from tab_organizer.tab_policy.preferences import (
    DEFAULT_PREFERENCES,
    clamp_max_tabs_per_group,
    normalize_preferences,
)
from tab_organizer.tab_policy.text import truncate_label

from .session import PlanningSession

DEFAULT_GROUP_NAME = "Group"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_status_message(closed_count: int, group_count: int, dry_run: bool) -> str:
    if closed_count:
        close_part = f"{'Would close' if dry_run else 'Closed'} {_plural(closed_count, 'dupe')}"
    else:
        close_part = "Would keep all tabs" if dry_run else "No duplicates closed"
    if group_count:
        group_part = f"{'Would organize' if dry_run else 'Organized'} {_plural(group_count, 'group')}"
    else:
        group_part = "No groups to create" if dry_run else "No group changes"
    summary = f"{close_part} · {group_part}"
    return f"Dry-run: {summary}" if dry_run else summary


def build_preview_message(preview: Mapping) -> str:
    closing = len(preview.get("closing") or [])
    groups = len(preview.get("groups") or [])
    closing_part = f"{_plural(closing, 'duplicate tab')} will close." if closing else "No tabs will be closed."
    grouping_part = f"{_plural(groups, 'group')} will be updated." if groups else "No tab groups will change."
    return f"{closing_part} {grouping_part}"


def build_completion_message(closed_count: int, grouped_count: int) -> str:
    parts = []
    if closed_count:
        parts.append(f"Closed {_plural(closed_count, 'duplicate tab')}.")
    if grouped_count:
        parts.append(f"Updated {_plural(grouped_count, 'tab group')}.")
    if not parts:
        parts.append("No changes were necessary.")
    return " ".join(parts)


def _tab_summary(tab: TabSnapshot) -> dict:
    return {"id": tab.id, "title": tab.title, "url": tab.url}


@dataclass
class OrganizePlan:
    dedupe: DedupePlan
    groups: List[Group]
    preferences: Dict
    message: str
    dry_run: bool
    diagnostics: Dict[int, dict] = field(default_factory=dict)

    @property
    def tab_lookup(self) -> Dict[int, TabSnapshot]:
        return {tab.id: tab for tab in self.dedupe.survivors}

    def to_dict(self) -> dict:
        lookup = self.tab_lookup
        return {
            "dryRun": self.dry_run,
            "closed": len(self.dedupe.tabs_to_close),
            "groups": [
                {"name": group.name, "count": len(group.tab_ids), "color": group.color}
                for group in self.groups
            ],
            "message": self.message,
            "plan": {
                "duplicates": [
                    {
                        "id": item.id,
                        "title": item.title,
                        "url": item.url,
                        "duplicateOf": item.duplicate_of,
                    }
                    for item in self.dedupe.tabs_to_close
                ],
                "groups": [
                    {
                        "name": group.name,
                        "color": group.color,
                        "count": len(group.tab_ids),
                        "tabs": [_tab_summary(lookup[tab_id]) for tab_id in group.tab_ids if tab_id in lookup],
                    }
                    for group in self.groups
                ],
            },
        }


def build_organize_plan(
    tabs: Iterable,
    preferences: Optional[Dict] = None,
    *,
    user_rules: Optional[Sequence] = None,
    dry_run: Optional[bool] = None,
    session: Optional[PlanningSession] = None,
    stderr: Optional[TextIO] = None,
) -> OrganizePlan:
    """Dedupe, group the survivors, colour the groups and describe the result."""
    prefs = normalize_preferences(preferences)
    if user_rules is None:
        user_rules = parse_user_rules_json(prefs["userRulesJSON"], stderr=stderr)
    if dry_run is None:
        dry_run = prefs["dryRunNoLLM"]
    session = session or PlanningSession()

    dedupe = session.compute_dedupe_plan(
        tabs,
        preserve_pinned=prefs["preservePinned"],
        keep_at_least_one_per_domain=prefs["keepAtLeastOnePerDomain"],
    )
    grouping = session.group_by_rules(
        dedupe.survivors,
        user_rules=user_rules,
        max_tabs_per_group=prefs["maxTabsPerGroup"],
        preserve_pinned=prefs["preservePinned"],
        max_groups=prefs["maxGroups"],
    )
    groups = assign_unique_group_colors(grouping.groups)
    message = build_status_message(len(dedupe.tabs_to_close), len(groups), dry_run)
    return OrganizePlan(
        dedupe=dedupe,
        groups=groups,
        preferences=prefs,
        message=message,
        dry_run=bool(dry_run),
        diagnostics=grouping.diagnostics,
    )


@dataclass
class SanitizedGroups:
    groups: List[dict]
    assigned_tab_ids: Set[int]


def sanitize_group_plan(
    proposed_groups: Optional[Iterable],
    available_tabs: Iterable,
    *,
    max_tabs_per_group: object = DEFAULT_PREFERENCES["maxTabsPerGroup"],
    preserve_pinned: bool = True,
) -> SanitizedGroups:
    """Clean a grouping proposed outside the engine (for example by a language model).

    Unknown, repeated and (optionally) pinned tab ids are dropped, each group
    is cut to the size cap and names are truncated. Empty groups disappear.
    """
    limit = clamp_max_tabs_per_group(max_tabs_per_group, default=DEFAULT_PREFERENCES["maxTabsPerGroup"])
    tab_map = {tab.id: tab for tab in ensure_snapshots(available_tabs)}
    assigned: Set[int] = set()
    cleaned: List[dict] = []

    for group in proposed_groups or ():
        if not isinstance(group, Mapping) or not isinstance(group.get("tabIds"), list):
            continue
        raw_name = group.get("name")
        proposed = raw_name.strip() if isinstance(raw_name, str) else ""
        name = truncate_label(proposed) if proposed else DEFAULT_GROUP_NAME
        ids: List[int] = []
        for tab_id in group["tabIds"]:
            if len(ids) >= limit:
                break
            if tab_id in assigned or isinstance(tab_id, bool):
                continue
            tab = tab_map.get(tab_id)
            if tab is None or (preserve_pinned and tab.pinned):
                continue
            ids.append(tab_id)
            assigned.add(tab_id)
        if ids:
            cleaned.append({"name": name, "tabIds": ids})

    return SanitizedGroups(groups=cleaned, assigned_tab_ids=assigned)


def summarize_plan_for_preview(
    tabs_to_close: Iterable[CloseCandidate],
    groups: Iterable,
    tab_lookup: Mapping[int, TabSnapshot],
    notes: Optional[str] = None,
) -> dict:
    closing = [{"title": item.title, "url": item.url} for item in tabs_to_close]
    summary_groups = []
    for group in groups:
        name = group.name if isinstance(group, Group) else group.get("name")
        tab_ids = group.tab_ids if isinstance(group, Group) else group.get("tabIds", [])
        tabs = [
            {"title": tab_lookup[tab_id].title, "url": tab_lookup[tab_id].url}
            for tab_id in tab_ids
            if tab_id in tab_lookup
        ]
        summary_groups.append({"name": name, "tabs": tabs})
    return {"closing": closing, "groups": summary_groups, "notes": notes}


@dataclass
class ValidatedPlan:
    close_ids: List[int]
    groups: List[Group]
    dropped_tab_ids: List[int]


def revalidate_plan(
    plan: OrganizePlan,
    current_tabs: Iterable,
    *,
    preserve_pinned: bool = True,
    stderr: Optional[TextIO] = None,
) -> ValidatedPlan:
    """Re-check a plan against the live tabs right before it is applied.

    Tabs that vanished, or became pinned while pins are preserved, leave the
    plan. A tab lands in at most one group and groups left empty are dropped.
    """
    live = {tab.id: tab for tab in ensure_snapshots(current_tabs)}
    dropped: List[int] = []

    def usable(tab_id: int) -> bool:
        tab = live.get(tab_id)
        if tab is None or (preserve_pinned and tab.pinned):
            dropped.append(tab_id)
            return False
        return True

    close_ids = [item.id for item in plan.dedupe.tabs_to_close if usable(item.id)]
    closing = set(close_ids)
    assigned: Set[int] = set()
    groups: List[Group] = []
    for group in plan.groups:
        ids = []
        for tab_id in group.tab_ids:
            if tab_id in assigned or tab_id in closing or not usable(tab_id):
                continue
            ids.append(tab_id)
            assigned.add(tab_id)
        if ids:
            groups.append(
                Group(
                    name=group.name,
                    tab_ids=ids,
                    color=group.color,
                    source=group.source,
                    base_name=group.base_name,
                )
            )

    if dropped and stderr is not None:
        print(f"[pipeline] dropped {len(dropped)} tab(s) that changed since planning", file=stderr)
    return ValidatedPlan(close_ids=close_ids, groups=groups, dropped_tab_ids=dropped)
