"""Duplicate detection and keeper selection."""

from typing import Dict, Iterable, List, Optional, Set

from tab_organizer.tab_policy.preferences import normalize_preferences

from .models import CloseCandidate, DedupePlan, DuplicateSet, TabSnapshot, ensure_snapshots
from .urls import canonicalize_url, extract_domain

ACTIVE_WEIGHT = 10000
AUDIBLE_WEIGHT = 400
PINNED_PREFERRED_WEIGHT = 8000
PINNED_WEIGHT = 2000
POSITION_BASE = 100


def score_tab(tab: TabSnapshot, prefer_pinned: bool) -> float:
    score = 0.0
    if tab.active:
        score += ACTIVE_WEIGHT
    if tab.audible:
        score += AUDIBLE_WEIGHT
    if tab.pinned:
        score += PINNED_PREFERRED_WEIGHT if prefer_pinned else PINNED_WEIGHT
    if tab.last_accessed is not None:
        score += tab.last_accessed / 1000
    score += POSITION_BASE - tab.index
    return score


def dedupe_key(tab: TabSnapshot) -> str:
    """Canonical URL, or a per-tab key so unparsable URLs never collide."""
    return canonicalize_url(tab.url) or f"id-{tab.id}"


def _group_by_canonical(tabs: Iterable[TabSnapshot]) -> Dict[str, List[TabSnapshot]]:
    groups: Dict[str, List[TabSnapshot]] = {}
    for tab in tabs:
        groups.setdefault(dedupe_key(tab), []).append(tab)
    return groups


def _apply_domain_floor(
    tabs: List[TabSnapshot],
    keepers: Set[int],
    candidates: List[CloseCandidate],
) -> List[CloseCandidate]:
    """Promote one close candidate for every domain that would lose all of its tabs."""
    surviving: Dict[str, int] = {}
    for tab in tabs:
        if tab.id not in keepers:
            continue
        domain = extract_domain(tab.url)
        if domain:
            surviving[domain] = surviving.get(domain, 0) + 1

    closing: List[CloseCandidate] = []
    for item in candidates:
        if item.domain and surviving.get(item.domain, 0) <= 0:
            keepers.add(item.id)
            surviving[item.domain] = 1
            continue
        closing.append(item)
    return closing


def compute_dedupe_plan(
    tabs: Iterable,
    *,
    preserve_pinned: bool = False,
    keep_at_least_one_per_domain: bool = False,
) -> DedupePlan:
    snapshots = ensure_snapshots(tabs)
    keepers: Set[int] = set()
    candidates: List[CloseCandidate] = []
    duplicate_sets: List[DuplicateSet] = []

    for key, group in _group_by_canonical(snapshots).items():
        if len(group) == 1:
            keepers.add(group[0].id)
            continue
        # sorted() is stable: equal scores keep tab order.
        ranked = sorted(group, key=lambda tab: score_tab(tab, preserve_pinned), reverse=True)
        keeper, duplicates = ranked[0], ranked[1:]
        keepers.add(keeper.id)
        duplicate_sets.append(
            DuplicateSet(
                canonical=None if key.startswith("id-") else key,
                keeper=keeper,
                closing=tuple(duplicates),
            )
        )
        for dup in duplicates:
            if preserve_pinned and dup.pinned:
                keepers.add(dup.id)
                continue
            candidates.append(
                CloseCandidate(
                    id=dup.id,
                    title=dup.title,
                    url=dup.url,
                    reason=f'Duplicate of "{keeper.title}"',
                    duplicate_of=keeper.id,
                    domain=extract_domain(dup.url),
                )
            )

    if keep_at_least_one_per_domain:
        candidates = _apply_domain_floor(snapshots, keepers, candidates)

    closing_ids = {item.id for item in candidates}
    survivors = [tab for tab in snapshots if tab.id in keepers and tab.id not in closing_ids]
    return DedupePlan(tabs_to_close=candidates, survivors=survivors, duplicate_sets=duplicate_sets)


def dedupe_tabs(tabs: Iterable, preferences: Optional[dict] = None) -> DedupePlan:
    """compute_dedupe_plan with stored-preference defaults (both safety flags on)."""
    prefs = normalize_preferences(preferences)
    return compute_dedupe_plan(
        tabs,
        preserve_pinned=prefs["preservePinned"],
        keep_at_least_one_per_domain=prefs["keepAtLeastOnePerDomain"],
    )
