"""Collapse candidate categories down to the group ceiling."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from tab_organizer.tab_policy.preferences import clamp_max_groups
from tab_organizer.tab_policy.taxonomy import (
    CATEGORY_PRIORITY,
    DOMAIN_CATEGORY_PRIORITY,
    OTHER_CATEGORY,
    USER_CATEGORY_PRIORITY,
)

from .classify import METHOD_USER_RULE, Assignment
from .config import DEFAULT_CFG
from .keywords import category_similarity

REASON_OVERFLOW = "overflow"
REASON_SMALL = "small"
REASON_LIMIT = "limit"

CategoryStats = Dict[str, List[Assignment]]


def category_stats(assignments: Iterable[Assignment]) -> CategoryStats:
    """Category name -> members, in first-seen order."""
    stats: CategoryStats = {}
    for assignment in assignments:
        stats.setdefault(assignment.category, []).append(assignment)
    return stats


def priority_resolver(assignments: Iterable[Assignment]) -> Callable[[str], int]:
    user_categories = {a.initial_category for a in assignments if a.method == METHOD_USER_RULE}

    def priority(name: str) -> int:
        if name in user_categories:
            return USER_CATEGORY_PRIORITY
        return CATEGORY_PRIORITY.get(name, DOMAIN_CATEGORY_PRIORITY)

    return priority


def _merge(members: List[Assignment], target: str, reason: str) -> None:
    for assignment in members:
        assignment.move(target, reason)


def find_nearest_category(name: str, stats: CategoryStats, cfg: Optional[Dict] = None) -> Optional[str]:
    """Most similar other category with positive similarity; ties go to the larger, then by name."""
    best: Optional[str] = None
    best_key = None
    for other, members in stats.items():
        if other == name or not members:
            continue
        similarity = category_similarity(name, other, cfg)
        if similarity <= 0:
            continue
        key = (-similarity, -len(members), other)
        if best_key is None or key < best_key:
            best, best_key = other, key
    return best


def find_smallest_category(stats: CategoryStats, priority: Callable[[str], int]) -> Optional[str]:
    candidates = [name for name, members in stats.items() if members and name != OTHER_CATEGORY]
    if not candidates:
        return OTHER_CATEGORY if stats.get(OTHER_CATEGORY) else None
    return min(candidates, key=lambda name: (len(stats[name]), priority(name), name))


def _overflow_pass(stats: CategoryStats, safe_max: int, priority: Callable[[str], int]) -> bool:
    if len(stats) <= safe_max:
        return False
    non_other = [name for name in stats if name != OTHER_CATEGORY]
    reserve = 1 if len(non_other) > safe_max or OTHER_CATEGORY in stats else 0
    allowed = max(0, safe_max - reserve)
    ranked = sorted(non_other, key=lambda name: (-len(stats[name]), -priority(name), name))
    for name in ranked[allowed:]:
        _merge(stats[name], OTHER_CATEGORY, REASON_OVERFLOW)
    return len(ranked) > allowed


def _small_pass(stats: CategoryStats, cfg: Dict) -> bool:
    if len(stats) < cfg["smallMergeMinCategories"]:
        return False
    for name, members in stats.items():
        if name == OTHER_CATEGORY or len(members) >= cfg["smallCategoryMinTabs"]:
            continue
        target = find_nearest_category(name, stats, cfg) or OTHER_CATEGORY
        _merge(members, target, REASON_SMALL)
        return True
    return False


def _limit_pass(stats: CategoryStats, safe_max: int, priority: Callable[[str], int], cfg: Dict) -> bool:
    if len(stats) <= safe_max:
        return False
    candidate = find_smallest_category(stats, priority)
    if candidate is None or candidate == OTHER_CATEGORY:
        return False
    target = find_nearest_category(candidate, stats, cfg) or OTHER_CATEGORY
    _merge(stats[candidate], target, REASON_LIMIT)
    return True


def _force_merge(assignments: List[Assignment], safe_max: int, priority: Callable[[str], int]) -> None:
    stats = category_stats(assignments)
    while len(stats) > safe_max:
        candidate = find_smallest_category(stats, priority)
        if candidate is None or candidate == OTHER_CATEGORY:
            break
        _merge(stats[candidate], OTHER_CATEGORY, REASON_LIMIT)
        stats = category_stats(assignments)


def limit_categories(
    assignments: List[Assignment],
    max_groups: object = None,
    cfg: Optional[Dict] = None,
) -> CategoryStats:
    """Merge categories in place until at most `max_groups` remain; returns the final stats.

    Each round runs at most one of: overflow into Other, a small-category merge,
    or a limit merge of the smallest category. Every productive round empties at
    least one non-Other category, so the loop is capped at the starting count + 1.
    """
    cfg = cfg or DEFAULT_CFG
    safe_max = clamp_max_groups(max_groups if max_groups is not None else cfg["maxGroups"])
    priority = priority_resolver(assignments)
    max_rounds = len(category_stats(assignments)) + 1

    for _ in range(max_rounds):
        stats = category_stats(assignments)
        if not stats:
            return stats
        if _overflow_pass(stats, safe_max, priority):
            continue
        if _small_pass(stats, cfg):
            continue
        if _limit_pass(stats, safe_max, priority, cfg):
            continue
        return stats

    _force_merge(assignments, safe_max, priority)
    return category_stats(assignments)
