"""Group chunking, labels and colours."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from tab_organizer.tab_policy.taxonomy import CATEGORY_COLOR_MAP, GROUP_COLORS, sanitize_group_color
from tab_organizer.tab_policy.text import LABEL_MAX_LEN, truncate_label

from .classify import METHOD_CATALOG_RULE, METHOD_USER_RULE, Assignment
from .models import Group


def chunk_name(base: str, index: int) -> str:
    return base if index == 0 else f"{base} ({index + 1})"


def chunk_group(
    name: str,
    tab_ids: Sequence[int],
    limit: Optional[int],
    max_len: int = LABEL_MAX_LEN,
) -> List[Tuple[str, List[int]]]:
    """Split tab ids into ordered chunks of at most `limit`; None keeps one chunk."""
    base = truncate_label(name, max_len)
    ids = list(tab_ids)
    if not ids:
        return []
    if not limit or len(ids) <= limit:
        return [(base, ids)]
    return [(chunk_name(base, i // limit), ids[i : i + limit]) for i in range(0, len(ids), limit)]


def resolve_group_color(category: str, members: Iterable[Assignment]) -> Optional[str]:
    """User-rule colour, then the category colour, then a catalog-rule colour."""
    members = list(members)
    for assignment in members:
        if assignment.method == METHOD_USER_RULE and assignment.initial_category == category:
            color = sanitize_group_color(assignment.color)
            if color:
                return color
    if category in CATEGORY_COLOR_MAP:
        return CATEGORY_COLOR_MAP[category]
    for assignment in members:
        if assignment.method == METHOD_CATALOG_RULE:
            color = sanitize_group_color(assignment.color)
            if color:
                return color
    return None


def _next_free(cursor: int, used: set) -> Tuple[str, int]:
    size = len(GROUP_COLORS)
    for step in range(size):
        index = (cursor + step) % size
        if GROUP_COLORS[index] not in used:
            return GROUP_COLORS[index], index + 1
    # Palette exhausted: colours repeat in order.
    return GROUP_COLORS[cursor % size], cursor + 1


def assign_unique_group_colors(groups: Sequence[Group]) -> List[Group]:
    """Give each base group a distinct palette colour; chunk siblings share their base colour."""
    used: set = set()
    base_colors = {}
    cursor = 0
    result: List[Group] = []
    for group in groups:
        if group.base_name not in base_colors:
            color = sanitize_group_color(group.color)
            if color is None or color in used:
                color, cursor = _next_free(cursor, used)
            used.add(color)
            base_colors[group.base_name] = color
        result.append(replace(group, color=base_colors[group.base_name]))
    return result
