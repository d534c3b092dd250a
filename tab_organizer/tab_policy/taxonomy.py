"""Shared category taxonomy used by dedupe, grouping and the planner."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

OTHER_CATEGORY = "Other"

# Display order; earlier categories win priority tie-breaks.
CATEGORY_ORDER = (
    "Work/PM",
    "Dev/Code",
    "Cloud/Infra",
    "Docs/Files",
    "Comms",
    "Research/Learning",
    "Maps/Travel",
    "Shopping",
    "News/Media",
    OTHER_CATEGORY,
)
CATEGORIES = set(CATEGORY_ORDER)

CATEGORY_PRIORITY: Dict[str, int] = {
    name: len(CATEGORY_ORDER) - index for index, name in enumerate(CATEGORY_ORDER)
}

# User-rule groups outrank every built-in category; domain groups rank below Other.
USER_CATEGORY_PRIORITY = len(CATEGORY_ORDER) + 1
DOMAIN_CATEGORY_PRIORITY = 0

# Chrome tab group palette, in the order colours are handed out.
GROUP_COLORS = (
    "grey",
    "blue",
    "red",
    "yellow",
    "green",
    "pink",
    "purple",
    "cyan",
    "orange",
)
VALID_GROUP_COLORS = set(GROUP_COLORS)

CATEGORY_COLOR_MAP: Dict[str, str] = {
    "Work/PM": "yellow",
    "Dev/Code": "blue",
    "Cloud/Infra": "purple",
    "Docs/Files": "green",
    "Comms": "cyan",
    "Research/Learning": "pink",
    "Maps/Travel": "orange",
    "Shopping": "red",
    "News/Media": "pink",
    OTHER_CATEGORY: "grey",
}

CATEGORY_NEIGHBORS: Dict[str, Tuple[str, ...]] = {
    "Work/PM": ("Dev/Code", "Docs/Files", "Comms"),
    "Dev/Code": ("Cloud/Infra", "Research/Learning", "Work/PM"),
    "Cloud/Infra": ("Dev/Code", "Comms", "Work/PM"),
    "Docs/Files": ("Work/PM", "Comms", "Research/Learning"),
    "Comms": ("Work/PM", "Docs/Files", "Cloud/Infra"),
    "Research/Learning": ("Dev/Code", "Docs/Files", "News/Media"),
    "Maps/Travel": ("Shopping", "News/Media", OTHER_CATEGORY),
    "Shopping": ("News/Media", "Maps/Travel", OTHER_CATEGORY),
    "News/Media": ("Research/Learning", "Comms", OTHER_CATEGORY),
    OTHER_CATEGORY: ("News/Media", "Shopping", "Maps/Travel"),
}


def sanitize_group_color(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    return normalized if normalized in VALID_GROUP_COLORS else None


def normalize_category_name(name: object) -> str:
    """Map anything outside the built-in taxonomy to Other."""
    if not isinstance(name, str):
        return OTHER_CATEGORY
    trimmed = name.strip()
    return trimmed if trimmed in CATEGORIES else OTHER_CATEGORY


def category_priority(name: str) -> int:
    return CATEGORY_PRIORITY.get(name, DOMAIN_CATEGORY_PRIORITY)
