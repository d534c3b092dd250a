"""Shared tab classification semantics used across planning stages."""

from .matching import compile_pattern, host_matches_base, host_pattern
from .preferences import (
    DEFAULT_PREFERENCES,
    MAX_GROUPS_CEILING,
    MIN_TABS_PER_GROUP,
    clamp_max_groups,
    clamp_max_tabs_per_group,
    merge_preferences,
    normalize_preferences,
)
from .taxonomy import (
    CATEGORY_COLOR_MAP,
    CATEGORY_NEIGHBORS,
    CATEGORY_ORDER,
    CATEGORY_PRIORITY,
    GROUP_COLORS,
    OTHER_CATEGORY,
    normalize_category_name,
    sanitize_group_color,
)
from .text import build_token_frequency, deburr, stem_token, tokenize, truncate_label

__all__ = [
    "compile_pattern",
    "host_matches_base",
    "host_pattern",
    "DEFAULT_PREFERENCES",
    "MAX_GROUPS_CEILING",
    "MIN_TABS_PER_GROUP",
    "clamp_max_groups",
    "clamp_max_tabs_per_group",
    "merge_preferences",
    "normalize_preferences",
    "CATEGORY_COLOR_MAP",
    "CATEGORY_NEIGHBORS",
    "CATEGORY_ORDER",
    "CATEGORY_PRIORITY",
    "GROUP_COLORS",
    "OTHER_CATEGORY",
    "normalize_category_name",
    "sanitize_group_color",
    "build_token_frequency",
    "deburr",
    "stem_token",
    "tokenize",
    "truncate_label",
]
