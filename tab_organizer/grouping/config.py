"""Grouping configuration and shared constants."""

from __future__ import annotations

from typing import Dict

from tab_organizer.tab_policy.preferences import MAX_GROUPS_CEILING, MIN_TABS_PER_GROUP
from tab_organizer.tab_policy.text import LABEL_MAX_LEN

CATALOG_RULE_PRIORITY = 800
SPECIFIC_RULE_PRIORITY = 1200
USER_RULE_PRIORITY = 10000

DEFAULT_CFG: Dict = {
    "maxGroups": MAX_GROUPS_CEILING,
    "maxTabsPerGroup": None,
    "preservePinned": True,
    "labelMaxLen": LABEL_MAX_LEN,
    # Keyword classifier weights
    "hostHintWeight": 3.0,
    "pathHintWeight": 1.5,
    "titleHintWeight": 2.0,
    "priorityTieBreak": 0.01,
    # Category limiter
    "smallCategoryMinTabs": MIN_TABS_PER_GROUP,
    "smallMergeMinCategories": 4,
    "neighborBonus": 0.5,
    "domainFallbackMinTabs": 2,
}


def merge_cfg(payload_cfg: Dict | None, override_cfg: Dict | None = None) -> Dict:
    merged = dict(DEFAULT_CFG)
    if payload_cfg:
        merged.update(payload_cfg)
    if override_cfg:
        merged.update(override_cfg)
    return merged
