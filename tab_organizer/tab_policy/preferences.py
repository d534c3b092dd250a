"""Organizer preferences: defaults, merging and clamping."""

from __future__ import annotations

from typing import Dict, Optional

MIN_TABS_PER_GROUP = 2
MAX_GROUPS_CEILING = 5

DEFAULT_PREFERENCES: Dict = {
    "model": "gpt-4o-mini",
    "keepAtLeastOnePerDomain": True,
    "preservePinned": True,
    "maxTabsPerGroup": 6,
    "maxGroups": MAX_GROUPS_CEILING,
    "dryRun": False,
    "dryRunNoLLM": False,
    "userRulesJSON": "",
    "previewTtlSeconds": 300,
    "rateLimitIntervalSeconds": 5,
}


def merge_preferences(stored: Dict | None, override: Dict | None = None) -> Dict:
    merged = dict(DEFAULT_PREFERENCES)
    if stored:
        merged.update(stored)
    if override:
        merged.update(override)
    return merged


def clamp_max_tabs_per_group(value: object, default: Optional[int] = None) -> Optional[int]:
    """Non-numeric -> `default`; anything below the minimum is raised to it."""
    if isinstance(value, bool):
        return default
    try:
        number = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
    return max(MIN_TABS_PER_GROUP, number)


def clamp_max_groups(value: object) -> int:
    if isinstance(value, bool):
        return MAX_GROUPS_CEILING
    try:
        number = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return MAX_GROUPS_CEILING
    return max(1, min(MAX_GROUPS_CEILING, number))


def _flag(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in {"0", "false", "no", "off", "n", ""}
    return value is not False


def _positive_float(value: object, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def normalize_preferences(raw: Dict | None) -> Dict:
    """Merge with defaults and clamp every value into its safe range."""
    merged = merge_preferences(raw)
    model = merged.get("model")
    rules = merged.get("userRulesJSON")
    return {
        "model": model.strip() if isinstance(model, str) and model.strip() else DEFAULT_PREFERENCES["model"],
        "keepAtLeastOnePerDomain": _flag(merged.get("keepAtLeastOnePerDomain"), True),
        "preservePinned": _flag(merged.get("preservePinned"), True),
        "maxTabsPerGroup": clamp_max_tabs_per_group(
            merged.get("maxTabsPerGroup"),
            default=DEFAULT_PREFERENCES["maxTabsPerGroup"],
        ),
        "maxGroups": clamp_max_groups(merged.get("maxGroups")),
        "dryRun": bool(merged.get("dryRun")),
        "dryRunNoLLM": bool(merged.get("dryRunNoLLM")),
        "userRulesJSON": rules if isinstance(rules, str) else "",
        "previewTtlSeconds": _positive_float(
            merged.get("previewTtlSeconds"), DEFAULT_PREFERENCES["previewTtlSeconds"]
        ),
        "rateLimitIntervalSeconds": _positive_float(
            merged.get("rateLimitIntervalSeconds"), DEFAULT_PREFERENCES["rateLimitIntervalSeconds"]
        ),
    }
