"""Deterministic tab organizer: duplicate detection and rule-based grouping."""

from .dedupe.models import TabSnapshot, snapshot_tab
from .dedupe.plan import compute_dedupe_plan, dedupe_tabs
from .dedupe.urls import canonicalize_url, extract_domain
from .errors import ConfigurationError, OrganizerError, StateDriftError, TransientError
from .grouping.groups import group_by_rules
from .grouping.rules import parse_user_rules, parse_user_rules_json
from .pipeline import build_organize_plan, revalidate_plan, sanitize_group_plan, summarize_plan_for_preview
from .session import PlanningSession, PreviewStore, RateLimiter

__version__ = "1.0.0"

__all__ = [
    "TabSnapshot",
    "snapshot_tab",
    "compute_dedupe_plan",
    "dedupe_tabs",
    "canonicalize_url",
    "extract_domain",
    "ConfigurationError",
    "OrganizerError",
    "StateDriftError",
    "TransientError",
    "group_by_rules",
    "parse_user_rules",
    "parse_user_rules_json",
    "build_organize_plan",
    "revalidate_plan",
    "sanitize_group_plan",
    "summarize_plan_for_preview",
    "PlanningSession",
    "PreviewStore",
    "RateLimiter",
]
