"""Plan invariant registry used by tests.

Each invariant states a guarantee the organizer makes about every plan it
produces. Tests reference these via @pytest.mark.invariant("INV-xxx").
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class PlanInvariant:
    invariant_id: str
    stages: Tuple[str, ...]
    statement: str


INVARIANTS: Dict[str, PlanInvariant] = {
    "INV-001": PlanInvariant(
        invariant_id="INV-001",
        stages=("canonicalize",),
        statement="Canonicalizing an already canonical http(s) URL returns the same string.",
    ),
    "INV-002": PlanInvariant(
        invariant_id="INV-002",
        stages=("dedupe",),
        statement="Dedupe is deterministic and keeps exactly one tab per canonical URL.",
    ),
    "INV-003": PlanInvariant(
        invariant_id="INV-003",
        stages=("dedupe",),
        statement="With preservePinned, no pinned tab is ever proposed for closing.",
    ),
    "INV-004": PlanInvariant(
        invariant_id="INV-004",
        stages=("dedupe",),
        statement="With keepAtLeastOnePerDomain, every input domain keeps a surviving tab.",
    ),
    "INV-005": PlanInvariant(
        invariant_id="INV-005",
        stages=("grouping",),
        statement="Grouping never produces more than five base groups.",
    ),
    "INV-006": PlanInvariant(
        invariant_id="INV-006",
        stages=("grouping",),
        statement="No group exceeds maxTabsPerGroup; suffixed siblings cover every tab once.",
    ),
    "INV-007": PlanInvariant(
        invariant_id="INV-007",
        stages=("grouping",),
        statement="A user rule wins over any catalog rule matching the same tab.",
    ),
    "INV-008": PlanInvariant(
        invariant_id="INV-008",
        stages=("dedupe", "grouping"),
        statement="Every unpinned input tab is grouped exactly once or planned for closing.",
    ),
}
