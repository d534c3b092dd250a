"""Per-run planning state and the stores callers keep between runs."""

from __future__ import annotations

import math
import time
import uuid
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from tab_organizer.dedupe.models import DedupePlan, TabSnapshot
from tab_organizer.dedupe.plan import compute_dedupe_plan
from tab_organizer.grouping.classify import TabInfo, prepare_tab
from tab_organizer.grouping.groups import group_by_rules
from tab_organizer.grouping.models import GroupingResult
from tab_organizer.tab_policy.preferences import DEFAULT_PREFERENCES

from .errors import StateDriftError, TransientError

PREVIEW_EXPIRED_MESSAGE = "Preview expired. Please analyze the tabs again."

Clock = Callable[[], float]


class PlanningSession:
    """One planning pass: caches per-tab classification info and the last diagnostics."""

    def __init__(self) -> None:
        self._infos: Dict[Tuple[int, str, str], TabInfo] = {}
        self._diagnostics: Dict[int, dict] = {}

    def info_for(self, tab: TabSnapshot) -> TabInfo:
        key = (tab.id, tab.url, tab.title)
        info = self._infos.get(key)
        if info is None:
            info = prepare_tab(tab)
            self._infos[key] = info
        return info

    def compute_dedupe_plan(self, tabs: Iterable, **options: Any) -> DedupePlan:
        return compute_dedupe_plan(tabs, **options)

    def group_by_rules(self, tabs: Iterable, **options: Any) -> GroupingResult:
        options.setdefault("info_for", self.info_for)
        result = group_by_rules(tabs, **options)
        self._diagnostics = dict(result.diagnostics)
        return result

    def explain_classification(self, tab: Any) -> Optional[dict]:
        """Diagnostic for a tab (or tab id) from the most recent grouping run."""
        if isinstance(tab, bool):
            return None
        if isinstance(tab, int):
            tab_id = tab
        elif isinstance(tab, TabSnapshot):
            tab_id = tab.id
        elif isinstance(tab, dict) and isinstance(tab.get("id"), int):
            tab_id = tab["id"]
        else:
            return None
        return self._diagnostics.get(tab_id)


class PreviewStore:
    """Dry-run plans held until the user confirms them or the TTL passes."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_PREFERENCES["previewTtlSeconds"],
        clock: Clock = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._plans: Dict[str, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._plans)

    def cleanup(self) -> int:
        now = self._clock()
        expired = [token for token, (created, _) in self._plans.items() if now - created > self.ttl_seconds]
        for token in expired:
            del self._plans[token]
        return len(expired)

    def put(self, plan: Any) -> str:
        self.cleanup()
        token = str(uuid.uuid4())
        self._plans[token] = (self._clock(), plan)
        return token

    def take(self, token: str) -> Any:
        """Pop a stored plan; unknown or expired tokens raise StateDriftError."""
        self.cleanup()
        stored = self._plans.pop(token, None)
        if stored is None:
            raise StateDriftError(PREVIEW_EXPIRED_MESSAGE)
        return stored[1]


class RateLimiter:
    """Minimum interval between completed organize runs."""

    def __init__(
        self,
        interval_seconds: float = DEFAULT_PREFERENCES["rateLimitIntervalSeconds"],
        clock: Clock = time.monotonic,
    ) -> None:
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._last_completion: Optional[float] = None

    def remaining(self) -> float:
        if self._last_completion is None:
            return 0.0
        elapsed = self._clock() - self._last_completion
        return max(0.0, self.interval_seconds - elapsed)

    def check(self) -> None:
        wait = self.remaining()
        if wait > 0:
            seconds = math.ceil(wait)
            raise TransientError(
                f"Please wait {seconds} more second(s) before organizing again.",
                retry_after=wait,
            )

    def mark(self) -> None:
        self._last_completion = self._clock()
