"""Data models for duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional


@dataclass(frozen=True)
class TabSnapshot:
    id: int
    title: str = "Untitled"
    url: str = ""
    pinned: bool = False
    audible: bool = False
    active: bool = False
    group_id: Optional[int] = None
    index: int = 0
    last_accessed: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "pinned": self.pinned,
            "audible": self.audible,
            "active": self.active,
            "groupId": self.group_id,
            "index": self.index,
            "lastAccessed": self.last_accessed,
        }


@dataclass(frozen=True)
class CloseCandidate:
    id: int
    title: str
    url: str
    reason: str
    duplicate_of: int
    domain: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "reason": self.reason,
            "duplicateOf": self.duplicate_of,
            "domain": self.domain,
        }


@dataclass(frozen=True)
class DuplicateSet:
    canonical: Optional[str]
    keeper: TabSnapshot
    closing: tuple

    def to_dict(self) -> dict:
        return {
            "canonical": self.canonical,
            "keeper": self.keeper.id,
            "closing": [tab.id for tab in self.closing],
        }


@dataclass
class DedupePlan:
    tabs_to_close: List[CloseCandidate] = field(default_factory=list)
    survivors: List[TabSnapshot] = field(default_factory=list)
    duplicate_sets: List[DuplicateSet] = field(default_factory=list)

    @property
    def close_ids(self) -> List[int]:
        return [item.id for item in self.tabs_to_close]

    def to_dict(self) -> dict:
        return {
            "tabsToClose": [item.to_dict() for item in self.tabs_to_close],
            "survivors": [tab.id for tab in self.survivors],
            "duplicateSets": [dup.to_dict() for dup in self.duplicate_sets],
        }


def _int_or(value: Any, default: Optional[int]) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def snapshot_tab(raw: Mapping) -> TabSnapshot:
    """Build a snapshot from a browser-style tab mapping, tolerating missing fields."""
    title = raw.get("title")
    url = raw.get("url")
    last_accessed = raw.get("lastAccessed", raw.get("last_accessed"))
    if isinstance(last_accessed, bool) or not isinstance(last_accessed, (int, float)):
        last_accessed = None
    group_id = _int_or(raw.get("groupId", raw.get("group_id")), None)
    if group_id is not None and group_id < 0:
        # Chrome reports TAB_GROUP_ID_NONE as -1.
        group_id = None
    return TabSnapshot(
        id=_int_or(raw.get("id"), -1),
        title=title if isinstance(title, str) else "Untitled",
        url=url if isinstance(url, str) else "",
        pinned=bool(raw.get("pinned")),
        audible=bool(raw.get("audible")),
        active=bool(raw.get("active")),
        group_id=group_id,
        index=_int_or(raw.get("index"), 0),
        last_accessed=last_accessed,
    )


def ensure_snapshots(tabs: Optional[Iterable]) -> List[TabSnapshot]:
    snapshots: List[TabSnapshot] = []
    for tab in tabs or []:
        if isinstance(tab, TabSnapshot):
            snapshots.append(tab)
        elif isinstance(tab, Mapping):
            snapshots.append(snapshot_tab(tab))
    return snapshots
