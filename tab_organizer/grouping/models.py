"""Output models for rule-based grouping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Group:
    name: str
    tab_ids: List[int]
    color: Optional[str] = None
    source: str = "keyword"
    base_name: str = ""

    def __post_init__(self) -> None:
        if not self.base_name:
            self.base_name = self.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "tabIds": list(self.tab_ids),
            "color": self.color,
            "source": self.source,
        }


@dataclass
class GroupingResult:
    groups: List[Group] = field(default_factory=list)
    diagnostics: Dict[int, dict] = field(default_factory=dict)

    @property
    def by_name(self) -> Dict[str, List[int]]:
        return {group.name: list(group.tab_ids) for group in self.groups}

    @property
    def colors(self) -> Dict[str, str]:
        return {group.name: group.color for group in self.groups if group.color}

    def explain(self, tab_id: int) -> Optional[dict]:
        return self.diagnostics.get(tab_id)

    def __len__(self) -> int:
        return len(self.groups)

    def to_dict(self) -> dict:
        return {
            "groups": [group.to_dict() for group in self.groups],
            "diagnostics": {str(tab_id): diag for tab_id, diag in self.diagnostics.items()},
        }
