"""Classification cascade: user rules, catalog rules, keywords, then shared domains."""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.dedupe.urls import (
    canonicalize_url,
    effective_domain,
    normalize_host,
    normalize_path,
    path_segments,
    safe_url,
)
from tab_organizer.tab_policy.taxonomy import OTHER_CATEGORY
from tab_organizer.tab_policy.text import build_token_frequency, deburr

from .config import DEFAULT_CFG
from .keywords import score_categories
from .rules import Rule, match_rule

METHOD_USER_RULE = "user-rule"
METHOD_CATALOG_RULE = "catalog-rule"
METHOD_KEYWORD = "keyword"
METHOD_DOMAIN = "domain"

DIAGNOSTIC_REASONS = {
    METHOD_USER_RULE: "user-rule",
    METHOD_CATALOG_RULE: "category-rule",
    METHOD_KEYWORD: "category-keywords",
    METHOD_DOMAIN: "domain-fallback",
}


@dataclass(frozen=True)
class TabInfo:
    tab: TabSnapshot
    host: str
    domain: str
    path: str
    path_segments: Tuple[str, ...]
    canonical: Optional[str]
    title: str
    normalized_title: str
    token_frequency: Dict[str, int]

    @property
    def id(self) -> int:
        return self.tab.id


@dataclass
class MergeStep:
    source: str
    target: str
    reason: str

    def to_dict(self) -> dict:
        return {"from": self.source, "to": self.target, "reason": self.reason}


@dataclass
class Assignment:
    tab_id: int
    info: TabInfo
    category: str
    initial_category: str
    method: str
    rule: Optional[str] = None
    color: Optional[str] = None
    score: Optional[float] = None
    keywords: List[str] = field(default_factory=list)
    merge_history: List[MergeStep] = field(default_factory=list)

    def move(self, target: str, reason: str) -> None:
        self.merge_history.append(MergeStep(self.category, target, reason))
        self.category = target


def prepare_tab(tab: TabSnapshot) -> TabInfo:
    parsed = safe_url(tab.url)
    host = normalize_host(parsed.hostname or "") if parsed is not None else ""
    path = normalize_path(parsed.path) if parsed is not None else "/"
    segments = tuple(urllib.parse.unquote(segment) for segment in path_segments(path))
    title = tab.title or ""
    return TabInfo(
        tab=tab,
        host=host,
        domain=effective_domain(host) or host,
        path=path,
        path_segments=segments,
        canonical=canonicalize_url(tab.url),
        title=title,
        normalized_title=deburr(title.lower()),
        token_frequency=build_token_frequency(title, host, path),
    )


def _rule_assignment(info: TabInfo, rule: Rule, label: str) -> Assignment:
    return Assignment(
        tab_id=info.id,
        info=info,
        category=rule.category,
        initial_category=rule.category,
        method=METHOD_USER_RULE if rule.is_user else METHOD_CATALOG_RULE,
        rule=label,
        color=rule.color,
    )


def _apply_domain_fallback(assignments: List[Assignment], cfg: Dict) -> None:
    """Tabs left in Other that share an effective domain become a domain group."""
    by_domain: Dict[str, List[Assignment]] = {}
    for assignment in assignments:
        if assignment.category == OTHER_CATEGORY and assignment.info.domain:
            by_domain.setdefault(assignment.info.domain, []).append(assignment)
    for domain, members in by_domain.items():
        if len(members) < cfg["domainFallbackMinTabs"]:
            continue
        for assignment in members:
            assignment.category = domain
            assignment.initial_category = domain
            assignment.method = METHOD_DOMAIN
            assignment.rule = domain


def classify_tabs(
    infos: Iterable[TabInfo],
    user_rules: Sequence[Rule] = (),
    catalog: Sequence[Rule] = (),
    cfg: Optional[Dict] = None,
) -> List[Assignment]:
    cfg = cfg or DEFAULT_CFG
    assignments: List[Assignment] = []
    for info in infos:
        # Every rule is tried before any keyword scoring; user rules go first.
        matched = match_rule(user_rules, info) or match_rule(catalog, info)
        if matched is not None:
            assignments.append(_rule_assignment(info, matched.rule, matched.label))
            continue
        scored = score_categories(info, cfg)
        assignments.append(
            Assignment(
                tab_id=info.id,
                info=info,
                category=scored.category,
                initial_category=scored.category,
                method=METHOD_KEYWORD,
                score=round(scored.score, 2) if scored.category != OTHER_CATEGORY else None,
                keywords=scored.keyword_names(),
            )
        )
    _apply_domain_fallback(assignments, cfg)
    return assignments


def diagnostic_for(assignment: Assignment, group: Optional[str] = None) -> dict:
    diagnostic = {
        "group": group if group is not None else assignment.category,
        "reason": DIAGNOSTIC_REASONS.get(assignment.method, assignment.method),
    }
    if assignment.rule:
        diagnostic["rule"] = assignment.rule
    if assignment.score is not None:
        diagnostic["score"] = assignment.score
    if assignment.keywords:
        diagnostic["keywords"] = list(assignment.keywords)
    if assignment.merge_history:
        diagnostic["merge"] = [step.to_dict() for step in assignment.merge_history]
    return diagnostic
