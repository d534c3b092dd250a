"""Keyword scoring for tabs that no rule claims."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from tab_organizer.tab_policy.taxonomy import (
    CATEGORY_NEIGHBORS,
    CATEGORY_PRIORITY,
    OTHER_CATEGORY,
)
from tab_organizer.tab_policy.text import stem_token

from .config import DEFAULT_CFG

CATEGORY_KEYWORD_DEFINITIONS: Dict[str, Dict] = {
    "Work/PM": {
        "keywords": {
            "jira": 4,
            "issue": 3,
            "ticket": 3,
            "board": 2,
            "sprint": 2,
            "backlog": 2,
            "project": 2,
            "task": 2,
            "kanban": 2,
            "roadmap": 2,
            "story": 2,
            "milestone": 2,
            "notion": 1.5,
            "asana": 3,
            "trello": 3,
            "monday": 3,
            "clickup": 3,
            "productboard": 2,
        },
        "host_hints": (
            "jira",
            "atlassian",
            "linear",
            "trello",
            "asana",
            "monday",
            "notion",
            "clickup",
            "shortcut",
            "productboard",
        ),
        "path_hints": ("board", "sprint", "project", "kanban"),
        "threshold": 4,
    },
    "Dev/Code": {
        "keywords": {
            "git": 3,
            "repo": 3,
            "pull": 3,
            "merge": 3,
            "commit": 3,
            "branch": 2,
            "code": 2,
            "diff": 2,
            "issue": 2,
            "pr": 3,
            "review": 2,
            "package": 2,
            "library": 2,
            "sdk": 2,
            "api": 2,
            "ci": 2,
        },
        "host_hints": (
            "github",
            "gitlab",
            "bitbucket",
            "sourcegraph",
            "npm",
            "pypi",
            "rubygems",
            "crates",
            "docker",
        ),
        "path_hints": ("pull", "merge", "commit", "blob", "tree"),
        "threshold": 4,
    },
    "Cloud/Infra": {
        "keywords": {
            "cloud": 3,
            "aws": 3,
            "gcp": 3,
            "azure": 3,
            "console": 2,
            "cluster": 2,
            "kube": 3,
            "kubernet": 3,
            "deploy": 2,
            "infrastructure": 3,
            "instance": 2,
            "server": 2,
            "pipeline": 2,
            "metric": 2,
            "monitor": 2,
            "log": 2,
            "alert": 2,
        },
        "host_hints": (
            "aws",
            "amazonaws",
            "cloud",
            "azure",
            "cloudflare",
            "vercel",
            "render",
            "railway",
            "fly.io",
            "heroku",
            "supabase",
            "planetscale",
            "datadog",
            "newrelic",
            "grafana",
            "sentry",
            "pagerduty",
            "circleci",
            "buildkite",
        ),
        "path_hints": ("deploy", "pipeline", "console"),
        "threshold": 4,
    },
    "Docs/Files": {
        "keywords": {
            "doc": 3,
            "docs": 3,
            "sheet": 3,
            "slide": 3,
            "drive": 3,
            "file": 2,
            "folder": 2,
            "pdf": 2,
            "presentation": 2,
            "spreadsheet": 3,
            "notebook": 2,
            "note": 2,
        },
        "host_hints": (
            "docs.google",
            "drive.google",
            "dropbox",
            "box.com",
            "onedrive",
            "sharepoint",
            "office.com",
        ),
        "path_hints": ("document", "presentation", "spreadsheets"),
        "threshold": 4,
    },
    "Comms": {
        "keywords": {
            "mail": 3,
            "inbox": 3,
            "calendar": 3,
            "meeting": 2,
            "meet": 2,
            "chat": 3,
            "message": 3,
            "call": 2,
            "video": 2,
            "slack": 3,
            "teams": 3,
            "invite": 2,
            "reply": 2,
        },
        "host_hints": (
            "mail.google",
            "outlook",
            "teams",
            "slack",
            "discord",
            "telegram",
            "whatsapp",
            "zoom",
            "meet.google",
            "calendar.google",
            "calendly",
        ),
        "title_hints": ("meeting", "standup", "1:1"),
        "threshold": 4,
    },
    "Research/Learning": {
        "keywords": {
            "search": 3,
            "learn": 3,
            "tutorial": 3,
            "guide": 3,
            "reference": 3,
            "docs": 2,
            "wiki": 3,
            "stack": 2,
            "question": 2,
            "answer": 2,
            "blog": 2,
            "analysis": 2,
            "how": 2,
        },
        "host_hints": (
            "google",
            "scholar",
            "arxiv",
            "stackoverflow",
            "stackexchange",
            "mozilla",
            "wikipedia",
            "medium",
            "dev.to",
            "freecodecamp",
        ),
        "path_hints": ("search", "learn"),
        "threshold": 3,
    },
    "Maps/Travel": {
        "keywords": {
            "map": 3,
            "maps": 3,
            "travel": 3,
            "trip": 3,
            "flight": 3,
            "hotel": 3,
            "booking": 3,
            "airbnb": 3,
            "route": 2,
            "direction": 2,
            "itinerary": 2,
            "ride": 2,
            "airport": 2,
        },
        "host_hints": (
            "maps.google",
            "booking",
            "airbnb",
            "expedia",
            "kayak",
            "skyscanner",
            "uber",
            "lyft",
            "tripadvisor",
        ),
        "path_hints": ("maps", "travel"),
        "threshold": 3,
    },
    "Shopping": {
        "keywords": {
            "buy": 3,
            "cart": 3,
            "checkout": 3,
            "order": 3,
            "product": 3,
            "price": 2,
            "deal": 2,
            "sale": 2,
            "shop": 2,
            "wishlist": 2,
            "shipping": 2,
            "basket": 2,
        },
        "host_hints": (
            "amazon",
            "ebay",
            "aliexpress",
            "etsy",
            "walmart",
            "target",
            "bestbuy",
            "costco",
        ),
        "path_hints": ("cart", "checkout"),
        "threshold": 3,
    },
    "News/Media": {
        "keywords": {
            "news": 3,
            "headline": 3,
            "article": 3,
            "review": 3,
            "reddit": 3,
            "hn": 2,
            "video": 3,
            "watch": 3,
            "stream": 3,
            "episode": 2,
            "podcast": 2,
            "feed": 2,
            "breaking": 3,
            "story": 2,
        },
        "host_hints": (
            "news.ycombinator",
            "reddit",
            "techcrunch",
            "verge",
            "nytimes",
            "washingtonpost",
            "bbc",
            "cnn",
            "youtube",
            "netflix",
            "hulu",
            "spotify",
        ),
        "title_hints": ("breaking", "episode", "season"),
        "threshold": 3,
    },
}


@dataclass(frozen=True)
class KeywordCategory:
    name: str
    keywords: Dict[str, float]
    host_hints: Tuple[str, ...]
    path_hints: Tuple[str, ...]
    title_hints: Tuple[Pattern[str], ...]
    threshold: float
    priority: int


@dataclass(frozen=True)
class KeywordScore:
    category: str
    score: float = 0.0
    keywords: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)

    def keyword_names(self) -> List[str]:
        return [keyword for keyword, _ in self.keywords]


def _stemmed_keywords(raw: Dict[str, float]) -> Dict[str, float]:
    """Stem dictionary keys the way tab tokens are stemmed; collisions keep the larger weight."""
    stemmed: Dict[str, float] = {}
    for keyword, weight in raw.items():
        key = stem_token(keyword.lower())
        stemmed[key] = max(weight, stemmed.get(key, 0))
    return stemmed


def build_keyword_map(definitions: Dict[str, Dict] = CATEGORY_KEYWORD_DEFINITIONS) -> Dict[str, KeywordCategory]:
    keyword_map: Dict[str, KeywordCategory] = {}
    for name, definition in definitions.items():
        keyword_map[name] = KeywordCategory(
            name=name,
            keywords=_stemmed_keywords(definition.get("keywords", {})),
            host_hints=tuple(definition.get("host_hints", ())),
            path_hints=tuple(definition.get("path_hints", ())),
            title_hints=tuple(re.compile(hint, re.IGNORECASE) for hint in definition.get("title_hints", ())),
            threshold=definition.get("threshold", 3),
            priority=definition.get("priority", CATEGORY_PRIORITY.get(name, 0)),
        )
    return keyword_map


KEYWORD_MAP: Dict[str, KeywordCategory] = build_keyword_map()


def _score_one(config: KeywordCategory, info, cfg: Dict) -> Tuple[float, List[Tuple[str, float]]]:
    frequency = info.token_frequency or {}
    score = 0.0
    matches: List[Tuple[str, float]] = []
    for keyword, weight in config.keywords.items():
        count = frequency.get(keyword)
        if count:
            contribution = count * weight
            score += contribution
            matches.append((keyword, contribution))
    score += cfg["hostHintWeight"] * sum(1 for hint in config.host_hints if hint in info.host)
    score += cfg["pathHintWeight"] * sum(1 for hint in config.path_hints if hint in info.path)
    score += cfg["titleHintWeight"] * sum(1 for hint in config.title_hints if hint.search(info.title))
    return score, matches


def score_categories(info, cfg: Optional[Dict] = None) -> KeywordScore:
    """Best category whose score reaches its threshold; Other when none does."""
    cfg = cfg or DEFAULT_CFG
    best = KeywordScore(category=OTHER_CATEGORY)
    best_priority = 0
    for name, config in KEYWORD_MAP.items():
        if name == OTHER_CATEGORY:
            continue
        score, matches = _score_one(config, info, cfg)
        if score < config.threshold:
            continue
        adjusted = score + config.priority * cfg["priorityTieBreak"]
        tied = abs(adjusted - best.score) < 0.0001
        if adjusted > best.score or (tied and config.priority > best_priority):
            matches.sort(key=lambda item: item[1], reverse=True)
            best = KeywordScore(category=name, score=adjusted, keywords=tuple(matches[:5]))
            best_priority = config.priority
    return best


def category_similarity(a: str, b: str, cfg: Optional[Dict] = None) -> float:
    """Shared keyword weight plus a bonus for each direction of the neighbour table."""
    if a == b:
        return float("inf")
    cfg = cfg or DEFAULT_CFG
    score = 0.0
    config_a = KEYWORD_MAP.get(a)
    config_b = KEYWORD_MAP.get(b)
    if config_a is not None and config_b is not None:
        for keyword, weight in config_a.keywords.items():
            if keyword in config_b.keywords:
                score += min(weight, config_b.keywords[keyword])
    if b in CATEGORY_NEIGHBORS.get(a, ()):
        score += cfg["neighborBonus"]
    if a in CATEGORY_NEIGHBORS.get(b, ()):
        score += cfg["neighborBonus"]
    return score
