"""Compiled grouping rules: user rules, catalog rules and first-match-wins lookup."""

from __future__ import annotations

import enum
import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Pattern, Sequence, TextIO

from tab_organizer.errors import ConfigurationError
from tab_organizer.tab_policy.matching import compile_pattern
from tab_organizer.tab_policy.taxonomy import sanitize_group_color
from tab_organizer.tab_policy.text import truncate_label

from .config import USER_RULE_PRIORITY

RULE_NAME_MAX_LEN = 60

_ISSUE_KEY = re.compile(r"([A-Z][A-Z0-9]+-\d+)")
_SLACK_TITLE = re.compile(r"(.*?)\s+(?:[-|])\s+Slack", re.IGNORECASE)

_LINKEDIN_VIEWS = {
    "jobs": "Jobs",
    "in": "Profiles",
    "messaging": "Messaging",
    "notifications": "Notifications",
}

# Raw user-rule keys and the aliases accepted for each pattern field.
_PATTERN_ALIASES = {
    "host": ("host", "hostname", "hostPattern"),
    "path": ("path", "pathname", "pathPattern"),
    "title": ("title", "titlePattern"),
}


class DeriveStrategy(enum.Enum):
    IDENTITY = "identity"
    GITHUB_REPO = "github-repo"
    ISSUE_KEY = "issue-key"
    SLACK_CHANNEL = "slack-channel"
    SUBREDDIT = "subreddit"
    LINKEDIN_VIEW = "linkedin-view"


@dataclass(frozen=True)
class RulePattern:
    pattern: str
    flags: str = "i"


@dataclass(frozen=True)
class UserRule:
    name: str
    host: Optional[RulePattern] = None
    path: Optional[RulePattern] = None
    title: Optional[RulePattern] = None
    color: Optional[str] = None
    priority: float = USER_RULE_PRIORITY


@dataclass(frozen=True)
class Rule:
    name: str
    category: str
    label: str
    color: Optional[str]
    priority: float
    index: int
    source: str
    host: Optional[Pattern[str]] = None
    path: Optional[Pattern[str]] = None
    title: Optional[Pattern[str]] = None
    derive: DeriveStrategy = DeriveStrategy.IDENTITY
    derive_arg: Optional[str] = None

    @property
    def is_user(self) -> bool:
        return self.source == "user"

    def matches(self, info) -> bool:
        if self.host is None and self.path is None and self.title is None:
            return False
        if self.host is not None and not self.host.search(info.host):
            return False
        if self.path is not None and not self.path.search(info.path):
            return False
        if self.title is not None and not self.title.search(info.title):
            return False
        return True


@dataclass(frozen=True)
class RuleMatch:
    rule: Rule
    label: str

    @property
    def category(self) -> str:
        return self.rule.category

    @property
    def color(self) -> Optional[str]:
        return self.rule.color


def _github_repo(segments: Sequence[str]) -> Optional[str]:
    if len(segments) < 2:
        return None
    owner, repo = segments[0], segments[1]
    if not owner or not repo or owner == "topics":
        return None
    repo = re.sub(r"\.git$", "", repo, flags=re.IGNORECASE)
    return f"{owner}/{repo}"


def extract_issue_key(segments: Sequence[str]) -> Optional[str]:
    for segment in segments:
        match = _ISSUE_KEY.search(segment.upper())
        if match:
            return match.group(1)
    return None


def extract_subreddit(segments: Sequence[str]) -> Optional[str]:
    if "r" in segments:
        index = segments.index("r")
        if index + 1 < len(segments) and segments[index + 1]:
            return segments[index + 1]
    return None


def linkedin_view(segments: Sequence[str]) -> str:
    if not segments:
        return "Feed"
    return _LINKEDIN_VIEWS.get(segments[0], "Feed")


def derive_label(rule: Rule, info) -> str:
    """Refine a catalog label from the tab's path or title; the category never changes."""
    segments = info.path_segments
    if rule.derive is DeriveStrategy.GITHUB_REPO:
        repo = _github_repo(segments)
        if repo:
            return f"GitHub – {repo} – {rule.derive_arg}"
    elif rule.derive is DeriveStrategy.ISSUE_KEY:
        key = extract_issue_key(segments)
        if key:
            return f"{rule.derive_arg} – {key}"
    elif rule.derive is DeriveStrategy.SLACK_CHANNEL:
        match = _SLACK_TITLE.search(info.title or "")
        if match and match.group(1).strip():
            return f"Slack – {truncate_label(match.group(1).strip())}"
    elif rule.derive is DeriveStrategy.SUBREDDIT:
        subreddit = extract_subreddit(segments)
        if subreddit:
            return f"Reddit – r/{subreddit}"
    elif rule.derive is DeriveStrategy.LINKEDIN_VIEW:
        return f"LinkedIn – {linkedin_view(segments)}"
    return rule.label


def match_rule(rules: Iterable[Rule], info) -> Optional[RuleMatch]:
    """First matching rule wins; `rules` must already be in evaluation order."""
    for rule in rules:
        if rule.matches(info):
            return RuleMatch(rule=rule, label=derive_label(rule, info))
    return None


def _rule_pattern(raw: Any, flags: Any) -> Optional[RulePattern]:
    if isinstance(raw, dict):
        flags = raw.get("flags", flags)
        raw = raw.get("pattern")
    if not isinstance(raw, str) or not raw.strip():
        return None
    return RulePattern(pattern=raw.strip(), flags=flags if isinstance(flags, str) else "i")


def _first_present(entry: dict, keys: Sequence[str]) -> Any:
    for key in keys:
        if entry.get(key):
            return entry[key]
    return None


def _priority(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return USER_RULE_PRIORITY
    return value


def _skip(stderr: Optional[TextIO], index: int, reason: str) -> None:
    if stderr is not None:
        print(f"[rules] skipping rule #{index}: {reason}", file=stderr)


def parse_user_rules(raw: Any, *, stderr: Optional[TextIO] = None) -> List[UserRule]:
    """Normalize raw rule dicts into UserRule records, skipping malformed entries."""
    if isinstance(raw, dict):
        raw = raw.get("rules", [])
    if not isinstance(raw, list):
        return []

    rules: List[UserRule] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            _skip(stderr, index, "not an object")
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            _skip(stderr, index, "missing name")
            continue
        flags = entry.get("flags", "i")
        patterns = {
            field: _rule_pattern(_first_present(entry, aliases), flags)
            for field, aliases in _PATTERN_ALIASES.items()
        }
        if not any(patterns.values()):
            _skip(stderr, index, "no host, path or title pattern")
            continue
        rules.append(
            UserRule(
                name=name.strip()[:RULE_NAME_MAX_LEN],
                host=patterns["host"],
                path=patterns["path"],
                title=patterns["title"],
                color=sanitize_group_color(entry.get("color")),
                priority=_priority(entry.get("priority")),
            )
        )
    return rules


def parse_user_rules_json(
    text: Optional[str],
    *,
    stderr: Optional[TextIO] = None,
    strict: bool = False,
) -> List[UserRule]:
    """Parse the userRulesJSON preference. Invalid JSON yields no rules unless `strict`."""
    if not text or not str(text).strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        if strict:
            raise ConfigurationError(f"Custom rules are not valid JSON: {exc}") from exc
        if stderr is not None:
            print(f"[rules] invalid rules JSON: {exc}", file=stderr)
        return []
    return parse_user_rules(payload, stderr=stderr)


def _compile(pattern: Optional[RulePattern]) -> Optional[Pattern[str]]:
    if pattern is None:
        return None
    return compile_pattern(pattern.pattern, pattern.flags)


def _ordered(rules: List[Rule]) -> List[Rule]:
    return sorted(rules, key=lambda rule: (-rule.priority, rule.index))


def compile_user_rules(rules: Iterable[UserRule]) -> List[Rule]:
    """Compile user rules; a rule survives only if every declared pattern compiles."""
    compiled: List[Rule] = []
    for index, rule in enumerate(rules or ()):
        if not isinstance(rule, UserRule):
            continue
        sources = (rule.host, rule.path, rule.title)
        patterns = [_compile(source) for source in sources]
        if all(source is None for source in sources):
            continue
        if any(source is not None and built is None for source, built in zip(sources, patterns)):
            continue
        name = truncate_label(rule.name)
        if not name:
            continue
        compiled.append(
            Rule(
                name=name,
                category=name,
                label=name,
                color=sanitize_group_color(rule.color),
                priority=rule.priority,
                index=index,
                source="user",
                host=patterns[0],
                path=patterns[1],
                title=patterns[2],
            )
        )
    return _ordered(compiled)


def order_catalog(rules: Iterable[Rule]) -> List[Rule]:
    return _ordered(list(rules))
