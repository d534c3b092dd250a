from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.grouping.catalog import CATALOG_RULES
from tab_organizer.grouping.classify import (
    METHOD_CATALOG_RULE,
    METHOD_DOMAIN,
    METHOD_KEYWORD,
    METHOD_USER_RULE,
    classify_tabs,
    diagnostic_for,
    prepare_tab,
)
from tab_organizer.grouping.config import DEFAULT_CFG
from tab_organizer.grouping.rules import RulePattern, UserRule, compile_user_rules
from tab_organizer.tab_policy.taxonomy import OTHER_CATEGORY


def _infos(*specs):
    return [
        prepare_tab(TabSnapshot(id=index, url=url, title=title, index=index))
        for index, (url, title) in enumerate(specs)
    ]


def test_prepare_tab_extracts_host_domain_and_path_segments():
    info = prepare_tab(TabSnapshot(id=1, url="https://www.docs.example.co.uk/a%20b/c/?x=1", title="Café Notes"))

    assert info.host == "docs.example.co.uk"
    assert info.domain == "example.co.uk"
    assert info.path == "/a%20b/c"
    assert info.path_segments == ("a b", "c")
    assert info.normalized_title == "cafe notes"
    assert info.canonical == "https://docs.example.co.uk/a%20b/c?x=1"


def test_prepare_tab_tolerates_unparsable_urls():
    info = prepare_tab(TabSnapshot(id=1, url="not a url", title=""))

    assert info.host == ""
    assert info.domain == ""
    assert info.path == "/"
    assert info.canonical is None


def test_classify_tabs_runs_user_rules_before_catalog_and_keywords():
    infos = _infos(
        ("https://github.com/acme/widgets/pull/1", "Fix"),
        ("https://github.com/acme/widgets", "widgets"),
        ("https://blog.example.com/kubernetes-cluster-deploy", "Deploy a Kubernetes cluster"),
    )
    user_rules = compile_user_rules([UserRule(name="My PRs", host=RulePattern("github\\.com"), path=RulePattern("/pull"))])

    assignments = classify_tabs(infos, user_rules, CATALOG_RULES, DEFAULT_CFG)

    assert [a.category for a in assignments] == ["My PRs", "Dev/Code", "Cloud/Infra"]
    assert [a.method for a in assignments] == [METHOD_USER_RULE, METHOD_CATALOG_RULE, METHOD_KEYWORD]
    assert assignments[1].rule == "GitHub"
    assert assignments[2].score == 15.58


def test_classify_tabs_groups_leftovers_sharing_a_domain():
    infos = _infos(
        ("https://www.site-gazette.com/opinion/column-1", "Column 1"),
        ("https://site-gazette.com/opinion/column-2", "Column 2"),
        ("https://www.other-gazette.com/opinion/column-3", "Column 3"),
    )

    assignments = classify_tabs(infos, (), CATALOG_RULES)

    assert [a.category for a in assignments] == ["site-gazette.com", "site-gazette.com", OTHER_CATEGORY]
    assert assignments[0].method == METHOD_DOMAIN
    assert assignments[0].rule == "site-gazette.com"
    assert assignments[2].method == METHOD_KEYWORD
    assert assignments[2].score is None


def test_diagnostic_for_reports_reason_rule_and_merges():
    infos = _infos(
        ("https://acme.atlassian.net/browse/ABC-1", "ABC-1"),
        ("https://blog.example.com/kubernetes-cluster-deploy", "Deploy a Kubernetes cluster"),
    )
    rule_match, keyword_match = classify_tabs(infos, (), CATALOG_RULES)
    keyword_match.move(OTHER_CATEGORY, "overflow")

    assert diagnostic_for(rule_match) == {"group": "Work/PM", "reason": "category-rule", "rule": "Jira – ABC-1"}
    diagnostic = diagnostic_for(keyword_match, group="Other (2)")
    assert diagnostic["group"] == "Other (2)"
    assert diagnostic["reason"] == "category-keywords"
    assert diagnostic["score"] == 15.58
    assert "kubernet" in diagnostic["keywords"]
    assert diagnostic["merge"] == [{"from": "Cloud/Infra", "to": OTHER_CATEGORY, "reason": "overflow"}]
    assert keyword_match.initial_category == "Cloud/Infra"
