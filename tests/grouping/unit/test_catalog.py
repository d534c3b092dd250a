import pytest

from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.grouping.catalog import (
    CATALOG_RULES,
    CATEGORY_HOSTS,
    CatalogEntry,
    catalog_entries,
    compile_catalog,
)
from tab_organizer.grouping.classify import prepare_tab
from tab_organizer.grouping.config import SPECIFIC_RULE_PRIORITY
from tab_organizer.grouping.rules import match_rule
from tab_organizer.tab_policy.taxonomy import CATEGORY_ORDER, OTHER_CATEGORY


def _match(url, title=""):
    return match_rule(CATALOG_RULES, prepare_tab(TabSnapshot(id=1, url=url, title=title)))


def test_catalog_is_ordered_by_priority_then_declaration():
    keys = [(-rule.priority, rule.index) for rule in CATALOG_RULES]

    assert keys == sorted(keys)
    assert CATALOG_RULES[0].priority == SPECIFIC_RULE_PRIORITY
    assert all(rule.source == "catalog" for rule in CATALOG_RULES)


def test_catalog_covers_every_built_in_category():
    categories = {rule.category for rule in CATALOG_RULES}

    assert categories == set(CATEGORY_ORDER) - {OTHER_CATEGORY}
    assert set(CATEGORY_HOSTS) == categories


@pytest.mark.parametrize(
    "url, label, category",
    [
        ("https://console.aws.amazon.com/ec2/home", "AWS Console", "Cloud/Infra"),
        ("https://aws.amazon.com/ec2/pricing/", "AWS", "Cloud/Infra"),
        ("https://s3.amazonaws.com/bucket/key", "AWS", "Cloud/Infra"),
        ("https://www.amazon.com/dp/B000000001", "Amazon", "Shopping"),
        ("https://www.amazon.co.uk/gp/product/B000000002", "Amazon", "Shopping"),
        ("https://www.amazon.com/s?k=usb+cable", "Amazon Search", "Shopping"),
        ("https://outlook.office.com/mail/", "Outlook", "Comms"),
        ("https://www.office.com/", "Office 365", "Docs/Files"),
        ("https://www.google.com/search?q=tabs", "Google Search", "Research/Learning"),
        ("https://www.google.com/maps/place/Paris", "Google Maps", "Maps/Travel"),
        ("https://gist.github.com/someone/abc123", "GitHub Gist", "Dev/Code"),
        ("https://github.com/acme/widgets", "GitHub", "Dev/Code"),
        ("https://mail.google.com/mail/u/0/#inbox", "Gmail", "Comms"),
        ("https://docs.google.com/document/d/1/edit", "Google Docs", "Docs/Files"),
        ("https://open.spotify.com/track/1", "Spotify", "News/Media"),
        ("https://en.wikipedia.org/wiki/Tab", "Wikipedia", "Research/Learning"),
        ("https://www.bbc.co.uk/news", "BBC", "News/Media"),
    ],
)
def test_catalog_routes_known_services(url, label, category):
    matched = _match(url)

    assert matched is not None
    assert matched.label == label
    assert matched.category == category


def test_catalog_host_rules_do_not_match_lookalike_hosts():
    assert _match("https://notgithub.com/acme") is None
    assert _match("https://example.com/") is None


def test_catalog_entries_list_specific_rules_first():
    entries = catalog_entries()
    labels = [entry.label for entry in entries]

    assert entries[0].priority == SPECIFIC_RULE_PRIORITY
    assert labels.index("GitHub Gist") < labels.index("GitHub")


def test_compile_catalog_skips_entries_without_patterns():
    assert compile_catalog([CatalogEntry("Dev/Code", "Nothing")]) == []

    rules = compile_catalog([CatalogEntry("Dev/Code", "Broken", host_regex="(")])
    assert rules == []
