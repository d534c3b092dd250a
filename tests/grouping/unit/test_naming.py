from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.grouping.classify import (
    METHOD_CATALOG_RULE,
    METHOD_DOMAIN,
    METHOD_USER_RULE,
    Assignment,
    prepare_tab,
)
from tab_organizer.grouping.models import Group
from tab_organizer.grouping.naming import (
    assign_unique_group_colors,
    chunk_group,
    chunk_name,
    resolve_group_color,
)
from tab_organizer.tab_policy.taxonomy import GROUP_COLORS


def _assignment(category, method, color=None):
    info = prepare_tab(TabSnapshot(id=1, url="https://example.com/"))
    return Assignment(
        tab_id=1,
        info=info,
        category=category,
        initial_category=category,
        method=method,
        color=color,
    )


def test_chunk_name_suffixes_every_chunk_after_the_first():
    assert chunk_name("Dev/Code", 0) == "Dev/Code"
    assert chunk_name("Dev/Code", 1) == "Dev/Code (2)"
    assert chunk_name("Dev/Code", 2) == "Dev/Code (3)"


def test_chunk_group_splits_in_order():
    chunks = chunk_group("Dev/Code", list(range(9)), 4)

    assert chunks == [
        ("Dev/Code", [0, 1, 2, 3]),
        ("Dev/Code (2)", [4, 5, 6, 7]),
        ("Dev/Code (3)", [8]),
    ]


def test_chunk_group_without_limit_keeps_one_chunk():
    assert chunk_group("Shopping", [3, 1, 2], None) == [("Shopping", [3, 1, 2])]
    assert chunk_group("Shopping", [], 4) == []


def test_chunk_group_truncates_base_name_before_suffixing():
    chunks = chunk_group("A really long custom group name here", [1, 2, 3], 2)

    assert chunks[0][0] == "A really long custom grou…"
    assert chunks[1][0] == "A really long custom grou… (2)"


def test_resolve_group_color_prefers_user_rule_color():
    members = [_assignment("Reading", METHOD_USER_RULE, color="cyan")]

    assert resolve_group_color("Reading", members) == "cyan"
    assert resolve_group_color("Dev/Code", [_assignment("Dev/Code", METHOD_CATALOG_RULE)]) == "blue"
    assert resolve_group_color("example.com", [_assignment("example.com", METHOD_DOMAIN)]) is None


def test_resolve_group_color_ignores_user_colors_after_a_merge():
    member = _assignment("Reading", METHOD_USER_RULE, color="cyan")
    member.move("Other", "small")

    assert resolve_group_color("Other", [member]) == "grey"


def test_assign_unique_group_colors_resolves_clashes_and_keeps_chunk_colors():
    groups = [
        Group("Research/Learning", [1], "pink"),
        Group("News/Media", [2], "pink"),
        Group("News/Media (2)", [3], "pink", base_name="News/Media"),
        Group("example.com", [4], None),
    ]

    colored = assign_unique_group_colors(groups)

    assert [group.color for group in colored] == ["pink", "grey", "grey", "blue"]
    assert [group.color for group in groups] == ["pink", "pink", "pink", None]


def test_assign_unique_group_colors_repeats_palette_once_exhausted():
    groups = [Group(f"g{i}", [i]) for i in range(len(GROUP_COLORS) + 1)]

    colored = assign_unique_group_colors(groups)

    assert [group.color for group in colored[: len(GROUP_COLORS)]] == list(GROUP_COLORS)
    assert colored[-1].color == GROUP_COLORS[0]
