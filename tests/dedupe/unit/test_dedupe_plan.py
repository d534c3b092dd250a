from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.dedupe.plan import compute_dedupe_plan, dedupe_key, dedupe_tabs, score_tab


def _tab(tab_id, url, **overrides):
    base = {"id": tab_id, "url": url, "title": f"Tab {tab_id}", "index": tab_id}
    base.update(overrides)
    return base


def test_trailing_slash_and_www_variants_are_duplicates():
    tabs = [
        _tab(0, "https://www.example.com/page/", title="Example page"),
        _tab(1, "https://example.com/page"),
    ]

    plan = compute_dedupe_plan(tabs)

    assert [tab.id for tab in plan.survivors] == [0]
    assert plan.close_ids == [1]
    assert "Duplicate of" in plan.tabs_to_close[0].reason
    assert plan.tabs_to_close[0].reason == 'Duplicate of "Example page"'
    assert plan.tabs_to_close[0].duplicate_of == 0
    assert plan.tabs_to_close[0].domain == "example.com"


def test_active_tab_is_kept_over_earlier_position():
    tabs = [_tab(0, "https://example.com/a"), _tab(1, "https://example.com/a", active=True)]

    plan = compute_dedupe_plan(tabs)

    assert plan.close_ids == [0]
    assert plan.duplicate_sets[0].keeper.id == 1


def test_recently_accessed_tab_wins_when_nothing_else_differs():
    tabs = [
        _tab(0, "https://example.com/a", lastAccessed=1000),
        _tab(1, "https://example.com/a", lastAccessed=9000),
    ]

    plan = compute_dedupe_plan(tabs)

    assert plan.close_ids == [0]


def test_equal_scores_keep_the_first_tab():
    tabs = [_tab(5, "https://example.com/a", index=0), _tab(6, "https://example.com/a", index=0)]

    plan = compute_dedupe_plan(tabs)

    assert plan.close_ids == [6]


def test_score_tab_weights_pins_by_preference():
    pinned = TabSnapshot(id=1, pinned=True, index=0)

    assert score_tab(pinned, prefer_pinned=True) == 8100
    assert score_tab(pinned, prefer_pinned=False) == 2100
    assert score_tab(TabSnapshot(id=2, audible=True, index=10), prefer_pinned=False) == 490


def test_pinned_duplicate_survives_when_pins_are_preserved():
    tabs = [
        _tab(0, "https://example.com/a", active=True),
        _tab(1, "https://example.com/a", pinned=True),
    ]

    plan = compute_dedupe_plan(tabs, preserve_pinned=True)

    assert plan.tabs_to_close == []
    assert [tab.id for tab in plan.survivors] == [0, 1]


def test_pinned_duplicate_can_close_when_pins_are_not_preserved():
    tabs = [
        _tab(0, "https://example.com/a", active=True),
        _tab(1, "https://example.com/a", pinned=True),
    ]

    plan = compute_dedupe_plan(tabs, preserve_pinned=False)

    assert plan.close_ids == [1]


def test_unparsable_urls_never_collide():
    tabs = [_tab(0, "not a url"), _tab(1, "not a url"), _tab(2, "")]

    plan = compute_dedupe_plan(tabs)

    assert plan.tabs_to_close == []
    assert plan.duplicate_sets == []
    assert dedupe_key(TabSnapshot(id=7, url="not a url")) == "id-7"


def test_opaque_urls_only_match_identical_strings():
    tabs = [_tab(0, "chrome://newtab/"), _tab(1, "chrome://newtab/"), _tab(2, "chrome://settings/")]

    plan = compute_dedupe_plan(tabs)

    assert plan.close_ids == [1]
    assert plan.duplicate_sets[0].canonical == "chrome://newtab/"


def test_domain_floor_promotes_one_tab_per_lost_domain():
    tabs = [
        _tab(0, "https://youtu.be/abc"),
        _tab(1, "https://www.youtube.com/watch?v=abc"),
        _tab(2, "https://m.youtube.com/watch?v=abc&t=5"),
    ]

    without_floor = compute_dedupe_plan(tabs)
    with_floor = compute_dedupe_plan(tabs, keep_at_least_one_per_domain=True)

    assert without_floor.close_ids == [1, 2]
    assert with_floor.close_ids == [2]
    assert [tab.id for tab in with_floor.survivors] == [0, 1]


def test_domain_floor_applies_across_search_hosts():
    tabs = [
        _tab(0, "https://www.google.com/search?q=tabs"),
        _tab(1, "https://www.google.co.uk/search?q=tabs&hl=en"),
    ]

    plan = compute_dedupe_plan(tabs, keep_at_least_one_per_domain=True)

    assert plan.tabs_to_close == []


def test_single_tab_and_empty_input_close_nothing():
    assert compute_dedupe_plan([_tab(0, "https://example.com")]).tabs_to_close == []
    assert compute_dedupe_plan([]).to_dict() == {"tabsToClose": [], "survivors": [], "duplicateSets": []}


def test_plan_is_deterministic():
    tabs = [
        _tab(0, "https://example.com/a"),
        _tab(1, "https://example.com/a/"),
        _tab(2, "https://example.com/b"),
        _tab(3, "https://www.example.com/b?utm_source=x"),
    ]

    assert compute_dedupe_plan(tabs).to_dict() == compute_dedupe_plan(tabs).to_dict()


def test_dedupe_tabs_uses_stored_preference_defaults():
    tabs = [
        _tab(0, "https://example.com/a", active=True),
        _tab(1, "https://example.com/a", pinned=True),
    ]

    assert dedupe_tabs(tabs).tabs_to_close == []
    assert dedupe_tabs(tabs, {"preservePinned": False}).close_ids == [1]
