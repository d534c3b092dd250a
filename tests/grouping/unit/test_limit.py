from tab_organizer.dedupe.models import TabSnapshot
from tab_organizer.grouping.classify import METHOD_KEYWORD, METHOD_USER_RULE, Assignment, prepare_tab
from tab_organizer.grouping.config import DEFAULT_CFG
from tab_organizer.grouping.limit import (
    REASON_LIMIT,
    REASON_OVERFLOW,
    REASON_SMALL,
    _force_merge,
    _limit_pass,
    category_stats,
    find_nearest_category,
    find_smallest_category,
    limit_categories,
    priority_resolver,
)
from tab_organizer.tab_policy.taxonomy import OTHER_CATEGORY, USER_CATEGORY_PRIORITY


def _assignments(*sizes, method=METHOD_KEYWORD):
    """Build assignments from (category, count) pairs with sequential tab ids."""
    result = []
    for category, count in sizes:
        for _ in range(count):
            tab_id = len(result)
            info = prepare_tab(TabSnapshot(id=tab_id, url=f"https://site{tab_id}.test/", index=tab_id))
            result.append(
                Assignment(
                    tab_id=tab_id,
                    info=info,
                    category=category,
                    initial_category=category,
                    method=method,
                )
            )
    return result


def _sizes(stats):
    return {name: len(members) for name, members in stats.items()}


def test_limit_categories_leaves_small_sets_alone():
    assignments = _assignments(("Dev/Code", 3), ("Work/PM", 2), ("Shopping", 1))

    stats = limit_categories(assignments)

    assert _sizes(stats) == {"Dev/Code": 3, "Work/PM": 2, "Shopping": 1}
    assert all(not a.merge_history for a in assignments)


def test_overflow_moves_smallest_lowest_priority_categories_into_other():
    assignments = _assignments(
        ("Dev/Code", 5),
        ("Work/PM", 4),
        ("Comms", 3),
        ("Docs/Files", 3),
        ("Shopping", 2),
        ("News/Media", 2),
        ("Maps/Travel", 2),
    )

    stats = limit_categories(assignments, max_groups=5)

    assert _sizes(stats) == {"Dev/Code": 5, "Work/PM": 4, "Comms": 3, "Docs/Files": 3, OTHER_CATEGORY: 6}
    moved = [a for a in assignments if a.category == OTHER_CATEGORY]
    assert {a.initial_category for a in moved} == {"Shopping", "News/Media", "Maps/Travel"}
    assert all(a.merge_history[0].reason == REASON_OVERFLOW for a in moved)


def test_small_category_merges_into_nearest_neighbor():
    assignments = _assignments(("Dev/Code", 3), ("Work/PM", 3), ("Cloud/Infra", 1), ("Shopping", 2))

    stats = limit_categories(assignments)

    assert _sizes(stats) == {"Dev/Code": 4, "Work/PM": 3, "Shopping": 2}
    moved = [a for a in assignments if a.initial_category == "Cloud/Infra"][0]
    assert moved.merge_history[0].to_dict() == {"from": "Cloud/Infra", "to": "Dev/Code", "reason": REASON_SMALL}


def test_small_category_without_neighbors_lands_in_other():
    assignments = _assignments(("Dev/Code", 3), ("Work/PM", 3), ("Shopping", 3))
    assignments += _assignments(("Mine", 1), method=METHOD_USER_RULE)
    assignments[-1].tab_id = 99

    stats = limit_categories(assignments)

    assert stats[OTHER_CATEGORY][0].tab_id == 99
    assert stats[OTHER_CATEGORY][0].merge_history[0].reason == REASON_SMALL


def test_user_categories_compete_for_slots_with_higher_priority():
    assignments = _assignments(
        ("Work/PM", 2),
        ("Dev/Code", 2),
        ("Cloud/Infra", 2),
        ("Docs/Files", 2),
        ("Comms", 2),
        ("Shopping", 2),
    )
    mine = _assignments(("Mine", 2), method=METHOD_USER_RULE)
    for offset, assignment in enumerate(mine):
        assignment.tab_id = 100 + offset

    stats = limit_categories(mine + assignments, max_groups=5)

    assert set(stats) == {"Mine", "Work/PM", "Dev/Code", "Cloud/Infra", OTHER_CATEGORY}
    assert priority_resolver(mine)("Mine") == USER_CATEGORY_PRIORITY


def test_many_singleton_domains_collapse_under_the_ceiling():
    assignments = _assignments(*[(f"domain{i}.test", 1) for i in range(12)])

    stats = limit_categories(assignments, max_groups=5)

    assert len(stats) <= 5
    assert OTHER_CATEGORY in stats
    assert sum(len(members) for members in stats.values()) == 12


def test_max_groups_is_clamped_to_the_ceiling():
    assignments = _assignments(*[(f"domain{i}.test", 2) for i in range(8)])

    stats = limit_categories(assignments, max_groups=50)

    assert len(stats) <= 5


def test_find_nearest_category_prefers_similarity_then_size_then_name():
    stats = category_stats(_assignments(("Dev/Code", 1), ("Work/PM", 2), ("Research/Learning", 2), ("Shopping", 5)))

    # Work/PM shares "issue" with Dev/Code on top of the neighbour bonus.
    assert find_nearest_category("Dev/Code", stats) == "Work/PM"
    assert find_nearest_category("Shopping", {"Shopping": [], "Dev/Code": stats["Dev/Code"]}) is None


def test_find_smallest_category_breaks_ties_by_priority():
    assignments = _assignments(("Work/PM", 2), ("Shopping", 2), ("Dev/Code", 3))
    stats = category_stats(assignments)

    assert find_smallest_category(stats, priority_resolver(assignments)) == "Shopping"
    assert find_smallest_category({OTHER_CATEGORY: stats["Work/PM"]}, priority_resolver(assignments)) == OTHER_CATEGORY
    assert find_smallest_category({}, priority_resolver(assignments)) is None


def test_limit_pass_merges_smallest_into_nearest_or_other():
    assignments = _assignments(("Dev/Code", 3), ("Cloud/Infra", 1), ("Shopping", 2))
    priority = priority_resolver(assignments)

    assert _limit_pass(category_stats(assignments), 2, priority, DEFAULT_CFG) is True
    assert _sizes(category_stats(assignments)) == {"Dev/Code": 4, "Shopping": 2}

    assert _limit_pass(category_stats(assignments), 1, priority, DEFAULT_CFG) is True
    assert _sizes(category_stats(assignments)) == {"Dev/Code": 4, OTHER_CATEGORY: 2}
    assert assignments[-1].merge_history[-1].reason == REASON_LIMIT


def test_force_merge_sends_smallest_categories_to_other():
    assignments = _assignments(*[(f"domain{i}.test", i + 1) for i in range(7)])

    _force_merge(assignments, 5, priority_resolver(assignments))

    stats = category_stats(assignments)
    assert len(stats) == 5
    assert _sizes(stats)[OTHER_CATEGORY] == 1 + 2 + 3
