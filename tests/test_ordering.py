"""Task filtering, sorting, grouping and manual reorder"""

from collections import Counter

from src.planner.models import SortBy
from src.planner.normalizer import normalize
from src.planner.ordering import (
    UNPARSEABLE_MEETING_MINUTES,
    ViewContext,
    group_by_category,
    parse_meeting_minutes,
    reorder,
    visible_tasks,
)

DAY = "2026-10-18"
OTHER_DAY = "2026-10-19"


def make_state(tasks, sort_by="priority", categories=("Ops", "Research")):
    return normalize(
        {
            "selectedDate": DAY,
            "sortBy": sort_by,
            "categories": list(categories),
            "tasks": [{"date": DAY, **task} for task in tasks],
        }
    )


def names(tasks):
    return [task.name for task in tasks]


def test_priority_sort_orders_high_medium_low():
    state = make_state(
        [
            {"priority": "Low", "name": "B"},
            {"priority": "High", "name": "A"},
            {"priority": "Medium", "name": "C"},
        ]
    )
    assert names(visible_tasks(state)) == ["A", "C", "B"]


def test_priority_ties_break_by_name_and_meetings_by_time():
    state = make_state(
        [
            {"priority": "High", "name": "zeta", "taskType": "Meeting", "meetingTime": "09:00 AM IST"},
            {"priority": "High", "name": "alpha", "taskType": "Meeting", "meetingTime": "02:30 PM IST"},
            {"priority": "High", "name": "beta", "taskType": "Meeting", "meetingTime": "soon"},
            {"priority": "Low", "name": "b work"},
            {"priority": "Low", "name": "A work"},
        ]
    )
    assert names(visible_tasks(state)) == ["zeta", "alpha", "beta", "A work", "b work"]


def test_parse_meeting_minutes():
    assert parse_meeting_minutes("12:00 AM IST") == 0
    assert parse_meeting_minutes("12:15 PM IST") == 12 * 60 + 15
    assert parse_meeting_minutes("07:45 PM") == 19 * 60 + 45
    assert parse_meeting_minutes("7:45 PM") == UNPARSEABLE_MEETING_MINUTES
    assert parse_meeting_minutes("") == UNPARSEABLE_MEETING_MINUTES
    assert parse_meeting_minutes(None) == UNPARSEABLE_MEETING_MINUTES


def test_category_and_task_type_sorts():
    state = make_state(
        [
            {"name": "b", "category": "Research", "taskType": "Work"},
            {"name": "a", "category": "Research", "taskType": "Learning"},
            {"name": "c", "category": "Ops", "taskType": "Meeting"},
        ]
    )
    assert names(visible_tasks(state, ViewContext(sort_by=SortBy.CATEGORY))) == ["c", "a", "b"]
    assert names(visible_tasks(state, ViewContext(sort_by=SortBy.TASK_TYPE))) == ["a", "c", "b"]


def test_created_at_sort_is_newest_first():
    state = make_state(
        [
            {"name": "old", "createdAt": 1000},
            {"name": "new", "createdAt": 3000},
            {"name": "mid", "createdAt": 2000},
        ],
        sort_by="createdAt",
    )
    assert names(visible_tasks(state)) == ["new", "mid", "old"]


def test_manual_sort_uses_order_then_index():
    state = make_state(
        [
            {"name": "first", "order": 5},
            {"name": "second"},
            {"name": "third", "order": 0},
        ],
        sort_by="manual",
    )
    # "second" has no order and ranks by its filtered index (1).
    assert names(visible_tasks(state)) == ["third", "second", "first"]


def test_hidden_tasks_are_filtered_unless_show_all():
    state = make_state(
        [
            {"name": "visible"},
            {"name": "hidden one", "hidden": True},
            {"name": "hidden two", "hidden": True, "done": True},
        ]
    )
    assert names(visible_tasks(state)) == ["visible"]
    assert len(visible_tasks(state, ViewContext(show_all_tasks=True))) == 3


def test_filters_by_date_type_category_and_status():
    state = make_state(
        [
            {"name": "a", "taskType": "Work", "category": "Ops"},
            {"name": "b", "taskType": "Meeting", "category": "Ops", "meetingTime": "09:00 AM"},
            {"name": "c", "taskType": "Work", "category": "Research", "done": True},
            {"name": "d", "date": OTHER_DAY},
        ]
    )
    show_all = dict(show_all_tasks=True)
    assert names(visible_tasks(state, ViewContext(filter_type="Work", **show_all))) == ["a", "c"]
    assert names(visible_tasks(state, ViewContext(filter_category="Ops", **show_all))) == ["a", "b"]
    assert names(visible_tasks(state, ViewContext(filter_status="Pending", **show_all))) == ["a", "b"]
    assert names(visible_tasks(state, ViewContext(filter_status="Completed", **show_all))) == ["c"]


def test_group_by_category_sorts_groups_and_keeps_order():
    state = make_state(
        [
            {"name": "z", "category": "Research", "priority": "High"},
            {"name": "y", "category": "General", "priority": "Low"},
            {"name": "x", "category": "Research", "priority": "Low"},
            {"name": "w", "category": "Ops", "priority": "Medium"},
        ]
    )
    groups = group_by_category(visible_tasks(state))
    assert [category for category, _ in groups] == ["General", "Ops", "Research"]
    assert names(groups[2][1]) == ["z", "x"]


def test_reorder_is_a_contiguous_permutation():
    state = make_state(
        [
            {"id": "a", "name": "a"},
            {"id": "b", "name": "b"},
            {"id": "c", "name": "c"},
            {"id": "d", "name": "d"},
            {"id": "other", "name": "other", "date": OTHER_DAY, "order": 7},
        ]
    )
    result = reorder(state, "d", "b")

    same_day = [task for task in result.tasks if task.date == DAY]
    assert Counter(task.id for task in same_day) == Counter(["a", "b", "c", "d"])
    assert sorted(task.order for task in same_day) == [0, 1, 2, 3]
    assert names(visible_tasks(result)) == ["a", "d", "b", "c"]
    assert result.sort_by is SortBy.MANUAL
    assert result.find_task("other").order == 7


def test_reorder_moving_down_takes_target_slot():
    state = make_state([{"id": i, "name": i} for i in ("a", "b", "c")], sort_by="manual")
    result = reorder(state, "a", "c")
    assert names(visible_tasks(result)) == ["b", "c", "a"]


def test_reorder_noop_cases_return_state_unchanged():
    state = make_state(
        [
            {"id": "a", "name": "a"},
            {"id": "b", "name": "b"},
            {"id": "x", "name": "x", "date": OTHER_DAY},
        ]
    )
    assert reorder(state, "a", "a") is state
    assert reorder(state, "a", "missing") is state
    assert reorder(state, "x", "a") is state
    assert reorder(state, "", "a") is state
