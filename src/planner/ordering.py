"""Visible task derivation: filtering, sorting, grouping and manual reorder.

Everything here is a pure function of the planner state and a view context.
"""

from __future__ import annotations

import dataclasses
import functools
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .models import PlannerState, SortBy, Task

ALL = "All"
STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"

UNPARSEABLE_MEETING_MINUTES = 9999
_MEETING_TIME = re.compile(r"^(\d{2}):(\d{2})\s(AM|PM)")


@dataclass(frozen=True)
class ViewContext:
    """Client-side view filters. ``sort_by=None`` follows the document."""

    show_all_tasks: bool = False
    filter_type: str = ALL
    filter_category: str = ALL
    filter_status: str = ALL
    sort_by: Optional[SortBy] = None


def _collate(text: str) -> Tuple[str, str]:
    # Case-insensitive first, exact text as tiebreak.
    return text.casefold(), text


def parse_meeting_minutes(label: Optional[str]) -> int:
    """Minutes since midnight for a ``"HH:MM AM"`` label, 9999 if unparseable."""
    if not label:
        return UNPARSEABLE_MEETING_MINUTES
    match = _MEETING_TIME.match(label)
    if not match:
        return UNPARSEABLE_MEETING_MINUTES
    hour = int(match.group(1)) % 12
    if match.group(3) == "PM":
        hour += 12
    return hour * 60 + int(match.group(2))


def _matches(task: Task, state: PlannerState, view: ViewContext) -> bool:
    if task.date != state.selected_date:
        return False
    if not view.show_all_tasks and task.hidden:
        return False
    if view.filter_type != ALL and task.task_type.value != view.filter_type:
        return False
    if view.filter_category != ALL and task.category != view.filter_category:
        return False
    if view.filter_status == STATUS_PENDING and task.done:
        return False
    if view.filter_status == STATUS_COMPLETED and not task.done:
        return False
    return True


def _manual_order(tasks: Sequence[Task]) -> List[Task]:
    ranked = [
        (task.order if task.order is not None else index, task)
        for index, task in enumerate(tasks)
    ]
    ranked.sort(key=lambda entry: entry[0])
    return [task for _, task in ranked]


def _sort(tasks: Sequence[Task], sort_by: SortBy) -> List[Task]:
    if sort_by is SortBy.MANUAL:
        return _manual_order(tasks)
    if sort_by is SortBy.PRIORITY:
        return _sort_by_priority(tasks)
    if sort_by is SortBy.CATEGORY:
        return sorted(tasks, key=lambda task: (_collate(task.category), _collate(task.name)))
    if sort_by is SortBy.TASK_TYPE:
        return sorted(tasks, key=lambda task: (_collate(task.task_type.value), _collate(task.name)))
    return sorted(tasks, key=lambda task: task.created_at or 0, reverse=True)


def _sort_by_priority(tasks: Sequence[Task]) -> List[Task]:
    """Priority rank first; within a rank meetings compare by start time
    against each other and by name against everything else."""

    def compare(a: Task, b: Task) -> int:
        rank_diff = a.priority.rank - b.priority.rank
        if rank_diff:
            return rank_diff
        if a.is_meeting and b.is_meeting:
            return parse_meeting_minutes(a.meeting_time) - parse_meeting_minutes(b.meeting_time)
        left, right = _collate(a.name), _collate(b.name)
        return (left > right) - (left < right)

    return sorted(tasks, key=functools.cmp_to_key(compare))


def visible_tasks(state: PlannerState, view: Optional[ViewContext] = None) -> List[Task]:
    """Tasks of the selected date that pass the view filters, in display order."""
    view = view or ViewContext()
    filtered = [task for task in state.tasks if _matches(task, state, view)]
    return _sort(filtered, view.sort_by or state.sort_by)


def group_by_category(tasks: Sequence[Task]) -> List[Tuple[str, List[Task]]]:
    """Partition by category; groups alphabetical, in-group order kept."""
    groups: Dict[str, List[Task]] = {}
    for task in tasks:
        groups.setdefault(task.category, []).append(task)
    return sorted(groups.items(), key=lambda item: _collate(item[0]))


def reorder(state: PlannerState, source_id: str, target_id: str) -> PlannerState:
    """Move ``source_id`` to ``target_id``'s slot within the selected day.

    Every task of the day gets a contiguous 0-based ``order`` and the sort
    mode switches to manual. Unknown or equal ids leave the state untouched.
    """
    if not source_id or not target_id or source_id == target_id:
        return state

    same_day = [task for task in state.tasks if task.date == state.selected_date]
    other_days = [task for task in state.tasks if task.date != state.selected_date]
    ordered = _manual_order(same_day)

    ids = [task.id for task in ordered]
    if source_id not in ids or target_id not in ids:
        return state

    from_index = ids.index(source_id)
    to_index = ids.index(target_id)
    moved = ordered.pop(from_index)
    ordered.insert(to_index, moved)

    reindexed = [dataclasses.replace(task, order=index) for index, task in enumerate(ordered)]
    return dataclasses.replace(state, tasks=other_days + reindexed, sort_by=SortBy.MANUAL)
