"""Pure edit operations on the planner document.

Each function takes a ``PlannerState`` and returns a new one; the input is
never mutated. Invalid user input raises ``ValidationError`` before anything
changes.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from . import clock
from .exceptions import ValidationError
from .models import (
    DEFAULT_CATEGORY_COLOR,
    GENERAL_CATEGORY,
    PlannerState,
    Priority,
    SortBy,
    Task,
    TaskType,
)
from .normalizer import is_valid_color

MEETING_HOURS = tuple(f"{hour:02d}" for hour in range(1, 13))
MEETING_MINUTES = ("00", "15", "30", "45")
MEETING_SUFFIX = "IST"


@dataclass
class TaskDraft:
    """Fields collected by the add-task form."""

    name: str
    date: str
    description: str = ""
    priority: str = Priority.MEDIUM.value
    category: str = GENERAL_CATEGORY
    task_type: str = TaskType.WORK.value
    meeting_time: str = ""


def build_meeting_time(hour: str, minute: str, am_pm: str) -> str:
    """Format a meeting label such as ``"09:00 AM IST"``.

    Returns an empty string when any part is missing.
    """
    if not hour or not minute or not am_pm:
        return ""
    if hour not in MEETING_HOURS or minute not in MEETING_MINUTES or am_pm not in ("AM", "PM"):
        raise ValidationError(f"Invalid meeting time: {hour}:{minute} {am_pm}")
    return f"{hour}:{minute} {am_pm} {MEETING_SUFFIX}"


def _parse_choice(enum_cls, value: str, label: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {value}") from exc


def add_task(state: PlannerState, draft: TaskDraft) -> PlannerState:
    name = draft.name.strip()
    if not name:
        raise ValidationError("Task name is required.")
    if not draft.date:
        raise ValidationError("Task date is required.")
    try:
        date.fromisoformat(draft.date)
    except ValueError as exc:
        raise ValidationError(f"Invalid task date: {draft.date}") from exc

    priority = _parse_choice(Priority, draft.priority, "priority")
    task_type = _parse_choice(TaskType, draft.task_type, "task type")
    if draft.category not in state.categories:
        raise ValidationError(f"Unknown category: {draft.category}")

    meeting_time = draft.meeting_time.strip() if task_type is TaskType.MEETING else ""
    if task_type is TaskType.MEETING and not meeting_time:
        raise ValidationError("Meeting time is required for Meeting tasks.")

    task = Task(
        id=str(uuid.uuid4()),
        name=name,
        description=draft.description.strip(),
        priority=priority,
        category=draft.category,
        task_type=task_type,
        meeting_time=meeting_time,
        date=draft.date,
        done=False,
        hidden=False,
        created_at=clock.now_ms(),
    )
    return dataclasses.replace(state, tasks=[*state.tasks, task], selected_date=draft.date)


def _update_task(
    state: PlannerState, task_id: str, change: Callable[[Task], Task]
) -> PlannerState:
    if state.find_task(task_id) is None:
        raise ValidationError(f"Task not found: {task_id}")
    tasks = [change(task) if task.id == task_id else task for task in state.tasks]
    return dataclasses.replace(state, tasks=tasks)


def toggle_done(state: PlannerState, task_id: str) -> PlannerState:
    """Completing hides the task; toggling a done or hidden task brings it back."""

    def change(task: Task) -> Task:
        if task.done or task.hidden:
            return dataclasses.replace(task, done=False, hidden=False)
        return dataclasses.replace(task, done=True, hidden=True)

    return _update_task(state, task_id, change)


def hide_task(state: PlannerState, task_id: str) -> PlannerState:
    return _update_task(
        state, task_id, lambda task: dataclasses.replace(task, hidden=True, done=False)
    )


def restore_task(state: PlannerState, task_id: str) -> PlannerState:
    return _update_task(state, task_id, lambda task: dataclasses.replace(task, hidden=False))


def _next_day(task: Task) -> str:
    try:
        return clock.next_date(task.date)
    except ValueError as exc:
        raise ValidationError(f"Task {task.id} has an invalid date: {task.date}") from exc


def move_to_next_day(state: PlannerState, task_id: str) -> PlannerState:
    return _update_task(
        state,
        task_id,
        lambda task: dataclasses.replace(task, date=_next_day(task), done=False, hidden=False),
    )


def clone_to_next_day(state: PlannerState, task_id: str) -> PlannerState:
    source = state.find_task(task_id)
    if source is None:
        raise ValidationError(f"Task not found: {task_id}")
    clone = dataclasses.replace(
        source,
        id=str(uuid.uuid4()),
        date=_next_day(source),
        done=False,
        hidden=False,
        created_at=clock.now_ms(),
    )
    return dataclasses.replace(state, tasks=[*state.tasks, clone])


def add_category(
    state: PlannerState, name: str, color: str = DEFAULT_CATEGORY_COLOR
) -> PlannerState:
    """Add a category; blank names and case-insensitive duplicates are ignored."""
    name = name.strip()
    if not name:
        return state
    if any(existing.lower() == name.lower() for existing in state.categories):
        return state

    categories = sorted([*state.categories, name], key=lambda item: (item.casefold(), item))
    colors = dict(state.category_colors)
    colors[name] = color if is_valid_color(color) else DEFAULT_CATEGORY_COLOR
    return dataclasses.replace(state, categories=categories, category_colors=colors)


def delete_category(state: PlannerState, name: str) -> PlannerState:
    """Remove a category and reassign its tasks to General."""
    if name == GENERAL_CATEGORY:
        raise ValidationError("General category cannot be deleted.")
    if name not in state.categories:
        return state

    categories = [item for item in state.categories if item != name]
    if GENERAL_CATEGORY in categories or not categories:
        fallback = GENERAL_CATEGORY
    else:
        fallback = categories[0]
    tasks = [
        dataclasses.replace(task, category=fallback) if task.category == name else task
        for task in state.tasks
    ]
    colors = {key: value for key, value in state.category_colors.items() if key != name}
    return dataclasses.replace(state, categories=categories, category_colors=colors, tasks=tasks)


def set_sort_by(state: PlannerState, value: Optional[str]) -> PlannerState:
    try:
        sort_by = SortBy(value)
    except ValueError:
        sort_by = SortBy.PRIORITY
    return dataclasses.replace(state, sort_by=sort_by)


def set_selected_date(state: PlannerState, value: Optional[str]) -> PlannerState:
    return dataclasses.replace(state, selected_date=value or clock.today())
