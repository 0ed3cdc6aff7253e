"""Repair arbitrary input into a well-formed ``PlannerState``.

``normalize`` is total: garbage, ``None``, lists and primitives all come back
as a valid document. Every defaulting rule lives in this module.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Dict, List, Mapping, Optional

from . import clock
from .models import (
    COLOR_PATTERN,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_TIMER_SECONDS,
    GENERAL_CATEGORY,
    PlannerState,
    Priority,
    SortBy,
    Task,
    TaskType,
    Timer,
)


def default_state() -> PlannerState:
    """Fresh document for first start."""
    return PlannerState(selected_date=clock.today())


def is_valid_color(value: Any) -> bool:
    return isinstance(value, str) and bool(COLOR_PATTERN.match(value))


def _text(value: Any) -> str:
    # Falsy values (None, 0, False, "") all become the empty string.
    return str(value) if value else ""


def _number(value: Any) -> Optional[float]:
    """Finite number from ``value`` or None. Booleans are not numbers."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)) or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        # int beyond the float range
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _enum_value(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(_text(value))
    except ValueError:
        return default


def normalize_categories(raw: Any) -> List[str]:
    source = raw if isinstance(raw, list) else [GENERAL_CATEGORY]
    categories: List[str] = []
    for entry in source:
        name = _text(entry).strip()
        if name and name not in categories:
            categories.append(name)
    if GENERAL_CATEGORY not in categories:
        categories.insert(0, GENERAL_CATEGORY)
    return categories


def normalize_category_colors(raw: Any, categories: List[str]) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    if isinstance(raw, Mapping):
        for key, value in raw.items():
            name = _text(key).strip()
            color = _text(value).strip()
            if name and is_valid_color(color):
                colors[name] = color
    for category in categories:
        if category not in colors:
            colors[category] = DEFAULT_CATEGORY_COLOR
    return colors


def normalize_task(raw: Mapping[str, Any], categories: List[str]) -> Task:
    category = _text(raw.get("category"))
    created_at = _number(raw.get("createdAt"))
    order = raw.get("order")
    return Task(
        id=_text(raw.get("id")) or str(uuid.uuid4()),
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        priority=_enum_value(Priority, raw.get("priority"), Priority.MEDIUM),
        category=category if category in categories else GENERAL_CATEGORY,
        task_type=_enum_value(TaskType, raw.get("taskType"), TaskType.WORK),
        meeting_time=_text(raw.get("meetingTime")),
        date=_text(raw.get("date")) or clock.today(),
        done=bool(raw.get("done")),
        hidden=bool(raw.get("hidden")),
        created_at=created_at if created_at else clock.now_ms(),
        order=_number(order) if isinstance(order, (int, float)) else None,
    )


def normalize_timer(raw: Mapping[str, Any]) -> Timer:
    duration = _number(raw.get("durationSeconds"))
    duration_seconds = math.floor(duration) if duration and duration > 0 else DEFAULT_TIMER_SECONDS
    if duration_seconds <= 0:
        duration_seconds = DEFAULT_TIMER_SECONDS

    remaining = _number(raw.get("remainingSeconds"))
    if remaining is None:
        remaining_seconds = duration_seconds
    else:
        remaining_seconds = max(0, min(duration_seconds, math.floor(remaining)))

    return Timer(
        remaining_seconds=remaining_seconds,
        duration_seconds=duration_seconds,
        is_running=bool(raw.get("isRunning")) and remaining_seconds > 0,
    )


def normalize_timers(raw: Any) -> Dict[str, Timer]:
    if not isinstance(raw, Mapping):
        return {}
    timers: Dict[str, Timer] = {}
    for task_id, value in raw.items():
        key = _text(task_id)
        if key and isinstance(value, Mapping):
            timers[key] = normalize_timer(value)
    return timers


def normalize(raw: Any) -> PlannerState:
    """Return a valid ``PlannerState`` for any input."""
    if isinstance(raw, PlannerState):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        raw = {}

    categories = normalize_categories(raw.get("categories"))
    colors = normalize_category_colors(raw.get("categoryColors"), categories)

    raw_tasks = raw.get("tasks")
    tasks = [
        normalize_task(entry, categories)
        for entry in (raw_tasks if isinstance(raw_tasks, list) else [])
        if isinstance(entry, Mapping)
    ]

    selected_date = raw.get("selectedDate")
    return PlannerState(
        tasks=tasks,
        categories=categories,
        category_colors=colors,
        selected_date=selected_date if isinstance(selected_date, str) and selected_date else clock.today(),
        sort_by=_enum_value(SortBy, raw.get("sortBy"), SortBy.PRIORITY),
        pomodoro_timers=normalize_timers(raw.get("pomodoroTimers")),
    )
