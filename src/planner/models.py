from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

GENERAL_CATEGORY = "General"
DEFAULT_CATEGORY_COLOR = "#4f8dfd"
DEFAULT_TIMER_SECONDS = 30 * 60
COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


class Priority(str, Enum):
    """Task priority. Declaration order is the sort rank."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class TaskType(str, Enum):
    WORK = "Work"
    LEARNING = "Learning"
    MEETING = "Meeting"


class SortBy(str, Enum):
    """Sort modes for the task view."""

    PRIORITY = "priority"
    CATEGORY = "category"
    TASK_TYPE = "taskType"
    CREATED_AT = "createdAt"
    MANUAL = "manual"


@dataclass(slots=True)
class Task:
    """A single planner task. ``created_at`` is epoch milliseconds."""

    id: str
    name: str
    description: str
    priority: Priority
    category: str
    task_type: TaskType
    meeting_time: str
    date: str
    done: bool
    hidden: bool
    created_at: float
    order: Optional[float] = None

    @property
    def is_meeting(self) -> bool:
        return self.task_type is TaskType.MEETING

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category,
            "taskType": self.task_type.value,
            "meetingTime": self.meeting_time,
            "date": self.date,
            "done": self.done,
            "hidden": self.hidden,
            "createdAt": self.created_at,
        }
        if self.order is not None:
            data["order"] = self.order
        return data


@dataclass(slots=True)
class Timer:
    """Countdown state for one task."""

    remaining_seconds: int
    duration_seconds: int = DEFAULT_TIMER_SECONDS
    is_running: bool = False

    @property
    def expired(self) -> bool:
        return self.remaining_seconds <= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remainingSeconds": self.remaining_seconds,
            "durationSeconds": self.duration_seconds,
            "isRunning": self.is_running,
        }


@dataclass(slots=True)
class PlannerState:
    """The single persisted planner document."""

    selected_date: str
    tasks: List[Task] = field(default_factory=list)
    categories: List[str] = field(default_factory=lambda: [GENERAL_CATEGORY])
    category_colors: Dict[str, str] = field(
        default_factory=lambda: {GENERAL_CATEGORY: DEFAULT_CATEGORY_COLOR}
    )
    sort_by: SortBy = SortBy.PRIORITY
    pomodoro_timers: Dict[str, Timer] = field(default_factory=dict)

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "categories": list(self.categories),
            "categoryColors": dict(self.category_colors),
            "selectedDate": self.selected_date,
            "sortBy": self.sort_by.value,
            "pomodoroTimers": {
                task_id: timer.to_dict() for task_id, timer in self.pomodoro_timers.items()
            },
        }
