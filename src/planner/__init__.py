"""Daily planner core: document normalization, task views and timers."""

from .exceptions import PersistenceError, PlannerError, ValidationError
from .models import (
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
from .normalizer import default_state, normalize
from .ordering import ViewContext, group_by_category, reorder, visible_tasks
from .repository import DocumentStore, PlannerRepository

__all__ = [
    "DEFAULT_CATEGORY_COLOR",
    "DEFAULT_TIMER_SECONDS",
    "GENERAL_CATEGORY",
    "DocumentStore",
    "PersistenceError",
    "PlannerError",
    "PlannerRepository",
    "PlannerState",
    "Priority",
    "SortBy",
    "Task",
    "TaskType",
    "Timer",
    "ValidationError",
    "ViewContext",
    "default_state",
    "group_by_category",
    "normalize",
    "reorder",
    "visible_tasks",
]
