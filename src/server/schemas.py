"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.planner import Priority, SortBy, TaskType


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    ok: bool = True
    env: str


class SaveStateResponse(BaseModel):
    """Response for a successful state write."""

    ok: bool = True


class TaskResponse(BaseModel):
    """Serialized task."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    name: str
    description: str
    priority: Priority
    category: str
    taskType: TaskType
    meetingTime: str
    date: str
    done: bool
    hidden: bool
    createdAt: Union[int, float]
    order: Optional[Union[int, float]] = Field(default=None, description="Manual sort rank")


class TimerResponse(BaseModel):
    """Serialized countdown timer."""

    remainingSeconds: int = Field(..., ge=0)
    durationSeconds: int = Field(..., gt=0)
    isRunning: bool


class PlannerStateResponse(BaseModel):
    """The normalized planner document."""

    model_config = ConfigDict(use_enum_values=True)

    tasks: List[TaskResponse]
    categories: List[str]
    categoryColors: Dict[str, str]
    selectedDate: str
    sortBy: SortBy
    pomodoroTimers: Dict[str, TimerResponse]
