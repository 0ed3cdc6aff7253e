"""Per-task countdown timers.

A task's timer is absent (never started or reset), running, paused, or
expired (``remaining_seconds == 0``, never running). All operations return a
new mapping and leave the input untouched.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Callable, Dict, Mapping, Optional

from .models import DEFAULT_TIMER_SECONDS, Timer

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = DEFAULT_TIMER_SECONDS // 60

Timers = Dict[str, Timer]
DurationPrompt = Callable[[], Optional[int]]


def start(
    timers: Mapping[str, Timer],
    task_id: str,
    request_duration_minutes: DurationPrompt,
    default_minutes: int = DEFAULT_DURATION_MINUTES,
) -> Timers:
    """Start or resume the timer of ``task_id``.

    A new timer asks ``request_duration_minutes`` for its length; ``None``
    means the prompt was cancelled and nothing changes, a non-positive value
    falls back to ``default_minutes``. Expired timers stay expired.
    """
    existing = timers.get(task_id)
    if existing is not None:
        if existing.remaining_seconds <= 0:
            return dict(timers)
        return {**timers, task_id: dataclasses.replace(existing, is_running=True)}

    minutes = request_duration_minutes()
    if minutes is None:
        return dict(timers)
    if minutes <= 0:
        minutes = default_minutes

    duration = int(minutes) * 60
    logger.debug("Timer started task=%s duration=%ss", task_id, duration)
    return {
        **timers,
        task_id: Timer(remaining_seconds=duration, duration_seconds=duration, is_running=True),
    }


def pause(timers: Mapping[str, Timer], task_id: str) -> Timers:
    current = timers.get(task_id) or Timer(
        remaining_seconds=DEFAULT_TIMER_SECONDS, duration_seconds=DEFAULT_TIMER_SECONDS
    )
    return {**timers, task_id: dataclasses.replace(current, is_running=False)}


def reset(timers: Mapping[str, Timer], task_id: str) -> Timers:
    return {key: value for key, value in timers.items() if key != task_id}


def has_running(timers: Mapping[str, Timer]) -> bool:
    return any(timer.is_running for timer in timers.values())


def tick(timers: Mapping[str, Timer]) -> Mapping[str, Timer]:
    """Advance every running timer by one second in a single batch.

    Returns ``timers`` itself when nothing was running.
    """
    changed = False
    result: Timers = dict(timers)
    for task_id, timer in timers.items():
        if not timer.is_running:
            continue
        remaining = max(timer.remaining_seconds - 1, 0)
        running = remaining > 0
        if remaining != timer.remaining_seconds or running != timer.is_running:
            changed = True
            result[task_id] = dataclasses.replace(
                timer, remaining_seconds=remaining, is_running=running
            )
            if not running:
                logger.info("Timer expired task=%s", task_id)
    return result if changed else timers


def progress_percent(remaining_seconds: int, duration_seconds: int) -> int:
    """Elapsed share of the timer as a whole percentage."""
    duration = max(1, duration_seconds or DEFAULT_TIMER_SECONDS)
    remaining = max(0, min(duration, remaining_seconds or 0))
    # Half rounds up.
    return math.floor(100 * (duration - remaining) / duration + 0.5)


def format_seconds(total_seconds: int) -> str:
    safe = max(0, int(total_seconds or 0))
    minutes, seconds = divmod(safe, 60)
    return f"{minutes:02d}:{seconds:02d}"
