"""In-memory planner session.

``PlannerSession`` owns the one live ``PlannerState``. Every edit is a pure
transform from ``actions``/``ordering``/``timers`` applied here, normalized,
and handed to the document store without waiting for the write.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Callable, List, Optional, Set, Tuple

from . import actions, clock, ordering, timers
from .exceptions import PersistenceError
from .models import PlannerState, Task
from .normalizer import default_state, normalize
from .ordering import ViewContext
from .repository import DocumentStore
from .scheduler import TICK_INTERVAL_SECONDS, TimerTickScheduler

logger = logging.getLogger(__name__)


class PlannerSession:
    def __init__(
        self,
        store: DocumentStore,
        request_duration_minutes: Optional[timers.DurationPrompt] = None,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        default_timer_minutes: int = timers.DEFAULT_DURATION_MINUTES,
    ):
        self.store = store
        self.default_timer_minutes = default_timer_minutes
        # Without a prompt every new timer gets the configured length.
        self.request_duration_minutes = request_duration_minutes or (lambda: self.default_timer_minutes)
        self._state = default_state()
        self._pending_saves: Set[asyncio.Task] = set()
        self.scheduler = TimerTickScheduler(
            on_tick=self.tick,
            has_running=lambda: timers.has_running(self._state.pomodoro_timers),
            interval_seconds=tick_interval_seconds,
        )

    @property
    def state(self) -> PlannerState:
        return self._state

    def load(self, raise_errors: bool = False) -> PlannerState:
        """Load the stored document and land on today's date.

        A store failure is logged and the session keeps its current state,
        unless ``raise_errors`` is set.
        """
        try:
            loaded = normalize(self.store.load())
        except PersistenceError as exc:
            logger.error("Failed to load planner state: %s", exc)
            if raise_errors:
                raise
            return self._state
        self._state = dataclasses.replace(loaded, selected_date=clock.today())
        self._ensure_ticking()
        return self._state

    # ---- persistence ----

    def _save_now(self, state: PlannerState) -> None:
        try:
            self.store.save(state)
        except PersistenceError as exc:
            logger.error("Failed to persist planner state: %s", exc)

    def _persist(self, state: PlannerState) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._save_now(state)
            return
        task = loop.create_task(asyncio.to_thread(self._save_now, state))
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def flush(self) -> None:
        """Wait for in-flight saves started from this loop."""
        if self._pending_saves:
            await asyncio.gather(*list(self._pending_saves))

    def close(self) -> None:
        """Stop ticking; in-flight saves are left to finish or be dropped."""
        self.scheduler.stop()

    # ---- edits ----

    def dispatch(self, transform: Callable[..., PlannerState], *args, **kwargs) -> PlannerState:
        """Apply ``transform(state, *args, **kwargs)`` and persist the result.

        ``ValidationError`` from the transform propagates and leaves the state
        unchanged. Transforms that return the state untouched are not saved.
        """
        result = transform(self._state, *args, **kwargs)
        if result is self._state:
            return self._state
        self._state = normalize(result)
        self._persist(self._state)
        return self._state

    def add_task(self, draft: actions.TaskDraft) -> PlannerState:
        return self.dispatch(actions.add_task, draft)

    def toggle_done(self, task_id: str) -> PlannerState:
        return self.dispatch(actions.toggle_done, task_id)

    def hide_task(self, task_id: str) -> PlannerState:
        return self.dispatch(actions.hide_task, task_id)

    def restore_task(self, task_id: str) -> PlannerState:
        return self.dispatch(actions.restore_task, task_id)

    def move_to_next_day(self, task_id: str) -> PlannerState:
        return self.dispatch(actions.move_to_next_day, task_id)

    def clone_to_next_day(self, task_id: str) -> PlannerState:
        return self.dispatch(actions.clone_to_next_day, task_id)

    def add_category(self, name: str, color: str) -> PlannerState:
        return self.dispatch(actions.add_category, name, color)

    def delete_category(self, name: str) -> PlannerState:
        return self.dispatch(actions.delete_category, name)

    def set_sort_by(self, value: str) -> PlannerState:
        return self.dispatch(actions.set_sort_by, value)

    def set_selected_date(self, value: Optional[str]) -> PlannerState:
        return self.dispatch(actions.set_selected_date, value)

    def reorder(self, source_id: str, target_id: str) -> PlannerState:
        return self.dispatch(ordering.reorder, source_id, target_id)

    # ---- timers ----

    def _set_timers(self, new_timers) -> PlannerState:
        if new_timers == self._state.pomodoro_timers:
            return self._state
        return self.dispatch(
            lambda state: dataclasses.replace(state, pomodoro_timers=dict(new_timers))
        )

    def _ensure_ticking(self) -> None:
        if not timers.has_running(self._state.pomodoro_timers):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self.scheduler.start()

    def start_timer(
        self, task_id: str, request_duration_minutes: Optional[timers.DurationPrompt] = None
    ) -> PlannerState:
        new_timers = timers.start(
            self._state.pomodoro_timers,
            task_id,
            request_duration_minutes or self.request_duration_minutes,
            default_minutes=self.default_timer_minutes,
        )
        state = self._set_timers(new_timers)
        self._ensure_ticking()
        return state

    def pause_timer(self, task_id: str) -> PlannerState:
        return self._set_timers(timers.pause(self._state.pomodoro_timers, task_id))

    def reset_timer(self, task_id: str) -> PlannerState:
        if task_id not in self._state.pomodoro_timers:
            return self._state
        return self._set_timers(timers.reset(self._state.pomodoro_timers, task_id))

    def tick(self) -> PlannerState:
        """One batched timer tick; persists only when something changed."""
        current = self._state.pomodoro_timers
        ticked = timers.tick(current)
        if ticked is current:
            return self._state
        return self._set_timers(ticked)

    def timer_progress(self, task_id: str) -> Optional[int]:
        timer = self._state.pomodoro_timers.get(task_id)
        if timer is None:
            return None
        return timers.progress_percent(timer.remaining_seconds, timer.duration_seconds)

    # ---- views ----

    def visible_tasks(self, view: Optional[ViewContext] = None) -> List[Task]:
        return ordering.visible_tasks(self._state, view)

    def grouped_tasks(self, view: Optional[ViewContext] = None) -> List[Tuple[str, List[Task]]]:
        return ordering.group_by_category(self.visible_tasks(view))
