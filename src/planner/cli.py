#!/usr/bin/env python3
"""
Planner CLI - edit the local planner document from the command line

Usage:
    python -m src.planner list [--date YYYY-MM-DD] [--all] [--type Work|Learning|Meeting] [--category NAME] [--status All|Pending|Completed] [--sort MODE] [--format json|text]
    python -m src.planner add --name "Name" [--date YYYY-MM-DD] [--description "..."] [--priority High|Medium|Low] [--category NAME] [--type Work|Learning|Meeting] [--meeting-hour 09 --meeting-minute 00 --meeting-ampm AM]
    python -m src.planner toggle|hide|restore|move-next|clone-next --id ID
    python -m src.planner reorder --source ID --target ID [--date YYYY-MM-DD]
    python -m src.planner add-category --name NAME [--color "#rrggbb"]
    python -m src.planner delete-category --name NAME
    python -m src.planner sort --by priority|category|taskType|createdAt|manual
    python -m src.planner timer-start --id ID [--minutes N]
    python -m src.planner timer-pause|timer-reset --id ID

Global options:
    --db-path PATH     local SQLite file (default: data/planner.db)
    --remote           use the planner API from config/app_config.yaml
    --api-url URL      use the planner API at URL
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any, Dict, List, Optional

from . import clock, ordering, timers
from .actions import TaskDraft, build_meeting_time
from .client import PlannerApiClient
from .config import Config
from .exceptions import PlannerError, ValidationError
from .models import DEFAULT_CATEGORY_COLOR, PlannerState, SortBy, Task
from .ordering import ViewContext
from .repository import DocumentStore, PlannerRepository
from .session import PlannerSession


def format_task_text(task: Task, state: PlannerState) -> str:
    """One-line text rendering of a task"""
    flags = []
    if task.done:
        flags.append("done")
    if task.hidden:
        flags.append("hidden")
    meeting = f" @ {task.meeting_time}" if task.is_meeting and task.meeting_time else ""
    timer = state.pomodoro_timers.get(task.id)
    countdown = f" [{timers.format_seconds(timer.remaining_seconds)}]" if timer else ""
    suffix = f" ({', '.join(flags)})" if flags else ""
    return (
        f"[{task.id}] {task.priority.value} | {task.task_type.value}{meeting} | "
        f"{task.name}{countdown}{suffix}"
    )


def print_state_summary(state: PlannerState, output_format: str) -> None:
    if output_format == "json":
        print(json.dumps(state.to_dict(), ensure_ascii=False))
    else:
        print(
            f"{clock.format_long_date(state.selected_date)}: "
            f"{len(state.tasks)} tasks, {len(state.categories)} categories, sort={state.sort_by.value}"
        )


def cmd_list(session: PlannerSession, args: argparse.Namespace) -> int:
    """Show the visible tasks of a day, grouped by category"""
    state = dataclasses.replace(session.state, selected_date=args.date or clock.today())
    view = ViewContext(
        show_all_tasks=args.all,
        filter_type=args.type,
        filter_category=args.category,
        filter_status=args.status,
        sort_by=SortBy(args.sort) if args.sort else None,
    )
    groups = ordering.group_by_category(ordering.visible_tasks(state, view))

    if args.format == "json":
        payload: List[Dict[str, Any]] = [
            {"category": category, "tasks": [task.to_dict() for task in tasks]}
            for category, tasks in groups
        ]
        print(json.dumps(payload, ensure_ascii=False))
        return 0

    print(clock.format_long_date(state.selected_date))
    if not groups:
        print("No tasks match your filters for this date.")
    for category, tasks in groups:
        print(f"{category} ({len(tasks)})")
        for task in tasks:
            print(f"  {format_task_text(task, state)}")
    return 0


def cmd_add(session: PlannerSession, args: argparse.Namespace) -> int:
    meeting_time = build_meeting_time(args.meeting_hour, args.meeting_minute, args.meeting_ampm)
    draft = TaskDraft(
        name=args.name,
        date=args.date or clock.today(),
        description=args.description,
        priority=args.priority,
        category=args.category,
        task_type=args.type,
        meeting_time=meeting_time,
    )
    state = session.add_task(draft)
    created = state.tasks[-1]
    if args.format == "json":
        print(json.dumps(created.to_dict(), ensure_ascii=False))
    else:
        print(f"Added: {format_task_text(created, state)}")
    return 0


_TASK_COMMANDS = {
    "toggle": ("toggle_done", "Toggled"),
    "hide": ("hide_task", "Hidden"),
    "restore": ("restore_task", "Restored"),
    "move-next": ("move_to_next_day", "Moved"),
    "clone-next": ("clone_to_next_day", "Cloned"),
}


def cmd_task(session: PlannerSession, args: argparse.Namespace) -> int:
    method, verb = _TASK_COMMANDS[args.command]
    state = getattr(session, method)(args.id)
    task = state.tasks[-1] if args.command == "clone-next" else state.find_task(args.id)
    if task is None:
        raise ValidationError(f"Task not found: {args.id}")
    if args.format == "json":
        print(json.dumps(task.to_dict(), ensure_ascii=False))
    else:
        print(f"{verb}: {format_task_text(task, state)}")
    return 0


def cmd_reorder(session: PlannerSession, args: argparse.Namespace) -> int:
    day = args.date or session.state.selected_date
    preview = dataclasses.replace(session.state, selected_date=day)
    if ordering.reorder(preview, args.source, args.target) is preview:
        print(
            f"Error: {args.source} and {args.target} are not two different tasks of {day}.",
            file=sys.stderr,
        )
        return 1
    session.set_selected_date(day)
    print_state_summary(session.reorder(args.source, args.target), args.format)
    return 0


def cmd_add_category(session: PlannerSession, args: argparse.Namespace) -> int:
    print_state_summary(session.add_category(args.name, args.color), args.format)
    return 0


def cmd_delete_category(session: PlannerSession, args: argparse.Namespace) -> int:
    print_state_summary(session.delete_category(args.name), args.format)
    return 0


def cmd_sort(session: PlannerSession, args: argparse.Namespace) -> int:
    print_state_summary(session.set_sort_by(args.by), args.format)
    return 0


def print_timer(state: PlannerState, task: Task, verb: str, output_format: str) -> None:
    timer = state.pomodoro_timers.get(task.id)
    if output_format == "json":
        payload: Dict[str, Any] = {"taskId": task.id, "timer": timer.to_dict() if timer else None}
        if timer:
            payload["progress"] = timers.progress_percent(
                timer.remaining_seconds, timer.duration_seconds
            )
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(f"{verb}: {format_task_text(task, state)}")


def _require_task(session: PlannerSession, task_id: str) -> Task:
    task = session.state.find_task(task_id)
    if task is None:
        raise ValidationError(f"Task not found: {task_id}")
    return task


def cmd_timer_start(session: PlannerSession, args: argparse.Namespace) -> int:
    """Start a new timer or resume a paused one"""
    task = _require_task(session, args.id)
    prompt = (lambda: args.minutes) if args.minutes is not None else None
    state = session.start_timer(task.id, prompt)
    print_timer(state, task, "Timer started", args.format)
    return 0


def cmd_timer_pause(session: PlannerSession, args: argparse.Namespace) -> int:
    task = _require_task(session, args.id)
    print_timer(session.pause_timer(task.id), task, "Timer paused", args.format)
    return 0


def cmd_timer_reset(session: PlannerSession, args: argparse.Namespace) -> int:
    task = _require_task(session, args.id)
    print_timer(session.reset_timer(task.id), task, "Timer reset", args.format)
    return 0


def _add_format(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Daily planner CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    storage = parser.add_mutually_exclusive_group()
    storage.add_argument("--db-path", type=str, help="SQLite database file (default: data/planner.db)")
    storage.add_argument("--api-url", type=str, help="Planner API base URL instead of a local database")
    storage.add_argument(
        "--remote", action="store_true", help="Use the planner API configured in app_config.yaml"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run", required=True)

    parser_list = subparsers.add_parser("list", help="Show tasks of a day")
    parser_list.add_argument("--date", help="Day to show (YYYY-MM-DD, default: today)")
    parser_list.add_argument("--all", action="store_true", help="Include hidden tasks")
    parser_list.add_argument("--type", default=ordering.ALL, help="Task type filter")
    parser_list.add_argument("--category", default=ordering.ALL, help="Category filter")
    parser_list.add_argument(
        "--status",
        choices=[ordering.ALL, ordering.STATUS_PENDING, ordering.STATUS_COMPLETED],
        default=ordering.ALL,
        help="Completion filter",
    )
    parser_list.add_argument("--sort", choices=[mode.value for mode in SortBy], help="Sort mode")
    _add_format(parser_list)

    parser_add = subparsers.add_parser("add", help="Add a task")
    parser_add.add_argument("--name", required=True, help="Task name")
    parser_add.add_argument("--date", help="Task date (YYYY-MM-DD, default: today)")
    parser_add.add_argument("--description", default="", help="Task description")
    parser_add.add_argument("--priority", default="Medium", help="High, Medium or Low")
    parser_add.add_argument("--category", default="General", help="Existing category")
    parser_add.add_argument("--type", default="Work", help="Work, Learning or Meeting")
    parser_add.add_argument("--meeting-hour", default="", help="01-12")
    parser_add.add_argument("--meeting-minute", default="", help="00, 15, 30 or 45")
    parser_add.add_argument("--meeting-ampm", default="", choices=["", "AM", "PM"])
    _add_format(parser_add)

    for name, (_, verb) in _TASK_COMMANDS.items():
        parser_task = subparsers.add_parser(name, help=f"{verb} a task")
        parser_task.add_argument("--id", required=True, help="Task id")
        _add_format(parser_task)

    parser_reorder = subparsers.add_parser("reorder", help="Move a task before another one")
    parser_reorder.add_argument("--source", required=True, help="Task to move")
    parser_reorder.add_argument("--target", required=True, help="Task whose slot it takes")
    parser_reorder.add_argument("--date", help="Day of both tasks (default: today)")
    _add_format(parser_reorder)

    parser_add_category = subparsers.add_parser("add-category", help="Add a category")
    parser_add_category.add_argument("--name", required=True)
    parser_add_category.add_argument("--color", default=DEFAULT_CATEGORY_COLOR)
    _add_format(parser_add_category)

    parser_delete_category = subparsers.add_parser("delete-category", help="Delete a category")
    parser_delete_category.add_argument("--name", required=True)
    _add_format(parser_delete_category)

    parser_sort = subparsers.add_parser("sort", help="Change the sort mode")
    parser_sort.add_argument("--by", required=True, choices=[mode.value for mode in SortBy])
    _add_format(parser_sort)

    parser_timer_start = subparsers.add_parser("timer-start", help="Start or resume a task timer")
    parser_timer_start.add_argument("--id", required=True, help="Task id")
    parser_timer_start.add_argument(
        "--minutes", type=int, help="Length of a new timer (default: timer.default_minutes)"
    )
    _add_format(parser_timer_start)

    for name, help_text in (("timer-pause", "Pause a task timer"), ("timer-reset", "Clear a task timer")):
        parser_timer = subparsers.add_parser(name, help=help_text)
        parser_timer.add_argument("--id", required=True, help="Task id")
        _add_format(parser_timer)

    return parser


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "reorder": cmd_reorder,
    "add-category": cmd_add_category,
    "delete-category": cmd_delete_category,
    "sort": cmd_sort,
    "timer-start": cmd_timer_start,
    "timer-pause": cmd_timer_pause,
    "timer-reset": cmd_timer_reset,
    **{name: cmd_task for name in _TASK_COMMANDS},
}


def build_store(args: argparse.Namespace, config: Config) -> DocumentStore:
    """Local SQLite repository unless a planner API was requested"""
    if args.api_url or args.remote:
        return PlannerApiClient(
            api_url=args.api_url or config.client.api_url,
            timeout=config.client.timeout_seconds,
        )
    return PlannerRepository(db_path=args.db_path if args.db_path else None)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)
    config = Config.from_yaml()

    try:
        session = PlannerSession(
            build_store(args, config), default_timer_minutes=config.timer.default_minutes
        )
        session.load(raise_errors=True)
        return COMMANDS[args.command](session, args)
    except PlannerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
