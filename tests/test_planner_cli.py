"""Planner CLI behaviour"""

import json
import subprocess
import sys
from pathlib import Path

from src.planner.cli import build_parser, build_store
from src.planner.client import PlannerApiClient
from src.planner.config import Config
from src.planner.repository import PlannerRepository


def run_cli(args: list[str], db_path: Path) -> subprocess.CompletedProcess:
    """Run the CLI as a subprocess"""
    cmd = [
        sys.executable,
        "-m",
        "src.planner",
        "--db-path",
        str(db_path),
    ] + args
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )


def test_cli_list_empty(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["list", "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout) == []


def test_cli_add_toggle_and_list(tmp_path):
    db_path = tmp_path / "cli_test.db"

    result = run_cli(["add-category", "--name", "Research", "--color", "#aa00ff"], db_path)
    assert result.returncode == 0

    result = run_cli(
        [
            "add",
            "--name",
            "Read paper",
            "--date",
            "2026-10-18",
            "--priority",
            "High",
            "--category",
            "Research",
            "--format",
            "json",
        ],
        db_path,
    )
    assert result.returncode == 0
    added = json.loads(result.stdout)
    assert added["name"] == "Read paper"
    assert added["category"] == "Research"
    task_id = added["id"]

    result = run_cli(["add", "--name", "Email", "--date", "2026-10-18"], db_path)
    assert result.returncode == 0

    result = run_cli(["list", "--date", "2026-10-18", "--format", "json"], db_path)
    groups = json.loads(result.stdout)
    assert [group["category"] for group in groups] == ["General", "Research"]

    result = run_cli(["toggle", "--id", task_id, "--format", "json"], db_path)
    assert result.returncode == 0
    toggled = json.loads(result.stdout)
    assert toggled["done"] is True and toggled["hidden"] is True

    result = run_cli(["list", "--date", "2026-10-18", "--format", "json"], db_path)
    groups = json.loads(result.stdout)
    assert [group["category"] for group in groups] == ["General"]

    result = run_cli(["list", "--date", "2026-10-18", "--all"], db_path)
    assert "Read paper" in result.stdout
    assert "(done, hidden)" in result.stdout


def test_cli_meeting_requires_time(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["add", "--name", "Sync", "--type", "Meeting"], db_path)
    assert result.returncode == 1
    assert "Meeting time is required" in result.stderr

    result = run_cli(
        [
            "add",
            "--name",
            "Sync",
            "--type",
            "Meeting",
            "--meeting-hour",
            "02",
            "--meeting-minute",
            "30",
            "--meeting-ampm",
            "PM",
            "--format",
            "json",
        ],
        db_path,
    )
    assert result.returncode == 0
    assert json.loads(result.stdout)["meetingTime"] == "02:30 PM IST"


def test_cli_delete_general_fails(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["delete-category", "--name", "General"], db_path)
    assert result.returncode == 1
    assert "cannot be deleted" in result.stderr


def test_cli_unknown_task_fails(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["hide", "--id", "missing"], db_path)
    assert result.returncode == 1
    assert "Task not found" in result.stderr


def test_cli_reorder(tmp_path):
    db_path = tmp_path / "cli_test.db"
    ids = []
    for name in ("a", "b", "c"):
        result = run_cli(["add", "--name", name, "--date", "2026-10-18", "--format", "json"], db_path)
        ids.append(json.loads(result.stdout)["id"])

    result = run_cli(
        ["reorder", "--source", ids[2], "--target", ids[0], "--date", "2026-10-18", "--format", "json"],
        db_path,
    )
    assert result.returncode == 0
    assert json.loads(result.stdout)["sortBy"] == "manual"

    result = run_cli(["list", "--date", "2026-10-18", "--format", "json"], db_path)
    names = [task["name"] for task in json.loads(result.stdout)[0]["tasks"]]
    assert names == ["c", "a", "b"]


def test_cli_rejected_reorder_keeps_stored_date(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(
        ["reorder", "--source", "x", "--target", "y", "--date", "2030-01-01"], db_path
    )
    assert result.returncode == 1
    assert PlannerRepository(db_path=db_path).load().selected_date != "2030-01-01"


def test_cli_timer_start_pause_reset(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["add", "--name", "Focus", "--date", "2026-10-18", "--format", "json"], db_path)
    task_id = json.loads(result.stdout)["id"]

    result = run_cli(["timer-start", "--id", task_id, "--minutes", "5", "--format", "json"], db_path)
    assert result.returncode == 0
    started = json.loads(result.stdout)
    assert started["timer"] == {"remainingSeconds": 300, "durationSeconds": 300, "isRunning": True}
    assert started["progress"] == 0

    result = run_cli(["timer-pause", "--id", task_id, "--format", "json"], db_path)
    assert json.loads(result.stdout)["timer"]["isRunning"] is False

    result = run_cli(["list", "--date", "2026-10-18"], db_path)
    assert "[05:00]" in result.stdout

    result = run_cli(["timer-reset", "--id", task_id, "--format", "json"], db_path)
    assert json.loads(result.stdout)["timer"] is None
    assert PlannerRepository(db_path=db_path).load().pomodoro_timers == {}


def test_cli_timer_start_uses_configured_default(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["add", "--name", "Focus", "--format", "json"], db_path)
    task_id = json.loads(result.stdout)["id"]

    result = run_cli(["timer-start", "--id", task_id, "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout)["timer"]["durationSeconds"] == 30 * 60


def test_cli_timer_unknown_task_fails(tmp_path):
    db_path = tmp_path / "cli_test.db"
    result = run_cli(["timer-start", "--id", "missing"], db_path)
    assert result.returncode == 1
    assert "Task not found" in result.stderr


def test_build_store_selects_api_client():
    config = Config()
    config.client.api_url = "http://planner.internal:9000"
    config.client.timeout_seconds = 2.5
    parser = build_parser()

    store = build_store(parser.parse_args(["--remote", "list"]), config)
    assert isinstance(store, PlannerApiClient)
    assert store.api_url == "http://planner.internal:9000"
    assert store.timeout == 2.5

    store = build_store(parser.parse_args(["--api-url", "http://other:1/", "list"]), config)
    assert isinstance(store, PlannerApiClient)
    assert store.api_url == "http://other:1"


def test_build_store_defaults_to_repository(tmp_path):
    args = build_parser().parse_args(["--db-path", str(tmp_path / "cli.db"), "list"])
    store = build_store(args, Config())
    assert isinstance(store, PlannerRepository)


def test_cli_unreachable_api_fails():
    result = subprocess.run(
        [sys.executable, "-m", "src.planner", "--api-url", "http://127.0.0.1:9", "list"],
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )
    assert result.returncode == 1
    assert "Failed to load state" in result.stderr
