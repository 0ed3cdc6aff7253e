"""Countdown timer state machine"""

from src.planner import timers
from src.planner.models import DEFAULT_TIMER_SECONDS, Timer


def prompt(value):
    return lambda: value


def test_start_creates_running_timer_from_prompt():
    result = timers.start({}, "t", prompt(5))
    assert result["t"] == Timer(remaining_seconds=300, duration_seconds=300, is_running=True)


def test_start_with_non_positive_minutes_defaults_to_thirty():
    assert timers.start({}, "t", prompt(0))["t"].duration_seconds == 30 * 60
    assert timers.start({}, "t", prompt(-4))["t"].duration_seconds == 30 * 60


def test_cancelled_prompt_changes_nothing():
    assert timers.start({}, "t", prompt(None)) == {}


def test_start_resumes_paused_timer_without_prompting():
    paused = {"t": Timer(remaining_seconds=42, duration_seconds=300, is_running=False)}

    def fail():
        raise AssertionError("prompt must not be called")

    result = timers.start(paused, "t", fail)
    assert result["t"] == Timer(remaining_seconds=42, duration_seconds=300, is_running=True)
    assert paused["t"].is_running is False


def test_start_on_expired_timer_is_noop():
    expired = {"t": Timer(remaining_seconds=0, duration_seconds=300, is_running=False)}
    assert timers.start(expired, "t", prompt(10)) == expired


def test_pause_existing_and_absent():
    running = {"t": Timer(remaining_seconds=10, duration_seconds=60, is_running=True)}
    assert timers.pause(running, "t")["t"] == Timer(10, 60, False)

    created = timers.pause({}, "new")["new"]
    assert created == Timer(DEFAULT_TIMER_SECONDS, DEFAULT_TIMER_SECONDS, False)


def test_reset_removes_entry():
    state = {"t": Timer(10, 60, True), "u": Timer(5, 60, False)}
    assert timers.reset(state, "t") == {"u": Timer(5, 60, False)}
    assert timers.reset(state, "missing") == state


def test_five_minute_timer_expires_after_301_ticks():
    state = timers.start({}, "t", prompt(5))
    for _ in range(301):
        state = timers.tick(state)
    assert state["t"].remaining_seconds == 0
    assert state["t"].is_running is False


def test_tick_only_touches_running_timers():
    state = {
        "run": Timer(3, 60, True),
        "paused": Timer(3, 60, False),
        "last": Timer(1, 60, True),
    }
    result = timers.tick(state)
    assert result["run"] == Timer(2, 60, True)
    assert result["paused"] == Timer(3, 60, False)
    assert result["last"] == Timer(0, 60, False)


def test_tick_without_running_timers_returns_same_mapping():
    state = {"paused": Timer(3, 60, False)}
    assert timers.tick(state) is state
    assert timers.has_running(state) is False


def test_progress_percent_and_format():
    assert timers.progress_percent(1800, 1800) == 0
    assert timers.progress_percent(900, 1800) == 50
    assert timers.progress_percent(0, 1800) == 100
    assert timers.progress_percent(1, 200) == 100
    assert timers.progress_percent(199, 200) == 1
    assert timers.format_seconds(0) == "00:00"
    assert timers.format_seconds(1500) == "25:00"
    assert timers.format_seconds(61) == "01:01"
    assert timers.format_seconds(-5) == "00:00"


def test_start_fallback_uses_configured_default():
    result = timers.start({}, "t", prompt(0), default_minutes=25)
    assert result["t"] == Timer(remaining_seconds=1500, duration_seconds=1500, is_running=True)
