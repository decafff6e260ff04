import asyncio

from workout_engine.services.feedback import HapticKind
from workout_engine.services.rest_timer import RestTimer
from workout_engine.services.ticker import Ticker


def _timer(clock, feedback, default=90):
    return RestTimer(default, clock=clock, feedback=feedback)


def test_remaining_follows_wall_clock(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    clock.advance(30)
    timer.tick()
    assert timer.is_running
    assert timer.remaining_seconds == 60
    assert timer.elapsed == 30


def test_start_uses_default_duration(clock, feedback):
    timer = _timer(clock, feedback, default=120)
    timer.start()
    assert timer.total_duration == 120
    assert timer.remaining_seconds == 120


def test_completes_once_with_feedback(clock, feedback):
    timer = _timer(clock, feedback)
    completions = []
    timer.add_completion_listener(completions.append)
    timer.start(60)
    clock.advance(60)
    timer.tick()
    timer.tick()
    assert timer.is_complete and not timer.is_running
    assert timer.remaining == 0
    assert completions == [timer]
    assert feedback.haptics == [HapticKind.SUCCESS]
    assert feedback.sounds == ["rest_complete"]


def test_suspended_process_completes_on_first_tick(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    clock.advance(500)
    assert timer.remaining == 0
    timer.tick()
    assert timer.is_complete
    assert timer.total_duration == 90


def test_add_extends_target_and_duration(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    clock.advance(10)
    timer.add(30)
    assert timer.remaining_seconds == 110
    assert timer.total_duration == 120
    assert timer.elapsed == 10


def test_add_caps_remaining(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(980)
    timer.add(30)
    assert timer.remaining_seconds == 999
    assert timer.total_duration == 999


def test_subtract_past_zero_completes(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    clock.advance(20)
    timer.subtract(90)
    assert timer.is_complete
    assert timer.total_duration == 20
    assert feedback.sounds == ["rest_complete"]


def test_subtract_shortens(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    timer.subtract(30)
    assert timer.remaining_seconds == 60
    assert timer.total_duration == 60
    assert timer.is_running


def test_adjust_ignored_when_idle(clock, feedback):
    timer = _timer(clock, feedback)
    timer.add(30)
    timer.subtract(30)
    assert not timer.is_running and not timer.is_complete
    assert feedback.sounds == []


def test_stop_is_not_completion(clock, feedback):
    timer = _timer(clock, feedback)
    timer.start(90)
    timer.stop()
    clock.advance(100)
    timer.tick()
    assert not timer.is_running
    assert not timer.is_complete
    assert timer.remaining == 0
    assert feedback.sounds == []


def test_default_change_applies_to_idle_display_only(clock, feedback):
    timer = _timer(clock, feedback)
    timer.set_default_duration(120)
    assert timer.total_duration == 120
    timer.start()
    timer.set_default_duration(60)
    assert timer.total_duration == 120
    assert timer.default_duration == 60


def test_failing_feedback_does_not_break_completion(clock):
    class Broken:
        def haptic(self, kind):
            raise RuntimeError("no haptics")

        def play_sound(self, name):
            raise RuntimeError("no speaker")

    timer = RestTimer(90, clock=clock, feedback=Broken())
    timer.start(5)
    clock.advance(5)
    timer.tick()
    assert timer.is_complete


async def test_ticker_calls_back_until_stopped():
    calls = []
    ticker = Ticker(0.01, lambda: calls.append(1))
    ticker.start()
    ticker.start()
    assert ticker.running
    await asyncio.sleep(0.05)
    ticker.stop()
    seen = len(calls)
    assert seen >= 1
    await asyncio.sleep(0.03)
    assert len(calls) == seen
    assert not ticker.running


async def test_ticker_survives_callback_errors():
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    ticker = Ticker(0.01, flaky)
    ticker.start()
    await asyncio.sleep(0.2)
    ticker.stop()
    assert len(calls) >= 2
    assert not ticker.running


async def test_ticker_aclose_waits_for_the_task():
    ticker = Ticker(0.01, lambda: None)
    ticker.start()
    task = ticker._task
    await ticker.aclose()
    assert task.done() and task.cancelled()
    assert not ticker.running
    await ticker.aclose()


async def test_manager_shutdown_stops_ticking(manager):
    await manager.start()
    assert manager._ticker.running
    await manager.shutdown()
    assert not manager._ticker.running
    assert manager.has_active_workout
