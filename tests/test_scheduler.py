import asyncio
from collections.abc import Callable

import numpy as np
import pytest

from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine
from daisyworld.engine.scheduler import FRAME_INTERVAL_S, Scheduler, asyncio_schedule, tick_delay


class FakeHandle:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Scheduling port that queues callbacks until the test runs them."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def run_next(self) -> FakeHandle:
        handle = self.handles.pop(0)
        if not handle.cancelled:
            handle.callback()
        return handle

    def run_ticks(self, count: int) -> None:
        for _ in range(count):
            if not self.handles:
                break
            self.run_next()


def _engine(clock: FakeClock, speed: float = 1.0, seed: int = 7) -> DaisyworldEngine:
    return DaisyworldEngine(
        SimulationConfig(simulation_speed=speed),
        schedule=clock,
        rng=np.random.default_rng(seed),
    )


def test_start_schedules_ticks_that_step_the_engine() -> None:
    clock = FakeClock()
    engine = _engine(clock)

    engine.start()
    assert engine.running is True
    assert len(clock.pending) == 1
    assert clock.pending[0].delay == 0.0
    assert engine.time == 0

    clock.run_next()
    assert engine.time == 1
    assert len(clock.pending) == 1
    assert clock.pending[0].delay == pytest.approx(FRAME_INTERVAL_S)

    clock.run_ticks(4)
    assert engine.time == 5


def test_start_is_idempotent_while_running() -> None:
    clock = FakeClock()
    engine = _engine(clock)

    engine.start()
    engine.start()

    assert len(clock.handles) == 1


def test_pause_cancels_pending_tick() -> None:
    clock = FakeClock()
    engine = _engine(clock)
    engine.start()
    clock.run_ticks(3)

    engine.pause()

    assert engine.running is False
    assert clock.pending == []
    clock.run_ticks(5)
    assert engine.time == 3


def test_tick_after_pause_does_no_work() -> None:
    clock = FakeClock()
    engine = _engine(clock)
    scheduler = Scheduler(engine, schedule=clock)

    assert scheduler.tick() == 0
    assert engine.time == 0
    assert scheduler.pending is False


def test_integer_speed_runs_whole_batches() -> None:
    clock = FakeClock()
    engine = _engine(clock, speed=3.0)
    engine.start()

    clock.run_next()

    assert engine.time == 3
    assert clock.pending[0].delay == pytest.approx(FRAME_INTERVAL_S)


def test_high_speed_stretches_tick_delay() -> None:
    clock = FakeClock()
    engine = _engine(clock, speed=5.0)
    engine.start()

    clock.run_next()

    assert engine.time == 5
    assert clock.pending[0].delay == pytest.approx(2.0 * FRAME_INTERVAL_S)
    assert tick_delay(3.0) == pytest.approx(FRAME_INTERVAL_S)
    assert tick_delay(3.5) == pytest.approx(2.0 * FRAME_INTERVAL_S)


def test_fractional_speed_averages_out() -> None:
    scheduler = Scheduler(DaisyworldEngine(), rng=np.random.default_rng(123))

    draws = [scheduler.steps_for_tick(1.5) for _ in range(4000)]

    assert set(draws) <= {1, 2}
    assert np.mean(draws) == pytest.approx(1.5, abs=0.05)
    assert all(scheduler.steps_for_tick(2.0) == 2 for _ in range(50))


def test_pause_from_subscriber_stops_the_batch() -> None:
    clock = FakeClock()
    engine = _engine(clock, speed=5.0)

    def pause_at_two(event) -> None:
        if event.time == 2:
            engine.pause()

    engine.on_step(pause_at_two)
    engine.start()
    clock.run_next()

    assert engine.time == 2
    assert engine.running is False
    assert clock.pending == []


def test_restart_from_subscriber_keeps_a_single_tick_chain() -> None:
    clock = FakeClock()
    engine = _engine(clock, speed=1.0)

    def restart_once(event) -> None:
        if event.time == 1:
            engine.pause()
            engine.start()

    engine.on_step(restart_once)
    engine.start()
    clock.run_next()

    assert engine.running is True
    assert len(clock.pending) == 1

    clock.run_ticks(10)
    assert engine.time == 11
    assert len(clock.pending) == 1

    engine.pause()
    assert clock.pending == []


def test_manual_step_interleaves_with_running_loop() -> None:
    clock = FakeClock()
    engine = _engine(clock)
    engine.start()

    engine.step()
    assert engine.time == 1
    assert engine.running is True

    clock.run_next()
    assert engine.time == 2


def test_reset_while_running_pauses_and_cancels() -> None:
    clock = FakeClock()
    engine = _engine(clock)
    engine.start()
    clock.run_ticks(2)

    engine.reset()

    assert engine.running is False
    assert engine.time == 0
    assert clock.pending == []


def test_start_without_event_loop_raises_and_stays_paused() -> None:
    engine = DaisyworldEngine()

    with pytest.raises(RuntimeError):
        engine.start()
    assert engine.running is False


def test_engine_runs_on_asyncio_event_loop() -> None:
    async def scenario() -> tuple[int, int]:
        engine = DaisyworldEngine(schedule=asyncio_schedule())
        engine.start()
        await asyncio.sleep(0.1)
        engine.pause()
        stopped_at = engine.time
        await asyncio.sleep(0.05)
        return stopped_at, engine.time

    stopped_at, final = asyncio.run(scenario())

    assert stopped_at > 0
    assert final == stopped_at
