from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Protocol

import numpy as np

logger = logging.getLogger(__name__)

FRAME_INTERVAL_S = 1.0 / 60.0
HIGH_SPEED_THRESHOLD = 3.0


class CancelHandle(Protocol):
    def cancel(self) -> None: ...


# schedule(delay_s, callback) -> handle; asyncio's loop.call_later has this shape.
ScheduleFn = Callable[[float, Callable[[], None]], CancelHandle]


class SteppableEngine(Protocol):
    @property
    def running(self) -> bool: ...

    @property
    def simulation_speed(self) -> float: ...

    def step(self) -> object: ...


def asyncio_schedule(loop: asyncio.AbstractEventLoop | None = None) -> ScheduleFn:
    """Scheduling port backed by an asyncio event loop (the running one by default)."""
    target = loop if loop is not None else asyncio.get_running_loop()
    return target.call_later


def tick_delay(simulation_speed: float) -> float:
    if simulation_speed > HIGH_SPEED_THRESHOLD:
        return 2.0 * FRAME_INTERVAL_S
    return FRAME_INTERVAL_S


class Scheduler:
    """Cooperative loop that steps an engine while it is running.

    Each tick runs ``floor(speed)`` steps plus one more with probability equal
    to the fractional part of the speed, then re-schedules itself through the
    injected port. All randomness of a run lives here, never in ``step()``.
    """

    def __init__(
        self,
        engine: SteppableEngine,
        schedule: ScheduleFn | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._engine = engine
        self._schedule = schedule
        self._rng = rng if rng is not None else np.random.default_rng()
        self._handle: CancelHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._schedule is None:
            self._schedule = asyncio_schedule()
        self.cancel()
        self._handle = self._schedule(0.0, self.tick)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def steps_for_tick(self, simulation_speed: float) -> int:
        whole = math.floor(simulation_speed)
        fraction = simulation_speed - whole
        extra = 1 if fraction > 0 and self._rng.random() < fraction else 0
        return whole + extra

    def tick(self) -> int:
        """Run one batch of steps; returns how many steps were executed."""
        self._handle = None
        if not self._engine.running:
            return 0

        speed = self._engine.simulation_speed
        executed = 0
        for _ in range(self.steps_for_tick(speed)):
            # A subscriber may pause the engine mid-batch.
            if not self._engine.running:
                break
            self._engine.step()
            executed += 1

        # A subscriber that restarted the engine mid-batch has already scheduled a tick.
        if self._engine.running and self._handle is None and self._schedule is not None:
            self._handle = self._schedule(tick_delay(speed), self.tick)
        logger.debug("Scheduler tick ran %d step(s) at speed %.2f", executed, speed)
        return executed


__all__ = [
    "Scheduler",
    "ScheduleFn",
    "CancelHandle",
    "FRAME_INTERVAL_S",
    "HIGH_SPEED_THRESHOLD",
    "asyncio_schedule",
    "tick_delay",
]
