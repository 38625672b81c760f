from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass

import numpy as np

from daisyworld.config import MAX_SIMULATION_SPEED, MIN_SIMULATION_SPEED, SimulationConfig
from daisyworld.engine.dynamics import effective_growth_rate, growth_curve, next_coverage
from daisyworld.engine.scheduler import ScheduleFn, Scheduler
from daisyworld.model.planet import Planet
from daisyworld.model.surface import Surface, SurfaceKind

logger = logging.getLogger(__name__)


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


@dataclass(frozen=True)
class StepEvent:
    time: int
    temperature: float
    white_coverage: float
    black_coverage: float
    albedo: float
    solar_luminosity: float
    white_local_temp: float
    black_local_temp: float

    @property
    def bare_soil_coverage(self) -> float:
        return 1.0 - self.white_coverage - self.black_coverage

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class StepDelta:
    white_coverage_change: float
    black_coverage_change: float
    temperature_change: float


StepCallback = Callable[[StepEvent], None]


class DaisyworldEngine:
    """Owns one planet and the white/black daisy populations and advances them.

    All numeric inputs are clamped rather than rejected (see
    ``SimulationConfig.normalized``). ``step()`` is deterministic and may be
    called in either state; while running it interleaves with scheduled ticks.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        schedule: ScheduleFn | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._subscribers: dict[int, StepCallback] = {}
        self._tokens = itertools.count()
        self._scheduler = Scheduler(self, schedule=schedule, rng=rng)
        self._initialize(config or SimulationConfig())

    def _initialize(self, config: SimulationConfig) -> None:
        config = config.normalized()
        self._config = config
        self._growth = config.growth
        self._stability = config.stability

        self._planet = Planet(
            config.bare_soil_albedo,
            config.initial_temp,
            stability=config.stability,
        )
        self._planet.set_solar_luminosity(config.solar_luminosity)
        self._white = Surface(SurfaceKind.WHITE, config.white_daisy_albedo, config.white_daisy_init)
        self._black = Surface(SurfaceKind.BLACK, config.black_daisy_albedo, config.black_daisy_init)

        self._death_rate = config.death_rate
        self._optimal_temperature = config.optimal_temp
        self._simulation_speed = config.simulation_speed
        self._running = False
        self._time = 0

        # Prime: the displayed initial temperature is the configured one, not
        # the radiative value for the initial albedo.
        self._update_planet_albedo()
        self._planet.set_temperature(config.initial_temp)
        self._update_local_temperatures()
        logger.debug(
            "Primed engine: albedo=%.4f temperature=%.2fK",
            self._planet.albedo,
            self._planet.temperature,
        )

    # -- accessors ---------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def planet_temperature(self) -> float:
        return self._planet.temperature

    @property
    def planet_albedo(self) -> float:
        return self._planet.albedo

    @property
    def bare_soil_albedo(self) -> float:
        return self._planet.bare_soil_albedo

    @property
    def solar_luminosity(self) -> float:
        return self._planet.solar_luminosity

    @solar_luminosity.setter
    def solar_luminosity(self, luminosity: float) -> None:
        self._planet.set_solar_luminosity(luminosity)

    @property
    def white_coverage(self) -> float:
        return self._white.coverage

    @white_coverage.setter
    def white_coverage(self, coverage: float) -> None:
        """Set white coverage; also recomputes the planet albedo.

        The value is clamped to the surface black daisies leave free.
        """
        self._white.set_coverage(_clamp(coverage, 0.0, 1.0 - self._black.coverage))
        self._update_planet_albedo()

    @property
    def black_coverage(self) -> float:
        return self._black.coverage

    @black_coverage.setter
    def black_coverage(self, coverage: float) -> None:
        """Set black coverage; also recomputes the planet albedo.

        The value is clamped to the surface white daisies leave free.
        """
        self._black.set_coverage(_clamp(coverage, 0.0, 1.0 - self._white.coverage))
        self._update_planet_albedo()

    @property
    def bare_soil_coverage(self) -> float:
        return 1.0 - self._white.coverage - self._black.coverage

    @property
    def white_local_temperature(self) -> float:
        return self._white.local_temperature

    @property
    def black_local_temperature(self) -> float:
        return self._black.local_temperature

    @property
    def simulation_speed(self) -> float:
        return self._simulation_speed

    @simulation_speed.setter
    def simulation_speed(self, speed: float) -> None:
        self._simulation_speed = _clamp(speed, MIN_SIMULATION_SPEED, MAX_SIMULATION_SPEED)

    @property
    def death_rate(self) -> float:
        return self._death_rate

    @property
    def optimal_temperature(self) -> float:
        return self._optimal_temperature

    @property
    def running(self) -> bool:
        return self._running

    @property
    def time(self) -> int:
        return self._time

    def snapshot(self) -> StepEvent:
        """Current state in step-event form, without advancing time."""
        return StepEvent(
            time=self._time,
            temperature=self._planet.temperature,
            white_coverage=self._white.coverage,
            black_coverage=self._black.coverage,
            albedo=self._planet.albedo,
            solar_luminosity=self._planet.solar_luminosity,
            white_local_temp=self._white.local_temperature,
            black_local_temp=self._black.local_temperature,
        )

    def growth_rate(self, temperature: float) -> float:
        return growth_curve(temperature, self._optimal_temperature, self._growth)

    # -- model updates -----------------------------------------------------

    def calculate_planet_albedo(self) -> float:
        return (
            self._white.albedo * self._white.coverage
            + self._black.albedo * self._black.coverage
            + self._planet.bare_soil_albedo * self.bare_soil_coverage
        )

    def _update_planet_albedo(self) -> None:
        self._planet.set_albedo(self.calculate_planet_albedo())

    def _update_planet_temperature(self) -> float:
        temperature = self._planet.calculate_temperature()
        self._planet.set_temperature(temperature)
        logger.debug("Planet temperature updated to %.2fK", temperature)
        return temperature

    def _regulated_local_temperature(self, surface: Surface) -> float:
        planet_temperature = self._planet.temperature
        gap = self._planet.calculate_local_temperature(surface.albedo) - planet_temperature
        gap *= self._growth.temperature_regulation_factor
        limit = self._stability.max_local_gap
        gap = _clamp(gap, -limit, limit)
        return self._stability.clamp_temperature(planet_temperature + gap)

    def _update_local_temperatures(self) -> None:
        self._white.set_local_temperature(self._regulated_local_temperature(self._white))
        self._black.set_local_temperature(self._regulated_local_temperature(self._black))

    def _update_population(self, surface: Surface, other: Surface) -> None:
        rate = effective_growth_rate(
            surface.kind,
            local_temperature_k=surface.local_temperature,
            planet_temperature_k=self._planet.temperature,
            coverage=surface.coverage,
            optimal_temp_k=self._optimal_temperature,
            growth=self._growth,
            stability=self._stability,
        )
        surface.set_coverage(
            next_coverage(
                surface.coverage,
                growth_rate=rate,
                bare_soil_coverage=self.bare_soil_coverage,
                death_rate=self._death_rate,
                available_coverage=1.0 - other.coverage,
                stability=self._stability,
            )
        )

    # -- control -----------------------------------------------------------

    def step(self) -> StepDelta:
        previous_white = self._white.coverage
        previous_black = self._black.coverage
        previous_temperature = self._planet.temperature

        self._update_population(self._white, self._black)
        self._update_population(self._black, self._white)

        self._update_planet_albedo()
        self._update_planet_temperature()
        self._update_local_temperatures()

        self._time += 1
        self._notify(self.snapshot())

        return StepDelta(
            white_coverage_change=self._white.coverage - previous_white,
            black_coverage_change=self._black.coverage - previous_black,
            temperature_change=self._planet.temperature - previous_temperature,
        )

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        try:
            self._scheduler.start()
        except RuntimeError:
            self._running = False
            raise
        logger.info("Simulation started at t=%d", self._time)

    def pause(self) -> None:
        was_running = self._running
        self._running = False
        self._scheduler.cancel()
        if was_running:
            logger.info("Simulation paused at t=%d", self._time)

    def reset(self, config: SimulationConfig | None = None) -> None:
        """Discard all state and rebuild from ``config``; subscribers are kept."""
        self.pause()
        self._initialize(config or SimulationConfig())
        logger.info("Simulation reset")

    # -- events ------------------------------------------------------------

    def on_step(self, callback: StepCallback) -> Callable[[], None]:
        """Register ``callback`` for step events; returns an unsubscribe function."""
        token = next(self._tokens)
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, event: StepEvent) -> None:
        for callback in list(self._subscribers.values()):
            callback(event)


__all__ = ["DaisyworldEngine", "StepEvent", "StepDelta", "StepCallback"]
