from __future__ import annotations

from dataclasses import dataclass

from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine


@dataclass(frozen=True)
class LuminosityRamp:
    """Raise solar luminosity by ``increment`` every ``steps_per_increment`` steps."""

    start: float = 0.7
    increment: float = 0.01
    ceiling: float = 1.6
    steps_per_increment: int = 1

    def __post_init__(self) -> None:
        if self.increment <= 0:
            msg = "increment must be positive"
            raise ValueError(msg)
        if self.ceiling < self.start:
            msg = "ceiling must not be below start"
            raise ValueError(msg)
        if self.steps_per_increment <= 0:
            msg = "steps_per_increment must be positive"
            raise ValueError(msg)

    def luminosity_at(self, time: int) -> float:
        increments = max(0, time) // self.steps_per_increment
        return min(self.ceiling, self.start + (self.increment * increments))

    def finished(self, time: int) -> bool:
        return self.luminosity_at(time) >= self.ceiling


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    config: SimulationConfig
    luminosity_ramp: LuminosityRamp | None = None


PRESETS: dict[str, Preset] = {
    "stable": Preset(
        name="stable",
        description="Balanced populations under present-day luminosity.",
        config=SimulationConfig(
            solar_luminosity=1.0,
            white_daisy_init=0.2,
            black_daisy_init=0.2,
            death_rate=0.3,
        ),
    ),
    "increasing_luminosity": Preset(
        name="increasing_luminosity",
        description="Dim young sun brightening towards 1.6 while daisies adapt.",
        config=SimulationConfig(
            solar_luminosity=0.7,
            white_daisy_init=0.1,
            black_daisy_init=0.4,
            death_rate=0.3,
        ),
        luminosity_ramp=LuminosityRamp(start=0.7, increment=0.01, ceiling=1.6),
    ),
    "white_dominant": Preset(
        name="white_dominant",
        description="Bright sun favouring reflective white daisies.",
        config=SimulationConfig(
            solar_luminosity=1.3,
            white_daisy_init=0.4,
            black_daisy_init=0.05,
            death_rate=0.25,
        ),
    ),
    "black_dominant": Preset(
        name="black_dominant",
        description="Dim sun favouring heat-absorbing black daisies.",
        config=SimulationConfig(
            solar_luminosity=0.8,
            white_daisy_init=0.05,
            black_daisy_init=0.4,
            death_rate=0.25,
        ),
    ),
}


def get_preset(name: str) -> Preset:
    try:
        return PRESETS[name]
    except KeyError:
        msg = f"Unknown preset {name!r}; expected one of {sorted(PRESETS)}"
        raise ValueError(msg) from None


def apply_preset(engine: DaisyworldEngine, name: str) -> Preset:
    """Pause and reset ``engine`` with a preset's configuration."""
    preset = get_preset(name)
    engine.reset(preset.config)
    return preset


def advance_with_ramp(
    engine: DaisyworldEngine,
    ramp: LuminosityRamp | None,
    steps: int,
) -> None:
    """Step ``engine`` ``steps`` times, applying the ramp luminosity before each step.

    The ramp value is capped at its ceiling, so the ceiling itself is applied
    once reached and held from then on.
    """
    for _ in range(steps):
        if ramp is not None:
            engine.solar_luminosity = ramp.luminosity_at(engine.time)
        engine.step()


__all__ = [
    "LuminosityRamp",
    "Preset",
    "PRESETS",
    "get_preset",
    "apply_preset",
    "advance_with_ramp",
]
