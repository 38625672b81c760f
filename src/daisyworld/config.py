from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path

MIN_SIMULATION_SPEED = 0.1
MAX_SIMULATION_SPEED = 10.0

# Names used by the browser control surface, mapped onto config fields.
UI_FIELD_ALIASES = {
    "solarLuminosity": "solar_luminosity",
    "bareSoilAlbedo": "bare_soil_albedo",
    "initialTemp": "initial_temp",
    "whiteDaisyInit": "white_daisy_init",
    "blackDaisyInit": "black_daisy_init",
    "whiteDaisyAlbedo": "white_daisy_albedo",
    "blackDaisyAlbedo": "black_daisy_albedo",
    "deathRate": "death_rate",
    "optimalTemp": "optimal_temp",
    "simulationSpeed": "simulation_speed",
}


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


@dataclass(frozen=True)
class GrowthParameters:
    """Shape of the temperature growth curve and the preference modifiers.

    ``min_growth_temp`` and ``max_growth_temp`` are the half-widths (K) of the
    viable band below and above the optimum. The curve reaches zero at both edges.
    """

    max_growth_rate: float = 1.0
    min_growth_temp: float = 20.0
    max_growth_temp: float = 30.0
    growth_exponent: float = 1.8
    temperature_regulation_factor: float = 2.0
    preference_window: float = 20.0
    preference_dead_band: float = 10.0

    def __post_init__(self) -> None:
        if self.max_growth_rate < 0:
            msg = "max_growth_rate must be non-negative"
            raise ValueError(msg)
        if self.min_growth_temp <= 0 or self.max_growth_temp <= 0:
            msg = "growth half-widths must be positive"
            raise ValueError(msg)
        if self.growth_exponent <= 0:
            msg = "growth_exponent must be positive"
            raise ValueError(msg)
        if self.temperature_regulation_factor < 0:
            msg = "temperature_regulation_factor must be non-negative"
            raise ValueError(msg)
        if self.preference_window <= 0:
            msg = "preference_window must be positive"
            raise ValueError(msg)
        if self.preference_dead_band < 0:
            msg = "preference_dead_band must be non-negative"
            raise ValueError(msg)


@dataclass(frozen=True)
class StabilityPolicy:
    """Numerical clamps that keep the discrete-time model well behaved."""

    min_temperature: float = 250.0
    max_temperature: float = 350.0
    max_temperature_jump: float = 20.0
    damped_temperature_step: float = 15.0
    max_local_gap: float = 15.0
    rescue_threshold: float = 0.1
    rescue_strength: float = 10.0
    survival_floor: float = 0.7
    max_coverage_change: float = 0.05
    extinction_floor: float = 0.01

    def __post_init__(self) -> None:
        if self.min_temperature <= 0 or self.max_temperature <= self.min_temperature:
            msg = "temperature band must satisfy 0 < min_temperature < max_temperature"
            raise ValueError(msg)
        if self.max_temperature_jump <= 0:
            msg = "max_temperature_jump must be positive"
            raise ValueError(msg)
        if not 0 < self.damped_temperature_step <= self.max_temperature_jump:
            msg = "damped_temperature_step must be in (0, max_temperature_jump]"
            raise ValueError(msg)
        if self.max_local_gap < 0:
            msg = "max_local_gap must be non-negative"
            raise ValueError(msg)
        if not 0 <= self.rescue_threshold <= 1:
            msg = "rescue_threshold must be between 0 and 1"
            raise ValueError(msg)
        if self.rescue_strength < 0:
            msg = "rescue_strength must be non-negative"
            raise ValueError(msg)
        if not 0 <= self.survival_floor <= 1:
            msg = "survival_floor must be between 0 and 1"
            raise ValueError(msg)
        if not 0 < self.max_coverage_change <= 1:
            msg = "max_coverage_change must be in (0, 1]"
            raise ValueError(msg)
        if not 0 <= self.extinction_floor < 1:
            msg = "extinction_floor must be in [0, 1)"
            raise ValueError(msg)

    def clamp_temperature(self, temperature: float) -> float:
        return _clamp(temperature, self.min_temperature, self.max_temperature)


@dataclass(frozen=True)
class SimulationConfig:
    solar_luminosity: float = 1.0
    bare_soil_albedo: float = 0.5
    initial_temp: float = 295.0
    white_daisy_init: float = 0.2
    black_daisy_init: float = 0.2
    white_daisy_albedo: float = 0.75
    black_daisy_albedo: float = 0.25
    death_rate: float = 0.3
    optimal_temp: float = 295.0
    simulation_speed: float = 1.0
    growth: GrowthParameters = field(default_factory=GrowthParameters)
    stability: StabilityPolicy = field(default_factory=StabilityPolicy)

    def normalized(self) -> SimulationConfig:
        """Return a copy with every numeric field clamped into its valid range.

        Nonsensical inputs are pulled to the nearest valid value instead of
        rejected: luminosity to >= 0, albedos, initial coverages and the death
        rate to [0, 1], both temperatures into the stability band, the speed to
        [0.1, 10]. When the two initial coverages overlap, black daisies get
        whatever surface white daisies leave free.
        """
        white_init = _clamp(self.white_daisy_init, 0.0, 1.0)
        black_init = _clamp(self.black_daisy_init, 0.0, 1.0 - white_init)
        return replace(
            self,
            solar_luminosity=max(0.0, self.solar_luminosity),
            bare_soil_albedo=_clamp(self.bare_soil_albedo, 0.0, 1.0),
            initial_temp=self.stability.clamp_temperature(self.initial_temp),
            white_daisy_init=white_init,
            black_daisy_init=black_init,
            white_daisy_albedo=_clamp(self.white_daisy_albedo, 0.0, 1.0),
            black_daisy_albedo=_clamp(self.black_daisy_albedo, 0.0, 1.0),
            death_rate=_clamp(self.death_rate, 0.0, 1.0),
            optimal_temp=self.stability.clamp_temperature(self.optimal_temp),
            simulation_speed=_clamp(
                self.simulation_speed, MIN_SIMULATION_SPEED, MAX_SIMULATION_SPEED
            ),
        )

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> SimulationConfig:
        known = {item.name for item in fields(SimulationConfig)}
        values: dict[str, object] = {}
        for key, value in payload.items():
            name = UI_FIELD_ALIASES.get(key, key)
            if name not in known:
                msg = f"Unknown simulation config field: {key}"
                raise ValueError(msg)
            if name == "growth":
                value = GrowthParameters(**dict(value))  # type: ignore[arg-type]
            elif name == "stability":
                value = StabilityPolicy(**dict(value))  # type: ignore[arg-type]
            else:
                value = float(value)  # type: ignore[arg-type]
            values[name] = value
        return SimulationConfig(**values)  # type: ignore[arg-type]


def load_config(path: str | Path) -> SimulationConfig:
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Simulation config path does not exist: {config_path}"
        raise FileNotFoundError(msg)
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        msg = "Simulation config file must contain a JSON object"
        raise ValueError(msg)
    return SimulationConfig.from_dict(payload)


def save_config(config: SimulationConfig, path: str | Path) -> Path:
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return config_path


__all__ = [
    "GrowthParameters",
    "StabilityPolicy",
    "SimulationConfig",
    "MIN_SIMULATION_SPEED",
    "MAX_SIMULATION_SPEED",
    "UI_FIELD_ALIASES",
    "load_config",
    "save_config",
]
