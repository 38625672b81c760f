from __future__ import annotations

from collections import deque
from collections.abc import Callable
from pathlib import Path

import pandas as pd

from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine, StepEvent

KELVIN_OFFSET = 273.15
SURFACE_COLORS = {
    "bare_soil": "#8B4513",
    "white": "#E0E0E0",
    "black": "#202020",
}
FRAME_COLUMNS = (
    "time",
    "temperature_k",
    "temperature_c",
    "white_coverage",
    "black_coverage",
    "bare_soil_coverage",
    "albedo",
    "solar_luminosity",
    "white_local_temp_k",
    "black_local_temp_k",
)


def _coerce_float(value: object, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _event_row(event: StepEvent) -> dict[str, float]:
    return {
        "time": float(event.time),
        "temperature_k": event.temperature,
        "temperature_c": event.temperature - KELVIN_OFFSET,
        "white_coverage": event.white_coverage,
        "black_coverage": event.black_coverage,
        "bare_soil_coverage": event.bare_soil_coverage,
        "albedo": event.albedo,
        "solar_luminosity": event.solar_luminosity,
        "white_local_temp_k": event.white_local_temp,
        "black_local_temp_k": event.black_local_temp,
    }


class TimeSeriesRecorder:
    """Step-event sink that accumulates the time series charts and exports read.

    With ``max_points`` set only the most recent points are kept.
    """

    def __init__(self, max_points: int | None = None) -> None:
        if max_points is not None and max_points <= 0:
            msg = "max_points must be positive when provided"
            raise ValueError(msg)
        self._rows: deque[dict[str, float]] = deque(maxlen=max_points)

    def __call__(self, event: StepEvent) -> None:
        self._rows.append(_event_row(event))

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def max_points(self) -> int | None:
        return self._rows.maxlen

    def attach(
        self,
        engine: DaisyworldEngine,
        *,
        include_current: bool = False,
    ) -> Callable[[], None]:
        if include_current:
            self(engine.snapshot())
        return engine.on_step(self)

    def clear(self) -> None:
        self._rows.clear()

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self._rows), columns=list(FRAME_COLUMNS))

    def to_csv(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.to_frame().to_csv(output_path, index=False)
        return output_path


def run_simulation(
    *,
    steps: int,
    config: SimulationConfig | None = None,
    luminosity_schedule: Callable[[int], float] | None = None,
    engine: DaisyworldEngine | None = None,
) -> pd.DataFrame:
    """Step an engine headlessly and return the initial state plus one row per step.

    ``luminosity_schedule`` maps the current time to the solar luminosity applied
    before that step is taken.
    """
    if steps <= 0:
        msg = "steps must be positive"
        raise ValueError(msg)
    if engine is not None and config is not None:
        msg = "pass either an engine or a config, not both"
        raise ValueError(msg)

    sim = engine if engine is not None else DaisyworldEngine(config)
    recorder = TimeSeriesRecorder()
    unsubscribe = recorder.attach(sim, include_current=True)
    try:
        for _ in range(steps):
            if luminosity_schedule is not None:
                sim.solar_luminosity = luminosity_schedule(sim.time)
            sim.step()
    finally:
        unsubscribe()
    return recorder.to_frame()


def build_visual_frame(row: pd.Series | dict[str, object]) -> dict[str, object]:
    """Map one time-series row into a renderer-ready frame payload."""
    getter = row.get  # type: ignore[union-attr]
    white = _clamp01(_coerce_float(getter("white_coverage", 0.0), 0.0))
    black = _clamp01(_coerce_float(getter("black_coverage", 0.0), 0.0))
    black = min(black, 1.0 - white)
    bare = max(0.0, 1.0 - white - black)

    temperature_k = _coerce_float(getter("temperature_k", getter("temperature", 0.0)), 0.0)
    luminosity = max(0.0, _coerce_float(getter("solar_luminosity", 1.0), 1.0))

    return {
        "time": _coerce_float(getter("time", 0.0), 0.0),
        "segments": [
            {"surface": "bare_soil", "portion": bare, "color": SURFACE_COLORS["bare_soil"]},
            {"surface": "white", "portion": white, "color": SURFACE_COLORS["white"]},
            {"surface": "black", "portion": black, "color": SURFACE_COLORS["black"]},
        ],
        "temperature_k": temperature_k,
        "temperature_c": temperature_k - KELVIN_OFFSET,
        "solar_luminosity": luminosity,
        "albedo": _clamp01(_coerce_float(getter("albedo", 0.0), 0.0)),
        "temperature_label": f"Temperature: {temperature_k:.1f}K",
        "luminosity_label": f"Solar Luminosity: {luminosity:.2f}",
    }


__all__ = [
    "TimeSeriesRecorder",
    "run_simulation",
    "build_visual_frame",
    "FRAME_COLUMNS",
    "SURFACE_COLORS",
]
