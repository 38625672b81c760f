from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd

from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine
from daisyworld.model.planet import SOLAR_CONSTANT_W_PER_M2, radiative_equilibrium_temperature

REQUIRED_SWEEP_COLUMNS = (
    "solar_luminosity",
    "temperature_k",
    "unregulated_temperature_k",
)


def unregulated_temperature(
    solar_luminosity: float,
    albedo: float = 0.5,
    solar_constant: float = SOLAR_CONSTANT_W_PER_M2,
) -> float:
    """Daisy-free, fixed-albedo Stefan-Boltzmann temperature with no stability clamps."""
    return radiative_equilibrium_temperature(solar_luminosity, albedo, solar_constant)


def luminosity_sweep(
    luminosities: Iterable[float],
    *,
    settle_steps: int = 100,
    config: SimulationConfig | None = None,
) -> pd.DataFrame:
    """Step one engine through a luminosity ramp, settling at each level.

    Each row holds the regulated state after ``settle_steps`` steps at that
    luminosity next to the unregulated bare-planet temperature.
    """
    if settle_steps <= 0:
        msg = "settle_steps must be positive"
        raise ValueError(msg)
    levels = [float(value) for value in luminosities]
    if not levels:
        msg = "luminosities must not be empty"
        raise ValueError(msg)

    engine = DaisyworldEngine(config)
    rows: list[dict[str, float]] = []
    for luminosity in levels:
        engine.solar_luminosity = luminosity
        for _ in range(settle_steps):
            engine.step()
        rows.append(
            {
                "solar_luminosity": engine.solar_luminosity,
                "time": float(engine.time),
                "temperature_k": engine.planet_temperature,
                "unregulated_temperature_k": unregulated_temperature(
                    engine.solar_luminosity, engine.bare_soil_albedo
                ),
                "white_coverage": engine.white_coverage,
                "black_coverage": engine.black_coverage,
                "bare_soil_coverage": engine.bare_soil_coverage,
                "albedo": engine.planet_albedo,
            }
        )
    return pd.DataFrame(rows)


def regulation_summary(sweep: pd.DataFrame) -> dict[str, float]:
    missing = [column for column in REQUIRED_SWEEP_COLUMNS if column not in sweep.columns]
    if missing:
        msg = f"Sweep dataframe missing required columns: {missing}"
        raise ValueError(msg)
    if sweep.empty:
        msg = "Sweep dataframe is empty"
        raise ValueError(msg)

    regulated = sweep["temperature_k"].to_numpy(dtype=float)
    unregulated = sweep["unregulated_temperature_k"].to_numpy(dtype=float)
    regulated_rise = float(regulated[-1] - regulated[0])
    unregulated_rise = float(unregulated[-1] - unregulated[0])
    ratio = float("nan")
    if abs(unregulated_rise) > 1e-12:
        ratio = regulated_rise / unregulated_rise

    return {
        "regulated_rise_k": regulated_rise,
        "unregulated_rise_k": unregulated_rise,
        "regulation_ratio": ratio,
        "regulated_span_k": float(np.ptp(regulated)),
        "unregulated_span_k": float(np.ptp(unregulated)),
        "mean_offset_k": float(np.mean(regulated - unregulated)),
        "n_levels": float(len(sweep)),
    }


__all__ = ["unregulated_temperature", "luminosity_sweep", "regulation_summary"]
