"""Daisyworld planetary self-regulation simulation."""

from daisyworld.analysis.regulation import (
    luminosity_sweep,
    regulation_summary,
    unregulated_temperature,
)
from daisyworld.config import (
    GrowthParameters,
    SimulationConfig,
    StabilityPolicy,
    load_config,
    save_config,
)
from daisyworld.engine.model import DaisyworldEngine, StepDelta, StepEvent
from daisyworld.engine.scheduler import Scheduler, asyncio_schedule
from daisyworld.logging_config import setup_logging
from daisyworld.model.planet import Planet
from daisyworld.model.surface import Surface, SurfaceKind
from daisyworld.presets import (
    PRESETS,
    LuminosityRamp,
    Preset,
    advance_with_ramp,
    apply_preset,
    get_preset,
)
from daisyworld.twin.simulator import TimeSeriesRecorder, build_visual_frame, run_simulation

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SimulationConfig",
    "GrowthParameters",
    "StabilityPolicy",
    "load_config",
    "save_config",
    "Surface",
    "SurfaceKind",
    "Planet",
    "DaisyworldEngine",
    "StepEvent",
    "StepDelta",
    "Scheduler",
    "asyncio_schedule",
    "TimeSeriesRecorder",
    "run_simulation",
    "build_visual_frame",
    "PRESETS",
    "Preset",
    "LuminosityRamp",
    "get_preset",
    "apply_preset",
    "advance_with_ramp",
    "unregulated_temperature",
    "luminosity_sweep",
    "regulation_summary",
    "setup_logging",
]
