from daisyworld.engine.dynamics import (
    effective_growth_rate,
    growth_curve,
    next_coverage,
    preference_modifier,
    rescue_multiplier,
)
from daisyworld.engine.model import DaisyworldEngine, StepDelta, StepEvent
from daisyworld.engine.scheduler import Scheduler, asyncio_schedule

__all__ = [
    "DaisyworldEngine",
    "StepEvent",
    "StepDelta",
    "Scheduler",
    "asyncio_schedule",
    "growth_curve",
    "preference_modifier",
    "rescue_multiplier",
    "effective_growth_rate",
    "next_coverage",
]
