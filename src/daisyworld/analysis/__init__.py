from daisyworld.analysis.regulation import (
    luminosity_sweep,
    regulation_summary,
    unregulated_temperature,
)

__all__ = [
    "unregulated_temperature",
    "luminosity_sweep",
    "regulation_summary",
]
