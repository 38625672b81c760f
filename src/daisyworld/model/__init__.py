from daisyworld.model.planet import (
    LOCAL_HEATING_Q,
    SOLAR_CONSTANT_W_PER_M2,
    STEFAN_BOLTZMANN,
    Planet,
    radiative_equilibrium_temperature,
)
from daisyworld.model.surface import Surface, SurfaceKind

__all__ = [
    "Planet",
    "Surface",
    "SurfaceKind",
    "STEFAN_BOLTZMANN",
    "SOLAR_CONSTANT_W_PER_M2",
    "LOCAL_HEATING_Q",
    "radiative_equilibrium_temperature",
]
