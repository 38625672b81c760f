from __future__ import annotations

import logging

from daisyworld.config import StabilityPolicy

logger = logging.getLogger(__name__)

STEFAN_BOLTZMANN = 5.67e-8
# Scaled so a bare planet (albedo 0.5) at luminosity 1.0 sits near 285 K.
SOLAR_CONSTANT_W_PER_M2 = 3000.0
LOCAL_HEATING_Q = 20.0


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def radiative_equilibrium_temperature(
    solar_luminosity: float,
    albedo: float,
    solar_constant: float = SOLAR_CONSTANT_W_PER_M2,
) -> float:
    """Unclamped Stefan-Boltzmann temperature (K) for a luminosity and albedo."""
    absorbed = solar_constant * max(0.0, solar_luminosity) * (1.0 - _clamp(albedo, 0.0, 1.0))
    return (absorbed / 4.0 / STEFAN_BOLTZMANN) ** 0.25


class Planet:
    """Global planet state: temperature, luminosity and blended albedo."""

    def __init__(
        self,
        bare_soil_albedo: float = 0.5,
        initial_temp: float = 295.0,
        *,
        stability: StabilityPolicy | None = None,
        solar_constant: float = SOLAR_CONSTANT_W_PER_M2,
        local_heating_q: float = LOCAL_HEATING_Q,
    ) -> None:
        self._stability = stability or StabilityPolicy()
        self._bare_soil_albedo = _clamp(bare_soil_albedo, 0.0, 1.0)
        self._temperature = self._stability.clamp_temperature(initial_temp)
        self._solar_luminosity = 1.0
        self._albedo = self._bare_soil_albedo
        self.solar_constant = solar_constant
        self.local_heating_q = local_heating_q

    @property
    def bare_soil_albedo(self) -> float:
        return self._bare_soil_albedo

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def solar_luminosity(self) -> float:
        return self._solar_luminosity

    @property
    def albedo(self) -> float:
        return self._albedo

    def set_temperature(self, temperature: float) -> None:
        self._temperature = self._stability.clamp_temperature(temperature)

    def set_solar_luminosity(self, luminosity: float) -> None:
        self._solar_luminosity = max(0.0, luminosity)

    def set_albedo(self, albedo: float) -> None:
        self._albedo = _clamp(albedo, 0.0, 1.0)

    def calculate_temperature(self) -> float:
        """Next planet temperature from radiative balance, clamped and damped.

        Pure with respect to (albedo, solar_luminosity, temperature): the
        planet is not modified.
        """
        policy = self._stability
        raw = radiative_equilibrium_temperature(
            self._solar_luminosity, self._albedo, self.solar_constant
        )
        target = policy.clamp_temperature(raw)
        if target != raw:
            logger.warning(
                "Radiative temperature %.2fK outside [%.0fK, %.0fK]; clamped to %.2fK",
                raw,
                policy.min_temperature,
                policy.max_temperature,
                target,
            )

        displacement = target - self._temperature
        if abs(displacement) > policy.max_temperature_jump:
            step = policy.damped_temperature_step
            return self._temperature + (step if displacement > 0 else -step)
        return target

    def calculate_local_temperature(self, surface_albedo: float) -> float:
        # Darker-than-average surfaces run warmer than the planet mean.
        return self._temperature + self.local_heating_q * (self._albedo - surface_albedo)


__all__ = [
    "Planet",
    "STEFAN_BOLTZMANN",
    "SOLAR_CONSTANT_W_PER_M2",
    "LOCAL_HEATING_Q",
    "radiative_equilibrium_temperature",
]
