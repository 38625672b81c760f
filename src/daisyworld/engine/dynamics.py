from __future__ import annotations

from daisyworld.config import GrowthParameters, StabilityPolicy
from daisyworld.model.surface import SurfaceKind


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def growth_curve(
    temperature_k: float,
    optimal_temp_k: float,
    params: GrowthParameters,
) -> float:
    """Growth-rate multiplier for a local temperature.

    ``max_growth_rate * (1 - (|dT| / half_width) ** growth_exponent)`` where the
    half-width is ``min_growth_temp`` below the optimum and ``max_growth_temp``
    above it. Exactly ``max_growth_rate`` at the optimum and exactly 0 at or
    beyond either edge of the viable band.
    """
    deviation = temperature_k - optimal_temp_k
    half_width = params.min_growth_temp if deviation < 0 else params.max_growth_temp
    normalized = abs(deviation) / half_width
    if normalized >= 1.0:
        return 0.0
    return max(0.0, params.max_growth_rate * (1.0 - normalized**params.growth_exponent))


def preference_modifier(
    kind: SurfaceKind,
    planet_temperature_k: float,
    optimal_temp_k: float,
    params: GrowthParameters,
) -> float:
    """Multiplier from the planet temperature that breaks the white/black symmetry.

    White daisies are boosted up to 2x while the planet runs hotter than the
    optimum and penalised down to 0.5x once it is colder than the optimum minus
    the dead band. Black daisies get the mirror image.
    """
    window = params.preference_window
    band = params.preference_dead_band
    excess = planet_temperature_k - optimal_temp_k
    if kind is SurfaceKind.BLACK:
        excess = -excess

    if excess > 0:
        return 1.0 + min(window, excess) / window
    if excess < -band:
        return 1.0 - min(window, -band - excess) / (2.0 * window)
    return 1.0


def rescue_multiplier(coverage: float, policy: StabilityPolicy) -> float:
    if coverage >= policy.rescue_threshold:
        return 1.0
    return 1.0 + (policy.rescue_threshold - coverage) * policy.rescue_strength


def effective_growth_rate(
    kind: SurfaceKind,
    *,
    local_temperature_k: float,
    planet_temperature_k: float,
    coverage: float,
    optimal_temp_k: float,
    growth: GrowthParameters,
    stability: StabilityPolicy,
) -> float:
    rate = growth_curve(local_temperature_k, optimal_temp_k, growth)
    rate *= preference_modifier(kind, planet_temperature_k, optimal_temp_k, growth)
    return rate * rescue_multiplier(coverage, stability)


def next_coverage(
    coverage: float,
    *,
    growth_rate: float,
    bare_soil_coverage: float,
    death_rate: float,
    available_coverage: float,
    stability: StabilityPolicy,
) -> float:
    """Coverage after one step of logistic growth and clamped mortality.

    The change is limited to ``max_coverage_change`` either way, an existing
    population never drops below ``extinction_floor``, and the result never
    exceeds ``available_coverage`` (the surface not held by the other daisy).
    """
    growth = growth_rate * coverage * max(0.0, bare_soil_coverage)
    survival = max(stability.survival_floor, 1.0 - death_rate)
    deaths = (1.0 - survival) * coverage

    limit = stability.max_coverage_change
    updated = _clamp(coverage + growth - deaths, coverage - limit, coverage + limit)
    if coverage > 0 and updated < stability.extinction_floor:
        updated = stability.extinction_floor
    return _clamp(updated, 0.0, max(0.0, min(1.0, available_coverage)))


__all__ = [
    "growth_curve",
    "preference_modifier",
    "rescue_multiplier",
    "effective_growth_rate",
    "next_coverage",
]
