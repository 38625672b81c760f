from __future__ import annotations

from enum import Enum


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class SurfaceKind(str, Enum):
    WHITE = "white"
    BLACK = "black"


class Surface:
    """One daisy population: fixed albedo, mutable coverage and local temperature."""

    def __init__(self, kind: SurfaceKind, albedo: float, coverage: float = 0.0) -> None:
        self._kind = SurfaceKind(kind)
        self._albedo = _clamp01(albedo)
        self._coverage = _clamp01(coverage)
        self._local_temperature = 0.0

    @property
    def kind(self) -> SurfaceKind:
        return self._kind

    @property
    def albedo(self) -> float:
        return self._albedo

    @property
    def coverage(self) -> float:
        return self._coverage

    @property
    def local_temperature(self) -> float:
        return self._local_temperature

    def set_coverage(self, coverage: float) -> None:
        self._coverage = _clamp01(coverage)

    def set_local_temperature(self, temperature: float) -> None:
        self._local_temperature = temperature

    def __repr__(self) -> str:
        return (
            f"Surface(kind={self._kind.value!r}, albedo={self._albedo:.3f}, "
            f"coverage={self._coverage:.4f}, local_temperature={self._local_temperature:.2f})"
        )


__all__ = ["Surface", "SurfaceKind"]
