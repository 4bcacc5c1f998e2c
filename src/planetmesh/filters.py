"""Elevation filters — layered octave noise reduced to one scalar.

An :class:`ElevationFilter` wraps a :class:`~noise.NoiseField` with the
octave stack described by a :class:`~settings.NoiseLayerConfig`.

Simple
    Fractal sum of raw noise octaves.  Values below ``min_value`` are
    flattened to zero ("sea level") before scaling by ``strength``.
Ridged
    Each octave contributes ``(1 - |n|)²`` weighted by the previous
    octave's signal, so fine detail concentrates on existing ridges.
"""

from __future__ import annotations

from typing import Sequence

from .noise import NoiseField
from .settings import FilterKind, NoiseLayerConfig

Point3 = Sequence[float]


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class ElevationFilter:
    """Evaluate one configured noise layer at a point on the unit sphere."""

    def __init__(self, config: NoiseLayerConfig, noise: NoiseField) -> None:
        self.config = config
        self.noise = noise

    @property
    def kind(self) -> FilterKind:
        return self.config.kind

    def evaluate(self, point: Point3) -> float:
        if self.config.kind is FilterKind.RIDGED:
            return self._evaluate_ridged(point)
        return self._evaluate_simple(point)

    def _evaluate_simple(self, point: Point3) -> float:
        p = self.config.params
        value = 0.0
        frequency = p.base_roughness
        amplitude = 1.0

        for _ in range(p.num_layers):
            scaled = (point[0] * frequency, point[1] * frequency, point[2] * frequency)
            value += self.noise.sample(scaled, p.center) * amplitude
            frequency *= p.roughness
            amplitude *= p.persistence

        return max(0.0, value - p.min_value) * p.strength

    def _evaluate_ridged(self, point: Point3) -> float:
        p = self.config.params
        weight_multiplier = self.config.weight_multiplier
        value = 0.0
        frequency = p.base_roughness
        amplitude = 1.0
        weight = 1.0

        for _ in range(p.num_layers):
            scaled = (point[0] * frequency, point[1] * frequency, point[2] * frequency)
            signal = 1.0 - abs(self.noise.sample(scaled, p.center))
            signal *= signal
            signal *= weight
            weight = _clamp01(signal * weight_multiplier)

            value += signal * amplitude
            frequency *= p.roughness
            amplitude *= p.persistence

        return (value - p.min_value) * p.strength

    def __repr__(self) -> str:
        return f"ElevationFilter({self.config.kind.value}, layers={self.config.params.num_layers})"


def build_filter(config: NoiseLayerConfig, noise: NoiseField) -> ElevationFilter:
    """Create the filter for *config*, sharing the given noise field."""
    return ElevationFilter(config, noise)
