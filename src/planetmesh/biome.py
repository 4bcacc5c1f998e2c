"""Biome pass — fill ``uv.u`` from an external biome lookup.

The core never decides biomes itself; it asks a :class:`BiomeLookup`
for a percentage at each vertex's un-displaced sphere point (biomes
depend on position, not on final radius) and stores the answer in the
vertex UV.  Plain callables ``point -> float`` are accepted too.

:class:`LatitudeBiomeLookup` is a ready-made lookup that bands biomes by
latitude, optionally perturbed by a noise layer, and blends smoothly
between neighbouring bands.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np

from .filters import ElevationFilter, build_filter
from .models import FaceMesh
from .noise import NoiseField
from .settings import NoiseLayerConfig

Point3 = Sequence[float]


@runtime_checkable
class BiomeLookup(Protocol):
    """Anything that maps a unit-sphere point to a biome percent in ``[0, 1]``."""

    def biome_percent(self, point: Point3) -> float:
        ...


LookupLike = Union[BiomeLookup, Callable[[Point3], float]]


def _as_callable(lookup: LookupLike) -> Callable[[Point3], float]:
    if isinstance(lookup, BiomeLookup):
        return lookup.biome_percent
    if callable(lookup):
        return lookup
    raise TypeError(f"{lookup!r} is neither a BiomeLookup nor a callable")


def apply_biome_uvs(face: FaceMesh, lookup: LookupLike) -> FaceMesh:
    """Write ``uv.u`` for every vertex of *face* in place.

    Results are clamped to ``[0, 1]``.  Returns *face* for chaining.
    """
    fn = _as_callable(lookup)
    values = np.fromiter(
        (fn(point) for point in face.sphere_points.tolist()),
        dtype=float,
        count=len(face.sphere_points),
    )
    face.uvs[:, 0] = np.clip(values, 0.0, 1.0)
    return face


def _inverse_lerp(a: float, b: float, value: float) -> float:
    if a == b:
        return 0.0
    return max(0.0, min(1.0, (value - a) / (b - a)))


class LatitudeBiomeLookup:
    """Latitude-banded biome lookup.

    Parameters
    ----------
    start_heights : sequence of float
        Height percent (0 = south pole, 1 = north pole) at which each
        biome starts, in ascending order.
    blend_amount : float
        Width of the blend zone between neighbouring biomes.
    noise_layer : NoiseLayerConfig, optional
        Noise used to wobble the band boundaries.
    noise_offset : float
        Subtracted from the noise value before applying it.
    noise_strength : float
        Multiplier for the noise wobble.
    seed : int
        Seed of the wobble noise.
    """

    def __init__(
        self,
        start_heights: Sequence[float] = (0.0,),
        *,
        blend_amount: float = 0.1,
        noise_layer: Optional[NoiseLayerConfig] = None,
        noise_offset: float = 0.0,
        noise_strength: float = 0.0,
        seed: int = 0,
    ) -> None:
        if not start_heights:
            raise ValueError("at least one biome start height is required")
        self.start_heights: Tuple[float, ...] = tuple(start_heights)
        self.blend_amount = blend_amount
        self.noise_offset = noise_offset
        self.noise_strength = noise_strength
        self._filter: Optional[ElevationFilter] = None
        if noise_layer is not None:
            self._filter = build_filter(noise_layer, NoiseField(seed))

    def biome_percent(self, point: Point3) -> float:
        height_percent = (point[1] + 1.0) / 2.0
        if self._filter is not None:
            wobble = self._filter.evaluate(point) - self.noise_offset
            height_percent += wobble * self.noise_strength

        blend_range = self.blend_amount / 2.0 + 0.001
        biome_index = 0.0
        for i, start in enumerate(self.start_heights):
            weight = _inverse_lerp(-blend_range, blend_range, height_percent - start)
            biome_index *= 1.0 - weight
            biome_index += i * weight

        return biome_index / max(1, len(self.start_heights) - 1)

    __call__ = biome_percent
