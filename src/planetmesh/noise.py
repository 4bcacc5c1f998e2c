"""Coherent 3-D noise source.

:class:`NoiseField` is the leaf of the elevation stack: a stateless
evaluator of one seeded simplex-noise function at arbitrary 3-D points.
Sampling in 3-D on the unit sphere means there are no seam or polar
artefacts, and two cube faces that sample the same world point get the
same value.

The permutation tables are built once in the constructor and only read
afterwards, so a single field can be shared by every worker thread.
"""

from __future__ import annotations

from typing import Sequence

import opensimplex

Point3 = Sequence[float]


class NoiseField:
    """Seeded 3-D simplex noise.

    Parameters
    ----------
    seed : int
        Seed for the permutation table.  Equal seeds give identical
        fields.
    """

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed
        self._simplex = opensimplex.OpenSimplex(seed=seed)

    @property
    def seed(self) -> int:
        return self._seed

    def sample(self, point: Point3, offset: Point3 | None = None) -> float:
        """Noise value at *point* (plus optional *offset*), in roughly ``[-1, 1]``."""
        x, y, z = float(point[0]), float(point[1]), float(point[2])
        if offset is not None:
            x += offset[0]
            y += offset[1]
            z += offset[2]
        return float(self._simplex.noise3(x, y, z))

    def __repr__(self) -> str:
        return f"NoiseField(seed={self._seed})"
