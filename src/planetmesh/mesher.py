"""Cube face mesher — grid → cube → sphere → displaced, triangulated face.

:class:`CubeFaceMesher` builds one :class:`~models.FaceMesh` per call.
Each call is a pure function of the shape generator, the face direction
and the resolution; elevation statistics go into a
:class:`~shape.MinMax` accumulator that belongs to the call, so the six
faces can be generated concurrently.

Grid layout
-----------
Vertex ``i = x + y * n`` sits at ``direction + u * axis_a + v * axis_b``
on the unit cube, with ``u`` and ``v`` running from -1 to 1.  With
``border=1`` the grid gains one extra ring on every side; ring points
are folded onto the neighbouring faces (see :func:`geometry.cube_points`)
so edge vertices see real neighbour triangles when normals are summed.

Every cell becomes two triangles ``(i, i+n+1, i+n)`` and
``(i, i+1, i+n+1)``.  Because ``axis_a × axis_b == direction`` these are
counter-clockwise when viewed from outside the planet.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .geometry import (
    FaceDirection,
    accumulate_normals,
    cube_points,
    normalize_vectors,
    project_to_sphere,
)
from .models import FaceMesh
from .shape import MinMax, ShapeGenerator

logger = logging.getLogger(__name__)


def grid_triangles(side: int) -> np.ndarray:
    """Flat triangle index list for a ``side × side`` vertex grid."""
    if side < 2:
        return np.zeros(0, dtype=np.int64)
    cells = np.arange(side - 1)
    x, y = np.meshgrid(cells, cells, indexing="xy")
    i = (x + y * side).ravel()
    tris = np.stack(
        [i, i + side + 1, i + side, i, i + 1, i + side + 1],
        axis=1,
    )
    return tris.ravel().astype(np.int64)


def ring_corner_indices(side: int) -> np.ndarray:
    """Vertex indices of the four corners of a ``side × side`` grid."""
    last = side - 1
    return np.array([0, last, last * side, last * side + last], dtype=np.int64)


class CubeFaceMesher:
    """Generate displaced sphere-face meshes.

    Parameters
    ----------
    shape_generator : ShapeGenerator
        Source of elevations.
    normalize_factor : float
        Blend between naive (0) and tangential (1) sphere projection.
    """

    def __init__(self, shape_generator: ShapeGenerator, normalize_factor: float = 0.0) -> None:
        if not 0.0 <= normalize_factor <= 1.0:
            raise ConfigurationError(
                f"normalize_factor must be in [0, 1], got {normalize_factor}"
            )
        self.shape_generator = shape_generator
        self.normalize_factor = normalize_factor

    def sphere_points(self, direction: FaceDirection, resolution: int, border: int = 0) -> np.ndarray:
        """Un-displaced sphere point for every grid vertex of a face."""
        cube = cube_points(direction, resolution, border)
        return project_to_sphere(cube, self.normalize_factor, fallback=direction.vector)

    def generate(
        self,
        direction: FaceDirection,
        resolution: int,
        *,
        border: int = 0,
        min_max: Optional[MinMax] = None,
    ) -> FaceMesh:
        """Build the mesh of one cube face.

        Parameters
        ----------
        direction : FaceDirection
            Which face to build.
        resolution : int
            Visible vertices per side (≥ 2).
        border : int
            Overhang rings to add (0 or 1).
        min_max : MinMax, optional
            Accumulator for the sampled elevations.  When omitted a
            local one is used and merged into the shape generator at the
            end; when given, merging is left to the caller.

        Raises
        ------
        ConfigurationError
            If *resolution* < 2 or *border* is not 0 or 1.
        """
        if not isinstance(resolution, int) or resolution < 2:
            raise ConfigurationError(f"resolution must be an int >= 2, got {resolution!r}")
        if border not in (0, 1):
            raise ConfigurationError(f"border must be 0 or 1, got {border!r}")

        owns_accumulator = min_max is None
        if min_max is None:
            min_max = MinMax()

        side = resolution + 2 * border
        sphere = self.sphere_points(direction, resolution, border)

        generator = self.shape_generator
        unscaled = np.empty(len(sphere))
        radii = np.empty(len(sphere))
        for k, point in enumerate(sphere.tolist()):
            elevation = generator.unscaled_elevation(point, min_max)
            unscaled[k] = elevation
            radii[k] = generator.scaled_elevation(elevation)

        vertices = sphere * radii[:, None]
        triangles = grid_triangles(side)
        normal_sums = accumulate_normals(vertices, triangles)
        if border:
            # Ring corners collapse onto the face corner, so their only
            # triangles have zero area.  They are trimmed later.
            corners = ring_corner_indices(side)
            normal_sums[corners] = sphere[corners]
        normals = normalize_vectors(normal_sums, fallback=sphere)

        uvs = np.zeros((len(sphere), 2))
        uvs[:, 1] = unscaled

        if owns_accumulator:
            generator.record(min_max)

        logger.debug(
            "Generated face %s: %d vertices, %d triangles (border=%d)",
            direction.value, len(vertices), len(triangles) // 3, border,
        )
        return FaceMesh(
            direction=direction,
            resolution=resolution,
            border=border,
            vertices=vertices,
            normals=normals,
            uvs=uvs,
            triangles=triangles,
            sphere_points=sphere,
            min_max=min_max,
        )
