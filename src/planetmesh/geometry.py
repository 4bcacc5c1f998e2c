"""Cube/sphere geometry helpers used across the package.

Functions
---------
- :func:`face_axes` — right-handed ``(direction, axis_a, axis_b)`` basis
- :func:`grid_coordinates` — per-axis cube coordinates of a face grid
- :func:`cube_points` — world-space unit-cube points for a face grid
- :func:`naive_normalize` / :func:`tangential_normalize` — sphere maps
- :func:`project_to_sphere` — blend of the two sphere maps
- :func:`accumulate_normals` — area-weighted per-vertex normal sums
- :func:`normalize_vectors` — unit vectors with a fallback for zeros
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Tuple

import numpy as np

logger = logging.getLogger(__name__)

DEGENERATE_EPSILON = 1e-12


class FaceDirection(Enum):
    """The six outward cube face directions, in canonical face order."""

    POS_X = "+X"
    NEG_X = "-X"
    POS_Y = "+Y"
    NEG_Y = "-Y"
    POS_Z = "+Z"
    NEG_Z = "-Z"

    @property
    def vector(self) -> Tuple[float, float, float]:
        return _DIRECTION_VECTORS[self]

    @property
    def order(self) -> int:
        return _FACE_ORDER[self]

    @classmethod
    def from_vector(cls, vector) -> "FaceDirection":
        key = tuple(float(round(c)) for c in vector)
        for direction, vec in _DIRECTION_VECTORS.items():
            if vec == key:
                return direction
        raise ValueError(f"{vector!r} is not a cube face direction")


_DIRECTION_VECTORS: Dict[FaceDirection, Tuple[float, float, float]] = {
    FaceDirection.POS_X: (1.0, 0.0, 0.0),
    FaceDirection.NEG_X: (-1.0, 0.0, 0.0),
    FaceDirection.POS_Y: (0.0, 1.0, 0.0),
    FaceDirection.NEG_Y: (0.0, -1.0, 0.0),
    FaceDirection.POS_Z: (0.0, 0.0, 1.0),
    FaceDirection.NEG_Z: (0.0, 0.0, -1.0),
}

_FACE_ORDER: Dict[FaceDirection, int] = {d: i for i, d in enumerate(FaceDirection)}

FACE_DIRECTIONS: Tuple[FaceDirection, ...] = tuple(FaceDirection)


# ═══════════════════════════════════════════════════════════════════
# Face grids
# ═══════════════════════════════════════════════════════════════════

def face_axes(direction: FaceDirection) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(direction, axis_a, axis_b)`` as float arrays.

    ``axis_a`` is the direction with its components rotated
    ``(y, z, x)`` and ``axis_b = direction × axis_a``, so the three
    vectors are orthonormal and ``axis_a × axis_b == direction``.
    """
    d = np.array(direction.vector, dtype=float)
    axis_a = np.array([d[1], d[2], d[0]], dtype=float)
    axis_b = np.cross(d, axis_a)
    return d, axis_a, axis_b


def grid_coordinates(resolution: int, border: int = 0) -> np.ndarray:
    """Cube coordinate along one face axis for each grid column.

    Interior columns span ``[-1, 1]``; *border* extra columns on each
    side continue past the cube edge at the same spacing.
    """
    index = np.arange(resolution + 2 * border, dtype=float) - border
    return (index / (resolution - 1) - 0.5) * 2.0


def cube_points(direction: FaceDirection, resolution: int, border: int = 0) -> np.ndarray:
    """World-space unit-cube points for every grid vertex of a face.

    Points are ordered ``i = x + y * n`` with ``x`` along ``axis_a``,
    ``y`` along ``axis_b`` and ``n = resolution + 2 * border``.

    Border points beyond a cube edge are folded over the edge onto the
    neighbouring face, so they coincide with that face's own vertices.
    Border corner points (past two edges at once) collapse onto the face
    corner.
    """
    d, axis_a, axis_b = face_axes(direction)
    coords = grid_coordinates(resolution, border)
    u, v = np.meshgrid(coords, coords, indexing="xy")
    u = u.ravel()
    v = v.ravel()

    over_u = np.maximum(np.abs(u) - 1.0, 0.0)
    over_v = np.maximum(np.abs(v) - 1.0, 0.0)
    corner = (over_u > 0.0) & (over_v > 0.0)
    depth = np.where(corner, 1.0, 1.0 - over_u - over_v)
    u = np.clip(u, -1.0, 1.0)
    v = np.clip(v, -1.0, 1.0)

    return depth[:, None] * d + u[:, None] * axis_a + v[:, None] * axis_b


# ═══════════════════════════════════════════════════════════════════
# Sphere projection
# ═══════════════════════════════════════════════════════════════════

def naive_normalize(points: np.ndarray, fallback=(0.0, 1.0, 0.0)) -> np.ndarray:
    """Project points radially onto the unit sphere.

    Points with (near) zero length cannot be projected; they are
    replaced by *fallback* and a warning is logged.
    """
    points = np.asarray(points, dtype=float)
    lengths = np.linalg.norm(points, axis=-1)
    degenerate = lengths < DEGENERATE_EPSILON
    if np.any(degenerate):
        logger.warning(
            "%d point(s) too close to the origin to normalise; using fallback %s",
            int(np.count_nonzero(degenerate)), tuple(fallback),
        )
    safe = np.where(degenerate, 1.0, lengths)
    result = points / safe[..., None]
    result[degenerate] = np.asarray(fallback, dtype=float)
    return result


def tangential_normalize(points: np.ndarray) -> np.ndarray:
    """Cube-to-sphere map with more even vertex spacing than :func:`naive_normalize`.

    Each component ``c`` with the other two ``p, q`` becomes
    ``c * sqrt(1 - p²/2 - q²/2 + p²q²/3)``.
    """
    points = np.asarray(points, dtype=float)
    x = points[..., 0]
    y = points[..., 1]
    z = points[..., 2]
    x2, y2, z2 = x * x, y * y, z * z
    out = np.empty_like(points)
    out[..., 0] = x * np.sqrt(1.0 - y2 / 2.0 - z2 / 2.0 + y2 * z2 / 3.0)
    out[..., 1] = y * np.sqrt(1.0 - x2 / 2.0 - z2 / 2.0 + x2 * z2 / 3.0)
    out[..., 2] = z * np.sqrt(1.0 - x2 / 2.0 - y2 / 2.0 + x2 * y2 / 3.0)
    return out


def project_to_sphere(
    points: np.ndarray,
    normalize_factor: float = 0.0,
    fallback=(0.0, 1.0, 0.0),
) -> np.ndarray:
    """Linear blend of naive (0) and tangential (1) sphere projection."""
    naive = naive_normalize(points, fallback)
    if normalize_factor == 0.0:
        return naive
    tangential = tangential_normalize(points)
    if normalize_factor == 1.0:
        return tangential
    return naive + (tangential - naive) * normalize_factor


# ═══════════════════════════════════════════════════════════════════
# Normals
# ═══════════════════════════════════════════════════════════════════

def triangle_cross_products(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """``(b - a) × (c - a)`` for every triangle (length = 2 × area)."""
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    a = vertices[tri[:, 0]]
    b = vertices[tri[:, 1]]
    c = vertices[tri[:, 2]]
    return np.cross(b - a, c - a)


def accumulate_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Unnormalised, area-weighted normal sum for every vertex."""
    vertices = np.asarray(vertices, dtype=float)
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    sums = np.zeros_like(vertices)
    if len(tri) == 0:
        return sums
    crosses = triangle_cross_products(vertices, tri)
    for corner in range(3):
        np.add.at(sums, tri[:, corner], crosses)
    return sums


def normalize_vectors(vectors: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """Unit-length copies of *vectors*.

    Zero-length rows take the matching row of *fallback* (normalised)
    and are reported through the log.
    """
    vectors = np.asarray(vectors, dtype=float)
    lengths = np.linalg.norm(vectors, axis=-1)
    degenerate = lengths < DEGENERATE_EPSILON
    if np.any(degenerate):
        logger.warning(
            "%d vertex normal(s) have zero length; using radial direction",
            int(np.count_nonzero(degenerate)),
        )
    safe = np.where(degenerate, 1.0, lengths)
    result = vectors / safe[..., None]
    if np.any(degenerate):
        result[degenerate] = naive_normalize(np.asarray(fallback, dtype=float)[degenerate])
    return result
