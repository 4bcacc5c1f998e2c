"""Seam reconciliation — make six independent faces agree along their edges.

Faces are generated with a one-vertex overhang ring (``border=1``) and
then reconciled in three steps:

1. For every pair of adjacent faces, walk the shared edge in a fixed
   order and overwrite each duplicate vertex with the owning face's
   position, UV and sphere point.  Both faces already evaluated the same
   world point, so this only removes floating-point drift; a difference
   beyond the tolerance means the walk itself is wrong and raises
   :class:`~errors.SeamMismatchError`.
2. Recompute every shared vertex normal from the visible triangles of
   *all* faces that touch it (two along an edge, three at a cube corner).
3. Trim the overhang ring so each face is exactly
   ``resolution × resolution``.

Edge-walk ordering
------------------
The seam between faces with directions ``a`` and ``b`` runs along the
world axis ``e`` orthogonal to both.  Step ``t`` of the walk is the cube
point ``a + b + (-1 + 2t / (resolution - 1)) * e``, so ``t`` increases
along ``+e`` for both faces.  Each face maps that point to its own grid
index through its ``(axis_a, axis_b)`` basis.

Functions
---------
- :func:`adjacent_pairs` — the 12 adjacent face pairs
- :func:`edge_walk` — matching vertex indices along one seam
- :func:`seam_vertex_groups` — every set of coincident seam vertices
- :func:`trim_border` — drop the overhang ring and remap triangles
- :func:`check_seams` — report seam inconsistencies
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Hashable, List, Mapping, Tuple

import numpy as np

from .errors import SeamMismatchError
from .geometry import (
    FACE_DIRECTIONS,
    FaceDirection,
    accumulate_normals,
    face_axes,
    normalize_vectors,
)
from .models import FaceMesh

logger = logging.getLogger(__name__)

VertexKey = Tuple[FaceDirection, int]


# ═══════════════════════════════════════════════════════════════════
# Adjacency + edge walk
# ═══════════════════════════════════════════════════════════════════

def are_adjacent(a: FaceDirection, b: FaceDirection) -> bool:
    """Two faces share an edge when their directions are orthogonal."""
    return float(np.dot(a.vector, b.vector)) == 0.0


def adjacent_pairs() -> List[Tuple[FaceDirection, FaceDirection]]:
    """Every adjacent face pair once, in canonical face order."""
    pairs = []
    for i, a in enumerate(FACE_DIRECTIONS):
        for b in FACE_DIRECTIONS[i + 1:]:
            if are_adjacent(a, b):
                pairs.append((a, b))
    return pairs


def seam_axis(a: FaceDirection, b: FaceDirection) -> np.ndarray:
    """Positive world axis along which the seam between *a* and *b* runs."""
    return np.abs(np.cross(a.vector, b.vector))


def seam_cube_points(a: FaceDirection, b: FaceDirection, resolution: int) -> np.ndarray:
    """Cube points of the shared edge, ordered along :func:`seam_axis`."""
    if not are_adjacent(a, b):
        raise ValueError(f"Faces {a.value} and {b.value} do not share an edge")
    e = seam_axis(a, b)
    w = np.linspace(-1.0, 1.0, resolution)
    return np.asarray(a.vector) + np.asarray(b.vector) + w[:, None] * e


def face_grid_index(
    direction: FaceDirection,
    points: np.ndarray,
    resolution: int,
    border: int = 0,
) -> np.ndarray:
    """Vertex index of each cube point within the grid of *direction*'s face."""
    d, axis_a, axis_b = face_axes(direction)
    if not np.allclose(points @ d, 1.0):
        raise ValueError(f"Points do not lie on face {direction.value}")
    x = np.rint((points @ axis_a + 1.0) * 0.5 * (resolution - 1)).astype(np.int64)
    y = np.rint((points @ axis_b + 1.0) * 0.5 * (resolution - 1)).astype(np.int64)
    side = resolution + 2 * border
    return (y + border) * side + (x + border)


def edge_walk(
    a: FaceDirection,
    b: FaceDirection,
    resolution: int,
    border: int = 0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Matching vertex indices along the seam between faces *a* and *b*.

    Element ``t`` of both arrays refers to the same seam point.

    Raises
    ------
    ValueError
        If the faces are not adjacent.
    """
    points = seam_cube_points(a, b, resolution)
    return (
        face_grid_index(a, points, resolution, border),
        face_grid_index(b, points, resolution, border),
    )


def _canonical(parents: Dict[Hashable, Hashable], key: Hashable) -> Hashable:
    """Follow the parent chain to the group representative."""
    while parents[key] != key:
        key = parents[key]
    return key


def _order_key(key: VertexKey) -> Tuple[int, int]:
    return (key[0].order, key[1])


def seam_vertex_groups(resolution: int, border: int = 0) -> List[List[VertexKey]]:
    """Group every seam vertex with its duplicates on other faces.

    Edge vertices form pairs; cube corners form triples.  Each group is
    sorted in face order, so its first member is the owner.
    """
    parents: Dict[Hashable, Hashable] = {}
    for a, b in adjacent_pairs():
        ia, ib = edge_walk(a, b, resolution, border)
        for i, j in zip(ia.tolist(), ib.tolist()):
            ka, kb = (a, i), (b, j)
            parents.setdefault(ka, ka)
            parents.setdefault(kb, kb)
            ra = _canonical(parents, ka)
            rb = _canonical(parents, kb)
            if ra != rb:
                # Keep the earliest face as representative.
                if _order_key(rb) < _order_key(ra):
                    ra, rb = rb, ra
                parents[rb] = ra

    groups: Dict[Hashable, List[VertexKey]] = defaultdict(list)
    for key in parents:
        groups[_canonical(parents, key)].append(key)
    return sorted(
        (sorted(members, key=_order_key) for members in groups.values()),
        key=lambda members: _order_key(members[0]),
    )


# ═══════════════════════════════════════════════════════════════════
# Border handling
# ═══════════════════════════════════════════════════════════════════

def interior_mask(face: FaceMesh) -> np.ndarray:
    """Boolean mask of the visible (non-overhang) vertices."""
    side = face.side
    coords = np.arange(side)
    inside = (coords >= face.border) & (coords < face.border + face.resolution)
    return (inside[None, :] & inside[:, None]).ravel()


def interior_triangles(face: FaceMesh) -> np.ndarray:
    """The face's triangles whose three vertices are all visible."""
    if face.border == 0:
        return face.triangles
    keep = interior_mask(face)
    tri = face.triangles.reshape(-1, 3)
    return tri[keep[tri].all(axis=1)].ravel()


def trim_border(face: FaceMesh) -> FaceMesh:
    """Drop the overhang ring, leaving a ``resolution × resolution`` face.

    Triangles touching the ring are discarded; every retained index is
    shifted down by the number of discarded vertices that precede it.
    """
    if face.border == 0:
        return face
    keep = interior_mask(face)
    discarded = ~keep
    discarded_before = np.cumsum(discarded) - discarded

    tri = face.triangles.reshape(-1, 3)
    retained = tri[keep[tri].all(axis=1)]
    triangles = (retained - discarded_before[retained]).ravel().astype(np.int64)

    return FaceMesh(
        direction=face.direction,
        resolution=face.resolution,
        border=0,
        vertices=face.vertices[keep].copy(),
        normals=face.normals[keep].copy(),
        uvs=face.uvs[keep].copy(),
        triangles=triangles,
        sphere_points=face.sphere_points[keep].copy(),
        min_max=face.min_max,
    )


# ═══════════════════════════════════════════════════════════════════
# Reconciler
# ═══════════════════════════════════════════════════════════════════

def _common_layout(faces: Mapping[FaceDirection, FaceMesh]) -> Tuple[int, int]:
    missing = [d.value for d in FACE_DIRECTIONS if d not in faces]
    if missing:
        raise ValueError(f"Seam reconciliation needs all six faces; missing {', '.join(missing)}")
    layouts = {(face.resolution, face.border) for face in faces.values()}
    if len(layouts) != 1:
        raise ValueError(f"Faces disagree on (resolution, border): {sorted(layouts)}")
    return layouts.pop()


class SeamReconciler:
    """Enforce exact agreement of shared edge and corner vertices.

    Parameters
    ----------
    tolerance : float
        Largest position drift (relative to the planet's size) accepted
        between duplicate seam vertices before they are overwritten.
    trim : bool
        Whether :meth:`reconcile` also removes the overhang ring.
    """

    def __init__(self, tolerance: float = 1e-6, *, trim: bool = True) -> None:
        self.tolerance = tolerance
        self.trim = trim

    def reconcile(self, faces: Mapping[FaceDirection, FaceMesh]) -> Dict[FaceDirection, FaceMesh]:
        """Reconcile *faces* in place and return the (trimmed) result.

        Raises
        ------
        SeamMismatchError
            If duplicate seam vertices differ by more than the tolerance.
        """
        resolution, border = _common_layout(faces)
        groups = seam_vertex_groups(resolution, border)

        scale = max(1.0, max(float(np.abs(f.vertices).max()) for f in faces.values()))
        limit = self.tolerance * scale
        self._check_drift(faces, groups, limit)

        normal_sums = {
            direction: accumulate_normals(face.vertices, interior_triangles(face))
            for direction, face in faces.items()
        }

        owners = np.array([faces[m[0][0]].sphere_points[m[0][1]] for m in groups])
        totals = np.array([
            sum(normal_sums[d][i] for d, i in members) for members in groups
        ])
        shared_normals = normalize_vectors(totals, fallback=owners)

        for members, normal in zip(groups, shared_normals):
            owner_dir, owner_idx = members[0]
            owner = faces[owner_dir]
            position = owner.vertices[owner_idx].copy()
            uv = owner.uvs[owner_idx].copy()
            sphere_point = owner.sphere_points[owner_idx].copy()
            for direction, idx in members:
                face = faces[direction]
                face.vertices[idx] = position
                face.uvs[idx] = uv
                face.sphere_points[idx] = sphere_point
                face.normals[idx] = normal

        logger.debug(
            "Reconciled %d seam vertex groups (resolution=%d, border=%d)",
            len(groups), resolution, border,
        )

        if not self.trim:
            return dict(faces)
        return {direction: trim_border(face) for direction, face in faces.items()}

    @staticmethod
    def _check_drift(
        faces: Mapping[FaceDirection, FaceMesh],
        groups: List[List[VertexKey]],
        limit: float,
    ) -> None:
        problems: List[str] = []
        for members in groups:
            owner_dir, owner_idx = members[0]
            position = faces[owner_dir].vertices[owner_idx]
            for direction, idx in members[1:]:
                drift = float(np.linalg.norm(faces[direction].vertices[idx] - position))
                if drift > limit:
                    problems.append(
                        f"{owner_dir.value}[{owner_idx}] vs {direction.value}[{idx}]: "
                        f"drift {drift:.3g} > {limit:.3g}"
                    )
        if problems:
            raise SeamMismatchError(
                f"{len(problems)} seam vertex mismatch(es): " + "; ".join(problems[:5])
            )


# ═══════════════════════════════════════════════════════════════════
# Verification
# ═══════════════════════════════════════════════════════════════════

def check_seams(faces: Mapping[FaceDirection, FaceMesh], tolerance: float = 1e-5) -> List[str]:
    """Compare positions, normals and UVs along every seam.

    Returns a list of error messages (empty = every seam is consistent).
    """
    resolution, border = _common_layout(faces)
    errors: List[str] = []
    for a, b in adjacent_pairs():
        ia, ib = edge_walk(a, b, resolution, border)
        fa, fb = faces[a], faces[b]
        for label, attr in (("position", "vertices"), ("normal", "normals"), ("uv", "uvs")):
            diff = np.abs(getattr(fa, attr)[ia] - getattr(fb, attr)[ib]).max()
            if diff > tolerance:
                errors.append(f"Seam {a.value}/{b.value}: {label} differs by {diff:.3g}")
    return errors
