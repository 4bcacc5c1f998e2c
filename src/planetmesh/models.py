"""Plain mesh records — no ties to any rendering engine's mesh type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import numpy as np

from .geometry import FACE_DIRECTIONS, FaceDirection
from .settings import PlanetSettings
from .shape import ElevationRange, MinMax


@dataclass
class FaceMesh:
    """One cube face of the planet.

    Attributes
    ----------
    direction : FaceDirection
        Which cube face this mesh covers.
    resolution : int
        Visible vertices per side.
    border : int
        Overhang rings around the visible grid (0 once trimmed).
    vertices : ndarray, shape (N, 3)
        Displaced world-space positions.
    normals : ndarray, shape (N, 3)
        Unit vertex normals.
    uvs : ndarray, shape (N, 2)
        ``u`` = biome percent, ``v`` = unscaled elevation.
    triangles : ndarray, shape (M,)
        Flat vertex index list, three per triangle, counter-clockwise
        seen from outside.
    sphere_points : ndarray, shape (N, 3)
        Un-displaced sphere point of every vertex.
    min_max : MinMax
        Unscaled elevation range of every point sampled for this face.
    """

    direction: FaceDirection
    resolution: int
    border: int
    vertices: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    triangles: np.ndarray
    sphere_points: np.ndarray
    min_max: MinMax = field(default_factory=MinMax)

    @property
    def side(self) -> int:
        """Grid side length including the border."""
        return self.resolution + 2 * self.border

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    def index(self, x: int, y: int) -> int:
        """Vertex index of visible grid coordinate ``(x, y)``."""
        return (y + self.border) * self.side + (x + self.border)

    def elevations(self) -> np.ndarray:
        return self.uvs[:, 1]

    def validate(self) -> List[str]:
        errors: List[str] = []
        name = self.direction.value
        n = self.side * self.side
        for label, array, width in (
            ("vertices", self.vertices, 3),
            ("normals", self.normals, 3),
            ("uvs", self.uvs, 2),
            ("sphere_points", self.sphere_points, 3),
        ):
            if array.shape != (n, width):
                errors.append(f"Face {name} {label} has shape {array.shape}, expected {(n, width)}")
            elif not np.all(np.isfinite(array)):
                errors.append(f"Face {name} {label} contains non-finite values")
        if len(self.triangles) % 3:
            errors.append(f"Face {name} triangle list length {len(self.triangles)} is not a multiple of 3")
        if len(self.triangles) and (self.triangles.min() < 0 or self.triangles.max() >= n):
            errors.append(f"Face {name} triangle indices out of range")
        if self.normals.shape == (n, 3):
            lengths = np.linalg.norm(self.normals, axis=1)
            if not np.allclose(lengths, 1.0, atol=1e-6):
                errors.append(f"Face {name} has non-unit normals")
        return errors


@dataclass
class PlanetMesh:
    """The six reconciled faces plus the frozen elevation range.

    *elapsed* maps each generation stage to its wall-clock seconds.
    """

    faces: Dict[FaceDirection, FaceMesh]
    elevation_range: ElevationRange
    settings: Optional[PlanetSettings] = None
    elapsed: Dict[str, float] = field(default_factory=dict)

    def face(self, direction: FaceDirection) -> FaceMesh:
        return self.faces[direction]

    def __iter__(self) -> Iterator[FaceMesh]:
        for direction in FACE_DIRECTIONS:
            if direction in self.faces:
                yield self.faces[direction]

    def __len__(self) -> int:
        return len(self.faces)

    @property
    def vertex_count(self) -> int:
        return sum(face.vertex_count for face in self.faces.values())

    @property
    def triangle_count(self) -> int:
        return sum(face.triangle_count for face in self.faces.values())

    def validate(self, tolerance: float = 1e-5) -> List[str]:
        """Structural checks on every face plus the seam invariant."""
        from .seams import check_seams

        errors: List[str] = []
        missing = [d.value for d in FACE_DIRECTIONS if d not in self.faces]
        if missing:
            errors.append(f"Missing faces: {', '.join(missing)}")
        for face in self:
            errors.extend(face.validate())
        if not missing:
            errors.extend(check_seams(self.faces, tolerance=tolerance))
        rng = self.elevation_range
        if not (np.isfinite(rng.min) and np.isfinite(rng.max)) or rng.min > rng.max:
            errors.append(f"Elevation range ({rng.min}, {rng.max}) is not a valid finite range")
        return errors
