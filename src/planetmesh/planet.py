"""Planet pipeline — six faces, one barrier, reconciled seams.

Usage
-----
>>> from planetmesh.planet import generate_planet
>>> from planetmesh.settings import EARTHLIKE
>>> planet = generate_planet(EARTHLIKE.with_overrides(resolution=16))
>>> planet.elevation_range.min <= planet.elevation_range.max
True

Stages
------
1. Validate settings (:class:`~errors.ConfigurationError` on failure).
2. Generate the six faces with a one-vertex overhang ring, each into its
   own :class:`~shape.MinMax`, optionally on a thread pool.
3. Join every face task, then merge the per-face accumulators.
4. Reconcile seams and trim the overhang (:mod:`seams`).
5. Biome pass (:mod:`biome`), if a lookup was supplied.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from .biome import LookupLike, apply_biome_uvs
from .errors import ConfigurationError
from .geometry import FACE_DIRECTIONS, FaceDirection
from .mesher import CubeFaceMesher
from .models import FaceMesh, PlanetMesh
from .seams import SeamReconciler
from .settings import PlanetSettings
from .shape import MinMax, ShapeGenerator

logger = logging.getLogger(__name__)

SEAM_BORDER = 1


class PlanetGenerator:
    """Build a :class:`~models.PlanetMesh` from :class:`~settings.PlanetSettings`.

    Parameters
    ----------
    settings : PlanetSettings
        Validated immediately; invalid settings raise
        :class:`~errors.ConfigurationError` before any work starts.
    biome_lookup : BiomeLookup or callable, optional
        Source of ``uv.u``.  Without one, ``uv.u`` stays 0.
    seam_tolerance : float
        Passed to :class:`~seams.SeamReconciler`.
    """

    def __init__(
        self,
        settings: PlanetSettings,
        biome_lookup: Optional[LookupLike] = None,
        *,
        seam_tolerance: float = 1e-6,
    ) -> None:
        settings.require_valid()
        self.settings = settings
        self.biome_lookup = biome_lookup
        self.shape_generator = ShapeGenerator(settings.shape)
        self.mesher = CubeFaceMesher(self.shape_generator, settings.normalize_factor)
        self.reconciler = SeamReconciler(seam_tolerance)

    def _generate_face(self, direction: FaceDirection) -> FaceMesh:
        return self.mesher.generate(
            direction,
            self.settings.resolution,
            border=SEAM_BORDER,
            min_max=MinMax(),
        )

    def generate_faces(self, workers: Optional[int] = None) -> Dict[FaceDirection, FaceMesh]:
        """Generate the six bordered faces; returns only once all are done.

        *workers* ``== 1`` runs serially in the calling thread; any other
        value (``None`` = executor default) uses a thread pool.

        Raises
        ------
        ConfigurationError
            If *workers* is given and smaller than 1.
        """
        if workers is not None and (not isinstance(workers, int) or workers < 1):
            raise ConfigurationError(f"workers must be an int >= 1, got {workers!r}")
        if workers == 1:
            return {d: self._generate_face(d) for d in FACE_DIRECTIONS}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="planetmesh-face") as pool:
            futures = {d: pool.submit(self._generate_face, d) for d in FACE_DIRECTIONS}
            return {d: future.result() for d, future in futures.items()}

    def generate(self, workers: Optional[int] = None) -> PlanetMesh:
        """Run the full pipeline and return the reconciled planet."""
        elapsed: Dict[str, float] = {}
        settings = self.settings
        logger.info(
            "Generating planet: resolution=%d, layers=%d, normalize_factor=%.2f",
            settings.resolution, len(settings.shape.layers), settings.normalize_factor,
        )

        self.shape_generator.reset()

        t0 = time.perf_counter()
        faces = self.generate_faces(workers)
        for face in faces.values():
            self.shape_generator.record(face.min_max)
        elapsed["faces"] = time.perf_counter() - t0

        t0 = time.perf_counter()
        faces = self.reconciler.reconcile(faces)
        elapsed["seams"] = time.perf_counter() - t0

        if self.biome_lookup is not None:
            t0 = time.perf_counter()
            for face in faces.values():
                apply_biome_uvs(face, self.biome_lookup)
            elapsed["biomes"] = time.perf_counter() - t0

        elevation_range = self.shape_generator.freeze()
        for stage, seconds in elapsed.items():
            logger.debug("Stage %s took %.3fs", stage, seconds)
        logger.info(
            "Planet generated: %d vertices, %d triangles, elevation [%.4f, %.4f]",
            sum(f.vertex_count for f in faces.values()),
            sum(f.triangle_count for f in faces.values()),
            elevation_range.min, elevation_range.max,
        )

        return PlanetMesh(
            faces={d: faces[d] for d in FACE_DIRECTIONS},
            elevation_range=elevation_range,
            settings=settings,
            elapsed=elapsed,
        )


def generate_planet(
    settings: PlanetSettings,
    biome_lookup: Optional[LookupLike] = None,
    *,
    workers: Optional[int] = None,
) -> PlanetMesh:
    """Convenience wrapper: ``PlanetGenerator(settings, biome_lookup).generate(workers)``."""
    return PlanetGenerator(settings, biome_lookup).generate(workers)
