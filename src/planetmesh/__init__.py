"""planetmesh — procedural cube-sphere planet meshes.

Public API is organised into layers:

- **Settings** — noise layers, shape and planet configuration, presets
- **Elevation** — noise field, elevation filters, shape generator
- **Meshing** — cube face mesher, seam reconciliation, biome pass
- **Pipeline** — six-face planet generation
"""

# ── Settings ────────────────────────────────────────────────────────
from .errors import ConfigurationError, SeamMismatchError
from .settings import (
    FilterKind,
    NoiseParams,
    NoiseLayerConfig,
    ShapeConfig,
    PlanetSettings,
    EARTHLIKE,
    RIDGED_WORLD,
    SMOOTH_MOON,
    PRESETS,
)
from .io import load_settings, save_settings, settings_from_dict, SETTINGS_SCHEMA

# ── Elevation ───────────────────────────────────────────────────────
from .noise import NoiseField
from .filters import ElevationFilter, build_filter
from .shape import ElevationRange, MinMax, ShapeGenerator

# ── Meshing ─────────────────────────────────────────────────────────
from .geometry import (
    FaceDirection,
    FACE_DIRECTIONS,
    face_axes,
    naive_normalize,
    tangential_normalize,
    project_to_sphere,
)
from .models import FaceMesh, PlanetMesh
from .mesher import CubeFaceMesher, grid_triangles
from .seams import (
    SeamReconciler,
    adjacent_pairs,
    edge_walk,
    trim_border,
    check_seams,
)
from .biome import BiomeLookup, LatitudeBiomeLookup, apply_biome_uvs

# ── Pipeline ────────────────────────────────────────────────────────
from .planet import PlanetGenerator, generate_planet

__all__ = [
    # Settings
    "ConfigurationError",
    "SeamMismatchError",
    "FilterKind",
    "NoiseParams",
    "NoiseLayerConfig",
    "ShapeConfig",
    "PlanetSettings",
    "EARTHLIKE",
    "RIDGED_WORLD",
    "SMOOTH_MOON",
    "PRESETS",
    "load_settings",
    "save_settings",
    "settings_from_dict",
    "SETTINGS_SCHEMA",
    # Elevation
    "NoiseField",
    "ElevationFilter",
    "build_filter",
    "ElevationRange",
    "MinMax",
    "ShapeGenerator",
    # Meshing
    "FaceDirection",
    "FACE_DIRECTIONS",
    "face_axes",
    "naive_normalize",
    "tangential_normalize",
    "project_to_sphere",
    "FaceMesh",
    "PlanetMesh",
    "CubeFaceMesher",
    "grid_triangles",
    "SeamReconciler",
    "adjacent_pairs",
    "edge_walk",
    "trim_border",
    "check_seams",
    "BiomeLookup",
    "LatitudeBiomeLookup",
    "apply_biome_uvs",
    # Pipeline
    "PlanetGenerator",
    "generate_planet",
]
