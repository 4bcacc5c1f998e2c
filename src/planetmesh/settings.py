"""Generation settings — noise layers, shape and planet configuration.

All settings are frozen dataclasses so a configuration cannot change
while a generation pass is running.  Each class offers ``validate()``
returning a list of problems (empty = valid) and a ``to_dict`` /
``from_dict`` pair for JSON round-trips (see :mod:`planetmesh.io`).

A noise layer is a tagged variant: :class:`FilterKind` selects the
algorithm and :class:`NoiseParams` holds the fields both kinds share.
Ridged layers add a single ``weight_multiplier``.

Presets
-------
- :data:`EARTHLIKE` — continents with masked ridged mountain ranges
- :data:`RIDGED_WORLD` — a single heavily ridged layer
- :data:`SMOOTH_MOON` — gentle low-frequency undulation
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigurationError

Vec3 = Tuple[float, float, float]

MIN_LAYERS = 1
MAX_LAYERS = 8
DEFAULT_WEIGHT_MULTIPLIER = 0.8


# ═══════════════════════════════════════════════════════════════════
# Noise layers
# ═══════════════════════════════════════════════════════════════════

class FilterKind(str, Enum):
    """Which octave-combination algorithm an elevation filter uses."""

    SIMPLE = "simple"
    RIDGED = "ridged"


@dataclass(frozen=True)
class NoiseParams:
    """Parameters shared by simple and ridged noise layers.

    Attributes
    ----------
    strength : float
        Final multiplier applied to the filter output.
    num_layers : int
        Number of octaves (1..8).
    base_roughness : float
        Frequency of the first octave.
    roughness : float
        Frequency multiplier applied after each octave.
    persistence : float
        Amplitude multiplier applied after each octave.
    center : tuple of float
        Offset added to the scaled sample point (moves the pattern).
    min_value : float
        Threshold subtracted from the summed noise; anything below it
        becomes flat sea level for simple layers.
    max_value : float
        Upper threshold carried for colour mapping.  Not applied by the
        filters themselves.
    """

    strength: float = 1.0
    num_layers: int = 1
    base_roughness: float = 1.0
    roughness: float = 1.0
    persistence: float = 0.5
    center: Vec3 = (0.0, 0.0, 0.0)
    min_value: float = 0.0
    max_value: float = 0.0

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not isinstance(self.num_layers, int) or isinstance(self.num_layers, bool):
            errors.append(f"num_layers must be an int, got {self.num_layers!r}")
        elif not MIN_LAYERS <= self.num_layers <= MAX_LAYERS:
            errors.append(
                f"num_layers must be in [{MIN_LAYERS}, {MAX_LAYERS}], got {self.num_layers}"
            )
        if len(self.center) != 3:
            errors.append(f"center must have 3 components, got {len(self.center)}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strength": self.strength,
            "num_layers": self.num_layers,
            "base_roughness": self.base_roughness,
            "roughness": self.roughness,
            "persistence": self.persistence,
            "center": list(self.center),
            "min_value": self.min_value,
            "max_value": self.max_value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoiseParams":
        values = dict(data)
        if "center" in values:
            values["center"] = tuple(float(c) for c in values["center"])
        return cls(**values)


@dataclass(frozen=True)
class NoiseLayerConfig:
    """One layer of the elevation stack.

    *weight_multiplier* is only meaningful (and required) for
    :attr:`FilterKind.RIDGED` layers.  *enabled* and
    *use_first_layer_as_mask* are ignored on the base layer, which is
    always applied unmasked.
    """

    kind: FilterKind = FilterKind.SIMPLE
    params: NoiseParams = field(default_factory=NoiseParams)
    weight_multiplier: Optional[float] = None
    enabled: bool = True
    use_first_layer_as_mask: bool = False

    @classmethod
    def simple(cls, *, enabled: bool = True, use_first_layer_as_mask: bool = False,
               **params: Any) -> "NoiseLayerConfig":
        return cls(
            kind=FilterKind.SIMPLE,
            params=NoiseParams(**params),
            enabled=enabled,
            use_first_layer_as_mask=use_first_layer_as_mask,
        )

    @classmethod
    def ridged(cls, *, weight_multiplier: float = DEFAULT_WEIGHT_MULTIPLIER,
               enabled: bool = True, use_first_layer_as_mask: bool = False,
               **params: Any) -> "NoiseLayerConfig":
        return cls(
            kind=FilterKind.RIDGED,
            params=NoiseParams(**params),
            weight_multiplier=weight_multiplier,
            enabled=enabled,
            use_first_layer_as_mask=use_first_layer_as_mask,
        )

    def validate(self) -> List[str]:
        errors = self.params.validate()
        if self.kind is FilterKind.RIDGED and self.weight_multiplier is None:
            errors.append("ridged layer requires weight_multiplier")
        if self.kind is FilterKind.SIMPLE and self.weight_multiplier is not None:
            errors.append("weight_multiplier is only valid on ridged layers")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "params": self.params.to_dict(),
            "enabled": self.enabled,
            "use_first_layer_as_mask": self.use_first_layer_as_mask,
        }
        if self.weight_multiplier is not None:
            data["weight_multiplier"] = self.weight_multiplier
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoiseLayerConfig":
        kind = FilterKind(data.get("kind", FilterKind.SIMPLE.value))
        weight = data.get("weight_multiplier")
        if kind is FilterKind.RIDGED and weight is None:
            weight = DEFAULT_WEIGHT_MULTIPLIER
        return cls(
            kind=kind,
            params=NoiseParams.from_dict(data.get("params", {})),
            weight_multiplier=weight,
            enabled=data.get("enabled", True),
            use_first_layer_as_mask=data.get("use_first_layer_as_mask", False),
        )


# ═══════════════════════════════════════════════════════════════════
# Shape + planet
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ShapeConfig:
    """Ordered noise layers plus the planet's base radius.

    Layer 0 is the base layer and is always applied.  Subsequent layers
    may be disabled or masked by the base layer's output.
    """

    layers: Tuple[NoiseLayerConfig, ...] = ()
    radius: float = 1.0
    seed: int = 0

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the config stays hashable.
        object.__setattr__(self, "layers", tuple(self.layers))

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not self.layers:
            errors.append("shape needs at least one noise layer")
        if self.radius <= 0:
            errors.append(f"radius must be positive, got {self.radius}")
        for i, layer in enumerate(self.layers):
            errors.extend(f"layer {i}: {msg}" for msg in layer.validate())
        if self.layers and not self.layers[0].enabled:
            errors.append("layer 0: the base layer cannot be disabled")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "radius": self.radius,
            "seed": self.seed,
            "layers": [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShapeConfig":
        return cls(
            layers=tuple(NoiseLayerConfig.from_dict(d) for d in data.get("layers", [])),
            radius=data.get("radius", 1.0),
            seed=data.get("seed", 0),
        )


@dataclass(frozen=True)
class PlanetSettings:
    """Everything a generation pass needs.

    Attributes
    ----------
    shape : ShapeConfig
        Noise stack and radius.
    resolution : int
        Vertices per side of each visible cube face (≥ 2).
    normalize_factor : float
        Blend between naive (0) and tangential (1) sphere projection.
    """

    shape: ShapeConfig = field(default_factory=ShapeConfig)
    resolution: int = 16
    normalize_factor: float = 0.0

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not isinstance(self.resolution, int) or self.resolution < 2:
            errors.append(f"resolution must be an int >= 2, got {self.resolution!r}")
        if not 0.0 <= self.normalize_factor <= 1.0:
            errors.append(f"normalize_factor must be in [0, 1], got {self.normalize_factor}")
        errors.extend(self.shape.validate())
        return errors

    def require_valid(self) -> None:
        """Raise :class:`ConfigurationError` listing every problem found."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)

    def with_overrides(self, **changes: Any) -> "PlanetSettings":
        """Copy with some top-level fields replaced (``None`` values ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolution": self.resolution,
            "normalize_factor": self.normalize_factor,
            "shape": self.shape.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanetSettings":
        return cls(
            shape=ShapeConfig.from_dict(data.get("shape", {})),
            resolution=data.get("resolution", 16),
            normalize_factor=data.get("normalize_factor", 0.0),
        )


# ═══════════════════════════════════════════════════════════════════
# Preset configs
# ═══════════════════════════════════════════════════════════════════

EARTHLIKE = PlanetSettings(
    shape=ShapeConfig(
        radius=1.0,
        layers=(
            NoiseLayerConfig.simple(
                strength=0.12,
                num_layers=4,
                base_roughness=1.1,
                roughness=2.2,
                persistence=0.5,
                center=(0.4, -1.3, 2.1),
                min_value=0.25,
            ),
            NoiseLayerConfig.ridged(
                weight_multiplier=0.8,
                use_first_layer_as_mask=True,
                strength=1.5,
                num_layers=5,
                base_roughness=1.6,
                roughness=2.4,
                persistence=0.5,
                center=(3.0, 0.5, -1.0),
                min_value=0.3,
            ),
        ),
    ),
    resolution=48,
    normalize_factor=0.5,
)

RIDGED_WORLD = PlanetSettings(
    shape=ShapeConfig(
        radius=1.0,
        layers=(
            NoiseLayerConfig.ridged(
                weight_multiplier=0.9,
                strength=0.2,
                num_layers=6,
                base_roughness=1.4,
                roughness=2.5,
                persistence=0.45,
                min_value=0.5,
            ),
        ),
    ),
    resolution=48,
    normalize_factor=1.0,
)

SMOOTH_MOON = PlanetSettings(
    shape=ShapeConfig(
        radius=1.0,
        layers=(
            NoiseLayerConfig.simple(
                strength=0.05,
                num_layers=2,
                base_roughness=0.8,
                roughness=2.0,
                persistence=0.4,
            ),
        ),
    ),
    resolution=24,
    normalize_factor=0.0,
)

PRESETS: Dict[str, PlanetSettings] = {
    "earthlike": EARTHLIKE,
    "ridged_world": RIDGED_WORLD,
    "smooth_moon": SMOOTH_MOON,
}
