"""Shape generator — combines elevation filters into planet elevation.

The generator owns one :class:`~filters.ElevationFilter` per configured
layer.  Layer 0 (the base layer) is always applied; every further
enabled layer is added on top, optionally masked by the base layer's
output so secondary detail vanishes over ocean basins.

Elevation statistics are gathered in :class:`MinMax` accumulators.  Face
generation fills a worker-local accumulator which the caller merges with
:meth:`ShapeGenerator.record`; direct calls without an accumulator are
recorded into the generator's own range under a lock.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import ConfigurationError
from .filters import ElevationFilter, build_filter
from .noise import NoiseField
from .settings import ShapeConfig

Point3 = Sequence[float]


# ═══════════════════════════════════════════════════════════════════
# Min / max accumulation
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ElevationRange:
    """Frozen ``[min, max]`` of unscaled elevation observed in a pass."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def normalize(self, value: float) -> float:
        """Map *value* into ``[0, 1]`` relative to this range."""
        if self.span <= 0 or not math.isfinite(self.span):
            return 0.0
        return max(0.0, min(1.0, (value - self.min) / self.span))


class MinMax:
    """Running minimum and maximum.  Starts at ``(+inf, -inf)``."""

    __slots__ = ("min", "max")

    def __init__(self) -> None:
        self.min = math.inf
        self.max = -math.inf

    def add_value(self, value: float) -> None:
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value

    def merge(self, other: "MinMax") -> None:
        self.min = min(self.min, other.min)
        self.max = max(self.max, other.max)

    def is_empty(self) -> bool:
        return self.min > self.max

    def freeze(self) -> ElevationRange:
        return ElevationRange(self.min, self.max)

    def __repr__(self) -> str:
        return f"MinMax(min={self.min}, max={self.max})"


# ═══════════════════════════════════════════════════════════════════
# Generator
# ═══════════════════════════════════════════════════════════════════

class ShapeGenerator:
    """Turns points on the unit sphere into elevations.

    Parameters
    ----------
    config : ShapeConfig
        Noise layers, radius and seed.  Validated on construction.
    """

    def __init__(self, config: ShapeConfig) -> None:
        errors = config.validate()
        if errors:
            raise ConfigurationError(errors)
        self.config = config
        self.noise = NoiseField(config.seed)
        self.filters: List[ElevationFilter] = [
            build_filter(layer, self.noise) for layer in config.layers
        ]
        self._lock = threading.Lock()
        self._min_max = MinMax()

    @property
    def radius(self) -> float:
        return self.config.radius

    def unscaled_elevation(self, point: Point3, min_max: Optional[MinMax] = None) -> float:
        """Combined filter output at *point* before conversion to a radius.

        The value is added to *min_max* when given; otherwise it is
        recorded in the generator's own range.
        """
        first_layer_value = self.filters[0].evaluate(point)
        elevation = first_layer_value

        for layer, noise_filter in zip(self.config.layers[1:], self.filters[1:]):
            if not layer.enabled:
                continue
            mask = first_layer_value if layer.use_first_layer_as_mask else 1.0
            elevation += noise_filter.evaluate(point) * mask

        if min_max is not None:
            min_max.add_value(elevation)
        else:
            with self._lock:
                self._min_max.add_value(elevation)
        return elevation

    def scaled_elevation(self, unscaled: float) -> float:
        """World-space radius for an unscaled elevation.

        Negative elevations are flattened onto the base radius.
        """
        return self.config.radius * (1.0 + max(0.0, unscaled))

    def record(self, min_max: MinMax) -> None:
        """Merge a worker-local accumulator into the generator's range."""
        with self._lock:
            self._min_max.merge(min_max)

    def reset(self) -> None:
        """Start a new generation pass."""
        with self._lock:
            self._min_max = MinMax()

    @property
    def elevation_min_max(self) -> MinMax:
        """A copy of the running accumulator."""
        copy = MinMax()
        with self._lock:
            copy.merge(self._min_max)
        return copy

    def freeze(self) -> ElevationRange:
        """Snapshot of the range observed so far."""
        with self._lock:
            return self._min_max.freeze()

    @property
    def elevation_range(self) -> ElevationRange:
        return self.freeze()
