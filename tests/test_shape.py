"""Tests for shape.py — layer combination and elevation statistics."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from planetmesh.errors import ConfigurationError
from planetmesh.filters import build_filter
from planetmesh.noise import NoiseField
from planetmesh.settings import NoiseLayerConfig, ShapeConfig
from planetmesh.shape import ElevationRange, MinMax, ShapeGenerator

POINTS = [
    (0.6, 0.8, 0.0),
    (0.0, 0.6, -0.8),
    (-0.48, 0.6, 0.64),
    (0.36, -0.48, 0.8),
]


# ═══════════════════════════════════════════════════════════════════
# MinMax
# ═══════════════════════════════════════════════════════════════════


class TestMinMax:
    def test_starts_empty(self):
        mm = MinMax()
        assert mm.min == math.inf
        assert mm.max == -math.inf
        assert mm.is_empty()

    def test_add_value(self):
        mm = MinMax()
        for v in (0.5, -0.2, 1.3, 0.0):
            mm.add_value(v)
        assert (mm.min, mm.max) == (-0.2, 1.3)
        assert not mm.is_empty()

    def test_merge(self):
        a, b = MinMax(), MinMax()
        a.add_value(1.0)
        b.add_value(-1.0)
        b.add_value(0.5)
        a.merge(b)
        assert (a.min, a.max) == (-1.0, 1.0)

    def test_merge_empty_is_noop(self):
        a = MinMax()
        a.add_value(0.25)
        a.merge(MinMax())
        assert (a.min, a.max) == (0.25, 0.25)

    def test_freeze(self):
        mm = MinMax()
        mm.add_value(2.0)
        mm.add_value(4.0)
        rng = mm.freeze()
        assert rng == ElevationRange(2.0, 4.0)
        assert rng.span == 2.0
        assert rng.normalize(3.0) == 0.5
        assert rng.normalize(10.0) == 1.0


# ═══════════════════════════════════════════════════════════════════
# ShapeGenerator
# ═══════════════════════════════════════════════════════════════════


class TestShapeGenerator:
    def test_empty_layers_rejected(self):
        with pytest.raises(ConfigurationError, match="at least one noise layer"):
            ShapeGenerator(ShapeConfig(layers=()))

    def test_invalid_layer_rejected(self):
        with pytest.raises(ConfigurationError, match="num_layers"):
            ShapeGenerator(ShapeConfig(layers=(NoiseLayerConfig.simple(num_layers=0),)))

    def test_single_layer_matches_filter(self):
        layer = NoiseLayerConfig.simple(strength=0.5, num_layers=2, roughness=2.0, min_value=-0.5)
        gen = ShapeGenerator(ShapeConfig(layers=(layer,), seed=12))
        flt = build_filter(layer, NoiseField(12))
        for p in POINTS:
            assert gen.unscaled_elevation(p) == flt.evaluate(p)

    def test_unmasked_layers_sum(self):
        base = NoiseLayerConfig.simple(strength=0.5, min_value=-1.0)
        extra = NoiseLayerConfig.ridged(strength=0.3)
        gen = ShapeGenerator(ShapeConfig(layers=(base, extra)))
        field = NoiseField(0)
        for p in POINTS:
            expected = build_filter(base, field).evaluate(p) + build_filter(extra, field).evaluate(p)
            assert gen.unscaled_elevation(p) == pytest.approx(expected)

    def test_mask_uses_base_output(self):
        """A masked layer contributes nothing where the base layer is flat."""
        base = NoiseLayerConfig.simple(min_value=10.0)
        masked = NoiseLayerConfig.ridged(strength=1.0, use_first_layer_as_mask=True)
        gen = ShapeGenerator(ShapeConfig(layers=(base, masked)))
        assert all(gen.unscaled_elevation(p) == 0.0 for p in POINTS)

    def test_mask_multiplies(self):
        base = NoiseLayerConfig.simple(strength=0.5, min_value=-1.0)
        masked = NoiseLayerConfig.simple(strength=0.2, min_value=-1.0, center=(1.0, 2.0, 3.0),
                                         use_first_layer_as_mask=True)
        gen = ShapeGenerator(ShapeConfig(layers=(base, masked)))
        field = NoiseField(0)
        for p in POINTS:
            b = build_filter(base, field).evaluate(p)
            m = build_filter(masked, field).evaluate(p)
            assert gen.unscaled_elevation(p) == pytest.approx(b + m * b)

    def test_disabled_layer_skipped(self):
        base = NoiseLayerConfig.simple(strength=0.5, min_value=-1.0)
        off = NoiseLayerConfig.ridged(strength=5.0, enabled=False)
        with_off = ShapeGenerator(ShapeConfig(layers=(base, off)))
        alone = ShapeGenerator(ShapeConfig(layers=(base,)))
        for p in POINTS:
            assert with_off.unscaled_elevation(p) == alone.unscaled_elevation(p)

    def test_scaled_elevation_monotonic(self):
        gen = ShapeGenerator(ShapeConfig(layers=(NoiseLayerConfig.simple(strength=1.0),), radius=3.0))
        values = [i * 0.05 for i in range(-20, 41)]
        scaled = [gen.scaled_elevation(v) for v in values]
        assert all(b >= a for a, b in zip(scaled, scaled[1:]))
        assert gen.scaled_elevation(0.0) == 3.0
        assert gen.scaled_elevation(0.5) == pytest.approx(4.5)

    def test_negative_elevation_sits_at_radius(self):
        gen = ShapeGenerator(ShapeConfig(layers=(NoiseLayerConfig.simple(),), radius=2.0))
        assert gen.scaled_elevation(-0.7) == 2.0


class TestElevationRecording:
    def test_records_into_own_range(self, noisy_generator):
        values = [noisy_generator.unscaled_elevation(p) for p in POINTS]
        rng = noisy_generator.elevation_range
        assert rng.min == min(values)
        assert rng.max == max(values)

    def test_external_accumulator_leaves_own_range_alone(self, noisy_generator):
        local = MinMax()
        for p in POINTS:
            noisy_generator.unscaled_elevation(p, local)
        assert not local.is_empty()
        assert noisy_generator.elevation_min_max.is_empty()

        noisy_generator.record(local)
        assert noisy_generator.freeze() == local.freeze()

    def test_reset(self, noisy_generator):
        noisy_generator.unscaled_elevation(POINTS[0])
        noisy_generator.reset()
        assert noisy_generator.elevation_min_max.is_empty()

    def test_concurrent_recording_matches_serial(self, noisy_shape):
        points = [(x * 0.1, y * 0.1, 0.5) for x in range(-10, 11) for y in range(-10, 11)]
        serial = ShapeGenerator(noisy_shape)
        expected = [serial.unscaled_elevation(p) for p in points]

        shared = ShapeGenerator(noisy_shape)
        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(shared.unscaled_elevation, points))

        assert results == expected
        assert shared.freeze() == serial.freeze()
