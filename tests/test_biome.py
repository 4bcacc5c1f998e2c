"""Tests for biome.py — biome lookups and the UV biome pass."""

from __future__ import annotations

import numpy as np
import pytest

from planetmesh.biome import BiomeLookup, LatitudeBiomeLookup, apply_biome_uvs
from planetmesh.geometry import FaceDirection
from planetmesh.mesher import CubeFaceMesher
from planetmesh.settings import NoiseLayerConfig
from planetmesh.shape import ShapeGenerator

NORTH = (0.0, 1.0, 0.0)
SOUTH = (0.0, -1.0, 0.0)
EQUATOR = (1.0, 0.0, 0.0)


class TestLatitudeBiomeLookup:
    def test_is_biome_lookup(self):
        assert isinstance(LatitudeBiomeLookup(), BiomeLookup)

    def test_single_biome_is_zero(self):
        lookup = LatitudeBiomeLookup()
        for p in (NORTH, SOUTH, EQUATOR):
            assert lookup.biome_percent(p) == 0.0

    def test_two_bands(self):
        lookup = LatitudeBiomeLookup((0.0, 0.5), blend_amount=0.1)
        assert lookup.biome_percent(NORTH) == 1.0
        assert lookup.biome_percent(SOUTH) == 0.0
        # the equator sits exactly on the band start: half blended
        assert lookup.biome_percent(EQUATOR) == pytest.approx(0.5)

    def test_three_bands_normalised(self):
        lookup = LatitudeBiomeLookup((0.0, 0.3, 0.7), blend_amount=0.0)
        assert lookup.biome_percent(NORTH) == 1.0
        assert lookup.biome_percent((0.0, 0.0, 1.0)) == 0.5

    def test_blend_is_monotonic(self):
        lookup = LatitudeBiomeLookup((0.0, 0.5), blend_amount=0.4)
        ys = np.linspace(-1.0, 1.0, 41)
        values = [lookup.biome_percent((0.0, y, 0.0)) for y in ys]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert 0.0 < values[20] < 1.0

    def test_noise_wobble(self):
        layer = NoiseLayerConfig.simple(strength=1.0, min_value=-1.0, base_roughness=3.0)
        plain = LatitudeBiomeLookup((0.0, 0.5), blend_amount=0.05)
        wobbly = LatitudeBiomeLookup((0.0, 0.5), blend_amount=0.05, noise_layer=layer,
                                     noise_offset=1.0, noise_strength=0.3, seed=4)
        points = [(np.cos(t) * 0.99, np.sin(t) * 0.1, 0.1) for t in np.linspace(0, 6, 25)]
        assert any(plain.biome_percent(p) != wobbly.biome_percent(p) for p in points)

    def test_callable(self):
        lookup = LatitudeBiomeLookup((0.0, 0.5))
        assert lookup(NORTH) == lookup.biome_percent(NORTH)

    def test_requires_a_band(self):
        with pytest.raises(ValueError):
            LatitudeBiomeLookup(())


class TestApplyBiomeUvs:
    @pytest.fixture
    def face(self, noisy_shape):
        return CubeFaceMesher(ShapeGenerator(noisy_shape), 0.5).generate(FaceDirection.POS_Y, 5)

    def test_lambda_lookup(self, face):
        elevations = face.elevations().copy()
        assert apply_biome_uvs(face, lambda p: 0.25) is face
        np.testing.assert_array_equal(face.uvs[:, 0], 0.25)
        np.testing.assert_array_equal(face.uvs[:, 1], elevations)

    def test_values_clamped(self, face):
        apply_biome_uvs(face, lambda p: p[0] * 3.0)
        assert face.uvs[:, 0].min() == 0.0
        assert face.uvs[:, 0].max() == 1.0

    def test_uses_undisplaced_point(self, face):
        seen = []
        apply_biome_uvs(face, lambda p: seen.append(p) or 0.0)
        np.testing.assert_allclose(np.linalg.norm(seen, axis=1), 1.0)

    def test_protocol_object(self, face):
        apply_biome_uvs(face, LatitudeBiomeLookup((0.0, 0.5)))
        # the +Y face lies in the northern hemisphere
        assert face.uvs[:, 0].min() > 0.5

    def test_rejects_non_callable(self, face):
        with pytest.raises(TypeError):
            apply_biome_uvs(face, 3)
