"""Shared fixtures for planetmesh tests."""

from __future__ import annotations

import pytest

from planetmesh.settings import NoiseLayerConfig, PlanetSettings, ShapeConfig
from planetmesh.shape import ShapeGenerator


@pytest.fixture
def flat_shape() -> ShapeConfig:
    """Zero-strength layer: every vertex stays on the unit sphere."""
    return ShapeConfig(layers=(NoiseLayerConfig.simple(strength=0.0),))


@pytest.fixture
def noisy_shape() -> ShapeConfig:
    return ShapeConfig(
        layers=(
            NoiseLayerConfig.simple(strength=0.15, num_layers=3, base_roughness=1.2,
                                    roughness=2.0, persistence=0.5, min_value=-0.2),
            NoiseLayerConfig.ridged(weight_multiplier=0.8, use_first_layer_as_mask=True,
                                    strength=0.5, num_layers=3, base_roughness=2.0,
                                    roughness=2.2, persistence=0.5),
        ),
        radius=2.0,
        seed=3,
    )


@pytest.fixture
def noisy_generator(noisy_shape) -> ShapeGenerator:
    return ShapeGenerator(noisy_shape)


@pytest.fixture
def small_settings(noisy_shape) -> PlanetSettings:
    return PlanetSettings(shape=noisy_shape, resolution=6, normalize_factor=0.5)
