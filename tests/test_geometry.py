"""Tests for geometry.py — face bases, cube grids, sphere projection, normals."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from planetmesh.geometry import (
    FACE_DIRECTIONS,
    FaceDirection,
    accumulate_normals,
    cube_points,
    face_axes,
    grid_coordinates,
    naive_normalize,
    normalize_vectors,
    project_to_sphere,
    tangential_normalize,
)


# ═══════════════════════════════════════════════════════════════════
# Face directions + axes
# ═══════════════════════════════════════════════════════════════════


class TestFaceAxes:
    def test_six_directions(self):
        assert [d.value for d in FACE_DIRECTIONS] == ["+X", "-X", "+Y", "-Y", "+Z", "-Z"]

    @pytest.mark.parametrize("direction", FACE_DIRECTIONS)
    def test_orthonormal(self, direction):
        d, a, b = face_axes(direction)
        for v in (d, a, b):
            assert np.linalg.norm(v) == pytest.approx(1.0)
        assert np.dot(d, a) == pytest.approx(0.0)
        assert np.dot(d, b) == pytest.approx(0.0)
        assert np.dot(a, b) == pytest.approx(0.0)

    @pytest.mark.parametrize("direction", FACE_DIRECTIONS)
    def test_right_handed(self, direction):
        d, a, b = face_axes(direction)
        np.testing.assert_allclose(b, np.cross(d, a))
        np.testing.assert_allclose(np.cross(a, b), d)

    def test_axis_a_rotates_components(self):
        d, a, _ = face_axes(FaceDirection.POS_Y)
        np.testing.assert_array_equal(a, [1.0, 0.0, 0.0])

    def test_from_vector(self):
        assert FaceDirection.from_vector((0, 0, -1)) is FaceDirection.NEG_Z
        with pytest.raises(ValueError):
            FaceDirection.from_vector((1, 1, 0))


# ═══════════════════════════════════════════════════════════════════
# Cube grids
# ═══════════════════════════════════════════════════════════════════


class TestCubePoints:
    def test_grid_coordinates(self):
        np.testing.assert_allclose(grid_coordinates(5), [-1.0, -0.5, 0.0, 0.5, 1.0])
        np.testing.assert_allclose(grid_coordinates(5, border=1), [-1.5, -1.0, -0.5, 0.0, 0.5, 1.0, 1.5])

    @pytest.mark.parametrize("direction", FACE_DIRECTIONS)
    def test_points_on_face(self, direction):
        pts = cube_points(direction, 5)
        assert pts.shape == (25, 3)
        np.testing.assert_allclose(pts @ np.array(direction.vector), 1.0)
        assert np.abs(pts).max() == pytest.approx(1.0)

    def test_index_layout(self):
        """Vertex ``x + y * n`` lies at ``d + u * axis_a + v * axis_b``."""
        d, a, b = face_axes(FaceDirection.POS_Z)
        pts = cube_points(FaceDirection.POS_Z, 3)
        np.testing.assert_allclose(pts[0], d - a - b)
        np.testing.assert_allclose(pts[2], d + a - b)
        np.testing.assert_allclose(pts[6], d - a + b)
        np.testing.assert_allclose(pts[4], d)

    @pytest.mark.parametrize("direction", FACE_DIRECTIONS)
    def test_border_points_on_cube_surface(self, direction):
        pts = cube_points(direction, 5, border=1)
        assert pts.shape == (49, 3)
        np.testing.assert_allclose(np.abs(pts).max(axis=1), 1.0)

    def test_border_folds_onto_neighbour(self):
        """The overhang column past ``u = -1`` lands on the ``-axis_a`` face."""
        resolution = 5
        d, a, b = face_axes(FaceDirection.POS_X)
        pts = cube_points(FaceDirection.POS_X, resolution, border=1).reshape(7, 7, 3)
        column = pts[1:-1, 0]
        np.testing.assert_allclose(column @ -a, 1.0)
        np.testing.assert_allclose(column @ d, 0.5)

    def test_border_corner_collapses(self):
        d, a, b = face_axes(FaceDirection.NEG_Y)
        pts = cube_points(FaceDirection.NEG_Y, 4, border=1).reshape(6, 6, 3)
        np.testing.assert_allclose(pts[0, 0], d - a - b)
        np.testing.assert_allclose(pts[0, 0], pts[1, 1])
        np.testing.assert_allclose(pts[5, 5], pts[4, 4])


# ═══════════════════════════════════════════════════════════════════
# Sphere projection
# ═══════════════════════════════════════════════════════════════════


class TestProjection:
    def test_naive_unit_length(self):
        pts = cube_points(FaceDirection.POS_Y, 7)
        np.testing.assert_allclose(np.linalg.norm(naive_normalize(pts), axis=1), 1.0)

    def test_tangential_unit_length_on_cube(self):
        pts = cube_points(FaceDirection.NEG_Z, 7)
        np.testing.assert_allclose(np.linalg.norm(tangential_normalize(pts), axis=1), 1.0)

    def test_tangential_formula(self):
        p = np.array([[1.0, 0.5, -0.25]])
        x, y, z = 1.0, 0.5, -0.25
        expected = [
            x * np.sqrt(1 - y * y / 2 - z * z / 2 + y * y * z * z / 3),
            y * np.sqrt(1 - x * x / 2 - z * z / 2 + x * x * z * z / 3),
            z * np.sqrt(1 - x * x / 2 - y * y / 2 + x * x * y * y / 3),
        ]
        np.testing.assert_allclose(tangential_normalize(p)[0], expected)

    def test_blend_endpoints(self):
        pts = cube_points(FaceDirection.POS_X, 6)
        np.testing.assert_array_equal(project_to_sphere(pts, 0.0), naive_normalize(pts))
        np.testing.assert_array_equal(project_to_sphere(pts, 1.0), tangential_normalize(pts))

    @pytest.mark.parametrize("factor", [0.25, 0.5, 0.8])
    def test_blend_is_linear(self, factor):
        pts = cube_points(FaceDirection.NEG_X, 6)
        naive = naive_normalize(pts)
        tangential = tangential_normalize(pts)
        np.testing.assert_allclose(
            project_to_sphere(pts, factor),
            naive * (1 - factor) + tangential * factor,
        )

    def test_face_centre_unchanged(self):
        centre = np.array([[0.0, 0.0, 1.0]])
        for factor in (0.0, 0.5, 1.0):
            np.testing.assert_allclose(project_to_sphere(centre, factor), centre)

    def test_degenerate_point_uses_fallback(self, caplog):
        pts = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
        with caplog.at_level(logging.WARNING, logger="planetmesh.geometry"):
            out = naive_normalize(pts, fallback=(0.0, 0.0, 1.0))
        np.testing.assert_array_equal(out[0], [0.0, 0.0, 1.0])
        np.testing.assert_array_equal(out[1], [1.0, 0.0, 0.0])
        assert "too close to the origin" in caplog.text


# ═══════════════════════════════════════════════════════════════════
# Normals
# ═══════════════════════════════════════════════════════════════════


class TestNormals:
    def test_single_triangle(self):
        verts = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 3.0, 0.0]])
        sums = accumulate_normals(verts, np.array([0, 1, 2]))
        for row in sums:
            np.testing.assert_allclose(row, [0.0, 0.0, 6.0])

    def test_area_weighted(self):
        """A vertex shared by a big and a small triangle leans to the big one."""
        verts = np.array([
            [0.0, 0.0, 0.0],
            [4.0, 0.0, 0.0],
            [0.0, 4.0, 0.0],
            [0.0, 0.0, 1.0],
            [0.0, -1.0, 0.0],
        ])
        # big triangle in the z=0 plane, small one in the x=0 plane
        sums = accumulate_normals(verts, np.array([0, 1, 2, 0, 3, 4]))
        assert sums[0][2] == pytest.approx(16.0)
        assert abs(sums[0][0]) == pytest.approx(1.0)

    def test_empty_triangles(self):
        verts = np.ones((3, 3))
        np.testing.assert_array_equal(accumulate_normals(verts, np.zeros(0, dtype=int)), 0.0)

    def test_normalize_with_fallback(self, caplog):
        vectors = np.array([[0.0, 0.0, 0.0], [0.0, 3.0, 4.0]])
        fallback = np.array([[0.0, 2.0, 0.0], [1.0, 0.0, 0.0]])
        with caplog.at_level(logging.WARNING, logger="planetmesh.geometry"):
            out = normalize_vectors(vectors, fallback)
        np.testing.assert_allclose(out, [[0.0, 1.0, 0.0], [0.0, 0.6, 0.8]])
        assert "zero length" in caplog.text
