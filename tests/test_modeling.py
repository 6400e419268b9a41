"""
Tests for scene geometry.

Tests for trefoilworlds/model/modeling.py
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from trefoilworlds.config import TREFOIL_TUBE_RADIUS
from trefoilworlds.model.modeling import (
    BLUE,
    GREEN,
    RED,
    TREFOIL_SEGMENTS,
    TREFOIL_SIDES,
    Triangle,
    ball,
    ground,
    pack_triangles,
    skybox,
    static_geometry,
    trefoil,
    trefoil_curve,
    trefoil_tube,
)


class TestTriangle:
    """Test the Triangle dataclass."""

    def test_centroid_and_normal(self):
        tri = Triangle(
            vertices=[[0.0, 0.0, 0.0], [3.0, 0.0, 0.0], [0.0, 3.0, 0.0]],
            colors=np.ones((6, 4)),
        )
        np.testing.assert_allclose(tri.center_point(), [1.0, 1.0, 0.0])
        np.testing.assert_allclose(tri.normal, [0.0, 0.0, 1.0])

    def test_explicit_center(self):
        tri = Triangle(vertices=np.eye(3), colors=np.ones((6, 4)), center=(7.0, 8.0, 9.0))
        np.testing.assert_array_equal(tri.center_point(), [7.0, 8.0, 9.0])

    def test_rejects_bad_shapes(self):
        with pytest.raises(ValueError):
            Triangle(vertices=np.zeros((4, 3)), colors=np.ones((6, 4)))
        with pytest.raises(ValueError):
            Triangle(vertices=np.eye(3), colors=np.ones((3, 4)))

    def test_pack(self):
        triangles = skybox() + ground()
        vertices, colors, centers = pack_triangles(triangles)
        assert vertices.shape == (6, 3, 3)
        assert colors.shape == (6, 6, 4)
        assert centers.shape == (6, 3)

    def test_pack_empty(self):
        vertices, colors, centers = pack_triangles([])
        assert vertices.shape == (0, 3, 3)
        assert colors.shape == (0, 6, 4)
        assert centers.shape == (0, 3)


class TestTrefoil:
    """Test the knot tube."""

    def test_triangle_count(self):
        assert len(list(trefoil())) == 2 * TREFOIL_SEGMENTS * TREFOIL_SIDES

    def test_tube_radius(self):
        for s in np.linspace(0.0, 2.0 * math.pi, 13):
            for theta in np.linspace(0.0, 2.0 * math.pi, 7):
                offset = trefoil_tube(s, theta) - trefoil_curve(s)
                assert np.linalg.norm(offset) == pytest.approx(TREFOIL_TUBE_RADIUS)

    def test_seam_points_down(self):
        offset = trefoil_tube(0.4, 0.0) - trefoil_curve(0.4)
        np.testing.assert_allclose(offset, [0.0, 0.0, -TREFOIL_TUBE_RADIUS], atol=1e-12)

    def test_arc_colors(self):
        triangles = list(trefoil())
        per_segment = 2 * TREFOIL_SIDES

        arc_b = triangles[0].colors
        arc_c = triangles[40 * per_segment].colors
        arc_a = triangles[70 * per_segment].colors

        np.testing.assert_array_equal(arc_b[0], GREEN)
        np.testing.assert_array_equal(arc_c[0], BLUE)
        np.testing.assert_array_equal(arc_a[0], RED)
        # Every arc is opaque in every world
        for colors in (arc_a, arc_b, arc_c):
            assert np.all(colors[:, 3] == 1.0)


class TestEnvironment:
    """Test skybox() and ground()."""

    def test_skybox(self):
        faces = skybox()
        assert len(faces) == 4
        assert all(tri.ambient_factor == 1.0 and tri.diffuse_factor == 0.0 for tri in faces)
        # Six distinct world colors
        assert len({tuple(c) for c in faces[0].colors}) == 6

    def test_ground(self):
        faces = ground()
        assert len(faces) == 2
        for tri in faces:
            np.testing.assert_array_equal(tri.vertices[:, 2], -2.0)
            assert np.all(tri.colors == tri.colors[0])

    def test_static_geometry(self):
        assert len(static_geometry()) == 2 * TREFOIL_SEGMENTS * TREFOIL_SIDES + 4 + 2


class TestBall:
    """Test ball()."""

    def test_exists_in_one_world(self):
        color = (0.1, 0.2, 0.3, 1.0)
        triangles = ball((1.0, 2.0, 3.0), 4, color)

        assert len(triangles) == 20
        for tri in triangles:
            np.testing.assert_array_equal(tri.colors[4], color)
            assert np.all(np.delete(tri.colors, 4, axis=0) == 0.0)

    def test_faces_share_center(self):
        center = np.array([1.0, 2.0, 3.0])
        for tri in ball(center, 0, RED):
            np.testing.assert_array_equal(tri.center_point(), center)

    def test_vertices_around_center(self):
        center = np.array([1.0, 2.0, 3.0])
        vertices, _, _ = pack_triangles(ball(center, 0, RED))
        distances = np.linalg.norm(vertices.reshape(-1, 3) - center, axis=1)
        np.testing.assert_allclose(distances, distances[0])

    @pytest.mark.parametrize("world", [-1, 6])
    def test_rejects_invalid_world(self, world):
        with pytest.raises(ValueError):
            ball((0.0, 0.0, 0.0), world, RED)
