"""Unit tests for the path tracing integrator.

Tests cover:
- Sky background gradient
- Bounce budget termination
- Attenuation along a mirror path
- Normal visualization shading
- Pixel averaging, gamma and sample coordinates
"""

import numpy as np
import pytest

from lumen.core.color import Color
from lumen.core.integrator import render_pixel, render_ray, shade_normals, sky_background
from lumen.core.ray import Ray, vec3
from lumen.core.sampling import MULTISAMPLE_4X_PATTERN, SINGLE_SAMPLE_PATTERN, SamplePattern
from lumen.core.settings import ShadingMode
from lumen.geometry import Sphere
from lumen.materials import Metal
from lumen.scene.intersection import ObjectList


def constant_background(ray):
    return Color(0.25, 0.25, 0.25, 1.0)


class RecordingViewport:
    """Viewport stand-in that records the image-plane points it is asked for."""

    def __init__(self, width, height):
        self.image_width = float(width)
        self.image_height = float(height)
        self.points = []

    def emit_ray(self, p, rng):
        self.points.append(tuple(p))
        return Ray(vec3(0, 0, 0), vec3(0, 1, 0))


class TestBackground:
    """Tests for the sky gradient."""

    def test_straight_up_is_sky_blue(self):
        """Test the top of the gradient."""
        assert sky_background(Ray(vec3(0, 0, 0), vec3(0, 3, 0))) == Color(0.5, 0.6, 1.0, 1.0)

    def test_straight_down_is_white(self):
        """Test the bottom of the gradient."""
        assert sky_background(Ray(vec3(0, 0, 0), vec3(0, -1, 0))) == Color.WHITE

    def test_horizon_is_halfway(self):
        """Test the middle of the gradient."""
        color = sky_background(Ray(vec3(0, 0, 0), vec3(1, 0, 0)))
        assert color.to_tuple() == pytest.approx((0.75, 0.8, 1.0, 1.0))


class TestRenderRay:
    """Tests for recursive path evaluation."""

    def test_zero_bounces_is_black(self, empty_world, rng):
        """Test that an exhausted budget contributes black even for escaping rays."""
        ray = Ray(vec3(0, 0, 0), vec3(0, 1, 0))
        assert render_ray(ray, empty_world, 0, rng) == Color.BLACK

    def test_miss_returns_background(self, empty_world, rng):
        """Test that an escaping ray receives the background color."""
        ray = Ray(vec3(0, 0, 0), vec3(0, 1, 0))
        assert render_ray(ray, empty_world, 5, rng) == Color.SKY_BLUE

    def test_budget_runs_out_after_hit(self, unit_sphere_world, rng):
        """Test that one bounce on a surface with no budget left gives black."""
        ray = Ray(vec3(0, 0, 0), vec3(0, 0, -1))
        color = render_ray(ray, unit_sphere_world, 1, rng)
        assert (color.r, color.g, color.b) == (0.0, 0.0, 0.0)

    def test_mirror_attenuates_background(self, rng):
        """Test that a mirror bounce multiplies the albedo into the background."""
        world = ObjectList([Sphere((0.0, 0.0, -1.0), 0.5, Metal(Color(0.8, 0.8, 0.8)))])
        color = render_ray(Ray(vec3(0, 0, 0), vec3(0, 0, -1)), world, 2, rng)
        # Reflected straight back along +z: horizon color times albedo
        assert color.to_tuple() == pytest.approx((0.6, 0.64, 0.8, 1.0))

    def test_custom_background(self, empty_world, rng):
        """Test that the background callable is used for escaping rays."""
        color = render_ray(Ray(vec3(0, 0, 0), vec3(1, 0, 0)), empty_world, 3, rng, constant_background)
        assert color == Color(0.25, 0.25, 0.25, 1.0)


class TestShadeNormals:
    """Tests for normal visualization."""

    def test_hit_maps_normal(self, unit_sphere_world):
        """Test that the +z normal maps to (0.5, 0.5, 1.0)."""
        color = shade_normals(Ray(vec3(0, 0, 0), vec3(0, 0, -1)), unit_sphere_world)
        assert color == Color(0.5, 0.5, 1.0, 1.0)

    def test_miss_uses_background(self, empty_world):
        """Test that misses still show the background."""
        assert shade_normals(Ray(vec3(0, 0, 0), vec3(0, -1, 0)), empty_world) == Color.WHITE


class TestRenderPixel:
    """Tests for per-pixel sampling."""

    def test_average_is_gamma_corrected(self, pinhole_camera, empty_world, rng):
        """Test that a constant 0.25 background averages to 0.5 after gamma."""
        viewport = pinhole_camera.viewport(8, 8)
        color = render_pixel(
            3, 4, viewport, empty_world, MULTISAMPLE_4X_PATTERN, rng, background=constant_background
        )
        assert color.to_tuple() == pytest.approx((0.5, 0.5, 0.5, 1.0))

    def test_alpha_is_opaque(self, pinhole_camera, unit_sphere_world, rng):
        """Test that rendered pixels are always opaque."""
        viewport = pinhole_camera.viewport(8, 8)
        color = render_pixel(4, 4, viewport, unit_sphere_world, MULTISAMPLE_4X_PATTERN, rng)
        assert color.a == 1.0

    def test_zero_bounces_renders_black(self, pinhole_camera, unit_sphere_world, rng):
        """Test that a zero bounce budget renders an opaque black pixel."""
        viewport = pinhole_camera.viewport(8, 8)
        color = render_pixel(
            4, 4, viewport, unit_sphere_world, SINGLE_SAMPLE_PATTERN, rng, max_bounces=0
        )
        assert color == Color(0.0, 0.0, 0.0, 1.0)

    def test_normals_shading(self, pinhole_camera, unit_sphere_world, rng):
        """Test that NORMALS shading shows the sphere normal at the image center."""
        # In a 2x2 image the sample of pixel (0, 0) passes through the image center
        viewport = pinhole_camera.viewport(2, 2)
        color = render_pixel(
            0, 0, viewport, unit_sphere_world, SINGLE_SAMPLE_PATTERN, rng,
            shading=ShadingMode.NORMALS,
        )
        # Normal (0, 0, 1) maps to (0.5, 0.5, 1.0) before gamma
        assert color.to_tuple() == pytest.approx((0.5**0.5, 0.5**0.5, 1.0, 1.0))

    def test_deterministic_for_seed(self, pinhole_camera, unit_sphere_world):
        """Test that equal seeds give equal pixels."""
        viewport = pinhole_camera.viewport(16, 16)
        colors = [
            render_pixel(
                8, 8, viewport, unit_sphere_world, MULTISAMPLE_4X_PATTERN, np.random.default_rng(3)
            )
            for _ in range(2)
        ]
        assert colors[0] == colors[1]

    def test_sample_coordinates(self, rng):
        """Test that pixel coordinates are normalized over size - 1."""
        viewport = RecordingViewport(3, 5)
        render_pixel(0, 0, viewport, ObjectList(), SINGLE_SAMPLE_PATTERN, rng)
        render_pixel(2, 4, viewport, ObjectList(), SINGLE_SAMPLE_PATTERN, rng)
        assert viewport.points == [
            pytest.approx((0.25, 0.125)),
            pytest.approx((1.25, 1.125)),
        ]

    def test_single_pixel_image(self, rng):
        """Test that a 1x1 image does not divide by zero."""
        viewport = RecordingViewport(1, 1)
        render_pixel(0, 0, viewport, ObjectList(), SINGLE_SAMPLE_PATTERN, rng)
        assert viewport.points == [pytest.approx((0.5, 0.5))]


class TestPatternAveraging:
    """Tests that averaging is exact on constant input."""

    @pytest.mark.parametrize(
        "pattern",
        [
            SamplePattern.standard(1),
            SamplePattern.standard(2),
            SamplePattern.standard(4),
            SamplePattern.standard(8),
            SamplePattern.grid(3),
        ],
    )
    def test_constant_background(self, pinhole_camera, empty_world, rng, pattern):
        """Test that any pattern length reproduces a constant background."""
        viewport = pinhole_camera.viewport(5, 5)
        for x, y in ((0, 0), (2, 3), (4, 4)):
            color = render_pixel(
                x, y, viewport, empty_world, pattern, rng, background=constant_background
            )
            # sqrt(0.25) is the gamma step applied after averaging
            assert color == Color(0.5, 0.5, 0.5, 1.0)
