"""Unit tests for the thin-lens camera.

Tests cover:
- Orientation from LookAt, Rotation and RollPitchYaw
- Viewport geometry for a known configuration
- Primary rays through the image plane
- Depth of field: lens sampling and convergence at the focus plane
- Validation of degenerate configurations
"""

import dataclasses
import math

import numpy as np
import pytest

from lumen.camera import Camera, LookAt, RollPitchYaw, Rotation, Viewport
from lumen.errors import ConfigurationError


class TestOrientation:
    """Tests for camera direction variants."""

    def test_look_at_down_negative_z_is_identity(self):
        """Test that looking down -z with +y up gives the identity basis."""
        basis = LookAt((0.0, 0.0, -1.0)).to_matrix((0.0, 0.0, 0.0))
        np.testing.assert_allclose(basis, np.eye(3), atol=1e-12)

    def test_look_at_basis_is_orthonormal(self):
        """Test that an oblique look-at yields an orthonormal right-handed basis."""
        basis = LookAt((0.0, 0.0, 0.0)).to_matrix((13.0, 2.0, 3.0))
        np.testing.assert_allclose(basis.T @ basis, np.eye(3), atol=1e-12)
        assert np.linalg.det(basis) == pytest.approx(1.0)
        # w points from the target back to the camera
        np.testing.assert_allclose(basis[:, 2], np.array([13.0, 2.0, 3.0]) / math.sqrt(182.0))

    def test_look_at_coincident_target(self):
        """Test that a target equal to the position is rejected."""
        with pytest.raises(ConfigurationError, match="coincides"):
            LookAt((1.0, 1.0, 1.0)).to_matrix((1.0, 1.0, 1.0))

    def test_look_at_parallel_up(self):
        """Test that an up vector parallel to the view direction is rejected."""
        with pytest.raises(ConfigurationError, match="parallel"):
            LookAt((0.0, -5.0, 0.0)).to_matrix((0.0, 0.0, 0.0))

    def test_rotation_validation(self):
        """Test that a rotation must be a finite 3x3 matrix."""
        with pytest.raises(ConfigurationError, match="3x3"):
            Rotation(((1.0, 0.0), (0.0, 1.0)))
        with pytest.raises(ConfigurationError, match="finite"):
            Rotation.from_array(np.full((3, 3), np.nan))

    def test_roll_pitch_yaw_zero_is_identity(self):
        """Test that zero Euler angles give the identity rotation."""
        np.testing.assert_allclose(RollPitchYaw().to_matrix(), np.eye(3))

    def test_yaw_turns_left(self):
        """Test that a quarter turn of yaw looks down -x."""
        basis = RollPitchYaw(yaw=math.pi / 2.0).to_matrix()
        np.testing.assert_allclose(-basis[:, 2], [-1.0, 0.0, 0.0], atol=1e-12)

    def test_pitch_tilts_up(self):
        """Test that positive pitch raises the view direction."""
        basis = RollPitchYaw(pitch=0.3).to_matrix()
        assert -basis[2, 2] < 0.0
        assert -basis[1, 2] > 0.0

    def test_camera_converts_euler_angles(self):
        """Test that a RollPitchYaw direction is stored as a Rotation."""
        camera = Camera((0.0, 0.0, 0.0), RollPitchYaw(yaw=0.5))
        assert isinstance(camera.direction, Rotation)
        np.testing.assert_allclose(camera.rotation(), RollPitchYaw(yaw=0.5).to_matrix())


class TestCameraValue:
    """Tests for Camera validation and equality."""

    def test_compares_by_value(self, pinhole_camera):
        """Test that equal parameters give equal cameras."""
        other = Camera(
            position=np.array([0.0, 0.0, 0.0]),
            direction=LookAt((0.0, 0.0, -1.0)),
        )
        assert other == pinhole_camera
        assert dataclasses.replace(pinhole_camera, aperture=0.5) != pinhole_camera

    def test_is_immutable(self, pinhole_camera):
        """Test that camera fields cannot be reassigned."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            pinhole_camera.aperture = 1.0  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"vertical_fov_degrees": 0.0},
            {"vertical_fov_degrees": 180.0},
            {"aperture": -0.1},
            {"focus_distance": 0.0},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Test that out-of-range parameters are rejected."""
        with pytest.raises(ConfigurationError):
            Camera((0.0, 0.0, 0.0), LookAt((0.0, 0.0, -1.0)), **kwargs)

    def test_look_at_own_position_rejected(self):
        """Test that a camera sitting on its look-at target is not constructed."""
        with pytest.raises(ConfigurationError, match="coincides"):
            Camera((0.0, 0.0, -1.0), LookAt((0.0, 0.0, -1.0)))

    def test_replace_onto_target_rejected(self, pinhole_camera):
        """Test that moving a look-at camera onto its target fails at replace time."""
        with pytest.raises(ConfigurationError, match="coincides"):
            dataclasses.replace(pinhole_camera, position=(0.0, 0.0, -1.0))

    def test_look_at_parallel_up_rejected(self):
        """Test that a camera looking straight down its up vector is not constructed."""
        with pytest.raises(ConfigurationError, match="parallel"):
            Camera((0.0, 5.0, 0.0), LookAt((0.0, 0.0, 0.0)))

    def test_unsupported_direction(self):
        """Test that an arbitrary direction object is rejected."""
        with pytest.raises(ConfigurationError, match="Unsupported"):
            Camera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))  # type: ignore[arg-type]


class TestViewport:
    """Tests for viewport geometry and primary rays."""

    def test_geometry_for_known_camera(self, pinhole_camera):
        """Test the image plane of a 90 degree camera with a 2:1 aspect."""
        viewport = pinhole_camera.viewport(200, 100)
        assert isinstance(viewport, Viewport)
        np.testing.assert_allclose(viewport.horizontal, [4.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(viewport.vertical, [0.0, 2.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(viewport.lower_left_corner, [-2.0, -1.0, -1.0], atol=1e-12)
        assert viewport.lens_radius == 0.0
        assert (viewport.image_width, viewport.image_height) == (200.0, 100.0)

    def test_center_ray(self, pinhole_camera, rng):
        """Test that the image center looks straight down -z."""
        ray = pinhole_camera.viewport(200, 100).emit_ray((0.5, 0.5), rng)
        np.testing.assert_allclose(ray.origin, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0], atol=1e-12)

    def test_corner_rays(self, pinhole_camera, rng):
        """Test that (0, 0) is the lower-left and (1, 1) the upper-right corner."""
        viewport = pinhole_camera.viewport(200, 100)
        np.testing.assert_allclose(
            viewport.emit_ray((0.0, 0.0), rng).direction, [-2.0, -1.0, -1.0], atol=1e-12
        )
        np.testing.assert_allclose(
            viewport.emit_ray((1.0, 1.0), rng).direction, [2.0, 1.0, -1.0], atol=1e-12
        )

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_non_positive_size(self, pinhole_camera, size):
        """Test that an empty output size is rejected."""
        with pytest.raises(ConfigurationError, match="positive"):
            pinhole_camera.viewport(*size)

    def test_thin_lens_origins_on_lens(self, rng):
        """Test that ray origins stay within the lens radius in the lens plane."""
        camera = Camera(
            (0.0, 0.0, 0.0),
            LookAt((0.0, 0.0, -1.0)),
            aperture=2.0,
            focus_distance=3.0,
        )
        viewport = camera.viewport(64, 64)
        for _ in range(100):
            ray = viewport.emit_ray((0.3, 0.7), rng)
            assert ray.origin[2] == 0.0
            assert np.hypot(ray.origin[0], ray.origin[1]) < 1.0

    def test_thin_lens_rays_converge_at_focus(self, rng):
        """Test that all lens samples for one image point meet at the focus plane."""
        camera = Camera(
            (0.0, 0.0, 0.0),
            LookAt((0.0, 0.0, -1.0)),
            aperture=1.0,
            focus_distance=3.0,
        )
        viewport = camera.viewport(64, 64)
        target = viewport.emit_ray((0.25, 0.75), rng).at(1.0)
        for _ in range(20):
            np.testing.assert_allclose(
                viewport.emit_ray((0.25, 0.75), rng).at(1.0), target, atol=1e-12
            )
        assert target[2] == pytest.approx(-3.0)
