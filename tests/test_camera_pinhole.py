# -*- coding: utf-8 -*-
"""
Pinhole Camera Tests - Projection, .tsai serialization, and transforms.

Dependencies
------------
pytest
scipy

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-16

Modified
--------
2026-10-16
"""

import numpy as np
import pytest

from satsim.camera.pinhole import PinholeCamera
from satsim.exceptions import InputError, NotInitializedError, ProjectionError
from satsim.geometry.rotations import (
    compose_similarity,
    quaternion_to_matrix,
    roll_pitch_yaw_matrix,
)

# Looking down -x from above (lon 0, lat 0): columns east, rows south
NADIR_ROTATION = np.array([
    [0.0, 0.0, -1.0],
    [1.0, 0.0, 0.0],
    [0.0, -1.0, 0.0],
])
CENTER = np.array([6378637.0, 10.0, -20.0])


@pytest.fixture
def camera():
    """Pinhole camera 500 m above the equator at longitude 0."""
    return PinholeCamera(
        center=CENTER,
        rotation=NADIR_ROTATION,
        focal_length=1000.0,
        optical_center=(50.0, 40.0),
        image_size=(100, 80),
    )


@pytest.fixture
def ground_points(camera):
    """A few points in front of the camera."""
    rng = np.random.default_rng(7)
    pixels = rng.uniform(0, 100, size=(10, 2))
    _, dirs = camera.rays(pixels[:, 0], pixels[:, 1])
    depths = rng.uniform(400, 600, size=10)
    return CENTER + depths[:, None] * dirs


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

class TestProjection:
    """project / unproject / camera_center."""

    def test_boresight_hits_optical_center(self, camera):
        """A point on the boresight projects to the optical centre."""
        point = CENTER + 500.0 * NADIR_ROTATION[:, 2]
        np.testing.assert_allclose(camera.project(point), [50.0, 40.0], atol=1e-9)

    def test_unproject_project_consistent(self, camera):
        """Points along a pixel's ray project back to that pixel."""
        direction = camera.unproject((10.0, 20.0))
        assert np.linalg.norm(direction) == pytest.approx(1.0)
        point = camera.camera_center() + 750.0 * direction
        np.testing.assert_allclose(camera.project(point), [10.0, 20.0], atol=1e-8)

    def test_column_runs_east(self, camera):
        """Increasing column moves the ray toward +y (east at lon 0)."""
        d0 = camera.unproject((40.0, 40.0))
        d1 = camera.unproject((60.0, 40.0))
        assert d1[1] > d0[1]

    def test_pixel_scale(self, camera):
        """With focal length 1000, one pixel spans depth / 1000 meters."""
        ground = CENTER + 500.0 * NADIR_ROTATION[:, 2]
        shifted = ground + np.array([0.0, 0.5, 0.0])
        col, row = camera.project(shifted)
        assert col == pytest.approx(51.0)
        assert row == pytest.approx(40.0)

    def test_camera_center_constant(self, camera):
        np.testing.assert_array_equal(camera.camera_center((0, 0)), CENTER)
        np.testing.assert_array_equal(camera.camera_center((99, 79)), CENTER)

    def test_vectorized_matches_scalar(self, camera, ground_points):
        pixels = camera.project_points(ground_points)
        for point, pixel in zip(ground_points, pixels):
            np.testing.assert_allclose(camera.project(point), pixel)

    def test_behind_camera(self, camera):
        """Points behind the camera raise ProjectionError."""
        with pytest.raises(ProjectionError):
            camera.project(CENTER - 100.0 * NADIR_ROTATION[:, 2])

    def test_orientation_quaternion(self, camera):
        """orientation() returns the camera-to-world rotation."""
        q = camera.orientation()
        assert q.shape == (4,)
        np.testing.assert_allclose(quaternion_to_matrix(q), NADIR_ROTATION, atol=1e-12)


# ---------------------------------------------------------------------------
# Uninitialized
# ---------------------------------------------------------------------------

class TestUninitialized:
    """Capabilities on an unconstructed camera."""

    def test_project_raises(self):
        cam = PinholeCamera()
        assert not cam.initialized
        with pytest.raises(NotInitializedError):
            cam.project([0.0, 0.0, 0.0])

    def test_unproject_raises(self):
        with pytest.raises(NotInitializedError):
            PinholeCamera().unproject((1.0, 2.0))

    def test_is_projection_error(self):
        """NotInitializedError is also a ProjectionError."""
        with pytest.raises(ProjectionError):
            PinholeCamera().camera_center()

    def test_save_raises(self, tmp_path):
        with pytest.raises(NotInitializedError):
            PinholeCamera().save_state(tmp_path / 'cam.tsai')

    def test_bad_focal_length(self):
        with pytest.raises(ValueError):
            PinholeCamera(focal_length=0.0)


# ---------------------------------------------------------------------------
# .tsai serialization
# ---------------------------------------------------------------------------

class TestTsai:
    """Reading and writing .tsai files."""

    def test_layout(self, camera):
        lines = camera.to_tsai().splitlines()
        assert lines[0] == 'VERSION_4'
        assert lines[1] == 'PINHOLE'
        assert lines[2] == 'fu = 1000.0'
        assert lines[3] == 'fv = 1000.0'
        assert 'pitch = 1.0' in lines
        assert lines[-1] == 'NULL'

    def test_save_load_idempotent(self, camera, ground_points, tmp_path):
        """Reloading a saved camera reproduces projections."""
        path = tmp_path / 'cam.tsai'
        camera.save_state(path)
        loaded = PinholeCamera.load(path, image_size=(100, 80))

        np.testing.assert_array_equal(loaded.center, camera.center)
        np.testing.assert_array_equal(loaded.rotation, camera.rotation)
        np.testing.assert_allclose(
            loaded.project_points(ground_points),
            camera.project_points(ground_points),
            atol=1e-8,
        )
        _, d0 = camera.rays(np.array([3.0]), np.array([4.0]))
        _, d1 = loaded.rays(np.array([3.0]), np.array([4.0]))
        np.testing.assert_allclose(d1, d0, atol=1e-8)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PinholeCamera.load(tmp_path / 'missing.tsai')

    def test_rejects_distortion(self, camera):
        text = camera.to_tsai().replace('NULL', 'TSAI\nk1 = 0.1')
        with pytest.raises(InputError, match='distortion'):
            PinholeCamera.from_tsai(text)

    def test_rejects_non_square_pixels(self, camera):
        text = camera.to_tsai().replace('fv = 1000.0', 'fv = 900.0')
        with pytest.raises(InputError, match='square'):
            PinholeCamera.from_tsai(text)

    def test_rejects_other_models(self):
        with pytest.raises(InputError):
            PinholeCamera.from_tsai('VERSION_4\nOPTICAL_BAR\n')

    def test_missing_fields(self):
        with pytest.raises(InputError, match='missing'):
            PinholeCamera.from_tsai('VERSION_4\nPINHOLE\nfu = 1\nfv = 1\nNULL\n')

    def test_malformed_number(self, camera):
        text = camera.to_tsai().replace('fv = 1000.0', 'fv = one')
        with pytest.raises(InputError, match='Malformed'):
            PinholeCamera.from_tsai(text)


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

T1 = compose_similarity(1.5, roll_pitch_yaw_matrix(0.0, 0.0, 30.0), [1.0, 2.0, 3.0])
T2 = compose_similarity(0.8, roll_pitch_yaw_matrix(10.0, -5.0, 0.0), [-4.0, 5.0, 6.0])


class TestTransform:
    """apply_transform and save_transformed_state."""

    def test_composition(self, camera, ground_points):
        """Applying T1 then T2 equals applying T2 @ T1."""
        a = PinholeCamera(camera.center, camera.rotation, 1000.0, (50.0, 40.0))
        b = PinholeCamera(camera.center, camera.rotation, 1000.0, (50.0, 40.0))
        a.apply_transform(T1)
        a.apply_transform(T2)
        b.apply_transform(T2 @ T1)

        np.testing.assert_allclose(a.camera_center(), b.camera_center(), rtol=1e-12)
        moved = (T2 @ T1 @ np.column_stack([ground_points, np.ones(10)]).T).T[:, :3]
        np.testing.assert_allclose(
            a.project_points(moved), b.project_points(moved), atol=1e-6
        )

    def test_transform_moves_scene_with_camera(self, camera, ground_points):
        """Transformed camera sees transformed points at the same pixels."""
        before = camera.project_points(ground_points)
        camera.apply_transform(T1)
        moved = (T1 @ np.column_stack([ground_points, np.ones(10)]).T).T[:, :3]
        np.testing.assert_allclose(camera.project_points(moved), before, atol=1e-6)

    def test_intrinsics_unchanged(self, camera):
        camera.apply_transform(T1)
        assert camera.focal_length == 1000.0
        assert camera.optical_center == (50.0, 40.0)

    def test_save_transformed_state(self, camera, tmp_path):
        """Saving a transformed copy leaves the live camera untouched."""
        path = tmp_path / 'moved.tsai'
        camera.save_transformed_state(path, T1)
        np.testing.assert_array_equal(camera.center, CENTER)

        loaded = PinholeCamera.load(path)
        expected = PinholeCamera(CENTER, NADIR_ROTATION, 1000.0, (50.0, 40.0))
        expected.apply_transform(T1)
        np.testing.assert_allclose(loaded.center, expected.center)
        np.testing.assert_allclose(loaded.rotation, expected.rotation)

    def test_singular_transform(self, camera):
        with pytest.raises(ValueError):
            camera.apply_transform(np.zeros((4, 4)))
