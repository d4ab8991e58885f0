# -*- coding: utf-8 -*-
"""
Camera Factory Tests - Generating, writing, and listing camera files.

Dependencies
------------
pytest
rasterio
pyproj

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

from satsim.camera.camera_list import load_camera, read_camera_list
from satsim.camera.pinhole import PinholeCamera
from satsim.camera.sensor_model import SensorModelCamera
from satsim.exceptions import ArgumentError
from satsim.factory import generate_cameras, output_base, write_cameras
from satsim.trajectory import FixedAngles, compute_trajectory
from satsim.vocabulary import CameraType


@pytest.fixture
def trajectory(dem_georef):
    return compute_trajectory(
        (-100.0, 0.0, 500.0), (100.0, 0.0, 500.0), 3, dem_georef,
        FixedAngles(1.0, -2.0, 3.0),
    )


# ---------------------------------------------------------------------------
# Output names
# ---------------------------------------------------------------------------

class TestOutputBase:
    """``{prefix}-{name}`` output paths."""

    def test_index_padded(self):
        assert output_base('run/sim', 7) == 'run/sim-00007'

    def test_name_kept(self):
        assert output_base('run/sim', 'img_a') == 'run/sim-img_a'


# ---------------------------------------------------------------------------
# Generation and writing
# ---------------------------------------------------------------------------

class TestGenerateCameras:
    """One camera per trajectory pose."""

    def test_pinhole(self, trajectory):
        cams = generate_cameras(trajectory, 1000.0, (50.0, 40.0), (100, 80))
        assert len(cams) == 3
        assert all(isinstance(c, PinholeCamera) for c in cams)
        np.testing.assert_array_equal(cams[1].center, trajectory.positions[1])
        np.testing.assert_array_equal(cams[1].rotation, trajectory.rotations[1])
        assert cams[0].image_size == (100, 80)

    def test_sensor_model(self, trajectory, dem_georef):
        cams = generate_cameras(
            trajectory, 1000.0, (50.0, 40.0), (100, 80),
            camera_type=CameraType.SENSOR_MODEL, datum=dem_georef.datum,
        )
        assert all(isinstance(c, SensorModelCamera) for c in cams)
        np.testing.assert_allclose(cams[2].camera_center(), trajectory.positions[2])
        assert cams[0].semi_major_axis == dem_georef.datum.semi_major_axis

    def test_sensor_model_needs_datum(self, trajectory):
        with pytest.raises(ValueError):
            generate_cameras(
                trajectory, 1000.0, (50.0, 40.0), (100, 80),
                camera_type='sensor_model',
            )

    def test_write_pinhole(self, trajectory, tmp_path):
        cams = generate_cameras(trajectory, 1000.0, (50.0, 40.0), (100, 80))
        bases = [output_base(tmp_path / 'sim', i) for i in range(3)]
        paths = write_cameras(cams, bases)
        assert [p.name for p in paths] == [
            'sim-00000.tsai', 'sim-00001.tsai', 'sim-00002.tsai',
        ]
        loaded = PinholeCamera.load(paths[1])
        np.testing.assert_array_equal(loaded.center, cams[1].center)

    def test_write_sensor_model(self, trajectory, dem_georef, tmp_path):
        cams = generate_cameras(
            trajectory, 1000.0, (50.0, 40.0), (100, 80),
            camera_type=CameraType.SENSOR_MODEL, datum=dem_georef.datum,
        )
        paths = write_cameras(cams, [str(tmp_path / 'sm-a'), str(tmp_path / 'sm-b'),
                                     str(tmp_path / 'sm-c')])
        assert paths[0].suffix == '.json'
        assert SensorModelCamera.load(paths[0]).state() == cams[0].state()


# ---------------------------------------------------------------------------
# Camera lists
# ---------------------------------------------------------------------------

class TestCameraList:
    """Reading cameras named in a list file."""

    def test_relative_paths_and_comments(self, trajectory, tmp_path, monkeypatch):
        """Relative entries are read from the working directory."""
        cams = generate_cameras(trajectory, 1000.0, (50.0, 40.0), (100, 80))
        sub = tmp_path / 'cams'
        sub.mkdir()
        write_cameras(cams[:2], [str(sub / 'left'), str(sub / 'right')])
        listing = sub / 'list.txt'
        listing.write_text("# stereo pair\ncams/left.tsai\n\n  cams/right.tsai  \n")
        monkeypatch.chdir(tmp_path)

        loaded, names = read_camera_list(listing, image_size=(100, 80))
        assert names == ['left', 'right']
        assert loaded[1].image_size == (100, 80)
        np.testing.assert_array_equal(loaded[0].center, cams[0].center)

    def test_mixed_types(self, trajectory, dem_georef, tmp_path, monkeypatch):
        pin = generate_cameras(trajectory, 1000.0, (50.0, 40.0), (100, 80))[0]
        sm = generate_cameras(
            trajectory, 1000.0, (50.0, 40.0), (100, 80),
            camera_type=CameraType.SENSOR_MODEL, datum=dem_georef.datum,
        )[1]
        write_cameras([pin, sm], [str(tmp_path / 'p'), str(tmp_path / 's')])
        listing = tmp_path / 'list.txt'
        listing.write_text(f"p.tsai\n{tmp_path / 's.json'}\n")
        monkeypatch.chdir(tmp_path)

        loaded, names = read_camera_list(listing)
        assert isinstance(loaded[0], PinholeCamera)
        assert isinstance(loaded[1], SensorModelCamera)
        assert names == ['p', 's']

    def test_empty_list(self, tmp_path):
        listing = tmp_path / 'list.txt'
        listing.write_text("# nothing\n\n")
        with pytest.raises(ArgumentError):
            read_camera_list(listing)

    def test_missing_list(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_camera_list(tmp_path / 'list.txt')

    def test_missing_camera(self, tmp_path):
        listing = tmp_path / 'list.txt'
        listing.write_text("gone.tsai\n")
        with pytest.raises(FileNotFoundError):
            read_camera_list(listing)

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(ArgumentError):
            load_camera(tmp_path / 'camera.xml')
