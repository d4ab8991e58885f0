# -*- coding: utf-8 -*-
"""
Camera Factory - Build and write camera models for a trajectory.

Turns each ``(position, rotation)`` pair of a ``Trajectory`` into a
camera with the requested intrinsics: a ``PinholeCamera`` (pixel pitch 1,
no distortion) or a frame ``SensorModelCamera``. Also names and writes
camera files under an output prefix.

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

# Standard library
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

# SatSim internal
from satsim.camera.base import CameraModel
from satsim.camera.pinhole import PinholeCamera
from satsim.camera.sensor_model import SensorModelCamera
from satsim.geometry.datum import Datum
from satsim.trajectory import Trajectory
from satsim.vocabulary import CameraType

logger = logging.getLogger(__name__)


def output_base(prefix: Union[str, Path], name: Union[str, int]) -> str:
    """Output path without extension, ``{prefix}-{name}``.

    Integer names are zero padded to five digits.
    """
    if isinstance(name, int):
        name = f"{name:05d}"
    return f"{prefix}-{name}"


def generate_cameras(
    trajectory: Trajectory,
    focal_length: float,
    optical_center: Tuple[float, float],
    image_size: Tuple[int, int],
    camera_type: CameraType = CameraType.PINHOLE,
    datum: Optional[Datum] = None,
) -> List[CameraModel]:
    """One camera per trajectory entry.

    Parameters
    ----------
    trajectory : Trajectory
    focal_length : float
        Focal length in pixels.
    optical_center : Tuple[float, float]
        Principal point ``(col, row)`` in pixels.
    image_size : Tuple[int, int]
        Image ``(width, height)``.
    camera_type : CameraType, default=CameraType.PINHOLE
    datum : Datum, optional
        Required for ``CameraType.SENSOR_MODEL``, whose state records the
        target body radii.

    Returns
    -------
    List[CameraModel]
    """
    camera_type = CameraType(camera_type)
    if camera_type is CameraType.SENSOR_MODEL and datum is None:
        raise ValueError("A datum is required to build sensor model cameras")

    cameras: List[CameraModel] = []
    for center, rotation in zip(trajectory.positions, trajectory.rotations):
        if camera_type is CameraType.PINHOLE:
            cam = PinholeCamera(
                center=center,
                rotation=rotation,
                focal_length=focal_length,
                optical_center=optical_center,
                image_size=image_size,
            )
        else:
            cam = SensorModelCamera.create_frame_model(
                image_size=image_size,
                optical_center=optical_center,
                focal_length=focal_length,
                semi_major_axis=datum.semi_major_axis,
                semi_minor_axis=datum.semi_minor_axis,
                center=center,
                rotation=rotation,
            )
        cameras.append(cam)

    logger.info("Generated %d %s camera(s)", len(cameras), camera_type.value)
    return cameras


def write_cameras(
    cameras: Sequence[CameraModel],
    bases: Sequence[str],
) -> List[Path]:
    """Save each camera to ``base + camera.file_extension``.

    Returns
    -------
    List[Path]
        Written camera files.
    """
    paths = []
    for cam, base in zip(cameras, bases):
        path = Path(base + cam.file_extension)
        cam.save_state(path)
        logger.info("Writing: %s", path)
        paths.append(path)
    return paths
