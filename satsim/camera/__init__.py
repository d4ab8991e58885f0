# -*- coding: utf-8 -*-
"""
Camera Module - Camera model interface, pinhole and sensor model variants.

Provides the ``CameraModel`` interface used by the image synthesizer, the
closed-form ``PinholeCamera``, the plugin-backed ``SensorModelCamera``,
and helpers to load cameras from files and camera lists.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-01-30

Modified
--------
2026-10-16
"""

from satsim.camera.base import CameraModel
from satsim.camera.pinhole import PinholeCamera
from satsim.camera.sensor_model import (
    DEFAULT_PRECISION,
    LOOSE_PRECISION,
    SensorModelCamera,
    SensorModelProvider,
    SensorModelRegistry,
    get_registry,
)
from satsim.camera.frame_provider import FrameSensorProvider
from satsim.camera.camera_list import load_camera, read_camera_list

__all__ = [
    'CameraModel',
    'PinholeCamera',
    'SensorModelCamera',
    'SensorModelProvider',
    'SensorModelRegistry',
    'FrameSensorProvider',
    'get_registry',
    'load_camera',
    'read_camera_list',
    'DEFAULT_PRECISION',
    'LOOSE_PRECISION',
]
