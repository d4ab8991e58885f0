# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for SatSim options.

Single source of truth for the controlled vocabularies accepted on the
command line and in YAML option files, so values are consistent and
typo-free across the configuration, factory, and synthesis layers.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-10

Modified
--------
2026-10-16
"""

from enum import Enum


class CameraType(Enum):
    """Camera model written for each generated camera.

    ``PINHOLE`` writes closed-form ``.tsai`` pinhole files.
    ``SENSOR_MODEL`` writes the serialized state of a frame sensor model.
    """

    PINHOLE = "pinhole"
    SENSOR_MODEL = "sensor_model"


class Interpolation(Enum):
    """Resampling used when sampling the orthoimage."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"

    @property
    def order(self) -> int:
        """Spline order understood by ``scipy.ndimage.map_coordinates``."""
        return 0 if self is Interpolation.NEAREST else 1
