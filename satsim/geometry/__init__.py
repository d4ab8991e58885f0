# -*- coding: utf-8 -*-
"""
Geometry Module - Datum, Cartesian conversion, and rotation helpers.

Key Classes
-----------
- Datum: Reference ellipsoid with geodetic <-> Cartesian conversion and
  ray/ellipsoid intersection

Key Functions
-------------
- roll_pitch_yaw_matrix: Aerospace yaw-pitch-roll rotation
- matrix_to_quaternion / quaternion_to_matrix
- decompose_similarity / compose_similarity: 4x4 similarity transforms

Dependencies
------------
pyproj
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

from satsim.geometry.datum import Datum
from satsim.geometry.rotations import (
    roll_pitch_yaw_matrix,
    boresight_frame,
    matrix_to_quaternion,
    quaternion_to_matrix,
    decompose_similarity,
    compose_similarity,
)

__all__ = [
    'Datum',
    'roll_pitch_yaw_matrix',
    'boresight_frame',
    'matrix_to_quaternion',
    'quaternion_to_matrix',
    'decompose_similarity',
    'compose_similarity',
]
