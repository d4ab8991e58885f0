# -*- coding: utf-8 -*-
"""
Rotations - Attitude and similarity-transform helpers.

Thin, vectorization-friendly wrappers around
``scipy.spatial.transform.Rotation`` for the conventions used by the
camera and trajectory code:

- Roll, pitch, and yaw follow the aerospace sequence: yaw about z, then
  pitch about y, then roll about x, i.e. ``R = Rz(yaw) @ Ry(pitch) @
  Rx(roll)``.
- Quaternions are scalar-last ``(x, y, z, w)``, as returned by scipy.
- A 4x4 similarity transform is ``[[s * R, t], [0, 0, 0, 1]]``.

Dependencies
------------
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

# Standard library
from typing import Tuple, Union

# Third-party
import numpy as np
from scipy.spatial.transform import Rotation


def roll_pitch_yaw_matrix(
    roll: Union[float, np.ndarray],
    pitch: Union[float, np.ndarray],
    yaw: Union[float, np.ndarray],
    degrees: bool = True,
) -> np.ndarray:
    """Rotation matrix for the aerospace yaw-pitch-roll sequence.

    Parameters
    ----------
    roll, pitch, yaw : float or np.ndarray
        Angles about the x, y, and z axes. Arrays broadcast together.
    degrees : bool, default=True
        Whether the angles are in degrees.

    Returns
    -------
    np.ndarray
        ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``, shape ``(3, 3)`` for scalar
        angles or ``(N, 3, 3)`` for arrays.
    """
    angles = np.stack(np.broadcast_arrays(yaw, pitch, roll), axis=-1)
    return Rotation.from_euler('ZYX', angles, degrees=degrees).as_matrix()


def matrix_to_quaternion(rotation: np.ndarray) -> np.ndarray:
    """Convert a ``(3, 3)`` rotation matrix to an ``(x, y, z, w)`` quaternion."""
    return Rotation.from_matrix(np.asarray(rotation, dtype=np.float64)).as_quat()


def quaternion_to_matrix(quaternion: np.ndarray) -> np.ndarray:
    """Convert an ``(x, y, z, w)`` quaternion to a ``(3, 3)`` rotation matrix."""
    return Rotation.from_quat(np.asarray(quaternion, dtype=np.float64)).as_matrix()


def decompose_similarity(
    transform: np.ndarray,
) -> Tuple[float, np.ndarray, np.ndarray]:
    """Split a 4x4 similarity transform into scale, rotation, translation.

    Parameters
    ----------
    transform : np.ndarray
        ``(4, 4)`` matrix ``[[s * R, t], [0, 0, 0, 1]]``.

    Returns
    -------
    Tuple[float, np.ndarray, np.ndarray]
        ``(scale, rotation (3, 3), translation (3,))``.

    Raises
    ------
    ValueError
        If the matrix is not 4x4 or its linear part is singular.
    """
    T = np.asarray(transform, dtype=np.float64)
    if T.shape != (4, 4):
        raise ValueError(f"Expected a (4, 4) transform, got shape {T.shape}")

    linear = T[:3, :3]
    det = np.linalg.det(linear)
    if det <= 0.0:
        raise ValueError(
            f"Transform linear part must have positive determinant, got {det}"
        )
    scale = float(np.cbrt(det))
    return scale, linear / scale, T[:3, 3].copy()


def compose_similarity(
    scale: float,
    rotation: np.ndarray,
    translation: np.ndarray,
) -> np.ndarray:
    """Build a 4x4 similarity transform from its parts."""
    T = np.eye(4)
    T[:3, :3] = scale * np.asarray(rotation, dtype=np.float64)
    T[:3, 3] = np.asarray(translation, dtype=np.float64)
    return T


def boresight_frame(
    along: np.ndarray,
    boresight: np.ndarray,
    tolerance: float = 1e-9,
) -> np.ndarray:
    """Right-handed camera frames from a travel direction and a boresight.

    The frame columns are ``(x, y, z)`` with ``z`` the unit boresight,
    ``x`` the part of ``along`` orthogonal to ``z``, and ``y = z x x``.

    Parameters
    ----------
    along : np.ndarray
        Direction of travel, shape ``(N, 3)``.
    boresight : np.ndarray
        Look direction, shape ``(N, 3)``.
    tolerance : float, default=1e-9
        Minimum sine of the angle between ``along`` and ``boresight``.

    Returns
    -------
    np.ndarray
        Rotation matrices, shape ``(N, 3, 3)``.

    Raises
    ------
    ValueError
        If a travel direction is zero or parallel to its boresight.
    """
    along = np.atleast_2d(np.asarray(along, dtype=np.float64))
    z = np.atleast_2d(np.asarray(boresight, dtype=np.float64))
    z = z / np.linalg.norm(z, axis=1, keepdims=True)

    along_norm = np.linalg.norm(along, axis=1)
    x = along - np.einsum('ij,ij->i', along, z)[:, None] * z
    x_norm = np.linalg.norm(x, axis=1)
    if np.any(~(x_norm > tolerance * along_norm)) or np.any(along_norm == 0):
        raise ValueError(
            "Direction of travel is zero or parallel to the boresight"
        )
    x = x / x_norm[:, None]
    y = np.cross(z, x)
    return np.stack([x, y, z], axis=-1)
