# -*- coding: utf-8 -*-
"""
Perspective Projection Helpers - Closed-form frame camera math.

Vectorized projection, back-projection, and pose transformation for an
ideal frame camera with square pixels and no distortion. The camera
frame has x along image columns, y along image rows, and z along the
boresight; ``rotation`` maps camera-frame vectors to the world frame.

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
from typing import Tuple

# Third-party
import numpy as np

# SatSim internal
from satsim.exceptions import ProjectionError
from satsim.geometry.rotations import decompose_similarity


def project_points(
    points: np.ndarray,
    center: np.ndarray,
    rotation: np.ndarray,
    focal_length: float,
    optical_center: Tuple[float, float],
) -> np.ndarray:
    """Project world points to image coordinates.

    Parameters
    ----------
    points : np.ndarray
        World points, shape ``(N, 3)``.
    center : np.ndarray
        Camera centre, shape ``(3,)``.
    rotation : np.ndarray
        Camera-to-world rotation, shape ``(3, 3)``.
    focal_length : float
        Focal length in pixels.
    optical_center : Tuple[float, float]
        Principal point ``(x, y)`` in image coordinates.

    Returns
    -------
    np.ndarray
        Image coordinates ``(x, y)``, shape ``(N, 2)``.

    Raises
    ------
    ProjectionError
        If any point is at or behind the camera plane.
    """
    cam = (np.atleast_2d(points) - center) @ rotation
    depth = cam[:, 2]
    if np.any(~(depth > 0.0)):
        raise ProjectionError(
            f"{int(np.sum(~(depth > 0.0)))} point(s) lie behind the camera"
        )
    xy = focal_length * cam[:, :2] / depth[:, None]
    return xy + np.asarray(optical_center, dtype=np.float64)


def pixel_directions(
    xs: np.ndarray,
    ys: np.ndarray,
    rotation: np.ndarray,
    focal_length: float,
    optical_center: Tuple[float, float],
) -> np.ndarray:
    """Unit world-frame ray directions through image coordinates.

    Returns
    -------
    np.ndarray
        Shape ``(N, 3)``.
    """
    xs = np.asarray(xs, dtype=np.float64).ravel()
    ys = np.asarray(ys, dtype=np.float64).ravel()
    cam = np.column_stack([
        (xs - optical_center[0]) / focal_length,
        (ys - optical_center[1]) / focal_length,
        np.ones_like(xs),
    ])
    world = cam @ rotation.T
    return world / np.linalg.norm(world, axis=1, keepdims=True)


def transform_pose(
    center: np.ndarray,
    rotation: np.ndarray,
    transform: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Apply a 4x4 similarity transform to a camera pose.

    The camera centre moves with the full transform; the rotation is
    premultiplied by the rotational part only, so intrinsics are kept.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        New ``(center, rotation)``.
    """
    scale, rot, trans = decompose_similarity(transform)
    new_center = scale * (rot @ center) + trans
    return new_center, rot @ rotation
