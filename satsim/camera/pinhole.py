# -*- coding: utf-8 -*-
"""
Pinhole Camera - Closed-form frame camera with .tsai serialization.

``PinholeCamera`` is an ideal projective camera: square pixels of pitch
1, no lens distortion, a single focal length in pixels, an optical
centre, a camera centre, and a camera-to-world rotation. It reads and
writes the plain-text ``.tsai`` pinhole format used by stereo
photogrammetry tools::

    VERSION_4
    PINHOLE
    fu = 1000
    fv = 1000
    cu = 50
    cv = 50
    u_direction = 1 0 0
    v_direction = 0 1 0
    w_direction = 0 0 1
    C = x y z
    R = r00 r01 r02 r10 r11 r12 r20 r21 r22
    pitch = 1
    NULL

``R`` is the camera-to-world rotation in row-major order.

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

# Standard library
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.camera._projection import (
    pixel_directions,
    project_points,
    transform_pose,
)
from satsim.camera.base import CameraModel
from satsim.exceptions import ArgumentError, InputError
from satsim.geometry.rotations import matrix_to_quaternion

logger = logging.getLogger(__name__)

_TSAI_VERSION = 'VERSION_4'
_TSAI_TYPE = 'PINHOLE'


def _fmt(value: float) -> str:
    """Shortest text that round-trips a float exactly."""
    return repr(float(value))


class PinholeCamera(CameraModel):
    """Closed-form pinhole camera.

    Parameters
    ----------
    center : Sequence[float], optional
        Camera centre in world coordinates.
    rotation : np.ndarray, optional
        ``(3, 3)`` camera-to-world rotation.
    focal_length : float, optional
        Focal length in pixels.
    optical_center : Tuple[float, float], optional
        Principal point ``(col, row)`` in pixels.
    image_size : Tuple[int, int], optional
        Image ``(width, height)``. Not stored in ``.tsai`` files.

    A camera built without ``center``, ``rotation``, ``focal_length`` and
    ``optical_center`` is uninitialized; every capability then raises
    ``NotInitializedError``.

    Examples
    --------
    >>> cam = PinholeCamera(
    ...     center=[0.0, 0.0, 7e6], rotation=np.diag([1.0, -1.0, -1.0]),
    ...     focal_length=1000.0, optical_center=(50.0, 50.0),
    ...     image_size=(100, 100),
    ... )
    >>> cam.project(cam.camera_center() + 500.0 * cam.unproject((10, 20)))
    array([10., 20.])
    """

    camera_type = 'pinhole'
    file_extension = '.tsai'

    def __init__(
        self,
        center: Optional[Sequence[float]] = None,
        rotation: Optional[np.ndarray] = None,
        focal_length: Optional[float] = None,
        optical_center: Optional[Tuple[float, float]] = None,
        image_size: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.center = (
            np.asarray(center, dtype=np.float64).reshape(3)
            if center is not None else None
        )
        self.rotation = (
            np.asarray(rotation, dtype=np.float64).reshape(3, 3)
            if rotation is not None else None
        )
        self.focal_length = (
            float(focal_length) if focal_length is not None else None
        )
        if focal_length is not None and not self.focal_length > 0:
            raise ArgumentError(
                f"focal_length must be positive, got {focal_length}"
            )
        self.optical_center = (
            (float(optical_center[0]), float(optical_center[1]))
            if optical_center is not None else None
        )
        self._image_size = (
            (int(image_size[0]), int(image_size[1]))
            if image_size is not None else None
        )
        self.pixel_pitch = 1.0

    @property
    def initialized(self) -> bool:
        return (
            self.center is not None
            and self.rotation is not None
            and self.focal_length is not None
            and self.optical_center is not None
        )

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        return self._image_size

    def project_points(self, points: np.ndarray) -> np.ndarray:
        self._require_initialized()
        return project_points(
            np.asarray(points, dtype=np.float64), self.center,
            self.rotation, self.focal_length, self.optical_center,
        )

    def rays(
        self, cols: np.ndarray, rows: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        self._require_initialized()
        directions = pixel_directions(
            cols, rows, self.rotation, self.focal_length, self.optical_center,
        )
        origins = np.broadcast_to(self.center, directions.shape).copy()
        return origins, directions

    def orientation(
        self, pixel: Optional[Sequence[float]] = None
    ) -> np.ndarray:
        self._require_initialized()
        return matrix_to_quaternion(self.rotation)

    def apply_transform(self, transform: np.ndarray) -> None:
        self._require_initialized()
        self.center, self.rotation = transform_pose(
            self.center, self.rotation, transform,
        )

    # -----------------------------------------------------------------
    # .tsai serialization
    # -----------------------------------------------------------------

    def to_tsai(self) -> str:
        """Render the camera as ``.tsai`` text."""
        self._require_initialized()
        f = _fmt(self.focal_length)
        lines = [
            _TSAI_VERSION,
            _TSAI_TYPE,
            f"fu = {f}",
            f"fv = {f}",
            f"cu = {_fmt(self.optical_center[0])}",
            f"cv = {_fmt(self.optical_center[1])}",
            "u_direction = 1 0 0",
            "v_direction = 0 1 0",
            "w_direction = 0 0 1",
            "C = " + " ".join(_fmt(v) for v in self.center),
            "R = " + " ".join(_fmt(v) for v in self.rotation.ravel()),
            f"pitch = {_fmt(self.pixel_pitch)}",
            "NULL",
        ]
        return "\n".join(lines) + "\n"

    def save_state(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.write_text(self.to_tsai())
        logger.debug("Wrote pinhole camera %s", path)

    @classmethod
    def from_tsai(
        cls,
        text: str,
        image_size: Optional[Tuple[int, int]] = None,
    ) -> 'PinholeCamera':
        """Parse ``.tsai`` text.

        Raises
        ------
        InputError
            If the text is not a distortion-free pinhole model with square
            pixels, unit pitch and identity ``u/v/w`` directions.
        """
        lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
        if len(lines) < 2 or not lines[0].startswith('VERSION_'):
            raise InputError("Not a .tsai pinhole file: missing VERSION line")
        if lines[1] != _TSAI_TYPE:
            raise InputError(
                f"Unsupported .tsai camera type '{lines[1]}'; "
                f"expected {_TSAI_TYPE}"
            )

        fields: Dict[str, List[float]] = {}
        distortion = None
        for line in lines[2:]:
            if '=' not in line:
                distortion = line
                break
            key, _, value = line.partition('=')
            try:
                fields[key.strip()] = [float(v) for v in value.split()]
            except ValueError:
                raise InputError(f"Malformed .tsai line '{line}'") from None

        if distortion not in (None, 'NULL'):
            raise InputError(
                f"Lens distortion '{distortion}' is not supported"
            )

        missing = [k for k in ('fu', 'fv', 'cu', 'cv', 'C', 'R')
                   if k not in fields]
        if missing:
            raise InputError(f".tsai file is missing {', '.join(missing)}")

        fu, fv = fields['fu'][0], fields['fv'][0]
        if fu != fv:
            raise InputError(
                f"Non-square pixels are not supported (fu={fu}, fv={fv})"
            )
        if fields.get('pitch', [1.0])[0] != 1.0:
            raise InputError("Only a pixel pitch of 1 is supported")
        for key, expected in (('u_direction', [1.0, 0.0, 0.0]),
                              ('v_direction', [0.0, 1.0, 0.0]),
                              ('w_direction', [0.0, 0.0, 1.0])):
            if fields.get(key, expected) != expected:
                raise InputError(f"Only the identity {key} is supported")

        return cls(
            center=fields['C'],
            rotation=np.asarray(fields['R']).reshape(3, 3),
            focal_length=fu,
            optical_center=(fields['cu'][0], fields['cv'][0]),
            image_size=image_size,
        )

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        image_size: Optional[Tuple[int, int]] = None,
    ) -> 'PinholeCamera':
        """Read a ``.tsai`` file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Camera file not found: {path}")
        return cls.from_tsai(path.read_text(), image_size=image_size)

    def __repr__(self) -> str:
        if not self.initialized:
            return "PinholeCamera(uninitialized)"
        return (
            f"PinholeCamera(center={self.center.tolist()}, "
            f"focal_length={self.focal_length}, "
            f"optical_center={self.optical_center}, "
            f"image_size={self._image_size})"
        )
