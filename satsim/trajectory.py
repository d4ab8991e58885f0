# -*- coding: utf-8 -*-
"""
Trajectory - Camera positions and orientations along a straight path.

Computes ``N`` camera centres uniformly spaced along the straight segment
between a first and last position given in the DEM's map (projected)
coordinates, and an orientation for each camera. How cameras are
oriented is chosen once per trajectory by an ``OrientationSpec``:

- ``FixedAngles``: the same roll, pitch, and yaw relative to the nadir
  frame for every camera.
- ``GroundTargets``: each camera looks at a ground point interpolated
  between a first and last footprint centre.
- ``NadirPointing``: every camera looks straight down.

The nadir frame has columns ``(along-track, cross-track, down)``, so the
camera x axis (image columns) runs along track, y (image rows) across
track, and z (boresight) toward the datum. A trajectory keeps each
camera's base frame and nominal roll/pitch/yaw separately so attitude
offsets can be composed before the angles are applied.

Dependencies
------------
pyproj (through ``GeoReference``)
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
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.elevation.base import ElevationModel
from satsim.exceptions import ArgumentError, DegenerateTrajectoryError
from satsim.georef import GeoReference
from satsim.geometry.rotations import boresight_frame, roll_pitch_yaw_matrix

logger = logging.getLogger(__name__)

# Half-width of the central difference used for the local tangent,
# as a fraction of the segment
_TANGENT_STEP = 1e-3


@dataclass(frozen=True)
class FixedAngles:
    """Constant roll, pitch, and yaw (degrees) relative to the nadir frame."""

    roll: float
    pitch: float
    yaw: float


@dataclass(frozen=True)
class GroundTargets:
    """First and last footprint centres in map coordinates ``(x, y)``."""

    first: Sequence[float]
    last: Sequence[float]


@dataclass(frozen=True)
class NadirPointing:
    """Every camera looks straight down."""


OrientationSpec = Union[FixedAngles, GroundTargets, NadirPointing]


def resolve_orientation(
    roll: Optional[float] = None,
    pitch: Optional[float] = None,
    yaw: Optional[float] = None,
    first_ground: Optional[Sequence[float]] = None,
    last_ground: Optional[Sequence[float]] = None,
) -> OrientationSpec:
    """Pick the orientation spec from optional inputs.

    Fixed angles take priority over ground targets, which take priority
    over nadir pointing.

    Raises
    ------
    ArgumentError
        If roll/pitch/yaw are partially given, or only one ground target
        is given.
    """
    angles = [roll, pitch, yaw]
    n_angles = sum(a is not None for a in angles)
    if n_angles not in (0, 3):
        raise ArgumentError(
            "Either all of roll, pitch, and yaw must be specified, or none."
        )
    if (first_ground is None) != (last_ground is None):
        raise ArgumentError(
            "Either both first and last ground positions must be "
            "specified, or none."
        )
    if n_angles == 3:
        return FixedAngles(float(roll), float(pitch), float(yaw))
    if first_ground is not None:
        return GroundTargets(
            tuple(float(v) for v in first_ground),
            tuple(float(v) for v in last_ground),
        )
    return NadirPointing()


@dataclass
class Trajectory:
    """Camera centres and orientations, first camera to last.

    Attributes
    ----------
    positions : np.ndarray
        Earth-centred Cartesian camera centres, shape ``(N, 3)``.
    map_positions : np.ndarray
        Map ``x``, ``y`` and height above datum, shape ``(N, 3)``.
    frames : np.ndarray
        Base camera-to-world frames before roll/pitch/yaw, ``(N, 3, 3)``.
    angles : np.ndarray
        Roll, pitch, and yaw in degrees applied to each frame, ``(N, 3)``.
    orientation : OrientationSpec
        How the base frames were derived.
    rotations : np.ndarray
        Camera-to-world rotations ``frames @ Rz(yaw) Ry(pitch) Rx(roll)``,
        shape ``(N, 3, 3)``.
    """

    positions: np.ndarray
    map_positions: np.ndarray
    frames: np.ndarray
    angles: np.ndarray
    orientation: OrientationSpec
    rotations: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.rotations = self.frames @ roll_pitch_yaw_matrix(
            self.angles[:, 0], self.angles[:, 1], self.angles[:, 2]
        )

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def heights(self) -> np.ndarray:
        """Camera heights above the datum."""
        return self.map_positions[:, 2]

    def distances(self) -> np.ndarray:
        """Cumulative Cartesian distance travelled from the first camera."""
        steps = np.linalg.norm(np.diff(self.positions, axis=0), axis=1)
        return np.concatenate([[0.0], np.cumsum(steps)])

    def with_angle_offsets(self, offsets: np.ndarray) -> 'Trajectory':
        """Copy with ``offsets`` (degrees, ``(N, 3)``) added to the angles."""
        offsets = np.asarray(offsets, dtype=np.float64)
        if offsets.shape != self.angles.shape:
            raise ValueError(
                f"Expected offsets of shape {self.angles.shape}, "
                f"got {offsets.shape}"
            )
        return Trajectory(
            positions=self.positions.copy(),
            map_positions=self.map_positions.copy(),
            frames=self.frames.copy(),
            angles=self.angles + offsets,
            orientation=self.orientation,
        )


def _nadir_directions(
    georef: GeoReference, xs: np.ndarray, ys: np.ndarray
) -> np.ndarray:
    """Unit vectors along the inward ellipsoid normal, shape ``(N, 3)``."""
    lons, lats = georef.map_to_lonlat(xs, ys)
    lon = np.radians(lons)
    lat = np.radians(lats)
    up = np.column_stack([
        np.cos(lat) * np.cos(lon),
        np.cos(lat) * np.sin(lon),
        np.sin(lat),
    ])
    return -up


def compute_trajectory(
    first: Sequence[float],
    last: Sequence[float],
    num: int,
    georef: GeoReference,
    orientation: Optional[OrientationSpec] = None,
    dem: Optional[ElevationModel] = None,
) -> Trajectory:
    """Cameras uniformly spaced along a straight map-space segment.

    Parameters
    ----------
    first, last : Sequence[float]
        First and last camera ``(x, y, height)``: map coordinates in the
        DEM's CRS and height above the datum in meters.
    num : int
        Number of cameras, including the first and last.
    georef : GeoReference
        DEM georeference; defines the map CRS and the datum.
    orientation : OrientationSpec, optional
        Defaults to ``NadirPointing()``.
    dem : ElevationModel, optional
        Used to place ground targets on the terrain. Targets without DEM
        coverage, or all targets when no DEM is given, lie on the datum.

    Returns
    -------
    Trajectory

    Raises
    ------
    ArgumentError
        If ``num < 2``.
    DegenerateTrajectoryError
        If first and last have the same map position, or a camera's
        direction of travel is parallel to its look direction.
    """
    if orientation is None:
        orientation = NadirPointing()
    if num < 2:
        raise ArgumentError(f"The number of cameras must be at least 2, got {num}")

    first = np.asarray(first, dtype=np.float64)
    last = np.asarray(last, dtype=np.float64)
    delta = last[:2] - first[:2]
    if not np.hypot(delta[0], delta[1]) > 0.0:
        raise DegenerateTrajectoryError(
            f"First and last camera positions coincide in map space "
            f"(first={first.tolist()}, last={last.tolist()}); the direction "
            "of travel is undefined."
        )

    s = np.linspace(0.0, 1.0, num)
    xs = first[0] + s * delta[0]
    ys = first[1] + s * delta[1]
    if first[2] == last[2]:
        heights = np.full(num, first[2])
    else:
        heights = first[2] + s * (last[2] - first[2])

    positions = np.atleast_2d(georef.map_to_cartesian(xs, ys, heights))

    ahead = np.atleast_2d(georef.map_to_cartesian(
        xs + _TANGENT_STEP * delta[0], ys + _TANGENT_STEP * delta[1], heights,
    ))
    behind = np.atleast_2d(georef.map_to_cartesian(
        xs - _TANGENT_STEP * delta[0], ys - _TANGENT_STEP * delta[1], heights,
    ))
    tangents = ahead - behind

    if isinstance(orientation, GroundTargets):
        g0 = np.asarray(orientation.first, dtype=np.float64)
        g1 = np.asarray(orientation.last, dtype=np.float64)
        gx = g0[0] + s * (g1[0] - g0[0])
        gy = g0[1] + s * (g1[1] - g0[1])
        if dem is not None:
            lons, lats = georef.map_to_lonlat(gx, gy)
            gh = dem.get_elevation(lats, lons)
            gh = np.where(np.isfinite(gh), gh, 0.0)
        else:
            gh = np.zeros(num)
        targets = np.atleast_2d(georef.map_to_cartesian(gx, gy, gh))
        boresights = targets - positions
    else:
        boresights = _nadir_directions(georef, xs, ys)

    try:
        frames = boresight_frame(tangents, boresights)
    except ValueError as e:
        raise DegenerateTrajectoryError(
            f"Cannot orient cameras between first={first.tolist()} and "
            f"last={last.tolist()} with {orientation}: {e}"
        ) from e

    if isinstance(orientation, FixedAngles):
        angles = np.tile(
            [orientation.roll, orientation.pitch, orientation.yaw], (num, 1)
        ).astype(np.float64)
    else:
        angles = np.zeros((num, 3))

    logger.info(
        "Computed %d camera poses from map (%.3f, %.3f) to (%.3f, %.3f), "
        "heights %.3f to %.3f m, orientation %s",
        num, first[0], first[1], last[0], last[1], heights[0], heights[-1],
        type(orientation).__name__,
    )

    return Trajectory(
        positions=positions,
        map_positions=np.column_stack([xs, ys, heights]),
        frames=frames,
        angles=angles,
        orientation=orientation,
    )
