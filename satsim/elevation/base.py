# -*- coding: utf-8 -*-
"""
Elevation Model Base Class - Abstract interface for terrain height lookup.

Defines the abstract base class for elevation models used by the
trajectory generator and the ray/terrain intersection solver. Heights
are above the model's datum ellipsoid. The public ``get_elevation``
method supports scalar, separate-array, and stacked ``(2, N)`` inputs.

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
2026-02-11

Modified
--------
2026-10-16
"""

# Standard library
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.geometry.datum import Datum
from satsim.georef import _to_array


def _is_scalar(val) -> bool:
    """Check if a value is a scalar (not array-like)."""
    if isinstance(val, np.ndarray):
        return val.ndim == 0
    return isinstance(val, (int, float, np.integer, np.floating))


class ElevationModel(ABC):
    """Abstract base class for terrain elevation lookup.

    Concrete subclasses implement ``_get_elevation_array`` for
    vectorized height lookup and ``height_range`` for the span of
    heights the model can return.

    Parameters
    ----------
    datum : Datum
        Datum the heights are measured above.

    Coordinate Conventions
    ----------------------
    - **Heights:** meters above the datum ellipsoid.
    - **Latitude:** Degrees North, range [-90, 90].
    - **Longitude:** Degrees East, range [-180, 180].
    """

    def __init__(self, datum: Datum) -> None:
        self.datum = datum

    @abstractmethod
    def _get_elevation_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> np.ndarray:
        """Look up terrain elevation for arrays of coordinates.

        Parameters
        ----------
        lats : np.ndarray
            Latitudes in degrees North. Shape ``(N,)``, dtype float64.
        lons : np.ndarray
            Longitudes in degrees East. Shape ``(N,)``, dtype float64.

        Returns
        -------
        np.ndarray
            Elevation values in meters. Shape ``(N,)``. NaN for points
            outside coverage area.
        """
        ...

    @abstractmethod
    def height_range(self) -> Tuple[float, float]:
        """Minimum and maximum height the model can return, in meters."""
        ...

    def get_elevation(
        self,
        lat_or_points: Union[float, list, np.ndarray],
        lon: Optional[Union[float, list, np.ndarray]] = None,
    ) -> Union[float, np.ndarray]:
        """Query terrain elevation for one or more geographic locations.

        Accepts three input forms:

        - **Scalar:** ``get_elevation(lat, lon)`` returns a single float.
        - **Stacked (2, N) array:** ``get_elevation(points_2xN)`` returns
          an ``(N,)`` ndarray.
        - **Separate arrays:** ``get_elevation(lats_arr, lons_arr)`` returns
          an ndarray.

        Parameters
        ----------
        lat_or_points : float, list, or np.ndarray
            Latitude(s) when ``lon`` is provided, or a ``(2, N)`` ndarray
            of stacked ``[lats; lons]`` when ``lon`` is None.
        lon : float, list, or np.ndarray, optional
            Longitude(s).

        Returns
        -------
        float or np.ndarray
            Heights above datum; NaN outside coverage.

        Raises
        ------
        ValueError
            If a ``(2, N)`` array is expected but the shape is wrong.
        """
        if lon is None:
            pts = np.asarray(lat_or_points, dtype=np.float64)
            if pts.ndim != 2 or pts.shape[0] != 2:
                raise ValueError(
                    f"Expected (2, N) array, got shape {pts.shape}"
                )
            return self._get_elevation_array(pts[0], pts[1])
        elif _is_scalar(lat_or_points) and _is_scalar(lon):
            heights = self._get_elevation_array(
                _to_array(lat_or_points), _to_array(lon)
            )
            return float(heights[0])
        else:
            return self._get_elevation_array(
                _to_array(lat_or_points), _to_array(lon)
            )

    def height_below(
        self, xyz: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Terrain height under Cartesian points and the points' own height.

        Parameters
        ----------
        xyz : np.ndarray
            Earth-centred Cartesian points, shape ``(N, 3)``.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            ``(terrain_height, point_height)``, both ``(N,)``, in meters
            above the datum. Terrain height is NaN outside coverage.
        """
        lons, lats, heights = self.datum.cartesian_to_geodetic(xyz)
        return self._get_elevation_array(lats, lons), heights
