# -*- coding: utf-8 -*-
"""
Datum - Reference ellipsoid and Earth-centred Cartesian conversions.

Wraps the geodetic datum of a map CRS. Provides vectorized conversion
between geodetic (lon, lat, height above ellipsoid) and Earth-centred,
Earth-fixed Cartesian coordinates using pyproj, plus a closed-form
ray/ellipsoid intersection used by the terrain intersection solver.

Coordinate flow:

    geodetic (lon, lat, h)  --pyproj cart-->  Cartesian (x, y, z) in meters

Both sides share the same datum, so the conversion never applies a
datum shift.

Dependencies
------------
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

# Standard library
from typing import Any, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim._backend import require_geo_backend
from satsim.exceptions import GeolocationError


class Datum:
    """Reference ellipsoid of a coordinate reference system.

    Parameters
    ----------
    crs : Any
        Anything accepted by ``pyproj.CRS.from_user_input`` (EPSG code,
        WKT, PROJ string, ``pyproj.CRS``, ``rasterio.crs.CRS``). Projected
        and geographic CRSs are both accepted; the datum of the
        underlying geodetic CRS is used.

    Attributes
    ----------
    name : str
        Datum name as reported by pyproj.
    semi_major_axis : float
        Equatorial radius in meters.
    semi_minor_axis : float
        Polar radius in meters.

    Raises
    ------
    GeolocationError
        If the CRS has no geodetic datum.

    Examples
    --------
    >>> datum = Datum('EPSG:4326')
    >>> xyz = datum.geodetic_to_cartesian(0.0, 0.0, 0.0)
    >>> xyz
    array([6378137.,       0.,       0.])
    """

    def __init__(self, crs: Any) -> None:
        require_geo_backend("Datum")
        import pyproj

        self.crs = pyproj.CRS.from_user_input(crs)

        geodetic = self.crs.geodetic_crs
        if geodetic is None or geodetic.datum is None:
            raise GeolocationError(
                f"CRS has no geodetic datum: {self.crs.name}"
            )

        ellipsoid = geodetic.ellipsoid
        self.name = geodetic.datum.name
        self.semi_major_axis = float(ellipsoid.semi_major_metre)
        self.semi_minor_axis = float(ellipsoid.semi_minor_metre)

        self.geodetic_crs = geodetic.to_3d()
        ellps = f"+a={self.semi_major_axis!r} +b={self.semi_minor_axis!r}"
        self._to_cartesian = pyproj.Transformer.from_pipeline(
            "+proj=pipeline +step +proj=unitconvert +xy_in=deg +xy_out=rad "
            f"+step +proj=cart {ellps}"
        )
        self._to_geodetic = pyproj.Transformer.from_pipeline(
            f"+proj=pipeline +step +inv +proj=cart {ellps} "
            "+step +proj=unitconvert +xy_in=rad +xy_out=deg"
        )

    @property
    def radii(self) -> Tuple[float, float]:
        """Semi-major and semi-minor axes in meters."""
        return self.semi_major_axis, self.semi_minor_axis

    def geodetic_to_cartesian(
        self,
        lon: Union[float, np.ndarray],
        lat: Union[float, np.ndarray],
        height: Union[float, np.ndarray] = 0.0,
    ) -> np.ndarray:
        """Convert geodetic coordinates to Earth-centred Cartesian.

        Parameters
        ----------
        lon, lat : float or np.ndarray
            Longitude and latitude in degrees.
        height : float or np.ndarray, default=0.0
            Height above the ellipsoid in meters.

        Returns
        -------
        np.ndarray
            Shape ``(3,)`` for scalar input, ``(N, 3)`` otherwise.
        """
        scalar = np.ndim(lon) == 0 and np.ndim(lat) == 0
        lon, lat, height = np.broadcast_arrays(
            np.atleast_1d(np.asarray(lon, dtype=np.float64)),
            np.atleast_1d(np.asarray(lat, dtype=np.float64)),
            np.atleast_1d(np.asarray(height, dtype=np.float64)),
        )
        x, y, z = self._to_cartesian.transform(lon, lat, height)
        xyz = np.column_stack([x, y, z]).astype(np.float64)
        return xyz[0] if scalar else xyz

    def cartesian_to_geodetic(
        self, xyz: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Convert Earth-centred Cartesian points to geodetic coordinates.

        Parameters
        ----------
        xyz : np.ndarray
            Shape ``(3,)`` or ``(N, 3)`` in meters.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            ``(lon, lat, height)`` arrays of shape ``(N,)``. NaN inputs
            produce NaN outputs.
        """
        pts = np.atleast_2d(np.asarray(xyz, dtype=np.float64))
        lon, lat, height = self._to_geodetic.transform(
            pts[:, 0], pts[:, 1], pts[:, 2]
        )
        lon = np.asarray(lon, dtype=np.float64)
        lat = np.asarray(lat, dtype=np.float64)
        height = np.asarray(height, dtype=np.float64)
        # PROJ reports unconvertible points as inf
        bad = ~(np.isfinite(lon) & np.isfinite(lat) & np.isfinite(height))
        if np.any(bad):
            lon[bad] = np.nan
            lat[bad] = np.nan
            height[bad] = np.nan
        return lon, lat, height

    def intersect_ellipsoid(
        self,
        origins: np.ndarray,
        directions: np.ndarray,
        height: Union[float, np.ndarray] = 0.0,
    ) -> np.ndarray:
        """Intersect rays with the ellipsoid inflated by ``height``.

        The inflated surface has semi-axes ``(a + h, a + h, b + h)``. For
        each ray the nearest intersection in front of the origin is
        returned.

        Parameters
        ----------
        origins : np.ndarray
            Ray origins, shape ``(N, 3)`` or ``(3,)``.
        directions : np.ndarray
            Ray directions (need not be unit), same shape as ``origins``.
        height : float or np.ndarray, default=0.0
            Inflation in meters, scalar or shape ``(N,)``.

        Returns
        -------
        np.ndarray
            Intersection points, shape ``(N, 3)``. Rows are NaN where the
            ray misses the surface or the surface is behind the origin.
        """
        o = np.atleast_2d(np.asarray(origins, dtype=np.float64))
        d = np.atleast_2d(np.asarray(directions, dtype=np.float64))
        h = np.asarray(height, dtype=np.float64)

        a = self.semi_major_axis + h
        b = self.semi_minor_axis + h
        scale = np.stack(np.broadcast_arrays(a, a, b), axis=-1)

        # Unit sphere in scaled coordinates
        os_ = o / scale
        ds = d / scale
        qa = np.einsum('ij,ij->i', ds, ds)
        qb = 2.0 * np.einsum('ij,ij->i', os_, ds)
        qc = np.einsum('ij,ij->i', os_, os_) - 1.0

        disc = qb * qb - 4.0 * qa * qc
        with np.errstate(invalid='ignore'):
            root = np.sqrt(disc)
            t_near = (-qb - root) / (2.0 * qa)
            t_far = (-qb + root) / (2.0 * qa)

        # Origin inside the surface: only the far root lies ahead
        t = np.where(qc > 0.0, t_near, t_far)
        miss = ~(disc >= 0.0) | ~(t >= 0.0)
        t = np.where(miss, np.nan, t)
        return o + t[:, None] * d

    def __repr__(self) -> str:
        return (
            f"Datum(name='{self.name}', "
            f"semi_major_axis={self.semi_major_axis:.3f}, "
            f"semi_minor_axis={self.semi_minor_axis:.3f})"
        )
