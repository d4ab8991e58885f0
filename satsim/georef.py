# -*- coding: utf-8 -*-
"""
GeoReference - Pixel, map, geodetic, and Cartesian transforms for rasters.

Provides ``GeoReference``, the georeference of a DEM or orthoimage: a
six-parameter affine transform plus a coordinate reference system. It
relates every raster pixel to a map (projected or geographic) coordinate,
to a geodetic longitude/latitude on the raster's datum, and to an
Earth-centred Cartesian point.

Coordinate flow:

    pixel (col, row)  --affine-->  map (x, y)  --pyproj-->  (lon, lat)
                                                   --datum-->  (x, y, z)

Pixel convention: integer ``(col, row)`` is the *centre* of that pixel, so
pixel ``(0, 0)`` maps to the affine coordinate ``(0.5, 0.5)``. When the
native CRS is geographic the pyproj map step is skipped.

Dependencies
------------
rasterio
pyproj

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
from typing import Any, Optional, Tuple, Union, TYPE_CHECKING

# Third-party
import numpy as np

# SatSim internal
from satsim._backend import require_geo_backend
from satsim.exceptions import GeolocationError
from satsim.geometry.datum import Datum

if TYPE_CHECKING:
    from rasterio.transform import Affine
    from satsim.IO.base import RasterReader

ArrayLike = Union[float, list, np.ndarray]


def _to_array(val: Any) -> np.ndarray:
    """Convert scalar, list, or array to 1D numpy array of float64."""
    arr = np.asarray(val, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    return arr


class GeoReference:
    """Georeference of a raster: affine transform, CRS, and datum.

    The affine transform maps pixel-corner coordinates ``(u, v)`` to map
    ``(x, y)`` as::

        x = c + u * a + v * b
        y = f + u * d + v * e

    where ``(a, b, c, d, e, f)`` are the rasterio ``Affine`` parameters
    and ``u = col + 0.5``, ``v = row + 0.5`` for pixel centres.

    Parameters
    ----------
    transform : rasterio.transform.Affine
        Six-parameter affine transform (pixel corner to map).
    crs : Any
        Coordinate reference system accepted by pyproj.
    shape : Tuple[int, int], optional
        Raster shape ``(rows, cols)``, used for bounds checks.

    Attributes
    ----------
    crs : pyproj.CRS
        Native coordinate reference system.
    datum : Datum
        Datum of the native CRS.
    shape : Tuple[int, int] or None
        Raster shape ``(rows, cols)``.

    Raises
    ------
    TypeError
        If ``transform`` is not a ``rasterio.transform.Affine``.
    GeolocationError
        If the CRS is missing or has no datum.

    Examples
    --------
    >>> from rasterio.transform import Affine
    >>> georef = GeoReference(
    ...     Affine(10.0, 0.0, 500000.0, 0.0, -10.0, 4000000.0),
    ...     'EPSG:32611', shape=(100, 100),
    ... )
    >>> x, y = georef.pixel_to_map(0, 0)
    >>> xyz = georef.pixel_to_cartesian(50, 50, 1200.0)
    """

    def __init__(
        self,
        transform: 'Affine',
        crs: Any,
        shape: Optional[Tuple[int, int]] = None,
    ) -> None:
        # Fail fast if dependencies are missing
        require_geo_backend("GeoReference")

        from rasterio.transform import Affine
        import pyproj

        if not isinstance(transform, Affine):
            raise TypeError(
                f"transform must be a rasterio.transform.Affine instance, "
                f"got {type(transform).__name__}"
            )
        if crs is None:
            raise GeolocationError("Raster has no coordinate reference system")

        self._transform = transform
        self._inv_transform = ~transform
        self.shape = tuple(shape) if shape is not None else None

        self.crs = pyproj.CRS.from_user_input(crs)
        self.datum = Datum(self.crs)

        self._is_geographic = self.crs.is_geographic
        self._to_lonlat = None
        self._from_lonlat = None
        if not self._is_geographic:
            self._to_lonlat = pyproj.Transformer.from_crs(
                self.crs, self.crs.geodetic_crs, always_xy=True
            )
            self._from_lonlat = pyproj.Transformer.from_crs(
                self.crs.geodetic_crs, self.crs, always_xy=True
            )

    @property
    def transform(self) -> 'Affine':
        """The rasterio affine transform (pixel corner to map)."""
        return self._transform

    # -----------------------------------------------------------------
    # pixel <-> map
    # -----------------------------------------------------------------

    def pixel_to_map(
        self, cols: ArrayLike, rows: ArrayLike
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Map coordinates of pixel centres.

        Parameters
        ----------
        cols, rows : float, list, or np.ndarray
            Pixel column(s) and row(s).

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            ``(x, y)`` arrays in the native CRS. Scalars in, scalars out.
        """
        t = self._transform
        u = np.asarray(cols, dtype=np.float64) + 0.5
        v = np.asarray(rows, dtype=np.float64) + 0.5
        xs = t.c + u * t.a + v * t.b
        ys = t.f + u * t.d + v * t.e
        return xs, ys

    def map_to_pixel(
        self, xs: ArrayLike, ys: ArrayLike
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Fractional pixel ``(col, row)`` of map coordinates."""
        inv = self._inv_transform
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        cols = inv.c + xs * inv.a + ys * inv.b - 0.5
        rows = inv.f + xs * inv.d + ys * inv.e - 0.5
        return cols, rows

    # -----------------------------------------------------------------
    # map <-> geodetic
    # -----------------------------------------------------------------

    def map_to_lonlat(
        self, xs: ArrayLike, ys: ArrayLike
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Geodetic longitude/latitude (degrees) of map coordinates."""
        if self._is_geographic:
            return np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
        lons, lats = self._to_lonlat.transform(xs, ys)
        return np.asarray(lons, dtype=np.float64), np.asarray(lats, dtype=np.float64)

    def lonlat_to_map(
        self, lons: ArrayLike, lats: ArrayLike
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Map coordinates of geodetic longitude/latitude (degrees)."""
        if self._is_geographic:
            return np.asarray(lons, dtype=np.float64), np.asarray(lats, dtype=np.float64)
        xs, ys = self._from_lonlat.transform(lons, lats)
        return np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)

    # -----------------------------------------------------------------
    # Cartesian
    # -----------------------------------------------------------------

    def map_to_cartesian(
        self, xs: ArrayLike, ys: ArrayLike, heights: ArrayLike = 0.0
    ) -> np.ndarray:
        """Earth-centred Cartesian points for map coordinates and heights.

        Returns
        -------
        np.ndarray
            Shape ``(3,)`` for scalar input, ``(N, 3)`` otherwise.
        """
        lons, lats = self.map_to_lonlat(xs, ys)
        return self.datum.geodetic_to_cartesian(lons, lats, heights)

    def cartesian_to_map(
        self, xyz: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Map coordinates and heights above datum of Cartesian points.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            ``(x, y, height)`` arrays of shape ``(N,)``.
        """
        lons, lats, heights = self.datum.cartesian_to_geodetic(xyz)
        xs, ys = self.lonlat_to_map(lons, lats)
        return _to_array(xs), _to_array(ys), heights

    def pixel_to_cartesian(
        self, cols: ArrayLike, rows: ArrayLike, heights: ArrayLike = 0.0
    ) -> np.ndarray:
        """Earth-centred Cartesian points above pixel centres."""
        xs, ys = self.pixel_to_map(cols, rows)
        return self.map_to_cartesian(xs, ys, heights)

    def cartesian_to_pixel(
        self, xyz: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Fractional pixel ``(col, row)`` and height of Cartesian points."""
        xs, ys, heights = self.cartesian_to_map(xyz)
        cols, rows = self.map_to_pixel(xs, ys)
        return cols, rows, heights

    def contains(self, cols: ArrayLike, rows: ArrayLike) -> np.ndarray:
        """Whether fractional pixel positions fall between pixel centres.

        Requires ``shape``. A position is inside when it lies in
        ``[0, cols - 1] x [0, rows - 1]``, the region where bilinear
        interpolation has all four neighbours.
        """
        if self.shape is None:
            raise GeolocationError("GeoReference has no raster shape")
        n_rows, n_cols = self.shape
        cols = np.asarray(cols, dtype=np.float64)
        rows = np.asarray(rows, dtype=np.float64)
        return (
            (cols >= 0) & (cols <= n_cols - 1)
            & (rows >= 0) & (rows <= n_rows - 1)
        )

    @classmethod
    def from_reader(cls, reader: 'RasterReader') -> 'GeoReference':
        """Create a GeoReference from a SatSim imagery reader.

        Works with any reader that stores a rasterio ``Affine`` in
        ``metadata['transform']`` and a CRS in ``metadata['crs']`` (e.g.
        ``GeoTIFFReader``).

        Raises
        ------
        GeolocationError
            If the reader's metadata has no transform or CRS.
        """
        transform = reader.metadata.get('transform')
        if transform is None:
            raise GeolocationError(
                f"{reader.filepath} has no affine transform; a georeferenced "
                "raster is required."
            )

        crs = reader.metadata.get('crs')
        if crs is None:
            raise GeolocationError(
                f"{reader.filepath} has no coordinate reference system; a "
                "georeferenced raster is required."
            )

        shape = reader.shape
        return cls(transform=transform, crs=crs, shape=shape)

    def __repr__(self) -> str:
        return (
            f"GeoReference(crs='{self.crs.name}', shape={self.shape}, "
            f"datum={self.datum!r})"
        )
