# -*- coding: utf-8 -*-
"""
Raster DEM Elevation Model - Terrain heights from a georeferenced raster.

Holds a DEM in memory together with its georeference and answers height
queries by bilinear interpolation between pixel centres. Geographic and
projected CRSs are both supported; queries are reprojected to the DEM's
CRS with pyproj. The DEM is read once and shared read-only by every
camera, so queries never touch the file.

Dependencies
------------
rasterio
pyproj
scipy

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
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.elevation.base import ElevationModel
from satsim.exceptions import GeolocationError
from satsim.georef import GeoReference
from satsim.resample import RasterSampler


class RasterDEM(ElevationModel):
    """Elevation model backed by an in-memory georeferenced raster.

    Parameters
    ----------
    heights : np.ndarray
        DEM samples, shape ``(rows, cols)``. NaN marks nodata.
    georef : GeoReference
        Georeference of the raster.
    nodata : float, optional
        Nodata value of the source file, kept for reporting.

    Raises
    ------
    ValueError
        If ``heights`` is not 2D or its shape disagrees with ``georef``.
    GeolocationError
        If the DEM holds no valid samples.

    Examples
    --------
    >>> dem = RasterDEM.from_file('/data/srtm_34_04.tif')
    >>> dem.height_at_map(np.array([500010.0]), np.array([3999990.0]))
    array([432.17])
    """

    def __init__(
        self,
        heights: np.ndarray,
        georef: GeoReference,
        nodata: Optional[float] = None,
    ) -> None:
        heights = np.asarray(heights, dtype=np.float64)
        if heights.ndim != 2:
            raise ValueError(f"DEM must be 2D, got shape {heights.shape}")
        if georef.shape is not None and tuple(georef.shape) != heights.shape:
            raise ValueError(
                f"DEM shape {heights.shape} does not match georeference "
                f"shape {georef.shape}"
            )
        if not np.any(np.isfinite(heights)):
            raise GeolocationError("DEM contains no valid heights")

        super().__init__(georef.datum)
        self.georef = georef
        self.nodata = nodata
        self.shape = heights.shape
        self._heights = heights
        self._sampler = RasterSampler(heights, order=1)
        self._range = (
            float(np.nanmin(heights)), float(np.nanmax(heights))
        )

    @classmethod
    def from_file(cls, dem_path: Union[str, Path]) -> 'RasterDEM':
        """Read a DEM with rasterio.

        Raises
        ------
        FileNotFoundError
            If ``dem_path`` does not exist.
        GeolocationError
            If the DEM has no georeference.
        """
        from satsim.IO.geotiff import read_georef_image

        georef, heights, nodata = read_georef_image(dem_path)
        return cls(heights, georef, nodata)

    def height_range(self) -> Tuple[float, float]:
        """Minimum and maximum valid DEM height."""
        return self._range

    def height_at_pixel(
        self, cols: np.ndarray, rows: np.ndarray
    ) -> np.ndarray:
        """Bilinear height at fractional DEM pixel positions."""
        return self._sampler(cols, rows)

    def height_at_map(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Bilinear height at map coordinates in the DEM's CRS."""
        cols, rows = self.georef.map_to_pixel(xs, ys)
        return self._sampler(np.atleast_1d(cols), np.atleast_1d(rows))

    def _get_elevation_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> np.ndarray:
        """Look up terrain elevation from the DEM raster.

        Parameters
        ----------
        lats : np.ndarray
            Latitudes in degrees North. Shape ``(N,)``.
        lons : np.ndarray
            Longitudes in degrees East. Shape ``(N,)``.

        Returns
        -------
        np.ndarray
            Heights above datum. Shape ``(N,)``. NaN outside the DEM
            or next to nodata samples.
        """
        xs, ys = self.georef.lonlat_to_map(lons, lats)
        return self.height_at_map(xs, ys)

    def __repr__(self) -> str:
        lo, hi = self._range
        return (
            f"RasterDEM(shape={self.shape}, heights=[{lo:.2f}, {hi:.2f}], "
            f"crs='{self.georef.crs.name}')"
        )
