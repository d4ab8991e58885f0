# -*- coding: utf-8 -*-
"""
Raster Resampling - Nodata-aware sampling at fractional pixel positions.

Samples a 2D raster at arbitrary fractional ``(col, row)`` positions with
``scipy.ndimage.map_coordinates``. Nodata samples are stored as NaN in the
source array. A position is valid only when every neighbour that carries
non-zero interpolation weight is valid, so a nodata sample never leaks
into its neighbours and a valid sample is never discarded because of a
zero-weight neighbour.

Dependencies
------------
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
2026-01-30

Modified
--------
2026-10-16
"""

# Third-party
import numpy as np
from scipy.ndimage import map_coordinates

# Weight deficit below which a sample counts as fully supported
_SUPPORT_TOLERANCE = 1e-9


class RasterSampler:
    """Nodata-aware nearest or bilinear sampler for a 2D raster.

    Parameters
    ----------
    data : np.ndarray
        Raster of shape ``(rows, cols)``. NaN marks nodata.
    order : int, default=1
        0 for nearest neighbour, 1 for bilinear.

    Examples
    --------
    >>> sampler = RasterSampler(np.arange(12.0).reshape(3, 4))
    >>> sampler(np.array([1.5]), np.array([0.0]))
    array([1.5])
    """

    def __init__(self, data: np.ndarray, order: int = 1) -> None:
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D raster, got shape {data.shape}")
        if order not in (0, 1):
            raise ValueError(f"order must be 0 or 1, got {order}")

        self.order = order
        self.shape = data.shape
        valid = np.isfinite(data)
        self._filled = np.where(valid, data, 0.0).astype(np.float64)
        self._support = valid.astype(np.float64)

    def __call__(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        """Sample at fractional pixel positions.

        Parameters
        ----------
        cols, rows : np.ndarray
            Fractional pixel coordinates, same shape. NaN allowed.

        Returns
        -------
        np.ndarray
            Sampled values (same shape as ``cols``); NaN where the
            position touches nodata or is outside the raster: beyond the
            outer pixel edges for nearest, beyond the outer pixel centres
            for bilinear.
        """
        cols = np.asarray(cols, dtype=np.float64)
        rows = np.asarray(rows, dtype=np.float64)
        out = np.full(cols.shape, np.nan, dtype=np.float64)

        n_rows, n_cols = self.shape
        finite = np.isfinite(cols) & np.isfinite(rows)
        if self.order == 0:
            # Each pixel covers half a pixel either side of its centre
            inside = (
                finite
                & (cols >= -0.5) & (cols < n_cols - 0.5)
                & (rows >= -0.5) & (rows < n_rows - 0.5)
            )
        else:
            inside = (
                finite
                & (cols >= 0) & (cols <= n_cols - 1)
                & (rows >= 0) & (rows <= n_rows - 1)
            )
        if not np.any(inside):
            return out

        coords = np.array([rows[inside], cols[inside]])
        values = map_coordinates(
            self._filled, coords, order=self.order, mode='nearest'
        )
        support = map_coordinates(
            self._support, coords, order=self.order, mode='nearest'
        )
        values[support < 1.0 - _SUPPORT_TOLERANCE] = np.nan
        out[inside] = values
        return out
