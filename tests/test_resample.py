# -*- coding: utf-8 -*-
"""
Raster Sampler Tests - Nearest and bilinear sampling with nodata.

Dependencies
------------
pytest
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

import numpy as np
import pytest

from satsim.resample import RasterSampler


@pytest.fixture
def grid():
    """3 x 4 ramp: value = 4 * row + col."""
    return np.arange(12.0).reshape(3, 4)


class TestBilinear:
    """Bilinear sampling."""

    def test_between_columns(self, grid):
        np.testing.assert_allclose(
            RasterSampler(grid)(np.array([1.5]), np.array([0.0])), [1.5]
        )

    def test_between_rows_and_columns(self, grid):
        np.testing.assert_allclose(
            RasterSampler(grid)(np.array([1.5]), np.array([1.5])), [7.5]
        )

    def test_exact_corner(self, grid):
        """The last pixel centre is still inside."""
        np.testing.assert_allclose(
            RasterSampler(grid)(np.array([3.0]), np.array([2.0])), [11.0]
        )

    def test_outside(self, grid):
        out = RasterSampler(grid)(
            np.array([3.1, -0.5, 1.0]), np.array([0.0, 1.0, 2.5])
        )
        assert np.all(np.isnan(out))

    def test_nan_positions(self, grid):
        out = RasterSampler(grid)(np.array([np.nan, 1.0]), np.array([0.0, 1.0]))
        assert np.isnan(out[0])
        assert out[1] == pytest.approx(5.0)

    def test_shape_preserved(self, grid):
        cols = np.full((2, 5), 1.0)
        rows = np.full((2, 5), 1.0)
        assert RasterSampler(grid)(cols, rows).shape == (2, 5)


class TestNodata:
    """NaN samples mark nodata."""

    def test_touching_nodata(self, grid):
        grid[1, 1] = np.nan
        sampler = RasterSampler(grid)
        out = sampler(np.array([1.5, 0.5, 1.0]), np.array([1.0, 0.5, 1.0]))
        assert np.all(np.isnan(out))

    def test_away_from_nodata(self, grid):
        grid[1, 1] = np.nan
        sampler = RasterSampler(grid)
        np.testing.assert_allclose(
            sampler(np.array([2.5, 0.0]), np.array([1.0, 0.0])), [6.5, 0.0]
        )

    def test_nearest_ignores_far_nodata(self, grid):
        grid[1, 1] = np.nan
        sampler = RasterSampler(grid, order=0)
        out = sampler(np.array([1.4, 1.6]), np.array([1.4, 1.4]))
        assert np.isnan(out[0])
        assert out[1] == pytest.approx(6.0)


class TestNearest:
    """Nearest-neighbour sampling and validation."""

    def test_rounds(self, grid):
        np.testing.assert_allclose(
            RasterSampler(grid, order=0)(np.array([1.4, 1.6]), np.array([0.0, 0.0])),
            [1.0, 2.0],
        )

    def test_outer_half_pixel(self, grid):
        """Edge pixels cover half a pixel beyond their centres."""
        out = RasterSampler(grid, order=0)(
            np.array([-0.4, 3.4, 0.0, 3.0]), np.array([0.0, 0.0, -0.4, 2.4])
        )
        np.testing.assert_allclose(out, [0.0, 3.0, 0.0, 11.0])

    def test_beyond_outer_edge(self, grid):
        out = RasterSampler(grid, order=0)(
            np.array([-0.6, 3.5, 1.0]), np.array([0.0, 0.0, 2.5])
        )
        assert np.all(np.isnan(out))

    def test_bilinear_stops_at_centres(self, grid):
        out = RasterSampler(grid, order=1)(np.array([-0.4]), np.array([0.0]))
        assert np.isnan(out[0])

    def test_bad_order(self, grid):
        with pytest.raises(ValueError):
            RasterSampler(grid, order=3)

    def test_bad_dims(self):
        with pytest.raises(ValueError):
            RasterSampler(np.zeros(5))
