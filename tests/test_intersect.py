# -*- coding: utf-8 -*-
"""
Ray/DEM Intersection Tests - Bracketed root finding against terrain.

Tests convergence on flat, raised, and sloped DEMs, and the NaN results
for rays that miss, leave coverage, cross nodata, or run out of
iterations.

Dependencies
------------
pytest
rasterio
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

import numpy as np
import pytest

from satsim.elevation.raster import RasterDEM
from satsim.synthesis.intersect import intersect_dem

from conftest import DEM_SHAPE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _down_rays(georef, xs, ys, height=500.0):
    """Rays from ``height`` above map points straight down."""
    xs = np.atleast_1d(np.asarray(xs, dtype=np.float64))
    ys = np.atleast_1d(np.asarray(ys, dtype=np.float64))
    top = georef.map_to_cartesian(xs, ys, np.full(xs.shape, height))
    bottom = georef.map_to_cartesian(xs, ys, np.zeros(xs.shape))
    dirs = bottom - top
    return top, dirs / np.linalg.norm(dirs, axis=1, keepdims=True)


@pytest.fixture
def raised_dem(dem_georef):
    return RasterDEM(np.full(DEM_SHAPE, 100.0), dem_georef)


@pytest.fixture
def ramp_dem(dem_georef):
    """Height rises 1 m per pixel eastward, from 50 to 149."""
    cols = np.broadcast_to(np.arange(DEM_SHAPE[1], dtype=np.float64), DEM_SHAPE)
    return RasterDEM(50.0 + cols, dem_georef)


# ---------------------------------------------------------------------------
# Convergence
# ---------------------------------------------------------------------------

class TestConvergence:
    """Rays that hit the terrain."""

    def test_flat(self, flat_dem, dem_georef):
        origins, dirs = _down_rays(dem_georef, [0.0, -120.0], [0.0, 80.0])
        points = intersect_dem(origins, dirs, flat_dem)
        xs, ys, hs = dem_georef.cartesian_to_map(points)
        np.testing.assert_allclose(xs, [0.0, -120.0], atol=1e-3)
        np.testing.assert_allclose(ys, [0.0, 80.0], atol=1e-3)
        np.testing.assert_allclose(hs, 0.0, atol=1e-3)

    def test_raised(self, raised_dem, dem_georef):
        origins, dirs = _down_rays(dem_georef, [10.0], [-10.0])
        points = intersect_dem(origins, dirs, raised_dem)
        _, _, hs = dem_georef.cartesian_to_map(points)
        assert hs[0] == pytest.approx(100.0, abs=1e-3)

    def test_sloped_oblique(self, ramp_dem, dem_georef):
        """Oblique rays over a slope land within tolerance of the terrain."""
        origins, _ = _down_rays(dem_georef, [-150.0, 0.0], [0.0, 50.0], 800.0)
        targets = dem_georef.map_to_cartesian(
            np.array([-50.0, 150.0]), np.array([40.0, -60.0]), 0.0
        )
        dirs = targets - origins
        points = intersect_dem(origins, dirs, ramp_dem, tolerance=1e-4)
        terrain, heights = ramp_dem.height_below(points)
        assert np.all(np.isfinite(points))
        np.testing.assert_allclose(terrain - heights, 0.0, atol=1e-4)

    def test_point_on_ray(self, ramp_dem, dem_georef):
        origins, _ = _down_rays(dem_georef, [-150.0], [0.0], 800.0)
        target = dem_georef.map_to_cartesian(np.array([100.0]), np.array([0.0]), 0.0)
        dirs = target - origins
        point = intersect_dem(origins, dirs, ramp_dem)[0]
        offset = point - origins[0]
        unit = dirs[0] / np.linalg.norm(dirs[0])
        np.testing.assert_allclose(
            np.cross(offset, unit), 0.0, atol=1e-6 * np.linalg.norm(offset)
        )
        assert np.dot(offset, unit) > 0.0

    @pytest.mark.parametrize('target_x', [-150.0, -196.0])
    def test_oblique_entering_from_outside(self, dem_georef, target_x):
        """A tall peak elsewhere does not hide terrain near the DEM edge.

        The ray crosses the top of the height range outside the DEM and
        enters coverage above the ground, 50 m or 1.5 m before it hits.
        """
        heights = np.zeros(DEM_SHAPE)
        heights[40, 90] = 1000.0
        dem = RasterDEM(heights, dem_georef)
        origins, _ = _down_rays(dem_georef, [target_x - 3000.0], [0.0], 5000.0)
        target = dem_georef.map_to_cartesian(
            np.array([target_x]), np.array([0.0]), 0.0
        )
        points = intersect_dem(origins, target - origins, dem)
        xs, ys, hs = dem_georef.cartesian_to_map(points)
        np.testing.assert_allclose(xs, [target_x], atol=1e-2)
        np.testing.assert_allclose(ys, [0.0], atol=1e-2)
        np.testing.assert_allclose(hs, [0.0], atol=1e-2)

    def test_empty(self, flat_dem):
        assert intersect_dem(np.zeros((0, 3)), np.zeros((0, 3)), flat_dem).shape == (0, 3)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestNoIntersection:
    """Rays without a terrain intersection give NaN rows."""

    def test_upward(self, flat_dem, dem_georef):
        origins, dirs = _down_rays(dem_georef, [0.0], [0.0])
        points = intersect_dem(origins, -dirs, flat_dem)
        assert np.all(np.isnan(points))

    def test_outside_coverage(self, flat_dem, dem_georef):
        origins, dirs = _down_rays(dem_georef, [5000.0, 0.0], [0.0, 0.0])
        points = intersect_dem(origins, dirs, flat_dem)
        assert np.all(np.isnan(points[0]))
        assert np.all(np.isfinite(points[1]))

    def test_nodata_hole(self, dem_georef):
        heights = np.zeros(DEM_SHAPE)
        heights[30:50, 30:50] = np.nan
        dem = RasterDEM(heights, dem_georef)
        origins, dirs = _down_rays(dem_georef, [0.0, -150.0], [0.0, 150.0])
        points = intersect_dem(origins, dirs, dem)
        assert np.all(np.isnan(points[0]))
        assert np.all(np.isfinite(points[1]))

    def test_iteration_bound(self, raised_dem, dem_georef):
        origins, dirs = _down_rays(dem_georef, [0.0], [0.0])
        points = intersect_dem(origins, dirs, raised_dem, max_iterations=0)
        assert np.all(np.isnan(points))
