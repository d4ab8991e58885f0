# -*- coding: utf-8 -*-
"""
Elevation Tests - RasterDEM lookups, coverage, and file loading.

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

from rasterio.transform import Affine

from satsim.elevation.raster import RasterDEM
from satsim.exceptions import GeolocationError
from satsim.georef import GeoReference

from conftest import DEM_SHAPE, DEM_TRANSFORM_ARGS, LOCAL_CRS, write_geotiff


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def ramp_dem(dem_georef):
    """Height = 10 + 0.5 * column."""
    cols = np.broadcast_to(np.arange(DEM_SHAPE[1], dtype=np.float64), DEM_SHAPE)
    return RasterDEM(10.0 + 0.5 * cols, dem_georef)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class TestLookups:
    """Height queries in pixel, map, and geodetic coordinates."""

    def test_height_range(self, ramp_dem, flat_dem):
        assert ramp_dem.height_range() == (10.0, 10.0 + 0.5 * 99)
        assert flat_dem.height_range() == (0.0, 0.0)

    def test_at_pixel(self, ramp_dem):
        np.testing.assert_allclose(
            ramp_dem.height_at_pixel(np.array([10.5]), np.array([3.0])), [15.25]
        )

    def test_at_map(self, ramp_dem):
        """Map x of column 10's centre is -147.5."""
        np.testing.assert_allclose(
            ramp_dem.height_at_map(np.array([-147.5]), np.array([0.0])), [15.0]
        )

    def test_scalar_geodetic(self, ramp_dem):
        """(lat 0, lon 0) is map (0, 0), i.e. column 39.5."""
        h = ramp_dem.get_elevation(0.0, 0.0)
        assert isinstance(h, float)
        assert h == pytest.approx(29.75, abs=1e-6)

    def test_stacked_geodetic(self, ramp_dem):
        heights = ramp_dem.get_elevation(np.array([[0.0, 0.0], [0.0, 0.0]]))
        np.testing.assert_allclose(heights, [29.75, 29.75], atol=1e-6)

    def test_bad_stacked_shape(self, ramp_dem):
        with pytest.raises(ValueError):
            ramp_dem.get_elevation(np.zeros((3, 2)))

    def test_outside_coverage(self, ramp_dem):
        h = ramp_dem.get_elevation(np.array([10.0]), np.array([0.0]))
        assert np.isnan(h[0])

    def test_height_below(self, ramp_dem):
        xyz = ramp_dem.datum.geodetic_to_cartesian(
            np.array([0.0]), np.array([0.0]), np.array([50.0])
        )
        terrain, h = ramp_dem.height_below(xyz)
        assert terrain[0] == pytest.approx(29.75, abs=1e-6)
        assert h[0] == pytest.approx(50.0, abs=1e-6)


# ---------------------------------------------------------------------------
# Nodata and construction
# ---------------------------------------------------------------------------

class TestNodataAndConstruction:
    """NaN holes and constructor validation."""

    def test_hole_is_nan(self, dem_georef):
        heights = np.zeros(DEM_SHAPE)
        heights[10:20, 10:20] = np.nan
        dem = RasterDEM(heights, dem_georef)
        out = dem.height_at_pixel(np.array([15.0, 50.0]), np.array([15.0, 50.0]))
        assert np.isnan(out[0])
        assert out[1] == 0.0

    def test_range_ignores_nodata(self, dem_georef):
        heights = np.full(DEM_SHAPE, 5.0)
        heights[0, 0] = np.nan
        heights[1, 1] = 7.0
        assert RasterDEM(heights, dem_georef).height_range() == (5.0, 7.0)

    def test_all_nodata(self, dem_georef):
        with pytest.raises(GeolocationError):
            RasterDEM(np.full(DEM_SHAPE, np.nan), dem_georef)

    def test_shape_mismatch(self, dem_georef):
        with pytest.raises(ValueError):
            RasterDEM(np.zeros((10, 10)), dem_georef)

    def test_not_2d(self, dem_georef):
        with pytest.raises(ValueError):
            RasterDEM(np.zeros(DEM_SHAPE[0]), dem_georef)


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------

class TestFromFile:
    """RasterDEM.from_file."""

    def test_nodata_becomes_nan(self, tmp_path):
        heights = np.full(DEM_SHAPE, 12.0, dtype=np.float32)
        heights[0, 0] = -9999.0
        path = write_geotiff(
            tmp_path / 'dem.tif', heights, Affine(*DEM_TRANSFORM_ARGS),
            LOCAL_CRS, nodata=-9999.0,
        )
        dem = RasterDEM.from_file(path)
        assert dem.nodata == -9999.0
        assert dem.height_range() == (12.0, 12.0)
        assert np.isnan(dem.height_at_pixel(np.array([0.0]), np.array([0.0]))[0])
        assert dem.shape == DEM_SHAPE
        assert isinstance(dem.georef, GeoReference)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RasterDEM.from_file(tmp_path / 'missing.tif')

    def test_no_crs(self, tmp_path):
        path = write_geotiff(
            tmp_path / 'plain.tif', np.zeros(DEM_SHAPE, dtype=np.float32),
        )
        with pytest.raises(GeolocationError):
            RasterDEM.from_file(path)
