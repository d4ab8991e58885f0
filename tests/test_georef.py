# -*- coding: utf-8 -*-
"""
GeoReference Tests - Pixel, map, geodetic, and Cartesian conversions.

Tests the pixel-centre convention of the affine transform, inversion,
Cartesian round trips through the datum, bounds checks, and
construction errors for projected and geographic CRSs.

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

from satsim.exceptions import GeolocationError
from satsim.georef import GeoReference

from conftest import DEM_SHAPE, DEM_TRANSFORM_ARGS, LOCAL_CRS


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def geographic():
    """0.001 degree pixels around (lon 0, lat 0)."""
    return GeoReference(
        Affine(0.001, 0.0, -0.05, 0.0, -0.001, 0.04), 'EPSG:4326', (80, 100)
    )


# ---------------------------------------------------------------------------
# pixel <-> map
# ---------------------------------------------------------------------------

class TestPixelMap:
    """Affine conversions with pixel centres at +0.5."""

    def test_first_pixel_center(self, dem_georef):
        x, y = dem_georef.pixel_to_map(0, 0)
        assert float(x) == pytest.approx(-197.5)
        assert float(y) == pytest.approx(197.5)

    def test_map_origin(self, dem_georef):
        cols, rows = dem_georef.map_to_pixel(0.0, 0.0)
        assert float(cols) == pytest.approx(39.5)
        assert float(rows) == pytest.approx(39.5)

    def test_round_trip(self, dem_georef):
        cols = np.array([0.0, 12.25, 99.0])
        rows = np.array([0.0, 40.5, 79.0])
        xs, ys = dem_georef.pixel_to_map(cols, rows)
        c2, r2 = dem_georef.map_to_pixel(xs, ys)
        np.testing.assert_allclose(c2, cols, atol=1e-9)
        np.testing.assert_allclose(r2, rows, atol=1e-9)

    def test_transform_property(self, dem_georef):
        assert dem_georef.transform == Affine(*DEM_TRANSFORM_ARGS)


# ---------------------------------------------------------------------------
# map <-> geodetic <-> Cartesian
# ---------------------------------------------------------------------------

class TestCartesian:
    """Conversions through the datum."""

    def test_origin_is_lon0_lat0(self, dem_georef):
        lon, lat = dem_georef.map_to_lonlat(0.0, 0.0)
        assert float(lon) == pytest.approx(0.0, abs=1e-9)
        assert float(lat) == pytest.approx(0.0, abs=1e-9)

    def test_map_to_cartesian(self, dem_georef):
        np.testing.assert_allclose(
            dem_georef.map_to_cartesian(0.0, 0.0, 100.0),
            [6378237.0, 0.0, 0.0], atol=1e-4,
        )

    def test_pixel_round_trip(self, dem_georef):
        cols = np.array([0.0, 50.0, 99.0])
        rows = np.array([79.0, 10.0, 0.0])
        heights = np.array([-20.0, 0.0, 4500.0])
        xyz = dem_georef.pixel_to_cartesian(cols, rows, heights)
        c2, r2, h2 = dem_georef.cartesian_to_pixel(xyz)
        np.testing.assert_allclose(c2, cols, atol=1e-6)
        np.testing.assert_allclose(r2, rows, atol=1e-6)
        np.testing.assert_allclose(h2, heights, atol=1e-5)

    def test_geographic_identity(self, geographic):
        lon, lat = geographic.map_to_lonlat(np.array([0.01]), np.array([0.02]))
        np.testing.assert_array_equal(lon, [0.01])
        np.testing.assert_array_equal(lat, [0.02])

    def test_geographic_cartesian(self, geographic):
        xyz = geographic.map_to_cartesian(np.array([0.0]), np.array([0.0]))
        np.testing.assert_allclose(xyz, [[6378137.0, 0.0, 0.0]], atol=1e-6)


# ---------------------------------------------------------------------------
# Bounds and construction
# ---------------------------------------------------------------------------

class TestBoundsAndConstruction:
    """contains() and constructor validation."""

    def test_contains(self, dem_georef):
        inside = dem_georef.contains(
            np.array([0.0, 99.0, 99.5, -0.1, 50.0]),
            np.array([0.0, 79.0, 10.0, 10.0, 79.5]),
        )
        np.testing.assert_array_equal(inside, [True, True, False, False, False])

    def test_contains_requires_shape(self):
        georef = GeoReference(Affine(*DEM_TRANSFORM_ARGS), LOCAL_CRS)
        with pytest.raises(GeolocationError):
            georef.contains(0.0, 0.0)

    def test_shape(self, dem_georef):
        assert dem_georef.shape == DEM_SHAPE

    def test_transform_type(self):
        with pytest.raises(TypeError):
            GeoReference(DEM_TRANSFORM_ARGS, LOCAL_CRS)

    def test_missing_crs(self):
        with pytest.raises(GeolocationError):
            GeoReference(Affine(*DEM_TRANSFORM_ARGS), None)
