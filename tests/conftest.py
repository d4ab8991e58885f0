# -*- coding: utf-8 -*-
"""
Shared fixtures - Synthetic DEMs, orthoimages, and GeoTIFF helpers.

The in-memory fixtures use a transverse Mercator CRS centred on
(lon 0, lat 0) so that map coordinate ``(0, 0)`` lies inside the
rasters and map meters are ground meters near the origin.

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

import rasterio
from rasterio.transform import Affine

LOCAL_CRS = (
    '+proj=tmerc +lat_0=0 +lon_0=0 +k=1 +x_0=0 +y_0=0 '
    '+datum=WGS84 +units=m +no_defs'
)
UTM_CRS = 'EPSG:32631'

# 100 x 80 DEM, 5 m pixels, x in [-200, 300], y in [-200, 200]
DEM_SHAPE = (80, 100)
DEM_TRANSFORM_ARGS = (5.0, 0.0, -200.0, 0.0, -5.0, 200.0)


def write_geotiff(path, data, transform=None, crs=None, nodata=None):
    """Write a single-band GeoTIFF with rasterio."""
    profile = {
        'driver': 'GTiff',
        'height': data.shape[0],
        'width': data.shape[1],
        'count': 1,
        'dtype': data.dtype.name,
    }
    if transform is not None:
        profile['transform'] = transform
    if crs is not None:
        profile['crs'] = crs
    if nodata is not None:
        profile['nodata'] = nodata
    with rasterio.open(str(path), 'w', **profile) as dst:
        dst.write(data, 1)
    return path


@pytest.fixture
def dem_georef():
    """GeoReference of the local test DEM grid."""
    from satsim.georef import GeoReference

    return GeoReference(Affine(*DEM_TRANSFORM_ARGS), LOCAL_CRS, DEM_SHAPE)


@pytest.fixture
def flat_dem(dem_georef):
    """DEM at height 0 everywhere."""
    from satsim.elevation.raster import RasterDEM

    return RasterDEM(np.zeros(DEM_SHAPE), dem_georef)


@pytest.fixture
def utm_rasters(tmp_path):
    """Flat DEM and constant orthoimage GeoTIFFs in UTM zone 31N.

    Returns ``(dem_path, ortho_path)``. The DEM is 100 x 80 pixels of
    5 m at height 0; the ortho covers the same area with 2.5 m pixels of
    value 100.
    """
    dem = np.zeros(DEM_SHAPE, dtype=np.float32)
    dem_path = write_geotiff(
        tmp_path / 'dem.tif', dem,
        Affine(5.0, 0.0, 499800.0, 0.0, -5.0, 10200.0), UTM_CRS,
        nodata=-9999.0,
    )
    ortho = np.full((160, 200), 100.0, dtype=np.float32)
    ortho_path = write_geotiff(
        tmp_path / 'ortho.tif', ortho,
        Affine(2.5, 0.0, 499800.0, 0.0, -2.5, 10200.0), UTM_CRS,
    )
    return dem_path, ortho_path
