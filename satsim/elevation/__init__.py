# -*- coding: utf-8 -*-
"""
Elevation Module - Terrain height lookup from georeferenced DEMs.

Key Classes
-----------
- ElevationModel: Abstract base class for elevation models
- RasterDEM: Georeferenced DEM raster with bilinear height lookup

Usage
-----
    >>> from satsim.elevation import RasterDEM
    >>> dem = RasterDEM.from_file('dem.tif')
    >>> dem.get_elevation(34.05, -118.25)
    432.0

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

from satsim.elevation.base import ElevationModel
from satsim.elevation.raster import RasterDEM

__all__ = [
    'ElevationModel',
    'RasterDEM',
]
