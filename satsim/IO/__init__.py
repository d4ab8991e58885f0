# -*- coding: utf-8 -*-
"""
IO Module - Georeferenced raster input and synthetic image output.

Key Classes
-----------
- RasterReader / ImageWriter: Abstract bases
- GeoTIFFReader: rasterio-backed raster reader
- GeoTIFFWriter: rasterio-backed GeoTIFF writer

Key Functions
-------------
- read_georef_image: Georeference + first band + nodata in one call

Dependencies
------------
rasterio

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

from satsim.IO.base import ImageWriter, RasterReader
from satsim.IO.geotiff import GeoTIFFReader, GeoTIFFWriter, read_georef_image

__all__ = [
    'RasterReader',
    'ImageWriter',
    'GeoTIFFReader',
    'GeoTIFFWriter',
    'read_georef_image',
]
