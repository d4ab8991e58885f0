# -*- coding: utf-8 -*-
"""
Backend Detection - Detect available raster and projection libraries.

Probes for rasterio and pyproj at import time. Provides boolean flags and
a helper that georeferencing, DEM, and GeoTIFF code use to verify required
packages are installed before constructing objects.

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
from typing import List

# SatSim internal
from satsim.exceptions import DependencyError

_HAS_RASTERIO = False
_HAS_PYPROJ = False

try:
    import rasterio  # noqa: F401
    _HAS_RASTERIO = True
except ImportError:
    pass

try:
    import pyproj  # noqa: F401
    _HAS_PYPROJ = True
except ImportError:
    pass


def require_geo_backend(feature: str = "Georeferencing") -> None:
    """Verify that all packages required for georeferencing are installed.

    Checks for both rasterio (raster I/O and ``Affine`` transforms) and
    pyproj (CRS-aware coordinate transformations). Raises a single
    error listing all missing packages so users can install everything
    in one step.

    Parameters
    ----------
    feature : str, optional
        Name of the feature requiring the backend, used in the message.

    Raises
    ------
    DependencyError
        If rasterio or pyproj (or both) are not installed.
    """
    missing: List[str] = []
    if not _HAS_RASTERIO:
        missing.append('rasterio')
    if not _HAS_PYPROJ:
        missing.append('pyproj')

    if missing:
        packages = ' '.join(missing)
        raise DependencyError(
            f"{feature} requires {', '.join(missing)}. "
            f"Install with: pip install {packages}"
        )
