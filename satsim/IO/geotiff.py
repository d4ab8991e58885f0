# -*- coding: utf-8 -*-
"""
GeoTIFF Reader/Writer - Read georeferenced rasters and write synthetic images.

``GeoTIFFReader`` reads any GDAL-readable raster (GeoTIFF, COG, VRT) with
rasterio. ``GeoTIFFWriter`` writes a single-band synthesized image with
a nodata tag. ``read_georef_image`` is the one-call loader used for the
DEM and the orthoimage: it returns the georeference, the first band as
float64 with nodata replaced by NaN, and the nodata value.

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
2026-02-09

Modified
--------
2026-10-16
"""

# Standard library
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

try:
    import rasterio
    from rasterio.errors import RasterioIOError
    _HAS_RASTERIO = True
except ImportError:
    _HAS_RASTERIO = False

# SatSim internal
from satsim.IO.base import ImageWriter, RasterReader
from satsim.exceptions import DependencyError, InputError
from satsim.georef import GeoReference

logger = logging.getLogger(__name__)


def _require_rasterio() -> None:
    if not _HAS_RASTERIO:
        raise DependencyError(
            "rasterio is required for GeoTIFF I/O. "
            "Install with: pip install rasterio"
        )


class GeoTIFFReader(RasterReader):
    """Read GeoTIFF and other GDAL rasters.

    Parameters
    ----------
    filepath : str or Path
        Path to the raster file.

    Attributes
    ----------
    metadata : Dict[str, Any]
        ``rows``, ``cols``, ``bands``, ``dtype``, ``crs`` (rasterio CRS or
        None), ``transform`` (rasterio Affine) and ``nodata``.
    dataset : rasterio.DatasetReader
        Open rasterio dataset.

    Raises
    ------
    DependencyError
        If rasterio is not installed.
    FileNotFoundError
        If the file does not exist.
    InputError
        If the file cannot be opened as a raster.

    Examples
    --------
    >>> from satsim.IO.geotiff import GeoTIFFReader
    >>> with GeoTIFFReader('dem.tif') as reader:
    ...     heights = reader.read_band()
    ...     print(reader.metadata['nodata'])
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        _require_rasterio()
        self.dataset = None
        super().__init__(filepath)

    def _open(self) -> None:
        try:
            self.dataset = rasterio.open(str(self.filepath))
        except RasterioIOError as e:
            raise InputError(
                f"Failed to open raster {self.filepath}: {e}"
            ) from e

        self.metadata = {
            'rows': self.dataset.height,
            'cols': self.dataset.width,
            'bands': self.dataset.count,
            'dtype': str(self.dataset.dtypes[0]),
            'crs': self.dataset.crs,
            'transform': self.dataset.transform,
            'nodata': self.dataset.nodata,
        }

    def read_band(self, band: int = 0) -> np.ndarray:
        if not 0 <= band < self.metadata['bands']:
            raise InputError(
                f"{self.filepath} has {self.metadata['bands']} band(s); "
                f"band {band} requested"
            )
        return self.dataset.read(band + 1)

    def close(self) -> None:
        if self.dataset is not None:
            self.dataset.close()
            self.dataset = None


class GeoTIFFWriter(ImageWriter):
    """Write a synthesized image as a single-band GeoTIFF.

    The image is in a camera's pixel grid, so no CRS or transform is
    written. Output is deflate-compressed.

    Examples
    --------
    >>> from satsim.IO.geotiff import GeoTIFFWriter
    >>> with GeoTIFFWriter('image.tif', nodata=-9999.0) as writer:
    ...     writer.write(image)
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        nodata: Optional[float] = None,
    ) -> None:
        _require_rasterio()
        super().__init__(filepath, nodata)

    def write(self, image: np.ndarray) -> None:
        if image.ndim != 2:
            raise ValueError(f"Expected a 2D image, got shape {image.shape}")

        profile = {
            'driver': 'GTiff',
            'height': image.shape[0],
            'width': image.shape[1],
            'count': 1,
            'dtype': image.dtype.name,
            'compress': 'deflate',
        }
        if self.nodata is not None:
            profile['nodata'] = self.nodata

        with rasterio.open(str(self.filepath), 'w', **profile) as dst:
            dst.write(image, 1)
        logger.debug("Wrote %s %s to %s", image.dtype, image.shape, self.filepath)


def read_georef_image(
    filepath: Union[str, Path],
) -> Tuple[GeoReference, np.ndarray, Optional[float]]:
    """Read the first band of a georeferenced raster.

    Parameters
    ----------
    filepath : str or Path
        DEM or orthoimage path.

    Returns
    -------
    Tuple[GeoReference, np.ndarray, Optional[float]]
        ``(georeference, pixels, nodata)``. ``pixels`` is float64 with
        nodata samples (and non-finite samples) replaced by NaN.

    Raises
    ------
    GeolocationError
        If the raster has no CRS or transform.
    """
    with GeoTIFFReader(filepath) as reader:
        georef = GeoReference.from_reader(reader)
        pixels = reader.read_band(0).astype(np.float64)
        nodata = reader.metadata['nodata']

    if nodata is not None and np.isfinite(nodata):
        pixels[pixels == nodata] = np.nan
    pixels[~np.isfinite(pixels)] = np.nan

    logger.info(
        "Read %s: %d x %d pixels, CRS %s",
        filepath, pixels.shape[1], pixels.shape[0], georef.crs.name,
    )
    return georef, pixels, nodata
