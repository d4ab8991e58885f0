# -*- coding: utf-8 -*-
"""
Image Synthesizer - Render camera images by ray casting a DEM.

For every pixel of a camera's image grid, ``ImageSynthesizer`` casts the
camera ray, intersects it with the DEM, maps the ground point into the
orthoimage, and samples the orthoimage there. Pixels whose ray misses
the terrain, or whose ground point falls outside the orthoimage or on
its nodata, get the output nodata value.

Rows are processed in fixed blocks, so memory use is bounded and
independent of image size. Cameras run concurrently on a thread pool;
results come back in camera order and images do not depend on the
number of workers. A camera whose synthesis raises is recorded as
failed and the remaining cameras continue.

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
2026-02-17

Modified
--------
2026-10-16
"""

# Standard library
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

# Third-party
import numpy as np

# SatSim internal
from satsim._backend import require_geo_backend
from satsim.camera.base import CameraModel
from satsim.elevation.raster import RasterDEM
from satsim.exceptions import SynthesisError
from satsim.georef import GeoReference
from satsim.resample import RasterSampler
from satsim.synthesis.intersect import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    intersect_dem,
)
from satsim.vocabulary import Interpolation

logger = logging.getLogger(__name__)

#: Output nodata when neither the caller nor the orthoimage supplies one.
DEFAULT_NODATA = float(np.finfo(np.float32).min)

DEFAULT_BLOCK_ROWS = 256


@dataclass
class SynthesisResult:
    """Outcome of synthesizing one camera.

    Attributes
    ----------
    index : int
        Camera position in the input sequence.
    name : str
        Camera name used for output files.
    image_path : Path or None
        Written image, if any.
    valid_pixels : int
        Pixels with an orthoimage sample.
    nodata_pixels : int
        Pixels set to nodata.
    error : Exception or None
        Failure that stopped this camera, if any.
    """

    index: int
    name: str
    image_path: Optional[Path] = None
    valid_pixels: int = 0
    nodata_pixels: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ImageSynthesizer:
    """Synthesize camera images from a DEM and an orthoimage.

    Parameters
    ----------
    dem : RasterDEM
        Terrain. Camera rays are in its datum's Cartesian frame.
    ortho_georef : GeoReference
        Orthoimage georeference.
    ortho_pixels : np.ndarray
        Orthoimage samples, shape ``(rows, cols)``; NaN marks nodata.
    interpolation : Interpolation, default=Interpolation.BILINEAR
        Orthoimage resampling.
    nodata : float, default=DEFAULT_NODATA
        Value written to pixels without a sample.
    tolerance : float, default=1e-3
        Ray/DEM height error tolerance in meters.
    max_iterations : int, default=100
        Ray/DEM iteration bound per pixel.
    block_rows : int, default=256
        Image rows processed per vectorized block.
    threads : int, default=1
        Cameras synthesized concurrently.

    Examples
    --------
    >>> synth = ImageSynthesizer(dem, ortho_georef, ortho_pixels)
    >>> image = synth.synthesize(camera)
    >>> results = synth.run(cameras, ['out/run-00000', 'out/run-00001'])
    """

    def __init__(
        self,
        dem: RasterDEM,
        ortho_georef: GeoReference,
        ortho_pixels: np.ndarray,
        interpolation: Interpolation = Interpolation.BILINEAR,
        nodata: float = DEFAULT_NODATA,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        block_rows: int = DEFAULT_BLOCK_ROWS,
        threads: int = 1,
    ) -> None:
        require_geo_backend("ImageSynthesizer")
        import pyproj

        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        if block_rows < 1:
            raise ValueError(f"block_rows must be at least 1, got {block_rows}")
        if threads < 1:
            raise ValueError(f"threads must be at least 1, got {threads}")

        self.dem = dem
        self.ortho_georef = ortho_georef
        self.interpolation = Interpolation(interpolation)
        self.nodata = float(nodata)
        self.tolerance = float(tolerance)
        self.max_iterations = int(max_iterations)
        self.block_rows = int(block_rows)
        self.threads = int(threads)

        self._ortho = RasterSampler(
            np.asarray(ortho_pixels, dtype=np.float64),
            order=self.interpolation.order,
        )
        self._ground_to_ortho = pyproj.Transformer.from_crs(
            dem.georef.crs.geodetic_crs, ortho_georef.crs, always_xy=True
        )

    # -----------------------------------------------------------------
    # Single camera
    # -----------------------------------------------------------------

    def sample_ortho(self, points: np.ndarray) -> np.ndarray:
        """Orthoimage values at Cartesian ground points; NaN where none."""
        lons, lats, _ = self.dem.datum.cartesian_to_geodetic(points)
        xs, ys = self._ground_to_ortho.transform(lons, lats)
        cols, rows = self.ortho_georef.map_to_pixel(
            np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
        )
        return self._ortho(np.atleast_1d(cols), np.atleast_1d(rows))

    def render_rows(
        self, camera: CameraModel, row_start: int, row_end: int
    ) -> np.ndarray:
        """Orthoimage samples for image rows ``[row_start, row_end)``.

        Returns
        -------
        np.ndarray
            float64 block of shape ``(row_end - row_start, width)``, NaN
            where there is no sample.
        """
        width = camera.image_size[0]
        cols, rows = np.meshgrid(
            np.arange(width, dtype=np.float64),
            np.arange(row_start, row_end, dtype=np.float64),
        )
        origins, directions = camera.rays(cols.ravel(), rows.ravel())
        points = intersect_dem(
            origins, directions, self.dem,
            tolerance=self.tolerance, max_iterations=self.max_iterations,
        )
        values = self.sample_ortho(points)
        return values.reshape(cols.shape)

    def synthesize(self, camera: CameraModel) -> np.ndarray:
        """Render one camera image.

        Returns
        -------
        np.ndarray
            float32 image of shape ``(height, width)``; pixels without a
            sample hold ``self.nodata``.

        Raises
        ------
        SynthesisError
            If the camera has no image size.
        """
        return self._render(camera)[0]

    def _render(self, camera: CameraModel) -> Tuple[np.ndarray, np.ndarray]:
        """Image and the mask of pixels that received a sample."""
        if camera.image_size is None:
            raise SynthesisError(f"{camera!r} has no image size")
        width, height = camera.image_size
        image = np.full((height, width), self.nodata, dtype=np.float32)
        valid = np.zeros((height, width), dtype=bool)

        for row_start in range(0, height, self.block_rows):
            row_end = min(row_start + self.block_rows, height)
            block = self.render_rows(camera, row_start, row_end)
            sampled = np.isfinite(block)
            image[row_start:row_end][sampled] = block[sampled]
            valid[row_start:row_end] = sampled

        return image, valid

    # -----------------------------------------------------------------
    # Many cameras
    # -----------------------------------------------------------------

    def _run_one(
        self,
        index: int,
        camera: CameraModel,
        base: str,
        write_image: bool,
    ) -> SynthesisResult:
        name = Path(base).name
        result = SynthesisResult(index=index, name=name)
        try:
            image, valid = self._render(camera)
            result.valid_pixels = int(np.count_nonzero(valid))
            result.nodata_pixels = int(image.size - result.valid_pixels)
            if write_image:
                from satsim.IO.geotiff import GeoTIFFWriter

                path = Path(base + '.tif')
                with GeoTIFFWriter(path, nodata=self.nodata) as writer:
                    writer.write(image)
                result.image_path = path
                logger.info("Writing: %s", path)
        except Exception as e:
            logger.exception("Synthesis failed for camera %s", name)
            result.error = e
            return result

        logger.info(
            "Camera %s: %d valid, %d no-data pixels",
            name, result.valid_pixels, result.nodata_pixels,
        )
        return result

    def run(
        self,
        cameras: Sequence[CameraModel],
        bases: Sequence[str],
        write_images: bool = True,
    ) -> List[SynthesisResult]:
        """Synthesize every camera.

        Parameters
        ----------
        cameras : Sequence[CameraModel]
        bases : Sequence[str]
            Output path without extension for each camera; images are
            written to ``base + '.tif'``.
        write_images : bool, default=True
            Write each image as a float32 GeoTIFF.

        Returns
        -------
        List[SynthesisResult]
            One result per camera, in camera order.
        """
        if len(cameras) != len(bases):
            raise ValueError(
                f"Got {len(cameras)} cameras but {len(bases)} output names"
            )

        jobs = list(zip(range(len(cameras)), cameras, bases))
        if self.threads == 1:
            results = [self._run_one(i, c, b, write_images) for i, c, b in jobs]
        else:
            with ThreadPoolExecutor(max_workers=self.threads) as pool:
                results = list(pool.map(
                    lambda job: self._run_one(*job, write_images), jobs
                ))

        n_failed = sum(not r.ok for r in results)
        if n_failed:
            logger.warning(
                "%d of %d camera(s) failed to synthesize", n_failed, len(results)
            )
        return results
