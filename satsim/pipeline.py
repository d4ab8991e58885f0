# -*- coding: utf-8 -*-
"""
SatSim Pipeline - Drive a synthetic imaging run from validated options.

``SatSimPipeline`` wires the stages together::

    options --> DEM --> trajectory --> jitter --> cameras --> images
                          (or: camera list ---------------^)

Option validation, DEM loading, and trajectory construction happen
before any camera is processed, so configuration and trajectory errors
abort the run. Failures while synthesizing one camera are recorded in
its ``SynthesisResult`` and the other cameras continue.

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

# Standard library
import logging
from pathlib import Path
from typing import List, Tuple

# SatSim internal
from satsim.camera.base import CameraModel
from satsim.camera.camera_list import read_camera_list
from satsim.config import SatSimOptions
from satsim.elevation.raster import RasterDEM
from satsim.factory import generate_cameras, output_base, write_cameras
from satsim.IO.geotiff import read_georef_image
from satsim.jitter import JitterModel, JitterParameters
from satsim.synthesis.synthesizer import (
    DEFAULT_NODATA,
    ImageSynthesizer,
    SynthesisResult,
)
from satsim.trajectory import Trajectory, compute_trajectory, resolve_orientation

logger = logging.getLogger(__name__)


class SatSimPipeline:
    """Run trajectory generation, camera writing, and image synthesis.

    Parameters
    ----------
    options : SatSimOptions
        Validated on construction.

    Raises
    ------
    ArgumentError
        If the options are invalid.

    Examples
    --------
    >>> opts = SatSimOptions.from_yaml('sim.yaml')
    >>> results = SatSimPipeline(opts).run()
    >>> [r.image_path for r in results if r.ok]
    """

    def __init__(self, options: SatSimOptions) -> None:
        self.options = options.validate()

    def build_trajectory(self, dem: RasterDEM) -> Trajectory:
        """Trajectory from the DEM-pixel positions in the options, with
        jitter applied when configured."""
        opts = self.options
        georef = dem.georef

        def to_map(pixel):
            x, y = georef.pixel_to_map(pixel[0], pixel[1])
            return float(x), float(y)

        first = to_map(opts.first) + (opts.first[2],)
        last = to_map(opts.last) + (opts.last[2],)
        first_ground = last_ground = None
        if opts.first_ground_pos is not None:
            first_ground = to_map(opts.first_ground_pos)
            last_ground = to_map(opts.last_ground_pos)

        orientation = resolve_orientation(
            opts.roll, opts.pitch, opts.yaw, first_ground, last_ground,
        )
        trajectory = compute_trajectory(
            first, last, int(opts.num), georef, orientation, dem,
        )

        params = JitterParameters.from_options(
            opts.velocity, opts.jitter_frequency, opts.horizontal_uncertainty,
        )
        if params is not None:
            trajectory = JitterModel(params).apply(trajectory)
        return trajectory

    def prepare_cameras(
        self, dem: RasterDEM
    ) -> Tuple[List[CameraModel], List[str]]:
        """Cameras and their output bases (paths without extension).

        Generated cameras are written next to their images; cameras from
        a camera list are used as they are.
        """
        opts = self.options
        prefix = opts.output_prefix

        if opts.camera_list:
            cameras, names = read_camera_list(
                opts.camera_list, image_size=opts.image_size_pixels,
            )
            return cameras, [output_base(prefix, name) for name in names]

        trajectory = self.build_trajectory(dem)
        cameras = generate_cameras(
            trajectory,
            focal_length=float(opts.focal_length),
            optical_center=opts.optical_center,
            image_size=opts.image_size_pixels,
            camera_type=opts.camera_type,
            datum=dem.datum,
        )
        bases = [output_base(prefix, i) for i in range(len(cameras))]
        write_cameras(cameras, bases)
        return cameras, bases

    def run(self) -> List[SynthesisResult]:
        """Execute the run.

        Returns
        -------
        List[SynthesisResult]
            One result per camera, in order; empty when ``no_images``.
        """
        opts = self.options
        Path(opts.output_prefix).parent.mkdir(parents=True, exist_ok=True)

        dem = RasterDEM.from_file(opts.dem)
        cameras, bases = self.prepare_cameras(dem)
        if opts.no_images:
            logger.info("Skipping image synthesis (no_images)")
            return []

        ortho_georef, ortho_pixels, ortho_nodata = read_georef_image(opts.ortho)
        if opts.output_nodata is not None:
            nodata = float(opts.output_nodata)
        elif ortho_nodata is not None:
            nodata = float(ortho_nodata)
        else:
            nodata = DEFAULT_NODATA

        synthesizer = ImageSynthesizer(
            dem,
            ortho_georef,
            ortho_pixels,
            interpolation=opts.interpolation,
            nodata=nodata,
            tolerance=opts.dem_height_error_tol,
            max_iterations=int(opts.max_iterations),
            block_rows=int(opts.block_rows),
            threads=int(opts.threads),
        )
        return synthesizer.run(cameras, bases)
