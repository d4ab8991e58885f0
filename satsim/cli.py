# -*- coding: utf-8 -*-
"""
sat_sim - Command-line entry point for synthetic satellite imaging.

Create simulated satellite cameras along a straight path over a DEM and
render the images they would capture from an orthoimage, or render
images for cameras listed in a file.

Usage
-----
    sat_sim --dem dem.tif --ortho ortho.tif -o run/sim \\
        --first 100 200 450000 --last 400 200 450000 --num 5 \\
        --focal-length 45000 --optical-center 512 512 \\
        --image-size 1024 1024

    sat_sim --config sim.yaml --threads 4

Exit status is 0 on success, 1 when the run fails or any camera fails,
and 2 for command-line syntax errors.

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
import argparse
import logging
import sys
from typing import List, Optional

# SatSim internal
from satsim.config import SatSimOptions
from satsim.exceptions import SatSimError
from satsim.pipeline import SatSimPipeline
from satsim.vocabulary import CameraType, Interpolation

logger = logging.getLogger('satsim.cli')


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for ``sat_sim``.

    Every option defaults to ``None`` so that only options given on the
    command line override values from ``--config``.
    """
    parser = argparse.ArgumentParser(
        prog='sat_sim',
        description=(
            "Create simulated satellite images and cameras from a DEM and "
            "an orthoimage."
        ),
        argument_default=None,
    )

    io = parser.add_argument_group('input and output')
    io.add_argument("--config", help="YAML file with options.")
    io.add_argument("--dem", help="Input DEM file.")
    io.add_argument("--ortho", help="Input georeferenced image file.")
    io.add_argument(
        "-o", "--output-prefix",
        help="Output prefix. All written files start with this prefix.",
    )
    io.add_argument(
        "--camera-list",
        help=(
            "File listing cameras to create synthetic images for, one per "
            "line. Replaces --first, --last, --num, --focal-length, and "
            "--optical-center."
        ),
    )
    io.add_argument(
        "--no-images", action='store_true', default=None,
        help="Create only cameras, no images. Cannot be used with --camera-list.",
    )

    cams = parser.add_argument_group('cameras')
    cams.add_argument(
        "--first", type=float, nargs=3, metavar=('COL', 'ROW', 'HEIGHT'),
        help="First camera position: DEM column and row, and height above the datum.",
    )
    cams.add_argument(
        "--last", type=float, nargs=3, metavar=('COL', 'ROW', 'HEIGHT'),
        help="Last camera position: DEM column and row, and height above the datum.",
    )
    cams.add_argument(
        "--num", type=int,
        help="Number of cameras, including the first and last (at least 2).",
    )
    cams.add_argument(
        "--first-ground-pos", type=float, nargs=2, metavar=('COL', 'ROW'),
        help="DEM column and row of the first camera's footprint centre.",
    )
    cams.add_argument(
        "--last-ground-pos", type=float, nargs=2, metavar=('COL', 'ROW'),
        help="DEM column and row of the last camera's footprint centre.",
    )
    cams.add_argument(
        "--focal-length", type=float, help="Focal length in pixels.",
    )
    cams.add_argument(
        "--optical-center", type=float, nargs=2, metavar=('COL', 'ROW'),
        help="Optical centre in pixels.",
    )
    cams.add_argument(
        "--image-size", type=float, nargs=2, metavar=('WIDTH', 'HEIGHT'),
        help="Image width and height in pixels.",
    )
    cams.add_argument("--roll", type=float, help="Roll angle in degrees.")
    cams.add_argument("--pitch", type=float, help="Pitch angle in degrees.")
    cams.add_argument("--yaw", type=float, help="Yaw angle in degrees.")
    cams.add_argument(
        "--camera-type", choices=[c.value for c in CameraType],
        help="Camera file written per camera (default: pinhole).",
    )

    jitter = parser.add_argument_group('jitter')
    jitter.add_argument(
        "--velocity", type=float,
        help="Satellite velocity in meters per second.",
    )
    jitter.add_argument(
        "--horizontal-uncertainty", type=float, nargs=3,
        metavar=('ROLL', 'PITCH', 'YAW'),
        help=(
            "Ground uncertainty in meters at nadir for roll, pitch, and yaw. "
            "The angular amplitude is atan(uncertainty / height)."
        ),
    )
    jitter.add_argument(
        "--jitter-frequency", type=float, help="Jitter frequency in Hz.",
    )

    synth = parser.add_argument_group('synthesis')
    synth.add_argument(
        "--dem-height-error-tol", type=float,
        help="Ray/DEM intersection height tolerance in meters (default: 0.001).",
    )
    synth.add_argument(
        "--interpolation", choices=[i.value for i in Interpolation],
        help="Orthoimage resampling (default: bilinear).",
    )
    synth.add_argument(
        "--output-nodata", type=float,
        help="Nodata value of output images (default: the ortho's nodata).",
    )
    synth.add_argument(
        "--threads", type=int, help="Cameras rendered in parallel (default: 1).",
    )
    synth.add_argument(
        "--block-rows", type=int,
        help="Image rows rendered per block (default: 256).",
    )
    synth.add_argument(
        "--max-iterations", type=int,
        help="Ray/DEM iteration bound per pixel (default: 100).",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action='store_true', help="Log debug messages.",
    )
    verbosity.add_argument(
        "-q", "--quiet", action='store_true', help="Log warnings and errors only.",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> SatSimOptions:
    """Options from ``--config`` (if any) overridden by explicit flags."""
    values = vars(args).copy()
    config = values.pop('config', None)
    values.pop('verbose', None)
    values.pop('quiet', None)

    options = (
        SatSimOptions.from_yaml(config) if config else SatSimOptions()
    )
    return options.merged(values)


def main(argv: Optional[List[str]] = None) -> int:
    """Run ``sat_sim``; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        options = options_from_args(args)
        results = SatSimPipeline(options).run()
    except (SatSimError, OSError) as e:
        logger.error("%s", e)
        return 1

    failed = [r.name for r in results if not r.ok]
    if failed:
        logger.error("Failed cameras: %s", ", ".join(failed))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
