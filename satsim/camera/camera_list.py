# -*- coding: utf-8 -*-
"""
Camera List - Load user-supplied cameras listed in a text file.

A camera list names one camera file per line. Blank lines and lines
starting with ``#`` are skipped; relative paths are resolved against the
list file's directory. ``.tsai`` files load as ``PinholeCamera``; ``.json``
and ``.isd`` files load as ``SensorModelCamera``.

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
from typing import List, Optional, Tuple, Union

# SatSim internal
from satsim.camera.base import CameraModel
from satsim.camera.pinhole import PinholeCamera
from satsim.camera.sensor_model import SensorModelCamera, file_has_isd_extension
from satsim.exceptions import ArgumentError

logger = logging.getLogger(__name__)


def load_camera(
    path: Union[str, Path],
    image_size: Optional[Tuple[int, int]] = None,
) -> CameraModel:
    """Load one camera file, dispatching on its extension.

    Parameters
    ----------
    path : str or Path
        ``.tsai`` pinhole file, or ``.json``/``.isd`` sensor model file.
    image_size : Tuple[int, int], optional
        Image ``(width, height)`` for pinhole cameras, whose files do not
        record it.

    Raises
    ------
    ArgumentError
        If the extension is not recognized.
    """
    path = Path(path)
    if path.suffix.lower() == PinholeCamera.file_extension:
        return PinholeCamera.load(path, image_size=image_size)
    if file_has_isd_extension(path):
        return SensorModelCamera.load(path)
    raise ArgumentError(
        f"Unknown camera file type '{path.suffix}' for {path}; expected "
        ".tsai, .json, or .isd"
    )


def read_camera_list(
    path: Union[str, Path],
    image_size: Optional[Tuple[int, int]] = None,
) -> Tuple[List[CameraModel], List[str]]:
    """Read the cameras named in a list file.

    One camera path per line; blank lines and ``#`` comments are skipped.
    Paths are used as written, so relative entries are found from the
    working directory, not from the list's directory.

    Returns
    -------
    Tuple[List[CameraModel], List[str]]
        Cameras in file order and their names (file stems).

    Raises
    ------
    FileNotFoundError
        If the list or a listed camera does not exist.
    ArgumentError
        If the list names no cameras.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Camera list not found: {path}")

    cameras: List[CameraModel] = []
    names: List[str] = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        cam_path = Path(line)
        cameras.append(load_camera(cam_path, image_size=image_size))
        names.append(cam_path.stem)

    if not cameras:
        raise ArgumentError(f"Camera list {path} names no cameras")

    logger.info("Read %d camera(s) from %s", len(cameras), path)
    return cameras, names
