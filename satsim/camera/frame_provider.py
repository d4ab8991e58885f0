# -*- coding: utf-8 -*-
"""
Frame Sensor Provider - Built-in sensor model provider for frame cameras.

``FrameSensorProvider`` implements the ``SensorModelProvider`` contract
for ideal frame cameras (pixel focal length, pitch 1, no distortion).
It is always registered, so sensor model cameras can be generated and
read back without any third-party plugin.

Models are created directly, from ALE-style image support data, or from
the provider's own JSON state. Image support data keys read::

    name_model             "USGS_ASTRO_FRAME_SENSOR_MODEL" or
                           "SATSIM_FRAME_SENSOR_MODEL"
    image_lines            image height
    image_samples          image width
    focal_length_model     {"focal_length": <pixels>}
    detector_center        {"line": ..., "sample": ...}
    radii                  {"semimajor": ..., "semiminor": ..., "unit": "km"|"m"}
    instrument_position    {"positions": [[x, y, z]], "unit": "km"|"m"}
    instrument_pointing    {"quaternions": [[x, y, z, w]]}
    sun_position           {"positions": [[x, y, z]], "unit": "km"|"m"}  (optional)

Pointing quaternions are camera-to-world and scalar-last.

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
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

# Third-party
import numpy as np

# SatSim internal
from satsim.camera._projection import (
    pixel_directions,
    project_points,
    transform_pose,
)
from satsim.camera.sensor_model import SensorModelProvider
from satsim.exceptions import ArgumentError, InputError
from satsim.geometry.rotations import quaternion_to_matrix

MODEL_NAME = 'SATSIM_FRAME_SENSOR_MODEL'
ISD_MODEL_NAMES = (MODEL_NAME, 'USGS_ASTRO_FRAME_SENSOR_MODEL')
STATE_VERSION = 1

_UNIT_SCALE = {'m': 1.0, 'km': 1000.0}


@dataclass
class FrameSensorState:
    """Mutable state behind a frame sensor model handle.

    ``detector_center`` is ``(line, sample)`` in CSM image coordinates.
    """

    image_size: Tuple[int, int]
    focal_length: float
    detector_center: Tuple[float, float]
    center: np.ndarray
    rotation: np.ndarray
    radii: Tuple[float, float]
    sun_position: np.ndarray = field(default_factory=lambda: np.zeros(3))


def _scaled(entry: Dict[str, Any], key: str) -> np.ndarray:
    """First vector of an ISD ``positions``-style entry, in meters."""
    unit = entry.get('unit', 'm').lower()
    if unit not in _UNIT_SCALE:
        raise InputError(f"Unsupported ISD length unit '{unit}'")
    values = np.asarray(entry[key], dtype=np.float64)
    if values.ndim == 2:
        values = values[0]
    return values * _UNIT_SCALE[unit]


class FrameSensorProvider(SensorModelProvider):
    """Closed-form frame camera behind the opaque provider contract.

    Projection is exact, so ``precision`` arguments are accepted and
    ignored.
    """

    name = 'frame'

    def create(
        self,
        image_size: Tuple[int, int],
        optical_center: Tuple[float, float],
        focal_length: float,
        radii: Tuple[float, float],
        center: Sequence[float],
        rotation: np.ndarray,
        sun_position: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> FrameSensorState:
        """New handle; ``optical_center`` is ``(col, row)`` in pixels."""
        if not focal_length > 0:
            raise ArgumentError(f"focal_length must be positive, got {focal_length}")
        return FrameSensorState(
            image_size=(int(image_size[0]), int(image_size[1])),
            focal_length=float(focal_length),
            detector_center=(optical_center[1] + 0.5, optical_center[0] + 0.5),
            center=np.asarray(center, dtype=np.float64).reshape(3).copy(),
            rotation=np.asarray(rotation, dtype=np.float64).reshape(3, 3).copy(),
            radii=(float(radii[0]), float(radii[1])),
            sun_position=np.asarray(sun_position, dtype=np.float64).reshape(3),
        )

    # -----------------------------------------------------------------
    # Loading and saving
    # -----------------------------------------------------------------

    def can_load_isd(self, isd: Dict[str, Any]) -> bool:
        return isd.get('name_model') in ISD_MODEL_NAMES

    def load_from_isd(self, isd: Dict[str, Any]) -> FrameSensorState:
        try:
            radii = isd['radii']
            scale = _UNIT_SCALE[radii.get('unit', 'm').lower()]
            quats = np.asarray(
                isd['instrument_pointing']['quaternions'], dtype=np.float64
            )
            sun = (
                _scaled(isd['sun_position'], 'positions')
                if 'sun_position' in isd else np.zeros(3)
            )
            return FrameSensorState(
                image_size=(int(isd['image_samples']), int(isd['image_lines'])),
                focal_length=float(isd['focal_length_model']['focal_length']),
                detector_center=(
                    float(isd['detector_center']['line']),
                    float(isd['detector_center']['sample']),
                ),
                center=_scaled(isd['instrument_position'], 'positions'),
                rotation=quaternion_to_matrix(quats.reshape(-1, 4)[0]),
                radii=(radii['semimajor'] * scale, radii['semiminor'] * scale),
                sun_position=sun,
            )
        except KeyError as e:
            raise InputError(f"Image support data is missing {e}") from e

    def can_load_state(self, state: str) -> bool:
        try:
            data = json.loads(state)
        except ValueError:
            return False
        return isinstance(data, dict) and data.get('model_name') == MODEL_NAME

    def load_from_state(self, state: str) -> FrameSensorState:
        data = json.loads(state)
        if data.get('model_name') != MODEL_NAME:
            raise InputError(
                f"Not a {MODEL_NAME} state (model_name="
                f"{data.get('model_name')!r})"
            )
        return FrameSensorState(
            image_size=tuple(data['image_size']),
            focal_length=data['focal_length'],
            detector_center=tuple(data['detector_center']),
            center=np.asarray(data['center'], dtype=np.float64),
            rotation=np.asarray(data['rotation'], dtype=np.float64).reshape(3, 3),
            radii=tuple(data['radii']),
            sun_position=np.asarray(data['sun_position'], dtype=np.float64),
        )

    def state(self, handle: FrameSensorState) -> str:
        data = {
            'model_name': MODEL_NAME,
            'version': STATE_VERSION,
            'image_size': list(handle.image_size),
            'focal_length': handle.focal_length,
            'detector_center': list(handle.detector_center),
            'center': handle.center.tolist(),
            'rotation': handle.rotation.ravel().tolist(),
            'radii': list(handle.radii),
            'sun_position': handle.sun_position.tolist(),
        }
        return json.dumps(data, indent=2) + '\n'

    # -----------------------------------------------------------------
    # Evaluation
    # -----------------------------------------------------------------

    def ground_to_image(
        self, handle: FrameSensorState, points: np.ndarray, precision: float
    ) -> np.ndarray:
        line0, sample0 = handle.detector_center
        samples_lines = project_points(
            points, handle.center, handle.rotation, handle.focal_length,
            (sample0, line0),
        )
        return samples_lines[:, ::-1].copy()

    def image_to_locus(
        self, handle: FrameSensorState, image_coords: np.ndarray,
        precision: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        image_coords = np.atleast_2d(image_coords)
        line0, sample0 = handle.detector_center
        directions = pixel_directions(
            image_coords[:, 1], image_coords[:, 0], handle.rotation,
            handle.focal_length, (sample0, line0),
        )
        origins = np.broadcast_to(handle.center, directions.shape).copy()
        return origins, directions

    def apply_transform(
        self, handle: FrameSensorState, transform: np.ndarray
    ) -> None:
        handle.center, handle.rotation = transform_pose(
            handle.center, handle.rotation, transform,
        )

    def image_size(self, handle: FrameSensorState) -> Tuple[int, int]:
        return handle.image_size

    def target_radii(self, handle: FrameSensorState) -> Tuple[float, float]:
        return handle.radii

    def sun_position(self, handle: FrameSensorState) -> np.ndarray:
        return handle.sun_position.copy()
