# -*- coding: utf-8 -*-
"""
SatSim Options - Run configuration, YAML loading, and validation.

``SatSimOptions`` holds every setting of a synthetic imaging run. Options
come from the command line, from a YAML file, or both (command-line
values override the file). ``validate()`` checks all required options,
all-or-nothing groups, and mutually exclusive paths before any DEM,
image, or camera is touched, raising ``ArgumentError`` on the first
violation.

Positions are DEM pixel coordinates: ``first``/``last`` are
``(column, row, height above datum)`` and the ground positions are
``(column, row)``.

YAML files use the option names with either hyphens or underscores::

    dem: dem.tif
    ortho: ortho.tif
    output-prefix: run/sim
    first: [100, 200, 450000]
    last: [400, 200, 450000]
    num: 5
    focal-length: 45000
    optical-center: [512, 512]
    image-size: [1024, 1024]

Dependencies
------------
PyYAML

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
import dataclasses
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

# Third-party
import yaml

# SatSim internal
from satsim.exceptions import ArgumentError
from satsim.synthesis.intersect import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from satsim.synthesis.synthesizer import DEFAULT_BLOCK_ROWS
from satsim.vocabulary import CameraType, Interpolation

logger = logging.getLogger(__name__)

# Options holding fixed-length numeric vectors
_VECTOR_LENGTHS = {
    'first': 3,
    'last': 3,
    'first_ground_pos': 2,
    'last_ground_pos': 2,
    'optical_center': 2,
    'image_size': 2,
    'horizontal_uncertainty': 3,
}


@dataclass
class SatSimOptions:
    """Settings for one synthetic imaging run.

    Unset optional values are ``None``. See the module docstring for the
    position conventions.
    """

    dem: Optional[str] = None
    ortho: Optional[str] = None
    output_prefix: Optional[str] = None
    camera_list: Optional[str] = None

    first: Optional[Tuple[float, float, float]] = None
    last: Optional[Tuple[float, float, float]] = None
    num: Optional[int] = None
    first_ground_pos: Optional[Tuple[float, float]] = None
    last_ground_pos: Optional[Tuple[float, float]] = None

    focal_length: Optional[float] = None
    optical_center: Optional[Tuple[float, float]] = None
    image_size: Optional[Tuple[float, float]] = None

    roll: Optional[float] = None
    pitch: Optional[float] = None
    yaw: Optional[float] = None

    velocity: Optional[float] = None
    horizontal_uncertainty: Optional[Tuple[float, float, float]] = None
    jitter_frequency: Optional[float] = None

    no_images: bool = False
    dem_height_error_tol: float = DEFAULT_TOLERANCE

    camera_type: Union[str, CameraType] = CameraType.PINHOLE
    interpolation: Union[str, Interpolation] = Interpolation.BILINEAR
    threads: int = 1
    output_nodata: Optional[float] = None
    block_rows: int = DEFAULT_BLOCK_ROWS
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SatSimOptions':
        """Options from a mapping of option names to values.

        Raises
        ------
        ArgumentError
            If a key is not an option name.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = str(key).replace('-', '_')
            if name not in known:
                raise ArgumentError(f"Unknown option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'SatSimOptions':
        """Options from a YAML file.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        ArgumentError
            If the file is not a mapping of option names.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Options file not found: {path}")
        with open(path) as f:
            cfg = yaml.safe_load(f)
        if cfg is None:
            cfg = {}
        if not isinstance(cfg, dict):
            raise ArgumentError(f"{path} must contain a mapping of options")
        logger.debug("Loaded options from %s", path)
        return cls.from_dict(cfg)

    def merged(self, overrides: Dict[str, Any]) -> 'SatSimOptions':
        """Copy with every non-None value of ``overrides`` applied."""
        updates = {
            k.replace('-', '_'): v
            for k, v in overrides.items() if v is not None
        }
        return dataclasses.replace(self, **updates)

    # -----------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------

    def _normalize(self) -> None:
        for name, length in _VECTOR_LENGTHS.items():
            value = getattr(self, name)
            if value is None:
                continue
            try:
                vector = tuple(float(v) for v in value)
            except (TypeError, ValueError):
                raise ArgumentError(
                    f"{name} must be {length} numbers, got {value!r}"
                ) from None
            if len(vector) != length:
                raise ArgumentError(
                    f"{name} must be {length} numbers, got {len(vector)}"
                )
            setattr(self, name, vector)

        try:
            self.camera_type = CameraType(self.camera_type)
        except ValueError:
            raise ArgumentError(
                f"Unknown camera type '{self.camera_type}'; expected one of "
                f"{[c.value for c in CameraType]}"
            ) from None
        try:
            self.interpolation = Interpolation(self.interpolation)
        except ValueError:
            raise ArgumentError(
                f"Unknown interpolation '{self.interpolation}'; expected one "
                f"of {[i.value for i in Interpolation]}"
            ) from None

    @property
    def have_roll_pitch_yaw(self) -> bool:
        return all(v is not None for v in (self.roll, self.pitch, self.yaw))

    @property
    def have_jitter(self) -> bool:
        return any(
            v is not None for v in (
                self.jitter_frequency, self.velocity,
                self.horizontal_uncertainty,
            )
        )

    @property
    def image_size_pixels(self) -> Tuple[int, int]:
        """Validated ``(width, height)`` as integers."""
        return int(self.image_size[0]), int(self.image_size[1])

    def validate(self) -> 'SatSimOptions':
        """Check the options; returns ``self`` for chaining.

        Raises
        ------
        ArgumentError
            On the first missing, invalid, or contradictory option.
        """
        self._normalize()

        if not self.dem or not self.ortho:
            raise ArgumentError("Missing input DEM and/or ortho image.")
        if not self.output_prefix:
            raise ArgumentError("Missing output prefix.")
        if self.image_size is None:
            raise ArgumentError("The image size must be specified.")
        if any(not (v > 0 and float(v).is_integer()) for v in self.image_size):
            raise ArgumentError(
                f"The image size must be two positive integers, got "
                f"{self.image_size}."
            )

        if self.camera_list and self.no_images:
            raise ArgumentError(
                "The --camera-list and --no-images options cannot be used "
                "together."
            )

        if self.camera_list:
            given = [
                name for name in (
                    'first', 'last', 'num', 'focal_length', 'optical_center',
                    'first_ground_pos', 'last_ground_pos',
                    'roll', 'pitch', 'yaw',
                )
                if getattr(self, name) is not None
            ]
            if given:
                raise ArgumentError(
                    "The --camera-list option cannot be used with "
                    + ", ".join('--' + g.replace('_', '-') for g in given)
                    + "."
                )
        else:
            if self.first is None or self.last is None:
                raise ArgumentError(
                    "The first and last camera positions must be specified."
                )
            if self.first[2] != self.last[2]:
                logger.warning(
                    "The first and last camera positions have different "
                    "heights above the datum. This is supported but is not "
                    "usual. Check your inputs."
                )
            if self.num is None or int(self.num) < 2:
                raise ArgumentError("The number of cameras must be at least 2.")
            if self.focal_length is None or not float(self.focal_length) > 0:
                raise ArgumentError("The focal length must be positive.")
            if self.optical_center is None:
                raise ArgumentError("The optical center must be specified.")
            if (self.first_ground_pos is None) != (self.last_ground_pos is None):
                raise ArgumentError(
                    "Either both first and last ground positions must be "
                    "specified, or none."
                )
            n_angles = sum(
                v is not None for v in (self.roll, self.pitch, self.yaw)
            )
            if n_angles not in (0, 3):
                raise ArgumentError(
                    "Either all of roll, pitch, and yaw must be specified, "
                    "or none."
                )

        n_jitter = (
            int(self.jitter_frequency is not None)
            + int(self.velocity is not None)
            + (3 if self.horizontal_uncertainty is not None else 0)
        )
        if n_jitter not in (0, 5):
            raise ArgumentError(
                "Either all of jitter-frequency, velocity, and horizontal "
                "uncertainty must be specified, or none."
            )
        if n_jitter and self.camera_list:
            raise ArgumentError(
                "The --camera-list, --jitter-frequency, --velocity, and "
                "--horizontal-uncertainty options cannot be used together."
            )
        if n_jitter and not self.have_roll_pitch_yaw:
            raise ArgumentError(
                "Modelling jitter requires specifying --roll, --pitch, and "
                "--yaw."
            )
        if self.velocity is not None and not self.velocity > 0:
            raise ArgumentError("The satellite velocity must be positive.")
        if self.horizontal_uncertainty is not None and any(
            u < 0 for u in self.horizontal_uncertainty
        ):
            raise ArgumentError(
                "The horizontal uncertainty must be non-negative."
            )
        if self.jitter_frequency is not None and not self.jitter_frequency > 0:
            raise ArgumentError("The jitter frequency must be positive.")

        if not self.dem_height_error_tol > 0:
            raise ArgumentError(
                "The DEM height error tolerance must be positive."
            )
        if int(self.threads) < 1:
            raise ArgumentError("The number of threads must be at least 1.")
        if int(self.block_rows) < 1:
            raise ArgumentError("The block size must be at least 1 row.")
        if int(self.max_iterations) < 1:
            raise ArgumentError(
                "The maximum number of iterations must be at least 1."
            )

        return self
