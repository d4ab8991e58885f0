# -*- coding: utf-8 -*-
"""
SatSim - Synthetic satellite cameras and images from a DEM and an orthoimage.

Generates frame cameras along a straight path over a digital elevation
model, optionally perturbs their attitude with jitter, and renders the
images they would capture by ray casting the DEM and resampling an
orthorectified reference image. Intended for building ground-truth
datasets for stereo and photogrammetry testing.

Dependencies
------------
numpy
scipy
rasterio
pyproj
PyYAML

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from satsim.exceptions import (
    SatSimError,
    ArgumentError,
    DegenerateTrajectoryError,
    NotInitializedError,
    ProjectionError,
    GeolocationError,
    DependencyError,
    SynthesisError,
)
from satsim.vocabulary import CameraType, Interpolation
from satsim.trajectory import (
    FixedAngles,
    GroundTargets,
    NadirPointing,
    Trajectory,
    compute_trajectory,
)
from satsim.jitter import JitterModel, JitterParameters
from satsim.config import SatSimOptions
from satsim.pipeline import SatSimPipeline

__all__ = [
    'SatSimError',
    'ArgumentError',
    'DegenerateTrajectoryError',
    'NotInitializedError',
    'ProjectionError',
    'GeolocationError',
    'DependencyError',
    'SynthesisError',
    'CameraType',
    'Interpolation',
    'FixedAngles',
    'GroundTargets',
    'NadirPointing',
    'Trajectory',
    'compute_trajectory',
    'JitterModel',
    'JitterParameters',
    'SatSimOptions',
    'SatSimPipeline',
]
