# -*- coding: utf-8 -*-
"""
Synthesis Module - Ray/DEM intersection and camera image rendering.

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

from satsim.synthesis.intersect import intersect_dem
from satsim.synthesis.synthesizer import (
    DEFAULT_NODATA,
    ImageSynthesizer,
    SynthesisResult,
)

__all__ = [
    'intersect_dem',
    'ImageSynthesizer',
    'SynthesisResult',
    'DEFAULT_NODATA',
]
