# -*- coding: utf-8 -*-
"""
SatSim Exception Hierarchy - Domain-specific exceptions for synthetic imaging.

Provides a small exception hierarchy that lets callers catch SatSim errors
distinctly from Python built-in exceptions. All SatSim exceptions subclass
both ``SatSimError`` and the appropriate built-in exception so existing
``except ValueError`` / ``except RuntimeError`` handlers keep working.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-10-16
"""


class SatSimError(Exception):
    """Base exception for all SatSim errors."""


class ArgumentError(SatSimError, ValueError):
    """Invalid, missing, or contradictory configuration.

    Raised by option validation before any DEM, image, or camera is
    touched. Covers the all-or-nothing option groups and the mutually
    exclusive camera-list / generated-trajectory paths.
    """


class InputError(SatSimError, ValueError):
    """Input file that cannot be read or is not supported.

    Raised for rasters that cannot be opened, malformed or unsupported
    camera files, and image support data no sensor model provider can
    load.
    """


class DegenerateTrajectoryError(SatSimError, ValueError):
    """Trajectory geometry with no defined direction of travel.

    Raised when the first and last camera positions coincide (zero-length
    path) or when a look direction is parallel to the direction of travel,
    so no orientation frame can be built.
    """


class ProjectionError(SatSimError, RuntimeError):
    """Point could not be projected into, or a pixel out of, a camera.

    Raised for points behind the camera and for pixels outside the
    model's valid domain.
    """


class NotInitializedError(ProjectionError):
    """Camera model used before it was constructed or loaded."""


class GeolocationError(SatSimError, RuntimeError):
    """Georeference or coordinate transformation failure.

    Raised for rasters without a CRS or affine transform, and for
    coordinate reference systems that cannot be related to a datum.
    """


class DependencyError(SatSimError, ImportError):
    """Missing dependency required for a specific module.

    Raised when rasterio or pyproj is not installed.
    """


class SynthesisError(SatSimError, RuntimeError):
    """Image synthesis failure for a single camera.

    Recorded per camera; synthesis of other cameras continues.
    """
