# -*- coding: utf-8 -*-
"""
Camera Model Base Class - Capability interface shared by all camera variants.

Defines ``CameraModel``, the interface the image synthesizer and camera
writers program against. Two variants implement it: the closed-form
``PinholeCamera`` and ``SensorModelCamera``, which wraps an opaque sensor
model provided by a plugin.

Every capability checks that the model has been constructed and raises
``NotInitializedError`` otherwise.

Coordinate Conventions
----------------------
- **Pixels:** ``(col, row)``; integer values are pixel centres and
  ``(0, 0)`` is the centre of the top-left pixel.
- **World:** Earth-centred, Earth-fixed Cartesian meters of the DEM's
  datum.

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

# Standard library
import copy
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.exceptions import NotInitializedError


class CameraModel(ABC):
    """Abstract camera model.

    Subclasses implement the vectorized ``project_points`` and ``rays``
    plus serialization and pose transformation. The scalar conveniences
    ``project``, ``unproject`` and ``camera_center`` are built on them.

    Notes
    -----
    A camera is immutable after construction except through
    ``apply_transform``.
    """

    #: Short name of the variant, also used to pick the file extension.
    camera_type: str = ''

    #: Extension of files written by ``save_state``.
    file_extension: str = ''

    @property
    @abstractmethod
    def initialized(self) -> bool:
        """Whether the model has been constructed or loaded."""
        ...

    @property
    @abstractmethod
    def image_size(self) -> Optional[Tuple[int, int]]:
        """Image ``(width, height)`` in pixels, when known."""
        ...

    def _require_initialized(self) -> None:
        """Raise ``NotInitializedError`` if the model is not constructed."""
        if not self.initialized:
            raise NotInitializedError(
                f"{type(self).__name__}: camera model has not been "
                "constructed or loaded"
            )

    @abstractmethod
    def project_points(self, points: np.ndarray) -> np.ndarray:
        """Project world points to pixels.

        Parameters
        ----------
        points : np.ndarray
            Shape ``(N, 3)``.

        Returns
        -------
        np.ndarray
            Pixels ``(col, row)``, shape ``(N, 2)``.

        Raises
        ------
        NotInitializedError
            If the model is not constructed.
        ProjectionError
            If a point cannot be projected.
        """
        ...

    @abstractmethod
    def rays(
        self, cols: np.ndarray, rows: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Camera rays through pixels.

        Parameters
        ----------
        cols, rows : np.ndarray
            Pixel coordinates, same shape.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            ``(origins, directions)``, each ``(N, 3)``; directions are
            unit vectors in the world frame.
        """
        ...

    def project(self, point: Sequence[float]) -> np.ndarray:
        """Project one world point to a pixel ``(col, row)``."""
        return self.project_points(np.asarray(point, dtype=np.float64)[None, :])[0]

    def unproject(self, pixel: Sequence[float]) -> np.ndarray:
        """Unit world-frame ray direction through one pixel.

        The camera centre is not added; see ``camera_center``.
        """
        _, directions = self.rays(np.array([pixel[0]]), np.array([pixel[1]]))
        return directions[0]

    def camera_center(
        self, pixel: Optional[Sequence[float]] = None
    ) -> np.ndarray:
        """Camera centre for a pixel (constant for frame cameras)."""
        if pixel is None:
            pixel = (0.0, 0.0)
        origins, _ = self.rays(np.array([pixel[0]]), np.array([pixel[1]]))
        return origins[0]

    @abstractmethod
    def orientation(
        self, pixel: Optional[Sequence[float]] = None
    ) -> np.ndarray:
        """Camera-to-world orientation as an ``(x, y, z, w)`` quaternion.

        Raises
        ------
        NotImplementedError
            If the variant does not expose its orientation.
        """
        ...

    @abstractmethod
    def save_state(self, path: Union[str, Path]) -> None:
        """Serialize the model parameterization to ``path``."""
        ...

    @abstractmethod
    def apply_transform(self, transform: np.ndarray) -> None:
        """Compose a 4x4 similarity transform into the model's pose.

        Intrinsics are unchanged.
        """
        ...

    def save_transformed_state(
        self, path: Union[str, Path], transform: np.ndarray
    ) -> None:
        """Save the model as if ``transform`` were applied.

        The live model is not modified.
        """
        self._require_initialized()
        transformed = copy.deepcopy(self)
        transformed.apply_transform(transform)
        transformed.save_state(path)
