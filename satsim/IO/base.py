# -*- coding: utf-8 -*-
"""
IO Base Classes - Raster input and synthetic image output interfaces.

``RasterReader`` opens a georeferenced raster (DEM or orthoimage) and
reads whole bands; ``ImageWriter`` writes one synthesized camera image.
Both are context managers.

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

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np


class RasterReader(ABC):
    """
    Abstract base class for georeferenced raster inputs.

    Attributes
    ----------
    filepath : Path
        Path to the raster.
    metadata : Dict[str, Any]
        At least ``rows``, ``cols``, ``bands``, ``dtype``, ``crs``,
        ``transform`` and ``nodata``, filled by ``_open``.
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        """
        Open the raster and load its metadata.

        Raises
        ------
        FileNotFoundError
            If the specified filepath does not exist
        """
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")

        self.metadata: Dict[str, Any] = {}
        self._open()

    @abstractmethod
    def _open(self) -> None:
        """Open the file and populate ``self.metadata``."""

    @property
    def shape(self) -> Tuple[int, int]:
        """``(rows, cols)`` of every band."""
        return self.metadata['rows'], self.metadata['cols']

    @abstractmethod
    def read_band(self, band: int = 0) -> np.ndarray:
        """
        Read one whole band.

        Parameters
        ----------
        band : int, default=0
            0-based band index.

        Returns
        -------
        np.ndarray
            Band pixels, shape ``(rows, cols)``, in the file's dtype.
        """

    def close(self) -> None:
        """Release the file handle, if any."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ImageWriter(ABC):
    """
    Abstract base class for synthesized image outputs.

    Attributes
    ----------
    filepath : Path
        Output path.
    nodata : Optional[float]
        Value tagged as nodata in the output, if any.
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        nodata: Optional[float] = None,
    ) -> None:
        self.filepath = Path(filepath)
        self.nodata = nodata

    @abstractmethod
    def write(self, image: np.ndarray) -> None:
        """
        Write a single-band ``(rows, cols)`` image.

        Raises
        ------
        ValueError
            If ``image`` is not 2D.
        """

    def close(self) -> None:
        """Flush and release resources; nothing by default."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
