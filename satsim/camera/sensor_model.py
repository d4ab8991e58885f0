# -*- coding: utf-8 -*-
"""
Sensor Model Camera - Wrapper around opaque, plugin-provided sensor models.

``SensorModelCamera`` adapts a sensor model owned by a
``SensorModelProvider`` to the ``CameraModel`` interface. The camera
holds exactly one provider handle, released when the camera is closed or
garbage collected; copies load a fresh handle from the serialized state
so a handle is never shared between cameras.

Providers are discovered once per process by ``SensorModelRegistry``:
the built-in ``FrameSensorProvider`` is always registered, and installed
packages add providers through the ``satsim.sensor_models`` entry point
group. Discovery happens on first use, is safe to call repeatedly, and
never runs twice.

Image coordinates exchanged with providers follow the Community Sensor
Model convention ``(line, sample)`` with pixel centres at ``+0.5``; the
camera converts to and from SatSim ``(col, row)`` pixels.

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

# Standard library
import json
import logging
import threading
from abc import ABC, abstractmethod
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# SatSim internal
from satsim.camera.base import CameraModel
from satsim.exceptions import InputError

logger = logging.getLogger(__name__)

#: Default desired precision passed to providers, in pixels or meters.
DEFAULT_PRECISION = 1.0e-8

#: Faster, less exact precision for iterative refinement callers.
LOOSE_PRECISION = 1.0e-3

#: Entry point group scanned for third-party providers.
ENTRY_POINT_GROUP = 'satsim.sensor_models'

#: File extensions accepted as image support data or saved state.
ISD_EXTENSIONS = ('.json', '.isd')


def file_has_isd_extension(path: Union[str, Path]) -> bool:
    """Whether ``path`` looks like a sensor model ISD or state file."""
    return Path(path).suffix.lower() in ISD_EXTENSIONS


def to_csm_pixel(cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
    """SatSim ``(col, row)`` to CSM ``(line, sample)``, shape ``(N, 2)``."""
    cols = np.asarray(cols, dtype=np.float64).ravel()
    rows = np.asarray(rows, dtype=np.float64).ravel()
    return np.column_stack([rows + 0.5, cols + 0.5])


def from_csm_pixel(image_coords: np.ndarray) -> np.ndarray:
    """CSM ``(line, sample)`` to SatSim ``(col, row)``, shape ``(N, 2)``."""
    image_coords = np.atleast_2d(image_coords)
    return np.column_stack([image_coords[:, 1] - 0.5, image_coords[:, 0] - 0.5])


class SensorModelProvider(ABC):
    """Contract implemented by sensor model plugins.

    A provider creates, evaluates, serializes and releases opaque model
    handles. Handles are only ever passed back to the provider that made
    them.
    """

    #: Provider name used in log messages and registry lookups.
    name: str = ''

    @abstractmethod
    def can_load_isd(self, isd: Dict[str, Any]) -> bool:
        """Whether the parsed image support data describes a model this
        provider can build."""
        ...

    @abstractmethod
    def can_load_state(self, state: str) -> bool:
        """Whether ``state`` was produced by this provider."""
        ...

    @abstractmethod
    def load_from_isd(self, isd: Dict[str, Any]) -> Any:
        """Build a model handle from parsed image support data."""
        ...

    @abstractmethod
    def load_from_state(self, state: str) -> Any:
        """Build a model handle from a saved state string."""
        ...

    @abstractmethod
    def state(self, handle: Any) -> str:
        """Serialize a model handle."""
        ...

    @abstractmethod
    def ground_to_image(
        self, handle: Any, points: np.ndarray, precision: float
    ) -> np.ndarray:
        """Project ``(N, 3)`` world points to ``(N, 2)`` CSM coordinates.

        Raises
        ------
        ProjectionError
            If a point is outside the model's valid domain.
        """
        ...

    @abstractmethod
    def image_to_locus(
        self, handle: Any, image_coords: np.ndarray, precision: float
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Rays through ``(N, 2)`` CSM coordinates.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            ``(origins, directions)``, each ``(N, 3)``, unit directions.
        """
        ...

    @abstractmethod
    def apply_transform(self, handle: Any, transform: np.ndarray) -> None:
        """Compose a 4x4 similarity transform into the handle's state."""
        ...

    @abstractmethod
    def image_size(self, handle: Any) -> Tuple[int, int]:
        """Image ``(samples, lines)``."""
        ...

    @abstractmethod
    def target_radii(self, handle: Any) -> Tuple[float, float]:
        """Target body ``(semi_major, semi_minor)`` axes in meters."""
        ...

    def sun_position(self, handle: Any) -> np.ndarray:
        """Sun position in world coordinates; zeros when unknown."""
        return np.zeros(3)

    def release(self, handle: Any) -> None:
        """Free resources held by ``handle``."""


class SensorModelRegistry:
    """Process-wide registry of sensor model providers.

    ``initialize()`` registers the built-in provider and every provider
    exposed through the ``satsim.sensor_models`` entry point group. It
    runs once; later calls return immediately.

    Attributes
    ----------
    group : str
        Entry point group scanned during initialization.
    """

    def __init__(self, group: str = ENTRY_POINT_GROUP) -> None:
        self.group = group
        self._providers: Dict[str, SensorModelProvider] = {}
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Discover providers on first call."""
        with self._lock:
            if self._initialized:
                return

            from satsim.camera.frame_provider import FrameSensorProvider
            self._register(FrameSensorProvider())

            for ep in entry_points(group=self.group):
                try:
                    provider = ep.load()()
                except Exception:
                    logger.exception(
                        "Failed to load sensor model plugin '%s'", ep.name,
                    )
                    continue
                self._register(provider)

            self._initialized = True
            logger.info(
                "Sensor model providers: %s", ', '.join(self._providers),
            )

    def _register(self, provider: SensorModelProvider) -> None:
        if provider.name in self._providers:
            logger.warning(
                "Duplicate sensor model provider '%s' ignored", provider.name,
            )
            return
        self._providers[provider.name] = provider

    def register(self, provider: SensorModelProvider) -> None:
        """Add a provider explicitly, after discovery."""
        self.initialize()
        with self._lock:
            self._register(provider)

    @property
    def providers(self) -> List[SensorModelProvider]:
        self.initialize()
        return list(self._providers.values())

    def get(self, name: str) -> SensorModelProvider:
        """Provider by name."""
        self.initialize()
        try:
            return self._providers[name]
        except KeyError:
            raise KeyError(
                f"No sensor model provider named '{name}'. "
                f"Available: {', '.join(self._providers)}"
            ) from None

    def provider_for_isd(self, isd: Dict[str, Any]) -> SensorModelProvider:
        """First provider able to build a model from ``isd``."""
        for provider in self.providers:
            if provider.can_load_isd(isd):
                return provider
        raise InputError(
            "No sensor model provider can load this image support data "
            f"(model '{isd.get('name_model', 'unknown')}')"
        )

    def provider_for_state(self, state: str) -> SensorModelProvider:
        """First provider able to restore ``state``."""
        for provider in self.providers:
            if provider.can_load_state(state):
                return provider
        raise InputError("No sensor model provider recognizes this state")


_registry = SensorModelRegistry()


def get_registry() -> SensorModelRegistry:
    """The process-wide registry, initialized on first use."""
    _registry.initialize()
    return _registry


class SensorModelCamera(CameraModel):
    """Camera backed by an opaque sensor model handle.

    Parameters
    ----------
    provider : SensorModelProvider, optional
        Provider that owns ``handle``.
    handle : Any, optional
        Model handle. The camera takes ownership.
    desired_precision : float, default=DEFAULT_PRECISION
        Precision requested from the provider on every evaluation.

    Attributes
    ----------
    desired_precision : float
    semi_major_axis, semi_minor_axis : float or None
        Target body radii cached at construction.

    Notes
    -----
    ``orientation()`` is not available; the opaque model does not expose
    its attitude.
    """

    camera_type = 'sensor_model'
    file_extension = '.json'

    def __init__(
        self,
        provider: Optional[SensorModelProvider] = None,
        handle: Any = None,
        desired_precision: float = DEFAULT_PRECISION,
    ) -> None:
        self.desired_precision = float(desired_precision)
        self._provider = None
        self._handle = None
        self.semi_major_axis = None
        self.semi_minor_axis = None
        self._sun_position = np.zeros(3)
        if handle is not None:
            if provider is None:
                raise ValueError("A handle requires the provider that made it")
            self._attach(provider, handle)

    def _attach(self, provider: SensorModelProvider, handle: Any) -> None:
        self.close()
        self._provider = provider
        self._handle = handle
        self.semi_major_axis, self.semi_minor_axis = provider.target_radii(handle)
        self._sun_position = np.asarray(
            provider.sun_position(handle), dtype=np.float64
        )

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------

    @classmethod
    def from_isd(
        cls,
        path: Union[str, Path],
        desired_precision: float = DEFAULT_PRECISION,
    ) -> 'SensorModelCamera':
        """Build a camera from an image support data JSON file."""
        with open(path, 'r') as f:
            try:
                isd = json.load(f)
            except ValueError as e:
                raise InputError(f"{path} is not a JSON file: {e}") from None
        provider = get_registry().provider_for_isd(isd)
        return cls(provider, provider.load_from_isd(isd), desired_precision)

    @classmethod
    def from_state(
        cls,
        state: str,
        desired_precision: float = DEFAULT_PRECISION,
    ) -> 'SensorModelCamera':
        """Restore a camera from a saved state string."""
        provider = get_registry().provider_for_state(state)
        return cls(provider, provider.load_from_state(state), desired_precision)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        desired_precision: float = DEFAULT_PRECISION,
    ) -> 'SensorModelCamera':
        """Load a saved state file, or an ISD file if no provider claims
        the contents as state."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Camera file not found: {path}")
        text = path.read_text()
        registry = get_registry()
        for provider in registry.providers:
            if provider.can_load_state(text):
                return cls(provider, provider.load_from_state(text),
                           desired_precision)
        return cls.from_isd(path, desired_precision)

    @classmethod
    def create_frame_model(
        cls,
        image_size: Tuple[int, int],
        optical_center: Tuple[float, float],
        focal_length: float,
        semi_major_axis: float,
        semi_minor_axis: float,
        center: Sequence[float],
        rotation: np.ndarray,
        desired_precision: float = DEFAULT_PRECISION,
    ) -> 'SensorModelCamera':
        """Frame sensor model with pixel focal length, pitch 1 and no
        distortion; ``optical_center`` is in SatSim ``(col, row)``."""
        provider = get_registry().get('frame')
        handle = provider.create(
            image_size=image_size,
            optical_center=optical_center,
            focal_length=focal_length,
            radii=(semi_major_axis, semi_minor_axis),
            center=center,
            rotation=rotation,
        )
        return cls(provider, handle, desired_precision)

    # -----------------------------------------------------------------
    # CameraModel
    # -----------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._handle is not None

    @property
    def provider(self) -> Optional[SensorModelProvider]:
        return self._provider

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        if not self.initialized:
            return None
        return self._provider.image_size(self._handle)

    def project_points(self, points: np.ndarray) -> np.ndarray:
        self._require_initialized()
        image_coords = self._provider.ground_to_image(
            self._handle, np.atleast_2d(np.asarray(points, dtype=np.float64)),
            self.desired_precision,
        )
        return from_csm_pixel(image_coords)

    def rays(
        self, cols: np.ndarray, rows: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        self._require_initialized()
        return self._provider.image_to_locus(
            self._handle, to_csm_pixel(cols, rows), self.desired_precision,
        )

    def orientation(
        self, pixel: Optional[Sequence[float]] = None
    ) -> np.ndarray:
        raise NotImplementedError(
            "SensorModelCamera: cannot retrieve the camera orientation"
        )

    def target_radii(self) -> np.ndarray:
        """Semi-axes ``(a, a, b)`` of the target body."""
        self._require_initialized()
        return np.array([
            self.semi_major_axis, self.semi_major_axis, self.semi_minor_axis,
        ])

    def sun_position(self) -> np.ndarray:
        """Cached sun position; zeros when the model does not provide it."""
        self._require_initialized()
        return self._sun_position.copy()

    def state(self) -> str:
        """Serialized model state."""
        self._require_initialized()
        return self._provider.state(self._handle)

    def save_state(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.write_text(self.state())
        logger.debug("Wrote sensor model state %s", path)

    def apply_transform(self, transform: np.ndarray) -> None:
        self._require_initialized()
        self._provider.apply_transform(self._handle, transform)

    def save_transformed_state(
        self, path: Union[str, Path], transform: np.ndarray
    ) -> None:
        self._require_initialized()
        handle = self._provider.load_from_state(self.state())
        try:
            self._provider.apply_transform(handle, transform)
            Path(path).write_text(self._provider.state(handle))
        finally:
            self._provider.release(handle)

    # -----------------------------------------------------------------
    # Handle ownership
    # -----------------------------------------------------------------

    def close(self) -> None:
        """Release the model handle."""
        if self._handle is not None:
            self._provider.release(self._handle)
            self._handle = None

    def __del__(self) -> None:
        if getattr(self, '_handle', None) is not None:
            self.close()

    def __copy__(self) -> 'SensorModelCamera':
        return self.__deepcopy__({})

    def __deepcopy__(self, memo: dict) -> 'SensorModelCamera':
        if not self.initialized:
            return type(self)(desired_precision=self.desired_precision)
        return type(self)(
            self._provider,
            self._provider.load_from_state(self.state()),
            self.desired_precision,
        )

    def __enter__(self) -> 'SensorModelCamera':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        if not self.initialized:
            return "SensorModelCamera(uninitialized)"
        return (
            f"SensorModelCamera(provider='{self._provider.name}', "
            f"image_size={self.image_size}, "
            f"desired_precision={self.desired_precision})"
        )
