# -*- coding: utf-8 -*-
"""
Jitter - Sinusoidal attitude perturbation of a camera trajectory.

Models platform vibration as a sine wave on each of roll, pitch, and
yaw. For a camera at height ``h`` above the datum, a horizontal ground
uncertainty ``u`` becomes the angular amplitude ``atan(u / h)`` in
degrees. The time of camera ``i`` is the distance travelled from the
first camera divided by the platform velocity, and each axis is offset
by::

    amplitude * sin(2 * pi * frequency * t + phase)

with fixed phases (roll 0, pitch pi/2, yaw pi) so runs are
reproducible. Offsets are added to each camera's nominal roll, pitch,
and yaw before they are composed with the camera's base frame.

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
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

# Third-party
import numpy as np

# SatSim internal
from satsim.exceptions import ArgumentError
from satsim.trajectory import Trajectory

logger = logging.getLogger(__name__)

#: Phase offsets for roll, pitch, and yaw, in radians.
PHASES = np.array([0.0, 0.5 * np.pi, np.pi])


@dataclass(frozen=True)
class JitterParameters:
    """Jitter configuration.

    Parameters
    ----------
    velocity : float
        Platform velocity in meters per second.
    frequency : float
        Jitter frequency in Hz.
    horizontal_uncertainty : Tuple[float, float, float]
        Ground uncertainty in meters at nadir for roll, pitch, and yaw.

    Raises
    ------
    ArgumentError
        If velocity or frequency is not positive, or an uncertainty is
        negative.
    """

    velocity: float
    frequency: float
    horizontal_uncertainty: Tuple[float, float, float]

    def __post_init__(self) -> None:
        if not self.velocity > 0:
            raise ArgumentError("The satellite velocity must be positive.")
        if not self.frequency > 0:
            raise ArgumentError("The jitter frequency must be positive.")
        if len(self.horizontal_uncertainty) != 3:
            raise ArgumentError(
                "The horizontal uncertainty needs three values "
                "(roll, pitch, yaw)."
            )
        if any(not u >= 0 for u in self.horizontal_uncertainty):
            raise ArgumentError(
                "The horizontal uncertainty must be non-negative."
            )

    @classmethod
    def from_options(
        cls,
        velocity: Optional[float],
        frequency: Optional[float],
        horizontal_uncertainty: Optional[Sequence[float]],
    ) -> Optional['JitterParameters']:
        """Parameters from optional values, or None when none are set.

        Raises
        ------
        ArgumentError
            If only some of the five values are set.
        """
        uncertainty = (
            list(horizontal_uncertainty)
            if horizontal_uncertainty is not None else [None] * 3
        )
        values = [velocity, frequency] + uncertainty
        n_set = sum(v is not None for v in values)
        if n_set == 0:
            return None
        if n_set != len(values):
            raise ArgumentError(
                "Either all of jitter-frequency, velocity, and horizontal "
                "uncertainty must be specified, or none."
            )
        return cls(
            velocity=float(velocity),
            frequency=float(frequency),
            horizontal_uncertainty=tuple(float(u) for u in uncertainty),
        )


class JitterModel:
    """Applies sinusoidal roll/pitch/yaw offsets to a trajectory.

    Parameters
    ----------
    params : JitterParameters
    """

    def __init__(self, params: JitterParameters) -> None:
        self.params = params

    def amplitudes(self, heights: np.ndarray) -> np.ndarray:
        """Angular amplitudes in degrees, shape ``(N, 3)``.

        Raises
        ------
        ArgumentError
            If a height is not above the datum.
        """
        heights = np.asarray(heights, dtype=np.float64)
        if np.any(~(heights > 0)):
            raise ArgumentError(
                "Jitter requires every camera to be above the datum."
            )
        u = np.asarray(self.params.horizontal_uncertainty, dtype=np.float64)
        return np.degrees(np.arctan(u[None, :] / heights[:, None]))

    def times(self, trajectory: Trajectory) -> np.ndarray:
        """Seconds since the first camera, shape ``(N,)``."""
        return trajectory.distances() / self.params.velocity

    def offsets(self, trajectory: Trajectory) -> np.ndarray:
        """Roll, pitch, and yaw offsets in degrees, shape ``(N, 3)``."""
        t = self.times(trajectory)
        phase = 2.0 * np.pi * self.params.frequency * t[:, None] + PHASES
        return self.amplitudes(trajectory.heights) * np.sin(phase)

    def apply(self, trajectory: Trajectory) -> Trajectory:
        """Trajectory with jitter offsets composed into each camera."""
        offsets = self.offsets(trajectory)
        logger.info(
            "Applied jitter at %.3f Hz, %.1f m/s; max offsets roll %.6f, "
            "pitch %.6f, yaw %.6f deg",
            self.params.frequency, self.params.velocity,
            *np.abs(offsets).max(axis=0),
        )
        return trajectory.with_angle_offsets(offsets)
