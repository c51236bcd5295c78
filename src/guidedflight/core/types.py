"""
Shared result types and exceptions for the flight integrator.

Breakdown dataclasses expose the individual force and moment terms of a
tick so that callers (telemetry, debug overlays, tests) can inspect them
without recomputing anything.
"""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


def _zero3() -> NDArray[np.float64]:
    return np.zeros(3, dtype=np.float64)


@dataclass
class ForceBreakdown:
    """
    Force terms acting on the body during one tick.

    All vectors are world frame (N) except ``thrust_local``, which is in
    the body frame and feeds the moment model.
    """

    gravity: NDArray[np.float64] = field(default_factory=_zero3)
    buoyancy: NDArray[np.float64] = field(default_factory=_zero3)
    thrust_local: NDArray[np.float64] = field(default_factory=_zero3)
    thrust_world: NDArray[np.float64] = field(default_factory=_zero3)
    drag: NDArray[np.float64] = field(default_factory=_zero3)
    alignment: NDArray[np.float64] = field(default_factory=_zero3)

    @property
    def total(self) -> NDArray[np.float64]:
        """Sum of all world-frame terms (N)."""
        return self.gravity + self.buoyancy + self.thrust_world + self.drag + self.alignment

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.total)) and np.all(np.isfinite(self.thrust_local)))


@dataclass
class MomentBreakdown:
    """Moment terms about the center of mass, body frame (N·m)."""

    thrust: NDArray[np.float64] = field(default_factory=_zero3)
    idle: NDArray[np.float64] = field(default_factory=_zero3)
    damping: NDArray[np.float64] = field(default_factory=_zero3)
    used_idle: bool = False

    @property
    def total(self) -> NDArray[np.float64]:
        """Thrust-or-idle moment plus damping."""
        control = self.idle if self.used_idle else self.thrust
        return control + self.damping

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.total)))


@dataclass
class TickReport:
    """Everything the integrator computed during one ``step``."""

    time: float
    dt: float
    forces: ForceBreakdown
    moments: MomentBreakdown
    acceleration: NDArray[np.float64]
    thrust_promoted: bool = False
    gimbal_promoted: bool = False


# =============================================================================
# Exceptions
# =============================================================================

class FlightSimError(Exception):
    """Base class for flight simulation failures."""
    pass


class FlightConfigurationError(FlightSimError):
    """
    Raised when a projectile cannot be simulated with the given parameters.

    Examples:
        - Non-positive derived inertia
        - Missing body parameters
        - Unknown keys in a scenario file
    """
    pass


class SimulationDivergenceError(FlightSimError):
    """Raised when NaN or Inf appears in a force, moment or the state."""
    pass
