"""
Mutable flight state of one projectile.

Owned exclusively by a FlightIntegrator; nothing else writes to it.
"""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from guidedflight.core.math_utils import nose_direction


def _zero3() -> NDArray[np.float64]:
    return np.zeros(3, dtype=np.float64)


@dataclass
class FlightState:
    """
    State vector plus actuator-latency bookkeeping.

    Attributes:
        position: World position (m)
        velocity: World velocity (m/s)
        angular_velocity: Body-frame rates [pitch, roll, yaw] (rad/s)
        orientation: Orthonormal 3x3 basis, body → world
        active_thrust_input: Throttle currently producing thrust [0, 1]
        active_gimbal_input: Gimbal deflection currently applied, |g| ≤ 1
        pending_thrust_input: Latest throttle sample awaiting activation
        pending_thrust_time: Simulation time that sample was received (s)
        pending_gimbal_input: Latest gimbal sample awaiting activation
        pending_gimbal_time: Simulation time that sample was received (s)
        time: Simulation clock at the end of the last tick (s)
    """
    position: NDArray[np.float64] = field(default_factory=_zero3)
    velocity: NDArray[np.float64] = field(default_factory=_zero3)
    angular_velocity: NDArray[np.float64] = field(default_factory=_zero3)
    orientation: NDArray[np.float64] = field(default_factory=lambda: np.eye(3))

    active_thrust_input: float = 0.0
    active_gimbal_input: NDArray[np.float64] = field(default_factory=lambda: np.zeros(2))
    pending_thrust_input: float = 0.0
    pending_thrust_time: float = 0.0
    pending_gimbal_input: NDArray[np.float64] = field(default_factory=lambda: np.zeros(2))
    pending_gimbal_time: float = 0.0

    time: float = 0.0

    @classmethod
    def initial(cls, position=None, velocity=None, orientation=None) -> "FlightState":
        """State at scenario start, everything else at rest and idle."""
        state = cls()
        if position is not None:
            state.position = np.asarray(position, dtype=np.float64).reshape(3).copy()
        if velocity is not None:
            state.velocity = np.asarray(velocity, dtype=np.float64).reshape(3).copy()
        if orientation is not None:
            state.orientation = np.asarray(orientation, dtype=np.float64).reshape(3, 3).copy()
        return state

    @property
    def nose_direction(self) -> NDArray[np.float64]:
        return nose_direction(self.orientation)

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.position))
            and np.all(np.isfinite(self.velocity))
            and np.all(np.isfinite(self.angular_velocity))
            and np.all(np.isfinite(self.orientation))
        )

    def copy(self) -> "FlightState":
        return FlightState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            angular_velocity=self.angular_velocity.copy(),
            orientation=self.orientation.copy(),
            active_thrust_input=self.active_thrust_input,
            active_gimbal_input=self.active_gimbal_input.copy(),
            pending_thrust_input=self.pending_thrust_input,
            pending_thrust_time=self.pending_thrust_time,
            pending_gimbal_input=self.pending_gimbal_input.copy(),
            pending_gimbal_time=self.pending_gimbal_time,
            time=self.time,
        )
