"""
Moment Model.

Moments about the center of mass, body frame:

    M_total = (M_thrust  or  M_idle) + M_damping

The thrust moment is used while the engine produces thrust; below a
small thrust threshold the idle moment (reaction-jet style control
authority) takes over so the body can still be turned at zero throttle.
"""

import numpy as np

from guidedflight.core.body import BodyParameters
from guidedflight.core.constants import GIMBAL_EPSILON, THRUST_EPSILON
from guidedflight.core.forces import gimbal_thrust_vector
from guidedflight.core.math_utils import cross_product, vector_norm
from guidedflight.core.state import FlightState
from guidedflight.core.types import MomentBreakdown


class MomentModel:
    """
    Moment terms for one projectile.

    Args:
        body: Body parameters with derived inertia, or None
    """

    def __init__(self, body: BodyParameters | None):
        self.body = body

    def lever_arm(self) -> np.ndarray:
        """
        Vector from the center of mass to the nozzle, body frame (m).

        The nozzle sits on the tail plane, ``com_offset`` behind the COM.
        """
        if self.body is None:
            return np.zeros(3)
        return np.array([0.0, -self.body.com_offset, 0.0])

    def thrust_moment(self, thrust_local: np.ndarray) -> np.ndarray:
        """τ = r × F_thrust_local"""
        if self.body is None:
            return np.zeros(3)
        return cross_product(self.lever_arm(), np.asarray(thrust_local, dtype=np.float64))

    def idle_moment(self, state: FlightState) -> np.ndarray:
        """
        Low-thrust attitude control.

        A lateral force of ``idle_thrust_fraction × max_thrust`` along the
        active gimbal direction, applied at the nozzle. Zero with the
        gimbal centred.
        """
        body = self.body
        if body is None:
            return np.zeros(3)
        gimbal = state.active_gimbal_input
        if np.hypot(gimbal[0], gimbal[1]) < GIMBAL_EPSILON:
            return np.zeros(3)

        idle_thrust = body.idle_thrust_fraction * body.max_thrust
        force = gimbal_thrust_vector(idle_thrust, gimbal, body.max_gimbal_angle)
        force[1] = 0.0
        return cross_product(self.lever_arm(), force)

    def damping_moment(self, angular_velocity: np.ndarray) -> np.ndarray:
        """Quadratic rate damping, M = -c·|ω|·ω"""
        if self.body is None:
            return np.zeros(3)
        omega = np.asarray(angular_velocity, dtype=np.float64)
        return -self.body.rotational_damping * vector_norm(omega) * omega

    def total(self, state: FlightState, thrust_local: np.ndarray) -> MomentBreakdown:
        """
        All moment terms for the current state.

        Thrust and idle moments are mutually exclusive, selected on the
        magnitude of ``thrust_local``.
        """
        use_idle = vector_norm(np.asarray(thrust_local, dtype=np.float64)) < THRUST_EPSILON
        return MomentBreakdown(
            thrust=np.zeros(3) if use_idle else self.thrust_moment(thrust_local),
            idle=self.idle_moment(state) if use_idle else np.zeros(3),
            damping=self.damping_moment(state.angular_velocity),
            used_idle=use_idle,
        )
