"""
Force Model.

Computes the forces acting on a projectile from its FlightState, body
parameters and environment:

    F_total = F_gravity + F_buoyancy + F_thrust + F_drag + F_alignment

All forces are world frame except the local thrust vector, which is
returned in the body frame for the moment model.

A missing collaborator (no body parameters, no environment) turns the
terms that depend on it into zero vectors instead of failing, so a
partially-configured projectile degrades rather than stopping the tick
loop. Reporting that condition is the caller's job.
"""

import numpy as np

from guidedflight.core.body import BodyParameters
from guidedflight.core.constants import GIMBAL_EPSILON, SPEED_EPSILON
from guidedflight.core.environment import Environment
from guidedflight.core.math_utils import (
    body_to_world,
    dot_product,
    nose_direction,
    vector_norm,
)
from guidedflight.core.state import FlightState
from guidedflight.core.types import ForceBreakdown


def gimbal_thrust_vector(
    thrust: float,
    gimbal: np.ndarray,
    max_gimbal_angle: float
) -> np.ndarray:
    """
    Body-frame force of a gimballed nozzle.

    Deflection δ = max_gimbal_angle × min(|g|, 1), azimuth φ = atan2(g_y, g_x):

        F = T · [sin δ cos φ,  cos δ,  sin δ sin φ]

    The nose-axis (Y) component shrinks as the deflection grows. A positive
    gimbal_x pushes the tail toward body +X, which turns the nose toward -X.

    Args:
        thrust: Thrust magnitude (N)
        gimbal: Gimbal command [g_x, g_y]
        max_gimbal_angle: Deflection at full command (rad)

    Returns:
        Force vector in body frame (N)
    """
    magnitude = float(np.hypot(gimbal[0], gimbal[1]))
    if magnitude < GIMBAL_EPSILON:
        return np.array([0.0, thrust, 0.0])

    delta = max_gimbal_angle * min(magnitude, 1.0)
    phi = np.arctan2(gimbal[1], gimbal[0])
    sin_d = np.sin(delta)
    return np.array([
        thrust * sin_d * np.cos(phi),
        thrust * np.cos(delta),
        thrust * sin_d * np.sin(phi)
    ])


class ForceModel:
    """
    Force terms for one projectile.

    Args:
        body: Body parameters, or None
        environment: Environment, or None
        enable_alignment: Include the side-slip alignment force
    """

    def __init__(
        self,
        body: BodyParameters | None,
        environment: Environment | None,
        enable_alignment: bool = True
    ):
        self.body = body
        self.environment = environment
        self.enable_alignment = enable_alignment

    # -------------------------------------------------------------------------
    # Static forces
    # -------------------------------------------------------------------------

    def gravity(self) -> np.ndarray:
        """Weight, (0, -m·g, 0)."""
        if self.body is None or self.environment is None:
            return np.zeros(3)
        return np.array([0.0, -self.body.mass * self.environment.gravity, 0.0])

    def buoyancy(self) -> np.ndarray:
        """Archimedes lift of the displaced air, (0, ρ·g·V, 0)."""
        if self.body is None or self.environment is None:
            return np.zeros(3)
        env = self.environment
        return np.array([0.0, env.air_density * env.gravity * self.body.volume, 0.0])

    # -------------------------------------------------------------------------
    # Thrust
    # -------------------------------------------------------------------------

    def thrust_local(self, state: FlightState) -> np.ndarray:
        """Thrust in the body frame from the *active* throttle and gimbal."""
        if self.body is None:
            return np.zeros(3)
        throttle = min(max(state.active_thrust_input, 0.0), 1.0)
        thrust = self.body.max_thrust * throttle
        return gimbal_thrust_vector(thrust, state.active_gimbal_input, self.body.max_gimbal_angle)

    def thrust_world(self, state: FlightState, thrust_local: np.ndarray | None = None) -> np.ndarray:
        """Thrust rotated into the world frame by the orientation basis."""
        if thrust_local is None:
            thrust_local = self.thrust_local(state)
        return body_to_world(state.orientation, thrust_local)

    # -------------------------------------------------------------------------
    # Aerodynamics
    # -------------------------------------------------------------------------

    def relative_velocity(self, state: FlightState) -> np.ndarray:
        """Airspeed vector: velocity minus the local wind (m/s)."""
        if self.environment is None:
            return state.velocity.copy()
        return state.velocity - self.environment.sample_wind(state.position)

    def projected_area(self, state: FlightState, v_rel: np.ndarray) -> float:
        """
        Cross-section presented to the airflow (m²).

        Interpolates between the circular frontal area (flow along the nose,
        weight |cos θ|) and the side profile R·(2H + h) (broadside flow,
        weight sin θ), θ being the angle between nose and airflow.
        """
        body = self.body
        speed = vector_norm(v_rel)
        if speed < SPEED_EPSILON:
            return body.frontal_area
        cos_t = abs(dot_product(nose_direction(state.orientation), v_rel)) / speed
        cos_t = min(cos_t, 1.0)
        sin_t = np.sqrt(1.0 - cos_t * cos_t)
        return cos_t * body.frontal_area + sin_t * body.side_area

    def drag_coefficient(self, speed: float) -> float:
        """
        C_D = C_form + k_visc · μ / (ρ · |v| · 2R)

        The second term is a 1/Re correction that matters only at low speed.
        """
        body = self.body
        env = self.environment
        reynolds_denominator = env.air_density * speed * 2.0 * body.radius
        if reynolds_denominator <= 0:
            return body.form_drag_coefficient
        return (body.form_drag_coefficient
                + body.viscous_drag_factor * env.air_viscosity / reynolds_denominator)

    def drag(self, state: FlightState) -> np.ndarray:
        """
        Aerodynamic drag, world frame.

            F_D = -½ ρ C_D A |v_rel| v_rel

        capped at ``max_drag_thrust_ratio × max_thrust`` to keep extreme
        relative speeds from producing runaway deceleration. Zero below the
        speed threshold, where the flow direction is undefined.
        """
        if self.body is None or self.environment is None:
            return np.zeros(3)

        rho = self.environment.air_density
        v_rel = self.relative_velocity(state)
        speed = vector_norm(v_rel)
        if speed < SPEED_EPSILON or rho <= 0:
            return np.zeros(3)

        area = self.projected_area(state, v_rel)
        cd = self.drag_coefficient(speed)
        force = -0.5 * rho * cd * area * speed * v_rel

        cap = self.body.max_drag_thrust_ratio * self.body.max_thrust
        if cap > 0:
            magnitude = vector_norm(force)
            if magnitude > cap:
                force = force * (cap / magnitude)
        return force

    def velocity_alignment(self, state: FlightState) -> np.ndarray:
        """
        Side-slip force that weather-vanes the body into the airflow.

        The relative velocity is split into components parallel and
        perpendicular to the nose; the perpendicular part is opposed:

            F_A = -k · ½ ρ |v_rel| · A_side · v_perp
        """
        if not self.enable_alignment or self.body is None or self.environment is None:
            return np.zeros(3)

        v_rel = self.relative_velocity(state)
        speed = vector_norm(v_rel)
        if speed < SPEED_EPSILON:
            return np.zeros(3)

        nose = nose_direction(state.orientation)
        v_perp = v_rel - dot_product(v_rel, nose) * nose
        return (-self.body.alignment_coefficient * 0.5 * self.environment.air_density
                * speed * self.body.side_area * v_perp)

    # -------------------------------------------------------------------------
    # Total
    # -------------------------------------------------------------------------

    def total(self, state: FlightState) -> ForceBreakdown:
        """All force terms for the current state."""
        local = self.thrust_local(state)
        return ForceBreakdown(
            gravity=self.gravity(),
            buoyancy=self.buoyancy(),
            thrust_local=local,
            thrust_world=self.thrust_world(state, local),
            drag=self.drag(state),
            alignment=self.velocity_alignment(state),
        )
