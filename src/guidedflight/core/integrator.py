"""
6-DOF Flight Integrator.

Advances a projectile's FlightState by one fixed physics tick:

    1. Latency gating   - promote pending throttle/gimbal samples once
                          their actuator delay has elapsed
    2. Translation      - semi-implicit Euler:  v ← v + (F/m)·dt,  p ← p + v·dt
    3. Rotation rates   - Euler's rigid-body equations, N sub-steps
    4. Roll channel     - body roll rate taken from GuidanceInput
    5. Orientation      - incremental axis-angle rotation of the basis,
                          Gram-Schmidt re-orthonormalization
    6. Output           - position / orientation exposed to the host

Euler's equations for the axisymmetric body (I_x = I_z ≠ I_y, Y = nose):

    ω̇_x = M_x/I_x − (I_z − I_y)/I_x · ω_y ω_z
    ω̇_y = M_y/I_y − (I_x − I_z)/I_y · ω_z ω_x
    ω̇_z = M_z/I_z − (I_y − I_x)/I_z · ω_x ω_y

The integrator runs synchronously on the host's simulation thread and
owns its FlightState exclusively.

References:
    - Stevens & Lewis, "Aircraft Control and Simulation", 3rd ed.
    - Zipfel, "Modeling and Simulation of Aerospace Vehicle Dynamics", 3rd ed.
"""

import logging

import numpy as np
from numba import jit

from guidedflight.core.body import BodyParameters
from guidedflight.core.constants import (
    ANGLE_EPSILON,
    INPUT_EPSILON,
    SUBSTEPS,
    TIME_EPSILON,
)
from guidedflight.core.environment import Environment, GustingWind
from guidedflight.core.forces import ForceModel
from guidedflight.core.guidance import GuidanceInput
from guidedflight.core.math_utils import (
    mat_mul,
    mat_vec,
    orthonormalize,
    rotation_from_axis_angle,
    vector_norm,
)
from guidedflight.core.moments import MomentModel
from guidedflight.core.state import FlightState
from guidedflight.core.types import (
    FlightConfigurationError,
    SimulationDivergenceError,
    TickReport,
)

_logger = logging.getLogger(__name__)


# =============================================================================
# Rotational Kernels
# =============================================================================

@jit(nopython=True, cache=True)
def integrate_euler_equations(
    omega: np.ndarray,
    moment: np.ndarray,
    inertia: np.ndarray,
    dt: float,
    substeps: int
) -> np.ndarray:
    """
    Integrate Euler's rigid-body equations over one tick.

    The moment is held constant across the tick; the gyroscopic
    cross-terms are re-evaluated every sub-step of dt/N.

    Args:
        omega: Body rates [ω_x, ω_y, ω_z] (rad/s)
        moment: Body-frame moment (N·m)
        inertia: Principal moments [I_x, I_y, I_z] (kg·m²)
        dt: Tick duration (s)
        substeps: Number of sub-steps N

    Returns:
        New body rates (rad/s)
    """
    Ix, Iy, Iz = inertia[0], inertia[1], inertia[2]
    h = dt / substeps

    wx, wy, wz = omega[0], omega[1], omega[2]
    for _ in range(substeps):
        dwx = moment[0] / Ix - (Iz - Iy) / Ix * wy * wz
        dwy = moment[1] / Iy - (Ix - Iz) / Iy * wz * wx
        dwz = moment[2] / Iz - (Iy - Ix) / Iz * wx * wy
        wx += h * dwx
        wy += h * dwy
        wz += h * dwz

    return np.array([wx, wy, wz])


@jit(nopython=True, cache=True)
def clamp_angular_velocity(omega: np.ndarray, limit: float) -> np.ndarray:
    """Clamp each body rate to ±limit."""
    out = np.empty(3)
    for i in range(3):
        w = omega[i]
        if w > limit:
            w = limit
        elif w < -limit:
            w = -limit
        out[i] = w
    return out


@jit(nopython=True, cache=True)
def integrate_orientation(
    orientation: np.ndarray,
    omega_body: np.ndarray,
    dt: float
) -> np.ndarray:
    """
    Rotate the orientation basis by the body rates over one tick.

    ω is moved into the world frame, turned into an incremental rotation
    (axis = ω̂_world, angle = |ω_world|·dt) and left-multiplied onto the
    basis. The result is always re-orthonormalized.

    Args:
        orientation: Current basis (body → world)
        omega_body: Body rates (rad/s)
        dt: Tick duration (s)

    Returns:
        New orthonormal basis
    """
    omega_world = mat_vec(orientation, omega_body)
    angle = vector_norm(omega_world) * dt

    if angle > ANGLE_EPSILON:
        delta = rotation_from_axis_angle(omega_world, angle)
        return orthonormalize(mat_mul(delta, orientation))

    return orthonormalize(orientation)


# =============================================================================
# Integrator
# =============================================================================

class FlightIntegrator:
    """
    Advances one projectile frame by frame.

    Args:
        body: Body parameters (inertia is derived here if needed)
        environment: Gravity, air and wind; None degrades forces to zero
        guidance: Control channel; a fresh GuidanceInput if omitted
        initial_position: World position at scenario start (m)
        initial_velocity: World velocity at scenario start (m/s)
        initial_orientation: Basis at scenario start; identity (nose up) if omitted
        substeps: Euler-equation sub-steps per tick
        enable_alignment: Include the side-slip alignment force

    Raises:
        FlightConfigurationError: Missing body parameters or non-positive inertia.
    """

    def __init__(
        self,
        body: BodyParameters | None,
        environment: Environment | None,
        guidance: GuidanceInput | None = None,
        initial_position=None,
        initial_velocity=None,
        initial_orientation=None,
        substeps: int = SUBSTEPS,
        enable_alignment: bool = True
    ):
        if body is None:
            raise FlightConfigurationError("Body parameters are required")
        if substeps < 1:
            raise FlightConfigurationError(f"Invalid substep count: {substeps}")

        body.derive_inertia()

        if environment is None:
            _logger.warning("No environment set: gravity, buoyancy and drag are disabled")

        self.body = body
        self.environment = environment
        self.guidance = guidance if guidance is not None else GuidanceInput()
        self.substeps = substeps

        self.forces = ForceModel(body, environment, enable_alignment=enable_alignment)
        self.moments = MomentModel(body)

        orientation = None
        if initial_orientation is not None:
            orientation = orthonormalize(np.asarray(initial_orientation, dtype=np.float64))
        self._initial = FlightState.initial(initial_position, initial_velocity, orientation)
        self._state = self._initial.copy()
        self._failed = False

    # -------------------------------------------------------------------------
    # Exposed state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> FlightState:
        """A copy of the current state; the integrator keeps the original."""
        return self._state.copy()

    @property
    def position(self) -> np.ndarray:
        return self._state.position.copy()

    @property
    def velocity(self) -> np.ndarray:
        return self._state.velocity.copy()

    @property
    def angular_velocity(self) -> np.ndarray:
        return self._state.angular_velocity.copy()

    @property
    def orientation(self) -> np.ndarray:
        return self._state.orientation.copy()

    @property
    def nose_direction(self) -> np.ndarray:
        """Unit vector along the nose, world frame."""
        return self._state.nose_direction

    @property
    def time(self) -> float:
        return self._state.time

    @property
    def failed(self) -> bool:
        return self._failed

    def transform(self) -> tuple[np.ndarray, np.ndarray]:
        """(position, orientation) for the renderer / collision system."""
        return self.position, self.orientation

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def set_control_input(
        self,
        throttle: float,
        gimbal_x: float,
        gimbal_y: float,
        roll: float | None = None
    ) -> None:
        """Publish a control sample; roll keeps its last value if omitted."""
        if roll is None:
            roll = self.guidance.roll_input
        self.guidance.set_control(throttle, gimbal_x, gimbal_y, roll)

    def reset(self) -> None:
        """Restore the initial state and clear any failure."""
        self._state = self._initial.copy()
        self._failed = False
        self.guidance.reset()
        if self.environment is not None and isinstance(self.environment.wind, GustingWind):
            self.environment.wind.reset()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def _gate_inputs(self, now: float) -> tuple[bool, bool]:
        """
        Actuator latency model.

        A sample that differs from the pending one by more than
        INPUT_EPSILON restarts that channel's timer; the pending value is
        promoted to active once it is at least ``latency`` seconds old,
        within TIME_EPSILON so that a clock built from summed ticks still
        promotes on the tick that lands on ``t + latency``.
        """
        s = self._state
        body = self.body

        throttle = self.guidance.throttle
        if abs(throttle - s.pending_thrust_input) > INPUT_EPSILON:
            s.pending_thrust_input = throttle
            s.pending_thrust_time = now

        gimbal = self.guidance.gimbal
        magnitude = float(np.hypot(gimbal[0], gimbal[1]))
        if magnitude > 1.0:
            gimbal = gimbal / magnitude
        if np.max(np.abs(gimbal - s.pending_gimbal_input)) > INPUT_EPSILON:
            s.pending_gimbal_input = gimbal
            s.pending_gimbal_time = now

        thrust_promoted = False
        if (now - s.pending_thrust_time >= body.thrust_latency - TIME_EPSILON
                and s.active_thrust_input != s.pending_thrust_input):
            s.active_thrust_input = s.pending_thrust_input
            thrust_promoted = True
            _logger.debug("t=%.3fs throttle active: %.3f", now, s.active_thrust_input)

        gimbal_promoted = False
        if (now - s.pending_gimbal_time >= body.gimbal_latency - TIME_EPSILON
                and not np.array_equal(s.active_gimbal_input, s.pending_gimbal_input)):
            s.active_gimbal_input = s.pending_gimbal_input.copy()
            gimbal_promoted = True
            _logger.debug("t=%.3fs gimbal active: %s", now, s.active_gimbal_input)

        return thrust_promoted, gimbal_promoted

    def _diverged(self, what: str, now: float) -> SimulationDivergenceError:
        self._failed = True
        _logger.error("Simulation diverged at t=%.3fs: non-finite %s", now, what)
        return SimulationDivergenceError(f"Non-finite {what} at t={now:.3f}s")

    def step(self, dt: float, now: float | None = None) -> TickReport:
        """
        Advance the projectile by one tick.

        Args:
            dt: Tick duration (s)
            now: Simulation clock at the end of this tick; defaults to
                the previous time plus dt

        Returns:
            TickReport with the force and moment terms that were applied

        Raises:
            SimulationDivergenceError: NaN/Inf in a force, moment or the
                resulting state, or a previous divergence not yet reset.
        """
        if self._failed:
            raise SimulationDivergenceError("Integrator has diverged; reset() required")
        if dt <= 0:
            raise ValueError(f"Tick duration must be positive (got {dt})")

        s = self._state
        now = s.time + dt if now is None else float(now)

        # 1. Latency gating
        thrust_promoted, gimbal_promoted = self._gate_inputs(now)

        # 2. Translation (semi-implicit Euler)
        forces = self.forces.total(s)
        if not forces.is_finite():
            raise self._diverged("force", now)

        acceleration = forces.total / self.body.mass
        s.velocity = s.velocity + acceleration * dt
        s.position = s.position + s.velocity * dt

        # 3. Rotation rates (Euler's equations, sub-stepped)
        moments = self.moments.total(s, forces.thrust_local)
        if not moments.is_finite():
            raise self._diverged("moment", now)

        omega = integrate_euler_equations(
            s.angular_velocity, moments.total, self.body.inertia_vector,
            float(dt), self.substeps
        )

        # 4. Roll channel overrides the physical roll rate
        omega[1] = self.guidance.update_roll(dt)
        s.angular_velocity = clamp_angular_velocity(omega, self.body.angular_velocity_limit)

        # 5. Orientation (gimbal-lock free)
        s.orientation = integrate_orientation(s.orientation, s.angular_velocity, float(dt))

        # 6. Output
        s.time = now
        if not s.is_finite():
            raise self._diverged("state", now)

        return TickReport(
            time=now,
            dt=dt,
            forces=forces,
            moments=moments,
            acceleration=acceleration,
            thrust_promoted=thrust_promoted,
            gimbal_promoted=gimbal_promoted,
        )
