"""
Unit tests for the force model.

Each term is checked in isolation against its closed-form expression.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from guidedflight.core.body import BodyParameters
from guidedflight.core.environment import Environment, uniform_wind
from guidedflight.core.forces import ForceModel, gimbal_thrust_vector
from guidedflight.core.math_utils import launch_orientation
from guidedflight.core.state import FlightState


@pytest.fixture
def body():
    b = BodyParameters(mass=2.0, max_thrust=500.0)
    b.derive_inertia()
    return b


@pytest.fixture
def env():
    return Environment(gravity=9.81, air_density=1.225)


def moving_state(velocity, orientation=None) -> FlightState:
    return FlightState.initial(velocity=velocity, orientation=orientation)


# =============================================================================
# Gravity / Buoyancy
# =============================================================================

class TestStaticForces:
    """Test gravity and buoyancy."""

    def test_gravity(self, body, env):
        assert_allclose(ForceModel(body, env).gravity(), [0.0, -2.0 * 9.81, 0.0])

    def test_buoyancy(self, body, env):
        expected = 1.225 * 9.81 * body.volume
        assert_allclose(ForceModel(body, env).buoyancy(), [0.0, expected, 0.0])

    def test_buoyancy_vacuum(self, body):
        model = ForceModel(body, Environment(air_density=0.0))
        assert_allclose(model.buoyancy(), np.zeros(3))


# =============================================================================
# Thrust
# =============================================================================

class TestThrust:
    """Test gimballed thrust."""

    def test_centred_gimbal(self):
        assert_allclose(gimbal_thrust_vector(100.0, np.zeros(2), 0.2), [0.0, 100.0, 0.0])

    def test_full_deflection_along_x(self):
        F = gimbal_thrust_vector(100.0, np.array([1.0, 0.0]), 0.2)
        assert_allclose(F, [100.0 * np.sin(0.2), 100.0 * np.cos(0.2), 0.0], atol=1e-12)

    def test_deflection_along_y_command(self):
        """gimbal_y deflects along body Z."""
        F = gimbal_thrust_vector(100.0, np.array([0.0, -0.5]), 0.2)
        assert F[0] == pytest.approx(0.0, abs=1e-12)
        assert F[2] == pytest.approx(-100.0 * np.sin(0.1))

    def test_magnitude_preserved(self):
        F = gimbal_thrust_vector(250.0, np.array([0.3, -0.6]), 0.3)
        assert np.linalg.norm(F) == pytest.approx(250.0)

    def test_deflection_saturates(self):
        """|g| > 1 gives the maximum deflection."""
        F = gimbal_thrust_vector(1.0, np.array([3.0, 4.0]), 0.2)
        assert np.arccos(F[1]) == pytest.approx(0.2)

    def test_thrust_uses_active_input(self, body, env):
        state = FlightState()
        state.pending_thrust_input = 1.0
        model = ForceModel(body, env)
        assert_allclose(model.thrust_local(state), np.zeros(3))

        state.active_thrust_input = 0.5
        assert_allclose(model.thrust_local(state), [0.0, 250.0, 0.0])

    def test_thrust_world_follows_orientation(self, body, env):
        state = FlightState.initial(orientation=launch_orientation(0.0, 0.0))
        state.active_thrust_input = 1.0
        assert_allclose(ForceModel(body, env).thrust_world(state), [0.0, 0.0, 500.0], atol=1e-9)


# =============================================================================
# Drag
# =============================================================================

class TestDrag:
    """Test aerodynamic drag."""

    def test_drag_opposes_velocity(self, body, env):
        state = moving_state([10.0, 5.0, -3.0])
        drag = ForceModel(body, env).drag(state)

        v = state.velocity
        assert np.dot(drag, v) < 0
        assert_allclose(np.cross(drag, v), np.zeros(3), atol=1e-9)

    def test_drag_magnitude_axial_flow(self, body, env):
        """Flow along the nose sees the frontal area."""
        speed = 40.0
        model = ForceModel(body, env)
        state = moving_state([0.0, speed, 0.0])

        cd = body.form_drag_coefficient + body.viscous_drag_factor * env.air_viscosity / (
            env.air_density * speed * 2.0 * body.radius)
        expected = 0.5 * env.air_density * cd * body.frontal_area * speed**2
        assert_allclose(model.drag(state), [0.0, -expected, 0.0], rtol=1e-10)

    def test_projected_area_broadside(self, body, env):
        state = moving_state([0.0, 0.0, 30.0])
        area = ForceModel(body, env).projected_area(state, state.velocity)
        assert area == pytest.approx(body.side_area)

    def test_drag_coefficient_falls_with_speed(self, body, env):
        model = ForceModel(body, env)
        assert model.drag_coefficient(1.0) > model.drag_coefficient(100.0)
        assert model.drag_coefficient(1e6) == pytest.approx(body.form_drag_coefficient, rel=1e-3)

    def test_drag_capped(self, body, env):
        state = moving_state([0.0, 0.0, 1e4])
        drag = ForceModel(body, env).drag(state)
        assert np.linalg.norm(drag) == pytest.approx(body.max_drag_thrust_ratio * body.max_thrust)

    def test_drag_cap_disabled_without_thrust(self, env):
        body = BodyParameters(max_thrust=0.0)
        state = moving_state([0.0, 0.0, 1e3])
        assert np.linalg.norm(ForceModel(body, env).drag(state)) > 1e3

    def test_drag_zero_at_rest(self, body, env):
        assert_allclose(ForceModel(body, env).drag(FlightState()), np.zeros(3))

    def test_drag_zero_in_vacuum(self, body):
        model = ForceModel(body, Environment(air_density=0.0))
        assert_allclose(model.drag(moving_state([0.0, 100.0, 0.0])), np.zeros(3))

    def test_drag_uses_relative_velocity(self, body):
        """A stationary body in wind is pushed downwind."""
        env = Environment(wind=uniform_wind([10.0, 0.0, 0.0]))
        drag = ForceModel(body, env).drag(FlightState())
        assert drag[0] > 0
        assert drag[1] == pytest.approx(0.0, abs=1e-12)


# =============================================================================
# Alignment
# =============================================================================

class TestVelocityAlignment:
    """Test side-slip alignment force."""

    def test_zero_along_nose(self, body, env):
        state = moving_state([0.0, 50.0, 0.0])
        assert_allclose(ForceModel(body, env).velocity_alignment(state), np.zeros(3), atol=1e-12)

    def test_opposes_side_slip(self, body, env):
        state = moving_state([20.0, 50.0, 0.0])
        F = ForceModel(body, env).velocity_alignment(state)

        assert F[0] < 0
        assert F[1] == pytest.approx(0.0, abs=1e-12)

        speed = np.linalg.norm(state.velocity)
        expected = -body.alignment_coefficient * 0.5 * 1.225 * speed * body.side_area * 20.0
        assert F[0] == pytest.approx(expected)

    def test_disabled(self, body, env):
        state = moving_state([20.0, 50.0, 0.0])
        model = ForceModel(body, env, enable_alignment=False)
        assert_allclose(model.velocity_alignment(state), np.zeros(3))


# =============================================================================
# Degraded Collaborators
# =============================================================================

class TestMissingCollaborators:
    """Forces degrade to zero without body or environment."""

    def test_no_environment(self, body):
        model = ForceModel(body, None)
        state = moving_state([10.0, 0.0, 0.0])
        forces = model.total(state)

        assert_allclose(forces.gravity, np.zeros(3))
        assert_allclose(forces.drag, np.zeros(3))
        assert_allclose(forces.alignment, np.zeros(3))

    def test_no_body(self, env):
        forces = ForceModel(None, env).total(moving_state([10.0, 0.0, 0.0]))
        assert_allclose(forces.total, np.zeros(3))
        assert forces.is_finite()

    def test_total_sums_terms(self, body, env):
        state = moving_state([5.0, 20.0, 0.0])
        state.active_thrust_input = 1.0
        f = ForceModel(body, env).total(state)
        assert_allclose(f.total, f.gravity + f.buoyancy + f.thrust_world + f.drag + f.alignment)
