"""
Scenario configuration and headless flight runner.

A scenario bundles everything needed to put one projectile in the air:
body parameters, environment, roll-channel tuning, initial conditions
and run settings. Scenarios are stored as JSON (``.flight`` files) and a
small preset library ships with the package.

``simulate`` drives a FlightIntegrator tick by tick with a control
schedule and records the trajectory, standing in for the game's
fixed-timestep physics loop.
"""

import copy
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from guidedflight.core.body import BodyParameters
from guidedflight.core.environment import EnvironmentConfig, GustingWind
from guidedflight.core.guidance import GuidanceInput, GuidanceTuning
from guidedflight.core.integrator import FlightIntegrator
from guidedflight.core.math_utils import launch_orientation
from guidedflight.core.types import FlightConfigurationError, SimulationDivergenceError
from guidedflight.core.validation import ValidationResult, validate_all

_logger = logging.getLogger(__name__)

# (throttle, gimbal_x, gimbal_y, roll) as a function of simulation time
ControlSchedule = Callable[[float], tuple[float, float, float, float]]


def constant_control(
    throttle: float = 0.0,
    gimbal_x: float = 0.0,
    gimbal_y: float = 0.0,
    roll: float = 0.0
) -> ControlSchedule:
    """Schedule that publishes the same sample every tick."""
    sample = (throttle, gimbal_x, gimbal_y, roll)

    def _schedule(t: float) -> tuple[float, float, float, float]:
        return sample

    return _schedule


# =============================================================================
# Scenario Configuration
# =============================================================================

@dataclass
class ScenarioConfig:
    """Deserialized scenario."""
    name: str = "Untitled"
    body: BodyParameters = field(default_factory=BodyParameters)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    guidance: GuidanceTuning = field(default_factory=GuidanceTuning)

    # Initial conditions
    position: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # m
    velocity: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # m/s
    elevation_deg: float = 90.0  # nose above horizon
    azimuth_deg: float = 0.0  # heading from +Z toward +X

    # Run settings
    dt: float = 0.01  # s
    duration: float = 10.0  # s
    enable_alignment: bool = True

    def validate(self) -> ValidationResult:
        return validate_all(self.body, self.environment, self.dt, self.duration)

    def build(self, guidance: GuidanceInput | None = None) -> FlightIntegrator:
        """
        Create an integrator for this scenario.

        Raises:
            FlightConfigurationError: If validation reports errors or the
                body's inertia cannot be derived.
        """
        result = self.validate()
        if not result.is_valid:
            raise FlightConfigurationError(
                f"Scenario '{self.name}' is invalid:\n"
                + "\n".join(str(issue) for issue in result.errors)
            )

        if guidance is None:
            guidance = GuidanceInput(tuning=copy.copy(self.guidance))

        return FlightIntegrator(
            self.body,
            self.environment.build(),
            guidance,
            initial_position=self.position,
            initial_velocity=self.velocity,
            initial_orientation=launch_orientation(self.elevation_deg, self.azimuth_deg),
            enable_alignment=self.enable_alignment,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScenarioConfig":
        """
        Build from a deserialized mapping (e.g. a parsed JSON file).

        Raises:
            FlightConfigurationError: On unknown keys or malformed vectors.
        """
        data = dict(data)
        known = {"name", "body", "environment", "guidance", "position", "velocity",
                 "elevation_deg", "azimuth_deg", "dt", "duration", "enable_alignment"}
        unknown = set(data) - known
        if unknown:
            raise FlightConfigurationError(f"Unknown scenario keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        if "name" in data:
            kwargs["name"] = str(data["name"])
        if "body" in data:
            kwargs["body"] = BodyParameters.from_dict(data["body"])
        if "environment" in data:
            kwargs["environment"] = EnvironmentConfig.from_dict(data["environment"])
        if "guidance" in data:
            kwargs["guidance"] = GuidanceTuning.from_dict(data["guidance"])
        for key in ("position", "velocity"):
            if key in data:
                vector = [float(v) for v in data[key]]
                if len(vector) != 3:
                    raise FlightConfigurationError(f"'{key}' must have 3 components")
                kwargs[key] = vector
        for key in ("elevation_deg", "azimuth_deg", "dt", "duration"):
            if key in data:
                kwargs[key] = float(data[key])
        if "enable_alignment" in data:
            kwargs["enable_alignment"] = bool(data["enable_alignment"])

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "body": self.body.to_dict(),
            "environment": self.environment.to_dict(),
            "guidance": self.guidance.to_dict(),
            "position": list(self.position),
            "velocity": list(self.velocity),
            "elevation_deg": self.elevation_deg,
            "azimuth_deg": self.azimuth_deg,
            "dt": self.dt,
            "duration": self.duration,
            "enable_alignment": self.enable_alignment,
        }


FILE_EXTENSION = ".flight"


def load_scenario(path: str | Path) -> ScenarioConfig:
    """
    Load a scenario from a JSON file.

    Raises:
        FlightConfigurationError: If the file is not valid JSON or has
            unknown keys.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise FlightConfigurationError(f"Malformed scenario file {path}: {e}") from e
    return ScenarioConfig.from_dict(data)


def save_scenario(config: ScenarioConfig, path: str | Path) -> Path:
    """Write a scenario as JSON, adding the default extension if missing."""
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(FILE_EXTENSION)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path


# =============================================================================
# Presets
# =============================================================================

SCENARIO_PRESETS: dict[str, ScenarioConfig] = {

    "vertical_test": ScenarioConfig(
        name="vertical_test",
        body=BodyParameters(
            radius=0.05, cylinder_height=0.3, cone_height=0.2, mass=2.0,
            max_thrust=500.0, thrust_latency=0.0, gimbal_latency=0.0
        ),
        environment=EnvironmentConfig(gravity=9.81, air_density=0.0),
        dt=0.01,
        duration=1.0,
    ),

    "crosswind_launch": ScenarioConfig(
        name="crosswind_launch",
        body=BodyParameters(
            radius=0.05, cylinder_height=0.6, cone_height=0.2, mass=4.0,
            max_thrust=300.0
        ),
        environment=EnvironmentConfig(wind_speed=8.0, wind_direction=90.0),
        elevation_deg=80.0,
        dt=0.01,
        duration=8.0,
    ),

    "gusty_glide": ScenarioConfig(
        name="gusty_glide",
        body=BodyParameters(
            radius=0.04, cylinder_height=0.5, cone_height=0.15, mass=3.0,
            max_thrust=150.0, idle_thrust_fraction=0.05
        ),
        environment=EnvironmentConfig(wind_speed=4.0, gust_amplitude=2.0, gust_frequency=0.3),
        position=[0.0, 200.0, 0.0],
        velocity=[0.0, 0.0, 60.0],
        elevation_deg=0.0,
        dt=0.01,
        duration=6.0,
    ),
}


def get_preset(name: str) -> ScenarioConfig:
    """
    Independent copy of a preset scenario.

    Raises:
        KeyError: If no preset has that name.
    """
    return copy.deepcopy(SCENARIO_PRESETS[name])


# =============================================================================
# Headless Runner
# =============================================================================

@dataclass
class FlightRecord:
    """Recorded trajectory of one simulated flight (one row per tick, plus t=0)."""

    time: np.ndarray                # [s]
    position: np.ndarray            # [m] (N, 3) world
    velocity: np.ndarray            # [m/s] (N, 3) world
    angular_velocity: np.ndarray    # [rad/s] (N, 3) body
    nose_direction: np.ndarray      # [-] (N, 3) world
    throttle: np.ndarray            # [-] active throttle
    thrust: np.ndarray              # [N] thrust magnitude
    drag: np.ndarray                # [N] drag magnitude

    # Summary
    apogee: float = 0.0             # [m] highest Y reached
    max_speed: float = 0.0          # [m/s]
    flight_time: float = 0.0        # [s]

    # Status
    success: bool = True
    abort_reason: str | None = None

    @property
    def altitude(self) -> np.ndarray:
        return self.position[:, 1]

    @property
    def speed(self) -> np.ndarray:
        return np.linalg.norm(self.velocity, axis=1)


def simulate(
    config: ScenarioConfig,
    schedule: ControlSchedule | None = None,
    integrator: FlightIntegrator | None = None
) -> FlightRecord:
    """
    Run a scenario for ``duration / dt`` ticks.

    Args:
        config: Scenario to run
        schedule: Control samples by time; idle if omitted
        integrator: Pre-built integrator (built from ``config`` if omitted)

    Returns:
        FlightRecord. A numerical divergence ends the run early with
        ``success=False``.

    Raises:
        FlightConfigurationError: If the scenario cannot be built.
    """
    if schedule is None:
        schedule = constant_control()
    if integrator is None:
        integrator = config.build()

    dt = config.dt
    n_ticks = int(round(config.duration / dt))
    wind = integrator.environment.wind if integrator.environment is not None else None

    times = [integrator.time]
    positions = [integrator.position]
    velocities = [integrator.velocity]
    rates = [integrator.angular_velocity]
    noses = [integrator.nose_direction]
    throttles = [integrator.state.active_thrust_input]
    thrusts = [0.0]
    drags = [0.0]

    success = True
    abort_reason = None
    start = time.perf_counter()
    _logger.info("Starting scenario '%s': dt=%ss, %d ticks", config.name, dt, n_ticks)

    for i in range(1, n_ticks + 1):
        integrator.set_control_input(*schedule(integrator.time))
        try:
            report = integrator.step(dt, now=i * dt)
        except SimulationDivergenceError as e:
            success = False
            abort_reason = str(e)
            _logger.error("Scenario '%s' aborted: %s", config.name, e)
            break

        if isinstance(wind, GustingWind):
            wind.advance(dt)

        state = integrator.state
        times.append(state.time)
        positions.append(state.position)
        velocities.append(state.velocity)
        rates.append(state.angular_velocity)
        noses.append(state.nose_direction)
        throttles.append(state.active_thrust_input)
        thrusts.append(float(np.linalg.norm(report.forces.thrust_world)))
        drags.append(float(np.linalg.norm(report.forces.drag)))

    position = np.array(positions)
    velocity = np.array(velocities)
    elapsed = time.perf_counter() - start
    _logger.info("Scenario '%s' complete: %d ticks in %.2fs", config.name, len(times) - 1, elapsed)

    return FlightRecord(
        time=np.array(times),
        position=position,
        velocity=velocity,
        angular_velocity=np.array(rates),
        nose_direction=np.array(noses),
        throttle=np.array(throttles),
        thrust=np.array(thrusts),
        drag=np.array(drags),
        apogee=float(np.max(position[:, 1])),
        max_speed=float(np.max(np.linalg.norm(velocity, axis=1))),
        flight_time=float(times[-1]),
        success=success,
        abort_reason=abort_reason,
    )
