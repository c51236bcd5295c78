"""Core flight dynamics - renderer and host independent."""

from .constants import G0, RHO_SEA_LEVEL, MU_AIR, SUBSTEPS
from .types import (
    ForceBreakdown,
    MomentBreakdown,
    TickReport,
    FlightSimError,
    FlightConfigurationError,
    SimulationDivergenceError,
)
from .math_utils import (
    body_to_world,
    world_to_body,
    nose_direction,
    rotation_from_axis_angle,
    rotation_from_euler,
    launch_orientation,
    orthonormalize,
    is_orthonormal,
)
from .body import (
    BodyParameters,
    calculate_com_offset,
    calculate_inertia_principal,
)
from .environment import (
    Environment,
    EnvironmentConfig,
    PowerLawWind,
    GustingWind,
    calm_wind,
    uniform_wind,
    create_standard_environment,
)
from .guidance import GuidanceInput, GuidanceTuning
from .state import FlightState
from .forces import ForceModel, gimbal_thrust_vector
from .moments import MomentModel
from .integrator import FlightIntegrator

from .validation import (
    ValidationResult,
    ValidationIssue,
    ValidationSeverity,
    validate_all,
    validate_body,
    validate_environment,
    validate_timestep,
)

from .scenario import (
    ScenarioConfig,
    FlightRecord,
    SCENARIO_PRESETS,
    constant_control,
    get_preset,
    load_scenario,
    save_scenario,
    simulate,
)

__all__ = [
    # Constants
    'G0', 'RHO_SEA_LEVEL', 'MU_AIR', 'SUBSTEPS',
    # Types
    'ForceBreakdown', 'MomentBreakdown', 'TickReport',
    'FlightSimError', 'FlightConfigurationError', 'SimulationDivergenceError',
    # Math
    'body_to_world', 'world_to_body', 'nose_direction',
    'rotation_from_axis_angle', 'rotation_from_euler', 'launch_orientation',
    'orthonormalize', 'is_orthonormal',
    # Body / environment / guidance
    'BodyParameters', 'calculate_com_offset', 'calculate_inertia_principal',
    'Environment', 'EnvironmentConfig', 'PowerLawWind', 'GustingWind',
    'calm_wind', 'uniform_wind', 'create_standard_environment',
    'GuidanceInput', 'GuidanceTuning',
    # Dynamics
    'FlightState', 'ForceModel', 'gimbal_thrust_vector', 'MomentModel',
    'FlightIntegrator',
    # Validation
    'ValidationResult', 'ValidationIssue', 'ValidationSeverity',
    'validate_all', 'validate_body', 'validate_environment', 'validate_timestep',
    # Scenarios
    'ScenarioConfig', 'FlightRecord', 'SCENARIO_PRESETS', 'constant_control',
    'get_preset', 'load_scenario', 'save_scenario', 'simulate',
]
