"""
Input Validation Framework for guided-projectile scenarios.

Checks body, environment and run settings before a projectile is handed
to the integrator, with detailed error messages and warnings.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from guidedflight.core.body import BodyParameters
from guidedflight.core.environment import EnvironmentConfig

_logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""
    ERROR = "error"      # Cannot proceed
    WARNING = "warning"  # Can proceed but unusual
    INFO = "info"        # Just informational


@dataclass
class ValidationIssue:
    """A single validation issue."""
    severity: ValidationSeverity
    field: str
    message: str
    value: float | None = None
    valid_range: tuple[float, float] | None = None

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Complete validation result."""
    is_valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def __str__(self) -> str:
        if self.is_valid and not self.warnings:
            return "All inputs valid"
        return "\n".join(str(issue) for issue in self.issues)


# =============================================================================
# Limits
# =============================================================================

GIMBAL_ANGLE_MAX_TYPICAL = np.radians(45.0)  # rad
DT_MAX_STABLE = 0.05  # s, coarser ticks make the Euler sub-steps unreliable
DRAG_RATIO_MAX_TYPICAL = 1.0


def _error(name: str, message: str, value: float | None = None) -> ValidationIssue:
    return ValidationIssue(ValidationSeverity.ERROR, name, message, value)


def _warning(name: str, message: str, value: float | None = None) -> ValidationIssue:
    return ValidationIssue(ValidationSeverity.WARNING, name, message, value)


# =============================================================================
# Validation Functions
# =============================================================================

def validate_body(body: BodyParameters) -> list[ValidationIssue]:
    """
    Validate projectile geometry, mass and actuator settings.

    Args:
        body: Body parameters (inertia need not be derived yet)

    Returns:
        List of validation issues
    """
    issues = []

    for name in ("radius", "mass"):
        value = getattr(body, name)
        if not value > 0:
            issues.append(_error(name, f"Must be positive (got {value})", value))

    for name in ("cylinder_height", "cone_height"):
        value = getattr(body, name)
        if value < 0:
            issues.append(_error(name, f"Must not be negative (got {value})", value))
    if body.cylinder_height <= 0 and body.cone_height <= 0:
        issues.append(_error("cylinder_height", "Body has zero length"))

    for name in ("max_thrust", "thrust_latency", "gimbal_latency", "form_drag_coefficient",
                 "viscous_drag_factor", "alignment_coefficient", "rotational_damping",
                 "idle_thrust_fraction", "max_drag_thrust_ratio", "max_gimbal_angle"):
        value = getattr(body, name)
        if value < 0:
            issues.append(_error(name, f"Must not be negative (got {value})", value))

    if body.angular_velocity_limit <= 0:
        issues.append(_error("angular_velocity_limit",
                             f"Must be positive (got {body.angular_velocity_limit})",
                             body.angular_velocity_limit))

    if body.max_gimbal_angle > GIMBAL_ANGLE_MAX_TYPICAL:
        issues.append(_warning(
            "max_gimbal_angle",
            f"Gimbal deflection of {np.degrees(body.max_gimbal_angle):.1f}° exceeds 45°",
            body.max_gimbal_angle
        ))
    if body.max_drag_thrust_ratio > DRAG_RATIO_MAX_TYPICAL:
        issues.append(_warning(
            "max_drag_thrust_ratio",
            f"Drag cap above max thrust ({body.max_drag_thrust_ratio:.2f})",
            body.max_drag_thrust_ratio
        ))

    return issues


def validate_environment(config: EnvironmentConfig) -> list[ValidationIssue]:
    """Validate gravity and air properties."""
    issues = []

    if config.gravity < 0:
        issues.append(_error("gravity", f"Must not be negative (got {config.gravity})",
                             config.gravity))
    if config.air_density < 0:
        issues.append(_error("air_density", f"Must not be negative (got {config.air_density})",
                             config.air_density))
    if config.air_viscosity < 0:
        issues.append(_error("air_viscosity",
                             f"Must not be negative (got {config.air_viscosity})",
                             config.air_viscosity))
    if config.wind_speed < 0:
        issues.append(_error("wind_speed", f"Must not be negative (got {config.wind_speed})",
                             config.wind_speed))

    return issues


def validate_timestep(dt: float, duration: float) -> list[ValidationIssue]:
    """Validate the tick length and run duration."""
    issues = []

    if dt <= 0:
        issues.append(_error("dt", f"Tick duration must be positive (got {dt})", dt))
        return issues
    if dt > DT_MAX_STABLE:
        issues.append(_warning("dt", f"Coarse tick ({dt} s) may destabilize rotation", dt))
    if duration < dt:
        issues.append(_error("duration", f"Duration shorter than one tick ({duration} s)",
                             duration))

    return issues


def validate_all(
    body: BodyParameters,
    environment: EnvironmentConfig,
    dt: float,
    duration: float
) -> ValidationResult:
    """
    Validate all scenario inputs.

    Returns:
        ValidationResult; ``is_valid`` is False if any issue is an error
    """
    issues = validate_body(body) + validate_environment(environment) + validate_timestep(dt, duration)

    for issue in issues:
        if issue.severity == ValidationSeverity.WARNING:
            _logger.warning("%s", issue)

    is_valid = not any(i.severity == ValidationSeverity.ERROR for i in issues)
    return ValidationResult(is_valid=is_valid, issues=issues)
