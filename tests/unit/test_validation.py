"""
Unit tests for input validation module.

Tests all validation functions and edge cases.
"""

import numpy as np
import pytest

from guidedflight.core.body import BodyParameters
from guidedflight.core.environment import EnvironmentConfig
from guidedflight.core.validation import (
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_all,
    validate_body,
    validate_environment,
    validate_timestep,
)


class TestBodyValidation:
    """Test body parameter validation."""

    def test_default_body_no_issues(self):
        assert validate_body(BodyParameters()) == []

    def test_zero_mass_is_error(self):
        issues = validate_body(BodyParameters(mass=0.0))
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.ERROR
        assert issues[0].field == "mass"
        assert "positive" in issues[0].message.lower()

    def test_negative_cone_height_is_error(self):
        issues = validate_body(BodyParameters(cone_height=-0.1))
        assert any(i.field == "cone_height" and i.severity == ValidationSeverity.ERROR
                   for i in issues)

    def test_zero_length_is_error(self):
        issues = validate_body(BodyParameters(cylinder_height=0.0, cone_height=0.0))
        assert any(i.severity == ValidationSeverity.ERROR for i in issues)

    def test_zero_latency_allowed(self):
        assert validate_body(BodyParameters(thrust_latency=0.0, gimbal_latency=0.0)) == []

    def test_negative_latency_is_error(self):
        issues = validate_body(BodyParameters(thrust_latency=-0.1))
        assert issues[0].field == "thrust_latency"

    def test_negative_thrust_is_error(self):
        issues = validate_body(BodyParameters(max_thrust=-1.0))
        assert issues[0].severity == ValidationSeverity.ERROR

    def test_large_gimbal_warning(self):
        issues = validate_body(BodyParameters(max_gimbal_angle=np.radians(60.0)))
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.WARNING

    def test_drag_ratio_warning(self):
        issues = validate_body(BodyParameters(max_drag_thrust_ratio=2.0))
        assert issues[0].severity == ValidationSeverity.WARNING

    def test_zero_rate_limit_is_error(self):
        issues = validate_body(BodyParameters(angular_velocity_limit=0.0))
        assert issues[0].field == "angular_velocity_limit"


class TestEnvironmentValidation:
    """Test environment validation."""

    def test_default_environment_no_issues(self):
        assert validate_environment(EnvironmentConfig()) == []

    def test_vacuum_allowed(self):
        assert validate_environment(EnvironmentConfig(air_density=0.0)) == []

    def test_negative_density_is_error(self):
        issues = validate_environment(EnvironmentConfig(air_density=-1.0))
        assert issues[0].severity == ValidationSeverity.ERROR


class TestTimestepValidation:
    """Test tick length validation."""

    def test_normal_dt(self):
        assert validate_timestep(0.01, 5.0) == []

    def test_zero_dt_is_error(self):
        issues = validate_timestep(0.0, 5.0)
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.ERROR

    def test_coarse_dt_warning(self):
        issues = validate_timestep(0.1, 5.0)
        assert issues[0].severity == ValidationSeverity.WARNING

    def test_duration_shorter_than_tick(self):
        issues = validate_timestep(0.01, 0.001)
        assert issues[0].field == "duration"


class TestValidateAll:
    """Test combined validation."""

    def test_all_valid(self):
        result = validate_all(BodyParameters(), EnvironmentConfig(), 0.01, 1.0)
        assert result.is_valid
        assert str(result) == "All inputs valid"

    def test_errors_make_invalid(self):
        result = validate_all(BodyParameters(radius=-1.0), EnvironmentConfig(), 0.01, 1.0)
        assert not result.is_valid
        assert len(result.errors) == 1

    def test_warnings_keep_valid(self, caplog):
        result = validate_all(BodyParameters(), EnvironmentConfig(), 0.1, 1.0)
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "dt" in caplog.text


class TestValidationTypes:
    """Test validation result types."""

    def test_issue_str(self):
        issue = ValidationIssue(ValidationSeverity.ERROR, "mass", "Must be positive")
        assert str(issue) == "[error] mass: Must be positive"

    def test_result_str_lists_issues(self):
        result = ValidationResult(is_valid=False, issues=[
            ValidationIssue(ValidationSeverity.ERROR, "mass", "bad"),
            ValidationIssue(ValidationSeverity.WARNING, "dt", "coarse"),
        ])
        assert "[error] mass: bad" in str(result)
        assert "[warning] dt: coarse" in str(result)
