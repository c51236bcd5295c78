"""
Unit tests for the environment and wind fields.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from guidedflight.core.environment import (
    Environment,
    EnvironmentConfig,
    GustingWind,
    PowerLawWind,
    calm_wind,
    create_standard_environment,
    uniform_wind,
)
from guidedflight.core.types import FlightConfigurationError


class TestWindFields:
    """Test wind field callables."""

    def test_calm_wind(self):
        assert_allclose(calm_wind(np.array([1.0, 100.0, 3.0])), np.zeros(3))

    def test_uniform_wind(self):
        wind = uniform_wind([3.0, 0.0, -1.0])
        assert_allclose(wind(np.zeros(3)), [3.0, 0.0, -1.0])
        assert_allclose(wind(np.array([0.0, 500.0, 0.0])), [3.0, 0.0, -1.0])

    def test_uniform_wind_returns_copies(self):
        wind = uniform_wind([3.0, 0.0, 0.0])
        sample = wind(np.zeros(3))
        sample[0] = 99.0
        assert wind(np.zeros(3))[0] == pytest.approx(3.0)

    def test_power_law_ground_is_calm(self):
        wind = PowerLawWind(speed_ground=10.0)
        assert wind.get_wind_speed(0.0) == 0.0

    def test_power_law_reference_height(self):
        wind = PowerLawWind(speed_ground=10.0, reference_height=10.0)
        assert wind.get_wind_speed(10.0) == pytest.approx(10.0)

    def test_power_law_increases_with_altitude(self):
        wind = PowerLawWind(speed_ground=10.0)
        assert wind.get_wind_speed(100.0) > wind.get_wind_speed(20.0) > 10.0

    def test_power_law_direction(self):
        """Wind from +X blows toward -X."""
        wind = PowerLawWind(speed_ground=5.0, direction=90.0)
        v = wind(np.array([0.0, 10.0, 0.0]))
        assert_allclose(v, [-5.0, 0.0, 0.0], atol=1e-12)

    def test_gust_advances_with_clock(self):
        gust = GustingWind(amplitude=2.0, frequency=0.25)
        assert_allclose(gust(np.zeros(3)), np.zeros(3), atol=1e-12)

        gust.advance(1.0)
        assert_allclose(gust(np.zeros(3)), [2.0, 0.0, 0.0], atol=1e-12)

    def test_gust_adds_to_base(self):
        gust = GustingWind(base=uniform_wind([0.0, 0.0, 4.0]), amplitude=1.0, frequency=0.25)
        gust.advance(1.0)
        assert_allclose(gust(np.zeros(3)), [1.0, 0.0, 4.0], atol=1e-12)


class TestEnvironment:
    """Test Environment and its configuration."""

    def test_sample_wind_is_float_array(self):
        env = Environment(wind=lambda p: [1, 2, 3])
        v = env.sample_wind(np.zeros(3))
        assert v.dtype == np.float64
        assert v.shape == (3,)

    def test_standard_environment(self):
        env = create_standard_environment()
        assert env.gravity == pytest.approx(9.81)
        assert env.air_density == pytest.approx(1.225)
        assert_allclose(env.sample_wind(np.array([0.0, 50.0, 0.0])), np.zeros(3))

    def test_config_builds_power_law(self):
        env = EnvironmentConfig(wind_speed=6.0).build()
        assert isinstance(env.wind, PowerLawWind)

    def test_config_builds_gusts(self):
        env = EnvironmentConfig(wind_speed=6.0, gust_amplitude=1.0).build()
        assert isinstance(env.wind, GustingWind)
        assert isinstance(env.wind.base, PowerLawWind)

    def test_config_round_trip(self):
        cfg = EnvironmentConfig(air_density=0.9, wind_speed=3.0)
        assert EnvironmentConfig.from_dict(cfg.to_dict()) == cfg

    def test_config_unknown_key_raises(self):
        with pytest.raises(FlightConfigurationError):
            EnvironmentConfig.from_dict({"temperature": 288.0})
