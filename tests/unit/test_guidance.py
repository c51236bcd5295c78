"""
Unit tests for the guidance input channel and roll dynamics.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from guidedflight.core.guidance import GuidanceInput, GuidanceTuning
from guidedflight.core.types import FlightConfigurationError


class TestControlSample:
    """Test control sample publication."""

    def test_values_stored(self):
        g = GuidanceInput()
        g.set_control(0.5, 0.2, -0.3, 0.1)

        assert g.throttle == pytest.approx(0.5)
        assert_allclose(g.gimbal, [0.2, -0.3])
        assert g.roll_input == pytest.approx(0.1)

    def test_out_of_range_values_clamped(self):
        """Out-of-range samples are clamped, not rejected."""
        g = GuidanceInput()
        g.set_control(1.5, -2.0, 3.0, -7.0)

        assert g.throttle == 1.0
        assert g.gimbal_x == -1.0
        assert g.gimbal_y == 1.0
        assert g.roll_input == -1.0

    def test_negative_throttle_clamped(self):
        g = GuidanceInput()
        g.set_control(-0.4, 0.0, 0.0)
        assert g.throttle == 0.0

    def test_last_value_wins(self):
        g = GuidanceInput()
        g.set_control(0.2, 0.0, 0.0)
        g.set_control(0.9, 0.0, 0.0)
        assert g.throttle == pytest.approx(0.9)


class TestRollChannel:
    """Test smoothed roll rate."""

    def test_accelerates_toward_target(self):
        g = GuidanceInput(tuning=GuidanceTuning(roll_max_speed=3.0, roll_acceleration=6.0))
        g.set_control(0.0, 0.0, 0.0, 1.0)

        assert g.update_roll(0.1) == pytest.approx(0.6)
        assert g.update_roll(0.1) == pytest.approx(1.2)

    def test_no_overshoot(self):
        g = GuidanceInput(tuning=GuidanceTuning(roll_max_speed=3.0, roll_acceleration=6.0))
        g.set_control(0.0, 0.0, 0.0, 1.0)

        for _ in range(100):
            rate = g.update_roll(0.01)
            assert rate <= 3.0
        assert rate == pytest.approx(3.0)

    def test_negative_roll(self):
        g = GuidanceInput()
        g.set_control(0.0, 0.0, 0.0, -0.5)
        for _ in range(200):
            g.update_roll(0.01)
        assert g.roll_rate == pytest.approx(-0.5 * g.tuning.roll_max_speed)

    def test_release_decays_exponentially(self):
        g = GuidanceInput(tuning=GuidanceTuning(roll_damping=4.0))
        g.roll_rate = 1.0

        assert g.update_roll(0.1) == pytest.approx(np.exp(-0.4))

    def test_release_snaps_to_zero(self):
        g = GuidanceInput()
        g.roll_rate = 2.0
        for _ in range(1000):
            g.update_roll(0.01)
        assert g.roll_rate == 0.0

    def test_reset(self):
        g = GuidanceInput()
        g.set_control(1.0, 1.0, 1.0, 1.0)
        g.update_roll(0.1)
        g.reset()

        assert g.throttle == 0.0
        assert g.roll_rate == 0.0
        assert_allclose(g.gimbal, [0.0, 0.0])


class TestGuidanceTuning:
    """Test tuning serialization."""

    def test_round_trip(self):
        t = GuidanceTuning(roll_max_speed=5.0)
        assert GuidanceTuning.from_dict(t.to_dict()) == t

    def test_unknown_key_raises(self):
        with pytest.raises(FlightConfigurationError):
            GuidanceTuning.from_dict({"pitch_gain": 1.0})
