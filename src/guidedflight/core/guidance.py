"""
Guidance input channel.

Holds the latest normalized control vector published by the external
input-mapping layer (last value wins) and the smoothed roll-rate state.

Roll is deliberately decoupled from the rigid-body equations: the
integrator overwrites the body roll rate with ``roll_rate`` every tick,
so roll response is tuned here rather than derived from moments.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

from guidedflight.core.constants import ROLL_INPUT_EPSILON, ROLL_SNAP_THRESHOLD
from guidedflight.core.types import FlightConfigurationError


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


@dataclass
class GuidanceTuning:
    """Roll-channel feel."""
    roll_max_speed: float = 3.0      # rad/s at full stick
    roll_acceleration: float = 6.0   # rad/s²
    roll_damping: float = 4.0        # 1/s, exponential decay on release

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GuidanceTuning":
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise FlightConfigurationError(f"Unknown guidance parameters: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class GuidanceInput:
    """
    Current control sample plus roll-channel state.

    Attributes:
        throttle: Throttle command [0, 1]
        gimbal_x: Gimbal deflection command along body X [-1, 1]
        gimbal_y: Gimbal deflection command along body Z [-1, 1]
        roll_input: Roll stick [-1, 1]
        roll_rate: Smoothed roll angular velocity (rad/s)
    """
    tuning: GuidanceTuning = field(default_factory=GuidanceTuning)
    throttle: float = 0.0
    gimbal_x: float = 0.0
    gimbal_y: float = 0.0
    roll_input: float = 0.0
    roll_rate: float = 0.0

    def set_control(
        self,
        throttle: float,
        gimbal_x: float,
        gimbal_y: float,
        roll: float = 0.0
    ) -> None:
        """
        Publish a new control sample.

        Out-of-range values are clamped, never rejected: throttle to
        [0, 1], gimbal components and roll to [-1, 1].
        """
        self.throttle = _clamp(throttle, 0.0, 1.0)
        self.gimbal_x = _clamp(gimbal_x, -1.0, 1.0)
        self.gimbal_y = _clamp(gimbal_y, -1.0, 1.0)
        self.roll_input = _clamp(roll, -1.0, 1.0)

    @property
    def gimbal(self) -> np.ndarray:
        return np.array([self.gimbal_x, self.gimbal_y])

    def update_roll(self, dt: float) -> float:
        """
        Advance the roll channel by one tick.

        With the stick deflected the rate accelerates toward
        ``roll_input × roll_max_speed`` at ``roll_acceleration`` without
        overshooting. Released, it decays as ω·e^(-damping·dt) and snaps
        to zero below a small threshold.

        Returns:
            New roll rate (rad/s)
        """
        t = self.tuning
        if abs(self.roll_input) > ROLL_INPUT_EPSILON:
            target = self.roll_input * t.roll_max_speed
            delta = target - self.roll_rate
            max_step = t.roll_acceleration * dt
            if abs(delta) <= max_step:
                self.roll_rate = target
            else:
                self.roll_rate += math.copysign(max_step, delta)
        else:
            self.roll_rate *= math.exp(-t.roll_damping * dt)
            if abs(self.roll_rate) < ROLL_SNAP_THRESHOLD:
                self.roll_rate = 0.0
        return self.roll_rate

    def reset(self) -> None:
        self.throttle = 0.0
        self.gimbal_x = 0.0
        self.gimbal_y = 0.0
        self.roll_input = 0.0
        self.roll_rate = 0.0
