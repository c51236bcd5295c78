"""
Environmental Physics Module.

Supplies the integrator with gravity, air properties and a wind field
sampled by world position. The world frame is Y-up; wind fields are
horizontal (X/Z) unless a caller supplies its own callable.

References:
- OpenRocket Technical Documentation (wind power law)
- Mandell, Caporaso, Bengen "Topics in Advanced Model Rocketry"
"""

from collections.abc import Callable
from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

from guidedflight.core.constants import G0, MU_AIR, RHO_SEA_LEVEL
from guidedflight.core.types import FlightConfigurationError

WindField = Callable[[np.ndarray], np.ndarray]


# =============================================================================
# Wind Fields
# =============================================================================

def calm_wind(position: np.ndarray) -> np.ndarray:
    """No wind anywhere."""
    return np.zeros(3)


def uniform_wind(velocity) -> WindField:
    """Wind field with the same velocity everywhere."""
    v = np.asarray(velocity, dtype=np.float64).reshape(3).copy()

    def _wind(position: np.ndarray) -> np.ndarray:
        return v.copy()

    return _wind


@dataclass
class PowerLawWind:
    """
    Wind model with altitude-dependent speed.

    Uses power law profile: V(h) = V_ref × (h/h_ref)^α
    Altitude is the world Y coordinate.
    """
    speed_ground: float = 0.0  # m/s at reference height
    direction: float = 0.0  # degrees, direction the wind blows FROM (0 = from +Z)
    reference_height: float = 10.0  # m (standard measurement height)
    power_exponent: float = 0.143  # Typical for open terrain

    def get_wind_speed(self, altitude: float) -> float:
        """
        Get wind speed at altitude using power law.

        V(z) = V_ref × (z / z_ref)^α
        """
        if altitude <= 0:
            return 0.0
        if altitude < self.reference_height:
            # Linear interpolation near ground
            return self.speed_ground * (altitude / self.reference_height)

        return self.speed_ground * (altitude / self.reference_height) ** self.power_exponent

    def __call__(self, position: np.ndarray) -> np.ndarray:
        speed = self.get_wind_speed(float(position[1]))
        direction_rad = np.radians(self.direction)

        # Wind direction is where it comes FROM, velocity points away from it
        return np.array([
            -speed * np.sin(direction_rad),
            0.0,
            -speed * np.cos(direction_rad)
        ])


@dataclass
class GustingWind:
    """
    Deterministic sinusoidal gust on top of a base wind field.

    The gust clock is advanced by the host loop via ``advance`` and
    rewound by ``FlightIntegrator.reset``; sampling itself has no side
    effects.
    """
    base: WindField = calm_wind
    amplitude: float = 0.0  # m/s
    frequency: float = 0.5  # Hz
    axis: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    time: float = 0.0  # s

    def advance(self, dt: float) -> None:
        self.time += dt

    def reset(self) -> None:
        self.time = 0.0

    def __call__(self, position: np.ndarray) -> np.ndarray:
        gust = self.amplitude * np.sin(2.0 * np.pi * self.frequency * self.time)
        return np.asarray(self.base(position), dtype=np.float64) + gust * self.axis


# =============================================================================
# Environment
# =============================================================================

@dataclass
class Environment:
    """
    Gravity, air properties and wind field seen by one projectile.

    Stateless apart from whatever the wind callable carries.
    """
    gravity: float = G0  # m/s²
    air_density: float = RHO_SEA_LEVEL  # kg/m³
    air_viscosity: float = MU_AIR  # Pa·s
    wind: WindField = calm_wind

    def sample_wind(self, position: np.ndarray) -> np.ndarray:
        """Wind velocity at a world position, always a float (3,) array."""
        return np.asarray(self.wind(position), dtype=np.float64).reshape(3)


@dataclass
class EnvironmentConfig:
    """Deserialized environment settings of a scenario."""
    gravity: float = G0  # m/s²
    air_density: float = RHO_SEA_LEVEL  # kg/m³
    air_viscosity: float = MU_AIR  # Pa·s
    wind_speed: float = 0.0  # m/s at reference height
    wind_direction: float = 0.0  # degrees FROM
    wind_power_exponent: float = 0.143
    gust_amplitude: float = 0.0  # m/s
    gust_frequency: float = 0.5  # Hz

    def build(self) -> Environment:
        """Create the runtime Environment, including its wind field."""
        if self.wind_speed > 0:
            wind: WindField = PowerLawWind(
                speed_ground=self.wind_speed,
                direction=self.wind_direction,
                power_exponent=self.wind_power_exponent
            )
        else:
            wind = calm_wind

        if self.gust_amplitude > 0:
            wind = GustingWind(base=wind, amplitude=self.gust_amplitude,
                               frequency=self.gust_frequency)

        return Environment(
            gravity=self.gravity,
            air_density=self.air_density,
            air_viscosity=self.air_viscosity,
            wind=wind
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnvironmentConfig":
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise FlightConfigurationError(f"Unknown environment parameters: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def create_standard_environment(
    wind_speed: float = 0.0,
    wind_direction: float = 0.0
) -> Environment:
    """Sea-level environment with an optional power-law wind."""
    return EnvironmentConfig(wind_speed=wind_speed, wind_direction=wind_direction).build()
