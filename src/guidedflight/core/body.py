"""
Projectile Body Parameters.

Describes a guided projectile as a solid cylinder with a conical nose
(cylinder + cone), together with its propulsion, actuator and
aerodynamic constants.

Body frame:
    Y: nose / symmetry axis (roll)
    X, Z: transverse axes (pitch, yaw)
    Origin: centre of the tail plane, where the nozzle sits

The inertia tensor is derived once from geometry and mass. The body is
axisymmetric, so I_pitch = I_yaw.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np
from numba import jit

from guidedflight.core.types import FlightConfigurationError

_logger = logging.getLogger(__name__)


# =============================================================================
# Inertia Kernels (cylinder + cone)
# =============================================================================

@jit(nopython=True, cache=True)
def calculate_com_offset(cylinder_height: float, cone_height: float) -> float:
    """
    Center-of-mass offset along the body axis, measured from the tail.

        x_cm = (6H² + 4Hh + 3h²) / (12H + 4h)

    This places the cone's centroid three quarters of its height above the
    cylinder top; the parallel-axis terms in
    ``calculate_inertia_principal`` use the same centroid so both stay
    consistent.

    Args:
        cylinder_height: Cylinder height H (m)
        cone_height: Cone height h (m)

    Returns:
        Offset from the tail plane (m)
    """
    H = cylinder_height
    h = cone_height
    return (6.0 * H * H + 4.0 * H * h + 3.0 * h * h) / (12.0 * H + 4.0 * h)


@jit(nopython=True, cache=True)
def calculate_inertia_principal(
    mass: float,
    radius: float,
    cylinder_height: float,
    cone_height: float
) -> np.ndarray:
    """
    Principal moments of inertia of a cylinder + cone body.

    The mass is split between the two parts in proportion to volume:
        V_cyl = πR²H,  V_cone = πR²h/3

    Roll (symmetry axis):
        I_roll = ½ m_cyl R² + 0.3 m_cone R²

    Pitch / yaw (parallel-axis theorem about the combined COM):
        I_t = m_cyl (3R² + H²)/12 + m_cyl d_cyl²
            + m_cone (3R²/20 + 3h²/80) + m_cone d_cone²

    Args:
        mass: Total mass (kg)
        radius: Body radius R (m)
        cylinder_height: Cylinder height H (m)
        cone_height: Cone height h (m)

    Returns:
        Array [I_pitch, I_roll, I_yaw] in kg·m², aligned with body X, Y, Z
    """
    R = radius
    H = cylinder_height
    h = cone_height

    v_cyl = np.pi * R * R * H
    v_cone = np.pi * R * R * h / 3.0
    v_total = v_cyl + v_cone

    m_cyl = mass * v_cyl / v_total
    m_cone = mass * v_cone / v_total

    I_roll = 0.5 * m_cyl * R * R + 0.3 * m_cone * R * R

    com = calculate_com_offset(H, h)
    d_cyl = 0.5 * H - com
    d_cone = H + 0.75 * h - com

    I_cyl_t = m_cyl * (3.0 * R * R + H * H) / 12.0 + m_cyl * d_cyl * d_cyl
    I_cone_t = m_cone * (0.15 * R * R + 0.0375 * h * h) + m_cone * d_cone * d_cone
    I_t = I_cyl_t + I_cone_t

    return np.array([I_t, I_roll, I_t])


# =============================================================================
# Body Parameters
# =============================================================================

@dataclass
class BodyParameters:
    """
    Immutable-per-scenario description of a projectile.

    Attributes:
        radius: Body radius (m)
        cylinder_height: Cylindrical section height (m)
        cone_height: Nose cone height (m)
        mass: Total mass (kg)
        max_thrust: Thrust at full throttle (N)
        max_gimbal_angle: Largest thrust deflection from the nose axis (rad)
        thrust_latency: Throttle actuator delay (s)
        gimbal_latency: Gimbal actuator delay (s)
        form_drag_coefficient: Base (pressure) drag coefficient
        viscous_drag_factor: Multiplier on the 1/Re viscous correction
        alignment_coefficient: Side-slip (weather-vaning) force coefficient
        angular_velocity_limit: Per-axis clamp on body rates (rad/s)
        rotational_damping: Quadratic rate damping coefficient (N·m·s²)
        idle_thrust_fraction: Reaction-jet authority as fraction of max thrust
        max_drag_thrust_ratio: Drag magnitude cap as fraction of max thrust
    """

    radius: float = 0.05                    # m
    cylinder_height: float = 0.3            # m
    cone_height: float = 0.2                # m
    mass: float = 2.0                       # kg
    max_thrust: float = 500.0               # N
    max_gimbal_angle: float = 0.17453292519943295  # rad (10°)
    thrust_latency: float = 0.1             # s
    gimbal_latency: float = 0.05            # s
    form_drag_coefficient: float = 0.3      # -
    viscous_drag_factor: float = 24.0       # -
    alignment_coefficient: float = 0.5      # -
    angular_velocity_limit: float = 10.0    # rad/s
    rotational_damping: float = 0.002       # N·m·s²
    idle_thrust_fraction: float = 0.02      # -
    max_drag_thrust_ratio: float = 1.0      # -

    # Derived by derive_inertia()
    inertia_pitch: float = field(default=0.0, init=False)    # kg·m²
    inertia_roll: float = field(default=0.0, init=False)     # kg·m²
    inertia_yaw: float = field(default=0.0, init=False)      # kg·m²
    com_offset: float = field(default=0.0, init=False)       # m from tail
    _derived: bool = field(default=False, init=False, repr=False)

    @property
    def volume(self) -> float:
        """Displaced volume of cylinder + cone (m³)."""
        r2 = self.radius * self.radius
        return np.pi * r2 * self.cylinder_height + np.pi * r2 * self.cone_height / 3.0

    @property
    def frontal_area(self) -> float:
        """Circular cross-section seen head-on (m²)."""
        return np.pi * self.radius * self.radius

    @property
    def side_area(self) -> float:
        """Side profile seen broadside, R·(2H + h) (m²)."""
        return self.radius * (2.0 * self.cylinder_height + self.cone_height)

    @property
    def total_length(self) -> float:
        return self.cylinder_height + self.cone_height

    @property
    def is_derived(self) -> bool:
        return self._derived

    @property
    def inertia_vector(self) -> np.ndarray:
        """Principal moments [I_pitch, I_roll, I_yaw] along body X, Y, Z."""
        return np.array([self.inertia_pitch, self.inertia_roll, self.inertia_yaw])

    def derive_inertia(self) -> None:
        """
        Derive the inertia tensor and COM offset from geometry and mass.

        Idempotent: only the first call computes anything.

        Raises:
            FlightConfigurationError: If the geometry is unusable or any
                derived inertia component is not strictly positive.
        """
        if self._derived:
            return

        if self.mass <= 0 or self.radius <= 0:
            raise FlightConfigurationError(
                f"Invalid body: mass={self.mass} kg, radius={self.radius} m"
            )
        if self.cylinder_height < 0 or self.cone_height < 0:
            raise FlightConfigurationError(
                f"Negative body height: H={self.cylinder_height} m, h={self.cone_height} m"
            )
        if self.cylinder_height + self.cone_height <= 0:
            raise FlightConfigurationError("Body has zero length")

        inertia = calculate_inertia_principal(
            float(self.mass), float(self.radius),
            float(self.cylinder_height), float(self.cone_height)
        )
        if not np.all(np.isfinite(inertia)) or np.any(inertia <= 0.0):
            raise FlightConfigurationError(f"Non-positive inertia derived: {inertia}")

        self.inertia_pitch = float(inertia[0])
        self.inertia_roll = float(inertia[1])
        self.inertia_yaw = float(inertia[2])
        self.com_offset = float(calculate_com_offset(
            float(self.cylinder_height), float(self.cone_height)
        ))
        self._derived = True

        _logger.debug(
            "Derived inertia: pitch=yaw=%.6g kg·m², roll=%.6g kg·m², com=%.4f m",
            self.inertia_pitch, self.inertia_roll, self.com_offset
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BodyParameters":
        """
        Build from a deserialized configuration mapping.

        Raises:
            FlightConfigurationError: On keys that are not body parameters.
        """
        allowed = {f.name for f in fields(cls) if f.init}
        unknown = set(data) - allowed
        if unknown:
            raise FlightConfigurationError(f"Unknown body parameters: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}
