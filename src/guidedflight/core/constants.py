"""
Physical constants and numerical thresholds for the flight integrator.

Thresholds guard divisions and normalizations against degenerate
steady-state conditions (a body at rest, a centred gimbal, no rotation).
They are not tolerances for physical accuracy.
"""

from typing import Final

# Gravitational acceleration used by the game world (m/s²)
G0: Final[float] = 9.81

# ISA sea-level air density (kg/m³)
RHO_SEA_LEVEL: Final[float] = 1.225

# Dynamic viscosity of air at 15 °C (Pa·s)
MU_AIR: Final[float] = 1.81e-5

# Euler-equation sub-steps per physics tick
SUBSTEPS: Final[int] = 10

# Change in a control sample that restarts its latency timer
INPUT_EPSILON: Final[float] = 1e-4

# Relative airspeed below which drag and alignment forces vanish (m/s)
SPEED_EPSILON: Final[float] = 1e-3

# Gimbal command magnitude treated as centred
GIMBAL_EPSILON: Final[float] = 1e-6

# Incremental rotation angle below which orientation is left untouched (rad)
ANGLE_EPSILON: Final[float] = 1e-9

# Thrust magnitude below which the idle (reaction-jet) moment takes over (N)
THRUST_EPSILON: Final[float] = 1e-3

# Roll stick deflection treated as released
ROLL_INPUT_EPSILON: Final[float] = 1e-3

# Roll rate snapped to zero once it decays below this (rad/s)
ROLL_SNAP_THRESHOLD: Final[float] = 1e-3

# Tolerance for orthonormality checks on the orientation basis
ORTHONORMAL_TOLERANCE: Final[float] = 1e-9

# Slack on latency timer comparisons so accumulated clock rounding (s)
# does not hold a sample back an extra tick
TIME_EPSILON: Final[float] = 1e-9
