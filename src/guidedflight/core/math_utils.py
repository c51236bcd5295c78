"""
Rotation-Basis Mathematics for 6-DOF Rigid Body Integration.

The orientation of a projectile is stored directly as a 3x3 rotation
basis (body → world). Its columns are the body axes expressed in world
coordinates:

    column 0: body X (transverse, pitch axis)
    column 1: body Y (nose / symmetry axis, roll axis)
    column 2: body Z (transverse, yaw axis)

The world frame is Y-up. Integrating the basis with incremental
axis-angle rotations avoids the gimbal-lock singularity of Euler-angle
integration; drift from orthonormality is removed every tick with
Gram-Schmidt.

All kernels are Numba JIT-compiled. Matrix products are written out by
hand so that nopython mode does not need a BLAS backend.

References:
    - Diebel, J. "Representing Attitude: Euler Angles, Unit Quaternions, and Rotation Vectors"
    - Murray, Li & Sastry, "A Mathematical Introduction to Robotic Manipulation", Ch. 2
"""

import numpy as np
from numba import jit

# =============================================================================
# Vector Utilities
# =============================================================================

@jit(nopython=True, cache=True)
def cross_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3D cross product: a × b

    Args:
        a: First vector [x, y, z]
        b: Second vector [x, y, z]

    Returns:
        Cross product vector [x, y, z]
    """
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0]
    ])


@jit(nopython=True, cache=True)
def dot_product(a: np.ndarray, b: np.ndarray) -> float:
    """3D dot product: a · b"""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


@jit(nopython=True, cache=True)
def vector_norm(v: np.ndarray) -> float:
    """3D vector magnitude: ||v||"""
    return np.sqrt(v[0]*v[0] + v[1]*v[1] + v[2]*v[2])


@jit(nopython=True, cache=True)
def normalize_vector(v: np.ndarray) -> np.ndarray:
    """
    Normalize 3D vector to unit length.

    Degenerate (near-zero) input returns the zero vector rather than
    NaNs; callers treat that as "no direction".

    Args:
        v: Input vector [x, y, z]

    Returns:
        Unit vector, or [0, 0, 0] if ||v|| < 1e-12
    """
    norm = vector_norm(v)
    if norm < 1e-12:
        return np.array([0.0, 0.0, 0.0])
    return np.array([v[0] / norm, v[1] / norm, v[2] / norm])


# =============================================================================
# Matrix Utilities
# =============================================================================

@jit(nopython=True, cache=True)
def mat_vec(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    """3x3 matrix times 3-vector."""
    return np.array([
        m[0, 0] * v[0] + m[0, 1] * v[1] + m[0, 2] * v[2],
        m[1, 0] * v[0] + m[1, 1] * v[1] + m[1, 2] * v[2],
        m[2, 0] * v[0] + m[2, 1] * v[1] + m[2, 2] * v[2]
    ])


@jit(nopython=True, cache=True)
def mat_mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """3x3 matrix product a · b."""
    out = np.zeros((3, 3))
    for i in range(3):
        for j in range(3):
            out[i, j] = a[i, 0] * b[0, j] + a[i, 1] * b[1, j] + a[i, 2] * b[2, j]
    return out


@jit(nopython=True, cache=True)
def body_to_world(orientation: np.ndarray, v_body: np.ndarray) -> np.ndarray:
    """
    Transform a body-frame vector into the world frame.

    v_world = R · v_body
    """
    return mat_vec(orientation, v_body)


@jit(nopython=True, cache=True)
def world_to_body(orientation: np.ndarray, v_world: np.ndarray) -> np.ndarray:
    """
    Transform a world-frame vector into the body frame.

    v_body = Rᵀ · v_world  (R is orthonormal, so Rᵀ = R⁻¹)
    """
    return np.array([
        orientation[0, 0] * v_world[0] + orientation[1, 0] * v_world[1] + orientation[2, 0] * v_world[2],
        orientation[0, 1] * v_world[0] + orientation[1, 1] * v_world[1] + orientation[2, 1] * v_world[2],
        orientation[0, 2] * v_world[0] + orientation[1, 2] * v_world[1] + orientation[2, 2] * v_world[2]
    ])


@jit(nopython=True, cache=True)
def nose_direction(orientation: np.ndarray) -> np.ndarray:
    """
    Unit vector along the body nose axis, world frame.

    This is the second column of the orientation basis.
    """
    return np.array([orientation[0, 1], orientation[1, 1], orientation[2, 1]])


# =============================================================================
# Rotation Construction
# =============================================================================

@jit(nopython=True, cache=True)
def rotation_matrix_x(angle: float) -> np.ndarray:
    """Elementary rotation about the X axis (right-hand rule)."""
    c = np.cos(angle)
    s = np.sin(angle)
    R = np.zeros((3, 3))
    R[0, 0] = 1.0
    R[1, 1] = c
    R[1, 2] = -s
    R[2, 1] = s
    R[2, 2] = c
    return R


@jit(nopython=True, cache=True)
def rotation_matrix_y(angle: float) -> np.ndarray:
    """Elementary rotation about the Y axis (right-hand rule)."""
    c = np.cos(angle)
    s = np.sin(angle)
    R = np.zeros((3, 3))
    R[0, 0] = c
    R[0, 2] = s
    R[1, 1] = 1.0
    R[2, 0] = -s
    R[2, 2] = c
    return R


@jit(nopython=True, cache=True)
def rotation_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotation matrix from axis-angle (Rodrigues' formula).

        R = I + sin(θ)·K + (1 - cos(θ))·K²

    where K is the skew-symmetric cross-product matrix of the unit axis.

    Args:
        axis: Rotation axis [x, y, z] (normalized internally)
        angle: Rotation angle in radians (right-hand rule)

    Returns:
        3x3 rotation matrix; identity if the axis is degenerate
    """
    axis_norm = vector_norm(axis)
    if axis_norm < 1e-12:
        return np.eye(3)

    x = axis[0] / axis_norm
    y = axis[1] / axis_norm
    z = axis[2] / axis_norm

    c = np.cos(angle)
    s = np.sin(angle)
    t = 1.0 - c

    R = np.zeros((3, 3))
    R[0, 0] = c + x * x * t
    R[0, 1] = x * y * t - z * s
    R[0, 2] = x * z * t + y * s

    R[1, 0] = y * x * t + z * s
    R[1, 1] = c + y * y * t
    R[1, 2] = y * z * t - x * s

    R[2, 0] = z * x * t - y * s
    R[2, 1] = z * y * t + x * s
    R[2, 2] = c + z * z * t

    return R


@jit(nopython=True, cache=True)
def rotation_from_euler(pitch: float, yaw: float, roll: float) -> np.ndarray:
    """
    Build an orientation basis from orientation angles.

        R = Ry(yaw) · Rx(pitch) · Ry(roll)

    With the nose along body +Y:
        - roll spins the body about its own nose axis
        - pitch tilts the nose away from world +Y toward +Z
        - yaw turns the tilted body about world +Y

    Only used for initialization and debug display. The per-tick path
    never goes through angles.

    Args:
        pitch: Nose tilt from vertical (rad)
        yaw: Heading about world Y (rad)
        roll: Spin about the nose axis (rad)

    Returns:
        3x3 rotation basis (body → world)
    """
    return mat_mul(rotation_matrix_y(yaw), mat_mul(rotation_matrix_x(pitch), rotation_matrix_y(roll)))


def launch_orientation(elevation_deg: float, azimuth_deg: float = 0.0) -> np.ndarray:
    """
    Orientation for a launch at the given elevation and heading.

    Args:
        elevation_deg: Nose elevation above the horizon (90 = vertical)
        azimuth_deg: Heading measured from world +Z toward +X

    Returns:
        3x3 rotation basis (body → world)
    """
    pitch = np.radians(90.0 - elevation_deg)
    yaw = np.radians(azimuth_deg)
    return rotation_from_euler(pitch, yaw, 0.0)


# =============================================================================
# Re-orthonormalization
# =============================================================================

@jit(nopython=True, cache=True)
def orthonormalize(orientation: np.ndarray) -> np.ndarray:
    """
    Gram-Schmidt re-orthonormalization of a rotation basis.

    The nose column (body Y) is kept fixed and only normalized; body X is
    made orthogonal to it and body Z is rebuilt as X × Y, so the result is
    always right-handed.

    Args:
        orientation: Nearly orthonormal 3x3 basis

    Returns:
        Orthonormal 3x3 basis
    """
    y_axis = normalize_vector(np.array([orientation[0, 1], orientation[1, 1], orientation[2, 1]]))
    x_raw = np.array([orientation[0, 0], orientation[1, 0], orientation[2, 0]])

    proj = dot_product(x_raw, y_axis)
    x_axis = normalize_vector(np.array([
        x_raw[0] - proj * y_axis[0],
        x_raw[1] - proj * y_axis[1],
        x_raw[2] - proj * y_axis[2]
    ]))

    if vector_norm(x_axis) < 0.5:
        # X collapsed onto the nose; rebuild it from the old Z column
        z_raw = np.array([orientation[0, 2], orientation[1, 2], orientation[2, 2]])
        x_axis = normalize_vector(cross_product(y_axis, z_raw))

    z_axis = cross_product(x_axis, y_axis)

    R = np.zeros((3, 3))
    for i in range(3):
        R[i, 0] = x_axis[i]
        R[i, 1] = y_axis[i]
        R[i, 2] = z_axis[i]
    return R


@jit(nopython=True, cache=True)
def orthonormality_error(orientation: np.ndarray) -> float:
    """
    Largest deviation of RᵀR from the identity.

    Zero for a perfect rotation basis.
    """
    worst = 0.0
    for i in range(3):
        for j in range(3):
            d = (orientation[0, i] * orientation[0, j] +
                 orientation[1, i] * orientation[1, j] +
                 orientation[2, i] * orientation[2, j])
            if i == j:
                d -= 1.0
            if abs(d) > worst:
                worst = abs(d)
    return worst


def is_orthonormal(orientation: np.ndarray, tol: float = 1e-9) -> bool:
    """True if the basis columns are unit length and mutually orthogonal."""
    return orthonormality_error(np.asarray(orientation, dtype=np.float64)) <= tol
