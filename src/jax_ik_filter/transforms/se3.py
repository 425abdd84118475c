"""SE(3) and se(3) Lie group operations in JAX.

This module implements SE(3) rigid body transforms using homogeneous matrices
and 6D twist vectors. A pose is a 4x4 homogeneous matrix throughout the
package. All functions are pure, JIT-able, and operate on JAX arrays.
"""


import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (..., 3) position vector
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 4, 4) homogeneous transformation matrix
    """
    p = jnp.asarray(p)
    R = jnp.asarray(R)
    batch_shape = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    p = jnp.broadcast_to(p, batch_shape + (3,))
    R = jnp.broadcast_to(R, batch_shape + (3, 3))

    T = jnp.zeros(batch_shape + (4, 4), dtype=jnp.result_type(p.dtype, R.dtype))
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    T = T.at[..., 3, 3].set(1.0)

    return T


def exp(twist: Array) -> Array:
    """
    SE(3) exponential map: convert twist to transformation matrix.

    Uses Taylor series approximations for small angles to avoid division by zero.

    Args:
        twist: (..., 6) array of twists [vx, vy, vz, wx, wy, wz].

    Returns:
        (..., 4, 4) array of transformation matrices.
    """
    v, w = twist[..., :3], twist[..., 3:]

    R = so3.exp(w)

    # Work from theta^2 so the map stays differentiable at zero rotation
    angle_sq = jnp.sum(w * w, axis=-1, keepdims=True)
    is_small_angle = angle_sq < 1e-12
    safe_angle_sq = jnp.where(is_small_angle, 1.0, angle_sq)
    angle = jnp.sqrt(safe_angle_sq)

    # A = (1 - cos(theta)) / theta^2, B = (theta - sin(theta)) / theta^3
    A = jnp.where(is_small_angle, 0.5 - angle_sq / 24.0, (1.0 - jnp.cos(angle)) / safe_angle_sq)
    B = jnp.where(is_small_angle, 1.0 / 6.0 - angle_sq / 120.0, (angle - jnp.sin(angle)) / (safe_angle_sq * angle))

    K = so3.skew_symmetric(w)
    K_sq = jnp.matmul(K, K)

    I = jnp.eye(3, dtype=twist.dtype)
    I = jnp.broadcast_to(I, K.shape)

    # V = I + A*K + B*K^2
    V = I + A[..., None] * K + B[..., None] * K_sq

    t = jnp.einsum("...ij,...j->...i", V, v)

    return from_position_and_rotation(t, R)


def get_position(T: Array) -> Array:
    """Extract the (..., 3) position from a (..., 4, 4) transform."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """Extract the (..., 3, 3) rotation from a (..., 4, 4) transform."""
    return T[..., :3, :3]
