"""SO(3) and so(3) Lie group operations in JAX.

Rotation matrices, axis-angle vectors and the helpers the IK filter needs to
turn a relative rotation into the angular half of a twist. All functions are
pure, JIT-able, and operate on JAX arrays.
"""

from typing import Tuple

import jax
import jax.numpy as jnp

Array = jax.Array


def exp(log_r: Array) -> Array:
    """
    SO(3) exponential map: convert axis-angle vector to rotation matrix.

    Implements Rodrigues' formula on the unnormalized cross-product matrix,
    R = I + sin(θ)/θ * K + (1 - cos(θ))/θ² * K², switching to Taylor
    coefficients near zero so the map stays differentiable at the identity.

    Args:
        log_r: (..., 3) array of axis-angle vectors

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    angle_sq = jnp.sum(log_r * log_r, axis=-1, keepdims=True)
    small_angle = angle_sq < 1e-12

    safe_angle_sq = jnp.where(small_angle, 1.0, angle_sq)
    angle = jnp.sqrt(safe_angle_sq)

    a = jnp.where(small_angle, 1.0 - angle_sq / 6.0, jnp.sin(angle) / angle)
    b = jnp.where(small_angle, 0.5 - angle_sq / 24.0, (1.0 - jnp.cos(angle)) / safe_angle_sq)

    K = skew_symmetric(log_r)

    I = jnp.eye(3, dtype=log_r.dtype)
    I = jnp.broadcast_to(I, log_r.shape[:-1] + (3, 3))

    return I + a[..., None] * K + b[..., None] * jnp.matmul(K, K)


def log(R: Array) -> Array:
    """
    SO(3) logarithm map: convert rotation matrix to axis-angle vector.

    The returned rotation angle lies in [0, π].

    Args:
        R: (..., 3, 3) array of rotation matrices

    Returns:
        (..., 3) array of axis-angle vectors
    """
    trace = jnp.trace(R, axis1=-2, axis2=-1)

    cos_angle = (trace - 1.0) / 2.0
    cos_angle = jnp.clip(cos_angle, -1.0, 1.0)
    angle = jnp.arccos(cos_angle)

    small_angle = angle < 1e-8
    near_pi = jnp.abs(angle - jnp.pi) < 1e-6

    sin_angle = jnp.where(small_angle | near_pi, 1.0, jnp.sin(angle))

    # axis = [R21 - R12, R02 - R20, R10 - R01] / (2 sin θ)
    skew_part = vee(R - jnp.swapaxes(R, -1, -2))

    axis_small = skew_part / 2.0
    axis_general = skew_part / (2.0 * sin_angle[..., None])

    # Near π the skew part vanishes; take the dominant column of (R + I) / 2
    B = (R + jnp.eye(3, dtype=R.dtype)) / 2.0
    diag_vals = jnp.diagonal(B, axis1=-2, axis2=-1)
    max_idx = jnp.argmax(diag_vals, axis=-1)
    axis_pi = jnp.take_along_axis(B, max_idx[..., None, None], axis=-1)[..., 0]
    axis_pi = axis_pi / jnp.linalg.norm(axis_pi, axis=-1, keepdims=True)

    return jnp.where(
        small_angle[..., None],
        axis_small,
        jnp.where(near_pi[..., None], angle[..., None] * axis_pi, angle[..., None] * axis_general),
    )


def to_axis_angle(R: Array) -> Tuple[Array, Array]:
    """
    Decompose a rotation matrix into a unit axis and an angle.

    For the identity rotation the axis is arbitrary; the x-axis is returned.

    Args:
        R: (3, 3) rotation matrix

    Returns:
        Tuple of (3,) unit axis and scalar angle in [0, π]
    """
    log_r = log(R)
    angle = jnp.linalg.norm(log_r)
    nonzero = angle > 1e-12
    axis = jnp.where(
        nonzero,
        log_r / jnp.where(nonzero, angle, 1.0),
        jnp.array([1.0, 0.0, 0.0], dtype=log_r.dtype),
    )
    return axis, angle


def normalize_angle(angle: Array) -> Array:
    """
    Bring an angle into [-π, π].

    Applies ±2π corrections until the angle is in range, so inputs many turns
    away from the interval are handled as well as near ones. Non-finite inputs
    are returned unchanged.
    """
    angle = jnp.asarray(angle, dtype=float)

    def out_of_range(a):
        return jnp.isfinite(a) & ((a > jnp.pi) | (a < -jnp.pi))

    def correct(a):
        a = jnp.where(a > jnp.pi, a - 2 * jnp.pi, a)
        return jnp.where(a < -jnp.pi, a + 2 * jnp.pi, a)

    return jax.lax.while_loop(out_of_range, correct, angle)


def inverse(R: Array) -> Array:
    """
    Compute inverse of rotation matrix.

    For rotation matrices, the inverse is simply the transpose.

    Args:
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 3, 3) inverse rotation matrix
    """
    return jnp.swapaxes(R, -1, -2)


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric matrix.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def vee(K: Array) -> Array:
    """Inverse of skew_symmetric: (..., 3, 3) -> (..., 3)."""
    return jnp.stack([K[..., 2, 1], K[..., 0, 2], K[..., 1, 0]], axis=-1)


def from_quaternion(quaternions: Array) -> Array:
    """
    Convert quaternions to rotation matrices.

    Args:
        quaternions: (..., 4) array of quaternions in (w, x, y, z) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    quaternions = quaternions / jnp.linalg.norm(quaternions, axis=-1, keepdims=True)

    w, x, y, z = jnp.moveaxis(quaternions, -1, 0)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    matrix = jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)], axis=-1),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)], axis=-1),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)], axis=-1)
    ], axis=-2)

    return matrix
