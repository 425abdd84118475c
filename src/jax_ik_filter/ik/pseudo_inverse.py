"""Jacobian reduction and pseudo-inverses for the differential IK step.

The damped pseudo-inverse inverts singular values above ``EPSILON`` exactly
and replaces the reciprocal of smaller ones with ``s / (s² + LAMBDA²)``. This
keeps joint steps bounded near singular configurations while matching the
Moore-Penrose inverse away from them.
"""

from typing import Sequence

import jax
import jax.numpy as jnp
from jax import Array

# Singular values at or below EPSILON get the damped reciprocal
EPSILON = 0.1
LAMBDA = 0.01


def reduce_jacobian(jacobian: Array, indices: Sequence[int]) -> Array:
    """Rows of ``jacobian`` at ``indices``, in order: (len(indices), N)."""
    return jnp.asarray(jacobian)[jnp.asarray(indices, dtype=jnp.int32)]


def reduce_twist(twist: Array, indices: Sequence[int]) -> Array:
    """Entries of ``twist`` at ``indices``, in order."""
    return jnp.asarray(twist)[jnp.asarray(indices, dtype=jnp.int32)]


def to_tool_frame(jacobian: Array, rotation: Array) -> Array:
    """Re-express the angular rows of a base-frame Jacobian in the tool frame.

    Args:
        jacobian: (6, N) Jacobian with angular velocity rows in the base frame
        rotation: (3, 3) current tool orientation

    Returns:
        (6, N) Jacobian whose rows 3-5 are ``rotation^T @ jacobian[3:]``
    """
    return jacobian.at[3:].set(rotation.T @ jacobian[3:])


@jax.jit
def damped_pseudo_inverse(jacobian: Array, eps: float = EPSILON, lam: float = LAMBDA) -> Array:
    """SVD-based pseudo-inverse with Tikhonov damping of small singular values.

    Args:
        jacobian: (M, N) matrix, possibly rank deficient
        eps: singular values with ``|s| > eps`` are inverted exactly
        lam: damping factor used for the remaining ones

    Returns:
        (N, M) pseudo-inverse ``V diag(r) U^T``
    """
    U, S, Vt = jnp.linalg.svd(jacobian, full_matrices=False)

    undamped = jnp.abs(S) > eps
    inv_S = jnp.where(
        undamped,
        1.0 / jnp.where(undamped, S, 1.0),
        S / (S * S + lam * lam),
    )

    return Vt.T @ (inv_S[:, None] * U.T)


def moore_penrose_pseudo_inverse(jacobian: Array) -> Array:
    """Right pseudo-inverse ``J^T (J J^T)^-1`` of a full row rank matrix."""
    return jacobian.T @ jnp.linalg.inv(jacobian @ jacobian.T)
