"""Cartesian error between two poses, restricted to the constrained DOFs."""

import jax
import jax.numpy as jnp
from jax import Array

from jax_ik_filter.transforms import se3, so3


@jax.jit
def compute_twist(current_pose: Array, goal_pose: Array, dof_mask: Array) -> Array:
    """Twist that moves ``current_pose`` toward ``goal_pose``.

    The linear part is the base-frame translation difference. The angular part
    is the axis-angle of the relative rotation ``R_current^T @ R_goal``, i.e.
    expressed in the current tool frame, with the angle wrapped into [-π, π].
    Entries whose ``dof_mask`` flag is 0 are set to exactly zero.

    Args:
        current_pose: (4, 4) current tool pose
        goal_pose: (4, 4) goal tool pose
        dof_mask: (6,) integer flags for x, y, z, rx, ry, rz

    Returns:
        (6,) twist [vx, vy, vz, wx, wy, wz]
    """
    twist_pos = se3.get_position(goal_pose) - se3.get_position(current_pose)

    relative_rot = so3.inverse(se3.get_rotation(current_pose)) @ se3.get_rotation(goal_pose)
    axis, angle = so3.to_axis_angle(relative_rot)
    twist_rot = axis * so3.normalize_angle(angle)

    twist = jnp.concatenate([twist_pos, twist_rot])
    return jnp.where(jnp.asarray(dof_mask) == 0, 0.0, twist)
