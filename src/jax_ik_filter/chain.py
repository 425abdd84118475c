"""Core kinematics algorithms: Forward Kinematics and Jacobian computation.

Forward kinematics is a single ``lax.scan`` over the breadth-first link
ordering. The geometric Jacobian is obtained by forward-mode differentiation of
the link pose.
"""

from typing import Dict

import jax
import jax.numpy as jnp
from jax import Array

from .core import RobotModel
from .errors import JacobianError, KinematicsError
from .transforms import se3, so3


def forward_kinematics(robot: RobotModel, q: Array) -> Dict[str, Array]:
    """Compute forward kinematics for all links in the robot.

    Args:
        robot: RobotModel containing the robot's kinematic structure
        q: Joint angles array of shape (num_dof,) for actuated joints only

    Returns:
        Dictionary mapping link names to their 4x4 SE(3) world poses
    """
    world_transforms = forward_kinematics_world(robot, q)
    return {name: world_transforms[i] for i, name in enumerate(robot.link_names)}


def forward_kinematics_world(robot: RobotModel, q: Array) -> Array:
    """FK returning an array of world transforms, indexed like ``robot.link_names``.

    Args:
        robot: RobotModel containing the robot's kinematic structure
        q: Joint angles array of shape (num_dof,) for actuated joints only

    Returns:
        Array of shape (num_links, 4, 4) with world poses for all links
    """
    num_links = len(robot.link_names)
    q = jnp.asarray(q, dtype=robot.joint_transforms.dtype)

    # Scatter actuated values into a per-link vector; fixed joints stay at zero
    q_full = jnp.zeros(num_links, dtype=q.dtype)
    q_full = q_full.at[robot.actuated_joint_to_link_idx].set(q)

    world_transforms = jnp.broadcast_to(
        jnp.identity(4, dtype=q.dtype), (num_links, 4, 4)
    )

    def scan_body(carry, i):
        """Processes link `i` using its parent's world pose from `carry`."""
        T_world_to_parent = carry[robot.parent_indices[i]]

        T_joint_motion = se3.exp(robot.joint_axes[i] * q_full[i])
        T_parent_to_child = robot.joint_transforms[i] @ T_joint_motion

        carry = carry.at[i].set(T_world_to_parent @ T_parent_to_child)
        return carry, None

    # Root (index 0) is the base case
    final_transforms, _ = jax.lax.scan(scan_body, world_transforms, jnp.arange(1, num_links))

    return final_transforms


def link_index(robot: RobotModel, link_name: str) -> int:
    """Index of ``link_name`` in the model."""
    try:
        return robot.link_names.index(link_name)
    except ValueError:
        raise KinematicsError(f"Link '{link_name}' not found in robot model")


def geometric_jacobian(robot: RobotModel, q: Array, link_name: str) -> Array:
    """Compute the 6xN geometric Jacobian of a link origin.

    Rows 0-2 give the linear velocity of the link origin and rows 3-5 its
    angular velocity, both expressed in the base frame.

    Args:
        robot: RobotModel containing the robot's kinematic structure
        q: Joint angles array of shape (num_dof,) for actuated joints only
        link_name: Name of the target link

    Returns:
        6x(num_dof) Jacobian matrix
    """
    try:
        link_idx = link_index(robot, link_name)
    except KinematicsError as e:
        raise JacobianError(str(e)) from e

    def link_pose(joint_angles: Array) -> Array:
        return forward_kinematics_world(robot, joint_angles)[link_idx]

    q = jnp.asarray(q, dtype=robot.joint_transforms.dtype)
    T = link_pose(q)
    dT = jax.jacfwd(link_pose)(q)  # (4, 4, num_dof)

    J_linear = dT[:3, 3, :]

    # dR/dq_i @ R^T is the skew matrix of the i-th angular velocity column
    R = se3.get_rotation(T)
    omega_hat = jnp.einsum("ijn,kj->nik", dT[:3, :3, :], R)
    J_angular = so3.vee(omega_hat).T

    J = jnp.concatenate([J_linear, J_angular], axis=0)
    # Replace NaNs/Infs with 0 so downstream math stays finite
    return jnp.nan_to_num(J, nan=0.0, posinf=0.0, neginf=0.0)
