"""Iterative differential IK toward an underconstrained goal pose.

Each pass computes the masked twist between the tool and the goal, stops if it
is within tolerance, and otherwise takes a gain-scaled damped least-squares
step in joint space. A solve ends in exactly one of three ways:

* ``Converged``: the twist met every tolerance.
* ``Exhausted``: ``max_ik_iterations`` passes ran without converging. This is
  an ordinary outcome and carries the last joint estimate.
* ``Failed``: the kinematic model could not answer a pose or Jacobian query,
  e.g. for an unknown tool link.
"""

import logging
from dataclasses import dataclass
from typing import Union

import jax.numpy as jnp
from jax import Array

from jax_ik_filter.errors import KinematicsError
from jax_ik_filter.state import RobotState
from jax_ik_filter.transforms import se3

from .config import IKConfig
from .pseudo_inverse import damped_pseudo_inverse, reduce_jacobian, reduce_twist, to_tool_frame
from .twist import compute_twist

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Converged:
    joint_positions: Array
    iterations: int
    twist: Array


@dataclass(frozen=True)
class Exhausted:
    joint_positions: Array
    iterations: int
    twist: Array


@dataclass(frozen=True)
class Failed:
    reason: str
    iterations: int


IKResult = Union[Converged, Exhausted, Failed]


def within_tolerance(twist: Array, config: IKConfig) -> bool:
    """True when every constrained twist entry is below its threshold.

    Unconstrained entries are zero by construction and always count as met.
    """
    met = (jnp.abs(twist) < config.cartesian_convergence) | (config.dof_mask == 0)
    return bool(jnp.all(met))


def solve_ik(state: RobotState,
             tip_link: str,
             goal_pose: Array,
             seed: Array,
             config: IKConfig) -> IKResult:
    """Run differential IK from ``seed`` toward ``goal_pose``.

    ``state`` is overwritten with every candidate joint vector; on return it
    holds the last one evaluated.

    Args:
        state: Kinematic state owned by this solve
        tip_link: Link whose pose is driven to the goal
        goal_pose: (4, 4) goal pose of ``tip_link``
        seed: (num_dof,) initial joint vector
        config: Mask, tolerances, gains and iteration cap

    Returns:
        One of Converged, Exhausted or Failed.
    """
    dof_mask = config.dof_mask
    indices = config.constrained_indices

    joint_pose = jnp.asarray(seed, dtype=jnp.float64)
    state.set_joint_positions(joint_pose)

    twist = jnp.zeros(len(dof_mask))
    for iteration in range(config.max_ik_iterations):
        try:
            tool_pose = state.get_global_pose(tip_link)
            twist = compute_twist(tool_pose, goal_pose, dof_mask)

            if within_tolerance(twist, config):
                logger.debug("Found numeric ik solution after %d iterations", iteration + 1)
                return Converged(joint_positions=joint_pose, iterations=iteration + 1, twist=twist)

            jacobian = state.get_geometric_jacobian(tip_link)
        except KinematicsError as e:
            logger.error("Kinematic query for link %s failed: %s", tip_link, e)
            return Failed(reason=str(e), iterations=iteration + 1)

        jacobian = to_tool_frame(jacobian, se3.get_rotation(tool_pose))
        jacobian_pinv = damped_pseudo_inverse(reduce_jacobian(jacobian, indices))

        delta_j = jacobian_pinv @ reduce_twist(twist, indices)
        joint_pose = joint_pose + config.joint_update_rates * delta_j
        state.set_joint_positions(joint_pose)

    logger.debug("IK did not converge in %d iterations, final tool twist %s",
                 config.max_ik_iterations, twist)
    return Exhausted(joint_positions=joint_pose, iterations=config.max_ik_iterations, twist=twist)
