"""Goal descriptions of a motion plan request and resolution to a tool pose.

A request carries a list of goal ``Constraints``; only the first entry is
used. It names the goal either as a Cartesian pose (position plus orientation
constraint) or as joint values, in which case the pose comes from forward
kinematics of the tool link.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence, Tuple

import jax.numpy as jnp
from jax import Array

from jax_ik_filter.errors import InvalidGoalError
from jax_ik_filter.state import RobotState
from jax_ik_filter.transforms import se3, so3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionConstraint:
    link_name: str
    position: Sequence[float]


@dataclass(frozen=True)
class OrientationConstraint:
    link_name: str
    orientation: Sequence[float]  # quaternion (w, x, y, z)


@dataclass(frozen=True)
class JointConstraint:
    joint_name: str
    position: float


@dataclass(frozen=True)
class Constraints:
    position_constraints: Tuple[PositionConstraint, ...] = ()
    orientation_constraints: Tuple[OrientationConstraint, ...] = ()
    joint_constraints: Tuple[JointConstraint, ...] = ()


@dataclass(frozen=True)
class MotionPlanRequest:
    goal_constraints: Tuple[Constraints, ...] = ()
    start_state: Mapping[str, float] = field(default_factory=dict)


def resolve_goal_pose(state: RobotState, request: MotionPlanRequest, tip_link: str) -> Array:
    """Tool goal pose described by ``request``.

    The state is left at the request's start state, overwritten by the goal
    joint values when those are used.

    Raises:
        InvalidGoalError: if the request has no goal constraints, or neither a
            full Cartesian goal nor joint values, or a goal joint value names
            an unknown joint. Unknown start state joints are skipped.
    """
    goals = request.goal_constraints
    if not goals:
        raise InvalidGoalError("A goal constraint was not provided")
    if len(goals) > 1:
        logger.debug("Using the first of %d goal constraints", len(goals))

    for joint_name, position in request.start_state.items():
        if joint_name not in state.robot.joint_names:
            logger.debug("Skipping start state value for unknown joint %s", joint_name)
            continue
        state.set_variable_position(joint_name, position)

    goal = goals[0]
    if goal.position_constraints and goal.orientation_constraints:
        position = jnp.asarray(goal.position_constraints[0].position, dtype=jnp.float64)
        quaternion = jnp.asarray(goal.orientation_constraints[0].orientation, dtype=jnp.float64)
        if position.shape != (3,) or quaternion.shape != (4,):
            raise InvalidGoalError(
                f"Goal pose needs a 3-vector and a quaternion, got shapes {position.shape} and {quaternion.shape}"
            )
        return se3.from_position_and_rotation(position, so3.from_quaternion(quaternion))

    logger.warning("A goal constraint for the tool link was not provided, using forward kinematics")
    if not goal.joint_constraints:
        raise InvalidGoalError("No joint values for the goal were found")

    for jc in goal.joint_constraints:
        state.set_variable_position(jc.joint_name, jc.position)
    state.enforce_bounds()
    return state.get_global_pose(tip_link)
