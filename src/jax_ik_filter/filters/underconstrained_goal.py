"""Noisy-trajectory filter that snaps the last waypoint onto the task goal.

Given a rollout's (num_dof x num_timesteps) parameter matrix, the final
column seeds an IK solve toward the goal pose resolved from the motion plan
request. Only the DOFs flagged in the configuration are constrained, so e.g. a
drilling tool may spin freely about its own axis.

Typical use::

    robot = load_urdf("arm.urdf")
    goal_filter = UnderconstrainedGoal.from_params(robot, load_params("filter.yaml"))
    goal_filter.set_motion_plan_request(request)
    parameters, result = goal_filter.filter(parameters)
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import jax.numpy as jnp
from jax import Array

from jax_ik_filter.core import RobotModel
from jax_ik_filter.errors import ConfigurationError, InvalidGoalError
from jax_ik_filter.ik import Converged, IKConfig, IKResult, MotionPlanRequest, resolve_goal_pose, solve_ik
from jax_ik_filter.state import RobotState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    """Outcome of filtering one rollout.

    Attributes:
        modified: The parameter matrix was changed.
        success: The filter found an acceptable joint vector.
        outcome: The underlying IK result.
    """
    modified: bool
    success: bool
    outcome: IKResult


class UnderconstrainedGoal:
    """Filter holding one robot state; use one instance per concurrent rollout."""

    name = "UnderconstrainedGoal"

    def __init__(self, robot: RobotModel, config: IKConfig, tip_link: Optional[str] = None):
        if config.num_joints != robot.num_dof:
            raise ConfigurationError(
                f"joint_update_rates has {config.num_joints} entries, robot has {robot.num_dof} joints"
            )
        self.robot = robot
        self.config = config
        self.tip_link = tip_link if tip_link is not None else robot.tip_link
        if self.tip_link not in robot.link_names:
            raise ConfigurationError(f"Tool link '{self.tip_link}' not found in robot model")
        self.state = RobotState(robot)
        self.tool_goal_pose: Optional[Array] = None

    @classmethod
    def from_params(cls, robot: RobotModel, params: Mapping[str, Any],
                    tip_link: Optional[str] = None) -> "UnderconstrainedGoal":
        return cls(robot, IKConfig.from_params(params, num_joints=robot.num_dof), tip_link)

    def set_motion_plan_request(self, request: MotionPlanRequest) -> Array:
        """Resolve and store the tool goal pose; call once before filtering."""
        self.state.set_joint_positions(jnp.zeros(self.robot.num_dof))
        self.tool_goal_pose = resolve_goal_pose(self.state, request, self.tip_link)
        return self.tool_goal_pose

    def run_ik(self, tool_goal_pose: Array, init_joint_pose: Array) -> IKResult:
        return solve_ik(self.state, self.tip_link, tool_goal_pose, init_joint_pose, self.config)

    def filter(self,
               parameters: Array,
               start_timestep: int = 0,
               num_timesteps: Optional[int] = None,
               iteration_number: int = 0,
               rollout_number: int = 0) -> Tuple[Array, FilterResult]:
        """Refine the last waypoint of ``parameters``.

        Args:
            parameters: (num_dof, num_timesteps) joint trajectory of one rollout
            start_timestep: Index of the first timestep, for logging
            num_timesteps: Number of timesteps, for logging
            iteration_number: Optimizer iteration, for logging
            rollout_number: Rollout index, for logging

        Returns:
            The (possibly updated) parameter matrix and a FilterResult. The
            matrix is returned unchanged unless the solve converged.
        """
        if self.tool_goal_pose is None:
            raise InvalidGoalError("No goal pose set; call set_motion_plan_request first")

        parameters = jnp.asarray(parameters)
        outcome = self.run_ik(self.tool_goal_pose, parameters[:, -1])

        if not isinstance(outcome, Converged):
            logger.error(
                "%s failed to find valid ik close to reference pose (iteration %d, rollout %d)",
                self.name, iteration_number, rollout_number,
            )
            return parameters, FilterResult(modified=False, success=False, outcome=outcome)

        logger.debug("%s updated final waypoint of rollout %d (timesteps %d..%s)",
                     self.name, rollout_number, start_timestep, num_timesteps)
        parameters = parameters.at[:, -1].set(outcome.joint_positions.astype(parameters.dtype))
        return parameters, FilterResult(modified=True, success=True, outcome=outcome)
