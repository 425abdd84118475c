"""Mutable kinematic state used by the IK filter.

A ``RobotState`` holds a joint vector for one ``RobotModel`` and answers
forward kinematics and Jacobian queries at that vector. It is overwritten on
every solver iteration, so each solver (or each parallel rollout) must own its
own instance; ``copy()`` produces an independent one.
"""

from typing import Optional

import jax
import jax.numpy as jnp
from jax import Array

from .chain import forward_kinematics_world, geometric_jacobian, link_index
from .core import RobotModel
from .errors import InvalidGoalError, KinematicsError


class RobotState:
    """Joint positions of a robot plus cached FK/Jacobian evaluators."""

    def __init__(self, robot: RobotModel, joint_positions: Optional[Array] = None):
        self.robot = robot
        self._fk = jax.jit(lambda q: forward_kinematics_world(robot, q))
        self._jacobian = jax.jit(
            lambda q, link_name: geometric_jacobian(robot, q, link_name),
            static_argnums=1,
        )
        self._positions = jnp.zeros(robot.num_dof)
        self._poses: Optional[Array] = None
        if joint_positions is not None:
            self.set_joint_positions(joint_positions)

    @property
    def joint_positions(self) -> Array:
        return self._positions

    def set_joint_positions(self, q: Array) -> None:
        """Overwrite the whole joint vector."""
        q = jnp.asarray(q, dtype=jnp.float64)
        if q.shape != (self.robot.num_dof,):
            raise KinematicsError(
                f"Expected joint vector of shape ({self.robot.num_dof},), got {q.shape}"
            )
        self._positions = q
        self._poses = None

    def set_variable_position(self, joint_name: str, value: float) -> None:
        """Set a single joint by name."""
        try:
            idx = self.robot.joint_names.index(joint_name)
        except ValueError:
            raise InvalidGoalError(f"Joint '{joint_name}' not found in robot model")
        self._positions = self._positions.at[idx].set(value)
        self._poses = None

    def enforce_bounds(self) -> None:
        """Clip the joint vector into the model's position limits."""
        self._positions = jnp.clip(self._positions, self.robot.lower_limits, self.robot.upper_limits)
        self._poses = None

    def get_global_pose(self, link_name: str) -> Array:
        """4x4 world pose of ``link_name`` at the current joint vector."""
        idx = link_index(self.robot, link_name)
        if self._poses is None:
            self._poses = self._fk(self._positions)
        return self._poses[idx]

    def get_geometric_jacobian(self, link_name: str) -> Array:
        """6xN base-frame geometric Jacobian of ``link_name``.

        Raises:
            JacobianError: if the link is not part of the model.
        """
        return self._jacobian(self._positions, link_name)

    def copy(self) -> "RobotState":
        return RobotState(self.robot, self._positions)
