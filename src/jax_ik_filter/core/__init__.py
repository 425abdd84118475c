"""Core robot model data structures for jax_ik_filter.

This module provides the immutable description of a kinematic tree that
forward kinematics and Jacobian queries run against.
"""

from .robot_model import RobotModel

__all__ = ["RobotModel"]
