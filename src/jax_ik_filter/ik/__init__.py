"""Differential inverse kinematics for underconstrained goals.

The solver drives a tool frame toward a goal pose using only the Cartesian
DOFs flagged in ``IKConfig.constrained_dofs``.
"""

from .config import DOF_SIZE, IKConfig
from .goal import (
    Constraints,
    JointConstraint,
    MotionPlanRequest,
    OrientationConstraint,
    PositionConstraint,
    resolve_goal_pose,
)
from .pseudo_inverse import (
    EPSILON,
    LAMBDA,
    damped_pseudo_inverse,
    moore_penrose_pseudo_inverse,
    reduce_jacobian,
    reduce_twist,
    to_tool_frame,
)
from .solver import Converged, Exhausted, Failed, IKResult, solve_ik, within_tolerance
from .twist import compute_twist

__all__ = [
    "DOF_SIZE",
    "IKConfig",
    "Constraints",
    "JointConstraint",
    "MotionPlanRequest",
    "OrientationConstraint",
    "PositionConstraint",
    "resolve_goal_pose",
    "EPSILON",
    "LAMBDA",
    "damped_pseudo_inverse",
    "moore_penrose_pseudo_inverse",
    "reduce_jacobian",
    "reduce_twist",
    "to_tool_frame",
    "Converged",
    "Exhausted",
    "Failed",
    "IKResult",
    "solve_ik",
    "within_tolerance",
    "compute_twist",
]
