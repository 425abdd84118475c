"""
jax_ik_filter: underconstrained-goal IK filtering for stochastic trajectory optimization.

Snaps the final waypoint of a sampled joint trajectory onto a Cartesian goal
in which only some of the six DOFs are constrained, using damped
least-squares differential IK on JAX forward kinematics.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import transforms
from . import core
from . import io
from . import ik
from . import filters
from .state import RobotState
from .filters import FilterResult, UnderconstrainedGoal

__version__ = "0.1.0"
__all__ = ["transforms", "core", "io", "ik", "filters", "RobotState", "FilterResult", "UnderconstrainedGoal"]
