"""Trajectory filters applied to sampled rollouts."""

from .underconstrained_goal import FilterResult, UnderconstrainedGoal

__all__ = ["FilterResult", "UnderconstrainedGoal"]
