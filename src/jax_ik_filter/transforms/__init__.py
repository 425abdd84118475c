"""
JAX-based rigid-body transforms used by the IK filter.

This module provides JIT-compilable implementations of:
- SO(3) rotations and axis-angle decomposition (so3 module)
- SE(3) homogeneous poses (se3 module)

All functions are pure and stateless.
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
