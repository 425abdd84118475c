"""Static configuration of the underconstrained IK filter.

The parameter tree mirrors the STOMP filter parameters::

    constrained_dofs: [1, 1, 1, 0, 0, 1]
    cartesian_convergence: [0.005, 0.005, 0.005, 0.01, 0.01, 0.01]
    joint_update_rates: [0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5]
    max_ik_iterations: 100
"""

from numbers import Integral, Real
from typing import Any, Mapping, Optional, Sequence, Tuple

import jax.numpy as jnp
import numpy as np
from flax import struct
from jax import Array

from jax_ik_filter.errors import ConfigurationError

DOF_SIZE = 6

REQUIRED_PARAMS = (
    "constrained_dofs",
    "cartesian_convergence",
    "joint_update_rates",
    "max_ik_iterations",
)


@struct.dataclass
class IKConfig:
    """Validated, immutable IK filter parameters.

    Attributes:
        constrained_dofs: 6 flags for x, y, z, rx, ry, rz; 0 means "don't care".
        constrained_indices: Positions of the nonzero flags, in order.
        max_ik_iterations: Upper bound on solver passes.
        cartesian_convergence: (6,) per-DOF tolerances on the absolute twist.
        joint_update_rates: (num_dof,) gains applied to each joint step.
    """
    constrained_dofs: Tuple[int, ...] = struct.field(pytree_node=False)
    constrained_indices: Tuple[int, ...] = struct.field(pytree_node=False)
    max_ik_iterations: int = struct.field(pytree_node=False)
    cartesian_convergence: Array
    joint_update_rates: Array

    @classmethod
    def create(cls,
               constrained_dofs: Sequence[int],
               cartesian_convergence: Sequence[float],
               joint_update_rates: Sequence[float],
               max_ik_iterations: int,
               num_joints: Optional[int] = None) -> "IKConfig":
        """Validate raw values and build a config.

        Raises:
            ConfigurationError: on any malformed or inconsistent value.
        """
        dofs = _int_array("constrained_dofs", constrained_dofs, DOF_SIZE)
        thresholds = _real_array("cartesian_convergence", cartesian_convergence, DOF_SIZE)
        if any(t < 0 for t in thresholds):
            raise ConfigurationError("cartesian_convergence entries must be non-negative")

        rates = _real_array("joint_update_rates", joint_update_rates, num_joints)
        if not rates:
            raise ConfigurationError("joint_update_rates must not be empty")

        if isinstance(max_ik_iterations, bool) or not isinstance(max_ik_iterations, Integral):
            raise ConfigurationError(
                f"max_ik_iterations must be an integer, got {max_ik_iterations!r}"
            )
        if max_ik_iterations <= 0:
            raise ConfigurationError("max_ik_iterations must be positive")

        return cls(
            constrained_dofs=dofs,
            constrained_indices=tuple(i for i, flag in enumerate(dofs) if flag != 0),
            max_ik_iterations=int(max_ik_iterations),
            cartesian_convergence=jnp.array(thresholds, dtype=jnp.float64),
            joint_update_rates=jnp.array(rates, dtype=jnp.float64),
        )

    @classmethod
    def from_params(cls, params: Mapping[str, Any], num_joints: Optional[int] = None) -> "IKConfig":
        """Build a config from a parameter tree such as a loaded YAML document."""
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"Parameters must be a mapping, got {type(params).__name__}")
        missing = [name for name in REQUIRED_PARAMS if name not in params]
        if missing:
            raise ConfigurationError(f"Missing required parameters: {', '.join(missing)}")
        return cls.create(
            constrained_dofs=params["constrained_dofs"],
            cartesian_convergence=params["cartesian_convergence"],
            joint_update_rates=params["joint_update_rates"],
            max_ik_iterations=params["max_ik_iterations"],
            num_joints=num_joints,
        )

    @property
    def dof_mask(self) -> Array:
        return jnp.array(self.constrained_dofs, dtype=jnp.int32)

    @property
    def num_joints(self) -> int:
        return self.joint_update_rates.shape[0]


def _check_sequence(name: str, values: Any, length: Optional[int]) -> Sequence:
    if isinstance(values, np.ndarray) and values.ndim == 1:
        values = values.tolist()
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ConfigurationError(f"{name} must be an array, got {values!r}")
    if length is not None and len(values) != length:
        raise ConfigurationError(f"{name} must have {length} entries, got {len(values)}")
    return values


def _int_array(name: str, values: Any, length: Optional[int]) -> Tuple[int, ...]:
    values = _check_sequence(name, values, length)
    for v in values:
        if isinstance(v, bool) or not isinstance(v, Integral):
            raise ConfigurationError(f"{name} entries must be integers, got {v!r}")
    return tuple(int(v) for v in values)


def _real_array(name: str, values: Any, length: Optional[int]) -> Tuple[float, ...]:
    values = _check_sequence(name, values, length)
    for v in values:
        if isinstance(v, bool) or not isinstance(v, Real):
            raise ConfigurationError(f"{name} entries must be numbers, got {v!r}")
    return tuple(float(v) for v in values)
