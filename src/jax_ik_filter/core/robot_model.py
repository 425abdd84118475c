"""RobotModel PyTree data structure for JAX-native robot representation.

This module defines the core data structure for representing robots in a
stateless, immutable format that is fully compatible with JAX transformations.
"""

from jax import Array
from flax import struct
from typing import Tuple


@struct.dataclass
class RobotModel:
    """Immutable PyTree representation of a robot's kinematic structure.

    Links are stored in breadth-first order from the root, so a parent always
    precedes its children.

    Attributes:
        link_names: Tuple of all link names. Index corresponds to link ID.
        joint_names: Tuple of all actuated (non-fixed) joint names, in the
                     order joint vectors are laid out.
        parent_indices: Array of shape (num_links,) where parent_indices[i]
                       is the parent link index of link i. Root link parents itself.
        joint_transforms: Array of shape (num_links, 4, 4) containing the SE(3)
                         origin of the joint connecting each link to its parent.
        joint_axes: Array of shape (num_links, 6) containing 6D se(3) twist
                   vectors for each joint. [vx,vy,vz,wx,wy,wz] format.
        actuated_joint_to_link_idx: Array of shape (num_dof,) mapping each
                   actuated joint to the index of its child link.
        lower_limits: Array of shape (num_dof,) of lower position limits.
        upper_limits: Array of shape (num_dof,) of upper position limits.
    """
    link_names: Tuple[str, ...] = struct.field(pytree_node=False)
    joint_names: Tuple[str, ...] = struct.field(pytree_node=False)
    parent_indices: Array
    joint_transforms: Array
    joint_axes: Array
    actuated_joint_to_link_idx: Array
    lower_limits: Array
    upper_limits: Array

    @property
    def num_dof(self) -> int:
        return len(self.joint_names)

    @property
    def tip_link(self) -> str:
        """Last link in traversal order; the tool link of a serial chain."""
        return self.link_names[-1]
