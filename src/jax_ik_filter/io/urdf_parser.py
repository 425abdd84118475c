"""URDF parser for loading robot models into JAX-native data structures.

This module parses URDF descriptions and converts them into RobotModel
PyTree structures used for forward kinematics and Jacobian queries.
"""

import jax.numpy as jnp
from lxml import etree
from typing import Dict, List, Tuple
import numpy as np
from collections import deque

from jax_ik_filter.core.robot_model import RobotModel
from jax_ik_filter.transforms import se3


def load_urdf(urdf_path: str) -> RobotModel:
    """Load a URDF file and convert it to a RobotModel PyTree.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotModel: A JAX-native robot representation.
    """
    tree = etree.parse(urdf_path)
    return _build_model(tree.getroot())


def parse_urdf(urdf_string: str) -> RobotModel:
    """Parse a URDF document held in memory."""
    root = etree.fromstring(urdf_string.encode("utf-8"))
    return _build_model(root)


def _build_model(root) -> RobotModel:
    link_map: Dict[str, int] = {}
    child_to_parent_map: Dict[str, str] = {}
    all_links = set()
    child_links = set()

    for link in root.findall('.//link'):
        all_links.add(link.get('name'))

    # Collect joints and build parent-child relationships
    joints_info: List[dict] = []
    for joint in root.findall('.//joint'):
        parent_elem = joint.find('parent')
        child_elem = joint.find('child')

        if parent_elem is not None and child_elem is not None:
            parent_name = parent_elem.get('link')
            child_name = child_elem.get('link')

            child_to_parent_map[child_name] = parent_name
            child_links.add(child_name)

            joints_info.append({
                'name': joint.get('name'),
                'type': joint.get('type'),
                'parent': parent_name,
                'child': child_name,
                'joint_elem': joint
            })

    # Root link is not a child of any joint
    root_links = all_links - child_links
    if len(root_links) != 1:
        raise ValueError(f"Expected exactly one root link, found: {root_links}")
    root_link = next(iter(root_links))

    # Breadth-first traversal from root
    ordered_links = []
    queue = deque([root_link])
    visited = set()

    while queue:
        current_link = queue.popleft()
        if current_link in visited:
            continue

        visited.add(current_link)
        ordered_links.append(current_link)

        for joint_info in joints_info:
            if joint_info['parent'] == current_link and joint_info['child'] not in visited:
                queue.append(joint_info['child'])

    for i, link_name in enumerate(ordered_links):
        link_map[link_name] = i

    actuated = [j for j in joints_info if j['type'] != 'fixed']
    actuated_joint_names = [j['name'] for j in actuated]
    actuated_link_idx = [link_map[j['child']] for j in actuated]
    lower, upper = zip(*[_parse_limits(j) for j in actuated]) if actuated else ((), ())

    parent_indices_list = []
    joint_transforms_list = []
    joint_axes_list = []

    joint_by_child = {j['child']: j for j in joints_info}

    for i, link_name in enumerate(ordered_links):
        if link_name == root_link:
            parent_indices_list.append(i)  # Root parents itself
        else:
            parent_indices_list.append(link_map[child_to_parent_map[link_name]])

        if link_name in joint_by_child:
            transform, axis = _parse_joint(joint_by_child[link_name])
        else:
            transform, axis = jnp.eye(4), jnp.zeros(6)

        joint_transforms_list.append(transform)
        joint_axes_list.append(axis)

    return RobotModel(
        link_names=tuple(ordered_links),
        joint_names=tuple(actuated_joint_names),
        parent_indices=jnp.array(parent_indices_list, dtype=jnp.int32),
        joint_transforms=jnp.stack(joint_transforms_list),
        joint_axes=jnp.stack(joint_axes_list),
        actuated_joint_to_link_idx=jnp.array(actuated_link_idx, dtype=jnp.int32),
        lower_limits=jnp.array(lower, dtype=jnp.float64),
        upper_limits=jnp.array(upper, dtype=jnp.float64),
    )


def _parse_joint(joint_info: dict) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """Origin transform and se(3) screw axis of a joint."""
    joint_elem = joint_info['joint_elem']
    joint_type = joint_info['type']

    origin_elem = joint_elem.find('origin')
    if origin_elem is not None:
        xyz = np.array([float(x) for x in origin_elem.get('xyz', '0 0 0').split()])
        rpy = np.array([float(x) for x in origin_elem.get('rpy', '0 0 0').split()])
        transform = se3.from_position_and_rotation(jnp.array(xyz), jnp.array(_rpy_to_rotation_matrix(rpy)))
    else:
        transform = jnp.eye(4)

    if joint_type == 'fixed':
        return transform, jnp.zeros(6)

    axis_elem = joint_elem.find('axis')
    if axis_elem is not None:
        axis_xyz = jnp.array([float(x) for x in axis_elem.get('xyz', '0 0 1').split()])
    else:
        axis_xyz = jnp.array([1.0, 0.0, 0.0])  # URDF default

    if joint_type in ('revolute', 'continuous'):
        axis = jnp.concatenate([jnp.zeros(3), axis_xyz])
    elif joint_type == 'prismatic':
        axis = jnp.concatenate([axis_xyz, jnp.zeros(3)])
    else:
        raise ValueError(f"Unsupported joint type '{joint_type}' for joint '{joint_info['name']}'")

    return transform, axis


def _parse_limits(joint_info: dict) -> Tuple[float, float]:
    """Position limits of an actuated joint; continuous joints are unbounded."""
    if joint_info['type'] == 'continuous':
        return -np.inf, np.inf
    limit_elem = joint_info['joint_elem'].find('limit')
    if limit_elem is None:
        return -np.inf, np.inf
    return float(limit_elem.get('lower', '-inf')), float(limit_elem.get('upper', 'inf'))


def _rpy_to_rotation_matrix(rpy: np.ndarray) -> np.ndarray:
    """Convert roll-pitch-yaw angles to rotation matrix.

    Args:
        rpy: Array of [roll, pitch, yaw] angles in radians.

    Returns:
        3x3 rotation matrix.
    """
    roll, pitch, yaw = rpy

    R_x = np.array([
        [1, 0, 0],
        [0, np.cos(roll), -np.sin(roll)],
        [0, np.sin(roll), np.cos(roll)]
    ])

    R_y = np.array([
        [np.cos(pitch), 0, np.sin(pitch)],
        [0, 1, 0],
        [-np.sin(pitch), 0, np.cos(pitch)]
    ])

    R_z = np.array([
        [np.cos(yaw), -np.sin(yaw), 0],
        [np.sin(yaw), np.cos(yaw), 0],
        [0, 0, 1]
    ])

    # R = R_z * R_y * R_x
    return R_z @ R_y @ R_x
