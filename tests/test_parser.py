"""Tests for URDF parser functionality."""

import pytest
import jax.numpy as jnp
import numpy as np

from jax_ik_filter.core import RobotModel
from jax_ik_filter.io import parse_urdf


MIXED_URDF = """<?xml version="1.0"?>
<robot name="mixed">
  <link name="base"/>
  <link name="slider"/>
  <link name="wheel"/>
  <link name="tool"/>
  <joint name="rail" type="prismatic">
    <parent link="base"/>
    <child link="slider"/>
    <axis xyz="1 0 0"/>
    <limit lower="-0.5" upper="0.5" effort="10" velocity="1"/>
  </joint>
  <joint name="spin" type="continuous">
    <origin xyz="0 0 0.1" rpy="0 0 0"/>
    <parent link="slider"/>
    <child link="wheel"/>
    <axis xyz="0 0 1"/>
  </joint>
  <joint name="mount" type="fixed">
    <origin xyz="0.2 0 0" rpy="0 0 0"/>
    <parent link="wheel"/>
    <child link="tool"/>
  </joint>
</robot>
"""


def test_load_panda_urdf(panda):
    """Test loading Panda URDF and verify RobotModel structure."""
    robot = panda
    assert isinstance(robot, RobotModel)

    assert len(robot.link_names) == 9
    for i in range(9):
        assert f"panda_link{i}" in robot.link_names

    # 7 revolute joints, not counting the fixed joint8
    assert robot.joint_names == tuple(f"panda_joint{i}" for i in range(1, 8))
    assert robot.num_dof == 7

    num_links = len(robot.link_names)
    assert robot.parent_indices.shape == (num_links,)
    assert robot.joint_transforms.shape == (num_links, 4, 4)
    assert robot.joint_axes.shape == (num_links, 6)

    # Root link parents itself
    assert robot.link_names[0] == "panda_link0"
    assert robot.parent_indices[0] == 0
    assert jnp.all(robot.parent_indices < num_links)

    for i in range(num_links):
        T = robot.joint_transforms[i]
        np.testing.assert_allclose(T[3, :], jnp.array([0, 0, 0, 1]), rtol=1e-6, atol=1e-6)
        R = T[:3, :3]
        np.testing.assert_allclose(R @ R.T, jnp.eye(3), rtol=1e-6, atol=1e-6)


def test_actuated_joint_map(panda):
    """Each actuated joint maps to its child link."""
    for joint_idx, link_idx in enumerate(panda.actuated_joint_to_link_idx):
        assert panda.link_names[int(link_idx)] == f"panda_link{joint_idx + 1}"


def test_tip_link_is_flange(panda):
    assert panda.tip_link == "panda_link8"


def test_joint_limits(panda):
    np.testing.assert_allclose(panda.lower_limits[0], -2.8973)
    np.testing.assert_allclose(panda.upper_limits[3], -0.0698)
    np.testing.assert_allclose(panda.lower_limits[5], -0.0175)
    assert panda.lower_limits.shape == (7,)


def test_revolute_axes(panda):
    """Revolute joints carry a pure angular screw axis."""
    for link_idx in panda.actuated_joint_to_link_idx:
        np.testing.assert_allclose(panda.joint_axes[int(link_idx)], jnp.array([0, 0, 0, 0, 0, 1.0]))


def test_mixed_joint_types():
    """Prismatic, continuous and fixed joints parse into the right axes and limits."""
    robot = parse_urdf(MIXED_URDF)

    assert robot.link_names == ("base", "slider", "wheel", "tool")
    assert robot.joint_names == ("rail", "spin")

    np.testing.assert_allclose(robot.joint_axes[1], jnp.array([1.0, 0, 0, 0, 0, 0]))
    np.testing.assert_allclose(robot.joint_axes[2], jnp.array([0, 0, 0, 0, 0, 1.0]))
    np.testing.assert_allclose(robot.joint_axes[3], jnp.zeros(6))

    np.testing.assert_allclose(robot.lower_limits, jnp.array([-0.5, -jnp.inf]))
    np.testing.assert_allclose(robot.upper_limits, jnp.array([0.5, jnp.inf]))
    np.testing.assert_allclose(robot.joint_transforms[3][:3, 3], jnp.array([0.2, 0, 0]))


def test_multiple_roots_rejected():
    urdf = """<robot name="broken"><link name="a"/><link name="b"/></robot>"""
    with pytest.raises(ValueError, match="Expected exactly one root link"):
        parse_urdf(urdf)


def test_unsupported_joint_type():
    urdf = """<robot name="floating">
      <link name="a"/><link name="b"/>
      <joint name="free" type="floating"><parent link="a"/><child link="b"/></joint>
    </robot>"""
    with pytest.raises(ValueError, match="Unsupported joint type"):
        parse_urdf(urdf)
