"""Tests for forward kinematics and geometric Jacobian computation."""

import jax
import jax.numpy as jnp
import jax.random as jrandom
import numpy as np
import pytest

from jax_ik_filter.chain import forward_kinematics, forward_kinematics_world, geometric_jacobian
from jax_ik_filter.errors import JacobianError
from jax_ik_filter.transforms import se3, so3


def test_fk_panda_zero(panda):
    """Flange pose of the Panda at the zero configuration."""
    poses = forward_kinematics(panda, jnp.zeros(7))

    assert len(poses) == len(panda.link_names)
    np.testing.assert_allclose(se3.get_position(poses["panda_link8"]), jnp.array([0.088, 0.0, 0.926]), atol=1e-9)
    # Flange z-axis points straight down
    np.testing.assert_allclose(se3.get_rotation(poses["panda_link8"])[:, 2], jnp.array([0.0, 0.0, -1.0]), atol=1e-9)


def test_fk_valid_se3(panda, ready_pose):
    """All link poses are valid SE(3) matrices."""
    world = forward_kinematics_world(panda, ready_pose)
    assert world.shape == (len(panda.link_names), 4, 4)
    for T in world:
        np.testing.assert_allclose(T[3, :], jnp.array([0, 0, 0, 1]), rtol=1e-6, atol=1e-6)
        R = T[:3, :3]
        np.testing.assert_allclose(R @ R.T, jnp.eye(3), rtol=1e-9, atol=1e-9)


def test_fk_jit_compatibility(panda, ready_pose):
    """Forward kinematics is JIT-compilable."""
    jit_fk = jax.jit(lambda q: forward_kinematics_world(panda, q))
    np.testing.assert_allclose(jit_fk(ready_pose), forward_kinematics_world(panda, ready_pose), atol=1e-12)


def test_jacobian_shape(panda, ready_pose):
    J = geometric_jacobian(panda, ready_pose, "panda_link8")
    assert J.shape == (6, 7)
    assert jnp.isfinite(J).all()


@pytest.mark.parametrize("use_zero", [False, True])
def test_jacobian_matches_joint_axes(panda, ready_pose, use_zero):
    """Revolute columns are [z_i x (p_tip - p_i); z_i] with z_i the joint axis in world.

    Includes the all-zero configuration, where every joint sits at the
    identity of its exponential map.
    """
    q = jnp.zeros(7) if use_zero else ready_pose
    J = geometric_jacobian(panda, q, "panda_link8")
    poses = forward_kinematics(panda, q)
    p_tip = se3.get_position(poses["panda_link8"])

    for i in range(7):
        T_i = poses[f"panda_link{i + 1}"]
        z_i = se3.get_rotation(T_i)[:, 2]
        p_i = se3.get_position(T_i)
        np.testing.assert_allclose(J[3:, i], z_i, atol=1e-9)
        np.testing.assert_allclose(J[:3, i], jnp.cross(z_i, p_tip - p_i), atol=1e-9)


def test_jacobian_finite_differences(panda):
    """Geometric Jacobian agrees with central differences of FK at random configurations."""
    key = jrandom.PRNGKey(0)
    q_samples = jrandom.uniform(key, shape=(5, 7), minval=-2.0, maxval=2.0)
    h = 1e-6

    def tip_pose(q):
        return forward_kinematics_world(panda, q)[-1]

    for q in q_samples:
        J = geometric_jacobian(panda, q, "panda_link8")
        for i in range(7):
            dq = jnp.zeros(7).at[i].set(h)
            T_plus, T_minus = tip_pose(q + dq), tip_pose(q - dq)
            lin = (se3.get_position(T_plus) - se3.get_position(T_minus)) / (2 * h)
            ang = so3.log(se3.get_rotation(T_plus) @ se3.get_rotation(T_minus).T) / (2 * h)
            np.testing.assert_allclose(J[:3, i], lin, atol=1e-6)
            np.testing.assert_allclose(J[3:, i], ang, atol=1e-6)


def test_jacobian_of_base_is_zero(panda, ready_pose):
    """Nothing moves the root link."""
    J = geometric_jacobian(panda, ready_pose, "panda_link0")
    np.testing.assert_allclose(J, jnp.zeros((6, 7)))


def test_invalid_link_name(panda):
    """Unknown links raise JacobianError."""
    with pytest.raises(JacobianError, match="Link 'nonexistent_link' not found"):
        geometric_jacobian(panda, jnp.zeros(7), "nonexistent_link")
