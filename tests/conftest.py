"""Shared fixtures for the test suite."""

from pathlib import Path

import jax.numpy as jnp
import pytest

from jax_ik_filter.io import load_urdf

FIXTURES = Path(__file__).parent / "fixtures"

# Panda "ready" configuration, well away from singularities
READY_POSE = jnp.array([0.0, -0.785, 0.0, -2.356, 0.0, 1.571, 0.785])


@pytest.fixture(scope="session")
def panda():
    return load_urdf(str(FIXTURES / "panda_arm.urdf"))


@pytest.fixture
def ready_pose():
    return READY_POSE
