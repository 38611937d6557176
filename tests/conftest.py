"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest
from compas.geometry import Frame, Point, Vector

from axisplan.core.context import Context
from axisplan.kinematics.frame import Limit, RotationalFrame, StaticFrame
from axisplan.kinematics.frame_system import FrameSystem
from axisplan.motion.constraints import ConstraintHandler
from axisplan.motion.options import PlannerOptions
from axisplan.motion.planner import DirectPlanner
from tests.doubles import FOREARM, UPPER_ARM


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a configuration directory holding two motion profiles."""
    config_dir = temp_dir / "config"
    (config_dir / "profiles").mkdir(parents=True)

    precise_profile = """
motion:
  max_ik_solutions: 10
  min_ik_score: 0.01
  resolution: 0.01
  smooth_iter: 500
"""
    (config_dir / "profiles" / "precise.yaml").write_text(precise_profile)

    fast_profile = """
motion:
  max_ik_solutions: 1
  smooth_iter: 0
  timeout: 5.0
"""
    (config_dir / "profiles" / "fast.yaml").write_text(fast_profile)

    return config_dir


@pytest.fixture
def ctx():
    """A fresh cancellation context."""
    return Context()


@pytest.fixture
def planar_arm():
    """
    Two-link planar arm: world -> shoulder -> upper_arm -> elbow -> tool.

    Both joints rotate about z; each link is one metre long.
    """
    fs = FrameSystem("planar")
    shoulder = RotationalFrame("shoulder", axis=(0, 0, 1), limit=Limit(-np.pi, np.pi))
    upper_arm = StaticFrame("upper_arm", Frame(Point(UPPER_ARM, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0)))
    elbow = RotationalFrame("elbow", axis=(0, 0, 1), limit=Limit(-np.pi, np.pi))
    tool = StaticFrame("tool", Frame(Point(FOREARM, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0)))

    fs.add_frame(shoulder, fs.world)
    fs.add_frame(upper_arm, shoulder)
    fs.add_frame(elbow, upper_arm)
    fs.add_frame(tool, elbow)
    return fs


@pytest.fixture
def single_joint():
    """A lone revolute joint about z with limits [-pi, pi]."""
    return RotationalFrame("joint", axis=(0, 0, 1), limit=Limit(-np.pi, np.pi))


@pytest.fixture
def make_planner():
    """Factory building a DirectPlanner around a given frame and IK solver."""

    def _make(frame, solver, constraints=None, rng=None, **options):
        opts = PlannerOptions(
            constraint_handler=ConstraintHandler(constraints or {}),
            **options,
        )
        return DirectPlanner(
            frame,
            rng if rng is not None else np.random.default_rng(0),
            None,
            opts,
            solver=solver,
        )

    return _make
