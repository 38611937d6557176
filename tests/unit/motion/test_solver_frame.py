"""
Tests for SolverFrame.
"""

import math

import pytest

from axisplan.core.exceptions import FrameMissingError, KinematicsError
from axisplan.kinematics.frame import RotationalFrame, StaticFrame, TranslationalFrame
from axisplan.kinematics.frame_system import WORLD, FrameSystem
from axisplan.motion.solver_frame import SolverFrame
from tests.doubles import planar_fk


@pytest.fixture
def arm_solver_frame(planar_arm):
    """Solver frame moving the planar arm's tool relative to world."""
    seed = planar_arm.zero_inputs()
    chain = planar_arm.traceback_frame(planar_arm.frame("tool"))
    return SolverFrame(planar_arm, chain, WORLD, seed)


class TestSolverFrame:
    """Tests for SolverFrame construction and input mapping."""

    def test_moving_frames_from_solve_frame_up(self, arm_solver_frame):
        assert [f.name for f in arm_solver_frame.frames] == ["elbow", "shoulder"]
        assert arm_solver_frame.dof == 2

    def test_missing_goal_frame(self, planar_arm):
        chain = planar_arm.traceback_frame(planar_arm.frame("tool"))
        with pytest.raises(FrameMissingError):
            SolverFrame(planar_arm, chain, "table", planar_arm.zero_inputs())

    def test_empty_solve_chain(self, planar_arm):
        with pytest.raises(KinematicsError):
            SolverFrame(planar_arm, [], WORLD, {})

    def test_goal_on_solve_chain_has_no_dof_below(self, planar_arm):
        """Solving tool relative to elbow only involves static frames."""
        chain = planar_arm.traceback_frame(planar_arm.frame("tool"))
        sf = SolverFrame(planar_arm, chain, "elbow", planar_arm.zero_inputs())
        assert sf.frames == []
        assert sf.dof == 0

    def test_goal_branch_frames_included(self):
        fs = FrameSystem()
        arm = RotationalFrame("arm")
        rail = TranslationalFrame("rail")
        fs.add_frame(arm, fs.world)
        fs.add_frame(StaticFrame("tip"), arm)
        fs.add_frame(rail, fs.world)
        fs.add_frame(StaticFrame("target"), rail)

        chain = fs.traceback_frame(fs.frame("tip"))
        sf = SolverFrame(fs, chain, "target", fs.zero_inputs())

        assert [f.name for f in sf.frames] == ["arm", "rail"]

    def test_slice_map_round_trip(self, arm_solver_frame):
        inputs_map = arm_solver_frame.slice_to_map([0.5, -0.25])
        assert inputs_map["elbow"] == [0.5]
        assert inputs_map["shoulder"] == [-0.25]
        assert arm_solver_frame.map_to_slice(inputs_map) == [0.5, -0.25]

    def test_slice_to_map_keeps_other_seed_inputs(self, planar_arm):
        seed = planar_arm.zero_inputs()
        seed["extra"] = [7.0]
        chain = planar_arm.traceback_frame(planar_arm.frame("tool"))
        sf = SolverFrame(planar_arm, chain, WORLD, seed)

        assert sf.slice_to_map([0.1, 0.2])["extra"] == [7.0]
        # The stored seed is a copy
        seed["extra"].append(1.0)
        assert sf.slice_to_map([0.1, 0.2])["extra"] == [7.0]

    def test_map_to_slice_missing_frame(self, arm_solver_frame):
        with pytest.raises(FrameMissingError):
            arm_solver_frame.map_to_slice({"elbow": [0.0]})

    def test_map_to_slice_wrong_length(self, arm_solver_frame):
        with pytest.raises(KinematicsError, match="incorrect number of inputs"):
            arm_solver_frame.map_to_slice({"elbow": [0.0, 1.0], "shoulder": [0.0]})

    def test_transform_matches_closed_form(self, arm_solver_frame):
        elbow, shoulder = 0.4, math.pi / 3
        pose = arm_solver_frame.transform([elbow, shoulder])
        x, y, _ = planar_fk([shoulder, elbow])
        assert list(pose.point) == pytest.approx([x, y, 0.0], abs=1e-9)
