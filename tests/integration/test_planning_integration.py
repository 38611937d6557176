"""
Integration tests: full planning requests with the scipy IK solver.
"""

import math

import pytest
from compas.geometry import Frame, Point, Vector

from axisplan import plan_frame_motion, plan_motion, plan_waypoints
from axisplan.kinematics.frame_system import WORLD, PoseInFrame
from tests.doubles import planar_fk

pytestmark = pytest.mark.integration

CONFIG = {"max_ik_solutions": 3, "num_threads": 2, "smooth_iter": 20, "timeout": 60.0}


def _tool_goal(q):
    """World pose of the planar arm's tool at joint angles q = (shoulder, elbow)."""
    x, y, heading = planar_fk(q)
    return PoseInFrame(
        WORLD,
        Frame(
            Point(x, y, 0),
            Vector(math.cos(heading), math.sin(heading), 0),
            Vector(-math.sin(heading), math.cos(heading), 0),
        ),
    )


class TestPlanningIntegration:
    """End-to-end planning against closed-form kinematics."""

    def test_single_joint_frame_motion(self, single_joint):
        steps = plan_frame_motion(None, single_joint.transform([0.7]), single_joint, [0.0], CONFIG)

        assert steps[0] == [0.0]
        assert steps[-1][0] == pytest.approx(0.7, abs=1e-3)

    def test_planar_arm_reaches_goal(self, planar_arm):
        goal = _tool_goal([0.0, math.pi / 2])

        steps = plan_motion(None, goal, planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm, None, CONFIG)

        final = steps[-1]
        x, y, _ = planar_fk([final["shoulder"][0], final["elbow"][0]])
        assert (x, y) == pytest.approx((1.0, 1.0), abs=1e-3)
        assert steps[0]["shoulder"] == [0.0]
        assert steps[0]["elbow"] == [0.0]

    def test_planar_arm_waypoints(self, planar_arm):
        goals = [_tool_goal([0.0, math.pi / 2]), _tool_goal([math.pi / 4, math.pi / 4])]

        steps = plan_waypoints(
            None, goals, planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm, None, [CONFIG]
        )

        final = steps[-1]
        x, y, _ = planar_fk([final["shoulder"][0], final["elbow"][0]])
        expected_x, expected_y, _ = planar_fk([math.pi / 4, math.pi / 4])
        assert (x, y) == pytest.approx((expected_x, expected_y), abs=1e-3)
        for step in steps:
            for name in ("shoulder", "elbow"):
                assert -math.pi <= step[name][0] <= math.pi
