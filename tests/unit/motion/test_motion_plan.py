"""
Tests for the public motion planning entry points.
"""

from unittest.mock import MagicMock, patch

import pytest
from compas.geometry import Frame, Point, Vector

from axisplan.core.config import MotionConfig
from axisplan.core.exceptions import (
    ConfigurationError,
    FrameMissingError,
    MotionPlanningError,
    NoDegreesOfFreedomError,
)
from axisplan.kinematics.frame import StaticFrame
from axisplan.kinematics.frame_system import WORLD, PoseInFrame, WorldState
from axisplan.motion.motion_plan import (
    frame_steps_from_robot_path,
    plan_frame_motion,
    plan_motion,
    plan_robot_motion,
    plan_waypoints,
    robot_fs_current_inputs,
)


def _goal(x, y):
    return PoseInFrame(WORLD, Frame(Point(x, y, 0), Vector(1, 0, 0), Vector(0, 1, 0)))


@pytest.fixture
def mock_plan_manager():
    """
    Replace PlanManager with a double.

    Each waypoint "plans" from its seed slice to a fixed target slice
    (elbow 0.5, shoulder 0.25).
    """
    with patch("axisplan.motion.motion_plan.PlanManager") as manager_cls:
        instance = manager_cls.return_value

        def plan_single_waypoint(ctx, seed_map, goal, world_state, config):
            return [[seed_map["elbow"][0], seed_map["shoulder"][0]], [0.5, 0.25]]

        instance.plan_single_waypoint.side_effect = plan_single_waypoint
        yield manager_cls


class TestPreconditions:
    """Tests for failures raised before any planning happens."""

    def test_zero_dof_frame(self):
        """A frame with nothing to solve fails without touching IK."""
        with patch("axisplan.motion.motion_plan.PlanManager") as manager_cls:
            with pytest.raises(NoDegreesOfFreedomError, match="no degrees of freedom"):
                plan_frame_motion(None, Frame.worldXY(), StaticFrame("fixed"), [])
        manager_cls.assert_not_called()

    def test_empty_goals(self, planar_arm):
        with pytest.raises(MotionPlanningError, match="no destinations"):
            plan_waypoints(None, [], planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm)

    def test_frame_not_in_system(self, planar_arm):
        with pytest.raises(FrameMissingError, match="gripper"):
            plan_motion(None, _goal(1, 1), StaticFrame("gripper"), planar_arm.zero_inputs(), planar_arm)

    def test_goal_frame_not_in_system(self, planar_arm, mock_plan_manager):
        goal = PoseInFrame("table", Frame.worldXY())
        with pytest.raises(FrameMissingError, match="table"):
            plan_motion(None, goal, planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm)
        mock_plan_manager.assert_not_called()


class TestMotionConfigs:
    """Tests for pairing goals with motion configs."""

    def test_single_config_shared(self, planar_arm, mock_plan_manager):
        config = {"max_ik_solutions": 3}
        plan_waypoints(
            None,
            [_goal(1, 1), _goal(0, 2)],
            planar_arm.frame("tool"),
            planar_arm.zero_inputs(),
            planar_arm,
            motion_configs=[config],
        )

        calls = mock_plan_manager.return_value.plan_single_waypoint.call_args_list
        assert len(calls) == 2
        used = [c.args[4] for c in calls]
        assert used[0] == used[1] == MotionConfig(max_ik_solutions=3)

    def test_one_config_per_goal(self, planar_arm, mock_plan_manager):
        plan_waypoints(
            None,
            [_goal(1, 1), _goal(0, 2)],
            planar_arm.frame("tool"),
            planar_arm.zero_inputs(),
            planar_arm,
            motion_configs=[{"smooth_iter": 1}, {"smooth_iter": 2}],
        )

        calls = mock_plan_manager.return_value.plan_single_waypoint.call_args_list
        assert [c.args[4].smooth_iter for c in calls] == [1, 2]

    def test_no_configs_uses_defaults(self, planar_arm, mock_plan_manager):
        plan_waypoints(
            None, [_goal(1, 1)], planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm
        )
        call = mock_plan_manager.return_value.plan_single_waypoint.call_args
        assert call.args[4] == MotionConfig()

    def test_mismatched_lengths(self, planar_arm, mock_plan_manager):
        with pytest.raises(ConfigurationError, match="goals and motion configs had different lengths"):
            plan_waypoints(
                None,
                [_goal(1, 1), _goal(0, 2), _goal(2, 0)],
                planar_arm.frame("tool"),
                planar_arm.zero_inputs(),
                planar_arm,
                motion_configs=[{}, {}],
            )
        mock_plan_manager.assert_not_called()


class TestPlanWaypoints:
    """Tests for chaining goals together."""

    def test_seed_threads_through_goals(self, planar_arm, mock_plan_manager):
        seed_map = planar_arm.zero_inputs()
        seed_map["elbow"] = [0.1]

        steps = plan_waypoints(
            None, [_goal(1, 1), _goal(0, 2)], planar_arm.frame("tool"), seed_map, planar_arm
        )

        assert len(steps) == 4
        assert steps[0]["elbow"] == [0.1]
        assert steps[1]["elbow"] == [0.5]
        assert steps[1]["shoulder"] == [0.25]
        # The second goal starts where the first ended
        second_seed = mock_plan_manager.return_value.plan_single_waypoint.call_args_list[1].args[1]
        assert second_seed["elbow"] == [0.5]
        assert steps[2] == steps[1]
        # Static frames are carried along in every step
        assert all(step["tool"] == [] for step in steps)

    def test_manager_seeded_by_goal_index(self, planar_arm, mock_plan_manager):
        plan_waypoints(
            None, [_goal(1, 1), _goal(0, 2)], planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm
        )
        assert [c.kwargs["seed"] for c in mock_plan_manager.call_args_list] == [0, 1]

    def test_caller_seed_not_mutated(self, planar_arm, mock_plan_manager):
        seed_map = planar_arm.zero_inputs()
        plan_waypoints(None, [_goal(1, 1)], planar_arm.frame("tool"), seed_map, planar_arm)
        assert seed_map["elbow"] == [0.0]

    def test_world_state_passed_through(self, planar_arm, mock_plan_manager):
        world_state = WorldState(obstacles={"table": []})
        plan_motion(
            None, _goal(1, 1), planar_arm.frame("tool"), planar_arm.zero_inputs(), planar_arm, world_state
        )
        call = mock_plan_manager.return_value.plan_single_waypoint.call_args
        assert call.args[3] is world_state


class TestRobotInputs:
    """Tests for seeding from a live robot."""

    def test_current_inputs(self, planar_arm, ctx):
        robot = MagicMock()
        robot.current_inputs.return_value = {"shoulder": [0.1], "elbow": [0.2]}

        inputs = robot_fs_current_inputs(ctx, robot, planar_arm)

        assert inputs == {
            "shoulder": [0.1],
            "upper_arm": [],
            "elbow": [0.2],
            "tool": [],
        }

    def test_missing_moving_frame(self, planar_arm, ctx):
        robot = MagicMock()
        robot.current_inputs.return_value = {"shoulder": [0.1]}
        with pytest.raises(FrameMissingError, match="elbow"):
            robot_fs_current_inputs(ctx, robot, planar_arm)

    def test_plan_robot_motion_seeds_from_robot(self, planar_arm, mock_plan_manager):
        robot = MagicMock()
        robot.current_inputs.return_value = {"shoulder": [0.3], "elbow": [0.4]}

        steps = plan_robot_motion(None, _goal(1, 1), planar_arm.frame("tool"), robot, planar_arm)

        assert steps[0]["shoulder"] == [0.3]
        assert steps[0]["elbow"] == [0.4]


class TestFrameSteps:
    def test_extracts_frame_inputs(self):
        path = [{"arm": [0.0], "rail": [1.0]}, {"arm": [0.5], "rail": [1.0]}]
        assert frame_steps_from_robot_path("arm", path) == [[0.0], [0.5]]

    def test_missing_frame(self):
        with pytest.raises(FrameMissingError):
            frame_steps_from_robot_path("arm", [{"rail": [1.0]}])

    def test_plan_frame_motion_returns_frame_steps(self, single_joint):
        with patch("axisplan.motion.motion_plan.PlanManager") as manager_cls:
            manager_cls.return_value.plan_single_waypoint.return_value = [[0.0], [0.7]]
            steps = plan_frame_motion(None, single_joint.transform([0.7]), single_joint, [0.0])
        assert steps == [[0.0], [0.7]]
