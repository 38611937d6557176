"""
Demonstration of axisplan motion planning.

This script shows how to:
1. Build a frame system for a two-link planar arm
2. Plan a motion of the tool to a goal pose
3. Chain several goals with a shared motion configuration
4. Add a custom constraint
"""

import math

from compas.geometry import Frame, Point, Vector

from axisplan import plan_motion, plan_waypoints
from axisplan.core.exceptions import MotionPlanningError
from axisplan.core.logging import configure_logging
from axisplan.kinematics.frame import Limit, RotationalFrame, StaticFrame
from axisplan.kinematics.frame_system import WORLD, FrameSystem, PoseInFrame


def build_arm() -> FrameSystem:
    """Two revolute joints about z, each followed by a one metre link."""
    fs = FrameSystem("planar_arm")
    shoulder = RotationalFrame("shoulder", limit=Limit(-math.pi, math.pi))
    upper_arm = StaticFrame("upper_arm", Frame(Point(1, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0)))
    elbow = RotationalFrame("elbow", limit=Limit(-math.pi, math.pi))
    tool = StaticFrame("tool", Frame(Point(1, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0)))
    fs.add_frame(shoulder, fs.world)
    fs.add_frame(upper_arm, shoulder)
    fs.add_frame(elbow, upper_arm)
    fs.add_frame(tool, elbow)
    return fs


def goal_at(x: float, y: float, heading: float) -> PoseInFrame:
    return PoseInFrame(
        WORLD,
        Frame(
            Point(x, y, 0),
            Vector(math.cos(heading), math.sin(heading), 0),
            Vector(-math.sin(heading), math.cos(heading), 0),
        ),
    )


def print_steps(steps) -> None:
    for i, step in enumerate(steps):
        shoulder = math.degrees(step["shoulder"][0])
        elbow = math.degrees(step["elbow"][0])
        print(f"     step {i}: shoulder={shoulder:7.2f} deg, elbow={elbow:7.2f} deg")


def main():
    """Run planning demonstration."""
    configure_logging(level="WARNING")

    print("=" * 60)
    print("axisplan Planar Arm Demo")
    print("=" * 60)

    # 1. Frame system
    print("\n1. Building frame system")
    fs = build_arm()
    tool = fs.frame("tool")
    print(f"   [OK] Frames: {', '.join(fs.frame_names())}")
    seed = fs.zero_inputs()

    config = {"max_ik_solutions": 5, "num_threads": 2, "smooth_iter": 50}

    # 2. Single goal
    print("\n2. Planning to (1.0, 1.0) facing +y")
    steps = plan_motion(None, goal_at(1.0, 1.0, math.pi / 2), tool, seed, fs, None, config)
    print(f"   [OK] Plan has {len(steps)} steps")
    print_steps(steps)

    # 3. Several goals
    print("\n3. Planning through three goals with one shared config")
    goals = [
        goal_at(1.0, 1.0, math.pi / 2),
        goal_at(math.sqrt(0.5), 1 + math.sqrt(0.5), math.pi / 2),
        goal_at(-1.0, 1.0, math.pi),
    ]
    try:
        steps = plan_waypoints(None, goals, tool, seed, fs, None, [config])
        print(f"   [OK] Plan has {len(steps)} steps")
        print_steps(steps)
    except MotionPlanningError as e:
        print(f"   [FAIL] {e}")

    # 4. Custom constraint
    print("\n4. Keeping the elbow bent one way")

    def elbow_up(ci):
        # Elbow input is first in the solver's input vector
        return ci.end_input[0] >= 0.0, 0.0

    constrained = dict(config, constraints={"elbow_up": elbow_up})
    try:
        steps = plan_motion(None, goal_at(1.0, 1.0, math.pi / 2), tool, seed, fs, None, constrained)
        print_steps(steps)
    except MotionPlanningError as e:
        print(f"   [FAIL] {e}")

    print("\n" + "=" * 60)
    print("[SUCCESS] Planning demo completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
