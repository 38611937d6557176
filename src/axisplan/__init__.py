"""
axisplan - Motion planning core for articulated mechanisms.

Given a start configuration and a goal pose, axisplan searches inverse
kinematics candidates, validates them and the motion towards them against
user-defined constraints, ranks them, and smooths the resulting paths.
"""

__version__ = "0.1.0"
__author__ = "axisplan Contributors"

from axisplan.core.config import MotionConfig
from axisplan.motion.motion_plan import (
    plan_frame_motion,
    plan_motion,
    plan_robot_motion,
    plan_waypoints,
)

__all__ = [
    "__version__",
    "MotionConfig",
    "plan_motion",
    "plan_robot_motion",
    "plan_frame_motion",
    "plan_waypoints",
]
