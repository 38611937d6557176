"""
Motion module - Single-waypoint planning and multi-waypoint orchestration.

This module provides:
- IK candidate search with constraint vetting and cost ranking
- State and straight-line path validation
- Randomized shortcut smoothing
- Public planning entry points over frame systems
"""

from axisplan.motion.constraints import (
    ConstraintHandler,
    ConstraintInput,
    joint_distance_constraint,
    joint_limits_constraint,
)
from axisplan.motion.ik import CombinedIKSolver, InverseKinematics, ScipyIKSolver
from axisplan.motion.motion_plan import (
    frame_steps_from_robot_path,
    plan_frame_motion,
    plan_motion,
    plan_robot_motion,
    plan_waypoints,
)
from axisplan.motion.nodes import BasicNode, CostNode, Node
from axisplan.motion.options import PlannerOptions
from axisplan.motion.plan_manager import PlanManager, register_planner
from axisplan.motion.planner import DirectPlanner, MotionPlanner, Planner
from axisplan.motion.solver_frame import SolverFrame

__all__ = [
    "ConstraintHandler",
    "ConstraintInput",
    "joint_distance_constraint",
    "joint_limits_constraint",
    "CombinedIKSolver",
    "InverseKinematics",
    "ScipyIKSolver",
    "frame_steps_from_robot_path",
    "plan_frame_motion",
    "plan_motion",
    "plan_robot_motion",
    "plan_waypoints",
    "BasicNode",
    "CostNode",
    "Node",
    "PlannerOptions",
    "PlanManager",
    "register_planner",
    "DirectPlanner",
    "MotionPlanner",
    "Planner",
    "SolverFrame",
]
