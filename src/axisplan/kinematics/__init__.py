"""
Kinematics module - Kinematic frames and frame systems.
"""

from axisplan.kinematics.frame import (
    KinematicFrame,
    Limit,
    ModelFrame,
    RotationalFrame,
    StaticFrame,
    TranslationalFrame,
    input_distance,
    interpolate_inputs,
)
from axisplan.kinematics.frame_system import WORLD, FrameSystem, PoseInFrame, WorldState

__all__ = [
    "KinematicFrame",
    "Limit",
    "ModelFrame",
    "RotationalFrame",
    "StaticFrame",
    "TranslationalFrame",
    "input_distance",
    "interpolate_inputs",
    "WORLD",
    "FrameSystem",
    "PoseInFrame",
    "WorldState",
]
