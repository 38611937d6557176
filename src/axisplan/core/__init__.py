"""
Core module - Shared configuration, errors, logging and geometry utilities.
"""

from axisplan.core.config import ConfigManager, MotionConfig
from axisplan.core.context import Context, background
from axisplan.core.exceptions import (
    AxisPlanError,
    ConfigurationError,
    FrameMissingError,
    IKConstraintError,
    IKSolveError,
    KinematicsError,
    MotionPlanningError,
    NoDegreesOfFreedomError,
    PlanningCancelledError,
)
from axisplan.core.geometry import (
    OrientationVector,
    fix_ov_increment,
    matrix_to_pose,
    pose_to_matrix,
    squared_norm_metric,
)

__all__ = [
    # Config
    "ConfigManager",
    "MotionConfig",
    # Context
    "Context",
    "background",
    # Exceptions
    "AxisPlanError",
    "ConfigurationError",
    "FrameMissingError",
    "IKConstraintError",
    "IKSolveError",
    "KinematicsError",
    "MotionPlanningError",
    "NoDegreesOfFreedomError",
    "PlanningCancelledError",
    # Geometry
    "OrientationVector",
    "fix_ov_increment",
    "matrix_to_pose",
    "pose_to_matrix",
    "squared_norm_metric",
]
