"""
Planner options: the per-call bundle of limits, constraints and scoring.
"""

from dataclasses import dataclass, field
from typing import Optional

from axisplan.core.config import (
    DEFAULT_MIN_IK_SCORE,
    DEFAULT_NUM_THREADS,
    DEFAULT_RESOLUTION,
    DEFAULT_SMOOTH_ITER,
    DEFAULT_SOLUTIONS_TO_SEED,
    DEFAULT_TIMEOUT,
    MotionConfig,
)
from axisplan.core.geometry import squared_norm_metric
from axisplan.motion.constraints import ConstraintHandler, ConstraintInput
from axisplan.motion.ik import Metric


@dataclass(frozen=True)
class PlannerOptions:
    """
    Options for a single planning call.

    Attributes:
        num_threads: Parallelism hint for the IK solver
        max_solutions: Stop collecting IK solutions after this many (0 = default)
        min_score: Stop at the first solution scoring below this (0 = disabled)
        smooth_iter: Number of shortcut attempts when smoothing
        resolution: Maximum input-space step when validating a path
        timeout: Seconds allowed for one waypoint
        constraint_handler: Constraints every state and path must satisfy
        metric: Pose distance minimized by the IK solver
    """

    num_threads: int = DEFAULT_NUM_THREADS
    max_solutions: int = DEFAULT_SOLUTIONS_TO_SEED
    min_score: float = DEFAULT_MIN_IK_SCORE
    smooth_iter: int = DEFAULT_SMOOTH_ITER
    resolution: float = DEFAULT_RESOLUTION
    timeout: float = DEFAULT_TIMEOUT
    constraint_handler: ConstraintHandler = field(default_factory=ConstraintHandler)
    metric: Metric = squared_norm_metric

    @classmethod
    def from_motion_config(
        cls,
        config: MotionConfig,
        constraint_handler: Optional[ConstraintHandler] = None,
    ) -> "PlannerOptions":
        """
        Build options from a validated motion configuration.

        Constraints named in ``config`` are added to ``constraint_handler``
        (a fresh handler if None).
        """
        handler = constraint_handler or ConstraintHandler()
        for name, constraint in config.constraints.items():
            handler.add_constraint(name, constraint)
        return cls(
            num_threads=config.num_threads,
            max_solutions=config.max_ik_solutions,
            min_score=config.min_ik_score,
            smooth_iter=config.smooth_iter,
            resolution=config.resolution,
            timeout=config.timeout,
            constraint_handler=handler,
        )

    def check_constraints(self, ci: ConstraintInput) -> tuple[bool, float, str]:
        return self.constraint_handler.check_constraints(ci)

    def check_constraint_path(self, ci: ConstraintInput, resolution: float) -> tuple[bool, str]:
        return self.constraint_handler.check_constraint_path(ci, resolution)
