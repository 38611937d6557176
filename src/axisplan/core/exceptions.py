"""
Custom exceptions for axisplan.

All axisplan exceptions inherit from AxisPlanError for easy catching.
"""

from typing import Any


class AxisPlanError(Exception):
    """Base exception for all axisplan errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(AxisPlanError):
    """Raised when a motion configuration or profile is invalid."""

    pass


class KinematicsError(AxisPlanError):
    """Raised when a frame cannot be transformed or wired into a frame system."""

    pass


class MotionPlanningError(AxisPlanError):
    """Raised when motion planning fails."""

    pass


class FrameMissingError(MotionPlanningError):
    """Raised when a named frame is not part of the frame system."""

    def __init__(self, frame_name: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"frame with name {frame_name!r} not in frame system", details)
        self.frame_name = frame_name


class NoDegreesOfFreedomError(MotionPlanningError):
    """Raised when the solver frame has nothing to solve for."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            "solver frame has no degrees of freedom, cannot perform inverse kinematics",
            details,
        )


class IKSolveError(MotionPlanningError):
    """Raised when the IK solver produced no candidates at all."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("no IK solution found", details)


class IKConstraintError(MotionPlanningError):
    """
    Raised when IK candidates were produced but every one failed constraints.

    Carries a histogram of which constraint rejected how many candidates.
    """

    def __init__(self, failures: dict[str, int], fail_count: int) -> None:
        summary = ", ".join(
            f"{name}: {100 * count / fail_count:.2f}%"
            for name, count in sorted(failures.items())
        )
        super().__init__(
            f"all IK solutions failed constraints. Failures: {summary}",
            details={"failures": dict(failures), "fail_count": fail_count},
        )
        self.failures = dict(failures)
        self.fail_count = fail_count


class PlanningCancelledError(MotionPlanningError):
    """Raised when the caller's context is canceled or its deadline passes."""

    pass
