"""
Constraint checking for motion planning.

A constraint is a named callable that receives a ConstraintInput and returns
``(passed, score)``. The ConstraintHandler evaluates a set of them against a
single state or along an interpolated segment between two states.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from compas.geometry import Frame

from axisplan.core.exceptions import KinematicsError
from axisplan.kinematics.frame import KinematicFrame, input_distance, interpolate_inputs


@dataclass(frozen=True)
class ConstraintInput:
    """Start and end states handed to constraint evaluation."""

    start_pos: Optional[Frame]
    end_pos: Optional[Frame]
    start_input: Sequence[float]
    end_input: Sequence[float]
    frame: KinematicFrame


Constraint = Callable[[ConstraintInput], tuple[bool, float]]


class ConstraintHandler:
    """
    Named collection of constraints.

    Scores of passing constraints are summed; the first failing constraint
    short-circuits evaluation and is reported by name.
    """

    def __init__(self, constraints: Optional[dict[str, Constraint]] = None) -> None:
        self._constraints: dict[str, Constraint] = dict(constraints or {})

    def add_constraint(self, name: str, constraint: Constraint) -> None:
        self._constraints[name] = constraint

    def remove_constraint(self, name: str) -> None:
        self._constraints.pop(name, None)

    def constraints(self) -> list[str]:
        """Names of the registered constraints."""
        return list(self._constraints)

    def check_constraints(self, ci: ConstraintInput) -> tuple[bool, float, str]:
        """
        Evaluate every constraint against one input pair.

        Returns:
            (passed, total score, name of the failing constraint or "")
        """
        score = 0.0
        for name, constraint in self._constraints.items():
            passed, c_score = constraint(ci)
            if not passed:
                return False, math.inf, name
            score += c_score
        return True, score, ""

    def check_constraint_path(self, ci: ConstraintInput, resolution: float) -> tuple[bool, str]:
        """
        Evaluate constraints on every step of the segment from start to end input.

        The segment is cut into steps no longer than ``resolution`` in input
        space and each consecutive pair of interpolated states is checked.

        Returns:
            (passed, name of the failing constraint or "")
        """
        frame = ci.frame
        steps = max(1, math.ceil(input_distance(ci.start_input, ci.end_input) / resolution))

        last_input = list(ci.start_input)
        try:
            last_pos = ci.start_pos if ci.start_pos is not None else frame.transform(last_input)
        except KinematicsError:
            return False, "kinematics"

        for i in range(1, steps + 1):
            step_input = interpolate_inputs(ci.start_input, ci.end_input, i / steps)
            try:
                step_pos = frame.transform(step_input)
            except KinematicsError:
                return False, "kinematics"
            passed, _, fail_name = self.check_constraints(
                ConstraintInput(last_pos, step_pos, last_input, step_input, frame)
            )
            if not passed:
                return False, fail_name
            last_input, last_pos = step_input, step_pos
        return True, ""


def joint_limits_constraint(ci: ConstraintInput) -> tuple[bool, float]:
    """Reject any start or end input outside the frame's limits."""
    limits = ci.frame.limits
    for inputs in (ci.start_input, ci.end_input):
        if len(inputs) != len(limits):
            return False, 0.0
        if not all(limit.contains(v) for limit, v in zip(limits, inputs)):
            return False, 0.0
    return True, 0.0


def joint_distance_constraint(ci: ConstraintInput) -> tuple[bool, float]:
    """Always passes; scores by how far the end input is from the start input."""
    return True, input_distance(ci.start_input, ci.end_input)
