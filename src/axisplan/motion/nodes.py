"""
Path nodes and ranking of IK solutions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Sequence


class Node(ABC):
    """A waypoint of a planned path."""

    @property
    @abstractmethod
    def q(self) -> list[float]:
        """Configuration held by this node."""


@dataclass(frozen=True)
class BasicNode(Node):
    """Node holding exactly one configuration."""

    inputs: tuple[float, ...]

    @classmethod
    def from_inputs(cls, inputs: Sequence[float]) -> "BasicNode":
        return cls(tuple(float(v) for v in inputs))

    @property
    def q(self) -> list[float]:
        return list(self.inputs)


@dataclass(frozen=True)
class CostNode(Node):
    """A vetted IK solution paired with its constraint score."""

    inputs: tuple[float, ...]
    cost: float

    @property
    def q(self) -> list[float]:
        return list(self.inputs)


def rank_solutions(solutions: Mapping[float, Sequence[float]]) -> list[CostNode]:
    """
    Order cost-keyed solutions by ascending cost.

    Solutions are keyed by cost, so two candidates with exactly the same cost
    were already collapsed into one entry (the later one) by the caller.
    """
    return [
        CostNode(tuple(float(v) for v in solutions[cost]), float(cost))
        for cost in sorted(solutions)
    ]
