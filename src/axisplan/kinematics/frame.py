"""
Kinematic frames.

A kinematic frame is a named element of a kinematic chain. Given its inputs
(one number per degree of freedom) it reports its pose relative to its
parent frame.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from compas.geometry import Frame
from compas_robots import Configuration, RobotModel
from scipy.spatial.transform import Rotation

from axisplan.core.exceptions import KinematicsError
from axisplan.core.geometry import matrix_to_pose


@dataclass(frozen=True)
class Limit:
    """Lower and upper bound of one degree of freedom."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class KinematicFrame(ABC):
    """Abstract base class for all kinematic frames."""

    def __init__(self, name: str) -> None:
        self.name = name

    @property
    @abstractmethod
    def limits(self) -> list[Limit]:
        """Limits of each degree of freedom, in input order."""

    @property
    def dof(self) -> int:
        """Number of inputs this frame takes."""
        return len(self.limits)

    @abstractmethod
    def transform(self, inputs: Sequence[float]) -> Frame:
        """
        Compute the pose of this frame relative to its parent.

        Raises:
            KinematicsError: If ``inputs`` has the wrong length
        """

    def _check_inputs(self, inputs: Sequence[float]) -> None:
        if len(inputs) != self.dof:
            raise KinematicsError(
                f"incorrect number of inputs for frame {self.name!r}",
                details={"expected": self.dof, "got": len(inputs)},
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, dof={self.dof})"


class StaticFrame(KinematicFrame):
    """A frame rigidly attached to its parent."""

    def __init__(self, name: str, pose: Optional[Frame] = None) -> None:
        super().__init__(name)
        self.pose = pose if pose is not None else Frame.worldXY()

    @property
    def limits(self) -> list[Limit]:
        return []

    def transform(self, inputs: Sequence[float]) -> Frame:
        self._check_inputs(inputs)
        return self.pose


class RotationalFrame(KinematicFrame):
    """A revolute joint rotating about ``axis`` by its single input (radians)."""

    def __init__(
        self,
        name: str,
        axis: Sequence[float] = (0.0, 0.0, 1.0),
        limit: Limit = Limit(-math.pi, math.pi),
    ) -> None:
        super().__init__(name)
        axis = np.asarray(axis, dtype=float)
        norm = np.linalg.norm(axis)
        if norm == 0:
            raise KinematicsError(f"rotation axis of frame {name!r} has zero length")
        self.axis = axis / norm
        self.limit = limit

    @property
    def limits(self) -> list[Limit]:
        return [self.limit]

    def transform(self, inputs: Sequence[float]) -> Frame:
        self._check_inputs(inputs)
        matrix = np.eye(4)
        matrix[:3, :3] = Rotation.from_rotvec(self.axis * inputs[0]).as_matrix()
        return matrix_to_pose(matrix)


class TranslationalFrame(KinematicFrame):
    """A prismatic joint sliding along ``axis`` by its single input."""

    def __init__(
        self,
        name: str,
        axis: Sequence[float] = (1.0, 0.0, 0.0),
        limit: Limit = Limit(-1.0, 1.0),
    ) -> None:
        super().__init__(name)
        axis = np.asarray(axis, dtype=float)
        norm = np.linalg.norm(axis)
        if norm == 0:
            raise KinematicsError(f"translation axis of frame {name!r} has zero length")
        self.axis = axis / norm
        self.limit = limit

    @property
    def limits(self) -> list[Limit]:
        return [self.limit]

    def transform(self, inputs: Sequence[float]) -> Frame:
        self._check_inputs(inputs)
        matrix = np.eye(4)
        matrix[:3, 3] = self.axis * inputs[0]
        return matrix_to_pose(matrix)


class ModelFrame(KinematicFrame):
    """
    A frame backed by a compas_robots RobotModel.

    The inputs are the model's configurable joints in model order and the
    pose is that of ``link_name`` relative to the model base.
    """

    def __init__(self, name: str, model: RobotModel, link_name: Optional[str] = None) -> None:
        super().__init__(name)
        self.model = model
        self.joints = [j for j in model.joints if j.is_configurable()]
        self.joint_names = [j.name for j in self.joints]

        if link_name is None:
            links = list(model.links)
            if not links:
                raise KinematicsError(f"robot model for frame {name!r} has no links")
            link_name = links[-1].name
        self.link_name = link_name

        self._limits = []
        for joint in self.joints:
            if joint.limit and joint.limit.lower is not None and joint.limit.upper is not None:
                self._limits.append(Limit(joint.limit.lower, joint.limit.upper))
            else:
                self._limits.append(Limit(-math.pi, math.pi))

    @property
    def limits(self) -> list[Limit]:
        return list(self._limits)

    def transform(self, inputs: Sequence[float]) -> Frame:
        self._check_inputs(inputs)
        config = Configuration.from_revolute_values(list(inputs), self.joint_names)
        try:
            return self.model.forward_kinematics(config, link_name=self.link_name)
        except Exception as e:
            raise KinematicsError(f"Forward kinematics failed for frame {self.name!r}: {e}") from e


def interpolate_inputs(start: Sequence[float], end: Sequence[float], by: float) -> list[float]:
    """Linearly interpolate two input vectors; ``by`` of 0 gives ``start``."""
    start_arr = np.asarray(start, dtype=float)
    end_arr = np.asarray(end, dtype=float)
    return (start_arr + (end_arr - start_arr) * by).tolist()


def input_distance(start: Sequence[float], end: Sequence[float]) -> float:
    """Euclidean distance between two input vectors."""
    return float(np.linalg.norm(np.asarray(end, dtype=float) - np.asarray(start, dtype=float)))
