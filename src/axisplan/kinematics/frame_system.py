"""
Frame systems: trees of kinematic frames rooted at a world frame.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from compas.geometry import Frame

from axisplan.core.exceptions import FrameMissingError, KinematicsError
from axisplan.core.geometry import compose, invert
from axisplan.kinematics.frame import KinematicFrame, StaticFrame

WORLD = "world"

SeedMap = dict[str, list[float]]


@dataclass(frozen=True)
class PoseInFrame:
    """A pose expressed in the named parent frame."""

    parent: str
    pose: Frame


@dataclass(frozen=True)
class WorldState:
    """
    Snapshot of the obstacles around the mechanism.

    The planning core never interprets the geometry; it is carried through
    to constraints and logged.
    """

    obstacles: dict[str, list[Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "obstacles": {name: len(geoms) for name, geoms in self.obstacles.items()},
        }


class FrameSystem:
    """
    Tree of named kinematic frames.

    Every frame is added under an existing parent; the tree is rooted at a
    zero-DoF ``world`` frame.

    Example:
        >>> fs = FrameSystem("arm")
        >>> fs.add_frame(RotationalFrame("shoulder"), fs.world)
        >>> [f.name for f in fs.traceback_frame(fs.frame("shoulder"))]
        ['shoulder', 'world']
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.world = StaticFrame(WORLD)
        self._frames: dict[str, KinematicFrame] = {WORLD: self.world}
        self._parents: dict[str, str] = {}

    def add_frame(self, frame: KinematicFrame, parent: Union[KinematicFrame, str]) -> None:
        """
        Add ``frame`` as a child of ``parent``.

        Raises:
            FrameMissingError: If the parent is not in the system
            KinematicsError: If a frame with the same name already exists
        """
        parent_name = parent if isinstance(parent, str) else parent.name
        if parent_name not in self._frames:
            raise FrameMissingError(parent_name)
        if frame.name in self._frames:
            raise KinematicsError(f"frame {frame.name!r} already in frame system {self.name!r}")
        self._frames[frame.name] = frame
        self._parents[frame.name] = parent_name

    def frame(self, name: str) -> Optional[KinematicFrame]:
        """Look up a frame by name; None if absent."""
        return self._frames.get(name)

    def parent(self, frame: KinematicFrame) -> Optional[KinematicFrame]:
        if frame.name not in self._frames:
            raise FrameMissingError(frame.name)
        parent_name = self._parents.get(frame.name)
        return self._frames[parent_name] if parent_name is not None else None

    def frame_names(self) -> list[str]:
        return [name for name in self._frames if name != WORLD]

    def traceback_frame(self, frame: KinematicFrame) -> list[KinematicFrame]:
        """Return the chain from ``frame`` up to and including world."""
        if self._frames.get(frame.name) is not frame:
            raise FrameMissingError(frame.name)
        chain = [frame]
        while chain[-1].name != WORLD:
            chain.append(self._frames[self._parents[chain[-1].name]])
        return chain

    def zero_inputs(self) -> SeedMap:
        """Inputs map with every degree of freedom at zero."""
        return {name: [0.0] * f.dof for name, f in self._frames.items()}

    def _world_pose(self, inputs: Mapping[str, Sequence[float]], name: str) -> Frame:
        frame = self._frames.get(name)
        if frame is None:
            raise FrameMissingError(name)
        links = []
        for link in self.traceback_frame(frame):
            if link.dof and link.name not in inputs:
                raise KinematicsError(f"no inputs for frame {link.name!r}")
            links.append(link.transform(inputs.get(link.name, [])))
        # traceback runs child to root; composition runs root to child
        return compose(*reversed(links))

    def transform_frame(
        self,
        inputs: Mapping[str, Sequence[float]],
        src: str,
        dst: str,
    ) -> Frame:
        """
        Pose of frame ``src`` expressed in frame ``dst``.

        Args:
            inputs: Inputs for every moving frame on both chains
            src: Name of the frame whose pose is wanted
            dst: Name of the frame to express it in
        """
        src_world = self._world_pose(inputs, src)
        dst_world = self._world_pose(inputs, dst)
        return compose(invert(dst_world), src_world)

    def transform_pose(
        self,
        inputs: Mapping[str, Sequence[float]],
        pose: PoseInFrame,
        dst: str,
    ) -> PoseInFrame:
        """Re-express a pose given in one frame in another frame."""
        src_world = self._world_pose(inputs, pose.parent)
        dst_world = self._world_pose(inputs, dst)
        return PoseInFrame(dst, compose(invert(dst_world), src_world, pose.pose))
