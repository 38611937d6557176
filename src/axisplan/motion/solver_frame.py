"""
Solver frames: the flat view of a frame system that IK operates on.
"""

from typing import Mapping, Sequence

from compas.geometry import Frame

from axisplan.core.exceptions import FrameMissingError, KinematicsError
from axisplan.kinematics.frame import KinematicFrame, Limit
from axisplan.kinematics.frame_system import FrameSystem, SeedMap


class SolverFrame(KinematicFrame):
    """
    Composite frame over the joints that move a solve frame relative to a goal frame.

    The moving frames between the solve frame and the common ancestor of the
    solve and goal frames, plus those between the goal frame and that
    ancestor, are flattened into one input vector. Frames outside that set
    stay at their seed inputs.
    """

    def __init__(
        self,
        fs: FrameSystem,
        solve_frame_list: Sequence[KinematicFrame],
        goal_frame_name: str,
        seed_map: Mapping[str, Sequence[float]],
    ) -> None:
        if not solve_frame_list:
            raise KinematicsError("empty solve frame list")
        goal_frame = fs.frame(goal_frame_name)
        if goal_frame is None:
            raise FrameMissingError(goal_frame_name)

        solve_frame = solve_frame_list[0]
        super().__init__(f"{solve_frame.name}_{goal_frame_name}")
        self.fs = fs
        self.solve_frame_name = solve_frame.name
        self.goal_frame_name = goal_frame_name

        goal_frame_list = fs.traceback_frame(goal_frame)
        goal_names = [f.name for f in goal_frame_list]
        solve_names = [f.name for f in solve_frame_list]
        pivot = next(name for name in solve_names if name in goal_names)

        chain = solve_frame_list[: solve_names.index(pivot)]
        chain += goal_frame_list[: goal_names.index(pivot)]
        self.frames = [f for f in chain if f.dof > 0]
        self.orig_seed = {name: list(inputs) for name, inputs in seed_map.items()}

    @property
    def limits(self) -> list[Limit]:
        limits: list[Limit] = []
        for frame in self.frames:
            limits.extend(frame.limits)
        return limits

    def transform(self, inputs: Sequence[float]) -> Frame:
        """Pose of the solve frame in the goal frame for the flat ``inputs``."""
        self._check_inputs(inputs)
        return self.fs.transform_frame(
            self.slice_to_map(inputs), self.solve_frame_name, self.goal_frame_name
        )

    def map_to_slice(self, inputs_map: Mapping[str, Sequence[float]]) -> list[float]:
        """
        Flatten per-frame inputs into the solver's input vector.

        Raises:
            FrameMissingError: If a solved frame has no entry
            KinematicsError: If an entry has the wrong length
        """
        flat: list[float] = []
        for frame in self.frames:
            if frame.name not in inputs_map:
                raise FrameMissingError(frame.name)
            frame_inputs = list(inputs_map[frame.name])
            if len(frame_inputs) != frame.dof:
                raise KinematicsError(
                    f"incorrect number of inputs for frame {frame.name!r}",
                    details={"expected": frame.dof, "got": len(frame_inputs)},
                )
            flat.extend(frame_inputs)
        return flat

    def slice_to_map(self, inputs: Sequence[float]) -> SeedMap:
        """
        Split the solver's input vector back into per-frame inputs.

        Frames outside the solved set keep their seed inputs, so the result
        is a complete seed map for the next solve.
        """
        inputs_map: SeedMap = {name: list(v) for name, v in self.orig_seed.items()}
        offset = 0
        for frame in self.frames:
            inputs_map[frame.name] = [float(v) for v in inputs[offset : offset + frame.dof]]
            offset += frame.dof
        return inputs_map
