"""
Public motion planning entry points.

Every entry point funnels into one internal routine that plans each goal in
turn, solving for a SolverFrame built for that goal and threading the last
configuration of one goal forward as the seed of the next.
"""

from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from compas.geometry import Frame

from axisplan.core.config import MotionConfig
from axisplan.core.context import Context, background
from axisplan.core.exceptions import (
    ConfigurationError,
    FrameMissingError,
    MotionPlanningError,
    NoDegreesOfFreedomError,
)
from axisplan.core.logging import planning_logger
from axisplan.kinematics.frame import KinematicFrame
from axisplan.kinematics.frame_system import (
    WORLD,
    FrameSystem,
    PoseInFrame,
    SeedMap,
    WorldState,
)
from axisplan.motion.plan_manager import PlanManager
from axisplan.motion.solver_frame import SolverFrame

MotionConfigLike = Union[MotionConfig, dict[str, Any], None]


class RobotHandle(Protocol):
    """A live robot that can report the current inputs of its frames."""

    def current_inputs(self, ctx: Context) -> Mapping[str, Sequence[float]]:
        ...


def plan_motion(
    ctx: Optional[Context],
    dst: PoseInFrame,
    frame: KinematicFrame,
    seed_map: Mapping[str, Sequence[float]],
    fs: FrameSystem,
    world_state: Optional[WorldState] = None,
    planning_opts: MotionConfigLike = None,
) -> list[SeedMap]:
    """
    Plan a motion of ``frame`` to ``dst`` within a frame system.

    Args:
        ctx: Cancellation context (background context if None)
        dst: Goal pose and the frame it is expressed in
        frame: Frame to move
        seed_map: Starting inputs of every moving frame
        fs: Frame system containing ``frame``
        world_state: Obstacles around the mechanism
        planning_opts: Motion configuration for the goal

    Returns:
        Inputs of every frame at each step of the plan
    """
    return _motion_plan_internal(
        ctx, [dst], frame, seed_map, fs, world_state, [planning_opts]
    )


def plan_robot_motion(
    ctx: Optional[Context],
    dst: PoseInFrame,
    frame: KinematicFrame,
    robot: RobotHandle,
    fs: FrameSystem,
    world_state: Optional[WorldState] = None,
    planning_opts: MotionConfigLike = None,
) -> list[SeedMap]:
    """
    Plan a motion of ``frame`` to ``dst``, seeding from a live robot's current inputs.

    Frames without degrees of freedom need not be reported by the robot.
    """
    ctx = ctx or background()
    seed_map = robot_fs_current_inputs(ctx, robot, fs)
    return _motion_plan_internal(
        ctx, [dst], frame, seed_map, fs, world_state, [planning_opts]
    )


def plan_frame_motion(
    ctx: Optional[Context],
    dst: Frame,
    frame: KinematicFrame,
    seed: Sequence[float],
    planning_opts: MotionConfigLike = None,
) -> list[list[float]]:
    """
    Plan a motion of a lone frame to ``dst``, expressed in world.

    An ephemeral frame system holding only ``frame`` is built for the solve,
    so world state is not supported.

    Returns:
        Inputs of ``frame`` at each step of the plan
    """
    fs = FrameSystem("")
    fs.add_frame(frame, fs.world)
    destination = PoseInFrame(WORLD, dst)
    seed_map = {frame.name: list(seed)}
    solution_map = _motion_plan_internal(
        ctx, [destination], frame, seed_map, fs, None, [planning_opts]
    )
    return frame_steps_from_robot_path(frame.name, solution_map)


def plan_waypoints(
    ctx: Optional[Context],
    goals: Sequence[PoseInFrame],
    frame: KinematicFrame,
    seed_map: Mapping[str, Sequence[float]],
    fs: FrameSystem,
    world_state: Optional[WorldState] = None,
    motion_configs: Optional[Sequence[MotionConfigLike]] = None,
) -> list[SeedMap]:
    """
    Plan through several goals in order.

    ``motion_configs`` may be empty (defaults for every goal), hold a single
    config shared by every goal, or hold one config per goal.
    """
    return _motion_plan_internal(
        ctx, goals, frame, seed_map, fs, world_state, list(motion_configs or [])
    )


def robot_fs_current_inputs(ctx: Context, robot: RobotHandle, fs: FrameSystem) -> SeedMap:
    """
    Gather the current inputs of every frame in ``fs`` from a robot.

    Raises:
        FrameMissingError: If a moving frame has no reported inputs
    """
    reported = robot.current_inputs(ctx)
    inputs: SeedMap = {}
    for name in fs.frame_names():
        frame = fs.frame(name)
        if frame.dof == 0:
            inputs[name] = []
        elif name in reported:
            inputs[name] = list(reported[name])
        else:
            raise FrameMissingError(name, details={"reason": "robot reported no inputs"})
    return inputs


def frame_steps_from_robot_path(
    frame_name: str,
    path: Sequence[Mapping[str, Sequence[float]]],
) -> list[list[float]]:
    """
    Extract one frame's inputs from each step of a plan.

    Raises:
        FrameMissingError: If a step has no entry for ``frame_name``
    """
    steps = []
    for step in path:
        if frame_name not in step:
            raise FrameMissingError(frame_name)
        steps.append(list(step[frame_name]))
    return steps


def _resolve_motion_configs(
    goals: Sequence[PoseInFrame],
    motion_configs: Sequence[MotionConfigLike],
) -> list[MotionConfig]:
    if len(motion_configs) == len(goals):
        configs = list(motion_configs)
    elif len(motion_configs) == 0:
        configs = [None] * len(goals)
    elif len(motion_configs) == 1:
        configs = [motion_configs[0]] * len(goals)
    else:
        raise ConfigurationError(
            "goals and motion configs had different lengths",
            details={"goals": len(goals), "motion_configs": len(motion_configs)},
        )
    return [MotionConfig.from_value(config) for config in configs]


def _motion_plan_internal(
    ctx: Optional[Context],
    goals: Sequence[PoseInFrame],
    frame: KinematicFrame,
    seed_map: Mapping[str, Sequence[float]],
    fs: FrameSystem,
    world_state: Optional[WorldState],
    motion_configs: Sequence[MotionConfigLike],
) -> list[SeedMap]:
    ctx = ctx or background()
    if len(goals) == 0:
        raise MotionPlanningError("no destinations passed to plan_waypoints")

    # Also verifies the frame is in the frame system
    solve_frame = fs.frame(frame.name)
    if solve_frame is None:
        raise FrameMissingError(frame.name)
    solve_frame_list = fs.traceback_frame(solve_frame)

    configs = _resolve_motion_configs(goals, motion_configs)

    steps: list[SeedMap] = []
    seed_map = {name: list(inputs) for name, inputs in seed_map.items()}

    # Each goal may be expressed in a different frame, so each gets its own solver frame
    for i, goal in enumerate(goals):
        logger = planning_logger(frame.name, i)

        sf = SolverFrame(fs, solve_frame_list, goal.parent, seed_map)
        if sf.dof == 0:
            raise NoDegreesOfFreedomError(details={"frame": frame.name, "goal_frame": goal.parent})
        seed = sf.map_to_slice(seed_map)
        start_pose = sf.transform(seed)

        logger.info(
            "planning_motion",
            goal_frame=goal.parent,
            goal_point=list(goal.pose.point),
            start_point=list(start_pose.point),
            seed_map=seed_map,
            world_state=world_state.to_dict() if world_state is not None else None,
        )
        logger.debug("motion_config", **configs[i].model_dump(exclude={"constraints"}))

        manager = PlanManager(sf, fs, logger, seed=i)
        result_slices = manager.plan_single_waypoint(
            ctx, seed_map, goal.pose, world_state, configs[i]
        )
        for result_slice in result_slices:
            steps.append(sf.slice_to_map(result_slice))
        if result_slices:
            seed_map = steps[-1]

    planning_logger(frame.name, len(goals) - 1).debug("final_plan_steps", steps=len(steps))
    return steps
