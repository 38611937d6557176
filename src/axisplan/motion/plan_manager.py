"""
Per-waypoint plan management and the registry of planning algorithms.
"""

from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np
import structlog
from compas.geometry import Frame

from axisplan.core.config import MotionConfig
from axisplan.core.context import Context
from axisplan.core.exceptions import ConfigurationError
from axisplan.core.logging import get_logger
from axisplan.kinematics.frame_system import FrameSystem, WorldState
from axisplan.motion.constraints import (
    ConstraintHandler,
    joint_distance_constraint,
    joint_limits_constraint,
)
from axisplan.motion.nodes import BasicNode
from axisplan.motion.options import PlannerOptions
from axisplan.motion.planner import PlannerConstructor, new_direct_planner
from axisplan.motion.solver_frame import SolverFrame

_PLANNERS: dict[str, PlannerConstructor] = {
    "direct": new_direct_planner,
}


def register_planner(name: str, constructor: PlannerConstructor) -> None:
    """
    Register a planning algorithm under ``name``.

    Motion configs select it with ``planning_alg``. Registering an existing
    name replaces it.
    """
    _PLANNERS[name] = constructor


def get_planner_constructor(name: str) -> PlannerConstructor:
    """
    Look up a registered planning algorithm.

    Raises:
        ConfigurationError: If no algorithm is registered under ``name``
    """
    if name not in _PLANNERS:
        raise ConfigurationError(
            f"Planning algorithm not found: {name}",
            details={"available": sorted(_PLANNERS)},
        )
    return _PLANNERS[name]


class PlanManager:
    """
    Plans one waypoint for a solver frame.

    A manager is created per goal. Its random source is seeded from the
    goal's index so repeated requests plan identically.
    """

    def __init__(
        self,
        frame: SolverFrame,
        fs: FrameSystem,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        seed: int = 0,
    ):
        self.frame = frame
        self.fs = fs
        self.logger = logger or get_logger(__name__)
        self.rng = np.random.default_rng(seed)

    def plan_options(
        self,
        config: MotionConfig,
        world_state: Optional[WorldState] = None,
    ) -> PlannerOptions:
        """
        Build planner options for one waypoint.

        Joint limits and a seed-distance score are always applied; the
        config's own constraints are added on top.
        """
        handler = ConstraintHandler()
        handler.add_constraint("joint_limits", joint_limits_constraint)
        handler.add_constraint("joint_distance", joint_distance_constraint)
        if world_state is not None:
            self.logger.debug("world_state_attached", **world_state.to_dict())
        return PlannerOptions.from_motion_config(config, handler)

    def plan_single_waypoint(
        self,
        ctx: Context,
        seed_map: Mapping[str, Sequence[float]],
        goal: Frame,
        world_state: Optional[WorldState],
        motion_config: Union[MotionConfig, dict[str, Any], None],
    ) -> list[list[float]]:
        """
        Plan from the seed map to ``goal`` and smooth the result.

        Returns:
            Ordered solver-frame configurations, starting with the seed
        """
        config = MotionConfig.from_value(motion_config)
        opts = self.plan_options(config, world_state)
        constructor = get_planner_constructor(config.planning_alg)

        seed = self.frame.map_to_slice(seed_map)
        planner_rng = np.random.default_rng(int(self.rng.integers(2**31)))
        planner = constructor(self.frame, planner_rng, self.logger, opts)

        plan_ctx = ctx.with_timeout(opts.timeout)
        try:
            steps = planner.plan(plan_ctx, goal, seed)
            nodes = planner.smooth_path(plan_ctx, [BasicNode.from_inputs(step) for step in steps])
        finally:
            plan_ctx.cancel()

        self.logger.debug("waypoint_planned", steps=len(nodes), algorithm=config.planning_alg)
        return [node.q for node in nodes]
