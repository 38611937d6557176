"""
Single-waypoint motion planners.

The generic Planner owns one IK solver and one options bundle and provides
the operations every planning algorithm builds on: collecting and ranking
IK solutions, validating states and straight-line segments, and shortcut
smoothing of finished paths. Algorithms implement ``plan`` on top of it and
are created through a PlannerConstructor so the orchestrator does not need
to know which one it is running.
"""

import queue
from abc import ABC, abstractmethod
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import numpy as np
import structlog
from compas.geometry import Frame

from axisplan.core.config import DEFAULT_SOLUTIONS_TO_SEED
from axisplan.core.context import Context
from axisplan.core.exceptions import (
    IKConstraintError,
    IKSolveError,
    KinematicsError,
    MotionPlanningError,
)
from axisplan.core.geometry import fix_ov_increment
from axisplan.core.logging import get_logger
from axisplan.kinematics.frame import KinematicFrame, interpolate_inputs
from axisplan.motion.constraints import ConstraintInput
from axisplan.motion.ik import InverseKinematics, create_combined_ik_solver
from axisplan.motion.nodes import BasicNode, CostNode, Node, rank_solutions
from axisplan.motion.options import PlannerOptions

# Seconds the drain loop waits on the candidate queue before re-checking
# cancellation and solver completion
POLL_INTERVAL = 0.01

# Fractions along an edge at which smoothing picks shortcut endpoints
SMOOTHING_WAYPOINTS = (0.25, 0.5, 0.75)


class MotionPlanner(ABC):
    """Contract shared by every single-waypoint planning algorithm."""

    @abstractmethod
    def plan(self, ctx: Context, goal: Frame, seed: Sequence[float]) -> list[list[float]]:
        """
        Plan from ``seed`` to a configuration reaching ``goal``.

        Returns:
            Ordered configurations, starting with the seed
        """

    @abstractmethod
    def smooth_path(self, ctx: Context, path: list[Node]) -> list[Node]:
        ...

    @abstractmethod
    def check_path(self, seed_inputs: Sequence[float], target: Sequence[float]) -> bool:
        ...

    @abstractmethod
    def check_inputs(self, inputs: Sequence[float]) -> bool:
        ...

    @abstractmethod
    def get_solutions(self, ctx: Context, goal: Frame, seed: Sequence[float]) -> list[CostNode]:
        ...

    @abstractmethod
    def opt(self) -> Optional[PlannerOptions]:
        ...


PlannerConstructor = Callable[
    [KinematicFrame, np.random.Generator, structlog.stdlib.BoundLogger, PlannerOptions],
    MotionPlanner,
]


class Planner(MotionPlanner):
    """
    Generic planner providing solution search, validation and smoothing.

    Subclasses supply ``plan``.
    """

    def __init__(
        self,
        frame: KinematicFrame,
        rng: np.random.Generator,
        logger: Optional[structlog.stdlib.BoundLogger],
        opts: Optional[PlannerOptions],
        solver: Optional[InverseKinematics] = None,
    ):
        """
        Initialize planner.

        Args:
            frame: Frame to plan for
            rng: Random source for solver seeds and smoothing
            logger: Logger (module logger if None)
            opts: Planner options
            solver: IK solver (combined scipy solver if None)
        """
        self.frame = frame
        self.rng = rng
        self.logger = logger or get_logger(__name__)
        self.plan_opts = opts
        num_threads = opts.num_threads if opts is not None else 1
        self.solver = solver or create_combined_ik_solver(frame, num_threads, log=self.logger)

    def opt(self) -> Optional[PlannerOptions]:
        return self.plan_opts

    def check_inputs(self, inputs: Sequence[float]) -> bool:
        """Check a single configuration against the constraints."""
        try:
            position = self.frame.transform(inputs)
        except KinematicsError:
            return False
        ok, _, _ = self.plan_opts.check_constraints(
            ConstraintInput(position, position, inputs, inputs, self.frame)
        )
        return ok

    def check_path(self, seed_inputs: Sequence[float], target: Sequence[float]) -> bool:
        """Check the straight-line motion from ``seed_inputs`` to ``target``."""
        ok, _ = self.plan_opts.check_constraint_path(
            ConstraintInput(None, None, seed_inputs, target, self.frame),
            self.plan_opts.resolution,
        )
        return ok

    def smooth_path(self, ctx: Context, path: list[Node]) -> list[Node]:
        """
        Shortcut a path by connecting points partway along two of its edges.

        Each iteration picks two edges, interpolates a waypoint on each and,
        if the straight motion between the waypoints is valid, replaces
        everything between them. Shortcuts are only spliced in after they
        pass ``check_path``. Cancellation returns the path as smoothed so
        far.
        """
        self.logger.debug("smoothing_path", length=len(path))
        if self.plan_opts is None:
            self.logger.debug("smoothing_skipped", reason="no options")
            return path
        if len(path) <= 2:
            self.logger.debug("smoothing_skipped", reason="path too short")
            return path

        for _ in range(self.plan_opts.smooth_iter):
            if ctx.done():
                return path
            # The first edge cannot start at either of the last two nodes
            first_edge = int(self.rng.integers(len(path) - 2))
            second_edge = first_edge + 1 + int(self.rng.integers((len(path) - 2) - first_edge))
            self.logger.debug("checking_shortcut", start=first_edge, end=second_edge + 1)

            waypoint1 = interpolate_inputs(
                path[first_edge].q,
                path[first_edge + 1].q,
                SMOOTHING_WAYPOINTS[int(self.rng.integers(3))],
            )
            waypoint2 = interpolate_inputs(
                path[second_edge].q,
                path[second_edge + 1].q,
                SMOOTHING_WAYPOINTS[int(self.rng.integers(3))],
            )

            if self.check_path(waypoint1, waypoint2):
                path = (
                    path[: first_edge + 1]
                    + [BasicNode.from_inputs(waypoint1), BasicNode.from_inputs(waypoint2)]
                    + path[second_edge + 1 :]
                )
        return path

    def get_solutions(self, ctx: Context, goal: Frame, seed: Sequence[float]) -> list[CostNode]:
        """
        Run the IK solver for ``goal`` and collect solutions that pass constraints.

        Collection stops once ``max_solutions`` distinct-cost solutions are
        held, or at the first solution scoring below a positive
        ``min_score`` (which is then returned alone), or when the solver is
        exhausted. The solver runs in its own thread and has always finished
        by the time this returns.

        Returns:
            Solutions ordered by ascending cost

        Raises:
            PlanningCancelledError: If ``ctx`` is canceled during the search
            IKSolveError: If the solver produced no candidates
            IKConstraintError: If every candidate failed constraints
        """
        n_solutions = self.plan_opts.max_solutions or DEFAULT_SOLUTIONS_TO_SEED

        seed_pos = self.frame.transform(seed)
        goal_pos = fix_ov_increment(goal, seed_pos)

        solution_gen: queue.Queue = queue.Queue()
        solver_ctx = ctx.with_cancel()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ik-solver")
        ik_done = executor.submit(
            self.solver.solve,
            solver_ctx,
            solution_gen,
            goal_pos,
            list(seed),
            self.plan_opts.metric,
            int(self.rng.integers(2**31)),
        )

        solutions: dict[float, list[float]] = {}
        failures: Counter[str] = Counter()
        constraint_fail_cnt = 0

        try:
            while True:
                if ctx.done():
                    raise ctx.err()

                try:
                    step = solution_gen.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    # A caller cancel also stops the solver; report it, not exhaustion
                    if ctx.done():
                        raise ctx.err()
                    # Anything put before completion is visible once the future is done
                    if ik_done.done() and solution_gen.empty():
                        break
                    continue

                c_pass, c_score, fail_name = self.plan_opts.check_constraints(
                    ConstraintInput(seed_pos, goal_pos, seed, step, self.frame)
                )
                if c_pass:
                    # The first check only validates the start state; check the candidate itself
                    c_pass, _, fail_name = self.plan_opts.check_constraints(
                        ConstraintInput(goal_pos, goal_pos, step, step, self.frame)
                    )
                if not c_pass:
                    constraint_fail_cnt += 1
                    failures[fail_name] += 1
                    continue

                c_score = float(c_score)
                if 0 < self.plan_opts.min_score and c_score < self.plan_opts.min_score:
                    solutions = {c_score: step}
                    self.logger.debug("ik_solution_good_enough", score=c_score)
                    break

                solutions[c_score] = step
                if len(solutions) >= n_solutions:
                    break
        finally:
            solver_ctx.cancel()
            executor.shutdown(wait=True)

        solver_error = ik_done.exception()
        if solver_error is not None:
            self.logger.warning("ik_solver_failed", error=str(solver_error))

        if not solutions:
            if constraint_fail_cnt == 0:
                raise IKSolveError() from solver_error
            raise IKConstraintError(dict(failures), constraint_fail_cnt)

        self.logger.debug(
            "ik_solutions_collected",
            count=len(solutions),
            constraint_failures=constraint_fail_cnt,
        )
        return rank_solutions(solutions)


class DirectPlanner(Planner):
    """
    Baseline planner: move straight to the best reachable IK solution.

    Ranked solutions are tried cheapest first and the first one whose
    straight-line motion from the seed is valid is returned.
    """

    def plan(self, ctx: Context, goal: Frame, seed: Sequence[float]) -> list[list[float]]:
        solutions = self.get_solutions(ctx, goal, seed)
        for solution in solutions:
            if ctx.done():
                raise ctx.err()
            if self.check_path(seed, solution.q):
                self.logger.debug("direct_path_found", cost=solution.cost)
                return [list(seed), solution.q]
        raise MotionPlanningError(
            "no IK solution is reachable by direct interpolation",
            details={"solutions": len(solutions)},
        )


def new_direct_planner(
    frame: KinematicFrame,
    rng: np.random.Generator,
    logger: structlog.stdlib.BoundLogger,
    opts: PlannerOptions,
) -> MotionPlanner:
    """PlannerConstructor for DirectPlanner."""
    return DirectPlanner(frame, rng, logger, opts)
