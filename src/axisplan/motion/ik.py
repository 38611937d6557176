"""
Inverse kinematics solvers that stream candidate configurations.

Solvers push every configuration they find onto a queue until they run out
of attempts or their context is canceled, so planners can start vetting
candidates while the search is still running.
"""

import math
import queue
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import numpy as np
from compas.geometry import Frame
from scipy.optimize import minimize

from axisplan.core.context import Context
from axisplan.core.exceptions import KinematicsError
from axisplan.core.logging import get_logger
from axisplan.kinematics.frame import KinematicFrame

logger = get_logger(__name__)

Metric = Callable[[Frame, Frame], float]

# Objective value reported when the frame cannot be transformed
_FK_FAILURE_COST = 1e6


class InverseKinematics(ABC):
    """Abstract base class for streaming IK solvers."""

    @abstractmethod
    def solve(
        self,
        ctx: Context,
        solutions: queue.Queue,
        goal: Frame,
        seed: Sequence[float],
        metric: Metric,
        rseed: int,
    ) -> None:
        """
        Search for configurations reaching ``goal`` and put them on ``solutions``.

        Must return promptly once ``ctx`` is done and must not put anything
        on the queue after returning.
        """


class ScipyIKSolver(InverseKinematics):
    """
    IK solver using scipy's bounded L-BFGS-B minimizer with random restarts.

    The first attempt starts from the seed (unless ``seed_first`` is False);
    later attempts start from random configurations within the joint limits.
    """

    def __init__(
        self,
        frame: KinematicFrame,
        attempts: int = 100,
        max_iterations: int = 200,
        epsilon: float = 1e-6,
        seed_first: bool = True,
    ):
        """
        Initialize IK solver.

        Args:
            frame: Frame whose inputs are solved for
            attempts: Number of minimizations before giving up
            max_iterations: Iteration cap for each minimization
            epsilon: Metric value below which a result counts as a solution
            seed_first: Start the first attempt from the seed
        """
        self.frame = frame
        self.attempts = attempts
        self.max_iterations = max_iterations
        self.epsilon = epsilon
        self.seed_first = seed_first

        self.bounds = [(limit.min, limit.max) for limit in frame.limits]
        # Random restarts need finite ranges
        self._sample_low = np.array([max(lo, -math.pi) for lo, _ in self.bounds])
        self._sample_high = np.array([min(hi, math.pi) for _, hi in self.bounds])

    def solve(
        self,
        ctx: Context,
        solutions: queue.Queue,
        goal: Frame,
        seed: Sequence[float],
        metric: Metric,
        rseed: int,
    ) -> None:
        rng = np.random.default_rng(rseed)
        lows = np.array([lo for lo, _ in self.bounds])
        highs = np.array([hi for _, hi in self.bounds])

        def objective(values: np.ndarray) -> float:
            try:
                return metric(self.frame.transform(values.tolist()), goal)
            except KinematicsError:
                return _FK_FAILURE_COST

        for attempt in range(self.attempts):
            if ctx.done():
                return
            if attempt == 0 and self.seed_first:
                x0 = np.clip(np.asarray(seed, dtype=float), lows, highs)
            else:
                x0 = rng.uniform(self._sample_low, self._sample_high)

            result = minimize(
                objective,
                x0,
                method="L-BFGS-B",
                bounds=self.bounds,
                options={"maxiter": self.max_iterations},
            )
            if result.fun < self.epsilon:
                if ctx.done():
                    return
                solutions.put(result.x.tolist())


class CombinedIKSolver(InverseKinematics):
    """
    Runs several IK solvers in parallel, all feeding the same queue.

    Only the first worker starts from the seed; the others go straight to
    random restarts so they explore different parts of the space.
    """

    def __init__(
        self,
        solvers: Sequence[InverseKinematics],
        log: Optional[object] = None,
    ):
        if not solvers:
            raise ValueError("CombinedIKSolver needs at least one solver")
        self.solvers = list(solvers)
        self.logger = log or logger

    def solve(
        self,
        ctx: Context,
        solutions: queue.Queue,
        goal: Frame,
        seed: Sequence[float],
        metric: Metric,
        rseed: int,
    ) -> None:
        rng = np.random.default_rng(rseed)
        with ThreadPoolExecutor(
            max_workers=len(self.solvers), thread_name_prefix="ik-worker"
        ) as pool:
            futures = [
                pool.submit(
                    solver.solve, ctx, solutions, goal, seed, metric, int(rng.integers(2**31))
                )
                for solver in self.solvers
            ]

        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors and len(errors) == len(futures):
            raise errors[0]
        for error in errors:
            self.logger.warning("ik_worker_failed", error=str(error))


def create_combined_ik_solver(
    frame: KinematicFrame,
    num_threads: int,
    log: Optional[object] = None,
) -> CombinedIKSolver:
    """
    Build a CombinedIKSolver with ``num_threads`` scipy workers for ``frame``.

    Args:
        frame: Frame to solve for
        num_threads: Number of parallel workers (at least one is created)
        log: Logger for worker failures

    Returns:
        CombinedIKSolver instance
    """
    workers = [
        ScipyIKSolver(frame, seed_first=(i == 0)) for i in range(max(num_threads, 1))
    ]
    return CombinedIKSolver(workers, log=log)
