"""
Launch Strategies
=================
Policy layer choosing one solution for the caller:

  - MinTimeLaunch: throw as soon as physically possible
  - ArcLaunch:     aim for a fixed apex height, falling back to the
                    closest searched flight time when that arc is out of
                    reach

Strategies hold no mutable state; one instance can serve any number of
agents.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

from .config import ArcLaunchConfig, SolverConfig, DEFAULT_SOLVER_CONFIG
from .models import LaunchParams, InterceptSolution
from .solver import build_solution, solve_intercept

logger = logging.getLogger(__name__)


def ideal_arc_time(arc_height: float, gravity: float) -> float:
    """
    Flight time of a symmetric parabola with apex ``arc_height``.

    h = g T² / 8  →  T = √(8h / g)
    """
    return math.sqrt(8.0 * arc_height / gravity)


class LaunchStrategy(ABC):
    """Picks a single launch solution for a decision."""

    kind: str = ""

    @abstractmethod
    def solve(self, params: LaunchParams,
              config: SolverConfig = DEFAULT_SOLVER_CONFIG) -> Optional[InterceptSolution]:
        ...


class MinTimeLaunch(LaunchStrategy):
    """Shortest feasible flight time."""

    kind = "min-time"

    def solve(self, params: LaunchParams,
              config: SolverConfig = DEFAULT_SOLVER_CONFIG) -> Optional[InterceptSolution]:
        return solve_intercept(params, config).best_solution

    def __repr__(self) -> str:
        return "MinTimeLaunch()"


class ArcLaunch(LaunchStrategy):
    """Fixed parabola apex height with graceful fallback."""

    kind = "arc"

    def __init__(self, arc_config: ArcLaunchConfig):
        self.arc_config = arc_config

    @property
    def arc_height(self) -> float:
        return self.arc_config.arc_height

    def solve(self, params: LaunchParams,
              config: SolverConfig = DEFAULT_SOLVER_CONFIG) -> Optional[InterceptSolution]:
        ideal_t = ideal_arc_time(self.arc_height, params.gravity)

        # Fast path: the ideal arc is already within the speed limit
        direct = build_solution(params, ideal_t)
        if direct.valid:
            logger.debug("Arc %.2f m: ideal T=%.4f s within limit (%.3f m/s)",
                         self.arc_height, ideal_t, direct.speed)
            return direct

        result = solve_intercept(params, config)
        if not result.solutions:
            logger.debug("Arc %.2f m: ideal T=%.4f s too fast and no fallback",
                         self.arc_height, ideal_t)
            return None

        closest = result.solutions[0]
        closest_diff = abs(closest.flight_time - ideal_t)
        for solution in result.solutions[1:]:
            diff = abs(solution.flight_time - ideal_t)
            if diff < closest_diff:
                closest = solution
                closest_diff = diff

        logger.debug("Arc %.2f m: ideal T=%.4f s needs %.3f m/s, fell back to T=%.4f s",
                     self.arc_height, ideal_t, direct.speed, closest.flight_time)
        return closest

    def __repr__(self) -> str:
        return f"ArcLaunch(arc_height={self.arc_height})"


def create_arc_launch(arc_config: ArcLaunchConfig) -> ArcLaunch:
    return ArcLaunch(arc_config)


MIN_TIME_LAUNCH = MinTimeLaunch()
