"""
Intercept Solver
================
Searches the flight-time domain [min_time, max_time] for launch
velocities whose magnitude stays within the launcher's maximum speed.

1. **Coarse scan**: sample the required speed every ``coarse_step`` and
   detect feasible runs with a two-state machine (SEARCHING /
   IN_FEASIBLE_RUN). Each run boundary is refined by fixed-iteration
   bisection between the neighbouring samples.
2. **Fine scan**: walk each feasible interval every ``fine_step`` to find
   the minimum-speed flight time, and note the earliest feasible time.
3. **Candidates**: earliest time, minimum speed and every feasible
   interval boundary, de-duplicated on a rounded time key and sorted by
   flight time. The shortest flight is the default pick.

Deterministic and stateless: identical inputs give identical results, and
nothing here raises for degenerate numerics; "no interception" is an
empty ``SolverResult``.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import SolverConfig, DEFAULT_SOLVER_CONFIG
from .launch import compute_launch_velocity
from .models import LaunchParams, InterceptSolution, SolverResult
from .target import predict_position
from .vector import ZERO

logger = logging.getLogger(__name__)

SpeedFunction = Callable[[float], float]


class ScanState(enum.Enum):
    SEARCHING = "searching"
    IN_FEASIBLE_RUN = "in_feasible_run"


@dataclass(frozen=True)
class FeasibleInterval:
    """Contiguous flight-time range whose required speed is within limits."""
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


# ══════════════════════════════════════════════════════════════════════════
#  Per-sample evaluation
# ══════════════════════════════════════════════════════════════════════════

def required_speed(params: LaunchParams, flight_time: float) -> float:
    """
    Launch speed needed to meet the target after ``flight_time``.

    Non-positive flight times are unreachable at any speed (infinity).
    """
    if flight_time <= 0:
        return math.inf
    intercept_pos = predict_position(params.target, flight_time)
    v0 = compute_launch_velocity(params.launch_pos, intercept_pos, flight_time,
                                 params.gravity, params.damping)
    return v0.length()


def build_solution(params: LaunchParams, flight_time: float) -> InterceptSolution:
    intercept_pos = predict_position(params.target, flight_time)
    if flight_time <= 0:
        return InterceptSolution(launch_velocity=ZERO, intercept_pos=intercept_pos,
                                 flight_time=flight_time, speed=math.inf,
                                 valid=False)

    v0 = compute_launch_velocity(params.launch_pos, intercept_pos, flight_time,
                                 params.gravity, params.damping)
    speed = v0.length()
    return InterceptSolution(
        launch_velocity=v0,
        intercept_pos=intercept_pos,
        flight_time=flight_time,
        speed=speed,
        valid=speed <= params.max_speed,
    )


# ══════════════════════════════════════════════════════════════════════════
#  Phase 1: coarse scan & interval detection
# ══════════════════════════════════════════════════════════════════════════

def bisect_boundary(speed_fn: SpeedFunction, max_speed: float,
                    t_feasible: float, t_infeasible: float,
                    iterations: int) -> float:
    """
    Locate the feasibility boundary between two samples.

    Fixed number of halvings with no tolerance check, so the cost is the
    same on every call. Returns the feasible-side bound.
    """
    lo, hi = t_feasible, t_infeasible
    for _ in range(iterations):
        mid = 0.5 * (lo + hi)
        if speed_fn(mid) <= max_speed:
            lo = mid
        else:
            hi = mid
    return lo


def find_feasible_intervals(speed_fn: SpeedFunction, max_speed: float,
                            config: SolverConfig = DEFAULT_SOLVER_CONFIG
                            ) -> List[FeasibleInterval]:
    """
    Coarse scan of [min_time, max_time] for runs with speed <= max_speed.

    Parameters
    ----------
    speed_fn : callable
        Required launch speed as a function of flight time
    max_speed : float
        Speed limit (m/s)
    config : SolverConfig
        Scan range, step and bisection depth

    Returns
    -------
    list of FeasibleInterval
        In ascending time order
    """
    intervals: List[FeasibleInterval] = []
    state = ScanState.SEARCHING
    run_start = config.min_time
    previous_t: Optional[float] = None

    t = config.min_time
    while t <= config.max_time:
        feasible = speed_fn(t) <= max_speed

        if state is ScanState.SEARCHING and feasible:
            if previous_t is None:
                run_start = t
            else:
                run_start = bisect_boundary(speed_fn, max_speed, t, previous_t,
                                            config.bisect_iterations)
            state = ScanState.IN_FEASIBLE_RUN

        elif state is ScanState.IN_FEASIBLE_RUN and not feasible:
            run_end = bisect_boundary(speed_fn, max_speed, previous_t, t,
                                      config.bisect_iterations)
            intervals.append(FeasibleInterval(run_start, run_end))
            state = ScanState.SEARCHING

        previous_t = t
        t += config.coarse_step

    if state is ScanState.IN_FEASIBLE_RUN:
        intervals.append(FeasibleInterval(run_start, config.max_time))

    return intervals


# ══════════════════════════════════════════════════════════════════════════
#  Phase 2: fine scan & candidate construction
# ══════════════════════════════════════════════════════════════════════════

def _time_key(flight_time: float, resolution: float) -> int:
    # Round half up, e.g. to the nearest millisecond
    return math.floor(flight_time / resolution + 0.5)


def solve_intercept(params: LaunchParams,
                    config: SolverConfig = DEFAULT_SOLVER_CONFIG) -> SolverResult:
    """
    Find feasible launch solutions against a (possibly moving) target.

    Returns an empty ``SolverResult`` when no flight time in the searched
    window is reachable within ``params.max_speed``.
    """
    def speed_fn(t: float) -> float:
        return required_speed(params, t)

    intervals = find_feasible_intervals(speed_fn, params.max_speed, config)
    if not intervals:
        logger.debug("No feasible interval in [%.3f, %.3f] s for max_speed=%.3f",
                     config.min_time, config.max_time, params.max_speed)
        return SolverResult(solutions=(), best_solution=None)

    logger.debug("Feasible intervals: %s",
                 ", ".join(f"[{iv.start:.4f}, {iv.end:.4f}]" for iv in intervals))

    # ── Fine scan ─────────────────────────────────────────────────────────
    min_speed_t: Optional[float] = None
    min_speed = math.inf
    earliest_t = math.inf

    for interval in intervals:
        earliest_t = min(earliest_t, interval.start)

        t = interval.start
        while t <= interval.end:
            speed = speed_fn(t)
            if speed < min_speed:
                min_speed = speed
                min_speed_t = t
            t += config.fine_step

    # ── Candidates ────────────────────────────────────────────────────────
    resolution = config.dedup_resolution
    solutions: List[InterceptSolution] = [build_solution(params, earliest_t)]
    added_keys: List[int] = [_time_key(earliest_t, resolution)]

    if min_speed_t is not None and min_speed_t > 0:
        key = _time_key(min_speed_t, resolution)
        if key not in added_keys:
            solutions.append(build_solution(params, min_speed_t))
            added_keys.append(key)

    for interval in intervals:
        for t in (interval.start, interval.end):
            key = _time_key(t, resolution)
            if key in added_keys:
                continue
            solution = build_solution(params, t)
            if solution.valid:
                solutions.append(solution)
                added_keys.append(key)

    solutions.sort(key=lambda s: s.flight_time)
    return SolverResult(solutions=tuple(solutions), best_solution=solutions[0])
