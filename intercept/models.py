"""
Launch & Solution Models
========================
Value types exchanged with the caller:
  - LaunchParams:      one throw/shot decision (built fresh per decision)
  - InterceptSolution: launch velocity for one flight time
  - SolverResult:      ranked feasible solutions plus the default pick
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .config import DEFAULT_DAMPING
from .target import MovingTarget
from .vector import Vec3


@dataclass(frozen=True)
class LaunchParams:
    """
    Everything the solver needs about one launch decision.
    """
    launch_pos: Vec3
    target: MovingTarget
    max_speed: float                   # m/s  launcher speed limit (> 0)
    gravity: float                     # m/s² magnitude (> 0)
    damping: float = DEFAULT_DAMPING   # 1/s  linear damping (>= 0)


@dataclass(frozen=True)
class InterceptSolution:
    """Launch velocity that meets the target after ``flight_time``."""
    launch_velocity: Vec3
    intercept_pos: Vec3
    flight_time: float   # s
    speed: float         # m/s  |launch_velocity|
    valid: bool          # speed <= max_speed

    @property
    def horizontal_speed(self) -> float:
        return self.launch_velocity.horizontal.length()


@dataclass(frozen=True)
class SolverResult:
    """Feasible solutions ascending by flight time."""
    solutions: Tuple[InterceptSolution, ...] = ()
    best_solution: Optional[InterceptSolution] = None

    @property
    def found(self) -> bool:
        return self.best_solution is not None

    def summary(self) -> str:
        """Human-readable table of the candidate solutions."""
        if not self.solutions:
            return "  No feasible interception in the searched time window."

        lines = [
            f"  {'':2}{'T (s)':>8} {'|v0| (m/s)':>11} {'vx':>8} {'vy':>8} {'vz':>8}"
            f"   {'intercept (x, y, z)':<24}",
        ]
        for sol in self.solutions:
            mark = '★' if sol is self.best_solution else ' '
            v = sol.launch_velocity
            p = sol.intercept_pos
            lines.append(
                f"  {mark:2}{sol.flight_time:>8.3f} {sol.speed:>11.3f} "
                f"{v.x:>8.2f} {v.y:>8.2f} {v.z:>8.2f}"
                f"   ({p.x:.2f}, {p.y:.2f}, {p.z:.2f})"
            )
        return '\n'.join(lines)
