"""
Solver Configuration
====================
Immutable configuration values and physical defaults.

The shared ``DEFAULT_SOLVER_CONFIG`` is constructed once here and passed
by parameter; callers wanting more precision build their own
``SolverConfig`` (or load one from JSON) and pass that instead.

Sample cost per solve:
    phase 1 ≈ (max_time - min_time) / coarse_step
    phase 2 ≈ Σ feasible interval length / fine_step
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union


# ── Environment defaults ──────────────────────────────────────────────────
GRAVITY = 9.81          # m/s²  game-world gravity magnitude
DEFAULT_DAMPING = 0.0   # 1/s   linear air damping


@dataclass(frozen=True)
class SolverConfig:
    """
    Search granularity for the intercept solver.
    """
    coarse_step: float = 0.05        # s  phase 1 sampling step
    fine_step: float = 0.005         # s  phase 2 sampling step
    min_time: float = 0.1            # s  shortest flight time searched
    max_time: float = 5.0            # s  longest flight time searched
    bisect_iterations: int = 10      # fixed halvings per boundary

    # Candidate times closer than this collapse to one solution. A
    # tie-breaking knob, not a uniqueness guarantee.
    dedup_resolution: float = 0.001  # s

    def __post_init__(self):
        if not self.coarse_step > 0:
            raise ValueError(f"coarse_step must be > 0, got {self.coarse_step}")
        if not 0 < self.fine_step <= self.coarse_step:
            raise ValueError(
                f"fine_step must be in (0, coarse_step={self.coarse_step}], "
                f"got {self.fine_step}"
            )
        if not 0 <= self.min_time < self.max_time:
            raise ValueError(
                f"Need 0 <= min_time < max_time, got "
                f"min_time={self.min_time}, max_time={self.max_time}"
            )
        if int(self.bisect_iterations) != self.bisect_iterations or self.bisect_iterations < 1:
            raise ValueError(
                f"bisect_iterations must be an integer >= 1, got {self.bisect_iterations}"
            )
        # JSON may hand over 16.0 for 16
        object.__setattr__(self, 'bisect_iterations', int(self.bisect_iterations))
        if not self.dedup_resolution > 0:
            raise ValueError(
                f"dedup_resolution must be > 0, got {self.dedup_resolution}"
            )

    @property
    def coarse_sample_count(self) -> int:
        """Approximate number of phase 1 samples."""
        return int((self.max_time - self.min_time) / self.coarse_step) + 1


@dataclass(frozen=True)
class ArcLaunchConfig:
    """Apex height for the fixed-arc launch strategy."""
    arc_height: float  # m  apex above the launch/landing height

    def __post_init__(self):
        if not self.arc_height > 0:
            raise ValueError(f"arc_height must be > 0, got {self.arc_height}")


DEFAULT_SOLVER_CONFIG = SolverConfig()


def solver_config_from_dict(data: Dict[str, Any],
                            base: SolverConfig = DEFAULT_SOLVER_CONFIG) -> SolverConfig:
    """Overlay the given fields on ``base``. Unknown keys are rejected."""
    known = {f.name for f in fields(SolverConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown solver config keys: {unknown}. Available: {sorted(known)}"
        )

    overrides: Dict[str, Any] = {}
    for key, value in data.items():
        if key == 'bisect_iterations':
            overrides[key] = value
        else:
            overrides[key] = float(value)
    return replace(base, **overrides)


def load_solver_config(path: Union[str, Path]) -> SolverConfig:
    """Load a ``SolverConfig`` from a JSON object of field overrides."""
    content = Path(path).read_text(encoding="utf-8")
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError(f"Solver config in {path} must be a JSON object")
    return solver_config_from_dict(data)
