"""
Validation Against Reference Scenarios
======================================
Runs the solver on a table of representative passes and shots, re-flies
each chosen launch velocity with the RK4 integrator, and checks that:

  - a solution is found exactly when one is expected
  - the launch speed respects the launcher limit
  - the integrated ball lands on the predicted intercept point

Reference scenarios use game-court units (metres, seconds) and the
game-world gravity of 9.81 m/s².
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import GRAVITY, ArcLaunchConfig, SolverConfig, DEFAULT_SOLVER_CONFIG
from .models import LaunchParams
from .strategy import ArcLaunch, LaunchStrategy, MIN_TIME_LAUNCH
from .target import MovingTarget
from .trajectory import simulate_rk4
from .vector import Vec3


# ══════════════════════════════════════════════════════════════════════════
#  Reference scenarios
# ══════════════════════════════════════════════════════════════════════════

CHEST_PASS = {
    'name': 'Chest pass, stationary receiver',
    'launch_pos': Vec3(0.0, 1.5, 0.0),
    'target': MovingTarget(Vec3(8.0, 1.5, 0.0)),
    'max_speed': 15.0,
    'damping': 0.0,
    'arc_height': None,
    'expect_feasible': True,
}

LEAD_PASS = {
    'name': 'Lead pass, cutting receiver',
    'launch_pos': Vec3(0.0, 1.5, 0.0),
    'target': MovingTarget(Vec3(6.0, 1.5, -4.0), Vec3(0.0, 0.0, 4.0)),
    'max_speed': 14.0,
    'damping': 0.0,
    'arc_height': None,
    'expect_feasible': True,
}

DAMPED_LOB = {
    'name': 'Damped lob, 3 m arc',
    'launch_pos': Vec3(0.0, 2.0, 0.0),
    'target': MovingTarget(Vec3(12.0, 2.0, 3.0), Vec3(-1.0, 0.0, 0.0)),
    'max_speed': 18.0,
    'damping': 0.3,
    'arc_height': 3.0,
    'expect_feasible': True,
}

ACCELERATING_CUTTER = {
    'name': 'Accelerating cutter',
    'launch_pos': Vec3(0.0, 2.0, 0.0),
    'target': MovingTarget(Vec3(5.0, 1.2, 0.0), Vec3(1.0, 0.0, 2.0),
                           Vec3(0.0, 0.0, 1.5)),
    'max_speed': 16.0,
    'damping': 0.1,
    'arc_height': None,
    'expect_feasible': True,
}

OUT_OF_RANGE = {
    'name': 'Out-of-range shot',
    'launch_pos': Vec3(0.0, 2.0, 0.0),
    'target': MovingTarget(Vec3(60.0, 3.05, 0.0)),
    'max_speed': 8.0,
    'damping': 0.0,
    'arc_height': None,
    'expect_feasible': False,
}

ALL_SCENARIOS = [CHEST_PASS, LEAD_PASS, DAMPED_LOB, ACCELERATING_CUTTER, OUT_OF_RANGE]

# Integrated landing point must match the predicted intercept this closely (m)
MISS_TOLERANCE = 1e-3


@dataclass
class ValidationResult:
    """Result of one scenario check."""
    name: str
    strategy: str
    expect_feasible: bool
    found: bool
    flight_time: Optional[float]     # s
    speed: Optional[float]           # m/s
    max_speed: float                 # m/s
    miss_distance: Optional[float]   # m, RK4 landing vs intercept point
    passed: bool

    @property
    def speed_margin(self) -> Optional[float]:
        if self.speed is None:
            return None
        return self.max_speed - self.speed


def scenario_params(scenario: dict, gravity: float = GRAVITY) -> LaunchParams:
    return LaunchParams(
        launch_pos=scenario['launch_pos'],
        target=scenario['target'],
        max_speed=scenario['max_speed'],
        gravity=gravity,
        damping=scenario['damping'],
    )


def scenario_strategy(scenario: dict) -> LaunchStrategy:
    if scenario.get('arc_height'):
        return ArcLaunch(ArcLaunchConfig(scenario['arc_height']))
    return MIN_TIME_LAUNCH


def validate_scenario(scenario: dict,
                      config: SolverConfig = DEFAULT_SOLVER_CONFIG,
                      dt: float = 0.01) -> ValidationResult:
    """Solve one scenario and re-fly the chosen launch with RK4."""
    params = scenario_params(scenario)
    strategy = scenario_strategy(scenario)
    solution = strategy.solve(params, config)

    if solution is None:
        return ValidationResult(
            name=scenario['name'],
            strategy=strategy.kind,
            expect_feasible=scenario['expect_feasible'],
            found=False,
            flight_time=None,
            speed=None,
            max_speed=params.max_speed,
            miss_distance=None,
            passed=not scenario['expect_feasible'],
        )

    flight = simulate_rk4(params.launch_pos, solution.launch_velocity,
                          solution.flight_time, params.gravity, params.damping,
                          dt=dt)
    miss = flight.final_position.distance_to(solution.intercept_pos)

    passed = (scenario['expect_feasible']
              and solution.speed <= params.max_speed
              and miss <= MISS_TOLERANCE)

    return ValidationResult(
        name=scenario['name'],
        strategy=strategy.kind,
        expect_feasible=scenario['expect_feasible'],
        found=True,
        flight_time=solution.flight_time,
        speed=solution.speed,
        max_speed=params.max_speed,
        miss_distance=miss,
        passed=passed,
    )


def validate_scenarios(scenarios: List[dict] = None,
                       config: SolverConfig = DEFAULT_SOLVER_CONFIG,
                       dt: float = 0.01,
                       verbose: bool = True) -> List[ValidationResult]:
    """
    Run every scenario and compare against expectations.

    Returns list of ValidationResult, one per scenario.
    """
    if scenarios is None:
        scenarios = ALL_SCENARIOS

    results = [validate_scenario(s, config, dt) for s in scenarios]

    if verbose:
        print(f"\n{'='*86}")
        print(f"  VALIDATION: {len(results)} reference scenarios (RK4 dt={dt} s)")
        print(f"{'='*86}")
        print(f"{'Scenario':<34} {'Strategy':>9} {'T (s)':>7} {'|v0|':>7} "
              f"{'Margin':>7} {'Miss (m)':>10} {'Status':>7}")
        print("-" * 86)
        for r in results:
            if r.found:
                print(f"{r.name:<34} {r.strategy:>9} {r.flight_time:>7.3f} "
                      f"{r.speed:>7.2f} {r.speed_margin:>+7.2f} "
                      f"{r.miss_distance:>10.2e} {'✓' if r.passed else '✗':>7}")
            else:
                print(f"{r.name:<34} {r.strategy:>9} {'—':>7} {'—':>7} "
                      f"{'—':>7} {'no shot':>10} {'✓' if r.passed else '✗':>7}")
        print("-" * 86)
        misses = [r.miss_distance for r in results if r.miss_distance is not None]
        if misses:
            print(f"  Mean miss distance: {np.mean(misses):.2e} m | "
                  f"Worst: {np.max(misses):.2e} m")
        status = "✓ PASS" if all(r.passed for r in results) else "✗ FAIL"
        print(f"  Status: {status}")
        print(f"{'='*86}\n")

    return results


def run_all_validations(verbose: bool = True) -> Dict[str, ValidationResult]:
    """Run validation over all reference scenarios, keyed by name."""
    return {r.name: r for r in validate_scenarios(verbose=verbose)}


if __name__ == "__main__":
    run_all_validations(verbose=True)
