"""
Ballistic Intercept Solver
==========================
Computes the launch velocity a thrown or shot ball needs to meet a moving
target under constant gravity and optional linear air damping, within a
launcher's maximum speed:
  - Vector math and kinematic target prediction
  - Closed-form launch velocity (with and without damping)
  - Flight-time search with bisection-refined feasible windows
  - Launch strategies: earliest time, fixed arc height

Supporting tools re-fly solutions (analytic, Euler, RK4), score hit
accuracy, validate reference scenarios and plot the results.
"""

from .vector import Vec3, ZERO, UP
from .target import MovingTarget, predict_position
from .launch import compute_launch_velocity, damping_factor
from .config import (
    SolverConfig, ArcLaunchConfig, DEFAULT_SOLVER_CONFIG, GRAVITY,
    load_solver_config, solver_config_from_dict,
)
from .models import LaunchParams, InterceptSolution, SolverResult
from .solver import (
    solve_intercept, find_feasible_intervals, required_speed,
    FeasibleInterval, ScanState,
)
from .strategy import (
    LaunchStrategy, MinTimeLaunch, ArcLaunch, MIN_TIME_LAUNCH,
    create_arc_launch, ideal_arc_time,
)
from .trajectory import ball_position, simulate_euler, simulate_rk4, FlightResult
from .accuracy import BallFlightState, AccuracyResult, evaluate_accuracy
from .validation import validate_scenarios, run_all_validations, ALL_SCENARIOS

__version__ = "1.0.0"
__all__ = [
    'Vec3', 'ZERO', 'UP',
    'MovingTarget', 'predict_position',
    'compute_launch_velocity', 'damping_factor',
    'SolverConfig', 'ArcLaunchConfig', 'DEFAULT_SOLVER_CONFIG', 'GRAVITY',
    'load_solver_config', 'solver_config_from_dict',
    'LaunchParams', 'InterceptSolution', 'SolverResult',
    'solve_intercept', 'find_feasible_intervals', 'required_speed',
    'FeasibleInterval', 'ScanState',
    'LaunchStrategy', 'MinTimeLaunch', 'ArcLaunch', 'MIN_TIME_LAUNCH',
    'create_arc_launch', 'ideal_arc_time',
    'ball_position', 'simulate_euler', 'simulate_rk4', 'FlightResult',
    'BallFlightState', 'AccuracyResult', 'evaluate_accuracy',
    'validate_scenarios', 'run_all_validations', 'ALL_SCENARIOS',
]
