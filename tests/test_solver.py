"""
Unit Tests for the Intercept Solver
===================================
Vector math, target prediction, launch velocity, interval search,
candidate construction, strategies and configuration.
Run: python -m pytest tests/ -v
"""

import sys
import os
import json
import logging
import math
import dataclasses
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from intercept.vector import Vec3, ZERO
from intercept.target import MovingTarget, predict_position
from intercept.launch import compute_launch_velocity, damping_factor
from intercept.config import (
    SolverConfig, ArcLaunchConfig, DEFAULT_SOLVER_CONFIG, GRAVITY,
    solver_config_from_dict, load_solver_config,
)
from intercept.models import LaunchParams
from intercept.solver import (
    solve_intercept, find_feasible_intervals, bisect_boundary, ScanState,
    required_speed, build_solution,
)
from intercept.strategy import (
    MinTimeLaunch, ArcLaunch, MIN_TIME_LAUNCH, create_arc_launch, ideal_arc_time,
)
from intercept.trajectory import ball_position


def stationary_params(max_speed=20.0, damping=0.0):
    return LaunchParams(
        launch_pos=Vec3(0.0, 0.0, 0.0),
        target=MovingTarget(Vec3(10.0, 0.0, 0.0)),
        max_speed=max_speed,
        gravity=9.81,
        damping=damping,
    )


def receiver_params(damping=0.0):
    return LaunchParams(
        launch_pos=Vec3(0.0, 1.5, 0.0),
        target=MovingTarget(Vec3(8.0, 1.5, 0.0), Vec3(0.0, 0.0, 3.0),
                            Vec3(0.5, 0.0, 0.0)),
        max_speed=15.0,
        gravity=GRAVITY,
        damping=damping,
    )


class TestVectorMath:
    """Immutable Vec3 operations."""

    def test_arithmetic(self):
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(4.0, -1.0, 0.5)
        assert a + b == Vec3(5.0, 1.0, 3.5)
        assert a - b == Vec3(-3.0, 3.0, 2.5)
        assert a * 2.0 == Vec3(2.0, 4.0, 6.0)
        assert 2.0 * a == a.scale(2.0)
        assert a.add(b) == a + b
        assert a.sub(b) == a - b

    def test_dot_length_distance(self):
        a = Vec3(3.0, 4.0, 0.0)
        assert a.dot(Vec3(1.0, 1.0, 1.0)) == 7.0
        assert a.length() == 5.0
        assert a.length_squared() == 25.0
        assert a.distance_to(Vec3(0.0, 0.0, 0.0)) == 5.0

    def test_normalize_unit_length(self):
        n = Vec3(2.0, -3.0, 6.0).normalized()
        assert abs(n.length() - 1.0) < 1e-12

    def test_normalize_degenerate_returns_zero(self):
        """Below 1e-12 length the zero vector is the defined result."""
        assert Vec3(1e-13, 0.0, 0.0).normalized() == ZERO
        assert ZERO.normalized() == ZERO

    def test_immutable(self):
        v = Vec3(1.0, 2.0, 3.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.x = 5.0

    def test_array_conversion(self):
        v = Vec3(1.5, -2.0, 0.25)
        assert Vec3.from_array(v.to_array()) == v


class TestTargetPredictor:
    """Kinematic extrapolation of a moving target."""

    def test_zero_time_returns_position_exactly(self):
        target = MovingTarget(Vec3(1.1, 2.2, 3.3), Vec3(0.7, -0.3, 5.0),
                              Vec3(0.1, 0.2, 0.3))
        assert predict_position(target, 0.0) == target.position

    def test_constant_velocity(self):
        target = MovingTarget(Vec3(1.0, 0.0, 0.0), Vec3(2.0, 0.0, -1.0))
        assert predict_position(target, 1.5) == Vec3(4.0, 0.0, -1.5)

    def test_acceleration_term(self):
        target = MovingTarget(ZERO, Vec3(1.0, 0.0, 0.0), Vec3(2.0, 0.0, 0.0))
        p = target.predict(3.0)
        assert abs(p.x - 12.0) < 1e-12

    def test_acceleration_defaults_to_zero(self):
        assert MovingTarget(ZERO).acceleration == ZERO


class TestLaunchVelocity:
    """Closed-form launch velocity."""

    def test_undamped_formula(self):
        v = compute_launch_velocity(ZERO, Vec3(10.0, 0.0, 4.0), 2.0, 9.81, 0.0)
        assert v.x == 5.0
        assert v.z == 2.0
        assert abs(v.y - 9.81) < 1e-12

    def test_negligible_damping_is_undamped(self):
        a = compute_launch_velocity(ZERO, Vec3(6.0, 1.0, -2.0), 1.2, 9.81, 0.0)
        b = compute_launch_velocity(ZERO, Vec3(6.0, 1.0, -2.0), 1.2, 9.81, 1e-12)
        assert a == b

    def test_small_damping_close_to_undamped(self):
        a = compute_launch_velocity(ZERO, Vec3(6.0, 1.0, -2.0), 1.2, 9.81, 0.0)
        b = compute_launch_velocity(ZERO, Vec3(6.0, 1.0, -2.0), 1.2, 9.81, 1e-6)
        assert (a - b).length() < 1e-4

    def test_damping_needs_more_speed(self):
        undamped = compute_launch_velocity(ZERO, Vec3(10.0, 0.0, 0.0), 1.0, 9.81, 0.0)
        damped = compute_launch_velocity(ZERO, Vec3(10.0, 0.0, 0.0), 1.0, 9.81, 0.5)
        assert damped.x > undamped.x

    @pytest.mark.parametrize('damping', [0.0, 0.2, 1.5])
    def test_analytic_flight_hits_intercept(self, damping):
        start = Vec3(0.0, 1.0, 0.0)
        goal = Vec3(7.0, 2.5, -3.0)
        v0 = compute_launch_velocity(start, goal, 1.3, 9.81, damping)
        landed = ball_position(start, v0, 1.3, 9.81, damping)
        assert landed.distance_to(goal) < 1e-9

    def test_damping_factor(self):
        assert damping_factor(2.0, 0.0) == 2.0
        assert abs(damping_factor(2.0, 0.5) - (1 - math.exp(-1.0)) / 0.5) < 1e-15


class TestFeasibleIntervals:
    """Coarse scan state machine on synthetic speed curves."""

    def test_two_windows_refined_by_bisection(self):
        def speed(t):
            return 10.0 if (1.0 < t < 2.0) or (3.0 < t < 4.0) else 100.0

        intervals = find_feasible_intervals(speed, 20.0, DEFAULT_SOLVER_CONFIG)

        assert len(intervals) == 2
        assert intervals[0].start == pytest.approx(1.0, abs=1e-3)
        assert intervals[0].end == pytest.approx(2.0, abs=1e-3)
        assert intervals[1].start == pytest.approx(3.0, abs=1e-3)
        assert intervals[1].end == pytest.approx(4.0, abs=1e-3)
        # Refined boundaries stay on the feasible side
        for iv in intervals:
            assert speed(iv.start) <= 20.0
            assert speed(iv.end) <= 20.0

    def test_feasible_from_first_sample_starts_at_min_time(self):
        intervals = find_feasible_intervals(lambda t: 5.0 if t < 1.0 else 50.0,
                                            20.0, DEFAULT_SOLVER_CONFIG)
        assert len(intervals) == 1
        assert intervals[0].start == DEFAULT_SOLVER_CONFIG.min_time
        assert intervals[0].end == pytest.approx(1.0, abs=1e-3)

    def test_feasible_to_the_end_closes_at_max_time(self):
        intervals = find_feasible_intervals(lambda t: 5.0, 20.0, DEFAULT_SOLVER_CONFIG)
        assert len(intervals) == 1
        assert intervals[0].start == DEFAULT_SOLVER_CONFIG.min_time
        assert intervals[0].end == DEFAULT_SOLVER_CONFIG.max_time

    def test_never_feasible(self):
        assert find_feasible_intervals(lambda t: 50.0, 20.0, DEFAULT_SOLVER_CONFIG) == []

    def test_bisect_returns_feasible_side(self):
        boundary = bisect_boundary(lambda t: t, 1.0, 0.0, 2.0, 20)
        assert boundary <= 1.0
        assert boundary == pytest.approx(1.0, abs=1e-5)

    def test_bisect_fixed_iterations(self):
        calls = []

        def speed(t):
            calls.append(t)
            return t

        bisect_boundary(speed, 1.0, 0.0, 2.0, 7)
        assert len(calls) == 7

    def test_scan_states(self):
        assert {s.name for s in ScanState} == {'SEARCHING', 'IN_FEASIBLE_RUN'}


class TestSolver:
    """End-to-end solve_intercept behaviour."""

    def test_stationary_target_closed_form(self):
        result = solve_intercept(stationary_params())
        best = result.best_solution

        assert best is not None
        assert best.valid
        assert best.flight_time > 0
        assert best.horizontal_speed == pytest.approx(10.0 / best.flight_time, rel=1e-9)

    def test_stationary_target_window_and_minimum(self):
        """|v|² = (10/T)² + (gT/2)² ≤ 400 holds for T in [0.5039, 4.0462]."""
        result = solve_intercept(stationary_params())
        times = [s.flight_time for s in result.solutions]

        assert len(result.solutions) == 3
        assert times[0] == pytest.approx(0.50386, abs=1e-3)
        assert times[1] == pytest.approx(1.4278, abs=0.01)
        assert times[2] == pytest.approx(4.0462, abs=1e-3)

    def test_no_solution(self):
        result = solve_intercept(stationary_params(max_speed=0.01))
        assert result.solutions == ()
        assert result.best_solution is None
        assert not result.found

    def test_feasibility_invariant(self):
        params = receiver_params(damping=0.3)
        config = DEFAULT_SOLVER_CONFIG
        result = solve_intercept(params, config)

        assert result.solutions
        for sol in result.solutions:
            assert sol.valid
            assert sol.speed <= params.max_speed + 1e-9
            assert config.min_time <= sol.flight_time <= config.max_time

    def test_ordering_invariant(self):
        result = solve_intercept(receiver_params())
        times = [s.flight_time for s in result.solutions]
        assert times == sorted(times)
        assert result.best_solution is result.solutions[0]

    def test_deterministic(self):
        params = receiver_params(damping=0.2)
        assert solve_intercept(params) == solve_intercept(params)

    def test_intercept_point_is_predicted_target(self):
        params = receiver_params()
        for sol in solve_intercept(params).solutions:
            assert sol.intercept_pos == predict_position(params.target, sol.flight_time)
            assert sol.speed == sol.launch_velocity.length()

    def test_whole_window_feasible(self):
        params = LaunchParams(ZERO, MovingTarget(Vec3(1.0, 0.0, 0.0)),
                              max_speed=1000.0, gravity=9.81)
        result = solve_intercept(params)
        assert result.solutions[0].flight_time == DEFAULT_SOLVER_CONFIG.min_time
        assert result.solutions[-1].flight_time == DEFAULT_SOLVER_CONFIG.max_time

    def test_dedup_resolution_collapses_candidates(self):
        coarse = SolverConfig(dedup_resolution=10.0)
        result = solve_intercept(stationary_params(), coarse)
        assert len(result.solutions) == 1
        assert result.best_solution.flight_time == pytest.approx(0.50386, abs=1e-3)

    def test_finer_config_tightens_boundary(self):
        fine = SolverConfig(coarse_step=0.01, fine_step=0.001, bisect_iterations=20)
        result = solve_intercept(stationary_params(), fine)
        assert result.best_solution.speed == pytest.approx(20.0, abs=1e-4)
        assert result.best_solution.speed <= 20.0

    @pytest.mark.parametrize('damping', [0.0, 0.3])
    def test_zero_min_time_skips_zero_flight(self, damping):
        config = SolverConfig(min_time=0.0)
        result = solve_intercept(stationary_params(damping=damping), config)

        assert result.found
        for sol in result.solutions:
            assert sol.valid
            assert sol.flight_time > 0

    def test_zero_min_time_target_at_launch_point(self):
        params = LaunchParams(ZERO, MovingTarget(ZERO), max_speed=20.0, gravity=9.81)
        result = solve_intercept(params, SolverConfig(min_time=0.0))

        assert result.found
        assert all(s.flight_time > 0 for s in result.solutions)

    def test_zero_flight_time_is_unreachable(self):
        params = stationary_params()
        assert required_speed(params, 0.0) == math.inf

        sol = build_solution(params, 0.0)
        assert not sol.valid
        assert sol.speed == math.inf
        assert sol.intercept_pos == params.target.position

    def test_logs_when_nothing_found(self, caplog):
        caplog.set_level(logging.DEBUG, logger='intercept.solver')
        solve_intercept(stationary_params(max_speed=0.01))
        assert 'No feasible interval' in caplog.text

    def test_summary_marks_best(self):
        assert '★' in solve_intercept(stationary_params()).summary()
        assert 'No feasible' in solve_intercept(stationary_params(max_speed=0.01)).summary()


class TestStrategies:
    """Min-time and arc launch policies."""

    def test_min_time_matches_best_solution(self):
        params = receiver_params()
        assert MinTimeLaunch().solve(params) == solve_intercept(params).best_solution
        assert MIN_TIME_LAUNCH.kind == 'min-time'

    def test_ideal_arc_time(self):
        assert ideal_arc_time(3.0, 9.81) == pytest.approx(math.sqrt(24 / 9.81))
        assert ideal_arc_time(3.0, 9.81) == pytest.approx(1.565, abs=2e-3)

    def test_arc_fast_path_uses_ideal_time(self):
        strategy = ArcLaunch(ArcLaunchConfig(arc_height=3.0))
        sol = strategy.solve(stationary_params())

        assert sol is not None
        assert sol.valid
        assert sol.flight_time == math.sqrt(8 * 3.0 / 9.81)
        assert sol.speed <= 20.0

    def test_arc_fallback_picks_closest_time(self):
        params = stationary_params()
        ideal = ideal_arc_time(30.0, 9.81)
        sol = ArcLaunch(ArcLaunchConfig(arc_height=30.0)).solve(params)
        searched = solve_intercept(params).solutions

        assert sol is not None
        assert sol.flight_time != ideal
        assert sol == min(searched, key=lambda s: abs(s.flight_time - ideal))
        assert sol.speed <= params.max_speed

    def test_arc_returns_none_without_solutions(self):
        strategy = create_arc_launch(ArcLaunchConfig(arc_height=3.0))
        assert isinstance(strategy, ArcLaunch)
        assert strategy.kind == 'arc'
        assert strategy.solve(stationary_params(max_speed=0.01)) is None

    def test_arc_height_must_be_positive(self):
        with pytest.raises(ValueError):
            ArcLaunchConfig(arc_height=0.0)


class TestConfig:
    """Solver configuration defaults, validation and loading."""

    def test_defaults(self):
        c = DEFAULT_SOLVER_CONFIG
        assert (c.coarse_step, c.fine_step, c.min_time, c.max_time,
                c.bisect_iterations) == (0.05, 0.005, 0.1, 5.0, 10)
        assert c.dedup_resolution == 0.001
        assert c == SolverConfig()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_SOLVER_CONFIG.max_time = 10.0

    @pytest.mark.parametrize('overrides', [
        {'coarse_step': 0.0},
        {'fine_step': 0.1},
        {'fine_step': 0.0},
        {'min_time': 5.0},
        {'min_time': -0.1},
        {'bisect_iterations': 0},
        {'dedup_resolution': 0.0},
    ])
    def test_invalid_config_rejected(self, overrides):
        with pytest.raises(ValueError):
            SolverConfig(**overrides)

    def test_from_dict_overlays_defaults(self):
        c = solver_config_from_dict({'max_time': 10.0, 'bisect_iterations': 16})
        assert c.max_time == 10.0
        assert c.bisect_iterations == 16
        assert c.coarse_step == DEFAULT_SOLVER_CONFIG.coarse_step

    def test_from_dict_rejects_fractional_iterations(self):
        with pytest.raises(ValueError):
            solver_config_from_dict({'bisect_iterations': 2.7})

    def test_from_dict_accepts_integral_float_iterations(self):
        c = solver_config_from_dict({'bisect_iterations': 16.0})
        assert c.bisect_iterations == 16
        assert isinstance(c.bisect_iterations, int)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            solver_config_from_dict({'coarseStep': 0.1})

    def test_load_from_json(self, tmp_path):
        path = tmp_path / 'solver.json'
        path.write_text(json.dumps({'min_time': 0.05, 'max_time': 10.0}), encoding='utf-8')
        c = load_solver_config(path)
        assert (c.min_time, c.max_time) == (0.05, 10.0)

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / 'solver.json'
        path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(ValueError):
            load_solver_config(path)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
