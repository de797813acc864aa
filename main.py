#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  BALLISTIC INTERCEPT SOLVER — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the demonstration pipeline:
    1. Closed-form check (stationary receiver)
    2. Lead pass to a moving receiver
    3. Damped flight and round-trip integration
    4. Launch strategies (min-time vs arc)
    5. Hit accuracy evaluation
    6. Validation against reference scenarios
    7. Plots

  All plots saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip plots (faster)
    python main.py --debug      # Show solver debug logging
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os
import sys
import time

from intercept import (
    Vec3, MovingTarget, LaunchParams, SolverConfig, ArcLaunchConfig,
    DEFAULT_SOLVER_CONFIG, GRAVITY,
    solve_intercept, MIN_TIME_LAUNCH, ArcLaunch, ideal_arc_time,
    simulate_euler, simulate_rk4, BallFlightState, evaluate_accuracy,
)
from intercept.validation import validate_scenarios, MISS_TOLERANCE


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     BALLISTIC INTERCEPT SOLVER                                        ║
║     ─────────────────────────────────────────────                     ║
║     Gravity · Linear damping · Moving targets · Speed limits          ║
║     Coarse scan → bisection → fine scan │ Min-time & arc strategies  ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    if '--debug' in sys.argv:
        logging.basicConfig(level=logging.DEBUG,
                            format='  [%(levelname)s] %(name)s: %(message)s')

    banner()
    config = DEFAULT_SOLVER_CONFIG

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Closed-Form Check
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Stationary Receiver (closed-form check)")

    static_params = LaunchParams(
        launch_pos=Vec3(0.0, 0.0, 0.0),
        target=MovingTarget(Vec3(10.0, 0.0, 0.0)),
        max_speed=20.0,
        gravity=GRAVITY,
        damping=0.0,
    )
    static_result = solve_intercept(static_params, config)
    print(static_result.summary())
    for sol in static_result.solutions:
        print(f"  T={sol.flight_time:.3f}s  horizontal speed {sol.horizontal_speed:.4f} "
              f"m/s  (10/T = {10.0 / sol.flight_time:.4f})")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Moving Receiver
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Lead Pass to a Cutting Receiver")

    moving_params = LaunchParams(
        launch_pos=Vec3(0.0, 1.5, 0.0),
        target=MovingTarget(Vec3(6.0, 1.5, -4.0), Vec3(0.0, 0.0, 4.0)),
        max_speed=14.0,
        gravity=GRAVITY,
    )
    moving_result = solve_intercept(moving_params, config)
    print(moving_result.summary())

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Damping & Round Trip
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Damped Flight (k = 0.4) and RK4 Round Trip")

    damped_params = LaunchParams(
        launch_pos=Vec3(0.0, 2.0, 0.0),
        target=MovingTarget(Vec3(9.0, 3.05, 2.0), Vec3(-0.5, 0.0, 1.0)),
        max_speed=16.0,
        gravity=GRAVITY,
        damping=0.4,
    )
    damped_result = solve_intercept(damped_params, config)
    print(damped_result.summary())

    best = damped_result.best_solution
    if best is not None:
        euler = simulate_euler(damped_params.launch_pos, best.launch_velocity,
                               best.flight_time, GRAVITY, damped_params.damping,
                               dt=0.01)
        rk4 = simulate_rk4(damped_params.launch_pos, best.launch_velocity,
                           best.flight_time, GRAVITY, damped_params.damping,
                           dt=0.01)
        print(rk4.summary())
        print(f"  Euler miss: {euler.final_position.distance_to(best.intercept_pos):.2e} m  |  "
              f"RK4 miss: {rk4.final_position.distance_to(best.intercept_pos):.2e} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Strategies
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Launch Strategies")

    strategies = [MIN_TIME_LAUNCH] + [ArcLaunch(ArcLaunchConfig(h)) for h in (1.0, 3.0, 30.0)]
    print(f"  {'Strategy':<28} {'Ideal T':>8} {'T (s)':>8} {'|v0|':>8}")
    for strategy in strategies:
        sol = strategy.solve(static_params, config)
        ideal = (f"{ideal_arc_time(strategy.arc_height, GRAVITY):>8.3f}"
                 if isinstance(strategy, ArcLaunch) else f"{'—':>8}")
        if sol is None:
            print(f"  {repr(strategy):<28} {ideal} {'none':>8}")
        else:
            print(f"  {repr(strategy):<28} {ideal} {sol.flight_time:>8.3f} {sol.speed:>8.2f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Hit Accuracy
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Hit Accuracy")

    best = moving_result.best_solution
    if best is not None:
        flight = BallFlightState(moving_params.launch_pos, best.launch_velocity,
                                 GRAVITY, moving_params.damping)
        exact = evaluate_accuracy(flight, moving_params.target, best.flight_time)
        # Receiver was already 0.1 s further along than the thrower read
        receiver = moving_params.target
        ahead = MovingTarget(receiver.predict(0.1), receiver.velocity)
        late = evaluate_accuracy(flight, ahead, best.flight_time)
        print(f"  On-time release : score {exact.score:.3f}  closest "
              f"{exact.closest_distance:.4f} m at t={exact.closest_time:.3f}s")
        print(f"  0.1 s late read : score {late.score:.3f}  closest "
              f"{late.closest_distance:.4f} m at t={late.closest_time:.3f}s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Validation — Reference Scenarios")
    val_results = validate_scenarios(config=config, dt=0.01, verbose=True)

    fine = SolverConfig(coarse_step=0.02, fine_step=0.002, bisect_iterations=16)
    section("PHASE 6b: Validation — Fine Solver Config")
    validate_scenarios(config=fine, dt=0.005, verbose=True)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Plots
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        from intercept.visualization import (
            ensure_output_dir, plot_speed_profile, plot_intercept_trajectories,
            plot_euler_vs_rk4, plot_validation,
        )
        import matplotlib.pyplot as plt

        section("PHASE 7: Plots")
        out = ensure_output_dir('outputs')

        fig = plot_speed_profile(static_params, static_result, config,
                                 save_path=f'{out}/01_speed_profile_static.png')
        plt.close(fig)
        fig = plot_speed_profile(damped_params, damped_result, config,
                                 save_path=f'{out}/02_speed_profile_damped.png')
        plt.close(fig)
        fig = plot_intercept_trajectories(moving_params, moving_result,
                                          save_path=f'{out}/03_lead_pass.png')
        plt.close(fig)

        best = damped_result.best_solution
        if best is not None:
            fig = plot_euler_vs_rk4(euler, rk4, damped_params.launch_pos,
                                    best.launch_velocity,
                                    save_path=f'{out}/04_euler_vs_rk4.png')
            plt.close(fig)

        fig = plot_validation(val_results, tolerance=MISS_TOLERANCE,
                              save_path=f'{out}/05_validation.png')
        plt.close(fig)
        print(f"  ✓ Saved plots to: {os.path.abspath(out)}/")
    else:
        section("PHASE 7: Plots SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  Total runtime: {elapsed:.2f} seconds\n")


if __name__ == "__main__":
    main()
