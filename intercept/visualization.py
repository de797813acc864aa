"""
Visualization Engine
====================
Plots for inspecting solver behaviour:
  1. Required launch speed vs flight time (feasible windows shaded)
  2. Candidate trajectories against the target path (side + top view)
  3. Euler vs RK4 vs analytic flight error
  4. Validation miss distances
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from typing import List, Optional
import os

from .config import SolverConfig, DEFAULT_SOLVER_CONFIG
from .models import LaunchParams, SolverResult
from .solver import find_feasible_intervals, required_speed
from .target import predict_position
from .trajectory import FlightResult, ball_position
from .validation import ValidationResult


# ── Theme ─────────────────────────────────────────────────────────────────
THEME = {
    'background': '#0a0a0a',
    'panel': '#1a1a1a',
    'ink': '#e0e0e0',
    'rule': '#333333',
    'palette': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                '#e040fb', '#ff5252'],
}


def _themed(fig, axes):
    """Dark background, light ink and a faint grid on every subplot."""
    fig.patch.set_facecolor(THEME['background'])
    for ax in np.atleast_1d(axes).ravel():
        ax.set_facecolor(THEME['background'])
        ax.tick_params(colors=THEME['ink'])
        for label in (ax.xaxis.label, ax.yaxis.label, ax.title):
            label.set_color(THEME['ink'])
        ax.grid(True, color=THEME['rule'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(THEME['rule'])


def _legend(ax, **kwargs):
    ax.legend(facecolor=THEME['panel'], edgecolor=THEME['rule'],
              labelcolor=THEME['ink'], **kwargs)


def _finish(fig, save_path, show=False):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=THEME['background'])
    if show:
        plt.show()
    return fig


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Speed Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_speed_profile(params: LaunchParams, result: SolverResult,
                       config: SolverConfig = DEFAULT_SOLVER_CONFIG,
                       save_path: str = None, show: bool = False) -> plt.Figure:
    """Required |v0| over the searched flight-time window."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _themed(fig, ax)

    times = np.linspace(config.min_time, config.max_time, 500)
    speeds = np.array([required_speed(params, t) for t in times])
    speeds[~np.isfinite(speeds)] = np.nan

    ax.plot(times, speeds, color=THEME['palette'][0], linewidth=2.5,
            label='Required speed')
    ax.axhline(y=params.max_speed, color='#ff5252', linestyle='--',
               linewidth=1.5, label=f'Max speed ({params.max_speed:.1f} m/s)')

    intervals = find_feasible_intervals(lambda t: required_speed(params, t),
                                        params.max_speed, config)
    for i, interval in enumerate(intervals):
        ax.axvspan(interval.start, interval.end, color='#00e676', alpha=0.12,
                   label='Feasible window' if i == 0 else None)

    for sol in result.solutions:
        marker = '*' if sol is result.best_solution else 'o'
        size = 16 if sol is result.best_solution else 9
        ax.plot(sol.flight_time, sol.speed, marker, color='#ffeb3b',
                markersize=size, zorder=5)
    if result.solutions:
        ax.plot([], [], 'o', color='#ffeb3b', label='Candidates (★ = best)')

    ax.set_xlabel('Flight time T (s)', fontsize=12)
    ax.set_ylabel('Launch speed |v₀| (m/s)', fontsize=12)
    ax.set_title(f'Required Launch Speed — g={params.gravity:.2f} m/s², '
                 f'k={params.damping:.2f} 1/s',
                 fontsize=13, fontweight='bold')
    ax.set_ylim(0, max(params.max_speed * 2.0, float(np.nanmin(speeds)) * 1.5))
    ax.set_xlim(config.min_time, config.max_time)
    _legend(ax, loc='upper right', fontsize=10)

    return _finish(fig, save_path, show)


# ══════════════════════════════════════════════════════════════════════════
#  2. Intercept Trajectories
# ══════════════════════════════════════════════════════════════════════════

def plot_intercept_trajectories(params: LaunchParams, result: SolverResult,
                                save_path: str = None,
                                points: int = 200) -> plt.Figure:
    """Side (x-y) and top (x-z) view of each candidate and the target path."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _themed(fig, axes)
    ax_side, ax_top = axes

    longest = max((s.flight_time for s in result.solutions), default=1.0)
    target_t = np.linspace(0.0, longest, points)
    target_path = np.array([predict_position(params.target, t).to_array()
                            for t in target_t])
    for ax, col in ((ax_side, 1), (ax_top, 2)):
        ax.plot(target_path[:, 0], target_path[:, col], ':', color='#888',
                linewidth=2, label='Target path')

    for i, sol in enumerate(result.solutions):
        color = THEME['palette'][i % len(THEME['palette'])]
        ts = np.linspace(0.0, sol.flight_time, points)
        path = np.array([
            ball_position(params.launch_pos, sol.launch_velocity, t,
                          params.gravity, params.damping).to_array()
            for t in ts
        ])
        label = f'T={sol.flight_time:.3f}s  |v₀|={sol.speed:.1f}'
        for ax, col in ((ax_side, 1), (ax_top, 2)):
            ax.plot(path[:, 0], path[:, col], color=color, linewidth=2,
                    label=label if ax is ax_side else None)
            ax.plot(sol.intercept_pos.x,
                    sol.intercept_pos.y if col == 1 else sol.intercept_pos.z,
                    'x', color=color, markersize=10, markeredgewidth=2.5)

    for ax, col in ((ax_side, 1), (ax_top, 2)):
        ax.plot(params.launch_pos.x,
                params.launch_pos.y if col == 1 else params.launch_pos.z,
                'o', color='#00e676', markersize=10, zorder=5)

    ax_side.set_xlabel('x (m)')
    ax_side.set_ylabel('Height y (m)')
    ax_side.set_title('Side View', fontweight='bold')
    _legend(ax_side, fontsize=9)

    ax_top.set_xlabel('x (m)')
    ax_top.set_ylabel('z (m)')
    ax_top.set_title('Top View', fontweight='bold')
    ax_top.set_aspect('equal', adjustable='datalim')

    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  3. Euler vs RK4 Accuracy
# ══════════════════════════════════════════════════════════════════════════

def plot_euler_vs_rk4(euler_result: FlightResult, rk4_result: FlightResult,
                      start, launch_velocity,
                      save_path: str = None) -> plt.Figure:
    """Position error of both integrators against the analytic flight."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _themed(fig, ax)

    for result, color in ((euler_result, '#ff6b35'), (rk4_result, '#00d4ff')):
        exact = np.array([
            ball_position(start, launch_velocity, t, result.gravity,
                          result.damping).to_array()
            for t in result.time
        ])
        numeric = np.column_stack([result.x, result.y, result.z])
        error = np.linalg.norm(numeric - exact, axis=1)
        ax.semilogy(result.time, np.maximum(error, 1e-16), color=color,
                    linewidth=2, label=f'{result.method.upper()} (dt={result.dt})')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Position error vs analytic (m)')
    ax.set_title('Euler vs Runge-Kutta 4th Order — Accuracy Comparison',
                 fontweight='bold')
    _legend(ax, fontsize=10)

    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results: List[ValidationResult],
                    tolerance: Optional[float] = None,
                    save_path: str = None) -> plt.Figure:
    """Speed margin and RK4 miss distance per scenario."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _themed(fig, axes)

    found = [v for v in validation_results if v.found]
    names = [v.name for v in found]
    y = np.arange(len(found))

    ax = axes[0]
    margins = [v.speed_margin for v in found]
    colors = ['#00e676' if m >= 0 else '#ff5252' for m in margins]
    ax.barh(y, margins, color=colors, alpha=0.8)
    ax.set_yticks(y)
    ax.set_yticklabels(names, color=THEME['ink'])
    ax.axvline(x=0, color='#888', linewidth=0.5)
    ax.set_xlabel('Speed margin (m/s)')
    ax.set_title('Launch Speed Headroom', fontweight='bold')

    ax = axes[1]
    misses = [max(v.miss_distance, 1e-16) for v in found]
    colors = ['#00e676' if v.passed else '#ff5252' for v in found]
    ax.barh(y, misses, color=colors, alpha=0.8)
    ax.set_xscale('log')
    ax.set_yticks(y)
    ax.set_yticklabels([])
    if tolerance is not None:
        ax.axvline(x=tolerance, color='#ffeb3b', linestyle='--',
                   label=f'Tolerance ({tolerance:g} m)')
        _legend(ax, fontsize=10)
    ax.set_xlabel('RK4 miss distance (m)')
    ax.set_title('Round-Trip Error', fontweight='bold')

    return _finish(fig, save_path)
