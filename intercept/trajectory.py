"""
Forward Flight Model
====================
Flies a launched projectile forward in time, for checking solver output
and for drawing trajectories.

Equation of motion (gravity along -y, linear damping k):
    dx/dt = v
    dv/dt = -k v - g ŷ

Three ways to evaluate it:

1. **Analytic**: closed-form position, the same expression the launch
   velocity formula inverts.
2. **Euler Method** (1st order): simple, accumulates error.
3. **Runge-Kutta 4th Order (RK4)**: accurate at the same timestep.

Integrators return a FlightResult dataclass with the full state history.
"""

import numpy as np
from dataclasses import dataclass

from .launch import DAMPING_EPSILON, damping_factor
from .vector import Vec3


def ball_position(start: Vec3, launch_velocity: Vec3, time: float,
                  gravity: float, damping: float) -> Vec3:
    """Analytic position ``time`` seconds after launch."""
    factor = damping_factor(time, damping)
    v = launch_velocity

    if damping < DAMPING_EPSILON:
        y = start.y + v.y * time - 0.5 * gravity * time * time
    else:
        k = damping
        y = start.y + (v.y + gravity / k) * factor - gravity * time / k

    return Vec3(start.x + v.x * factor, y, start.z + v.z * factor)


def acceleration(velocity: np.ndarray, gravity: float,
                 damping: float) -> np.ndarray:
    """a = -k v - g ŷ"""
    return -damping * velocity + np.array([0.0, -gravity, 0.0])


@dataclass
class FlightResult:
    """Complete integrated flight."""
    method: str               # 'euler' or 'rk4'
    dt: float                 # nominal timestep used
    gravity: float
    damping: float

    # Arrays, each has shape (N,)
    time: np.ndarray
    x: np.ndarray
    y: np.ndarray             # height
    z: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    vz: np.ndarray
    speed: np.ndarray

    @property
    def final_position(self) -> Vec3:
        return Vec3(float(self.x[-1]), float(self.y[-1]), float(self.z[-1]))

    @property
    def final_velocity(self) -> Vec3:
        return Vec3(float(self.vx[-1]), float(self.vy[-1]), float(self.vz[-1]))

    @property
    def max_height(self) -> float:
        return float(np.max(self.y))

    @property
    def flight_time(self) -> float:
        return float(self.time[-1])

    @property
    def horizontal_distance(self) -> float:
        return float(np.hypot(self.x[-1] - self.x[0], self.z[-1] - self.z[0]))

    def summary(self) -> str:
        p = self.final_position
        lines = [
            f"  Method       : {self.method.upper()} (dt={self.dt:.4f} s, k={self.damping:.3f})",
            f"  Flight time  : {self.flight_time:>8.3f} s",
            f"  Apex height  : {self.max_height:>8.3f} m",
            f"  Ground range : {self.horizontal_distance:>8.3f} m",
            f"  Final pos    : ({p.x:.3f}, {p.y:.3f}, {p.z:.3f})",
            f"  Final speed  : {self.speed[-1]:>8.3f} m/s",
        ]
        return '\n'.join(lines)


def _check_step(duration: float, dt: float):
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")
    if duration < 0:
        raise ValueError(f"duration must be >= 0, got {duration}")


def _steps(duration: float, dt: float):
    """Yield step sizes covering [0, duration], last one shortened."""
    t = 0.0
    while duration - t > 1e-12:
        h = min(dt, duration - t)
        yield h
        t += h


def simulate_euler(start: Vec3, launch_velocity: Vec3, duration: float,
                   gravity: float, damping: float = 0.0,
                   dt: float = 0.001) -> FlightResult:
    """
    Forward Euler integration.

    x_{n+1} = x_n + v_n * dt
    v_{n+1} = v_n + a(v_n) * dt
    """
    _check_step(duration, dt)
    pos = start.to_array()
    vel = launch_velocity.to_array()
    t = 0.0

    history = [(t, pos.copy(), vel.copy())]

    for h in _steps(duration, dt):
        acc = acceleration(vel, gravity, damping)
        pos = pos + vel * h
        vel = vel + acc * h
        t += h
        history.append((t, pos.copy(), vel.copy()))

    return _build_result(history, 'euler', dt, gravity, damping)


def simulate_rk4(start: Vec3, launch_velocity: Vec3, duration: float,
                 gravity: float, damping: float = 0.0,
                 dt: float = 0.01) -> FlightResult:
    """
    4th-order Runge-Kutta integration up to exactly ``duration``.
    """
    _check_step(duration, dt)
    pos = start.to_array()
    vel = launch_velocity.to_array()
    t = 0.0

    history = [(t, pos.copy(), vel.copy())]

    def accel(v):
        return acceleration(v, gravity, damping)

    for h in _steps(duration, dt):
        k1v = accel(vel)
        k1x = vel

        k2v = accel(vel + 0.5 * h * k1v)
        k2x = vel + 0.5 * h * k1v

        k3v = accel(vel + 0.5 * h * k2v)
        k3x = vel + 0.5 * h * k2v

        k4v = accel(vel + h * k3v)
        k4x = vel + h * k3v

        pos = pos + (h / 6.0) * (k1x + 2*k2x + 2*k3x + k4x)
        vel = vel + (h / 6.0) * (k1v + 2*k2v + 2*k3v + k4v)
        t += h

        history.append((t, pos.copy(), vel.copy()))

    return _build_result(history, 'rk4', dt, gravity, damping)


def _build_result(history, method, dt, gravity, damping):
    """Convert history list to FlightResult."""
    times, positions, velocities = zip(*history)

    positions = np.array(positions)
    velocities = np.array(velocities)

    return FlightResult(
        method=method,
        dt=dt,
        gravity=gravity,
        damping=damping,
        time=np.array(times),
        x=positions[:, 0],
        y=positions[:, 1],
        z=positions[:, 2],
        vx=velocities[:, 0],
        vy=velocities[:, 1],
        vz=velocities[:, 2],
        speed=np.linalg.norm(velocities, axis=1),
    )
