"""
Launch Velocity Calculator
==========================
Closed-form initial velocity that carries a projectile from a launch point
to an intercept point in exactly T seconds.

Equation of motion (gravity along -y, linear damping k):
    dv/dt = -k v - g ŷ

Integrating twice with v(0) = v0:
    x(t) = x0 + v0 · (1 - e^(-kt)) / k                      (horizontal)
    y(t) = y0 + (v0y + g/k) · (1 - e^(-kt)) / k - g t / k   (vertical)

As k → 0 the factor (1 - e^(-kt)) / k tends to t and the familiar
undamped parabola y(t) = y0 + v0y t - ½ g t² is recovered.

Solving those for v0 at t = T gives the formulas below. Nothing here
validates T or limits the speed; that is the solver's job.
"""

import math

from .vector import Vec3


# Damping below this is treated as none (avoids dividing by ~0)
DAMPING_EPSILON = 1e-9


def damping_factor(time: float, damping: float) -> float:
    """
    Integral of the damped velocity kernel e^(-kt) over [0, time].

    Equal to ``time`` when damping is negligible.
    """
    if damping < DAMPING_EPSILON:
        return time
    # expm1 keeps precision when k·t is tiny
    return -math.expm1(-damping * time) / damping


def compute_launch_velocity(launch_pos: Vec3, intercept_pos: Vec3,
                            flight_time: float, gravity: float,
                            damping: float) -> Vec3:
    """
    Initial velocity reaching ``intercept_pos`` after ``flight_time``.

    Parameters
    ----------
    launch_pos : Vec3
        Release point (m)
    intercept_pos : Vec3
        Point the projectile must pass through (m)
    flight_time : float
        Time of flight T (s)
    gravity : float
        Gravity magnitude, acting along -y (m/s²)
    damping : float
        Linear damping coefficient k (1/s), 0 for none

    Returns
    -------
    Vec3
        Launch velocity (m/s)
    """
    delta = intercept_pos - launch_pos
    T = flight_time

    if damping < DAMPING_EPSILON:
        # Horizontal: constant velocity. Vertical: lift to cancel ½gT² drop.
        return Vec3(
            delta.x / T,
            delta.y / T + 0.5 * gravity * T,
            delta.z / T,
        )

    k = damping
    g = gravity
    factor = damping_factor(T, k)
    return Vec3(
        delta.x / factor,
        (delta.y + g * T / k) / factor - g / k,
        delta.z / factor,
    )
