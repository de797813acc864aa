"""
Hit Accuracy Evaluation
=======================
Scores a launched ball against the target it was aimed at, after the
fact:

1. Sample the ball/target distance at 200 points over [0, T].
2. Refine the closest approach with a bounded scalar minimisation in the
   bracket around the best sample.
3. Measure the deviation at the intended intercept time.
4. score = max(0, 1 - closest_distance / reference_radius)
"""

from dataclasses import dataclass

from scipy.optimize import minimize_scalar

from .target import MovingTarget, predict_position
from .trajectory import ball_position
from .vector import Vec3


# Basketball diameter (m); a miss by this much scores 0
DEFAULT_REFERENCE_RADIUS = 0.24

SAMPLE_COUNT = 200


@dataclass(frozen=True)
class BallFlightState:
    """Launch state of a ball in flight."""
    start_pos: Vec3
    launch_velocity: Vec3
    gravity: float
    damping: float = 0.0

    def position(self, time: float) -> Vec3:
        return ball_position(self.start_pos, self.launch_velocity, time,
                             self.gravity, self.damping)


@dataclass(frozen=True)
class AccuracyResult:
    score: float                   # 0..1, 1 = dead centre
    closest_distance: float        # m
    closest_time: float            # s
    deviation_at_intercept: Vec3   # ball - target at the intended time


def distance_at_time(flight: BallFlightState, target: MovingTarget,
                     time: float) -> float:
    return flight.position(time).distance_to(predict_position(target, time))


def evaluate_accuracy(flight: BallFlightState, target: MovingTarget,
                      intercept_time: float,
                      reference_radius: float = DEFAULT_REFERENCE_RADIUS
                      ) -> AccuracyResult:
    """
    Score how close ``flight`` comes to ``target`` up to ``intercept_time``.

    Parameters
    ----------
    flight : BallFlightState
        Ball as launched
    target : MovingTarget
        Target the ball was aimed at
    intercept_time : float
        Intended flight time (s)
    reference_radius : float
        Miss distance that scores zero (m)
    """
    dt = intercept_time / SAMPLE_COUNT

    best_index = 0
    best_distance = float('inf')
    for i in range(SAMPLE_COUNT + 1):
        d = distance_at_time(flight, target, i * dt)
        if d < best_distance:
            best_distance = d
            best_index = i

    lo = max(0.0, (best_index - 1) * dt)
    hi = min(intercept_time, (best_index + 1) * dt)

    closest_time = best_index * dt
    closest_distance = best_distance
    if hi > lo:
        refined = minimize_scalar(
            lambda t: distance_at_time(flight, target, t),
            bounds=(lo, hi),
            method='bounded',
            options={'xatol': 1e-9},
        )
        # Keep the sample if the optimiser lands on a worse point
        if refined.fun < closest_distance:
            closest_time = float(refined.x)
            closest_distance = float(refined.fun)

    deviation = flight.position(intercept_time) - predict_position(target, intercept_time)
    score = max(0.0, 1.0 - closest_distance / reference_radius)

    return AccuracyResult(
        score=score,
        closest_distance=closest_distance,
        closest_time=closest_time,
        deviation_at_intercept=deviation,
    )
