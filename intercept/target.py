"""
Target Prediction
=================
Kinematic extrapolation of a moving target (receiver, goal, runner):

    p(t) = p0 + v*t + ½ a t²
"""

from dataclasses import dataclass

from .vector import Vec3, ZERO


@dataclass(frozen=True)
class MovingTarget:
    """Point mass whose future position is kinematically extrapolated."""
    position: Vec3
    velocity: Vec3 = ZERO
    acceleration: Vec3 = ZERO

    def predict(self, time: float) -> Vec3:
        return predict_position(self, time)


def predict_position(target: MovingTarget, time: float) -> Vec3:
    """Predicted target position after ``time`` seconds."""
    return (target.position
            + target.velocity * time
            + target.acceleration * (0.5 * time * time))
