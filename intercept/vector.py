"""
Vector Math
===========
Immutable 3D vector used throughout the solver.

Coordinate system:
  x, z = horizontal plane
  y    = height (up positive, gravity acts along -y)
"""

import math
from dataclasses import dataclass

import numpy as np


# Below this length a vector has no usable direction
NORMALIZE_EPSILON = 1e-12


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D vector. All operations return new instances."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vec3":
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def add(self, other: "Vec3") -> "Vec3":
        return self + other

    def sub(self, other: "Vec3") -> "Vec3":
        return self - other

    def scale(self, scalar: float) -> "Vec3":
        return self * scalar

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalized(self) -> "Vec3":
        """
        Unit vector in the same direction.

        A vector shorter than 1e-12 has no defined direction; the zero
        vector is returned instead of dividing by a near-zero length.
        """
        length = self.length()
        if length < NORMALIZE_EPSILON:
            return ZERO
        return self * (1.0 / length)

    def distance_to(self, other: "Vec3") -> float:
        return (self - other).length()

    @property
    def horizontal(self) -> "Vec3":
        """Projection onto the XZ ground plane."""
        return Vec3(self.x, 0.0, self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "Vec3":
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)


ZERO = Vec3(0.0, 0.0, 0.0)
UP = Vec3(0.0, 1.0, 0.0)
