"""
2D vector and point algebra.

Points and vectors share one representation and are told apart only by how
they are used. Angles are in radians and follow the usual math convention
(counter-clockwise from +x). Screen space has y pointing down, so a positive
rotation appears clockwise on screen.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vector:
    """An immutable (x, y) pair."""

    x: float
    y: float

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vector":
        return Vector(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector":
        return Vector(self.x / scalar, self.y / scalar)

    def __iter__(self):
        yield self.x
        yield self.y

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


Point = Vector

ORIGIN = Vector(0.0, 0.0)

# Direction used when a zero-length vector has to be normalized.
FALLBACK_DIRECTION = Vector(1.0, 0.0)


def dot(u: Vector, v: Vector) -> float:
    return u.x * v.x + u.y * v.y


def magnitude(v: Vector) -> float:
    return math.hypot(v.x, v.y)


def distance(p: Point, q: Point) -> float:
    return magnitude(p - q)


def normalize(v: Vector) -> Vector:
    """
    Return the unit vector pointing along v.

    A zero-length vector has no direction; FALLBACK_DIRECTION is returned
    instead so that layouts built on top stay deterministic.
    """
    length = magnitude(v)
    if length == 0 or not math.isfinite(length):
        logger.debug("Normalizing degenerate vector %s, using fallback", v)
        return FALLBACK_DIRECTION
    return Vector(v.x / length, v.y / length)


def rotate(v: Vector, theta: float) -> Vector:
    """Rotate v by theta radians using the standard 2x2 rotation matrix."""
    c = math.cos(theta)
    s = math.sin(theta)
    return Vector(c * v.x - s * v.y, s * v.x + c * v.y)


def angle_of(v: Vector) -> float:
    """Angle of v in (-pi, pi]."""
    return math.atan2(v.y, v.x)


def unit_toward(theta: float) -> Vector:
    """Unit vector at angle theta."""
    return Vector(math.cos(theta), math.sin(theta))


@dataclass(frozen=True)
class Basis:
    """
    A 2x2 change-of-basis matrix with rows b1 and b2.

    For orthonormal b1, b2, transform(v) gives the coordinates of v in the
    frame spanned by those two vectors.
    """

    b1: Vector
    b2: Vector

    def transform(self, v: Vector) -> Vector:
        return Vector(dot(self.b1, v), dot(self.b2, v))

    @classmethod
    def rotation(cls, theta: float) -> "Basis":
        """Matrix that rotates vectors by theta."""
        c = math.cos(theta)
        s = math.sin(theta)
        return cls(Vector(c, -s), Vector(s, c))
