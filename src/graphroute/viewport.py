"""
World <-> device coordinate transform.

The world keeps a fixed aspect ratio. A Viewport fits the largest rectangle
of that ratio inside an arbitrary device rectangle, centered, and maps
between the two with a uniform scale plus an offset.
"""

from dataclasses import dataclass
from typing import Tuple

from .config import LayoutConfig
from .vector import Point

Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Viewport:
    """
    Linear mapping from world coordinates to device coordinates.

    Attributes:
        base_x: Device x of the world origin.
        base_y: Device y of the world origin.
        width: Device width of the world (one world unit).
        height: Device height of the world.
    """

    base_x: float
    base_y: float
    width: float
    height: float

    @classmethod
    def fit(
        cls, x: float, y: float, width: float, height: float, config: LayoutConfig
    ) -> "Viewport":
        """Fit the world into the device rectangle (x, y, width, height)."""
        if width <= 0 or height <= 0:
            raise ValueError("Device rectangle must have positive size")

        if width / height <= config.aspect_ratio:
            # Too narrow: width is the limiting side.
            fitted_width = width
            fitted_height = width / config.aspect_ratio
        else:
            fitted_height = height
            fitted_width = height * config.aspect_ratio

        return cls(
            base_x=x + (width - fitted_width) / 2.0,
            base_y=y + (height - fitted_height) / 2.0,
            width=fitted_width,
            height=fitted_height,
        )

    @property
    def bounds(self) -> Rect:
        return (self.base_x, self.base_y, self.width, self.height)

    def to_device(self, point: Point) -> Point:
        return Point(point.x * self.width + self.base_x, point.y * self.width + self.base_y)

    def to_world(self, point: Point) -> Point:
        return Point((point.x - self.base_x) / self.width, (point.y - self.base_y) / self.width)

    def length_to_device(self, length: float) -> float:
        return length * self.width

    def length_to_world(self, length: float) -> float:
        return length / self.width

    def rect_to_device(self, rect: Rect) -> Rect:
        x, y, w, h = rect
        top = self.to_device(Point(x, y))
        return (top.x, top.y, self.length_to_device(w), self.length_to_device(h))

    def rect_to_world(self, rect: Rect) -> Rect:
        x, y, w, h = rect
        top = self.to_world(Point(x, y))
        return (top.x, top.y, self.length_to_world(w), self.length_to_world(h))
