"""
Contextual menu geometry.

Coordinates are viewport pixels with the origin at the top-left corner,
the same space as a DOM bounding client rect.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Orientation(str, Enum):
    """Which side of the anchor the panel opens on."""

    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its edges."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class ViewportSize:
    width: float
    height: float


@dataclass(frozen=True)
class MenuPlacement:
    """
    Where the panel goes.

    right, top and bottom are fixed-position offsets: right is measured
    from the viewport's right edge, top from its top edge (BELOW only),
    bottom from its bottom edge (ABOVE only). panel is the resulting
    absolute rectangle.
    """

    orientation: Orientation
    right: float
    panel: Rect
    top: Optional[float] = None
    bottom: Optional[float] = None
