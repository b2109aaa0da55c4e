"""
Contextual menu module.

Viewport-aware placement plus single-open and dismissal handling for
per-row action menus.

Public API:
- compute_placement: Pure placement function
- MenuController, OpenMenu: Shared open-menu state
- Geometry models
"""

from .models import Orientation, Point, Rect, ViewportSize, MenuPlacement
from .placement import (
    compute_placement,
    DEFAULT_PANEL_HEIGHT,
    DEFAULT_PANEL_WIDTH,
    DEFAULT_GAP,
)
from .controller import MenuController, OpenMenu

__all__ = [
    # Models
    "Orientation",
    "Point",
    "Rect",
    "ViewportSize",
    "MenuPlacement",
    # Placement
    "compute_placement",
    "DEFAULT_PANEL_HEIGHT",
    "DEFAULT_PANEL_WIDTH",
    "DEFAULT_GAP",
    # Controller
    "MenuController",
    "OpenMenu",
]
