"""
Viewport-aware menu placement.

A pure function of the anchor rectangle, the viewport and the panel
size, so it can be tested without any rendering surface.
"""

from .models import MenuPlacement, Orientation, Rect, ViewportSize

DEFAULT_PANEL_HEIGHT = 220
DEFAULT_PANEL_WIDTH = 192
DEFAULT_GAP = 4


def compute_placement(
    anchor: Rect,
    viewport: ViewportSize,
    panel_height: float = DEFAULT_PANEL_HEIGHT,
    *,
    panel_width: float = DEFAULT_PANEL_WIDTH,
    gap: float = DEFAULT_GAP,
) -> MenuPlacement:
    """
    Place a panel next to its anchor.

    The panel opens below the anchor unless the space below is smaller
    than panel_height, in which case it opens above. Its right edge is
    aligned with the anchor's right edge either way.

    Args:
        anchor: Bounding rectangle of the trigger element
        viewport: Current viewport size
        panel_height: Fixed height of the panel
        panel_width: Fixed width of the panel
        gap: Distance between anchor and panel

    Returns:
        MenuPlacement with orientation, offsets and the panel rectangle
    """
    right = viewport.width - anchor.right
    space_below = viewport.height - anchor.bottom

    if space_below < panel_height:
        panel_bottom = anchor.top - gap
        return MenuPlacement(
            orientation=Orientation.ABOVE,
            right=right,
            bottom=viewport.height - panel_bottom,
            panel=Rect(
                left=anchor.right - panel_width,
                top=panel_bottom - panel_height,
                right=anchor.right,
                bottom=panel_bottom,
            ),
        )

    panel_top = anchor.bottom + gap
    return MenuPlacement(
        orientation=Orientation.BELOW,
        right=right,
        top=panel_top,
        panel=Rect(
            left=anchor.right - panel_width,
            top=panel_top,
            right=anchor.right,
            bottom=panel_top + panel_height,
        ),
    )
