"""
Single-open contextual menu controller.

Holds one shared "open" reference for a whole screen: opening a menu
for one item closes whatever was open before. The menu is dismissed by
a pointer-down outside both panel and anchor, by any scroll, or by
selecting an action.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .models import MenuPlacement, Point, Rect, ViewportSize
from .placement import DEFAULT_GAP, DEFAULT_PANEL_HEIGHT, DEFAULT_PANEL_WIDTH, compute_placement

logger = logging.getLogger(__name__)

ActionT = TypeVar("ActionT")

# Schedules a callback on a later event-loop tick; returns a handle with cancel().
Defer = Callable[[Callable[[], None]], Any]


def _call_soon(callback: Callable[[], None]) -> asyncio.Handle:
    return asyncio.get_running_loop().call_soon(callback)


@dataclass(frozen=True)
class OpenMenu:
    """The currently open menu."""

    item_id: str
    anchor: Rect
    placement: MenuPlacement


class MenuController(Generic[ActionT]):
    """
    Tracks which item's menu is open and handles dismissal.

    The outside-pointer listener is armed on the tick after opening, so
    the pointer event that opened the menu cannot also close it.
    """

    def __init__(
        self,
        viewport: ViewportSize,
        *,
        panel_height: float = DEFAULT_PANEL_HEIGHT,
        panel_width: float = DEFAULT_PANEL_WIDTH,
        gap: float = DEFAULT_GAP,
        defer: Optional[Defer] = None,
    ):
        self._viewport = viewport
        self._panel_height = panel_height
        self._panel_width = panel_width
        self._gap = gap
        self._defer = defer or _call_soon
        self._current: Optional[OpenMenu] = None
        self._listening = False
        self._arm_handle: Any = None

    @property
    def current(self) -> Optional[OpenMenu]:
        return self._current

    @property
    def listening(self) -> bool:
        """True once the outside-pointer listener is armed."""
        return self._listening

    def is_open(self, item_id: str) -> bool:
        return self._current is not None and self._current.item_id == item_id

    def set_viewport(self, viewport: ViewportSize) -> None:
        self._viewport = viewport

    def toggle(self, item_id: str, anchor: Rect) -> Optional[OpenMenu]:
        """Close the menu if item_id's is open, otherwise open it."""
        if self.is_open(item_id):
            self.close()
            return None
        return self.open(item_id, anchor)

    def open(self, item_id: str, anchor: Rect) -> OpenMenu:
        self.close()
        placement = compute_placement(
            anchor,
            self._viewport,
            self._panel_height,
            panel_width=self._panel_width,
            gap=self._gap,
        )
        menu = OpenMenu(item_id=item_id, anchor=anchor, placement=placement)
        self._current = menu
        self._arm_handle = self._defer(lambda: self._arm(menu))
        logger.debug(f"Menu opened for {item_id} ({placement.orientation.value})")
        return menu

    def close(self) -> Optional[str]:
        """Close the open menu. Returns the item it belonged to, if any."""
        if self._arm_handle is not None and hasattr(self._arm_handle, "cancel"):
            self._arm_handle.cancel()
        self._arm_handle = None
        self._listening = False

        menu, self._current = self._current, None
        return menu.item_id if menu else None

    def handle_pointer_down(self, point: Point) -> bool:
        """
        Process a pointer-down anywhere in the document.

        Returns:
            True if the event dismissed the menu
        """
        menu = self._current
        if menu is None or not self._listening:
            return False
        if menu.placement.panel.contains(point) or menu.anchor.contains(point):
            return False
        self.close()
        return True

    def handle_scroll(self) -> bool:
        """Any scroll, in any container, dismisses the menu."""
        if self._current is None:
            return False
        self.close()
        return True

    def select(self, action: ActionT) -> Optional[tuple[str, ActionT]]:
        """
        Pick an action from the open menu; the menu closes first.

        Returns:
            (item_id, action), or None if no menu was open
        """
        item_id = self.close()
        if item_id is None:
            return None
        return item_id, action

    def _arm(self, menu: OpenMenu) -> None:
        if self._current is menu:
            self._listening = True
            self._arm_handle = None
