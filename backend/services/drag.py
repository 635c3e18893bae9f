"""Drag state machine for repositioning a device group.

A drag starts on a pointer-down over the group background (or its label),
follows pointer moves by the cumulative delta from the drag start, and ends on
pointer-up, ``end_drag()`` or ``close()``. Move/up listeners live on the
pointer event source only while a drag is in progress.
"""

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum

from models.topology_model import DeviceGroup
from services.events import PointerEventKind, PointerEventSource, Signal
from services.geometry import Point

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragTarget(str, Enum):
    """Element under the pointer at pointer-down."""
    GROUP_BACKGROUND = "group-background"
    GROUP_LABEL = "group-label"
    DEVICE = "device"


_DRAG_HANDLES = {DragTarget.GROUP_BACKGROUND, DragTarget.GROUP_LABEL}


@dataclass
class PositionChanged:
    """Payload of ``on_position_changed``."""

    group: DeviceGroup
    x: float
    y: float


class DragController:
    """Moves one group at a time; never resizes or reflows other groups."""

    def __init__(self, pointer_events: PointerEventSource | None = None) -> None:
        self.pointer_events = pointer_events or PointerEventSource()
        self.on_position_changed = Signal()
        self.state = DragState.IDLE
        self.group: DeviceGroup | None = None
        self._pointer_start = Point(0, 0)
        self._group_start = Point(0, 0)
        self._listeners = ExitStack()

    @property
    def is_dragging(self) -> bool:
        return self.state == DragState.DRAGGING

    def begin_drag(
        self,
        group: DeviceGroup,
        pointer: Point,
        target: DragTarget = DragTarget.GROUP_BACKGROUND,
    ) -> bool:
        """Start dragging ``group``. Returns False when the target is not a drag handle."""
        if target not in _DRAG_HANDLES:
            # Pointer-down on a child device never reaches the group
            return False
        if self.is_dragging:
            self.end_drag()

        self.group = group
        self._pointer_start = Point(*pointer)
        self._group_start = Point(group.x or 0, group.y or 0)

        move = self.pointer_events.add_listener(PointerEventKind.MOVE, self.on_pointer_move)
        up = self.pointer_events.add_listener(PointerEventKind.UP, self.on_pointer_up)
        self._listeners.callback(move.remove)
        self._listeners.callback(up.remove)

        self.state = DragState.DRAGGING
        logger.debug("Drag started for group %s at %s", group.name, self._group_start)
        return True

    def on_pointer_move(self, pointer: Point) -> None:
        if not self.is_dragging or self.group is None:
            return
        group = self.group
        group.x = self._group_start.x + (pointer[0] - self._pointer_start.x)
        group.y = self._group_start.y + (pointer[1] - self._pointer_start.y)
        self.on_position_changed.emit(PositionChanged(group=group, x=group.x, y=group.y))

    def on_pointer_up(self, pointer: Point | None = None) -> None:
        self.end_drag()

    def end_drag(self) -> None:
        """Return to IDLE; the last position stays as the final one."""
        if self.is_dragging and self.group is not None:
            logger.debug(
                "Drag ended for group %s at (%s, %s)",
                self.group.name, self.group.x, self.group.y,
            )
        self._release_listeners()
        self.state = DragState.IDLE
        self.group = None

    def close(self) -> None:
        """Teardown: release listeners regardless of the current state."""
        self.end_drag()

    def _release_listeners(self) -> None:
        self._listeners.close()
        self._listeners = ExitStack()
