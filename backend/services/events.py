"""Minimal publish/subscribe primitives used by the engine and drag controller."""

from enum import Enum
from typing import Any, Callable

from services.geometry import Point


class Signal:
    """A list of handlers called synchronously, in connect order."""

    def __init__(self) -> None:
        self._handlers: list[Callable[[Any], None]] = []

    def connect(self, handler: Callable[[Any], None]) -> Callable[[], None]:
        """Register ``handler`` and return a callable that disconnects it."""
        self._handlers.append(handler)

        def disconnect() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return disconnect

    def emit(self, payload: Any) -> None:
        for handler in list(self._handlers):
            handler(payload)

    def __len__(self) -> int:
        return len(self._handlers)


class PointerEventKind(str, Enum):
    MOVE = "move"
    UP = "up"


class PointerListener:
    """Handle for a registered pointer listener; ``remove()`` is idempotent."""

    def __init__(
        self,
        source: "PointerEventSource",
        kind: PointerEventKind,
        handler: Callable[[Point], None],
    ) -> None:
        self.source = source
        self.kind = kind
        self.handler = handler

    def remove(self) -> None:
        self.source.remove_listener(self)


class PointerEventSource:
    """Surface-wide pointer events (move/up) that drags subscribe to."""

    def __init__(self) -> None:
        self._listeners: dict[PointerEventKind, list[PointerListener]] = {
            kind: [] for kind in PointerEventKind
        }

    def add_listener(
        self, kind: PointerEventKind, handler: Callable[[Point], None]
    ) -> PointerListener:
        listener = PointerListener(self, kind, handler)
        self._listeners[kind].append(listener)
        return listener

    def remove_listener(self, listener: PointerListener) -> None:
        listeners = self._listeners[listener.kind]
        if listener in listeners:
            listeners.remove(listener)

    def dispatch(self, kind: PointerEventKind, point: Point) -> None:
        for listener in list(self._listeners[kind]):
            listener.handler(point)

    def listener_count(self, kind: PointerEventKind | None = None) -> int:
        if kind is not None:
            return len(self._listeners[kind])
        return sum(len(v) for v in self._listeners.values())
