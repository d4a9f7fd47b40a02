"""
Synchronous event emitter.

Listeners are plain callables invoked in registration order. Subscribing
returns an unsubscribe function.
"""
from __future__ import annotations

from typing import Any, Callable


class EventEmitter:
    """Named-event pub/sub used by the stream classes."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {}

    def on(self, event: str, handler: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to an event. Returns an unsubscribe function."""
        self._handlers.setdefault(event, []).append(handler)
        return lambda: self.off(event, handler)

    def once(self, event: str, handler: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe for a single emission."""
        def wrapper(*args: Any) -> None:
            self.off(event, wrapper)
            handler(*args)

        return self.on(event, wrapper)

    def off(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(event)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every handler registered for ``event``.

        Handler exceptions propagate to the caller. Returns True if the event
        had any handlers.
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            handler(*args)
        return bool(handlers)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def remove_all_listeners(self, event: str | None = None) -> None:
        if event is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event, None)
