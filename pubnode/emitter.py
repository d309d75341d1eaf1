"""Synchronous event emitter.

emit() calls handlers immediately in registration order. No queues, no threads.
"""

from typing import Any, Callable, Optional, Sequence

from loguru import logger

Handler = Callable[[Sequence[Any]], Any]


class EventEmitter:
    """Lightweight pub/sub transport keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def add_listener(self, event_type: str, handler: Handler) -> None:
        """Register a handler for an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: Handler) -> None:
        """Remove the most recent registration of handler, if any."""
        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        for index in range(len(handlers) - 1, -1, -1):
            if handlers[index] is handler:
                del handlers[index]
                break
        if not handlers:
            del self._handlers[event_type]

    def emit(self, event_type: str, args: Sequence[Any]) -> bool:
        """Call every handler for event_type with the argument sequence.

        Handlers added or removed while emitting do not change this dispatch.
        Exceptions raised by a handler propagate to the caller.

        Returns:
            True if at least one handler was registered
        """
        handlers = list(self._handlers.get(event_type, []))
        if not handlers:
            logger.trace(f"No handlers for {event_type}")
            return False
        for handler in handlers:
            handler(args)
        return True

    def listeners(self, event_type: str) -> list[Handler]:
        return list(self._handlers.get(event_type, []))

    def listener_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def remove_all_listeners(self, event_type: Optional[str] = None) -> None:
        """Drop handlers for one event type, or for every type."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)
