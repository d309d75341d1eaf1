"""Subscription and emission-cycle types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from .emitter import EventEmitter, Handler

Listener = Callable[..., Any]


class CycleState(Enum):
    """Stage of a single emission cycle."""

    IDLE = "idle"
    PRE_EMIT = "pre_emit"
    SHOULD_EMIT_CHECK = "should_emit_check"
    SUPPRESSED = "suppressed"
    FANOUT = "fanout"
    COLLECTING = "collecting"
    RESOLVING = "resolving"


@dataclass(eq=False)
class Subscription:
    """One registration of a listener on a publisher's event.

    Calling the subscription cancels it. Cancelling is idempotent and,
    once done, the listener is never invoked again, even by a dispatch
    that was already in progress on the emitter.
    """

    listener: Listener
    event_type: str
    emitter: EventEmitter
    handler: Optional[Handler] = None
    on_cancel: Optional[Callable[["Subscription"], None]] = None
    aborted: bool = False

    def unsubscribe(self) -> None:
        if self.aborted:
            return
        self.aborted = True
        if self.handler is not None:
            self.emitter.remove_listener(self.event_type, self.handler)
        if self.on_cancel is not None:
            self.on_cancel(self)

    def __call__(self) -> None:
        self.unsubscribe()


@dataclass
class DispatchRecord:
    """A deferred result returned by a listener during one cycle."""

    listener: Listener
    result: Awaitable[Any]


@dataclass
class ListenerResult:
    """Settled value of one listener's deferred result."""

    listener: Listener
    value: Any
