"""Publisher nodes that broadcast one named event.

A Publisher fans its event out to listeners synchronously. An
AsyncPublisher additionally tracks deferred results returned by its
listeners during a cycle and reports their outcome through its
``completed`` and ``failed`` child publishers.
"""

import asyncio
import functools
from typing import Any, Optional

from loguru import logger

from .config import config
from .emitter import EventEmitter
from .errors import MissingChildrenError, ReentrancyError
from .types import CycleState, DispatchRecord, Listener, ListenerResult, Subscription
from .utils import discard, is_argument_sequence, is_deferred, next_tick


class Publisher:
    """Owns one event type, its subscriptions and the current cycle's records.

    Subclasses may override ``pre_emit`` and ``should_emit``, and may name
    their event by overriding ``event_type``.
    """

    # Whether deferred results returned by listeners are tracked
    can_handle_promise: bool = False

    def __init__(
        self,
        event_type: Optional[str] = None,
        *,
        emitter: Optional[EventEmitter] = None,
        sync: bool = False,
        max_trigger_depth: Optional[int] = None,
        warn_unhandled: Optional[bool] = None,
    ) -> None:
        """Initialize publisher.

        Args:
            event_type: Name of the event (defaults to config.DEFAULT_EVENT_TYPE)
            emitter: Event bus to register on (a private one is created if omitted)
            sync: Whether calling the publisher triggers synchronously
            max_trigger_depth: Limit on nested trigger_sync cycles
            warn_unhandled: Whether to log discarded deferred results
        """
        self._event_type = event_type
        self.emitter = emitter if emitter is not None else EventEmitter()
        self.sync = sync
        if max_trigger_depth is None:
            max_trigger_depth = config.MAX_TRIGGER_DEPTH
        if max_trigger_depth <= 0:
            raise ValueError(f"max_trigger_depth must be a positive integer, got {max_trigger_depth}")
        self.max_trigger_depth = max_trigger_depth
        self.warn_unhandled = (
            config.WARN_UNHANDLED_RESULTS if warn_unhandled is None else warn_unhandled
        )
        self._dispatch_records: list[DispatchRecord] = []
        self._subscriptions: list[Subscription] = []
        self._depth = 0
        self._state = CycleState.IDLE

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.event_type!r})"

    @property
    def event_type(self) -> str:
        return self._event_type or config.DEFAULT_EVENT_TYPE

    @property
    def is_publisher(self) -> bool:
        return True

    @property
    def state(self) -> CycleState:
        """Stage of the most recently started cycle."""
        return self._state

    @property
    def subscriptions(self) -> list[Subscription]:
        """Live subscriptions, in registration order."""
        return list(self._subscriptions)

    def pre_emit(self, *args: Any) -> Any:
        """Hook invoked before should_emit with the trigger arguments.

        A return value other than None replaces the arguments for the rest
        of the cycle. Tuples and lists are used as the argument list, any
        other value becomes the single argument.
        """
        return None

    def should_emit(self, *args: Any) -> bool:
        """Hook deciding whether the cycle fans out. Defaults to True."""
        return True

    def listen(self, callback: Listener) -> Subscription:
        """Subscribe callback to this publisher's event.

        Args:
            callback: Invoked with the cycle's arguments

        Returns:
            Subscription; call it to unsubscribe
        """
        return self._subscribe(callback, callback)

    def listen_once(self, callback: Listener, bind_context: Any = None) -> Subscription:
        """Subscribe callback for a single invocation.

        The subscription is cancelled before callback runs, so later
        cycles never reach it. When bind_context is given it is passed
        as the first argument.
        """
        target = callback if bind_context is None else functools.partial(callback, bind_context)
        subscription: Optional[Subscription] = None

        def once(*args: Any) -> Any:
            subscription.unsubscribe()
            return target(*args)

        subscription = self._subscribe(callback, once)
        return subscription

    def unsubscribe_all(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def _subscribe(self, listener: Listener, invoke: Listener) -> Subscription:
        subscription = Subscription(
            listener=listener,
            event_type=self.event_type,
            emitter=self.emitter,
            on_cancel=self._forget,
        )

        def handler(args):
            if subscription.aborted:
                return
            result = invoke(*args)
            if is_deferred(result):
                self._track(listener, result)

        subscription.handler = handler
        self.emitter.add_listener(self.event_type, handler)
        self._subscriptions.append(subscription)
        return subscription

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _track(self, listener: Listener, result: Any) -> None:
        """Record a listener's deferred result for the current cycle."""
        if not self.can_handle_promise:
            discard(result)
            if self.warn_unhandled:
                logger.warning(f"Unhandled deferred result for {self.event_type}")
            return

        self._dispatch_records.append(
            DispatchRecord(listener=listener, result=asyncio.ensure_future(result))
        )

    def trigger_sync(self, *args: Any) -> Optional[asyncio.Future]:
        """Publish the event now, if should_emit agrees.

        Returns:
            Future settling once the cycle's deferred results are forwarded,
            or None if nothing was collected

        Raises:
            ReentrancyError: If nested cycles exceed max_trigger_depth
        """
        self._state = CycleState.PRE_EMIT
        pre_result = self.pre_emit(*args)
        if pre_result is not None:
            args = pre_result if is_argument_sequence(pre_result) else (pre_result,)

        self._state = CycleState.SHOULD_EMIT_CHECK
        if not self.should_emit(*args):
            logger.debug(f"Emission of {self.event_type} suppressed")
            self._state = CycleState.SUPPRESSED
            return None

        if self._depth >= self.max_trigger_depth:
            raise ReentrancyError(self.event_type, self._depth)

        # Nested cycles get their own record list; the outer one is restored after
        outer_records = self._dispatch_records
        self._dispatch_records = []
        self._depth += 1
        try:
            self._state = CycleState.FANOUT
            self.emitter.emit(self.event_type, args)
            self._state = CycleState.COLLECTING
            records = self._dispatch_records
        finally:
            self._dispatch_records = outer_records
            self._depth -= 1

        return self._handle_dispatch_records(records)

    def trigger(self, *args: Any) -> asyncio.Handle:
        """Publish the event on the next turn of the event loop."""
        return next_tick(self.trigger_sync, *args)

    def __call__(self, *args: Any) -> Any:
        """Trigger the event, synchronously if the publisher was built with sync=True."""
        if self.sync:
            return self.trigger_sync(*args)
        return self.trigger(*args)

    def resolve(self, value: Any) -> Optional[asyncio.Future]:
        raise MissingChildrenError(
            f"Publisher {self.event_type} has no completed and failed children"
        )

    def promise(self, deferred: Any) -> asyncio.Future:
        """Report the outcome of deferred through the child publishers."""
        raise MissingChildrenError(
            f"Publisher {self.event_type} has no completed and failed children"
        )

    def _handle_dispatch_records(
        self, records: list[DispatchRecord]
    ) -> Optional[asyncio.Future]:
        if not records:
            self._state = CycleState.IDLE
            return None

        self._state = CycleState.RESOLVING
        logger.debug(f"Resolving {len(records)} deferred result(s) for {self.event_type}")
        if len(records) == 1:
            resolution = self.resolve(records[0].result)
        else:
            resolution = self.resolve(
                asyncio.gather(*(_settle_listener(record) for record in records))
            )
        if resolution is not None:
            resolution.add_done_callback(self._on_resolved)
        return resolution

    def _on_resolved(self, _future: asyncio.Future) -> None:
        if self._state is CycleState.RESOLVING:
            self._state = CycleState.IDLE


async def _settle_listener(record: DispatchRecord) -> ListenerResult:
    return ListenerResult(listener=record.listener, value=await record.result)


class AsyncPublisher(Publisher):
    """Publisher that aggregates deferred results returned by its listeners.

    The outcome of each cycle is forwarded to ``completed`` (with the
    settled value) or ``failed`` (with the error). Children default to
    fresh publishers named after this one.
    """

    can_handle_promise = True

    def __init__(
        self,
        event_type: Optional[str] = None,
        *,
        completed: Optional[Publisher] = None,
        failed: Optional[Publisher] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(event_type, **kwargs)
        self.completed = completed if completed is not None else Publisher(
            f"{self.event_type}.completed"
        )
        self.failed = failed if failed is not None else Publisher(f"{self.event_type}.failed")

    def resolve(self, value: Any) -> Optional[asyncio.Future]:
        """Forward a value or deferred result to the child publishers.

        Plain values trigger ``completed`` immediately. Deferred results
        trigger ``completed`` or ``failed`` once settled; the returned
        future tracks that forwarding and never raises the deferred
        result's error.
        """
        if not is_deferred(value):
            self.completed(value)
            return None

        return asyncio.ensure_future(self._forward(asyncio.ensure_future(value)))

    def promise(self, deferred: Any) -> asyncio.Future:
        if not is_deferred(deferred):
            raise TypeError(f"Expected an awaitable, got {type(deferred).__name__}")
        return self.resolve(deferred)

    async def _forward(self, future: asyncio.Future) -> None:
        try:
            # Shielded so cancelling the forwarding leaves the result running
            response = await asyncio.shield(future)
        except asyncio.CancelledError:
            if not future.done():
                raise
            logger.debug(f"Deferred result for {self.event_type} was cancelled")
            return
        except Exception as e:
            logger.debug(f"Deferred result for {self.event_type} failed: {e}")
            self.failed(e)
        else:
            self.completed(response)
