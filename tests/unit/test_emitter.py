"""Unit tests for the synchronous event emitter."""

import pytest

from pubnode import EventEmitter


class TestEventEmitter:
    """Tests for EventEmitter class."""

    def test_emit_calls_handlers_in_registration_order(self):
        """Handlers run in the order they were added."""
        emitter = EventEmitter()
        order = []

        emitter.add_listener("tick", lambda args: order.append(("first", args)))
        emitter.add_listener("tick", lambda args: order.append(("second", args)))

        assert emitter.emit("tick", (1, 2)) is True
        assert order == [("first", (1, 2)), ("second", (1, 2))]

    def test_emit_without_handlers_returns_false(self):
        """Emitting an event nobody listens to is a no-op."""
        emitter = EventEmitter()
        assert emitter.emit("tick", ()) is False

    def test_event_types_are_independent(self):
        """Handlers only receive their own event type."""
        emitter = EventEmitter()
        seen = []
        emitter.add_listener("a", lambda args: seen.append("a"))
        emitter.add_listener("b", lambda args: seen.append("b"))

        emitter.emit("b", ())

        assert seen == ["b"]

    def test_remove_listener(self):
        """Removed handlers are no longer called."""
        emitter = EventEmitter()
        seen = []

        def handler(args):
            seen.append(args)

        emitter.add_listener("tick", handler)
        emitter.remove_listener("tick", handler)
        emitter.emit("tick", (1,))

        assert seen == []
        assert emitter.listener_count("tick") == 0

    def test_remove_listener_removes_one_registration(self):
        """A handler added twice needs two removals."""
        emitter = EventEmitter()

        def handler(args):
            pass

        emitter.add_listener("tick", handler)
        emitter.add_listener("tick", handler)
        emitter.remove_listener("tick", handler)

        assert emitter.listeners("tick") == [handler]

    def test_remove_unknown_listener_is_noop(self):
        """Removing something never added does not raise."""
        emitter = EventEmitter()
        emitter.remove_listener("tick", lambda args: None)
        assert emitter.listener_count("tick") == 0

    def test_removal_during_emit_does_not_change_dispatch(self):
        """Handlers snapshot is taken when emit starts."""
        emitter = EventEmitter()
        seen = []

        def second(args):
            seen.append("second")

        def first(args):
            seen.append("first")
            emitter.remove_listener("tick", second)

        emitter.add_listener("tick", first)
        emitter.add_listener("tick", second)
        emitter.emit("tick", ())

        assert seen == ["first", "second"]
        assert emitter.listeners("tick") == [first]

    def test_handler_exception_propagates(self):
        """Errors raised by handlers reach the emitter's caller."""
        emitter = EventEmitter()

        def broken(args):
            raise ValueError("broken handler")

        emitter.add_listener("tick", broken)

        with pytest.raises(ValueError, match="broken handler"):
            emitter.emit("tick", ())

    def test_remove_all_listeners(self):
        """remove_all_listeners() clears one type or everything."""
        emitter = EventEmitter()
        emitter.add_listener("a", lambda args: None)
        emitter.add_listener("b", lambda args: None)

        emitter.remove_all_listeners("a")
        assert emitter.listener_count("a") == 0
        assert emitter.listener_count("b") == 1

        emitter.remove_all_listeners()
        assert emitter.listener_count("b") == 0
