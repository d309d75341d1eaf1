"""Helpers for classifying listener results and scheduling work."""

import asyncio
import inspect
from typing import Any, Callable


def is_deferred(value: Any) -> bool:
    """Check whether a value is a result that may settle later.

    Futures, tasks and coroutines all count.
    """
    return inspect.isawaitable(value)


def is_argument_sequence(value: Any) -> bool:
    """Check whether a value can be used as-is as an argument list."""
    return isinstance(value, (tuple, list))


def next_tick(fn: Callable[..., Any], *args: Any) -> asyncio.Handle:
    """Run fn(*args) on a later turn of the running event loop.

    Callbacks scheduled this way run in the order they were scheduled.

    Raises:
        RuntimeError: If no event loop is running
    """
    loop = asyncio.get_running_loop()
    return loop.call_soon(fn, *args)


def discard(value: Any) -> None:
    """Drop a deferred result that nobody will await."""
    if inspect.iscoroutine(value):
        value.close()
