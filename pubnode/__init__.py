"""Publisher nodes with pre-emit hooks and deferred result aggregation."""

from .config import Config, config
from .emitter import EventEmitter
from .errors import MissingChildrenError, PublisherError, ReentrancyError
from .log import configure_logging
from .publisher import AsyncPublisher, Publisher
from .types import CycleState, DispatchRecord, ListenerResult, Subscription
from .utils import is_argument_sequence, is_deferred, next_tick

__all__ = [
    "AsyncPublisher",
    "Config",
    "CycleState",
    "DispatchRecord",
    "EventEmitter",
    "ListenerResult",
    "MissingChildrenError",
    "Publisher",
    "PublisherError",
    "ReentrancyError",
    "Subscription",
    "config",
    "configure_logging",
    "is_argument_sequence",
    "is_deferred",
    "next_tick",
]
