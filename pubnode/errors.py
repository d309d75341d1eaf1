"""Exceptions raised by publishers."""


class PublisherError(Exception):
    """Base class for publisher failures."""

    pass


class ReentrancyError(PublisherError):
    """Raised when nested trigger_sync cycles on one publisher go too deep."""

    def __init__(self, event_type: str, depth: int):
        self.event_type = event_type
        self.depth = depth
        super().__init__(f"Nested cycles for {event_type} exceeded depth {depth}")


class MissingChildrenError(PublisherError):
    """Raised when a publisher without completed/failed children is asked to resolve."""

    pass
