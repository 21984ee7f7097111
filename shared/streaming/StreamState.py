from enum import Enum


class StreamState(str, Enum):
    """Lifecycle of a single scroll stream."""

    NOT_STARTED = "not_started"
    AWAITING_PAGE = "awaiting_page"
    BUFFERED = "buffered"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (StreamState.EXHAUSTED, StreamState.FAILED, StreamState.CANCELLED)
