"""Explicit runtime context handed to a scroll stream at construction."""

import asyncio
import logging
from typing import Any, Protocol

from shared.clients.search.models.ScrollRequest import ScrollRequest


class ScrollTransport(Protocol):
    """What a scroll stream needs from the network layer."""

    async def do_execute(self, request: ScrollRequest) -> dict:
        """Send one logical scroll request and return the parsed JSON body.

        Raises:
            TransportError: On network failures, unexpected status codes or unparseable bodies.
        """
        ...

    async def do_clear_scroll(self, scroll_id: str) -> None:
        """Release a server-side cursor."""
        ...


class ScrollContext:
    """Holds everything a stream borrows from its surroundings.

    The transport (and its connection pool) is shared and not owned by the
    stream. The cancel event is per stream unless the caller wants one event
    to cancel several streams at once.

    Args:
        transport (ScrollTransport): Executes scroll requests.
        logger (Any): Logger used by the stream. Defaults to this module's logger.
        cancel_event (asyncio.Event | None): Setting it cancels the stream.
    """

    def __init__(self, transport: ScrollTransport, logger: Any = None, cancel_event: asyncio.Event | None = None):
        self.transport = transport
        self.logging = logger if logger is not None else logging.getLogger(__name__)
        self.cancel_event = cancel_event if cancel_event is not None else asyncio.Event()

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()
