"""Demand-driven scroll stream.

A ScrollSource pages through a search result set with a server-side scroll
cursor. Every call to __anext__ is one unit of demand: it emits exactly one
record, fetching and decoding a new page only when the local buffer is empty.

Usage:
    async with client.create_source(query='{"match_all": {}}') as source:
        async for record in source:
            print(record.id, record.value)
"""

import asyncio
from collections import deque
from typing import Generic, TypeVar

from shared.clients.search.models.ReadResult import ReadResult
from shared.clients.search.models.ScrollSettings import ScrollSourceSettings
from shared.clients.search.readers.MessageReader import MessageReader
from shared.errors.ScrollErrors import ApplicationError, DecodeError
from shared.streaming.ScrollContext import ScrollContext
from shared.streaming.ScrollRequestBuilder import ScrollRequestBuilder
from shared.streaming.StreamState import StreamState

T = TypeVar("T")


class ScrollSource(Generic[T]):
    """Async iterator over the records of one scroll.

    At most one page fetch is in flight at any time: concurrent consumers are
    serialised on an internal lock, and the next page is requested only after
    the previous one has been fully drained.

    Args:
        context (ScrollContext): Transport, logger and cancel event.
        request_builder (ScrollRequestBuilder): Builds the initial and continuation requests.
        reader (MessageReader[T]): Decodes raw responses into pages.
        settings (ScrollSourceSettings): Stream settings (cursor release, keep-alive).
    """

    def __init__(
        self,
        context: ScrollContext,
        request_builder: ScrollRequestBuilder,
        reader: MessageReader[T],
        settings: ScrollSourceSettings,
    ):
        self._context = context
        self._request_builder = request_builder
        self._reader = reader
        self._settings = settings
        self.logging = context.logging

        self._state = StreamState.NOT_STARTED
        self._buffer: deque[ReadResult[T]] = deque()
        self._scroll_id: str | None = None
        self._error: BaseException | None = None
        self._lock = asyncio.Lock()
        self._cursor_released = False
        self._pages_fetched = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def scroll_id(self) -> str | None:
        return self._scroll_id

    @property
    def error(self) -> BaseException | None:
        """The error that failed the stream, if it failed."""
        return self._error

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    ##########################################
    ############### ITERATION ################
    ##########################################

    def __aiter__(self) -> "ScrollSource[T]":
        return self

    async def __anext__(self) -> ReadResult[T]:
        """Emit the next record, fetching a page first if the buffer is empty.

        Returns:
            ReadResult[T]: The next record in result order.

        Raises:
            StopAsyncIteration: When the result set is exhausted, the stream was
                                cancelled, or the stream already terminated.
            TransportError: If the page fetch failed.
            ApplicationError: If the search engine answered with an error.
            DecodeError: If a hit of the fetched page could not be decoded.
        """
        async with self._lock:
            if self._state.is_terminal:
                raise StopAsyncIteration
            if self._context.is_cancelled:
                await self._terminate_cancelled()
                raise StopAsyncIteration
            if not self._buffer:
                await self._fetch_page()
            return self._buffer.popleft()

    async def to_list(self) -> list[ReadResult[T]]:
        """Drain all remaining records into a list."""
        return [record async for record in self]

    ##########################################
    ############# CANCELLATION ###############
    ##########################################

    def cancel(self) -> None:
        """Request cancellation. Takes effect on the next demand or when an in-flight page arrives."""
        self._context.cancel()

    async def aclose(self) -> None:
        """Cancel the stream and release the server-side cursor if possible."""
        self._context.cancel()
        if self._lock.locked():
            # the in-flight fetch will see the cancel flag once its page arrives
            return
        async with self._lock:
            await self._terminate_cancelled()

    async def __aenter__(self) -> "ScrollSource[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    ##########################################
    ############## STATE MACHINE #############
    ##########################################

    async def _fetch_page(self) -> None:
        """Fetch and decode the next page, leaving the stream BUFFERED or terminal.

        Raises:
            StopAsyncIteration: If the page was empty or the stream got cancelled meanwhile.
            Exception: Any transport, application or decode error, after failing the stream.
        """
        request = self._request_builder.build(self._state, self._scroll_id, len(self._buffer))
        self._state = StreamState.AWAITING_PAGE
        self.logging.debug("Requesting scroll page %d (%s)", self._pages_fetched + 1, type(request).__name__)

        try:
            raw_response = await self._context.transport.do_execute(request)
            page = self._reader.convert(raw_response)
        except asyncio.CancelledError:
            self._state = StreamState.CANCELLED
            self.logging.info("Scroll cancelled while awaiting page %d.", self._pages_fetched + 1)
            raise
        except Exception as exc:
            if isinstance(exc, DecodeError) and exc.scroll_id is not None:
                # the undecodable page still moved the cursor
                self._scroll_id = exc.scroll_id
            if self._context.is_cancelled:
                # a late failure is dropped like a late page
                await self._terminate_cancelled()
                raise StopAsyncIteration
            await self._terminate_failed(exc)
            raise
        self._pages_fetched += 1

        if page.scroll_id is not None:
            self._scroll_id = page.scroll_id

        if self._context.is_cancelled:
            # drop the late page; the cursor is never resumed after cancellation
            await self._terminate_cancelled()
            raise StopAsyncIteration

        if page.is_error:
            error = ApplicationError(page.error)
            await self._terminate_failed(error)
            raise error

        if page.is_exhausted:
            self._state = StreamState.EXHAUSTED
            self.logging.info("Scroll exhausted after %d pages.", self._pages_fetched)
            await self._release_cursor()
            raise StopAsyncIteration

        self._buffer.extend(page.records)
        self._state = StreamState.BUFFERED
        self.logging.debug("Buffered %d records from page %d.", len(page.records), self._pages_fetched)

    async def _terminate_failed(self, error: BaseException) -> None:
        self._state = StreamState.FAILED
        self._error = error
        self._buffer.clear()
        self.logging.error("Scroll failed on page %d: %s", self._pages_fetched + 1, error)
        await self._release_cursor()

    async def _terminate_cancelled(self) -> None:
        if not self._state.is_terminal:
            self._state = StreamState.CANCELLED
            self._buffer.clear()
            self.logging.info("Scroll cancelled after %d pages.", self._pages_fetched)
        await self._release_cursor()

    async def _release_cursor(self) -> None:
        """Best-effort release of the server-side cursor. Runs at most once per stream."""
        if self._cursor_released or not self._settings.clear_scroll or self._scroll_id is None:
            return
        self._cursor_released = True
        try:
            await self._context.transport.do_clear_scroll(self._scroll_id)
        except Exception as exc:
            self.logging.warning("Could not clear scroll cursor, the engine will expire it: %s", exc)
