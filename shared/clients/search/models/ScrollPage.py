from typing import Generic

from pydantic import BaseModel

from shared.clients.search.models.ReadResult import ReadResult, T


class ScrollPage(BaseModel, Generic[T]):
    """One decoded page of a scroll response.

    A page is either an error page (error set, nothing else) or a result page
    (scroll_id plus an ordered list of records). A result page without
    records marks the end of the result set.

    Attributes:
        error:     Error message reported by the search engine, if any.
        scroll_id: Cursor for the next page. May be None only on an empty page.
        records:   Decoded hits, in the order the engine returned them.
    """

    error: str | None = None
    scroll_id: str | None = None
    records: list[ReadResult[T]] = []

    @classmethod
    def failed(cls, message: str) -> "ScrollPage[T]":
        return cls(error=message)

    @classmethod
    def results(cls, scroll_id: str | None, records: list[ReadResult[T]]) -> "ScrollPage[T]":
        return cls(scroll_id=scroll_id, records=records)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_exhausted(self) -> bool:
        return not self.is_error and not self.records
