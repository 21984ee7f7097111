"""Error taxonomy for scroll streams.

Every error below is terminal for the stream that raised it. Nothing in
the streaming core retries; callers wanting a retry open a fresh stream.
"""


class ScrollStreamError(Exception):
    """Base class for all errors raised by a scroll stream."""


class TransportError(ScrollStreamError):
    """Network failure, unexpected HTTP status or a response body that cannot be parsed.

    Attributes:
        status_code (int | None): HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApplicationError(ScrollStreamError):
    """The search engine reported an error field in an otherwise well-formed response."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(ScrollStreamError):
    """A hit's source payload could not be converted into the target record type.

    Attributes:
        document_id (str | None): The _id of the offending hit.
        scroll_id (str | None): Cursor returned with the undecodable page, set by the reader.
    """

    def __init__(self, message: str, document_id: str | None = None, scroll_id: str | None = None):
        super().__init__(message)
        self.document_id = document_id
        self.scroll_id = scroll_id
