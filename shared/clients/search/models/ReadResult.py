from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ReadResult(BaseModel, Generic[T]):
    """A single document emitted by a scroll stream.

    Attributes:
        id:      The document identifier (_id) as returned by the search engine.
        value:   The decoded _source payload.
        version: The document _version. Only set when the engine returned a
                 numeric version for the hit.
    """

    id: str
    value: T
    version: int | None = None
