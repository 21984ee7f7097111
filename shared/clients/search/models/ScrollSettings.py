from typing import Literal

from pydantic import BaseModel, Field


class IndexTarget(BaseModel):
    """The index (and, for the legacy v5 layout, the mapping type) a scroll reads from.

    Attributes:
        index_name: Name of the index or alias to search.
        type_name:  Mapping type. Only used with api_version "v5".
    """

    index_name: str
    type_name: str | None = None


class ScrollSourceSettings(BaseModel):
    """Tunables for a single scroll stream.

    Attributes:
        buffer_size:              Page size sent as "size" unless the search parameters set one.
        scroll:                   Keep-alive for the server-side cursor (e.g. "5m").
        include_document_version: Ask the engine to return _version with each hit.
        api_version:              Endpoint layout. "v5" includes the mapping type in the path.
        clear_scroll:             Release the server-side cursor when the stream terminates.
    """

    buffer_size: int = Field(default=10, gt=0)
    scroll: str = "5m"
    include_document_version: bool = False
    api_version: Literal["v5", "v7"] = "v7"
    clear_scroll: bool = True
