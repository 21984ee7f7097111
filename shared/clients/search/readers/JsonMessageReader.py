from typing import Any

from shared.clients.search.readers.MessageReader import MessageReader
from shared.errors.ScrollErrors import DecodeError


class JsonMessageReader(MessageReader[dict[str, Any]]):
    """Default reader. Keeps each _source as a plain dict."""

    def decode_source(self, source: Any, document_id: str) -> dict[str, Any]:
        # _source can be disabled per query, which yields hits without it
        if source is None:
            return {}
        if not isinstance(source, dict):
            raise DecodeError(
                f"Document '{document_id}': expected a JSON object as _source, got {type(source).__name__}.",
                document_id=document_id,
            )
        return dict(source)
