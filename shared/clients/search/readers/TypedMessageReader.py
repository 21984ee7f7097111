from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from shared.clients.search.readers.MessageReader import MessageReader
from shared.errors.ScrollErrors import DecodeError

T = TypeVar("T")


class TypedMessageReader(MessageReader[T]):
    """Reader that validates each _source into a caller-supplied type.

    Any type pydantic can validate works as a target: BaseModel subclasses,
    dataclasses, TypedDicts or plain containers such as dict[str, int].

    Args:
        target_type (type[T]): The type every _source is converted into.
    """

    def __init__(self, target_type: type[T]):
        self._target_type = target_type
        self._adapter: TypeAdapter[T] = TypeAdapter(target_type)

    def decode_source(self, source: Any, document_id: str) -> T:
        try:
            return self._adapter.validate_python(source)
        except ValidationError as exc:
            raise DecodeError(
                f"Document '{document_id}' could not be decoded into {getattr(self._target_type, '__name__', self._target_type)}: {exc}",
                document_id=document_id,
            ) from exc
