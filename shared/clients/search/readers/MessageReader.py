from abc import ABC, abstractmethod
import json
import math
from typing import Any, Generic, TypeVar

from shared.clients.search.models.ReadResult import ReadResult
from shared.clients.search.models.ScrollPage import ScrollPage
from shared.errors.ScrollErrors import DecodeError, TransportError

T = TypeVar("T")


class MessageReader(ABC, Generic[T]):
    """Decodes one raw scroll response into a ScrollPage.

    Subclasses only decide how a hit's _source becomes a T. Envelope handling
    (error detection, cursor, hit list, _id and _version) is shared.
    """

    ##########################################
    ############### DECODING #################
    ##########################################

    def convert(self, raw_response: dict) -> ScrollPage[T]:
        """Convert a parsed scroll response into a page.

        An error field takes priority over anything else in the response; no
        hits are decoded from an error-bearing response. All hits of a page are
        decoded before the page is returned, so a single bad hit discards the
        whole page.

        Args:
            raw_response (dict): The JSON body of a search or scroll response.

        Returns:
            ScrollPage[T]: Either an error page or a result page.

        Raises:
            TransportError: If the response is structurally malformed.
            DecodeError: If a hit's _source cannot be converted into T. Carries
                         the page's cursor so it can still be released.
        """
        if "error" in raw_response:
            return ScrollPage.failed(self._error_message(raw_response["error"]))

        hits = self._extract_hits(raw_response)
        scroll_id = raw_response.get("_scroll_id")
        if hits and not isinstance(scroll_id, str):
            raise TransportError("Malformed scroll response: hits present but no _scroll_id.")

        try:
            records = [self._read_hit(hit) for hit in hits]
        except DecodeError as exc:
            exc.scroll_id = scroll_id
            raise
        return ScrollPage.results(scroll_id=scroll_id, records=records)

    @abstractmethod
    def decode_source(self, source: Any, document_id: str) -> T:
        """
        Converts a hit's _source payload into the target type.

        Args:
            source (Any): The raw _source value. None if the hit carried no source.
            document_id (str): The hit's _id, for error reporting.

        Returns:
            T: The decoded value.

        Raises:
            DecodeError: If the payload cannot be converted.
        """
        pass

    ##########################################
    ################ HELPER ##################
    ##########################################

    def _extract_hits(self, raw_response: dict) -> list:
        hits = raw_response.get("hits")
        if not isinstance(hits, dict) or not isinstance(hits.get("hits"), list):
            raise TransportError("Malformed scroll response: missing hits.hits array.")
        return hits["hits"]

    def _read_hit(self, hit: Any) -> ReadResult[T]:
        if not isinstance(hit, dict) or "_id" not in hit:
            raise TransportError("Malformed scroll response: hit without _id.")
        document_id = str(hit["_id"])
        value = self.decode_source(hit.get("_source"), document_id)
        return ReadResult(id=document_id, value=value, version=self._read_version(hit.get("_version")))

    @staticmethod
    def _read_version(raw_version: Any) -> int | None:
        # only JSON numbers count; bool is an int subclass in python
        if isinstance(raw_version, bool) or not isinstance(raw_version, (int, float)):
            return None
        if isinstance(raw_version, float) and not math.isfinite(raw_version):
            return None
        return int(raw_version)

    @staticmethod
    def _error_message(raw_error: Any) -> str:
        if isinstance(raw_error, str):
            return raw_error
        return json.dumps(raw_error, separators=(",", ":"))
