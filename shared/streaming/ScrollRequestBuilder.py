from types import MappingProxyType
from typing import Mapping

from shared.clients.search.models.ScrollRequest import ContinueScrollRequest, InitialSearchRequest, ScrollRequest
from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings
from shared.streaming.StreamState import StreamState


class ScrollRequestBuilder:
    """Builds the next logical request of a scroll from the stream's state.

    Args:
        target (IndexTarget): Index to search.
        search_params (Mapping[str, str]): Parameter name to raw JSON text. Copied on construction.
        settings (ScrollSourceSettings): Stream settings.
    """

    def __init__(self, target: IndexTarget, search_params: Mapping[str, str], settings: ScrollSourceSettings):
        self._target = target
        self._search_params = MappingProxyType(dict(search_params))
        self._settings = settings

    @property
    def search_params(self) -> Mapping[str, str]:
        return self._search_params

    def build(self, state: StreamState, scroll_id: str | None = None, buffered: int = 0) -> ScrollRequest:
        """Return the request that fetches the next page.

        Args:
            state (StreamState): Current state of the stream.
            scroll_id (str | None): Cursor of the last page, if any.
            buffered (int): Number of records still waiting in the stream buffer.

        Returns:
            ScrollRequest: The initial search for a fresh stream, otherwise a
                           continuation carrying only the cursor.

        Raises:
            RuntimeError: If no fetch is allowed in the given state.
        """
        if state == StreamState.NOT_STARTED:
            return InitialSearchRequest(
                target=self._target,
                search_params=dict(self._search_params),
                settings=self._settings,
            )
        if state == StreamState.BUFFERED:
            if buffered:
                raise RuntimeError(f"Refusing to fetch the next page while {buffered} buffered records remain.")
            if scroll_id is None:
                raise RuntimeError("Cannot continue a scroll without a cursor.")
            return ContinueScrollRequest(scroll_id=scroll_id, scroll=self._settings.scroll)
        raise RuntimeError(f"No page may be requested in state '{state.value}'.")
