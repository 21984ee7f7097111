from pydantic import BaseModel

from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings


class InitialSearchRequest(BaseModel):
    """The first request of a scroll: the full query, no cursor.

    Attributes:
        target:        Index to search.
        search_params: Parameter name to raw JSON text (e.g. {"query": "{\\"match_all\\":{}}"}).
        settings:      Stream settings used to add size/version/scroll extras.
    """

    target: IndexTarget
    search_params: dict[str, str]
    settings: ScrollSourceSettings


class ContinueScrollRequest(BaseModel):
    """A follow-up request. Carries only the cursor; the engine keeps the query server-side.

    Attributes:
        scroll_id: The cursor returned by the previous page.
        scroll:    Keep-alive to extend the cursor by.
    """

    scroll_id: str
    scroll: str


ScrollRequest = InitialSearchRequest | ContinueScrollRequest
