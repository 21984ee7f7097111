from pydantic import BaseModel


class ScrollQueryRequest(BaseModel):
    """Body of POST /scroll.

    Exactly one of query and search_params must be set. Values of
    search_params are raw JSON text, e.g. {"_source": "[\\"title\\"]"}.
    """

    engine: str | None = None
    index: str | None = None
    type: str | None = None
    query: str | None = None
    search_params: dict[str, str] | None = None
