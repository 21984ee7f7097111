"""Scroll router: streams a whole result set as NDJSON."""

import json
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from server.dependencies.auth import verify_api_key
from server.models.requests import ScrollQueryRequest
from shared.clients.search.models.ScrollSettings import IndexTarget
from shared.errors.ScrollErrors import ScrollStreamError
from shared.streaming.ScrollSource import ScrollSource

router = APIRouter(tags=["scroll"])


@router.post("/scroll")
async def scroll_documents(
    request: Request,
    body: ScrollQueryRequest,
    _: None = Depends(verify_api_key),
) -> StreamingResponse:
    """Stream every document matching the query, one JSON record per line.

    Records are pulled from the search engine only as fast as the client
    reads the response. A failure after streaming started is reported as a
    final {"error": ...} line, since the status code has already been sent.

    Args:
        request (Request): FastAPI request (provides app.state.search_manager).
        body (ScrollQueryRequest): Engine, index and query of the scroll.
        _ (None): Auth dependency result (unused).

    Returns:
        StreamingResponse: application/x-ndjson body of {"id", "value", "version"} lines.

    Raises:
        HTTPException: 404 for an unknown engine, 422 for an invalid query or missing index.
    """
    logging = request.app.state.logging
    try:
        client = request.app.state.search_manager.get_client(body.engine)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]))

    target = IndexTarget(index_name=body.index, type_name=body.type) if body.index else None
    try:
        source = client.create_source(query=body.query, search_params=body.search_params, target=target)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    logging.info("Scroll requested on %s, index=%r", client.get_engine_name(), body.index or "<default>")
    return StreamingResponse(_stream_ndjson(source, logging), media_type="application/x-ndjson")


async def _stream_ndjson(source: ScrollSource, logging: Any) -> AsyncGenerator[str, None]:
    emitted = 0
    try:
        async for record in source:
            emitted += 1
            yield record.model_dump_json() + "\n"
        logging.info("Scroll stream finished, %d records sent.", emitted)
    except ScrollStreamError as exc:
        logging.error("Scroll stream failed after %d records: %s", emitted, exc)
        yield json.dumps({"error": str(exc), "type": type(exc).__name__}) + "\n"
    finally:
        # also runs when the client disconnects mid-stream
        await source.aclose()
