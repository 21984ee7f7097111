"""FastAPI application entry point for search_scroll_bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.errors.ScrollErrors import TransportError
from server.routers.ScrollRouter import router as scroll_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    search_manager = SearchClientManager(helper_config=app.state.helper_config)
    search_clients = search_manager.get_clients()

    logging.info("Booting all search clients...")
    for client in search_clients:
        await client.boot()
    logging.info("All search clients booted successfully.")

    app.state.search_manager = search_manager

    await check_connections(search_clients)

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    for client in search_clients:
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="search_scroll_bridge",
    description=(
        "Streams complete search result sets out of Elasticsearch / OpenSearch "
        "using scroll cursors. POST /scroll returns NDJSON, fetching pages "
        "only as fast as the client consumes them."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scroll_router)


async def check_connections(search_clients: list[SearchClientInterface]) -> None:
    """Check connectivity to all configured search engines on startup.

    Unreachable engines are logged but do not stop the server; scrolls
    against them fail with a transport error instead.
    """
    for client in search_clients:
        try:
            result = await client.do_healthcheck()
        except TransportError as exc:
            logging.warning("Search client '%s' is not reachable: %s", client.get_engine_name(), exc)
            continue
        if not result.is_success:
            logging.warning(
                "Search client '%s' is not reachable (status %d). Scrolls may fail.",
                client.get_engine_name(),
                result.status_code,
            )


if __name__ == "__main__":
    import uvicorn

    logging.info("Starting search_scroll_bridge API Server v%s on port 8000...", app_version)
    uvicorn.run(app, host="0.0.0.0", port=8000)
