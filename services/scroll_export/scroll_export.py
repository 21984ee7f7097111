"""Export runner entry point.

Streams every document matching EXPORT_QUERY out of the first configured
search engine into an NDJSON file.

Usage:
    python -m services.scroll_export.scroll_export

Environment:
    EXPORT_QUERY    Raw JSON query clause (default: {"match_all": {}}).
    EXPORT_SOURCE   Optional raw JSON _source filter, e.g. ["title", "created"].
    EXPORT_INDEX    Index to read (default: the engine's configured INDEX).
    EXPORT_OUTPUT   Destination file (default: export.ndjson).
"""

import asyncio
from pathlib import Path

from shared.clients.search.SearchClientManager import SearchClientManager
from shared.clients.search.models.ScrollSettings import IndexTarget
from services.scroll_export.ExportService import ExportService
from shared.errors.ScrollErrors import ScrollStreamError
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging


def build_search_params(config: HelperConfig) -> dict[str, str]:
    """Collect the search parameters of the export from the environment."""
    search_params = {"query": config.get_string_val("EXPORT_QUERY", default='{"match_all": {}}')}
    source_filter = config.get_string_val("EXPORT_SOURCE", default="")
    if source_filter:
        search_params["_source"] = source_filter
    return search_params


async def main() -> int:
    """Run one export. Returns the process exit code."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    search_client = SearchClientManager(helper_config=config).get_client()

    index_name = config.get_string_val("EXPORT_INDEX", default="")
    target = IndexTarget(index_name=index_name) if index_name else None
    output_path = Path(config.get_string_val("EXPORT_OUTPUT", default="export.ndjson"))

    try:
        await search_client.boot()
        count = await ExportService(helper_config=config).do_export(
            search_client=search_client,
            search_params=build_search_params(config),
            output_path=output_path,
            target=target,
        )
        logger.info("Exported %d documents from %s.", count, search_client.get_engine_name(), color="green")
        return 0
    except ScrollStreamError as e:
        logger.error(f"Export from {search_client.get_engine_name()} failed: {e}")
        return 1
    finally:
        await search_client.close()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
