"""Export service.

Drains a scroll into a newline-delimited JSON file, one record per line.
"""

from pathlib import Path
from typing import Mapping

from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings
from shared.helper.HelperConfig import HelperConfig

PROGRESS_EVERY = 1000   # log progress every N records


class ExportService:
    """Writes every document of a scroll to disk."""

    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()

    async def do_export(
        self,
        search_client: SearchClientInterface,
        search_params: Mapping[str, str],
        output_path: Path,
        target: IndexTarget | None = None,
        settings: ScrollSourceSettings | None = None,
    ) -> int:
        """Export all documents matching the search parameters.

        The file is written to a temporary sibling and only moved into place
        once the scroll completed, so a failed export never leaves a partial
        file under output_path.

        Args:
            search_client (SearchClientInterface): A booted search client.
            search_params (Mapping[str, str]): Parameter name to raw JSON text.
            output_path (Path): Destination NDJSON file.
            target (IndexTarget | None): Index to read. Defaults to the client's configured index.
            settings (ScrollSourceSettings | None): Stream settings override.

        Returns:
            int: Number of exported records.

        Raises:
            ScrollStreamError: If the scroll fails; the partial file is removed.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = output_path.with_name(output_path.name + ".part")
        count = 0

        try:
            async with search_client.create_source(search_params=search_params, target=target, settings=settings) as source:
                with tmp_path.open("w", encoding="utf-8") as fh:
                    async for record in source:
                        fh.write(record.model_dump_json() + "\n")
                        count += 1
                        if count % PROGRESS_EVERY == 0:
                            self.logging.info("Exported %d records so far (%d pages).", count, source.pages_fetched)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        tmp_path.replace(output_path)
        self.logging.info("Export finished: %d records written to %s.", count, output_path)
        return count
