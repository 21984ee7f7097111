from abc import abstractmethod
from typing import Any, Mapping, TypeVar
import json

import httpx
from shared.clients.ClientInterface import ClientInterface
from shared.clients.search.models.ScrollRequest import ContinueScrollRequest, InitialSearchRequest, ScrollRequest
from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings
from shared.clients.search.readers.JsonMessageReader import JsonMessageReader
from shared.clients.search.readers.MessageReader import MessageReader
from shared.clients.search.readers.TypedMessageReader import TypedMessageReader
from shared.errors.ScrollErrors import TransportError
from shared.helper.HelperConfig import HelperConfig
from shared.streaming.ScrollContext import ScrollContext
from shared.streaming.ScrollRequestBuilder import ScrollRequestBuilder
from shared.streaming.ScrollSource import ScrollSource

T = TypeVar("T")


class SearchClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "search"
        """
        return "search"

    ################ CONFIG ##################
    def get_source_settings(self) -> ScrollSourceSettings:
        """
        Builds the default stream settings from the client configuration.

        Returns:
            ScrollSourceSettings: Settings used when a stream is opened without explicit ones.
        """
        return ScrollSourceSettings(
            buffer_size=int(self.get_config_val("BUFFER_SIZE", default=10, val_type="number")),
            scroll=self.get_config_val("SCROLL", default="5m", val_type="string"),
            include_document_version=self.get_config_val("INCLUDE_VERSION", default=False, val_type="bool"),
            api_version=self.get_config_val("API_VERSION", default="v7", val_type="string").lower(),
            clear_scroll=self.get_config_val("CLEAR_SCROLL", default=True, val_type="bool"),
        )

    def get_default_target(self) -> IndexTarget | None:
        """
        Returns the index configured for the client, if any.

        Returns:
            IndexTarget | None: The configured index, or None when no INDEX is set.
        """
        index_name = self.get_config_val("INDEX", default="", val_type="string")
        if not index_name:
            return None
        type_name = self.get_config_val("TYPE", default="", val_type="string")
        return IndexTarget(index_name=index_name, type_name=type_name or None)

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_search(self, target: IndexTarget, settings: ScrollSourceSettings) -> str:
        """
        Returns the endpoint path for the initial search request of a scroll.

        Args:
            target (IndexTarget): The index to search.
            settings (ScrollSourceSettings): Stream settings (selects the API layout).

        Returns:
            str: The endpoint path (e.g. "/my_index/_search")
        """
        pass

    @abstractmethod
    def _get_endpoint_scroll(self) -> str:
        """
        Returns the endpoint path for scroll continuation and clear requests.

        Returns:
            str: The endpoint path (e.g. "/_search/scroll")
        """
        pass

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    @abstractmethod
    def get_search_payload(self, search_params: Mapping[str, str], settings: ScrollSourceSettings) -> str:
        """
        Builds the JSON body of the initial search request.

        Args:
            search_params (Mapping[str, str]): Parameter name to raw JSON text.
            settings (ScrollSourceSettings): Stream settings (page size, version flag).

        Returns:
            str: The serialised JSON body.
        """
        pass

    @abstractmethod
    def get_search_query_params(self, search_params: Mapping[str, str], settings: ScrollSourceSettings) -> dict:
        """
        Builds the URL query parameters of the initial search request.

        Args:
            search_params (Mapping[str, str]): Parameter name to raw JSON text.
            settings (ScrollSourceSettings): Stream settings (keep-alive).

        Returns:
            dict: Query parameters (e.g. {"scroll": "5m", "sort": "_doc"}).
        """
        pass

    @abstractmethod
    def get_scroll_payload(self, scroll_id: str, scroll: str) -> dict:
        """
        Builds the body of a scroll continuation request.

        Args:
            scroll_id (str): The cursor of the previous page.
            scroll (str): Keep-alive for the cursor.

        Returns:
            dict: The payload for the scroll request.
        """
        pass

    @abstractmethod
    def get_clear_scroll_payload(self, scroll_id: str) -> dict:
        """
        Builds the body of a clear-scroll request.

        Args:
            scroll_id (str): The cursor to release.

        Returns:
            dict: The payload for the clear request.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_execute(self, request: ScrollRequest) -> dict:
        """Send one logical scroll request and return the parsed response body.

        Args:
            request (ScrollRequest): Either the initial search or a continuation.

        Returns:
            dict: The parsed JSON body. Bodies carrying an "error" field are
                  returned even for non-2xx statuses, so the reader can report them.

        Raises:
            TransportError: On network errors, unparseable bodies or non-2xx
                            statuses without an error body.
        """
        if isinstance(request, InitialSearchRequest):
            resp = await self.do_request(
                method="POST",
                content=self.get_search_payload(request.search_params, request.settings),
                params=self.get_search_query_params(request.search_params, request.settings),
                endpoint=self._get_endpoint_search(request.target, request.settings),
                additional_headers={"Content-Type": "application/json"},
            )
        elif isinstance(request, ContinueScrollRequest):
            resp = await self.do_request(
                method="POST",
                content=json.dumps(self.get_scroll_payload(request.scroll_id, request.scroll)),
                endpoint=self._get_endpoint_scroll(),
                additional_headers={"Content-Type": "application/json"},
            )
        else:
            raise TypeError(f"Unsupported scroll request type: {type(request).__name__}")
        return self._parse_response(resp)

    async def do_clear_scroll(self, scroll_id: str) -> None:
        """Release a server-side scroll cursor.

        Args:
            scroll_id (str): The cursor to release.

        Raises:
            TransportError: If the request fails.
        """
        await self.do_request(
            method="DELETE",
            content=json.dumps(self.get_clear_scroll_payload(scroll_id)),
            endpoint=self._get_endpoint_scroll(),
            additional_headers={"Content-Type": "application/json"},
            raise_on_error=True,
        )
        self.logging.debug("Cleared scroll cursor on %s.", self.get_engine_name())

    def _parse_response(self, resp: httpx.Response) -> dict:
        try:
            body = resp.json()
        except ValueError as exc:
            raise TransportError(
                f"Unparseable response from {self.get_engine_name()} (status {resp.status_code}): {resp.text[:200]}",
                status_code=resp.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(
                f"Unexpected response from {self.get_engine_name()}: expected a JSON object.",
                status_code=resp.status_code,
            )
        if not resp.is_success and "error" not in body:
            self.logging.error("Scroll request failed with status %d: %s", resp.status_code, resp.text)
            raise TransportError(
                f"Scroll request failed with status {resp.status_code}",
                status_code=resp.status_code,
            )
        return body

    ##########################################
    ############ STREAM FACTORIES ############
    ##########################################

    def open_source(
        self,
        reader: MessageReader[T],
        query: str | None = None,
        search_params: Mapping[str, str] | None = None,
        target: IndexTarget | None = None,
        settings: ScrollSourceSettings | None = None,
        context: ScrollContext | None = None,
    ) -> ScrollSource[T]:
        """Open a scroll stream decoded by the given reader.

        Exactly one of query and search_params must be given. A bare query is
        shorthand for {"query": query}.

        Args:
            reader (MessageReader[T]): Decodes each page.
            query (str | None): Raw JSON text of the query clause.
            search_params (Mapping[str, str] | None): Parameter name to raw JSON text,
                e.g. {"query": '{"match_all": {}}', "_source": '["title"]'}.
            target (IndexTarget | None): Index to read. Defaults to the configured INDEX.
            settings (ScrollSourceSettings | None): Defaults to get_source_settings().
            context (ScrollContext | None): Defaults to a fresh context on this client.

        Returns:
            ScrollSource[T]: A stream that performs no I/O until first iterated.

        Raises:
            ValueError: If the query arguments or the target are missing or ambiguous.
        """
        if (query is None) == (search_params is None):
            raise ValueError("Pass exactly one of 'query' or 'search_params'.")
        params = {"query": query} if query is not None else dict(search_params)

        target = target or self.get_default_target()
        if target is None:
            raise ValueError(f"No index given and {self._get_config_key_name('INDEX')} is not set.")
        settings = settings or self.get_source_settings()
        if settings.api_version == "v5" and not target.type_name:
            raise ValueError("The v5 API layout requires a type_name on the target.")

        context = context or ScrollContext(transport=self, logger=self.logging)
        self.logging.debug("Opening scroll on %s index '%s'.", self.get_engine_name(), target.index_name)
        return ScrollSource(
            context=context,
            request_builder=ScrollRequestBuilder(target=target, search_params=params, settings=settings),
            reader=reader,
            settings=settings,
        )

    def create_source(self, query: str | None = None, search_params: Mapping[str, str] | None = None, **kwargs: Any) -> ScrollSource[dict[str, Any]]:
        """Open a scroll stream emitting each _source as a plain dict. See open_source()."""
        return self.open_source(JsonMessageReader(), query=query, search_params=search_params, **kwargs)

    def typed_source(self, target_type: type[T], query: str | None = None, search_params: Mapping[str, str] | None = None, **kwargs: Any) -> ScrollSource[T]:
        """Open a scroll stream emitting each _source validated into target_type. See open_source()."""
        return self.open_source(TypedMessageReader(target_type), query=query, search_params=search_params, **kwargs)
