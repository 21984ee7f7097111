import importlib

from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface


class SearchClientManager:
    """
    Holds one search client per engine listed in SEARCH_ENGINES.

    Engine "elasticsearch" resolves to the class SearchClientElasticsearch in
    the module shared.clients.search.elasticsearch.SearchClientElasticsearch,
    so adding an engine only needs a new subpackage following that layout.
    The first listed engine is the default for requests that name none.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._clients: dict[str, SearchClientInterface] = {}
        for engine in self._read_engine_names():
            self._clients[engine] = self._load_client(engine)

    ##########################################
    ################ LOADING #################
    ##########################################

    def _read_engine_names(self) -> list[str]:
        """
        Returns the lowercased, de-duplicated engine names from SEARCH_ENGINES.

        Raises:
            ValueError: If SEARCH_ENGINES is unset or empty.
        """
        names = list(dict.fromkeys(name.lower() for name in self.helper_config.get_list_val("SEARCH_ENGINES")))
        if not names:
            raise ValueError("SEARCH_ENGINES lists no search engine.")
        return names

    def _load_client(self, engine: str) -> SearchClientInterface:
        class_name = f"SearchClient{engine.capitalize()}"
        module_path = f"shared.clients.search.{engine}.{class_name}"
        try:
            client_class = getattr(importlib.import_module(module_path), class_name)
        except (ImportError, AttributeError) as exc:
            raise ValueError(f"Unsupported search engine '{engine}': no {class_name} in {module_path}.") from exc
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Loaded search client %s.", class_name)
        return client

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_clients(self) -> list[SearchClientInterface]:
        """Returns all configured clients in SEARCH_ENGINES order."""
        return list(self._clients.values())

    def get_client(self, engine: str | None = None) -> SearchClientInterface:
        """
        Returns the client for the given engine, or the default one.

        Args:
            engine (str | None): Engine name, case-insensitive (e.g. "elasticsearch").

        Returns:
            SearchClientInterface: The matching client.

        Raises:
            KeyError: If no client for the engine is configured.
        """
        if engine is None:
            return next(iter(self._clients.values()))
        try:
            return self._clients[engine.lower()]
        except KeyError:
            raise KeyError(f"Search engine '{engine}' is not configured.") from None
