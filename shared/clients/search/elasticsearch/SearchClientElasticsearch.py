import base64
import json
from typing import Mapping

from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings
from shared.models.config import EnvConfig


class SearchClientElasticsearch(SearchClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._username = self.get_config_val("USERNAME", default="", val_type="string")
        self._password = self.get_config_val("PASSWORD", default="", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Elasticsearch"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="USERNAME", val_type="string", default=""),
            EnvConfig(env_key="PASSWORD", val_type="string", default=""),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="INDEX", val_type="string", default=""),
            EnvConfig(env_key="TYPE", val_type="string", default=""),
            EnvConfig(env_key="API_VERSION", val_type="string", default="v7"),
            EnvConfig(env_key="BUFFER_SIZE", val_type="number", default=10),
            EnvConfig(env_key="SCROLL", val_type="string", default="5m"),
            EnvConfig(env_key="INCLUDE_VERSION", val_type="bool", default=False),
            EnvConfig(env_key="CLEAR_SCROLL", val_type="bool", default=True),
        ]

    def validate_full_configuration(self) -> None:
        """
        Validates the env keys and that they combine into valid stream settings.

        Raises:
            ValueError: If a value is missing or invalid (e.g. API_VERSION "v6" or BUFFER_SIZE 0).
        """
        super().validate_full_configuration()
        _ = self.get_source_settings()

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"ApiKey {self._api_key}"}
        elif self._username:
            token = base64.b64encode(f"{self._username}:{self._password}".encode("utf-8")).decode("ascii")
            return {"Authorization": f"Basic {token}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/"

    def _get_endpoint_search(self, target: IndexTarget, settings: ScrollSourceSettings) -> str:
        if settings.api_version == "v5":
            return f"/{target.index_name}/{target.type_name}/_search"
        return f"/{target.index_name}/_search"

    def _get_endpoint_scroll(self) -> str:
        return "/_search/scroll"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_search_payload(self, search_params: Mapping[str, str], settings: ScrollSourceSettings) -> str:
        # values are raw JSON text and are spliced in verbatim; routing travels in the URL
        body_params = {name: value for name, value in search_params.items() if name != "routing"}
        if "size" not in body_params:
            body_params["size"] = str(settings.buffer_size)
        if settings.include_document_version and "version" not in body_params:
            body_params["version"] = "true"
        return "{" + ",".join(f"{json.dumps(name)}:{value}" for name, value in body_params.items()) + "}"

    def get_search_query_params(self, search_params: Mapping[str, str], settings: ScrollSourceSettings) -> dict:
        query_params = {"scroll": settings.scroll}
        if "routing" in search_params:
            query_params["routing"] = self._routing_value(search_params["routing"])
        # _doc order is the cheapest for scrolling when the caller does not care
        if "sort" not in search_params:
            query_params["sort"] = "_doc"
        return query_params

    def get_scroll_payload(self, scroll_id: str, scroll: str) -> dict:
        return {"scroll": scroll, "scroll_id": scroll_id}

    def get_clear_scroll_payload(self, scroll_id: str) -> dict:
        return {"scroll_id": [scroll_id]}

    @staticmethod
    def _routing_value(raw_routing: str) -> str:
        """
        Returns the routing key for the URL. Routing is the one parameter that
        never goes into the body, so it is accepted as a JSON string literal
        ('"user-1"') or as plain text ('user-1').
        """
        try:
            value = json.loads(raw_routing)
        except ValueError:
            return raw_routing
        return value if isinstance(value, str) else raw_routing
