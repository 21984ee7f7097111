from shared.clients.search.elasticsearch.SearchClientElasticsearch import SearchClientElasticsearch


class SearchClientOpensearch(SearchClientElasticsearch):
    """OpenSearch client. Shares the Elasticsearch scroll API; only auth differs."""

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Opensearch"

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        # OpenSearch has no ApiKey scheme, API_KEY is sent as a bearer token
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return super()._get_auth_header()
