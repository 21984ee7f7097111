"""
Shared test fixtures for the search_scroll_bridge test suite.

Clients read their configuration from the environment, so every fixture
that builds one sets the variables it needs through monkeypatch.
"""

import logging

import pytest

from shared.clients.search.elasticsearch.SearchClientElasticsearch import SearchClientElasticsearch
from shared.helper.HelperConfig import HelperConfig

MATCH_ALL = '{"match_all":{}}'


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("tests")


@pytest.fixture
def helper_config(logger: logging.Logger) -> HelperConfig:
    return HelperConfig(logger=logger)


@pytest.fixture
def es_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Minimal environment for an Elasticsearch client reading index 'docs'."""
    for key in (
        "SEARCH_ELASTICSEARCH_USERNAME",
        "SEARCH_ELASTICSEARCH_PASSWORD",
        "SEARCH_ELASTICSEARCH_API_KEY",
        "SEARCH_ELASTICSEARCH_TYPE",
        "SEARCH_ELASTICSEARCH_API_VERSION",
        "SEARCH_ELASTICSEARCH_BUFFER_SIZE",
        "SEARCH_ELASTICSEARCH_SCROLL",
        "SEARCH_ELASTICSEARCH_INCLUDE_VERSION",
        "SEARCH_ELASTICSEARCH_CLEAR_SCROLL",
        "SEARCH_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_BASE_URL", "http://es.test:9200")
    monkeypatch.setenv("SEARCH_ELASTICSEARCH_INDEX", "docs")


@pytest.fixture
def es_client(es_env, helper_config: HelperConfig) -> SearchClientElasticsearch:
    """An unbooted Elasticsearch client. Tests boot it with a MockTransport."""
    return SearchClientElasticsearch(helper_config=helper_config)
