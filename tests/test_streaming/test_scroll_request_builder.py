"""Tests for building initial and continuation scroll requests."""

import pytest

from shared.clients.search.models.ScrollRequest import ContinueScrollRequest, InitialSearchRequest
from shared.clients.search.models.ScrollSettings import IndexTarget, ScrollSourceSettings
from shared.streaming.ScrollRequestBuilder import ScrollRequestBuilder
from shared.streaming.StreamState import StreamState


def _builder(search_params: dict) -> ScrollRequestBuilder:
    return ScrollRequestBuilder(
        target=IndexTarget(index_name="docs"),
        search_params=search_params,
        settings=ScrollSourceSettings(scroll="1m"),
    )


def test_initial_request_carries_query_and_filters_but_no_cursor():
    params = {"query": '{"match_all":{}}', "_source": '["title"]'}

    request = _builder(params).build(StreamState.NOT_STARTED)

    assert isinstance(request, InitialSearchRequest)
    assert request.search_params == params
    assert request.target.index_name == "docs"
    assert not hasattr(request, "scroll_id")


def test_continuation_carries_only_the_cursor():
    request = _builder({"query": '{"term":{"a":1}}'}).build(StreamState.BUFFERED, scroll_id="abc")

    assert request == ContinueScrollRequest(scroll_id="abc", scroll="1m")
    assert "query" not in request.model_dump()


def test_search_params_are_copied_on_construction():
    params = {"query": '{"match_all":{}}'}
    builder = _builder(params)

    params["query"] = '{"term":{"changed":true}}'
    params["size"] = "1"

    assert builder.build(StreamState.NOT_STARTED).search_params == {"query": '{"match_all":{}}'}
    with pytest.raises(TypeError):
        builder.search_params["query"] = "{}"


@pytest.mark.parametrize(
    "state",
    [StreamState.AWAITING_PAGE, StreamState.EXHAUSTED, StreamState.FAILED, StreamState.CANCELLED],
)
def test_no_request_in_flight_or_terminal_states(state):
    with pytest.raises(RuntimeError):
        _builder({"query": "{}"}).build(state, scroll_id="abc")


def test_no_continuation_while_records_are_buffered():
    with pytest.raises(RuntimeError):
        _builder({"query": "{}"}).build(StreamState.BUFFERED, scroll_id="abc", buffered=3)


def test_no_continuation_without_cursor():
    with pytest.raises(RuntimeError):
        _builder({"query": "{}"}).build(StreamState.BUFFERED, scroll_id=None)
