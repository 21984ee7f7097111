"""Tests for the NDJSON scroll endpoint."""

import asyncio
import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.routers.ScrollRouter import _stream_ndjson, router
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.streaming.StreamState import StreamState

API_KEY = "secret"


def _scroll_body(scroll_id: str, *doc_ids: str) -> dict:
    return {"_scroll_id": scroll_id, "hits": {"hits": [{"_id": d, "_source": {"name": d}, "_version": 1} for d in doc_ids]}}


@pytest.fixture
def make_app(monkeypatch, es_env, helper_config, logger):
    monkeypatch.setenv("APP_API_KEY", API_KEY)
    monkeypatch.setenv("SEARCH_ENGINES", "[elasticsearch]")

    def _make(handler) -> tuple[FastAPI, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        manager = SearchClientManager(helper_config)
        asyncio.run(manager.get_client().boot(transport=httpx.MockTransport(recording_handler)))

        app = FastAPI()
        app.include_router(router)
        app.state.logging = logger
        app.state.helper_config = helper_config
        app.state.search_manager = manager
        return app, seen

    return _make


def _paged_handler(*bodies: dict):
    responses = [httpx.Response(200, json=body) for body in bodies]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(200, json={"succeeded": True})
        return responses.pop(0)

    return handler


def test_missing_api_key_is_rejected(make_app):
    app, seen = make_app(_paged_handler())

    response = TestClient(app).post("/scroll", json={"query": '{"match_all":{}}'})

    assert response.status_code == 401
    assert seen == []


def test_streams_one_json_line_per_record(make_app):
    app, seen = make_app(_paged_handler(_scroll_body("c1", "1", "2"), _scroll_body("c2", "3"), _scroll_body("c3")))

    response = TestClient(app).post(
        "/scroll",
        json={"index": "articles", "search_params": {"query": '{"match_all":{}}', "_source": '["name"]'}},
        headers={"X-API-Key": API_KEY},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in response.text.splitlines()]
    assert lines == [
        {"id": "1", "value": {"name": "1"}, "version": 1},
        {"id": "2", "value": {"name": "2"}, "version": 1},
        {"id": "3", "value": {"name": "3"}, "version": 1},
    ]
    assert seen[0].url.path == "/articles/_search"
    assert [r.method for r in seen] == ["POST", "POST", "POST", "DELETE"]


def test_failure_mid_stream_ends_with_error_line(make_app):
    app, _ = make_app(_paged_handler(_scroll_body("c1", "1"), {"error": "search_context_missing_exception"}))

    response = TestClient(app).post("/scroll", json={"query": '{"match_all":{}}'}, headers={"X-API-Key": API_KEY})

    lines = [json.loads(line) for line in response.text.splitlines()]
    assert lines[0]["id"] == "1"
    assert lines[-1] == {"error": "search_context_missing_exception", "type": "ApplicationError"}


def test_unknown_engine_is_404(make_app):
    app, _ = make_app(_paged_handler())

    response = TestClient(app).post(
        "/scroll", json={"engine": "solr", "query": '{"match_all":{}}'}, headers={"X-API-Key": API_KEY}
    )

    assert response.status_code == 404


def test_ambiguous_query_is_422(make_app):
    app, seen = make_app(_paged_handler())

    response = TestClient(app).post(
        "/scroll",
        json={"query": '{"match_all":{}}', "search_params": {"query": '{"match_all":{}}'}},
        headers={"X-API-Key": API_KEY},
    )

    assert response.status_code == 422
    assert seen == []


@pytest.mark.asyncio
async def test_client_disconnect_closes_the_source(es_client, logger):
    seen: list[httpx.Request] = []
    handler = _paged_handler(_scroll_body("c1", "1", "2"), _scroll_body("c2", "3"))

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    await es_client.boot(transport=httpx.MockTransport(recording_handler))
    source = es_client.create_source(query='{"match_all":{}}')
    stream = _stream_ndjson(source, logger)

    assert json.loads(await stream.__anext__())["id"] == "1"
    await stream.aclose()

    assert source.state == StreamState.CANCELLED
    assert [r.method for r in seen] == ["POST", "DELETE"]
    assert json.loads(seen[-1].content) == {"scroll_id": ["c1"]}
    await es_client.close()
