"""HTTP contract tests for the gateway."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from libs.search_engine.base import RawSearchResult
from service_search.app.main import create_app


@pytest.fixture
def client(fake_engine, gateway_config):
    app = create_app(config=gateway_config, engine=fake_engine)
    with TestClient(app) as test_client:
        yield test_client


def parse_timestamp(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_create_documents(client, fake_engine):
    response = client.post("/documents", json=[
        {"title": "A", "content": "B"},
        {"title": "C", "content": "D"},
    ])

    assert response.status_code == 200
    assert response.content == b""
    assert len(fake_engine.bulk_calls) == 1
    _, entries = fake_engine.bulk_calls[0]
    ids = [doc_id for doc_id, _ in entries]
    assert len(ids) == 2 and len(set(ids)) == 2 and all(ids)
    stamps = [parse_timestamp(source["created_at"]) for _, source in entries]
    assert abs((stamps[0] - stamps[1]).total_seconds()) < 1


def test_create_empty_batch(client, fake_engine):
    response = client.post("/documents", json=[])
    assert response.status_code == 200
    assert fake_engine.bulk_calls == []


@pytest.mark.parametrize("body", [
    b"not json",
    b"",
    b'{"title": "A", "content": "B"}',
    b'[{"title": "A"}]',
    b'[1, 2]',
])
def test_create_documents_malformed_body(client, fake_engine, body):
    response = client.post("/documents", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Malformed request body"}
    assert fake_engine.bulk_calls == []


def test_create_documents_engine_failure(client, fake_engine):
    fake_engine.fail_bulk = True
    response = client.post("/documents", json=[{"title": "A", "content": "B"}])
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create documents"}


@pytest.mark.parametrize("url", ["/search?query=", "/search"])
def test_search_requires_query(client, fake_engine, url):
    response = client.get(url)
    assert response.status_code == 400
    assert response.json() == {"error": "Query not specified"}
    assert fake_engine.search_calls == []


def test_search_response_shape(client, fake_engine):
    fake_engine.canned_result = RawSearchResult(
        took_ms=4,
        total_hits=2,
        hits=[
            {"id": "x", "title": "T", "content": "C", "created_at": "2024-05-01T12:30:00Z"},
            {"title": "broken"},
        ],
    )

    response = client.get("/search", params={"query": "t"})

    assert response.status_code == 200
    assert response.json() == {
        "time": "4",
        "hits": "2",
        "documents": [{"title": "T", "content": "C", "created_at": "2024-05-01T12:30:00Z"}],
    }


@pytest.mark.parametrize("params,expected", [
    ({}, (0, 10)),
    ({"skip": "abc", "take": ""}, (0, 10)),
    ({"skip": "5", "take": "3"}, (5, 3)),
    ({"skip": "9" * 5000, "take": str(2 ** 70)}, (0, 10)),
    ({"skip": "٣"}, (0, 10)),
])
def test_search_pagination(client, fake_engine, params, expected):
    response = client.get("/search", params={"query": "hello", **params})
    assert response.status_code == 200
    call = fake_engine.search_calls[0]
    assert (call["offset"], call["limit"]) == expected


def test_search_engine_failure(client, fake_engine):
    fake_engine.fail_search = True
    response = client.get("/search", params={"query": "hello"})
    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong"}


def test_ingest_then_search_round_trip(client):
    ingested_at = datetime.now(timezone.utc)
    response = client.post("/documents", json=[{"title": "hello world", "content": "fuzzy search test"}])
    assert response.status_code == 200

    response = client.get("/search", params={"query": "hello"})

    assert response.status_code == 200
    body = response.json()
    assert body["hits"] == "1"
    [document] = body["documents"]
    assert document["title"] == "hello world"
    assert document["content"] == "fuzzy search test"
    assert abs((parse_timestamp(document["created_at"]) - ingested_at).total_seconds()) < 1


def test_health(client, fake_engine):
    assert client.get("/health").json()["status"] == "healthy"

    fake_engine.fail_connection = True
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_metrics_endpoint(client):
    client.get("/search", params={"query": "hello"})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "ds_search_requests_total" in response.text


def test_http_metrics_are_labelled_by_route_template(client):
    client.get("/search", params={"query": "hello"})
    client.get("/no-such-page-7f3a")

    text = client.get("/metrics").text

    assert 'endpoint="/search"' in text
    assert 'endpoint="unmatched"' in text
    assert "no-such-page-7f3a" not in text


def test_root(client):
    body = client.get("/").json()
    assert body["service"] == "search-gateway"
    assert body["endpoints"]["search"] == "/search"


def test_injected_engine_is_not_closed_on_shutdown(fake_engine, gateway_config):
    with TestClient(create_app(config=gateway_config, engine=fake_engine)):
        pass
    assert fake_engine.closed is False
