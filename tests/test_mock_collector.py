import pytest

import mock_collector


@pytest.fixture
def client():
    mock_collector.events.clear()
    mock_collector.app.config["TESTING"] = True
    with mock_collector.app.test_client() as client:
        yield client


def test_collects_log_and_trace_events(client):
    assert client.post("/v1/log", json={"value": "[GET] /ask"}).status_code == 200
    client.post("/v1/trace", json={"traceId": "t", "parentSpanId": "s", "spanId": "",
                                   "operation": "vdc-processing", "message": "vdc-request"})

    events = client.get("/v1/events").get_json()
    assert [e["kind"] for e in events] == ["log", "trace"]
    assert events[0]["payload"] == {"value": "[GET] /ask"}


def test_unknown_kind(client):
    assert client.post("/v1/metrics", json={}).status_code == 404
    assert mock_collector.events == []
