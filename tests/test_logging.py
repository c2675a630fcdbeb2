import json
import logging

from tripplanner.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx


def _record(**extra):
    record = logging.LogRecord("tripplanner.store", logging.INFO, __file__, 1, "added trip", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_carries_request_and_trip_context():
    token = request_id_ctx.set("abc123")
    try:
        record = _record(trip_id="t-1")
        RequestIdFilter().filter(record)
        payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_ctx.reset(token)
    assert payload["request_id"] == "abc123"
    assert payload["trip_id"] == "t-1"
    assert payload["logger"] == "tripplanner.store"
    assert "base_currency" not in payload


def test_request_id_header_is_echoed(client):
    resp = client.get("/health", headers={"x-request-id": "req-42"})
    assert resp.headers["x-request-id"] == "req-42"
