# tests/unit/core/test_logger.py
from __future__ import annotations

import json
import logging

from vidshare.core.logger import JSONFormatter, RequestIdFilter, ensure_request_id


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("vidshare.services", logging.INFO, __file__, 1, "auth.login.success", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_promoted_extras():
    payload = json.loads(JSONFormatter().format(_record(identity_id=7, reason="x", request_id="r1")))

    assert payload["message"] == "auth.login.success"
    assert payload["level"] == "INFO"
    assert payload["identity_id"] == 7
    assert payload["reason"] == "x"
    assert payload["request_id"] == "r1"


def test_filter_keeps_explicit_request_id():
    record = _record(request_id="from-service")
    RequestIdFilter().filter(record)
    assert record.request_id == "from-service"


def test_filter_outside_request_sets_none():
    record = _record()
    RequestIdFilter().filter(record)
    assert record.request_id is None


def test_ensure_request_id_prefers_header(app):
    with app.test_request_context("/", headers={"X-Correlation-ID": "corr-9"}):
        assert ensure_request_id() == "corr-9"
        assert ensure_request_id() == "corr-9"


def test_response_carries_request_id(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "abc"})
    assert resp.headers["X-Request-ID"] == "abc"
