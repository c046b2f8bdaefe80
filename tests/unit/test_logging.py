"""Tests for structured logging helpers."""

import json
import logging

from emotriage.shared.infrastructure.logging import CustomJsonFormatter, log_latency


def format_record(**extra):
    formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s", environment="test")
    record = logging.LogRecord("emotriage.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


def test_adds_context_fields():
    payload = format_record(correlation_id="abc")

    assert payload["message"] == "hello"
    assert payload["environment"] == "test"
    assert payload["correlation_id"] == "abc"
    assert "timestamp" in payload


def test_redacts_sensitive_fields():
    payload = format_record(
        hf_token="hf_abc",
        shared_secret="s3cr3t",
        grafana_api_key="k",
        authorization="Bearer x",
        max_tokens="10",
        key="uploads/a.png",
    )

    assert payload["hf_token"] == "***REDACTED***"
    assert payload["shared_secret"] == "***REDACTED***"
    assert payload["grafana_api_key"] == "***REDACTED***"
    assert payload["authorization"] == "***REDACTED***"
    assert payload["max_tokens"] == "10"
    assert payload["key"] == "uploads/a.png"


def test_log_latency_accumulates_timings():
    logger = logging.getLogger("emotriage.test")
    timings = {}

    with log_latency(logger, "object_get", timings, "io"):
        pass
    with log_latency(logger, "object_head", timings, "io"):
        pass
    with log_latency(logger, "classifier_call", timings):
        pass

    assert set(timings) == {"io", "classifier_call"}
    assert all(value >= 0 for value in timings.values())


def test_log_latency_records_on_error():
    logger = logging.getLogger("emotriage.test")
    timings = {}

    try:
        with log_latency(logger, "classifier_call", timings, "classifier"):
            raise RuntimeError("fail")
    except RuntimeError:
        pass

    assert "classifier" in timings
