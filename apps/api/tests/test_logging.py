"""
Tests for structured JSON logging
"""
import json
import logging

from core.logging import JSONFormatter


def _record(msg, **attrs):
    record = logging.LogRecord("services.scoring_engine", logging.INFO, __file__, 10, msg, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record("Assessment scored")))
        assert data["level"] == "INFO"
        assert data["logger"] == "services.scoring_engine"
        assert data["message"] == "Assessment scored"
        assert "timestamp" in data

    def test_extra_fields_merged(self):
        record = _record("Assessment scored", extra_fields={"test_type": "100m-sprint", "score": 75})
        data = json.loads(JSONFormatter().format(record))
        assert data["test_type"] == "100m-sprint"
        assert data["score"] == 75

    def test_non_serializable_extra(self):
        from datetime import datetime, timezone

        when = datetime(2024, 3, 1, tzinfo=timezone.utc)
        data = json.loads(JSONFormatter().format(_record("x", extra_fields={"at": when})))
        assert data["at"] == str(when)
