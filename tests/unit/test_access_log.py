"""
Unit tests for the access log.
"""

import json
import logging
import re

from fileserver.access_log import RequestLog, common_log_timestamp, log_request


def make_entry(**overrides) -> RequestLog:
    fields = dict(
        connection_id="a1b2c3d4",
        request_line="GET /index.html HTTP/1.1",
        client_ip="127.0.0.1",
        user_agent="pytest",
        status_code=200,
        content_length=1342,
        duration_ms=0.8421,
        timestamp="19/Oct/2026:14:03:11 +0000",
    )
    fields.update(overrides)
    return RequestLog(**fields)


class TestRequestLog:
    """Tests for RequestLog formatting."""

    def test_to_text(self):
        assert make_entry().to_text() == (
            '127.0.0.1 - - [19/Oct/2026:14:03:11 +0000] '
            '"GET /index.html HTTP/1.1" 200 1342 0.84ms'
        )

    def test_to_dict(self):
        data = make_entry().to_dict()

        assert data["connection_id"] == "a1b2c3d4"
        assert data["status_code"] == 200
        assert data["duration_ms"] == 0.84
        assert data["user_agent"] == "pytest"


class TestLogRequest:
    """Tests for emitting access log lines."""

    def test_text(self, caplog):
        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            log_request(make_entry(status_code=404))

        record = caplog.records[-1]
        assert record.name == "fileserver.access"
        assert '" 404 ' in record.getMessage()

    def test_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            log_request(make_entry(), log_format="json")

        data = json.loads(caplog.records[-1].getMessage())
        assert data["request_line"] == "GET /index.html HTTP/1.1"

    def test_level(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fileserver.access"):
            log_request(make_entry(), level=logging.DEBUG)

        assert caplog.records[-1].levelno == logging.DEBUG


def test_common_log_timestamp():
    """Timestamps look like 19/Oct/2026:14:03:11 +0000."""
    assert re.fullmatch(r"\d{2}/[A-Z][a-z]{2}/\d{4}:\d{2}:\d{2}:\d{2} [+-]\d{4}", common_log_timestamp())
