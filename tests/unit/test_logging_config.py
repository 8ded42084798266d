"""Unit tests for logging configuration."""

import json
import logging

from taskboard.logging_config import (
    REDACTED,
    CredentialRedactionFilter,
    JsonFormatter,
    RequestIdFilter,
    request_id_var,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="taskboard.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="User signed in",
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestCredentialRedaction:
    """Credentials never leave the process through logs."""

    def test_password_fields_are_redacted(self):
        record = _record(password="pw123", password_hash="$2b$04$abc", user_id="u1")

        CredentialRedactionFilter().filter(record)

        assert record.password == REDACTED
        assert record.password_hash == REDACTED
        assert record.user_id == "u1"

    def test_json_output_has_no_plaintext(self):
        record = _record(password="pw123", user_id="u1")
        RequestIdFilter().filter(record)
        CredentialRedactionFilter().filter(record)

        output = JsonFormatter().format(record)

        assert "pw123" not in output
        assert json.loads(output)["user_id"] == "u1"


class TestRequestIdFilter:
    def test_request_id_from_context(self):
        token = request_id_var.set("req-42")
        try:
            record = _record()
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)

        assert record.request_id == "req-42"
        assert json.loads(JsonFormatter().format(record))["request_id"] == "req-42"

    def test_placeholder_without_request(self):
        record = _record()
        RequestIdFilter().filter(record)

        assert record.request_id == "-"
        assert "request_id" not in json.loads(JsonFormatter().format(record))
