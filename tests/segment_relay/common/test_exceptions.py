"""Tests for the relay error taxonomy."""

import pytest

from segment_relay.common.exceptions import (
    ConfigurationError,
    DeliveryError,
    ErrorCategory,
    MalformedRequestError,
    RelayError,
    classify_http_status,
)


class TestClassifyHttpStatus:
    """Test HTTP status classification."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (200, ErrorCategory.UNKNOWN),
            (400, ErrorCategory.PERMANENT),
            (404, ErrorCategory.PERMANENT),
            (408, ErrorCategory.TRANSIENT),
            (429, ErrorCategory.TRANSIENT),
            (500, ErrorCategory.TRANSIENT),
            (503, ErrorCategory.TRANSIENT),
            (302, ErrorCategory.UNKNOWN),
        ],
    )
    def test_classification(self, status, expected):
        assert classify_http_status(status) == expected


class TestRelayErrors:
    """Test exception attributes and string form."""

    def test_str_includes_cause(self):
        cause = OSError("connection refused")
        error = RelayError("send failed", cause=cause)

        assert str(error) == "send failed | Caused by: connection refused"

    def test_malformed_request_is_permanent(self):
        error = MalformedRequestError("bad body")

        assert error.category == ErrorCategory.PERMANENT
        assert error.is_retryable is False

    def test_configuration_error_is_permanent(self):
        assert ConfigurationError("missing").category == ErrorCategory.PERMANENT

    def test_delivery_error_with_status(self):
        error = DeliveryError("rejected", status_code=503, destination="http://d/")

        assert error.category == ErrorCategory.TRANSIENT
        assert error.is_retryable is True
        assert error.context == {"http_status": 503, "destination": "http://d/"}

    def test_delivery_error_client_status_not_retryable(self):
        error = DeliveryError("rejected", status_code=422)

        assert error.category == ErrorCategory.PERMANENT
        assert error.is_retryable is False

    def test_transport_failure_is_transient(self):
        error = DeliveryError("refused", cause=ConnectionRefusedError())

        assert error.status_code is None
        assert error.category == ErrorCategory.TRANSIENT
