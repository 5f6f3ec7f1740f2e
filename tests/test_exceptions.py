#!/usr/bin/env python3
"""Unit tests for the CloudConnexa exception hierarchy.

Tests cover:
    - Message and code rendering
    - Hierarchy (what callers can catch)
    - Fields carried by each error
    - Recoverability hints
"""
import pytest

from cloudconnexa import (
    ClientResponseError,
    CloudConnexaError,
    ConfigurationError,
    ConnectionError,
    CredentialsRequiredError,
    EmptyIDError,
    ErrorKind,
    HTTPSRequiredError,
    InvalidBaseURLError,
    NetworkError,
    NotFoundError,
    ResponseTooLargeError,
    TimeoutError,
    TokenFetchError,
    ValidationError,
)


# ============================================
# Base Error Tests
# ============================================

class TestCloudConnexaError:
    """Test the base exception."""

    def test_str_includes_code_and_details(self):
        error = CloudConnexaError("boom", details={"a": 1})
        assert str(error) == "[API_ERROR] boom (a=1)"

    def test_str_without_details(self):
        assert str(CloudConnexaError("boom")) == "[API_ERROR] boom"

    def test_cause_is_chained(self):
        cause = ValueError("inner")
        error = CloudConnexaError("outer", cause=cause)
        assert error.__cause__ is cause

    def test_to_dict(self):
        data = NotFoundError("user", "alice").to_dict()
        assert data["error_type"] == "NotFoundError"
        assert data["code"] == "NOT_FOUND"
        assert data["details"]["identifier"] == "alice"
        assert data["recoverable"] is False


# ============================================
# Hierarchy Tests
# ============================================

class TestHierarchy:
    """Callers catch families of errors through their base classes."""

    @pytest.mark.parametrize(
        "error, base",
        [
            (CredentialsRequiredError(), ConfigurationError),
            (HTTPSRequiredError(), InvalidBaseURLError),
            (InvalidBaseURLError(), ConfigurationError),
            (EmptyIDError(), ValidationError),
            (ConnectionError(), NetworkError),
            (TimeoutError(), NetworkError),
            (TokenFetchError("no token"), CloudConnexaError),
            (ResponseTooLargeError(10), CloudConnexaError),
        ],
    )
    def test_subclass(self, error, base):
        assert isinstance(error, base)

    def test_kinds_are_distinct(self):
        assert CredentialsRequiredError().code == ErrorKind.CREDENTIALS_REQUIRED
        assert HTTPSRequiredError().code == ErrorKind.HTTPS_REQUIRED
        assert EmptyIDError().code == ErrorKind.EMPTY_ID

    def test_network_errors_are_not_os_errors(self):
        """Our ConnectionError/TimeoutError are library errors, not OSError."""
        assert not isinstance(ConnectionError(), OSError)
        assert not isinstance(TimeoutError(), OSError)


# ============================================
# Specific Error Tests
# ============================================

class TestClientResponseError:
    """Test non-2xx response errors."""

    def test_message_format(self):
        error = ClientResponseError(400, '{"error":"bad"}', method="GET", url="https://x/api")
        assert error.message == 'status code: 400, response body: {"error":"bad"}'

    def test_full_body_preserved(self):
        body = "x" * 2000
        error = ClientResponseError(500, body)
        assert error.body == body
        assert len(error.details["response_body"]) == 500

    def test_raw_body_defaults_to_encoded_text(self):
        assert ClientResponseError(400, "bad").raw_body == b"bad"

    def test_raw_body_kept_verbatim(self):
        error = ClientResponseError(400, "\ufffd", raw_body=b"\xff")
        assert error.raw_body == b"\xff"

    @pytest.mark.parametrize("status, recoverable", [(400, False), (404, False), (429, True), (503, True)])
    def test_recoverable_hint(self, status, recoverable):
        assert ClientResponseError(status).recoverable is recoverable


class TestOtherErrors:

    def test_not_found_message(self):
        assert NotFoundError("user", "alice").message == "user 'alice' not found"
        assert NotFoundError("user").message == "user not found"

    def test_response_too_large_limit(self):
        error = ResponseTooLargeError(1024)
        assert error.limit == 1024
        assert "1024" in error.message

    def test_empty_id_field(self):
        error = EmptyIDError("network_id must not be empty", field="network_id")
        assert error.field == "network_id"
        assert error.details["field"] == "network_id"

    def test_configuration_missing_keys(self):
        error = ConfigurationError("missing", missing_keys=["A", "B"])
        assert error.missing_keys == ["A", "B"]

    def test_network_errors_recoverable(self):
        assert NetworkError("down").recoverable is True
        assert TimeoutError(timeout_seconds=30).details["timeout_seconds"] == 30

    def test_token_fetch_error_truncates_body(self):
        error = TokenFetchError("denied", status_code=401, response_body="y" * 1000)
        assert error.status_code == 401
        assert len(error.details["response_body"]) == 200
