"""Exception Hierarchy for the CloudConnexa API client.

Every failure raised by this package is a CloudConnexaError. The ``code``
attribute is an ErrorKind member, so callers can branch on the kind of
failure without comparing message strings.

Exception Hierarchy:
    CloudConnexaError (base)
    ├── ConfigurationError (fix config, never retried)
    │   ├── CredentialsRequiredError
    │   └── InvalidBaseURLError
    │       └── HTTPSRequiredError
    ├── AuthenticationError
    │   └── TokenFetchError
    ├── ResponseTooLargeError
    ├── ClientResponseError (any non-2xx API response)
    ├── ResponseDecodeError (2xx body that is not the expected shape)
    ├── NotFoundError (client-side search exhausted)
    ├── ValidationError (bad argument, raised before any request)
    │   └── EmptyIDError
    └── NetworkError (transport failure)
        ├── ConnectionError
        └── TimeoutError

Nothing in this package retries. ``recoverable`` is a hint for callers that
implement their own retry policy.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Machine-readable error kinds carried in ``CloudConnexaError.code``."""

    CONFIGURATION = "CONFIGURATION_ERROR"
    CREDENTIALS_REQUIRED = "CREDENTIALS_REQUIRED"
    INVALID_BASE_URL = "INVALID_BASE_URL"
    HTTPS_REQUIRED = "HTTPS_REQUIRED"
    AUTHENTICATION = "AUTHENTICATION_ERROR"
    TOKEN_FETCH = "TOKEN_FETCH_ERROR"
    RESPONSE_TOO_LARGE = "RESPONSE_TOO_LARGE"
    API_ERROR = "API_ERROR"
    DECODE = "DECODE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    EMPTY_ID = "EMPTY_ID"
    NETWORK = "NETWORK_ERROR"
    CONNECTION = "CONNECTION_ERROR"
    TIMEOUT = "TIMEOUT_ERROR"


# ============================================
# Base Exception
# ============================================

class CloudConnexaError(Exception):
    """Base exception for all CloudConnexa client errors.

    Attributes:
        message: Human-readable error description
        code: ErrorKind identifying the failure
        details: Additional context as a dictionary
        timestamp: When the error occurred (UTC)
        cause: The original exception that caused this error
        recoverable: Whether a caller-side retry could plausibly succeed
    """

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorKind] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.kind
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.value}]", self.message]
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================
# Configuration Errors (Unrecoverable)
# ============================================

class ConfigurationError(CloudConnexaError):
    """Raised when configuration is missing or invalid.

    Raised before any network I/O; fix the configuration and try again.
    """

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        kwargs.setdefault("recoverable", False)
        super().__init__(message, details=details, **kwargs)
        self.missing_keys = missing_keys or []


class CredentialsRequiredError(ConfigurationError):
    """Raised when the client ID or client secret is empty."""

    kind = ErrorKind.CREDENTIALS_REQUIRED

    def __init__(
        self,
        message: str = "both client_id and client_secret credentials must be specified",
        **kwargs,
    ):
        super().__init__(message, **kwargs)


class InvalidBaseURLError(ConfigurationError):
    """Raised when the base URL is malformed or carries embedded credentials."""

    kind = ErrorKind.INVALID_BASE_URL

    def __init__(self, message: str = "invalid base URL", **kwargs):
        super().__init__(message, **kwargs)


class HTTPSRequiredError(InvalidBaseURLError):
    """Raised when the base URL is not https (outside the loopback opt-in)."""

    kind = ErrorKind.HTTPS_REQUIRED

    def __init__(
        self,
        message: str = "base URL must use https",
        scheme: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if scheme:
            details["scheme"] = scheme
        super().__init__(message, details=details, **kwargs)


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(CloudConnexaError):
    """Base class for authentication-related errors."""

    kind = ErrorKind.AUTHENTICATION


class TokenFetchError(AuthenticationError):
    """Raised when the OAuth2 token endpoint does not yield an access token."""

    kind = ErrorKind.TOKEN_FETCH

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body[:200]
        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code
        self.response_body = response_body


# ============================================
# Resource-Limit Errors
# ============================================

class ResponseTooLargeError(CloudConnexaError):
    """Raised when a response body exceeds its fixed size bound.

    Attributes:
        limit: Maximum number of bytes that were allowed
    """

    kind = ErrorKind.RESPONSE_TOO_LARGE

    def __init__(
        self,
        limit: int,
        message: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["limit_bytes"] = limit
        super().__init__(
            message or f"response body exceeds {limit} bytes",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.limit = limit


# ============================================
# API Errors
# ============================================

class ClientResponseError(CloudConnexaError):
    """Raised for any API response with a status outside [200, 300).

    Attributes:
        status_code: HTTP status code
        body: Response body decoded as UTF-8 (undecodable bytes replaced)
        raw_body: Response body bytes exactly as received
        method: HTTP method of the failed request
        url: Request URL
    """

    kind = ErrorKind.API_ERROR

    def __init__(
        self,
        status_code: int,
        body: str = "",
        method: Optional[str] = None,
        url: Optional[str] = None,
        raw_body: Optional[bytes] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        if body:
            details["response_body"] = body[:500]
        kwargs.setdefault("recoverable", status_code in (429, 500, 502, 503, 504))
        super().__init__(
            f"status code: {status_code}, response body: {body}",
            details=details,
            **kwargs,
        )
        self.status_code = status_code
        self.body = body
        self.raw_body = raw_body if raw_body is not None else body.encode("utf-8")
        self.method = method
        self.url = url


class ResponseDecodeError(CloudConnexaError):
    """Raised when a successful response body cannot be decoded into its model."""

    kind = ErrorKind.DECODE

    def __init__(
        self,
        message: str = "Failed to decode response body",
        body: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if body:
            details["response_body"] = body[:200]
        super().__init__(message, details=details, recoverable=False, **kwargs)
        self.body = body


class NotFoundError(CloudConnexaError):
    """Raised when a client-side search exhausts every page without a match.

    Distinct from an API 404, which surfaces as ClientResponseError.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str,
        identifier: Optional[str] = None,
        **kwargs,
    ):
        message = f"{resource_type} not found"
        if identifier:
            message = f"{resource_type} '{identifier}' not found"

        details = kwargs.pop("details", {})
        details["resource_type"] = resource_type
        if identifier:
            details["identifier"] = identifier

        super().__init__(message, details=details, recoverable=False, **kwargs)
        self.resource_type = resource_type
        self.identifier = identifier


# ============================================
# Validation Errors (raised before any request)
# ============================================

class ValidationError(CloudConnexaError):
    """Raised when a caller-supplied argument is invalid."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(message, details=details, recoverable=False, **kwargs)
        self.field = field


class EmptyIDError(ValidationError):
    """Raised when an operation receives an empty resource identifier."""

    kind = ErrorKind.EMPTY_ID

    def __init__(
        self,
        message: str = "resource ID must not be empty",
        field: str = "id",
        **kwargs,
    ):
        super().__init__(message, field=field, **kwargs)


# ============================================
# Network Errors
# ============================================

class NetworkError(CloudConnexaError):
    """Base class for transport failures (DNS, connect, TLS, timeout).

    The aiohttp exception is chained as ``__cause__``.
    """

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class ConnectionError(NetworkError):
    """Raised when the connection to the server fails."""

    kind = ErrorKind.CONNECTION

    def __init__(
        self,
        message: str = "Failed to connect to server",
        host: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if host:
            details["host"] = host
        super().__init__(message, details=details, **kwargs)


class TimeoutError(NetworkError):
    """Raised when a request times out."""

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details=details, **kwargs)


__all__ = [
    "ErrorKind",
    # Base
    "CloudConnexaError",
    # Configuration
    "ConfigurationError",
    "CredentialsRequiredError",
    "InvalidBaseURLError",
    "HTTPSRequiredError",
    # Authentication
    "AuthenticationError",
    "TokenFetchError",
    # Limits
    "ResponseTooLargeError",
    # API
    "ClientResponseError",
    "ResponseDecodeError",
    "NotFoundError",
    # Validation
    "ValidationError",
    "EmptyIDError",
    # Network
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
]
