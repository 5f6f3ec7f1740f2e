"""Transport primitives shared by the token bootstrap and the request executor.

This module owns the low-level HTTP concerns that sit below the Client:

    - Base URL validation and normalization (https only, loopback http opt-in)
    - Bounded response reads (no unbounded buffering of server output)
    - aiohttp session construction with the default timeout
    - Translation of aiohttp failures into NetworkError subclasses
"""
import asyncio
import ipaddress
import logging
from typing import Optional
from urllib.parse import urlsplit

import aiohttp

from .. import __version__
from .exceptions import (
    ConnectionError,
    HTTPSRequiredError,
    InvalidBaseURLError,
    NetworkError,
    ResponseTooLargeError,
    TimeoutError,
)

logger = logging.getLogger(__name__)

# ============================================
# Limits and Defaults
# ============================================

MAX_RESPONSE_SIZE = 10 * 1024 * 1024  # 10 MB for API payloads
MAX_TOKEN_RESPONSE_SIZE = 1024 * 1024  # 1 MB for the OAuth token response
DEFAULT_TIMEOUT = 30  # seconds, per request
USER_AGENT = f"cloudconnexa-python/{__version__}"

_CHUNK_SIZE = 64 * 1024


# ============================================
# Base URL Validation
# ============================================

def is_loopback_host(host: Optional[str]) -> bool:
    """Return True if ``host`` names the local machine only.

    Accepts ``localhost`` (any case) and literal addresses in 127.0.0.0/8
    or ::1. Other hostnames are never resolved here.
    """
    if not host:
        return False
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def validate_base_url(raw_url: str, allow_insecure_http: bool = False) -> str:
    """Validate a base URL and normalize it to ``scheme://host[:port]``.

    Args:
        raw_url: Base URL as supplied by the caller
        allow_insecure_http: Permit ``http`` when the host is a loopback address

    Returns:
        The normalized URL, with path, query and fragment stripped

    Raises:
        InvalidBaseURLError: If the URL is not absolute or carries user-info
        HTTPSRequiredError: If the scheme is not https (outside the loopback opt-in)
    """
    if not raw_url or not isinstance(raw_url, str):
        raise InvalidBaseURLError("base URL must be a non-empty string")

    parts = urlsplit(raw_url.strip())

    # Never echo the URL back here: it carries the credentials being rejected
    if "@" in parts.netloc:
        raise InvalidBaseURLError("base URL must not contain embedded credentials")

    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise InvalidBaseURLError(
            "base URL must be absolute with a scheme and host",
            details={"url": raw_url},
        )

    try:
        parts.port
    except ValueError as e:
        raise InvalidBaseURLError(
            f"base URL has an invalid port: {e}",
            details={"url": raw_url},
            cause=e,
        )

    scheme = parts.scheme.lower()
    if scheme == "http":
        if not allow_insecure_http:
            raise HTTPSRequiredError(
                "base URL must use https (insecure http is disabled)",
                scheme=scheme,
            )
        if not is_loopback_host(parts.hostname):
            raise HTTPSRequiredError(
                "insecure http is only permitted for loopback hosts",
                scheme=scheme,
                details={"host": parts.hostname},
            )
    elif scheme != "https":
        raise HTTPSRequiredError(f"unsupported URL scheme '{scheme}'", scheme=scheme)

    return f"{scheme}://{parts.netloc}"


# ============================================
# Session and Response Handling
# ============================================

def create_session(timeout: float = DEFAULT_TIMEOUT) -> aiohttp.ClientSession:
    """Create an aiohttp session with connection pooling and a total timeout.

    Must be called from inside a running event loop.
    """
    return aiohttp.ClientSession(
        connector=aiohttp.TCPConnector(
            limit=20,  # Max concurrent connections
            limit_per_host=20,
        ),
        timeout=aiohttp.ClientTimeout(total=timeout),
    )


async def read_limited(response: aiohttp.ClientResponse, limit: int) -> bytes:
    """Read a response body, failing once it grows past ``limit`` bytes.

    A body of exactly ``limit`` bytes is accepted. The declared
    Content-Length is checked first so oversized payloads are rejected
    before any bytes are buffered.

    Raises:
        ResponseTooLargeError: If the body exceeds ``limit``
    """
    declared = response.content_length
    if declared is not None and declared > limit:
        logger.debug(f"Rejecting response: declared {declared} bytes exceeds {limit}")
        raise ResponseTooLargeError(limit, details={"content_length": declared})

    buffer = bytearray()
    async for chunk in response.content.iter_chunked(_CHUNK_SIZE):
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise ResponseTooLargeError(limit)
    return bytes(buffer)


def translate_transport_error(
    error: BaseException,
    method: str,
    url: str,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> NetworkError:
    """Map an aiohttp or asyncio failure onto the NetworkError hierarchy.

    The original exception is chained as the cause; nothing is retried.
    """
    if isinstance(error, asyncio.TimeoutError):
        return TimeoutError(
            f"{method} {url} timed out",
            timeout_seconds=timeout,
            cause=error,
        )
    if isinstance(error, aiohttp.ClientConnectionError):
        host = getattr(error, "host", None)
        return ConnectionError(
            f"Failed to connect during {method} {url}: {error}",
            host=host,
            cause=error,
        )
    return NetworkError(f"Network error during {method} {url}: {error}", cause=error)
