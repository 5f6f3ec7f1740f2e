"""CloudConnexa API core: errors, transport, rate limiting and the Client."""
from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__ as _exception_names
from .urls import build_url, validate_id
from .rate_limit import RateLimiter, RateLimitInfo
from .pagination import DEFAULT_PAGE_SIZE, Page
from .auth import Credentials, fetch_token
from .client import Client

__all__ = [
    *_exception_names,
    "build_url",
    "validate_id",
    "RateLimiter",
    "RateLimitInfo",
    "DEFAULT_PAGE_SIZE",
    "Page",
    "Credentials",
    "fetch_token",
    "Client",
]
