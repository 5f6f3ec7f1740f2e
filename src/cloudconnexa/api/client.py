"""Authenticated HTTP client for the CloudConnexa API.

This module provides the request executor every resource service
delegates to. It handles the common concerns of talking to CloudConnexa:

    - OAuth2 client-credentials bootstrap (once, at construction)
    - Bearer token and User-Agent injection on every request
    - Separate read (GET) and write (everything else) rate limiters,
      re-sized from X-RateLimit-* response headers
    - Bounded response reads (10 MB)
    - Typed errors for non-2xx responses and transport failures

Design Philosophy:
    The Client knows HOW to talk to CloudConnexa, not WHAT to fetch.
    Resource knowledge lives in the services under ``cloudconnexa.services``,
    which hold a reference to the Client and are exposed as attributes.
    Nothing here retries; callers own retry policy.

Usage:
    async with await Client.connect(base_url, client_id, client_secret) as client:
        networks = await client.networks.list()
        user = await client.users.get_by_username("alice")

        # Raw access
        body = await client.do_request("GET", build_url(client.v1_url, "regions"))
"""
import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

import aiohttp
from pydantic import BaseModel
from yarl import URL

from ..services import (
    AccessGroupsService,
    DevicesService,
    DNSRecordsService,
    HostApplicationsService,
    HostConnectorsService,
    HostIPServicesService,
    HostRoutesService,
    HostsService,
    LocationContextsService,
    NetworkApplicationsService,
    NetworkConnectorsService,
    NetworkIPServicesService,
    NetworksService,
    RoutesService,
    SessionsService,
    SettingsService,
    UserGroupsService,
    UsersService,
    VPNRegionsService,
)
from .auth import Credentials, fetch_token, require_credentials
from .exceptions import ClientResponseError, CredentialsRequiredError, ResponseDecodeError
from .rate_limit import RateLimiter, default_read_limiter, default_write_limiter
from .transport import (
    DEFAULT_TIMEOUT,
    MAX_RESPONSE_SIZE,
    USER_AGENT,
    create_session,
    read_limited,
    translate_transport_error,
    validate_base_url,
)

if TYPE_CHECKING:
    from ..config import ClientConfig

logger = logging.getLogger(__name__)

API_V1_PATH = "/api/v1"

_MANAGED_HEADERS = {"authorization", "user-agent"}


# ============================================
# The Client
# ============================================

class Client:
    """Async client for the CloudConnexa REST API.

    Build one with ``Client.connect()`` (fetches a token) or directly from a
    token you already hold. Use it as an async context manager, or call
    ``close()``, to release the HTTP session it created:

        async with await Client.connect(url, client_id, secret) as client:
            regions = await client.vpn_regions.list()

    One Client can serve any number of concurrent tasks. The two rate
    limiters and the token are shared by all of them.

    Attributes:
        base_url: Normalized base URL (``scheme://host[:port]``)
        read_limiter: Limiter consulted for GET requests
        write_limiter: Limiter consulted for every other method
        max_response_size: Largest response body accepted, in bytes
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        allow_insecure_http: bool = False,
        read_limiter: Optional[RateLimiter] = None,
        write_limiter: Optional[RateLimiter] = None,
        max_response_size: int = MAX_RESPONSE_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the Client around an access token.

        Args:
            base_url: API base URL; path, query and fragment are discarded
            token: Bearer access token
            session: aiohttp session to use. A caller-supplied session is
                never closed by the Client.
            allow_insecure_http: Permit ``http://`` for loopback hosts only
            read_limiter: Override the default GET limiter
            write_limiter: Override the default write limiter
            max_response_size: Response body bound in bytes
            timeout: Total timeout for a session the Client creates itself

        Raises:
            CredentialsRequiredError: If the token is empty
            InvalidBaseURLError: If the base URL is malformed
            HTTPSRequiredError: If the base URL is not https
        """
        if not token:
            raise CredentialsRequiredError("an access token must be specified")

        self.base_url = validate_base_url(base_url, allow_insecure_http=allow_insecure_http)
        if self.base_url.startswith("http://"):
            logger.warning(
                f"Insecure HTTP enabled for {self.base_url}; "
                f"only use this for local development"
            )

        self._token = token
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout
        self.max_response_size = max_response_size

        self.read_limiter = read_limiter or default_read_limiter()
        self.write_limiter = write_limiter or default_write_limiter()

        # Resource services (each holds a reference back to this Client)
        self.networks = NetworksService(self)
        self.network_connectors = NetworkConnectorsService(self)
        self.routes = RoutesService(self)
        self.network_applications = NetworkApplicationsService(self)
        self.network_ip_services = NetworkIPServicesService(self)
        self.hosts = HostsService(self)
        self.host_connectors = HostConnectorsService(self)
        self.host_routes = HostRoutesService(self)
        self.host_applications = HostApplicationsService(self)
        self.host_ip_services = HostIPServicesService(self)
        self.users = UsersService(self)
        self.user_groups = UserGroupsService(self)
        self.access_groups = AccessGroupsService(self)
        self.location_contexts = LocationContextsService(self)
        self.dns_records = DNSRecordsService(self)
        self.devices = DevicesService(self)
        self.sessions = SessionsService(self)
        self.vpn_regions = VPNRegionsService(self)
        self.settings = SettingsService(self)

    # ----------------------------------------
    # Construction
    # ----------------------------------------

    @classmethod
    async def connect(
        cls,
        base_url: str,
        client_id: str,
        client_secret: str,
        *,
        allow_insecure_http: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
        **kwargs: Any,
    ) -> "Client":
        """Authenticate with client credentials and return a ready Client.

        Credentials and the base URL are checked before any network I/O.
        Any failure aborts construction; a session created here is closed
        again before the error propagates.

        Raises:
            CredentialsRequiredError: If either credential is empty
            InvalidBaseURLError / HTTPSRequiredError: If the base URL is rejected
            TokenFetchError: If the token endpoint refuses or omits the token
            ResponseTooLargeError: If the token response exceeds 1 MB
            NetworkError: On connection failure or timeout
        """
        require_credentials(client_id, client_secret)
        normalized = validate_base_url(base_url, allow_insecure_http=allow_insecure_http)

        owns_session = session is None
        http = session if session is not None else create_session(kwargs.get("timeout", DEFAULT_TIMEOUT))
        try:
            credentials: Credentials = await fetch_token(
                http,
                normalized,
                client_id,
                client_secret,
                timeout=kwargs.get("timeout", DEFAULT_TIMEOUT),
            )
        except BaseException:
            if owns_session:
                await http.close()
            raise

        client = cls(
            normalized,
            credentials.access_token,
            session=http,
            allow_insecure_http=allow_insecure_http,
            **kwargs,
        )
        client._owns_session = owns_session
        return client

    @classmethod
    async def from_config(cls, config: "ClientConfig", **kwargs: Any) -> "Client":
        """Connect using a ClientConfig."""
        return await cls.connect(
            config.base_url,
            config.client_id,
            config.client_secret,
            allow_insecure_http=config.allow_insecure_http,
            **kwargs,
        )

    @classmethod
    async def from_env(cls, **kwargs: Any) -> "Client":
        """Connect using CLOUDCONNEXA_* environment variables (and .env)."""
        from ..config import ClientConfig

        return await cls.from_config(ClientConfig.from_env(), **kwargs)

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if the Client created it."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = create_session(self.timeout)
            self._owns_session = True
        return self._session

    # ----------------------------------------
    # Helpers
    # ----------------------------------------

    @property
    def v1_url(self) -> str:
        """Root of the v1 API (``{base_url}/api/v1``)."""
        return f"{self.base_url}{API_V1_PATH}"

    def limiter_for(self, method: str) -> RateLimiter:
        """GET draws from the read limiter; every other method from the write limiter."""
        return self.read_limiter if method.upper() == "GET" else self.write_limiter

    def _build_headers(self, headers: Optional[Mapping[str, str]]) -> dict[str, str]:
        merged = {
            key: value
            for key, value in (headers or {}).items()
            if key.lower() not in _MANAGED_HEADERS
        }
        merged["Authorization"] = f"Bearer {self._token}"
        merged["User-Agent"] = USER_AGENT
        if not any(key.lower() == "content-type" for key in merged):
            merged["Content-Type"] = "application/json"
        return merged

    # ----------------------------------------
    # Request Execution
    # ----------------------------------------

    async def do_request(
        self,
        method: str,
        url: str,
        *,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> bytes:
        """Execute one authenticated, rate-limited request.

        Steps: wait for the limiter matching ``method``; inject the bearer
        token, User-Agent and (unless set) ``Content-Type: application/json``;
        send; read the body through the size bound; reject non-2xx; then
        re-size the limiter from any X-RateLimit-* headers.

        Args:
            method: HTTP method
            url: Absolute URL, already escaped (see ``build_url``)
            data: Request body (bytes or str)
            params: Query parameters; None values are dropped
            headers: Extra headers; Authorization and User-Agent are always ours

        Returns:
            The raw response body

        Raises:
            ClientResponseError: If the status is outside [200, 300)
            ResponseTooLargeError: If the body exceeds ``max_response_size``
            NetworkError: On connection failure or timeout
            asyncio.CancelledError: If the task is cancelled (including while
                waiting on the rate limiter)
        """
        method = method.upper()
        limiter = self.limiter_for(method)
        await limiter.acquire()

        query = None
        if params:
            query = {key: str(value) for key, value in params.items() if value is not None}

        request_headers = self._build_headers(headers)
        session = self._get_session()

        logger.debug(f"{method} {url}")
        try:
            async with session.request(
                method,
                URL(url, encoded=True),
                data=data,
                params=query,
                headers=request_headers,
            ) as response:
                body = await read_limited(response, self.max_response_size)
                status = response.status
                response_headers = response.headers
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            raise translate_transport_error(e, method, url, self.timeout) from e

        if not 200 <= status < 300:
            raise ClientResponseError(
                status,
                body.decode("utf-8", errors="replace"),
                method=method,
                url=url,
                raw_body=body,
            )

        limiter.update_from_headers(response_headers)
        return body

    # ----------------------------------------
    # JSON Convenience Methods
    # ----------------------------------------

    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """GET and decode JSON (None for an empty body)."""
        return _decode_json(await self.do_request("GET", url, params=params))

    async def post(
        self,
        url: str,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """POST a JSON body and decode the JSON response."""
        body = await self.do_request("POST", url, data=_encode_json(json_body), params=params)
        return _decode_json(body)

    async def put(
        self,
        url: str,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """PUT a JSON body and decode the JSON response."""
        body = await self.do_request("PUT", url, data=_encode_json(json_body), params=params)
        return _decode_json(body)

    async def delete(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _decode_json(await self.do_request("DELETE", url, params=params))

    def __repr__(self) -> str:
        return f"Client(base_url={self.base_url!r})"


# ============================================
# JSON Encoding
# ============================================

def _encode_json(value: Any) -> Optional[bytes]:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(value).encode("utf-8")


def _decode_json(body: bytes) -> Any:
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as e:
        raise ResponseDecodeError(
            "Response body is not valid JSON",
            body=body[:200].decode("utf-8", errors="replace"),
            cause=e,
        )
