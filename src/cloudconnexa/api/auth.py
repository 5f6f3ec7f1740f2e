"""OAuth2 client-credentials bootstrap for the CloudConnexa API.

The token is fetched once, when the Client is built, and never refreshed.
A token that expires mid-session surfaces as a ClientResponseError with an
authentication status; callers recover by building a new Client.

Security Notes:
    - Tokens are held in memory only (never persisted to disk)
    - The client secret and token are never logged; log lines carry a
      SHA-256 token id (first 8 chars) instead
    - The token response is read through a 1 MB bound before JSON parsing
"""
import asyncio
import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Optional

import aiohttp

from .exceptions import CredentialsRequiredError, TokenFetchError
from .transport import (
    DEFAULT_TIMEOUT,
    MAX_TOKEN_RESPONSE_SIZE,
    USER_AGENT,
    read_limited,
    translate_transport_error,
)

logger = logging.getLogger(__name__)

TOKEN_PATH = "/api/v1/oauth/token"


@dataclass(frozen=True)
class Credentials:
    """Parsed OAuth2 token response.

    Attributes:
        access_token: The OAuth2 bearer token string (hidden from repr).
        token_type: Token type, typically "Bearer".
        expires_in: TTL in seconds as reported by the server, if any.
    """
    access_token: str = field(repr=False)
    token_type: Optional[str] = "Bearer"
    expires_in: Optional[int] = None

    @property
    def token_id(self) -> str:
        """Get a safe identifier for logging (SHA-256 hash, first 8 chars).

        Security: Never log actual tokens - use this ID instead.
        """
        return hashlib.sha256(self.access_token.encode()).hexdigest()[:8]


def require_credentials(client_id: Optional[str], client_secret: Optional[str]) -> None:
    """Fail fast, before any I/O, if either credential is empty."""
    if not client_id or not client_secret:
        raise CredentialsRequiredError()


async def fetch_token(
    session: aiohttp.ClientSession,
    base_url: str,
    client_id: str,
    client_secret: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    max_size: int = MAX_TOKEN_RESPONSE_SIZE,
) -> Credentials:
    """Exchange client credentials for a bearer token.

    Args:
        session: aiohttp session used for the request
        base_url: Normalized base URL (``scheme://host``)
        client_id: OAuth2 client ID
        client_secret: OAuth2 client secret
        timeout: Request timeout in seconds
        max_size: Maximum accepted size of the token response body

    Returns:
        Credentials holding the access token

    Raises:
        CredentialsRequiredError: If either credential is empty
        TokenFetchError: If the server rejects the request or omits the token
        ResponseTooLargeError: If the token response exceeds ``max_size``
        NetworkError: On connection failure or timeout
    """
    require_credentials(client_id, client_secret)

    token_url = f"{base_url}{TOKEN_PATH}"
    payload = {"grant_type": "client_credentials", "scope": "default"}
    headers = {
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
        "Authorization": aiohttp.BasicAuth(client_id, client_secret).encode(),
    }

    logger.debug(f"Requesting access token from {token_url}")
    try:
        async with session.post(
            token_url,
            json=payload,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            body = await read_limited(response, max_size)
            status = response.status
    except (asyncio.TimeoutError, aiohttp.ClientError) as e:
        raise translate_transport_error(e, "POST", token_url, timeout) from e

    text = body.decode("utf-8", errors="replace")
    if not 200 <= status < 300:
        raise TokenFetchError(
            f"Token server returned HTTP {status}",
            status_code=status,
            response_body=text,
        )

    try:
        data = json.loads(text)
    except ValueError as e:
        raise TokenFetchError(
            "Token response is not valid JSON",
            status_code=status,
            response_body=text,
            cause=e,
        )

    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not access_token or not isinstance(access_token, str):
        raise TokenFetchError(
            "Token response missing access_token",
            status_code=status,
            details={"response_keys": list(data.keys()) if isinstance(data, dict) else []},
        )

    credentials = Credentials(
        access_token=access_token,
        token_type=data.get("token_type", "Bearer"),
        expires_in=data.get("expires_in"),
    )
    logger.info(f"Access token obtained (id={credentials.token_id})")
    return credentials
