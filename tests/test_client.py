#!/usr/bin/env python3
"""Unit tests for the Client request executor.

Tests cover:
    - Construction (connect, credentials, base URL checks, session ownership)
    - Header injection (Bearer token, User-Agent, Content-Type)
    - Non-2xx handling and body preservation
    - Limiter selection and tuning from response headers
    - Bounded reads and transport failures
"""
import asyncio
import logging
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import web

from conftest import TEST_TOKEN, fast_limiter, page_body
from cloudconnexa import (
    Client,
    ClientResponseError,
    ConnectionError,
    CredentialsRequiredError,
    HTTPSRequiredError,
    ResponseDecodeError,
    ResponseTooLargeError,
    TokenFetchError,
)
from cloudconnexa.api.auth import TOKEN_PATH
from cloudconnexa.api.rate_limit import RateLimiter
from cloudconnexa.api.urls import build_url


# ============================================
# Construction Tests
# ============================================

class TestConstruction:
    """Test Client construction paths."""

    def test_empty_token_rejected(self):
        with pytest.raises(CredentialsRequiredError):
            Client("https://api.example.com", "")

    def test_base_url_normalized(self):
        client = Client("https://acme.api.openvpn.com/anything?x=1", "tok")
        assert client.base_url == "https://acme.api.openvpn.com"
        assert client.v1_url == "https://acme.api.openvpn.com/api/v1"

    def test_repr_hides_token(self):
        client = Client("https://api.example.com", "very-secret-token")
        assert "very-secret-token" not in repr(client)

    def test_insecure_http_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cloudconnexa.api.client"):
            Client("http://localhost:8080", "tok", allow_insecure_http=True)
        assert "Insecure HTTP" in caplog.text

    def test_services_registered(self):
        client = Client("https://api.example.com", "tok")
        for name in ("networks", "hosts", "users", "devices", "sessions", "settings", "vpn_regions"):
            assert getattr(client, name).client is client

    @pytest.mark.asyncio
    async def test_connect_fetches_token(self, fake_api):
        fake_api.on("POST", TOKEN_PATH, {"access_token": "tok"})
        fake_api.on("GET", "/api/v1/networks", lambda r: page_body([]))

        client = await Client.connect(fake_api.base_url, "id", "secret", allow_insecure_http=True)
        async with client:
            await client.networks.list()

        request = fake_api.requests_to("/api/v1/networks")[0]
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_connect_missing_secret_skips_token_fetch(self):
        with patch("cloudconnexa.api.client.fetch_token", new=AsyncMock()) as mock_fetch:
            with pytest.raises(CredentialsRequiredError):
                await Client.connect("https://api.example.com", "id", "")
        mock_fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_connect_rejects_http_before_io(self):
        with patch("cloudconnexa.api.client.fetch_token", new=AsyncMock()) as mock_fetch:
            with pytest.raises(HTTPSRequiredError):
                await Client.connect("http://api.example.com", "id", "secret")
        mock_fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_connect_closes_session_on_token_failure(self):
        session = MagicMock()
        session.close = AsyncMock()

        with patch("cloudconnexa.api.client.create_session", return_value=session), \
                patch("cloudconnexa.api.client.fetch_token",
                      new=AsyncMock(side_effect=TokenFetchError("denied", status_code=401))):
            with pytest.raises(TokenFetchError):
                await Client.connect("https://api.example.com", "id", "secret")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_caller_session_not_closed(self):
        session = MagicMock()
        session.close = AsyncMock()

        client = Client("https://api.example.com", "tok", session=session)
        await client.close()

        session.close.assert_not_called()


# ============================================
# Request Execution Tests
# ============================================

class TestDoRequest:
    """Test header injection and response handling."""

    @pytest.mark.asyncio
    async def test_headers_injected(self, client, fake_api):
        fake_api.on("GET", "/api/v1/regions", [])

        await client.get(build_url(client.v1_url, "regions"))

        request = fake_api.requests[0]
        assert request.headers["Authorization"] == f"Bearer {TEST_TOKEN}"
        assert request.headers["User-Agent"].startswith("cloudconnexa-python/")
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_content_type_override(self, client, fake_api):
        fake_api.on("PUT", "/api/v1/settings/dns/default-suffix", lambda r: web.Response(text="corp.local"))

        result = await client.settings.set_default_dns_suffix("corp.local")

        request = fake_api.requests[0]
        assert request.headers["Content-Type"] == "text/plain"
        assert request.body == b"corp.local"
        assert result == "corp.local"

    @pytest.mark.asyncio
    async def test_caller_cannot_replace_authorization(self, client, fake_api):
        fake_api.on("GET", "/api/v1/regions", [])

        await client.do_request(
            "GET", build_url(client.v1_url, "regions"), headers={"authorization": "Bearer other"}
        )

        assert fake_api.requests[0].headers["Authorization"] == f"Bearer {TEST_TOKEN}"

    @pytest.mark.asyncio
    async def test_none_params_dropped(self, client, fake_api):
        fake_api.on("GET", "/api/v1/devices", lambda r: page_body([]))

        await client.get(build_url(client.v1_url, "devices"), params={"page": 0, "userId": None})

        assert fake_api.requests[0].query == {"page": "0"}

    @pytest.mark.asyncio
    async def test_non_2xx_preserves_body(self, client, fake_api):
        fake_api.on("GET", "/api/v1/networks/n1", lambda r: web.Response(status=400, text='{"error":"bad"}'))

        with pytest.raises(ClientResponseError) as exc:
            await client.networks.get("n1")

        assert exc.value.status_code == 400
        assert exc.value.body == '{"error":"bad"}'
        assert exc.value.message == 'status code: 400, response body: {"error":"bad"}'

    @pytest.mark.asyncio
    async def test_api_404_is_client_response_error(self, client, fake_api):
        with pytest.raises(ClientResponseError) as exc:
            await client.networks.get("missing")
        assert exc.value.status_code == 404

    @pytest.mark.asyncio
    async def test_empty_body_decodes_to_none(self, client, fake_api):
        fake_api.on("DELETE", "/api/v1/networks/n1", lambda r: web.Response(status=204))

        assert await client.delete(build_url(client.v1_url, "networks", "n1")) is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decode_error(self, client, fake_api):
        fake_api.on("GET", "/api/v1/networks/n1", lambda r: web.Response(text="not json"))

        with pytest.raises(ResponseDecodeError):
            await client.networks.get("n1")

    @pytest.mark.asyncio
    async def test_path_segments_escaped_on_the_wire(self, client, fake_api):
        with pytest.raises(ClientResponseError):
            await client.users.get("a/b")

        assert fake_api.requests[0].raw_path == "/api/v1/users/a%2Fb"

    @pytest.mark.asyncio
    async def test_response_size_bound(self, fake_api):
        fake_api.on("GET", "/api/v1/at-limit", lambda r: web.Response(body=b"x" * 16))
        fake_api.on("GET", "/api/v1/over-limit", lambda r: web.Response(body=b"x" * 17))

        async with Client(fake_api.base_url, "tok", allow_insecure_http=True, max_response_size=16) as client:
            assert await client.do_request("GET", build_url(client.v1_url, "at-limit")) == b"x" * 16
            with pytest.raises(ResponseTooLargeError):
                await client.do_request("GET", build_url(client.v1_url, "over-limit"))

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        async with Client("http://127.0.0.1:1", "tok", allow_insecure_http=True) as client:
            with pytest.raises(ConnectionError) as exc:
                await client.networks.get("n1")
        assert exc.value.__cause__ is not None


# ============================================
# Rate Limit Integration Tests
# ============================================

class TestLimiterIntegration:
    """Test limiter selection and adaptive tuning."""

    RATE_HEADERS = {
        "X-RateLimit-Replenish-Rate": "2",
        "X-RateLimit-Replenish-Time": "10",
        "X-RateLimit-Remaining": "0",
    }

    def test_limiter_for_method(self, offline_client):
        assert offline_client.limiter_for("GET") is offline_client.read_limiter
        for method in ("POST", "PUT", "DELETE", "PATCH"):
            assert offline_client.limiter_for(method) is offline_client.write_limiter

    @pytest.mark.asyncio
    async def test_read_limiter_tuned_from_headers(self, client, fake_api):
        fake_api.on("GET", "/api/v1/regions", lambda r: web.json_response([], headers=self.RATE_HEADERS))

        await client.vpn_regions.list()

        assert client.read_limiter.interval == 5.0
        assert client.read_limiter.burst == 1
        assert client.write_limiter.burst == 1000

    @pytest.mark.asyncio
    async def test_write_limiter_tuned_from_headers(self, client, fake_api):
        fake_api.on("DELETE", "/api/v1/networks/n1", lambda r: web.Response(status=204, headers=self.RATE_HEADERS))

        await client.networks.delete("n1")

        assert client.write_limiter.interval == 5.0
        assert client.read_limiter.burst == 1000

    @pytest.mark.asyncio
    async def test_error_response_does_not_tune(self, client, fake_api):
        fake_api.on(
            "GET", "/api/v1/regions",
            lambda r: web.json_response({"error": "x"}, status=500, headers=self.RATE_HEADERS),
        )

        with pytest.raises(ClientResponseError):
            await client.vpn_regions.list()

        assert client.read_limiter.burst == 1000

    @pytest.mark.asyncio
    async def test_requests_wait_for_limiter(self, fake_api):
        read = RateLimiter(10.0, 1, name="read")
        limiter_calls = []
        original = read.acquire

        async def tracking_acquire():
            limiter_calls.append("read")
            await original()

        read.acquire = tracking_acquire
        fake_api.on("GET", "/api/v1/regions", [])

        async with Client(
            fake_api.base_url, "tok", allow_insecure_http=True,
            read_limiter=read, write_limiter=fast_limiter("write"),
        ) as client:
            await client.vpn_regions.list()

        assert limiter_calls == ["read"]

    @pytest.mark.asyncio
    async def test_tuned_budget_delays_next_request(self, client, fake_api):
        """One token per 0.2s from the server: the second GET waits a refill interval."""
        headers = {
            "X-RateLimit-Replenish-Rate": "5",
            "X-RateLimit-Replenish-Time": "1",
            "X-RateLimit-Remaining": "0",
        }
        fake_api.on("GET", "/api/v1/regions", lambda r: web.json_response([], headers=headers))

        await client.vpn_regions.list()
        start = time.monotonic()
        await client.vpn_regions.list()

        assert time.monotonic() - start >= 0.15

    @pytest.mark.asyncio
    async def test_exhausted_server_budget_blocks(self, client, fake_api):
        fake_api.on("GET", "/api/v1/regions", lambda r: web.json_response([], headers=self.RATE_HEADERS))

        await client.vpn_regions.list()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(client.vpn_regions.list(), timeout=0.5)

        assert len(fake_api.requests) == 1

    @pytest.mark.asyncio
    async def test_exhausted_read_budget_leaves_writes_alone(self, client, fake_api):
        fake_api.on("GET", "/api/v1/regions", lambda r: web.json_response([], headers=self.RATE_HEADERS))
        fake_api.on("DELETE", "/api/v1/networks/n1", lambda r: web.Response(status=204))

        await client.vpn_regions.list()
        await asyncio.wait_for(client.networks.delete("n1"), timeout=0.5)


# ============================================
# Error Body Tests
# ============================================

class TestErrorBodies:

    @pytest.mark.asyncio
    async def test_non_utf8_body_kept_as_bytes(self, client, fake_api):
        raw = b"\xff\xfeerror \x80"
        fake_api.on("GET", "/api/v1/networks/n1", lambda r: web.Response(status=502, body=raw))

        with pytest.raises(ClientResponseError) as exc:
            await client.networks.get("n1")

        assert exc.value.raw_body == raw
        assert exc.value.status_code == 502
        assert "error" in exc.value.body
