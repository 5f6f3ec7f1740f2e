"""Shared fixtures: an in-process fake CloudConnexa API.

The fake API is a real aiohttp server on 127.0.0.1, so requests travel
through the full client stack (limiters, headers, bounded reads). Tests
register handlers per (method, path) and inspect the recorded requests.
"""
import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from cloudconnexa import Client
from cloudconnexa.api.rate_limit import RateLimiter

TEST_TOKEN = "test-token"


@dataclass
class RecordedRequest:
    method: str
    path: str
    raw_path: str
    query: dict
    headers: Any
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body)


Handler = Union[dict, list, Callable[[RecordedRequest], Any]]


class FakeAPI:
    """Catch-all aiohttp app dispatching on (method, decoded path)."""

    def __init__(self):
        self.handlers: dict[tuple[str, str], Handler] = {}
        self.requests: list[RecordedRequest] = []
        self.base_url = ""
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self._dispatch)

    def on(self, method: str, path: str, handler: Handler) -> None:
        """Register a handler.

        ``handler`` is either a JSON-serializable value returned as-is, or a
        callable taking the RecordedRequest and returning a value or a
        ``web.Response``.
        """
        self.handlers[(method.upper(), path)] = handler

    def requests_to(self, path: str, method: Optional[str] = None) -> list[RecordedRequest]:
        return [
            r for r in self.requests
            if r.path == path and (method is None or r.method == method.upper())
        ]

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        recorded = RecordedRequest(
            method=request.method,
            path=request.path,
            raw_path=request.raw_path.split("?", 1)[0],
            query=dict(request.query),
            headers=request.headers.copy(),
            body=await request.read(),
        )
        self.requests.append(recorded)

        handler = self.handlers.get((request.method, request.path))
        if handler is None:
            return web.json_response({"message": "not found"}, status=404)

        result = handler(recorded) if callable(handler) else handler
        if isinstance(result, web.StreamResponse):
            return result
        return web.json_response(result)


def page_body(items: list, page: int = 0, total_pages: int = 1, size: int = 100) -> dict:
    """Build a paginated envelope the way the API returns it."""
    return {
        "content": items,
        "page": page,
        "size": size,
        "numberOfElements": len(items),
        "totalElements": len(items),
        "totalPages": total_pages,
        "success": True,
    }


def paged(pages: list[list]) -> Callable[[RecordedRequest], dict]:
    """Handler serving ``pages[n]`` for ``?page=n``."""

    def handler(request: RecordedRequest) -> dict:
        index = int(request.query.get("page", 0))
        return page_body(pages[index], page=index, total_pages=len(pages))

    return handler


def fast_limiter(name: str) -> RateLimiter:
    return RateLimiter(0.001, 1000, name=name)


@pytest_asyncio.fixture
async def fake_api():
    api = FakeAPI()
    server = TestServer(api.app, host="127.0.0.1")
    await server.start_server()
    api.base_url = f"http://127.0.0.1:{server.port}"
    yield api
    await server.close()


@pytest_asyncio.fixture
async def client(fake_api):
    """Client bound to the fake API, with limiters that never throttle."""
    client = Client(
        fake_api.base_url,
        TEST_TOKEN,
        allow_insecure_http=True,
        read_limiter=fast_limiter("read"),
        write_limiter=fast_limiter("write"),
    )
    yield client
    await client.close()


@pytest.fixture
def offline_client():
    """Client whose transport must never be reached."""
    return Client(
        "https://api.example.com",
        TEST_TOKEN,
        read_limiter=fast_limiter("read"),
        write_limiter=fast_limiter("write"),
    )
