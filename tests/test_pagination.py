#!/usr/bin/env python3
"""Unit tests for page-number pagination.

Tests cover:
    - Exact request counts (P pages cost P fetches)
    - Order preservation across pages
    - All-or-nothing failure
    - Early exit for searches
"""
import pytest

from conftest import page_body, paged
from cloudconnexa.api.exceptions import ClientResponseError, NotFoundError
from cloudconnexa.api.pagination import Page, collect_pages, find_in_pages, iter_pages


class FakeCollection:
    """Serves ``total`` integers in pages of ``size`` and counts fetches."""

    def __init__(self, total, fail_on_page=None):
        self.items = list(range(total))
        self.fail_on_page = fail_on_page
        self.calls = []

    async def fetch(self, page, size):
        self.calls.append((page, size))
        if page == self.fail_on_page:
            raise ClientResponseError(500, "server error")
        total_pages = -(-len(self.items) // size)
        content = self.items[page * size:(page + 1) * size]
        return Page[int](content=content, page=page, size=size, total_pages=total_pages)


# ============================================
# Traversal Tests
# ============================================

class TestCollectPages:
    """Test full traversal."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("total, size, pages", [(250, 100, 3), (100, 100, 1), (101, 100, 2), (5, 1, 5)])
    async def test_exact_fetch_count(self, total, size, pages):
        collection = FakeCollection(total)

        items = await collect_pages(collection.fetch, page_size=size)

        assert items == list(range(total))
        assert len(collection.calls) == pages
        assert [page for page, _ in collection.calls] == list(range(pages))

    @pytest.mark.asyncio
    async def test_zero_pages_costs_one_fetch(self):
        collection = FakeCollection(0)

        assert await collect_pages(collection.fetch) == []
        assert collection.calls == [(0, 100)]

    @pytest.mark.asyncio
    async def test_failure_aborts_without_partial_results(self):
        collection = FakeCollection(250, fail_on_page=1)

        with pytest.raises(ClientResponseError):
            await collect_pages(collection.fetch)

        assert len(collection.calls) == 2

    @pytest.mark.asyncio
    async def test_iter_pages_yields_in_order(self):
        collection = FakeCollection(30)
        numbers = [page.page async for page in iter_pages(collection.fetch, page_size=10)]
        assert numbers == [0, 1, 2]


class TestFindInPages:
    """Test search with early exit."""

    @pytest.mark.asyncio
    async def test_stops_at_matching_page(self):
        collection = FakeCollection(300)

        found = await find_in_pages(collection.fetch, lambda n: n == 150, "number", "150")

        assert found == 150
        assert len(collection.calls) == 2

    @pytest.mark.asyncio
    async def test_not_found_after_all_pages(self):
        collection = FakeCollection(300)

        with pytest.raises(NotFoundError) as exc:
            await find_in_pages(collection.fetch, lambda n: n < 0, "number", "-1")

        assert exc.value.identifier == "-1"
        assert len(collection.calls) == 3


# ============================================
# Page Model Tests
# ============================================

class TestPageModel:

    def test_parses_camel_case_envelope(self):
        page = Page[dict].model_validate(page_body([{"id": "a"}], page=2, total_pages=4))
        assert page.total_pages == 4
        assert page.number_of_elements == 1
        assert page.content == [{"id": "a"}]


# ============================================
# Service Pagination Tests
# ============================================

class TestServicePagination:
    """Collections page through the API with page/size query parameters."""

    @pytest.mark.asyncio
    async def test_network_list_spans_pages(self, client, fake_api):
        fake_api.on("GET", "/api/v1/networks", paged([
            [{"id": "n1", "name": "one"}, {"id": "n2", "name": "two"}],
            [{"id": "n3", "name": "three"}],
        ]))

        networks = await client.networks.list()

        assert [n.id for n in networks] == ["n1", "n2", "n3"]
        requests = fake_api.requests_to("/api/v1/networks")
        assert [r.query for r in requests] == [
            {"page": "0", "size": "100"},
            {"page": "1", "size": "100"},
        ]

    @pytest.mark.asyncio
    async def test_get_by_name_stops_early(self, client, fake_api):
        fake_api.on("GET", "/api/v1/hosts", paged([
            [{"id": "h1", "name": "web"}],
            [{"id": "h2", "name": "db"}],
            [{"id": "h3", "name": "cache"}],
        ]))

        host = await client.hosts.get_by_name("db")

        assert host.id == "h2"
        assert len(fake_api.requests_to("/api/v1/hosts")) == 2
