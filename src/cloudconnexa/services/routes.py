"""Routes attached to networks and hosts.

Route collections are always scoped to their parent (``networkId`` or
``hostId`` query parameter). Create and update send the compact
``{"description", "value"}`` body, with the route's subnet as the value.
"""
from functools import partial
from typing import ClassVar, Optional

from ..api.pagination import DEFAULT_PAGE_SIZE, Page, collect_pages, find_in_pages
from ..api.schemas import Route
from ..api.urls import validate_id
from .base import BaseService, parse_model


class RouteService(BaseService):
    """Shared implementation; subclasses set the path and parent parameter."""

    path: ClassVar[tuple[str, ...]] = ()
    parent_param: ClassVar[str] = ""
    parent_field: ClassVar[str] = ""

    async def get_by_page(self, parent_id: str, page: int, size: int = DEFAULT_PAGE_SIZE) -> Page[Route]:
        validate_id(parent_id, self.parent_field)
        data = await self.client.get(
            self._url(*self.path),
            params={self.parent_param: parent_id, "page": page, "size": size},
        )
        return parse_model(Page[Route], data) or Page[Route]()

    async def list(self, parent_id: str) -> list[Route]:
        validate_id(parent_id, self.parent_field)
        return await collect_pages(partial(self.get_by_page, parent_id))

    async def get(self, route_id: str) -> Optional[Route]:
        validate_id(route_id)
        data = await self.client.get(self._url(*self.path, route_id))
        return parse_model(Route, data)

    async def find(self, parent_id: str, route_id: str) -> Route:
        """Look a route up inside one parent's route list.

        Raises:
            NotFoundError: If the parent has no route with that ID
        """
        validate_id(parent_id, self.parent_field)
        validate_id(route_id)
        return await find_in_pages(
            partial(self.get_by_page, parent_id),
            lambda route: route.id == route_id,
            "route",
            route_id,
        )

    async def create(self, parent_id: str, route: Route) -> Optional[Route]:
        validate_id(parent_id, self.parent_field)
        data = await self.client.post(
            self._url(*self.path),
            json_body=route.to_route_payload(),
            params={self.parent_param: parent_id},
        )
        return parse_model(Route, data)

    async def update(self, route_id: str, route: Route) -> Optional[Route]:
        validate_id(route_id)
        data = await self.client.put(self._url(*self.path, route_id), json_body=route.to_route_payload())
        return parse_model(Route, data)

    async def delete(self, route_id: str) -> None:
        validate_id(route_id)
        await self.client.delete(self._url(*self.path, route_id))


class RoutesService(RouteService):
    """Routes of a network (``/networks/routes``)."""

    path = ("networks", "routes")
    parent_param = "networkId"
    parent_field = "network_id"


class HostRoutesService(RouteService):
    """Routes of a host (``/hosts/routes``)."""

    path = ("hosts", "routes")
    parent_param = "hostId"
    parent_field = "host_id"
