"""Network and host connectors.

Connectors are listed globally or filtered by their parent, and created
or deleted with the parent ID as a query parameter. Profile and token
endpoints return plain text (an OpenVPN profile and an encrypted token).
"""
import logging
from functools import partial
from typing import Optional

from ..api.pagination import DEFAULT_PAGE_SIZE, Page, collect_pages
from ..api.schemas import HostConnector, NetworkConnector
from ..api.urls import validate_id
from .base import CollectionService

logger = logging.getLogger(__name__)


class ConnectorService(CollectionService):
    """Connector operations common to networks and hosts."""

    async def get_profile(self, connector_id: str) -> str:
        """Generate the connector's OpenVPN profile."""
        validate_id(connector_id)
        body = await self.client.do_request("POST", self._url(*self.path, connector_id, "profile"))
        return body.decode("utf-8")

    async def get_token(self, connector_id: str) -> str:
        """Generate an encrypted profile token for the connector."""
        validate_id(connector_id)
        body = await self.client.do_request(
            "POST", self._url(*self.path, connector_id, "profile", "encrypt")
        )
        return body.decode("utf-8")

    async def _delete_from(self, connector_id: str, parent_id: str) -> None:
        validate_id(connector_id)
        validate_id(parent_id, self.parent_param)
        await self.client.delete(
            self._url(*self.path, connector_id),
            params={self.parent_param: parent_id},
        )


class NetworkConnectorsService(ConnectorService):
    """Connectors of networks (``/networks/connectors``)."""

    path = ("networks", "connectors")
    model = NetworkConnector
    resource_type = "network connector"
    parent_param = "networkId"

    async def get_by_page(
        self,
        page: int,
        size: int = DEFAULT_PAGE_SIZE,
        network_id: Optional[str] = None,
    ) -> Page[NetworkConnector]:
        return await super().get_by_page(page, size, networkId=network_id or None)

    async def list_by_network_id(self, network_id: str) -> list[NetworkConnector]:
        validate_id(network_id, "network_id")
        return await collect_pages(partial(self.get_by_page, network_id=network_id))

    async def create(self, connector: NetworkConnector, network_id: str) -> Optional[NetworkConnector]:
        return await super().create(connector, network_id)

    async def delete(self, connector_id: str, network_id: str) -> None:
        await self._delete_from(connector_id, network_id)

    async def start_ipsec(self, connector_id: str) -> None:
        """Bring up the connector's IPsec tunnel."""
        validate_id(connector_id)
        await self.client.do_request("POST", self._url(*self.path, connector_id, "ipsec", "start"))
        logger.debug(f"IPsec start requested for connector {connector_id}")

    async def stop_ipsec(self, connector_id: str) -> None:
        """Tear down the connector's IPsec tunnel."""
        validate_id(connector_id)
        await self.client.do_request("POST", self._url(*self.path, connector_id, "ipsec", "stop"))
        logger.debug(f"IPsec stop requested for connector {connector_id}")


class HostConnectorsService(ConnectorService):
    """Connectors of hosts (``/hosts/connectors``)."""

    path = ("hosts", "connectors")
    model = HostConnector
    resource_type = "host connector"
    parent_param = "hostId"

    async def get_by_page(
        self,
        page: int,
        size: int = DEFAULT_PAGE_SIZE,
        host_id: Optional[str] = None,
    ) -> Page[HostConnector]:
        return await super().get_by_page(page, size, hostId=host_id or None)

    async def list_by_host_id(self, host_id: str) -> list[HostConnector]:
        validate_id(host_id, "host_id")
        return await collect_pages(partial(self.get_by_page, host_id=host_id))

    async def create(self, connector: HostConnector, host_id: str) -> Optional[HostConnector]:
        return await super().create(connector, host_id)

    async def delete(self, connector_id: str, host_id: str) -> None:
        await self._delete_from(connector_id, host_id)

    async def activate(self, connector_id: str) -> None:
        validate_id(connector_id)
        await self.client.do_request("PUT", self._url(*self.path, connector_id, "activate"))

    async def suspend(self, connector_id: str) -> None:
        validate_id(connector_id)
        await self.client.do_request("PUT", self._url(*self.path, connector_id, "suspend"))

