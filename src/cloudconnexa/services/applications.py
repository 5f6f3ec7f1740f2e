"""Applications and IP services of networks and hosts.

Both are created under their parent: the parent ID is taken from the
item's ``network_item_id`` and sent as ``networkId`` or ``hostId``.
"""
from typing import Optional

from ..api.schemas import Application, IPService
from .base import CollectionService


class ParentedService(CollectionService):
    """Collection whose create call is scoped by the item's parent."""

    async def create(self, resource, parent_id: Optional[str] = None):
        if parent_id is None:
            parent_id = getattr(resource, "network_item_id", None)
        return await super().create(resource, parent_id)


class NetworkApplicationsService(ParentedService):
    path = ("networks", "applications")
    model = Application
    resource_type = "network application"
    parent_param = "networkId"


class HostApplicationsService(ParentedService):
    path = ("hosts", "applications")
    model = Application
    resource_type = "host application"
    parent_param = "hostId"


class NetworkIPServicesService(ParentedService):
    path = ("networks", "ip-services")
    model = IPService
    resource_type = "network IP service"
    parent_param = "networkId"


class HostIPServicesService(ParentedService):
    path = ("hosts", "ip-services")
    model = IPService
    resource_type = "host IP service"
    parent_param = "hostId"
