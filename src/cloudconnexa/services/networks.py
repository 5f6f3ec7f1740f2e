"""Networks and hosts: the top-level items connectors and routes hang off."""
from ..api.schemas import Host, Network
from .base import CollectionService


class NetworksService(CollectionService):
    """``/networks``: get_by_page, list, get, get_by_name, create, update, delete."""

    path = ("networks",)
    model = Network
    resource_type = "network"


class HostsService(CollectionService):
    """``/hosts``: same operations as networks."""

    path = ("hosts",)
    model = Host
    resource_type = "host"
