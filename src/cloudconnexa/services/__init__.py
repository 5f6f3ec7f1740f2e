"""Resource services for the CloudConnexa API.

Each service wraps the Client for one resource kind and is exposed as an
attribute of the Client (``client.networks``, ``client.users``, ...).

Services:
    NetworksService, HostsService: top-level network items
    NetworkConnectorsService, HostConnectorsService: connectors (+ profiles)
    RoutesService, HostRoutesService: routes scoped to a network or host
    NetworkApplicationsService, HostApplicationsService: applications
    NetworkIPServicesService, HostIPServicesService: IP services
    UsersService, UserGroupsService: users and their groups
    AccessGroupsService, LocationContextsService: access control
    DNSRecordsService: DNS records
    DevicesService: user devices
    SessionsService: VPN session history (cursor-paginated)
    VPNRegionsService: available regions
    SettingsService: account-wide settings
"""
from .access import AccessGroupsService, LocationContextsService, UserGroupsService
from .applications import (
    HostApplicationsService,
    HostIPServicesService,
    NetworkApplicationsService,
    NetworkIPServicesService,
)
from .base import BaseService, CollectionService
from .connectors import HostConnectorsService, NetworkConnectorsService
from .devices import DevicesService
from .dns_records import DNSRecordsService
from .networks import HostsService, NetworksService
from .routes import HostRoutesService, RoutesService
from .sessions import SessionsService
from .settings import SettingsService
from .users import UsersService
from .vpn_regions import VPNRegionsService

__all__ = [
    "BaseService",
    "CollectionService",
    "AccessGroupsService",
    "DNSRecordsService",
    "DevicesService",
    "HostApplicationsService",
    "HostConnectorsService",
    "HostIPServicesService",
    "HostRoutesService",
    "HostsService",
    "LocationContextsService",
    "NetworkApplicationsService",
    "NetworkConnectorsService",
    "NetworkIPServicesService",
    "NetworksService",
    "RoutesService",
    "SessionsService",
    "SettingsService",
    "UserGroupsService",
    "UsersService",
    "VPNRegionsService",
]
