"""Pydantic schemas for CloudConnexa API resources.

Field names are snake_case in Python and camelCase on the wire. Unknown
fields returned by the API are kept (``extra="allow"``) so newer server
versions do not break parsing. Request bodies are produced with
``to_payload()``, which drops unset (None) fields.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CloudConnexaModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body (camelCase keys, None fields dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================
# Enumerations
# ============================================

class InternetAccess(str, Enum):
    """Internet access modes for networks, hosts and user groups."""

    SPLIT_TUNNEL_ON = "SPLIT_TUNNEL_ON"
    SPLIT_TUNNEL_OFF = "SPLIT_TUNNEL_OFF"
    RESTRICTED_INTERNET = "RESTRICTED_INTERNET"


class DeviceStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"
    PENDING = "PENDING"


class DeviceType(str, Enum):
    CLIENT = "CLIENT"
    CONNECTOR = "CONNECTOR"


class SessionStatus(str, Enum):
    """Status filter accepted by the sessions endpoint."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# ============================================
# Routes
# ============================================

class Route(CloudConnexaModel):
    """A route attached to a network or host."""

    id: Optional[str] = None
    type: Optional[str] = None
    subnet: Optional[str] = None
    domain: Optional[str] = None
    description: Optional[str] = None
    parent_route_id: Optional[str] = None
    network_item_id: Optional[str] = None
    allow_embedded_ip: Optional[bool] = None

    def to_route_payload(self) -> dict[str, Any]:
        """The create/update body the routes endpoints expect."""
        return {"description": self.description or "", "value": self.subnet or ""}


# ============================================
# Connectors
# ============================================

class Phase(CloudConnexaModel):
    encryption_algorithms: Optional[list[str]] = None
    integrity_algorithms: Optional[list[str]] = None
    diffie_hellman_groups: Optional[list[str]] = None
    lifetime_sec: Optional[int] = None


class Rekey(CloudConnexaModel):
    margin_time_sec: Optional[int] = None
    fuzz_percent: Optional[int] = None
    replay_window_size: Optional[int] = None


class DeadPeerDetection(CloudConnexaModel):
    timeout_sec: Optional[int] = None
    dead_peer_handling: Optional[str] = None


class IkeProtocol(CloudConnexaModel):
    protocol_version: Optional[str] = None
    phase1: Optional[Phase] = None
    phase2: Optional[Phase] = None
    rekey: Optional[Rekey] = None
    dead_peer_detection: Optional[DeadPeerDetection] = None
    startup_action: Optional[str] = None


class IPSecConfig(CloudConnexaModel):
    """IPsec settings for a network connector."""

    platform: Optional[str] = None
    authentication_type: Optional[str] = None
    remote_site_public_ip: Optional[str] = None
    pre_shared_key: Optional[str] = Field(default=None, repr=False)
    ca_certificate: Optional[str] = None
    peer_certificate: Optional[str] = None
    remote_gateway_certificate: Optional[str] = None
    peer_certificate_private_key: Optional[str] = Field(default=None, repr=False)
    peer_certificate_key_passphrase: Optional[str] = Field(default=None, repr=False)
    ike_protocol: Optional[IkeProtocol] = None
    hostname: Optional[str] = None
    domain: Optional[str] = None


class NetworkConnector(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    network_item_id: Optional[str] = None
    network_item_type: Optional[str] = None
    vpn_region_id: Optional[str] = None
    ip_v4_address: Optional[str] = None
    ip_v6_address: Optional[str] = None
    profile: Optional[str] = None
    connection_status: Optional[str] = None
    ip_sec_config: Optional[IPSecConfig] = None
    tunneling_protocol: Optional[str] = None


class HostConnector(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    network_item_id: Optional[str] = None
    network_item_type: Optional[str] = None
    vpn_region_id: Optional[str] = None
    ip_v4_address: Optional[str] = None
    ip_v6_address: Optional[str] = None
    profile: Optional[str] = None
    connection_status: Optional[str] = None
    licensed: Optional[bool] = None


# ============================================
# Networks and Hosts
# ============================================

class Network(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    egress: Optional[bool] = None
    internet_access: Optional[str] = None
    system_subnets: Optional[list[str]] = None
    connectors: Optional[list[NetworkConnector]] = None
    routes: Optional[list[Route]] = None
    tunneling_protocol: Optional[str] = None


class Host(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    domain: Optional[str] = None
    internet_access: Optional[str] = None
    system_subnets: Optional[list[str]] = None
    connectors: Optional[list[HostConnector]] = None


# ============================================
# Applications and IP Services
# ============================================

class Range(CloudConnexaModel):
    lower_value: Optional[int] = None
    upper_value: Optional[int] = None
    value: Optional[int] = None


class CustomServiceType(CloudConnexaModel):
    icmp_type: Optional[list[Range]] = None
    port: Optional[list[Range]] = None
    protocol: Optional[str] = None


class ServiceConfig(CloudConnexaModel):
    """Service-type configuration shared by applications and IP services."""

    custom_service_types: Optional[list[CustomServiceType]] = None
    service_types: Optional[list[str]] = None


class ApplicationRoute(CloudConnexaModel):
    value: Optional[str] = None
    allow_embedded_ip: Optional[bool] = None


class Application(CloudConnexaModel):
    """A network or host application (domain-based service)."""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    network_item_type: Optional[str] = None
    network_item_id: Optional[str] = None
    routes: Optional[list[ApplicationRoute]] = None
    config: Optional[ServiceConfig] = None


class IPServiceRoute(CloudConnexaModel):
    description: Optional[str] = None
    value: Optional[str] = None


class IPService(CloudConnexaModel):
    """A network or host IP service (subnet-based service)."""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    network_item_type: Optional[str] = None
    network_item_id: Optional[str] = None
    type: Optional[str] = None
    routes: Optional[list[IPServiceRoute]] = None
    config: Optional[ServiceConfig] = None


# ============================================
# Users and Access Control
# ============================================

class UserDevice(CloudConnexaModel):
    """Device summary embedded in a user record."""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    ip_v4_address: Optional[str] = None
    ip_v6_address: Optional[str] = None


class User(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    auth_type: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    group_id: Optional[str] = None
    status: Optional[str] = None
    devices: Optional[list[UserDevice]] = None
    connection_status: Optional[str] = None


class UserGroup(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    connect_auth: Optional[str] = None
    internet_access: Optional[str] = None
    max_device: Optional[int] = None
    system_subnets: Optional[list[str]] = None
    vpn_region_ids: Optional[list[str]] = None
    all_regions_included: Optional[bool] = None


class AccessItem(CloudConnexaModel):
    type: Optional[str] = None
    all_covered: Optional[bool] = None
    parent: Optional[str] = None
    children: Optional[list[str]] = None


class AccessGroup(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[list[AccessItem]] = None
    destination: Optional[list[AccessItem]] = None


class LocationIP(CloudConnexaModel):
    ip: Optional[str] = None
    description: Optional[str] = None


class IPCheck(CloudConnexaModel):
    allowed: Optional[bool] = None
    ips: Optional[list[LocationIP]] = None


class CountryCheck(CloudConnexaModel):
    allowed: Optional[bool] = None
    countries: Optional[list[str]] = None


class DefaultCheck(CloudConnexaModel):
    allowed: Optional[bool] = None


class LocationContext(CloudConnexaModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    user_groups_ids: Optional[list[str]] = None
    ip_check: Optional[IPCheck] = None
    country_check: Optional[CountryCheck] = None
    default_check: Optional[DefaultCheck] = None


# ============================================
# DNS Records
# ============================================

class DNSRecord(CloudConnexaModel):
    id: Optional[str] = None
    domain: Optional[str] = None
    description: Optional[str] = None
    ipv4_addresses: Optional[list[str]] = None
    ipv6_addresses: Optional[list[str]] = None


# ============================================
# Devices
# ============================================

class DeviceDetail(CloudConnexaModel):
    """A user device as returned by the devices endpoint."""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    platform: Optional[str] = None
    version: Optional[str] = None
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ipv4_address: Optional[str] = None
    ipv6_address: Optional[str] = None
    public_key: Optional[str] = None
    fingerprint: Optional[str] = None
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    hostname: Optional[str] = None
    operating_system: Optional[str] = None
    os_version: Optional[str] = None
    client_version: Optional[str] = None
    is_online: Optional[bool] = None
    last_connected_at: Optional[datetime] = None
    last_disconnected_at: Optional[datetime] = None
    total_bytes_in: Optional[int] = None
    total_bytes_out: Optional[int] = None
    session_count: Optional[int] = None
    region: Optional[str] = None
    gateway: Optional[str] = None
    user_group_id: Optional[str] = None
    network_id: Optional[str] = None
    tags: Optional[list[str]] = None
    metadata: Optional[dict[str, Any]] = None


class DeviceListOptions(CloudConnexaModel):
    """Filters for the device list endpoint. ``size`` must be 1..1000 when set."""

    user_id: Optional[str] = None
    page: Optional[int] = None
    size: Optional[int] = None


class DeviceUpdateRequest(CloudConnexaModel):
    """Partial device update; only set fields are sent."""

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[DeviceStatus] = None
    tags: Optional[list[str]] = None
    metadata: Optional[dict[str, Any]] = None


# ============================================
# Sessions
# ============================================

class Session(CloudConnexaModel):
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    device_id: Optional[str] = None
    region_id: Optional[str] = None
    bytes_in: Optional[int] = None
    bytes_out: Optional[int] = None
    connector_name: Optional[str] = None
    user_name: Optional[str] = None
    device_name: Optional[str] = None
    client_ip: Optional[str] = None
    start_date_time: Optional[datetime] = None
    vpn_ipv4: Optional[str] = None
    network_name: Optional[str] = None
    region_name: Optional[str] = None
    connection_status: Optional[str] = None


class SessionsResponse(CloudConnexaModel):
    """One cursor page of sessions; ``next_cursor`` is empty on the last page."""

    sessions: list[Session] = Field(default_factory=list)
    next_cursor: Optional[str] = None


class SessionsListOptions(CloudConnexaModel):
    """Filters for the sessions endpoint. ``size`` is required, 1..100."""

    size: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[SessionStatus] = None
    return_only_new: bool = False
    cursor: Optional[str] = None


# ============================================
# VPN Regions
# ============================================

class VpnRegion(CloudConnexaModel):
    id: Optional[str] = None
    continent: Optional[str] = None
    country: Optional[str] = None
    country_iso: Optional[str] = None
    region_name: Optional[str] = None


# ============================================
# Settings
# ============================================

class DNSServers(CloudConnexaModel):
    primary_ip_v4: Optional[str] = None
    secondary_ip_v4: Optional[str] = None


class DNSZone(CloudConnexaModel):
    name: Optional[str] = None
    addresses: Optional[list[str]] = None


class DomainRoutingSubnet(CloudConnexaModel):
    ip_v4_address: Optional[str] = None
    ip_v6_address: Optional[str] = None


class Subnet(CloudConnexaModel):
    ip_v4_address: Optional[list[str]] = None
    ip_v6_address: Optional[list[str]] = None
