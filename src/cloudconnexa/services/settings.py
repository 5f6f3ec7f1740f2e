"""Account-wide settings.

Each setting lives at its own endpoint and is read with GET and written
with PUT. Values travel as bare JSON literals (``true``, ``42``), as JSON
documents for structured settings, or as ``text/plain`` for strings.
"""
import json
import logging
from typing import Any, Optional

from ..api.exceptions import ResponseDecodeError
from ..api.schemas import DNSServers, DNSZone, DomainRoutingSubnet, Subnet
from .base import BaseService, parse_list, parse_model, payload

logger = logging.getLogger(__name__)

TEXT_PLAIN = {"Content-Type": "text/plain"}


class SettingsService(BaseService):

    # ----------------------------------------
    # Typed helpers
    # ----------------------------------------

    async def _get_raw(self, *path: str) -> bytes:
        return await self.client.do_request("GET", self._url(*path))

    async def _put_raw(self, path: tuple[str, ...], body: bytes, headers: Optional[dict] = None) -> bytes:
        return await self.client.do_request("PUT", self._url(*path), data=body, headers=headers)

    @staticmethod
    def _decode(body: bytes) -> Any:
        text = body.decode("utf-8").strip()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise ResponseDecodeError("Setting value is not valid JSON", body=text, cause=e)

    @classmethod
    def _as_bool(cls, body: bytes) -> bool:
        value = cls._decode(body)
        if not isinstance(value, bool):
            raise ResponseDecodeError(f"Expected a boolean setting, got {value!r}")
        return value

    @classmethod
    def _as_int(cls, body: bytes) -> int:
        value = cls._decode(body)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ResponseDecodeError(f"Expected an integer setting, got {value!r}")
        return value

    async def _get_bool(self, *path: str) -> bool:
        return self._as_bool(await self._get_raw(*path))

    async def _set_bool(self, path: tuple[str, ...], value: bool) -> bool:
        return self._as_bool(await self._put_raw(path, json.dumps(bool(value)).encode()))

    async def _get_int(self, *path: str) -> int:
        return self._as_int(await self._get_raw(*path))

    async def _set_int(self, path: tuple[str, ...], value: int) -> int:
        return self._as_int(await self._put_raw(path, str(int(value)).encode()))

    async def _get_string(self, *path: str) -> str:
        return (await self._get_raw(*path)).decode("utf-8")

    async def _set_string(self, path: tuple[str, ...], value: str) -> str:
        body = await self._put_raw(path, value.encode("utf-8"), headers=TEXT_PLAIN)
        return body.decode("utf-8")

    async def _get_json(self, *path: str) -> Any:
        return self._decode(await self._get_raw(*path))

    async def _set_json(self, path: tuple[str, ...], value: Any) -> Any:
        return self._decode(await self._put_raw(path, json.dumps(payload(value)).encode()))

    # ----------------------------------------
    # Authentication
    # ----------------------------------------

    async def get_trusted_devices_allowed(self) -> bool:
        return await self._get_bool("settings", "auth", "trusted-devices-allowed")

    async def set_trusted_devices_allowed(self, value: bool) -> bool:
        return await self._set_bool(("settings", "auth", "trusted-devices-allowed"), value)

    async def get_two_factor_auth_enabled(self) -> bool:
        return await self._get_bool("settings", "auth", "two-factor-auth")

    async def set_two_factor_auth_enabled(self, value: bool) -> bool:
        return await self._set_bool(("settings", "auth", "two-factor-auth"), value)

    # ----------------------------------------
    # DNS
    # ----------------------------------------

    async def get_dns_servers(self) -> Optional[DNSServers]:
        return parse_model(DNSServers, await self._get_json("settings", "dns", "custom-servers"))

    async def set_dns_servers(self, value: DNSServers) -> Optional[DNSServers]:
        return parse_model(DNSServers, await self._set_json(("settings", "dns", "custom-servers"), value))

    async def get_default_dns_suffix(self) -> str:
        return await self._get_string("settings", "dns", "default-suffix")

    async def set_default_dns_suffix(self, value: str) -> str:
        return await self._set_string(("settings", "dns", "default-suffix"), value)

    async def get_dns_proxy_enabled(self) -> bool:
        return await self._get_bool("settings", "dns", "proxy-enabled")

    async def set_dns_proxy_enabled(self, value: bool) -> bool:
        return await self._set_bool(("settings", "dns", "proxy-enabled"), value)

    async def get_dns_zones(self) -> list[DNSZone]:
        return parse_list(DNSZone, await self._get_json("settings", "dns", "zones"))

    async def set_dns_zones(self, value: list[DNSZone]) -> list[DNSZone]:
        body = [payload(zone) for zone in value]
        return parse_list(DNSZone, await self._set_json(("settings", "dns", "zones"), body))

    # ----------------------------------------
    # Users and devices
    # ----------------------------------------

    async def get_default_connect_auth(self) -> str:
        return await self._get_string("settings", "user", "connect-auth")

    async def set_default_connect_auth(self, value: str) -> str:
        return await self._set_string(("settings", "user", "connect-auth"), value)

    async def get_default_device_allowance_per_user(self) -> int:
        return await self._get_int("settings", "user", "device-allowance")

    async def set_default_device_allowance_per_user(self, value: int) -> int:
        return await self._set_int(("settings", "user", "device-allowance"), value)

    async def get_force_update_device_allowance_enabled(self) -> bool:
        return await self._get_bool("settings", "user", "device-allowance-force-update")

    async def set_force_update_device_allowance_enabled(self, value: bool) -> bool:
        return await self._set_bool(("settings", "user", "device-allowance-force-update"), value)

    async def get_device_enforcement(self) -> str:
        return await self._get_string("settings", "user", "device-enforcement")

    async def set_device_enforcement(self, value: str) -> str:
        return await self._set_string(("settings", "user", "device-enforcement"), value)

    async def get_profile_distribution(self) -> str:
        return await self._get_string("settings", "user", "profile-distribution")

    async def set_profile_distribution(self, value: str) -> str:
        return await self._set_string(("settings", "user", "profile-distribution"), value)

    async def get_connection_timeout(self) -> int:
        return await self._get_int("settings", "users", "connection-timeout")

    async def set_connection_timeout(self, value: int) -> int:
        return await self._set_int(("settings", "users", "connection-timeout"), value)

    # ----------------------------------------
    # WPC (wide-area private cloud)
    # ----------------------------------------

    async def get_client_options(self) -> list[str]:
        return await self._get_json("settings", "wpc", "client-options") or []

    async def set_client_options(self, value: list[str]) -> list[str]:
        return await self._set_json(("settings", "wpc", "client-options"), list(value)) or []

    async def get_default_region(self) -> str:
        return await self._get_string("settings", "wpc", "default-region")

    async def set_default_region(self, value: str) -> str:
        return await self._set_string(("settings", "wpc", "default-region"), value)

    async def get_domain_routing_subnet(self) -> Optional[DomainRoutingSubnet]:
        data = await self._get_json("settings", "wpc", "domain-routing-subnet")
        return parse_model(DomainRoutingSubnet, data)

    async def set_domain_routing_subnet(self, value: DomainRoutingSubnet) -> Optional[DomainRoutingSubnet]:
        data = await self._set_json(("settings", "wpc", "domain-routing-subnet"), value)
        return parse_model(DomainRoutingSubnet, data)

    async def get_snat_enabled(self) -> bool:
        return await self._get_bool("settings", "wpc", "snat")

    async def set_snat_enabled(self, value: bool) -> bool:
        return await self._set_bool(("settings", "wpc", "snat"), value)

    async def get_subnet(self) -> Optional[Subnet]:
        return parse_model(Subnet, await self._get_json("settings", "wpc", "subnet"))

    async def set_subnet(self, value: Subnet) -> Optional[Subnet]:
        return parse_model(Subnet, await self._set_json(("settings", "wpc", "subnet"), value))

    async def get_topology(self) -> str:
        return await self._get_string("settings", "wpc", "topology")

    async def set_topology(self, value: str) -> str:
        return await self._set_string(("settings", "wpc", "topology"), value)

    # ----------------------------------------
    # Feature toggles (separate enable/disable endpoints)
    # ----------------------------------------

    async def get_dns_log_enabled(self) -> bool:
        return await self._get_bool("dns-log", "user-dns-resolutions", "enabled")

    async def set_dns_log_enabled(self, value: bool) -> None:
        action = "enable" if value else "disable"
        await self._put_raw(("dns-log", "user-dns-resolutions", action), json.dumps(bool(value)).encode())
        logger.debug(f"DNS log {action}d")

    async def get_access_visibility_enabled(self) -> bool:
        return await self._get_bool("access-visibility", "enabled")

    async def set_access_visibility_enabled(self, value: bool) -> None:
        action = "enable" if value else "disable"
        await self._put_raw(("access-visibility", action), json.dumps(bool(value)).encode())
        logger.debug(f"Access visibility {action}d")
