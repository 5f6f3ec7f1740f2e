"""VPN regions (not paginated)."""
from ..api.exceptions import NotFoundError
from ..api.schemas import VpnRegion
from ..api.urls import validate_id
from .base import BaseService, parse_list


class VPNRegionsService(BaseService):

    async def list(self) -> list[VpnRegion]:
        data = await self.client.get(self._url("regions"))
        return parse_list(VpnRegion, data)

    async def get(self, region_id: str) -> VpnRegion:
        """Return the region with this ID.

        Raises:
            NotFoundError: If no region has that ID
        """
        validate_id(region_id)
        for region in await self.list():
            if region.id == region_id:
                return region
        raise NotFoundError("VPN region", region_id)
