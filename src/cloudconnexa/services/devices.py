"""User devices.

Devices are updated with POST (not PUT) and a partial body; block and
unblock are status updates.
"""
from functools import partial
from typing import Optional

from ..api.exceptions import ValidationError
from ..api.pagination import DEFAULT_PAGE_SIZE, Page, collect_pages
from ..api.schemas import DeviceDetail, DeviceListOptions, DeviceStatus, DeviceUpdateRequest
from ..api.urls import validate_id
from .base import BaseService, parse_model, payload

MAX_DEVICE_PAGE_SIZE = 1000


class DevicesService(BaseService):

    async def get_by_page(
        self,
        page: int,
        size: int = DEFAULT_PAGE_SIZE,
        user_id: Optional[str] = None,
    ) -> Page[DeviceDetail]:
        return await self.list(DeviceListOptions(user_id=user_id, page=page, size=size))

    async def list_all(self) -> list[DeviceDetail]:
        return await collect_pages(self.get_by_page)

    async def list_by_user_id(self, user_id: str) -> list[DeviceDetail]:
        validate_id(user_id, "user_id")
        return await collect_pages(partial(self.get_by_page, user_id=user_id))

    async def get(self, device_id: str) -> Optional[DeviceDetail]:
        validate_id(device_id)
        data = await self.client.get(self._url("devices", device_id))
        return parse_model(DeviceDetail, data)

    async def update(self, device_id: str, update: DeviceUpdateRequest) -> Optional[DeviceDetail]:
        validate_id(device_id)
        data = await self.client.post(self._url("devices", device_id), json_body=payload(update))
        return parse_model(DeviceDetail, data)

    async def block(self, device_id: str) -> Optional[DeviceDetail]:
        return await self.update(device_id, DeviceUpdateRequest(status=DeviceStatus.BLOCKED))

    async def unblock(self, device_id: str) -> Optional[DeviceDetail]:
        return await self.update(device_id, DeviceUpdateRequest(status=DeviceStatus.ACTIVE))

    async def update_name(self, device_id: str, name: str) -> Optional[DeviceDetail]:
        return await self.update(device_id, DeviceUpdateRequest(name=name))

    async def update_description(self, device_id: str, description: str) -> Optional[DeviceDetail]:
        return await self.update(device_id, DeviceUpdateRequest(description=description))

    async def update_tags(self, device_id: str, tags: list[str]) -> Optional[DeviceDetail]:
        return await self.update(device_id, DeviceUpdateRequest(tags=tags))

    async def list(self, options: Optional[DeviceListOptions] = None) -> Page[DeviceDetail]:
        """Fetch one page of devices, optionally filtered by user.

        Raises:
            ValidationError: If ``options.size`` is outside 1..1000
        """
        options = options or DeviceListOptions()
        if options.size is not None and not 1 <= options.size <= MAX_DEVICE_PAGE_SIZE:
            raise ValidationError(
                f"size must be between 1 and {MAX_DEVICE_PAGE_SIZE}, got {options.size}",
                field="size",
            )

        params = {"userId": options.user_id or None, "page": options.page, "size": options.size}
        data = await self.client.get(self._url("devices"), params=params)
        return parse_model(Page[DeviceDetail], data) or Page[DeviceDetail]()
