"""DNS records.

The API has no single-record GET, so ``get`` pages through the collection
looking for the ID.
"""
from typing import Optional

from ..api.pagination import find_in_pages
from ..api.schemas import DNSRecord
from ..api.urls import validate_id
from .base import CollectionService


class DNSRecordsService(CollectionService):
    path = ("dns-records",)
    model = DNSRecord
    resource_type = "DNS record"

    async def get(self, record_id: str) -> Optional[DNSRecord]:
        validate_id(record_id)
        return await find_in_pages(
            self.get_by_page,
            lambda record: record.id == record_id,
            self.resource_type,
            record_id,
        )

    async def get_by_domain(self, domain: str) -> DNSRecord:
        return await find_in_pages(
            self.get_by_page,
            lambda record: record.domain == domain,
            self.resource_type,
            domain,
        )

    async def get_by_name(self, name: str) -> DNSRecord:
        return await self.get_by_domain(name)
