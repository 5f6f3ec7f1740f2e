"""Page-number pagination shared by every "list" style operation.

Every paginated CloudConnexa endpoint returns the same envelope:

    {"content": [...], "page": 0, "size": 100, "numberOfElements": 100,
     "totalElements": 250, "totalPages": 3, "success": true}

``page`` is zero-based. Traversal fetches page 0, then keeps going while
the next page index is below ``totalPages``, so P pages cost exactly P
requests (a collection reporting zero pages costs one). Any failure aborts
the whole traversal; partial results are never returned.

Usage:
    networks = await collect_pages(client.networks.get_by_page)

    async for page in iter_pages(client.users.get_by_page, page_size=50):
        for user in page.content:
            process(user)
"""
import logging
from typing import AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .exceptions import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100


class Page(BaseModel, Generic[T]):
    """One page of a paginated collection."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    content: list[T] = Field(default_factory=list)
    page: int = 0
    size: int = 0
    number_of_elements: int = 0
    total_elements: int = 0
    total_pages: int = 0
    success: bool = True


FetchPage = Callable[[int, int], Awaitable[Page[T]]]


async def iter_pages(
    fetch_page: FetchPage,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AsyncIterator[Page[T]]:
    """Yield every page of a collection in order.

    Args:
        fetch_page: Coroutine function called as ``fetch_page(page, size)``
        page_size: Items requested per page

    Yields:
        Each Page as it arrives
    """
    page = 0
    while True:
        response = await fetch_page(page, page_size)
        yield response

        page += 1
        if page >= response.total_pages:
            break

    logger.debug(f"Pagination complete: {page} page(s) fetched")


async def collect_pages(
    fetch_page: FetchPage,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[T]:
    """Fetch every page and concatenate the content in response order."""
    items: list[T] = []
    async for page in iter_pages(fetch_page, page_size):
        items.extend(page.content)
    return items


async def find_in_pages(
    fetch_page: FetchPage,
    predicate: Callable[[T], bool],
    resource_type: str,
    identifier: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> T:
    """Return the first item matching ``predicate``, stopping at its page.

    Raises:
        NotFoundError: If every page was read without a match
    """
    async for page in iter_pages(fetch_page, page_size):
        for item in page.content:
            if predicate(item):
                return item
    raise NotFoundError(resource_type, identifier)
