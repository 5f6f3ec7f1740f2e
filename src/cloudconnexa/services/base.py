"""Shared plumbing for resource services.

Each service holds an explicit reference to the Client and talks to the API
only through ``client.do_request`` (and its JSON wrappers) and the helpers
in ``cloudconnexa.api.pagination``.

CollectionService covers the common shape: a page-numbered collection at
``/api/v1/<path>`` with get/create/update/delete on ``<path>/<id>``.
Resource modules subclass it and set ``path``, ``model`` and
``resource_type``; anything irregular is overridden there.
"""
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..api.exceptions import ResponseDecodeError
from ..api.pagination import DEFAULT_PAGE_SIZE, Page, collect_pages, find_in_pages
from ..api.urls import build_url, validate_id

if TYPE_CHECKING:
    from ..api.client import Client

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], data: Any) -> Optional[ModelT]:
    """Validate decoded JSON into ``model``; None stays None.

    Raises:
        ResponseDecodeError: If the data does not fit the model
    """
    if data is None:
        return None
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ResponseDecodeError(
            f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)",
            cause=e,
        )


def parse_list(model: type[ModelT], data: Any) -> list[ModelT]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ResponseDecodeError(f"Expected a JSON array of {model.__name__}")
    return [parse_model(model, item) for item in data]


def payload(resource: Any) -> Any:
    """Turn a model (or plain dict) into a request body."""
    if isinstance(resource, BaseModel):
        return resource.model_dump(mode="json", by_alias=True, exclude_none=True)
    return resource


class BaseService:
    """Holds the Client reference and builds endpoint URLs."""

    def __init__(self, client: "Client"):
        self.client = client

    def _url(self, *segments: Any) -> str:
        return build_url(self.client.v1_url, *segments)


class CollectionService(BaseService, Generic[ModelT]):
    """CRUD and pagination for a page-numbered collection.

    Attributes:
        path: Path segments under /api/v1 (e.g. ``("networks", "routes")``)
        model: Pydantic model for one item
        resource_type: Human-readable name used in NotFoundError
        parent_param: Query parameter naming the parent item on create, if any
    """

    path: ClassVar[tuple[str, ...]] = ()
    model: ClassVar[type[BaseModel]] = BaseModel
    resource_type: ClassVar[str] = "resource"
    parent_param: ClassVar[Optional[str]] = None

    # ----------------------------------------
    # Reads
    # ----------------------------------------

    async def get_by_page(self, page: int, size: int = DEFAULT_PAGE_SIZE, **filters: Any) -> Page[ModelT]:
        """Fetch one page of the collection.

        Extra keyword arguments become query parameters; None values are dropped.
        """
        params = {"page": page, "size": size}
        params.update(filters)
        data = await self.client.get(self._url(*self.path), params=params)
        return parse_model(Page[self.model], data) or Page[self.model]()

    async def list(self) -> list[ModelT]:
        """Fetch every item in the collection."""
        return await collect_pages(self.get_by_page)

    async def get(self, resource_id: str) -> Optional[ModelT]:
        validate_id(resource_id)
        data = await self.client.get(self._url(*self.path, resource_id))
        return parse_model(self.model, data)

    async def get_by_name(self, name: str) -> ModelT:
        """Page through the collection until an item named ``name`` turns up.

        Raises:
            NotFoundError: If no item has that name
        """
        return await find_in_pages(
            self.get_by_page,
            lambda item: item.name == name,
            self.resource_type,
            name,
        )

    # ----------------------------------------
    # Writes
    # ----------------------------------------

    async def create(self, resource: Any, parent_id: Optional[str] = None) -> Optional[ModelT]:
        params = None
        if self.parent_param:
            params = {self.parent_param: validate_id(parent_id, self.parent_param)}
        data = await self.client.post(self._url(*self.path), json_body=payload(resource), params=params)
        return parse_model(self.model, data)

    async def update(self, resource_id: str, resource: Any) -> Optional[ModelT]:
        validate_id(resource_id)
        data = await self.client.put(self._url(*self.path, resource_id), json_body=payload(resource))
        return parse_model(self.model, data)

    async def delete(self, resource_id: str) -> None:
        validate_id(resource_id)
        await self.client.delete(self._url(*self.path, resource_id))
