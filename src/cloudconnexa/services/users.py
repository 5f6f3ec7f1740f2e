"""Users of the CloudConnexa account."""
from ..api.pagination import find_in_pages
from ..api.schemas import User
from .base import CollectionService


class UsersService(CollectionService):
    """``/users`` plus username lookups.

    Lookups page through the user list client-side and stop at the first
    match; a search that exhausts every page raises NotFoundError.
    """

    path = ("users",)
    model = User
    resource_type = "user"

    async def get_by_username(self, username: str) -> User:
        return await find_in_pages(
            self.get_by_page,
            lambda user: user.username == username,
            self.resource_type,
            username,
        )

    async def find(self, username: str, role: str) -> User:
        """Find the user with both this username and this role."""
        return await find_in_pages(
            self.get_by_page,
            lambda user: user.username == username and user.role == role,
            self.resource_type,
            f"{username} ({role})",
        )
