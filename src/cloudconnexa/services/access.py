"""User groups, access groups and location contexts."""
from ..api.schemas import AccessGroup, LocationContext, UserGroup
from .base import CollectionService


class UserGroupsService(CollectionService):
    path = ("user-groups",)
    model = UserGroup
    resource_type = "user group"


class AccessGroupsService(CollectionService):
    path = ("access-groups",)
    model = AccessGroup
    resource_type = "access group"


class LocationContextsService(CollectionService):
    path = ("location-contexts",)
    model = LocationContext
    resource_type = "location context"
