"""Sync of OneLogin groups and their users."""

from __future__ import annotations

import requests

from ..onelogin.client import Client, RequestError
from ..onelogin.models import Group
from ..onelogin.request import PaginationVars
from .pagination import RESOURCES_PAGE_SIZE, parse_page_token
from .resources import (
    MEMBERSHIP,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_USER,
    ConnectorError,
    Entitlement,
    Grant,
    Resource,
    ResourceId,
    Trait,
    new_assignment_entitlement,
    new_grant,
)

_API_ERRORS = (RequestError, requests.RequestException)


def group_resource(group: Group) -> Resource:
    """The connector resource for a OneLogin group."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_GROUP.id, str(group.id)),
        display_name=group.name,
        trait=Trait.GROUP,
        profile={"group_id": group.id, "group_name": group.name},
    )


class GroupSyncer:
    """Lists groups, their membership entitlement and the users holding it."""

    resource_type = RESOURCE_TYPE_GROUP

    def __init__(self, client: Client) -> None:
        self._client = client

    def list(
        self, parent_id: ResourceId | None = None, token: str = ""
    ) -> tuple[list[Resource], str]:
        bag, cursor = parse_page_token(token, ResourceId(RESOURCE_TYPE_GROUP.id))
        try:
            groups, next_cursor = self._client.get_groups(
                PaginationVars(limit=RESOURCES_PAGE_SIZE, v1_cursor=cursor)
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list groups: {err}"
            ) from err
        next_page = bag.next_token(next_cursor)
        return [group_resource(group) for group in groups], next_page

    def entitlements(
        self, resource: Resource, token: str = ""
    ) -> tuple[list[Entitlement], str]:
        name = resource.display_name
        entitlement = new_assignment_entitlement(
            resource,
            MEMBERSHIP,
            display_name=f"{name} Group {MEMBERSHIP}",
            description=f"Access to {name} group in OneLogin",
            grantable_to=(RESOURCE_TYPE_USER,),
        )
        return [entitlement], ""

    def grants(self, resource: Resource, token: str = "") -> tuple[list[Grant], str]:
        bag, cursor = parse_page_token(token, resource.id)
        try:
            users, next_cursor = self._client.get_users(
                PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor),
                resource.id.resource,
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list group users: {err}"
            ) from err
        grants = [
            new_grant(resource, MEMBERSHIP, ResourceId(RESOURCE_TYPE_USER.id, str(user.id)))
            for user in users
        ]
        return grants, bag.next_token(next_cursor)