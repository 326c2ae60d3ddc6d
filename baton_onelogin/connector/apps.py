"""Sync of OneLogin applications and their users."""

from __future__ import annotations

import requests

from ..onelogin.client import Client, RequestError
from ..onelogin.models import App
from ..onelogin.request import PaginationVars
from .pagination import RESOURCES_PAGE_SIZE, parse_page_token
from .resources import (
    MEMBERSHIP,
    RESOURCE_TYPE_APP,
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


def app_resource(app: App) -> Resource:
    """The connector resource for a OneLogin app."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_APP.id, str(app.id)),
        display_name=app.name,
        trait=Trait.APP,
        profile={"app_id": app.id, "app_name": app.name},
    )


class AppSyncer:
    """Lists apps, their membership entitlement and the users holding it."""

    resource_type = RESOURCE_TYPE_APP

    def __init__(self, client: Client) -> None:
        self._client = client

    def list(
        self, parent_id: ResourceId | None = None, token: str = ""
    ) -> tuple[list[Resource], str]:
        bag, cursor = parse_page_token(token, ResourceId(RESOURCE_TYPE_APP.id))
        try:
            apps, next_cursor = self._client.get_apps(
                PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor)
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list apps: {err}"
            ) from err
        next_page = bag.next_token(next_cursor)
        return [app_resource(app) for app in apps], next_page

    def entitlements(
        self, resource: Resource, token: str = ""
    ) -> tuple[list[Entitlement], str]:
        name = resource.display_name
        entitlement = new_assignment_entitlement(
            resource,
            MEMBERSHIP,
            display_name=f"{name} App {MEMBERSHIP}",
            description=f"Access to {name} app in OneLogin",
            grantable_to=(RESOURCE_TYPE_USER,),
        )
        return [entitlement], ""

    def grants(self, resource: Resource, token: str = "") -> tuple[list[Grant], str]:
        bag, cursor = parse_page_token(token, resource.id)
        try:
            users, next_cursor = self._client.get_app_users(
                resource.id.resource,
                PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor),
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list app users: {err}"
            ) from err
        grants = [
            new_grant(resource, MEMBERSHIP, ResourceId(RESOURCE_TYPE_USER.id, str(user.id)))
            for user in users
        ]
        return grants, bag.next_token(next_cursor)