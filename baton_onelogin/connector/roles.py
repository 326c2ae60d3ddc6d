"""Sync and provisioning of OneLogin roles."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import requests

from ..onelogin.client import Client, RequestError
from ..onelogin.models import Role
from ..onelogin.request import PaginationVars
from .apps import app_resource
from .pagination import RESOURCES_PAGE_SIZE, PageState, parse_page_token
from .resources import (
    ADMIN,
    MEMBERSHIP,
    RESOURCE_TYPE_APP,
    RESOURCE_TYPE_ROLE,
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

_log = logging.getLogger(__name__)

_API_ERRORS = (RequestError, requests.RequestException)

# Page state that walks the admins of a role.
ADMIN_STATE_ID = "Admin"


def role_resource(role: Role) -> Resource:
    """The connector resource for a OneLogin role."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_ROLE.id, str(role.id)),
        display_name=role.name,
        trait=Trait.ROLE,
        profile={"role_name": role.name, "role_id": role.id},
    )


class RoleSyncer:
    """Lists roles, their member and admin entitlements, and grants them."""

    resource_type = RESOURCE_TYPE_ROLE

    def __init__(self, client: Client) -> None:
        self._client = client

    def list(
        self, parent_id: ResourceId | None = None, token: str = ""
    ) -> tuple[list[Resource], str]:
        bag, cursor = parse_page_token(token, ResourceId(RESOURCE_TYPE_ROLE.id))
        try:
            roles, next_cursor = self._client.get_roles(
                PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor)
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list roles: {err}"
            ) from err
        next_page = bag.next_token(next_cursor)
        return [role_resource(role) for role in roles], next_page

    def entitlements(
        self, resource: Resource, token: str = ""
    ) -> tuple[list[Entitlement], str]:
        name = resource.display_name
        grantable = (RESOURCE_TYPE_USER, RESOURCE_TYPE_APP)
        member = new_assignment_entitlement(
            resource,
            MEMBERSHIP,
            display_name=f"{name} Role {MEMBERSHIP}",
            description=f"Access to {name} role in OneLogin",
            grantable_to=grantable,
        )
        admin = new_assignment_entitlement(
            resource,
            ADMIN,
            display_name=f"{name} Role {ADMIN}",
            description=f"Admin access to {name} role in OneLogin",
            grantable_to=grantable,
        )
        return [member, admin], ""

    def grants(self, resource: Resource, token: str = "") -> tuple[list[Grant], str]:
        bag, cursor = parse_page_token(token, resource.id)
        state = bag.resource_type_id()
        role_id = resource.id.resource
        pagination = PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor)

        if state == RESOURCE_TYPE_ROLE.id:
            # Replace the role state with one state per kind of grant.
            bag.pop()
            for kind in (RESOURCE_TYPE_USER.id, ADMIN_STATE_ID, RESOURCE_TYPE_APP.id):
                bag.push(PageState(resource_type_id=kind))
            return [], bag.marshal()

        if state == RESOURCE_TYPE_USER.id:
            users, next_cursor = self._fetch(
                lambda: self._client.get_role_users(role_id, pagination),
                f"users under role {role_id}",
            )
            grants = self._user_grants(resource, MEMBERSHIP, (u.id for u in users))
        elif state == ADMIN_STATE_ID:
            admins, next_cursor = self._fetch(
                lambda: self._client.get_role_admins(role_id, pagination),
                f"users under role {role_id}",
            )
            grants = self._user_grants(resource, ADMIN, (u.id for u in admins))
        elif state == RESOURCE_TYPE_APP.id:
            apps, next_cursor = self._fetch(
                lambda: self._client.get_role_apps(role_id, pagination),
                f"apps under role {role_id}",
            )
            grants = [new_grant(resource, ADMIN, app_resource(app).id) for app in apps]
        else:
            raise ConnectorError(f"unknown resource type: {state}")

        return grants, bag.next_token(next_cursor)

    @staticmethod
    def _fetch(call: Callable[[], tuple[list, str]], what: str) -> tuple[list, str]:
        try:
            return call()
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list {what}: {err}"
            ) from err

    @staticmethod
    def _user_grants(
        resource: Resource, slug: str, user_ids: Iterable[int]
    ) -> list[Grant]:
        return [
            new_grant(resource, slug, ResourceId(RESOURCE_TYPE_USER.id, str(user_id)))
            for user_id in user_ids
        ]

    def grant(self, principal: Resource, entitlement: Entitlement) -> None:
        """Give a user the member or admin entitlement of a role."""
        if principal.id.resource_type != RESOURCE_TYPE_USER.id:
            _log.warning(
                "onelogin-connector: only users can be granted role membership "
                "(principal_type=%s, principal_id=%s)",
                principal.id.resource_type,
                principal.id.resource,
            )
            raise ConnectorError(
                "onelogin-connector: only users can be granted role membership"
            )
        try:
            self._client.grant_role(
                entitlement.resource.id.resource,
                principal.id.resource,
                entitlement.slug,
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to grant {entitlement.slug} role: {err}"
            ) from err

    def revoke(self, grant: Grant) -> None:
        """Take a role entitlement away from a user."""
        entitlement = grant.entitlement
        principal = grant.principal
        if principal.id.resource_type != RESOURCE_TYPE_USER.id:
            _log.warning(
                "baton-onelogin: only users can have role membership revoked "
                "(principal_type=%s, principal_id=%s)",
                principal.id.resource_type,
                principal.id.resource,
            )
            raise ConnectorError(
                "baton-onelogin: only users can have role membership revoked"
            )
        try:
            self._client.revoke_role(
                entitlement.resource.id.resource,
                principal.id.resource,
                entitlement.slug,
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"baton-onelogin: failed to revoke {entitlement.slug} role: {err}"
            ) from err