"""Sync of OneLogin users."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests

from ..onelogin.client import Client, RequestError
from ..onelogin.models import User
from ..onelogin.request import PaginationVars
from .pagination import RESOURCES_PAGE_SIZE, parse_page_token
from .resources import (
    RESOURCE_TYPE_USER,
    ConnectorError,
    Entitlement,
    Grant,
    Resource,
    ResourceId,
    Trait,
    UserStatus,
)

_log = logging.getLogger(__name__)

_API_ERRORS = (RequestError, requests.RequestException)

USERS_CACHE_TTL = 5 * 60.0

_STATUSES = {
    0: UserStatus.DISABLED,
    1: UserStatus.ENABLED,
    2: UserStatus.DELETED,
}


def build_user_profile(
    display_name: str,
    email: str,
    first_name: str,
    last_name: str,
    manager_id: int | None,
    manager_email: str,
    user_id: int,
) -> dict[str, Any]:
    """The profile recorded for a user; ``email`` is carried on the resource itself."""
    profile: dict[str, Any] = {
        "login": display_name,
        "user_id": str(user_id),
        "first_name": first_name,
        "last_name": last_name,
    }
    if manager_id is not None:
        profile["manager_user_id"] = str(manager_id)
    if manager_email:
        profile["manager_email"] = manager_email
    return profile


def resolve_display_name(user: User) -> str:
    """Username, else full name, else e-mail address."""
    if user.username:
        return user.username
    name = f"{user.firstname} {user.lastname}"
    return name if name.strip() else user.email


def user_resource(user: User) -> Resource:
    """The connector resource for a complete OneLogin user."""
    display_name = resolve_display_name(user)
    profile = build_user_profile(
        display_name,
        user.email,
        user.firstname,
        user.lastname,
        user.manager_id,
        user.manager_email,
        user.id,
    )
    return Resource(
        id=ResourceId(RESOURCE_TYPE_USER.id, str(user.id)),
        display_name=display_name,
        trait=Trait.USER,
        profile=profile,
        email=user.email,
        status=_STATUSES.get(user.status, UserStatus.UNSPECIFIED),
    )


class UserSyncer:
    """Lists users, filling in manager e-mail addresses from a cached directory."""

    resource_type = RESOURCE_TYPE_USER

    def __init__(self, client: Client) -> None:
        self._client = client
        self._users: dict[int, str] | None = None
        self._users_timestamp = 0.0
        self._lock = threading.Lock()

    def refresh_user_cache(self) -> None:
        """Reload the id-to-e-mail map of all users once it is older than the TTL."""
        with self._lock:
            if (
                self._users is not None
                and time.monotonic() - self._users_timestamp < USERS_CACHE_TTL
            ):
                return
            users: dict[int, str] = {}
            self._users = users
            cursor = ""
            while True:
                try:
                    page, next_cursor = self._client.get_users(
                        PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor), ""
                    )
                except _API_ERRORS as err:
                    self._users_timestamp = 0.0
                    self._users = None
                    raise ConnectorError(
                        f"onelogin-connector: failed to load users for cache: {err}"
                    ) from err
                users.update((user.id, user.email) for user in page)
                if not next_cursor:
                    break
                cursor = next_cursor
            self._users_timestamp = time.monotonic()

    def list(
        self, parent_id: ResourceId | None = None, token: str = ""
    ) -> tuple[list[Resource], str]:
        try:
            self.refresh_user_cache()
        except ConnectorError as err:
            raise ConnectorError(
                f"onelogin-connector: failed to load user cache: {err}"
            ) from err

        bag, cursor = parse_page_token(token, ResourceId(RESOURCE_TYPE_USER.id))
        try:
            users, next_cursor = self._client.get_users(
                PaginationVars(limit=RESOURCES_PAGE_SIZE, cursor=cursor), ""
            )
        except _API_ERRORS as err:
            raise ConnectorError(
                f"onelogin-connector: failed to list users: {err}"
            ) from err

        directory = self._users or {}
        resources = []
        for summary in users:
            try:
                user = self._client.get_user_by_id(summary.id)
            except _API_ERRORS as err:
                _log.error("Error obtaining user %d: %s", summary.id, err)
                continue
            if user is None:
                _log.error("Error obtaining user %d: empty response", summary.id)
                continue
            if user.manager_id is not None and user.manager_id in directory:
                user.manager_email = directory[user.manager_id]
            resources.append(user_resource(user))

        return resources, bag.next_token(next_cursor)

    def entitlements(
        self, resource: Resource, token: str = ""
    ) -> tuple[list[Entitlement], str]:
        """Users carry no entitlements; the page is finished at once."""
        bag, _ = parse_page_token(token, resource.id)
        return [], bag.next_token("")

    def grants(self, resource: Resource, token: str = "") -> tuple[list[Grant], str]:
        """Users carry no grants; the page is finished at once."""
        bag, _ = parse_page_token(token, resource.id)
        return [], bag.next_token("")