"""HTTP client for the OneLogin API."""

from __future__ import annotations

import json
from typing import Any, Iterable

import requests

from .models import App, Credentials, Group, Role, User, UserUnderRole
from .request import (
    Pagination,
    PaginationVars,
    QueryParam,
    new_credentials_grant,
    prepare_group_users_filters,
    prepare_user_filters,
)

BASE_URL = "https://{subdomain}.onelogin.com/"

AUTH_BASE_URL = BASE_URL + "auth/"
GENERATE_TOKEN_URL = AUTH_BASE_URL + "oauth2/v2/token"

API_BASE_V1_URL = BASE_URL + "api/1/"
API_BASE_URL = BASE_URL + "api/2/"
USERS_URL = API_BASE_URL + "users"
USER_URL = USERS_URL + "/{id}"
ROLES_URL = API_BASE_URL + "roles"
ROLE_USERS_URL = API_BASE_URL + "roles/{id}/users"
ROLE_ADMINS_URL = API_BASE_URL + "roles/{id}/admins"
ROLE_APPS_URL = API_BASE_URL + "roles/{id}/apps"
APPS_URL = API_BASE_URL + "apps"
APP_USERS_URL = API_BASE_URL + "apps/{id}/users"
GROUPS_URL = API_BASE_V1_URL + "groups"
CONNECTORS_URL = API_BASE_URL + "connectors"

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class RequestError(Exception):
    """The API answered with a status of 300 or above."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Request failed with status {status_code}")
        self.status_code = status_code


def _check(response: requests.Response) -> None:
    if response.status_code >= 300:
        raise RequestError(response.status_code)


def generate_token(
    session: requests.Session, client_id: str, client_secret: str, subdomain: str
) -> str:
    """Exchange client credentials for an access token."""
    headers = {
        "Authorization": f"client_id:{client_id},client_secret:{client_secret}",
        **_JSON_HEADERS,
    }
    with session.post(
        GENERATE_TOKEN_URL.format(subdomain=subdomain),
        data=json.dumps(new_credentials_grant()).encode(),
        headers=headers,
    ) as response:
        _check(response)
        return Credentials.from_dict(response.json()).access_token


class Client:
    """Authenticated access to one OneLogin subdomain."""

    def __init__(self, session: requests.Session, token: str, subdomain: str) -> None:
        self._session = session
        self._token = token
        self._subdomain = subdomain

    @classmethod
    def create(
        cls,
        session: requests.Session,
        client_id: str,
        client_secret: str,
        subdomain: str,
    ) -> Client:
        """Obtain a token and return a client that uses it."""
        token = generate_token(session, client_id, client_secret, subdomain)
        return cls(session, token, subdomain)

    def _url(self, template: str, resource_id: str | int = "") -> str:
        return template.format(subdomain=self._subdomain, id=resource_id)

    def _request(
        self,
        url: str,
        method: str = "GET",
        params: Iterable[QueryParam] = (),
        payload: bytes | None = None,
    ) -> tuple[Any, str]:
        """Send a request; return the decoded body and the next-page cursor."""
        query: dict[str, str] = {}
        for param in params:
            param.apply(query)
        headers = {"Authorization": f"Bearer {self._token}", **_JSON_HEADERS}
        with self._session.request(
            method,
            url,
            params=sorted(query.items()),
            data=payload,
            headers=headers,
        ) as response:
            _check(response)
            body = None if method == "DELETE" else response.json()
            return body, response.headers.get("after-cursor", "")

    def get_users(
        self, pagination: PaginationVars, group_id: str = ""
    ) -> tuple[list[User], str]:
        body, cursor = self._request(
            self._url(USERS_URL),
            params=(
                pagination,
                prepare_user_filters(),
                prepare_group_users_filters(group_id),
            ),
        )
        return [User.from_dict(item) for item in body or []], cursor

    def get_user_by_id(self, user_id: int) -> User | None:
        body, _ = self._request(self._url(USER_URL, user_id))
        return None if body is None else User.from_dict(body)

    def get_apps(self, pagination: PaginationVars) -> tuple[list[App], str]:
        body, cursor = self._request(self._url(APPS_URL), params=(pagination,))
        return [App.from_dict(item) for item in body or []], cursor

    def get_app_users(
        self, app_id: str, pagination: PaginationVars
    ) -> tuple[list[User], str]:
        body, cursor = self._request(
            self._url(APP_USERS_URL, app_id), params=(pagination,)
        )
        return [User.from_dict(item) for item in body or []], cursor

    def get_groups(self, pagination: PaginationVars) -> tuple[list[Group], str]:
        body, _ = self._request(self._url(GROUPS_URL), params=(pagination,))
        body = body or {}
        # The v1 groups endpoint carries its cursor in the body, not a header.
        page = Pagination.from_dict(body.get("pagination") or {})
        groups = [Group.from_dict(item) for item in body.get("data") or []]
        return groups, page.after_cursor

    def get_roles(self, pagination: PaginationVars) -> tuple[list[Role], str]:
        body, cursor = self._request(self._url(ROLES_URL), params=(pagination,))
        return [Role.from_dict(item) for item in body or []], cursor

    def get_role_users(
        self, role_id: str, pagination: PaginationVars
    ) -> tuple[list[UserUnderRole], str]:
        body, cursor = self._request(
            self._url(ROLE_USERS_URL, role_id), params=(pagination,)
        )
        return [UserUnderRole.from_dict(item) for item in body or []], cursor

    def get_role_admins(
        self, role_id: str, pagination: PaginationVars
    ) -> tuple[list[UserUnderRole], str]:
        body, cursor = self._request(
            self._url(ROLE_ADMINS_URL, role_id), params=(pagination,)
        )
        return [UserUnderRole.from_dict(item) for item in body or []], cursor

    def get_role_apps(
        self, role_id: str, pagination: PaginationVars
    ) -> tuple[list[App], str]:
        body, cursor = self._request(
            self._url(ROLE_APPS_URL, role_id), params=(pagination,)
        )
        return [App.from_dict(item) for item in body or []], cursor

    def _role_url(self, role_id: str, entitlement: str) -> str:
        template = ROLE_ADMINS_URL if entitlement == "admin" else ROLE_USERS_URL
        return self._url(template, role_id)

    def grant_role(self, role_id: str, user_id: str, entitlement: str) -> None:
        """Add a user to a role as admin or, for any other entitlement, member."""
        self._request(
            self._role_url(role_id, entitlement),
            method="POST",
            payload=json.dumps([user_id]).encode(),
        )

    def revoke_role(self, role_id: str, user_id: str, entitlement: str) -> None:
        """Remove a user from a role's admins or members."""
        self._request(
            self._role_url(role_id, entitlement),
            method="DELETE",
            payload=json.dumps([user_id]).encode(),
        )

    def validate_scope(self, pagination: PaginationVars) -> str:
        """Check that the credentials may read all resources."""
        _, cursor = self._request(self._url(CONNECTORS_URL), params=(pagination,))
        return cursor