"""The OneLogin connector: its resource syncers, metadata, validation and full sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, TypeVar

import requests

from ..onelogin.client import Client, RequestError
from ..onelogin.request import PaginationVars
from .apps import AppSyncer
from .groups import GroupSyncer
from .resources import ConnectorError, Entitlement, Grant, Resource
from .roles import RoleSyncer
from .users import UserSyncer

_T = TypeVar("_T")

_API_ERRORS = (RequestError, requests.RequestException)


@dataclass(frozen=True)
class ConnectorMetadata:
    """How the connector describes itself."""

    display_name: str
    description: str


def _resource_to_dict(resource: Resource) -> dict[str, Any]:
    return {
        "resource_type": resource.id.resource_type,
        "resource": resource.id.resource,
        "display_name": resource.display_name,
        "trait": resource.trait.value if resource.trait else None,
        "profile": dict(resource.profile),
        "email": resource.email,
        "status": resource.status.value if resource.status else None,
    }


def _entitlement_to_dict(entitlement: Entitlement) -> dict[str, Any]:
    rid = entitlement.resource.id
    return {
        "id": entitlement.id,
        "resource_type": rid.resource_type,
        "resource": rid.resource,
        "slug": entitlement.slug,
        "display_name": entitlement.display_name,
        "description": entitlement.description,
        "grantable_to": [rtype.id for rtype in entitlement.grantable_to],
    }


def _grant_to_dict(grant: Grant) -> dict[str, Any]:
    pid = grant.principal.id
    return {
        "id": grant.id,
        "entitlement": grant.entitlement.id,
        "principal_type": pid.resource_type,
        "principal": pid.resource,
    }


@dataclass
class SyncResult:
    """Everything gathered by one full sync."""

    resources: list[Resource] = field(default_factory=list)
    entitlements: list[Entitlement] = field(default_factory=list)
    grants: list[Grant] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "resources": [_resource_to_dict(r) for r in self.resources],
            "entitlements": [_entitlement_to_dict(e) for e in self.entitlements],
            "grants": [_grant_to_dict(g) for g in self.grants],
        }


def _paged(fetch: Callable[[str], tuple[list[_T], str]]) -> Iterator[_T]:
    """Yield the items of every page, following tokens until none is returned."""
    token = ""
    while True:
        items, token = fetch(token)
        yield from items
        if not token:
            return


class OneLogin:
    """Connector syncing OneLogin users, roles, groups and applications."""

    def __init__(self, client: Client) -> None:
        self._client = client

    @classmethod
    def create(cls, client_id: str, client_secret: str, subdomain: str) -> OneLogin:
        """Authenticate against ``subdomain`` and return a ready connector."""
        session = requests.Session()
        client = Client.create(session, client_id, client_secret, subdomain)
        return cls(client)

    def resource_syncers(self) -> list[UserSyncer | RoleSyncer | AppSyncer | GroupSyncer]:
        return [
            UserSyncer(self._client),
            RoleSyncer(self._client),
            AppSyncer(self._client),
            GroupSyncer(self._client),
        ]

    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            display_name="OneLogin",
            description=(
                "Connector syncing OneLogin users, roles, groups and "
                "applications to Baton."
            ),
        )

    def validate(self) -> None:
        """Check that the credentials have the scope the connector needs."""
        try:
            self._client.validate_scope(PaginationVars(limit=1))
        except _API_ERRORS as err:
            raise ConnectorError(f"onelogin-connector: unauthorized: {err}") from err

    def sync(self) -> SyncResult:
        """List every resource, then the entitlements and grants of each."""
        result = SyncResult()
        for syncer in self.resource_syncers():
            resources = list(_paged(lambda token, s=syncer: s.list(None, token)))
            result.resources.extend(resources)
            if syncer.resource_type.skip_entitlements_and_grants:
                continue
            for resource in resources:
                result.entitlements.extend(
                    _paged(lambda token, s=syncer, r=resource: s.entitlements(r, token))
                )
                result.grants.extend(
                    _paged(lambda token, s=syncer, r=resource: s.grants(r, token))
                )
        return result