"""Resource types, resources, entitlements and grants produced by the connector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

MEMBERSHIP = "member"
ADMIN = "admin"


class ConnectorError(Exception):
    """A sync or provisioning step failed."""


class Trait(Enum):
    USER = "user"
    ROLE = "role"
    APP = "app"
    GROUP = "group"


class UserStatus(Enum):
    UNSPECIFIED = "unspecified"
    ENABLED = "enabled"
    DISABLED = "disabled"
    DELETED = "deleted"


@dataclass(frozen=True)
class ResourceType:
    id: str
    display_name: str
    traits: tuple[Trait, ...] = ()
    skip_entitlements_and_grants: bool = False


@dataclass(frozen=True)
class ResourceId:
    resource_type: str
    resource: str = ""


@dataclass
class Resource:
    id: ResourceId
    display_name: str = ""
    trait: Trait | None = None
    profile: dict[str, Any] = field(default_factory=dict)
    email: str = ""
    status: UserStatus | None = None


@dataclass
class Entitlement:
    resource: Resource
    slug: str
    display_name: str = ""
    description: str = ""
    grantable_to: tuple[ResourceType, ...] = ()

    @property
    def id(self) -> str:
        rid = self.resource.id
        return f"{rid.resource_type}:{rid.resource}:{self.slug}"


@dataclass
class Grant:
    entitlement: Entitlement
    principal: Resource

    @property
    def id(self) -> str:
        pid = self.principal.id
        return f"{self.entitlement.id}:{pid.resource_type}:{pid.resource}"


RESOURCE_TYPE_USER = ResourceType(
    id="user",
    display_name="User",
    traits=(Trait.USER,),
    skip_entitlements_and_grants=True,
)
RESOURCE_TYPE_ROLE = ResourceType(id="role", display_name="Role", traits=(Trait.ROLE,))
RESOURCE_TYPE_APP = ResourceType(id="app", display_name="App", traits=(Trait.APP,))
RESOURCE_TYPE_GROUP = ResourceType(
    id="group", display_name="Group", traits=(Trait.GROUP,)
)


def new_assignment_entitlement(
    resource: Resource,
    slug: str,
    display_name: str,
    description: str,
    grantable_to: Iterable[ResourceType],
) -> Entitlement:
    """An entitlement granting assignment to ``resource``."""
    return Entitlement(
        resource=resource,
        slug=slug,
        display_name=display_name,
        description=description,
        grantable_to=tuple(grantable_to),
    )


def new_grant(resource: Resource, slug: str, principal_id: ResourceId) -> Grant:
    """A grant of ``resource``'s ``slug`` entitlement to ``principal_id``."""
    return Grant(
        entitlement=Entitlement(resource=resource, slug=slug),
        principal=Resource(id=principal_id),
    )