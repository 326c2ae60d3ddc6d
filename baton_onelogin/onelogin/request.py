"""Query parameters and request bodies for the OneLogin API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Protocol

USER_FIELDS: tuple[str, ...] = (
    "id",
    "email",
    "username",
    "firstname",
    "lastname",
    "status",
    "group_id",
)


class QueryParam(Protocol):
    """Something that contributes query parameters to a request."""

    def apply(self, params: MutableMapping[str, str]) -> None: ...


@dataclass
class PaginationVars:
    """Paging options; ``v1_cursor`` is the cursor name used by the v1 API."""

    limit: int = 0
    cursor: str = ""
    v1_cursor: str = ""

    def apply(self, params: MutableMapping[str, str]) -> None:
        # The limit is only sent with the first page.
        if self.limit and not self.cursor:
            params["limit"] = str(self.limit)
        if self.cursor:
            params["cursor"] = self.cursor
        if self.v1_cursor:
            params["after_cursor"] = self.v1_cursor


@dataclass
class Pagination:
    """Paging information carried in a v1 response body."""

    before_cursor: str = ""
    after_cursor: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Pagination:
        return cls(
            before_cursor=data.get("before_cursor") or "",
            after_cursor=data.get("after_cursor") or "",
        )


@dataclass
class FilterVars:
    """Field selection and group filtering."""

    fields: list[str] = field(default_factory=list)
    group_id: str = ""

    def apply(self, params: MutableMapping[str, str]) -> None:
        if self.fields:
            params["fields"] = ",".join(self.fields)
        if self.group_id:
            params["group_id"] = self.group_id


def prepare_user_filters() -> FilterVars:
    """Filters selecting the user fields the connector needs."""
    return FilterVars(fields=list(USER_FIELDS))


def prepare_group_users_filters(group_id: str) -> FilterVars:
    """Filters restricting users to one group; empty ``group_id`` means all."""
    return FilterVars(group_id=group_id)


def new_credentials_grant() -> dict[str, str]:
    """Body of a client-credentials token request."""
    return {"grant_type": "client_credentials"}