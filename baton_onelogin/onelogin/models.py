"""Records returned by the OneLogin API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _value(data: Mapping[str, Any], key: str, default: Any) -> Any:
    """Return ``data[key]``, falling back to ``default`` when absent or null."""
    value = data.get(key)
    return default if value is None else value


@dataclass
class User:
    """A OneLogin user."""

    id: int = 0
    username: str = ""
    email: str = ""
    firstname: str = ""
    lastname: str = ""
    status: int = 0
    manager_id: int | None = None
    manager_email: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(
            id=_value(data, "id", 0),
            username=_value(data, "username", ""),
            email=_value(data, "email", ""),
            firstname=_value(data, "firstname", ""),
            lastname=_value(data, "lastname", ""),
            status=_value(data, "status", 0),
            manager_id=data.get("manager_user_id"),
        )


@dataclass
class Role:
    """A OneLogin role with the ids of its admins, users and apps."""

    id: int = 0
    name: str = ""
    admins: list[int] = field(default_factory=list)
    users: list[int] = field(default_factory=list)
    apps: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Role:
        return cls(
            id=_value(data, "id", 0),
            name=_value(data, "name", ""),
            admins=list(_value(data, "admins", [])),
            users=list(_value(data, "users", [])),
            apps=list(_value(data, "apps", [])),
        )


@dataclass
class UserUnderRole:
    """A user as listed among the members or admins of a role."""

    id: int = 0
    username: str = ""
    email: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserUnderRole:
        return cls(
            id=_value(data, "id", 0),
            username=_value(data, "username", ""),
            email=_value(data, "email", ""),
            name=_value(data, "name", ""),
        )


@dataclass
class App:
    """A OneLogin application."""

    id: int = 0
    name: str = ""
    role_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> App:
        return cls(
            id=_value(data, "id", 0),
            name=_value(data, "name", ""),
            role_ids=list(_value(data, "role_ids", [])),
        )


@dataclass
class Group:
    """A OneLogin group."""

    id: int = 0
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Group:
        return cls(id=_value(data, "id", 0), name=_value(data, "name", ""))


@dataclass
class Credentials:
    """The answer to a token request."""

    access_token: str = field(default_factory=str)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Credentials:
        credentials = cls()
        value = data.get("access_token")
        if value is not None:
            credentials.access_token = value
        return credentials