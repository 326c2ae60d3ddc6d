"""Page tokens that keep a stack of paging states between sync calls."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .resources import ResourceId

RESOURCES_PAGE_SIZE = 50


@dataclass
class PageState:
    """Where a listing has got to: the resource being paged and its cursor."""

    token: str = ""
    resource_type_id: str = ""
    resource_id: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "token": self.token,
            "resource_type_id": self.resource_type_id,
            "resource_id": self.resource_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PageState:
        return cls(
            token=data.get("token") or "",
            resource_type_id=data.get("resource_type_id") or "",
            resource_id=data.get("resource_id") or "",
        )


@dataclass
class Bag:
    """A stack of page states; the top one is the current state."""

    states: list[PageState] = field(default_factory=list)
    current_state: PageState | None = None

    @classmethod
    def from_token(cls, token: str) -> Bag:
        """Decode a token made by :meth:`marshal`; an empty token is an empty bag."""
        if not token:
            return cls()
        try:
            data = json.loads(token)
        except json.JSONDecodeError as err:
            raise ValueError(f"invalid page token: {err}") from err
        if not isinstance(data, dict):
            raise ValueError("invalid page token: not an object")
        states = [PageState.from_dict(item) for item in data.get("states") or []]
        current = data.get("current_state")
        return cls(
            states=states,
            current_state=None if current is None else PageState.from_dict(current),
        )

    def push(self, state: PageState) -> None:
        if self.current_state is not None:
            self.states.append(self.current_state)
        self.current_state = state

    def pop(self) -> PageState | None:
        popped = self.current_state
        self.current_state = self.states.pop() if self.states else None
        return popped

    def current(self) -> PageState | None:
        return self.current_state

    def page_token(self) -> str:
        return self.current_state.token if self.current_state else ""

    def resource_type_id(self) -> str:
        return self.current_state.resource_type_id if self.current_state else ""

    def next_token(self, cursor: str) -> str:
        """Record the next cursor, or finish the current state if there is none."""
        if self.current_state is None:
            raise ValueError("no active page state")
        if cursor:
            self.current_state.token = cursor
        else:
            self.pop()
        return self.marshal()

    def marshal(self) -> str:
        if self.current_state is None:
            return ""
        return json.dumps(
            {
                "states": [state.to_dict() for state in self.states],
                "current_state": self.current_state.to_dict(),
            },
            separators=(",", ":"),
        )


def parse_page_token(token: str, resource_id: ResourceId) -> tuple[Bag, str]:
    """Decode ``token``, starting at ``resource_id`` if it holds no state."""
    bag = Bag.from_token(token)
    if bag.current() is None:
        bag.push(
            PageState(
                resource_type_id=resource_id.resource_type,
                resource_id=resource_id.resource,
            )
        )
    return bag, bag.page_token()