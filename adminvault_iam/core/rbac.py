"""
RBAC helpers and canonical action definitions for the AdminVault catalog.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class PermissionAction(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    EXECUTE = "EXECUTE"


ALL_ACTIONS: tuple[str, ...] = tuple(action.value for action in PermissionAction)


def action_value(action: Union[str, PermissionAction]) -> str:
    """Wire form of an action, passed through verbatim when not an enum member."""
    if isinstance(action, PermissionAction):
        return action.value
    return str(action)


def _normalize_action(action: Union[str, PermissionAction]) -> str:
    return action_value(action).strip().upper()


@dataclass(frozen=True)
class PermissionPair:
    """A (resource, action) unit used by the composite checks."""

    resource: str
    action: str

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"

    @classmethod
    def of(cls, resource: str, action: Union[str, PermissionAction]) -> PermissionPair:
        resource = (resource or "").strip()
        if not resource:
            raise ValueError("Permission resource must not be empty")
        normalized = _normalize_action(action)
        if normalized not in ALL_ACTIONS:
            raise ValueError(f"Invalid permission action {action!r}; expected one of {list(ALL_ACTIONS)}")
        return cls(resource=resource, action=normalized)

    @classmethod
    def parse(cls, value: str) -> PermissionPair:
        """Parse ``"Resource:ACTION"``."""
        if ":" not in value:
            raise ValueError(f"Invalid permission {value!r}; expected 'Resource:ACTION'")
        resource, action = value.rsplit(":", 1)
        return cls.of(resource, action)


PairLike = Union[PermissionPair, tuple, Mapping[str, Any], str]


def split_pair(value: PairLike) -> tuple[Any, Any]:
    """
    Unpack a (resource, action) pair exactly as given

    Actions are neither normalized nor validated; the administration
    service decides. Raises ``ValueError``/``TypeError`` for values that
    do not carry a pair at all.
    """
    if isinstance(value, PermissionPair):
        return value.resource, value.action
    if isinstance(value, str):
        resource, sep, action = value.rpartition(":")
        if not sep:
            raise ValueError(f"Invalid permission {value!r}; expected 'Resource:ACTION'")
        return resource, action
    if isinstance(value, Mapping):
        if "resource" not in value or "action" not in value:
            raise ValueError(f"Permission mapping {dict(value)!r} needs 'resource' and 'action'")
        return value["resource"], value["action"]
    if isinstance(value, tuple) and len(value) == 2:
        return value[0], value[1]
    raise TypeError(f"Cannot interpret {value!r} as a permission pair")


def coerce_pair(value: PairLike) -> PermissionPair:
    """Build a validated ``PermissionPair`` from any accepted pair shape."""
    if isinstance(value, PermissionPair):
        return value
    resource, action = split_pair(value)
    return PermissionPair.of(resource, action)
