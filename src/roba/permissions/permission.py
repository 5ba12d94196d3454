"""Permission: a grant set bound to a named resource type.

A permission serializes to exactly four scope strings, one per action in the
fixed order ``create, read, update, delete``::

    >>> Permission.protected("accounts").to_permissions_list()
    ['accounts.create.own', 'accounts.read.any', 'accounts.update.own', 'accounts.delete.own']
"""
from __future__ import annotations

import json
from dataclasses import dataclass

from roba.grants import ACTIONS, Action, GrantSet, GrantType
from roba.resources import Resource


SEPARATOR: str = "."


def create_scope_string(resource_name: str, action: Action | str, grant: GrantType | str) -> str:
    """Format a single ``<resource>.<action>.<grant>`` scope string."""
    return SEPARATOR.join((resource_name, Action(action).value, GrantType(grant).value))


def _resource_name(resource: str | Resource) -> str:
    return resource.name if isinstance(resource, Resource) else resource


@dataclass(frozen=True)
class Permission:
    """Immutable pairing of a resource name and a :class:`GrantSet`.

    Attributes
    ----------
    name:
        Name of the resource type the permission applies to. Surrounding
        whitespace is stripped on construction; the result must be non-empty
        and must not contain the scope-string separator ``"."``.
    grants:
        The grants for each action on that resource type.
    """

    name: str
    grants: GrantSet

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValueError("Permission name must not be empty.")
        if SEPARATOR in name:
            raise ValueError(
                f"Permission name {name!r} must not contain {SEPARATOR!r}."
            )
        object.__setattr__(self, "name", name)

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def all(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.all())

    @classmethod
    def none(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.none())

    @classmethod
    def private(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.private())

    @classmethod
    def protected(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.protected())

    @classmethod
    def public(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.public())

    @classmethod
    def read_only(cls, resource: str | Resource) -> Permission:
        return cls(_resource_name(resource), GrantSet.read_only())

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_permissions_list(self) -> list[str]:
        """Return the four scope strings encoding this permission."""
        return [
            create_scope_string(self.name, action, self.grants.grant_for(action))
            for action in ACTIONS
        ]

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "grants": self.grants.to_dict()}

    def serialize(self) -> str:
        """Return the JSON encoding of :meth:`to_dict`."""
        return json.dumps(self.to_dict())

    def __str__(self) -> str:
        return " ".join(self.to_permissions_list())
