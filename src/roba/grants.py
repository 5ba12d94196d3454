"""Grant vocabulary: grant types, actions, and grant sets.

A :class:`GrantSet` holds one :class:`GrantType` per :class:`Action`. The
presets below are the only named combinations the package ships; anything
else is built by passing four explicit grant types.

Example
-------
::

    from roba.grants import Action, GrantSet, GrantType

    grants = GrantSet.protected()
    assert grants.grant_for(Action.READ) is GrantType.ANY
    assert grants.grant_for(Action.DELETE) is GrantType.OWN
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


class GrantType(str, Enum):
    """Privilege level assigned to one action on one resource type."""

    NONE = "none"
    OWN = "own"
    ANY = "any"


class Action(str, Enum):
    """The four actions an entity may perform on a resource."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# Canonical order used for construction, serialization and parsing.
ACTIONS: tuple[Action, ...] = (
    Action.CREATE,
    Action.READ,
    Action.UPDATE,
    Action.DELETE,
)


@dataclass(frozen=True)
class GrantSet:
    """Immutable set of grants, one per action.

    Attributes
    ----------
    create:
        Grant for the ``create`` action.
    read:
        Grant for the ``read`` action.
    update:
        Grant for the ``update`` action.
    delete:
        Grant for the ``delete`` action.
    """

    create: GrantType = GrantType.NONE
    read: GrantType = GrantType.NONE
    update: GrantType = GrantType.NONE
    delete: GrantType = GrantType.NONE

    def __post_init__(self) -> None:
        # Accept plain strings ("any") as well as enum members.
        for action in ACTIONS:
            object.__setattr__(self, action.value, GrantType(getattr(self, action.value)))

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def all(cls) -> GrantSet:
        """Grant every action on any instance."""
        return cls(GrantType.ANY, GrantType.ANY, GrantType.ANY, GrantType.ANY)

    @classmethod
    def none(cls) -> GrantSet:
        """Grant nothing."""
        return cls(GrantType.NONE, GrantType.NONE, GrantType.NONE, GrantType.NONE)

    @classmethod
    def private(cls) -> GrantSet:
        """Only the owner may create, read, update or delete."""
        return cls(GrantType.OWN, GrantType.OWN, GrantType.OWN, GrantType.OWN)

    @classmethod
    def protected(cls) -> GrantSet:
        """Anyone may read; only the owner may create, update or delete."""
        return cls(GrantType.OWN, GrantType.ANY, GrantType.OWN, GrantType.OWN)

    @classmethod
    def public(cls) -> GrantSet:
        """Every action except delete."""
        return cls(GrantType.ANY, GrantType.ANY, GrantType.ANY, GrantType.NONE)

    @classmethod
    def read_only(cls) -> GrantSet:
        """Read is the only permitted action."""
        return cls(GrantType.NONE, GrantType.ANY, GrantType.NONE, GrantType.NONE)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def grant_for(self, action: Action | str) -> GrantType:
        """Return the grant type for *action*.

        Raises
        ------
        ValueError
            If *action* is not one of the four recognised actions.
        """
        return getattr(self, Action(action).value)

    def to_dict(self) -> dict[str, str]:
        """Return the grants as a plain ``{action: grant}`` dict in action order."""
        return {action.value: self.grant_for(action).value for action in ACTIONS}

    def serialize(self) -> str:
        """Return the JSON encoding of :meth:`to_dict`."""
        return json.dumps(self.to_dict())
