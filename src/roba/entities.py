"""Permissible entities: collectives (groups) and actors (individuals).

Both kinds build a read-only lookup from resource name to grant set once, at
construction, and expose it through two views:

- ``entity.can``: :class:`~roba.permissions.PermissionsWhitelist`
- ``entity.cannot``: :class:`~roba.permissions.PermissionsBlacklist`

If the same resource name appears more than once in the permission list, the
later permission wins.

Example
-------
::

    users = Collective("users", [Permission.protected("accounts")])
    admins = Collective.inherit_from(users, "admins", [Permission.all("accounts")])
    bob = Actor.derived_from(users, "bob")

    accounts = Resource.collection("accounts")
    bob_account = Resource.instance_of(accounts, "abcde", bob)

    assert admins.can.create(accounts)
    assert bob.can.update(bob_account)
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from roba.evaluation import EntityKind
from roba.grants import GrantSet
from roba.permissions.lists import PermissionsBlacklist, PermissionsWhitelist
from roba.permissions.permission import Permission
from roba.scope import Scope

logger = logging.getLogger(__name__)


class PermissibleEntity(ABC):
    """Abstract base holding the common state and views of collectives and actors.

    Only :class:`Collective` and :class:`Actor` are instantiable. Subclasses
    define :attr:`kind`; evaluation differences between the kinds live in
    :mod:`roba.evaluation`, not in overrides here.
    """

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """The entity kind used to select ownership rules."""

    def __init__(
        self,
        name: str,
        permissions: Iterable[Permission],
        scope: str = Scope.GLOBAL,
        identifier: str = "",
    ) -> None:
        self._name = name
        self._scope = scope
        self._identifier = identifier

        by_name: dict[str, Permission] = {}
        for permission in permissions:
            by_name[permission.name] = permission
        self._permissions: tuple[Permission, ...] = tuple(by_name.values())
        self._lookup: Mapping[str, GrantSet] = MappingProxyType(
            {p.name: p.grants for p in self._permissions}
        )

        self._whitelist = PermissionsWhitelist(
            name, self._lookup, scope, identifier, self.kind
        )
        self._blacklist = PermissionsBlacklist(
            name, self._lookup, scope, identifier, self.kind
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def permissions(self) -> list[Permission]:
        """The effective permissions, one per resource name."""
        return list(self._permissions)

    @property
    def permissions_list(self) -> list[str]:
        """All effective permissions flattened into scope strings."""
        return [s for p in self._permissions for s in p.to_permissions_list()]

    @property
    def grants(self) -> Mapping[str, GrantSet]:
        """Read-only mapping from resource name to grant set."""
        return self._lookup

    @property
    def can(self) -> PermissionsWhitelist:
        return self._whitelist

    @property
    def cannot(self) -> PermissionsBlacklist:
        return self._blacklist

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def _key(self) -> tuple[object, ...]:
        return (self.kind, self._name, self._scope, self._identifier, self._permissions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissibleEntity):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self._name,
            "scope": self._scope,
            "permissions": self.permissions_list,
        }

    def serialize(self) -> str:
        """Return the JSON encoding of :meth:`to_dict`."""
        return json.dumps(self.to_dict())


class Collective(PermissibleEntity):
    """A named group sharing one permission set. Never owns a resource.

    Parameters
    ----------
    name:
        Name of the group (e.g. ``"users"``).
    permissions:
        Permissions granted to every member.
    scope:
        Scope of the group. Defaults to the global scope.
    """

    kind = EntityKind.COLLECTIVE

    def __init__(
        self,
        name: str,
        permissions: Iterable[Permission],
        scope: str = Scope.GLOBAL,
    ) -> None:
        super().__init__(name, permissions, scope)

    @classmethod
    def inherit_from(
        cls,
        collective: Collective,
        name: str,
        permissions: Iterable[Permission] = (),
        scope: str | None = None,
    ) -> Collective:
        """Derive a new collective from *collective*.

        Parameters
        ----------
        collective:
            The collective to inherit from.
        name:
            Name of the derived collective.
        permissions:
            Overrides applied after the inherited permissions.
        scope:
            The new scope. ``None`` keeps the base collective's scope.
        """
        merged = [*collective.permissions, *permissions]
        new_scope = scope if scope is not None else collective.scope
        logger.debug(
            "Collective %s inherits from %s with %d permissions",
            name,
            collective.name,
            len(merged),
        )
        return cls(name, merged, new_scope)

    def __repr__(self) -> str:
        return (
            f"Collective(name={self._name!r}, scope={self._scope!r}, "
            f"permissions={len(self._permissions)})"
        )


class Actor(PermissibleEntity):
    """An individually identified entity; its ``id`` is the ownership key.

    Parameters
    ----------
    name:
        Name shared with the actor's collective (e.g. ``"users"``).
    id:
        Identifier unique to this actor.
    permissions:
        Permissions granted to the actor.
    scope:
        Scope of the actor. Defaults to the global scope.
    """

    kind = EntityKind.ACTOR

    def __init__(
        self,
        name: str,
        id: str,
        permissions: Iterable[Permission],
        scope: str = Scope.GLOBAL,
    ) -> None:
        super().__init__(name, permissions, scope, identifier=id)

    @property
    def id(self) -> str:
        return self._identifier

    @classmethod
    def derived_from(cls, collective: Collective, id: str) -> Actor:
        """Create an actor carrying *collective*'s name, scope and permissions."""
        return cls(collective.name, id, collective.permissions, collective.scope)

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["id"] = self._identifier
        return data

    def __repr__(self) -> str:
        return (
            f"Actor(name={self._name!r}, id={self._identifier!r}, "
            f"scope={self._scope!r}, permissions={len(self._permissions)})"
        )
