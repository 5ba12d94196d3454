"""Whitelist and blacklist views over an entity's grants.

``entity.can`` is a :class:`PermissionsWhitelist` and answers "is this
permitted?"; ``entity.cannot`` is a :class:`PermissionsBlacklist` and answers
"is this denied?". Both read the same grant lookup.

With the default predicates the two are exact complements. A ``when``
predicate breaks that: on the whitelist a falsy result turns a permit into a
denial, and on the blacklist a truthy result reports a denial the grants
alone would not. Neither can upgrade a base denial into a permit.

The predicate is called synchronously, exactly once per check, after the base
rule has been computed. It must not block.

Example
-------
::

    bob.can.update(bob_account)                      # True
    bob.cannot.read(posts, lambda e, a, r: True)     # True, forced denial
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from roba.evaluation import (
    ALWAYS,
    NEVER,
    EntityKind,
    EntitySnapshot,
    WhenFn,
    permits,
    restricts,
)
from roba.grants import Action, GrantSet
from roba.resources import Resource
from roba.scope import scope_mismatch

logger = logging.getLogger(__name__)


class PermissionsList(ABC):
    """Per-action checks for one entity.

    Parameters
    ----------
    subject:
        Name of the entity.
    lookup:
        Read-only mapping from resource name to :class:`GrantSet`.
    scope:
        Scope of the entity.
    identifier:
        The actor id, or ``""`` for a collective.
    kind:
        Whether the entity is a collective or an actor.
    """

    def __init__(
        self,
        subject: str,
        lookup: Mapping[str, GrantSet],
        scope: str,
        identifier: str,
        kind: EntityKind,
    ) -> None:
        self._lookup = lookup
        self._kind = kind
        self._entity = EntitySnapshot(name=subject, scope=scope, identifier=identifier)

    @property
    def entity(self) -> EntitySnapshot:
        return self._entity

    @abstractmethod
    def check(self, action: Action | str, resource: Resource, when: WhenFn) -> bool:
        """Evaluate *action* on *resource* with an explicit predicate.

        *action* may be an :class:`Action` or its string value.
        """

    @abstractmethod
    def create(self, resource: Resource, when: WhenFn) -> bool:
        """Check the ``create`` action on *resource*."""

    @abstractmethod
    def read(self, resource: Resource, when: WhenFn) -> bool:
        """Check the ``read`` action on *resource*."""

    @abstractmethod
    def update(self, resource: Resource, when: WhenFn) -> bool:
        """Check the ``update`` action on *resource*."""

    @abstractmethod
    def delete(self, resource: Resource, when: WhenFn) -> bool:
        """Check the ``delete`` action on *resource*."""


class PermissionsWhitelist(PermissionsList):
    """Permit-seeking view: True only when grants, scope and ``when`` all agree."""

    def check(self, action: Action | str, resource: Resource, when: WhenFn) -> bool:
        action = Action(action)
        entity = self._entity
        base = permits(
            self._kind, self._lookup, entity.scope, entity.identifier, action, resource
        )
        allowed = bool(when(entity, action, resource)) and base
        logger.debug(
            "Permission %s: entity=%s action=%s resource=%s",
            "ALLOW" if allowed else "DENY",
            entity.name,
            action.value,
            resource.name,
        )
        return allowed

    def create(self, resource: Resource, when: WhenFn = ALWAYS) -> bool:
        return self.check(Action.CREATE, resource, when)

    def read(self, resource: Resource, when: WhenFn = ALWAYS) -> bool:
        return self.check(Action.READ, resource, when)

    def update(self, resource: Resource, when: WhenFn = ALWAYS) -> bool:
        return self.check(Action.UPDATE, resource, when)

    def delete(self, resource: Resource, when: WhenFn = ALWAYS) -> bool:
        return self.check(Action.DELETE, resource, when)


class PermissionsBlacklist(PermissionsList):
    """Deny-seeking view: True when grants, scope or ``when`` deny the action."""

    def check(self, action: Action | str, resource: Resource, when: WhenFn) -> bool:
        action = Action(action)
        entity = self._entity
        restricted = restricts(
            self._kind, self._lookup, entity.identifier, action, resource
        )
        mismatch = scope_mismatch(entity.scope, resource.scope)
        denied = bool(when(entity, action, resource)) or restricted or mismatch
        logger.debug(
            "Restriction %s: entity=%s action=%s resource=%s restricted=%s scope_mismatch=%s",
            "DENY" if denied else "ALLOW",
            entity.name,
            action.value,
            resource.name,
            restricted,
            mismatch,
        )
        return denied

    def create(self, resource: Resource, when: WhenFn = NEVER) -> bool:
        return self.check(Action.CREATE, resource, when)

    def read(self, resource: Resource, when: WhenFn = NEVER) -> bool:
        return self.check(Action.READ, resource, when)

    def update(self, resource: Resource, when: WhenFn = NEVER) -> bool:
        return self.check(Action.UPDATE, resource, when)

    def delete(self, resource: Resource, when: WhenFn = NEVER) -> bool:
        return self.check(Action.DELETE, resource, when)
