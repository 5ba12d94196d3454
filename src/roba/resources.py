"""Resource model: collections (resource types) and owned instances.

A :class:`ResourceCollection` stands for a resource type as a whole. A
:class:`ResourceInstance` is one identified occurrence of that type and
records the identifier of the entity that owns it. An instance shares its
collection's name, which is how grant lookup works for both variants.

Example
-------
::

    accounts = Resource.collection("accounts")
    bob_account = Resource.instance_of(accounts, "abcde", bob)
    assert bob_account.owner == bob.id
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from roba.scope import Scope

if TYPE_CHECKING:
    from roba.entities import Actor


class Resource:
    """Base type for resources and home of the resource factories."""

    name: str
    scope: str

    @staticmethod
    def collection(name: str, scope: str = Scope.GLOBAL) -> ResourceCollection:
        """Create a resource collection.

        Parameters
        ----------
        name:
            Plural name of the resource type (e.g. ``"accounts"``).
        scope:
            Scope of the collection. Defaults to the global scope.
        """
        return ResourceCollection(name, scope)

    @staticmethod
    def instance(
        name: str, id: str, owner: str, scope: str = Scope.GLOBAL
    ) -> ResourceInstance:
        """Create a resource instance.

        Parameters
        ----------
        name:
            Name of the collection the instance belongs to.
        id:
            Identifier unique to this instance.
        owner:
            Identifier of the entity that owns the instance.
        scope:
            Scope of the instance. Defaults to the global scope.
        """
        return ResourceInstance(name, id, owner, scope)

    @staticmethod
    def instance_of(collection: ResourceCollection, id: str, owner: Actor) -> ResourceInstance:
        """Create an instance of *collection* owned by the actor *owner*."""
        return ResourceInstance(collection.name, id, owner.id, collection.scope)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)  # type: ignore[call-overload]

    def serialize(self) -> str:
        """Return the JSON encoding of :meth:`to_dict`."""
        return json.dumps(self.to_dict())


def _require_name(name: str) -> None:
    if not name.strip():
        raise ValueError("Resource name must not be empty.")


@dataclass(frozen=True)
class ResourceCollection(Resource):
    """A resource type considered as a whole. Never owned."""

    name: str
    scope: str = Scope.GLOBAL

    def __post_init__(self) -> None:
        _require_name(self.name)


@dataclass(frozen=True)
class ResourceInstance(Resource):
    """One owned occurrence of a resource type."""

    name: str
    id: str
    owner: str
    scope: str = Scope.GLOBAL

    def __post_init__(self) -> None:
        _require_name(self.name)
