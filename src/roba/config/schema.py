"""Policy file schema — Pydantic v2 models for YAML policy documents.

A policy document declares collectives (with their permissions and an
optional base collective to inherit from) and the actors derived from them.

Example
-------
::

    version: "1.0"
    collectives:
      - name: users
        permissions:
          - {resource: accounts, preset: protected}
          - resource: comments
            grants: {create: own, read: any}
        scopes:
          - posts.read.any
      - name: admins
        inherits: users
        permissions:
          - {resource: accounts, preset: all}
    actors:
      - {id: bob, collective: users}
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from roba.grants import GrantSet, GrantType
from roba.permissions.permission import Permission

PresetName = Literal["all", "none", "private", "protected", "public", "read_only"]


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


class GrantsConfig(BaseModel):
    """Explicit grants for one resource. Omitted actions default to ``none``."""

    model_config = {"extra": "forbid"}

    create: GrantType = GrantType.NONE
    read: GrantType = GrantType.NONE
    update: GrantType = GrantType.NONE
    delete: GrantType = GrantType.NONE

    def to_grant_set(self) -> GrantSet:
        return GrantSet(self.create, self.read, self.update, self.delete)


class PermissionConfig(BaseModel):
    """One permission entry: a resource plus either a preset or explicit grants.

    Attributes
    ----------
    resource:
        Name of the resource type.
    preset:
        One of ``all``, ``none``, ``private``, ``protected``, ``public``,
        ``read_only``.
    grants:
        Explicit per-action grants.
    """

    model_config = {"extra": "forbid"}

    resource: str
    preset: PresetName | None = None
    grants: GrantsConfig | None = None

    @field_validator("resource")
    @classmethod
    def resource_must_not_be_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resource must not be empty")
        return value

    @model_validator(mode="after")
    def exactly_one_source(self) -> PermissionConfig:
        if (self.preset is None) == (self.grants is None):
            raise ValueError(
                f"permission for {self.resource!r} needs exactly one of 'preset' or 'grants'"
            )
        return self

    def to_permission(self) -> Permission:
        if self.grants is not None:
            return Permission(self.resource, self.grants.to_grant_set())
        factory = getattr(Permission, self.preset)  # type: ignore[arg-type]
        return factory(self.resource)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class CollectiveConfig(BaseModel):
    """A collective declaration.

    Attributes
    ----------
    name:
        Unique collective name.
    scope:
        Scope of the collective. ``None`` inherits the base collective's scope,
        or the global scope when there is no base.
    inherits:
        Name of a collective to inherit permissions from.
    permissions:
        Structured permission entries, applied after inherited ones.
    scopes:
        Flat scope strings (``resource.action.grant``), applied after
        ``permissions``.
    """

    model_config = {"extra": "forbid"}

    name: str
    scope: str | None = None
    inherits: str | None = None
    permissions: list[PermissionConfig] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("collective name must not be empty")
        return value


class ActorConfig(BaseModel):
    """An actor derived from a declared collective."""

    model_config = {"extra": "forbid"}

    id: str
    collective: str

    @field_validator("id")
    @classmethod
    def id_must_not_be_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("actor id must not be empty")
        return value


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class PolicyConfig(BaseModel):
    """Top-level policy document."""

    model_config = {"extra": "allow"}

    version: str = "1.0"
    description: str = ""
    collectives: list[CollectiveConfig] = Field(default_factory=list)
    actors: list[ActorConfig] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def version_as_string(cls, value: object) -> str:
        return str(value)

    @model_validator(mode="after")
    def names_are_unique(self) -> PolicyConfig:
        seen: set[str] = set()
        for collective in self.collectives:
            if collective.name in seen:
                raise ValueError(f"duplicate collective {collective.name!r}")
            seen.add(collective.name)
        ids: set[str] = set()
        for actor in self.actors:
            if actor.id in ids:
                raise ValueError(f"duplicate actor id {actor.id!r}")
            ids.add(actor.id)
        return self
