"""Tests for PermissionsWhitelist and PermissionsBlacklist."""
from __future__ import annotations

from types import MappingProxyType

import pytest

from roba.evaluation import ALWAYS, NEVER, EntityKind, EntitySnapshot
from roba.grants import ACTIONS, Action, GrantSet
from roba.permissions.lists import (
    PermissionsBlacklist,
    PermissionsList,
    PermissionsWhitelist,
)
from roba.resources import Resource

_LOOKUP = MappingProxyType(
    {
        "accounts": GrantSet.protected(),
        "posts": GrantSet.public(),
        "secrets": GrantSet.none(),
    }
)


def _views(
    kind: EntityKind = EntityKind.ACTOR,
    identifier: str = "bob",
    scope: str = "*",
) -> tuple[PermissionsWhitelist, PermissionsBlacklist]:
    return (
        PermissionsWhitelist("users", _LOOKUP, scope, identifier, kind),
        PermissionsBlacklist("users", _LOOKUP, scope, identifier, kind),
    )


class TestPermissionsListContract:
    def test_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            PermissionsList("users", _LOOKUP, "*", "", EntityKind.COLLECTIVE)  # type: ignore[abstract]

    def test_entity_snapshot(self) -> None:
        can, _ = _views()
        assert can.entity == EntitySnapshot(name="users", scope="*", identifier="bob")

    def test_snapshot_is_read_only(self) -> None:
        can, _ = _views()
        with pytest.raises(AttributeError):
            can.entity.identifier = "mallory"  # type: ignore[misc]


class TestWhitelist:
    def test_action_methods_match_check(self) -> None:
        can, _ = _views()
        posts = Resource.collection("posts")
        assert can.create(posts) is can.check(Action.CREATE, posts, ALWAYS)
        assert can.delete(posts) is False

    def test_unknown_resource_is_denied(self) -> None:
        can, _ = _views()
        ghosts = Resource.collection("ghosts")
        assert not any(can.check(a, ghosts, ALWAYS) for a in ACTIONS)

    def test_none_grant_is_denied(self) -> None:
        can, _ = _views()
        assert can.read(Resource.collection("secrets")) is False

    def test_own_grant_on_owned_instance(self) -> None:
        can, _ = _views()
        assert can.update(Resource.instance("accounts", "1", "bob")) is True
        assert can.update(Resource.instance("accounts", "2", "billy")) is False

    def test_predicate_receives_snapshot_action_and_resource(self) -> None:
        can, _ = _views()
        posts = Resource.collection("posts")
        calls: list[tuple[object, ...]] = []

        def record(entity: EntitySnapshot, action: Action, resource: Resource) -> bool:
            calls.append((entity, action, resource))
            return True

        assert can.read(posts, record) is True
        assert calls == [(can.entity, Action.READ, posts)]

    def test_predicate_called_once_even_when_base_denies(self) -> None:
        can, _ = _views()
        calls: list[int] = []

        def record(*_: object) -> bool:
            calls.append(1)
            return True

        assert can.delete(Resource.collection("posts"), record) is False
        assert calls == [1]

    def test_check_accepts_action_strings(self) -> None:
        can, _ = _views()
        posts = Resource.collection("posts")
        assert can.check("read", posts, ALWAYS) is True
        assert can.check("delete", posts, ALWAYS) is False

    def test_check_rejects_unknown_action_string(self) -> None:
        can, _ = _views()
        with pytest.raises(ValueError):
            can.check("destroy", Resource.collection("posts"), ALWAYS)

    def test_scope_mismatch_denies(self) -> None:
        can, _ = _views(scope="tenant-a")
        assert can.read(Resource.collection("posts", "tenant-b")) is False
        assert can.read(Resource.collection("posts", "tenant-a")) is True


class TestBlacklist:
    def test_defaults_are_complement_of_whitelist(self) -> None:
        can, cannot = _views()
        resources = [
            Resource.collection("accounts"),
            Resource.collection("posts"),
            Resource.collection("secrets"),
            Resource.collection("ghosts"),
            Resource.instance("accounts", "1", "bob"),
            Resource.instance("accounts", "2", "billy"),
            Resource.collection("posts", "tenant-a"),
        ]
        for resource in resources:
            for action in ACTIONS:
                assert cannot.check(action, resource, NEVER) is (
                    not can.check(action, resource, ALWAYS)
                ), (action, resource)

    def test_defaults_are_complement_with_named_scope(self) -> None:
        can, cannot = _views(scope="tenant-a")
        for scope in ["tenant-a", "tenant-b", "*", ""]:
            posts = Resource.collection("posts", scope)
            assert cannot.read(posts) is (not can.read(posts))

    def test_predicate_forces_denial(self) -> None:
        _, cannot = _views()
        posts = Resource.collection("posts")
        assert cannot.read(posts) is False
        assert cannot.read(posts, lambda *_: True) is True

    def test_predicate_cannot_force_permit(self) -> None:
        _, cannot = _views()
        assert cannot.delete(Resource.collection("posts"), lambda *_: False) is True

    def test_empty_entity_scope_is_a_mismatch(self) -> None:
        _, cannot = _views(scope="")
        assert cannot.read(Resource.collection("posts", "tenant-a")) is True
        assert cannot.read(Resource.collection("posts", "")) is False

    def test_predicate_called_once_even_when_base_denies(self) -> None:
        _, cannot = _views()
        calls: list[int] = []

        def record(*_: object) -> bool:
            calls.append(1)
            return False

        assert cannot.delete(Resource.collection("posts"), record) is True
        assert calls == [1]

    def test_predicate_called_once_when_base_permits(self) -> None:
        _, cannot = _views()
        posts = Resource.collection("posts")
        calls: list[tuple[object, ...]] = []

        def record(entity: EntitySnapshot, action: Action, resource: Resource) -> bool:
            calls.append((entity, action, resource))
            return False

        assert cannot.read(posts, record) is False
        assert calls == [(cannot.entity, Action.READ, posts)]

    def test_check_accepts_action_strings(self) -> None:
        _, cannot = _views()
        posts = Resource.collection("posts")
        assert cannot.check("read", posts, NEVER) is False
        assert cannot.check("delete", posts, NEVER) is True
