"""Tests for the YAML policy schema and PolicyLoader."""
from __future__ import annotations

import pathlib
import textwrap

import pytest

from roba.config.loader import Policy, PolicyConfigError, PolicyLoader
from roba.config.schema import PermissionConfig
from roba.entities import Actor, Collective
from roba.grants import GrantSet, GrantType
from roba.permissions.parser import InvalidScopeString
from roba.permissions.permission import Permission
from roba.resources import Resource


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_VALID_CONFIG: dict[str, object] = {
    "version": "1.0",
    "description": "Blog permissions",
    "collectives": [
        {
            "name": "admins",
            "inherits": "users",
            "permissions": [{"resource": "accounts", "preset": "all"}],
        },
        {
            "name": "users",
            "permissions": [
                {"resource": "accounts", "preset": "protected"},
                {"resource": "comments", "grants": {"create": "own", "read": "any"}},
            ],
            "scopes": ["posts.read.any", "posts.create.own"],
        },
    ],
    "actors": [
        {"id": "bob", "collective": "users"},
        {"id": "billy", "collective": "admins"},
    ],
}

_VALID_YAML = textwrap.dedent(
    """
    version: "1.0"
    collectives:
      - name: users
        permissions:
          - {resource: accounts, preset: protected}
          - {resource: reports, preset: none}
      - name: auditors
        inherits: users
        scope: tenant-a
        scopes:
          - reports.read.any
    actors:
      - {id: bob, collective: users}
    """
)


@pytest.fixture()
def loader() -> PolicyLoader:
    return PolicyLoader()


@pytest.fixture()
def strict_loader() -> PolicyLoader:
    return PolicyLoader(strict=True)


@pytest.fixture()
def policy(loader: PolicyLoader) -> Policy:
    return loader.load_from_dict(_VALID_CONFIG)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class TestPermissionConfig:
    def test_preset_entry(self) -> None:
        entry = PermissionConfig(resource="accounts", preset="read_only")
        assert entry.to_permission() == Permission.read_only("accounts")

    def test_grants_entry_defaults_to_none(self) -> None:
        entry = PermissionConfig.model_validate(
            {"resource": "accounts", "grants": {"read": "any"}}
        )
        assert entry.to_permission().grants == GrantSet(read=GrantType.ANY)

    def test_needs_exactly_one_source(self) -> None:
        with pytest.raises(ValueError):
            PermissionConfig(resource="accounts")
        with pytest.raises(ValueError):
            PermissionConfig.model_validate(
                {"resource": "accounts", "preset": "all", "grants": {"read": "any"}}
            )

    def test_unknown_preset_rejected(self) -> None:
        with pytest.raises(ValueError):
            PermissionConfig.model_validate({"resource": "accounts", "preset": "admin"})

    def test_resource_is_trimmed(self) -> None:
        assert PermissionConfig(resource=" posts ", preset="all").resource == "posts"


# ---------------------------------------------------------------------------
# load_from_dict
# ---------------------------------------------------------------------------

class TestPolicyLoaderFromDict:
    def test_returns_policy(self, policy: Policy) -> None:
        assert isinstance(policy, Policy)
        assert policy.description == "Blog permissions"

    def test_collectives_in_declaration_order(self, policy: Policy) -> None:
        assert list(policy.collectives) == ["admins", "users"]

    def test_collective_permissions(self, policy: Policy) -> None:
        users = policy.collective("users")
        assert isinstance(users, Collective)
        assert users.grants["accounts"] == GrantSet.protected()
        assert users.grants["comments"] == GrantSet(GrantType.OWN, GrantType.ANY)
        assert users.grants["posts"] == GrantSet(GrantType.OWN, GrantType.ANY)

    def test_inheritance_resolved_regardless_of_order(self, policy: Policy) -> None:
        admins = policy.collective("admins")
        assert admins is not None
        assert admins.grants["accounts"] == GrantSet.all()
        assert admins.grants["comments"] == GrantSet(GrantType.OWN, GrantType.ANY)

    def test_actors_derived_from_collectives(self, policy: Policy) -> None:
        bob = policy.actor("bob")
        assert isinstance(bob, Actor)
        assert bob.name == "users"
        assert bob.can.update(Resource.instance("accounts", "1", "bob")) is True

    def test_entity_prefers_actor_then_collective(self, policy: Policy) -> None:
        assert isinstance(policy.entity("bob"), Actor)
        assert isinstance(policy.entity("users"), Collective)
        assert policy.entity("nobody") is None

    def test_empty_document(self, loader: PolicyLoader) -> None:
        policy = loader.load_from_dict({})
        assert dict(policy.collectives) == {}
        assert dict(policy.actors) == {}

    def test_numeric_version_accepted(self, loader: PolicyLoader) -> None:
        assert loader.load_from_dict({"version": 1}).actors == {}

    def test_unsupported_version_raises(self, loader: PolicyLoader) -> None:
        with pytest.raises(PolicyConfigError, match="version"):
            loader.load_from_dict({**_VALID_CONFIG, "version": "99.0"})

    def test_non_mapping_raises(self, loader: PolicyLoader) -> None:
        with pytest.raises(PolicyConfigError, match="mapping"):
            loader.load_from_dict([{"name": "users"}])  # type: ignore[arg-type]

    def test_schema_error_raises(self, loader: PolicyLoader) -> None:
        with pytest.raises(PolicyConfigError):
            loader.load_from_dict({"collectives": [{"permissions": []}]})

    def test_unknown_base_raises(self, loader: PolicyLoader) -> None:
        config = {"collectives": [{"name": "admins", "inherits": "ghosts"}]}
        with pytest.raises(PolicyConfigError, match="ghosts"):
            loader.load_from_dict(config)

    def test_inheritance_cycle_raises(self, loader: PolicyLoader) -> None:
        config = {
            "collectives": [
                {"name": "a", "inherits": "b"},
                {"name": "b", "inherits": "a"},
            ]
        }
        with pytest.raises(PolicyConfigError, match="cycle"):
            loader.load_from_dict(config)

    def test_unknown_actor_collective_raises(self, loader: PolicyLoader) -> None:
        config = {"actors": [{"id": "bob", "collective": "ghosts"}]}
        with pytest.raises(PolicyConfigError, match="ghosts"):
            loader.load_from_dict(config)

    def test_duplicate_collective_raises(self, loader: PolicyLoader) -> None:
        config = {"collectives": [{"name": "users"}, {"name": "users"}]}
        with pytest.raises(PolicyConfigError, match="duplicate"):
            loader.load_from_dict(config)

    def test_invalid_scope_string_is_wrapped(self, loader: PolicyLoader) -> None:
        config = {"collectives": [{"name": "users", "scopes": ["posts.read"]}]}
        with pytest.raises(PolicyConfigError, match="posts.read") as exc_info:
            loader.load_from_dict(config, config_path="policy.yaml")
        assert isinstance(exc_info.value.__cause__, InvalidScopeString)
        assert exc_info.value.config_path == "policy.yaml"


class TestPolicyLoaderStrict:
    def test_strict_mode_rejects_unknown_keys(self, strict_loader: PolicyLoader) -> None:
        with pytest.raises(PolicyConfigError, match="unknown_key"):
            strict_loader.load_from_dict({**_VALID_CONFIG, "unknown_key": 1})

    def test_default_mode_ignores_unknown_keys(self, loader: PolicyLoader) -> None:
        policy = loader.load_from_dict({**_VALID_CONFIG, "unknown_key": 1})
        assert len(policy.collectives) == 2


# ---------------------------------------------------------------------------
# YAML sources
# ---------------------------------------------------------------------------

class TestPolicyLoaderYaml:
    def test_load_from_yaml_string(self, loader: PolicyLoader) -> None:
        policy = loader.load_from_yaml_string(_VALID_YAML)
        auditors = policy.collective("auditors")
        assert auditors is not None
        assert auditors.scope == "tenant-a"
        assert auditors.grants["reports"] == GrantSet(read=GrantType.ANY)
        assert auditors.can.read(Resource.collection("reports", "tenant-a")) is True
        assert auditors.can.read(Resource.collection("reports", "tenant-b")) is False

    def test_inherited_scope_defaults_to_global(self, loader: PolicyLoader) -> None:
        policy = loader.load_from_yaml_string(_VALID_YAML)
        assert policy.collective("users").scope == "*"  # type: ignore[union-attr]

    def test_invalid_yaml_raises(self, loader: PolicyLoader) -> None:
        with pytest.raises(PolicyConfigError, match="YAML"):
            loader.load_from_yaml_string("collectives: [unclosed")

    def test_load_file(self, loader: PolicyLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text(_VALID_YAML, encoding="utf-8")
        policy = loader.load(path)
        assert policy.actor("bob") is not None

    def test_load_missing_file_raises(self, loader: PolicyLoader, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.yaml")

    def test_load_empty_file(self, loader: PolicyLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert loader.load(path).collectives == {}
