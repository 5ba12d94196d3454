"""YAML policy loader: builds collectives and actors from policy documents.

:class:`PolicyLoader` validates a document against
:class:`~roba.config.schema.PolicyConfig`, resolves ``inherits`` references
(declaration order does not matter) and returns a :class:`Policy` holding the
constructed entities. Loading only reads; nothing is ever written back.

Example
-------
::

    loader = PolicyLoader()
    policy = loader.load("policy.yaml")
    bob = policy.actor("bob")
    assert bob is not None and bob.can.read(Resource.collection("posts"))
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import ValidationError

from roba.config.schema import CollectiveConfig, PolicyConfig
from roba.entities import Actor, Collective, PermissibleEntity
from roba.permissions.parser import InvalidScopeString, parse_permissions_list
from roba.permissions.permission import Permission
from roba.scope import Scope

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class PolicyConfigError(ValueError):
    """Raised when a policy document is malformed or inconsistent.

    Attributes
    ----------
    config_path:
        The path to the policy file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


@dataclass(frozen=True)
class Policy:
    """The entities declared by one policy document.

    Attributes
    ----------
    collectives:
        Collectives keyed by name, in declaration order.
    actors:
        Actors keyed by id, in declaration order.
    description:
        Free-text description from the document.
    """

    collectives: Mapping[str, Collective] = field(default_factory=dict)
    actors: Mapping[str, Actor] = field(default_factory=dict)
    description: str = ""

    def collective(self, name: str) -> Collective | None:
        """Return the collective called ``name``, or ``None`` if absent."""
        return self.collectives.get(name)

    def actor(self, id: str) -> Actor | None:
        """Return the actor with ``id``, or ``None`` if absent."""
        return self.actors.get(id)

    def entity(self, key: str) -> PermissibleEntity | None:
        """Return the actor with id ``key``, else the collective named ``key``."""
        return self.actor(key) or self.collective(key)


class PolicyLoader:
    """Loads :class:`Policy` objects from YAML files, YAML strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "description", "collectives", "actors", "metadata"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> Policy:
        """Load a policy from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        PolicyConfigError
            If the file cannot be parsed or is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Policy file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise PolicyConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build_policy(raw, config_path=str(config_path))

    def load_from_yaml_string(
        self, yaml_string: str, config_path: str | None = None
    ) -> Policy:
        """Load a policy from YAML text."""
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise PolicyConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build_policy(raw, config_path=config_path)

    def load_from_dict(
        self, config: dict[str, object], config_path: str | None = None
    ) -> Policy:
        """Load a policy from an already-parsed mapping."""
        return self._build_policy(config, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_policy(self, raw: object, config_path: str | None) -> Policy:
        if not isinstance(raw, dict):
            raise PolicyConfigError("Policy document must be a YAML mapping.", config_path)

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise PolicyConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )

        try:
            config = PolicyConfig.model_validate(raw)
        except ValidationError as exc:
            raise PolicyConfigError(str(exc), config_path) from exc

        if config.version not in _SUPPORTED_VERSIONS:
            raise PolicyConfigError(
                f"Unsupported policy version {config.version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        collectives = self._build_collectives(config, config_path)

        actors: dict[str, Actor] = {}
        for actor_config in config.actors:
            base = collectives.get(actor_config.collective)
            if base is None:
                raise PolicyConfigError(
                    f"Actor {actor_config.id!r} references unknown collective "
                    f"{actor_config.collective!r}.",
                    config_path,
                )
            actors[actor_config.id] = Actor.derived_from(base, actor_config.id)

        logger.info(
            "Loaded %d collectives and %d actors from %s",
            len(collectives),
            len(actors),
            config_path or "<dict>",
        )
        return Policy(
            collectives=collectives, actors=actors, description=config.description
        )

    def _build_collectives(
        self, config: PolicyConfig, config_path: str | None
    ) -> dict[str, Collective]:
        declared = {c.name: c for c in config.collectives}
        built: dict[str, Collective] = {}

        def build(name: str, chain: tuple[str, ...]) -> Collective:
            if name in built:
                return built[name]
            if name in chain:
                cycle = " -> ".join([*chain, name])
                raise PolicyConfigError(f"Inheritance cycle: {cycle}", config_path)

            collective_config = declared[name]
            own = self._permissions_for(collective_config, config_path)
            if collective_config.inherits is None:
                scope = (
                    collective_config.scope
                    if collective_config.scope is not None
                    else Scope.GLOBAL
                )
                collective = Collective(name, own, scope)
            else:
                if collective_config.inherits not in declared:
                    raise PolicyConfigError(
                        f"Collective {name!r} inherits from unknown collective "
                        f"{collective_config.inherits!r}.",
                        config_path,
                    )
                base = build(collective_config.inherits, (*chain, name))
                collective = Collective.inherit_from(
                    base, name, own, collective_config.scope
                )
            built[name] = collective
            return collective

        for name in declared:
            build(name, ())

        # Keep declaration order regardless of resolution order.
        return {name: built[name] for name in declared}

    def _permissions_for(
        self, collective_config: CollectiveConfig, config_path: str | None
    ) -> list[Permission]:
        permissions = [p.to_permission() for p in collective_config.permissions]
        try:
            permissions.extend(parse_permissions_list(collective_config.scopes))
        except InvalidScopeString as exc:
            raise PolicyConfigError(
                f"Collective {collective_config.name!r}: {exc}", config_path
            ) from exc
        return permissions
