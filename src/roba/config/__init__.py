"""YAML policy configuration: schema and loader."""
from __future__ import annotations

from roba.config.loader import Policy, PolicyConfigError, PolicyLoader
from roba.config.schema import (
    ActorConfig,
    CollectiveConfig,
    GrantsConfig,
    PermissionConfig,
    PolicyConfig,
)

__all__ = [
    "ActorConfig",
    "CollectiveConfig",
    "GrantsConfig",
    "PermissionConfig",
    "Policy",
    "PolicyConfig",
    "PolicyConfigError",
    "PolicyLoader",
]
