"""roba — in-process authorization for collectives, actors and owned resources.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import roba
>>> accounts = roba.Resource.collection("accounts")
>>> users = roba.Collective("users", [roba.Permission.protected(accounts)])
>>> users.can.read(accounts)
True
>>> users.cannot.update(accounts)
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Grant vocabulary and scopes
# ---------------------------------------------------------------------------
from roba.grants import ACTIONS, Action, GrantSet, GrantType
from roba.scope import Scope, ScopeList, scope_matches, scope_mismatch

# ---------------------------------------------------------------------------
# Resources and entities
# ---------------------------------------------------------------------------
from roba.resources import Resource, ResourceCollection, ResourceInstance
from roba.evaluation import ALWAYS, NEVER, EntityKind, EntitySnapshot, WhenFn
from roba.entities import Actor, Collective, PermissibleEntity

# ---------------------------------------------------------------------------
# Permissions and codec
# ---------------------------------------------------------------------------
from roba.permissions import (
    InvalidScopeString,
    Permission,
    PermissionsBlacklist,
    PermissionsList,
    PermissionsWhitelist,
    create_scope_string,
    parse_permissions_list,
    parse_scope_string,
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from roba.config import Policy, PolicyConfigError, PolicyLoader

__all__ = [
    "__version__",
    # Grants and scopes
    "ACTIONS",
    "Action",
    "GrantSet",
    "GrantType",
    "Scope",
    "ScopeList",
    "scope_matches",
    "scope_mismatch",
    # Resources and entities
    "Resource",
    "ResourceCollection",
    "ResourceInstance",
    "ALWAYS",
    "NEVER",
    "EntityKind",
    "EntitySnapshot",
    "WhenFn",
    "Actor",
    "Collective",
    "PermissibleEntity",
    # Permissions
    "InvalidScopeString",
    "Permission",
    "PermissionsBlacklist",
    "PermissionsList",
    "PermissionsWhitelist",
    "create_scope_string",
    "parse_permissions_list",
    "parse_scope_string",
    # Configuration
    "Policy",
    "PolicyConfigError",
    "PolicyLoader",
]
