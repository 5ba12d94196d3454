"""Permissions, the scope-string codec, and the can/cannot views.

Example
-------
::

    from roba.permissions import Permission, parse_permissions_list

    encoded = Permission.protected("accounts").to_permissions_list()
    assert parse_permissions_list(encoded) == [Permission.protected("accounts")]
"""
from __future__ import annotations

from roba.permissions.lists import (
    PermissionsBlacklist,
    PermissionsList,
    PermissionsWhitelist,
)
from roba.permissions.parser import (
    InvalidScopeString,
    parse_permissions_list,
    parse_scope_string,
)
from roba.permissions.permission import Permission, create_scope_string

__all__ = [
    # Core types
    "Permission",
    "create_scope_string",
    # Views
    "PermissionsBlacklist",
    "PermissionsList",
    "PermissionsWhitelist",
    # Codec
    "InvalidScopeString",
    "parse_permissions_list",
    "parse_scope_string",
]
