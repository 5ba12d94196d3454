"""Policy text codec: scope strings back into :class:`Permission` objects.

Each scope string has the form ``<resource>.<action>.<grant>``. Strings are
grouped by resource; actions a resource never mentions default to ``none``.

Example
-------
::

    permissions = parse_permissions_list([
        "accounts.read.any",
        "accounts.update.own",
    ])
    assert permissions == [
        Permission("accounts", GrantSet(read="any", update="own")),
    ]
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from roba.grants import Action, GrantSet, GrantType
from roba.permissions.permission import SEPARATOR, Permission

logger = logging.getLogger(__name__)

_VALID_ACTIONS: frozenset[str] = frozenset(a.value for a in Action)
_VALID_GRANTS: frozenset[str] = frozenset(g.value for g in GrantType)


class InvalidScopeString(ValueError):
    """Raised when a scope string is malformed or uses an unknown token.

    Attributes
    ----------
    scope_string:
        The offending scope string.
    """

    def __init__(self, scope_string: str, reason: str | None = None) -> None:
        self.scope_string = scope_string
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Invalid scope: {scope_string!r}{suffix}")


def parse_scope_string(scope_string: str) -> tuple[str, Action, GrantType]:
    """Split and validate one scope string.

    Returns
    -------
    tuple
        ``(resource_name, action, grant)``, with the resource name stripped
        of surrounding whitespace.

    Raises
    ------
    InvalidScopeString
        If the string does not have exactly three segments, its resource
        segment is blank, or its action or grant token is not recognised.
    """
    segments = scope_string.split(SEPARATOR)
    if len(segments) != 3:
        raise InvalidScopeString(
            scope_string, f"expected 3 segments, got {len(segments)}"
        )

    resource_name, action, grant = segments
    resource_name = resource_name.strip()
    if not resource_name:
        raise InvalidScopeString(scope_string, "empty resource name")
    if action not in _VALID_ACTIONS:
        raise InvalidScopeString(scope_string, f"unknown action {action!r}")
    if grant not in _VALID_GRANTS:
        raise InvalidScopeString(scope_string, f"unknown grant {grant!r}")

    return resource_name, Action(action), GrantType(grant)


def parse_permissions_list(scope_strings: Iterable[str]) -> list[Permission]:
    """Rebuild a permission list from scope strings.

    Parameters
    ----------
    scope_strings:
        Scope strings such as ``"accounts.create.own"``. Any subset of the
        four actions may be given per resource.

    Returns
    -------
    list[Permission]
        One permission per resource, in the order resources were first seen.

    Raises
    ------
    InvalidScopeString
        On the first malformed string.
    """
    records: dict[str, dict[str, GrantType]] = {}
    for scope_string in scope_strings:
        resource_name, action, grant = parse_scope_string(scope_string)
        records.setdefault(resource_name, {})[action.value] = grant

    permissions = [
        Permission(resource_name, GrantSet(**grants))
        for resource_name, grants in records.items()
    ]
    logger.debug("Parsed %d permissions from scope strings", len(permissions))
    return permissions
