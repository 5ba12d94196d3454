"""Entity permission resolution: the decision procedure behind can/cannot.

Every check goes through the same steps:

1. Look up the grant set by resource name. No grant set means no permission.
2. Take the grant type for the requested action.
3. Decide base eligibility from the entity kind and resource variant using
   the ``_OWNERSHIP_HONOURED`` table below. ``any`` is always eligible,
   ``none`` never is, and ``own`` is eligible only where the table allows
   ownership and the entity's identifier matches the instance owner.
4. Check scopes (see :mod:`roba.scope`).

The caller-supplied ``when`` predicate is applied on top of this by
:mod:`roba.permissions.lists`.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from roba.grants import Action, GrantSet, GrantType
from roba.resources import Resource, ResourceInstance
from roba.scope import scope_matches

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Tag distinguishing groups from individuals."""

    COLLECTIVE = "collective"
    ACTOR = "actor"


@dataclass(frozen=True)
class EntitySnapshot:
    """Read-only view of the acting entity handed to ``when`` predicates.

    Attributes
    ----------
    name:
        Entity name.
    scope:
        Entity scope.
    identifier:
        The actor id, or ``""`` for a collective.
    """

    name: str
    scope: str
    identifier: str


WhenFn = Callable[[EntitySnapshot, Action, Resource], bool]


def ALWAYS(entity: EntitySnapshot, action: Action, resource: Resource) -> bool:
    """Default ``when`` for permit checks."""
    return True


def NEVER(entity: EntitySnapshot, action: Action, resource: Resource) -> bool:
    """Default ``when`` for deny checks."""
    return False


# Whether an ``own`` grant can be satisfied, by (entity kind, resource is an
# instance). Collections are never owned and collectives never own anything.
_OWNERSHIP_HONOURED: dict[tuple[EntityKind, bool], bool] = {
    (EntityKind.COLLECTIVE, False): False,
    (EntityKind.COLLECTIVE, True): False,
    (EntityKind.ACTOR, False): False,
    (EntityKind.ACTOR, True): True,
}


def grant_for(
    lookup: Mapping[str, GrantSet], action: Action, resource: Resource
) -> GrantType | None:
    """Return the grant for *action* on *resource*, or None if nothing is granted."""
    grants = lookup.get(resource.name)
    if grants is None:
        return None
    return grants.grant_for(action)


def is_eligible(
    kind: EntityKind, grant: GrantType | None, identifier: str, resource: Resource
) -> bool:
    """Return the base eligibility of *grant* for the entity and resource variant."""
    if grant is GrantType.ANY:
        return True
    if grant is GrantType.OWN and _OWNERSHIP_HONOURED[
        (kind, isinstance(resource, ResourceInstance))
    ]:
        return identifier == resource.owner  # type: ignore[attr-defined]
    return False


def permits(
    kind: EntityKind,
    lookup: Mapping[str, GrantSet],
    scope: str,
    identifier: str,
    action: Action,
    resource: Resource,
) -> bool:
    """Return True if the base rule and the scope rule both permit the action."""
    grant = grant_for(lookup, action, resource)
    allowed = is_eligible(kind, grant, identifier, resource) and scope_matches(
        scope, resource.scope
    )
    logger.debug(
        "Base rule %s: kind=%s action=%s resource=%s grant=%s scope=%s",
        "ALLOW" if allowed else "DENY",
        kind.value,
        action.value,
        resource.name,
        grant.value if grant is not None else None,
        scope,
    )
    return allowed


def restricts(
    kind: EntityKind,
    lookup: Mapping[str, GrantSet],
    identifier: str,
    action: Action,
    resource: Resource,
) -> bool:
    """Return True if the grants alone deny the action (scope not considered)."""
    return not is_eligible(kind, grant_for(lookup, action, resource), identifier, resource)
