"""Scopes: namespace strings attached to entities and resources.

``"*"`` is the global scope and matches any resource scope. Any other value,
including the empty scope, matches only an identical resource scope.

:class:`ScopeList` is a small allow/reject list of scope names built on the
same ``"*"`` aggregate marker.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Scope:
    """Well-known scope values."""

    GLOBAL: str = "*"
    NONE: str = ""

    def __init__(self) -> None:
        raise TypeError("Scope is a namespace and cannot be instantiated.")

    @staticmethod
    def named(name: str) -> str:
        """Return a named scope with surrounding whitespace removed."""
        return name.strip()


def scope_matches(entity_scope: str, resource_scope: str) -> bool:
    """Return True if an entity in *entity_scope* may act on *resource_scope*."""
    return entity_scope == Scope.GLOBAL or entity_scope == resource_scope


def scope_mismatch(entity_scope: str, resource_scope: str) -> bool:
    """Return True if *entity_scope* affirmatively excludes *resource_scope*.

    The empty scope is not global, so an unset entity scope mismatches every
    resource scope other than the empty one.
    """
    return entity_scope != Scope.GLOBAL and entity_scope != resource_scope


# ---------------------------------------------------------------------------
# ScopeList
# ---------------------------------------------------------------------------


class ScopeList:
    """A list of allowed and rejected scopes.

    ``"*"`` in the allowed list means every scope is allowed unless rejected;
    ``"*"`` in the rejected list means every scope is rejected unless allowed.

    Parameters
    ----------
    allowed:
        Scopes that are allowed.
    rejected:
        Scopes that are rejected.

    Examples
    --------
    ::

        scopes = ScopeList.except_(["billing"])
        assert scopes.allows("accounts")
        assert scopes.rejects("billing")
    """

    def __init__(self, allowed: list[str] | None = None, rejected: list[str] | None = None) -> None:
        self._allowed: list[str] = [self._normalize(s) for s in allowed or []]
        self._rejected: list[str] = [self._normalize(s) for s in rejected or []]

    @classmethod
    def all(cls) -> ScopeList:
        """Allow every scope."""
        return cls([Scope.GLOBAL], [])

    @classmethod
    def only(cls, scopes: list[str]) -> ScopeList:
        """Allow only *scopes*."""
        return cls(scopes, [Scope.GLOBAL])

    @classmethod
    def except_(cls, scopes: list[str]) -> ScopeList:
        """Allow every scope except *scopes*."""
        return cls([Scope.GLOBAL], scopes)

    @property
    def allowed_scopes(self) -> list[str]:
        return list(self._allowed)

    @property
    def rejected_scopes(self) -> list[str]:
        return list(self._rejected)

    def allow(self, scope: str) -> None:
        """Allow *scope*, lifting any explicit rejection of it."""
        scope = self._normalize(scope)
        if scope in self._rejected:
            self._rejected.remove(scope)
        if not self._allows_aggregate() and scope not in self._allowed:
            self._allowed.append(scope)
        logger.debug("ScopeList allow: %s", scope)

    def reject(self, scope: str) -> None:
        """Reject *scope*, lifting any explicit allowance of it."""
        scope = self._normalize(scope)
        if scope in self._allowed:
            self._allowed.remove(scope)
        if scope not in self._rejected:
            self._rejected.append(scope)
        logger.debug("ScopeList reject: %s", scope)

    def allows(self, scope: str) -> bool:
        """Return True if *scope* is allowed.

        An explicit rejection always wins; otherwise the scope must be listed
        or covered by the ``"*"`` aggregate.
        """
        scope = self._normalize(scope)
        return scope not in self._rejected and (
            self._allows_aggregate() or scope in self._allowed
        )

    def rejects(self, scope: str) -> bool:
        """Return True if *scope* is rejected. Always ``not allows(scope)``."""
        return not self.allows(scope)

    def _allows_aggregate(self) -> bool:
        return Scope.GLOBAL in self._allowed

    @staticmethod
    def _normalize(scope: str) -> str:
        return scope.strip()

    def __repr__(self) -> str:
        return f"ScopeList(allowed={self._allowed!r}, rejected={self._rejected!r})"
