"""Role graph — single-parent inheritance, expansion and cycle detection.

Roles form a forest through ``Role.inherited_from``. Every walk keeps an
explicit visited set, so a malformed (cyclic) graph truncates instead of
looping.
"""

from __future__ import annotations

from typing import Mapping

from mp_rbac.rbac.model import Role

RoleMap = Mapping[str, Role]


def ancestors(role_id: str, roles: RoleMap) -> tuple[str, ...]:
    """Ids of the parent chain of *role_id*, nearest first.

    Stops at a missing parent or at the first revisited id.
    """
    chain: list[str] = []
    visited = {role_id}
    role = roles.get(role_id)
    while role is not None and role.inherited_from:
        parent_id = role.inherited_from
        if parent_id in visited:
            break
        visited.add(parent_id)
        chain.append(parent_id)
        role = roles.get(parent_id)
    return tuple(chain)


def permission_chain(role_id: str, roles: RoleMap) -> tuple[str, ...]:
    """Own permissions of *role_id* followed by its ancestors', de-duplicated.

    Ordering is deterministic: each role's ids sorted, nearest role first.
    An unknown *role_id* yields an empty tuple.
    """
    role = roles.get(role_id)
    if role is None:
        return ()
    seen: set[str] = set()
    ordered: list[str] = []
    for current_id in (role_id, *ancestors(role_id, roles)):
        current = roles.get(current_id)
        if current is None:
            break
        for permission_id in sorted(current.permissions):
            if permission_id not in seen:
                seen.add(permission_id)
                ordered.append(permission_id)
    return tuple(ordered)


def expand_permissions(role_id: str, roles: RoleMap) -> frozenset[str]:
    """Transitive permission closure of *role_id* through its ancestors."""
    return frozenset(permission_chain(role_id, roles))


def has_cycle(role: Role, roles: RoleMap) -> bool:
    """Would *role* (as given, possibly not yet stored) sit on an inheritance cycle?

    *role* shadows any stored record with the same id, so this answers the
    question "is it safe to commit this version?".
    """
    visited = {role.id}
    parent_id = role.inherited_from
    while parent_id:
        if parent_id in visited:
            return True
        visited.add(parent_id)
        parent = roles.get(parent_id)
        if parent is None:
            return False
        parent_id = parent.inherited_from
    return False


def inherits_from(role: Role, ancestor_id: str) -> bool:
    """Direct-parent check only."""
    return role.inherited_from == ancestor_id


def descendants(role_id: str, roles: RoleMap) -> tuple[str, ...]:
    """Ids of every stored role whose parent chain passes through *role_id*."""
    return tuple(
        sorted(
            other.id
            for other in roles.values()
            if other.id != role_id and role_id in ancestors(other.id, roles)
        )
    )


__all__ = [
    "RoleMap",
    "ancestors",
    "descendants",
    "expand_permissions",
    "has_cycle",
    "inherits_from",
    "permission_chain",
]
