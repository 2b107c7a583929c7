"""Role assignment store — immutable collection of :class:`UserRole` bindings."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator

from mp_rbac.kernel.errors import ConflictError, NotFoundError
from mp_rbac.rbac.model import Scope, UserRole
from mp_rbac.rbac.scope import to_scope


class RoleAssignmentStore:
    """Per-user index over role assignments.

    Assignments keep their insertion order within a user; that order is the
    tie-break the evaluator uses inside one scope. ``with_assignment`` and
    ``without_assignment`` return new stores.
    """

    __slots__ = ("_by_user", "_size")

    def __init__(self, assignments: Iterable[UserRole] = ()) -> None:
        by_user: dict[str, tuple[UserRole, ...]] = {}
        keys: set[tuple] = set()
        for assignment in assignments:
            if assignment.key in keys:
                raise ConflictError(
                    f"Role '{assignment.role_id}' is already assigned to "
                    f"user '{assignment.user_id}' in this scope"
                )
            keys.add(assignment.key)
            by_user[assignment.user_id] = (*by_user.get(assignment.user_id, ()), assignment)
        self._by_user = MappingProxyType(by_user)
        self._size = len(keys)

    def __iter__(self) -> Iterator[UserRole]:
        for assignments in self._by_user.values():
            yield from assignments

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"RoleAssignmentStore(users={len(self._by_user)}, assignments={self._size})"

    def for_user(self, user_id: str) -> tuple[UserRole, ...]:
        return self._by_user.get(user_id, ())

    def in_scope(
        self,
        user_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
    ) -> list[UserRole]:
        """Assignments of *user_id* at *scope*; ``scope_id`` is ignored for system."""
        resolved = to_scope(scope)
        if resolved is None:
            return []
        return [
            a
            for a in self.for_user(user_id)
            if to_scope(a.scope) is resolved
            and (resolved is Scope.SYSTEM or a.scope_id == scope_id)
        ]

    def role_ids(
        self,
        user_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
    ) -> frozenset[str]:
        return frozenset(a.role_id for a in self.in_scope(user_id, scope, scope_id))

    def has_role(
        self,
        user_id: str,
        role_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
    ) -> bool:
        return role_id in self.role_ids(user_id, scope, scope_id)

    def has_assignments_for_role(self, role_id: str) -> bool:
        return any(a.role_id == role_id for a in self)

    def find(self, key: tuple) -> UserRole | None:
        user_id = key[0]
        for assignment in self.for_user(user_id):
            if assignment.key == key:
                return assignment
        return None

    def with_assignment(self, assignment: UserRole) -> "RoleAssignmentStore":
        return RoleAssignmentStore((*self, assignment))

    def without_assignment(self, key: tuple) -> "RoleAssignmentStore":
        if self.find(key) is None:
            raise NotFoundError("Role assignment", "/".join(str(k) for k in key if k is not None))
        return RoleAssignmentStore(a for a in self if a.key != key)


__all__ = ["RoleAssignmentStore"]
