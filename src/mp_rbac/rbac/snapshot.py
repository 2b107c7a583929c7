"""Immutable point-in-time view of catalog, roles and assignments."""

from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import Iterable, Mapping

from mp_rbac.rbac.assignments import RoleAssignmentStore
from mp_rbac.rbac.catalog import PermissionCatalog
from mp_rbac.rbac.model import Permission, Role, UserRole


def _freeze_roles(roles: Iterable[Role]) -> Mapping[str, Role]:
    return MappingProxyType({role.id: role for role in roles})


@dataclasses.dataclass(frozen=True)
class RBACSnapshot:
    """Everything one evaluation reads.

    Writers derive a new snapshot with the ``with_*`` / ``without_*``
    helpers and publish it with a single reference swap, so a reader that
    grabbed a snapshot sees one consistent state for the whole call.
    """

    catalog: PermissionCatalog = dataclasses.field(default_factory=PermissionCatalog)
    roles: Mapping[str, Role] = dataclasses.field(default_factory=lambda: MappingProxyType({}))
    assignments: RoleAssignmentStore = dataclasses.field(default_factory=RoleAssignmentStore)
    version: int = 0

    @classmethod
    def build(
        cls,
        permissions: Iterable[Permission] = (),
        roles: Iterable[Role] = (),
        assignments: Iterable[UserRole] = (),
    ) -> "RBACSnapshot":
        return cls(
            catalog=PermissionCatalog(permissions),
            roles=_freeze_roles(roles),
            assignments=RoleAssignmentStore(assignments),
        )

    def with_permission(self, permission: Permission) -> "RBACSnapshot":
        return dataclasses.replace(
            self,
            catalog=self.catalog.with_permission(permission),
            version=self.version + 1,
        )

    def with_role(self, role: Role) -> "RBACSnapshot":
        roles = {**self.roles, role.id: role}
        return dataclasses.replace(self, roles=MappingProxyType(roles), version=self.version + 1)

    def without_role(self, role_id: str) -> "RBACSnapshot":
        roles = {k: v for k, v in self.roles.items() if k != role_id}
        return dataclasses.replace(self, roles=MappingProxyType(roles), version=self.version + 1)

    def with_assignment(self, assignment: UserRole) -> "RBACSnapshot":
        return dataclasses.replace(
            self,
            assignments=self.assignments.with_assignment(assignment),
            version=self.version + 1,
        )

    def without_assignment(self, key: tuple) -> "RBACSnapshot":
        return dataclasses.replace(
            self,
            assignments=self.assignments.without_assignment(key),
            version=self.version + 1,
        )


__all__ = ["RBACSnapshot"]
