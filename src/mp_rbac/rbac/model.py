"""RBAC data model — permissions, roles, assignments, contexts and results.

All records are frozen dataclasses; the engine replaces them wholesale instead
of mutating them, which is what makes snapshot reads safe.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum


class Scope(str, Enum):
    """Breadth at which a permission or assignment applies, widest first."""

    SYSTEM = "system"
    TENANT = "tenant"
    WORKSPACE = "workspace"
    RESOURCE = "resource"


class PermissionAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    ASSIGN = "assign"
    EXPORT = "export"


class PermissionResource(str, Enum):
    TENANT = "tenant"
    WORKSPACE = "workspace"
    USER = "user"
    ROLE = "role"
    SETTINGS = "settings"
    AUDIT = "audit"
    DASHBOARD = "dashboard"
    INTEGRATION = "integration"


class RoleType(str, Enum):
    SYSTEM = "system"
    TENANT = "tenant"
    WORKSPACE = "workspace"
    CUSTOM = "custom"


class RoleLevel(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    VIEWER = "viewer"


class BulkOperator(str, Enum):
    AND = "AND"
    OR = "OR"


# ---------------------------------------------------------------------------
# Permission / Role
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class Permission:
    """Atomic ``(resource, action)`` grant identified by a dotted id.

    ``action``, ``resource`` and ``scope`` are plain strings: built-in
    entries such as ``workspace.settings.manage`` predate the validator's
    enums and are still legal catalog members.
    """

    id: str
    name: str
    action: str
    resource: str
    scope: str
    description: str = ""
    category: str = ""
    is_system: bool = False

    def __str__(self) -> str:
        return self.id


@dataclasses.dataclass(frozen=True)
class Role:
    """Named bundle of permission ids, optionally inheriting one parent role.

    Permission ids that are not in the catalog are kept but stay inert
    unless a wildcard or hierarchy rule makes them match.
    """

    id: str
    name: str
    description: str = ""
    permissions: frozenset[str] = frozenset()
    is_system: bool = False
    inherited_from: str | None = None
    type: RoleType = RoleType.CUSTOM
    level: RoleLevel = RoleLevel.MEMBER
    is_default: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of ids from callers; store a frozenset.
        if not isinstance(self.permissions, frozenset) and not isinstance(self.permissions, str):
            object.__setattr__(self, "permissions", frozenset(self.permissions))


@dataclasses.dataclass(frozen=True)
class RoleTemplate:
    """Blueprint for creating a custom role."""

    id: str
    name: str
    description: str
    type: RoleType
    level: RoleLevel
    permissions: frozenset[str]
    category: str
    is_built_in: bool = True


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class UserRole:
    """Binding of a role to a user within one scope instance.

    ``scope_id`` names the tenant, workspace or resource; it is absent for
    system assignments. Resource assignments also carry ``resource_type``.
    """

    user_id: str
    role_id: str
    scope: Scope
    scope_id: str | None = None
    resource_type: str | None = None
    assigned_at: datetime | None = None
    assigned_by: str = "system"

    @property
    def key(self) -> tuple[str, str, str, str | None, str | None]:
        scope = self.scope.value if isinstance(self.scope, Scope) else str(self.scope)
        resource_type = self.resource_type if scope == Scope.RESOURCE.value else None
        return (self.user_id, self.role_id, scope, self.scope_id, resource_type)


# ---------------------------------------------------------------------------
# Evaluation inputs / outputs
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class AccessContext:
    """Situational scope of a single evaluation.

    Example::

        ctx = AccessContext(user_id="u1", tenant_id="t1")
        ctx.scope  # Scope.TENANT
    """

    user_id: str
    tenant_id: str | None = None
    workspace_id: str | None = None
    resource_id: str | None = None
    resource_type: str | None = None

    @property
    def scope(self) -> Scope:
        from mp_rbac.rbac.scope import derive_scope

        return derive_scope(self)


@dataclasses.dataclass(frozen=True)
class PermissionResult:
    """Outcome of a single check. A denial is a normal result, not an error."""

    allowed: bool
    reason: str
    role: Role | None = None
    permission: Permission | None = None
    matched: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


@dataclasses.dataclass(frozen=True)
class BulkCheckResult:
    """Per-id results of a bulk check plus their AND/OR reduction."""

    allowed: bool
    operator: BulkOperator
    results: tuple[tuple[str, PermissionResult], ...] = ()

    def __bool__(self) -> bool:
        return self.allowed

    def denied(self) -> list[str]:
        """Return the permission ids that were not granted."""
        return [pid for pid, result in self.results if not result.allowed]


@dataclasses.dataclass(frozen=True)
class ContextualPermission:
    """Catalog permission annotated with grant status for one context."""

    permission: Permission
    granted: bool
    inherited_from: str | None = None
    tenant_id: str | None = None
    workspace_id: str | None = None
    resource_id: str | None = None
    resource_type: str | None = None

    @property
    def id(self) -> str:
        return self.permission.id

    @property
    def scope(self) -> str:
        return self.permission.scope


__all__ = [
    "AccessContext",
    "BulkCheckResult",
    "BulkOperator",
    "ContextualPermission",
    "Permission",
    "PermissionAction",
    "PermissionResource",
    "PermissionResult",
    "Role",
    "RoleLevel",
    "RoleTemplate",
    "RoleType",
    "Scope",
    "UserRole",
]
