"""RBAC – scopes, matcher, role graph, evaluator, engine, audit and storage."""
from mp_rbac.rbac.model import (
    AccessContext,
    BulkCheckResult,
    BulkOperator,
    ContextualPermission,
    Permission,
    PermissionAction,
    PermissionResource,
    PermissionResult,
    Role,
    RoleLevel,
    RoleTemplate,
    RoleType,
    Scope,
    UserRole,
)
from mp_rbac.rbac.scope import (
    SCOPE_ORDER,
    applicable_permissions,
    build_context,
    derive_scope,
    inherited_permissions,
    is_applicable,
    is_within,
    scope_contains,
)
from mp_rbac.rbac.matcher import covers, find_matching, has_all, has_any, has_permission, matches
from mp_rbac.rbac.roles import ancestors, expand_permissions, has_cycle, inherits_from, permission_chain
from mp_rbac.rbac.builtins import PERMISSION_CATEGORIES, ROLE_TEMPLATES, SYSTEM_PERMISSIONS, SYSTEM_ROLES
from mp_rbac.rbac.catalog import PermissionCatalog
from mp_rbac.rbac.assignments import RoleAssignmentStore
from mp_rbac.rbac.validator import (
    ensure_valid,
    validate_assignment,
    validate_permission,
    validate_role,
)
from mp_rbac.rbac.snapshot import RBACSnapshot
from mp_rbac.rbac.evaluator import PolicyEvaluator, can_assign_role
from mp_rbac.rbac.audit import (
    AuditAction,
    AuditRecord,
    AuditSink,
    InMemoryAuditSink,
    StructlogAuditSink,
)
from mp_rbac.rbac.repository import InMemoryRBACRepository, JsonFileRBACRepository, RBACRepository
from mp_rbac.rbac.engine import RBACEngine
from mp_rbac.rbac.guards import SecurityContext, require_permission

__all__ = [
    "AccessContext",
    "AuditAction",
    "AuditRecord",
    "AuditSink",
    "BulkCheckResult",
    "BulkOperator",
    "ContextualPermission",
    "InMemoryAuditSink",
    "InMemoryRBACRepository",
    "JsonFileRBACRepository",
    "PERMISSION_CATEGORIES",
    "Permission",
    "PermissionAction",
    "PermissionCatalog",
    "PermissionResource",
    "PermissionResult",
    "PolicyEvaluator",
    "RBACEngine",
    "RBACRepository",
    "RBACSnapshot",
    "ROLE_TEMPLATES",
    "Role",
    "RoleAssignmentStore",
    "RoleLevel",
    "RoleTemplate",
    "RoleType",
    "SCOPE_ORDER",
    "SYSTEM_PERMISSIONS",
    "SYSTEM_ROLES",
    "Scope",
    "SecurityContext",
    "StructlogAuditSink",
    "UserRole",
    "ancestors",
    "applicable_permissions",
    "build_context",
    "can_assign_role",
    "covers",
    "derive_scope",
    "ensure_valid",
    "expand_permissions",
    "find_matching",
    "has_all",
    "has_any",
    "has_cycle",
    "has_permission",
    "inherited_permissions",
    "inherits_from",
    "is_applicable",
    "is_within",
    "matches",
    "permission_chain",
    "require_permission",
    "scope_contains",
    "validate_assignment",
    "validate_permission",
    "validate_role",
]
