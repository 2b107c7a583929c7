"""Built-in permission catalog, system roles and role templates.

System entries are seeded into every engine at start-up and cannot be
modified or deleted afterwards.
"""

from __future__ import annotations

from mp_rbac.rbac.model import Permission, Role, RoleLevel, RoleTemplate, RoleType

PERMISSION_CATEGORIES: tuple[str, ...] = (
    "Tenant Management",
    "Workspace Management",
    "User Management",
    "Role Management",
    "Settings",
    "Audit & Compliance",
    "Dashboard",
    "Integrations",
)


def _p(id: str, name: str, description: str, action: str, resource: str, scope: str, category: str) -> Permission:
    return Permission(
        id=id,
        name=name,
        description=description,
        action=action,
        resource=resource,
        scope=scope,
        category=category,
        is_system=True,
    )


SYSTEM_PERMISSIONS: tuple[Permission, ...] = (
    # Tenant Management
    _p("tenant.create", "Create Tenant", "Create new tenants", "create", "tenant", "system", "Tenant Management"),
    _p("tenant.read", "View Tenant", "View tenant information", "read", "tenant", "tenant", "Tenant Management"),
    _p("tenant.update", "Update Tenant", "Modify tenant settings", "update", "tenant", "tenant", "Tenant Management"),
    _p("tenant.delete", "Delete Tenant", "Delete tenant", "delete", "tenant", "tenant", "Tenant Management"),
    _p("tenant.manage", "Manage Tenant", "Full tenant management access", "manage", "tenant", "tenant", "Tenant Management"),
    # Workspace Management
    _p("workspace.create", "Create Workspace", "Create new workspaces", "create", "workspace", "tenant", "Workspace Management"),
    _p("workspace.read", "View Workspace", "View workspace information", "read", "workspace", "workspace", "Workspace Management"),
    _p("workspace.update", "Update Workspace", "Modify workspace settings", "update", "workspace", "workspace", "Workspace Management"),
    _p("workspace.delete", "Delete Workspace", "Delete workspace", "delete", "workspace", "workspace", "Workspace Management"),
    _p(
        "workspace.settings.manage",
        "Manage Workspace Settings",
        "Configure workspace settings",
        "manage",
        "workspace",
        "workspace",
        "Workspace Management",
    ),
    # User Management
    _p("user.create", "Create User", "Invite new users", "create", "user", "tenant", "User Management"),
    _p("user.read", "View Users", "View user information", "read", "user", "tenant", "User Management"),
    _p("user.update", "Update Users", "Modify user information", "update", "user", "tenant", "User Management"),
    _p("user.delete", "Remove Users", "Remove users from tenant", "delete", "user", "tenant", "User Management"),
    # Role Management
    _p("role.create", "Create Role", "Create custom roles", "create", "role", "tenant", "Role Management"),
    _p("role.read", "View Roles", "View role information", "read", "role", "tenant", "Role Management"),
    _p("role.update", "Update Roles", "Modify role permissions", "update", "role", "tenant", "Role Management"),
    _p("role.delete", "Delete Roles", "Delete custom roles", "delete", "role", "tenant", "Role Management"),
    _p("role.assign", "Assign Roles", "Assign roles to users", "assign", "role", "tenant", "Role Management"),
    # Settings
    _p("settings.tenant.read", "View Tenant Settings", "View tenant configuration", "read", "settings", "tenant", "Settings"),
    _p("settings.tenant.update", "Update Tenant Settings", "Modify tenant configuration", "update", "settings", "tenant", "Settings"),
    # Audit & Compliance
    _p("audit.read", "View Audit Logs", "Access audit trail", "read", "audit", "tenant", "Audit & Compliance"),
    _p("audit.export", "Export Audit Logs", "Export audit data", "export", "audit", "tenant", "Audit & Compliance"),
    # Dashboard
    _p("dashboard.read", "View Dashboard", "Access dashboard and analytics", "read", "dashboard", "workspace", "Dashboard"),
    _p("dashboard.export", "Export Dashboard Data", "Export dashboard reports", "export", "dashboard", "workspace", "Dashboard"),
    # Integrations
    _p("integration.read", "View Integrations", "View connected integrations", "read", "integration", "workspace", "Integrations"),
    _p("integration.manage", "Manage Integrations", "Configure integrations", "manage", "integration", "workspace", "Integrations"),
)


def _r(
    id: str,
    name: str,
    description: str,
    type: RoleType,
    level: RoleLevel,
    permissions: tuple[str, ...],
    *,
    is_default: bool = True,
) -> Role:
    return Role(
        id=id,
        name=name,
        description=description,
        permissions=frozenset(permissions),
        is_system=True,
        type=type,
        level=level,
        is_default=is_default,
    )


SYSTEM_ROLES: tuple[Role, ...] = (
    _r(
        "system-owner",
        "System Owner",
        "Full system access and administration",
        RoleType.SYSTEM,
        RoleLevel.OWNER,
        tuple(p.id for p in SYSTEM_PERMISSIONS),
        is_default=False,
    ),
    _r(
        "tenant-owner",
        "Tenant Owner",
        "Full tenant access and management",
        RoleType.TENANT,
        RoleLevel.OWNER,
        (
            "tenant.read", "tenant.update", "tenant.manage",
            "workspace.create", "workspace.read", "workspace.update", "workspace.delete", "workspace.settings.manage",
            "user.create", "user.read", "user.update", "user.delete",
            "role.create", "role.read", "role.update", "role.delete", "role.assign",
            "settings.tenant.read", "settings.tenant.update",
            "audit.read", "audit.export",
            "dashboard.read", "dashboard.export",
            "integration.read", "integration.manage",
        ),
    ),
    _r(
        "tenant-admin",
        "Tenant Admin",
        "Tenant administration without billing access",
        RoleType.TENANT,
        RoleLevel.ADMIN,
        (
            "tenant.read",
            "workspace.create", "workspace.read", "workspace.update", "workspace.delete", "workspace.settings.manage",
            "user.create", "user.read", "user.update", "user.delete",
            "role.read", "role.assign",
            "settings.tenant.read",
            "audit.read",
            "dashboard.read", "dashboard.export",
            "integration.read", "integration.manage",
        ),
    ),
    _r(
        "tenant-manager",
        "Tenant Manager",
        "Workspace and user management",
        RoleType.TENANT,
        RoleLevel.MANAGER,
        (
            "tenant.read",
            "workspace.create", "workspace.read", "workspace.update", "workspace.settings.manage",
            "user.create", "user.read", "user.update",
            "role.read",
            "settings.tenant.read",
            "dashboard.read",
            "integration.read",
        ),
    ),
    _r(
        "tenant-member",
        "Tenant Member",
        "Basic tenant access",
        RoleType.TENANT,
        RoleLevel.MEMBER,
        ("tenant.read", "workspace.read", "user.read", "dashboard.read"),
    ),
    _r(
        "workspace-admin",
        "Workspace Admin",
        "Full workspace management",
        RoleType.WORKSPACE,
        RoleLevel.ADMIN,
        (
            "workspace.read", "workspace.update", "workspace.settings.manage",
            "user.read",
            "dashboard.read", "dashboard.export",
            "integration.read", "integration.manage",
        ),
    ),
    _r(
        "workspace-editor",
        "Workspace Editor",
        "Edit workspace content",
        RoleType.WORKSPACE,
        RoleLevel.MEMBER,
        ("workspace.read", "workspace.update", "dashboard.read", "integration.read"),
    ),
    _r(
        "workspace-viewer",
        "Workspace Viewer",
        "Read-only workspace access",
        RoleType.WORKSPACE,
        RoleLevel.VIEWER,
        ("workspace.read", "dashboard.read"),
    ),
)


ROLE_TEMPLATES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        id="template-developer",
        name="Developer",
        description="Development team member with workspace access",
        type=RoleType.WORKSPACE,
        level=RoleLevel.MEMBER,
        permissions=frozenset({"workspace.read", "workspace.update", "dashboard.read", "integration.read"}),
        category="Development",
    ),
    RoleTemplate(
        id="template-analyst",
        name="Data Analyst",
        description="Analytics and reporting specialist",
        type=RoleType.WORKSPACE,
        level=RoleLevel.MEMBER,
        permissions=frozenset({"workspace.read", "dashboard.read", "dashboard.export"}),
        category="Analytics",
    ),
    RoleTemplate(
        id="template-manager",
        name="Project Manager",
        description="Project management with workspace oversight",
        type=RoleType.WORKSPACE,
        level=RoleLevel.MANAGER,
        permissions=frozenset(
            {
                "workspace.read", "workspace.update", "workspace.settings.manage",
                "user.read",
                "dashboard.read", "dashboard.export",
                "integration.read",
            }
        ),
        category="Management",
    ),
    RoleTemplate(
        id="template-client",
        name="Client Access",
        description="External client with limited read access",
        type=RoleType.WORKSPACE,
        level=RoleLevel.VIEWER,
        permissions=frozenset({"workspace.read", "dashboard.read"}),
        category="External",
    ),
)


__all__ = [
    "PERMISSION_CATEGORIES",
    "ROLE_TEMPLATES",
    "SYSTEM_PERMISSIONS",
    "SYSTEM_ROLES",
]
