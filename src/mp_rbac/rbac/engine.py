"""RBAC engine — the public service boundary.

:class:`RBACEngine` owns one immutable :class:`RBACSnapshot` that every read
uses, plus a write lock. A write validates against the current snapshot,
writes through to the repository, then publishes a new snapshot with a
single reference swap. Concurrent readers therefore see either the pre-write
or the post-write state in full, and never block on writers.

Example::

    engine = RBACEngine()
    engine.assign_role("u1", "tenant-member", Scope.TENANT, "t1", assigned_by="admin")
    engine.check(AccessContext(user_id="u1", tenant_id="t1"), "tenant.read").allowed  # True
"""

from __future__ import annotations

import dataclasses
import threading
from typing import Any, Iterable, Mapping

from mp_rbac.config import RBACSettings
from mp_rbac.kernel.errors import ConflictError, NotFoundError, ValidationError
from mp_rbac.kernel.time import Clock, SystemClock
from mp_rbac.observability.logging import get_logger
from mp_rbac.rbac.audit import AuditAction, AuditRecord, AuditSink, StructlogAuditSink
from mp_rbac.rbac.builtins import ROLE_TEMPLATES, SYSTEM_PERMISSIONS, SYSTEM_ROLES
from mp_rbac.rbac.evaluator import PolicyEvaluator, can_assign_role
from mp_rbac.rbac.model import (
    AccessContext,
    BulkCheckResult,
    BulkOperator,
    ContextualPermission,
    Permission,
    PermissionResult,
    Role,
    RoleLevel,
    RoleTemplate,
    RoleType,
    Scope,
    UserRole,
)
from mp_rbac.rbac.repository import InMemoryRBACRepository, RBACRepository
from mp_rbac.rbac.roles import descendants
from mp_rbac.rbac.scope import to_scope
from mp_rbac.rbac.serialization import dump_config, load_config, role_to_dict
from mp_rbac.rbac.snapshot import RBACSnapshot
from mp_rbac.rbac.validator import (
    ensure_valid,
    validate_assignment,
    validate_permission,
    validate_role,
)

logger = get_logger(__name__)

_UPDATABLE_ROLE_FIELDS = frozenset(
    {"name", "description", "permissions", "inherited_from", "type", "level", "is_default"}
)

CONFIG_SUBJECT = "rbac-config"


def _assignment_context(assignment: UserRole) -> AccessContext:
    scope = to_scope(assignment.scope)
    return AccessContext(
        user_id=assignment.user_id,
        tenant_id=assignment.scope_id if scope is Scope.TENANT else None,
        workspace_id=assignment.scope_id if scope is Scope.WORKSPACE else None,
        resource_id=assignment.scope_id if scope is Scope.RESOURCE else None,
        resource_type=assignment.resource_type if scope is Scope.RESOURCE else None,
    )


def _assignment_key(
    user_id: str,
    role_id: str,
    scope: Scope | str,
    scope_id: str | None,
    resource_type: str | None,
) -> tuple:
    resolved = to_scope(scope)
    if resolved is not Scope.RESOURCE:
        resource_type = None
    return (user_id, role_id, resolved.value if resolved else str(scope), scope_id, resource_type)


class RBACEngine:
    """Policy decision point plus the validator-gated management API.

    Parameters
    ----------
    repository:
        Durable storage; defaults to :class:`InMemoryRBACRepository`.
    audit_sink:
        Receives one :class:`AuditRecord` per mutation (and per check when
        ``settings.audit_checks``). Defaults to :class:`StructlogAuditSink`.
    settings:
        :class:`RBACSettings`; defaults to the dataclass defaults.
    clock:
        Timestamp source for roles, assignments and audit records.
    """

    def __init__(
        self,
        repository: RBACRepository | None = None,
        audit_sink: AuditSink | None = None,
        settings: RBACSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository if repository is not None else InMemoryRBACRepository()
        self._audit_sink = audit_sink if audit_sink is not None else StructlogAuditSink()
        self._settings = settings if settings is not None else RBACSettings()
        self._clock = clock if clock is not None else SystemClock()
        self._write_lock = threading.Lock()
        if self._settings.seed_builtins:
            self._seed_builtins()
        self._snapshot = RBACSnapshot.build(
            self._repository.list_permissions(),
            self._repository.list_roles(),
            self._repository.list_assignments(),
        )

    def _seed_builtins(self) -> None:
        known_permissions = {p.id for p in self._repository.list_permissions()}
        for permission in SYSTEM_PERMISSIONS:
            if permission.id not in known_permissions:
                self._repository.save_permission(permission)
        now = self._clock.now()
        for role in SYSTEM_ROLES:
            if self._repository.get_role(role.id) is None:
                self._repository.save_role(dataclasses.replace(role, created_at=now, updated_at=now))

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @property
    def settings(self) -> RBACSettings:
        return self._settings

    @property
    def snapshot(self) -> RBACSnapshot:
        """The currently published, immutable state."""
        return self._snapshot

    def evaluator(self) -> PolicyEvaluator:
        return PolicyEvaluator(self._snapshot)

    def _publish(self, snapshot: RBACSnapshot) -> None:
        self._snapshot = snapshot

    def _emit(self, record: AuditRecord) -> None:
        if self._settings.enable_audit_logging:
            self._audit_sink.record(record)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def check(self, context: AccessContext, permission_id: str | None) -> PermissionResult:
        result = self.evaluator().check(context, permission_id)
        if not result.allowed:
            logger.debug(
                "rbac.check.denied",
                user_id=context.user_id,
                permission=permission_id,
                reason=result.reason,
            )
        if self._settings.audit_checks:
            self._emit(
                AuditRecord(
                    action=AuditAction.CHECKED,
                    subject_id=permission_id or "",
                    actor_id=context.user_id,
                    context=context,
                    result=result.allowed,
                    occurred_at=self._clock.now(),
                )
            )
        return result

    def check_bulk(
        self,
        context: AccessContext,
        permission_ids: Iterable[str],
        operator: BulkOperator | str = BulkOperator.AND,
    ) -> BulkCheckResult:
        return self.evaluator().check_bulk(context, permission_ids, operator)

    def can_perform_action(self, context: AccessContext, action: str, resource: str) -> bool:
        return self.check(context, f"{resource}.{action}").allowed

    def effective_permissions(self, context: AccessContext) -> list[ContextualPermission]:
        return self.evaluator().effective_permissions(context)

    def user_permissions(self, context: AccessContext) -> frozenset[str]:
        return self.evaluator().user_permissions(context)

    def can_assign_role(self, actor: AccessContext, role_id: str, target: AccessContext) -> bool:
        """May *actor* hand out *role_id* within *target*?"""
        evaluator = self.evaluator()
        role = evaluator.snapshot.roles.get(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return can_assign_role(role, target, evaluator.user_permissions(actor))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_permissions(self, category: str | None = None) -> list[Permission]:
        catalog = self._snapshot.catalog
        return catalog.by_category(category) if category is not None else list(catalog)

    def list_roles(
        self,
        type: RoleType | str | None = None,
        *,
        scope: Scope | str | None = None,
    ) -> list[Role]:
        """Stored roles, optionally filtered by role type or by the scope a
        built-in role type targets (custom roles have no scope)."""
        roles = list(self._snapshot.roles.values())
        if type is not None:
            wanted = RoleType(type)
            roles = [r for r in roles if r.type is wanted]
        if scope is not None:
            resolved = to_scope(scope)
            roles = [r for r in roles if resolved is not None and r.type.value == resolved.value]
        return roles

    def get_role(self, role_id: str) -> Role:
        role = self._snapshot.roles.get(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return role

    def list_role_templates(self) -> list[RoleTemplate]:
        return list(ROLE_TEMPLATES)

    def get_user_roles(self, user_id: str) -> tuple[UserRole, ...]:
        return self._snapshot.assignments.for_user(user_id)

    def get_user_roles_in_scope(
        self,
        user_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
    ) -> list[UserRole]:
        return self._snapshot.assignments.in_scope(user_id, scope, scope_id)

    def has_role(
        self,
        user_id: str,
        role_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
    ) -> bool:
        return self._snapshot.assignments.has_role(user_id, role_id, scope, scope_id)

    # ------------------------------------------------------------------
    # Permission management
    # ------------------------------------------------------------------

    def register_permission(self, permission: Permission, *, actor_id: str = "system") -> Permission:
        """Add a custom permission to the catalog."""
        ensure_valid(validate_permission(permission), "permission")
        permission = dataclasses.replace(
            permission,
            action=str(getattr(permission.action, "value", permission.action)),
            resource=str(getattr(permission.resource, "value", permission.resource)),
            scope=str(getattr(permission.scope, "value", permission.scope)),
            is_system=False,
        )
        with self._write_lock:
            snapshot = self._snapshot.with_permission(permission)
            self._repository.save_permission(permission)
            self._publish(snapshot)
        logger.info("rbac.permission.registered", permission=permission.id, actor_id=actor_id)
        self._emit(
            AuditRecord(
                action=AuditAction.CREATED,
                subject_id=permission.id,
                actor_id=actor_id,
                occurred_at=self._clock.now(),
            )
        )
        return permission

    # ------------------------------------------------------------------
    # Role management
    # ------------------------------------------------------------------

    def create_role(self, role: Role, *, actor_id: str = "system") -> Role:
        """Admit a new custom role. ``is_system`` is always forced off."""
        if not isinstance(role.id, str) or not role.id.strip():
            raise ValidationError("Invalid role: Role id is required.", errors=["Role id is required."])
        with self._write_lock:
            current = self._snapshot
            if role.id in current.roles:
                raise ConflictError(f"Role '{role.id}' already exists")
            ensure_valid(validate_role(role, current.roles), "role")
            now = self._clock.now()
            role = dataclasses.replace(role, is_system=False, created_at=now, updated_at=now)
            self._repository.save_role(role)
            self._publish(current.with_role(role))
        logger.info("rbac.role.created", role_id=role.id, actor_id=actor_id, inherited_from=role.inherited_from)
        self._emit(
            AuditRecord(
                action=AuditAction.CREATED,
                subject_id=role.id,
                actor_id=actor_id,
                changes=role_to_dict(role),
                occurred_at=self._clock.now(),
            )
        )
        return role

    def create_role_from_template(
        self,
        template_id: str,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        actor_id: str = "system",
    ) -> Role:
        template = next((t for t in ROLE_TEMPLATES if t.id == template_id), None)
        if template is None:
            raise NotFoundError("Role template", template_id)
        return self.create_role(
            Role(
                id=role_id,
                name=name or template.name,
                description=description or template.description,
                permissions=template.permissions,
                type=RoleType.CUSTOM,
                level=template.level,
            ),
            actor_id=actor_id,
        )

    def update_role(self, role_id: str, *, actor_id: str = "system", **changes: Any) -> Role:
        """Replace selected fields of a custom role.

        Updatable fields: ``name``, ``description``, ``permissions``,
        ``inherited_from``, ``type``, ``level``, ``is_default``.
        """
        unknown = sorted(set(changes) - _UPDATABLE_ROLE_FIELDS)
        if unknown:
            message = f"Unknown or read-only role fields: {', '.join(unknown)}"
            raise ValidationError(message, errors=[message])
        if "permissions" in changes and isinstance(changes["permissions"], (list, tuple, set)):
            changes["permissions"] = frozenset(changes["permissions"])
        for field, enum_type in (("type", RoleType), ("level", RoleLevel)):
            if field in changes:
                try:
                    changes[field] = enum_type(changes[field])
                except ValueError as exc:
                    message = f"Invalid role {field}: {changes[field]!r}"
                    raise ValidationError(message, errors=[message]) from exc
        with self._write_lock:
            current = self._snapshot
            existing = current.roles.get(role_id)
            if existing is None:
                raise NotFoundError("Role", role_id)
            if existing.is_system:
                raise ConflictError(f"System role '{role_id}' cannot be modified")
            updated = dataclasses.replace(existing, **changes, updated_at=self._clock.now())
            ensure_valid(validate_role(updated, current.roles), "role")
            self._repository.save_role(updated)
            self._publish(current.with_role(updated))
        logger.info("rbac.role.updated", role_id=role_id, actor_id=actor_id, fields=sorted(changes))
        after = role_to_dict(updated)
        self._emit(
            AuditRecord(
                action=AuditAction.UPDATED,
                subject_id=role_id,
                actor_id=actor_id,
                changes={field: after[field] for field in sorted(changes)},
                occurred_at=self._clock.now(),
            )
        )
        return updated

    def delete_role(self, role_id: str, *, actor_id: str = "system") -> None:
        """Delete a custom role that nobody holds and no role inherits from."""
        with self._write_lock:
            current = self._snapshot
            role = current.roles.get(role_id)
            if role is None:
                raise NotFoundError("Role", role_id)
            if role.is_system:
                raise ConflictError(f"Cannot delete system role '{role_id}'")
            if current.assignments.has_assignments_for_role(role_id):
                raise ConflictError(f"Cannot delete role '{role_id}' with assigned users")
            children = descendants(role_id, current.roles)
            if children:
                raise ConflictError(
                    f"Cannot delete role '{role_id}': inherited by {', '.join(children)}"
                )
            self._repository.delete_role(role_id)
            self._publish(current.without_role(role_id))
        logger.info("rbac.role.deleted", role_id=role_id, actor_id=actor_id)
        self._emit(
            AuditRecord(
                action=AuditAction.DELETED,
                subject_id=role_id,
                actor_id=actor_id,
                occurred_at=self._clock.now(),
            )
        )

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    def assign_role(
        self,
        user_id: str,
        role_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
        *,
        resource_type: str | None = None,
        assigned_by: str = "system",
    ) -> UserRole:
        resolved = to_scope(scope)
        assignment = UserRole(
            user_id=user_id,
            role_id=role_id,
            scope=resolved if resolved is not None else scope,  # type: ignore[arg-type]
            scope_id=scope_id,
            resource_type=resource_type,
            assigned_at=self._clock.now(),
            assigned_by=assigned_by,
        )
        with self._write_lock:
            current = self._snapshot
            if role_id not in current.roles:
                raise NotFoundError("Role", role_id)
            ensure_valid(validate_assignment(assignment, current.roles), "role assignment")
            snapshot = current.with_assignment(assignment)
            self._repository.add_assignment(assignment)
            self._publish(snapshot)
        logger.info(
            "rbac.role.assigned",
            user=user_id,
            role_id=role_id,
            scope=assignment.key[2],
            scope_id=scope_id,
            actor_id=assigned_by,
        )
        self._emit(
            AuditRecord(
                action=AuditAction.GRANTED,
                subject_id=role_id,
                actor_id=assigned_by,
                context=_assignment_context(assignment),
                target_user_id=user_id,
                occurred_at=self._clock.now(),
            )
        )
        return assignment

    def remove_role(
        self,
        user_id: str,
        role_id: str,
        scope: Scope | str,
        scope_id: str | None = None,
        *,
        resource_type: str | None = None,
        actor_id: str = "system",
    ) -> UserRole:
        key = _assignment_key(user_id, role_id, scope, scope_id, resource_type)
        with self._write_lock:
            current = self._snapshot
            removed = current.assignments.find(key)
            if removed is None:
                raise NotFoundError("Role assignment", f"{user_id}/{role_id}/{key[2]}")
            snapshot = current.without_assignment(key)
            self._repository.remove_assignment(key)
            self._publish(snapshot)
        logger.info("rbac.role.removed", user=user_id, role_id=role_id, scope=key[2], scope_id=scope_id, actor_id=actor_id)
        self._emit(
            AuditRecord(
                action=AuditAction.REVOKED,
                subject_id=role_id,
                actor_id=actor_id,
                context=_assignment_context(removed),
                target_user_id=user_id,
                occurred_at=self._clock.now(),
            )
        )
        return removed

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_config(self) -> dict[str, Any]:
        snapshot = self._snapshot
        return dump_config(
            snapshot.catalog,
            snapshot.roles.values(),
            snapshot.assignments,
            exported_at=self._clock.now(),
        )

    def import_config(self, data: Mapping[str, Any], *, actor_id: str = "system") -> RBACSnapshot:
        """Replace custom permissions, custom roles and all assignments.

        System permissions and roles in *data* are ignored; the built-in
        definitions always win. The whole document is validated before
        anything is written.
        """
        permissions, roles, assignments = load_config(data)
        with self._write_lock:
            current = self._snapshot
            system_permissions = [p for p in current.catalog if p.is_system]
            system_roles = [r for r in current.roles.values() if r.is_system]

            custom_permissions = [p for p in permissions if not p.is_system]
            for permission in custom_permissions:
                ensure_valid(validate_permission(permission), f"permission '{permission.id}'")

            custom_roles = [r for r in roles if not r.is_system]
            role_map = {r.id: r for r in (*system_roles, *custom_roles)}
            if len(role_map) != len(system_roles) + len(custom_roles):
                raise ConflictError("Imported roles contain duplicate or system ids")
            for role in custom_roles:
                ensure_valid(validate_role(role, role_map), f"role '{role.id}'")
            for assignment in assignments:
                ensure_valid(validate_assignment(assignment, role_map), "role assignment")

            snapshot = RBACSnapshot.build(
                (*system_permissions, *custom_permissions),
                role_map.values(),
                assignments,
            )
            snapshot = dataclasses.replace(snapshot, version=current.version + 1)
            self._repository.replace_all(snapshot.catalog, snapshot.roles.values(), snapshot.assignments)
            self._publish(snapshot)
        logger.info(
            "rbac.config.imported",
            actor_id=actor_id,
            permissions=len(custom_permissions),
            roles=len(custom_roles),
            assignments=len(assignments),
        )
        self._emit(
            AuditRecord(
                action=AuditAction.UPDATED,
                subject_id=CONFIG_SUBJECT,
                actor_id=actor_id,
                changes={
                    "permissions": len(custom_permissions),
                    "roles": len(custom_roles),
                    "assignments": len(assignments),
                },
                occurred_at=self._clock.now(),
            )
        )
        return snapshot


__all__ = ["CONFIG_SUBJECT", "RBACEngine"]
