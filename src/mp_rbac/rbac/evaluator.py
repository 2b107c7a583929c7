"""Policy evaluator — turns a snapshot into allow / deny decisions.

Algorithm for :meth:`PolicyEvaluator.check`:

1. Fetch the user's assignments.
2. Visit them in fixed scope order: system → tenant → workspace → resource.
   Within one scope, assignment insertion order is kept.
3. Skip assignments that do not apply to the context (tenant/workspace/
   resource ids must match; system always applies).
4. Walk the assigned role's permission chain (own permissions first, then
   ancestors') and stop at the first granted id that covers the request
   (see :func:`mp_rbac.rbac.matcher.covers`).

Everything here is synchronous, side-effect free and never raises for a
well-formed :class:`AccessContext`.
"""

from __future__ import annotations

from typing import Iterable

from mp_rbac.rbac.matcher import covers, has_permission, split_permission_id
from mp_rbac.rbac.model import (
    AccessContext,
    BulkCheckResult,
    BulkOperator,
    ContextualPermission,
    PermissionResult,
    Role,
    Scope,
    UserRole,
)
from mp_rbac.rbac.roles import expand_permissions, permission_chain
from mp_rbac.rbac.scope import SCOPE_ORDER, derive_scope, is_applicable, to_scope
from mp_rbac.rbac.snapshot import RBACSnapshot


def assignment_applies(assignment: UserRole, context: AccessContext) -> bool:
    """Is *assignment* in force for *context*?"""
    scope = to_scope(assignment.scope)
    if scope is None:
        return False
    if scope is not Scope.SYSTEM and not assignment.scope_id:
        return False
    return is_applicable(
        scope,
        context,
        tenant_id=assignment.scope_id if scope is Scope.TENANT else None,
        workspace_id=assignment.scope_id if scope is Scope.WORKSPACE else None,
        resource_id=assignment.scope_id if scope is Scope.RESOURCE else None,
        resource_type=assignment.resource_type if scope is Scope.RESOURCE else None,
    )


class PolicyEvaluator:
    """Read-only decision functions over one :class:`RBACSnapshot`."""

    def __init__(self, snapshot: RBACSnapshot) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> RBACSnapshot:
        return self._snapshot

    # ------------------------------------------------------------------
    # Assignment resolution
    # ------------------------------------------------------------------

    def qualifying_assignments(self, context: AccessContext) -> list[UserRole]:
        """Assignments in force for *context*, in evaluation order."""
        assignments = self._snapshot.assignments.for_user(context.user_id)
        ordered: list[UserRole] = []
        for scope in SCOPE_ORDER:
            ordered.extend(
                a
                for a in assignments
                if to_scope(a.scope) is scope and assignment_applies(a, context)
            )
        return ordered

    def roles_for(self, context: AccessContext) -> list[Role]:
        """Distinct stored roles behind the qualifying assignments."""
        seen: dict[str, Role] = {}
        for assignment in self.qualifying_assignments(context):
            role = self._snapshot.roles.get(assignment.role_id)
            if role is not None:
                seen.setdefault(role.id, role)
        return list(seen.values())

    def user_permissions(self, context: AccessContext) -> frozenset[str]:
        """Union of expanded permission ids over every role in force."""
        granted: set[str] = set()
        for role in self.roles_for(context):
            granted |= expand_permissions(role.id, self._snapshot.roles)
        return frozenset(granted)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def _find_grant(self, context: AccessContext, permission_id: str) -> tuple[Role, str] | None:
        roles = self._snapshot.roles
        for assignment in self.qualifying_assignments(context):
            role = roles.get(assignment.role_id)
            if role is None:
                continue
            for granted in permission_chain(role.id, roles):
                if covers(granted, permission_id):
                    return role, granted
        return None

    def check(self, context: AccessContext, permission_id: str | None) -> PermissionResult:
        if not permission_id:
            return PermissionResult(allowed=False, reason="No permission requested")

        grant = self._find_grant(context, permission_id)
        if grant is None:
            resource, action = split_permission_id(permission_id)
            return PermissionResult(
                allowed=False,
                reason=f"No permission found for resource '{resource}' and action '{action}'",
            )

        role, granted = grant
        catalog = self._snapshot.catalog
        return PermissionResult(
            allowed=True,
            reason=f"Granted by role '{role.id}' via '{granted}'",
            role=role,
            permission=catalog.get(granted) or catalog.get(permission_id),
            matched=granted,
        )

    def check_bulk(
        self,
        context: AccessContext,
        permission_ids: Iterable[str],
        operator: BulkOperator | str = BulkOperator.AND,
    ) -> BulkCheckResult:
        """Check every id, then reduce with AND / OR.

        An empty request list is denied under both operators.
        """
        op = BulkOperator(operator)
        results = tuple((pid, self.check(context, pid)) for pid in permission_ids)
        if not results:
            allowed = False
        elif op is BulkOperator.AND:
            allowed = all(r.allowed for _, r in results)
        else:
            allowed = any(r.allowed for _, r in results)
        return BulkCheckResult(allowed=allowed, operator=op, results=results)

    def can_perform_action(self, context: AccessContext, action: str, resource: str) -> bool:
        return self.check(context, f"{resource}.{action}").allowed

    def effective_permissions(self, context: AccessContext) -> list[ContextualPermission]:
        """Every catalog permission annotated with its grant status."""
        annotated: list[ContextualPermission] = []
        for permission in self._snapshot.catalog:
            grant = self._find_grant(context, permission.id)
            annotated.append(
                ContextualPermission(
                    permission=permission,
                    granted=grant is not None,
                    inherited_from=grant[0].id if grant is not None else None,
                    tenant_id=context.tenant_id,
                    workspace_id=context.workspace_id,
                    resource_id=context.resource_id,
                    resource_type=context.resource_type,
                )
            )
        return annotated


def can_assign_role(role: Role, context: AccessContext, actor_permissions: Iterable[str]) -> bool:
    """May an actor holding *actor_permissions* hand out *role* in *context*?

    System roles need ``system.manage``; every assignment needs
    ``role.assign``; tenant / workspace contexts additionally need
    ``tenant.manage`` / ``workspace.manage``.
    """
    granted = tuple(actor_permissions)
    if role.is_system and not has_permission(granted, "system.manage"):
        return False
    if not has_permission(granted, "role.assign"):
        return False
    scope = derive_scope(context)
    if scope is Scope.TENANT:
        return has_permission(granted, "tenant.manage")
    if scope is Scope.WORKSPACE:
        return has_permission(granted, "workspace.manage")
    return True


__all__ = ["PolicyEvaluator", "assignment_applies", "can_assign_role"]
