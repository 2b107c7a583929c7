"""Scope hierarchy — containment, applicability and context helpers.

Scopes form a total order, widest first::

    system ⊇ tenant ⊇ workspace ⊇ resource

Every function here is pure and total: an unrecognised scope is simply
"not applicable" / "not contained".
"""

from __future__ import annotations

import dataclasses
from typing import Iterable

from mp_rbac.rbac.model import AccessContext, ContextualPermission, Scope

SCOPE_ORDER: tuple[Scope, ...] = (
    Scope.SYSTEM,
    Scope.TENANT,
    Scope.WORKSPACE,
    Scope.RESOURCE,
)

ANONYMOUS_USER = "anonymous"


def to_scope(value: Scope | str | None) -> Scope | None:
    """Coerce *value* to :class:`Scope`, returning ``None`` when unknown."""
    if isinstance(value, Scope):
        return value
    try:
        return Scope(value)
    except (TypeError, ValueError):
        return None


def scope_index(value: Scope | str) -> int | None:
    scope = to_scope(value)
    return None if scope is None else SCOPE_ORDER.index(scope)


def scope_contains(parent: Scope | str, child: Scope | str) -> bool:
    """Return ``True`` if *parent* is as wide as or wider than *child*."""
    parent_index = scope_index(parent)
    child_index = scope_index(child)
    if parent_index is None or child_index is None:
        return False
    return parent_index <= child_index


def is_applicable(
    scope: Scope | str,
    context: AccessContext,
    *,
    tenant_id: str | None = None,
    workspace_id: str | None = None,
    resource_id: str | None = None,
    resource_type: str | None = None,
) -> bool:
    """Does something declared at *scope* (with the given scope ids) apply to *context*?

    * system — always.
    * tenant — iff ``tenant_id == context.tenant_id``.
    * workspace — iff ``workspace_id == context.workspace_id``.
    * resource — iff both ``resource_id`` and ``resource_type`` match.
    * anything else — never.
    """
    resolved = to_scope(scope)
    if resolved is Scope.SYSTEM:
        return True
    if resolved is Scope.TENANT:
        return tenant_id == context.tenant_id
    if resolved is Scope.WORKSPACE:
        return workspace_id == context.workspace_id
    if resolved is Scope.RESOURCE:
        return (
            resource_id == context.resource_id
            and resource_type == context.resource_type
        )
    return False


def derive_scope(context: AccessContext) -> Scope:
    """Narrowest scope the context describes."""
    if context.resource_id and context.resource_type:
        return Scope.RESOURCE
    if context.workspace_id:
        return Scope.WORKSPACE
    if context.tenant_id:
        return Scope.TENANT
    return Scope.SYSTEM


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def build_context(base: AccessContext | None = None, **overrides: str | None) -> AccessContext:
    """Merge *overrides* over *base*; empty values fall through to the base.

    A context without any user id is attributed to ``"anonymous"``.
    """
    fields = {f.name: None for f in dataclasses.fields(AccessContext)}
    if base is not None:
        fields.update(dataclasses.asdict(base))
    for name, value in overrides.items():
        if name not in fields:
            raise TypeError(f"unknown AccessContext field {name!r}")
        if value:
            fields[name] = value
    fields["user_id"] = fields["user_id"] or ANONYMOUS_USER
    return AccessContext(**fields)


def is_within(child: AccessContext, parent: AccessContext) -> bool:
    """Return ``True`` if *child* sits inside every scope *parent* pins down."""
    if parent.tenant_id and child.tenant_id != parent.tenant_id:
        return False
    if parent.workspace_id and child.workspace_id != parent.workspace_id:
        return False
    if parent.resource_id and (
        child.resource_id != parent.resource_id
        or child.resource_type != parent.resource_type
    ):
        return False
    return True


def inherited_permissions(
    permissions: Iterable[ContextualPermission],
    target_scope: Scope | str,
) -> list[ContextualPermission]:
    """Permissions declared at a scope that contains *target_scope*."""
    return [p for p in permissions if scope_contains(p.scope, target_scope)]


def applicable_permissions(
    permissions: Iterable[ContextualPermission],
    context: AccessContext,
) -> list[ContextualPermission]:
    """Permissions whose declared scope and scope ids apply to *context*."""
    return [
        p
        for p in permissions
        if is_applicable(
            p.scope,
            context,
            tenant_id=p.tenant_id,
            workspace_id=p.workspace_id,
            resource_id=p.resource_id,
            resource_type=p.resource_type,
        )
    ]


__all__ = [
    "ANONYMOUS_USER",
    "SCOPE_ORDER",
    "applicable_permissions",
    "build_context",
    "derive_scope",
    "inherited_permissions",
    "is_applicable",
    "is_within",
    "scope_contains",
    "scope_index",
    "to_scope",
]
