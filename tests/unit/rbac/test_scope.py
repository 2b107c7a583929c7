"""Unit tests for the scope hierarchy and context helpers."""

from __future__ import annotations

import itertools

import pytest

from mp_rbac.rbac.builtins import SYSTEM_PERMISSIONS
from mp_rbac.rbac.model import AccessContext, ContextualPermission, Scope
from mp_rbac.rbac.scope import (
    ANONYMOUS_USER,
    SCOPE_ORDER,
    applicable_permissions,
    build_context,
    derive_scope,
    inherited_permissions,
    is_applicable,
    is_within,
    scope_contains,
    to_scope,
)


def _perm(pid: str, **kw: str) -> ContextualPermission:
    permission = next(p for p in SYSTEM_PERMISSIONS if p.id == pid)
    return ContextualPermission(permission=permission, granted=True, **kw)


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------


class TestScopeContains:
    @pytest.mark.parametrize("scope", list(Scope))
    def test_reflexive(self, scope: Scope) -> None:
        assert scope_contains(scope, scope) is True

    def test_total_order(self) -> None:
        for a, b in itertools.product(SCOPE_ORDER, repeat=2):
            assert scope_contains(a, b) or scope_contains(b, a)
            if a is not b:
                assert scope_contains(a, b) != scope_contains(b, a)

    def test_order_is_widest_first(self) -> None:
        assert scope_contains(Scope.SYSTEM, Scope.RESOURCE)
        assert scope_contains(Scope.TENANT, Scope.WORKSPACE)
        assert not scope_contains(Scope.WORKSPACE, Scope.TENANT)

    def test_accepts_plain_strings(self) -> None:
        assert scope_contains("tenant", "workspace")

    def test_unknown_scope_is_never_contained(self) -> None:
        assert scope_contains("galaxy", "tenant") is False
        assert scope_contains("tenant", "galaxy") is False
        assert to_scope("galaxy") is None
        assert to_scope(None) is None


# ---------------------------------------------------------------------------
# Applicability
# ---------------------------------------------------------------------------


class TestIsApplicable:
    def test_system_always_applies(self) -> None:
        assert is_applicable(Scope.SYSTEM, AccessContext(user_id="u"))

    def test_tenant_requires_matching_id(self) -> None:
        ctx = AccessContext(user_id="u", tenant_id="t1")
        assert is_applicable(Scope.TENANT, ctx, tenant_id="t1")
        assert not is_applicable(Scope.TENANT, ctx, tenant_id="t2")

    def test_workspace_requires_matching_id(self) -> None:
        ctx = AccessContext(user_id="u", tenant_id="t1", workspace_id="w1")
        assert is_applicable(Scope.WORKSPACE, ctx, workspace_id="w1")
        assert not is_applicable(Scope.WORKSPACE, ctx, workspace_id="w2")

    def test_resource_requires_id_and_type(self) -> None:
        ctx = AccessContext(user_id="u", resource_id="r1", resource_type="dashboard")
        assert is_applicable(Scope.RESOURCE, ctx, resource_id="r1", resource_type="dashboard")
        assert not is_applicable(Scope.RESOURCE, ctx, resource_id="r1", resource_type="report")

    def test_unknown_scope_fails_closed(self) -> None:
        assert not is_applicable("galaxy", AccessContext(user_id="u"))


class TestDeriveScope:
    def test_narrowest_wins(self) -> None:
        assert derive_scope(AccessContext(user_id="u")) is Scope.SYSTEM
        assert derive_scope(AccessContext(user_id="u", tenant_id="t")) is Scope.TENANT
        assert derive_scope(AccessContext(user_id="u", tenant_id="t", workspace_id="w")) is Scope.WORKSPACE
        assert (
            AccessContext(user_id="u", workspace_id="w", resource_id="r", resource_type="x").scope
            is Scope.RESOURCE
        )

    def test_resource_id_without_type_is_not_resource_scope(self) -> None:
        assert derive_scope(AccessContext(user_id="u", workspace_id="w", resource_id="r")) is Scope.WORKSPACE


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


class TestBuildContext:
    def test_overrides_merge_over_base(self) -> None:
        base = AccessContext(user_id="u1", tenant_id="t1")
        ctx = build_context(base, workspace_id="w1")
        assert ctx == AccessContext(user_id="u1", tenant_id="t1", workspace_id="w1")

    def test_empty_override_falls_through(self) -> None:
        base = AccessContext(user_id="u1", tenant_id="t1")
        assert build_context(base, tenant_id="").tenant_id == "t1"

    def test_defaults_to_anonymous(self) -> None:
        assert build_context().user_id == ANONYMOUS_USER

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(TypeError):
            build_context(project_id="p1")


class TestIsWithin:
    def test_child_inside_parent(self) -> None:
        parent = AccessContext(user_id="u", tenant_id="t1")
        child = AccessContext(user_id="u", tenant_id="t1", workspace_id="w1")
        assert is_within(child, parent)
        assert not is_within(parent, child)

    def test_different_tenant(self) -> None:
        parent = AccessContext(user_id="u", tenant_id="t1")
        assert not is_within(AccessContext(user_id="u", tenant_id="t2"), parent)


class TestPermissionFiltering:
    def test_inherited_permissions_by_declared_scope(self) -> None:
        perms = [_perm("tenant.create"), _perm("tenant.read"), _perm("dashboard.read")]
        ids = [p.id for p in inherited_permissions(perms, Scope.TENANT)]
        assert ids == ["tenant.create", "tenant.read"]

    def test_applicable_permissions_by_scope_ids(self) -> None:
        perms = [
            _perm("tenant.read", tenant_id="t1"),
            _perm("tenant.update", tenant_id="t2"),
            _perm("tenant.create"),
        ]
        ctx = AccessContext(user_id="u", tenant_id="t1")
        assert [p.id for p in applicable_permissions(perms, ctx)] == ["tenant.read", "tenant.create"]
