"""Unit tests for the role graph."""

from __future__ import annotations

from mp_rbac.rbac.model import Role
from mp_rbac.rbac.roles import (
    ancestors,
    descendants,
    expand_permissions,
    has_cycle,
    inherits_from,
    permission_chain,
)


def _role(role_id: str, permissions: set[str], parent: str | None = None) -> Role:
    return Role(
        id=role_id,
        name=role_id.upper(),
        description=f"role {role_id}",
        permissions=frozenset(permissions),
        inherited_from=parent,
    )


def _chain() -> dict[str, Role]:
    roles = [_role("a", {"p1"}), _role("b", {"p2"}, "a"), _role("c", {"p3"}, "b")]
    return {r.id: r for r in roles}


def _loop() -> dict[str, Role]:
    roles = [_role("x", {"px"}, "y"), _role("y", {"py"}, "x")]
    return {r.id: r for r in roles}


class TestExpandPermissions:
    def test_transitive_closure(self) -> None:
        assert expand_permissions("c", _chain()) == {"p1", "p2", "p3"}

    def test_root_has_only_its_own(self) -> None:
        assert expand_permissions("a", _chain()) == {"p1"}

    def test_unknown_role_is_empty(self) -> None:
        assert expand_permissions("ghost", _chain()) == frozenset()

    def test_missing_parent_truncates(self) -> None:
        roles = {"orphan": _role("orphan", {"p9"}, "gone")}
        assert expand_permissions("orphan", roles) == {"p9"}

    def test_cycle_terminates(self) -> None:
        assert expand_permissions("x", _loop()) == {"px", "py"}


class TestPermissionChain:
    def test_nearest_role_first(self) -> None:
        roles = _chain()
        roles["c"] = _role("c", {"p3", "p1"}, "b")
        assert permission_chain("c", roles) == ("p1", "p3", "p2")

    def test_ancestors_nearest_first(self) -> None:
        assert ancestors("c", _chain()) == ("b", "a")

    def test_descendants(self) -> None:
        assert descendants("a", _chain()) == ("b", "c")
        assert descendants("c", _chain()) == ()


class TestHasCycle:
    def test_mutual_inheritance(self) -> None:
        roles = _loop()
        assert has_cycle(roles["x"], roles) is True
        assert has_cycle(roles["y"], roles) is True

    def test_self_parent(self) -> None:
        role = _role("s", set(), "s")
        assert has_cycle(role, {}) is True

    def test_linear_chain_is_fine(self) -> None:
        roles = _chain()
        assert not any(has_cycle(r, roles) for r in roles.values())

    def test_candidate_shadows_stored_version(self) -> None:
        roles = _chain()
        candidate = _role("a", {"p1"}, "c")
        assert has_cycle(candidate, roles) is True


class TestInheritsFrom:
    def test_direct_parent_only(self) -> None:
        roles = _chain()
        assert inherits_from(roles["c"], "b")
        assert not inherits_from(roles["c"], "a")
