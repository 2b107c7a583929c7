"""Unit tests for SecurityContext and @require_permission."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from mp_rbac.kernel.errors import ForbiddenError, UnauthorizedError
from mp_rbac.rbac import AccessContext, InMemoryAuditSink, RBACEngine, Scope
from mp_rbac.rbac.guards import SecurityContext, require_permission


@pytest.fixture(autouse=True)
def _clear_context() -> Any:
    SecurityContext.clear()
    yield
    SecurityContext.clear()


def _engine() -> RBACEngine:
    engine = RBACEngine(audit_sink=InMemoryAuditSink())
    engine.assign_role("u1", "workspace-viewer", Scope.WORKSPACE, "w1")
    return engine


VIEWER = AccessContext(user_id="u1", tenant_id="t1", workspace_id="w1")


# ---------------------------------------------------------------------------
# SecurityContext
# ---------------------------------------------------------------------------


class TestSecurityContext:
    def test_set_and_get(self) -> None:
        SecurityContext.set_current(VIEWER)
        assert SecurityContext.get_current() is VIEWER

    def test_clear(self) -> None:
        SecurityContext.set_current(VIEWER)
        SecurityContext.clear()
        assert SecurityContext.get_current() is None

    def test_require_raises_when_empty(self) -> None:
        with pytest.raises(UnauthorizedError):
            SecurityContext.require()

    def test_scope_restores_previous(self) -> None:
        outer = AccessContext(user_id="outer")
        SecurityContext.set_current(outer)
        with SecurityContext.scope(VIEWER) as bound:
            assert bound is VIEWER
            assert SecurityContext.require() is VIEWER
        assert SecurityContext.get_current() is outer

    def test_task_isolation(self) -> None:
        seen: dict[str, AccessContext | None] = {}

        async def task(name: str, ctx: AccessContext) -> None:
            SecurityContext.set_current(ctx)
            await asyncio.sleep(0)
            seen[name] = SecurityContext.get_current()

        async def _run() -> None:
            await asyncio.gather(task("a", VIEWER), task("b", AccessContext(user_id="u2")))

        asyncio.run(_run())
        assert seen["a"] is VIEWER
        assert seen["b"] is not None and seen["b"].user_id == "u2"


# ---------------------------------------------------------------------------
# require_permission
# ---------------------------------------------------------------------------


class TestRequirePermission:
    def test_sync_allowed(self) -> None:
        engine = _engine()

        @require_permission(engine, "dashboard.read")
        def open_dashboard(name: str) -> str:
            return f"opened {name}"

        with SecurityContext.scope(VIEWER):
            assert open_dashboard("sales") == "opened sales"
        assert open_dashboard.__name__ == "open_dashboard"

    def test_sync_denied(self) -> None:
        engine = _engine()

        @require_permission(engine, "workspace.delete")
        def drop_workspace() -> None:
            raise AssertionError("must not run")

        with SecurityContext.scope(VIEWER):
            with pytest.raises(ForbiddenError) as exc_info:
                drop_workspace()
        assert exc_info.value.permission == "workspace.delete"
        assert "workspace" in exc_info.value.message

    def test_no_context(self) -> None:
        engine = _engine()

        @require_permission(engine, "dashboard.read")
        def open_dashboard() -> None: ...

        with pytest.raises(UnauthorizedError):
            open_dashboard()

    def test_async(self) -> None:
        engine = _engine()

        @require_permission(engine, "dashboard.read")
        async def load() -> str:
            return "ok"

        @require_permission(engine, "dashboard.export")
        async def export() -> str:
            return "exported"

        async def _run() -> None:
            with SecurityContext.scope(VIEWER):
                assert await load() == "ok"
                with pytest.raises(ForbiddenError):
                    await export()

        asyncio.run(_run())

    def test_decision_follows_live_assignments(self) -> None:
        engine = _engine()

        @require_permission(engine, "dashboard.export")
        def export() -> str:
            return "exported"

        with SecurityContext.scope(VIEWER):
            with pytest.raises(ForbiddenError):
                export()
            engine.assign_role("u1", "workspace-admin", Scope.WORKSPACE, "w1")
            assert export() == "exported"
