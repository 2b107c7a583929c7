"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest
import structlog

from mp_rbac.observability.logging import AccessContextProcessor, configure_logging, get_logger
from mp_rbac.rbac.guards import SecurityContext
from mp_rbac.rbac.model import AccessContext


@pytest.fixture(autouse=True)
def _reset_structlog() -> Any:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
    SecurityContext.clear()


# ---------------------------------------------------------------------------
# AccessContextProcessor
# ---------------------------------------------------------------------------


class TestAccessContextProcessor:
    def test_no_context_leaves_event_untouched(self) -> None:
        SecurityContext.clear()
        event = AccessContextProcessor()(None, "info", {"event": "x"})
        assert event == {"event": "x"}

    def test_injects_context_ids(self) -> None:
        with SecurityContext.scope(AccessContext(user_id="u1", tenant_id="t1", workspace_id="w1")):
            event = AccessContextProcessor()(None, "info", {"event": "x"})
        assert event["user_id"] == "u1"
        assert event["tenant_id"] == "t1"
        assert event["workspace_id"] == "w1"

    def test_skips_absent_ids(self) -> None:
        with SecurityContext.scope(AccessContext(user_id="u1")):
            event = AccessContextProcessor()(None, "info", {"event": "x"})
        assert "tenant_id" not in event
        assert "workspace_id" not in event

    def test_explicit_keys_win(self) -> None:
        with SecurityContext.scope(AccessContext(user_id="u1")):
            event = AccessContextProcessor()(None, "info", {"event": "x", "user_id": "other"})
        assert event["user_id"] == "other"


# ---------------------------------------------------------------------------
# configure_logging / get_logger
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_json_output_carries_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.DEBUG)
        with SecurityContext.scope(AccessContext(user_id="u9", tenant_id="t9")):
            get_logger("rbac.test").info("rbac.check.denied", permission="tenant.read")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "rbac.check.denied"
        assert payload["permission"] == "tenant.read"
        assert payload["user_id"] == "u9"
        assert payload["tenant_id"] == "t9"
        assert payload["level"] == "info"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.WARNING)
        get_logger("rbac.test").info("quiet")
        assert "quiet" not in capsys.readouterr().err

    def test_get_logger_binds_initial_values(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.INFO)
        get_logger("rbac.test", component="engine").warning("bound")
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["component"] == "engine"
