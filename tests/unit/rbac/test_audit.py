"""Unit tests for RBAC audit records and sinks."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

from mp_rbac.rbac.audit import AuditAction, AuditRecord, InMemoryAuditSink, StructlogAuditSink
from mp_rbac.rbac.model import AccessContext


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _record(
    action: AuditAction = AuditAction.GRANTED,
    subject_id: str = "tenant-member",
    actor_id: str = "admin",
    **kw: Any,
) -> AuditRecord:
    return AuditRecord(action=action, subject_id=subject_id, actor_id=actor_id, **kw)


# ---------------------------------------------------------------------------
# AuditRecord
# ---------------------------------------------------------------------------


class TestAuditRecord:
    def test_defaults(self) -> None:
        rec = _record()
        assert rec.context is None
        assert rec.result is None
        assert rec.changes == {}
        assert rec.occurred_at.tzinfo is not None

    def test_each_instance_has_unique_id(self) -> None:
        assert _record().record_id != _record().record_id

    def test_to_dict(self) -> None:
        rec = _record(
            context=AccessContext(user_id="u1", tenant_id="t1"),
            target_user_id="u1",
            occurred_at=_T0,
        )
        d = rec.to_dict()
        assert d["action"] == "granted"
        assert d["subject_id"] == "tenant-member"
        assert d["context"]["tenant_id"] == "t1"
        assert d["target_user_id"] == "u1"
        assert d["timestamp"] == _T0.isoformat()


# ---------------------------------------------------------------------------
# InMemoryAuditSink
# ---------------------------------------------------------------------------


class TestInMemoryAuditSink:
    def test_record_and_all(self) -> None:
        sink = InMemoryAuditSink()
        sink.record(_record())
        assert len(sink.all()) == 1

    def test_query_filters(self) -> None:
        sink = InMemoryAuditSink()
        sink.record(_record(AuditAction.GRANTED, occurred_at=_T0))
        sink.record(_record(AuditAction.REVOKED, occurred_at=_T0 + timedelta(minutes=1)))
        sink.record(_record(AuditAction.CREATED, subject_id="custom", actor_id="ops", occurred_at=_T0 + timedelta(minutes=2)))

        assert [r.action for r in sink.query(action="revoked")] == [AuditAction.REVOKED]
        assert [r.subject_id for r in sink.query(actor_id="ops")] == ["custom"]
        assert len(sink.query(subject_id="tenant-member")) == 2
        assert len(sink.query(from_dt=_T0 + timedelta(seconds=30))) == 2
        assert len(sink.query(to_dt=_T0)) == 1
        assert len(sink.query(limit=1)) == 1

    def test_query_is_oldest_first(self) -> None:
        sink = InMemoryAuditSink()
        sink.record(_record(subject_id="late", occurred_at=_T0 + timedelta(hours=1)))
        sink.record(_record(subject_id="early", occurred_at=_T0))
        assert [r.subject_id for r in sink.query()] == ["early", "late"]

    def test_clear(self) -> None:
        sink = InMemoryAuditSink()
        sink.record(_record())
        sink.clear()
        assert sink.all() == []


# ---------------------------------------------------------------------------
# StructlogAuditSink
# ---------------------------------------------------------------------------


class TestStructlogAuditSink:
    def test_logs_at_warning(self) -> None:
        log = MagicMock()
        StructlogAuditSink(service="billing", logger=log).record(_record(AuditAction.DELETED))
        log.warning.assert_called_once()
        args, kwargs = log.warning.call_args
        assert args == ("audit.deleted",)
        assert kwargs["service"] == "billing"
        assert kwargs["subject_id"] == "tenant-member"
        assert kwargs["action"] == "deleted"
