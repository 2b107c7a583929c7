"""RBAC audit — AuditRecord, AuditSink, InMemoryAuditSink, StructlogAuditSink."""

from __future__ import annotations

import abc
import dataclasses
import threading
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from mp_rbac.observability.logging import get_logger
from mp_rbac.rbac.model import AccessContext


class AuditAction(str, Enum):
    GRANTED = "granted"
    REVOKED = "revoked"
    CHECKED = "checked"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


# ---------------------------------------------------------------------------
# AuditRecord
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class AuditRecord:
    """An immutable record of one policy mutation or check.

    Parameters
    ----------
    action:
        What happened: ``granted`` / ``revoked`` for role assignments,
        ``created`` / ``updated`` / ``deleted`` for roles and permissions,
        ``checked`` for audited reads.
    subject_id:
        The permission or role id the action concerns.
    actor_id:
        Who performed the action (for checks: the user being checked).
    context:
        Access context of a check, or the scope of an assignment.
    result:
        Outcome of a check; ``None`` for mutations.
    target_user_id:
        User whose assignments changed, when relevant.
    changes:
        Field-level summary of a role update.
    """

    action: AuditAction
    subject_id: str
    actor_id: str
    context: AccessContext | None = None
    result: bool | None = None
    target_user_id: str | None = None
    changes: dict[str, Any] = dataclasses.field(default_factory=dict)
    occurred_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))
    record_id: str = dataclasses.field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "action": self.action.value,
            "subject_id": self.subject_id,
            "actor_id": self.actor_id,
            "context": dataclasses.asdict(self.context) if self.context is not None else None,
            "result": self.result,
            "target_user_id": self.target_user_id,
            "changes": self.changes,
            "timestamp": self.occurred_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# AuditSink port
# ---------------------------------------------------------------------------


class AuditSink(abc.ABC):
    """Port — destination for audit records.

    ``record`` is called synchronously from inside engine operations and
    should return quickly; sinks that talk to remote systems are expected to
    buffer.
    """

    @abc.abstractmethod
    def record(self, record: AuditRecord) -> None:
        """Persist or forward *record*."""


class InMemoryAuditSink(AuditSink):
    """List-backed audit sink for unit tests and local development."""

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._lock = threading.Lock()

    def record(self, record: AuditRecord) -> None:
        with self._lock:
            self._records.append(record)

    def query(
        self,
        *,
        action: AuditAction | str | None = None,
        subject_id: str | None = None,
        actor_id: str | None = None,
        from_dt: datetime | None = None,
        to_dt: datetime | None = None,
        limit: int = 1000,
    ) -> list[AuditRecord]:
        """Return records matching all supplied filters, oldest first."""
        with self._lock:
            results = list(self._records)
        if action is not None:
            wanted = AuditAction(action)
            results = [r for r in results if r.action is wanted]
        if subject_id is not None:
            results = [r for r in results if r.subject_id == subject_id]
        if actor_id is not None:
            results = [r for r in results if r.actor_id == actor_id]
        if from_dt is not None:
            results = [r for r in results if r.occurred_at >= from_dt]
        if to_dt is not None:
            results = [r for r in results if r.occurred_at <= to_dt]
        results.sort(key=lambda r: r.occurred_at)
        return results[:limit]

    def all(self) -> list[AuditRecord]:
        """Return all stored records (helper for test assertions)."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class StructlogAuditSink(AuditSink):
    """Emits each record as a structured log line on the ``audit`` logger.

    Entries go out at ``WARNING`` so they survive restrictive level filters.
    """

    def __init__(self, service: str = "rbac", logger: Any = None) -> None:
        self._service = service
        self._log = logger if logger is not None else get_logger("audit")

    def record(self, record: AuditRecord) -> None:
        payload = record.to_dict()
        self._log.warning(f"audit.{record.action.value}", service=self._service, **payload)


__all__ = [
    "AuditAction",
    "AuditRecord",
    "AuditSink",
    "InMemoryAuditSink",
    "StructlogAuditSink",
]
