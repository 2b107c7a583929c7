"""Repository port and adapters for roles, permissions and assignments.

The engine keeps its own immutable snapshot for reads and writes through to
a repository, so adapters only need plain, blocking CRUD.
"""

from __future__ import annotations

import abc
import contextlib
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Iterator

from mp_rbac.kernel.errors import SerializationError
from mp_rbac.observability.logging import get_logger
from mp_rbac.rbac.model import Permission, Role, UserRole
from mp_rbac.rbac.serialization import dump_config, load_config

logger = get_logger(__name__)


class RBACRepository(abc.ABC):
    """Port: durable storage for RBAC records.

    Implementations must be safe to call from multiple threads; the engine
    already serialises writes, but reads may overlap them.
    """

    @abc.abstractmethod
    def list_permissions(self) -> list[Permission]: ...

    @abc.abstractmethod
    def save_permission(self, permission: Permission) -> None: ...

    @abc.abstractmethod
    def list_roles(self) -> list[Role]: ...

    @abc.abstractmethod
    def get_role(self, role_id: str) -> Role | None: ...

    @abc.abstractmethod
    def save_role(self, role: Role) -> None:
        """Insert or replace *role*."""

    @abc.abstractmethod
    def delete_role(self, role_id: str) -> None: ...

    @abc.abstractmethod
    def list_assignments(self) -> list[UserRole]: ...

    @abc.abstractmethod
    def add_assignment(self, assignment: UserRole) -> None: ...

    @abc.abstractmethod
    def remove_assignment(self, key: tuple) -> None: ...

    @abc.abstractmethod
    def replace_all(
        self,
        permissions: Iterable[Permission],
        roles: Iterable[Role],
        assignments: Iterable[UserRole],
    ) -> None:
        """Atomically replace every stored record (used by imports)."""


class InMemoryRBACRepository(RBACRepository):
    """Dict-backed repository for tests and single-process hosts.

    Every write runs inside :meth:`_mutation`: if :meth:`_persist` fails the
    dicts are restored, so a rejected write never reaches a later flush.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._permissions: dict[str, Permission] = {}
        self._roles: dict[str, Role] = {}
        self._assignments: dict[tuple, UserRole] = {}

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[None]:
        with self._lock:
            saved = (dict(self._permissions), dict(self._roles), dict(self._assignments))
            try:
                yield
                self._persist()
            except Exception:
                self._permissions, self._roles, self._assignments = saved
                raise

    def list_permissions(self) -> list[Permission]:
        with self._lock:
            return list(self._permissions.values())

    def save_permission(self, permission: Permission) -> None:
        with self._mutation():
            self._permissions[permission.id] = permission

    def list_roles(self) -> list[Role]:
        with self._lock:
            return list(self._roles.values())

    def get_role(self, role_id: str) -> Role | None:
        with self._lock:
            return self._roles.get(role_id)

    def save_role(self, role: Role) -> None:
        with self._mutation():
            self._roles[role.id] = role

    def delete_role(self, role_id: str) -> None:
        with self._mutation():
            self._roles.pop(role_id, None)

    def list_assignments(self) -> list[UserRole]:
        with self._lock:
            return list(self._assignments.values())

    def add_assignment(self, assignment: UserRole) -> None:
        with self._mutation():
            self._assignments[assignment.key] = assignment

    def remove_assignment(self, key: tuple) -> None:
        with self._mutation():
            self._assignments.pop(key, None)

    def replace_all(
        self,
        permissions: Iterable[Permission],
        roles: Iterable[Role],
        assignments: Iterable[UserRole],
    ) -> None:
        with self._mutation():
            self._permissions = {p.id: p for p in permissions}
            self._roles = {r.id: r for r in roles}
            self._assignments = {a.key: a for a in assignments}

    def _persist(self) -> None:
        """Hook for durable subclasses; the in-memory adapter keeps nothing else."""


class JsonFileRBACRepository(InMemoryRBACRepository):
    """Repository that mirrors every write to a JSON file.

    The file holds the same document :meth:`RBACEngine.export_config`
    produces. Writes go to a temporary file that atomically replaces the
    target.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._path = Path(path)
        if self._path.exists():
            self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SerializationError(f"Cannot read RBAC store '{self._path}': {exc}", cause=exc) from exc
        permissions, roles, assignments = load_config(document)
        with self._lock:
            self._permissions = {p.id: p for p in permissions}
            self._roles = {r.id: r for r in roles}
            self._assignments = {a.key: a for a in assignments}
        logger.info(
            "rbac.repository.loaded",
            path=str(self._path),
            permissions=len(permissions),
            roles=len(roles),
            assignments=len(assignments),
        )

    def _persist(self) -> None:
        # runs under the repository lock, inside _mutation
        document = dump_config(
            self.list_permissions(),
            self.list_roles(),
            self.list_assignments(),
        )
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise SerializationError(f"Cannot write RBAC store '{self._path}': {exc}", cause=exc) from exc


__all__ = ["InMemoryRBACRepository", "JsonFileRBACRepository", "RBACRepository"]
