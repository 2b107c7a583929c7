"""Permission catalog — immutable id-keyed registry of known permissions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator

from mp_rbac.kernel.errors import ConflictError, NotFoundError
from mp_rbac.rbac.model import Permission


class PermissionCatalog:
    """Read-only registry of :class:`Permission` records.

    Insertion order is preserved. "Adding" returns a new catalog, so a
    catalog held by a snapshot never changes underneath a reader.

    Example::

        catalog = PermissionCatalog(SYSTEM_PERMISSIONS)
        catalog = catalog.with_permission(custom)
        catalog.require("tenant.read").scope  # "tenant"
    """

    __slots__ = ("_by_id",)

    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        by_id: dict[str, Permission] = {}
        for permission in permissions:
            if permission.id in by_id:
                raise ConflictError(f"Duplicate permission id '{permission.id}'")
            by_id[permission.id] = permission
        self._by_id = MappingProxyType(by_id)

    def __contains__(self, permission_id: object) -> bool:
        return permission_id in self._by_id

    def __iter__(self) -> Iterator[Permission]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __repr__(self) -> str:
        return f"PermissionCatalog(size={len(self)})"

    def get(self, permission_id: str) -> Permission | None:
        return self._by_id.get(permission_id)

    def require(self, permission_id: str) -> Permission:
        permission = self._by_id.get(permission_id)
        if permission is None:
            raise NotFoundError("Permission", permission_id)
        return permission

    def ids(self) -> tuple[str, ...]:
        return tuple(self._by_id)

    def by_category(self, category: str) -> list[Permission]:
        return [p for p in self._by_id.values() if p.category == category]

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in self._by_id.values()))

    def with_permission(self, permission: Permission) -> "PermissionCatalog":
        """Return a new catalog that also contains *permission*."""
        if permission.id in self._by_id:
            raise ConflictError(f"Permission '{permission.id}' already exists")
        return PermissionCatalog((*self._by_id.values(), permission))


__all__ = ["PermissionCatalog"]
