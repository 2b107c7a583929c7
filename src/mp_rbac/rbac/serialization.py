"""Flat-dict codecs for permissions, roles, assignments and full exports.

Records serialise as JSON-compatible dicts whose keys mirror the dataclass
fields; timestamps are ISO-8601 strings and permission sets are sorted lists.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from mp_rbac.kernel.errors import SerializationError
from mp_rbac.rbac.model import Permission, Role, RoleLevel, RoleType, Scope, UserRole

EXPORT_FORMAT_VERSION = 1


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def permission_to_dict(permission: Permission) -> dict[str, Any]:
    return {
        "id": permission.id,
        "name": permission.name,
        "description": permission.description,
        "action": permission.action,
        "resource": permission.resource,
        "scope": permission.scope,
        "category": permission.category,
        "is_system": permission.is_system,
    }


def permission_from_dict(data: Mapping[str, Any]) -> Permission:
    try:
        return Permission(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            action=data["action"],
            resource=data["resource"],
            scope=data["scope"],
            category=data.get("category", ""),
            is_system=bool(data.get("is_system", False)),
        )
    except (AttributeError, KeyError, TypeError) as exc:
        raise SerializationError(f"Malformed permission record: {exc}", cause=exc) from exc


def role_to_dict(role: Role) -> dict[str, Any]:
    return {
        "id": role.id,
        "name": role.name,
        "description": role.description,
        "permissions": sorted(role.permissions),
        "is_system": role.is_system,
        "inherited_from": role.inherited_from,
        "type": role.type.value,
        "level": role.level.value,
        "is_default": role.is_default,
        "created_at": _ts(role.created_at),
        "updated_at": _ts(role.updated_at),
    }


def role_from_dict(data: Mapping[str, Any]) -> Role:
    if not isinstance(data, Mapping) or isinstance(data.get("permissions"), str):
        raise SerializationError("Malformed role record: expected a mapping with a permissions list")
    try:
        return Role(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            permissions=frozenset(data.get("permissions") or ()),
            is_system=bool(data.get("is_system", False)),
            inherited_from=data.get("inherited_from"),
            type=RoleType(data.get("type", RoleType.CUSTOM.value)),
            level=RoleLevel(data.get("level", RoleLevel.MEMBER.value)),
            is_default=bool(data.get("is_default", False)),
            created_at=_parse_ts(data.get("created_at")),
            updated_at=_parse_ts(data.get("updated_at")),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SerializationError(f"Malformed role record: {exc}", cause=exc) from exc


def assignment_to_dict(assignment: UserRole) -> dict[str, Any]:
    return {
        "user_id": assignment.user_id,
        "role_id": assignment.role_id,
        "scope": Scope(assignment.scope).value,
        "scope_id": assignment.scope_id,
        "resource_type": assignment.resource_type,
        "assigned_at": _ts(assignment.assigned_at),
        "assigned_by": assignment.assigned_by,
    }


def assignment_from_dict(data: Mapping[str, Any]) -> UserRole:
    try:
        return UserRole(
            user_id=data["user_id"],
            role_id=data["role_id"],
            scope=Scope(data["scope"]),
            scope_id=data.get("scope_id"),
            resource_type=data.get("resource_type"),
            assigned_at=_parse_ts(data.get("assigned_at")),
            assigned_by=data.get("assigned_by") or "system",
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SerializationError(f"Malformed assignment record: {exc}", cause=exc) from exc


def dump_config(
    permissions: Iterable[Permission],
    roles: Iterable[Role],
    assignments: Iterable[UserRole],
    *,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    return {
        "version": EXPORT_FORMAT_VERSION,
        "permissions": [permission_to_dict(p) for p in permissions],
        "roles": [role_to_dict(r) for r in roles],
        "assignments": [assignment_to_dict(a) for a in assignments],
        "exported_at": _ts(exported_at),
    }


def load_config(data: Mapping[str, Any]) -> tuple[list[Permission], list[Role], list[UserRole]]:
    """Decode an export produced by :func:`dump_config`.

    ``roles`` and ``assignments`` are mandatory; ``permissions`` may be
    omitted.
    """
    if not isinstance(data, Mapping) or "roles" not in data or "assignments" not in data:
        raise SerializationError("Invalid import data structure: 'roles' and 'assignments' are required")
    permissions = [permission_from_dict(p) for p in data.get("permissions") or ()]
    roles = [role_from_dict(r) for r in data["roles"]]
    assignments = [assignment_from_dict(a) for a in data["assignments"]]
    return permissions, roles, assignments


__all__ = [
    "EXPORT_FORMAT_VERSION",
    "assignment_from_dict",
    "assignment_to_dict",
    "dump_config",
    "load_config",
    "permission_from_dict",
    "permission_to_dict",
    "role_from_dict",
    "role_to_dict",
]
