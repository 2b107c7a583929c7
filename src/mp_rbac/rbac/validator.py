"""Admission checks for permissions, roles and assignments.

Validators are advisory: they return a list of error messages (empty when
valid) and never mutate anything. Management operations call
:func:`ensure_valid` to turn a non-empty list into a
:class:`~mp_rbac.kernel.errors.ValidationError`.

Candidates may be dataclass records or plain mappings (e.g. parsed JSON).
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from mp_rbac.kernel.errors import ValidationError
from mp_rbac.rbac.model import (
    PermissionAction,
    PermissionResource,
    Role,
    RoleLevel,
    RoleType,
    Scope,
    UserRole,
)
from mp_rbac.rbac.roles import RoleMap, has_cycle
from mp_rbac.rbac.scope import to_scope

PERMISSION_ID_PATTERN = re.compile(r"^[a-z]+\.[a-z]+$")

VALID_ACTIONS = frozenset(a.value for a in PermissionAction)
VALID_RESOURCES = frozenset(r.value for r in PermissionResource)
VALID_SCOPES = frozenset(s.value for s in Scope)


def _get(candidate: Any, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _enum_value(value: Any) -> Any:
    # str-enums compare equal to their value but keep them plain for lookups
    return value.value if hasattr(value, "value") else value


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_permission_id(permission_id: Any) -> bool:
    return isinstance(permission_id, str) and PERMISSION_ID_PATTERN.fullmatch(permission_id) is not None


def validate_permission(candidate: Any) -> list[str]:
    errors: list[str] = []

    if not is_valid_permission_id(_get(candidate, "id")):
        errors.append('Invalid permission ID format. Use "resource.action" format.')
    if _blank(_get(candidate, "name")):
        errors.append("Permission name is required.")
    if _enum_value(_get(candidate, "action")) not in VALID_ACTIONS:
        errors.append("Invalid permission action.")
    if _enum_value(_get(candidate, "resource")) not in VALID_RESOURCES:
        errors.append("Invalid permission resource.")
    if _enum_value(_get(candidate, "scope")) not in VALID_SCOPES:
        errors.append("Invalid permission scope.")

    return errors


def _as_role(candidate: Any) -> Role | None:
    if isinstance(candidate, Role):
        return candidate
    role_id = _get(candidate, "id")
    if not isinstance(role_id, str) or not role_id:
        return None
    return Role(id=role_id, name=_get(candidate, "name") or "", inherited_from=_get(candidate, "inherited_from"))


def validate_role(candidate: Any, roles: RoleMap | None = None) -> list[str]:
    """Validate *candidate* against the currently stored *roles*.

    A parent that does not exist is an error; a parent that exists but would
    close an inheritance loop (including the role inheriting from itself) is
    reported as circular inheritance.
    """
    roles = roles or {}
    errors: list[str] = []

    if _blank(_get(candidate, "name")):
        errors.append("Role name is required.")
    if _blank(_get(candidate, "description")):
        errors.append("Role description is required.")

    permissions = _get(candidate, "permissions")
    if permissions is not None and (
        isinstance(permissions, (str, bytes, Mapping))
        or not isinstance(permissions, (list, tuple, set, frozenset))
        or not all(isinstance(p, str) for p in permissions)
    ):
        errors.append("Permissions must be a list of permission ids.")

    for field, enum_type in (("type", RoleType), ("level", RoleLevel)):
        value = _get(candidate, field)
        if isinstance(candidate, Role) and not isinstance(value, enum_type):
            errors.append(f"Invalid role {field}.")
        elif value is not None and _enum_value(value) not in {e.value for e in enum_type}:
            errors.append(f"Invalid role {field}.")

    parent_id = _get(candidate, "inherited_from")
    if parent_id:
        role = _as_role(candidate)
        if parent_id != _get(candidate, "id") and parent_id not in roles:
            errors.append("Parent role not found.")
        elif role is not None and has_cycle(role, roles):
            errors.append("Circular inheritance detected.")

    return errors


def validate_assignment(candidate: UserRole, roles: RoleMap | None = None) -> list[str]:
    """Check the scope-id invariant and that the role exists."""
    roles = roles or {}
    errors: list[str] = []

    if _blank(candidate.user_id):
        errors.append("User id is required.")
    if candidate.role_id not in roles:
        errors.append(f"Role '{candidate.role_id}' not found.")

    scope = to_scope(candidate.scope)
    if scope is None:
        errors.append("Invalid assignment scope.")
    elif scope is Scope.SYSTEM:
        if candidate.scope_id is not None:
            errors.append("System assignments must not carry a scope id.")
    elif _blank(candidate.scope_id):
        errors.append(f"A scope id is required for {scope.value} assignments.")

    if scope is Scope.RESOURCE:
        if _blank(candidate.resource_type):
            errors.append("A resource type is required for resource assignments.")
    elif candidate.resource_type is not None:
        errors.append("Only resource assignments may carry a resource type.")

    return errors


def ensure_valid(errors: list[str], subject: str) -> None:
    """Raise :class:`ValidationError` if *errors* is non-empty."""
    if errors:
        raise ValidationError(f"Invalid {subject}: {'; '.join(errors)}", errors=errors)


__all__ = [
    "PERMISSION_ID_PATTERN",
    "VALID_ACTIONS",
    "VALID_RESOURCES",
    "VALID_SCOPES",
    "ensure_valid",
    "is_valid_permission_id",
    "validate_assignment",
    "validate_permission",
    "validate_role",
]
