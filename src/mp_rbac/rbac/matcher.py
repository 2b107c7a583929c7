"""Permission matching — wildcard ids and resource hierarchy.

Two independent axes:

* **Wildcard** (full permission ids, wildcard on the *granted* side):
  ``"*"`` matches anything, ``"workspace.*"`` matches any id starting with
  ``"workspace."``, otherwise ids must be equal.
* **Resource hierarchy** (resource strings): a declared resource ``tenant``
  covers the requested resource ``tenant.members``.
"""

from __future__ import annotations

from typing import Iterable

WILDCARD = "*"
_WILDCARD_SUFFIX = ".*"


def matches(candidate: str, pattern: str) -> bool:
    """Return ``True`` if *pattern* covers *candidate*.

    Rules, in order:

    - ``"*"`` matches any permission.
    - ``"resource.*"`` matches any id starting with ``"resource."``.
    - Exact string match. Case-sensitive, no normalisation.
    """
    if pattern == WILDCARD:
        return True
    if pattern.endswith(_WILDCARD_SUFFIX):
        prefix = pattern[:-1]  # "resource."
        return candidate.startswith(prefix)
    return candidate == pattern


def has_permission(granted: Iterable[str], required: str) -> bool:
    """Any *granted* id, used as the pattern, covers *required*."""
    return any(matches(required, pattern) for pattern in granted)


def has_any(granted: Iterable[str], required: Iterable[str]) -> bool:
    granted = tuple(granted)
    return any(has_permission(granted, r) for r in required)


def has_all(granted: Iterable[str], required: Iterable[str]) -> bool:
    granted = tuple(granted)
    return all(has_permission(granted, r) for r in required)


def find_matching(candidates: Iterable[str], pattern: str) -> list[str]:
    """Return the *candidates* covered by *pattern*, in input order."""
    return [c for c in candidates if matches(c, pattern)]


def resource_matches(declared: str, requested: str) -> bool:
    """Exact resource match, or *declared* is a dotted ancestor of *requested*."""
    if declared == requested:
        return True
    return requested.startswith(declared + ".")


def split_permission_id(permission_id: str) -> tuple[str, str]:
    """Split ``"tenant.members.read"`` into ``("tenant.members", "read")``.

    An id without a dot is treated as a bare resource with an empty action.
    """
    resource, _, action = permission_id.rpartition(".")
    if not resource:
        return permission_id, ""
    return resource, action


def covers(granted: str, requested: str) -> bool:
    """Does the *granted* id cover the *requested* id on either matching axis?

    The wildcard axis is tried first; otherwise both ids are split into
    ``(resource, action)`` and the grant covers the request when the actions
    agree (or the granted action is ``"*"``) and the granted resource is the
    requested resource or one of its dotted ancestors.
    """
    if not requested:
        return False
    if matches(requested, granted):
        return True
    granted_resource, granted_action = split_permission_id(granted)
    requested_resource, requested_action = split_permission_id(requested)
    if not granted_action or granted_action not in (requested_action, WILDCARD):
        return False
    return resource_matches(granted_resource, requested_resource)


__all__ = [
    "WILDCARD",
    "covers",
    "find_matching",
    "has_all",
    "has_any",
    "has_permission",
    "matches",
    "resource_matches",
    "split_permission_id",
]
