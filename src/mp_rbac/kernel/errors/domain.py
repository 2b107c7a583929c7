"""Domain errors — malformed policy data and state conflicts."""

from __future__ import annotations

from typing import Any

from mp_rbac.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a policy rule / invariant is violated."""

    default_code = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """A permission, role or assignment failed admission checks.

    ``errors`` holds one human-readable message per failed rule.
    """

    default_code = "validation_error"
    http_status = 400

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[str] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class NotFoundError(DomainError):
    """The referenced role, permission or assignment does not exist."""

    default_code = "not_found"
    http_status = 404

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state (system role, live assignments, duplicate id)."""

    default_code = "conflict"
    http_status = 409


__all__ = [
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
