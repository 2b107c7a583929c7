"""Application-layer errors raised by permission guards."""

from __future__ import annotations

from typing import Any

from mp_rbac.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """No access context is bound to the current call."""

    default_code = "unauthorized"
    http_status = 401


class ForbiddenError(ApplicationError):
    """The current actor lacks the required permission."""

    default_code = "forbidden"
    http_status = 403

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.permission = permission


__all__ = [
    "ApplicationError",
    "ForbiddenError",
    "UnauthorizedError",
]
