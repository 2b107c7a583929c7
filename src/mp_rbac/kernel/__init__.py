"""Kernel – framework-agnostic building blocks (errors, clock)."""

from mp_rbac.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    SerializationError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "NotFoundError",
    "SerializationError",
    "UnauthorizedError",
    "ValidationError",
]
