"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError      -> 400
    │   ├── NotFoundError        -> 404
    │   └── ConflictError        -> 409
    ├── ApplicationError     (application.py)
    │   ├── UnauthorizedError    -> 401
    │   └── ForbiddenError       -> 403
    └── InfrastructureError  (infrastructure.py)
        └── SerializationError
"""

from mp_rbac.kernel.errors.application import (
    ApplicationError,
    ForbiddenError,
    UnauthorizedError,
)
from mp_rbac.kernel.errors.base import BaseError
from mp_rbac.kernel.errors.domain import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from mp_rbac.kernel.errors.infrastructure import InfrastructureError, SerializationError

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
