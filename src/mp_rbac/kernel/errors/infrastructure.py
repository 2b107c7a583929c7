"""Infrastructure errors — repository I/O failures."""

from __future__ import annotations

from mp_rbac.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a policy rule violation."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize persisted policy records."""

    default_code = "serialization_error"


__all__ = ["InfrastructureError", "SerializationError"]
