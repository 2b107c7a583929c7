"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class AccessContextProcessor:
    """structlog processor that injects the ids of the current access context.

    Reads :class:`~mp_rbac.rbac.guards.SecurityContext` and adds
    ``user_id``, ``tenant_id`` and ``workspace_id`` (when set) without
    overwriting keys the caller bound explicitly.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        from mp_rbac.rbac.guards import SecurityContext

        ctx = SecurityContext.get_current()
        if ctx is not None:
            event_dict.setdefault("user_id", ctx.user_id)
            if ctx.tenant_id is not None:
                event_dict.setdefault("tenant_id", ctx.tenant_id)
            if ctx.workspace_id is not None:
                event_dict.setdefault("workspace_id", ctx.workspace_id)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["AccessContextProcessor", "get_logger"]
