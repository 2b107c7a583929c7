"""Permission guards — current access context and ``@require_permission``."""

from __future__ import annotations

import contextlib
import contextvars
import functools
import inspect
from typing import TYPE_CHECKING, Any, Callable, Iterator, TypeVar

from mp_rbac.kernel.errors import ForbiddenError, UnauthorizedError
from mp_rbac.rbac.model import AccessContext

if TYPE_CHECKING:
    from mp_rbac.rbac.engine import RBACEngine

F = TypeVar("F", bound=Callable[..., Any])

_VAR: contextvars.ContextVar[AccessContext | None] = contextvars.ContextVar(
    "_access_context", default=None
)


class SecurityContext:
    """Store and retrieve the current :class:`AccessContext` via
    :mod:`contextvars` so each asyncio task has its own isolated context."""

    @staticmethod
    def get_current() -> AccessContext | None:
        """Return the current access context, or ``None`` if absent."""
        return _VAR.get()

    @staticmethod
    def set_current(context: AccessContext) -> contextvars.Token[AccessContext | None]:
        """Set the current access context and return a reset token."""
        return _VAR.set(context)

    @staticmethod
    def clear() -> None:
        """Remove the current access context."""
        _VAR.set(None)

    @staticmethod
    def require() -> AccessContext:
        """Return the current access context or raise ``UnauthorizedError``."""
        context = _VAR.get()
        if context is None:
            raise UnauthorizedError("No access context bound to the current call")
        return context

    @staticmethod
    @contextlib.contextmanager
    def scope(context: AccessContext) -> Iterator[AccessContext]:
        """Bind *context* for the duration of a ``with`` block."""
        token = _VAR.set(context)
        try:
            yield context
        finally:
            _VAR.reset(token)


def require_permission(engine: "RBACEngine", permission_id: str) -> Callable[[F], F]:
    """Decorator that checks *permission_id* against the current access context.

    Works on both async and sync callables. Raises :class:`UnauthorizedError`
    if no context is bound and :class:`ForbiddenError` on denial.

    Example::

        @require_permission(engine, "workspace.update")
        async def rename_workspace(cmd: RenameWorkspace) -> None:
            ...
    """

    def _enforce() -> None:
        context = SecurityContext.require()
        result = engine.check(context, permission_id)
        if not result.allowed:
            raise ForbiddenError(result.reason, permission=permission_id)

    def decorator(fn: F) -> F:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _enforce()
                return await fn(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(fn)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _enforce()
            return fn(*args, **kwargs)

        return sync_wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["SecurityContext", "require_permission"]
