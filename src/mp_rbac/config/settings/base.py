"""Config settings – Settings base class and the engine settings."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from typing import ClassVar

from mp_rbac.config.settings.errors import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class RBACSettings(Settings):
    """Settings recognised by :class:`~mp_rbac.rbac.engine.RBACEngine`.

    Environment variables use the ``RBAC_`` prefix, e.g.
    ``RBAC_ENABLE_AUDIT_LOGGING=false``.

    ``cache_permissions`` and ``permission_refresh_interval_seconds`` are
    carried for host layers that cache decisions; the engine itself does not
    read them.
    """

    _prefix: ClassVar[str] = "RBAC"

    enable_audit_logging: bool = True
    audit_checks: bool = False
    cache_permissions: bool = True
    permission_refresh_interval_seconds: float = 300.0
    seed_builtins: bool = True

    def _validate(self) -> None:
        if self.permission_refresh_interval_seconds <= 0:
            raise InvalidSettingValueError(
                "permission_refresh_interval_seconds",
                self.permission_refresh_interval_seconds,
                "must be positive",
            )

    @property
    def permission_refresh_interval(self) -> timedelta:
        return timedelta(seconds=self.permission_refresh_interval_seconds)


__all__ = ["RBACSettings", "Settings"]
