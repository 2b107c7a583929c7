"""Errors raised while building :class:`RBACSettings` from the environment.

Each error names the offending setting in ``detail`` so a host can report
``RBAC_*`` misconfiguration at startup without parsing messages.
"""
from __future__ import annotations

from mp_rbac.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Engine settings could not be loaded."""

    default_code = "rbac_config_error"


class MissingRequiredSettingError(ConfigError):
    default_code = "rbac_setting_missing"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Required RBAC setting '{setting_name}' is not set",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be used, e.g. ``RBAC_AUDIT_CHECKS=maybe``.

    ``setting_name`` is the environment variable when the loader rejects the
    raw text, and the field name when :class:`RBACSettings` rejects the value.
    """

    default_code = "rbac_setting_invalid"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"RBAC setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "value": repr(value), "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
