"""Config settings – 12-factor env-based configuration."""
from mp_rbac.config.settings.base import RBACSettings, Settings
from mp_rbac.config.settings.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_rbac.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RBACSettings",
    "Settings",
    "SettingsLoader",
]
