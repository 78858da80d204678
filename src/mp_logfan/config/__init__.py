"""Config – logger settings and their loaders."""
from mp_logfan.config.settings import LoggerSettings
from mp_logfan.config.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "LoggerSettings", "SettingsLoader"]
