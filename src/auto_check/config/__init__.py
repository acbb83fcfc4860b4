"""Configuration management and settings."""

from auto_check.config.settings import BUILTIN_COMMANDS, TRACE, AutoCheckConfig, LogLevel

__all__ = ["AutoCheckConfig", "BUILTIN_COMMANDS", "LogLevel", "TRACE"]
