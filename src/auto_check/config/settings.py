"""
Configuration management for the auto-check watcher.

Handles environment variables, command-line overrides and the assembly of the
command pipeline, with validation of the combination of options.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from auto_check.models.commands import Command, CommandSpec
from auto_check.models.exceptions import ConfigurationError, raise_config_error

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LogLevel(str, Enum):
    """Logging level enumeration, indexed by verbosity."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"
    TRACE = "TRACE"

    @classmethod
    def from_verbosity(cls, verbosity: int) -> "LogLevel":
        """Map a ``-v`` count to a level, saturating at TRACE."""
        levels = list(cls)
        return levels[min(max(verbosity, 0), len(levels) - 1)]


BUILTIN_COMMANDS: dict[str, Command] = {
    "check": Command(executable="cargo", args=("check",)),
    "clippy": Command(executable="cargo", args=("clippy",)),
    "test": Command(executable="cargo", args=("test",)),
}


class AutoCheckConfig(BaseSettings):
    """
    Central configuration for the watcher.

    Values come from ``AUTO_CHECK_*`` environment variables or an ``.env``
    file, and command-line options override them.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTO_CHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Watching ===
    base_dir: Path = Field(..., description="Directory tree to watch and run commands in")
    delay_ms: int = Field(default=1000, ge=1, le=3_600_000, description="Debounce delay in milliseconds")
    ignore_file: str = Field(default=".gitignore", min_length=1, description="Ignore rules file inside base_dir")

    # === Commands ===
    no_check: bool = Field(default=False, description="Do not run the built-in check command")
    no_clippy: bool = Field(default=False, description="Do not run the built-in lint command")
    no_test: bool = Field(default=False, description="Do not run the built-in test command")
    custom_command: str | None = Field(default=None, description="Extra command appended to the pipeline")
    no_initial_run: bool = Field(default=False, description="Skip the pipeline run at startup")

    # === Logging ===
    verbosity: int = Field(default=0, ge=0, description="0 errors only, up to 4+ for trace output")
    log_format: str = Field(
        default="%(asctime)s %(levelname)-7s %(name)s - %(message)s", description="Log message format"
    )

    @field_validator('base_dir')
    @classmethod
    def validate_base_dir(cls, v: Path) -> Path:
        """Resolve the base directory against the working directory and require it to exist."""
        base_dir = Path(v).expanduser()
        if not base_dir.is_absolute():
            base_dir = Path.cwd() / base_dir
        base_dir = base_dir.resolve()
        if not base_dir.is_dir():
            raise ConfigurationError(
                f"Base directory does not exist: {base_dir}",
                config_key="base_dir",
                expected_type="existing directory",
                actual_value=v,
            )
        return base_dir

    @field_validator('custom_command')
    @classmethod
    def validate_custom_command(cls, v: str | None) -> str | None:
        """Ensure the custom command can be split into an argument vector."""
        if v is None:
            return v
        try:
            Command.from_string(v)
        except ValueError as e:
            raise_config_error(
                f"Invalid custom command: {e}", config_key="custom_command", expected_type="command line", actual_value=v
            )
        return v

    @model_validator(mode='after')
    def validate_commands(self):
        """Ensure at least one command is left to run."""
        if self.no_check and self.no_clippy and self.no_test and not self.custom_command:
            raise ConfigurationError(
                "No commands to run: all built-in commands are disabled and no custom command was given",
                config_key="custom_command",
            )
        return self

    @property
    def delay_seconds(self) -> float:
        """Debounce delay as seconds."""
        return self.delay_ms / 1000.0

    @property
    def log_level(self) -> LogLevel:
        return LogLevel.from_verbosity(self.verbosity)

    def build_command_spec(self) -> CommandSpec:
        """Assemble the enabled commands in pipeline order."""
        disabled = {"check": self.no_check, "clippy": self.no_clippy, "test": self.no_test}
        commands = [command for name, command in BUILTIN_COMMANDS.items() if not disabled[name]]
        if self.custom_command:
            commands.append(Command.from_string(self.custom_command))
        return CommandSpec(commands=tuple(commands))

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary."""
        level = self.log_level.value
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {"auto_check": {"handlers": ["default"], "level": level, "propagate": False}},
        }
