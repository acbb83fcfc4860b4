"""
Models for the commands run by the pipeline.

A command is an executable plus its arguments; the command spec is the
ordered list of commands, fixed for the lifetime of the process.
"""

import shlex

from pydantic import BaseModel, ConfigDict, Field


class Command(BaseModel):
    """A single executable invocation."""

    model_config = ConfigDict(frozen=True)

    executable: str = Field(..., min_length=1, description="Program to run")
    args: tuple[str, ...] = Field(default=(), description="Arguments passed to the program")

    @classmethod
    def from_string(cls, command_line: str) -> "Command":
        """
        Build a command from a shell-like command line.

        Raises:
            ValueError: If the line is empty or cannot be split
        """
        parts = shlex.split(command_line)
        if not parts:
            raise ValueError("command line is empty")
        return cls(executable=parts[0], args=tuple(parts[1:]))

    @property
    def argv(self) -> list[str]:
        """Full argument vector including the executable."""
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


class CommandSpec(BaseModel):
    """Ordered commands making up one pipeline batch."""

    model_config = ConfigDict(frozen=True)

    commands: tuple[Command, ...] = Field(default=(), description="Commands in execution order")


class CommandResult(BaseModel):
    """Exit status of a finished command."""

    model_config = ConfigDict(frozen=True)

    command: Command
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0
