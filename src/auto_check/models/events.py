"""
Raw file system events delivered by the event source.

The event family is closed: every consumer matches over all variants and ends
with ``assert_never`` so a new variant is a type-checked obligation for each
handler.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class _RawEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class Created(_RawEventBase):
    """A file was created."""

    path: Path = Field(..., description="Absolute path of the new file")
    is_directory: bool = Field(default=False, description="Whether the entry is a directory")


class Written(_RawEventBase):
    """A file's contents were written."""

    path: Path = Field(..., description="Absolute path of the written file")


class Removed(_RawEventBase):
    """A file was removed."""

    path: Path = Field(..., description="Absolute path of the removed file")
    is_directory: bool = Field(default=False, description="Whether the entry was a directory")


class Renamed(_RawEventBase):
    """A file was moved from ``src`` to ``dst``."""

    src: Path = Field(..., description="Absolute path before the move")
    dst: Path = Field(..., description="Absolute path after the move")
    is_directory: bool = Field(default=False, description="Whether the moved entry is a directory")


class MetadataOnly(_RawEventBase):
    """Attribute, access or directory bookkeeping change with no content impact."""

    path: Path = Field(..., description="Absolute path of the touched entry")


class RescanRequested(_RawEventBase):
    """The event source lost track of changes and asks for a rescan."""


class Error(_RawEventBase):
    """The event source reported a problem, optionally tied to a path."""

    cause: str = Field(..., description="Description of the failure")
    path: Path | None = Field(None, description="Path the failure relates to, if any")


RawEvent = Created | Written | Removed | Renamed | MetadataOnly | RescanRequested | Error
