"""Actions produced by the change aggregator once per debounce tick."""

from pydantic import BaseModel, ConfigDict, Field


class Nothing(BaseModel):
    """Nothing changed since the last tick."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "Nothing"


class Custom(BaseModel):
    """A one-shot trigger that is not tied to file changes."""

    model_config = ConfigDict(frozen=True)

    reason: str = Field(..., min_length=1, description="Why the pipeline is being run")

    def __str__(self) -> str:
        return f"Custom({self.reason})"


class FilesChanged(BaseModel):
    """Files under the base directory changed during the debounce window."""

    model_config = ConfigDict(frozen=True)

    paths: tuple[str, ...] = Field(..., min_length=1, description="Sorted relative paths")

    def __str__(self) -> str:
        return f"FilesChanged({', '.join(self.paths)})"


Action = Nothing | Custom | FilesChanged
