"""ToolResult and RawToolOutput value objects."""

from typing import Any

from pydantic import BaseModel

# A result whose text contains this marker is treated as a soft failure.
ERROR_MARKER = "Error"


class RawToolOutput(BaseModel, frozen=True):
    """What a provider hands back from one call, before flattening."""

    content: Any
    is_error: bool = False


class ToolResult(BaseModel, frozen=True):
    """The outcome of one successful provider call, flattened to text.

    A call that completed but whose content signals an application-level
    error is a *soft failure*: it is explained back to the model rather than
    appended as a plain result.
    """

    tool_name: str
    text: str
    is_error: bool = False

    @property
    def is_soft_failure(self) -> bool:
        return self.is_error or ERROR_MARKER in self.text
