"""Message value objects — discriminated union on `role`."""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class ToolCallRequest(BaseModel, frozen=True):
    """A model-issued intent to invoke a tool.

    ``arguments`` is kept exactly as the model sent it: a JSON string or an
    already-decoded mapping.
    """

    name: str
    arguments: str | dict[str, Any] = Field(default_factory=dict)
    id: str | None = None

    def payload_text(self) -> str:
        """Plain JSON text of the arguments, used to spot a repeated call."""
        return json.dumps(self.arguments, default=str)

    def same_call_as(self, other: "ToolCallRequest") -> bool:
        return self.name == other.name and self.payload_text() == other.payload_text()


class SystemMessage(BaseModel, frozen=True):
    role: Literal["system"] = "system"
    content: str


class UserMessage(BaseModel, frozen=True):
    role: Literal["user"] = "user"
    content: str


class AssistantMessage(BaseModel, frozen=True):
    role: Literal["assistant"] = "assistant"
    content: str = ""
    tool_calls: tuple[ToolCallRequest, ...] = ()


class ToolMessage(BaseModel, frozen=True):
    """A tool's output, correlated with the request that produced it by tool name."""

    role: Literal["tool"] = "tool"
    content: str
    tool_call_id: str


type Message = Annotated[
    SystemMessage | UserMessage | AssistantMessage | ToolMessage,
    Field(discriminator="role"),
]
