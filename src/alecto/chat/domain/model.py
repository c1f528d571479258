"""ChatModel Protocol — structural interface for the model oracle."""

from collections.abc import Sequence
from typing import Protocol

from alecto.chat.domain.message import AssistantMessage, Message
from alecto.tools.domain.schema import ToolSchema


class ChatModel(Protocol):
    """Given the transcript and the tool catalog, produce the next assistant message.

    Implementations raise ModelConnectionRefusedError when the model server
    cannot be reached and ModelRequestFailedError for any other failure.
    """

    @property
    def model(self) -> str: ...

    async def chat(
        self, messages: Sequence[Message], tools: Sequence[ToolSchema]
    ) -> AssistantMessage: ...
