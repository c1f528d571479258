"""FakeChatModel — scripted ChatModel implementation for use in tests."""

from collections.abc import Sequence

from alecto.chat.domain.message import AssistantMessage, Message
from alecto.tools.domain.schema import ToolSchema


class FakeChatModel:
    """Satisfies the ChatModel protocol.

    Each chat() call pops the next item from `responses`:
    - If the item is an Exception, it is raised.
    - If the item is an AssistantMessage, it is returned.
    Once the list is exhausted, `default` is returned for every further call.
    Every call records a snapshot of the messages it was given.
    """

    def __init__(
        self,
        responses: list[AssistantMessage | Exception] | None = None,
        default: AssistantMessage | None = None,
        model: str = "fake-model",
    ) -> None:
        self._responses: list[AssistantMessage | Exception] = (
            list(responses) if responses is not None else []
        )
        self._default = default if default is not None else AssistantMessage(content="Done.")
        self._model = model
        self.requests: list[tuple[Message, ...]] = []
        self.tools_offered: list[tuple[ToolSchema, ...]] = []

    @property
    def model(self) -> str:
        return self._model

    async def chat(
        self, messages: Sequence[Message], tools: Sequence[ToolSchema]
    ) -> AssistantMessage:
        self.requests.append(tuple(messages))
        self.tools_offered.append(tuple(tools))
        if self._responses:
            effect = self._responses.pop(0)
            if isinstance(effect, Exception):
                raise effect
            return effect
        return self._default
