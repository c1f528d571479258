"""LiteLLMChatModel — model oracle implementation using LiteLLM against Ollama."""

import errno
from collections.abc import Sequence
from typing import Any

import litellm
from pydantic import ValidationError

from alecto.chat.domain.message import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolCallRequest,
    ToolMessage,
    UserMessage,
)
from alecto.chat.infrastructure.errors import (
    ModelConnectionRefusedError,
    ModelRequestFailedError,
)
from alecto.config.domain.model import ModelConfig
from alecto.tools.domain.schema import ToolSchema

_DEFAULT_PROVIDER_PREFIX = "ollama_chat/"
_REFUSED_MARKERS = ("connection refused", "econnrefused", "errno 111", "errno 61")


class LiteLLMChatModel:
    """ChatModel implementation that delegates to LiteLLM.

    A bare model name (``ministral-3:14b``) is routed to Ollama's chat API;
    a name that already carries a LiteLLM provider prefix is used unchanged.
    """

    def __init__(self, config: ModelConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def litellm_model(self) -> str:
        if "/" in self._config.model:
            return self._config.model
        return f"{_DEFAULT_PROVIDER_PREFIX}{self._config.model}"

    async def chat(
        self, messages: Sequence[Message], tools: Sequence[ToolSchema]
    ) -> AssistantMessage:
        """Send the transcript and tool catalog; return the model's next message.

        Raises:
            ModelConnectionRefusedError: if the model server refused the connection.
            ModelRequestFailedError: for any other failure, including an empty reply.
        """
        kwargs: dict[str, Any] = {
            "model": self.litellm_model,
            "messages": transcript_to_wire(messages),
            **self._sampling_kwargs(),
        }
        if tools:
            kwargs["tools"] = [tool.to_function_tool() for tool in tools]
        if self._config.host:
            kwargs["api_base"] = self._config.host

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as exc:
            if is_connection_refused(exc):
                raise ModelConnectionRefusedError(reason=str(exc)) from exc
            raise ModelRequestFailedError(reason=str(exc)) from exc

        try:
            message = response.choices[0].message
        except (AttributeError, IndexError) as exc:
            raise ModelRequestFailedError(reason="response contained no message") from exc
        try:
            return from_wire(message)
        except (AttributeError, ValidationError) as exc:
            raise ModelRequestFailedError(reason=f"malformed tool call in response: {exc}") from exc

    def _sampling_kwargs(self) -> dict[str, Any]:
        params = self._config.parameters
        kwargs: dict[str, Any] = {
            "temperature": params.temperature,
            "top_p": params.top_p,
            "top_k": params.top_k,
            "max_tokens": params.num_predict,
            "stop": params.stop,
        }
        return {key: value for key, value in kwargs.items() if value is not None}


def to_wire(message: Message) -> dict[str, Any]:
    """Render a transcript message as an OpenAI-style chat message dict."""
    match message:
        case SystemMessage(content=content) | UserMessage(content=content):
            return {"role": message.role, "content": content}
        case AssistantMessage(content=content, tool_calls=tool_calls):
            wire: dict[str, Any] = {"role": "assistant", "content": content}
            if tool_calls:
                wire["tool_calls"] = [
                    _tool_call_to_wire(call, index) for index, call in enumerate(tool_calls)
                ]
            return wire
        case ToolMessage(content=content, tool_call_id=tool_call_id):
            return {
                "role": "tool",
                "content": content,
                "tool_call_id": tool_call_id,
                "name": tool_call_id,
            }


def transcript_to_wire(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Render a whole transcript, pointing each tool message at its call's wire id.

    Tool messages are correlated by tool name in the transcript; on the wire
    each one takes the id of the first unanswered call of that name in the
    preceding assistant message.
    """
    wire: list[dict[str, Any]] = []
    pending: dict[str, list[str]] = {}
    for message in messages:
        rendered = to_wire(message)
        match message:
            case AssistantMessage():
                pending = {}
                for call in rendered.get("tool_calls", []):
                    pending.setdefault(call["function"]["name"], []).append(call["id"])
            case ToolMessage(tool_call_id=name) if pending.get(name):
                rendered["tool_call_id"] = pending[name].pop(0)
        wire.append(rendered)
    return wire


def from_wire(message: Any) -> AssistantMessage:
    """Build an AssistantMessage from a LiteLLM response message."""
    calls = [
        ToolCallRequest(
            name=call.function.name,
            arguments=call.function.arguments if call.function.arguments is not None else {},
            id=getattr(call, "id", None),
        )
        for call in (getattr(message, "tool_calls", None) or [])
    ]
    return AssistantMessage(content=message.content or "", tool_calls=tuple(calls))


def is_connection_refused(exc: BaseException) -> bool:
    """True if a refused connection appears anywhere in the exception chain.

    Exception groups are searched member by member: a host that resolves to
    several addresses (``localhost`` as ``::1`` and ``127.0.0.1``) fails with
    one refused connection per address gathered in a group.
    """
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
        if any(marker in str(current).lower() for marker in _REFUSED_MARKERS):
            return True
        if isinstance(current, BaseExceptionGroup):
            stack.extend(current.exceptions)
        linked = current.__cause__ or current.__context__
        if linked is not None:
            stack.append(linked)
    return False


def _tool_call_to_wire(call: ToolCallRequest, index: int) -> dict[str, Any]:
    arguments = call.arguments if isinstance(call.arguments, str) else call.payload_text()
    return {
        "id": call.id or f"call_{index}_{call.name}",
        "type": "function",
        "function": {"name": call.name, "arguments": arguments},
    }
