"""Tests for LiteLLMChatModel infrastructure implementation."""

import errno
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from alecto.chat.domain.message import (
    AssistantMessage,
    SystemMessage,
    ToolCallRequest,
    ToolMessage,
    UserMessage,
)
from alecto.chat.infrastructure.errors import (
    ModelConnectionRefusedError,
    ModelRequestFailedError,
)
from alecto.chat.infrastructure.litellm_model import (
    LiteLLMChatModel,
    is_connection_refused,
    to_wire,
    transcript_to_wire,
)
from alecto.config.domain.model import ModelConfig, SamplingParameters
from alecto.tools.domain.schema import ToolSchema

_ACOMPLETION = "alecto.chat.infrastructure.litellm_model.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_model(**overrides: object) -> LiteLLMChatModel:
    return LiteLLMChatModel(config=ModelConfig(**overrides))  # type: ignore[arg-type]


def _make_tool_call(name: str, arguments: str, call_id: str = "call_1") -> MagicMock:
    call = MagicMock()
    call.id = call_id
    call.function.name = name
    call.function.arguments = arguments
    return call


def _make_dual_stack_refusal() -> Exception:
    """The chain left when every address of a dual-stack host refuses the connection."""
    refusals = ExceptionGroup(
        "connection attempts",
        [
            ConnectionRefusedError(errno.ECONNREFUSED, "Connect call failed ('::1', 11434)"),
            ConnectionRefusedError(errno.ECONNREFUSED, "Connect call failed ('127.0.0.1', 11434)"),
        ],
    )
    attempts = OSError("All connection attempts failed")
    attempts.__cause__ = refusals
    error = RuntimeError("litellm.APIConnectionError: All connection attempts failed")
    error.__cause__ = attempts
    return error


def _make_acompletion_response(
    content: str | None, tool_calls: list[MagicMock] | None = None
) -> MagicMock:
    """Build a mock litellm response object with the given message content."""
    message = MagicMock()
    message.content = content
    message.tool_calls = tool_calls
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequest:
    async def test_bare_model_name_routed_to_ollama_chat(self) -> None:
        model = _make_model(model="qwen3:8b")
        mock = AsyncMock(return_value=_make_acompletion_response("hi"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(messages=[UserMessage(content="hello")], tools=[])

        assert mock.call_args.kwargs["model"] == "ollama_chat/qwen3:8b"
        assert mock.call_args.kwargs["messages"] == [{"role": "user", "content": "hello"}]

    def test_prefixed_model_name_used_unchanged(self) -> None:
        assert _make_model(model="ollama/llama3.2").litellm_model == "ollama/llama3.2"

    async def test_host_sent_as_api_base(self) -> None:
        model = _make_model(host="http://gpu-box:11434")
        mock = AsyncMock(return_value=_make_acompletion_response("hi"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(messages=[UserMessage(content="hello")], tools=[])

        assert mock.call_args.kwargs["api_base"] == "http://gpu-box:11434"

    async def test_tools_omitted_when_catalog_empty(self) -> None:
        model = _make_model()
        mock = AsyncMock(return_value=_make_acompletion_response("hi"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(messages=[UserMessage(content="hello")], tools=[])

        assert "tools" not in mock.call_args.kwargs
        assert "api_base" not in mock.call_args.kwargs

    async def test_tools_rendered_as_functions(self) -> None:
        model = _make_model()
        mock = AsyncMock(return_value=_make_acompletion_response("hi"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(
                messages=[UserMessage(content="hello")], tools=[ToolSchema(name="search")]
            )

        tools = mock.call_args.kwargs["tools"]
        assert tools[0]["type"] == "function"
        assert tools[0]["function"]["name"] == "search"

    async def test_sampling_parameters_forwarded_when_set(self) -> None:
        model = _make_model(parameters=SamplingParameters(temperature=0.1, num_predict=256))
        mock = AsyncMock(return_value=_make_acompletion_response("hi"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(messages=[UserMessage(content="hello")], tools=[])

        assert mock.call_args.kwargs["temperature"] == 0.1
        assert mock.call_args.kwargs["max_tokens"] == 256
        assert "top_p" not in mock.call_args.kwargs


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


class TestResponse:
    async def test_plain_content(self) -> None:
        model = _make_model()

        with patch(_ACOMPLETION, new=AsyncMock(return_value=_make_acompletion_response("42"))):
            message = await model.chat(messages=[UserMessage(content="q")], tools=[])

        assert message == AssistantMessage(content="42")

    async def test_tool_calls_parsed(self) -> None:
        model = _make_model()
        response = _make_acompletion_response(
            None, tool_calls=[_make_tool_call("search", json.dumps({"query": "cats"}))]
        )

        with patch(_ACOMPLETION, new=AsyncMock(return_value=response)):
            message = await model.chat(messages=[UserMessage(content="q")], tools=[])

        assert message.content == ""
        assert message.tool_calls == (
            ToolCallRequest(name="search", arguments='{"query": "cats"}', id="call_1"),
        )

    async def test_malformed_tool_call_raises_request_failed(self) -> None:
        model = _make_model()
        call = _make_tool_call("search", "{}")
        call.function.name = None
        response = _make_acompletion_response(None, tool_calls=[call])

        with patch(_ACOMPLETION, new=AsyncMock(return_value=response)):
            with pytest.raises(ModelRequestFailedError, match="malformed tool call"):
                await model.chat(messages=[UserMessage(content="q")], tools=[])

    async def test_empty_choices_raise_request_failed(self) -> None:
        model = _make_model()
        response = MagicMock()
        response.choices = []

        with patch(_ACOMPLETION, new=AsyncMock(return_value=response)):
            with pytest.raises(ModelRequestFailedError):
                await model.chat(messages=[UserMessage(content="q")], tools=[])


# ---------------------------------------------------------------------------
# Error wrapping
# ---------------------------------------------------------------------------


class TestErrors:
    async def test_refused_connection_classified(self) -> None:
        model = _make_model()
        error = RuntimeError("APIConnectionError")
        error.__cause__ = ConnectionRefusedError(111, "Connection refused")

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=error)):
            with pytest.raises(ModelConnectionRefusedError):
                await model.chat(messages=[UserMessage(content="q")], tools=[])

    async def test_other_failure_classified(self) -> None:
        model = _make_model()

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=RuntimeError("model not found"))):
            with pytest.raises(ModelRequestFailedError) as exc_info:
                await model.chat(messages=[UserMessage(content="q")], tools=[])

        assert exc_info.value.reason == "model not found"

    async def test_refusal_from_every_address_of_dual_stack_host_classified(self) -> None:
        model = _make_model(host="http://localhost:11434")

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=_make_dual_stack_refusal())):
            with pytest.raises(ModelConnectionRefusedError):
                await model.chat(messages=[UserMessage(content="q")], tools=[])

    def test_refusal_inside_exception_group_detected(self) -> None:
        assert is_connection_refused(_make_dual_stack_refusal())

    def test_exception_group_without_refusal_not_refused(self) -> None:
        error = OSError("All connection attempts failed")
        error.__cause__ = ExceptionGroup("attempts", [TimeoutError("timed out")])

        assert not is_connection_refused(error)

    def test_refused_marker_in_message_detected(self) -> None:
        assert is_connection_refused(Exception("connect ECONNREFUSED 127.0.0.1:11434"))

    def test_unrelated_error_not_refused(self) -> None:
        assert not is_connection_refused(ValueError("bad json"))


# ---------------------------------------------------------------------------
# Wire rendering
# ---------------------------------------------------------------------------


class TestToWire:
    def test_system_message(self) -> None:
        assert to_wire(SystemMessage(content="sys")) == {"role": "system", "content": "sys"}

    def test_tool_message_carries_name_as_correlation(self) -> None:
        assert to_wire(ToolMessage(content="42", tool_call_id="calc")) == {
            "role": "tool",
            "content": "42",
            "tool_call_id": "calc",
            "name": "calc",
        }

    def test_assistant_tool_calls_get_ids_and_json_arguments(self) -> None:
        wire = to_wire(
            AssistantMessage(tool_calls=(ToolCallRequest(name="search", arguments={"q": 1}),))
        )

        assert wire["tool_calls"] == [
            {
                "id": "call_0_search",
                "type": "function",
                "function": {"name": "search", "arguments": '{"q": 1}'},
            }
        ]

    def test_assistant_without_tool_calls_has_no_key(self) -> None:
        assert "tool_calls" not in to_wire(AssistantMessage(content="hi"))


class TestTranscriptToWire:
    """Tool messages carry the wire id of the call they answer."""

    def test_tool_messages_take_ids_of_preceding_calls(self) -> None:
        wire = transcript_to_wire(
            [
                UserMessage(content="go"),
                AssistantMessage(
                    tool_calls=(
                        ToolCallRequest(name="search", arguments={"q": 1}, id="call_abc"),
                        ToolCallRequest(name="lookup", arguments={"q": 2}),
                    )
                ),
                ToolMessage(content="found", tool_call_id="search"),
                ToolMessage(content="looked up", tool_call_id="lookup"),
            ]
        )

        assert wire[2]["tool_call_id"] == "call_abc"
        assert wire[2]["name"] == "search"
        assert wire[3]["tool_call_id"] == "call_1_lookup"

    def test_repeated_tool_name_answers_calls_in_order(self) -> None:
        wire = transcript_to_wire(
            [
                AssistantMessage(
                    tool_calls=(
                        ToolCallRequest(name="search", id="call_a"),
                        ToolCallRequest(name="search", id="call_b"),
                    )
                ),
                ToolMessage(content="first", tool_call_id="search"),
                ToolMessage(content="second", tool_call_id="search"),
            ]
        )

        assert [message["tool_call_id"] for message in wire[1:]] == ["call_a", "call_b"]

    def test_tool_message_without_matching_call_keeps_name(self) -> None:
        wire = transcript_to_wire([ToolMessage(content="orphan", tool_call_id="search")])

        assert wire[0]["tool_call_id"] == "search"

    async def test_chat_sends_correlated_ids(self) -> None:
        model = _make_model(model="openai/gpt-4o-mini")
        mock = AsyncMock(return_value=_make_acompletion_response("done"))

        with patch(_ACOMPLETION, new=mock):
            await model.chat(
                messages=[
                    AssistantMessage(
                        tool_calls=(ToolCallRequest(name="search", id="call_xyz"),)
                    ),
                    ToolMessage(content="found", tool_call_id="search"),
                ],
                tools=[],
            )

        sent = mock.call_args.kwargs["messages"]
        assert sent[1]["tool_call_id"] == sent[0]["tool_calls"][0]["id"] == "call_xyz"
