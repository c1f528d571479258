"""Tests for the MCP stdio provider adapter."""

import pytest
from mcp.types import CallToolResult, ImageContent, TextContent, Tool

from alecto.config.domain.provider import ProviderConfig
from alecto.tools.domain.content import flatten_content
from alecto.tools.domain.schema import ToolSchema
from alecto.tools.infrastructure.errors import CommandNotFoundError, ProviderConnectionError
from alecto.tools.infrastructure.mcp_stdio import (
    McpStdioProvider,
    McpStdioProviderFactory,
    result_to_output,
    tool_to_descriptor,
)
from tests.tools.fake_observer import FakeToolObserver


def _make_provider(command: str = "alecto-missing-command-xyz") -> McpStdioProvider:
    return McpStdioProvider(
        name="test", config=ProviderConfig(command=command), observer=FakeToolObserver()
    )


class TestToolToDescriptor:
    def test_dumps_input_schema_under_wire_name(self) -> None:
        tool = Tool(
            name="search",
            description="Search the web.",
            inputSchema={
                "type": "object",
                "properties": {"query": {"type": "string"}},
                "required": ["query"],
            },
        )

        descriptor = tool_to_descriptor(tool)

        assert descriptor["name"] == "search"
        assert descriptor["inputSchema"]["required"] == ["query"]

    def test_descriptor_builds_tool_schema(self) -> None:
        tool = Tool(
            name="search",
            inputSchema={"type": "object", "properties": {"query": {"type": "string"}}},
        )

        schema = ToolSchema.from_descriptor(tool_to_descriptor(tool))

        assert schema.parameters.names == ["query"]
        assert schema.description == ""


class TestResultToOutput:
    def test_text_and_image_blocks_flatten_to_text_only(self) -> None:
        result = CallToolResult(
            content=[
                TextContent(type="text", text="first"),
                ImageContent(type="image", data="iVBOR", mimeType="image/png"),
                TextContent(type="text", text="second"),
            ]
        )

        output = result_to_output(result)

        assert output.is_error is False
        assert flatten_content(output.content) == "first\nsecond"

    def test_is_error_carried(self) -> None:
        result = CallToolResult(
            content=[TextContent(type="text", text="bad input")], isError=True
        )

        assert result_to_output(result).is_error is True


class TestMcpStdioProvider:
    async def test_unresolvable_command_raises_before_spawning(self) -> None:
        provider = _make_provider()

        with pytest.raises(CommandNotFoundError):
            await provider.connect()

    async def test_calls_before_connect_raise(self) -> None:
        provider = _make_provider()

        with pytest.raises(ProviderConnectionError):
            await provider.list_tools()
        with pytest.raises(ProviderConnectionError):
            await provider.call_tool("search", {})

    async def test_close_without_connect_is_noop(self) -> None:
        provider = _make_provider()

        await provider.close()

    def test_factory_creates_named_provider(self) -> None:
        factory = McpStdioProviderFactory(observer=FakeToolObserver())

        provider = factory.create(name="fs", config=ProviderConfig(command="npx"))

        assert isinstance(provider, McpStdioProvider)
        assert provider.name == "fs"
